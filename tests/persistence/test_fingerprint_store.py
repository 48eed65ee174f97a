"""
Fingerprint Store Tests

Uses a dict-backed MagicMock in place of Redis.
"""

import json

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from neurogate.fingerprint import BehavioralFingerprint
from persistence.fingerprint_store import FingerprintStore


def fingerprint(user_id: str = "alice") -> BehavioralFingerprint:
    return BehavioralFingerprint(
        user_id=user_id,
        digest="ab" * 32,
        mean_ms=120.0,
        std_ms=30.0,
        entropy_score=72.0,
        trained_at=1_700_000_000.0,
        sample_count=24,
    )


class TestFingerprintStore:
    """Versioned JSON records under FINGERPRINT:{user_id}."""

    def test_save_and_load(self, fake_redis):
        store = FingerprintStore(fake_redis)
        store.save(fingerprint())

        assert "FINGERPRINT:alice" in fake_redis.data
        record = json.loads(fake_redis.data["FINGERPRINT:alice"])
        assert record["version"] == "v1"
        assert "timings" not in record["model"]

        assert store.load("alice") == fingerprint()

    def test_missing_user(self, fake_redis):
        assert FingerprintStore(fake_redis).load("nobody") is None

    def test_version_mismatch_loads_as_absent(self, fake_redis):
        record = {"version": "v0", "model": fingerprint().to_dict()}
        fake_redis.data["FINGERPRINT:alice"] = json.dumps(record)

        assert FingerprintStore(fake_redis).load("alice") is None

    def test_corrupt_record_loads_as_absent(self, fake_redis):
        fake_redis.data["FINGERPRINT:alice"] = "{not json"
        assert FingerprintStore(fake_redis).load("alice") is None

    @pytest.mark.parametrize("record", [
        {"version": "v1"},
        {"version": "v1", "model": {"user_id": "alice", "mean_ms": 120.0}},
        {"version": "v1", "model": ["alice"]},
        ["v1"],
    ])
    def test_incomplete_record_loads_as_absent(self, fake_redis, record):
        fake_redis.data["FINGERPRINT:alice"] = json.dumps(record)
        assert FingerprintStore(fake_redis).load("alice") is None

    def test_redis_error_loads_as_absent(self, fake_redis):
        fake_redis.get.side_effect = RedisConnectionError("down")
        assert FingerprintStore(fake_redis).load("alice") is None

    def test_delete(self, fake_redis):
        store = FingerprintStore(fake_redis)
        store.save(fingerprint())

        assert store.delete("alice") is True
        assert store.delete("alice") is False
        assert store.load("alice") is None
