"""
NeuroGate Fingerprint Store

Redis persistence for behavioral fingerprints.

Key Schema:
    FINGERPRINT:{user_id} -> {"version": "v1", "model": {...}, "saved_at": ts}

Records written by another schema version are ignored on load.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Optional

from redis.exceptions import RedisError

from neurogate.fingerprint import BehavioralFingerprint
from persistence.connection import get_redis_client

logger = logging.getLogger(__name__)


class FingerprintStore:
    """
    Versioned JSON records in Redis, one per user.

    Pass a client explicitly, or use FingerprintStore.from_settings()
    to connect with the configured credentials.
    """

    SCHEMA_VERSION = "v1"

    def __init__(self, client) -> None:
        self.client = client

    @classmethod
    def from_settings(cls) -> FingerprintStore:
        return cls(get_redis_client())

    def _key(self, user_id: str) -> str:
        return f"FINGERPRINT:{user_id}"

    def save(self, fingerprint: BehavioralFingerprint) -> None:
        record = json.dumps({
            "version": self.SCHEMA_VERSION,
            "model": fingerprint.to_dict(),
            "saved_at": time.time(),
        })
        self.client.set(self._key(fingerprint.user_id), record)
        logger.debug(f"Saved fingerprint for {fingerprint.user_id}")

    def load(self, user_id: str) -> Optional[BehavioralFingerprint]:
        """Return the fingerprint, or None if absent, stale or corrupt."""
        try:
            raw = self.client.get(self._key(user_id))
        except RedisError as e:
            logger.error(f"Failed to load fingerprint {user_id}: {e}")
            return None
        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.error(f"Corrupted fingerprint record for {user_id}")
            return None
        if not isinstance(data, dict):
            logger.error(f"Corrupted fingerprint record for {user_id}")
            return None

        if data.get("version") != self.SCHEMA_VERSION:
            logger.warning(
                f"Fingerprint version mismatch for {user_id}: {data.get('version')!r}, ignoring"
            )
            return None

        try:
            return BehavioralFingerprint.from_dict(data["model"])
        except (KeyError, TypeError, AttributeError) as e:
            logger.error(f"Incomplete fingerprint record for {user_id}: {e}")
            return None

    def delete(self, user_id: str) -> bool:
        """Remove the fingerprint; True if one existed."""
        return bool(self.client.delete(self._key(user_id)))
