"""
NeuroGate Test Suite - Shared Pytest Fixtures

This conftest.py provides fixtures for all test categories including:
- Telemetry snapshot and movement trace factories
- Canonical trusted / robotic login snapshots
- Straight-line (bot) and jittery (human) slider traces
- A dict-backed MagicMock standing in for Redis

Usage:
    pytest tests/ -v -s
"""

import pytest
from typing import Dict, List, Optional, Sequence
from unittest.mock import MagicMock

from neurogate.schemas.inputs import (
    KeystrokeDynamics,
    MovementSample,
    MovementTrace,
    PointerSample,
    TelemetrySnapshot,
)


# =============================================================================
# Builders
# =============================================================================

def build_snapshot(
    entropy: float = 55.0,
    flights: Sequence[float] = (),
    dwells: Sequence[float] = (),
    keys: Optional[Sequence[str]] = None,
    duration_ms: float = 8000.0,
    path: Sequence[PointerSample] = (),
) -> TelemetrySnapshot:
    if keys is None:
        keys = tuple("k" for _ in flights)
    return TelemetrySnapshot(
        keystroke_dynamics=KeystrokeDynamics(
            flight_times=tuple(flights),
            dwell_times=tuple(dwells),
            keys=tuple(keys),
        ),
        pointer_path=tuple(path),
        entropy_score=entropy,
        session_duration_ms=duration_ms,
        captured_at=1_700_000_000_000.0,
    )


def build_trace(points: Sequence[tuple]) -> MovementTrace:
    """points: (timestamp_ms, x, y) tuples."""
    return MovementTrace(samples=tuple(MovementSample(timestamp=t, x=x, y=y) for t, x, y in points))


def erratic_pointer_path(count: int = 150) -> List[PointerSample]:
    """Pointer path with large, uneven acceleration swings (10ms apart)."""
    return [
        PointerSample(x=float((37 * i) % 50), y=0.0, timestamp_ms=float(i * 10))
        for i in range(count)
    ]


def straight_line_points(count: int = 20) -> List[tuple]:
    """Constant velocity along x: 10px every 60ms."""
    return [(i * 60.0, i * 10.0, 0.0) for i in range(count)]


JITTER_GAPS = [60, 10, 25, 14, 40, 9, 33, 18, 12, 27, 45, 11, 20, 16, 38, 13, 22, 30, 17]


def jittery_points() -> List[tuple]:
    """20 samples zig-zagging in x with irregular timing."""
    points = []
    t = 0.0
    for i in range(20):
        x = 40.0 if i % 2 else 0.0
        if i == 19:
            x = 0.0
        points.append((t, x, i * 3.0))
        if i < len(JITTER_GAPS):
            t += JITTER_GAPS[i]
    return points


# =============================================================================
# Snapshot Fixtures
# =============================================================================

@pytest.fixture
def make_snapshot():
    """Factory fixture for TelemetrySnapshot."""
    return build_snapshot


@pytest.fixture
def make_trace():
    """Factory fixture for MovementTrace from (t, x, y) tuples."""
    return build_trace


@pytest.fixture
def trusted_snapshot() -> TelemetrySnapshot:
    """High entropy, varied typing, 8.5s session, 150 pointer samples."""
    return build_snapshot(
        entropy=85.0,
        flights=[80, 250, 120, 400, 60, 310],
        dwells=[95, 140, 88, 170, 105, 122],
        keys=list("letmein"),
        duration_ms=8500.0,
        path=erratic_pointer_path(150),
    )


@pytest.fixture
def robotic_snapshot() -> TelemetrySnapshot:
    """Low entropy, metronome typing, 1.2s session, no pointer movement."""
    return build_snapshot(
        entropy=15.0,
        flights=[100, 100, 100, 100, 100],
        dwells=[80, 80, 80, 80, 80],
        keys=list("abcde"),
        duration_ms=1200.0,
    )


@pytest.fixture
def otp_band_snapshot() -> TelemetrySnapshot:
    """Scores 55: moderate entropy, no strong signals either way."""
    return build_snapshot(
        entropy=55.0,
        flights=[100, 140, 120, 130],
        dwells=[95, 140, 88, 170],
        keys=list("pass"),
        duration_ms=6000.0,
        path=[PointerSample(x=float(i), y=0.0, timestamp_ms=float(i * 16)) for i in range(8)],
    )


# =============================================================================
# Trace Fixtures
# =============================================================================

@pytest.fixture
def straight_trace() -> MovementTrace:
    return build_trace(straight_line_points())


@pytest.fixture
def jittery_trace() -> MovementTrace:
    return build_trace(jittery_points())


# =============================================================================
# Redis Fixtures
# =============================================================================

@pytest.fixture
def fake_redis():
    """
    MagicMock Redis client backed by a plain dict.

    Supports get / set / delete, enough for the fingerprint store.
    The backing dict is exposed as `fake_redis.data`.
    """
    data: Dict[str, str] = {}
    client = MagicMock()
    client.data = data

    client.get.side_effect = lambda key: data.get(key)

    def _set(key, value):
        data[key] = value
        return True

    def _delete(*keys):
        removed = 0
        for key in keys:
            if data.pop(key, None) is not None:
                removed += 1
        return removed

    client.set.side_effect = _set
    client.delete.side_effect = _delete
    return client


# =============================================================================
# Clock
# =============================================================================

class FakeClock:
    """Manually advanced unix-seconds clock."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
