"""
Pointer Physics Features

Stateless feature math over a login-page pointer path.

Both features look at every consecutive triple of samples:
    v1 = (p2 - p1) / dt1,  v2 = (p3 - p2) / dt2,  |a| = |v2 - v1|

- estimate_entropy: naturalness score 0-100 from the std of |a| (ms units,
  dt floored to 1 ms). Near-zero variance means scripted motion.
- acceleration_variance: raw variance of |a| in px/s units, skipping
  triples with a zero time delta.
"""

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from neurogate.schemas.inputs import PointerSample


# =============================================================================
# Constants
# =============================================================================

# Returned when the path is too short to form a single triple
NEUTRAL_ENTROPY = 50.0

# Std (px/ms^2) at which linearity has decayed to 1/e
ENTROPY_DECAY_SCALE = 50.0

# Minimum dt (ms) used by the entropy estimator
MIN_TIME_DELTA_MS = 1.0


def _columns(path: Sequence[PointerSample]) -> tuple:
    t = np.fromiter((p.timestamp_ms for p in path), dtype=np.float64, count=len(path))
    x = np.fromiter((p.x for p in path), dtype=np.float64, count=len(path))
    y = np.fromiter((p.y for p in path), dtype=np.float64, count=len(path))
    return t, x, y


def acceleration_magnitudes(path: Sequence[PointerSample]) -> NDArray[np.float64]:
    """
    Acceleration magnitudes (px/ms per step) for every consecutive triple.

    Time deltas are floored to MIN_TIME_DELTA_MS so duplicate timestamps
    never divide by zero.
    """
    if len(path) < 3:
        return np.empty(0, dtype=np.float64)

    t, x, y = _columns(path)
    dt = np.maximum(np.diff(t), MIN_TIME_DELTA_MS)
    vx = np.diff(x) / dt
    vy = np.diff(y) / dt
    return np.hypot(np.diff(vx), np.diff(vy))


def estimate_entropy(path: Sequence[PointerSample]) -> float:
    """
    Map pointer acceleration variability to a 0-100 naturalness score.

    linearity = exp(-sigma / 50) * 100, entropy = 100 - linearity.
    Returns NEUTRAL_ENTROPY when there is no triple to measure.
    """
    magnitudes = acceleration_magnitudes(path)
    if magnitudes.size == 0:
        return NEUTRAL_ENTROPY

    sigma = float(np.std(magnitudes))
    linearity = math.exp(-sigma / ENTROPY_DECAY_SCALE) * 100.0
    return max(0.0, min(100.0, 100.0 - linearity))


def acceleration_variance(path: Sequence[PointerSample]) -> float:
    """
    Population variance of acceleration magnitudes in px/s units.

    Triples where either time delta is zero are skipped. Returns 0.0 when
    fewer than two magnitudes remain.
    """
    if len(path) < 3:
        return 0.0

    t, x, y = _columns(path)
    dt = np.diff(t) / 1000.0
    valid = (dt[:-1] != 0) & (dt[1:] != 0)
    if np.count_nonzero(valid) < 2:
        return 0.0

    with np.errstate(divide="ignore", invalid="ignore"):
        vx = np.diff(x) / dt
        vy = np.diff(y) / dt
        ax = np.diff(vx)[valid]
        ay = np.diff(vy)[valid]
    return float(np.var(np.hypot(ax, ay)))


def population_variance(values: Sequence[float]) -> float:
    """Population variance; 0.0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    return float(np.var(np.asarray(values, dtype=np.float64)))
