"""
Pointer Feature Unit Tests

Tests the entropy estimator and the acceleration variance used by the
Risk Scorer, including degenerate and zero-time-delta paths.
"""

import numpy as np
import pytest

from neurogate.processors.pointer import (
    NEUTRAL_ENTROPY,
    acceleration_magnitudes,
    acceleration_variance,
    estimate_entropy,
    population_variance,
)
from neurogate.schemas.inputs import PointerSample


def path_from(points):
    return [PointerSample(x=x, y=y, timestamp_ms=t) for t, x, y in points]


def constant_velocity_path(n: int = 30):
    return path_from([(i * 10.0, i * 5.0, i * 2.0) for i in range(n)])


def noisy_path(n: int = 200, seed: int = 7):
    rng = np.random.RandomState(seed)
    xs = rng.uniform(0, 2000, size=n)
    ys = rng.uniform(0, 2000, size=n)
    return path_from([(float(i), float(xs[i]), float(ys[i])) for i in range(n)])


# =============================================================================
# Entropy Estimator
# =============================================================================

class TestEntropyEstimator:
    """Entropy is 100 - exp(-sigma/50)*100 over acceleration magnitudes."""

    @pytest.mark.parametrize("n", [0, 1, 2])
    def test_short_path_is_neutral(self, n):
        assert estimate_entropy(constant_velocity_path(n)) == NEUTRAL_ENTROPY

    def test_constant_velocity_scores_zero(self):
        """No acceleration variance at all is the robotic extreme."""
        assert estimate_entropy(constant_velocity_path()) == pytest.approx(0.0, abs=1e-9)

    def test_noisy_motion_scores_high(self):
        entropy = estimate_entropy(noisy_path())
        assert 90.0 < entropy <= 100.0

        print(f"\n✅ Noisy path entropy: {entropy:.2f}")

    def test_duplicate_timestamps_are_floored(self):
        """dt = 0 is floored to 1ms rather than dividing by zero."""
        path = path_from([(0, 0, 0), (0, 10, 0), (0, 30, 0), (5, 35, 0)])
        magnitudes = acceleration_magnitudes(path)

        assert np.all(np.isfinite(magnitudes))
        assert magnitudes[0] == pytest.approx(10.0)
        assert 0.0 <= estimate_entropy(path) <= 100.0

    def test_more_variation_means_more_entropy(self):
        calm = path_from([(i * 10.0, i * 5.0 + (i % 2), 0.0) for i in range(50)])
        assert estimate_entropy(noisy_path()) > estimate_entropy(calm)


# =============================================================================
# Acceleration Variance
# =============================================================================

class TestAccelerationVariance:
    """Raw variance of |a| in px/s units, skipping zero-dt triples."""

    def test_constant_velocity_has_zero_variance(self):
        assert acceleration_variance(constant_velocity_path()) == pytest.approx(0.0, abs=1e-9)

    def test_short_path_returns_zero(self):
        assert acceleration_variance(constant_velocity_path(2)) == 0.0

    def test_all_zero_time_deltas_return_zero(self):
        path = path_from([(5.0, float(i), 0.0) for i in range(12)])
        assert acceleration_variance(path) == 0.0

    def test_alternating_acceleration(self):
        """|dv| alternates 0 and 2000 px/s, so the variance is close to 1000^2."""
        # x steps of 10, 10, 30, 30, 10, 10, ... every 10ms
        steps = [10, 10, 30, 30] * 4
        x, points = 0.0, [(0.0, 0.0, 0.0)]
        for i, step in enumerate(steps, start=1):
            x += step
            points.append((i * 10.0, x, 0.0))
        variance = acceleration_variance(path_from(points))

        # velocities 1000,1000,3000,3000,... -> |dv| 0,2000,0,2000,...
        assert variance == pytest.approx(1000.0 ** 2, rel=0.05)


class TestPopulationVariance:

    def test_fewer_than_two_values(self):
        assert population_variance([]) == 0.0
        assert population_variance([42.0]) == 0.0

    def test_population_not_sample_variance(self):
        assert population_variance([2.0, 4.0]) == pytest.approx(1.0)
