"""
Physics Classifier Unit Tests

Tests the five slider checks, the fail-closed short-trace path, and the
canonical straight-line bot and jittery human traces.
"""

import numpy as np
import pytest

from neurogate.models.physics import PhysicsClassifier, classify_movement


@pytest.fixture
def classifier():
    return PhysicsClassifier()


def points_of(trace):
    return [(s.timestamp, s.x, s.y) for s in trace.samples]


# =============================================================================
# Canonical Traces
# =============================================================================

class TestCanonicalTraces:
    """Straight constant-velocity drag vs. jittery human drag."""

    def test_straight_line_is_bot(self, classifier, straight_trace):
        """
        onset +0.1, velocity +0.1, linearity -0.3, smooth accel -0.15,
        no direction changes: 0.25.
        """
        verdict = classifier.classify(straight_trace)

        assert verdict.is_human is False
        assert verdict.confidence == pytest.approx(0.25)
        assert any("too linear" in r for r in verdict.reasons)
        assert any("Suspiciously smooth" in r for r in verdict.reasons)
        assert verdict.reasons[-1].startswith("BOT SUSPECTED")

        print(f"\n✅ Straight trace: confidence={verdict.confidence:.2f}")

    def test_jittery_trace_is_human(self, classifier, jittery_trace):
        """All five checks favour a human; confidence clamps to 1."""
        verdict = classifier.classify(jittery_trace)

        assert verdict.is_human is True
        assert verdict.confidence == 1.0
        assert any("direction adjustments" in r for r in verdict.reasons)
        assert verdict.reasons[-1].startswith("HUMAN DETECTED")

        accel_sigma = float(np.std(verdict.accelerations))
        assert accel_sigma > PhysicsClassifier.ACCEL_STD_HIGH

    def test_verdict_exposes_kinematics(self, classifier, straight_trace):
        verdict = classifier.classify(straight_trace)

        assert len(verdict.velocities) == 19
        assert len(verdict.accelerations) == 18
        assert verdict.velocities[0] == pytest.approx(10 / 60)

    def test_module_wrapper(self, jittery_trace):
        assert classify_movement(jittery_trace) == PhysicsClassifier().classify(jittery_trace)


# =============================================================================
# Fail Closed
# =============================================================================

class TestInsufficientSamples:
    """Under-sampled traces are never scored."""

    @pytest.mark.parametrize("n", [0, 1, 2, 14])
    def test_short_trace_fails_closed(self, classifier, make_trace, jittery_trace, n):
        verdict = classifier.classify(make_trace(points_of(jittery_trace)[:n]))

        assert verdict.is_human is False
        assert verdict.confidence == 0.0
        assert len(verdict.reasons) == 1
        assert "Insufficient" in verdict.reasons[0]

    def test_fifteen_samples_are_scored(self, classifier, make_trace, jittery_trace):
        verdict = classifier.classify(make_trace(points_of(jittery_trace)[:15]))
        assert len(verdict.reasons) > 1


# =============================================================================
# Individual Checks
# =============================================================================

class TestChecks:
    """Each check moves confidence by its documented weight."""

    def test_zero_ms_onset_is_bot_signature(self, classifier, make_trace, jittery_trace):
        points = points_of(jittery_trace)
        points[1] = (points[0][0], points[1][1], points[1][2])

        verdict = classifier.classify(make_trace(points))

        assert "0ms gap" in verdict.reasons[0]
        # 1.25 - 0.4 for the onset swing, still clamped to the human side
        assert verdict.confidence == pytest.approx(0.85)

    def test_fast_onset(self, classifier, make_trace, straight_trace):
        points = points_of(straight_trace)
        points[0] = (points[1][0] - 20.0, points[0][1], points[0][2])

        verdict = classifier.classify(make_trace(points))
        assert "Suspiciously fast initial movement" in verdict.reasons[0]

    def test_teleporting_slider_trips_velocity_check(self, classifier, make_trace, jittery_trace):
        points = points_of(jittery_trace)
        t, _, y = points[5]
        points[5] = (t, 50000.0, y)

        verdict = classifier.classify(make_trace(points))
        assert any("high velocity" in r for r in verdict.reasons)
        assert max(verdict.velocities) > PhysicsClassifier.VELOCITY_THRESHOLD

    def test_zero_time_steps_are_dropped_from_velocities(self):
        t = np.array([0.0, 10.0, 10.0, 20.0])
        x = np.array([0.0, 5.0, 8.0, 10.0])
        y = np.zeros(4)

        velocities = PhysicsClassifier.velocities(t, x, y)
        assert velocities.tolist() == pytest.approx([0.5, 0.2])

    def test_flat_x_is_fully_linear(self):
        assert PhysicsClassifier.linearity(np.full(20, 7.0)) == 1.0

    def test_zigzag_is_not_linear(self):
        x = np.array([0.0, 40.0] * 10)
        x[-1] = 0.0
        assert PhysicsClassifier.linearity(x) == 0.0

    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    def test_confidence_always_in_range(self, classifier, make_trace, seed):
        rng = np.random.RandomState(seed)
        t = np.cumsum(rng.randint(0, 40, size=40)).astype(float)
        points = list(zip(t, rng.uniform(-500, 500, 40), rng.uniform(-500, 500, 40)))

        verdict = classifier.classify(make_trace(points))
        assert 0.0 <= verdict.confidence <= 1.0
        assert verdict.is_human == (verdict.confidence > PhysicsClassifier.HUMAN_THRESHOLD)
