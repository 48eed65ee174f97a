"""
NeuroGate Risk Scorer

Weighted heuristic that turns login telemetry into a 0-100 trust score.
This module is STATELESS and DETERMINISTIC.

No ML. No external calls. Just additive rules on a baseline of 50.
"""

import logging
from typing import List, Tuple

from neurogate.processors.pointer import acceleration_variance, population_variance
from neurogate.schemas.inputs import TelemetrySnapshot
from neurogate.schemas.outputs import TrustAssessment

logger = logging.getLogger(__name__)


class RiskScorer:
    """
    Stateless trust scoring for one TelemetrySnapshot.

    Factors (all independent, summed onto BASELINE):
        Entropy:            <40 -> -35 | 40-70 -> +5 | >70 -> +25
        Flight variance:    <100 -> -30 | >1000 -> +15   (>= 3 samples)
        Dwell variance:     <50 -> -15                  (>= 3 samples)
        Session duration:   <2s -> -20 | >5min -> -10
        Pointer accel var:  <1.0 -> -25 | >50 -> +10     (> 10 samples)
        Keystroke count:    <3 -> -15
        Pointer samples:    <5 -> -10 | >100 -> +5

    Decision:
        score is clamped to [0, 100]
        requires_challenge = score < CHALLENGE_THRESHOLD
    """

    BASELINE: float = 50.0
    CHALLENGE_THRESHOLD: float = 70.0

    # Entropy bands
    ENTROPY_LOW: float = 40.0
    ENTROPY_HIGH: float = 70.0
    WEIGHT_ENTROPY_LOW: float = -35.0
    WEIGHT_ENTROPY_MID: float = 5.0
    WEIGHT_ENTROPY_HIGH: float = 25.0

    # Keystroke timing
    MIN_TIMING_SAMPLES: int = 3
    FLIGHT_VARIANCE_LOW: float = 100.0
    FLIGHT_VARIANCE_HIGH: float = 1000.0
    WEIGHT_FLIGHT_LOW: float = -30.0
    WEIGHT_FLIGHT_HIGH: float = 15.0
    DWELL_VARIANCE_LOW: float = 50.0
    WEIGHT_DWELL_LOW: float = -15.0

    # Session duration (ms)
    SESSION_TOO_SHORT_MS: float = 2000.0
    SESSION_TOO_LONG_MS: float = 300000.0
    WEIGHT_SESSION_SHORT: float = -20.0
    WEIGHT_SESSION_LONG: float = -10.0

    # Pointer acceleration variance
    MIN_ACCEL_SAMPLES: int = 10
    ACCEL_VARIANCE_LOW: float = 1.0
    ACCEL_VARIANCE_HIGH: float = 50.0
    WEIGHT_ACCEL_LOW: float = -25.0
    WEIGHT_ACCEL_HIGH: float = 10.0

    # Interaction volume
    MIN_KEYSTROKES: int = 3
    WEIGHT_FEW_KEYSTROKES: float = -15.0
    FEW_POINTER_SAMPLES: int = 5
    MANY_POINTER_SAMPLES: int = 100
    WEIGHT_FEW_POINTER: float = -10.0
    WEIGHT_MANY_POINTER: float = 5.0

    def score(self, snapshot: TelemetrySnapshot) -> TrustAssessment:
        """
        Score a snapshot.

        Args:
            snapshot: Validated telemetry for one login attempt.

        Returns:
            TrustAssessment with clamped score, challenge flag and the
            names of the factors that fired.
        """
        adjustments = self.adjustments(snapshot)
        raw = self.BASELINE + sum(delta for _, delta in adjustments)
        score = max(0.0, min(100.0, raw))
        requires_challenge = score < self.CHALLENGE_THRESHOLD

        logger.info(
            f"Trust score {score:.2f}/100 (raw={raw:.2f}), "
            f"challenge required: {requires_challenge}"
        )
        return TrustAssessment(
            score=score,
            requires_challenge=requires_challenge,
            factors=tuple(name for name, _ in adjustments),
        )

    def adjustments(self, snapshot: TelemetrySnapshot) -> List[Tuple[str, float]]:
        """Return (factor_name, delta) for every rule that applies."""
        applied: List[Tuple[str, float]] = []

        def apply(name: str, delta: float, detail: str) -> None:
            applied.append((name, delta))
            logger.debug(f"{name} ({detail}): {delta:+.0f}")

        # Entropy
        entropy = snapshot.entropy_score
        if entropy < self.ENTROPY_LOW:
            apply("low_entropy", self.WEIGHT_ENTROPY_LOW, f"entropy={entropy:.2f}")
        elif entropy > self.ENTROPY_HIGH:
            apply("high_entropy", self.WEIGHT_ENTROPY_HIGH, f"entropy={entropy:.2f}")
        else:
            apply("moderate_entropy", self.WEIGHT_ENTROPY_MID, f"entropy={entropy:.2f}")

        # Keystroke timing
        dynamics = snapshot.keystroke_dynamics
        if len(dynamics.flight_times) >= self.MIN_TIMING_SAMPLES:
            flight_var = population_variance(dynamics.flight_times)
            if flight_var < self.FLIGHT_VARIANCE_LOW:
                apply("uniform_flight_times", self.WEIGHT_FLIGHT_LOW, f"var={flight_var:.2f}")
            elif flight_var > self.FLIGHT_VARIANCE_HIGH:
                apply("varied_flight_times", self.WEIGHT_FLIGHT_HIGH, f"var={flight_var:.2f}")

        if len(dynamics.dwell_times) >= self.MIN_TIMING_SAMPLES:
            dwell_var = population_variance(dynamics.dwell_times)
            if dwell_var < self.DWELL_VARIANCE_LOW:
                apply("uniform_dwell_times", self.WEIGHT_DWELL_LOW, f"var={dwell_var:.2f}")

        # Session duration
        duration = snapshot.session_duration_ms
        if duration < self.SESSION_TOO_SHORT_MS:
            apply("short_session", self.WEIGHT_SESSION_SHORT, f"{duration:.0f}ms")
        elif duration > self.SESSION_TOO_LONG_MS:
            apply("long_session", self.WEIGHT_SESSION_LONG, f"{duration:.0f}ms")

        # Pointer acceleration variance
        path = snapshot.pointer_path
        if len(path) > self.MIN_ACCEL_SAMPLES:
            accel_var = acceleration_variance(path)
            if accel_var < self.ACCEL_VARIANCE_LOW:
                apply("linear_pointer_motion", self.WEIGHT_ACCEL_LOW, f"var={accel_var:.2f}")
            elif accel_var > self.ACCEL_VARIANCE_HIGH:
                apply("varied_pointer_motion", self.WEIGHT_ACCEL_HIGH, f"var={accel_var:.2f}")

        # Interaction volume
        if len(dynamics.keys) < self.MIN_KEYSTROKES:
            apply("few_keystrokes", self.WEIGHT_FEW_KEYSTROKES, f"count={len(dynamics.keys)}")

        if len(path) < self.FEW_POINTER_SAMPLES:
            apply("minimal_pointer_movement", self.WEIGHT_FEW_POINTER, f"count={len(path)}")
        elif len(path) > self.MANY_POINTER_SAMPLES:
            apply("extensive_pointer_movement", self.WEIGHT_MANY_POINTER, f"count={len(path)}")

        return applied


def score_telemetry(snapshot: TelemetrySnapshot) -> TrustAssessment:
    """Module-level convenience wrapper around RiskScorer().score()."""
    return RiskScorer().score(snapshot)
