"""
NeuroGate Physics Classifier - Slider Liveness Detection

Deterministic physics checks on a short slider trace to tell a human
hand from a scripted drag. Zero ML, zero learning, zero drift.

Architecture:
    Slider samples -> MovementTrace -> PhysicsClassifier -> PhysicsVerdict

Scoring:
    Confidence starts neutral (0.5) and five independent checks push it
    up or down. Each check appends a human-readable reason.

    1. Onset:        first inter-sample gap 0ms -0.30 | <50ms -0.20 | else +0.10
    2. Velocity:     max step velocity > 500 px/ms -0.25 | else +0.10
    3. Linearity:    R^2 of x vs ideal line >0.95 -0.30 | >0.7 -0.10 | else +0.20
    4. Accel noise:  sigma(|dv|) >0.05 +0.20 | >0.01 +0.10 | else -0.15
    5. Direction:    changes > 20% of samples +0.15

Decision:
    confidence clamped to [0, 1]; human when confidence > 0.4.
    Traces under MIN_SAMPLES fail closed with confidence 0.
"""

import logging
from typing import List, Tuple

import numpy as np
from numpy.typing import NDArray

from neurogate.schemas.inputs import MovementTrace
from neurogate.schemas.outputs import PhysicsVerdict

logger = logging.getLogger(__name__)


class PhysicsClassifier:
    """
    Physics-based slider liveness classifier.

    The classifier is stateless; one instance can serve every session.
    """

    MIN_SAMPLES: int = 15
    BASELINE: float = 0.5
    HUMAN_THRESHOLD: float = 0.4

    # Check 1: movement onset
    MIN_MOVEMENT_TIME_MS: float = 50.0
    WEIGHT_INSTANT_ONSET: float = -0.3
    WEIGHT_FAST_ONSET: float = -0.2
    WEIGHT_NATURAL_ONSET: float = 0.1

    # Check 2: velocity ceiling
    VELOCITY_THRESHOLD: float = 500.0  # px/ms
    WEIGHT_FAST_VELOCITY: float = -0.25
    WEIGHT_NATURAL_VELOCITY: float = 0.1

    # Check 3: linearity
    LINEARITY_THRESHOLD: float = 0.95
    LINEARITY_SOFT_THRESHOLD: float = 0.7
    WEIGHT_TOO_LINEAR: float = -0.3
    WEIGHT_SOMEWHAT_LINEAR: float = -0.1
    WEIGHT_NONLINEAR: float = 0.2

    # Check 4: acceleration noise
    ACCEL_STD_HIGH: float = 0.05
    ACCEL_STD_LOW: float = 0.01
    WEIGHT_ACCEL_NOISY: float = 0.2
    WEIGHT_ACCEL_SOME: float = 0.1
    WEIGHT_ACCEL_SMOOTH: float = -0.15

    # Check 5: direction changes
    PARALLEL_DOT: float = 0.95
    DIRECTION_CHANGE_RATIO: float = 0.2
    WEIGHT_DIRECTION_CHANGES: float = 0.15

    def classify(self, trace: MovementTrace) -> PhysicsVerdict:
        """
        Classify a slider trace as human or automated.

        Args:
            trace: Ordered slider samples for one challenge attempt.

        Returns:
            PhysicsVerdict with clamped confidence, reasons in check order,
            and the per-step velocities/accelerations that were measured.
        """
        samples = trace.samples
        n = len(samples)

        if n < self.MIN_SAMPLES:
            logger.info(f"Physics verdict: insufficient samples ({n}/{self.MIN_SAMPLES})")
            return PhysicsVerdict(
                is_human=False,
                confidence=0.0,
                reasons=(f"Insufficient movement samples: {n}/{self.MIN_SAMPLES}",),
            )

        t = np.fromiter((s.timestamp for s in samples), dtype=np.float64, count=n)
        x = np.fromiter((s.x for s in samples), dtype=np.float64, count=n)
        y = np.fromiter((s.y for s in samples), dtype=np.float64, count=n)

        reasons: List[str] = []
        confidence = self.BASELINE

        # ==================================================================
        # CHECK 1: Movement onset
        # ==================================================================
        delta, reason = self._check_onset(t[1] - t[0])
        confidence += delta
        reasons.append(reason)

        # ==================================================================
        # CHECK 2: Velocity ceiling
        # ==================================================================
        velocities = self.velocities(t, x, y)
        delta, reason = self._check_velocity(velocities)
        confidence += delta
        reasons.append(reason)

        # ==================================================================
        # CHECK 3: Linearity
        # ==================================================================
        linearity = self.linearity(x)
        if linearity > self.LINEARITY_THRESHOLD:
            confidence += self.WEIGHT_TOO_LINEAR
            reasons.append(
                f"Movement too linear ({linearity * 100:.1f}%) - constant velocity detected"
            )
        elif linearity > self.LINEARITY_SOFT_THRESHOLD:
            confidence += self.WEIGHT_SOMEWHAT_LINEAR
            reasons.append(f"Somewhat linear movement ({linearity * 100:.1f}%)")
        else:
            confidence += self.WEIGHT_NONLINEAR
            reasons.append(
                f"Natural acceleration variations ({linearity * 100:.1f}% linear)"
            )

        # ==================================================================
        # CHECK 4: Acceleration noise
        # ==================================================================
        accelerations = np.abs(np.diff(velocities))
        if accelerations.size > 0:
            delta, reason = self._check_acceleration(float(np.std(accelerations)))
            confidence += delta
            reasons.append(reason)

        # ==================================================================
        # CHECK 5: Direction changes
        # ==================================================================
        changes = self.direction_changes(x, y)
        if changes > n * self.DIRECTION_CHANGE_RATIO:
            confidence += self.WEIGHT_DIRECTION_CHANGES
            reasons.append(f"Natural direction adjustments detected ({changes} changes)")

        # ==================================================================
        # DECISION
        # ==================================================================
        confidence = max(0.0, min(1.0, confidence))
        is_human = confidence > self.HUMAN_THRESHOLD

        if is_human:
            reasons.append(f"HUMAN DETECTED (confidence: {confidence * 100:.1f}%)")
        else:
            reasons.append(f"BOT SUSPECTED (confidence: {confidence * 100:.1f}%)")

        logger.info(
            f"Physics verdict: human={is_human} confidence={confidence:.2f} "
            f"linearity={linearity:.3f} changes={changes}"
        )
        for r in reasons:
            logger.debug(f"  {r}")

        return PhysicsVerdict(
            is_human=is_human,
            confidence=confidence,
            reasons=tuple(reasons),
            velocities=tuple(float(v) for v in velocities),
            accelerations=tuple(float(a) for a in accelerations),
        )

    # =========================================================================
    # Checks
    # =========================================================================

    def _check_onset(self, gap_ms: float) -> Tuple[float, str]:
        if gap_ms == 0:
            return self.WEIGHT_INSTANT_ONSET, "Instant movement detected (0ms gap) - bot signature"
        if gap_ms < self.MIN_MOVEMENT_TIME_MS:
            return self.WEIGHT_FAST_ONSET, f"Suspiciously fast initial movement ({gap_ms:.0f}ms)"
        return self.WEIGHT_NATURAL_ONSET, f"Natural movement onset ({gap_ms:.0f}ms)"

    def _check_velocity(self, velocities: NDArray[np.float64]) -> Tuple[float, str]:
        max_velocity = float(velocities.max()) if velocities.size else 0.0
        if max_velocity > self.VELOCITY_THRESHOLD:
            return (
                self.WEIGHT_FAST_VELOCITY,
                f"Suspiciously high velocity: {max_velocity:.1f} px/ms",
            )
        avg_velocity = float(velocities.mean()) if velocities.size else 0.0
        return (
            self.WEIGHT_NATURAL_VELOCITY,
            f"Natural velocity range: {avg_velocity:.1f} px/ms avg",
        )

    def _check_acceleration(self, sigma: float) -> Tuple[float, str]:
        if sigma > self.ACCEL_STD_HIGH:
            return self.WEIGHT_ACCEL_NOISY, f"Natural acceleration noise detected (sigma={sigma:.3f})"
        if sigma > self.ACCEL_STD_LOW:
            return self.WEIGHT_ACCEL_SOME, f"Some acceleration variation (sigma={sigma:.3f})"
        return self.WEIGHT_ACCEL_SMOOTH, f"Suspiciously smooth acceleration (sigma={sigma:.3f})"

    # =========================================================================
    # Physics Utilities
    # =========================================================================

    @staticmethod
    def velocities(
        t: NDArray[np.float64],
        x: NDArray[np.float64],
        y: NDArray[np.float64],
    ) -> NDArray[np.float64]:
        """Step velocities (px/ms); steps with zero elapsed time are dropped."""
        dt = np.diff(t)
        distance = np.hypot(np.diff(x), np.diff(y))
        moving = dt != 0
        return distance[moving] / dt[moving]

    @staticmethod
    def linearity(x: NDArray[np.float64]) -> float:
        """
        R^2-style fit of x positions against the straight line from the
        first to the last sample, indexed by sample number.

        Returns 1.0 when every x is equal; otherwise clamped to [0, 1].
        """
        n = x.size
        if n < 3:
            return 0.0

        index = np.arange(n, dtype=np.float64)
        mean_index = index.mean()
        mean_x = x.mean()
        slope = (x[-1] - x[0]) / (n - 1)
        predicted = mean_x + (index - mean_index) * slope

        ss_res = float(np.sum((x - predicted) ** 2))
        ss_tot = float(np.sum((x - mean_x) ** 2))
        if ss_tot == 0:
            return 1.0
        return max(0.0, min(1.0, 1.0 - ss_res / ss_tot))

    def direction_changes(self, x: NDArray[np.float64], y: NDArray[np.float64]) -> int:
        """Interior samples where incoming and outgoing steps are not near-parallel."""
        dx = np.diff(x)
        dy = np.diff(y)
        lengths = np.hypot(dx, dy)

        incoming_len = lengths[:-1]
        outgoing_len = lengths[1:]
        valid = (incoming_len > 0) & (outgoing_len > 0)
        if not valid.any():
            return 0

        dot = dx[:-1] * dx[1:] + dy[:-1] * dy[1:]
        cosine = dot[valid] / (incoming_len[valid] * outgoing_len[valid])
        return int(np.count_nonzero(cosine < self.PARALLEL_DOT))


def classify_movement(trace: MovementTrace) -> PhysicsVerdict:
    """Module-level convenience wrapper around PhysicsClassifier().classify()."""
    return PhysicsClassifier().classify(trace)
