"""
NeuroGate Models

Deterministic trust scoring and physics-based liveness detection.
"""

from neurogate.models.physics import PhysicsClassifier, classify_movement
from neurogate.models.risk import RiskScorer, score_telemetry

__all__ = [
    "RiskScorer",
    "score_telemetry",
    "PhysicsClassifier",
    "classify_movement",
]
