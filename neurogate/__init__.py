"""
NeuroGate

Behavioral risk scoring and physics-based liveness verification for
login flows.

The session state machine and orchestrator live in neurogate.state_machine
and neurogate.orchestrator; they depend on the persistence layer.
"""

from neurogate.errors import FingerprintsDisabledError, InvalidInputError
from neurogate.models import PhysicsClassifier, RiskScorer, classify_movement, score_telemetry
from neurogate.proofs import ProofSigner

__all__ = [
    "InvalidInputError",
    "FingerprintsDisabledError",
    "RiskScorer",
    "score_telemetry",
    "PhysicsClassifier",
    "classify_movement",
    "ProofSigner",
]
