"""
NeuroGate Schemas

Public exports for input and output Pydantic models.
"""

# Input schemas - raw UI events
from neurogate.schemas.inputs import (
    KeyboardEvent,
    KeyEventType,
    MouseEvent,
    MouseEventType,
)

# Input schemas - telemetry and traces
from neurogate.schemas.inputs import (
    MAX_TRACE_SAMPLES,
    KeystrokeDynamics,
    MovementSample,
    MovementTrace,
    PointerSample,
    TelemetrySnapshot,
    parse_snapshot,
    parse_trace,
)

# Input schemas - HTTP payloads
from neurogate.schemas.inputs import (
    ChallengeRequest,
    FingerprintProveRequest,
    FingerprintTrainRequest,
    PhysicsChallengeRequest,
    VerifyRequest,
)

# Output schemas
from neurogate.schemas.outputs import (
    ChallengeKind,
    ChallengeResponse,
    ChallengeStatus,
    DashboardStats,
    EventListResponse,
    EventOutcome,
    FingerprintResponse,
    PhysicsChallengeResponse,
    PhysicsVerdict,
    SecurityEvent,
    TrustAssessment,
    VerifyResponse,
)

__all__ = [
    # Input - Events
    "KeyEventType",
    "MouseEventType",
    "KeyboardEvent",
    "MouseEvent",
    # Input - Telemetry
    "MAX_TRACE_SAMPLES",
    "PointerSample",
    "KeystrokeDynamics",
    "TelemetrySnapshot",
    "MovementSample",
    "MovementTrace",
    "parse_snapshot",
    "parse_trace",
    # Input - HTTP
    "VerifyRequest",
    "ChallengeRequest",
    "PhysicsChallengeRequest",
    "FingerprintTrainRequest",
    "FingerprintProveRequest",
    # Output
    "EventOutcome",
    "ChallengeKind",
    "ChallengeStatus",
    "TrustAssessment",
    "PhysicsVerdict",
    "SecurityEvent",
    "VerifyResponse",
    "ChallengeResponse",
    "PhysicsChallengeResponse",
    "EventListResponse",
    "DashboardStats",
    "FingerprintResponse",
]
