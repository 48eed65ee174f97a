"""
NeuroGate Output Schemas

Pydantic V2 models for engine results and the JSON contracts returned
to the login UI and the admin dashboard.
"""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# =============================================================================
# Enums
# =============================================================================

class EventOutcome(str, Enum):
    """Terminal outcome of a login attempt, as shown on the dashboard."""
    SUCCESS = "success"
    CHALLENGED = "challenged"
    BLOCKED = "blocked"


class ChallengeKind(str, Enum):
    """Step-up challenge chosen from the trust score band."""
    PHYSICS = "physics"
    ONE_TIME_CODE = "otp"


class ChallengeStatus(str, Enum):
    ACCEPTED = "accepted"
    REJECTED = "rejected"


# =============================================================================
# Engine Results
# =============================================================================

class TrustAssessment(_Frozen):
    """Risk Scorer output for one snapshot."""
    score: float = Field(..., ge=0.0, le=100.0, description="0 (bot) to 100 (human)")
    requires_challenge: bool = Field(..., alias="requiresChallenge")
    factors: Tuple[str, ...] = Field(
        default=(),
        description="Names of the adjustments that were applied, in evaluation order"
    )


class PhysicsVerdict(_Frozen):
    """Physics Classifier output for one movement trace."""
    is_human: bool = Field(..., alias="isHuman")
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasons: Tuple[str, ...] = Field(default=())
    velocities: Tuple[float, ...] = Field(default=())
    accelerations: Tuple[float, ...] = Field(default=())


class SecurityEvent(_Frozen):
    """
    One completed login attempt recorded in the audit log.

    Wire keys match the dashboard contract: id, timestamp, userId, ip,
    trustScore, status, time.
    """
    id: str
    occurred_at: int = Field(..., alias="timestamp", description="Unix seconds")
    user_id: str = Field(..., alias="userId")
    source_address: str = Field(..., alias="ip")
    trust_score: float = Field(..., alias="trustScore", ge=0.0, le=100.0)
    outcome: EventOutcome = Field(..., alias="status")
    display_time: str = Field(..., alias="time", description="YYYY-MM-DD HH:MM:SS")


# =============================================================================
# HTTP Responses
# =============================================================================

class VerifyResponse(_Frozen):
    """Response for POST /api/v1/verify"""
    trust_score: float = Field(..., alias="trustScore", ge=0.0, le=100.0)
    requires_challenge: bool = Field(..., alias="requiresChallenge")
    challenge_type: Optional[ChallengeKind] = Field(None, alias="challengeType")


class ChallengeResponse(_Frozen):
    """Response for POST /api/v1/challenge"""
    status: ChallengeStatus
    message: Optional[str] = None


class PhysicsChallengeResponse(_Frozen):
    """Response for POST /api/v1/challenge/physics"""
    status: ChallengeStatus
    message: Optional[str] = None
    is_human: bool = Field(False, alias="isHuman")
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    reasons: List[str] = Field(default_factory=list)
    proof: Optional[str] = None


class EventListResponse(_Frozen):
    """Response for GET /api/v1/admin/events"""
    events: List[SecurityEvent]
    count: int


class DashboardStats(_Frozen):
    """Response for GET /api/v1/admin/stats"""
    total_logins: int = Field(0, alias="totalLogins")
    average_trust_score: float = Field(0.0, alias="averageTrustScore")
    threats_blocked: int = Field(0, alias="threatsBlocked")
    success_rate: float = Field(0.0, alias="successRate")


class FingerprintResponse(_Frozen):
    """Response for the fingerprint train/prove endpoints."""
    user_id: str = Field(..., alias="userId")
    trained: bool = False
    verified: bool = False
    confidence: Optional[float] = None
    proof: Optional[str] = None
    message: Optional[str] = None
