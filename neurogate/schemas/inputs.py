"""
NeuroGate Input Schemas

Pydantic V2 models for:
- Raw UI events consumed by the telemetry aggregator (KeyboardEvent, MouseEvent)
- Behavioral telemetry captured at login (TelemetrySnapshot)
- Interactive slider traces for the physics challenge (MovementTrace)
- HTTP request payloads (VerifyRequest, ChallengeRequest, ...)

Wire field names are camelCase and preserved for client compatibility;
Python attribute names are snake_case. Either may be used to construct a model.
"""

import math
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from neurogate.errors import InvalidInputError


# =============================================================================
# Constants
# =============================================================================

# Slider traces keep only the most recent samples (FIFO eviction)
MAX_TRACE_SAMPLES = 100


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# =============================================================================
# Enums
# =============================================================================

class KeyEventType(str, Enum):
    """Keyboard event type for dwell/flight time calculation."""
    DOWN = "DOWN"
    UP = "UP"


class MouseEventType(str, Enum):
    """Mouse event type for movement/click tracking."""
    MOVE = "MOVE"
    CLICK = "CLICK"


# =============================================================================
# Raw UI Events
# =============================================================================

class KeyboardEvent(_Frozen):
    """Single keyboard event captured by the login form."""
    key: str = Field(..., description="Key code or character pressed")
    event_type: KeyEventType = Field(..., description="DOWN or UP event")
    timestamp: float = Field(..., allow_inf_nan=False, description="Event timestamp in milliseconds")


class MouseEvent(_Frozen):
    """Single pointer event captured by the login page."""
    x: float = Field(..., allow_inf_nan=False, description="X coordinate on screen")
    y: float = Field(..., allow_inf_nan=False, description="Y coordinate on screen")
    event_type: MouseEventType = Field(..., description="MOVE or CLICK event")
    timestamp: float = Field(..., allow_inf_nan=False, description="Event timestamp in milliseconds")
    pressure: Optional[float] = Field(None, allow_inf_nan=False, description="Pen/touch pressure if reported")


# =============================================================================
# Login Telemetry
# =============================================================================

class PointerSample(_Frozen):
    """One pointer position on the login page."""
    x: float = Field(..., allow_inf_nan=False)
    y: float = Field(..., allow_inf_nan=False)
    timestamp_ms: float = Field(..., alias="time", allow_inf_nan=False)
    pressure: Optional[float] = Field(None, allow_inf_nan=False)


class KeystrokeDynamics(_Frozen):
    """
    Typing rhythm features.

    flight_times[i]: ms between release of key i-1 and press of key i
    dwell_times[i]: ms key i was held down
    """
    flight_times: Tuple[float, ...] = Field(default=(), alias="flightTimes")
    dwell_times: Tuple[float, ...] = Field(default=(), alias="dwellTimes")
    keys: Tuple[str, ...] = Field(default=())

    @field_validator("flight_times", "dwell_times")
    @classmethod
    def _finite(cls, values: Tuple[float, ...]) -> Tuple[float, ...]:
        if any(not math.isfinite(v) for v in values):
            raise ValueError("timings must be finite numbers")
        return values


class TelemetrySnapshot(_Frozen):
    """Read-only telemetry captured for exactly one login attempt."""
    keystroke_dynamics: KeystrokeDynamics = Field(..., alias="keystrokeDynamics")
    pointer_path: Tuple[PointerSample, ...] = Field(default=(), alias="mousePath")
    entropy_score: float = Field(..., alias="entropyScore", allow_inf_nan=False)
    session_duration_ms: float = Field(..., alias="sessionDuration", ge=0, allow_inf_nan=False)
    captured_at: float = Field(0.0, alias="timestamp", description="Capture time in ms since epoch")

    @field_validator("entropy_score")
    @classmethod
    def _clamp_entropy(cls, value: float) -> float:
        return max(0.0, min(100.0, value))

    @field_validator("pointer_path")
    @classmethod
    def _monotonic(cls, path: Tuple[PointerSample, ...]) -> Tuple[PointerSample, ...]:
        for prev, cur in zip(path, path[1:]):
            if cur.timestamp_ms < prev.timestamp_ms:
                raise ValueError("mousePath timestamps must be non-decreasing")
        return path


# =============================================================================
# Physics Challenge Trace
# =============================================================================

class MovementSample(_Frozen):
    """One slider position during a physics challenge."""
    timestamp: float = Field(..., allow_inf_nan=False, description="Sample time in ms")
    x: float = Field(..., allow_inf_nan=False)
    y: float = Field(..., allow_inf_nan=False)


class MovementTrace(_Frozen):
    """
    Ordered slider samples for one challenge attempt.

    Holds at most MAX_TRACE_SAMPLES; longer inputs keep their newest samples.
    """
    samples: Tuple[MovementSample, ...] = Field(default=())

    @field_validator("samples")
    @classmethod
    def _ordered_and_capped(cls, samples: Tuple[MovementSample, ...]) -> Tuple[MovementSample, ...]:
        for prev, cur in zip(samples, samples[1:]):
            if cur.timestamp < prev.timestamp:
                raise ValueError("trace timestamps must be non-decreasing")
        if len(samples) > MAX_TRACE_SAMPLES:
            samples = samples[-MAX_TRACE_SAMPLES:]
        return samples

    def __len__(self) -> int:
        return len(self.samples)


# =============================================================================
# HTTP Request Payloads
# =============================================================================

class VerifyRequest(_Frozen):
    """POST /api/v1/verify"""
    user_id: str = Field(..., alias="userId", min_length=1)
    telemetry: TelemetrySnapshot
    timestamp: float = Field(0.0, description="Client send time in ms")


class ChallengeRequest(_Frozen):
    """POST /api/v1/challenge (one-time-code result)"""
    user_id: str = Field(..., alias="userId", min_length=1)
    success: bool
    code: Optional[str] = Field(None, description="Code as typed; shape-checked when present")
    timestamp: float = 0.0


class PhysicsChallengeRequest(_Frozen):
    """POST /api/v1/challenge/physics"""
    user_id: str = Field(..., alias="userId", min_length=1)
    trace: List[MovementSample] = Field(default_factory=list)
    timestamp: float = 0.0


class FingerprintTrainRequest(_Frozen):
    """POST /api/v1/fingerprint/train"""
    user_id: str = Field(..., alias="userId", min_length=1)
    timings: List[float] = Field(..., description="Flight/dwell timings in ms")
    entropy_score: float = Field(50.0, alias="entropyScore", ge=0, le=100)


class FingerprintProveRequest(_Frozen):
    """POST /api/v1/fingerprint/prove"""
    user_id: str = Field(..., alias="userId", min_length=1)
    timings: List[float] = Field(..., description="Current session timings in ms")


# =============================================================================
# Parsing Helpers
# =============================================================================

def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    where = ".".join(str(p) for p in first.get("loc", ()))
    return f"{where}: {first.get('msg')}" if where else first.get("msg", "invalid input")


def parse_snapshot(data: Any) -> TelemetrySnapshot:
    """Validate a raw telemetry payload, raising InvalidInputError on failure."""
    if isinstance(data, TelemetrySnapshot):
        return data
    try:
        return TelemetrySnapshot.model_validate(data)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid telemetry: {_describe(e)}") from e


def parse_trace(samples: Iterable[Any]) -> MovementTrace:
    """Validate raw slider samples into a MovementTrace."""
    try:
        return MovementTrace(samples=tuple(samples))
    except ValidationError as e:
        raise InvalidInputError(f"Invalid movement trace: {_describe(e)}") from e
