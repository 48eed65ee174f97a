"""
NeuroGate Session State Machine

Sequences one login attempt:

    LOGIN --credentials--> SUCCESS                 (trusted)
    LOGIN --credentials--> CHALLENGE               (score < 70)
    CHALLENGE --verdict--> SUCCESS | ERROR
    SUCCESS | ERROR --reset--> LOGIN

States are immutable values; advance() returns a new state and never
mutates its input. Every transition into SUCCESS or ERROR records
exactly one SecurityEvent, carrying the trust score from LOGIN.

Outcome mapping:
    LOGIN -> SUCCESS                 success
    CHALLENGE -> SUCCESS             challenged
    CHALLENGE -> ERROR               blocked
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Optional, Union

from neurogate.challenge import select_challenge
from neurogate.errors import InvalidInputError
from neurogate.models.physics import PhysicsClassifier
from neurogate.models.risk import RiskScorer
from neurogate.schemas.inputs import MovementTrace, TelemetrySnapshot, parse_snapshot
from neurogate.schemas.outputs import (
    ChallengeKind,
    EventOutcome,
    PhysicsVerdict,
    SecurityEvent,
    TrustAssessment,
)
from persistence.audit_log import AuditLog, build_event

logger = logging.getLogger(__name__)


class SessionStep(str, Enum):
    LOGIN = "LOGIN"
    CHALLENGE = "CHALLENGE"
    SUCCESS = "SUCCESS"
    ERROR = "ERROR"


TERMINAL_STEPS = frozenset({SessionStep.SUCCESS, SessionStep.ERROR})


@dataclass(frozen=True)
class SessionState:
    """Snapshot of one login attempt."""
    step: SessionStep = SessionStep.LOGIN
    user_id: str = ""
    source_address: str = "unknown"
    assessment: Optional[TrustAssessment] = None
    challenge_kind: Optional[ChallengeKind] = None
    verdict: Optional[PhysicsVerdict] = None
    error: Optional[str] = None
    audit_event: Optional[SecurityEvent] = None

    @property
    def is_terminal(self) -> bool:
        return self.step in TERMINAL_STEPS


# =============================================================================
# Events
# =============================================================================

@dataclass(frozen=True)
class CredentialsSubmitted:
    user_id: str
    telemetry: TelemetrySnapshot
    source_address: str = "unknown"


@dataclass(frozen=True)
class PhysicsChallengeSubmitted:
    trace: MovementTrace


@dataclass(frozen=True)
class OneTimeCodeSubmitted:
    """Result of the one-time-code check performed by the client."""
    success: bool


@dataclass(frozen=True)
class Reset:
    pass


SessionEvent = Union[CredentialsSubmitted, PhysicsChallengeSubmitted, OneTimeCodeSubmitted, Reset]


# =============================================================================
# State Machine
# =============================================================================

class SessionStateMachine:
    """
    Pure transition function plus the audit side effect.

    Usage:
        machine = SessionStateMachine(audit_log=AuditLog())
        state = machine.advance(SessionState(), CredentialsSubmitted("alice", snapshot))
        if state.step is SessionStep.CHALLENGE:
            state = machine.advance(state, OneTimeCodeSubmitted(success=True))
    """

    def __init__(
        self,
        scorer: Optional[RiskScorer] = None,
        classifier: Optional[PhysicsClassifier] = None,
        audit_log: Optional[AuditLog] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.scorer = scorer or RiskScorer()
        self.classifier = classifier or PhysicsClassifier()
        self.audit_log = audit_log if audit_log is not None else AuditLog()
        self.clock = clock

    def advance(self, state: SessionState, event: SessionEvent) -> SessionState:
        """
        Apply one event.

        Raises:
            InvalidInputError: the event is not accepted in the current step,
                or its payload is malformed. The input state is unchanged.
        """
        if isinstance(event, Reset):
            return SessionState(user_id=state.user_id, source_address=state.source_address)

        if state.step is SessionStep.LOGIN and isinstance(event, CredentialsSubmitted):
            return self._login(event)

        if state.step is SessionStep.CHALLENGE:
            if isinstance(event, PhysicsChallengeSubmitted):
                return self._physics(state, event)
            if isinstance(event, OneTimeCodeSubmitted):
                return self._one_time_code(state, event)

        raise InvalidInputError(
            f"{type(event).__name__} is not accepted in step {state.step.value}"
        )

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def _login(self, event: CredentialsSubmitted) -> SessionState:
        if not event.user_id:
            raise InvalidInputError("userId is required")

        assessment = self.scorer.score(parse_snapshot(event.telemetry))
        state = SessionState(
            step=SessionStep.LOGIN,
            user_id=event.user_id,
            source_address=event.source_address,
            assessment=assessment,
        )

        if not assessment.requires_challenge:
            return self._finish(state, SessionStep.SUCCESS, EventOutcome.SUCCESS)

        kind = select_challenge(assessment.score)
        logger.info(
            f"Challenge required for {event.user_id}: {kind.value} "
            f"(score={assessment.score:.2f})"
        )
        return replace(state, step=SessionStep.CHALLENGE, challenge_kind=kind)

    def _physics(self, state: SessionState, event: PhysicsChallengeSubmitted) -> SessionState:
        self._expect(state, ChallengeKind.PHYSICS)
        verdict = self.classifier.classify(event.trace)
        state = replace(state, verdict=verdict)

        if verdict.is_human:
            return self._finish(state, SessionStep.SUCCESS, EventOutcome.CHALLENGED)
        return self._finish(
            state, SessionStep.ERROR, EventOutcome.BLOCKED,
            error=verdict.reasons[-1] if verdict.reasons else "Physics challenge failed",
        )

    def _one_time_code(self, state: SessionState, event: OneTimeCodeSubmitted) -> SessionState:
        self._expect(state, ChallengeKind.ONE_TIME_CODE)
        if event.success:
            return self._finish(state, SessionStep.SUCCESS, EventOutcome.CHALLENGED)
        return self._finish(
            state, SessionStep.ERROR, EventOutcome.BLOCKED, error="Invalid one-time code"
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _expect(state: SessionState, kind: ChallengeKind) -> None:
        if state.challenge_kind is not kind:
            expected = state.challenge_kind.value if state.challenge_kind else "none"
            raise InvalidInputError(
                f"Wrong challenge type: expected {expected}, got {kind.value}"
            )

    def _finish(
        self,
        state: SessionState,
        step: SessionStep,
        outcome: EventOutcome,
        error: Optional[str] = None,
    ) -> SessionState:
        event = build_event(
            user_id=state.user_id,
            source_address=state.source_address,
            trust_score=state.assessment.score if state.assessment else 0.0,
            outcome=outcome,
            now=self.clock(),
        )
        self.audit_log.record(event)
        return replace(state, step=step, error=error, audit_event=event)
