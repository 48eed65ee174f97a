"""
NeuroGate Orchestrator

Binds the session state machine to the HTTP surface.

Login attempts that need step-up are parked in a per-user pending table
until the challenge result arrives or the challenge expires. A pending
session is removed from the table before it is advanced, so concurrent
submissions for the same user cannot both complete it.

Flow:
    verify()                     -> LOGIN evaluated; SUCCESS or parked CHALLENGE
    submit_challenge()           -> one-time-code result for a parked session
    submit_physics_challenge()   -> slider trace for a parked session (+ proof)
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, Optional, Sequence, Tuple

from neurogate.challenge import validate_one_time_code
from neurogate.errors import FingerprintsDisabledError, InvalidInputError
from neurogate.fingerprint import FingerprintService
from neurogate.proofs import ProofSigner
from neurogate.schemas.inputs import (
    ChallengeRequest,
    PhysicsChallengeRequest,
    VerifyRequest,
    parse_trace,
)
from neurogate.schemas.outputs import (
    ChallengeResponse,
    ChallengeStatus,
    DashboardStats,
    EventListResponse,
    PhysicsChallengeResponse,
    VerifyResponse,
)
from neurogate.state_machine import (
    CredentialsSubmitted,
    OneTimeCodeSubmitted,
    PhysicsChallengeSubmitted,
    SessionEvent,
    SessionState,
    SessionStateMachine,
    SessionStep,
)
from persistence.audit_log import AuditLog, summarize

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_CHALLENGE_TTL = 300.0

MSG_NO_CHALLENGE = "No pending challenge for this user"
MSG_EXPIRED = "Challenge expired, please log in again"
MSG_PASSED = "Challenge passed"
MSG_OTP_FAILED = "Invalid one-time code"


class GateOrchestrator:
    """
    Stateful front for the stateless engine.

    Usage:
        gate = GateOrchestrator(signer=ProofSigner(secret))
        result = gate.verify(request, source_address="10.0.0.1")
        if result.requires_challenge:
            gate.submit_challenge(ChallengeRequest(userId=..., success=True))
    """

    def __init__(
        self,
        signer: ProofSigner,
        audit_log: Optional[AuditLog] = None,
        machine: Optional[SessionStateMachine] = None,
        fingerprints: Optional[FingerprintService] = None,
        challenge_ttl_seconds: float = DEFAULT_CHALLENGE_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.signer = signer
        self.audit_log = audit_log if audit_log is not None else AuditLog()
        self.machine = machine or SessionStateMachine(audit_log=self.audit_log, clock=clock)
        self.fingerprints = fingerprints
        self.challenge_ttl_seconds = challenge_ttl_seconds
        self.clock = clock

        # user_id -> (parked CHALLENGE state, expiry in unix seconds)
        self._pending: Dict[str, Tuple[SessionState, float]] = {}
        self._lock = threading.Lock()

    # =========================================================================
    # Login
    # =========================================================================

    def verify(self, request: VerifyRequest, source_address: str = "unknown") -> VerifyResponse:
        """
        Score login telemetry and either admit the user or park a challenge.

        A new login replaces any challenge still pending for the same user.
        """
        state = self.machine.advance(
            SessionState(user_id=request.user_id, source_address=source_address),
            CredentialsSubmitted(
                user_id=request.user_id,
                telemetry=request.telemetry,
                source_address=source_address,
            ),
        )

        with self._lock:
            self._purge_expired()
            self._pending.pop(request.user_id, None)
            if state.step is SessionStep.CHALLENGE:
                self._pending[request.user_id] = (
                    state, self.clock() + self.challenge_ttl_seconds
                )

        return VerifyResponse(
            trust_score=state.assessment.score,
            requires_challenge=state.assessment.requires_challenge,
            challenge_type=state.challenge_kind,
        )

    # =========================================================================
    # Challenges
    # =========================================================================

    def submit_challenge(self, request: ChallengeRequest) -> ChallengeResponse:
        """
        Finish a parked one-time-code challenge.

        A code carried with the result is shape-checked first; a malformed
        code raises InvalidInputError and leaves the challenge pending.
        """
        if request.code is not None:
            validate_one_time_code(request.code)

        state, expires_at, problem = self._take(request.user_id)
        if state is None:
            return ChallengeResponse(status=ChallengeStatus.REJECTED, message=problem)

        final = self._advance_pending(
            state, expires_at, OneTimeCodeSubmitted(success=request.success)
        )
        if final.step is SessionStep.SUCCESS:
            return ChallengeResponse(status=ChallengeStatus.ACCEPTED, message=MSG_PASSED)
        return ChallengeResponse(status=ChallengeStatus.REJECTED, message=MSG_OTP_FAILED)

    def submit_physics_challenge(self, request: PhysicsChallengeRequest) -> PhysicsChallengeResponse:
        """
        Finish a parked physics challenge.

        A passed challenge returns a signed physics proof.
        """
        state, expires_at, problem = self._take(request.user_id)
        if state is None:
            return PhysicsChallengeResponse(status=ChallengeStatus.REJECTED, message=problem)

        try:
            trace = parse_trace(request.trace)
        except InvalidInputError:
            self._restore(state, expires_at)
            raise

        final = self._advance_pending(state, expires_at, PhysicsChallengeSubmitted(trace=trace))
        verdict = final.verdict
        passed = final.step is SessionStep.SUCCESS

        return PhysicsChallengeResponse(
            status=ChallengeStatus.ACCEPTED if passed else ChallengeStatus.REJECTED,
            message=MSG_PASSED if passed else final.error,
            is_human=verdict.is_human,
            confidence=verdict.confidence,
            reasons=list(verdict.reasons),
            proof=self.signer.physics_proof(verdict, now=self.clock()) if passed else None,
        )

    def pending_challenge(self, user_id: str) -> Optional[SessionState]:
        with self._lock:
            entry = self._pending.get(user_id)
        return entry[0] if entry else None

    def _take(self, user_id: str) -> Tuple[Optional[SessionState], float, Optional[str]]:
        with self._lock:
            entry = self._pending.pop(user_id, None)
        if entry is None:
            return None, 0.0, MSG_NO_CHALLENGE

        state, expires_at = entry
        if expires_at <= self.clock():
            logger.info(f"Challenge for {user_id} expired")
            return None, expires_at, MSG_EXPIRED
        return state, expires_at, None

    def _restore(self, state: SessionState, expires_at: float) -> None:
        # Original expiry is kept; a newer login's challenge wins
        with self._lock:
            self._pending.setdefault(state.user_id, (state, expires_at))

    def _advance_pending(
        self, state: SessionState, expires_at: float, event: SessionEvent
    ) -> SessionState:
        try:
            return self.machine.advance(state, event)
        except InvalidInputError:
            self._restore(state, expires_at)
            raise

    def _purge_expired(self) -> None:
        now = self.clock()
        expired = [uid for uid, (_, exp) in self._pending.items() if exp <= now]
        for uid in expired:
            del self._pending[uid]

    # =========================================================================
    # Monitoring
    # =========================================================================

    def events(self) -> EventListResponse:
        events = self.audit_log.list()
        return EventListResponse(events=events, count=len(events))

    def stats(self) -> DashboardStats:
        return summarize(self.audit_log.list())

    # =========================================================================
    # Behavioral Fingerprint
    # =========================================================================

    def _require_fingerprints(self) -> FingerprintService:
        if self.fingerprints is None:
            raise FingerprintsDisabledError("Fingerprint store is not configured")
        return self.fingerprints

    def train_fingerprint(self, user_id: str, timings: Sequence[float], entropy_score: float = 50.0):
        return self._require_fingerprints().train(
            user_id, timings, entropy_score=entropy_score, now=self.clock()
        )

    def prove_fingerprint(self, user_id: str, timings: Sequence[float]) -> Tuple[float, Optional[str]]:
        return self._require_fingerprints().prove(user_id, timings, now=self.clock())

    def reset_fingerprint(self, user_id: str) -> bool:
        return self._require_fingerprints().reset(user_id)
