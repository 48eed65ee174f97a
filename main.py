"""
NeuroGate API

FastAPI application exposing:
- POST /api/v1/verify → trust score for login telemetry
- POST /api/v1/challenge → one-time-code challenge result
- POST /api/v1/challenge/physics → slider trace verdict (+ signed proof)
- GET /api/v1/admin/events, /api/v1/admin/stats → dashboard
- POST /api/v1/fingerprint/train, /prove; DELETE /api/v1/fingerprint/{userId}

Engine errors (InvalidInputError) map to 400; anything unexpected to 500.
"""

from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, HTTPException, status, Request
from fastapi.middleware.cors import CORSMiddleware
from redis.exceptions import RedisError

from neurogate.config import get_settings
from neurogate.errors import FingerprintsDisabledError, InvalidInputError
from neurogate.fingerprint import FingerprintService
from neurogate.orchestrator import GateOrchestrator
from neurogate.proofs import ProofSigner
from neurogate.schemas.inputs import (
    ChallengeRequest,
    FingerprintProveRequest,
    FingerprintTrainRequest,
    PhysicsChallengeRequest,
    VerifyRequest,
)
from neurogate.schemas.outputs import (
    ChallengeResponse,
    DashboardStats,
    EventListResponse,
    FingerprintResponse,
    PhysicsChallengeResponse,
    VerifyResponse,
)
from persistence.audit_log import AuditLog
from persistence.fingerprint_store import FingerprintStore


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# =============================================================================
# Application State
# =============================================================================

class AppState:
    """Application state container."""
    orchestrator: Optional[GateOrchestrator] = None


state = AppState()


def _build_fingerprints(signer: ProofSigner) -> Optional[FingerprintService]:
    if not settings.fingerprints_enabled:
        logger.warning("Redis credentials not configured, fingerprint store disabled")
        return None
    try:
        return FingerprintService(FingerprintStore.from_settings(), signer)
    except (ValueError, RedisError) as e:
        logger.warning(f"Fingerprint store unavailable, disabled: {e}")
        return None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting NeuroGate API...")
    signer = ProofSigner(settings.proof_secret, ttl_seconds=settings.proof_ttl_seconds)
    state.orchestrator = GateOrchestrator(
        signer=signer,
        audit_log=AuditLog(capacity=settings.audit_capacity),
        fingerprints=_build_fingerprints(signer),
        challenge_ttl_seconds=settings.challenge_ttl_seconds,
    )
    logger.info("NeuroGate ready")

    yield

    # Shutdown
    logger.info("Shutting down NeuroGate API...")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="NeuroGate",
    description="Behavioral risk scoring and physics-based login verification",
    version=API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=True,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


def _bad_request(e: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


def _internal_error(where: str, e: Exception) -> HTTPException:
    logger.error(f"{where} error: {e}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Internal error during {where}"
    )


# =============================================================================
# Health Check
# =============================================================================

@app.get("/")
async def root():
    return {"service": "NeuroGate", "version": API_VERSION, "status": "running"}


@app.get("/api/v1/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "online", "message": "NeuroGate security engine is running"}


# =============================================================================
# Login & Challenges
# =============================================================================

@app.post("/api/v1/verify", response_model=VerifyResponse, response_model_exclude_none=True)
async def verify(payload: VerifyRequest, request: Request):
    """
    Score login telemetry.

    - requiresChallenge is true when trustScore < 70
    - challengeType is "physics" below 50, "otp" otherwise
    """
    source = request.client.host if request.client else "unknown"
    try:
        return state.orchestrator.verify(payload, source_address=source)
    except InvalidInputError as e:
        raise _bad_request(e)
    except Exception as e:
        raise _internal_error("verification", e)


@app.post("/api/v1/challenge", response_model=ChallengeResponse, response_model_exclude_none=True)
async def challenge(payload: ChallengeRequest):
    """Report the one-time-code result for a pending challenge."""
    try:
        return state.orchestrator.submit_challenge(payload)
    except InvalidInputError as e:
        raise _bad_request(e)
    except Exception as e:
        raise _internal_error("challenge", e)


@app.post(
    "/api/v1/challenge/physics",
    response_model=PhysicsChallengeResponse,
    response_model_exclude_none=True,
)
async def physics_challenge(payload: PhysicsChallengeRequest):
    """Classify the slider trace for a pending physics challenge."""
    try:
        return state.orchestrator.submit_physics_challenge(payload)
    except InvalidInputError as e:
        raise _bad_request(e)
    except Exception as e:
        raise _internal_error("physics challenge", e)


# =============================================================================
# Admin Dashboard
# =============================================================================

@app.get("/api/v1/admin/events", response_model=EventListResponse)
async def admin_events():
    """Most recent login attempts, newest first."""
    return state.orchestrator.events()


@app.get("/api/v1/admin/stats", response_model=DashboardStats)
async def admin_stats():
    return state.orchestrator.stats()


# =============================================================================
# Behavioral Fingerprint
# =============================================================================

def _unavailable(e: FingerprintsDisabledError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@app.post("/api/v1/fingerprint/train", response_model=FingerprintResponse, response_model_exclude_none=True)
async def train_fingerprint(payload: FingerprintTrainRequest):
    try:
        fingerprint = state.orchestrator.train_fingerprint(
            payload.user_id, payload.timings, entropy_score=payload.entropy_score
        )
    except FingerprintsDisabledError as e:
        raise _unavailable(e)
    except InvalidInputError as e:
        raise _bad_request(e)
    except Exception as e:
        raise _internal_error("fingerprint training", e)

    return FingerprintResponse(
        user_id=fingerprint.user_id,
        trained=True,
        message=f"Fingerprint trained on {fingerprint.sample_count} samples",
    )


@app.post("/api/v1/fingerprint/prove", response_model=FingerprintResponse, response_model_exclude_none=True)
async def prove_fingerprint(payload: FingerprintProveRequest):
    try:
        confidence, proof = state.orchestrator.prove_fingerprint(payload.user_id, payload.timings)
    except FingerprintsDisabledError as e:
        raise _unavailable(e)
    except InvalidInputError as e:
        raise _bad_request(e)
    except Exception as e:
        raise _internal_error("fingerprint proof", e)

    return FingerprintResponse(
        user_id=payload.user_id,
        trained=True,
        verified=proof is not None,
        confidence=round(confidence, 4),
        proof=proof,
        message=None if proof else "Behavioral pattern does not match",
    )


@app.delete("/api/v1/fingerprint/{user_id}", response_model=FingerprintResponse, response_model_exclude_none=True)
async def reset_fingerprint(user_id: str):
    try:
        existed = state.orchestrator.reset_fingerprint(user_id)
    except FingerprintsDisabledError as e:
        raise _unavailable(e)
    except Exception as e:
        raise _internal_error("fingerprint reset", e)

    return FingerprintResponse(
        user_id=user_id,
        message="Fingerprint removed" if existed else "No fingerprint stored",
    )


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
