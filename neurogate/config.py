"""
NeuroGate Configuration

Environment-driven settings, optionally loaded from a local .env file.
Read once per process via get_settings().
"""

from __future__ import annotations

import logging
import os
import secrets
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://localhost:3000",
    "http://localhost:5000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:3000",
)


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration values."""
    audit_capacity: int = 50
    challenge_ttl_seconds: float = 300.0
    proof_secret: str = ""
    proof_ttl_seconds: int = 3600
    cors_origins: Tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None

    @property
    def fingerprints_enabled(self) -> bool:
        return bool(self.redis_password)


def _split_origins(raw: str) -> Tuple[str, ...]:
    return tuple(o.strip() for o in raw.split(",") if o.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Build Settings from the environment.

    Reads:
    - NEUROGATE_AUDIT_CAPACITY (default: 50)
    - NEUROGATE_CHALLENGE_TTL_SECONDS (default: 300)
    - NEUROGATE_PROOF_SECRET (default: random per process)
    - NEUROGATE_PROOF_TTL_SECONDS (default: 3600)
    - NEUROGATE_CORS_ORIGINS (comma separated)
    - NEUROGATE_LOG_LEVEL (default: INFO)
    - REDIS_HOST / REDIS_PORT / REDIS_PASSWORD (fingerprint store)
    """
    load_dotenv()

    secret = os.getenv("NEUROGATE_PROOF_SECRET")
    if not secret:
        logger.warning(
            "NEUROGATE_PROOF_SECRET is not set; proofs will not verify across restarts"
        )
        secret = secrets.token_hex(32)

    origins = os.getenv("NEUROGATE_CORS_ORIGINS")

    return Settings(
        audit_capacity=int(os.getenv("NEUROGATE_AUDIT_CAPACITY", 50)),
        challenge_ttl_seconds=float(os.getenv("NEUROGATE_CHALLENGE_TTL_SECONDS", 300)),
        proof_secret=secret,
        proof_ttl_seconds=int(os.getenv("NEUROGATE_PROOF_TTL_SECONDS", 3600)),
        cors_origins=_split_origins(origins) if origins else DEFAULT_CORS_ORIGINS,
        log_level=os.getenv("NEUROGATE_LOG_LEVEL", "INFO").upper(),
        redis_host=os.getenv("REDIS_HOST", "localhost"),
        redis_port=int(os.getenv("REDIS_PORT", 6379)),
        redis_password=os.getenv("REDIS_PASSWORD") or None,
    )
