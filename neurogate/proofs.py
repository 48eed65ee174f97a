"""
NeuroGate Proof Tokens

Compact signed tokens handed to the client after a passed physics
challenge or a matching behavioral fingerprint.

Tokens are HS256 JWTs with a "ZK" type header, keyed with the server
secret. Verification enforces the signature and `exp`.
"""

from __future__ import annotations

import hashlib
import hmac
import time
from typing import Any, Dict, Optional

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidSignatureError, PyJWTError

from neurogate.errors import InvalidInputError
from neurogate.schemas.outputs import PhysicsVerdict


ALGORITHM = "HS256"
TOKEN_TYPE = "ZK"


class ProofSigner:
    """Issues and verifies signed proof tokens."""

    def __init__(self, secret: str, ttl_seconds: int = 3600) -> None:
        if not secret:
            raise ValueError("ProofSigner requires a non-empty secret")
        self._key = secret.encode("utf-8")
        self.ttl_seconds = ttl_seconds

    # -------------------------------------------------------------------------
    # Primitives
    # -------------------------------------------------------------------------

    def digest(self, message: bytes) -> str:
        """Keyed SHA-256 hex digest of an arbitrary message."""
        return hmac.new(self._key, message, hashlib.sha256).hexdigest()

    def sign(self, claims: Dict[str, Any], now: Optional[float] = None) -> str:
        """
        Sign claims, stamping `iat` and `exp` (iat + ttl_seconds).

        Returns the encoded token string.
        """
        issued = int(time.time() if now is None else now)
        payload = dict(claims)
        payload["iat"] = issued
        payload["exp"] = issued + self.ttl_seconds
        return jwt.encode(payload, self._key, algorithm=ALGORITHM, headers={"typ": TOKEN_TYPE})

    def verify(self, token: str, now: Optional[float] = None) -> Dict[str, Any]:
        """
        Check signature and expiry; return the payload claims.

        `now` pins the expiry check to a given unix time instead of the
        wall clock.

        Raises:
            InvalidInputError: malformed, tampered or expired token.
        """
        wall_clock = now is None
        try:
            payload = jwt.decode(
                token,
                self._key,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat"], "verify_exp": wall_clock, "verify_iat": wall_clock},
            )
        except ExpiredSignatureError as e:
            raise InvalidInputError("Proof expired") from e
        except InvalidSignatureError as e:
            raise InvalidInputError("Invalid proof signature") from e
        except PyJWTError as e:
            raise InvalidInputError(f"Malformed proof token: {e}") from e

        if not wall_clock and payload["exp"] <= now:
            raise InvalidInputError("Proof expired")
        return payload

    # -------------------------------------------------------------------------
    # Proof Types
    # -------------------------------------------------------------------------

    def physics_proof(self, verdict: PhysicsVerdict, now: Optional[float] = None) -> str:
        """Proof for a slider challenge verdict."""
        return self.sign(
            {
                "sub": "gravity_challenge",
                "verified": verdict.is_human,
                "confidence": round(verdict.confidence, 4),
                "reason": verdict.reasons[-1] if verdict.reasons else "",
                "type": "physics_proof",
            },
            now=now,
        )
