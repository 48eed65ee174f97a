"""
NeuroGate Behavioral Fingerprint

Train -> persist -> compare -> prove, for typing rhythm.

A fingerprint is a summary (mean/std of flight and dwell timings) plus a
keyed digest of that summary. Raw timings are never stored. A later
session is compared against the summary, and a signed proof is issued
only when it matches within tolerance.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np

from neurogate.errors import InvalidInputError
from neurogate.proofs import ProofSigner

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

MIN_TRAINING_SAMPLES = 20
DEFAULT_TOLERANCE = 0.15


@dataclass(frozen=True)
class BehavioralFingerprint:
    """Persisted typing profile for one user."""
    user_id: str
    digest: str
    mean_ms: float
    std_ms: float
    entropy_score: float
    trained_at: float
    sample_count: int
    tolerance: float = DEFAULT_TOLERANCE

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> BehavioralFingerprint:
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def _profile(timings: Sequence[float]) -> Tuple[float, float]:
    values = np.asarray(timings, dtype=np.float64)
    if values.size == 0 or not np.all(np.isfinite(values)):
        raise InvalidInputError("Timings must be a non-empty list of finite numbers")
    return float(values.mean()), float(values.std())


def compare_profile(fingerprint: BehavioralFingerprint, timings: Sequence[float]) -> float:
    """
    Match confidence 0-1 between a stored fingerprint and new timings.

    deviation = (|d_mean| + |d_std|) / mean(ref_mean, cur_mean)
    """
    mean, std = _profile(timings)
    scale = (fingerprint.mean_ms + mean) / 2.0
    if scale <= 0:
        return 0.0
    deviation = (abs(mean - fingerprint.mean_ms) + abs(std - fingerprint.std_ms)) / scale
    return max(0.0, min(1.0, 1.0 - deviation))


class FingerprintService:
    """
    Trains, compares and proves behavioral fingerprints.

    Storage is delegated to a store exposing load/save/delete, see
    persistence.fingerprint_store.FingerprintStore.
    """

    def __init__(self, store, signer: ProofSigner) -> None:
        self.store = store
        self.signer = signer

    def train(
        self,
        user_id: str,
        timings: Sequence[float],
        entropy_score: float = 50.0,
        now: Optional[float] = None,
    ) -> BehavioralFingerprint:
        """
        Build and persist a fingerprint.

        Raises:
            InvalidInputError: fewer than MIN_TRAINING_SAMPLES timings.
        """
        if len(timings) < MIN_TRAINING_SAMPLES:
            raise InvalidInputError(
                f"Training needs at least {MIN_TRAINING_SAMPLES} samples, got {len(timings)}"
            )

        mean, std = _profile(timings)
        # Quantize to whole ms so the digest is stable against float noise
        summary = json.dumps(
            {"user": user_id, "mean": round(mean), "std": round(std), "n": len(timings)},
            sort_keys=True,
        ).encode("utf-8")

        fingerprint = BehavioralFingerprint(
            user_id=user_id,
            digest=self.signer.digest(summary),
            mean_ms=mean,
            std_ms=std,
            entropy_score=max(0.0, min(100.0, entropy_score)),
            trained_at=time.time() if now is None else now,
            sample_count=len(timings),
        )
        self.store.save(fingerprint)
        logger.info(
            f"Fingerprint trained for {user_id}: {len(timings)} samples, "
            f"mean={mean:.1f}ms std={std:.1f}ms"
        )
        return fingerprint

    def prove(
        self,
        user_id: str,
        timings: Sequence[float],
        now: Optional[float] = None,
    ) -> Tuple[float, Optional[str]]:
        """
        Compare a session against the stored fingerprint.

        Returns:
            (confidence, proof). proof is None when the pattern does not match.

        Raises:
            InvalidInputError: no fingerprint trained, or empty timings.
        """
        fingerprint = self.store.load(user_id)
        if fingerprint is None:
            raise InvalidInputError("No fingerprint trained for this user")

        confidence = compare_profile(fingerprint, timings)
        if confidence < 1.0 - fingerprint.tolerance:
            logger.info(f"Fingerprint mismatch for {user_id} (confidence={confidence:.2f})")
            return confidence, None

        proof = self.signer.sign(
            {
                "sub": user_id,
                "verified": True,
                "entropy": fingerprint.entropy_score,
                "confidence": round(confidence, 2),
                "digest": fingerprint.digest,
            },
            now=now,
        )
        logger.info(f"Fingerprint match for {user_id} (confidence={confidence:.2f})")
        return confidence, proof

    def reset(self, user_id: str) -> bool:
        return self.store.delete(user_id)
