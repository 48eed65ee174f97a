"""
Step-up challenge selection and one-time-code validation.
"""

from typing import Optional

from neurogate.errors import InvalidInputError
from neurogate.schemas.outputs import ChallengeKind


# Below this score the physics challenge is required; up to the challenge
# threshold a one-time code is enough.
PHYSICS_BAND_UPPER = 50.0
MIN_CODE_LENGTH = 4


def select_challenge(score: float) -> ChallengeKind:
    """Pick the challenge kind for a score that requires step-up."""
    if score < PHYSICS_BAND_UPPER:
        return ChallengeKind.PHYSICS
    return ChallengeKind.ONE_TIME_CODE


def validate_one_time_code(code: Optional[str]) -> str:
    """
    Check the shape of a one-time code typed by the user.

    Returns the stripped code.

    Raises:
        InvalidInputError: blank or shorter than MIN_CODE_LENGTH.
    """
    cleaned = (code or "").strip()
    if not cleaned:
        raise InvalidInputError("OTP is required")
    if len(cleaned) < MIN_CODE_LENGTH:
        raise InvalidInputError(f"OTP must be at least {MIN_CODE_LENGTH} characters")
    return cleaned
