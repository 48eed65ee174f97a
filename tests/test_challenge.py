"""
Challenge Selection & One-Time-Code Tests
"""

import pytest

from neurogate.challenge import select_challenge, validate_one_time_code
from neurogate.errors import InvalidInputError
from neurogate.schemas.outputs import ChallengeKind


class TestSelectChallenge:

    @pytest.mark.parametrize("score,kind", [
        (0.0, ChallengeKind.PHYSICS),
        (49.99, ChallengeKind.PHYSICS),
        (50.0, ChallengeKind.ONE_TIME_CODE),
        (69.99, ChallengeKind.ONE_TIME_CODE),
    ])
    def test_score_bands(self, score, kind):
        assert select_challenge(score) is kind


class TestValidateOneTimeCode:

    @pytest.mark.parametrize("code", [None, "", "   "])
    def test_blank(self, code):
        with pytest.raises(InvalidInputError, match="OTP is required"):
            validate_one_time_code(code)

    def test_too_short(self):
        with pytest.raises(InvalidInputError, match="at least 4 characters"):
            validate_one_time_code("123")

    def test_valid_code_is_stripped(self):
        assert validate_one_time_code(" 4821 ") == "4821"
