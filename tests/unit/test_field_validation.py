"""
Tests for the default field validator.
"""

import pytest

from loop_planner.config import PlannerSettings
from loop_planner.field_validation import FieldValidator


@pytest.fixture
def validator() -> FieldValidator:
    return FieldValidator()


class TestNames:
    def test_valid_name(self, validator) -> None:
        assert validator.is_valid_name("Chorus") is True

    def test_blank_name(self, validator) -> None:
        assert validator.is_valid_name("   ") is False

    def test_length_limit(self, validator) -> None:
        assert validator.is_valid_name("x" * 50) is True
        assert validator.is_valid_name("x" * 51) is False

    def test_configured_limit(self) -> None:
        validator = FieldValidator(PlannerSettings(max_name_length=5))
        assert validator.is_valid_name("abcdef") is False


class TestSpeeds:
    @pytest.mark.parametrize("speed", [0.25, 1.0, 1.3, 2.0])
    def test_in_range(self, validator, speed) -> None:
        assert validator.is_valid_speed(speed) is True

    @pytest.mark.parametrize("speed", [0.1, 2.5, float("nan")])
    def test_out_of_range(self, validator, speed) -> None:
        assert validator.is_valid_speed(speed) is False

    def test_enforce_steps(self, validator) -> None:
        assert validator.is_valid_speed(1.25, enforce_steps=True) is True
        assert validator.is_valid_speed(1.3, enforce_steps=True) is False

    def test_steps(self, validator) -> None:
        assert validator.speed_steps == [0.25, 0.5, 0.75, 1.0, 1.25, 1.5, 1.75, 2.0]

    def test_round_to_valid_step(self, validator) -> None:
        assert validator.round_to_valid_step(1.3) == 1.25
        assert validator.round_to_valid_step(0.1) == 0.25
        assert validator.round_to_valid_step(3.0) == 2.0


class TestRanges:
    def test_valid_range(self, validator) -> None:
        assert validator.is_valid_range(0, 10, 100) is True

    def test_end_past_timeline(self, validator) -> None:
        assert validator.is_valid_range(0, 101, 100) is False

    def test_reversed(self, validator) -> None:
        assert validator.is_valid_range(10, 5, 100) is False
