"""
Single-loop validation.

Checks one loop against its name, its bounds, the timeline length, its
playback speed and a set of existing loops. Every check runs; nothing
short-circuits and nothing raises. Malformed numbers surface as error codes.
"""

import logging
import math
from typing import Any, Dict, Optional, Sequence, Tuple

from .config import PlannerSettings
from .field_validation import FieldValidator
from .intervals import duration, find_overlapping_loops
from .models import Loop, LoopValidationError, LoopValidationResult, create_loop

logger = logging.getLogger(__name__)


class LoopValidator:
    """
    Validates loops using a field validator collaborator.

    Args:
        field_validator: Object exposing is_valid_name / is_valid_speed /
            is_valid_range (FieldValidator if not provided)
        settings: Planner settings (defaults if not provided)
    """

    def __init__(
        self,
        field_validator: Optional[Any] = None,
        settings: Optional[PlannerSettings] = None,
    ):
        self.settings = settings or PlannerSettings()
        self.field_validator = field_validator or FieldValidator(self.settings)

    def is_valid_time_range(
        self,
        start_time: float,
        end_time: float,
        timeline_length: Optional[float] = None,
    ) -> bool:
        """Finite, ordered, non-negative bounds; checked against the timeline when one is given."""
        if timeline_length:
            return self.field_validator.is_valid_range(
                start_time, end_time, timeline_length
            )
        if not (math.isfinite(start_time) and math.isfinite(end_time)):
            return False
        return start_time >= 0 and end_time > start_time

    def validate_loop(
        self,
        loop: Loop,
        timeline_length: Optional[float] = None,
        existing_loops: Sequence[Loop] = (),
    ) -> LoopValidationResult:
        """
        Validate a loop.

        Args:
            loop: Loop to check
            timeline_length: Media duration in seconds, if known
            existing_loops: Loops the candidate must not overlap (a loop
                with the same id is ignored)

        Returns:
            LoopValidationResult with error codes and warnings
        """
        result = LoopValidationResult()

        if not self.field_validator.is_valid_name(loop.name):
            result.errors.append(LoopValidationError.INVALID_NAME)

        if not self.is_valid_time_range(loop.start_time, loop.end_time):
            result.errors.append(LoopValidationError.INVALID_TIME_RANGE)

        if loop.start_time < 0 or loop.end_time < 0:
            result.errors.append(LoopValidationError.NEGATIVE_TIME)

        if loop.end_time <= loop.start_time:
            result.errors.append(LoopValidationError.ZERO_DURATION)

        if loop.playback_speed and not self.field_validator.is_valid_speed(
            loop.playback_speed
        ):
            result.errors.append(LoopValidationError.INVALID_PLAYBACK_SPEED)

        if timeline_length and loop.end_time > timeline_length:
            result.errors.append(LoopValidationError.EXCEEDS_VIDEO_DURATION)

        overlapping = find_overlapping_loops(loop, existing_loops)
        if overlapping:
            result.errors.append(LoopValidationError.OVERLAPPING_LOOPS)
            names = ", ".join(other.name for other in overlapping)
            result.warnings.append(f"Overlaps with loops: {names}")

        if timeline_length and duration(loop) > timeline_length * self.settings.long_loop_ratio:
            percent = round(self.settings.long_loop_ratio * 100)
            result.warnings.append(f"Loop covers more than {percent}% of video duration")

        if not result.is_valid:
            logger.debug(
                f"Loop {loop.id} ('{loop.name}') failed validation: "
                f"{[e.value for e in result.errors]}"
            )

        return result

    def validate_multiple_loops(
        self,
        loops: Sequence[Loop],
        timeline_length: Optional[float] = None,
    ) -> Dict[str, LoopValidationResult]:
        """Validate each loop against every other loop in the collection."""
        results: Dict[str, LoopValidationResult] = {}

        for index, loop in enumerate(loops):
            others = [other for i, other in enumerate(loops) if i != index]
            results[loop.id] = self.validate_loop(loop, timeline_length, others)

        return results

    def create_validated_loop(
        self,
        name: str,
        start_time: float,
        end_time: float,
        timeline_length: Optional[float] = None,
        existing_loops: Sequence[Loop] = (),
        **options: Any,
    ) -> Tuple[Loop, LoopValidationResult]:
        """Create a loop and validate it in one step."""
        options.setdefault("defaults", self.settings.loop_defaults)
        loop = create_loop(name, start_time, end_time, **options)
        return loop, self.validate_loop(loop, timeline_length, existing_loops)


def validate_loop(
    loop: Loop,
    timeline_length: Optional[float] = None,
    existing_loops: Sequence[Loop] = (),
    field_validator: Optional[Any] = None,
) -> LoopValidationResult:
    """Convenience wrapper around LoopValidator.validate_loop()."""
    return LoopValidator(field_validator).validate_loop(
        loop, timeline_length, existing_loops
    )


def validate_multiple_loops(
    loops: Sequence[Loop],
    timeline_length: Optional[float] = None,
    field_validator: Optional[Any] = None,
) -> Dict[str, LoopValidationResult]:
    """Convenience wrapper around LoopValidator.validate_multiple_loops()."""
    return LoopValidator(field_validator).validate_multiple_loops(loops, timeline_length)
