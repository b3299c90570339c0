"""
Field-level checks used by loop validation.

The validators in this package only need three boolean oracles from a field
validator: ``is_valid_name``, ``is_valid_speed`` and ``is_valid_range``.
``FieldValidator`` is the default implementation; any object with the same
methods can be passed in its place.
"""

import logging
from typing import List, Optional

from .config import PlannerSettings

logger = logging.getLogger(__name__)

SPEED_STEP = 0.25
SPEED_PRECISION = 0.001


class FieldValidator:
    """Name, playback speed and time range checks driven by PlannerSettings."""

    def __init__(self, settings: Optional[PlannerSettings] = None):
        self.settings = settings or PlannerSettings()

    @property
    def speed_steps(self) -> List[float]:
        """Allowed discrete speeds between the configured limits."""
        steps = []
        speed = self.settings.min_playback_speed
        while speed <= self.settings.max_playback_speed + SPEED_PRECISION:
            steps.append(round(speed, 4))
            speed += SPEED_STEP
        return steps

    def is_valid_name(self, name: str) -> bool:
        if not isinstance(name, str):
            return False
        length = len(name.strip())
        return 0 < length <= self.settings.max_name_length

    def is_valid_speed(self, speed: float, enforce_steps: bool = False) -> bool:
        # Comparisons with NaN are False, so NaN is rejected here
        if not (
            self.settings.min_playback_speed
            <= speed
            <= self.settings.max_playback_speed
        ):
            return False

        if enforce_steps:
            return any(abs(step - speed) < SPEED_PRECISION for step in self.speed_steps)

        return True

    def is_valid_range(
        self, start_time: float, end_time: float, timeline_length: float
    ) -> bool:
        return start_time >= 0 and end_time > start_time and end_time <= timeline_length

    def round_to_valid_step(self, speed: float) -> float:
        """Clamp a speed into range and snap it to the nearest step."""
        if speed < self.settings.min_playback_speed:
            return self.settings.min_playback_speed
        if speed > self.settings.max_playback_speed:
            return self.settings.max_playback_speed
        return min(self.speed_steps, key=lambda step: abs(step - speed))
