"""
Planner settings.

Limits used by the field validator, the single-loop validator, the conflict
resolver and the health reporter. Settings can be loaded from a YAML file
with a top-level ``loop_planner`` mapping::

    loop_planner:
      max_name_length: 50
      min_playback_speed: 0.25
      max_playback_speed: 2.0
      max_resolve_attempts: 10
"""

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LOOP_PLANNER_CONFIG"
CONFIG_SECTION = "loop_planner"


@dataclass(frozen=True)
class PlannerSettings:
    """Tunable limits for loop validation and conflict handling."""

    # Field validator
    max_name_length: int = 50
    min_playback_speed: float = 0.25
    max_playback_speed: float = 2.0

    # Resolver
    max_resolve_attempts: int = 10

    # Heuristics
    long_loop_ratio: float = 0.8  # warn when a loop covers more of the timeline
    overfill_ratio: float = 1.5  # suggest consolidation above this total/timeline ratio
    max_active_loops: int = 5

    # create_loop() defaults
    default_color: str = "#3B82F6"
    default_playback_speed: float = 1.0
    default_repeat_count: int = 1

    def __post_init__(self) -> None:
        """Validate settings."""
        if self.max_name_length < 1:
            raise ValueError(
                f"max_name_length must be >= 1, got {self.max_name_length}"
            )

        if not 0 < self.min_playback_speed <= self.max_playback_speed:
            raise ValueError(
                "Invalid playback speed range: "
                f"[{self.min_playback_speed}, {self.max_playback_speed}]"
            )

        if self.max_resolve_attempts < 1:
            raise ValueError(
                f"max_resolve_attempts must be >= 1, got {self.max_resolve_attempts}"
            )

        for name in ("long_loop_ratio", "overfill_ratio"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")

        if self.max_active_loops < 0:
            raise ValueError(
                f"max_active_loops must be >= 0, got {self.max_active_loops}"
            )

    @property
    def loop_defaults(self) -> Dict[str, Any]:
        """Field defaults for create_loop()."""
        return {
            "color": self.default_color,
            "playback_speed": self.default_playback_speed,
            "repeat_count": self.default_repeat_count,
            "play_count": 0,
            "is_active": False,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlannerSettings":
        """Build settings from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_settings(config_path: Optional[Union[str, Path]] = None) -> PlannerSettings:
    """
    Load settings from YAML.

    Args:
        config_path: Path to the YAML file. Falls back to $LOOP_PLANNER_CONFIG.

    Returns:
        PlannerSettings (defaults when no file is configured)

    Raises:
        FileNotFoundError: If an explicitly given path does not exist
        ValueError: If the file contains unknown or invalid settings
    """
    explicit = config_path is not None
    path_str = str(config_path) if explicit else os.environ.get(CONFIG_ENV_VAR)

    if not path_str:
        return PlannerSettings()

    path = Path(path_str)
    if not path.exists():
        if explicit:
            raise FileNotFoundError(f"Configuration file not found: {path}")
        logger.warning(f"Configuration file not found: {path}, using defaults")
        return PlannerSettings()

    with open(path, "r") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Configuration file {path} must contain a mapping")

    section = raw.get(CONFIG_SECTION, {}) or {}
    settings = PlannerSettings.from_dict(section)
    logger.info(f"Loaded planner settings from {path}")
    return settings
