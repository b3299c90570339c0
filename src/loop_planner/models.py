"""
Loop data model.

A loop is a named time interval on a single media timeline. Loops are
immutable values: every transformation (trimming, renaming, repositioning)
produces a new record that keeps the original ``id``.
"""

import logging
import time
import uuid
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Field defaults applied by create_loop()
DEFAULT_LOOP_CONFIG: Dict[str, Any] = {
    "color": "#3B82F6",
    "playback_speed": 1.0,
    "repeat_count": 1,
    "play_count": 0,
    "is_active": False,
}


class LoopValidationError(str, Enum):
    """Error codes reported by single-loop validation."""

    INVALID_TIME_RANGE = "INVALID_TIME_RANGE"
    OVERLAPPING_LOOPS = "OVERLAPPING_LOOPS"
    EXCEEDS_VIDEO_DURATION = "EXCEEDS_VIDEO_DURATION"
    INVALID_NAME = "INVALID_NAME"
    INVALID_PLAYBACK_SPEED = "INVALID_PLAYBACK_SPEED"
    NEGATIVE_TIME = "NEGATIVE_TIME"
    ZERO_DURATION = "ZERO_DURATION"


@dataclass(frozen=True)
class Loop:
    """A named interval on the timeline, in seconds."""

    id: str
    name: str
    start_time: float
    end_time: float
    color: Optional[str] = None
    playback_speed: Optional[float] = None
    repeat_count: Optional[int] = None
    play_count: int = 0
    is_active: bool = False

    @property
    def normalized_name(self) -> str:
        """Name key used for duplicate detection."""
        return self.name.strip().lower()

    def with_bounds(self, start_time: float, end_time: float) -> "Loop":
        """Copy of this loop moved to new bounds."""
        return replace(self, start_time=start_time, end_time=end_time)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class TimeRange:
    """A proposed placement on the timeline."""

    start_time: float
    end_time: float

    @property
    def duration(self) -> float:
        return self.end_time - self.start_time

    def to_dict(self) -> Dict[str, float]:
        return {"start_time": self.start_time, "end_time": self.end_time}


@dataclass
class LoopValidationResult:
    """Outcome of validating a single loop."""

    errors: List[LoopValidationError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [e.value for e in self.errors],
            "warnings": list(self.warnings),
        }


_LOOP_FIELDS = {f.name for f in fields(Loop)}


def generate_loop_id() -> str:
    """Time-prefixed id with a random suffix, unique within a process."""
    return f"loop-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def create_loop(
    name: str,
    start_time: float,
    end_time: float,
    defaults: Optional[Dict[str, Any]] = None,
    **options: Any,
) -> Loop:
    """
    Build a new loop with a generated id.

    The name is trimmed, field defaults are applied and any explicitly
    supplied ``options`` (non-None) take precedence over them. No
    validation happens here.

    Args:
        name: Display name
        start_time: Start in seconds
        end_time: End in seconds
        defaults: Field defaults (DEFAULT_LOOP_CONFIG if not provided)
        **options: Overrides for any other Loop field, ``id`` included

    Returns:
        New Loop

    Raises:
        TypeError: If an option does not name a Loop field
    """
    unknown = set(options) - _LOOP_FIELDS
    if unknown:
        raise TypeError(f"Unknown loop option(s): {', '.join(sorted(unknown))}")

    values: Dict[str, Any] = dict(DEFAULT_LOOP_CONFIG if defaults is None else defaults)
    values.update({k: v for k, v in options.items() if v is not None})
    values.setdefault("id", generate_loop_id())
    values["name"] = name.strip()
    values["start_time"] = start_time
    values["end_time"] = end_time

    return Loop(**values)
