"""
Utility functions for the loop planner.

Logging setup plus time formatting, parsing and frame conversion helpers.
"""

import logging
import math
import os
import re
from typing import List, Optional

logger = logging.getLogger(__name__)

DEFAULT_FRAME_RATE = 30.0

_SECONDS_RE = re.compile(r"^\d+(\.\d+)?$")

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
LOG_LEVEL_ENV = "LOOP_PLANNER_LOG_LEVEL"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure the root logger for the command line.

    Replaces any handlers from an earlier call. ``LOOP_PLANNER_LOG_LEVEL``
    takes precedence over ``level`` when set; unknown names fall back to INFO.
    """
    level = os.environ.get(LOG_LEVEL_ENV) or level

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    logger.debug(f"Logging at {level.upper()}, file: {log_file or 'none'}")


def format_time(seconds: float) -> str:
    """Format seconds as M:SS."""
    if not math.isfinite(seconds) or seconds < 0:
        return "0:00"
    total = int(seconds)
    return f"{total // 60}:{total % 60:02d}"


def format_time_extended(seconds: float, show_milliseconds: bool = False) -> str:
    """Format seconds as M:SS, or M:SS.mmm with milliseconds."""
    if not math.isfinite(seconds) or seconds < 0:
        return "0:00.000" if show_milliseconds else "0:00"

    formatted = format_time(seconds)
    if not show_milliseconds:
        return formatted

    milliseconds = int(round((seconds % 1) * 1000, 6))
    return f"{formatted}.{milliseconds:03d}"


def format_duration(seconds: float) -> str:
    """Format seconds as H:MM:SS, or M:SS when under an hour."""
    if not math.isfinite(seconds) or seconds < 0:
        return "0:00:00"

    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def parse_time(time_string: str) -> float:
    """
    Parse a time string into seconds.

    Accepts plain seconds ("90", "12.5"), MM:SS and HH:MM:SS. Minutes and
    seconds fields must be below 60.

    Returns:
        Seconds, or 0 for empty or malformed input
    """
    if not time_string or not isinstance(time_string, str):
        return 0.0

    trimmed = time_string.strip()
    if not trimmed:
        return 0.0

    if _SECONDS_RE.match(trimmed):
        return float(trimmed)

    parts = [part.strip() for part in trimmed.split(":")]
    if len(parts) not in (2, 3):
        return 0.0

    try:
        numbers = [int(p) for p in parts[:-1]] + [float(parts[-1])]
    except ValueError:
        return 0.0

    if any(n < 0 for n in numbers) or not math.isfinite(numbers[-1]):
        return 0.0

    if len(numbers) == 3:
        hours, minutes, secs = numbers
        if minutes >= 60 or secs >= 60:
            return 0.0
        return hours * 3600 + minutes * 60 + secs

    minutes, secs = numbers
    if secs >= 60:
        return 0.0
    return minutes * 60 + secs


def seconds_to_frames(seconds: float, frame_rate: float = DEFAULT_FRAME_RATE) -> int:
    return math.floor(seconds * frame_rate)


def frames_to_seconds(frames: int, frame_rate: float = DEFAULT_FRAME_RATE) -> float:
    return frames / frame_rate if frame_rate > 0 else 0.0


def round_to_frame(seconds: float, frame_rate: float = DEFAULT_FRAME_RATE) -> float:
    """Snap a time to the nearest frame boundary."""
    if frame_rate <= 0:
        return seconds
    return round(seconds * frame_rate) / frame_rate
