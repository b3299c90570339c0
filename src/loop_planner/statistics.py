"""
Derived durations and collection statistics.

``repeat_count`` and ``playback_speed`` only feed these calculations; they
play no part in conflict handling.
"""

from typing import Any, Dict, List, Sequence

from .intervals import duration
from .models import Loop


def calculate_adjusted_loop_duration(loop: Loop) -> float:
    """Wall-clock length of one pass through the loop at its playback speed."""
    base = duration(loop)
    speed = loop.playback_speed or 1
    return base / speed if speed > 0 else base


def calculate_total_playback_time(loop: Loop) -> float:
    """Wall-clock time to play the loop ``repeat_count`` times."""
    repeats = max(1, loop.repeat_count or 1)
    return calculate_adjusted_loop_duration(loop) * repeats


def calculate_total_loops_duration(loops: Sequence[Loop]) -> float:
    return sum(duration(loop) for loop in loops)


def get_active_loops(loops: Sequence[Loop]) -> List[Loop]:
    return [loop for loop in loops if loop.is_active]


def get_loop_statistics(loops: Sequence[Loop]) -> Dict[str, Any]:
    """
    Summarize a collection.

    Returns:
        Dictionary with total_count, active_count, total_duration,
        average_duration and most_played (None for an empty collection;
        the later loop wins ties)
    """
    total_count = len(loops)
    total_duration = calculate_total_loops_duration(loops)

    most_played = None
    for loop in loops:
        if most_played is None or loop.play_count >= most_played.play_count:
            most_played = loop

    return {
        "total_count": total_count,
        "active_count": len(get_active_loops(loops)),
        "total_duration": total_duration,
        "average_duration": total_duration / total_count if total_count else 0.0,
        "most_played": most_played,
    }
