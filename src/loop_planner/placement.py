"""
Placement suggestions for new loops.

Given a desired start and length, propose a placement that overlaps none of
the existing loops. Strategies are tried in a fixed order and the first one
that succeeds wins:

1. The desired range itself
2. The earliest gap between consecutive loops wide enough to hold it,
   aligned to the gap's start
3. Right after the last loop
4. Right before the first loop, ending at its start

Existing loops are never modified.
"""

import logging
from typing import Dict, Optional, Sequence

from .intervals import overlaps, sort_loops_by_start_time
from .models import Loop, TimeRange

logger = logging.getLogger(__name__)

# Creation suggestion sizes: (name, max seconds, fraction of timeline)
CREATION_SUGGESTION_SIZES = (
    ("short", 30.0, 0.1),
    ("medium", 120.0, 0.25),
    ("long", 300.0, 0.5),
)


def _fits(end_time: float, timeline_length: Optional[float]) -> bool:
    return not timeline_length or end_time <= timeline_length


def suggest_non_overlapping_time_range(
    desired_start: float,
    desired_duration: float,
    existing_loops: Sequence[Loop],
    timeline_length: Optional[float] = None,
) -> Optional[TimeRange]:
    """
    Propose a non-overlapping placement.

    Args:
        desired_start: Preferred start in seconds
        desired_duration: Length of the new loop in seconds
        existing_loops: Loops already on the timeline
        timeline_length: Media duration in seconds, if known

    Returns:
        TimeRange, or None when no strategy finds room
    """
    desired_end = desired_start + desired_duration
    candidate = TimeRange(desired_start, desired_end)

    if not any(overlaps(candidate, loop) for loop in existing_loops):
        if _fits(desired_end, timeline_length):
            return candidate

    sorted_loops = sort_loops_by_start_time(existing_loops)

    for current, following in zip(sorted_loops, sorted_loops[1:]):
        gap_start = current.end_time
        gap_end = following.start_time

        if gap_end - gap_start >= desired_duration:
            suggested_end = gap_start + desired_duration
            if _fits(suggested_end, timeline_length):
                logger.debug(f"Placing in gap [{gap_start}, {gap_end}]")
                return TimeRange(gap_start, suggested_end)

    if sorted_loops:
        suggested_start = sorted_loops[-1].end_time
        suggested_end = suggested_start + desired_duration
        if _fits(suggested_end, timeline_length):
            return TimeRange(suggested_start, suggested_end)

    if sorted_loops and sorted_loops[0].start_time >= desired_duration:
        suggested_end = sorted_loops[0].start_time
        suggested_start = suggested_end - desired_duration
        if suggested_start >= 0:
            return TimeRange(suggested_start, suggested_end)

    logger.debug(
        f"No placement for {desired_duration}s starting at {desired_start} "
        f"among {len(existing_loops)} loops"
    )
    return None


def get_loop_creation_suggestions(
    timeline_length: float,
    existing_loops: Sequence[Loop] = (),
) -> Optional[Dict[str, Dict[str, float]]]:
    """
    Suggest short, medium and long loop placements for a timeline.

    Sizes are min(30s, 10%), min(120s, 25%) and min(300s, 50%) of the
    timeline, each placed from the start of the timeline.

    Returns:
        Mapping of size name to start_time/end_time/duration, or None if the
        timeline length is not positive or any size cannot be placed
    """
    if not timeline_length or timeline_length <= 0:
        return None

    suggestions: Dict[str, Dict[str, float]] = {}

    for name, max_seconds, fraction in CREATION_SUGGESTION_SIZES:
        length = min(max_seconds, timeline_length * fraction)
        placement = suggest_non_overlapping_time_range(
            0, length, existing_loops, timeline_length
        )
        if placement is None:
            return None
        suggestions[name] = {**placement.to_dict(), "duration": length}

    return suggestions
