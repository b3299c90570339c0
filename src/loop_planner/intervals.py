"""
Interval predicates for loops on a linear timeline.

Loops are treated as half-open intervals: two loops that only touch at an
endpoint (``a.end_time == b.start_time``) do not overlap. None of these
functions raise; malformed numbers (NaN, infinities) simply fail the checks.
"""

import math
from typing import TYPE_CHECKING, List, Sequence

if TYPE_CHECKING:
    from .models import Loop


def overlaps(a: "Loop", b: "Loop") -> bool:
    """Return True if the two loops share any point on the timeline."""
    return a.start_time < b.end_time and a.end_time > b.start_time


def contains(outer: "Loop", inner: "Loop") -> bool:
    """Return True if ``inner`` lies entirely within ``outer``."""
    return outer.start_time <= inner.start_time and inner.end_time <= outer.end_time


def duration(loop: "Loop") -> float:
    """Loop length in seconds, never negative."""
    length = loop.end_time - loop.start_time
    # max() keeps NaN when it comes first, so test explicitly
    if not length > 0:
        return 0.0
    return length


def is_structurally_valid(loop: "Loop") -> bool:
    """
    Check the bounds of a loop.

    A loop is structurally valid when both bounds are finite, the start is
    not negative and the end is strictly after the start.
    """
    try:
        start = float(loop.start_time)
        end = float(loop.end_time)
    except (TypeError, ValueError):
        return False

    if not (math.isfinite(start) and math.isfinite(end)):
        return False

    return start >= 0 and end > start


def find_overlapping_loops(loop: "Loop", existing_loops: Sequence["Loop"]) -> List["Loop"]:
    """Return the loops in ``existing_loops`` overlapping ``loop``, ignoring itself by id."""
    return [
        existing
        for existing in existing_loops
        if existing.id != loop.id and overlaps(loop, existing)
    ]


def sort_loops_by_start_time(loops: Sequence["Loop"]) -> List["Loop"]:
    """Return a new list sorted by start time (stable for equal starts)."""
    return sorted(loops, key=lambda loop: loop.start_time)
