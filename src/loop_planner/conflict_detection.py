"""
Conflict Detection Engine for loop collections.

Scans a whole collection and classifies every conflict:
- overlapping: every pair of loops sharing time (half-open intervals)
- exceeding_duration: loops ending after, or starting at/after, the timeline end
- invalid_times: loops with non-finite, negative or empty bounds
- duplicate_names: loops whose trimmed, lower-cased names collide

Detection is a pure read: the input collection is never mutated or reordered.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .intervals import is_structurally_valid, overlaps
from .models import Loop

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoopOverlap:
    """A pair of overlapping loops and the region they share."""

    loop1: Loop
    loop2: Loop
    overlap_start: float
    overlap_end: float

    @property
    def overlap_duration(self) -> float:
        return self.overlap_end - self.overlap_start

    @property
    def loop_ids(self) -> List[str]:
        return [self.loop1.id, self.loop2.id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "loop_ids": self.loop_ids,
            "loop_names": [self.loop1.name, self.loop2.name],
            "overlap_start": self.overlap_start,
            "overlap_end": self.overlap_end,
            "overlap_duration": self.overlap_duration,
        }


@dataclass
class LoopConflicts:
    """All conflicts found in a collection."""

    overlapping: List[LoopOverlap] = field(default_factory=list)
    exceeding_duration: List[Loop] = field(default_factory=list)
    invalid_times: List[Loop] = field(default_factory=list)
    duplicate_names: List[Loop] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(
            self.overlapping
            or self.exceeding_duration
            or self.invalid_times
            or self.duplicate_names
        )

    @property
    def total(self) -> int:
        return (
            len(self.overlapping)
            + len(self.exceeding_duration)
            + len(self.invalid_times)
            + len(self.duplicate_names)
        )

    def duplicate_groups(self) -> Dict[str, List[Loop]]:
        """Duplicate loops keyed by normalized name, in first-seen order."""
        groups: Dict[str, List[Loop]] = {}
        for loop in self.duplicate_names:
            groups.setdefault(loop.normalized_name, []).append(loop)
        return groups

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overlapping": [o.to_dict() for o in self.overlapping],
            "exceeding_duration": [loop.id for loop in self.exceeding_duration],
            "invalid_times": [loop.id for loop in self.invalid_times],
            "duplicate_names": [loop.id for loop in self.duplicate_names],
        }


class LoopConflictDetector:
    """
    Conflict detection engine.

    The pairwise overlap scan is O(n^2) in the number of loops; every other
    check is linear.
    """

    def detect(
        self,
        loops: Sequence[Loop],
        timeline_length: Optional[float] = None,
    ) -> LoopConflicts:
        """
        Detect all conflicts in a collection.

        Args:
            loops: Loops to analyze
            timeline_length: Media duration in seconds; out-of-bounds loops
                are only reported when this is given and positive

        Returns:
            LoopConflicts
        """
        conflicts = LoopConflicts(
            overlapping=self._detect_overlaps(loops),
            exceeding_duration=self._detect_exceeding(loops, timeline_length),
            invalid_times=[loop for loop in loops if not is_structurally_valid(loop)],
            duplicate_names=self._detect_duplicate_names(loops),
        )

        logger.info(
            f"[LoopConflictDetector] {len(loops)} loops: "
            f"{len(conflicts.overlapping)} overlaps, "
            f"{len(conflicts.exceeding_duration)} out of bounds, "
            f"{len(conflicts.invalid_times)} invalid, "
            f"{len(conflicts.duplicate_names)} duplicate names"
        )

        return conflicts

    def _detect_overlaps(self, loops: Sequence[Loop]) -> List[LoopOverlap]:
        """Report every overlapping unordered pair, in input order."""
        found: List[LoopOverlap] = []

        for i, loop1 in enumerate(loops):
            for loop2 in loops[i + 1 :]:
                if not overlaps(loop1, loop2):
                    continue

                overlap = LoopOverlap(
                    loop1=loop1,
                    loop2=loop2,
                    overlap_start=max(loop1.start_time, loop2.start_time),
                    overlap_end=min(loop1.end_time, loop2.end_time),
                )
                logger.debug(
                    f"Overlap {loop1.id} / {loop2.id}: "
                    f"[{overlap.overlap_start}, {overlap.overlap_end}]"
                )
                found.append(overlap)

        return found

    def _detect_exceeding(
        self, loops: Sequence[Loop], timeline_length: Optional[float]
    ) -> List[Loop]:
        if not timeline_length or timeline_length <= 0:
            return []

        return [
            loop
            for loop in loops
            if loop.end_time > timeline_length or loop.start_time >= timeline_length
        ]

    def _detect_duplicate_names(self, loops: Sequence[Loop]) -> List[Loop]:
        """Every loop belonging to a name group of more than one."""
        by_name: Dict[str, List[Loop]] = {}
        for loop in loops:
            by_name.setdefault(loop.normalized_name, []).append(loop)

        duplicates: List[Loop] = []
        for group in by_name.values():
            if len(group) > 1:
                duplicates.extend(group)

        return duplicates


def detect_loop_conflicts(
    loops: Sequence[Loop],
    timeline_length: Optional[float] = None,
) -> LoopConflicts:
    """Convenience function to run the detector once."""
    return LoopConflictDetector().detect(loops, timeline_length)
