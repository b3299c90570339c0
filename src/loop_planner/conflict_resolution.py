"""
Loop Conflict Resolution Module.

Rewrites a loop collection into a conflict-free one. Phases run in a fixed
order, each on the output of the previous one:

1. remove_invalid: drop loops with invalid bounds
2. trim_to_video_duration: clamp loops running past the timeline end, drop
   those starting at or after it
3. rename_duplicates: suffix repeated names with " (n)"
4. adjust_overlaps: greedily reposition overlapping loops, in start order,
   next to the loop they collide with; drop those that cannot be placed

The input collection is never mutated. Every change is recorded in the
returned audit trail.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .config import PlannerSettings
from .intervals import duration, is_structurally_valid, overlaps, sort_loops_by_start_time
from .models import Loop

logger = logging.getLogger(__name__)

REASON_INSUFFICIENT_SPACE = "could not resolve overlap — insufficient space"
REASON_MAX_ATTEMPTS = "maximum attempts exceeded"


class ModificationType(str, Enum):
    """Kinds of change the resolver can make."""

    REMOVED = "removed"
    TRIMMED = "trimmed"
    RENAMED = "renamed"
    ADJUSTED = "adjusted"


@dataclass(frozen=True)
class ResolutionOptions:
    """Phase toggles for resolution (all enabled by default)."""

    remove_invalid: bool = True
    trim_to_video_duration: bool = True
    rename_duplicates: bool = True
    adjust_overlaps: bool = True


@dataclass(frozen=True)
class LoopModification:
    """One entry of the resolution audit trail."""

    type: ModificationType
    loop_id: str
    reason: str
    original: Loop
    modified: Optional[Loop] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "loop_id": self.loop_id,
            "reason": self.reason,
            "original": self.original.to_dict(),
            "modified": self.modified.to_dict() if self.modified else None,
        }


@dataclass
class ConflictResolutionResult:
    """Result of conflict resolution process."""

    resolved_loops: List[Loop] = field(default_factory=list)
    removed_loops: List[Loop] = field(default_factory=list)
    modifications: List[LoopModification] = field(default_factory=list)

    def modifications_of(self, kind: ModificationType) -> List[LoopModification]:
        return [m for m in self.modifications if m.type == kind]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for reporting."""
        return {
            "resolved_count": len(self.resolved_loops),
            "removed_count": len(self.removed_loops),
            "modifications": [m.to_dict() for m in self.modifications],
        }


class LoopConflictResolver:
    """
    Resolves conflicts in a loop collection.

    Overlap adjustment is a deterministic, locally greedy repacking, not an
    optimal one: a loop colliding with an accepted loop is first moved to
    start at that loop's end, then, if it would run past the timeline, to end
    at that loop's start. Each loop gets at most ``max_attempts`` moves.
    """

    def __init__(
        self,
        options: Optional[ResolutionOptions] = None,
        settings: Optional[PlannerSettings] = None,
    ):
        """
        Initialize conflict resolver.

        Args:
            options: Phase toggles (all phases enabled if not provided)
            settings: Planner settings, for the attempt limit
        """
        self.options = options or ResolutionOptions()
        self.settings = settings or PlannerSettings()
        self.max_attempts = self.settings.max_resolve_attempts

    def resolve(
        self,
        loops: Sequence[Loop],
        timeline_length: Optional[float] = None,
    ) -> ConflictResolutionResult:
        """
        Full resolution pipeline.

        Args:
            loops: Collection to repair
            timeline_length: Media duration in seconds, if known

        Returns:
            ConflictResolutionResult with the clean collection, every removed
            loop and the ordered list of modifications
        """
        result = ConflictResolutionResult()
        current = list(loops)

        if self.options.remove_invalid:
            current = self._remove_invalid(current, result)

        if self.options.trim_to_video_duration and timeline_length and timeline_length > 0:
            current = self._trim_to_timeline(current, timeline_length, result)

        if self.options.rename_duplicates:
            current = self._rename_duplicates(current, result)

        if self.options.adjust_overlaps:
            current = self._adjust_overlaps(current, timeline_length, result)

        result.resolved_loops = current

        logger.info(
            f"Resolved {len(loops)} loops: kept {len(result.resolved_loops)}, "
            f"removed {len(result.removed_loops)}, "
            f"{len(result.modifications)} modifications"
        )

        return result

    def _record(
        self,
        result: ConflictResolutionResult,
        kind: ModificationType,
        original: Loop,
        reason: str,
        modified: Optional[Loop] = None,
    ) -> None:
        result.modifications.append(
            LoopModification(
                type=kind,
                loop_id=original.id,
                reason=reason,
                original=original,
                modified=modified,
            )
        )
        if kind == ModificationType.REMOVED:
            result.removed_loops.append(original)
        logger.debug(f"[{kind.value}] {original.id} ('{original.name}'): {reason}")

    def _remove_invalid(
        self, loops: List[Loop], result: ConflictResolutionResult
    ) -> List[Loop]:
        kept = []
        for loop in loops:
            if is_structurally_valid(loop):
                kept.append(loop)
            else:
                self._record(
                    result,
                    ModificationType.REMOVED,
                    loop,
                    f"Invalid time range ({loop.start_time} - {loop.end_time})",
                )
        return kept

    def _trim_to_timeline(
        self,
        loops: List[Loop],
        timeline_length: float,
        result: ConflictResolutionResult,
    ) -> List[Loop]:
        kept = []
        for loop in loops:
            if not loop.end_time > timeline_length:
                kept.append(loop)
                continue

            if loop.start_time >= timeline_length:
                self._record(
                    result,
                    ModificationType.REMOVED,
                    loop,
                    f"Starts after video end ({loop.start_time} >= {timeline_length})",
                )
                continue

            trimmed = loop.with_bounds(loop.start_time, timeline_length)
            self._record(
                result,
                ModificationType.TRIMMED,
                loop,
                f"End trimmed from {loop.end_time} to {timeline_length}",
                trimmed,
            )
            kept.append(trimmed)
        return kept

    def _rename_duplicates(
        self, loops: List[Loop], result: ConflictResolutionResult
    ) -> List[Loop]:
        """
        Append " (n)" to the n-th occurrence of each normalized name.

        New names are not checked against the rest of the collection, so
        ["Practice", "Practice", "Practice (2)"] still ends with two loops
        named "Practice (2)".
        """
        occurrences: Dict[str, int] = {}
        renamed_loops = []

        for loop in loops:
            key = loop.normalized_name
            occurrences[key] = occurrences.get(key, 0) + 1
            count = occurrences[key]

            if count == 1:
                renamed_loops.append(loop)
                continue

            new_name = f"{loop.name} ({count})"
            renamed = replace(loop, name=new_name)
            self._record(
                result,
                ModificationType.RENAMED,
                loop,
                f"Renamed duplicate '{loop.name}' to '{new_name}'",
                renamed,
            )
            renamed_loops.append(renamed)

        return renamed_loops

    def _adjust_overlaps(
        self,
        loops: List[Loop],
        timeline_length: Optional[float],
        result: ConflictResolutionResult,
    ) -> List[Loop]:
        accepted: List[Loop] = []

        for loop in sort_loops_by_start_time(loops):
            placed, reason = self._place(loop, accepted, timeline_length)

            if placed is None:
                self._record(result, ModificationType.REMOVED, loop, reason)
                continue

            if placed is not loop:
                self._record(
                    result,
                    ModificationType.ADJUSTED,
                    loop,
                    f"Moved to {placed.start_time} - {placed.end_time}",
                    placed,
                )
            accepted.append(placed)

        return accepted

    def _place(
        self,
        loop: Loop,
        accepted: List[Loop],
        timeline_length: Optional[float],
    ) -> Tuple[Optional[Loop], str]:
        """
        Find a spot for ``loop`` that overlaps nothing in ``accepted``.

        Returns:
            (placed loop or None, removal reason)
        """
        current = loop
        length = duration(loop)
        attempts = 0

        while True:
            blocker = next((a for a in accepted if overlaps(current, a)), None)
            if blocker is None:
                return current, ""

            attempts += 1
            if attempts > self.max_attempts:
                return None, REASON_MAX_ATTEMPTS

            new_start = blocker.end_time
            new_end = new_start + length

            if timeline_length and new_end > timeline_length:
                new_end = blocker.start_time
                new_start = new_end - length
                if new_start < 0:
                    return None, REASON_INSUFFICIENT_SPACE

            current = current.with_bounds(new_start, new_end)


def resolve_loop_conflicts(
    loops: Sequence[Loop],
    timeline_length: Optional[float] = None,
    options: Optional[ResolutionOptions] = None,
    settings: Optional[PlannerSettings] = None,
) -> ConflictResolutionResult:
    """Convenience function to run the resolver once."""
    return LoopConflictResolver(options, settings).resolve(loops, timeline_length)
