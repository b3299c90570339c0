"""
Collection health reporting.

Turns detector output into a human-facing summary (critical issues, warnings
and actionable suggestions) and computes a debug view of the collection:
bounds, gaps, merged overlap regions and timeline coverage.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .config import PlannerSettings
from .conflict_detection import LoopConflictDetector, LoopConflicts
from .intervals import is_structurally_valid, sort_loops_by_start_time
from .models import Loop
from .statistics import calculate_total_loops_duration, get_active_loops, get_loop_statistics

logger = logging.getLogger(__name__)


@dataclass
class CollectionValidationResult:
    """Health summary of a loop collection."""

    critical_issues: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.critical_issues) == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "critical_issues": list(self.critical_issues),
            "warnings": list(self.warnings),
            "suggestions": list(self.suggestions),
        }


@dataclass(frozen=True)
class TimeSpan:
    """A span of the timeline (gap or overlap region)."""

    start: float
    end: float
    loop_count: int = 0

    @property
    def duration(self) -> float:
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start,
            "end": self.end,
            "duration": self.duration,
            "loop_count": self.loop_count,
        }


@dataclass
class DebugAnalysis:
    """Whole-collection diagnostics."""

    total_loops: int
    earliest_start: Optional[float]
    latest_end: Optional[float]
    total_duration: float
    gaps: List[TimeSpan]
    overlap_regions: List[TimeSpan]
    conflicts: LoopConflicts
    validation: CollectionValidationResult
    statistics: Dict[str, Any]
    coverage_percent: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        most_played = self.statistics.get("most_played")
        data: Dict[str, Any] = {
            "total_loops": self.total_loops,
            "earliest_start": self.earliest_start,
            "latest_end": self.latest_end,
            "total_duration": self.total_duration,
            "gaps": [g.to_dict() for g in self.gaps],
            "overlap_regions": [r.to_dict() for r in self.overlap_regions],
            "conflicts": self.conflicts.to_dict(),
            "validation": self.validation.to_dict(),
            "statistics": {
                **self.statistics,
                "most_played": most_played.id if most_played else None,
            },
        }
        if self.coverage_percent is not None:
            data["coverage_percent"] = self.coverage_percent
        return data


class CollectionHealthReporter:
    """Builds health summaries and debug analyses for loop collections."""

    def __init__(
        self,
        settings: Optional[PlannerSettings] = None,
        detector: Optional[LoopConflictDetector] = None,
    ):
        self.settings = settings or PlannerSettings()
        self.detector = detector or LoopConflictDetector()

    def validate_collection(
        self,
        loops: Sequence[Loop],
        timeline_length: Optional[float] = None,
        conflicts: Optional[LoopConflicts] = None,
    ) -> CollectionValidationResult:
        """
        Classify the conflicts of a collection.

        Invalid times and out-of-bounds loops are critical; overlaps and
        duplicate names are warnings and never invalidate the collection.
        Pass ``conflicts`` to reuse an earlier detection of the same loops.
        """
        result = CollectionValidationResult()

        if not loops:
            result.warnings.append("No loops defined")
            result.suggestions.append("Add a loop to start practicing")
            return result

        if conflicts is None:
            conflicts = self.detector.detect(loops, timeline_length)
        self._classify(conflicts, result)

        total_duration = calculate_total_loops_duration(loops)
        if timeline_length and total_duration > timeline_length * self.settings.overfill_ratio:
            percent = round(self.settings.overfill_ratio * 100)
            result.suggestions.append(
                f"Total loop duration exceeds {percent}% of video duration, "
                "consider consolidating loops"
            )

        active_count = len(get_active_loops(loops))
        if active_count == 0:
            result.suggestions.append("No active loops, activate a loop to start practicing")
        elif active_count > self.settings.max_active_loops:
            result.suggestions.append(
                f"{active_count} active loops, consider deactivating some "
                f"(recommended: {self.settings.max_active_loops} or fewer)"
            )

        if not result.is_valid:
            logger.warning(
                f"Loop collection has {len(result.critical_issues)} critical issue(s)"
            )

        return result

    def _classify(
        self, conflicts: LoopConflicts, result: CollectionValidationResult
    ) -> None:
        if conflicts.invalid_times:
            result.critical_issues.append(
                f"{len(conflicts.invalid_times)} loop(s) with invalid time ranges"
            )

        if conflicts.exceeding_duration:
            result.critical_issues.append(
                f"{len(conflicts.exceeding_duration)} loop(s) exceed video duration"
            )

        if conflicts.overlapping:
            result.warnings.append(
                f"{len(conflicts.overlapping)} overlapping loop pair(s) detected"
            )
            result.suggestions.append(
                "Use automatic conflict resolution to adjust overlapping loops"
            )

        if conflicts.duplicate_names:
            groups = conflicts.duplicate_groups()
            result.warnings.append(
                f"{len(conflicts.duplicate_names)} loop(s) share "
                f"{len(groups)} duplicate name(s)"
            )
            result.suggestions.append("Rename loops with identical names")

    def analyze_for_debug(
        self,
        loops: Sequence[Loop],
        timeline_length: Optional[float] = None,
    ) -> DebugAnalysis:
        """Compute bounds, gaps, merged overlap regions and coverage."""
        conflicts = self.detector.detect(loops, timeline_length)
        valid_loops = [loop for loop in loops if is_structurally_valid(loop)]
        total_duration = calculate_total_loops_duration(loops)

        coverage_percent = None
        if timeline_length and timeline_length > 0:
            coverage_percent = total_duration / timeline_length * 100

        return DebugAnalysis(
            total_loops=len(loops),
            earliest_start=min((l.start_time for l in valid_loops), default=None),
            latest_end=max((l.end_time for l in valid_loops), default=None),
            total_duration=total_duration,
            gaps=self._find_gaps(valid_loops),
            overlap_regions=self._merge_overlap_regions(conflicts),
            conflicts=conflicts,
            validation=self.validate_collection(loops, timeline_length, conflicts),
            statistics=get_loop_statistics(loops),
            coverage_percent=coverage_percent,
        )

    def _find_gaps(self, loops: Sequence[Loop]) -> List[TimeSpan]:
        """Uncovered spans between the first start and the last end."""
        if not loops:
            return []

        sorted_loops = sort_loops_by_start_time(loops)
        gaps: List[TimeSpan] = []
        current_end = sorted_loops[0].end_time

        for loop in sorted_loops[1:]:
            if loop.start_time > current_end:
                gaps.append(TimeSpan(current_end, loop.start_time))
            current_end = max(current_end, loop.end_time)

        return gaps

    def _merge_overlap_regions(self, conflicts: LoopConflicts) -> List[TimeSpan]:
        """Coalesce pairwise overlaps sharing the exact same span."""
        regions: Dict[tuple, List[str]] = {}

        for overlap in conflicts.overlapping:
            key = (overlap.overlap_start, overlap.overlap_end)
            ids = regions.setdefault(key, [])
            for loop_id in overlap.loop_ids:
                if loop_id not in ids:
                    ids.append(loop_id)

        return [
            TimeSpan(start, end, loop_count=len(ids))
            for (start, end), ids in sorted(regions.items())
        ]


def validate_loop_collection(
    loops: Sequence[Loop],
    timeline_length: Optional[float] = None,
    settings: Optional[PlannerSettings] = None,
) -> CollectionValidationResult:
    """Convenience wrapper around CollectionHealthReporter.validate_collection()."""
    return CollectionHealthReporter(settings).validate_collection(loops, timeline_length)


def analyze_for_debug(
    loops: Sequence[Loop],
    timeline_length: Optional[float] = None,
    settings: Optional[PlannerSettings] = None,
) -> DebugAnalysis:
    """Convenience wrapper around CollectionHealthReporter.analyze_for_debug()."""
    return CollectionHealthReporter(settings).analyze_for_debug(loops, timeline_length)
