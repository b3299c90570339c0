"""
Tests for collection health reporting and debug analysis.
"""

from unittest.mock import patch

import pytest

from loop_planner.config import PlannerSettings
from loop_planner.health import CollectionHealthReporter, analyze_for_debug, validate_loop_collection


class TestValidateCollection:
    """Tests for validate_loop_collection()."""

    def test_empty_collection(self) -> None:
        result = validate_loop_collection([])

        assert result.is_valid is True
        assert result.critical_issues == []
        assert len(result.warnings) == 1
        assert len(result.suggestions) == 1

    def test_clean_collection(self, make_loop, video_duration) -> None:
        loops = [make_loop(0, 10, "A", is_active=True), make_loop(20, 30, "B")]

        result = validate_loop_collection(loops, video_duration)

        assert result.is_valid
        assert result.critical_issues == []
        assert result.warnings == []
        assert result.suggestions == []

    def test_invalid_and_exceeding_are_critical(self, messy_loops, video_duration) -> None:
        result = validate_loop_collection(messy_loops, video_duration)

        assert result.is_valid is False
        assert "3 loop(s) with invalid time ranges" in result.critical_issues
        assert "2 loop(s) exceed video duration" in result.critical_issues

    def test_no_duration_check_without_length(self, make_loop) -> None:
        result = validate_loop_collection([make_loop(0, 500, is_active=True)])
        assert result.is_valid

    def test_overlaps_and_duplicates_only_warn(self, make_loop) -> None:
        loops = [
            make_loop(0, 20, "Riff", is_active=True),
            make_loop(10, 30, "riff"),
        ]

        result = validate_loop_collection(loops, 100)

        assert result.is_valid is True
        assert len(result.warnings) == 2
        assert any("overlapping" in w for w in result.warnings)
        assert any("duplicate" in w for w in result.warnings)
        assert len(result.suggestions) == 2

    def test_overfilled_timeline(self, make_loop) -> None:
        loops = [make_loop(0, 80, is_active=True), make_loop(0, 80)]
        result = validate_loop_collection(loops, 100)
        assert any("150%" in s for s in result.suggestions)

    def test_no_active_loops(self, make_loop) -> None:
        result = validate_loop_collection([make_loop(0, 10)], 100)
        assert result.suggestions == ["No active loops, activate a loop to start practicing"]

    def test_too_many_active_loops(self, make_loop) -> None:
        loops = [make_loop(i * 10, i * 10 + 5, is_active=True) for i in range(6)]
        result = validate_loop_collection(loops, 100)
        assert len(result.suggestions) == 1
        assert result.suggestions[0].startswith("6 active loops")

    def test_configured_active_limit(self, make_loop) -> None:
        loops = [make_loop(i * 10, i * 10 + 5, is_active=True) for i in range(3)]
        reporter = CollectionHealthReporter(PlannerSettings(max_active_loops=2))
        assert len(reporter.validate_collection(loops, 100).suggestions) == 1


class TestAnalyzeForDebug:
    def test_bounds_and_gaps(self, make_loop) -> None:
        loops = [make_loop(50, 60), make_loop(0, 10), make_loop(5, 20), make_loop(30, 40)]

        analysis = analyze_for_debug(loops, 100)

        assert analysis.total_loops == 4
        assert analysis.earliest_start == 0
        assert analysis.latest_end == 60
        assert [(g.start, g.end) for g in analysis.gaps] == [(20, 30), (40, 50)]

    def test_coverage(self, make_loop) -> None:
        analysis = analyze_for_debug([make_loop(0, 10), make_loop(20, 40)], 200)
        assert analysis.total_duration == 30
        assert analysis.coverage_percent == pytest.approx(15.0)

    def test_coverage_omitted_without_length(self, make_loop) -> None:
        analysis = analyze_for_debug([make_loop(0, 10)])

        assert analysis.coverage_percent is None
        assert "coverage_percent" not in analysis.to_dict()

    def test_overlap_regions_merged(self, make_loop) -> None:
        a = make_loop(0, 30)
        b = make_loop(10, 20)
        c = make_loop(10, 20)
        d = make_loop(50, 70)
        e = make_loop(60, 80)

        analysis = analyze_for_debug([a, b, c, d, e], 100)

        regions = [(r.start, r.end, r.loop_count) for r in analysis.overlap_regions]
        # a/b, a/c and b/c all share [10, 20]
        assert regions == [(10, 20, 3), (60, 70, 2)]

    def test_empty_collection(self) -> None:
        analysis = analyze_for_debug([], 100)

        assert analysis.earliest_start is None
        assert analysis.latest_end is None
        assert analysis.gaps == []
        assert analysis.coverage_percent == 0
        assert analysis.validation.is_valid

    def test_invalid_loops_ignored_for_bounds(self, make_loop) -> None:
        analysis = analyze_for_debug([make_loop(-10, 5), make_loop(10, 20)])
        assert analysis.earliest_start == 10

    def test_to_dict(self, messy_loops, video_duration) -> None:
        data = analyze_for_debug(messy_loops, video_duration).to_dict()

        assert data["total_loops"] == len(messy_loops)
        assert data["validation"]["is_valid"] is False
        assert set(data["statistics"]) >= {"total_count", "most_played"}

    def test_detection_runs_once(self, messy_loops, video_duration) -> None:
        reporter = CollectionHealthReporter()

        with patch.object(reporter.detector, "detect", wraps=reporter.detector.detect) as detect:
            reporter.analyze_for_debug(messy_loops, video_duration)

        assert detect.call_count == 1


class TestReuseConflicts:
    def test_given_conflicts_are_classified(self, messy_loops, video_duration) -> None:
        reporter = CollectionHealthReporter()
        conflicts = reporter.detector.detect(messy_loops, video_duration)

        with patch.object(reporter.detector, "detect") as detect:
            result = reporter.validate_collection(messy_loops, video_duration, conflicts)

        detect.assert_not_called()
        assert result.critical_issues == validate_loop_collection(
            messy_loops, video_duration
        ).critical_issues
