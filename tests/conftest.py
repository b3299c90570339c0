"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides:
- Custom markers for test categorization
- Shared fixtures for common test setup
"""

import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

import pytest
from _pytest.config import Config

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from loop_planner.models import Loop  # noqa: E402


def pytest_configure(config: Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "cli: marks command-line interface tests")


# =============================================================================
# FIXTURES - Common test setup
# =============================================================================


@pytest.fixture
def make_loop() -> Callable[..., Loop]:
    """Factory for loops with predictable ids (loop-1, loop-2, ...)."""
    counter = {"n": 0}

    def _make(start: float, end: float, name: Optional[str] = None, **kwargs: Any) -> Loop:
        counter["n"] += 1
        loop_id = kwargs.pop("id", f"loop-{counter['n']}")
        return Loop(
            id=loop_id,
            name=name if name is not None else f"Loop {counter['n']}",
            start_time=start,
            end_time=end,
            **kwargs,
        )

    return _make


@pytest.fixture
def video_duration() -> float:
    """Standard timeline length (seconds)."""
    return 100.0


@pytest.fixture
def clean_loops(make_loop: Callable[..., Loop]) -> List[Loop]:
    """A valid, non-overlapping collection."""
    return [
        make_loop(0, 10, "Intro"),
        make_loop(20, 35, "Verse"),
        make_loop(35, 50, "Chorus"),
        make_loop(70, 90, "Solo"),
    ]


@pytest.fixture
def messy_loops(make_loop: Callable[..., Loop]) -> List[Loop]:
    """A collection with every kind of conflict."""
    return [
        make_loop(10, 30, "Practice"),
        make_loop(25, 45, "practice "),
        make_loop(-5, 10, "Negative"),
        make_loop(50, 50, "Empty"),
        make_loop(float("nan"), 20, "Broken"),
        make_loop(90, 120, "Outro"),
        make_loop(110, 130, "Beyond"),
    ]
