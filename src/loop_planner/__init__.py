"""
Loop Planner

Conflict detection and resolution for named loops on a media timeline:
validation, placement suggestions, whole-collection repair and health
reporting.
"""

from .conflict_detection import LoopConflictDetector, LoopConflicts, LoopOverlap, detect_loop_conflicts
from .conflict_resolution import (
    ConflictResolutionResult,
    LoopConflictResolver,
    LoopModification,
    ModificationType,
    ResolutionOptions,
    resolve_loop_conflicts,
)
from .config import PlannerSettings, load_settings
from .field_validation import FieldValidator
from .health import CollectionHealthReporter, analyze_for_debug, validate_loop_collection
from .intervals import duration, is_structurally_valid, overlaps
from .models import Loop, LoopValidationError, LoopValidationResult, TimeRange, create_loop
from .placement import get_loop_creation_suggestions, suggest_non_overlapping_time_range
from .validation import LoopValidator, validate_loop, validate_multiple_loops

__version__ = "0.1.0"
__author__ = "Loop Planner Team"

__all__ = [
    "CollectionHealthReporter",
    "ConflictResolutionResult",
    "FieldValidator",
    "Loop",
    "LoopConflictDetector",
    "LoopConflictResolver",
    "LoopConflicts",
    "LoopModification",
    "LoopOverlap",
    "LoopValidationError",
    "LoopValidationResult",
    "LoopValidator",
    "ModificationType",
    "PlannerSettings",
    "ResolutionOptions",
    "TimeRange",
    "analyze_for_debug",
    "create_loop",
    "detect_loop_conflicts",
    "duration",
    "get_loop_creation_suggestions",
    "is_structurally_valid",
    "load_settings",
    "overlaps",
    "resolve_loop_conflicts",
    "suggest_non_overlapping_time_range",
    "validate_loop",
    "validate_loop_collection",
    "validate_multiple_loops",
]
