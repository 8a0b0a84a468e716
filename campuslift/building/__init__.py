"""
campuslift Building - Runtime components for the library floors.

This module provides:
- Evaluator: derived progress facts per course module
- FloorCatalog: ordered floors and the current-floor pointer
- FloorSelector: elevator picker state machine
- TransitionCoordinator: fade-out / swap / fade-in floor switches
- InputEdgeSource: edge-triggered input signals
- LibraryScene: activation, ready gate and teardown
"""

from .evaluator import (
    StatusCategory,
    DerivedProgress,
    PrerequisiteInfo,
    STATUS_COLORS,
    utc_now,
    as_utc,
    is_accessible,
    total_item_count,
    completed_item_count,
    completion_percentage,
    status_category,
    status_text,
    status_colors,
    evaluate,
    prerequisites_satisfied,
    prerequisite_info,
    has_ungraded_work,
    has_missing_submissions,
    submission_summary,
)

from .catalog import (
    DEFAULT_LOBBY_NAME,
    Floor,
    FloorKind,
    FloorCatalog,
)

from .input_edges import (
    EdgeSignal,
    InputEdgeSource,
    Subscription,
)

from .selector import (
    FloorSelector,
    SelectorRenderer,
    SelectorView,
)

from .transition import (
    AsyncioFader,
    Fader,
    FloorRenderer,
    InFlight,
    InstantFader,
    TransitionCoordinator,
    TransitionPhase,
    once,
)

from .scene import (
    LibraryScene,
    SceneActivationError,
)

__all__ = [
    # Evaluator
    "StatusCategory",
    "DerivedProgress",
    "PrerequisiteInfo",
    "STATUS_COLORS",
    "utc_now",
    "as_utc",
    "is_accessible",
    "total_item_count",
    "completed_item_count",
    "completion_percentage",
    "status_category",
    "status_text",
    "status_colors",
    "evaluate",
    "prerequisites_satisfied",
    "prerequisite_info",
    "has_ungraded_work",
    "has_missing_submissions",
    "submission_summary",
    # Catalog
    "DEFAULT_LOBBY_NAME",
    "Floor",
    "FloorKind",
    "FloorCatalog",
    # Input
    "EdgeSignal",
    "InputEdgeSource",
    "Subscription",
    # Selector
    "FloorSelector",
    "SelectorRenderer",
    "SelectorView",
    # Transition
    "AsyncioFader",
    "Fader",
    "FloorRenderer",
    "InFlight",
    "InstantFader",
    "TransitionCoordinator",
    "TransitionPhase",
    "once",
    # Scene
    "LibraryScene",
    "SceneActivationError",
]
