"""
Evaluator - Derived progress facts for a single course module.

Provides:
- Accessibility (state + unlock date)
- Item completion counts and percentage
- Status text, category and colour theme
- Prerequisite and submission summaries

All functions are pure: the result depends only on the record(s) passed in
and, for unlock timing, the supplied clock value.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional

from campuslift.schemas import ModuleState, ProgressRecord


class StatusCategory(str, Enum):
    """Status bucket for UI display; one per status text branch."""
    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    NOT_STARTED = "not_started"
    SCHEDULED = "scheduled"     # Locked until a known date
    LOCKED = "locked"


@dataclass(frozen=True)
class DerivedProgress:
    """Computed view of a record; never persisted."""
    accessible: bool
    completion_percentage: int
    completed_item_count: int
    total_item_count: int
    status_text: str
    status_category: StatusCategory


@dataclass(frozen=True)
class PrerequisiteInfo:
    """Prerequisite summary for display."""
    has_prerequisites: bool
    prerequisite_names: list[str]
    prerequisites_met: bool


# (primary, secondary) RGB colours per module state
STATUS_COLORS: dict[ModuleState, tuple[int, int]] = {
    ModuleState.COMPLETED: (0x22C55E, 0x16A34A),  # green
    ModuleState.STARTED: (0xEAB308, 0xCA8A04),    # yellow
    ModuleState.LOCKED: (0x71717A, 0x52525B),     # grey
    ModuleState.UNLOCKED: (0x3B82F6, 0x2563EB),   # blue
}


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat a naive datetime as UTC; aware values pass through."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# -----------------------------------------------------------------------------
# Accessibility
# -----------------------------------------------------------------------------

def is_accessible(record: ProgressRecord, now: Optional[datetime] = None) -> bool:
    """
    Check whether a module may be entered.

    Locked modules are never accessible. Otherwise the module is accessible
    unless it has an unlock date that is still in the future. A naive
    `now` is taken as UTC, like stored unlock dates.
    """
    if record.state == ModuleState.LOCKED:
        return False

    if record.unlock_at is not None:
        if as_utc(now or utc_now()) < record.unlock_at:
            return False

    return True


# -----------------------------------------------------------------------------
# Completion
# -----------------------------------------------------------------------------

def total_item_count(record: ProgressRecord) -> int:
    """Count items that carry a completion requirement."""
    return sum(1 for item in record.items if item.completion_requirement is not None)


def completed_item_count(record: ProgressRecord) -> int:
    """Count requirement-bearing items whose requirement is completed."""
    return sum(
        1 for item in record.items
        if item.completion_requirement is not None and item.completion_requirement.completed
    )


def completion_percentage(record: ProgressRecord) -> int:
    """
    Percentage of requirement-bearing items completed, 0-100.

    Rounds half up (12.5 -> 13) using integer arithmetic.
    """
    total = total_item_count(record)
    if total == 0:
        return 0
    completed = completed_item_count(record)
    return (200 * completed + total) // (2 * total)


# -----------------------------------------------------------------------------
# Status
# -----------------------------------------------------------------------------

def _format_unlock_date(value: datetime) -> str:
    return f"{value.month}/{value.day}/{value.year}"


def status_category(record: ProgressRecord) -> StatusCategory:
    """Get the status bucket matching status_text()."""
    if record.state == ModuleState.COMPLETED:
        return StatusCategory.COMPLETED
    if record.state == ModuleState.LOCKED:
        return StatusCategory.SCHEDULED if record.unlock_at else StatusCategory.LOCKED
    if record.state == ModuleState.STARTED:
        return StatusCategory.IN_PROGRESS
    return StatusCategory.NOT_STARTED


def status_text(record: ProgressRecord) -> str:
    """
    Get display status text for a module.

    Returns:
        "Completed", "Unlocks M/D/YYYY", "Locked",
        "In Progress (N%)" or "Not Started"
    """
    category = status_category(record)

    if category == StatusCategory.COMPLETED:
        return "Completed"
    elif category == StatusCategory.SCHEDULED:
        return f"Unlocks {_format_unlock_date(record.unlock_at)}"
    elif category == StatusCategory.LOCKED:
        return "Locked"
    elif category == StatusCategory.IN_PROGRESS:
        return f"In Progress ({completion_percentage(record)}%)"
    else:
        return "Not Started"


def status_colors(record: ProgressRecord) -> tuple[int, int]:
    """Get (primary, secondary) colour theme for a module's state."""
    return STATUS_COLORS.get(record.state, STATUS_COLORS[ModuleState.UNLOCKED])


def evaluate(record: ProgressRecord, now: Optional[datetime] = None) -> DerivedProgress:
    """Compute every derived fact for a record in one pass."""
    return DerivedProgress(
        accessible=is_accessible(record, now),
        completion_percentage=completion_percentage(record),
        completed_item_count=completed_item_count(record),
        total_item_count=total_item_count(record),
        status_text=status_text(record),
        status_category=status_category(record),
    )


# -----------------------------------------------------------------------------
# Prerequisites
# -----------------------------------------------------------------------------

def _find_prerequisites(record: ProgressRecord, all_records: Iterable[ProgressRecord]) -> list[ProgressRecord]:
    # Unknown prerequisite ids simply match nothing
    return [other for other in all_records if other.id in record.prerequisite_ids]


def prerequisites_satisfied(record: ProgressRecord, all_records: Iterable[ProgressRecord]) -> bool:
    """
    Check whether every known prerequisite module is completed.

    Informational only: accessibility is decided by the record's own state
    and unlock date, never by this check.
    """
    if not record.prerequisite_ids:
        return True
    return all(
        prereq.state == ModuleState.COMPLETED
        for prereq in _find_prerequisites(record, all_records)
    )


def prerequisite_info(record: ProgressRecord, all_records: Iterable[ProgressRecord]) -> PrerequisiteInfo:
    """Get prerequisite names and whether they are met."""
    if not record.prerequisite_ids:
        return PrerequisiteInfo(
            has_prerequisites=False,
            prerequisite_names=[],
            prerequisites_met=True,
        )

    prerequisites = _find_prerequisites(record, all_records)
    return PrerequisiteInfo(
        has_prerequisites=True,
        prerequisite_names=[prereq.name for prereq in prerequisites],
        prerequisites_met=all(prereq.state == ModuleState.COMPLETED for prereq in prerequisites),
    )


# -----------------------------------------------------------------------------
# Submissions
# -----------------------------------------------------------------------------

def has_ungraded_work(record: ProgressRecord) -> bool:
    counts = record.submission_counts
    return counts is not None and counts.ungraded > 0


def has_missing_submissions(record: ProgressRecord) -> bool:
    counts = record.submission_counts
    return counts is not None and counts.not_submitted > 0


def submission_summary(record: ProgressRecord) -> str:
    """
    Summarize submission status, e.g. "2 graded, 1 pending, 2 missing".
    """
    counts = record.submission_counts
    if counts is None:
        return "No submission data"

    if counts.total == 0:
        return "No assignments"

    parts = []
    if counts.graded > 0:
        parts.append(f"{counts.graded} graded")
    if counts.ungraded > 0:
        parts.append(f"{counts.ungraded} pending")
    if counts.not_submitted > 0:
        parts.append(f"{counts.not_submitted} missing")

    return ", ".join(parts)
