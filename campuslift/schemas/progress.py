"""
Progress record schemas for campuslift.

Defines Pydantic models for the course progress snapshot:
- Module state and item completion requirements
- Submission statistics
- Progress records (one per course module)

Raw records are validated here, once, at the fetch boundary. Everything
downstream works with the typed models only.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Iterable, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


class ModuleState(str, Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    STARTED = "started"
    COMPLETED = "completed"


class _RecordModel(BaseModel):
    """Base for snapshot models: immutable, camelCase or snake_case keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# -----------------------------------------------------------------------------
# Module items
# -----------------------------------------------------------------------------


class CompletionRequirement(_RecordModel):
    type: Optional[str] = None  # must_view, must_submit, min_score, ...
    completed: bool = False


class ModuleItem(_RecordModel):
    id: str
    title: str
    type: str = "Page"  # Assignment, Quiz, Discussion, Page, ...
    completion_requirement: Optional[CompletionRequirement] = None


class SubmissionCounts(_RecordModel):
    graded: int = Field(default=0, ge=0)
    ungraded: int = Field(default=0, ge=0)
    not_submitted: int = Field(default=0, ge=0)

    @property
    def total(self) -> int:
        return self.graded + self.ungraded + self.not_submitted


# -----------------------------------------------------------------------------
# Progress record
# -----------------------------------------------------------------------------


class ProgressRecord(_RecordModel):
    """
    One course module as delivered by the data source.

    position is an ordering key only: it may have gaps or duplicates.
    """
    id: str
    name: str
    position: int
    state: ModuleState
    unlock_at: Optional[datetime] = None
    prerequisite_ids: frozenset[str] = Field(
        default_factory=frozenset,
        validation_alias=AliasChoices("prerequisiteIds", "prerequisiteModuleIds", "prerequisite_ids"),
    )
    items: list[ModuleItem] = Field(
        default_factory=list,
        validation_alias=AliasChoices("items", "moduleItems"),
    )
    submission_counts: Optional[SubmissionCounts] = Field(
        default=None,
        validation_alias=AliasChoices("submissionCounts", "submissionStatistics", "submission_counts"),
    )

    @field_validator("unlock_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Naive timestamps are stored as UTC so they compare with aware clocks
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def parse_records(raw_records: Iterable[Any]) -> list[ProgressRecord]:
    """
    Validate raw progress entries into ProgressRecord models.

    Entries that are already ProgressRecord instances pass through untouched.
    Malformed entries are skipped with a warning; the remaining entries keep
    their input order.

    Args:
        raw_records: Iterable of mappings (camelCase or snake_case keys)
            and/or ProgressRecord instances

    Returns:
        List of valid records
    """
    records = []
    for index, entry in enumerate(raw_records):
        if isinstance(entry, ProgressRecord):
            records.append(entry)
            continue
        try:
            records.append(ProgressRecord.model_validate(entry))
        except ValidationError as e:
            fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
            logger.warning(f"Skipping malformed progress record #{index}: invalid {', '.join(fields) or 'entry'}")
    return records
