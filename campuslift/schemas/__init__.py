"""
campuslift Schemas - Pydantic models for the course progress snapshot.

This module exports the record schemas and the boundary validator used by
every data source before records reach the floor catalog.
"""

from .progress import (
    ModuleState,
    CompletionRequirement,
    ModuleItem,
    SubmissionCounts,
    ProgressRecord,
    parse_records,
)

__all__ = [
    'ModuleState',
    'CompletionRequirement',
    'ModuleItem',
    'SubmissionCounts',
    'ProgressRecord',
    'parse_records',
]
