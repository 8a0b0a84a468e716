"""
FloorCatalog - Ordered floors built from a progress snapshot.

Floor 0 is always the lobby. Floors 1..N are the course modules sorted by
position. The catalog is rebuilt wholesale from each new snapshot; floors
are never patched in place.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Optional

from campuslift.schemas import ProgressRecord, parse_records

from .evaluator import DerivedProgress, PrerequisiteInfo, as_utc, evaluate, prerequisite_info, utc_now

logger = logging.getLogger(__name__)


DEFAULT_LOBBY_NAME = "Lobby"


class FloorKind(str, Enum):
    LOBBY = "lobby"
    MODULE = "module"


@dataclass(frozen=True)
class Floor:
    """One navigable floor of the building."""
    floor_number: int
    kind: FloorKind
    name: str
    record: Optional[ProgressRecord] = None
    accessible: bool = True
    status_text: Optional[str] = None
    progress: Optional[DerivedProgress] = None

    @property
    def is_lobby(self) -> bool:
        return self.kind == FloorKind.LOBBY

    @property
    def record_id(self) -> Optional[str]:
        return self.record.id if self.record else None


class FloorCatalog:
    """
    Build and hold the floor list plus the current-floor pointer.

    The pointer is always a valid index into the current floor tuple.
    """

    def __init__(self, lobby_name: str = DEFAULT_LOBBY_NAME):
        self.lobby_name = lobby_name
        self._records: tuple[ProgressRecord, ...] = ()
        self._floors: tuple[Floor, ...] = (self._make_lobby(),)
        self._current = 0

    def _make_lobby(self) -> Floor:
        return Floor(floor_number=0, kind=FloorKind.LOBBY, name=self.lobby_name, accessible=True)

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def build(self, records: Iterable[Any], now: Optional[datetime] = None) -> tuple[Floor, ...]:
        """
        Replace the floor list with one built from a fresh snapshot.

        Args:
            records: ProgressRecord instances or raw mappings; malformed
                entries are skipped with a warning
            now: Clock value for unlock checks, naive values taken as UTC
                (default: current UTC time)

        Returns:
            The new floor tuple (lobby first)
        """
        now = as_utc(now or utc_now())
        valid = parse_records(records)
        # sorted() is stable: equal positions keep their input order
        ordered = sorted(valid, key=lambda record: record.position)

        floors = [self._make_lobby()]
        for index, record in enumerate(ordered):
            derived = evaluate(record, now)
            floors.append(Floor(
                floor_number=index + 1,
                kind=FloorKind.MODULE,
                name=record.name,
                record=record,
                accessible=derived.accessible,
                status_text=derived.status_text,
                progress=derived,
            ))

        self._records = tuple(valid)
        self._floors = tuple(floors)
        if self._current >= len(self._floors):
            logger.info(f"Current floor {self._current} no longer exists, returning to lobby")
            self._current = 0

        logger.info(f"Built floor catalog: {len(ordered)} module floors")
        return self._floors

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    @property
    def floors(self) -> tuple[Floor, ...]:
        """All floors in floor-number order (read-only)."""
        return self._floors

    @property
    def records(self) -> tuple[ProgressRecord, ...]:
        """The validated snapshot the floors were built from."""
        return self._records

    @property
    def floor_count(self) -> int:
        return len(self._floors)

    @property
    def current_floor_number(self) -> int:
        return self._current

    def current_floor(self) -> Floor:
        """Get the floor at the current pointer."""
        return self._floors[self._current]

    def get_floor(self, floor_number: int) -> Optional[Floor]:
        """Get a floor by number, or None if out of range."""
        if 0 <= floor_number < len(self._floors):
            return self._floors[floor_number]
        return None

    def find_floor_for_record(self, record_id: str) -> Optional[Floor]:
        """Get the floor showing a given record."""
        for floor in self._floors:
            if floor.record_id == record_id:
                return floor
        return None

    def prerequisite_info(self, floor_number: int) -> Optional[PrerequisiteInfo]:
        """Get prerequisite info for a module floor, or None for the lobby."""
        floor = self.get_floor(floor_number)
        if floor is None or floor.record is None:
            return None
        return prerequisite_info(floor.record, self._records)

    # -------------------------------------------------------------------------
    # Current floor
    # -------------------------------------------------------------------------

    def set_current_floor(self, floor_number: int) -> bool:
        """
        Move the current-floor pointer.

        Returns True if moved, False (with no state change) if the floor
        number is out of range.
        """
        if 0 <= floor_number < len(self._floors):
            self._current = floor_number
            return True

        logger.warning(f"Ignoring switch to floor {floor_number}: valid floors are 0-{len(self._floors) - 1}")
        return False
