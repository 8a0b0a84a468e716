"""Shared fixtures and test doubles for campuslift tests."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import pytest

from campuslift.building import Floor, FloorCatalog, SelectorView
from campuslift.schemas import ProgressRecord


NOW = datetime(2025, 9, 20, 12, 0, tzinfo=timezone.utc)


def build_record(
    record_id: str,
    position: int,
    state: str = "unlocked",
    name: Optional[str] = None,
    unlock_at: Optional[datetime] = None,
    items: Optional[list[dict]] = None,
    prerequisite_ids: tuple[str, ...] = (),
    submission_counts: Optional[dict] = None,
) -> ProgressRecord:
    return ProgressRecord(
        id=record_id,
        name=name or f"Module {record_id}",
        position=position,
        state=state,
        unlock_at=unlock_at,
        items=items or [],
        prerequisite_ids=prerequisite_ids,
        submission_counts=submission_counts,
    )


def build_items(completed: int, total: int, extra_without_requirement: int = 0) -> list[dict]:
    """Items with `total` requirements, the first `completed` of them done."""
    items = [
        {
            "id": f"item_{i}",
            "title": f"Item {i}",
            "type": "Assignment",
            "completionRequirement": {"type": "must_submit", "completed": i < completed},
        }
        for i in range(total)
    ]
    items += [
        {"id": f"page_{i}", "title": f"Page {i}", "type": "Page"}
        for i in range(extra_without_requirement)
    ]
    return items


# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------

class RecordingRenderer:
    """FloorRenderer that records every call in order."""

    def __init__(self):
        self.calls: list[tuple] = []

    def render_floor(self, floor: Floor):
        self.calls.append(("render_floor", floor))

    def reposition(self, x: float, y: float):
        self.calls.append(("reposition", x, y))

    @property
    def rendered(self) -> list[Floor]:
        return [call[1] for call in self.calls if call[0] == "render_floor"]

    @property
    def positions(self) -> list[tuple[float, float]]:
        return [(call[1], call[2]) for call in self.calls if call[0] == "reposition"]


class ManualFader:
    """Fader whose completions are fired by the test, as often as it likes."""

    def __init__(self):
        self.started: list[tuple[str, int, Callable[[], None]]] = []

    def fade_out(self, duration_ms: int, on_complete: Callable[[], None]):
        self.started.append(("out", duration_ms, on_complete))

    def fade_in(self, duration_ms: int, on_complete: Callable[[], None]):
        self.started.append(("in", duration_ms, on_complete))

    @property
    def kinds(self) -> list[str]:
        return [kind for kind, _, _ in self.started]

    def fire(self, index: int = -1):
        """Signal completion of a started fade (default: the latest)."""
        self.started[index][2]()


class RecordingSelectorRenderer:
    def __init__(self):
        self.views: list[SelectorView] = []
        self.hide_count = 0

    def update(self, view: SelectorView):
        self.views.append(view)

    def hide(self):
        self.hide_count += 1


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def make_record():
    return build_record


@pytest.fixture()
def five_records() -> list[ProgressRecord]:
    """Positions 1..5; record 4 locked until a future date."""
    return [
        build_record("m1", 1, state="completed", items=build_items(3, 3)),
        build_record("m2", 2, state="started", items=build_items(2, 5), prerequisite_ids=("m1",)),
        build_record("m3", 3, state="unlocked", unlock_at=NOW - timedelta(days=1)),
        build_record("m4", 4, state="locked", unlock_at=NOW + timedelta(days=10)),
        build_record("m5", 5, state="unlocked"),
    ]


@pytest.fixture()
def catalog(five_records, now) -> FloorCatalog:
    catalog = FloorCatalog()
    catalog.build(five_records, now=now)
    return catalog


@pytest.fixture()
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture()
def fader() -> ManualFader:
    return ManualFader()


@pytest.fixture()
def selector_renderer() -> RecordingSelectorRenderer:
    return RecordingSelectorRenderer()
