"""
FloorSelector - Elevator floor picker state machine.

States:
- Closed: no view, only open() has an effect
- Open: a snapshot of the catalog floors, a selected index and the
  current floor number

Events arrive as method calls or as EdgeSignals from an InputEdgeSource.
While open the selector holds a scoped subscription to the edge source;
every close path releases it.
"""

import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional, Protocol

from .catalog import Floor, FloorCatalog
from .input_edges import EdgeSignal, InputEdgeSource, Subscription

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectorView:
    """Everything the selector UI needs to draw the floor list."""
    floors: tuple[Floor, ...]
    selected_index: int
    current_floor_number: int

    @property
    def selected_floor(self) -> Floor:
        return self.floors[self.selected_index]


class SelectorRenderer(Protocol):
    """UI collaborator that draws the selector."""

    def update(self, view: SelectorView) -> None: ...

    def hide(self) -> None: ...


class FloorSelector:
    """
    Interactive floor picker.

    Args:
        catalog: Floor catalog to snapshot when opening (never mutated here)
        on_floor_selected: Called with the target floor number when a
            different, accessible floor is confirmed
        renderer: Optional UI collaborator receiving SelectorView updates
        edges: Optional edge source; subscribed to only while open
    """

    def __init__(
        self,
        catalog: FloorCatalog,
        on_floor_selected: Optional[Callable[[int], None]] = None,
        renderer: Optional[SelectorRenderer] = None,
        edges: Optional[InputEdgeSource] = None,
    ):
        self.catalog = catalog
        self.on_floor_selected = on_floor_selected
        self.renderer = renderer
        self.edges = edges
        self._current_floor_number = catalog.current_floor_number
        self._view: Optional[SelectorView] = None
        self._subscription: Optional[Subscription] = None
        self._destroyed = False

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self._view is not None

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def view(self) -> Optional[SelectorView]:
        """Current view, or None while closed."""
        return self._view

    @property
    def selected_index(self) -> Optional[int]:
        return self._view.selected_index if self._view else None

    @property
    def current_floor_number(self) -> int:
        return self._current_floor_number

    def _publish(self):
        if self.renderer is not None and self._view is not None:
            self.renderer.update(self._view)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def open(self) -> bool:
        """
        Open the selector at the current floor.

        Returns False if already open (repeated open requests are ignored)
        or if the selector has been destroyed.
        """
        if self._destroyed or self._view is not None:
            return False

        floors = self.catalog.floors
        selected = self._current_floor_number
        if not 0 <= selected < len(floors):
            selected = 0

        self._view = SelectorView(
            floors=floors,
            selected_index=selected,
            current_floor_number=self._current_floor_number,
        )
        if self.edges is not None:
            self._subscription = self.edges.subscribe(self.handle_edge)
        self._publish()
        return True

    def navigate(self, delta: int) -> Optional[int]:
        """
        Move the selection by delta with cyclic wraparound.

        Returns the new selected index, or None while closed.
        """
        if self._view is None:
            return None

        count = len(self._view.floors)
        new_index = (self._view.selected_index + delta) % count
        self._view = replace(self._view, selected_index=new_index)
        self._publish()
        return new_index

    def confirm(self) -> bool:
        """
        Confirm the selected floor.

        Returns True if the selector closed, False if it stayed open
        (inaccessible floor) or was already closed.
        """
        if self._view is None:
            return False

        floor = self._view.selected_floor
        if not floor.accessible:
            logger.debug(f"Floor {floor.floor_number} ({floor.name}) is locked")
            return False

        if floor.floor_number == self._current_floor_number:
            self.close()
            return True

        self.close()
        if self.on_floor_selected is not None:
            self.on_floor_selected(floor.floor_number)
        return True

    def cancel(self) -> bool:
        """Close without selecting. Returns False if already closed."""
        if self._view is None:
            return False
        self.close()
        return True

    def handle_edge(self, signal: EdgeSignal):
        """Dispatch an input edge to the matching event."""
        if signal == EdgeSignal.NAVIGATE_UP:
            self.navigate(-1)
        elif signal == EdgeSignal.NAVIGATE_DOWN:
            self.navigate(1)
        elif signal == EdgeSignal.CONFIRM:
            self.confirm()
        elif signal == EdgeSignal.CANCEL:
            self.cancel()

    # -------------------------------------------------------------------------
    # External updates
    # -------------------------------------------------------------------------

    def update_current_floor(self, floor_number: int):
        """Record a floor change made elsewhere (e.g. by a transition)."""
        if self._destroyed:
            return
        self._current_floor_number = floor_number
        if self._view is not None:
            self._view = replace(self._view, current_floor_number=floor_number)
            self._publish()

    def update_floors(self):
        """Re-snapshot the catalog; an open selector reopens at the current floor."""
        if self._view is None:
            return
        self.close()
        self.open()

    # -------------------------------------------------------------------------
    # Teardown
    # -------------------------------------------------------------------------

    def close(self):
        """Close the selector and release its input subscription."""
        was_open = self._view is not None
        self._view = None
        try:
            if self._subscription is not None:
                self._subscription.close()
        finally:
            self._subscription = None
            if was_open and self.renderer is not None:
                self.renderer.hide()

    def destroy(self):
        """Close for good; later events and notifications are ignored."""
        self.close()
        self._destroyed = True
