"""
LibraryScene - Lifecycle of one visit to the library interior.

Wires the catalog, elevator selector and transition coordinator around an
asynchronous record fetch:
- activate(): fetch records once, build floors, render the lobby
- elevator interaction and floor switching, gated behind the ready flag
- leaving through the exit door: fade out, tear down, notify on_exit
- teardown(): release the selector and its input subscription
"""

import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Iterable, Optional

from campuslift.utils.config_loader import SceneLayout

from .catalog import FloorCatalog
from .evaluator import utc_now
from .input_edges import InputEdgeSource
from .selector import FloorSelector, SelectorRenderer
from .transition import Fader, FloorRenderer, TransitionCoordinator, once

logger = logging.getLogger(__name__)


FetchRecords = Callable[[str], Awaitable[Iterable[Any]]]


class SceneActivationError(RuntimeError):
    """Raised when the scene cannot load its progress records or show the lobby."""


class LibraryScene:
    """
    One interactive session inside the library.

    Navigation is disabled until activate() has completed.
    """

    def __init__(
        self,
        course_id: str,
        fetch_records: FetchRecords,
        renderer: FloorRenderer,
        fader: Fader,
        layout: Optional[SceneLayout] = None,
        selector_renderer: Optional[SelectorRenderer] = None,
        edges: Optional[InputEdgeSource] = None,
        clock: Callable[[], datetime] = utc_now,
        on_exit: Optional[Callable[[], None]] = None,
    ):
        self.course_id = course_id
        self.fetch_records = fetch_records
        self.renderer = renderer
        self.fader = fader
        self.layout = layout or SceneLayout()
        self.selector_renderer = selector_renderer
        self.edges = edges or InputEdgeSource()
        self.clock = clock
        self.on_exit = on_exit

        self.catalog = FloorCatalog(lobby_name=self.layout.lobby_name)
        self.selector: Optional[FloorSelector] = None
        self.coordinator: Optional[TransitionCoordinator] = None
        self._ready = False
        self._activated = False
        self._activation_error: Optional[SceneActivationError] = None
        self._torn_down = False
        self._exiting = False

    @property
    def ready(self) -> bool:
        return self._ready and not self._torn_down

    @property
    def exiting(self) -> bool:
        return self._exiting

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def activate(self) -> FloorCatalog:
        """
        Fetch records and build the floors.

        Fetches at most once per scene; later calls return the existing
        catalog, or raise again if activation failed.

        Raises:
            SceneActivationError: If the record fetch fails, returns records
                that cannot be built into floors, or the lobby cannot be
                rendered
        """
        if self._activation_error is not None:
            raise self._activation_error
        if self._activated:
            logger.debug(f"Scene for course {self.course_id} already activated")
            return self.catalog
        self._activated = True

        try:
            records = await self.fetch_records(self.course_id)
            self.catalog.build(records, now=self.clock())
            self.renderer.render_floor(self.catalog.current_floor())
        except Exception as e:
            logger.error(f"Failed to activate library for course {self.course_id}: {e}")
            self._activation_error = SceneActivationError(f"Could not load course {self.course_id}")
            raise self._activation_error from e

        self.selector = FloorSelector(
            self.catalog,
            on_floor_selected=self.switch_to_floor,
            renderer=self.selector_renderer,
            edges=self.edges,
        )
        self.coordinator = TransitionCoordinator(
            self.catalog,
            self.renderer,
            self.fader,
            layout=self.layout,
            selector=self.selector,
        )
        self._ready = True
        logger.info(f"Library ready: {self.catalog.floor_count} floors for course {self.course_id}")
        return self.catalog

    def teardown(self):
        """Close the elevator and release input; safe to call repeatedly."""
        if self._torn_down:
            return
        self._torn_down = True
        if self.selector is not None:
            self.selector.destroy()

    async def __aenter__(self) -> "LibraryScene":
        await self.activate()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.teardown()

    # -------------------------------------------------------------------------
    # Elevator
    # -------------------------------------------------------------------------

    def is_near_elevator(self, x: float, y: float) -> bool:
        return self.layout.elevator_bounds.contains(x, y, margin=self.layout.interaction_margin)

    def is_near_exit(self, x: float, y: float) -> bool:
        return self.layout.exit_bounds.contains(x, y)

    def open_elevator(self) -> bool:
        """Open the floor selector. Returns False if not ready or already open."""
        if not self.ready:
            return False
        return self.selector.open()

    def interact(self, x: float, y: float) -> bool:
        """
        Handle the interact key at a player position.

        Leaves the library at the exit door, or opens the elevator when the
        player stands near it. Ignored while the selector is open.
        """
        if not self.ready or self.selector.is_open:
            return False
        if self.is_near_exit(x, y):
            return self.exit_library()
        if self.is_near_elevator(x, y):
            return self.open_elevator()
        return False

    def switch_to_floor(self, floor_number: int) -> bool:
        """Request a transition. Returns False if not ready or one is in flight."""
        if not self.ready:
            return False
        return self.coordinator.request_transition(floor_number)

    # -------------------------------------------------------------------------
    # Exit
    # -------------------------------------------------------------------------

    def exit_library(self) -> bool:
        """
        Leave the library: tear down input, fade out, then call on_exit.

        Returns False if not ready (including while already leaving).
        """
        if not self.ready:
            return False
        self._exiting = True
        self.teardown()
        logger.info(f"Leaving library for course {self.course_id}")
        self.fader.fade_out(self.layout.exit_fade_ms, once(self._on_exit_faded))
        return True

    def _on_exit_faded(self):
        if self.on_exit is not None:
            self.on_exit()

    # -------------------------------------------------------------------------
    # HUD
    # -------------------------------------------------------------------------

    def hud_lines(self) -> list[str]:
        """Info lines for the on-screen overlay."""
        floor = self.catalog.current_floor()
        hint = "Walk to EXIT to leave" if floor.is_lobby else "Use ELEVATOR to change floors"
        return [
            f"University Library - {floor.name}",
            hint,
        ]
