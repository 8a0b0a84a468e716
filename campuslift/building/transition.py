"""
TransitionCoordinator - Floor switches as fade-out, swap, fade-in.

A switch is built from two independently timed fades. The coordinator makes
it behave as one step:
- only one switch may be in flight; further requests are dropped
- each fade's completion is observed exactly once
- on landing: move the catalog pointer, render the floor, reposition the
  player at the arrival point, tell the selector, then fade back in

Fades are supplied by a Fader collaborator. AsyncioFader runs them on the
event loop; InstantFader completes them synchronously.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol

from campuslift.utils.config_loader import SceneLayout

from .catalog import Floor, FloorCatalog
from .selector import FloorSelector

logger = logging.getLogger(__name__)


class FloorRenderer(Protocol):
    """Scene collaborator that draws floors and places the player."""

    def render_floor(self, floor: Floor) -> None: ...

    def reposition(self, x: float, y: float) -> None: ...


class Fader(Protocol):
    """Screen fade collaborator; on_complete may fire more than once."""

    def fade_out(self, duration_ms: int, on_complete: Callable[[], None]) -> None: ...

    def fade_in(self, duration_ms: int, on_complete: Callable[[], None]) -> None: ...


def once(callback: Callable[[], None]) -> Callable[[], None]:
    """Wrap a callback so only its first invocation runs."""
    fired = False

    def wrapper():
        nonlocal fired
        if fired:
            return
        fired = True
        callback()

    return wrapper


# -----------------------------------------------------------------------------
# Faders
# -----------------------------------------------------------------------------

class InstantFader:
    """Completes every fade immediately (synchronous hosts, tests)."""

    def __init__(self):
        self.opacity = 0.0  # 0 = scene visible, 1 = black

    def fade_out(self, duration_ms: int, on_complete: Callable[[], None]):
        self.opacity = 1.0
        on_complete()

    def fade_in(self, duration_ms: int, on_complete: Callable[[], None]):
        self.opacity = 0.0
        on_complete()


class AsyncioFader:
    """Runs fades as event-loop timers."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop
        self.opacity = 0.0

    def _schedule(self, duration_ms: int, target: float, on_complete: Callable[[], None]):
        loop = self._loop or asyncio.get_running_loop()

        def finish():
            self.opacity = target
            on_complete()

        loop.call_later(duration_ms / 1000, finish)

    def fade_out(self, duration_ms: int, on_complete: Callable[[], None]):
        self._schedule(duration_ms, 1.0, on_complete)

    def fade_in(self, duration_ms: int, on_complete: Callable[[], None]):
        self._schedule(duration_ms, 0.0, on_complete)


# -----------------------------------------------------------------------------
# Coordinator
# -----------------------------------------------------------------------------

class TransitionPhase(str, Enum):
    FADING_OUT = "fading_out"
    FADING_IN = "fading_in"


@dataclass(frozen=True)
class InFlight:
    target_floor_number: int
    phase: TransitionPhase


class TransitionCoordinator:
    """
    Run floor switches one at a time.

    The coordinator is the only writer of the catalog's current floor after
    the catalog is built. It does not depend on the selector being open or
    alive; a destroyed selector simply ignores the notification.
    """

    def __init__(
        self,
        catalog: FloorCatalog,
        renderer: FloorRenderer,
        fader: Fader,
        layout: Optional[SceneLayout] = None,
        selector: Optional[FloorSelector] = None,
        on_settled: Optional[Callable[[int], None]] = None,
    ):
        self.catalog = catalog
        self.renderer = renderer
        self.fader = fader
        self.layout = layout or SceneLayout()
        self.selector = selector
        self.on_settled = on_settled
        self._in_flight: Optional[InFlight] = None
        self.completed_count = 0

    @property
    def is_idle(self) -> bool:
        return self._in_flight is None

    @property
    def in_flight(self) -> Optional[InFlight]:
        return self._in_flight

    def request_transition(self, target_floor_number: int) -> bool:
        """
        Start a switch to the target floor.

        Returns True if started, False if another switch is still in flight
        (the request is dropped).
        """
        if self._in_flight is not None:
            logger.debug(
                f"Dropping switch to floor {target_floor_number}: "
                f"already moving to floor {self._in_flight.target_floor_number}"
            )
            return False

        self._in_flight = InFlight(target_floor_number, TransitionPhase.FADING_OUT)
        try:
            self.fader.fade_out(
                self.layout.fade_out_ms,
                once(lambda: self._on_fade_out_complete(target_floor_number)),
            )
        except Exception:
            self._abort(f"Fade-out to floor {target_floor_number} failed, transition aborted")
            raise
        return True

    def _abort(self, message: str):
        # A landing failure may already have reset the state and logged
        if self._in_flight is not None:
            logger.error(message)
        self._in_flight = None

    def _on_fade_out_complete(self, target_floor_number: int):
        try:
            self.catalog.set_current_floor(target_floor_number)
            floor = self.catalog.current_floor()
            self.renderer.render_floor(floor)
            arrival = self.layout.arrival_point
            self.renderer.reposition(arrival.x, arrival.y)
            if self.selector is not None:
                self.selector.update_current_floor(floor.floor_number)
        except Exception:
            self._abort(f"Landing on floor {target_floor_number} failed, transition aborted")
            raise

        logger.info(f"Arrived at floor {floor.floor_number} ({floor.name})")
        self._in_flight = InFlight(target_floor_number, TransitionPhase.FADING_IN)
        try:
            self.fader.fade_in(
                self.layout.fade_in_ms,
                once(lambda: self._on_fade_in_complete(floor.floor_number)),
            )
        except Exception:
            self._abort(f"Fade-in at floor {floor.floor_number} failed, transition aborted")
            raise

    def _on_fade_in_complete(self, floor_number: int):
        self._in_flight = None
        self.completed_count += 1
        if self.on_settled is not None:
            self.on_settled(floor_number)
