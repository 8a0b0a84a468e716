"""Tests for campuslift.building.selector – the elevator floor picker."""

import pytest

from campuslift.building import EdgeSignal, FloorCatalog, FloorSelector, InputEdgeSource

from conftest import NOW, build_record


def make_catalog(count: int, locked: tuple[int, ...] = ()) -> FloorCatalog:
    """Catalog with `count` module floors; floors listed in `locked` are locked."""
    records = [
        build_record(f"m{n}", n, state="locked" if n in locked else "unlocked")
        for n in range(1, count + 1)
    ]
    catalog = FloorCatalog()
    catalog.build(records, now=NOW)
    return catalog


@pytest.fixture()
def selected():
    return []


@pytest.fixture()
def selector(catalog, selector_renderer, selected):
    return FloorSelector(catalog, on_floor_selected=selected.append, renderer=selector_renderer)


class TestOpen:
    def test_opens_at_current_floor(self, catalog, selector_renderer):
        catalog.set_current_floor(3)
        selector = FloorSelector(catalog, renderer=selector_renderer)
        assert selector.open() is True
        assert selector.is_open
        assert selector.selected_index == 3
        assert selector.view.current_floor_number == 3
        assert selector_renderer.views[-1] is selector.view

    def test_view_lists_every_floor(self, selector, catalog):
        selector.open()
        assert selector.view.floors == catalog.floors

    def test_repeated_open_is_ignored(self, selector, selector_renderer):
        selector.open()
        selector.navigate(2)
        assert selector.open() is False
        assert selector.selected_index == 2
        assert len(selector_renderer.views) == 2

    def test_closed_selector_has_no_view(self, selector):
        assert selector.view is None
        assert selector.selected_index is None
        assert selector.navigate(1) is None
        assert selector.confirm() is False
        assert selector.cancel() is False

    def test_out_of_range_current_opens_at_lobby(self, catalog):
        selector = FloorSelector(catalog)
        selector.update_current_floor(42)
        selector.open()
        assert selector.selected_index == 0


class TestNavigate:
    @pytest.mark.parametrize("module_count", [0, 1, 2, 3, 4, 5])
    def test_wraps_in_both_directions(self, module_count):
        catalog = make_catalog(module_count)
        floor_count = module_count + 1
        selector = FloorSelector(catalog)
        selector.open()

        for expected in list(range(1, floor_count)) + [0]:
            assert selector.navigate(1) == expected

        assert selector.navigate(-1) == floor_count - 1
        assert selector.selected_index == floor_count - 1

    def test_single_floor_navigation_stays_put(self, selector_renderer):
        selector = FloorSelector(make_catalog(0), renderer=selector_renderer)
        selector.open()
        assert selector.navigate(1) == 0
        assert selector.navigate(-1) == 0
        # Every navigate is published, even when the index cannot change
        assert [v.selected_index for v in selector_renderer.views] == [0, 0, 0]

    def test_navigation_passes_over_locked_floors(self):
        selector = FloorSelector(make_catalog(3, locked=(2,)))
        selector.open()
        selector.navigate(1)
        assert selector.navigate(1) == 2
        assert not selector.view.selected_floor.accessible

    def test_publishes_each_move(self, selector, selector_renderer):
        selector.open()
        selector.navigate(1)
        selector.navigate(1)
        assert [v.selected_index for v in selector_renderer.views] == [0, 1, 2]


class TestConfirm:
    def test_confirm_other_floor_closes_then_notifies(self, catalog, selector_renderer):
        events = []
        selector = FloorSelector(
            catalog,
            on_floor_selected=lambda n: events.append(("selected", n, selector.is_open)),
            renderer=selector_renderer,
        )
        selector.open()
        selector.navigate(2)
        assert selector.confirm() is True
        assert events == [("selected", 2, False)]
        assert selector_renderer.hide_count == 1

    def test_confirm_current_floor_closes_without_callback(self, selector, selected):
        selector.open()
        assert selector.confirm() is True
        assert not selector.is_open
        assert selected == []

    def test_confirm_locked_floor_stays_open(self, selector, selected, selector_renderer):
        selector.open()
        selector.navigate(4)
        assert selector.confirm() is False
        assert selector.is_open
        assert selector.selected_index == 4
        assert selected == []
        assert selector_renderer.hide_count == 0

    def test_confirm_without_callback(self, catalog):
        selector = FloorSelector(catalog)
        selector.open()
        selector.navigate(1)
        assert selector.confirm() is True
        assert not selector.is_open

    def test_cancel(self, selector, selected, selector_renderer):
        selector.open()
        selector.navigate(3)
        assert selector.cancel() is True
        assert not selector.is_open
        assert selected == []
        assert selector_renderer.hide_count == 1

    def test_reopen_after_cancel_starts_at_current(self, selector):
        selector.open()
        selector.navigate(3)
        selector.cancel()
        selector.open()
        assert selector.selected_index == 0


class TestExternalUpdates:
    def test_update_current_floor_while_closed(self, selector):
        selector.update_current_floor(2)
        assert selector.current_floor_number == 2
        selector.open()
        assert selector.selected_index == 2

    def test_update_current_floor_while_open(self, selector, selector_renderer):
        selector.open()
        selector.navigate(1)
        selector.update_current_floor(3)
        assert selector.view.current_floor_number == 3
        assert selector.selected_index == 1
        assert selector_renderer.views[-1].current_floor_number == 3

    def test_update_floors_reopens_with_new_snapshot(self, catalog, selector):
        selector.open()
        catalog.build([build_record("only", 1)], now=NOW)
        selector.update_floors()
        assert selector.is_open
        assert len(selector.view.floors) == 2

    def test_update_floors_while_closed_is_noop(self, selector):
        selector.update_floors()
        assert not selector.is_open

    def test_destroyed_selector_ignores_everything(self, selector, selector_renderer):
        selector.open()
        selector.destroy()
        assert selector.is_destroyed
        assert not selector.is_open
        assert selector_renderer.hide_count == 1

        selector.update_current_floor(4)
        assert selector.current_floor_number == 0
        assert selector.open() is False


class TestEdgeSubscription:
    @pytest.fixture()
    def edges(self):
        return InputEdgeSource()

    def test_subscribed_only_while_open(self, catalog, edges):
        selector = FloorSelector(catalog, edges=edges)
        assert edges.subscriber_count == 0
        selector.open()
        assert edges.subscriber_count == 1
        selector.cancel()
        assert edges.subscriber_count == 0

    @pytest.mark.parametrize("close", ["confirm", "cancel", "destroy"])
    def test_every_close_path_releases(self, catalog, edges, close):
        selector = FloorSelector(catalog, edges=edges)
        selector.open()
        selector.navigate(1)
        getattr(selector, close)()
        assert edges.subscriber_count == 0

    def test_edges_drive_selection(self, catalog, edges, selected):
        selector = FloorSelector(catalog, on_floor_selected=selected.append, edges=edges)
        selector.open()
        edges.emit(EdgeSignal.NAVIGATE_DOWN)
        edges.emit(EdgeSignal.NAVIGATE_DOWN)
        edges.emit(EdgeSignal.NAVIGATE_UP)
        assert selector.selected_index == 1
        edges.emit(EdgeSignal.CONFIRM)
        assert selected == [1]
        assert edges.subscriber_count == 0

    def test_navigate_up_from_lobby_wraps_to_top(self, catalog, edges):
        selector = FloorSelector(catalog, edges=edges)
        selector.open()
        edges.emit(EdgeSignal.NAVIGATE_UP)
        assert selector.selected_index == 5

    def test_held_key_moves_one_floor(self, catalog, edges):
        selector = FloorSelector(catalog, edges=edges)
        selector.open()
        for _ in range(10):
            edges.press(EdgeSignal.NAVIGATE_DOWN)
        assert selector.selected_index == 1

        edges.release(EdgeSignal.NAVIGATE_DOWN)
        edges.press(EdgeSignal.NAVIGATE_DOWN)
        assert selector.selected_index == 2

    def test_edges_ignored_while_closed(self, catalog, edges, selected):
        selector = FloorSelector(catalog, on_floor_selected=selected.append, edges=edges)
        edges.emit(EdgeSignal.NAVIGATE_DOWN)
        edges.emit(EdgeSignal.CONFIRM)
        assert not selector.is_open
        assert selected == []

    def test_confirm_handler_may_reopen(self, catalog, edges):
        selector = FloorSelector(catalog, edges=edges)
        selector.on_floor_selected = lambda n: selector.open()
        selector.open()
        edges.emit(EdgeSignal.NAVIGATE_DOWN)
        edges.emit(EdgeSignal.CONFIRM)
        assert selector.is_open
        assert edges.subscriber_count == 1

    def test_cancel_signal(self, catalog, edges):
        selector = FloorSelector(catalog, edges=edges)
        selector.open()
        edges.emit(EdgeSignal.CANCEL)
        assert not selector.is_open


class TestElevatorRide:
    """Lobby to floor 2 over a catalog whose floor 4 is locked."""

    def test_locked_floor_then_accessible_floor(self, catalog, selector_renderer):
        edges = InputEdgeSource()
        selected = []
        selector = FloorSelector(catalog, selected.append, selector_renderer, edges)

        selector.open()
        for _ in range(4):
            edges.emit(EdgeSignal.NAVIGATE_DOWN)
        edges.emit(EdgeSignal.CONFIRM)
        assert selector.is_open
        assert selected == []

        edges.emit(EdgeSignal.NAVIGATE_UP)
        edges.emit(EdgeSignal.NAVIGATE_UP)
        edges.emit(EdgeSignal.CONFIRM)
        assert selected == [2]
        assert not selector.is_open
        assert edges.subscriber_count == 0
