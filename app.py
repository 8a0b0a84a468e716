"""
campuslift - Course modules as library floors

Streamlit viewer for walking the library: the current floor's module
details and an elevator panel for moving between floors.

Usage:
    streamlit run app.py
"""

import asyncio
from typing import Optional

import streamlit as st

from campuslift.building import (
    EdgeSignal,
    Floor,
    InstantFader,
    LibraryScene,
    SceneActivationError,
    SelectorView,
    StatusCategory,
    has_missing_submissions,
    has_ungraded_work,
    submission_summary,
)
from campuslift.services import MockCourseService
from campuslift.utils import configure_logging, load_config


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

CONFIG = load_config()
configure_logging(CONFIG.log_level)

st.set_page_config(
    page_title="campuslift",
    page_icon="🏛️",
    layout="wide",
    initial_sidebar_state="expanded",
)

ITEM_TYPE_ICONS = {
    "Assignment": "📝",
    "Quiz": "❓",
    "Discussion": "💬",
    "Page": "📄",
    "ExternalUrl": "🔗",
    "File": "📁",
    "ExternalTool": "🔧",
}

STATUS_STYLES = {
    StatusCategory.COMPLETED: "color: #16a34a;",
    StatusCategory.IN_PROGRESS: "color: #ca8a04;",
    StatusCategory.NOT_STARTED: "color: #2563eb;",
    StatusCategory.SCHEDULED: "color: #52525b;",
    StatusCategory.LOCKED: "color: #52525b;",
}

MAX_VISIBLE_ITEMS = 8


# -----------------------------------------------------------------------------
# Render collaborators
# -----------------------------------------------------------------------------

class SessionFloorRenderer:
    """Remembers what the scene asked to show; the page draws it on rerun."""

    def __init__(self):
        self.floor: Optional[Floor] = None
        self.player_position: Optional[tuple[float, float]] = None

    def render_floor(self, floor: Floor):
        self.floor = floor

    def reposition(self, x: float, y: float):
        self.player_position = (x, y)


class SessionSelectorRenderer:
    def __init__(self):
        self.view: Optional[SelectorView] = None

    def update(self, view: SelectorView):
        self.view = view

    def hide(self):
        self.view = None


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "scene" in st.session_state:
        return

    service = MockCourseService(CONFIG.fixture_path, delay_ms=CONFIG.fetch_delay_ms)
    floor_renderer = SessionFloorRenderer()
    selector_renderer = SessionSelectorRenderer()
    scene = LibraryScene(
        CONFIG.course_id,
        service.fetch_records,
        floor_renderer,
        InstantFader(),
        layout=CONFIG.layout,
        selector_renderer=selector_renderer,
    )

    try:
        asyncio.run(scene.activate())
    except SceneActivationError as e:
        st.session_state.load_error = str(e)

    st.session_state.scene = scene
    st.session_state.floor_renderer = floor_renderer
    st.session_state.selector_renderer = selector_renderer


def send_edge(signal: EdgeSignal):
    st.session_state.scene.edges.emit(signal)
    st.rerun()


# -----------------------------------------------------------------------------
# Sidebar: Building Directory
# -----------------------------------------------------------------------------

def render_sidebar():
    """Render the sidebar with the floor directory."""
    st.sidebar.title("🏛️ University Library")

    scene = st.session_state.scene
    if scene.exiting:
        st.sidebar.info("You left the library.")
        return
    if not scene.ready:
        st.sidebar.error("Library is closed: course data could not be loaded.")
        return

    for line in scene.hud_lines():
        st.sidebar.markdown(line)

    st.sidebar.divider()
    st.sidebar.subheader("Directory")

    current = scene.catalog.current_floor_number
    for floor in scene.catalog.floors:
        marker = "◄" if floor.floor_number == current else ""
        lock = "🔒 " if not floor.accessible else ""
        status = f" · {floor.status_text}" if floor.status_text else ""
        st.sidebar.markdown(f"**{floor.floor_number}** {lock}{floor.name}{status} {marker}")


# -----------------------------------------------------------------------------
# Main Content: Floor View
# -----------------------------------------------------------------------------

def render_floor_view():
    """Render the floor the player is standing on."""
    scene = st.session_state.scene
    floor = st.session_state.floor_renderer.floor

    if "load_error" in st.session_state:
        st.error(st.session_state.load_error)
        return
    if scene.exiting:
        st.title("Campus")
        st.markdown("You walked out of the library.")
        if st.button("Enter library again"):
            del st.session_state.scene
            st.rerun()
        return
    if floor is None:
        st.info("Loading library...")
        return

    st.title(floor.name)

    if floor.is_lobby:
        st.markdown("Welcome to the University Library: Course Modules & Learning Materials")
        st.markdown("Use the elevator to visit module floors.")
    else:
        render_module_floor(floor)

    st.divider()
    render_elevator_panel(scene)


def render_module_floor(floor: Floor):
    """Render module status, progress and contents."""
    record = floor.record
    progress = floor.progress

    style = STATUS_STYLES.get(progress.status_category, "")
    st.markdown(f"<span style='{style}'>{progress.status_text}</span>", unsafe_allow_html=True)

    if progress.total_item_count > 0:
        st.markdown(f"{progress.completed_item_count}/{progress.total_item_count} items completed")

    st.progress(progress.completion_percentage / 100, text=f"Module Progress: {progress.completion_percentage}%")

    prereqs = st.session_state.scene.catalog.prerequisite_info(floor.floor_number)
    if prereqs and prereqs.has_prerequisites:
        met = "met" if prereqs.prerequisites_met else "not met"
        st.caption(f"Prerequisites ({met}): {', '.join(prereqs.prerequisite_names)}")

    summary = submission_summary(record)
    if has_missing_submissions(record):
        st.warning(summary)
    elif has_ungraded_work(record):
        st.info(summary)
    else:
        st.caption(summary)

    st.subheader("Module Contents")
    for item in record.items[:MAX_VISIBLE_ITEMS]:
        requirement = item.completion_requirement
        done = requirement is not None and requirement.completed
        indicator = "✓" if done else "○"
        icon = ITEM_TYPE_ICONS.get(item.type, "📄")
        st.markdown(f"{indicator} {icon} {item.title}")

    if len(record.items) > MAX_VISIBLE_ITEMS:
        st.caption(f"+ {len(record.items) - MAX_VISIBLE_ITEMS} more items")


def render_elevator_panel(scene: LibraryScene):
    """Render the elevator: call button when closed, floor list when open."""
    view = st.session_state.selector_renderer.view

    if view is None:
        col1, col2 = st.columns(2)
        with col1:
            if st.button("Call elevator", type="primary", disabled=not scene.ready):
                scene.open_elevator()
                st.rerun()
        with col2:
            if st.button("Leave library", disabled=not scene.ready):
                scene.exit_library()
                st.rerun()
        return

    st.subheader("Select Floor")
    for index, floor in enumerate(view.floors):
        label = f"{floor.floor_number} · {floor.name}"
        if floor.status_text:
            label += f" ({floor.status_text})"
        if floor.floor_number == view.current_floor_number:
            label += "  ◄ You are here"
        if not floor.accessible:
            label = "🔒 " + label

        if index == view.selected_index:
            st.markdown(f"**▶ {label}**")
        else:
            st.markdown(label)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        if st.button("▲ Up", use_container_width=True):
            send_edge(EdgeSignal.NAVIGATE_UP)
    with col2:
        if st.button("▼ Down", use_container_width=True):
            send_edge(EdgeSignal.NAVIGATE_DOWN)
    with col3:
        if st.button("Select", type="primary", use_container_width=True,
                     disabled=not view.selected_floor.accessible):
            send_edge(EdgeSignal.CONFIRM)
    with col4:
        if st.button("Close", use_container_width=True):
            send_edge(EdgeSignal.CANCEL)


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()
    render_sidebar()
    render_floor_view()


if __name__ == "__main__":
    main()
