import pytest

from lingpdf.core.app_state import MAX_ZOOM, MIN_ZOOM, AppState, clamp_zoom
from lingpdf.core.document import PdfOpenError
from lingpdf.core.page import SelectionRegion
from lingpdf.utils.config import AppConfig, ScrollMode, SelectionMode, Theme

from .conftest import make_pdf


def _select_something(tab):
    tab.selection_start = (1.0, 2.0)
    tab.selection_end = (3.0, 4.0)
    tab.selected_text = "text"
    tab.selection_regions = [SelectionRegion(1, 2, 2, 2)]


@pytest.fixture
def opened(state, sample_pdf):
    tab_id = state.open_file_new_tab(sample_pdf)
    return state, tab_id


def test_clamp_zoom():
    assert clamp_zoom(0.1) == MIN_ZOOM
    assert clamp_zoom(10) == MAX_ZOOM
    assert clamp_zoom(1.25) == 1.25


def test_open_file_new_tab(opened, sample_pdf):
    state, tab_id = opened
    tab = state.get_active_tab()

    assert tab.id == tab_id
    assert tab.is_loaded
    assert tab.page_count == 3
    assert tab.current_page == 0
    assert tab.zoom == 1.0
    assert [item.title for item in tab.outline_items] == ["Chapter 1", "Chapter 2"]
    assert state.get_recent_files() == [str(sample_pdf)]


def test_open_uses_default_zoom(config_store, sample_pdf):
    config_store.save(AppConfig(default_zoom=9.0))
    state = AppState(config_store=config_store)
    state.open_file_new_tab(sample_pdf)

    assert state.get_active_tab().zoom == MAX_ZOOM


def test_open_failure_creates_no_tab(state, tmp_path):
    with pytest.raises(PdfOpenError):
        state.open_file_new_tab(tmp_path / "missing.pdf")

    assert state.get_all_tabs() == []
    assert state.get_active_tab_id() is None
    assert state.get_recent_files() == []


def test_close_tab_closes_document(opened):
    state, tab_id = opened
    doc = state.get_active_tab().doc
    state.close_tab(tab_id)

    assert doc.is_closed
    assert state.get_active_tab() is None


def test_view_ops_without_active_tab(state):
    assert state.next_page() is False
    assert state.zoom_in() is False
    assert state.fit_width() is False
    assert state.fit_to_viewport(1000, 800) is False
    assert state.rotate_clockwise() is False
    assert state.update_active_tab(lambda t: None) is False


def test_page_navigation(opened):
    state, _ = opened

    state.next_page()
    state.next_page()
    state.next_page()
    assert state.get_active_tab().current_page == 2

    state.prev_page()
    assert state.get_active_tab().current_page == 1

    state.first_page()
    assert state.get_active_tab().current_page == 0
    state.prev_page()
    assert state.get_active_tab().current_page == 0

    state.last_page()
    assert state.get_active_tab().current_page == 2


def test_navigate_to_page_ignores_out_of_range(opened):
    state, _ = opened
    state.navigate_to_page(1)
    state.navigate_to_page(7)
    state.navigate_to_page(-1)

    assert state.get_active_tab().current_page == 1


def test_zoom_steps_and_clamps(opened):
    state, _ = opened

    state.zoom_in()
    assert state.get_active_tab().zoom == pytest.approx(1.1)

    for _ in range(40):
        state.zoom_in()
    assert state.get_active_tab().zoom == MAX_ZOOM

    for _ in range(40):
        state.zoom_out()
    assert state.get_active_tab().zoom == MIN_ZOOM

    state.set_zoom(0.01)
    assert state.get_active_tab().zoom == MIN_ZOOM

    state.reset_zoom()
    assert state.get_active_tab().zoom == 1.0


def test_fit_width(opened):
    state, _ = opened
    state.fit_width()

    assert state.get_active_tab().zoom == pytest.approx(800 / 600)


def test_fit_page(state, tmp_path):
    state.open_file_new_tab(make_pdf(tmp_path / "square.pdf", [[]], width=400, height=400))
    state.fit_page()

    assert state.get_active_tab().zoom == pytest.approx(1.5)


def test_fit_zoom_is_clamped(state, tmp_path):
    state.open_file_new_tab(make_pdf(tmp_path / "tiny.pdf", [[]], width=100, height=100))
    state.fit_width()

    assert state.get_active_tab().zoom == MAX_ZOOM


def test_fit_to_viewport(opened):
    state, _ = opened
    state.fit_to_viewport(1200, 800, sidebar_visible=False)

    # Height bound: (800 - 32 - 20 - 40) / 800
    assert state.get_active_tab().zoom == pytest.approx(0.885)


def test_fit_to_viewport_with_sidebar(opened):
    state, _ = opened
    state.fit_to_viewport(800, 2000, sidebar_visible=True)

    # Width bound: (800 - 200 - 40) / 600
    assert state.get_active_tab().zoom == pytest.approx(560 / 600)


def test_rotation_wraps(opened):
    state, _ = opened

    state.rotate_counter_clockwise()
    assert state.get_active_tab().rotation == 270

    for _ in range(3):
        state.rotate_clockwise()
    assert state.get_active_tab().rotation == 180


@pytest.mark.parametrize(
    "operation",
    ["next_page", "prev_page", "first_page", "last_page", "zoom_in", "zoom_out",
     "reset_zoom", "fit_width", "fit_page", "rotate_clockwise", "rotate_counter_clockwise"],
)
def test_view_change_clears_selection(opened, operation):
    state, _ = opened
    state.update_active_tab(_select_something)
    assert state.get_active_tab().has_selection

    assert getattr(state, operation)() is True

    tab = state.get_active_tab()
    assert not tab.has_selection
    assert tab.selection_start is None
    assert tab.selection_end is None


def test_view_ops_act_on_active_tab_only(state, sample_pdf, tmp_path):
    first = state.open_file_new_tab(sample_pdf)
    second = state.open_file_new_tab(make_pdf(tmp_path / "other.pdf", [[], []]))
    state.next_page()

    assert state.tabs.get(first).current_page == 0
    assert state.tabs.get(second).current_page == 1


def test_recent_files_order(state, sample_pdf, tmp_path):
    other = make_pdf(tmp_path / "other.pdf", [[]])
    state.open_file_new_tab(sample_pdf)
    state.open_file_new_tab(other)
    state.open_file_new_tab(sample_pdf)

    assert state.get_recent_files() == [str(sample_pdf), str(other)]

    state.remove_from_recent(str(other))
    assert state.get_recent_files() == [str(sample_pdf)]


def test_preferences_persist(state, config_store):
    assert state.toggle_theme() == Theme.LIGHT
    state.set_language("fr")
    state.set_scroll_mode(ScrollMode.SMOOTH)
    assert state.toggle_selection_mode() == SelectionMode.TEXT_SELECT

    reloaded = AppState(config_store=config_store)
    assert reloaded.get_theme() == Theme.LIGHT
    assert reloaded.get_language() == "fr"
    assert reloaded.get_scroll_mode() == ScrollMode.SMOOTH
    assert reloaded.get_selection_mode() == SelectionMode.TEXT_SELECT


def test_get_config_returns_copy(state):
    config = state.get_config()
    config.recent_files.append("/nope.pdf")
    config.theme = Theme.LIGHT

    assert state.get_recent_files() == []
    assert state.get_theme() == Theme.DARK
