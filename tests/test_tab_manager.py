import threading
from pathlib import Path

from lingpdf.core.page import SelectionRegion
from lingpdf.core.tabs import DEFAULT_ZOOM, TabManager


def _manager_with(count):
    manager = TabManager()
    ids = [manager.create(f"/docs/{i}.pdf") for i in range(count)]
    return manager, ids


def test_create_makes_tab_active():
    manager = TabManager()
    tab_id = manager.create("/docs/a.pdf")

    assert manager.get_active() == tab_id
    tab = manager.get(tab_id)
    assert tab.path == Path("/docs/a.pdf")
    assert tab.doc is None
    assert tab.zoom == DEFAULT_ZOOM
    assert tab.current_page == 0
    assert tab.selected_text == ""
    assert tab.selection_regions == []


def test_ids_are_monotonic_and_never_reused():
    manager, ids = _manager_with(3)
    manager.close(ids[2])
    new_id = manager.create("/docs/new.pdf")

    assert ids == [0, 1, 2]
    assert new_id == 3


def test_closing_only_tab_clears_active():
    manager, ids = _manager_with(1)
    manager.close(ids[0])

    assert manager.get_active() is None
    assert manager.list_tabs() == []


def test_closing_active_middle_tab_activates_next_neighbour():
    manager, ids = _manager_with(3)
    manager.set_active(ids[1])
    manager.close(ids[1])

    assert manager.get_active() == ids[2]


def test_closing_active_last_tab_activates_new_last():
    manager, ids = _manager_with(3)
    manager.close(ids[2])

    assert manager.get_active() == ids[1]


def test_closing_inactive_tab_keeps_active():
    manager, ids = _manager_with(3)
    manager.set_active(ids[0])
    manager.close(ids[2])

    assert manager.get_active() == ids[0]


def test_close_unknown_or_twice_is_noop():
    manager, ids = _manager_with(2)
    manager.close(ids[0])
    manager.close(ids[0])
    manager.close(99)

    assert [t.id for t in manager.list_tabs()] == [ids[1]]
    assert manager.get_active() == ids[1]


def test_set_active_ignores_unknown_id():
    manager, ids = _manager_with(2)
    manager.set_active(42)

    assert manager.get_active() == ids[1]


def test_get_and_update_unknown_id():
    manager, _ = _manager_with(1)
    calls = []

    assert manager.get(7) is None
    assert manager.update(7, calls.append) is False
    assert calls == []


def test_update_is_visible_to_later_reads():
    manager, ids = _manager_with(1)

    def select(tab):
        tab.selected_text = "hello"
        tab.selection_regions = [SelectionRegion(1, 2, 3, 4)]

    assert manager.update(ids[0], select) is True
    tab = manager.get(ids[0])
    assert tab.selected_text == "hello"
    assert tab.selection_regions == [SelectionRegion(1, 2, 3, 4)]


def test_get_returns_a_snapshot():
    manager, ids = _manager_with(1)
    snapshot = manager.get(ids[0])
    snapshot.current_page = 5
    snapshot.selection_regions.append(SelectionRegion(0, 0, 1, 1))

    tab = manager.get(ids[0])
    assert tab.current_page == 0
    assert tab.selection_regions == []


def test_list_tabs_in_creation_order():
    manager, ids = _manager_with(4)
    manager.set_active(ids[0])

    assert [t.id for t in manager.list_tabs()] == ids
    assert len(manager) == 4


def test_concurrent_creates_get_unique_ids():
    manager = TabManager()
    created = []
    lock = threading.Lock()

    def worker():
        for i in range(50):
            tab_id = manager.create(f"/docs/{i}.pdf")
            with lock:
                created.append(tab_id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(created) == list(range(400))
    assert len(manager) == 400
    assert manager.get_active() in created


def test_concurrent_updates_are_not_lost():
    manager, ids = _manager_with(1)

    def bump(tab):
        tab.current_page += 1

    def worker():
        for _ in range(200):
            manager.update(ids[0], bump)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert manager.get(ids[0]).current_page == 800
