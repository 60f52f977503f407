"""
Thread-safe registry of open document tabs.
"""

import logging
import threading
from pathlib import Path
from typing import Callable, List, Optional, Union

from .models import Tab

logger = logging.getLogger(__name__)

TabMutation = Callable[[Tab], None]


class TabManager:
    """
    Owns the open tabs and the active-tab pointer.

    Every method holds the lock for one short critical section and never calls
    into the document engine. Unknown tab ids are ignored rather than raised:
    ids coming from the UI can race with tabs being closed.

    Tabs handed out are snapshots; the only way to change a tab is update().
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._tabs: List[Tab] = []
        self._active_tab_id: Optional[int] = None
        self._next_tab_id: int = 0

    def create(self, path: Union[str, Path]) -> int:
        """
        Append a new tab for ``path`` and make it active.

        Returns:
            The id of the new tab
        """
        with self._lock:
            tab_id = self._next_tab_id
            self._next_tab_id += 1
            self._tabs.append(Tab(id=tab_id, path=Path(path)))
            self._active_tab_id = tab_id

        logger.debug(f"Created tab {tab_id} for {path}")
        return tab_id

    def close(self, tab_id: int) -> None:
        """
        Remove a tab. If it was active, activate its closest neighbour.

        The tab now at the removed index wins; otherwise the new last tab.
        """
        with self._lock:
            index = self._index_of(tab_id)
            if index is None:
                return

            del self._tabs[index]

            if self._active_tab_id == tab_id:
                if self._tabs:
                    new_index = index if index < len(self._tabs) else len(self._tabs) - 1
                    self._active_tab_id = self._tabs[new_index].id
                else:
                    self._active_tab_id = None

        logger.debug(f"Closed tab {tab_id}")

    def set_active(self, tab_id: int) -> None:
        """Activate a tab if it exists."""
        with self._lock:
            if self._index_of(tab_id) is not None:
                self._active_tab_id = tab_id

    def get_active(self) -> Optional[int]:
        """Get the id of the active tab, or None when no tabs are open."""
        with self._lock:
            return self._active_tab_id

    def get(self, tab_id: int) -> Optional[Tab]:
        """Get a snapshot of a tab, or None if it does not exist."""
        with self._lock:
            index = self._index_of(tab_id)
            if index is None:
                return None
            return self._tabs[index].snapshot()

    def update(self, tab_id: int, mutation: TabMutation) -> bool:
        """
        Apply ``mutation`` to a tab inside the lock.

        The mutation must not call back into the manager.

        Returns:
            True if the tab existed and was mutated
        """
        with self._lock:
            index = self._index_of(tab_id)
            if index is None:
                return False
            mutation(self._tabs[index])
            return True

    def list_tabs(self) -> List[Tab]:
        """Get snapshots of all tabs in creation order."""
        with self._lock:
            return [tab.snapshot() for tab in self._tabs]

    def __len__(self) -> int:
        with self._lock:
            return len(self._tabs)

    def _index_of(self, tab_id: int) -> Optional[int]:
        for index, tab in enumerate(self._tabs):
            if tab.id == tab_id:
                return index
        return None
