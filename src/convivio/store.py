"""
Convivio - Dinner Store.

ID-indexed in-memory storage for dinners, cellars and per-user taste
preferences. All planner reads and writes go through here.

Saves are whole-record replacements: the last writer wins.
"""

import logging
import threading
from datetime import datetime

from convivio.errors import DinnerNotFoundError
from convivio.models.cellar import Cellar
from convivio.models.dinner import DinnerEvent, TastePreferences

logger = logging.getLogger(__name__)


class DinnerStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._dinners: dict[str, DinnerEvent] = {}
        self._cellars: dict[str, Cellar] = {}
        self._preferences: dict[str, TastePreferences] = {}

    # =========================================================================
    # Dinners
    # =========================================================================

    def get_dinner(self, dinner_id: str) -> DinnerEvent:
        """Get a dinner by id. Raises DinnerNotFoundError."""
        with self._lock:
            dinner = self._dinners.get(dinner_id)
        if dinner is None:
            raise DinnerNotFoundError(f"Dinner {dinner_id!r} not found")
        return dinner

    def list_dinners(self, host_id: str | None = None) -> list[DinnerEvent]:
        """All dinners, soonest first, optionally only those hosted by `host_id`."""
        with self._lock:
            dinners = list(self._dinners.values())
        if host_id is not None:
            dinners = [d for d in dinners if d.host_id == host_id]
        return sorted(dinners, key=lambda d: d.date)

    def save_dinner(self, dinner: DinnerEvent) -> DinnerEvent:
        dinner = dinner.model_copy(update={"updated_at": datetime.now()})
        with self._lock:
            self._dinners[dinner.id] = dinner
        logger.debug(f"Saved dinner {dinner.id}")
        return dinner

    def delete_dinner(self, dinner_id: str) -> DinnerEvent:
        """
        Remove a dinner together with everything it owns.

        The menu, its dishes and wines and the confirmed wines all live inside
        the dinner record, so removing it removes them too.
        """
        with self._lock:
            dinner = self._dinners.pop(dinner_id, None)
        if dinner is None:
            raise DinnerNotFoundError(f"Dinner {dinner_id!r} not found")
        logger.info(f"Deleted dinner {dinner_id} '{dinner.title}'")
        return dinner

    # =========================================================================
    # Cellars
    # =========================================================================

    def get_cellar(self, cellar_id: str) -> Cellar | None:
        with self._lock:
            return self._cellars.get(cellar_id)

    def cellars_for_user(self, user_id: str) -> list[Cellar]:
        with self._lock:
            cellars = list(self._cellars.values())
        return [c for c in cellars if c.is_member(user_id)]

    def save_cellar(self, cellar: Cellar) -> Cellar:
        with self._lock:
            self._cellars[cellar.id] = cellar
        return cellar

    # =========================================================================
    # Taste preferences
    # =========================================================================

    def get_preferences(self, user_id: str) -> TastePreferences | None:
        with self._lock:
            return self._preferences.get(user_id)

    def save_preferences(self, user_id: str, preferences: TastePreferences) -> None:
        with self._lock:
            self._preferences[user_id] = preferences


# Singleton store instance
_store: DinnerStore | None = None


def get_store() -> DinnerStore:
    """Get the process-wide store used by the web layer."""
    global _store
    if _store is None:
        _store = DinnerStore()
    return _store
