"""
Convivio - Dinner Planner.

Read-modify-write orchestration over the DinnerStore. Each operation loads
the dinner, computes a new menu through the generator or the splice helpers,
and saves the dinner only when that succeeded. A failure anywhere leaves the
stored dinner exactly as it was.

There is no locking between operations on the same dinner: two concurrent
edits each save their own result and the last save wins.
"""

import logging

from convivio import editing
from convivio.errors import ItemNotFoundError
from convivio.generator import MenuGenerator
from convivio.matching import confirm_wines
from convivio.models.cellar import Cellar
from convivio.models.confirmation import WineConfirmationSummary
from convivio.models.dinner import DinnerEvent, MenuRequest
from convivio.models.menu import Course, MenuResponse, WineSource
from convivio.models.notes import DinnerNote, DinnerNoteType, NoteContent
from convivio.store import DinnerStore

logger = logging.getLogger(__name__)


class DinnerPlanner:
    def __init__(self, store: DinnerStore, generator: MenuGenerator):
        self.store = store
        self.generator = generator

    # =========================================================================
    # Loading
    # =========================================================================

    def _cellar(self, dinner: DinnerEvent) -> Cellar:
        """The dinner's cellar, or an empty one when it has none."""
        if dinner.cellar_id:
            cellar = self.store.get_cellar(dinner.cellar_id)
            if cellar is not None:
                return cellar
            logger.warning(f"Dinner {dinner.id} points at missing cellar {dinner.cellar_id}")
        return Cellar(owner_id=dinner.host_id)

    @staticmethod
    def _menu(dinner: DinnerEvent) -> MenuResponse:
        menu = dinner.menu_response
        if menu is None:
            raise ItemNotFoundError(f"Dinner {dinner.id} has no menu yet")
        return menu

    def _save_menu(self, dinner: DinnerEvent, menu: MenuResponse) -> DinnerEvent:
        return self.store.save_dinner(dinner.with_menu(menu))

    # =========================================================================
    # Menu generation
    # =========================================================================

    async def generate_menu(self, dinner_id: str) -> DinnerEvent:
        """Generate (or replace) the whole menu of a dinner."""
        dinner = self.store.get_dinner(dinner_id)
        cellar = self._cellar(dinner)
        request = MenuRequest.from_dinner(
            dinner,
            taste_preferences=self.store.get_preferences(dinner.host_id),
            default_cuisine=self.generator.settings.default_cuisine,
        )
        menu = await self.generator.generate_menu(request, cellar.wines, cellar.bottles)
        return self._save_menu(dinner, menu)

    async def generate_invite(self, dinner_id: str) -> str:
        dinner = self.store.get_dinner(dinner_id)
        return await self.generator.generate_invite_message(dinner, dinner.menu_response)

    # =========================================================================
    # Dishes
    # =========================================================================

    async def regenerate_dish(self, dinner_id: str, course: Course | str, index: int) -> DinnerEvent:
        dinner = self.store.get_dinner(dinner_id)
        cellar = self._cellar(dinner)
        menu = await self.generator.regenerate_dish(
            self._menu(dinner),
            course,
            index,
            dinner,
            cellar.wines,
            cellar.bottles,
            taste_preferences=self.store.get_preferences(dinner.host_id),
        )
        return self._save_menu(dinner, menu)

    async def regenerate_dish_by_id(self, dinner_id: str, dish_id: str) -> DinnerEvent:
        dinner = self.store.get_dinner(dinner_id)
        cellar = self._cellar(dinner)
        menu = await self.generator.regenerate_dish_by_id(
            self._menu(dinner),
            dish_id,
            dinner,
            cellar.wines,
            cellar.bottles,
            taste_preferences=self.store.get_preferences(dinner.host_id),
        )
        return self._save_menu(dinner, menu)

    def delete_dish(self, dinner_id: str, course: Course | str, index: int) -> DinnerEvent:
        dinner = self.store.get_dinner(dinner_id)
        menu = editing.delete_dish(self._menu(dinner), course, index)
        return self._save_menu(dinner, menu)

    def delete_dish_by_id(self, dinner_id: str, dish_id: str) -> DinnerEvent:
        dinner = self.store.get_dinner(dinner_id)
        menu = editing.delete_dish_by_id(self._menu(dinner), dish_id)
        return self._save_menu(dinner, menu)

    # =========================================================================
    # Wines
    # =========================================================================

    async def regenerate_wine(
        self, dinner_id: str, source: WineSource | str, index: int
    ) -> DinnerEvent:
        dinner = self.store.get_dinner(dinner_id)
        cellar = self._cellar(dinner)
        menu = await self.generator.regenerate_wine(
            self._menu(dinner),
            source,
            index,
            dinner,
            cellar.wines,
            cellar.bottles,
            taste_preferences=self.store.get_preferences(dinner.host_id),
        )
        return self._save_menu(dinner, menu)

    async def regenerate_wine_by_id(self, dinner_id: str, wine_id: str) -> DinnerEvent:
        dinner = self.store.get_dinner(dinner_id)
        cellar = self._cellar(dinner)
        menu = await self.generator.regenerate_wine_by_id(
            self._menu(dinner),
            wine_id,
            dinner,
            cellar.wines,
            cellar.bottles,
            taste_preferences=self.store.get_preferences(dinner.host_id),
        )
        return self._save_menu(dinner, menu)

    def delete_wine(self, dinner_id: str, source: WineSource | str, index: int) -> DinnerEvent:
        dinner = self.store.get_dinner(dinner_id)
        menu = editing.delete_wine(self._menu(dinner), source, index)
        return self._save_menu(dinner, menu)

    def delete_wine_by_id(self, dinner_id: str, wine_id: str) -> DinnerEvent:
        dinner = self.store.get_dinner(dinner_id)
        menu = editing.delete_wine_by_id(self._menu(dinner), wine_id)
        return self._save_menu(dinner, menu)

    # =========================================================================
    # Confirmation
    # =========================================================================

    def confirm_wines(
        self,
        dinner_id: str,
        pairing_ids: list[str],
        suggestion_ids: list[str],
    ) -> WineConfirmationSummary:
        """
        Snapshot the chosen wines on the dinner.

        Replaces any earlier confirmation. The snapshot is independent of the
        menu: later edits to the menu do not change it.
        """
        dinner = self.store.get_dinner(dinner_id)
        cellar = self._cellar(dinner)
        confirmed = confirm_wines(
            self._menu(dinner), pairing_ids, suggestion_ids, cellar.wines, cellar.bottles
        )
        dinner = self.store.save_dinner(dinner.with_confirmed_wines(confirmed))
        logger.info(f"Confirmed {len(confirmed)} wines for dinner {dinner_id}")
        return WineConfirmationSummary(confirmed_wines=confirmed, dinner_date=dinner.date)

    # =========================================================================
    # Dinner notes
    # =========================================================================

    async def generate_note(self, dinner_id: str, note_type: DinnerNoteType | str) -> NoteContent:
        """
        Generate one briefing and store it on the dinner.

        Replaces an earlier note of the same type; notes of the other types
        are kept. A missing menu is allowed.
        """
        dinner = self.store.get_dinner(dinner_id)
        note_type = DinnerNoteType(note_type)
        content = await self.generator.generate_dinner_note(
            dinner, dinner.menu_response, note_type, dinner.confirmed_wines
        )
        self.store.save_dinner(dinner.with_note(DinnerNote.from_content(note_type, content)))
        logger.info(f"Saved {note_type.display_name} for dinner {dinner_id}")
        return content

    def delete_note(self, dinner_id: str, note_type: DinnerNoteType | str) -> DinnerEvent:
        dinner = self.store.get_dinner(dinner_id)
        note_type = DinnerNoteType(note_type)
        if note_type not in dinner.dinner_notes:
            raise ItemNotFoundError(f"Dinner {dinner_id} has no {note_type.display_name}")
        return self.store.save_dinner(dinner.without_note(note_type))

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def delete_dinner(self, dinner_id: str) -> DinnerEvent:
        return self.store.delete_dinner(dinner_id)
