"""
Convivio - Menu Generator.

Full-menu generation plus the network half of partial regeneration:
regenerate one dish or one wine, splice it into the menu, and return a new
MenuResponse. Deletions need no model and live in convivio.editing.
Dinner notes (kitchen, wine service, hosting) are generated here too.

The generator is stateless. It never persists anything; the planner does.
"""

import logging
from collections.abc import Iterable

from convivio.config import Settings
from convivio.decoder import (
    decode_dinner_note,
    decode_dish,
    decode_menu,
    decode_paired_wine,
    decode_wine_suggestion,
)
from convivio.editing import (
    check_dish_index,
    find_dish,
    find_wine,
    parse_source,
    relabel_cellar_pairings,
    replace_dish,
    replace_wine_by_id,
    wine_position,
)
from convivio.errors import DecodeError
from convivio.inventory import (
    available_bottles,
    build_inventory_snapshot,
    build_taste_preferences,
)
from convivio.llm.client import CompletionClient
from convivio.models.cellar import Bottle, Wine
from convivio.models.confirmation import ConfirmedWine
from convivio.models.dinner import DinnerEvent, MenuRequest, TastePreferences
from convivio.models.menu import Course, MenuResponse, WineSource
from convivio.models.notes import DinnerNoteType, NoteContent
from convivio.prompts.builder import (
    build_cellar_wine_prompt,
    build_dish_prompt,
    build_invite_prompt,
    build_menu_prompt,
    build_note_prompt,
    build_purchase_pairing_prompt,
    build_purchase_wine_prompt,
)

logger = logging.getLogger(__name__)


class MenuGenerator:
    """
    Runs the generate / regenerate pipeline against one completion client.

    Every method validates its positional or id address before any prompt is
    built, so a bad index never costs a network call.
    """

    def __init__(self, client: CompletionClient, settings: Settings):
        self.client = client
        self.settings = settings

    def _snapshot(self, wines: Iterable[Wine], bottles: Iterable[Bottle]) -> str:
        return build_inventory_snapshot(
            wines,
            available_bottles(bottles),
            max_lines=self.settings.inventory_max_lines,
            max_chars=self.settings.inventory_max_chars,
        )

    def _cuisine(self, dinner: DinnerEvent) -> str:
        return dinner.cuisine or self.settings.default_cuisine

    # =========================================================================
    # Full menu
    # =========================================================================

    async def generate_menu(
        self,
        request: MenuRequest,
        wines: Iterable[Wine],
        bottles: Iterable[Bottle],
    ) -> MenuResponse:
        """
        Generate a complete menu for a dinner.

        Args:
            request: Dinner constraints for this call
            wines: Cellar wine catalogue
            bottles: Cellar bottle records (unavailable ones are dropped)

        Returns:
            The decoded menu, with fresh ids on every dish and wine

        Raises:
            ConfigurationError: No credential for the provider
            NetworkError / CompletionTimeoutError / RateLimitError: Transport failures
            DecodeError: The completion did not match the menu shape
        """
        self.client.ensure_configured()

        wines = list(wines)
        stocked = available_bottles(bottles)
        snapshot = self._snapshot(wines, stocked)
        prompt = build_menu_prompt(
            request, snapshot, build_taste_preferences(request.taste_preferences)
        )

        logger.info(
            f"Generating menu '{request.title}' for {request.person_count} people "
            f"({len(stocked)} bottle records in cellar)"
        )
        text = await self.client.complete(
            prompt,
            task="menu",
            timeout=self.settings.completion_timeout_seconds,
        )
        return self._relabel_if_unstocked(decode_menu(text), stocked)

    # =========================================================================
    # Dishes
    # =========================================================================

    async def regenerate_dish(
        self,
        menu: MenuResponse,
        course: Course | str,
        index: int,
        dinner: DinnerEvent,
        wines: Iterable[Wine],
        bottles: Iterable[Bottle],
        *,
        taste_preferences: TastePreferences | None = None,
    ) -> MenuResponse:
        """Replace the dish at (course, index) with a freshly generated one."""
        course = check_dish_index(menu, course, index)
        self.client.ensure_configured()

        prompt = build_dish_prompt(
            menu,
            course,
            index,
            dinner,
            self._snapshot(wines, bottles),
            cuisine=self._cuisine(dinner),
            diet_type=dinner.diet_type,
            taste_preferences=taste_preferences,
        )
        old_name = menu.menu.dishes(course)[index].name
        logger.info(f"Regenerating {course.value}[{index}] '{old_name}'")

        text = await self.client.complete(
            prompt,
            task="dish",
            timeout=self.settings.regeneration_timeout_seconds,
        )
        dish = decode_dish(text)
        logger.info(f"Replaced '{old_name}' with '{dish.name}'")
        return replace_dish(menu, course, index, dish)

    async def regenerate_dish_by_id(
        self,
        menu: MenuResponse,
        dish_id: str,
        dinner: DinnerEvent,
        wines: Iterable[Wine],
        bottles: Iterable[Bottle],
        *,
        taste_preferences: TastePreferences | None = None,
    ) -> MenuResponse:
        course, index = find_dish(menu, dish_id)
        return await self.regenerate_dish(
            menu, course, index, dinner, wines, bottles, taste_preferences=taste_preferences
        )

    # =========================================================================
    # Wines
    # =========================================================================

    def _relabel_if_unstocked(self, menu: MenuResponse, stocked: list[Bottle]) -> MenuResponse:
        if not stocked and menu.cellar_pairings():
            logger.warning(
                f"Empty cellar but {len(menu.cellar_pairings())} pairings claim the cellar; "
                "relabelling as purchases"
            )
            menu = relabel_cellar_pairings(menu)
        return menu

    async def _regenerate_pairing(
        self,
        menu: MenuResponse,
        position: int,
        dinner: DinnerEvent,
        wines: Iterable[Wine],
        bottles: Iterable[Bottle],
        context: dict,
    ) -> MenuResponse:
        """
        New wine for the pairing at `position` in menu.pairings.

        A cellar pairing is redrawn from the inventory. A purchase pairing
        gets a purchase-side prompt and stays a purchase whatever the model
        answers. With no available bottles nothing may claim the cellar.
        """
        pairing = menu.pairings[position]
        stocked = available_bottles(bottles)

        if pairing.source == WineSource.FROM_CELLAR:
            prompt = build_cellar_wine_prompt(
                menu, pairing, dinner, self._snapshot(wines, stocked), **context
            )
        else:
            prompt = build_purchase_pairing_prompt(menu, pairing, dinner, **context)

        logger.info(
            f"Regenerating {pairing.source.display_name.lower()} wine "
            f"'{pairing.wine.display_name}' for {pairing.course}"
        )
        text = await self.client.complete(
            prompt,
            task="wine",
            timeout=self.settings.regeneration_timeout_seconds,
        )
        wine = decode_paired_wine(text)
        if pairing.source == WineSource.TO_PURCHASE and wine.source != WineSource.TO_PURCHASE:
            wine = wine.model_copy(update={"source": WineSource.TO_PURCHASE})

        updated = replace_wine_by_id(menu, pairing.id, wine)
        return self._relabel_if_unstocked(updated, stocked)

    async def _regenerate_suggestion(
        self,
        menu: MenuResponse,
        position: int,
        dinner: DinnerEvent,
        context: dict,
    ) -> MenuResponse:
        suggestion = menu.purchase_suggestions[position]
        prompt = build_purchase_wine_prompt(menu, suggestion, dinner, **context)
        logger.info(f"Regenerating purchase suggestion '{suggestion.display_name}'")
        text = await self.client.complete(
            prompt,
            task="wine",
            timeout=self.settings.regeneration_timeout_seconds,
        )
        return replace_wine_by_id(menu, suggestion.id, decode_wine_suggestion(text))

    def _wine_context(self, dinner: DinnerEvent, taste_preferences: TastePreferences | None) -> dict:
        return {
            "cuisine": self._cuisine(dinner),
            "diet_type": dinner.diet_type,
            "taste_preferences": taste_preferences,
        }

    async def regenerate_wine(
        self,
        menu: MenuResponse,
        source: WineSource | str,
        index: int,
        dinner: DinnerEvent,
        wines: Iterable[Wine],
        bottles: Iterable[Bottle],
        *,
        taste_preferences: TastePreferences | None = None,
    ) -> MenuResponse:
        """
        Replace one wine with a freshly generated alternative.

        FROM_CELLAR addresses the cellar pairings (filtered, in menu order) and
        the new wine is drawn from the inventory; TO_PURCHASE addresses the
        purchase suggestions. A regenerated pairing keeps its course.
        """
        source = parse_source(source)
        position = wine_position(menu, source, index)
        self.client.ensure_configured()

        context = self._wine_context(dinner, taste_preferences)
        if source == WineSource.FROM_CELLAR:
            return await self._regenerate_pairing(menu, position, dinner, wines, bottles, context)
        return await self._regenerate_suggestion(menu, position, dinner, context)

    async def regenerate_wine_by_id(
        self,
        menu: MenuResponse,
        wine_id: str,
        dinner: DinnerEvent,
        wines: Iterable[Wine],
        bottles: Iterable[Bottle],
        *,
        taste_preferences: TastePreferences | None = None,
    ) -> MenuResponse:
        """
        Regenerate a wine by its stable id.

        Works for any pairing, including ones whose wine is to be purchased;
        those stay purchases. The pairing keeps its course.
        """
        kind, position = find_wine(menu, wine_id)
        self.client.ensure_configured()

        context = self._wine_context(dinner, taste_preferences)
        if kind == "pairing":
            return await self._regenerate_pairing(menu, position, dinner, wines, bottles, context)
        return await self._regenerate_suggestion(menu, position, dinner, context)

    # =========================================================================
    # Invite
    # =========================================================================

    async def generate_invite_message(
        self, dinner: DinnerEvent, menu: MenuResponse | None = None
    ) -> str:
        """Short plain-text invite for the guests, in a tone fit for the occasion."""
        self.client.ensure_configured()
        prompt = build_invite_prompt(dinner, menu)
        text = await self.client.complete(
            prompt,
            tier="cheap",
            task="invite",
            timeout=self.settings.regeneration_timeout_seconds,
            json_mode=False,
        )
        message = text.strip().strip('"').strip()
        if not message:
            raise DecodeError("empty invite message")
        return message


    # =========================================================================
    # Dinner notes
    # =========================================================================

    async def generate_dinner_note(
        self,
        dinner: DinnerEvent,
        menu: MenuResponse | None,
        note_type: DinnerNoteType | str,
        confirmed_wines: list[ConfirmedWine] | None = None,
    ) -> NoteContent:
        """
        Generate one dinner briefing (kitchen, wine service or hosting).

        The menu may be missing; the prompt then says so and the model works
        from the dinner details alone.
        """
        self.client.ensure_configured()
        note_type = DinnerNoteType(note_type)
        prompt = build_note_prompt(
            note_type,
            dinner,
            menu,
            cuisine=self._cuisine(dinner),
            confirmed_wines=confirmed_wines,
        )

        logger.info(f"Generating {note_type.display_name} for '{dinner.title}'")
        text = await self.client.complete(
            prompt,
            task="notes",
            timeout=self.settings.completion_timeout_seconds,
        )
        return decode_dinner_note(text, note_type)
