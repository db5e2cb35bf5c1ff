"""
Convivio - Prompt Template Assembler.

Every builder returns a Prompt(system, user) pair. Builders are pure string
assembly: they never check credentials or touch the network, so callers must
verify the completion client is configured before calling them.
"""

from datetime import datetime
from typing import NamedTuple

from convivio.inventory import build_short_preferences
from convivio.models.confirmation import ConfirmedWine
from convivio.models.dinner import DietType, DinnerEvent, MenuRequest, TastePreferences
from convivio.models.menu import Course, MenuResponse, WinePairing, WineSuggestion
from convivio.models.notes import DinnerNoteType
from convivio.prompts import templates as t


class Prompt(NamedTuple):
    system: str
    user: str


# =============================================================================
# Date helpers
# =============================================================================

_WEEKDAYS = ["lunedì", "martedì", "mercoledì", "giovedì", "venerdì", "sabato", "domenica"]
_MONTHS = [
    "gennaio", "febbraio", "marzo", "aprile", "maggio", "giugno",
    "luglio", "agosto", "settembre", "ottobre", "novembre", "dicembre",
]


def italian_long_date(value: datetime) -> str:
    """e.g. "sabato 12 luglio 2025"."""
    return f"{_WEEKDAYS[value.weekday()]} {value.day} {_MONTHS[value.month - 1]} {value.year}"


def italian_short_date(value: datetime) -> str:
    return value.strftime("%d/%m/%Y")


def season_for(value: datetime) -> str:
    month = value.month
    if 3 <= month <= 5:
        return "primavera"
    if 6 <= month <= 8:
        return "estate"
    if 9 <= month <= 11:
        return "autunno"
    return "inverno"


# =============================================================================
# Full menu
# =============================================================================


def build_menu_prompt(request: MenuRequest, inventory_snapshot: str, taste_text: str) -> Prompt:
    """
    Assemble the full-menu prompt.

    The free-text notes always appear under the maximum-priority marker,
    with "nessuna" standing in when the host left them empty.
    """
    notes = (request.notes or "").strip() or t.NO_NOTES
    user = t.MENU_USER.format(
        title=request.title,
        date=italian_long_date(request.date),
        season=season_for(request.date),
        person_count=request.person_count,
        occasion=request.occasion or t.DEFAULT_OCCASION,
        diet=request.diet_type.value,
        cuisine=request.cuisine,
        notes_marker=t.NOTES_MARKER,
        notes=notes,
        taste=taste_text,
        inventory=inventory_snapshot,
    )
    return Prompt(system=t.MENU_SYSTEM, user=user + t.MENU_SCHEMA)


# =============================================================================
# Narrowed regeneration prompts
# =============================================================================


def describe_dinner(
    dinner: DinnerEvent,
    *,
    cuisine: str,
    diet_type: DietType,
    taste_preferences: TastePreferences | None = None,
) -> str:
    """Dinner constraints block shared by the narrowed prompts."""
    lines = [
        f"- Titolo: {dinner.title}",
        f"- Data: {italian_long_date(dinner.date)}",
        f"- Persone: {dinner.guest_count}",
        f"- Occasione: {dinner.occasion or 'Convivio'}",
        f"- Tipo di cucina: {cuisine}",
        f"- Dieta/restrizioni: {diet_type.value}",
    ]
    prefs = build_short_preferences(taste_preferences)
    if prefs:
        lines.append(prefs)
    if dinner.notes:
        lines.append(f"- Note dell'utente (PRIORITÀ MASSIMA): {dinner.notes}")
    return "\n".join(lines)


def describe_menu(menu: MenuResponse) -> str:
    """One line per populated course, e.g. "Primi: Risotto, Tagliolini"."""
    return "\n".join(
        f"{course.label}: {', '.join(d.name for d in dishes)}"
        for course, dishes in menu.menu.all_courses()
    )


def describe_course_wines(menu: MenuResponse, course: Course | str) -> str:
    pairings = menu.pairings_for_course(course)
    if not pairings:
        return "Nessun vino abbinato"
    return ", ".join(f"{p.wine.producer} {p.wine.name}" for p in pairings)


def _other_wines(menu: MenuResponse, *, exclude_id: str) -> str:
    names = [p.wine.display_name for p in menu.pairings if p.id != exclude_id]
    names += [s.display_name for s in menu.purchase_suggestions if s.id != exclude_id]
    return ", ".join(names) if names else "Nessun altro vino"


def _course_dishes(menu: MenuResponse, course: str) -> str:
    try:
        dishes = menu.menu.dishes(course)
    except ValueError:
        dishes = []
    return ", ".join(d.name for d in dishes) if dishes else "Nessun piatto"


def build_dish_prompt(
    menu: MenuResponse,
    course: Course | str,
    index: int,
    dinner: DinnerEvent,
    inventory_snapshot: str,
    *,
    cuisine: str = "Italiana",
    diet_type: DietType = DietType.NORMAL,
    taste_preferences: TastePreferences | None = None,
) -> Prompt:
    """
    Prompt for one replacement dish.

    Carries the dinner constraints, the whole menu for style, the other
    dishes of the same course and the wines already paired with it.
    """
    course = Course.parse(course)
    dishes = menu.menu.dishes(course)
    target = dishes[index]
    others = [d.name for i, d in enumerate(dishes) if i != index]

    user = t.DISH_USER.format(
        dish_name=target.name,
        course=course.value,
        dinner_context=describe_dinner(
            dinner, cuisine=cuisine, diet_type=diet_type, taste_preferences=taste_preferences
        ),
        menu_context=describe_menu(menu),
        other_dishes=", ".join(others) if others else "Nessun altro piatto",
        course_wines=describe_course_wines(menu, course),
        inventory=inventory_snapshot,
        cuisine=cuisine,
        diet=diet_type.value,
    )
    return Prompt(system=t.DISH_SYSTEM, user=user + t.RECIPE_SCHEMA)


def build_cellar_wine_prompt(
    menu: MenuResponse,
    pairing: WinePairing,
    dinner: DinnerEvent,
    inventory_snapshot: str,
    *,
    cuisine: str = "Italiana",
    diet_type: DietType = DietType.NORMAL,
    taste_preferences: TastePreferences | None = None,
) -> Prompt:
    """Prompt for a replacement wine drawn from the cellar."""
    user = t.CELLAR_WINE_USER.format(
        wine_name=pairing.wine.display_name,
        course=pairing.course,
        dinner_context=describe_dinner(
            dinner, cuisine=cuisine, diet_type=diet_type, taste_preferences=taste_preferences
        ),
        course_dishes=_course_dishes(menu, pairing.course),
        other_wines=_other_wines(menu, exclude_id=pairing.id),
        inventory=inventory_snapshot,
        person_count=dinner.guest_count,
    )
    return Prompt(system=t.WINE_SYSTEM, user=user + t.PAIRED_WINE_SCHEMA)


def build_purchase_pairing_prompt(
    menu: MenuResponse,
    pairing: WinePairing,
    dinner: DinnerEvent,
    *,
    cuisine: str = "Italiana",
    diet_type: DietType = DietType.NORMAL,
    taste_preferences: TastePreferences | None = None,
) -> Prompt:
    """Prompt for a replacement pairing wine that stays a purchase."""
    user = t.PURCHASE_PAIRING_USER.format(
        wine_name=pairing.wine.display_name,
        course=pairing.course,
        dinner_context=describe_dinner(
            dinner, cuisine=cuisine, diet_type=diet_type, taste_preferences=taste_preferences
        ),
        course_dishes=_course_dishes(menu, pairing.course),
        other_wines=_other_wines(menu, exclude_id=pairing.id),
        person_count=dinner.guest_count,
    )
    return Prompt(system=t.WINE_SYSTEM, user=user + t.PAIRED_WINE_SCHEMA)


def build_purchase_wine_prompt(
    menu: MenuResponse,
    suggestion: WineSuggestion,
    dinner: DinnerEvent,
    *,
    cuisine: str = "Italiana",
    diet_type: DietType = DietType.NORMAL,
    taste_preferences: TastePreferences | None = None,
) -> Prompt:
    """Prompt for a replacement purchase suggestion."""
    user = t.PURCHASE_WINE_USER.format(
        wine_name=suggestion.display_name,
        ideal_pairing=suggestion.ideal_pairing,
        dinner_context=describe_dinner(
            dinner, cuisine=cuisine, diet_type=diet_type, taste_preferences=taste_preferences
        ),
        menu_context=describe_menu(menu),
        other_wines=_other_wines(menu, exclude_id=suggestion.id),
    )
    return Prompt(system=t.WINE_SYSTEM, user=user + t.SUGGESTION_SCHEMA)


# =============================================================================
# Invite
# =============================================================================


def invite_tone(occasion: str | None) -> str:
    """Pick the invite register from keywords in the occasion."""
    text = (occasion or "").lower()
    for tone, keywords in t.TONE_KEYWORDS:
        if any(k in text for k in keywords):
            return tone
    return t.TONE_INFORMAL


def build_invite_prompt(dinner: DinnerEvent, menu: MenuResponse | None = None) -> Prompt:
    occasion = dinner.occasion or t.DEFAULT_INVITE_OCCASION
    menu_preview = ""
    if menu is not None:
        preview = describe_menu(menu)
        if preview:
            menu_preview = f"\nANTEPRIMA MENU (solo per contesto, NON elencare i piatti):\n{preview}\n"

    user = t.INVITE_USER.format(
        date=italian_long_date(dinner.date),
        time=dinner.date.strftime("%H:%M"),
        occasion=occasion,
        notes_line=f"- Note: {dinner.notes}" if dinner.notes else "",
        menu_preview=menu_preview,
        tone=invite_tone(occasion),
    )
    return Prompt(system=t.INVITE_SYSTEM, user=user)


# =============================================================================
# Dinner notes
# =============================================================================


def describe_menu_dishes(menu: MenuResponse | None) -> str:
    """Every dish with its description, grouped by course."""
    if menu is None:
        return t.NO_MENU
    blocks = []
    for course, dishes in menu.menu.all_courses():
        lines = "\n".join(f"- {d.name}: {d.description}" for d in dishes)
        blocks.append(f"{course.value.upper()}:\n{lines}")
    return "\n\n".join(blocks) or t.NO_MENU


def describe_note_wines(
    menu: MenuResponse | None, confirmed_wines: list[ConfirmedWine] | None
) -> str:
    """Confirmed wines; the menu pairings stand in when nothing was confirmed yet."""
    if confirmed_wines:
        return "\n".join(f"- {w.display_name} - {w.course}" for w in confirmed_wines)
    if menu is not None and menu.pairings:
        return "\n".join(f"- {p.wine.display_name} - {p.course}" for p in menu.pairings)
    return t.NO_CONFIRMED_WINES


def build_note_prompt(
    note_type: DinnerNoteType | str,
    dinner: DinnerEvent,
    menu: MenuResponse | None,
    *,
    cuisine: str = "Italiana",
    confirmed_wines: list[ConfirmedWine] | None = None,
) -> Prompt:
    """Prompt for one of the dinner briefings (kitchen, wine service, hosting)."""
    note_type = DinnerNoteType(note_type)
    date_time = f"{italian_long_date(dinner.date)} alle {dinner.date.strftime('%H:%M')}"
    notes = (dinner.notes or "").strip() or t.NO_NOTES
    summary = (describe_menu(menu) if menu is not None else "") or t.NO_MENU

    if note_type == DinnerNoteType.KITCHEN:
        user = t.NOTE_KITCHEN_USER.format(
            date_time=date_time,
            guest_count=dinner.guest_count,
            cuisine=cuisine,
            diet=dinner.diet_type.value,
            notes=notes,
            menu=describe_menu_dishes(menu),
        )
        return Prompt(system=t.NOTE_KITCHEN_SYSTEM, user=user + t.NOTE_KITCHEN_SCHEMA)

    if note_type == DinnerNoteType.WINE:
        user = t.NOTE_WINE_USER.format(
            date_time=date_time,
            guest_count=dinner.guest_count,
            menu=summary,
            wines=describe_note_wines(menu, confirmed_wines),
        )
        return Prompt(system=t.NOTE_WINE_SYSTEM, user=user + t.NOTE_WINE_SCHEMA)

    user = t.NOTE_HOSTING_USER.format(
        date_time=date_time,
        guest_count=dinner.guest_count,
        cuisine=cuisine,
        occasion=dinner.occasion or t.DEFAULT_HOSTING_OCCASION,
        diet=dinner.diet_type.value,
        notes=notes,
        menu=summary,
    )
    return Prompt(system=t.NOTE_HOSTING_SYSTEM, user=user + t.NOTE_HOSTING_SCHEMA)


# =============================================================================
# Backend proposal
# =============================================================================


def build_proposal_prompt(
    dinner: DinnerEvent,
    *,
    season: str,
    inventory_summary: str,
    guest_summary: list[str] | None = None,
) -> Prompt:
    user_notes = ""
    if dinner.notes:
        user_notes = f"\nRICHIESTE SPECIFICHE DELL'UTENTE:\n{dinner.notes}"

    user = t.PROPOSAL_USER.format(
        dinner_name=dinner.title or "Cena",
        dinner_date=italian_short_date(dinner.date),
        season=season,
        dinner_style=dinner.style or "conviviale",
        cooking_time=dinner.cooking_time or "twoHours",
        budget_level=dinner.budget_level or "standard",
        user_notes=user_notes,
        guest_count=dinner.guest_count,
        guest_summary="\n".join(guest_summary) if guest_summary else t.NO_GUESTS,
        inventory_summary=inventory_summary or t.NO_CELLAR_WINES,
    )
    return Prompt(system=t.PROPOSAL_SYSTEM, user=user + t.PROPOSAL_SCHEMA)
