"""
Convivio - Menu splicing.

Pure, synchronous edits over a MenuResponse. Every function returns a new
MenuResponse built with model_copy: fields outside the edited list are the
very same objects, so they serialize byte-for-byte as before.

Positional addressing (course + index, source + index) is the compatibility
API. The primary contract is the stable id assigned at decode time; the
`find_*` helpers resolve an id to its current position.
"""

from convivio.errors import IndexOutOfRangeError, ItemNotFoundError, UnknownCourseError
from convivio.models.menu import (
    Course,
    Dish,
    MenuResponse,
    PairedWine,
    WinePairing,
    WineSource,
    WineSuggestion,
)

_SOURCE_ALIASES = {
    "cellar": WineSource.FROM_CELLAR,
    "cantina": WineSource.FROM_CELLAR,
    "from_cellar": WineSource.FROM_CELLAR,
    "purchase": WineSource.TO_PURCHASE,
    "acquisto": WineSource.TO_PURCHASE,
    "suggerimento": WineSource.TO_PURCHASE,
    "to_purchase": WineSource.TO_PURCHASE,
}


def parse_source(value: WineSource | str) -> WineSource:
    if isinstance(value, WineSource):
        return value
    source = _SOURCE_ALIASES.get(str(value).strip().lower())
    if source is None:
        raise ValueError(f"Unknown wine source: {value!r}")
    return source


# =============================================================================
# Dishes
# =============================================================================


def check_dish_index(menu: MenuResponse, course: Course | str, index: int) -> Course:
    """Validate a positional dish address; returns the resolved course."""
    course = Course.parse(course)
    length = len(menu.menu.dishes(course))
    if not 0 <= index < length:
        raise IndexOutOfRangeError(course.value, index, length)
    return course


def find_dish(menu: MenuResponse, dish_id: str) -> tuple[Course, int]:
    for course, dishes in menu.menu.all_courses():
        for index, dish in enumerate(dishes):
            if dish.id == dish_id:
                return course, index
    raise ItemNotFoundError(f"No dish with id {dish_id!r}")


def replace_dish(menu: MenuResponse, course: Course | str, index: int, dish: Dish) -> MenuResponse:
    course = check_dish_index(menu, course, index)
    dishes = list(menu.menu.dishes(course))
    dishes[index] = dish
    return menu.model_copy(update={"menu": menu.menu.with_dishes(course, dishes)})


def delete_dish(menu: MenuResponse, course: Course | str, index: int) -> MenuResponse:
    """
    Remove one dish. No network call.

    Pairings are left alone even if the course becomes empty; see
    orphaned_pairings().
    """
    course = check_dish_index(menu, course, index)
    dishes = list(menu.menu.dishes(course))
    del dishes[index]
    return menu.model_copy(update={"menu": menu.menu.with_dishes(course, dishes)})


def delete_dish_by_id(menu: MenuResponse, dish_id: str) -> MenuResponse:
    course, index = find_dish(menu, dish_id)
    return delete_dish(menu, course, index)


def orphaned_pairings(menu: MenuResponse) -> list[WinePairing]:
    """Pairings whose course no longer has any dish (or never named one)."""
    populated = menu.menu.populated_courses()
    orphans = []
    for pairing in menu.pairings:
        try:
            if Course.parse(pairing.course) not in populated:
                orphans.append(pairing)
        except UnknownCourseError:
            orphans.append(pairing)
    return orphans


# =============================================================================
# Wines
# =============================================================================


def wine_position(menu: MenuResponse, source: WineSource | str, index: int) -> int:
    """
    Resolve a positional wine address to an index into the backing list.

    FROM_CELLAR indexes the cellar pairings only (in menu order) and maps
    back to the position in `menu.pairings`. TO_PURCHASE indexes the
    purchase suggestions directly.
    """
    source = parse_source(source)
    if source == WineSource.FROM_CELLAR:
        positions = [
            i for i, p in enumerate(menu.pairings) if p.source == WineSource.FROM_CELLAR
        ]
        if not 0 <= index < len(positions):
            raise IndexOutOfRangeError(source.value, index, len(positions))
        return positions[index]

    length = len(menu.purchase_suggestions)
    if not 0 <= index < length:
        raise IndexOutOfRangeError(source.value, index, length)
    return index


def find_wine(menu: MenuResponse, wine_id: str) -> tuple[str, int]:
    """
    Resolve a wine id to ("pairing" | "suggestion", position in that list).

    Positions are absolute: a pairing's position counts every pairing, not
    just the cellar ones.
    """
    for position, pairing in enumerate(menu.pairings):
        if pairing.id == wine_id:
            return "pairing", position
    for position, suggestion in enumerate(menu.purchase_suggestions):
        if suggestion.id == wine_id:
            return "suggestion", position
    raise ItemNotFoundError(f"No wine with id {wine_id!r}")


def _replace_pairing_at(menu: MenuResponse, position: int, wine: PairedWine) -> MenuResponse:
    old = menu.pairings[position]
    pairings = list(menu.pairings)
    pairings[position] = WinePairing(course=old.course, wine=wine)
    return menu.model_copy(update={"pairings": pairings})


def _replace_suggestion_at(
    menu: MenuResponse, position: int, suggestion: WineSuggestion
) -> MenuResponse:
    suggestions = list(menu.purchase_suggestions)
    suggestions[position] = suggestion
    return menu.model_copy(update={"purchase_suggestions": suggestions})


def replace_pairing_wine(menu: MenuResponse, index: int, wine: PairedWine) -> MenuResponse:
    """
    Swap the wine of the cellar pairing at `index` (cellar-filtered position).

    The pairing keeps its course; it gets a fresh id.
    """
    return _replace_pairing_at(menu, wine_position(menu, WineSource.FROM_CELLAR, index), wine)


def replace_suggestion(menu: MenuResponse, index: int, suggestion: WineSuggestion) -> MenuResponse:
    position = wine_position(menu, WineSource.TO_PURCHASE, index)
    return _replace_suggestion_at(menu, position, suggestion)


def replace_wine_by_id(
    menu: MenuResponse, wine_id: str, replacement: PairedWine | WineSuggestion
) -> MenuResponse:
    kind, position = find_wine(menu, wine_id)
    if kind == "pairing":
        if not isinstance(replacement, PairedWine):
            raise TypeError("A pairing can only be replaced by a PairedWine")
        return _replace_pairing_at(menu, position, replacement)
    if not isinstance(replacement, WineSuggestion):
        raise TypeError("A purchase suggestion can only be replaced by a WineSuggestion")
    return _replace_suggestion_at(menu, position, replacement)


def _delete_at(menu: MenuResponse, kind: str, position: int) -> MenuResponse:
    if kind == "pairing":
        pairings = list(menu.pairings)
        del pairings[position]
        return menu.model_copy(update={"pairings": pairings})
    suggestions = list(menu.purchase_suggestions)
    del suggestions[position]
    return menu.model_copy(update={"purchase_suggestions": suggestions})


def delete_wine(menu: MenuResponse, source: WineSource | str, index: int) -> MenuResponse:
    source = parse_source(source)
    position = wine_position(menu, source, index)
    kind = "pairing" if source == WineSource.FROM_CELLAR else "suggestion"
    return _delete_at(menu, kind, position)


def delete_wine_by_id(menu: MenuResponse, wine_id: str) -> MenuResponse:
    kind, position = find_wine(menu, wine_id)
    return _delete_at(menu, kind, position)


# =============================================================================
# Cellar reconciliation
# =============================================================================


def relabel_cellar_pairings(menu: MenuResponse) -> MenuResponse:
    """
    Mark every cellar pairing as a purchase.

    Applied to a fresh menu generated against an empty cellar, where no
    pairing can legitimately come from the cellar.
    """
    if not menu.cellar_pairings():
        return menu
    pairings = [
        p.model_copy(
            update={"wine": p.wine.model_copy(update={"source": WineSource.TO_PURCHASE})}
        )
        if p.source == WineSource.FROM_CELLAR
        else p
        for p in menu.pairings
    ]
    return menu.model_copy(update={"pairings": pairings})
