"""
Convivio - Inventory Snapshot Builder.

Turns the cellar into the compact text block the prompts embed. Pure
functions: nothing here touches the network or mutates the cellar.
"""

from collections.abc import Iterable

from convivio.models.cellar import Bottle, Wine
from convivio.models.dinner import TastePreferences

EMPTY_CELLAR = "CANTINA VUOTA - Nessun vino disponibile"
NO_PREFERENCES = "Nessuna preferenza specifica indicata"


def available_bottles(bottles: Iterable[Bottle]) -> list[Bottle]:
    """Bottle records that can still be served (quantity > 0, available)."""
    return [b for b in bottles if b.is_available]


def _bottles_word(quantity: int) -> str:
    return "bottiglia" if quantity == 1 else "bottiglie"


def format_inventory_line(wine: Wine, quantity: int) -> str:
    """One snapshot line, e.g. "- Gaja Barbaresco (Rosso, Piemonte, 2019) - 2 bottiglie"."""
    parts = []
    if wine.producer:
        parts.append(wine.producer)
    parts.append(wine.name)

    details = [wine.type.display_name]
    if wine.region:
        details.append(wine.region)
    if wine.vintage:
        details.append(wine.vintage)
    parts.append(f"({', '.join(details)})")

    parts.append(f"- {quantity} {_bottles_word(quantity)}")
    return "- " + " ".join(parts)


def build_inventory_snapshot(
    wines: Iterable[Wine],
    bottles: Iterable[Bottle],
    *,
    max_lines: int = 60,
    max_chars: int = 6000,
) -> str:
    """
    Summarize the cellar for prompt inclusion.

    One line per bottle record, in inclusion order. Records whose wine is
    unknown are skipped. Once either bound would be exceeded, the remaining
    records are collapsed into a single trailing line with their counts.

    Args:
        wines: Wine catalogue the bottles point into
        bottles: Bottle records, already filtered by the caller
        max_lines: Maximum number of wine lines before summarizing
        max_chars: Maximum length of the listed lines before summarizing

    Returns:
        The snapshot text, or EMPTY_CELLAR when there is nothing to list
    """
    by_id = {w.id: w for w in wines}
    entries = [
        (by_id[b.wine_id], b.quantity)
        for b in bottles
        if b.quantity > 0 and b.wine_id in by_id
    ]
    if not entries:
        return EMPTY_CELLAR

    lines: list[str] = []
    used = 0
    for position, (wine, quantity) in enumerate(entries):
        line = format_inventory_line(wine, quantity)
        cost = len(line) + (1 if lines else 0)
        if len(lines) >= max_lines or used + cost > max_chars:
            rest = entries[position:]
            omitted_bottles = sum(q for _, q in rest)
            lines.append(
                f"- ... e altri {len(rest)} vini ({omitted_bottles} "
                f"{_bottles_word(omitted_bottles)}) non elencati"
            )
            break
        lines.append(line)
        used += cost

    return "\n".join(lines)


def build_taste_preferences(prefs: TastePreferences | None) -> str:
    """Render the host's taste preferences for the full-menu prompt."""
    if prefs is None:
        return NO_PREFERENCES

    parts = []
    if prefs.preferred_wine_types:
        parts.append(f"Tipi preferiti: {', '.join(prefs.preferred_wine_types)}")
    if prefs.preferred_regions:
        parts.append(f"Regioni preferite: {', '.join(prefs.preferred_regions)}")
    if prefs.preferred_grapes:
        parts.append(f"Vitigni preferiti: {', '.join(prefs.preferred_grapes)}")

    parts.append(f"Corpo: {prefs.body.value.capitalize()}")
    parts.append(f"Dolcezza: {prefs.sweetness.value.capitalize()}")
    parts.append(f"Tannini: {prefs.tannin.value.capitalize()}")
    parts.append(f"Acidità: {prefs.acidity.value.capitalize()}")

    if prefs.notes:
        parts.append(f"Note: {prefs.notes}")
    return "\n".join(parts)


def build_short_preferences(prefs: TastePreferences | None) -> str:
    """One-line variant used by the narrowed regeneration prompts."""
    if prefs is None:
        return ""
    items = []
    if prefs.preferred_wine_types:
        items.append(f"vini preferiti: {', '.join(prefs.preferred_wine_types)}")
    if prefs.preferred_regions:
        items.append(f"regioni preferite: {', '.join(prefs.preferred_regions)}")
    items.append(f"corpo: {prefs.body.value}")
    items.append(f"dolcezza: {prefs.sweetness.value}")
    if prefs.notes:
        items.append(f"note: {prefs.notes}")
    return "- Preferenze gusto: " + "; ".join(items)


def build_rated_inventory(
    wines: Iterable[Wine],
    bottles: Iterable[Bottle],
    *,
    limit: int = 20,
) -> str:
    """
    Top-rated wines with their available bottle counts.

    Used by the backend proposal prompt. Bottles are aggregated per wine;
    wines are ordered by rating (unrated last) and capped at `limit`.
    """
    counts: dict[str, int] = {}
    for bottle in available_bottles(bottles):
        counts[bottle.wine_id] = counts.get(bottle.wine_id, 0) + bottle.quantity

    stocked = [w for w in wines if counts.get(w.id)]
    stocked.sort(key=lambda w: w.rating or 0, reverse=True)

    lines = []
    for wine in stocked[:limit]:
        desc = wine.name
        if wine.producer:
            desc += f" ({wine.producer})"
        if wine.vintage:
            desc += f" {wine.vintage}"
        desc += f" - {wine.type.value}"
        if wine.region:
            desc += f", {wine.region}"
        desc += f" - {counts[wine.id]} bottiglia/e"
        if wine.rating:
            desc += f" - Rating: {wine.rating:g}/5"
        lines.append(desc)
    return "\n".join(lines)
