"""
Convivio - Availability Matcher.

Cross-references the free-text wines of a generated menu against the live
cellar. Matching is a text heuristic, not a key lookup: the completion model
rarely echoes the stored strings exactly, and a missed match is acceptable.

Comparison is normalized (case, accents, whitespace). Scores are in [0, 1].
"""

import logging
import unicodedata
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from convivio.errors import ItemNotFoundError
from convivio.models.cellar import Bottle, Wine, WineType
from convivio.models.confirmation import ConfirmedWine, WineTemperatureCategory
from convivio.models.menu import MenuResponse, PairedWine, WinePairing, WineSource

logger = logging.getLogger(__name__)

BEST_MATCH_THRESHOLD = 0.6
ALTERNATIVE_THRESHOLD = 0.3
CANDIDATE_THRESHOLD = 0.2


def normalize(text: str | None) -> str:
    """Lowercase, strip accents, collapse whitespace."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return " ".join(stripped.lower().split())


# =============================================================================
# Type inference
# =============================================================================

# Checked in order; the first table with a hit wins.
_TYPE_KEYWORDS: list[tuple[WineType, tuple[str, ...]]] = [
    (
        WineType.SPARKLING,
        ("spumante", "prosecco", "champagne", "franciacorta", "brut", "metodo classico"),
    ),
    (WineType.ROSE, ("rosato", "rose", "cerasuolo", "chiaretto")),
    (
        WineType.WHITE,
        (
            "bianco", "verdicchio", "pinot grigio", "sauvignon blanc", "chardonnay",
            "vermentino", "trebbiano", "soave", "gavi", "falanghina", "friulano",
            "pecorino", "ribolla", "gewurztraminer", "riesling", "muller",
        ),
    ),
    (
        WineType.DESSERT,
        ("passito", "moscato", "vin santo", "sauternes", "late harvest", "vendemmia tardiva"),
    ),
    (WineType.FORTIFIED, ("porto", "marsala", "sherry", "madeira")),
    (
        WineType.RED,
        (
            "rosso", "barolo", "brunello", "chianti", "amarone", "barbaresco", "nebbiolo",
            "sangiovese", "montepulciano", "primitivo", "nero d'avola", "aglianico",
            "merlot", "cabernet", "syrah", "pinot nero",
        ),
    ),
]


def infer_wine_type(name: str | None) -> WineType | None:
    """Guess the wine style from keywords in its name."""
    text = normalize(name)
    if not text:
        return None
    for wine_type, keywords in _TYPE_KEYWORDS:
        if any(k in text for k in keywords):
            return wine_type
    return None


# =============================================================================
# Matching
# =============================================================================


@dataclass
class WineMatch:
    """A cellar wine that matched, with its available bottles."""

    wine: Wine
    bottles: list[Bottle]
    score: float
    reason: str

    @property
    def total_quantity(self) -> int:
        return sum(b.quantity for b in self.bottles)

    @property
    def location(self) -> str | None:
        locations: list[str] = []
        for bottle in self.bottles:
            if bottle.location and bottle.location not in locations:
                locations.append(bottle.location)
        return ", ".join(locations) if locations else None


@dataclass
class MatchResult:
    query: str
    match: WineMatch | None = None
    alternatives: list[WineMatch] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.match is not None


def _group_bottles(wines: Iterable[Wine], bottles: Iterable[Bottle]) -> list[tuple[Wine, list[Bottle]]]:
    """Wines with at least one available bottle, in catalogue order."""
    grouped: dict[str, list[Bottle]] = {}
    for bottle in bottles:
        if bottle.is_available:
            grouped.setdefault(bottle.wine_id, []).append(bottle)
    return [(w, grouped[w.id]) for w in wines if w.id in grouped]


def _words(text: str) -> set[str]:
    return {w for w in text.split() if len(w) > 2}


def _score(
    wine: Wine,
    name: str,
    producer: str,
    wine_type: WineType | None,
    region: str,
    grapes: set[str],
) -> tuple[float, str]:
    score = 0.0
    reasons = []
    wine_name = normalize(wine.name)
    wine_producer = normalize(wine.producer)

    if wine_name == name:
        score += 0.5
        reasons.append("Nome esatto")
    elif wine_name and name and (wine_name in name or name in wine_name):
        score += 0.35
        reasons.append("Nome simile")
    else:
        query_words = _words(name)
        common = query_words & _words(wine_name)
        if common:
            score += 0.2 * len(common) / max(len(query_words), 1)
            reasons.append(f"Parole comuni: {', '.join(sorted(common))}")

    if producer:
        if wine_producer == producer:
            score += 0.25
            reasons.append("Produttore esatto")
        elif wine_producer and (wine_producer in producer or producer in wine_producer):
            score += 0.15
            reasons.append("Produttore simile")

    if wine_type is not None:
        if wine.type == wine_type:
            score += 0.15
            reasons.append("Stesso tipo di vino")
    else:
        inferred = infer_wine_type(name)
        if inferred is not None and wine.type == inferred:
            score += 0.1
            reasons.append("Tipo simile")

    wine_region = normalize(wine.region)
    if region and wine_region and (wine_region in region or region in wine_region):
        score += 0.1
        reasons.append("Stessa regione")

    if grapes and grapes & {normalize(g) for g in wine.grapes}:
        score += 0.1
        reasons.append("Vitigno comune")

    reason = ", ".join(reasons) if reasons else "Corrispondenza generica"
    return min(score, 1.0), reason


def match_wine(
    name: str,
    producer: str | None,
    wines: Iterable[Wine],
    bottles: Iterable[Bottle],
    *,
    vintage: str | None = None,
    wine_type: WineType | None = None,
    region: str | None = None,
    grapes: list[str] | None = None,
    limit: int = 3,
) -> MatchResult:
    """
    Find a free-text wine in the cellar.

    A pairing whose "producer name vintage" equals a cellar wine's display
    name (after normalization) is an exact match with score 1.0. Otherwise
    the weighted heuristic applies: the best candidate needs 0.6, other
    candidates from 0.3 become alternatives. With no candidate at all, up to
    `limit` wines of the same (given or inferred) type are offered instead.

    Args:
        name: Wine name as written by the completion model
        producer: Producer as written by the completion model
        vintage: Vintage as written by the completion model, if any
        wines: Cellar wine catalogue
        bottles: Cellar bottle records (unavailable ones are ignored)
        wine_type: Known wine type, if any
        region: Known region, if any
        grapes: Known grape varieties, if any
        limit: Maximum number of alternatives

    Returns:
        MatchResult with the best match (or None) and alternatives
    """
    wines = list(wines)
    bottles = list(bottles)
    query_name = normalize(name)
    query_producer = normalize(producer)
    query_region = normalize(region)
    query_grapes = {normalize(g) for g in grapes or []}
    full_query = " ".join(p for p in (query_producer, query_name) if p)
    with_vintage = " ".join(p for p in (full_query, normalize(vintage)) if p)
    exact_forms = {query_name, full_query, with_vintage}

    candidates: list[WineMatch] = []
    for wine, wine_bottles in _group_bottles(wines, bottles):
        display = normalize(wine.display_name)
        if display and display in exact_forms:
            candidates.append(WineMatch(wine, wine_bottles, 1.0, "Nome completo esatto"))
            continue
        score, reason = _score(
            wine, query_name, query_producer, wine_type, query_region, query_grapes
        )
        if score > CANDIDATE_THRESHOLD:
            candidates.append(WineMatch(wine, wine_bottles, score, reason))

    candidates.sort(key=lambda m: m.score, reverse=True)
    best = next((m for m in candidates if m.score >= BEST_MATCH_THRESHOLD), None)
    alternatives = [
        m for m in candidates if m is not best and m.score >= ALTERNATIVE_THRESHOLD
    ][:limit]

    if best is None and not alternatives:
        alternatives = find_alternatives(
            name, wines, bottles, wine_type=wine_type, region=region, grapes=grapes, limit=limit
        )

    return MatchResult(query=full_query or query_name, match=best, alternatives=alternatives)


def find_alternatives(
    name: str,
    wines: Iterable[Wine],
    bottles: Iterable[Bottle],
    *,
    wine_type: WineType | None = None,
    region: str | None = None,
    grapes: list[str] | None = None,
    limit: int = 3,
) -> list[WineMatch]:
    """Cellar wines resembling an unmatched one by type, region and grapes."""
    target = wine_type or infer_wine_type(name)
    query_region = normalize(region)
    query_grapes = {normalize(g) for g in grapes or []}

    matches = []
    for wine, wine_bottles in _group_bottles(wines, bottles):
        score = 0.0
        reasons = []
        if target is not None and wine.type == target:
            score += 0.4
            reasons.append("Stesso tipo")
        wine_region = normalize(wine.region)
        if query_region and wine_region and (wine_region in query_region or query_region in wine_region):
            score += 0.3
            reasons.append("Stessa regione")
        if query_grapes & {normalize(g) for g in wine.grapes}:
            score += 0.3
            reasons.append("Vitigno simile")
        if score > ALTERNATIVE_THRESHOLD:
            matches.append(WineMatch(wine, wine_bottles, score, ", ".join(reasons)))

    matches.sort(key=lambda m: m.score, reverse=True)
    return matches[:limit]


# =============================================================================
# Pairing availability
# =============================================================================


class AvailabilityKind(str, Enum):
    SUFFICIENT = "sufficient"
    INSUFFICIENT = "insufficient"
    NOT_FOUND = "not_found"
    EXTERNAL = "external"


@dataclass
class AvailabilityStatus:
    kind: AvailabilityKind
    available: int = 0
    needed: int = 0
    match: WineMatch | None = None

    @property
    def is_warning(self) -> bool:
        return self.kind in (AvailabilityKind.INSUFFICIENT, AvailabilityKind.NOT_FOUND)

    @property
    def message(self) -> str | None:
        if self.kind == AvailabilityKind.SUFFICIENT:
            return f"✓ {self.available} disponibili, {self.needed} necessarie"
        if self.kind == AvailabilityKind.INSUFFICIENT:
            return f"⚠️ Solo {self.available} disponibili, servono {self.needed}"
        if self.kind == AvailabilityKind.NOT_FOUND:
            return "⚠️ Vino non trovato in cantina"
        return None


def check_pairing_availability(
    pairing: WinePairing | PairedWine,
    wines: Iterable[Wine],
    bottles: Iterable[Bottle],
) -> AvailabilityStatus:
    """Does the cellar hold enough bottles for a cellar pairing?"""
    wine = pairing.wine if isinstance(pairing, WinePairing) else pairing
    if wine.source != WineSource.FROM_CELLAR:
        return AvailabilityStatus(AvailabilityKind.EXTERNAL, needed=wine.quantity_needed)

    result = match_wine(wine.name, wine.producer, wines, bottles, vintage=wine.vintage)
    if result.match is None:
        return AvailabilityStatus(AvailabilityKind.NOT_FOUND, needed=wine.quantity_needed)

    available = result.match.total_quantity
    kind = (
        AvailabilityKind.SUFFICIENT
        if available >= wine.quantity_needed
        else AvailabilityKind.INSUFFICIENT
    )
    return AvailabilityStatus(kind, available=available, needed=wine.quantity_needed, match=result.match)


# =============================================================================
# Wine confirmation
# =============================================================================


def confirm_wines(
    menu: MenuResponse,
    pairing_ids: Iterable[str],
    suggestion_ids: Iterable[str],
    wines: Iterable[Wine],
    bottles: Iterable[Bottle],
) -> list[ConfirmedWine]:
    """
    Snapshot the chosen pairings and purchase suggestions.

    The wine type comes from the matched cellar wine when there is one,
    otherwise it is inferred from the name (red when nothing fits). The
    temperature category follows from the type.

    Raises:
        ItemNotFoundError: an id is not in the menu
    """
    wines = list(wines)
    bottles = list(bottles)
    pairing_ids = list(pairing_ids)
    suggestion_ids = list(suggestion_ids)

    pairings = {p.id: p for p in menu.pairings}
    suggestions = {s.id: s for s in menu.purchase_suggestions}
    missing = [i for i in pairing_ids if i not in pairings]
    missing += [i for i in suggestion_ids if i not in suggestions]
    if missing:
        raise ItemNotFoundError(f"Unknown wine ids: {', '.join(missing)}")

    confirmed = []
    for pairing_id in pairing_ids:
        pairing = pairings[pairing_id]
        wine = pairing.wine
        from_cellar = wine.source == WineSource.FROM_CELLAR
        match = (
            match_wine(wine.name, wine.producer, wines, bottles, vintage=wine.vintage).match
            if from_cellar
            else None
        )
        wine_type = match.wine.type if match else (infer_wine_type(wine.name) or WineType.RED)
        confirmed.append(
            ConfirmedWine(
                wine_id=match.wine.id if match else None,
                wine_name=wine.name,
                producer=wine.producer,
                vintage=wine.vintage,
                wine_type=wine_type,
                course=pairing.course,
                temperature_category=WineTemperatureCategory.suggested_for(wine_type),
                is_from_cellar=from_cellar,
                quantity=max(wine.quantity_needed, 1),
            )
        )

    for suggestion_id in suggestion_ids:
        suggestion = suggestions[suggestion_id]
        wine_type = infer_wine_type(suggestion.wine) or WineType.RED
        confirmed.append(
            ConfirmedWine(
                wine_name=suggestion.wine,
                producer=suggestion.producer,
                vintage=suggestion.vintage,
                wine_type=wine_type,
                course=suggestion.ideal_pairing,
                temperature_category=WineTemperatureCategory.suggested_for(wine_type),
                is_from_cellar=False,
            )
        )

    logger.info(f"Confirmed {len(confirmed)} wines")
    return confirmed
