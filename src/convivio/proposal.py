"""
Convivio - Backend-mediated menu proposal.

Server-side pipeline behind POST /propose:
1. Load the dinner (only its host may ask for a proposal)
2. Load the wines available in the cellars the host belongs to
3. Work out the season and summarize the top-rated wines
4. Ask the model for courses, each with a cellar wine and a market wine
5. Save the proposal on the dinner and return it with the wine proposals

The host's notes carry maximum priority in the prompt.
"""

import logging
import time

from convivio.config import Settings
from convivio.decoder import decode_proposal
from convivio.errors import DinnerNotFoundError
from convivio.inventory import available_bottles, build_rated_inventory
from convivio.llm.client import CompletionClient
from convivio.matching import normalize
from convivio.models.cellar import Bottle, Cellar, Wine, new_id
from convivio.models.dinner import DinnerEvent
from convivio.models.proposal import (
    MenuProposal,
    ProposeRequest,
    ProposeResponse,
    WineProposal,
    WineProposals,
)
from convivio.prompts.builder import build_proposal_prompt, season_for
from convivio.store import DinnerStore

logger = logging.getLogger(__name__)


# =============================================================================
# Loading
# =============================================================================


def load_dinner(store: DinnerStore, user_id: str, dinner_id: str) -> DinnerEvent:
    """Load a dinner hosted by `user_id`. Someone else's dinner is reported as missing."""
    dinner = store.get_dinner(dinner_id)
    if dinner.host_id != user_id:
        raise DinnerNotFoundError(f"Dinner {dinner_id!r} not found")
    return dinner


def load_inventory(
    store: DinnerStore, dinner: DinnerEvent, user_id: str
) -> tuple[list[Wine], list[Bottle]]:
    """
    Wines and available bottles the user can draw from.

    The dinner's own cellar when it names one; otherwise every cellar the
    user is a member of.
    """
    cellars: list[Cellar] = []
    if dinner.cellar_id:
        cellar = store.get_cellar(dinner.cellar_id)
        if cellar is not None:
            cellars.append(cellar)
    if not cellars:
        cellars = store.cellars_for_user(user_id)

    wines: dict[str, Wine] = {}
    bottles: list[Bottle] = []
    for cellar in cellars:
        for wine in cellar.wines:
            wines.setdefault(wine.id, wine)
        bottles.extend(available_bottles(cellar.bottles))
    return list(wines.values()), bottles


# =============================================================================
# Wine proposals
# =============================================================================


def _match_cellar_wine(name: str, wines: list[Wine]) -> Wine | None:
    """First wine whose name contains the proposed one, or the other way round."""
    proposed = normalize(name)
    if not proposed:
        return None
    for wine in wines:
        candidate = normalize(wine.name)
        if candidate and (proposed in candidate or candidate in proposed):
            return wine
    return None


def build_wine_proposals(
    proposal: MenuProposal, dinner_id: str, stocked_wines: list[Wine]
) -> WineProposals:
    """Split each course's wines into cellar ("available") and market proposals."""
    available = []
    suggested = []
    for course in proposal.courses:
        if course.cellar_wine is not None:
            matched = _match_cellar_wine(course.cellar_wine.name, stocked_wines)
            if matched is None:
                logger.info(f"Cellar wine '{course.cellar_wine.name}' not found in inventory")
            available.append(
                WineProposal(
                    id=new_id(),
                    dinner_id=dinner_id,
                    type="available",
                    wine_id=matched.id if matched else None,
                    course=course.course,
                    reasoning=course.cellar_wine.reasoning,
                )
            )
        if course.market_wine is not None:
            suggested.append(
                WineProposal(
                    id=new_id(),
                    dinner_id=dinner_id,
                    type="suggested_purchase",
                    suggested_wine_name=course.market_wine.name,
                    suggested_wine_details=course.market_wine.details,
                    course=course.course,
                    reasoning=course.market_wine.reasoning,
                )
            )
    return WineProposals(available=available, suggested=suggested)


# =============================================================================
# Pipeline
# =============================================================================


async def propose_dinner_menu(
    request: ProposeRequest,
    *,
    store: DinnerStore,
    client: CompletionClient,
    settings: Settings,
) -> ProposeResponse:
    """
    Generate, save and return a menu proposal for a dinner.

    Raises:
        DinnerNotFoundError: No such dinner for this user
        ConfigurationError: No credential for the provider
        CompletionError: Transport failure (network, timeout, rate limit)
        DecodeError: The completion did not match the proposal shape
    """
    start = time.monotonic()
    dinner = load_dinner(store, request.user_id, request.dinner_id)
    logger.info(f"Starting dinner proposal for {request.dinner_id} (user {request.user_id})")

    wines, bottles = load_inventory(store, dinner, request.user_id)
    stocked_ids = {b.wine_id for b in bottles if b.quantity > 0}
    stocked_wines = [w for w in wines if w.id in stocked_ids]
    logger.info(f"Loaded wine inventory: {len(stocked_wines)} wines")

    client.ensure_configured()

    prompt = build_proposal_prompt(
        dinner,
        season=season_for(dinner.date),
        inventory_summary=build_rated_inventory(
            wines, bottles, limit=settings.proposal_inventory_limit
        ),
    )
    text = await client.complete(
        prompt,
        task="proposal",
        timeout=settings.completion_timeout_seconds,
    )
    proposal = decode_proposal(text)
    wine_proposals = build_wine_proposals(proposal, dinner.id, stocked_wines)

    store.save_dinner(dinner.with_proposal(proposal))

    elapsed = time.monotonic() - start
    logger.info(
        f"Dinner proposal completed for {dinner.id}: {len(proposal.courses)} courses, "
        f"{len(wine_proposals.available) + len(wine_proposals.suggested)} wines "
        f"in {elapsed:.1f}s"
    )
    return ProposeResponse(success=True, menu=proposal, wine_proposals=wine_proposals)
