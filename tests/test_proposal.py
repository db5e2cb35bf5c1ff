"""
Tests for the backend-mediated proposal pipeline.
"""

import asyncio
import json

import pytest

from convivio.decoder import decode_proposal
from convivio.errors import ConfigurationError, DecodeError, DinnerNotFoundError
from convivio.models.cellar import Bottle, Cellar, Wine, WineType
from convivio.models.proposal import ProposeRequest
from convivio.proposal import (
    build_wine_proposals,
    load_dinner,
    load_inventory,
    propose_dinner_menu,
)
from convivio.store import DinnerStore

from tests.payloads import PROPOSAL_PAYLOAD


def _run(coro):
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


@pytest.fixture
def store(cellar, dinner):
    store = DinnerStore()
    store.save_cellar(cellar)
    store.save_dinner(dinner)
    return store


def _propose(store, client, settings, user_id="user-1", dinner_id="dinner-1"):
    request = ProposeRequest(dinner_id=dinner_id, user_id=user_id)
    return _run(propose_dinner_menu(request, store=store, client=client, settings=settings))


class TestLoading:
    def test_host_only(self, store):
        assert load_dinner(store, "user-1", "dinner-1").id == "dinner-1"
        with pytest.raises(DinnerNotFoundError):
            load_dinner(store, "user-2", "dinner-1")

    def test_dinner_cellar(self, store, dinner):
        wines, bottles = load_inventory(store, dinner, "user-1")

        assert {w.id for w in wines} == {"w-gaja", "w-cdb", "w-vietti"}
        assert [b.id for b in bottles] == ["b-1", "b-2"]

    def test_member_cellars_when_dinner_has_none(self, store, dinner):
        store.save_cellar(
            Cellar(
                id="shared",
                owner_id="user-9",
                member_ids=["user-1"],
                wines=[Wine(id="w-sas", name="Sassicaia", type=WineType.RED)],
                bottles=[Bottle(wine_id="w-sas", quantity=2)],
            )
        )
        dinner = dinner.model_copy(update={"cellar_id": None})

        wines, bottles = load_inventory(store, dinner, "user-1")

        assert "w-sas" in {w.id for w in wines}
        assert len(bottles) == 3


class TestWineProposals:
    """Tests for splitting course wines into cellar and market proposals."""

    def test_split(self, cellar_wines):
        proposal = decode_proposal(json.dumps(PROPOSAL_PAYLOAD))

        proposals = build_wine_proposals(proposal, "dinner-1", cellar_wines)

        assert [p.type for p in proposals.available] == ["available", "available"]
        assert proposals.available[0].wine_id == "w-gaja"
        assert proposals.available[1].wine_id is None  # no Sauternes in the cellar
        assert proposals.available[1].course == "dessert"

        (market,) = proposals.suggested
        assert market.type == "suggested_purchase"
        assert market.suggested_wine_name == "Roero Arneis"
        assert market.suggested_wine_details == "Bianco, Piemonte, 15-20 euro"
        assert market.dinner_id == "dinner-1"

    def test_ids_are_unique(self, cellar_wines):
        proposal = decode_proposal(json.dumps(PROPOSAL_PAYLOAD))
        proposals = build_wine_proposals(proposal, "dinner-1", cellar_wines)

        ids = [p.id for p in proposals.available + proposals.suggested]
        assert len(set(ids)) == len(ids) == 3
        assert all(ids)


class TestProposeDinnerMenu:
    """Tests for the full proposal pipeline."""

    def test_success_saves_proposal(self, store, mock_client, settings):
        mock_client.complete.return_value = json.dumps(PROPOSAL_PAYLOAD)

        response = _propose(store, mock_client, settings)

        assert response.success
        assert [c.name for c in response.menu.courses] == ["Vitello tonnato", "Bonet"]
        assert len(response.wine_proposals.available) == 2
        saved = store.get_dinner("dinner-1").menu_proposal
        assert saved.reasoning == "Menu piemontese estivo"
        assert mock_client.complete.await_args.kwargs["task"] == "proposal"

    def test_prompt_has_rated_inventory_and_notes(self, store, mock_client, settings):
        mock_client.complete.return_value = json.dumps(PROPOSAL_PAYLOAD)

        _propose(store, mock_client, settings)

        prompt = mock_client.complete.await_args.args[0]
        assert "Barbaresco (Gaja) 2019 - red, Piemonte - 3 bottiglia/e - Rating: 4.5/5" in prompt.user
        assert "Niente frutti di mare" in prompt.user
        assert "estate" in prompt.user

    def test_other_users_dinner(self, store, mock_client, settings):
        with pytest.raises(DinnerNotFoundError):
            _propose(store, mock_client, settings, user_id="user-2")
        mock_client.complete.assert_not_awaited()

    def test_unconfigured(self, store, mock_client, settings):
        mock_client.ensure_configured.side_effect = ConfigurationError("no key")

        with pytest.raises(ConfigurationError):
            _propose(store, mock_client, settings)
        mock_client.complete.assert_not_awaited()

    @pytest.mark.parametrize(
        "user_id, dinner_id",
        [("user-2", "dinner-1"), ("user-1", "dinner-missing")],
    )
    def test_missing_dinner_reported_before_credentials(
        self, store, mock_client, settings, user_id, dinner_id
    ):
        mock_client.ensure_configured.side_effect = ConfigurationError("no key")

        with pytest.raises(DinnerNotFoundError):
            _propose(store, mock_client, settings, user_id=user_id, dinner_id=dinner_id)
        mock_client.ensure_configured.assert_not_called()

    def test_bad_answer_saves_nothing(self, store, mock_client, settings):
        mock_client.complete.return_value = '{"menu": {"courses": []}}'

        with pytest.raises(DecodeError):
            _propose(store, mock_client, settings)
        assert store.get_dinner("dinner-1").menu_proposal is None
