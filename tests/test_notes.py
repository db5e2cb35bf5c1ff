"""
Tests for the dinner notes: kitchen, wine service and hosting briefings.

Covers the prompt, the decoder, generation through the completion double,
storage on the dinner and the plain-text export.
"""

import asyncio
import copy
import json

import pytest

from convivio.decoder import decode_dinner_note
from convivio.errors import DecodeError, ItemNotFoundError, NetworkError
from convivio.generator import MenuGenerator
from convivio.models.confirmation import ConfirmedWine, WineTemperatureCategory
from convivio.models.notes import (
    DinnerNote,
    DinnerNoteType,
    HostingNotes,
    KitchenNotes,
    WineNotes,
)
from convivio.notes import export_note_text
from convivio.planner import DinnerPlanner
from convivio.prompts import templates as t
from convivio.prompts.builder import build_note_prompt
from convivio.store import DinnerStore

from tests.payloads import (
    HOSTING_NOTE_PAYLOAD,
    KITCHEN_NOTE_PAYLOAD,
    WINE_NOTE_PAYLOAD,
    fenced,
)


def _run(coro):
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


@pytest.fixture
def generator(mock_client, settings):
    return MenuGenerator(mock_client, settings)


@pytest.fixture
def store(cellar, dinner):
    store = DinnerStore()
    store.save_cellar(cellar)
    store.save_dinner(dinner)
    return store


@pytest.fixture
def planner(store, mock_client, settings):
    return DinnerPlanner(store, MenuGenerator(mock_client, settings))


@pytest.fixture
def confirmed():
    return [
        ConfirmedWine(
            wine_id="w-gaja",
            wine_name="Barbaresco",
            producer="Gaja",
            vintage="2019",
            course="primi",
            temperature_category=WineTemperatureCategory.FULL_RED,
            is_from_cellar=True,
        )
    ]


class TestNotePrompt:
    """Tests for the briefing prompts."""

    def test_kitchen_lists_dishes_with_descriptions(self, dinner, menu):
        prompt = build_note_prompt(DinnerNoteType.KITCHEN, dinner, menu)

        assert prompt.system == t.NOTE_KITCHEN_SYSTEM
        assert "ANTIPASTI:\n- Bruschette al pomodoro: Bruschette al pomodoro della casa" in prompt.user
        assert "sabato 12 luglio 2025 alle 20:30" in prompt.user
        assert "Niente frutti di mare" in prompt.user
        assert prompt.user.endswith(t.NOTE_KITCHEN_SCHEMA)

    def test_kitchen_without_menu(self, dinner):
        prompt = build_note_prompt("cucina", dinner, None)

        assert t.NO_MENU in prompt.user

    def test_wine_prefers_confirmed_wines(self, dinner, menu, confirmed):
        prompt = build_note_prompt(DinnerNoteType.WINE, dinner, menu, confirmed_wines=confirmed)

        assert "- Gaja Barbaresco 2019 - primi" in prompt.user
        assert "Franciacorta" not in prompt.user.split("VINI CONFERMATI")[1].split("Segui")[0]

    def test_wine_falls_back_to_pairings(self, dinner, menu):
        prompt = build_note_prompt(DinnerNoteType.WINE, dinner, menu)

        assert "- Ca' del Bosco Franciacorta Cuvée Prestige - antipasti" in prompt.user
        assert "Antipasti: Bruschette al pomodoro, Carpaccio di manzo" in prompt.user

    def test_wine_with_nothing_to_serve(self, dinner):
        prompt = build_note_prompt(DinnerNoteType.WINE, dinner, None)

        assert t.NO_CONFIRMED_WINES in prompt.user
        assert t.NO_MENU in prompt.user

    def test_hosting_occasion(self, dinner, menu):
        prompt = build_note_prompt(DinnerNoteType.HOSTING, dinner, menu, cuisine="Piemontese")
        assert "Occasione: Compleanno di Marco" in prompt.user
        assert "Tipo cucina: Piemontese" in prompt.user
        assert prompt.user.endswith(t.NOTE_HOSTING_SCHEMA)

        casual = dinner.model_copy(update={"occasion": None, "notes": None})
        prompt = build_note_prompt(DinnerNoteType.HOSTING, casual, menu)
        assert f"Occasione: {t.DEFAULT_HOSTING_OCCASION}" in prompt.user
        assert f"Note: {t.NO_NOTES}" in prompt.user

    def test_unknown_type(self, dinner):
        with pytest.raises(ValueError):
            build_note_prompt("dolci", dinner, None)


class TestDecodeNote:
    """Tests for decoding the three briefing shapes."""

    def test_kitchen(self):
        notes = decode_dinner_note(fenced(KITCHEN_NOTE_PAYLOAD), DinnerNoteType.KITCHEN)

        assert isinstance(notes, KitchenNotes)
        recipe = notes.recipes[0]
        assert recipe.difficulty.value == "difficile"
        assert recipe.total_minutes == 210
        assert recipe.ingredients[0].quantity == "1.2"
        assert notes.shopping_list[0].items[0].name == "Cappello del prete"

    def test_wine(self):
        notes = decode_dinner_note(json.dumps(WINE_NOTE_PAYLOAD), "vini")

        assert isinstance(notes, WineNotes)
        assert notes.cards[0].decanting.needed is True
        assert notes.equipment[0].quantity == 1

    def test_hosting(self):
        notes = decode_dinner_note(fenced(HOSTING_NOTE_PAYLOAD), "accoglienza")

        assert isinstance(notes, HostingNotes)
        assert notes.after_dinner.digestif.what == "Grappa di Barolo"
        assert notes.preparation.table.centerpiece is None

    def test_missing_recipes(self):
        payload = copy.deepcopy(KITCHEN_NOTE_PAYLOAD)
        del payload["ricette"]

        with pytest.raises(DecodeError) as exc_info:
            decode_dinner_note(json.dumps(payload), DinnerNoteType.KITCHEN)
        assert exc_info.value.path == "ricette"

    def test_wrong_shape_for_type(self):
        with pytest.raises(DecodeError):
            decode_dinner_note(json.dumps(WINE_NOTE_PAYLOAD), DinnerNoteType.HOSTING)

    def test_no_json(self):
        with pytest.raises(DecodeError):
            decode_dinner_note("Mi dispiace, non posso aiutarti.", DinnerNoteType.WINE)


class TestGenerateNote:
    """Tests for note generation through the completion client."""

    def test_task_and_budget(self, generator, mock_client, dinner, menu):
        mock_client.complete.return_value = fenced(WINE_NOTE_PAYLOAD)

        notes = _run(generator.generate_dinner_note(dinner, menu, DinnerNoteType.WINE))

        assert notes.cards[0].wine == "Barbaresco 2019"
        kwargs = mock_client.complete.await_args.kwargs
        assert kwargs["task"] == "notes"
        assert kwargs["timeout"] == 180.0
        assert mock_client.complete.await_args.args[0].system == t.NOTE_WINE_SYSTEM

    def test_default_cuisine_used(self, generator, mock_client, dinner, menu):
        mock_client.complete.return_value = fenced(HOSTING_NOTE_PAYLOAD)

        _run(generator.generate_dinner_note(dinner, menu, "accoglienza"))

        assert "Tipo cucina: Italiana" in mock_client.complete.await_args.args[0].user

    def test_decode_failure_propagates(self, generator, mock_client, dinner, menu):
        mock_client.complete.return_value = '{"ricette": []}'

        with pytest.raises(DecodeError):
            _run(generator.generate_dinner_note(dinner, menu, DinnerNoteType.KITCHEN))


class TestPlannerNotes:
    """Tests for storing notes on the dinner."""

    def test_saves_note(self, planner, store, mock_client, dinner, menu):
        store.save_dinner(dinner.with_menu(menu))
        mock_client.complete.return_value = fenced(KITCHEN_NOTE_PAYLOAD)

        notes = _run(planner.generate_note("dinner-1", "cucina"))

        saved = store.get_dinner("dinner-1")
        assert saved.note(DinnerNoteType.KITCHEN) == notes
        assert saved.note(DinnerNoteType.WINE) is None
        assert "Brasato al Barolo" in mock_client.complete.await_args.args[0].user

    def test_works_without_menu(self, planner, store, mock_client):
        mock_client.complete.return_value = fenced(HOSTING_NOTE_PAYLOAD)

        _run(planner.generate_note("dinner-1", DinnerNoteType.HOSTING))

        assert t.NO_MENU in mock_client.complete.await_args.args[0].user
        assert store.get_dinner("dinner-1").note("accoglienza") is not None

    def test_uses_confirmed_wines(self, planner, store, mock_client, dinner, confirmed):
        store.save_dinner(dinner.with_confirmed_wines(confirmed))
        mock_client.complete.return_value = fenced(WINE_NOTE_PAYLOAD)

        _run(planner.generate_note("dinner-1", DinnerNoteType.WINE))

        assert "- Gaja Barbaresco 2019 - primi" in mock_client.complete.await_args.args[0].user

    def test_replaces_same_type_only(self, planner, store, mock_client):
        mock_client.complete.return_value = fenced(WINE_NOTE_PAYLOAD)
        _run(planner.generate_note("dinner-1", DinnerNoteType.WINE))
        mock_client.complete.return_value = fenced(HOSTING_NOTE_PAYLOAD)
        _run(planner.generate_note("dinner-1", DinnerNoteType.HOSTING))

        replacement = copy.deepcopy(WINE_NOTE_PAYLOAD)
        replacement["consigli_sommelier"] = ["Aprire tutto un'ora prima"]
        mock_client.complete.return_value = fenced(replacement)
        _run(planner.generate_note("dinner-1", DinnerNoteType.WINE))

        saved = store.get_dinner("dinner-1")
        assert set(saved.dinner_notes) == {DinnerNoteType.WINE, DinnerNoteType.HOSTING}
        assert saved.note(DinnerNoteType.WINE).sommelier_tips == ["Aprire tutto un'ora prima"]

    @pytest.mark.parametrize(
        "outcome",
        [NetworkError("connection reset"), '{"schede_vino": []}'],
    )
    def test_failure_leaves_dinner_unchanged(self, planner, store, mock_client, outcome):
        before = store.get_dinner("dinner-1")
        if isinstance(outcome, Exception):
            mock_client.complete.side_effect = outcome
            expected = NetworkError
        else:
            mock_client.complete.return_value = outcome
            expected = DecodeError

        with pytest.raises(expected):
            _run(planner.generate_note("dinner-1", DinnerNoteType.WINE))

        assert store.get_dinner("dinner-1") == before

    def test_delete_note(self, planner, store, dinner):
        notes = KitchenNotes.model_validate(KITCHEN_NOTE_PAYLOAD)
        store.save_dinner(dinner.with_note(DinnerNote.from_content(DinnerNoteType.KITCHEN, notes)))

        saved = planner.delete_note("dinner-1", "cucina")

        assert saved.dinner_notes == {}
        with pytest.raises(ItemNotFoundError):
            planner.delete_note("dinner-1", "cucina")


class TestDinnerNoteStorage:
    def test_content_survives_storage(self):
        notes = WineNotes.model_validate(WINE_NOTE_PAYLOAD)

        stored = DinnerNote.from_content(DinnerNoteType.WINE, notes)

        assert json.loads(stored.content_json)["schede_vino"][0]["nome_vino"] == "Barbaresco 2019"
        assert stored.content == notes

    def test_display_names(self):
        assert [n.display_name for n in DinnerNoteType] == [
            "Note Cucina",
            "Note Vini",
            "Note Accoglienza",
        ]


class TestExportText:
    """Tests for the plain-text rendering."""

    def test_kitchen_timeline_earliest_first(self, dinner):
        notes = KitchenNotes.model_validate(KITCHEN_NOTE_PAYLOAD)

        text = export_note_text(DinnerNoteType.KITCHEN, notes, dinner)

        assert text.startswith("### NOTE CUCINA\nCena: Cena estiva")
        assert text.index("4 ore prima") < text.index("30 min prima")
        assert "- 30 min prima: Tostare il pane [Bruschette al pomodoro]" in text
        assert "✓ Preparabile in anticipo" in text
        assert "1. Marinare la carne" in text
        assert text.endswith("---\nGenerato da Convivio")

    def test_wine_decanting_line(self, dinner):
        notes = WineNotes.model_validate(WINE_NOTE_PAYLOAD)

        text = export_note_text("vini", notes, dinner)

        assert "Decantazione: 1 ora - Aprire i profumi" in text
        assert "- 🍷 Decanter (x1)" in text
        assert "1. Franciacorta - Con antipasti" in text

    def test_hosting_sections(self, dinner):
        notes = HostingNotes.model_validate(HOSTING_NOTE_PAYLOAD)

        text = export_note_text(DinnerNoteType.HOSTING, notes, dinner)

        assert "☐ Bicchieri lucidati" in text
        assert "Aperitivo: Franciacorta - Terrazza (30 minuti)" in text
        assert "Digestivo: Grappa di Barolo - Con il caffè" in text
        assert "### CONSIGLI HOST\n- Godersi la serata" in text
