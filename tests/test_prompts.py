"""
Tests for prompt assembly.
"""

from datetime import datetime

import pytest

from convivio.models.dinner import DietType, MenuRequest
from convivio.prompts import templates as t
from convivio.prompts.builder import (
    build_cellar_wine_prompt,
    build_invite_prompt,
    build_menu_prompt,
    build_proposal_prompt,
    describe_menu,
    invite_tone,
    italian_long_date,
    italian_short_date,
    season_for,
)


class TestDates:
    def test_long_date(self):
        assert italian_long_date(datetime(2025, 7, 12)) == "sabato 12 luglio 2025"

    def test_short_date(self):
        assert italian_short_date(datetime(2025, 1, 5)) == "05/01/2025"

    @pytest.mark.parametrize(
        "month, season",
        [(1, "inverno"), (3, "primavera"), (7, "estate"), (10, "autunno"), (12, "inverno")],
    )
    def test_season(self, month, season):
        assert season_for(datetime(2025, month, 1)) == season


class TestMenuPrompt:
    """Tests for the full-menu prompt."""

    def _request(self, **overrides) -> MenuRequest:
        fields = {
            "title": "Cena estiva",
            "date": datetime(2025, 7, 12, 20, 30),
            "person_count": 6,
            "diet_type": DietType.VEGETARIAN,
        }
        fields.update(overrides)
        return MenuRequest(**fields)

    def test_notes_under_priority_marker(self):
        prompt = build_menu_prompt(self._request(notes="Solo piatti freddi"), t.NO_NOTES, "")
        assert f"{t.NOTES_MARKER}\nSolo piatti freddi" in prompt.user

    def test_missing_notes_say_none(self):
        prompt = build_menu_prompt(self._request(notes="   "), "inventario", "gusti")
        assert f"{t.NOTES_MARKER}\n{t.NO_NOTES}" in prompt.user

    def test_context_fields(self):
        prompt = build_menu_prompt(self._request(), "- Gaja Barbaresco", "Corpo: Medio")

        assert prompt.system == t.MENU_SYSTEM
        assert "sabato 12 luglio 2025" in prompt.user
        assert "estate" in prompt.user
        assert "- Persone: 6" in prompt.user
        assert DietType.VEGETARIAN.value in prompt.user
        assert "- Gaja Barbaresco" in prompt.user
        assert "Corpo: Medio" in prompt.user
        assert prompt.user.endswith(t.MENU_SCHEMA)


class TestNarrowedPrompts:
    def test_describe_menu(self, menu):
        lines = describe_menu(menu).splitlines()
        assert lines[0] == "Antipasti: Bruschette al pomodoro, Carpaccio di manzo"
        assert lines[-1] == "Dolci: Panna cotta"

    def test_cellar_wine_prompt(self, menu, dinner):
        pairing = menu.pairings[1]
        prompt = build_cellar_wine_prompt(menu, pairing, dinner, "- inventario")

        assert '"Gaja Barbaresco 2019"' in prompt.user
        assert "Risotto ai funghi" in prompt.user
        assert "Antinori Tignanello 2018" in prompt.user
        assert "Niente frutti di mare" in prompt.user
        assert prompt.user.endswith(t.PAIRED_WINE_SCHEMA)


class TestInvitePrompt:
    @pytest.mark.parametrize(
        "occasion, tone",
        [
            ("Matrimonio di Anna", t.TONE_FORMAL),
            ("Compleanno", t.TONE_SEMI_FORMAL),
            ("Cena con i colleghi", t.TONE_BUSINESS),
            ("Serata tra amici", t.TONE_INFORMAL),
            (None, t.TONE_INFORMAL),
        ],
    )
    def test_tone(self, occasion, tone):
        assert invite_tone(occasion) == tone

    def test_invite_prompt(self, dinner, menu):
        prompt = build_invite_prompt(dinner, menu)

        assert "20:30" in prompt.user
        assert "ANTEPRIMA MENU" in prompt.user
        assert "- Note: Niente frutti di mare" in prompt.user

    def test_invite_without_menu(self, dinner):
        assert "ANTEPRIMA MENU" not in build_invite_prompt(dinner).user


class TestProposalPrompt:
    def test_defaults(self, dinner):
        prompt = build_proposal_prompt(dinner, season="estate", inventory_summary="")

        assert "- Nome: Cena estiva" in prompt.user
        assert "- Data: 12/07/2025" in prompt.user
        assert "- Stile: conviviale" in prompt.user
        assert t.NO_GUESTS in prompt.user
        assert t.NO_CELLAR_WINES in prompt.user
        assert "RICHIESTE SPECIFICHE DELL'UTENTE:\nNiente frutti di mare" in prompt.user

    def test_inventory_and_guests(self, dinner):
        prompt = build_proposal_prompt(
            dinner,
            season="estate",
            inventory_summary="Barbaresco (Gaja) 2019 - red",
            guest_summary=["Anna (EVITARE: glutine)"],
        )
        assert "OSPITI (6 persone):\nAnna (EVITARE: glutine)" in prompt.user
        assert "Barbaresco (Gaja) 2019 - red" in prompt.user
