"""
Tests for the inventory snapshot and taste-preference text.
"""

from convivio.inventory import (
    EMPTY_CELLAR,
    NO_PREFERENCES,
    available_bottles,
    build_inventory_snapshot,
    build_rated_inventory,
    build_short_preferences,
    build_taste_preferences,
    format_inventory_line,
)
from convivio.models.cellar import Bottle, Wine, WineType
from convivio.models.dinner import BodyPreference, TastePreferences


class TestSnapshot:
    """Tests for build_inventory_snapshot."""

    def test_empty_cellar(self):
        assert build_inventory_snapshot([], []) == EMPTY_CELLAR

    def test_only_unknown_or_empty_records(self, cellar_wines):
        bottles = [
            Bottle(wine_id="missing", quantity=3),
            Bottle(wine_id="w-gaja", quantity=0),
        ]
        assert build_inventory_snapshot(cellar_wines, bottles) == EMPTY_CELLAR

    def test_one_line_per_record_in_order(self, cellar_wines, cellar_bottles):
        snapshot = build_inventory_snapshot(cellar_wines, available_bottles(cellar_bottles))

        assert snapshot.splitlines() == [
            "- Gaja Barbaresco (Rosso, Piemonte, 2019) - 3 bottiglie",
            "- Ca' del Bosco Franciacorta Cuvée Prestige (Spumante, Lombardia) - 1 bottiglia",
        ]

    def test_line_without_producer(self):
        wine = Wine(name="Vino della casa", type=WineType.WHITE)
        assert format_inventory_line(wine, 2) == "- Vino della casa (Bianco) - 2 bottiglie"

    def test_line_bound_summarizes_rest(self, cellar_wines):
        bottles = [
            Bottle(wine_id="w-gaja", quantity=3),
            Bottle(wine_id="w-cdb", quantity=1),
            Bottle(wine_id="w-vietti", quantity=4),
        ]
        snapshot = build_inventory_snapshot(cellar_wines, bottles, max_lines=1)

        lines = snapshot.splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("- Gaja Barbaresco")
        assert lines[1] == "- ... e altri 2 vini (5 bottiglie) non elencati"

    def test_char_bound_summarizes_rest(self, cellar_wines):
        bottles = [Bottle(wine_id="w-gaja", quantity=1) for _ in range(50)]
        snapshot = build_inventory_snapshot(cellar_wines, bottles, max_chars=200)

        lines = snapshot.splitlines()
        assert lines[-1].startswith("- ... e altri ")
        assert sum(len(line) + 1 for line in lines[:-1]) <= 201

    def test_available_bottles(self, cellar_bottles):
        assert [b.id for b in available_bottles(cellar_bottles)] == ["b-1", "b-2"]


class TestTastePreferences:
    def test_none(self):
        assert build_taste_preferences(None) == NO_PREFERENCES
        assert build_short_preferences(None) == ""

    def test_full_block(self):
        prefs = TastePreferences(
            preferred_regions=["Piemonte", "Toscana"],
            body=BodyPreference.FULL,
            notes="Niente barrique",
        )
        text = build_taste_preferences(prefs)

        assert "Regioni preferite: Piemonte, Toscana" in text
        assert "Corpo: Corposo" in text
        assert "Note: Niente barrique" in text

    def test_short_line(self):
        prefs = TastePreferences(preferred_wine_types=["rosso"])
        line = build_short_preferences(prefs)

        assert line.startswith("- Preferenze gusto: ")
        assert "vini preferiti: rosso" in line


class TestRatedInventory:
    """Tests for the top-rated summary used by the proposal."""

    def test_ordered_by_rating(self, cellar_wines, cellar_bottles):
        summary = build_rated_inventory(cellar_wines, cellar_bottles)

        assert summary.splitlines() == [
            "Barbaresco (Gaja) 2019 - red, Piemonte - 3 bottiglia/e - Rating: 4.5/5",
            "Franciacorta Cuvée Prestige (Ca' del Bosco) - sparkling, Lombardia - 1 bottiglia/e - Rating: 4/5",
        ]

    def test_limit(self, cellar_wines, cellar_bottles):
        assert len(build_rated_inventory(cellar_wines, cellar_bottles, limit=1).splitlines()) == 1

    def test_empty(self):
        assert build_rated_inventory([], []) == ""
