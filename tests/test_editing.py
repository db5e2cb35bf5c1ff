"""
Tests for the pure menu splice helpers.
"""

import json

import pytest

from convivio.editing import (
    check_dish_index,
    delete_dish,
    delete_dish_by_id,
    delete_wine,
    delete_wine_by_id,
    find_dish,
    find_wine,
    orphaned_pairings,
    parse_source,
    relabel_cellar_pairings,
    replace_dish,
    replace_pairing_wine,
    replace_suggestion,
    replace_wine_by_id,
    wine_position,
)
from convivio.errors import DecodeError, IndexOutOfRangeError, ItemNotFoundError, UnknownCourseError
from convivio.models.menu import (
    Course,
    Dish,
    MenuResponse,
    PairedWine,
    WineSource,
    WineSuggestion,
)

from tests.payloads import DISH_PAYLOAD, PAIRED_WINE_PAYLOAD, SUGGESTION_PAYLOAD


@pytest.fixture
def new_dish() -> Dish:
    return Dish.model_validate(DISH_PAYLOAD)


@pytest.fixture
def new_wine() -> PairedWine:
    return PairedWine.model_validate(PAIRED_WINE_PAYLOAD)


@pytest.fixture
def new_suggestion() -> WineSuggestion:
    return WineSuggestion.model_validate(SUGGESTION_PAYLOAD)


class TestDishAddressing:
    """Tests for positional and id-based dish addressing."""

    def test_check_dish_index_resolves_alias(self, menu):
        assert check_dish_index(menu, "antipasto", 1) == Course.STARTER

    def test_index_out_of_range(self, menu):
        """Index 5 on a course with 2 antipasti."""
        with pytest.raises(IndexOutOfRangeError) as exc_info:
            check_dish_index(menu, Course.STARTER, 5)
        assert exc_info.value.length == 2
        assert exc_info.value.index == 5
        assert isinstance(exc_info.value, IndexError)

    def test_negative_index(self, menu):
        with pytest.raises(IndexOutOfRangeError):
            check_dish_index(menu, "primi", -1)

    def test_unknown_course(self, menu):
        with pytest.raises(UnknownCourseError):
            check_dish_index(menu, "aperitivi", 0)

    def test_find_dish(self, menu):
        target = menu.menu.starters[1]
        assert find_dish(menu, target.id) == (Course.STARTER, 1)

    def test_find_missing_dish(self, menu):
        with pytest.raises(ItemNotFoundError):
            find_dish(menu, "gone")


class TestReplaceDish:
    """Tests for splicing a regenerated dish into the menu."""

    def test_only_target_changes(self, menu, new_dish):
        before = menu.to_blob()
        edited = replace_dish(menu, "antipasti", 0, new_dish)

        assert edited.menu.starters[0] is new_dish
        assert edited.menu.starters[1] is menu.menu.starters[1]
        assert edited.menu.firsts is menu.menu.firsts
        assert edited.pairings is menu.pairings
        assert edited.etiquette is menu.etiquette
        # Input untouched
        assert menu.to_blob() == before

    def test_untouched_sections_serialize_identically(self, menu, new_dish):
        edited = replace_dish(menu, Course.FIRST, 0, new_dish)
        dump_before = menu.model_dump(by_alias=True, mode="json")
        dump_after = edited.model_dump(by_alias=True, mode="json")

        for key in ("antipasti", "secondi", "contorni", "dolci"):
            assert dump_after["menu"][key] == dump_before["menu"][key]
        for key in ("abbinamenti", "suggerimenti_acquisto", "note_servizio", "galateo"):
            assert dump_after[key] == dump_before[key]
        assert dump_after["menu"]["primi"][0]["nome"] == "Tagliatelle al ragù"

    def test_replace_out_of_range(self, menu, new_dish):
        with pytest.raises(IndexOutOfRangeError):
            replace_dish(menu, "dolci", 1, new_dish)


class TestDeleteDish:
    """Tests for dish deletion."""

    def test_delete_dish(self, menu):
        kept = menu.menu.starters[1]
        edited = delete_dish(menu, "antipasti", 0)

        assert edited.menu.starters == [kept]
        assert len(menu.menu.starters) == 2

    def test_delete_by_id(self, menu):
        target = menu.menu.mains[0]
        edited = delete_dish_by_id(menu, target.id)
        assert edited.menu.mains == []

    def test_pairings_survive_and_are_reported(self, menu):
        """Deleting the last dish of a course leaves its pairing dangling."""
        edited = delete_dish(menu, "primi", 0)

        assert edited.pairings == menu.pairings
        orphans = orphaned_pairings(edited)
        assert [p.course for p in orphans] == ["primi"]

    def test_no_orphans_in_fresh_menu(self, menu):
        assert orphaned_pairings(menu) == []


class TestWineAddressing:
    """Tests for the filtered cellar index and purchase index."""

    def test_parse_source_aliases(self):
        assert parse_source("cellar") == WineSource.FROM_CELLAR
        assert parse_source("Suggerimento") == WineSource.TO_PURCHASE
        assert parse_source(WineSource.TO_PURCHASE) == WineSource.TO_PURCHASE

    def test_parse_source_unknown(self):
        with pytest.raises(ValueError):
            parse_source("enoteca")

    def test_cellar_index_is_filtered(self, menu):
        assert wine_position(menu, WineSource.FROM_CELLAR, 1) == 1
        with pytest.raises(IndexOutOfRangeError) as exc_info:
            wine_position(menu, WineSource.FROM_CELLAR, 2)
        assert exc_info.value.length == 2

    def test_purchase_index(self, menu):
        assert wine_position(menu, "purchase", 1) == 1
        with pytest.raises(IndexOutOfRangeError):
            wine_position(menu, "purchase", 2)

    def test_find_wine(self, menu):
        assert find_wine(menu, menu.pairings[2].id) == ("pairing", 2)
        assert find_wine(menu, menu.purchase_suggestions[0].id) == ("suggestion", 0)
        with pytest.raises(ItemNotFoundError):
            find_wine(menu, "gone")


class TestReplaceWine:
    """Tests for splicing regenerated wines."""

    def test_replace_pairing_keeps_course(self, menu, new_wine):
        old = menu.pairings[1]
        edited = replace_pairing_wine(menu, 1, new_wine)

        replaced = edited.pairings[1]
        assert replaced.course == old.course
        assert replaced.wine is new_wine
        assert replaced.id != old.id
        assert edited.pairings[0] is menu.pairings[0]
        assert edited.purchase_suggestions is menu.purchase_suggestions

    def test_replace_suggestion(self, menu, new_suggestion):
        edited = replace_suggestion(menu, 0, new_suggestion)

        assert edited.purchase_suggestions[0] is new_suggestion
        assert edited.purchase_suggestions[1] is menu.purchase_suggestions[1]
        assert edited.pairings is menu.pairings

    def test_replace_by_id_type_mismatch(self, menu, new_suggestion):
        with pytest.raises(TypeError):
            replace_wine_by_id(menu, menu.pairings[0].id, new_suggestion)

    def test_replace_purchase_pairing_by_id(self, menu, new_wine):
        """Purchase-sourced pairings are only reachable by id."""
        target = menu.pairings[2]
        edited = replace_wine_by_id(menu, target.id, new_wine)
        assert edited.pairings[2].course == "secondi"
        assert edited.pairings[2].wine.name == "Barolo"


class TestDeleteWine:
    """Tests for wine deletion."""

    def test_delete_cellar_wine(self, menu):
        edited = delete_wine(menu, "cantina", 0)
        assert [p.wine.name for p in edited.pairings] == ["Barbaresco", "Tignanello"]

    def test_delete_purchase_wine(self, menu):
        edited = delete_wine(menu, WineSource.TO_PURCHASE, 1)
        assert [s.wine for s in edited.purchase_suggestions] == ["Moscato d'Asti"]
        assert edited.pairings is menu.pairings

    def test_delete_by_id(self, menu):
        target = menu.pairings[2]
        edited = delete_wine_by_id(menu, target.id)
        assert target.id not in [p.id for p in edited.pairings]

    def test_delete_out_of_range(self, menu):
        with pytest.raises(IndexOutOfRangeError):
            delete_wine(menu, "cellar", 4)


class TestRelabel:
    """Tests for empty-cellar reconciliation."""

    def test_relabels_cellar_pairings(self, menu):
        edited = relabel_cellar_pairings(menu)

        assert edited.cellar_pairings() == []
        assert [p.id for p in edited.pairings] == [p.id for p in menu.pairings]
        assert edited.pairings[2] is menu.pairings[2]

    def test_noop_without_cellar_pairings(self, menu):
        edited = relabel_cellar_pairings(relabel_cellar_pairings(menu))
        assert relabel_cellar_pairings(edited) is edited


def test_blob_roundtrip_keeps_ids(menu):
    restored = MenuResponse.from_blob(menu.to_blob())
    assert restored.pairings[0].id == menu.pairings[0].id
    assert restored.menu.starters[1].id == menu.menu.starters[1].id


class TestFromBlob:
    """Tests for loading stored menu blobs."""

    def test_untagged_blob_reads_as_first_version(self, menu):
        data = json.loads(menu.to_blob())
        del data["schema_version"]
        assert MenuResponse.from_blob(json.dumps(data)).schema_version == 1

    @pytest.mark.parametrize("version", [-3, 0, True, 2, "1"])
    def test_rejects_versions_outside_known_range(self, menu, version):
        data = json.loads(menu.to_blob())
        data["schema_version"] = version
        with pytest.raises(DecodeError) as exc_info:
            MenuResponse.from_blob(json.dumps(data))
        assert exc_info.value.path == "schema_version"

    def test_not_json(self):
        with pytest.raises(DecodeError, match="not JSON"):
            MenuResponse.from_blob(b"menu")
