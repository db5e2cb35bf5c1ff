"""
Convivio - Dinner and request models.

A DinnerEvent is the persisted planning record. Its generated menu lives in
`menu_data` as an opaque blob (see MenuResponse.to_blob); callers go through
`menu_response` / `with_menu` rather than touching the bytes.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, TypeAdapter

from convivio.models.cellar import new_id
from convivio.models.confirmation import ConfirmedWine
from convivio.models.menu import MenuResponse
from convivio.models.notes import DinnerNote, DinnerNoteType, NoteContent
from convivio.models.proposal import MenuProposal


class DietType(str, Enum):
    """Dietary constraint. The value is the wording used in prompts."""

    NORMAL = "nessuna restrizione"
    VEGETARIAN = "vegetariano (no carne, no pesce)"
    VEGAN = "vegano (no prodotti animali)"
    FISH_ONLY = "solo pesce, no carne"
    MEAT_ONLY = "solo carne, no pesce"
    DAIRY_FREE = "senza latticini"
    GLUTEN_FREE = "senza glutine"

    @property
    def display_name(self) -> str:
        return {
            DietType.NORMAL: "Nessuna restrizione",
            DietType.VEGETARIAN: "Vegetariano",
            DietType.VEGAN: "Vegano",
            DietType.FISH_ONLY: "Solo pesce",
            DietType.MEAT_ONLY: "Solo carne",
            DietType.DAIRY_FREE: "Senza latticini",
            DietType.GLUTEN_FREE: "Senza glutine",
        }[self]


# =============================================================================
# Taste preferences
# =============================================================================


class BodyPreference(str, Enum):
    LIGHT = "leggero"
    MEDIUM = "medio"
    FULL = "corposo"


class SweetnessPreference(str, Enum):
    DRY = "secco"
    OFF_DRY = "abboccato"
    SWEET = "dolce"


class TanninPreference(str, Enum):
    LOW = "basso"
    MEDIUM = "medio"
    HIGH = "alto"


class AcidityPreference(str, Enum):
    LOW = "bassa"
    MEDIUM = "media"
    HIGH = "alta"


class TastePreferences(BaseModel):
    """The host's wine taste, used to score pairing compatibility."""

    preferred_wine_types: list[str] = Field(default_factory=list)
    preferred_regions: list[str] = Field(default_factory=list)
    preferred_grapes: list[str] = Field(default_factory=list)
    body: BodyPreference = BodyPreference.MEDIUM
    sweetness: SweetnessPreference = SweetnessPreference.DRY
    tannin: TanninPreference = TanninPreference.MEDIUM
    acidity: AcidityPreference = AcidityPreference.MEDIUM
    notes: str | None = None


# =============================================================================
# Dinner
# =============================================================================


class DinnerStatus(str, Enum):
    PLANNING = "planning"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


_confirmed_adapter = TypeAdapter(list[ConfirmedWine])


class DinnerEvent(BaseModel):
    """A planned dinner."""

    id: str = Field(default_factory=new_id)
    host_id: str
    cellar_id: str | None = None
    title: str
    date: datetime
    guest_count: int = Field(4, ge=1)
    occasion: str | None = None
    notes: str | None = None
    diet_type: DietType = DietType.NORMAL
    cuisine: str | None = None
    style: str | None = None  # informale | conviviale | elegante
    cooking_time: str | None = None
    budget_level: str | None = None
    status: DinnerStatus = DinnerStatus.PLANNING
    menu_data: bytes | None = None
    confirmed_wines_data: bytes | None = None
    menu_proposal: MenuProposal | None = None
    dinner_notes: dict[DinnerNoteType, DinnerNote] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def menu_response(self) -> MenuResponse | None:
        """The stored menu, or None if nothing was generated yet."""
        if not self.menu_data:
            return None
        return MenuResponse.from_blob(self.menu_data)

    def with_menu(self, menu: MenuResponse | None) -> "DinnerEvent":
        data = menu.to_blob() if menu is not None else None
        return self.model_copy(update={"menu_data": data, "updated_at": datetime.now()})

    @property
    def confirmed_wines(self) -> list[ConfirmedWine]:
        if not self.confirmed_wines_data:
            return []
        return _confirmed_adapter.validate_json(self.confirmed_wines_data)

    def with_confirmed_wines(self, wines: list[ConfirmedWine]) -> "DinnerEvent":
        data = _confirmed_adapter.dump_json(wines)
        return self.model_copy(
            update={"confirmed_wines_data": data, "updated_at": datetime.now()}
        )

    def with_proposal(self, proposal: MenuProposal) -> "DinnerEvent":
        return self.model_copy(update={"menu_proposal": proposal, "updated_at": datetime.now()})

    def note(self, note_type: DinnerNoteType | str) -> NoteContent | None:
        """Typed content of a generated note, or None if it was never generated."""
        stored = self.dinner_notes.get(DinnerNoteType(note_type))
        return stored.content if stored is not None else None

    def with_note(self, note: DinnerNote) -> "DinnerEvent":
        """Copy with `note` replacing any earlier note of the same type."""
        notes = {**self.dinner_notes, note.note_type: note}
        return self.model_copy(update={"dinner_notes": notes, "updated_at": datetime.now()})

    def without_note(self, note_type: DinnerNoteType | str) -> "DinnerEvent":
        notes = dict(self.dinner_notes)
        notes.pop(DinnerNoteType(note_type), None)
        return self.model_copy(update={"dinner_notes": notes, "updated_at": datetime.now()})


class MenuRequest(BaseModel):
    """Per-call input to full menu generation."""

    title: str
    date: datetime
    person_count: int = Field(ge=1)
    occasion: str | None = None
    diet_type: DietType = DietType.NORMAL
    cuisine: str = "Italiana"
    notes: str | None = None
    taste_preferences: TastePreferences | None = None

    @classmethod
    def from_dinner(
        cls,
        dinner: DinnerEvent,
        *,
        taste_preferences: TastePreferences | None = None,
        default_cuisine: str = "Italiana",
    ) -> "MenuRequest":
        return cls(
            title=dinner.title,
            date=dinner.date,
            person_count=dinner.guest_count,
            occasion=dinner.occasion,
            diet_type=dinner.diet_type,
            cuisine=dinner.cuisine or default_cuisine,
            notes=dinner.notes,
            taste_preferences=taste_preferences,
        )
