"""
Convivio - Dinner notes models.

Three printable briefings generated for a dinner once the menu exists: the
kitchen plan (recipes, timeline, shopping list), the wine service plan and
the hosting plan. Wire keys are the Italian keys the prompts ask for.

A DinnerNote stores the decoded content as canonical JSON, keyed on the
dinner by note type; `content` re-validates it into the typed model.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from convivio.models.menu import Difficulty, Ingredient, LooseText, WireModel


class DinnerNoteType(str, Enum):
    KITCHEN = "cucina"
    WINE = "vini"
    HOSTING = "accoglienza"

    @property
    def display_name(self) -> str:
        return {
            DinnerNoteType.KITCHEN: "Note Cucina",
            DinnerNoteType.WINE: "Note Vini",
            DinnerNoteType.HOSTING: "Note Accoglienza",
        }[self]

    @property
    def content_model(self) -> type[BaseModel]:
        return _CONTENT_MODELS[self]


# =============================================================================
# Kitchen notes
# =============================================================================


class KitchenStep(WireModel):
    """One timeline step; minutes are relative to serving time (negative = before)."""

    minutes: int = Field(alias="quando_minuti")
    label: str = Field(alias="quando_label")
    description: str = Field(alias="descrizione")
    dish: str | None = Field(None, alias="piatto_correlato")


class Plating(WireModel):
    description: str = Field(alias="descrizione")
    tips: list[str] = Field(default_factory=list, alias="consigli")


class NoteRecipe(WireModel):
    name: str = Field(alias="nome")
    category: str = Field(alias="categoria")
    difficulty: Difficulty = Field(alias="difficolta")
    prep_minutes: int = Field(alias="tempo_preparazione", ge=0)
    cook_minutes: int = Field(alias="tempo_cottura", ge=0)
    make_ahead: bool = Field(False, alias="preparabile_anticipo")
    ingredients: list[Ingredient] = Field(alias="ingredienti", min_length=1)
    steps: list[str] = Field(alias="procedimento", min_length=1)
    plating: Plating | None = Field(None, alias="impiattamento")
    tips: str | None = Field(None, alias="consigli")

    @field_validator("difficulty", mode="before")
    @classmethod
    def _lower_difficulty(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def total_minutes(self) -> int:
        return self.prep_minutes + self.cook_minutes


class ShoppingItem(WireModel):
    name: str = Field(alias="nome")
    quantity: LooseText = Field(alias="quantita")


class ShoppingCategory(WireModel):
    category: str = Field(alias="categoria")
    items: list[ShoppingItem] = Field(default_factory=list)


class KitchenNotes(WireModel):
    timeline: list[KitchenStep] = Field(alias="timeline_cucina")
    recipes: list[NoteRecipe] = Field(alias="ricette", min_length=1)
    shopping_list: list[ShoppingCategory] = Field(default_factory=list, alias="lista_spesa")
    chef_tips: list[str] = Field(default_factory=list, alias="consigli_chef")


# =============================================================================
# Wine notes
# =============================================================================


class WineStep(WireModel):
    minutes: int = Field(alias="quando_minuti")
    label: str = Field(alias="quando_label")
    wine: str = Field(alias="vino")
    action: str = Field(alias="azione")
    icon: str = Field("🍷", alias="icona")


class Decanting(WireModel):
    needed: bool = Field(alias="necessaria")
    duration: str | None = Field(None, alias="tempo")
    reason: str | None = Field(None, alias="motivo")


class WineCard(WireModel):
    wine: str = Field(alias="nome_vino")
    producer: str | None = Field(None, alias="produttore")
    course: str = Field(alias="portata_abbinata")
    serving_temperature: str = Field(alias="temperatura_servizio")
    glass: str = Field(alias="bicchiere_consigliato")
    per_person: str = Field(alias="quantita_persona")
    decanting: Decanting | None = Field(None, alias="decantazione")
    presentation: str = Field(alias="come_presentare")


class ServiceStep(WireModel):
    order: int = Field(alias="ordine")
    wine: str = Field(alias="vino")
    moment: str = Field(alias="momento")
    transition: str | None = Field(None, alias="transizione")


class Equipment(WireModel):
    name: str = Field(alias="nome")
    icon: str = Field("", alias="icona")
    quantity: int | None = Field(None, alias="quantita")


class WineNotes(WireModel):
    timeline: list[WineStep] = Field(alias="timeline_vini")
    cards: list[WineCard] = Field(alias="schede_vino", min_length=1)
    service_order: list[ServiceStep] = Field(default_factory=list, alias="sequenza_servizio")
    equipment: list[Equipment] = Field(default_factory=list, alias="attrezzatura_necessaria")
    sommelier_tips: list[str] = Field(default_factory=list, alias="consigli_sommelier")


# =============================================================================
# Hosting notes
# =============================================================================


class TableSetting(WireModel):
    description: str = Field(alias="descrizione")
    tablecloth: str | None = Field(None, alias="tovaglia")
    napkins: str | None = Field(None, alias="tovaglioli")
    glasses: str | None = Field(None, alias="bicchieri")
    centerpiece: str | None = Field(None, alias="centrotavola")
    place_cards: str | None = Field(None, alias="segnaposto")


class Atmosphere(WireModel):
    lighting: str | None = Field(None, alias="illuminazione")
    music: str | None = Field(None, alias="musica")
    scent: str | None = Field(None, alias="profumo")
    temperature: str | None = Field(None, alias="temperatura")


class Preparation(WireModel):
    table: TableSetting = Field(alias="tavola")
    atmosphere: Atmosphere = Field(alias="atmosfera")
    checklist: list[str] = Field(default_factory=list, alias="checklist_pre_ospiti")


class Aperitif(WireModel):
    what: str = Field(alias="cosa")
    where: str = Field(alias="dove")
    duration: str = Field(alias="durata")


class Welcome(WireModel):
    arrival: str = Field(alias="orario_arrivo")
    where: str = Field(alias="dove_ricevere")
    aperitif: Aperitif = Field(alias="aperitivo")
    seating: str = Field(alias="come_accomodare")
    icebreakers: list[str] = Field(default_factory=list, alias="rompighiaccio")


class Evening(WireModel):
    course_timing: str = Field(alias="tempi_portate")
    clearing: str = Field(alias="quando_sparecchiare")
    conversation: list[str] = Field(default_factory=list, alias="consigli_conversazione")
    contingencies: list[str] = Field(default_factory=list, alias="se_qualcosa_va_storto")


class CoffeeService(WireModel):
    when: str = Field(alias="quando")
    how: str = Field(alias="come")


class Digestif(WireModel):
    what: str = Field(alias="cosa")
    when: str = Field(alias="quando")


class Farewell(WireModel):
    signals: str = Field(alias="segnali")
    goodbye: str = Field(alias="saluti")
    gift: str | None = Field(None, alias="omaggio")


class AfterDinner(WireModel):
    coffee: CoffeeService = Field(alias="caffe_te")
    digestif: Digestif | None = Field(None, alias="digestivo")
    entertainment: str | None = Field(None, alias="intrattenimento")
    farewell: Farewell = Field(alias="congedo")


class HostingNotes(WireModel):
    preparation: Preparation = Field(alias="preparazione_ambiente")
    welcome: Welcome = Field(alias="accoglienza")
    evening: Evening = Field(alias="gestione_serata")
    after_dinner: AfterDinner = Field(alias="post_cena")
    host_tips: list[str] = Field(default_factory=list, alias="consigli_host")


_CONTENT_MODELS: dict[DinnerNoteType, type[BaseModel]] = {
    DinnerNoteType.KITCHEN: KitchenNotes,
    DinnerNoteType.WINE: WineNotes,
    DinnerNoteType.HOSTING: HostingNotes,
}

NoteContent = KitchenNotes | WineNotes | HostingNotes


# =============================================================================
# Stored note
# =============================================================================


class DinnerNote(BaseModel):
    note_type: DinnerNoteType
    content_json: str
    created_at: datetime = Field(default_factory=datetime.now)

    @classmethod
    def from_content(cls, note_type: DinnerNoteType, content: NoteContent) -> "DinnerNote":
        return cls(note_type=note_type, content_json=content.model_dump_json(by_alias=True))

    @property
    def content(self) -> NoteContent:
        return self.note_type.content_model.model_validate_json(self.content_json)
