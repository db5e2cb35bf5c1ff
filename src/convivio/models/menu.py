"""
Convivio - Generated menu models.

MenuResponse is the artifact produced by the completion model and persisted
on the DinnerEvent as an opaque blob. Attribute names are English; the wire
keys are the Italian keys the prompts ask for (field aliases), so the same
models decode model output and stored blobs.

Dishes, pairings and purchase suggestions carry a stable opaque `id`
assigned at decode time. Positional addressing is kept only as a
compatibility layer on top of it (see convivio.editing).
"""

import json
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_validator

from convivio.errors import DecodeError, UnknownCourseError, decode_error_from_validation
from convivio.models.cellar import new_id

CURRENT_SCHEMA_VERSION = 1


class WireModel(BaseModel):
    """Base for models that travel with Italian wire keys."""

    model_config = ConfigDict(populate_by_name=True)


def _coerce_text(value):
    """Models sometimes answer 200 where "200" was asked for."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return value


LooseText = Annotated[str, BeforeValidator(_coerce_text)]


# =============================================================================
# Enums
# =============================================================================


class Course(str, Enum):
    """The five ordered course buckets of a menu."""

    STARTER = "antipasti"
    FIRST = "primi"
    MAIN = "secondi"
    SIDE = "contorni"
    DESSERT = "dolci"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def field_name(self) -> str:
        return _COURSE_FIELDS[self]

    @classmethod
    def parse(cls, name: "str | Course") -> "Course":
        """
        Resolve a course name.

        Accepts the bucket key ("primi"), the singular ("primo"), the English
        name ("first") and any casing. Raises UnknownCourseError otherwise.
        """
        if isinstance(name, Course):
            return name
        key = " ".join(str(name).lower().split())
        course = _COURSE_ALIASES.get(key)
        if course is None:
            raise UnknownCourseError(f"Unknown course: {name!r}")
        return course


_COURSE_FIELDS: dict[Course, str] = {
    Course.STARTER: "starters",
    Course.FIRST: "firsts",
    Course.MAIN: "mains",
    Course.SIDE: "sides",
    Course.DESSERT: "desserts",
}

_COURSE_ALIASES: dict[str, Course] = {
    "antipasti": Course.STARTER,
    "antipasto": Course.STARTER,
    "starter": Course.STARTER,
    "starters": Course.STARTER,
    "primi": Course.FIRST,
    "primo": Course.FIRST,
    "primi piatti": Course.FIRST,
    "first": Course.FIRST,
    "secondi": Course.MAIN,
    "secondo": Course.MAIN,
    "secondi piatti": Course.MAIN,
    "main": Course.MAIN,
    "mains": Course.MAIN,
    "contorni": Course.SIDE,
    "contorno": Course.SIDE,
    "side": Course.SIDE,
    "sides": Course.SIDE,
    "dolci": Course.DESSERT,
    "dolce": Course.DESSERT,
    "dessert": Course.DESSERT,
    "desserts": Course.DESSERT,
}


class Difficulty(str, Enum):
    EASY = "facile"
    MEDIUM = "media"
    HARD = "difficile"


class WineSource(str, Enum):
    """Where a paired wine comes from."""

    FROM_CELLAR = "cantina"
    TO_PURCHASE = "suggerimento"

    @property
    def display_name(self) -> str:
        return "Cantina" if self is WineSource.FROM_CELLAR else "Acquisto"


# =============================================================================
# Dishes
# =============================================================================


class Ingredient(WireModel):
    name: str = Field(alias="nome")
    quantity: LooseText = Field(alias="quantita")
    unit: str | None = Field(None, alias="unita")


class Recipe(WireModel):
    ingredients: list[Ingredient] = Field(alias="ingredienti", min_length=1)
    prep_minutes: int = Field(alias="tempo_preparazione", ge=0)
    cook_minutes: int = Field(alias="tempo_cottura", ge=0)
    difficulty: Difficulty = Field(alias="difficolta")
    steps: list[str] = Field(alias="procedimento", min_length=1)
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


class Dish(WireModel):
    """A single dish with its full recipe."""

    id: str = Field(default_factory=new_id)
    name: str = Field(alias="nome")
    description: str = Field(alias="descrizione")
    servings: int = Field(alias="porzioni", ge=1)
    recipe: Recipe = Field(alias="ricetta")


class MenuSections(WireModel):
    """Course buckets, each keeping insertion order."""

    starters: list[Dish] = Field(default_factory=list, alias="antipasti")
    firsts: list[Dish] = Field(default_factory=list, alias="primi")
    mains: list[Dish] = Field(default_factory=list, alias="secondi")
    sides: list[Dish] = Field(default_factory=list, alias="contorni")
    desserts: list[Dish] = Field(default_factory=list, alias="dolci")

    def dishes(self, course: Course | str) -> list[Dish]:
        return getattr(self, Course.parse(course).field_name)

    def with_dishes(self, course: Course | str, dishes: list[Dish]) -> "MenuSections":
        """Copy with one bucket replaced; the other buckets are shared."""
        return self.model_copy(update={Course.parse(course).field_name: dishes})

    def all_courses(self) -> list[tuple[Course, list[Dish]]]:
        """Populated buckets in serving order."""
        return [(c, self.dishes(c)) for c in Course if self.dishes(c)]

    def populated_courses(self) -> set[Course]:
        return {c for c, _ in self.all_courses()}

    @property
    def dish_count(self) -> int:
        return sum(len(self.dishes(c)) for c in Course)


# =============================================================================
# Wines
# =============================================================================


class WineCompatibility(WireModel):
    """How well a wine fits the host's taste preferences."""

    score: int = Field(alias="punteggio", ge=0, le=100)
    reasoning: str = Field(alias="motivazione")
    strengths: list[str] = Field(default_factory=list, alias="punti_forza")
    weaknesses: list[str] = Field(default_factory=list, alias="punti_deboli")

    @property
    def score_color(self) -> str:
        if self.score >= 80:
            return "green"
        if self.score >= 60:
            return "yellow"
        return "orange"


class PairedWine(WireModel):
    name: str = Field(alias="nome")
    producer: str = Field(alias="produttore")
    vintage: LooseText | None = Field(None, alias="annata")
    source: WineSource = Field(alias="provenienza")
    quantity_needed: int = Field(1, alias="quantita_necessaria", ge=0)
    reasoning: str = Field(alias="motivazione")
    compatibility: WineCompatibility | None = Field(None, alias="compatibilita")

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.producer, self.name, self.vintage) if p)


class WinePairing(WireModel):
    """A wine associated with a course."""

    id: str = Field(default_factory=new_id)
    course: str = Field(alias="portata")
    wine: PairedWine = Field(alias="vino")

    @property
    def source(self) -> WineSource:
        return self.wine.source


class WineSuggestion(WireModel):
    """A wine the host should buy for the dinner."""

    id: str = Field(default_factory=new_id)
    wine: str = Field(alias="vino")
    producer: str = Field(alias="produttore")
    vintage: LooseText | None = Field(None, alias="annata")
    reason: str = Field(alias="perche")
    ideal_pairing: str = Field(alias="abbinamento_ideale")
    compatibility: WineCompatibility | None = Field(None, alias="compatibilita")

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.producer, self.wine, self.vintage) if p)


# =============================================================================
# Etiquette
# =============================================================================


class InvitationEtiquette(WireModel):
    timing: str = Field(alias="tempistica")
    wording: str = Field(alias="formulazione")
    confirmation: str = Field(alias="conferma")
    tips: list[str] = Field(default_factory=list, alias="consigli")


class ReceptionEtiquette(WireModel):
    welcome: str = Field(alias="accoglienza")
    aperitif: str = Field(alias="aperitivo")
    to_table: str = Field(alias="passaggio_tavola")
    farewell: str = Field(alias="congedo")
    tips: list[str] = Field(default_factory=list, alias="consigli")


class TableEtiquette(WireModel):
    layout: str = Field(alias="disposizione")
    service: str = Field(alias="servizio")
    conversation: str = Field(alias="conversazione")
    tips: list[str] = Field(default_factory=list, alias="consigli")


class Etiquette(WireModel):
    invitation: InvitationEtiquette = Field(alias="inviti")
    reception: ReceptionEtiquette = Field(alias="ricevimento")
    table: TableEtiquette = Field(alias="tavola")


# =============================================================================
# Menu
# =============================================================================


class MenuResponse(WireModel):
    """The full generated menu."""

    schema_version: int = CURRENT_SCHEMA_VERSION
    menu: MenuSections
    pairings: list[WinePairing] = Field(alias="abbinamenti")
    purchase_suggestions: list[WineSuggestion] = Field(alias="suggerimenti_acquisto")
    service_notes: str = Field(alias="note_servizio")
    etiquette: Etiquette = Field(alias="galateo")

    def cellar_pairings(self) -> list[WinePairing]:
        """Pairings whose wine comes from the cellar, in menu order."""
        return [p for p in self.pairings if p.source == WineSource.FROM_CELLAR]

    def pairings_for_course(self, course: Course | str) -> list[WinePairing]:
        target = Course.parse(course)
        result = []
        for pairing in self.pairings:
            try:
                if Course.parse(pairing.course) == target:
                    result.append(pairing)
            except UnknownCourseError:
                continue
        return result

    def to_blob(self) -> bytes:
        """Serialize for storage on the dinner (wire keys, version tagged)."""
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_blob(cls, blob: bytes | str) -> "MenuResponse":
        """
        Load a stored menu.

        Untagged blobs predate versioning and are read as version 1.
        Raises DecodeError for unreadable blobs or a version outside
        1..CURRENT_SCHEMA_VERSION.
        """
        try:
            data = json.loads(blob)
        except json.JSONDecodeError as exc:
            raise DecodeError(f"stored menu is not JSON ({exc.msg})") from exc
        if not isinstance(data, dict):
            raise DecodeError("stored menu is not a JSON object")

        version = data.get("schema_version", 1)
        # bool is an int subclass; "true" is not a version
        if type(version) is not int or not 1 <= version <= CURRENT_SCHEMA_VERSION:
            raise DecodeError(
                f"unsupported menu schema version {version!r}",
                path="schema_version",
            )
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise decode_error_from_validation(exc) from exc
