"""
Convivio - AIS tasting sheet.

The Italian Sommelier Association (AIS) tasting card: a visual, olfactory,
taste and final examination, each answered by picking one level per
attribute. Levels carry points; the raw sum is scaled to the AIS 60-100
range.

Most scales grade their levels 1..n in order. Some do not: extremes past
the ideal (e.g. "Alcolico", "Stucchevole") score below the level before
them, so those scales list their points explicitly.
"""

from datetime import datetime
from enum import Enum

from pydantic import Field

from convivio.models.cellar import new_id
from convivio.models.menu import WireModel

MIN_SCORE = 60
MAX_SCORE = 100
RAW_SCALE = 90
COMPLETE_RATIO = 0.8


class GradedLevel(str, Enum):
    """A scale level; points default to its 1-based position."""

    @property
    def points(self) -> int:
        explicit = _POINTS.get(type(self), {})
        if self.name in explicit:
            return explicit[self.name]
        return list(type(self)).index(self) + 1


# =============================================================================
# Visual examination
# =============================================================================


class Clarity(GradedLevel):
    VEILED = "Velato"
    FAIRLY_CLEAR = "Abb. limpido"
    CLEAR = "Limpido"
    CRYSTALLINE = "Cristallino"
    BRILLIANT = "Brillante"


class Colour(str, Enum):
    """Descriptive only, never scored."""

    GREENISH = "Verdolino"
    STRAW = "Paglierino"
    GOLDEN = "Dorato"
    AMBER = "Ambrato"
    PALE_PINK = "Rosa tenue"
    CHERRY = "Cerasuolo"
    CLARET = "Chiaretto"
    LIGHT_RUBY = "Rubino chiaro"
    RUBY = "Rubino"
    DARK_RUBY = "Rubino scuro"
    GARNET = "Granato"
    ORANGE = "Aranciato"

    @classmethod
    def whites(cls) -> list["Colour"]:
        return [cls.GREENISH, cls.STRAW, cls.GOLDEN, cls.AMBER]

    @classmethod
    def roses(cls) -> list["Colour"]:
        return [cls.PALE_PINK, cls.CHERRY, cls.CLARET]

    @classmethod
    def reds(cls) -> list["Colour"]:
        return [cls.LIGHT_RUBY, cls.RUBY, cls.DARK_RUBY, cls.GARNET, cls.ORANGE]


class ColourIntensity(GradedLevel):
    PALE = "Tenue"
    LIGHT = "Leggero"
    FAIRLY_DEEP = "Abb. carico"
    DEEP = "Carico"
    VERY_DEEP = "Molto carico"


class Consistency(GradedLevel):
    FLUID = "Fluido"
    SLIGHTLY_VISCOUS = "Poco consist."
    FAIRLY_VISCOUS = "Abb. consist."
    VISCOUS = "Consistente"
    THICK = "Viscoso"


class BubbleGrain(GradedLevel):
    COARSE = "Grossolana"
    FAIRLY_FINE = "Abb. fine"
    FINE = "Fine"
    VERY_FINE = "Molto fine"


class BubbleCount(GradedLevel):
    SCARCE = "Scarse"
    FAIRLY_NUMEROUS = "Abb. numerose"
    NUMEROUS = "Numerose"
    VERY_NUMEROUS = "Molto numerose"


class BubblePersistence(GradedLevel):
    FLEETING = "Evanescente"
    FAIRLY_PERSISTENT = "Abb. persist."
    PERSISTENT = "Persistente"
    VERY_PERSISTENT = "Molto persist."


# =============================================================================
# Olfactory examination
# =============================================================================


class OlfactoryIntensity(GradedLevel):
    LACKING = "Carente"
    SLIGHTLY_INTENSE = "Poco intenso"
    FAIRLY_INTENSE = "Abb. intenso"
    INTENSE = "Intenso"
    VERY_INTENSE = "Molto intenso"


class Complexity(GradedLevel):
    LACKING = "Carente"
    SLIGHTLY_COMPLEX = "Poco complesso"
    FAIRLY_COMPLEX = "Abb. complesso"
    COMPLEX = "Complesso"
    AMPLE = "Ampio"


class Quality(GradedLevel):
    """Shared by the olfactory and the taste examination."""

    COMMON = "Comune"
    SLIGHTLY_FINE = "Poco fine"
    FAIRLY_FINE = "Abb. fine"
    FINE = "Fine"
    EXCELLENT = "Eccellente"


# =============================================================================
# Taste examination
# =============================================================================


class Sugars(GradedLevel):
    DRY = "Secco"
    OFF_DRY = "Abboccato"
    MEDIUM_SWEET = "Amabile"
    SWEET = "Dolce"
    CLOYING = "Stucchevole"


class Alcohol(GradedLevel):
    LIGHT = "Leggero"
    SLIGHTLY_WARM = "Poco caldo"
    FAIRLY_WARM = "Abb. caldo"
    WARM = "Caldo"
    ALCOHOLIC = "Alcolico"


class Polyalcohols(GradedLevel):
    SHARP = "Spigoloso"
    SLIGHTLY_SOFT = "Poco morbido"
    FAIRLY_SOFT = "Abb. morbido"
    SOFT = "Morbido"
    VELVETY = "Pastoso"


class Acidity(GradedLevel):
    FLAT = "Piatto"
    SLIGHTLY_FRESH = "Poco fresco"
    FAIRLY_FRESH = "Abb. fresco"
    FRESH = "Fresco"
    TART = "Acidulo"


class Tannins(GradedLevel):
    FLABBY = "Molle"
    SLIGHTLY_TANNIC = "Poco tannico"
    FAIRLY_TANNIC = "Abb. tannico"
    TANNIC = "Tannico"
    ASTRINGENT = "Astringente"


class Sapidity(GradedLevel):
    BLAND = "Sciapito"
    SLIGHTLY_SAPID = "Poco sapido"
    FAIRLY_SAPID = "Abb. sapido"
    SAPID = "Sapido"
    SALTY = "Salato"


class Body(GradedLevel):
    THIN = "Magro"
    LIGHT = "Leggero"
    MEDIUM = "Di corpo"
    FULL = "Robusto"
    HEAVY = "Pesante"


class Balance(GradedLevel):
    UNBALANCED = "Poco equilibrato"
    FAIRLY_BALANCED = "Abb. equilibrato"
    BALANCED = "Equilibrato"
    HARMONIOUS = "Armonico"


class TasteIntensity(GradedLevel):
    SHORT = "Corto"
    SLIGHTLY_PERSISTENT = "Poco persist."
    FAIRLY_PERSISTENT = "Abb. persist."
    PERSISTENT = "Persistente"
    VERY_PERSISTENT = "Molto persist."


# =============================================================================
# Final considerations
# =============================================================================


class Evolution(GradedLevel):
    IMMATURE = "Immaturo"
    YOUNG = "Giovane"
    READY = "Pronto"
    MATURE = "Maturo"
    OLD = "Vecchio"


class Harmony(GradedLevel):
    SLIGHTLY_HARMONIOUS = "Poco armonico"
    FAIRLY_HARMONIOUS = "Abb. armonico"
    HARMONIOUS = "Armonico"
    VERY_HARMONIOUS = "Molto armonico"


# Keyed by class then member name: values repeat across scales
_POINTS: dict[type, dict[str, int]] = {
    Sugars: {"DRY": 3, "OFF_DRY": 3, "MEDIUM_SWEET": 3, "SWEET": 3, "CLOYING": 1},
    Alcohol: {"LIGHT": 2, "SLIGHTLY_WARM": 3, "FAIRLY_WARM": 4, "WARM": 5, "ALCOHOLIC": 3},
    Acidity: {"TART": 3},
    Tannins: {"ASTRINGENT": 3},
    Sapidity: {"SALTY": 3},
    Body: {"HEAVY": 3},
    Balance: {"UNBALANCED": 2, "FAIRLY_BALANCED": 3, "BALANCED": 4, "HARMONIOUS": 5},
    Evolution: {"IMMATURE": 2, "YOUNG": 3, "READY": 5, "MATURE": 4, "OLD": 2},
    Harmony: {
        "SLIGHTLY_HARMONIOUS": 2,
        "FAIRLY_HARMONIOUS": 3,
        "HARMONIOUS": 4,
        "VERY_HARMONIOUS": 5,
    },
}


# =============================================================================
# Sheet
# =============================================================================


class AISTastingSheet(WireModel):
    """
    One AIS tasting of a wine.

    Every attribute is optional so a sheet can be saved half filled. Colour,
    the effervescence attributes and the free descriptors are recorded but
    not scored. Tannins count only when given (reds).
    """

    id: str = Field(default_factory=new_id)
    wine_id: str | None = None
    tasted_at: datetime = Field(default_factory=datetime.now, alias="data_assaggio")

    clarity: Clarity | None = Field(None, alias="limpidezza")
    colour: Colour | None = Field(None, alias="colore")
    colour_intensity: ColourIntensity | None = Field(None, alias="intensita_colore")
    consistency: Consistency | None = Field(None, alias="consistenza")
    bubble_grain: BubbleGrain | None = Field(None, alias="effervescenza_grana")
    bubble_count: BubbleCount | None = Field(None, alias="effervescenza_numero")
    bubble_persistence: BubblePersistence | None = Field(
        None, alias="effervescenza_persistenza"
    )

    olfactory_intensity: OlfactoryIntensity | None = Field(None, alias="intensita_olfattiva")
    complexity: Complexity | None = Field(None, alias="complessita")
    olfactory_quality: Quality | None = Field(None, alias="qualita_olfattiva")
    descriptors: list[str] = Field(default_factory=list, alias="descrittori_olfattivi")

    sugars: Sugars | None = Field(None, alias="zuccheri")
    alcohol: Alcohol | None = Field(None, alias="alcol")
    polyalcohols: Polyalcohols | None = Field(None, alias="polialcoli")
    acidity: Acidity | None = Field(None, alias="acidita")
    tannins: Tannins | None = Field(None, alias="tannini")
    sapidity: Sapidity | None = Field(None, alias="sapidita")
    body: Body | None = Field(None, alias="corpo")
    balance: Balance | None = Field(None, alias="equilibrio")
    taste_intensity: TasteIntensity | None = Field(None, alias="intensita_gustativa")
    taste_quality: Quality | None = Field(None, alias="qualita_gustativa")

    evolution: Evolution | None = Field(None, alias="stato_evolutivo")
    harmony: Harmony | None = Field(None, alias="armonia")
    free_notes: str | None = Field(None, alias="note_libere")

    @staticmethod
    def _sum(*levels: GradedLevel | None) -> int:
        return sum(level.points for level in levels if level is not None)

    def _base_levels(self) -> list[GradedLevel | None]:
        """The scored attributes every wine has (tannins excluded)."""
        return [
            self.clarity,
            self.colour_intensity,
            self.consistency,
            self.olfactory_intensity,
            self.complexity,
            self.olfactory_quality,
            self.sugars,
            self.alcohol,
            self.polyalcohols,
            self.acidity,
            self.sapidity,
            self.body,
            self.balance,
            self.taste_intensity,
            self.taste_quality,
            self.evolution,
            self.harmony,
        ]

    @property
    def visual_score(self) -> int:
        return self._sum(self.clarity, self.colour_intensity, self.consistency)

    @property
    def olfactory_score(self) -> int:
        return self._sum(self.olfactory_intensity, self.complexity, self.olfactory_quality)

    @property
    def taste_score(self) -> int:
        return self._sum(
            self.sugars,
            self.alcohol,
            self.polyalcohols,
            self.acidity,
            self.tannins,
            self.sapidity,
            self.body,
            self.balance,
            self.taste_intensity,
            self.taste_quality,
        )

    @property
    def final_score(self) -> int:
        return self._sum(self.evolution, self.harmony)

    @property
    def raw_score(self) -> int:
        return self.visual_score + self.olfactory_score + self.taste_score + self.final_score

    @property
    def total_score(self) -> int:
        """Raw points scaled onto 60-100; an empty sheet scores 60."""
        scaled = MIN_SCORE + self.raw_score * (MAX_SCORE - MIN_SCORE) // RAW_SCALE
        return min(MAX_SCORE, max(MIN_SCORE, scaled))

    @property
    def completion(self) -> float:
        levels = self._base_levels()
        return sum(1 for level in levels if level is not None) / len(levels)

    @property
    def is_complete(self) -> bool:
        return self.completion >= COMPLETE_RATIO
