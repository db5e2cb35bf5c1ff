"""
Convivio - Wine confirmation models.

Once the host settles on the wines, each chosen pairing or purchase
suggestion is snapshotted as a ConfirmedWine. The snapshot is independent of
the menu: later menu edits do not change it.
"""

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, Field

from convivio.models.cellar import WineType, new_id


class WineTemperatureCategory(str, Enum):
    """Serving temperature bands, each with its fridge timing."""

    SPARKLING = "bollicine"
    LIGHT_WHITE = "bianco_leggero"
    ROSE = "rosato"
    FULL_WHITE = "bianco_strutturato"
    LIGHT_RED = "rosso_leggero"
    FULL_RED = "rosso_strutturato"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def serving_temperature(self) -> str:
        return _SERVING_TEMPERATURE[self]

    @property
    def fridge_minutes(self) -> int:
        """Minutes in the fridge before serving."""
        return _FRIDGE_MINUTES[self][0]

    @property
    def take_out_minutes(self) -> int:
        """Minutes before serving to take the bottle out again."""
        return _FRIDGE_MINUTES[self][1]

    @property
    def needs_fridge(self) -> bool:
        return self.fridge_minutes > 0

    @classmethod
    def suggested_for(cls, wine_type: WineType | None) -> "WineTemperatureCategory":
        if wine_type is None:
            return cls.FULL_RED
        return _SUGGESTED[wine_type]


_SERVING_TEMPERATURE = {
    WineTemperatureCategory.SPARKLING: "6-8°C",
    WineTemperatureCategory.LIGHT_WHITE: "8-10°C",
    WineTemperatureCategory.ROSE: "10-12°C",
    WineTemperatureCategory.FULL_WHITE: "12-14°C",
    WineTemperatureCategory.LIGHT_RED: "14-16°C",
    WineTemperatureCategory.FULL_RED: "16-18°C",
}

# (fridge, take out)
_FRIDGE_MINUTES = {
    WineTemperatureCategory.SPARKLING: (180, 5),
    WineTemperatureCategory.LIGHT_WHITE: (150, 10),
    WineTemperatureCategory.ROSE: (120, 15),
    WineTemperatureCategory.FULL_WHITE: (90, 20),
    WineTemperatureCategory.LIGHT_RED: (30, 0),
    WineTemperatureCategory.FULL_RED: (0, 0),
}

_SUGGESTED = {
    WineType.SPARKLING: WineTemperatureCategory.SPARKLING,
    WineType.WHITE: WineTemperatureCategory.LIGHT_WHITE,
    WineType.ROSE: WineTemperatureCategory.ROSE,
    WineType.RED: WineTemperatureCategory.FULL_RED,
    WineType.DESSERT: WineTemperatureCategory.FULL_WHITE,
    WineType.FORTIFIED: WineTemperatureCategory.FULL_RED,
}


class ConfirmedWine(BaseModel):
    """A wine the host confirmed for the dinner."""

    id: str = Field(default_factory=new_id)
    wine_id: str | None = None  # cellar wine, None for purchases
    wine_name: str
    producer: str | None = None
    vintage: str | None = None
    wine_type: WineType = WineType.RED
    course: str
    temperature_category: WineTemperatureCategory
    is_from_cellar: bool
    quantity: int = 1

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.producer, self.wine_name, self.vintage) if p)


class FridgeStep(BaseModel):
    wine: ConfirmedWine
    put_in_at: datetime
    take_out_at: datetime | None = None


class WineConfirmationSummary(BaseModel):
    """Totals and fridge timing for a dinner's confirmed wines."""

    confirmed_wines: list[ConfirmedWine]
    dinner_date: datetime

    @property
    def total_bottles(self) -> int:
        return sum(w.quantity for w in self.confirmed_wines)

    @property
    def cellar_wines_count(self) -> int:
        return sum(1 for w in self.confirmed_wines if w.is_from_cellar)

    @property
    def purchase_wines_count(self) -> int:
        return sum(1 for w in self.confirmed_wines if not w.is_from_cellar)

    def fridge_schedule(self) -> list[FridgeStep]:
        return fridge_schedule(self.confirmed_wines, self.dinner_date)


def fridge_schedule(confirmed: list[ConfirmedWine], dinner_date: datetime) -> list[FridgeStep]:
    """
    When to put each wine in the fridge and take it out, earliest first.

    Wines served at room temperature are left out.
    """
    steps = []
    for wine in confirmed:
        category = wine.temperature_category
        if not category.needs_fridge:
            continue
        take_out = None
        if category.take_out_minutes > 0:
            take_out = dinner_date - timedelta(minutes=category.take_out_minutes)
        steps.append(
            FridgeStep(
                wine=wine,
                put_in_at=dinner_date - timedelta(minutes=category.fridge_minutes),
                take_out_at=take_out,
            )
        )
    return sorted(steps, key=lambda s: s.put_in_at)
