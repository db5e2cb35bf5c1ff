"""
Convivio - Cellar inventory models.

Wines and bottles are read-only inputs to the menu pipeline. Bottles point
at their wine by id; the Cellar owns both collections.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


def new_id() -> str:
    """Opaque identifier for stored entities."""
    return uuid4().hex


class WineType(str, Enum):
    """Wine style as stored in the cellar."""

    RED = "red"
    WHITE = "white"
    ROSE = "rosé"
    SPARKLING = "sparkling"
    DESSERT = "dessert"
    FORTIFIED = "fortified"

    @property
    def display_name(self) -> str:
        return {
            WineType.RED: "Rosso",
            WineType.WHITE: "Bianco",
            WineType.ROSE: "Rosato",
            WineType.SPARKLING: "Spumante",
            WineType.DESSERT: "Dolce",
            WineType.FORTIFIED: "Fortificato",
        }[self]

    @classmethod
    def parse(cls, value: str | None) -> "WineType | None":
        """Lenient lookup by value, name or Italian label."""
        if not value:
            return None
        key = value.strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower(), member.display_name.lower()):
                return member
        if key == "rose":
            return cls.ROSE
        return None


class BottleStatus(str, Enum):
    AVAILABLE = "available"
    RESERVED = "reserved"
    CONSUMED = "consumed"
    GIFTED = "gifted"


class Wine(BaseModel):
    """A wine label in the cellar catalogue."""

    id: str = Field(default_factory=new_id)
    name: str
    producer: str | None = None
    vintage: str | None = None
    type: WineType = WineType.RED
    region: str | None = None
    country: str = "Italia"
    grapes: list[str] = Field(default_factory=list)
    rating: float | None = None  # 1-5, from the owner's tastings

    @property
    def display_name(self) -> str:
        parts = [p for p in (self.producer, self.name, self.vintage) if p]
        return " ".join(parts)


class Bottle(BaseModel):
    """A stock record: how many bottles of a wine sit where."""

    id: str = Field(default_factory=new_id)
    wine_id: str
    quantity: int = 1
    status: BottleStatus = BottleStatus.AVAILABLE
    location_zone: str | None = None
    location_rack: int | None = None
    location_shelf: int | None = None
    location_position: int | None = None
    notes: str | None = None

    @property
    def location(self) -> str | None:
        parts: list[str] = []
        if self.location_zone:
            parts.append(self.location_zone)
        if self.location_rack is not None:
            parts.append(f"R{self.location_rack}")
        if self.location_shelf is not None:
            parts.append(f"S{self.location_shelf}")
        if self.location_position is not None:
            parts.append(f"P{self.location_position}")
        return "-".join(parts) if parts else None

    @property
    def is_available(self) -> bool:
        return self.quantity > 0 and self.status == BottleStatus.AVAILABLE


class Cellar(BaseModel):
    """A cellar and the wines and bottles it owns."""

    id: str = Field(default_factory=new_id)
    name: str = "Cantina"
    owner_id: str | None = None
    member_ids: list[str] = Field(default_factory=list)
    wines: list[Wine] = Field(default_factory=list)
    bottles: list[Bottle] = Field(default_factory=list)
    updated_at: datetime = Field(default_factory=datetime.now)

    def wine(self, wine_id: str) -> Wine | None:
        return next((w for w in self.wines if w.id == wine_id), None)

    def available_bottles(self) -> list[Bottle]:
        return [b for b in self.bottles if b.is_available]

    def is_member(self, user_id: str) -> bool:
        return user_id == self.owner_id or user_id in self.member_ids
