"""
Convivio - Domain models.
"""

from convivio.models.cellar import Bottle, BottleStatus, Cellar, Wine, WineType, new_id
from convivio.models.confirmation import (
    ConfirmedWine,
    FridgeStep,
    WineConfirmationSummary,
    WineTemperatureCategory,
    fridge_schedule,
)
from convivio.models.dinner import (
    AcidityPreference,
    BodyPreference,
    DietType,
    DinnerEvent,
    DinnerStatus,
    MenuRequest,
    SweetnessPreference,
    TanninPreference,
    TastePreferences,
)
from convivio.models.menu import (
    CURRENT_SCHEMA_VERSION,
    Course,
    Difficulty,
    Dish,
    Etiquette,
    Ingredient,
    MenuResponse,
    MenuSections,
    PairedWine,
    Recipe,
    WineCompatibility,
    WinePairing,
    WineSource,
    WineSuggestion,
)
from convivio.models.notes import (
    DinnerNote,
    DinnerNoteType,
    HostingNotes,
    KitchenNotes,
    NoteContent,
    WineNotes,
)
from convivio.models.proposal import (
    MenuProposal,
    ProposalCourse,
    ProposeRequest,
    ProposeResponse,
    WineProposal,
    WineProposals,
)
from convivio.models.tasting import AISTastingSheet, GradedLevel

__all__ = [
    "AISTastingSheet",
    "AcidityPreference",
    "BodyPreference",
    "Bottle",
    "BottleStatus",
    "CURRENT_SCHEMA_VERSION",
    "Cellar",
    "ConfirmedWine",
    "Course",
    "DietType",
    "Difficulty",
    "DinnerEvent",
    "DinnerNote",
    "DinnerNoteType",
    "DinnerStatus",
    "Dish",
    "Etiquette",
    "FridgeStep",
    "GradedLevel",
    "HostingNotes",
    "Ingredient",
    "KitchenNotes",
    "MenuProposal",
    "MenuRequest",
    "MenuResponse",
    "MenuSections",
    "NoteContent",
    "PairedWine",
    "ProposalCourse",
    "ProposeRequest",
    "ProposeResponse",
    "Recipe",
    "SweetnessPreference",
    "TanninPreference",
    "TastePreferences",
    "Wine",
    "WineCompatibility",
    "WineConfirmationSummary",
    "WineNotes",
    "WinePairing",
    "WineProposal",
    "WineProposals",
    "WineSource",
    "WineSuggestion",
    "WineTemperatureCategory",
    "WineType",
    "fridge_schedule",
    "new_id",
]
