"""
Pytest configuration and fixtures for Convivio tests.
"""

import copy
import os
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

# Set test environment before importing convivio modules
os.environ["CONVIVIO_ENV"] = "development"
os.environ["CONVIVIO_LOG_PROMPTS"] = "0"

from convivio.config import Settings
from convivio.models.cellar import Bottle, BottleStatus, Cellar, Wine, WineType
from convivio.models.dinner import DinnerEvent

from tests.payloads import MENU_PAYLOAD, fenced


@pytest.fixture
def menu_payload() -> dict:
    return copy.deepcopy(MENU_PAYLOAD)


@pytest.fixture
def menu_text(menu_payload) -> str:
    return fenced(menu_payload)


@pytest.fixture
def menu(menu_text):
    from convivio.decoder import decode_menu

    return decode_menu(menu_text)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        llm_provider="openai",
        openai_api_key="test-key-not-real",
        anthropic_api_key=None,
        convivio_log_prompts=False,
    )


@pytest.fixture
def cellar_wines() -> list[Wine]:
    return [
        Wine(
            id="w-gaja",
            name="Barbaresco",
            producer="Gaja",
            vintage="2019",
            type=WineType.RED,
            region="Piemonte",
            grapes=["Nebbiolo"],
            rating=4.5,
        ),
        Wine(
            id="w-cdb",
            name="Franciacorta Cuvée Prestige",
            producer="Ca' del Bosco",
            type=WineType.SPARKLING,
            region="Lombardia",
            grapes=["Chardonnay", "Pinot Nero"],
            rating=4.0,
        ),
        Wine(
            id="w-vietti",
            name="Barolo",
            producer="Vietti",
            vintage="2017",
            type=WineType.RED,
            region="Piemonte",
            grapes=["Nebbiolo"],
        ),
    ]


@pytest.fixture
def cellar_bottles() -> list[Bottle]:
    return [
        Bottle(id="b-1", wine_id="w-gaja", quantity=3, location_zone="A", location_rack=1, location_shelf=2),
        Bottle(id="b-2", wine_id="w-cdb", quantity=1, location_zone="B", location_rack=3),
        Bottle(id="b-3", wine_id="w-vietti", quantity=2, status=BottleStatus.CONSUMED),
    ]


@pytest.fixture
def cellar(cellar_wines, cellar_bottles) -> Cellar:
    return Cellar(
        id="cellar-1",
        name="Cantina di casa",
        owner_id="user-1",
        wines=cellar_wines,
        bottles=cellar_bottles,
    )


@pytest.fixture
def dinner() -> DinnerEvent:
    return DinnerEvent(
        id="dinner-1",
        host_id="user-1",
        cellar_id="cellar-1",
        title="Cena estiva",
        date=datetime(2025, 7, 12, 20, 30),
        guest_count=6,
        occasion="Compleanno di Marco",
        notes="Niente frutti di mare",
    )


@pytest.fixture
def mock_client():
    """Completion client double: configured, with an AsyncMock `complete`."""
    client = MagicMock()
    client.ensure_configured = MagicMock()
    client.complete = AsyncMock()
    return client
