"""
Shared test fixtures.

Every test gets its own data directory under ``tmp_path`` so the ledger
and receipt files start empty and never touch the working directory.
"""

import pytest
import pytest_asyncio

from swiftride.app import Marketplace, create_marketplace
from swiftride.config import Settings
from swiftride.domain.entities import Driver, Passenger
from swiftride.domain.enums import Role


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(data_dir=tmp_path)


@pytest.fixture
def market(settings) -> Marketplace:
    return create_marketplace(settings)


@pytest.fixture
def registry(market):
    return market.registry


@pytest_asyncio.fixture
async def driver(market) -> Driver:
    return await market.accounts.register(Role.DRIVER, "jun", "driver123", "GAB 1234")


@pytest_asyncio.fixture
async def other_driver(market) -> Driver:
    return await market.accounts.register(Role.DRIVER, "marites", "driver123", "HAC 5678")


@pytest_asyncio.fixture
async def passenger(market) -> Passenger:
    return await market.accounts.register(Role.PASSENGER, "aiza", "rider123")


@pytest_asyncio.fixture
async def other_passenger(market) -> Passenger:
    return await market.accounts.register(Role.PASSENGER, "carlo", "rider123")
