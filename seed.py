"""
Seed script -- populates the ledger with sample accounts for reviewers.

Run once:
    python seed.py

Creates:
  - 1 operator (admin / admin123)
  - 5 drivers with plates
  - 8 passengers
  - 4 sample trips played through the trip registry, so the receipt log
    and driver wallets / ratings have data
"""

import asyncio
import logging

from swiftride.app import configure_logging, create_marketplace
from swiftride.config import settings
from swiftride.domain.enums import Role

logger = logging.getLogger("seed")

OPERATOR = ("admin", "admin123")

DRIVERS = [
    {"username": "jun", "password": "driver123", "plate": "GAB 1234"},
    {"username": "marites", "password": "driver123", "plate": "HAC 5678"},
    {"username": "boyet", "password": "driver123", "plate": "NBC 9012"},
    {"username": "nonoy", "password": "driver123", "plate": "YAD 3456"},
    {"username": "lorna", "password": "driver123", "plate": "GKE 7890"},
]

PASSENGERS = [
    "aiza", "carlo", "dianne", "enzo", "faith", "gelo", "hannah", "ivan",
]

# (passenger, destination, driver, stars)
TRIPS = [
    ("aiza", "IT Park", "jun", 5),
    ("carlo", "Lahug", "marites", 4),
    ("dianne", "SM Seaside", "boyet", 5),
    ("enzo", "Talamban", "jun", 3),
]


async def seed():
    market = create_marketplace(settings)
    if len(market.accounts) > 0:
        print("Ledger already seeded. Skipping.")
        return

    # ── Accounts ──────────────────────────────────────────────────
    await market.accounts.register(Role.OPERATOR, *OPERATOR)
    for d in DRIVERS:
        await market.accounts.register(
            Role.DRIVER, d["username"], d["password"], d["plate"]
        )
    for name in PASSENGERS:
        await market.accounts.register(Role.PASSENGER, name, "rider123")

    # ── Sample trips ──────────────────────────────────────────────
    registry = market.registry
    for passenger_name, destination, driver_name, stars in TRIPS:
        passenger = market.accounts.get_passenger(passenger_name)
        driver = market.accounts.get_driver(driver_name)
        if passenger is None or driver is None:
            raise LookupError(f"Sample trip needs accounts {passenger_name} and {driver_name}")

        booking = await registry.request(passenger, destination)
        await registry.accept(driver, booking)
        await registry.complete(driver)
        await registry.rate(passenger, stars)

    print(
        f"Seeded {len(market.accounts)} accounts and {len(TRIPS)} trips "
        f"into {settings.data_dir.resolve()}"
    )


if __name__ == "__main__":
    configure_logging(settings.log_level)
    asyncio.run(seed())
