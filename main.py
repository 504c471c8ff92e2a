"""
Swift ride-hailing marketplace
==============================
Entry point.  Run with: python main.py

Loads the ledger, reports what is on file and exits.  Dashboards are
driven by a front end through ``swiftride.dashboards.session``.
"""

import asyncio
import logging
import sys

from swiftride.app import configure_logging, create_marketplace
from swiftride.config import settings

logger = logging.getLogger("swiftride")


async def run() -> None:
    market = create_marketplace(settings)
    drivers = market.accounts.drivers()
    logger.info(
        "Marketplace ready: %d accounts (%d drivers), surge %.2fx, %d destinations",
        len(market.accounts),
        len(drivers),
        market.pricing.surge_multiplier,
        len(market.fares.destinations()),
    )
    receipts = market.receipts.read()
    logger.info("Receipt log holds %d trips", len(receipts))


def main() -> int:
    configure_logging(settings.log_level)
    try:
        asyncio.run(run())
    except Exception:
        logger.exception("Fatal error; shutting down")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
