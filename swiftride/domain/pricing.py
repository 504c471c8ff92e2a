"""
Fare Engine  (Strategy Pattern)
===============================

Formula
-------
Fare = round(Base_Fare(destination) x Surge_Multiplier, 2)

* **Base_Fare** comes from the static fare table (``routes.FARES_FROM_CIT``).
* **Surge_Multiplier** lives in a ``PricingContext`` that the operator
  mutates; the valid range is enforced only at that mutation boundary.
* Unknown destinations price at ``0.0`` and emit an
  ``UnknownDestinationWarning``; callers must not offer such a trip.

Complexity: O(1) per fare calculation.
"""

from __future__ import annotations

import logging
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import InvalidSurgeError, UnknownDestinationWarning
from .routes import FARES_FROM_CIT, FareTable

logger = logging.getLogger(__name__)


# ── Strategy hierarchy ────────────────────────────────────────────────


class PricingStrategy(ABC):
    @abstractmethod
    def calculate(self, base_fare: float) -> float: ...


class StandardPricing(PricingStrategy):
    def calculate(self, base_fare: float) -> float:
        return round(base_fare, 2)


class SurgePricing(PricingStrategy):
    def __init__(self, surge_multiplier: float = 1.0):
        self.surge_multiplier = surge_multiplier

    def calculate(self, base_fare: float) -> float:
        return round(base_fare * self.surge_multiplier, 2)


# ── Shared surge state ────────────────────────────────────────────────


class PricingContext:
    """Holds the marketplace-wide surge multiplier."""

    def __init__(
        self,
        surge_multiplier: float = 1.0,
        min_surge: float = 0.5,
        max_surge: float = 5.0,
    ):
        self.min_surge = min_surge
        self.max_surge = max_surge
        self._surge = surge_multiplier

    @property
    def surge_multiplier(self) -> float:
        return self._surge

    @property
    def surge_active(self) -> bool:
        return self._surge > 1.0

    def set_surge(self, value: float) -> None:
        if not self.min_surge <= value <= self.max_surge:
            raise InvalidSurgeError(
                f"Surge must be between {self.min_surge}x and {self.max_surge}x"
            )
        logger.info("Surge multiplier changed %.2fx -> %.2fx", self._surge, value)
        self._surge = value

    def strategy(self) -> PricingStrategy:
        if self._surge == 1.0:
            return StandardPricing()
        return SurgePricing(self._surge)


# ── Engine facade ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class FareQuote:
    destination: str
    fare: float
    surge_multiplier: float
    surge_active: bool


class FareEngine:
    """High-level API used by the trip registry and the dashboards."""

    def __init__(
        self,
        context: Optional[PricingContext] = None,
        fares: Optional[Mapping[str, float]] = None,
    ):
        self.context = context or PricingContext()
        self.table = FareTable(fares if fares is not None else FARES_FROM_CIT)

    def destinations(self) -> list[str]:
        return self.table.destinations()

    def knows(self, destination: str) -> bool:
        return destination in self.table

    def calculate_fare(self, destination: str) -> float:
        base = self.table.base_fare(destination)
        if base is None:
            logger.warning("No fare for destination %r; pricing at 0.0", destination)
            warnings.warn(
                f"Unknown destination {destination!r}",
                UnknownDestinationWarning,
                stacklevel=2,
            )
            return 0.0
        return self.context.strategy().calculate(base)

    def quote(self, destination: str) -> FareQuote:
        return FareQuote(
            destination=self.table.canonical(destination) or destination,
            fare=self.calculate_fare(destination),
            surge_multiplier=self.context.surge_multiplier,
            surge_active=self.context.surge_active,
        )
