"""Unit tests for the fare engine and surge control."""

import pytest

from swiftride.domain.errors import InvalidSurgeError, UnknownDestinationWarning
from swiftride.domain.pricing import (
    FareEngine,
    PricingContext,
    StandardPricing,
    SurgePricing,
)
from swiftride.domain.routes import FARES_FROM_CIT, FareTable


class TestPricingStrategies:
    def test_standard_pricing(self):
        assert StandardPricing().calculate(95.0) == 95.0

    def test_surge_pricing_multiplier(self):
        assert SurgePricing(surge_multiplier=1.5).calculate(100.0) == 150.0

    def test_surge_pricing_rounds_to_cents(self):
        assert SurgePricing(surge_multiplier=1.25).calculate(35.0) == 43.75


class TestFareTable:
    def test_lookup_is_case_insensitive(self):
        table = FareTable(FARES_FROM_CIT)
        assert table["it park"] == 95.0
        assert "LAHUG" in table
        assert table.canonical("sm city cebu") == "SM City Cebu"

    def test_unknown_destination(self):
        table = FareTable(FARES_FROM_CIT)
        assert table.base_fare("Moalboal") is None
        assert table.canonical("Moalboal") is None

    def test_destinations_keep_table_order(self):
        table = FareTable(FARES_FROM_CIT)
        assert table.destinations()[0] == "Ayala Center"
        assert len(table) == len(FARES_FROM_CIT)


class TestPricingContext:
    def test_default_is_normal(self):
        ctx = PricingContext()
        assert ctx.surge_multiplier == 1.0
        assert not ctx.surge_active

    @pytest.mark.parametrize("value", [0.5, 1.0, 2.5, 5.0])
    def test_accepts_values_in_range(self, value):
        ctx = PricingContext()
        ctx.set_surge(value)
        assert ctx.surge_multiplier == value

    @pytest.mark.parametrize("value", [0.49, 5.01, -1.0])
    def test_rejects_values_out_of_range(self, value):
        ctx = PricingContext()
        with pytest.raises(InvalidSurgeError):
            ctx.set_surge(value)
        assert ctx.surge_multiplier == 1.0

    def test_surge_active_above_one(self):
        ctx = PricingContext()
        ctx.set_surge(1.2)
        assert ctx.surge_active


class TestFareEngine:
    def setup_method(self):
        self.engine = FareEngine()

    def test_it_park_at_normal_price(self):
        assert self.engine.calculate_fare("IT Park") == 95.0

    def test_lahug_with_surge(self):
        self.engine.context.set_surge(1.5)
        assert self.engine.calculate_fare("Lahug") == 150.0

    def test_fare_is_rounded_base_times_surge(self):
        self.engine.context.set_surge(1.17)
        assert self.engine.calculate_fare("Mabolo") == round(85.0 * 1.17, 2)

    def test_fare_is_monotonic_in_surge(self):
        fares = []
        for surge in (0.5, 1.0, 1.25, 2.0, 5.0):
            self.engine.context.set_surge(surge)
            fares.append(self.engine.calculate_fare("Talamban"))
        assert fares == sorted(fares)

    @pytest.mark.parametrize("surge", [0.5, 1.0, 3.0, 5.0])
    def test_unknown_destination_is_zero(self, surge):
        self.engine.context.set_surge(surge)
        with pytest.warns(UnknownDestinationWarning):
            assert self.engine.calculate_fare("Moalboal") == 0.0

    def test_quote_flags_surge(self):
        self.engine.context.set_surge(2.0)
        quote = self.engine.quote("it park")
        assert quote.destination == "IT Park"
        assert quote.fare == 190.0
        assert quote.surge_active

    def test_custom_fare_table(self):
        engine = FareEngine(fares={"Airport": 250.0})
        assert engine.destinations() == ["Airport"]
        assert engine.calculate_fare("airport") == 250.0
