"""
Concurrency safety tests.

Demonstrates:
1. Two drivers racing for one booking produce exactly one winner.
2. One driver racing for two bookings ends up with exactly one trip.
3. Ledger appends and rewrites never drop each other's accounts.
4. Keyed locks serialise holders of the same key and release on error.
"""

from __future__ import annotations

import asyncio
import time
from unittest.mock import patch

import pytest

from swiftride.app import create_marketplace
from swiftride.domain.entities import Receipt
from swiftride.domain.enums import Role
from swiftride.domain.errors import (
    AlreadyAcceptedError,
    DriverBusyError,
    DuplicateBookingError,
    UsernameTakenError,
)
from swiftride.infrastructure.locks import KeyedLock


class TestAcceptRace:
    @pytest.mark.asyncio
    async def test_one_winner_per_booking(
        self, market, registry, passenger, driver, other_driver
    ):
        booking = await registry.request(passenger, "IT Park")

        results = await asyncio.gather(
            registry.accept(driver, booking),
            registry.accept(other_driver, booking),
            return_exceptions=True,
        )

        wins = [r for r in results if isinstance(r, Receipt)]
        losses = [r for r in results if isinstance(r, AlreadyAcceptedError)]
        assert len(wins) == 1
        assert len(losses) == 1
        assert driver.wallet_balance + other_driver.wallet_balance == 76.0
        assert len(market.receipts.read()) == 1

    @pytest.mark.asyncio
    async def test_many_drivers_one_booking(self, market, registry, passenger):
        drivers = [
            await market.accounts.register(Role.DRIVER, f"driver{i}", "pw", f"PLT {i}")
            for i in range(5)
        ]
        booking = await registry.request(passenger, "Lahug")

        results = await asyncio.gather(
            *(registry.accept(d, booking) for d in drivers), return_exceptions=True
        )

        assert sum(isinstance(r, Receipt) for r in results) == 1
        assert sum(isinstance(r, AlreadyAcceptedError) for r in results) == 4

    @pytest.mark.asyncio
    async def test_one_driver_two_bookings(
        self, registry, passenger, other_passenger, driver
    ):
        first = await registry.request(passenger, "IT Park")
        second = await registry.request(other_passenger, "Lahug")

        results = await asyncio.gather(
            registry.accept(driver, first),
            registry.accept(driver, second),
            return_exceptions=True,
        )

        assert sum(isinstance(r, Receipt) for r in results) == 1
        assert sum(isinstance(r, DriverBusyError) for r in results) == 1
        assert [first.is_accepted, second.is_accepted].count(True) == 1

    @pytest.mark.asyncio
    async def test_concurrent_requests_by_one_passenger(self, registry, passenger):
        results = await asyncio.gather(
            registry.request(passenger, "IT Park"),
            registry.request(passenger, "Lahug"),
            return_exceptions=True,
        )
        assert sum(isinstance(r, DuplicateBookingError) for r in results) == 1
        assert len(registry) == 1


class TestLedgerWrites:
    @pytest.mark.asyncio
    async def test_sign_up_during_rewrite_is_not_lost(
        self, settings, market, registry, passenger, driver
    ):
        store = market.accounts.store
        rewrite = store.rewrite

        def slow_rewrite(accounts):
            time.sleep(0.1)
            rewrite(accounts)

        async def late_sign_up():
            await asyncio.sleep(0.02)
            return await market.accounts.register(Role.PASSENGER, "newbie", "pw")

        booking = await registry.request(passenger, "IT Park")
        with patch.object(store, "rewrite", side_effect=slow_rewrite):
            await asyncio.gather(registry.accept(driver, booking), late_sign_up())

        reloaded = create_marketplace(settings)
        assert "newbie" in reloaded.accounts
        assert reloaded.accounts.get_driver("jun").wallet_balance == 76.0

    @pytest.mark.asyncio
    async def test_same_name_sign_ups_race(self, market):
        results = await asyncio.gather(
            market.accounts.register(Role.PASSENGER, "twin", "pw"),
            market.accounts.register(Role.PASSENGER, "TWIN", "pw"),
            return_exceptions=True,
        )
        assert sum(isinstance(r, UsernameTakenError) for r in results) == 1
        assert len(market.accounts.store.load()) == 1


class TestKeyedLock:
    @pytest.mark.asyncio
    async def test_different_keys_do_not_block(self):
        locks = KeyedLock()
        async with locks.hold("lock:test:1"):
            async with locks.hold("lock:test:2"):
                assert set(locks._locks) == {"lock:test:1", "lock:test:2"}

    @pytest.mark.asyncio
    async def test_hold_releases_on_error(self):
        locks = KeyedLock()
        with pytest.raises(RuntimeError):
            async with locks.hold("lock:a", "lock:b"):
                raise RuntimeError("boom")
        assert locks._locks == {}
        async with locks.hold("lock:a", "lock:b"):
            pass

    @pytest.mark.asyncio
    async def test_entry_kept_while_waiter_queued(self):
        locks = KeyedLock()
        entered = asyncio.Event()

        async def waiter():
            async with locks.hold("lock:shared"):
                entered.set()

        async with locks.hold("lock:shared"):
            task = asyncio.create_task(waiter())
            await asyncio.sleep(0)
            assert not entered.is_set()
        await task
        assert entered.is_set()
        assert locks._locks == {}
        assert locks._users == {}

    @pytest.mark.asyncio
    async def test_registry_leaves_no_lock_entries(
        self, registry, passenger, driver
    ):
        booking = await registry.request(passenger, "IT Park")
        await registry.accept(driver, booking)
        await registry.complete(driver)
        await registry.rate(passenger, 5)
        await registry.request(passenger, "Lahug")
        await registry.cancel(passenger)
        assert registry._locks._locks == {}

    @pytest.mark.asyncio
    async def test_hold_serialises_same_key(self):
        locks = KeyedLock()
        order: list[str] = []

        async def worker(name: str):
            async with locks.hold("lock:shared"):
                order.append(f"{name}-in")
                await asyncio.sleep(0)
                order.append(f"{name}-out")

        await asyncio.gather(worker("a"), worker("b"))
        assert order == ["a-in", "a-out", "b-in", "b-out"]

    def test_key_format(self):
        assert KeyedLock.key("driver", "jun") == "lock:driver:jun"
