"""
Revenue Report
==============

Aggregates the receipt log; never looks at the trip registry or the
account ledger.

* ``revenue``            -- operator view: sales and commission per period
* ``driver_earnings``    -- one driver's earnings and ride count per period
* ``passenger_history``  -- one passenger's receipts, newest first

Periods are calendar days or calendar months of the receipt timestamp,
newest first.  Name filters are case-insensitive.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable

from .entities import Receipt
from .enums import Granularity

EXCELLENT_THRESHOLD = 500.0
GOOD_THRESHOLD = 200.0


@dataclass(frozen=True)
class PeriodTotal:
    period: date
    label: str
    rides: int
    total_fare: float
    commission: float
    driver_earnings: float

    @property
    def performance(self) -> str:
        return performance_band(self.driver_earnings)


@dataclass
class RevenueReport:
    granularity: Granularity
    periods: list[PeriodTotal] = field(default_factory=list)

    @property
    def rides(self) -> int:
        return sum(p.rides for p in self.periods)

    @property
    def total_fare(self) -> float:
        return round(sum(p.total_fare for p in self.periods), 2)

    @property
    def commission(self) -> float:
        return round(sum(p.commission for p in self.periods), 2)

    @property
    def driver_earnings(self) -> float:
        return round(sum(p.driver_earnings for p in self.periods), 2)


def performance_band(earnings: float) -> str:
    if earnings > EXCELLENT_THRESHOLD:
        return "EXCELLENT"
    if earnings > GOOD_THRESHOLD:
        return "GOOD"
    return "FAIR"


def _period_of(receipt: Receipt, granularity: Granularity) -> date:
    day = receipt.timestamp.date()
    if granularity is Granularity.MONTHLY:
        return day.replace(day=1)
    return day


def _label(period: date, granularity: Granularity) -> str:
    if granularity is Granularity.MONTHLY:
        return period.strftime("%B %Y")
    return period.strftime("%b %d, %Y")


def _same_name(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


def summarize(
    receipts: Iterable[Receipt],
    granularity: Granularity | str = Granularity.DAILY,
    where: Callable[[Receipt], bool] | None = None,
) -> RevenueReport:
    """Group *receipts* by period and sum fares, commission and earnings."""
    granularity = Granularity(granularity)
    buckets: dict[date, list[Receipt]] = defaultdict(list)
    for receipt in receipts:
        if where is not None and not where(receipt):
            continue
        buckets[_period_of(receipt, granularity)].append(receipt)

    report = RevenueReport(granularity=granularity)
    for period in sorted(buckets, reverse=True):
        group = buckets[period]
        report.periods.append(
            PeriodTotal(
                period=period,
                label=_label(period, granularity),
                rides=len(group),
                total_fare=round(sum(r.total_fare for r in group), 2),
                commission=round(sum(r.commission for r in group), 2),
                driver_earnings=round(sum(r.driver_earnings for r in group), 2),
            )
        )
    return report


def revenue(
    receipts: Iterable[Receipt],
    granularity: Granularity | str = Granularity.DAILY,
    driver: str | None = None,
    passenger: str | None = None,
) -> RevenueReport:
    def where(r: Receipt) -> bool:
        if driver is not None and not _same_name(r.driver_name, driver):
            return False
        if passenger is not None and not _same_name(r.passenger_name, passenger):
            return False
        return True

    return summarize(receipts, granularity, where=where)


def driver_earnings(
    receipts: Iterable[Receipt],
    driver_name: str,
    granularity: Granularity | str = Granularity.DAILY,
) -> RevenueReport:
    return revenue(receipts, granularity, driver=driver_name)


def passenger_history(receipts: Iterable[Receipt], passenger_name: str) -> list[Receipt]:
    mine = [r for r in receipts if _same_name(r.passenger_name, passenger_name)]
    return sorted(mine, key=lambda r: r.timestamp, reverse=True)
