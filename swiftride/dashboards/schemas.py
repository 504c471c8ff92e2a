"""Pydantic view models returned by the dashboards."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from swiftride.domain.reporting import RevenueReport


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notice(BaseModel):
    level: NoticeLevel
    message: str

    @property
    def ok(self) -> bool:
        return self.level is NoticeLevel.SUCCESS

    @classmethod
    def success(cls, message: str) -> "Notice":
        return cls(level=NoticeLevel.SUCCESS, message=message)

    @classmethod
    def warning(cls, message: str) -> "Notice":
        return cls(level=NoticeLevel.WARNING, message=message)

    @classmethod
    def error(cls, message: str) -> "Notice":
        return cls(level=NoticeLevel.ERROR, message=message)


# ── Driver ────────────────────────────────────────────────────────────


class JobOffer(BaseModel):
    choice: int
    passenger: str
    destination: str
    fare: float
    earnings: float


class DriverStatus(BaseModel):
    username: str
    plate_number: str
    rating: str
    busy: bool

    @property
    def label(self) -> str:
        return "ON TRIP" if self.busy else "AVAILABLE"


class DriverRow(DriverStatus):
    wallet_balance: float
    average_rating: float


# ── Passenger ─────────────────────────────────────────────────────────


class FarePreview(BaseModel):
    destination: str
    fare: float
    surge_multiplier: float
    surge_active: bool


class PassengerStatus(BaseModel):
    username: str
    status: str
    destination: Optional[str] = None
    driver: Optional[str] = None
    plate_number: Optional[str] = None


class PendingRating(BaseModel):
    destination: str
    driver: Optional[str] = None


class TripHistoryEntry(BaseModel):
    timestamp: datetime
    driver: str
    destination: str
    total_fare: float


# ── Reports ───────────────────────────────────────────────────────────


class PeriodRow(BaseModel):
    period: date
    label: str
    rides: int
    total_fare: float
    commission: float
    driver_earnings: float
    performance: str


class ReportView(BaseModel):
    granularity: str
    rows: list[PeriodRow] = []
    rides: int = 0
    total_fare: float = 0.0
    commission: float = 0.0
    driver_earnings: float = 0.0

    @classmethod
    def from_report(cls, report: RevenueReport) -> "ReportView":
        return cls(
            granularity=report.granularity.value,
            rows=[
                PeriodRow(
                    period=p.period,
                    label=p.label,
                    rides=p.rides,
                    total_fare=p.total_fare,
                    commission=p.commission,
                    driver_earnings=p.driver_earnings,
                    performance=p.performance,
                )
                for p in report.periods
            ],
            rides=report.rides,
            total_fare=report.total_fare,
            commission=report.commission,
            driver_earnings=report.driver_earnings,
        )
