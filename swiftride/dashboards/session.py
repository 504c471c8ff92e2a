"""Login / sign-up boundary: turns credentials into the right dashboard."""

from __future__ import annotations

from typing import Optional, Union

from swiftride.app import Marketplace
from swiftride.dashboards.driver import DriverDashboard
from swiftride.dashboards.operator import OperatorDashboard
from swiftride.dashboards.passenger import PassengerDashboard
from swiftride.domain.entities import Account, Driver, Operator, Passenger
from swiftride.domain.enums import Role

Dashboard = Union[DriverDashboard, PassengerDashboard, OperatorDashboard]


def dashboard_for(market: Marketplace, account: Account) -> Dashboard:
    if isinstance(account, Driver):
        return DriverDashboard(market, account)
    if isinstance(account, Passenger):
        return PassengerDashboard(market, account)
    if isinstance(account, Operator):
        return OperatorDashboard(market, account)
    raise TypeError(f"No dashboard for {type(account).__name__}")


async def login(market: Marketplace, role: Role, username: str, password: str) -> Dashboard:
    """Raises ``AuthenticationError`` on bad credentials."""
    account = await market.accounts.authenticate(role, username, password)
    return dashboard_for(market, account)


async def sign_up(
    market: Marketplace,
    role: Role,
    username: str,
    password: str,
    plate_number: Optional[str] = None,
) -> Dashboard:
    """Raises ``UsernameTakenError`` if the name is in use."""
    account = await market.accounts.register(role, username, password, plate_number)
    return dashboard_for(market, account)
