"""
Repository Pattern -- keeps the in-memory account map and its ledger in
step so domain logic never touches the file format.

The in-memory map is authoritative for the running session: a failed
write is logged and the mutation stays in effect.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .ledger import LedgerStore, check_field
from swiftride.domain.credentials import hash_password, verify_password
from swiftride.domain.entities import (
    ACCOUNT_TYPES,
    Account,
    Driver,
    Passenger,
    username_key,
)
from swiftride.domain.enums import Role
from swiftride.domain.errors import (
    AuthenticationError,
    PersistenceError,
    UsernameTakenError,
)

logger = logging.getLogger(__name__)


class AccountRepository:
    def __init__(self, store: LedgerStore, accounts: Optional[dict[str, Account]] = None):
        self.store = store
        self.accounts: dict[str, Account] = accounts if accounts is not None else {}
        # Serialises ledger appends and full rewrites.
        self._write_lock = asyncio.Lock()

    @classmethod
    def load(cls, store: LedgerStore) -> "AccountRepository":
        return cls(store, store.load())

    # ── Typed accessors ───────────────────────────────────────────

    def get(self, username: str) -> Optional[Account]:
        return self.accounts.get(username_key(username))

    def get_driver(self, username: str) -> Optional[Driver]:
        account = self.get(username)
        return account if isinstance(account, Driver) else None

    def get_passenger(self, username: str) -> Optional[Passenger]:
        account = self.get(username)
        return account if isinstance(account, Passenger) else None

    def drivers(self) -> list[Driver]:
        return [a for a in self.accounts.values() if isinstance(a, Driver)]

    def __contains__(self, username: str) -> bool:
        return username_key(username) in self.accounts

    def __len__(self) -> int:
        return len(self.accounts)

    # ── Registration / login ──────────────────────────────────────

    async def register(
        self,
        role: Role,
        username: str,
        password: str,
        plate_number: Optional[str] = None,
    ) -> Account:
        username = username.strip()
        if not username:
            raise ValueError("Username must not be empty")
        check_field("Username", username)
        if plate_number:
            check_field("Plate number", plate_number)

        account = ACCOUNT_TYPES[role](username=username, password=hash_password(password))
        if isinstance(account, Driver) and plate_number:
            account.plate_number = plate_number

        async with self._write_lock:
            if username in self:
                raise UsernameTakenError(f"Username {username!r} is taken")
            self.accounts[account.key] = account
            logger.info("Registered %s account %s", role.value, username)
            try:
                await self.store.asave(account)
            except PersistenceError:
                logger.exception("Could not append account %s to ledger", username)
        return account

    async def authenticate(self, role: Role, username: str, password: str) -> Account:
        account = self.get(username)
        if account is None or account.role is not role:
            raise AuthenticationError("Invalid credentials")
        ok, needs_rehash = verify_password(password, account.password)
        if not ok:
            raise AuthenticationError("Invalid credentials")
        if needs_rehash:
            account.password = hash_password(password)
            await self.persist()
        return account

    async def delete_driver(self, username: str) -> bool:
        driver = self.get_driver(username)
        if driver is None:
            return False
        del self.accounts[driver.key]
        logger.info("Deleted driver %s", driver.username)
        await self.persist()
        return True

    # ── Persistence ───────────────────────────────────────────────

    async def persist(self) -> bool:
        """Rewrite the ledger from memory.  Returns False if the write failed."""
        async with self._write_lock:
            try:
                await self.store.arewrite(list(self.accounts.values()))
            except PersistenceError:
                logger.exception("Ledger rewrite failed; in-memory state kept")
                return False
        return True
