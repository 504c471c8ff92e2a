"""
Account ledger file (pipe-delimited text).

Format, one account per line::

    Role|Username|Password[|Plate|Wallet|RatingSum|RatingCount]

The trailing fields are written for drivers only.  The file only grows by
appending; any update rewrites the whole file because there is no
update-in-place.  Unparsable lines are skipped, never fatal.
"""

from __future__ import annotations

import asyncio
import logging
import warnings
from pathlib import Path
from typing import Iterable, Optional

from swiftride.domain.entities import ACCOUNT_TYPES, Account, Driver, username_key
from swiftride.domain.enums import Role
from swiftride.domain.errors import MalformedRecordWarning, PersistenceError

logger = logging.getLogger(__name__)

SEPARATOR = "|"
RESERVED_CHARS = (SEPARATOR, "\r", "\n")


def check_field(name: str, value: str) -> None:
    """Raise ``ValueError`` if *value* cannot be stored as one ledger field."""
    if any(ch in value for ch in RESERVED_CHARS):
        raise ValueError(f"{name} must not contain '|' or line breaks")


def encode_account(account: Account) -> str:
    fields = [account.role.value, account.username, account.password]
    if isinstance(account, Driver):
        fields += [
            account.plate_number,
            repr(float(account.wallet_balance)),
            repr(float(account.rating_sum)),
            str(account.rating_count),
        ]
    return SEPARATOR.join(fields)


def decode_account(line: str) -> Optional[Account]:
    """Parse one ledger line; return ``None`` if it is malformed."""
    parts = line.rstrip("\r\n").split(SEPARATOR)
    if len(parts) < 3 or not parts[1]:
        return None
    try:
        role = Role(parts[0])
    except ValueError:
        return None

    if role is not Role.DRIVER:
        if len(parts) != 3:
            return None
        return ACCOUNT_TYPES[role](username=parts[1], password=parts[2])

    if len(parts) > 7:
        return None
    driver = Driver(username=parts[1], password=parts[2])
    if len(parts) > 3 and parts[3]:
        driver.plate_number = parts[3]
    try:
        if len(parts) > 4:
            driver.wallet_balance = float(parts[4])
        if len(parts) > 5:
            driver.rating_sum = float(parts[5])
        if len(parts) > 6:
            driver.rating_count = int(parts[6])
    except ValueError:
        return None
    return driver


class LedgerStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    # ── Reads ─────────────────────────────────────────────────────

    def load(self) -> dict[str, Account]:
        """Return accounts keyed by case-folded username."""
        accounts: dict[str, Account] = {}
        if not self.path.exists():
            return accounts
        try:
            lines = self.path.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            raise PersistenceError(f"Cannot read ledger {self.path}") from exc

        for lineno, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            account = decode_account(line)
            if account is None:
                logger.warning("Skipping malformed ledger line %d in %s", lineno, self.path)
                warnings.warn(
                    f"{self.path}:{lineno}: malformed account record",
                    MalformedRecordWarning,
                    stacklevel=2,
                )
                continue
            accounts[username_key(account.username)] = account
        logger.info("Loaded %d accounts from %s", len(accounts), self.path)
        return accounts

    # ── Writes ────────────────────────────────────────────────────

    def save(self, account: Account) -> None:
        self._write([encode_account(account)], mode="a")

    def rewrite(self, accounts: Iterable[Account]) -> None:
        self._write([encode_account(a) for a in accounts], mode="w")

    async def asave(self, account: Account) -> None:
        await asyncio.to_thread(self.save, account)

    async def arewrite(self, accounts: Iterable[Account]) -> None:
        snapshot = list(accounts)
        await asyncio.to_thread(self.rewrite, snapshot)

    def _write(self, lines: list[str], mode: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open(mode, encoding="utf-8", newline="\n") as fh:
                for line in lines:
                    fh.write(line + "\n")
        except OSError as exc:
            raise PersistenceError(f"Cannot write ledger {self.path}") from exc
