"""
Receipt log (pipe-delimited, append-only).

Format, one accepted trip per line::

    Timestamp|DriverName|Plate|PassengerName|Destination|TotalFare|Commission|DriverEarnings|UniqueID

Timestamps are ISO-8601.  Lines are never rewritten.
"""

from __future__ import annotations

import asyncio
import logging
import warnings
from datetime import datetime
from pathlib import Path
from typing import Optional

from swiftride.domain.entities import Receipt
from swiftride.domain.errors import MalformedRecordWarning, PersistenceError

logger = logging.getLogger(__name__)

SEPARATOR = "|"
FIELD_COUNT = 9


def encode_receipt(receipt: Receipt) -> str:
    return SEPARATOR.join(
        [
            receipt.timestamp.isoformat(timespec="seconds"),
            receipt.driver_name,
            receipt.plate_number,
            receipt.passenger_name,
            receipt.destination,
            repr(float(receipt.total_fare)),
            repr(float(receipt.commission)),
            repr(float(receipt.driver_earnings)),
            receipt.transaction_id,
        ]
    )


def decode_receipt(line: str) -> Optional[Receipt]:
    parts = line.rstrip("\r\n").split(SEPARATOR)
    if len(parts) < FIELD_COUNT - 1:
        return None
    try:
        timestamp = datetime.fromisoformat(parts[0])
        fare, commission, earnings = (float(p) for p in parts[5:8])
    except ValueError:
        return None
    return Receipt(
        timestamp=timestamp,
        driver_name=parts[1],
        plate_number=parts[2],
        passenger_name=parts[3],
        destination=parts[4],
        total_fare=fare,
        commission=commission,
        driver_earnings=earnings,
        transaction_id=parts[8] if len(parts) > 8 else "",
    )


class ReceiptLog:
    def __init__(self, path: Path):
        self.path = Path(path)

    def append(self, receipt: Receipt) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8", newline="\n") as fh:
                fh.write(encode_receipt(receipt) + "\n")
        except OSError as exc:
            raise PersistenceError(f"Cannot append receipt to {self.path}") from exc

    async def aappend(self, receipt: Receipt) -> None:
        await asyncio.to_thread(self.append, receipt)

    def read(self) -> list[Receipt]:
        """Return every parsable receipt, oldest first."""
        if not self.path.exists():
            return []
        try:
            lines = self.path.read_text(encoding="utf-8").splitlines()
        except OSError as exc:
            raise PersistenceError(f"Cannot read receipts {self.path}") from exc

        receipts: list[Receipt] = []
        skipped = 0
        for line in lines:
            if not line.strip():
                continue
            receipt = decode_receipt(line)
            if receipt is None:
                skipped += 1
                continue
            receipts.append(receipt)
        if skipped:
            logger.warning("Skipped %d malformed receipt lines in %s", skipped, self.path)
            warnings.warn(
                f"{self.path}: skipped {skipped} malformed receipt lines",
                MalformedRecordWarning,
                stacklevel=2,
            )
        return receipts
