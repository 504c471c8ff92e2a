"""
In-process keyed locks.

The trip registry serialises competing commands per booking, per driver
and per passenger.  Each key maps to its own ``asyncio.Lock``; holding
several keys at once always acquires them in sorted order so two
callers can never deadlock on each other.

An entry lives only while some caller holds or waits on its key, so the
table stays as small as the set of contended keys.

Keys are namespaced as ``lock:<kind>:<id>``.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class KeyedLock:
    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    @staticmethod
    def key(kind: str, ident: str) -> str:
        return f"lock:{kind}:{ident}"

    async def _acquire(self, key: str) -> None:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            await lock.acquire()
        except BaseException:
            self._forget(key)
            raise

    def _release(self, key: str) -> None:
        self._locks[key].release()
        self._forget(key)

    def _forget(self, key: str) -> None:
        self._users[key] -= 1
        if self._users[key] == 0:
            del self._users[key]
            del self._locks[key]

    @asynccontextmanager
    async def hold(self, *keys: str) -> AsyncIterator[None]:
        ordered = sorted(set(keys))
        acquired: list[str] = []
        try:
            for key in ordered:
                await self._acquire(key)
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self._release(key)
