"""
Per-record mutual exclusion

One asyncio.Lock per key (e.g. a trip record id). Callers targeting different
keys never wait on each other; callers targeting the same key are serialized.
Waiting is bounded: a caller that cannot acquire the lock in time gets a
TransientFailureError instead of blocking indefinitely.
"""

import asyncio
from collections.abc import AsyncIterator, Hashable
from contextlib import asynccontextmanager

from src.platform.exception.exceptions import TransientFailureError
from src.platform.logging.loguru_io import Logger


class RecordLockRegistry:
    def __init__(self, *, timeout_seconds: float = 5.0) -> None:
        self.timeout_seconds = timeout_seconds
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._holders: dict[Hashable, int] = {}

    def _lock_for(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._lock_for(key)
        self._holders[key] = self._holders.get(key, 0) + 1
        try:
            try:
                await asyncio.wait_for(lock.acquire(), timeout=self.timeout_seconds)
            except asyncio.TimeoutError as e:
                Logger.base.warning(f'⏳ [LOCK] Timed out waiting for record {key}')
                raise TransientFailureError(
                    f'Record {key} is busy, retry the operation'
                ) from e

            Logger.base.debug(f'🔒 [LOCK] Acquired record {key}')
            try:
                yield
            finally:
                lock.release()
                Logger.base.debug(f'🔓 [LOCK] Released record {key}')
        finally:
            self._holders[key] -= 1
            # Drop idle locks so the registry doesn't grow with every trip ever touched
            if not self._holders[key]:
                del self._holders[key]
                self._locks.pop(key, None)

    def is_locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()
