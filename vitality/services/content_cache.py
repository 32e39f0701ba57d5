"""Session-scoped artifact cache.

Maps a logical key (meal or exercise name) to the last known artifact
locator. Entries never expire within a session and are overwritten in place
on edit. Concurrent requests for the same key share one in-flight
generation (single-flight), so the factory runs at most once per key.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol

logger = logging.getLogger("vitality.cache")

LocatorFactory = Callable[[], Awaitable[str]]


class ArtifactStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, locator: str) -> None: ...


class MemoryArtifactStore:
    def __init__(self):
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, locator: str) -> None:
        self._data[key] = locator


class SessionContentCache:
    def __init__(self, store: Optional[ArtifactStore] = None, name: str = "artifacts"):
        self.name = name
        self._store = store if store is not None else MemoryArtifactStore()
        self._flights: dict[str, asyncio.Future] = {}
        self._versions: dict[str, int] = {}

    async def get(self, key: str) -> Optional[str]:
        return await self._store.get(key)

    async def get_or_create(self, key: str, factory: LocatorFactory) -> str:
        """Return the cached locator for `key`, generating it once on a miss.

        Empty locators (generation unavailable) are returned but not cached.
        A factory exception reaches every caller waiting on that flight.
        """
        flight = self._flights.get(key)
        if flight is None:
            flight = asyncio.ensure_future(self._resolve(key, factory))
            self._flights[key] = flight
            flight.add_done_callback(lambda done, key=key: self._land(key, done))
        # shield: a cancelled waiter must not cancel the shared generation
        return await asyncio.shield(flight)

    def _land(self, key: str, flight: asyncio.Future) -> None:
        if self._flights.get(key) is flight:
            del self._flights[key]
        if not flight.cancelled() and flight.exception() is not None:
            logger.error(f"[{self.name}] generation for {key!r} failed: {flight.exception()}")

    async def _resolve(self, key: str, factory: LocatorFactory) -> str:
        cached = await self._store.get(key)
        if cached:
            logger.debug("[%s] hit %r", self.name, key)
            return cached

        version = self._versions.get(key, 0)
        logger.info("[%s] miss %r, generating", self.name, key)
        locator = await factory()
        if not locator:
            logger.warning("[%s] generation for %r produced no artifact", self.name, key)
            return ""

        if self._versions.get(key, 0) != version:
            # replaced while generating; the replacement wins
            return await self._store.get(key) or locator
        await self._store.set(key, locator)
        return locator

    async def replace(self, key: str, locator: str) -> None:
        """Overwrite the cached locator unconditionally (after an edit)."""
        self._versions[key] = self._versions.get(key, 0) + 1
        await self._store.set(key, locator)
        logger.info("[%s] replaced %r", self.name, key)
