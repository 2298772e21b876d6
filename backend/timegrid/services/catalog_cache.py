from __future__ import annotations

import asyncio
from collections.abc import Iterable
import logging

from timegrid.core.exceptions import UnknownCatalogResourceError
from timegrid.services.catalog_source import CatalogSource
from timegrid.schemas.schedule import Lecture

logger = logging.getLogger(__name__)


class CatalogCache:
    """Coalesces catalog fetches: at most one request in flight per resource.

    Built once per application and passed to whoever needs catalog data.
    Successful results are kept for the life of the cache. A failed fetch
    is dropped so the next caller retries it.
    """

    def __init__(self, source: CatalogSource) -> None:
        self._source = source
        self._entries: dict[str, asyncio.Future[list[Lecture]]] = {}

    @property
    def resource_names(self) -> list[str]:
        return list(self._source.resource_names)

    def fetch(self, name: str) -> asyncio.Future[list[Lecture]]:
        """Return the shared handle for ``name``, starting the fetch on first use.

        Must be called from within a running event loop.
        """
        if name not in self._source.resource_names:
            raise UnknownCatalogResourceError(name)
        cached = self._entries.get(name)
        if cached is not None:
            logger.debug("Catalog cache hit for %s", name)
            return cached

        task = asyncio.ensure_future(self._source.fetch(name))
        self._entries[name] = task
        task.add_done_callback(lambda done: self._on_done(name, done))
        return task

    async def get(self, name: str) -> list[Lecture]:
        # Shielded so a caller that goes away does not cancel the shared fetch.
        return await asyncio.shield(self.fetch(name))

    async def fetch_all(self, names: Iterable[str] | None = None) -> list[Lecture]:
        selected = list(self._source.resource_names if names is None else names)
        results = await asyncio.gather(*(self.get(name) for name in selected))
        lectures: list[Lecture] = []
        for rows in results:
            lectures.extend(rows)
        return lectures

    def is_cached(self, name: str) -> bool:
        return name in self._entries

    def cached_keys(self) -> list[str]:
        return list(self._entries)

    def status(self) -> dict[str, str]:
        return {name: "ready" if future.done() else "pending" for name, future in self._entries.items()}

    def _on_done(self, name: str, future: asyncio.Future[list[Lecture]]) -> None:
        if future.cancelled():
            error: BaseException | None = asyncio.CancelledError()
        else:
            error = future.exception()
        if error is None:
            return
        if self._entries.get(name) is future:
            del self._entries[name]
        logger.warning("Catalog fetch for %s failed: %s", name, error)
