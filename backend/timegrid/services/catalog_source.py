from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from typing import Protocol

import httpx
from pydantic import TypeAdapter, ValidationError

from timegrid.core.config import Settings
from timegrid.core.exceptions import CatalogFetchError, UnknownCatalogResourceError
from timegrid.schemas.schedule import Lecture

logger = logging.getLogger(__name__)

_LECTURE_LIST = TypeAdapter(list[Lecture])


class CatalogSource(Protocol):
    @property
    def resource_names(self) -> Sequence[str]: ...

    async def fetch(self, name: str) -> list[Lecture]: ...


def parse_lectures(resource: str, payload: object) -> list[Lecture]:
    try:
        return _LECTURE_LIST.validate_python(payload)
    except ValidationError as exc:
        raise CatalogFetchError(resource, f"malformed payload ({exc.error_count()} error(s))") from exc


class HttpCatalogSource:
    """Loads catalog JSON arrays over HTTP, one URL path per resource name."""

    def __init__(
        self,
        base_url: str,
        resources: Mapping[str, str],
        *,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._resources = dict(resources)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout, follow_redirects=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "HttpCatalogSource":
        return cls(
            settings.catalog_base_url,
            settings.catalog_resources,
            timeout=settings.catalog_timeout_seconds,
        )

    @property
    def resource_names(self) -> list[str]:
        return list(self._resources)

    async def fetch(self, name: str) -> list[Lecture]:
        path = self._resources.get(name)
        if path is None:
            raise UnknownCatalogResourceError(name)
        try:
            response = await self._client.get(path)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise CatalogFetchError(name, f"HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise CatalogFetchError(name, f"{type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            raise CatalogFetchError(name, "response is not valid JSON") from exc
        lectures = parse_lectures(name, payload)
        logger.info("Fetched %d lecture(s) for catalog resource %s", len(lectures), name)
        return lectures

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


class StaticCatalogSource:
    """In-memory catalog, mainly for tests and offline runs."""

    def __init__(self, resources: Mapping[str, Sequence[Lecture | dict]]) -> None:
        self._resources = {name: list(rows) for name, rows in resources.items()}
        self.calls: list[str] = []

    @property
    def resource_names(self) -> list[str]:
        return list(self._resources)

    async def fetch(self, name: str) -> list[Lecture]:
        self.calls.append(name)
        if name not in self._resources:
            raise UnknownCatalogResourceError(name)
        return parse_lectures(name, self._resources[name])
