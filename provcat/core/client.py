"""Provider catalog client: fetch -> decode -> normalize.

``CatalogClient.load()`` returns a typed result so callers can tell an empty
catalog apart from a failed fetch. ``get_all()`` keeps the simple contract of
returning an empty list on any failure after logging it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, List, Optional, Protocol, Tuple, Union

import httpx
from pydantic import ValidationError

from provcat.core.catalog import Provider, normalize_catalog
from provcat.core.config import CatalogSettings, load_settings
from provcat.core.errors import CatalogError, CatalogReadError, CatalogTransportError
from provcat.core.schema import decode_catalog
from provcat.utils.log import get_logger

logger = get_logger()


class CatalogTransport(Protocol):
    """Fetches the raw catalog document."""

    def fetch(self, url: str) -> bytes:
        """Return the response body, raising CatalogTransportError/CatalogReadError."""


class HttpxTransport:
    """Unauthenticated HTTP GET via httpx.

    Without an explicit ``client`` a fresh ``httpx.Client`` is opened and closed
    per fetch. A caller-supplied client is reused and left open.
    """

    def __init__(
        self,
        *,
        timeout: float,
        user_agent: str,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._timeout = timeout
        self._user_agent = user_agent
        self._client = client

    def fetch(self, url: str) -> bytes:
        if self._client is not None:
            return self._get(self._client, url)
        with httpx.Client(timeout=self._timeout, follow_redirects=True) as client:
            return self._get(client, url)

    def _get(self, client: httpx.Client, url: str) -> bytes:
        headers = {
            "Accept": "application/json",
            "User-Agent": self._user_agent,
        }
        try:
            with client.stream("GET", url, headers=headers) as response:
                if response.status_code >= 400:
                    raise CatalogTransportError(
                        f"Catalog request to {url} failed with HTTP {response.status_code}",
                        status_code=response.status_code,
                    )
                try:
                    return response.read()
                except (httpx.HTTPError, httpx.StreamError) as exc:
                    raise CatalogReadError(
                        f"Error reading catalog response from {url}: {exc}"
                    ) from exc
        except (httpx.HTTPError, httpx.InvalidURL, httpx.StreamError) as exc:
            raise CatalogTransportError(f"Error fetching catalog from {url}: {exc}") from exc


@dataclass(frozen=True)
class CatalogLoaded:
    """Successful ingestion."""

    providers: Tuple[Provider, ...]
    ok: ClassVar[bool] = True


@dataclass(frozen=True)
class CatalogFailed:
    """Ingestion stopped at the fetch, read or decode step."""

    error: CatalogError
    ok: ClassVar[bool] = False


CatalogResult = Union[CatalogLoaded, CatalogFailed]


class CatalogClient:
    """Loads the provider catalog through an injectable transport."""

    def __init__(
        self,
        settings: Optional[CatalogSettings] = None,
        transport: Optional[CatalogTransport] = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.transport: CatalogTransport = transport or HttpxTransport(
            timeout=self.settings.timeout,
            user_agent=self.settings.user_agent,
        )

    def fetch(self) -> bytes:
        """Return the raw catalog document."""
        return self.transport.fetch(self.settings.url)

    def load(self) -> CatalogResult:
        """Fetch, decode and normalize the catalog; never raises CatalogError."""
        try:
            payload = self.fetch()
            providers = normalize_catalog(decode_catalog(payload))
        except CatalogError as exc:
            logger.warning(
                "[catalog] Failed to load provider catalog: %s: %s",
                type(exc).__name__,
                exc,
                extra={"url": self.settings.url},
            )
            return CatalogFailed(error=exc)

        logger.debug(
            "[catalog] Loaded provider catalog",
            extra={"url": self.settings.url, "providers": len(providers)},
        )
        return CatalogLoaded(providers=providers)

    def get_all(self) -> List[Provider]:
        """Return all providers, or an empty list if ingestion failed."""
        result = self.load()
        if isinstance(result, CatalogFailed):
            return []
        return list(result.providers)


def get_all() -> List[Provider]:
    """Return all providers from the default catalog source."""
    try:
        client = CatalogClient()
    except ValidationError as exc:
        logger.warning("[catalog] Invalid catalog settings: %s", exc)
        return []
    return client.get_all()


__all__ = [
    "CatalogClient",
    "CatalogFailed",
    "CatalogLoaded",
    "CatalogResult",
    "CatalogTransport",
    "HttpxTransport",
    "get_all",
]
