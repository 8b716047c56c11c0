"""
HTTP client for the parts listing API.

Wraps aiohttp so the storefront search controller can talk to
GET /api/parts without knowing about transport details. Any failure
(connection, timeout, non-2xx, unreadable body) is raised as
CatalogUnavailableException; nothing is retried and no fallback data
is substituted.
"""

import asyncio
import logging

import aiohttp

import config
from exceptions.catalog import CatalogUnavailableException

logger = logging.getLogger(__name__)


class CatalogClient:

    def __init__(self, base_url: str | None = None, session: aiohttp.ClientSession | None = None,
                 timeout_seconds: float = 10):
        self.base_url = (base_url or config.CATALOG_API_URL).rstrip("/")
        self._session = session
        self._owns_session = session is None
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> dict:
        url = f"{self.base_url}{path}"
        try:
            async with self._get_session().get(url, params=params) as response:
                if response.status >= 400:
                    try:
                        body = await response.json()
                        reason = (body.get("error") if isinstance(body, dict) else None) or f"HTTP {response.status}"
                    except (aiohttp.ContentTypeError, ValueError):
                        reason = f"HTTP {response.status}"
                    raise CatalogUnavailableException(url, reason, status=response.status)
                return await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning(f"Catalog request failed: GET {url} ({type(e).__name__})")
            raise CatalogUnavailableException(url, str(e) or type(e).__name__) from e

    async def list_parts(self, params: dict[str, str]) -> dict:
        return await self._get_json("/api/parts", params=params)

    async def get_part(self, part_id: int | str) -> dict:
        data = await self._get_json(f"/api/parts/{part_id}")
        return data.get("part", data)
