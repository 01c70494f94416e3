"""HTTP transports used by the oEmbed resolver.

The resolver only needs "GET this URL, give me the body or raise
TransportError", so anything with that shape can be plugged in (tests use an
AsyncMock).
"""

from __future__ import annotations

import asyncio
from typing import Protocol

import aiohttp
import structlog

from fbembed.config import settings

logger = structlog.get_logger()


class TransportError(Exception):
    """Network-level failure: timeout, connection error, or non-2xx status."""


class HttpTransport(Protocol):
    async def get(self, url: str, *, timeout: float) -> str: ...

    async def close(self) -> None: ...


class AiohttpTransport:
    """Transport backed by a lazily created ``aiohttp.ClientSession``."""

    def __init__(self, session: aiohttp.ClientSession | None = None) -> None:
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    async def get(self, url: str, *, timeout: float) -> str:
        session = self._get_session()
        try:
            async with session.get(
                url,
                timeout=aiohttp.ClientTimeout(total=timeout),
                allow_redirects=True,
            ) as resp:
                resp.raise_for_status()
                return await resp.text(encoding="utf-8", errors="replace")
        except aiohttp.ClientResponseError as exc:
            raise TransportError(f"HTTP {exc.status}: {exc.message}") from exc
        except asyncio.TimeoutError as exc:
            raise TransportError(f"timed out after {timeout}s") from exc
        except aiohttp.ClientError as exc:
            raise TransportError(str(exc) or type(exc).__name__) from exc

    async def close(self) -> None:
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            logger.debug("oembed_session_closed")
