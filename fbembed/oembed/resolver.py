from __future__ import annotations

import asyncio
from urllib.parse import urlencode

import structlog

from fbembed.config import settings
from fbembed.oembed.models import DecodeError, FetchFailure, OembedRecord, OembedResult
from fbembed.oembed.transport import AiohttpTransport, HttpTransport, TransportError
from fbembed.utils.cache import FetchAbandoned, OembedCache

logger = structlog.get_logger()

VIDEO_ENDPOINT = "https://www.facebook.com/plugins/video/oembed.json/"
POST_ENDPOINT = "https://www.facebook.com/plugins/post/oembed.json/"

FETCH_TIMEOUT_SECONDS = 5


def _dbg(event: str, **kwargs: object) -> None:
    """Log at info level when debug_mode is on, otherwise debug."""
    if settings.debug_mode:
        logger.info(event, **kwargs)
    else:
        logger.debug(event, **kwargs)


def select_endpoint(url: str) -> str:
    """Videos have their own oEmbed endpoint; everything else is a post."""
    if "/videos/" in url or "/video.php/" in url:
        return VIDEO_ENDPOINT
    return POST_ENDPOINT


def build_request_url(url: str) -> str:
    return f"{select_endpoint(url)}?{urlencode({'url': url})}"


class OembedResolver:
    """Fetch oEmbed data for Facebook content URLs, once per URL per cache.

    Failures are never raised: they come back as a ``FetchFailure`` that is
    cached like a record, so a broken URL is only tried (and logged) once.
    Pass a shared ``OembedCache`` to widen the scope beyond this resolver.
    """

    def __init__(
        self,
        transport: HttpTransport | None = None,
        cache: OembedCache | None = None,
    ) -> None:
        self._transport = transport if transport is not None else AiohttpTransport()
        self._owns_transport = transport is None
        self.cache = cache if cache is not None else OembedCache()

    async def __aenter__(self) -> OembedResolver:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_transport:
            await self._transport.close()

    async def resolve(self, url: str) -> OembedResult:
        while True:
            future, owner = self.cache.claim(url)
            if owner:
                break
            try:
                # shield: a cancelled waiter must not cancel the shared future
                cached = await asyncio.shield(asyncio.wrap_future(future))
            except FetchAbandoned:
                continue
            _dbg("oembed_cache_hit", url=url, ok=bool(cached))
            return cached

        try:
            result = await self._fetch(url)
        except BaseException:
            self.cache.abandon(url)
            raise
        self.cache.put(url, result)
        return result

    async def _fetch(self, url: str) -> OembedResult:
        endpoint = select_endpoint(url)
        request_url = build_request_url(url)
        _dbg("oembed_fetching", url=url, endpoint=endpoint)

        try:
            body = await self._transport.get(request_url, timeout=FETCH_TIMEOUT_SECONDS)
            record = OembedRecord.from_json(body)
        except (TransportError, DecodeError) as exc:
            logger.error(
                "oembed_fetch_failed",
                url=url,
                endpoint=endpoint,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            return FetchFailure(url=url, reason=str(exc))

        logger.info(
            "oembed_fetched",
            url=url,
            endpoint=endpoint,
            author=record.author_name,
        )
        return record
