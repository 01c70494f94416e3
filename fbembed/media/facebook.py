from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from fbembed.config import settings
from fbembed.oembed.models import PROVIDED_FIELDS, get_field
from fbembed.oembed.resolver import OembedResolver
from fbembed.utils.embed_parser import parse_embed_input

logger = structlog.get_logger()

# Main property names for the field types that can hold the source input
_MAIN_PROPERTIES = ("value", "uri")


def _main_property(item: Any) -> str | None:
    if isinstance(item, str):
        return item
    if isinstance(item, Mapping):
        for key in _MAIN_PROPERTIES:
            value = item.get(key)
            if isinstance(value, str):
                return value
    return None


class FacebookMediaSource:
    """Business logic and metadata for Facebook media items.

    A media item is any mapping of field name to field value. The configured
    ``source_field`` holds the Facebook URL or embed code; its value may be a
    plain string, a ``{"value": ...}``/``{"uri": ...}`` item, or a list of
    such items (only the first is used).
    """

    def __init__(
        self,
        resolver: OembedResolver,
        source_field: str | None = None,
    ) -> None:
        self.resolver = resolver
        self.source_field = source_field if source_field is not None else settings.source_field

    def provided_fields(self) -> tuple[str, ...]:
        return PROVIDED_FIELDS

    def get_source_url(self, media: Mapping[str, Any]) -> str | None:
        if not self.source_field or self.source_field not in media:
            return None

        value = media[self.source_field]
        if isinstance(value, Sequence) and not isinstance(value, str):
            if not value:
                return None
            value = value[0]

        raw = _main_property(value)
        if not raw:
            return None
        return parse_embed_input(raw)

    async def get_field(self, media: Mapping[str, Any], name: str) -> Any | None:
        """Resolve the media item and return one of :meth:`provided_fields`."""
        if name not in PROVIDED_FIELDS:
            logger.warning("unknown_media_field", field=name)
            return None

        url = self.get_source_url(media)
        if url is None:
            return None

        record = await self.resolver.resolve(url)
        return get_field(record, name)
