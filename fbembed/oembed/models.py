from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Union

PROVIDED_FIELDS: tuple[str, ...] = ("author_name", "width", "height", "url", "html")


class DecodeError(ValueError):
    """Response body was not a JSON object."""


def _as_int(value: Any) -> Any:
    """Coerce lossless numeric values to ``int``; leave anything else as sent."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value)
    return value


@dataclass(frozen=True)
class OembedRecord:
    """oEmbed data for one Facebook post or video.

    Fields beyond the five that hosts read are kept untouched in ``extra``.
    ``width``/``height`` are ints when the provider sent a whole number
    (possibly as a string) and the provider's raw value otherwise.
    """

    author_name: str | None = None
    width: Any = None
    height: Any = None
    url: str | None = None
    html: str | None = None
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_json(cls, body: str | bytes) -> OembedRecord:
        try:
            data = json.loads(body)
        except (ValueError, RecursionError) as exc:
            raise DecodeError(f"invalid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise DecodeError(f"expected a JSON object, got {type(data).__name__}")

        extra = {k: v for k, v in data.items() if k not in PROVIDED_FIELDS}
        return cls(
            author_name=data.get("author_name"),
            width=_as_int(data.get("width")),
            height=_as_int(data.get("height")),
            url=data.get("url"),
            html=data.get("html"),
            extra=MappingProxyType(extra),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.extra)
        for name in PROVIDED_FIELDS:
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data


@dataclass(frozen=True)
class FetchFailure:
    """Cached marker for a URL whose oEmbed data could not be retrieved.

    Falsy, so callers can write ``if not result: ...``.
    """

    url: str
    reason: str

    def __bool__(self) -> bool:
        return False


OembedResult = Union[OembedRecord, FetchFailure]


def get_field(record: OembedResult, name: str) -> Any | None:
    """Return field *name* from a record, or ``None`` if unavailable."""
    if isinstance(record, FetchFailure):
        return None
    if name in PROVIDED_FIELDS:
        return getattr(record, name)
    return record.extra.get(name)
