from fbembed.oembed.models import (
    PROVIDED_FIELDS,
    DecodeError,
    FetchFailure,
    OembedRecord,
    OembedResult,
    get_field,
)
from fbembed.oembed.resolver import (
    FETCH_TIMEOUT_SECONDS,
    POST_ENDPOINT,
    VIDEO_ENDPOINT,
    OembedResolver,
    build_request_url,
    select_endpoint,
)
from fbembed.oembed.transport import AiohttpTransport, HttpTransport, TransportError

__all__ = [
    "PROVIDED_FIELDS",
    "DecodeError",
    "FetchFailure",
    "OembedRecord",
    "OembedResult",
    "get_field",
    "FETCH_TIMEOUT_SECONDS",
    "POST_ENDPOINT",
    "VIDEO_ENDPOINT",
    "OembedResolver",
    "build_request_url",
    "select_endpoint",
    "AiohttpTransport",
    "HttpTransport",
    "TransportError",
]
