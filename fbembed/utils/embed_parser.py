"""Turn user-supplied Facebook embed input into a canonical content URL.

Users paste either a direct link to a post/video or the iframe snippet that
Facebook's "Embed" dialog produces. Only the domain is checked here; whether
the URL points to something embeddable is left to the oEmbed endpoint.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qs, urlparse

import structlog
from bs4 import BeautifulSoup

logger = structlog.get_logger()

FACEBOOK_URL_PATTERN = re.compile(r"^https://(?:www\.)?facebook\.com/", re.IGNORECASE)


def is_facebook_url(text: str) -> bool:
    return bool(FACEBOOK_URL_PATTERN.match(text))


def _href_from_iframe(raw: str) -> str | None:
    """Pull the ``href`` query parameter out of the first iframe ``src``."""
    try:
        soup = BeautifulSoup(raw, "html.parser")
        iframe = soup.find("iframe", src=True)
    except Exception as exc:
        logger.debug("embed_markup_unparseable", error=str(exc))
        return None

    if iframe is None:
        return None

    try:
        params = parse_qs(urlparse(iframe["src"]).query)
    except ValueError as exc:
        logger.debug("embed_src_unparseable", src=iframe["src"], error=str(exc))
        return None

    hrefs = params.get("href")
    if not hrefs:
        return None
    return hrefs[0]


def parse_embed_input(raw: str) -> str | None:
    """Return the Facebook content URL found in *raw*, or ``None``.

    Accepts a bare ``https://(www.)facebook.com/...`` URL, returned trimmed
    but otherwise unchanged, or an iframe embed snippet whose ``src`` carries
    the content URL in its ``href`` parameter.
    """
    text = raw.strip()
    if is_facebook_url(text):
        return text

    href = _href_from_iframe(raw)
    if href is not None and is_facebook_url(href):
        return href

    logger.debug("facebook_url_not_found", length=len(raw))
    return None
