from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

import structlog

from fbembed.config import settings
from fbembed.oembed import PROVIDED_FIELDS, OembedResolver, get_field
from fbembed.utils.embed_parser import parse_embed_input


def configure_logging(level: str | None = None) -> None:
    """Send structlog events to stderr; stdout only carries command output."""
    level_name = (level or settings.log_level).upper()
    min_level = logging.getLevelNamesMapping().get(level_name, logging.INFO)

    if sys.stderr.isatty():
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fbembed",
        description="Print oEmbed metadata for a Facebook URL or embed snippet.",
    )
    parser.add_argument("input", help="Facebook post/video URL or iframe embed code")
    parser.add_argument(
        "--field",
        choices=PROVIDED_FIELDS,
        help="print only this field instead of the whole record as JSON",
    )
    parser.add_argument(
        "--log-level",
        help=f"structlog level for diagnostics on stderr (default: {settings.log_level})",
    )
    return parser


async def run(raw: str, field: str | None = None) -> int:
    log = structlog.get_logger()

    url = parse_embed_input(raw)
    if url is None:
        print("No Facebook URL found in input.", file=sys.stderr)
        return 1

    async with OembedResolver() as resolver:
        record = await resolver.resolve(url)

    if not record:
        print(f"Could not retrieve oEmbed data for {url}.", file=sys.stderr)
        return 1

    if field is None:
        print(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))
        return 0

    value = get_field(record, field)
    if value is None:
        log.warning("oembed_field_absent", url=url, field=field)
        print(f"Field {field!r} not present for {url}.", file=sys.stderr)
        return 1

    print(value)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return asyncio.run(run(args.input, args.field))


if __name__ == "__main__":
    sys.exit(main())
