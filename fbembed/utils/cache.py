from __future__ import annotations

import threading
from concurrent.futures import Future
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fbembed.oembed.models import OembedResult


class FetchAbandoned(Exception):
    """The task that claimed a URL went away before storing a result."""


class OembedCache:
    """In-memory oEmbed results for one fetch scope (a request or a process).

    Entries never expire: once a URL has a record or a failure, it keeps it
    for as long as the cache object lives. Build one per scope and pass it
    to the resolver.

    Safe to share between threads and event loops. Each URL maps to a
    ``concurrent.futures.Future``; the first caller to :meth:`claim` a URL
    owns the fetch and everyone else waits on the same future.
    """

    def __init__(self) -> None:
        self._mutex = threading.Lock()
        self._entries: dict[str, Future[OembedResult]] = {}

    def claim(self, url: str) -> tuple[Future[OembedResult], bool]:
        """Return the future for *url* and whether the caller must fill it."""
        with self._mutex:
            future = self._entries.get(url)
            if future is not None:
                return future, False
            future = Future()
            self._entries[url] = future
            return future, True

    def abandon(self, url: str) -> None:
        """Drop an unfinished claim so the next caller fetches instead."""
        with self._mutex:
            future = self._entries.get(url)
            if future is None or future.done():
                return
            del self._entries[url]
        future.set_exception(FetchAbandoned(url))

    def get(self, url: str) -> OembedResult | None:
        with self._mutex:
            future = self._entries.get(url)
        if future is None or not future.done() or future.exception() is not None:
            return None
        return future.result()

    def put(self, url: str, result: OembedResult) -> None:
        with self._mutex:
            future = self._entries.get(url)
            if future is None or future.done():
                future = Future()
                self._entries[url] = future
            future.set_result(result)

    def __contains__(self, url: object) -> bool:
        return isinstance(url, str) and self.get(url) is not None

    def __len__(self) -> int:
        with self._mutex:
            futures = list(self._entries.values())
        return sum(1 for f in futures if f.done() and f.exception() is None)
