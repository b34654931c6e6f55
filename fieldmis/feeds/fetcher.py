from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any

import requests

from ..models.config_models import HttpConfig

"""Published-spreadsheet CSV fetcher.

Each GET carries a millisecond timestamp query parameter so the publish cache
is bypassed. Reports needing several sheets fan out with a thread pool; every
feed succeeds or fails on its own and the caller decides whether a missing
feed blanks the whole report or just its own section.
"""

__all__ = [
    "FeedFetchError",
    "FeedResult",
    "FeedFetcher",
    "cache_busted",
]

logger = logging.getLogger(__name__)


class FeedFetchError(Exception):
    """Transport failure or non-2xx response for a CSV feed."""


@dataclass(frozen=True)
class FeedResult:
    name: str
    url: str
    text: str | None = None
    error: str | None = None
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None and self.text is not None


def cache_busted(url: str, param: str = "_", now_ms: int | None = None) -> str:
    """Append ``param=<epoch ms>`` using ``?`` or ``&`` as appropriate."""
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    sep = "&" if "?" in url else "?"
    return f"{url}{sep}{param}={stamp}"


class FeedFetcher:
    """Fetches CSV documents over HTTP(S).

    ``session`` may be any object with a requests-compatible ``get``; tests pass
    a mock, production uses a ``requests.Session``.
    """

    def __init__(self, http: HttpConfig | None = None, session: Any = None) -> None:
        self.http = http or HttpConfig()
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()

    def close(self) -> None:
        """Close the underlying session when this fetcher created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> FeedFetcher:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def fetch_csv(self, url: str) -> str:
        live_url = cache_busted(url, self.http.cache_bust_param)
        logger.debug(f"GET {live_url}")
        try:
            resp = self.session.get(
                live_url,
                timeout=self.http.timeout_seconds,
                headers={"Cache-Control": "no-cache", "Pragma": "no-cache"},
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise FeedFetchError(f"fetch failed for {url}: {e}") from e
        return resp.content.decode("utf-8", errors="replace").lstrip("\ufeff")

    def fetch(self, name: str, url: str) -> FeedResult:
        """Fetch one feed, capturing failure in the result instead of raising."""
        start = time.perf_counter()
        try:
            text = self.fetch_csv(url)
        except FeedFetchError as e:
            logger.error(f"feed {name}: {e}")
            return FeedResult(name=name, url=url, error=str(e), elapsed_seconds=time.perf_counter() - start)
        return FeedResult(name=name, url=url, text=text, elapsed_seconds=time.perf_counter() - start)

    def fetch_many(
        self,
        urls: Mapping[str, str],
        on_done: Callable[[FeedResult], None] | None = None,
    ) -> dict[str, FeedResult]:
        """Fetch several feeds concurrently.

        Returns results keyed by feed name in the order of ``urls``.
        ``on_done`` is called from the calling thread as each feed completes.
        """
        if not urls:
            return {}
        workers = max(1, min(self.http.max_workers, len(urls)))
        done: dict[str, FeedResult] = {}
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(self.fetch, name, url): name for name, url in urls.items()}
            for future in as_completed(futures):
                result = future.result()
                done[result.name] = result
                if on_done is not None:
                    on_done(result)
        return {name: done[name] for name in urls}
