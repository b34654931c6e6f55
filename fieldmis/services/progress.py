from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm

from ..feeds.fetcher import FeedResult

"""Feed download progress with tqdm (TTY only).

In non-TTY environments (cron, CI) no bar is created, so logs stay free of
ANSI control sequences.
"""

__all__ = [
    "FeedProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class FeedProgress:
    """One bar ticking once per completed feed."""

    def __init__(self, total_feeds: int, *, description: str = "Fetching feeds") -> None:
        self.total_feeds = total_feeds
        self.description = description
        self.completed = 0
        self.failed = 0
        self.enabled = is_tty_enabled() and total_feeds > 0
        self.pbar: Any = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_feeds,
                desc=description,
                unit="feed",
                leave=False,
                ncols=80,
                ascii=True,
            )

    def feed_done(self, result: FeedResult) -> None:
        self.completed += 1
        if not result.ok:
            self.failed += 1
        if self.pbar is not None:
            self.pbar.set_postfix(feed=result.name, failed=self.failed)
            self.pbar.update(1)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> FeedProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
