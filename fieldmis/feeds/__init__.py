"""HTTP access to the published CSV feeds and the Apps Script write endpoint."""

from .apps_script import AppsScriptClient, WriteResult
from .fetcher import FeedFetchError, FeedFetcher, FeedResult, cache_busted

__all__ = [
    "AppsScriptClient",
    "FeedFetchError",
    "FeedFetcher",
    "FeedResult",
    "WriteResult",
    "cache_busted",
]
