from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from fieldmis.feeds.fetcher import FeedFetchError, FeedFetcher, cache_busted
from fieldmis.models.config_models import HttpConfig


def test_cache_busted_appends_param():
    assert cache_busted("https://x/a.csv", now_ms=5) == "https://x/a.csv?_=5"
    assert cache_busted("https://x/pub?output=csv", now_ms=5) == "https://x/pub?output=csv&_=5"
    assert cache_busted("https://x/a", param="cb", now_ms=7) == "https://x/a?cb=7"


def test_cache_busted_defaults_to_current_time():
    url = cache_busted("https://x/a")
    stamp = int(url.split("_=")[1])
    assert stamp > 1_600_000_000_000


def test_fetch_csv_passes_timeout_and_strips_bom(make_session):
    session = make_session({"https://x/a": "\ufeffID\n1\n"})
    fetcher = FeedFetcher(HttpConfig(timeout_seconds=3.5), session=session)
    assert fetcher.fetch_csv("https://x/a") == "ID\n1\n"
    args, kwargs = session.get.call_args
    assert args[0].startswith("https://x/a?_=")
    assert kwargs["timeout"] == 3.5
    assert kwargs["headers"]["Cache-Control"] == "no-cache"


def test_fetch_csv_non_2xx_raises(make_session):
    fetcher = FeedFetcher(session=make_session({"https://x/a": 500}))
    with pytest.raises(FeedFetchError):
        fetcher.fetch_csv("https://x/a")


def test_fetch_csv_transport_error_raises(make_session):
    fetcher = FeedFetcher(session=make_session({"https://x/a": requests.ConnectionError("refused")}))
    with pytest.raises(FeedFetchError, match="refused"):
        fetcher.fetch_csv("https://x/a")


def test_fetch_captures_failure(make_session):
    result = FeedFetcher(session=make_session({})).fetch("baseline", "https://x/missing")
    assert result.ok is False
    assert result.text is None
    assert "fetch failed" in result.error


def test_fetch_many_independent_results_in_input_order(make_session):
    session = make_session({"https://x/b": "B\n2\n", "https://x/a": "A\n1\n", "https://x/c": 503})
    done = []
    fetcher = FeedFetcher(HttpConfig(max_workers=3), session=session)
    results = fetcher.fetch_many(
        {"a": "https://x/a", "b": "https://x/b", "c": "https://x/c"},
        on_done=lambda r: done.append(r.name),
    )
    assert list(results) == ["a", "b", "c"]
    assert results["a"].text == "A\n1\n"
    assert results["b"].ok
    assert not results["c"].ok
    assert sorted(done) == ["a", "b", "c"]


def test_fetch_many_empty():
    assert FeedFetcher(session=MagicMock()).fetch_many({}) == {}


def test_context_manager_closes_own_session(monkeypatch):
    monkeypatch.setattr(requests, "Session", MagicMock)
    with FeedFetcher() as fetcher:
        pass
    fetcher.session.close.assert_called_once_with()


def test_close_leaves_injected_session_open():
    session = MagicMock()
    with FeedFetcher(session=session):
        pass
    session.close.assert_not_called()
