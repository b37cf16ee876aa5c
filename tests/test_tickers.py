"""Tests for ticker → CIK resolution."""

import pytest

from sec_segments.errors import NotFoundError, UpstreamError
from sec_segments.tickers import TickerCache

from conftest import TICKERS_JSON, FakeSECClient


def test_resolve_case_insensitive():
    cache = TickerCache(fetch=lambda: TICKERS_JSON)
    assert cache.resolve("acme") == "320193"
    assert cache.resolve(" MSFT ") == "789019"


def test_directory_loaded_lazily_and_once():
    client = FakeSECClient(tickers=TICKERS_JSON)
    cache = TickerCache(fetch=client.get_company_tickers)
    assert not cache.loaded
    assert client.calls == []

    cache.resolve("ACME")
    cache.resolve("MSFT")
    with pytest.raises(NotFoundError):
        cache.resolve("ZZZZ")

    assert cache.loaded
    assert client.calls == [("tickers",)]


def test_reset_forces_reload():
    client = FakeSECClient(tickers=TICKERS_JSON)
    cache = TickerCache(fetch=client.get_company_tickers)
    cache.get_map()
    cache.reset()
    assert not cache.loaded
    cache.get_map()
    assert client.calls == [("tickers",), ("tickers",)]


def test_unknown_ticker_message():
    cache = TickerCache(fetch=lambda: TICKERS_JSON)
    with pytest.raises(NotFoundError, match='Ticker "NOPE" not found'):
        cache.resolve("NOPE")


def test_failed_download_not_cached():
    client = FakeSECClient(tickers=TICKERS_JSON, errors={"tickers": UpstreamError("down", status=503)})
    cache = TickerCache(fetch=client.get_company_tickers)
    with pytest.raises(UpstreamError):
        cache.resolve("ACME")
    assert not cache.loaded

    client.errors.clear()
    assert cache.resolve("ACME") == "320193"


def test_malformed_entries_skipped():
    raw = {"0": {"ticker": "X"}, "1": {"cik_str": 5}, "2": {"cik_str": 7, "ticker": "y"}}
    assert TickerCache(fetch=lambda: raw).get_map() == {"Y": "7"}


def test_directory_404_is_upstream_failure():
    client = FakeSECClient(errors={"tickers": NotFoundError("SEC returned 404")})
    cache = TickerCache(fetch=client.get_company_tickers)
    with pytest.raises(UpstreamError, match="Failed to load SEC ticker data"):
        cache.resolve("ACME")
    assert not cache.loaded
