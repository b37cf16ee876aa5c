"""Ticker → CIK resolution backed by SEC's company_tickers.json.

The directory is downloaded at most once per warm process and reused for
every later request. Concurrent first requests may each download it; the
result is identical so the race is harmless and no lock is taken.
"""

from __future__ import annotations

import logging
from typing import Callable

from sec_segments.errors import NotFoundError, SECError, UpstreamError

log = logging.getLogger(__name__)


class TickerCache:
    """Lazily-populated uppercase ticker → CIK map.

    ``fetch`` returns the raw company_tickers.json payload. When omitted the
    shared SECClient is used.
    """

    def __init__(self, fetch: Callable[[], dict] | None = None):
        self._fetch = fetch
        self._map: dict[str, str] | None = None

    @property
    def loaded(self) -> bool:
        return self._map is not None

    def reset(self) -> None:
        self._map = None

    def get_map(self) -> dict[str, str]:
        if self._map is None:
            fetch = self._fetch
            if fetch is None:
                from sec_segments.sec_client import get_sec_client
                fetch = get_sec_client().get_company_tickers
            try:
                raw = fetch()
            except SECError as exc:
                raise UpstreamError(
                    f"Failed to load SEC ticker data: {exc}",
                    status=getattr(exc, "status", None),
                ) from exc
            self._map = _build_map(raw)
            log.info("Loaded %d tickers from company_tickers.json", len(self._map))
        return self._map

    def resolve(self, ticker: str) -> str:
        """Return the unpadded CIK string for ``ticker``.

        Raises NotFoundError for tickers SEC does not list, and
        UpstreamError when the directory download fails for any reason.
        """
        cik = self.get_map().get(ticker.strip().upper())
        if cik is None:
            raise NotFoundError(f'Ticker "{ticker}" not found in SEC database')
        return cik


def _build_map(raw: dict) -> dict[str, str]:
    # Format: {"0": {"cik_str": 320193, "ticker": "AAPL", "title": "Apple Inc."}, ...}
    by_ticker: dict[str, str] = {}
    for entry in raw.values():
        ticker = str(entry.get("ticker", "")).upper()
        cik = str(entry.get("cik_str", ""))
        if ticker and cik:
            by_ticker[ticker] = cik
    return by_ticker


_ticker_cache: TickerCache | None = None


def get_ticker_cache() -> TickerCache:
    """Get or create the process-wide TickerCache."""
    global _ticker_cache
    if _ticker_cache is None:
        _ticker_cache = TickerCache()
    return _ticker_cache
