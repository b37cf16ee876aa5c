"""Exception taxonomy for SEC EDGAR extraction.

NotFoundError and UpstreamError abort a request (HTTP 404 / 502).
NoFilingFound and NoInstanceDocument only ever surface inside the segment
pipeline, which converts them into an empty segment result.
"""

from __future__ import annotations


class SECError(Exception):
    """Base class for every error raised by this package."""


class NotFoundError(SECError):
    """Ticker or CIK unknown to SEC EDGAR."""


class UpstreamError(SECError):
    """SEC EDGAR returned a non-2xx status or could not be reached."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class NoFilingFound(SECError):
    """The submissions list contains no 10-K."""


class NoInstanceDocument(SECError):
    """The 10-K filing directory has no usable XBRL instance document."""
