"""Direct SEC EDGAR API client.

Uses only public SEC endpoints (no API key needed, just User-Agent header):
  - company_tickers.json  — ticker→CIK resolution
  - submissions/CIK{cik}.json  — company info + filing list
  - api/xbrl/companyfacts/CIK{cik}.json  — ALL XBRL facts for a company
  - Archives/edgar/data/{cik}/{acc}/index.json  — filing directory listing
  - Archives/edgar/data/{cik}/{acc}/{file}  — XBRL instance document

No retries and no caching here: a failed call surfaces immediately as
NotFoundError (HTTP 404) or UpstreamError (anything else).
"""

from __future__ import annotations

import logging

import requests

from sec_segments.errors import NotFoundError, UpstreamError

log = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════
#  Constants
# ═══════════════════════════════════════════════════════════════════════════

# SEC EDGAR public API base URLs
SEC_BASE = "https://www.sec.gov"
DATA_BASE = "https://data.sec.gov"
ARCHIVES_BASE = f"{SEC_BASE}/Archives/edgar/data"
TICKERS_URL = f"{SEC_BASE}/files/company_tickers.json"
SUBMISSIONS_URL = f"{DATA_BASE}/submissions/CIK{{cik}}.json"
COMPANY_FACTS_URL = f"{DATA_BASE}/api/xbrl/companyfacts/CIK{{cik}}.json"
FILING_INDEX_URL = f"{ARCHIVES_BASE}/{{cik}}/{{accession}}/index.json"
FILING_DOCUMENT_URL = f"{ARCHIVES_BASE}/{{cik}}/{{accession}}/{{filename}}"

# SEC requires a descriptive User-Agent with contact email
DEFAULT_USER_AGENT = "SEC-Segments sec-segments@example.com"

JSON_ACCEPT = "application/json"
TEXT_ACCEPT = "text/xml, application/xml, text/html, */*"


def pad_cik(cik: str | int) -> str:
    """Normalize a CIK to SEC's 10-digit zero-padded form.

    Accepts: 320193, "320193", "0000320193", "CIK0000320193"
    Returns: "0000320193"
    """
    clean = str(cik).strip().upper()
    if clean.startswith("CIK"):
        clean = clean[3:]
    clean = clean.lstrip("0")
    return clean.zfill(10)


def archive_cik(cik: str | int) -> str:
    """CIK as used in Archives paths (no leading zeros)."""
    return pad_cik(cik).lstrip("0") or "0"


# ═══════════════════════════════════════════════════════════════════════════
#  SEC EDGAR Client
# ═══════════════════════════════════════════════════════════════════════════

class SECClient:
    """Direct HTTP client for SEC EDGAR public APIs.

    Stateless apart from its headers; safe to share across threads.
    """

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT, timeout: float = 30.0):
        self.user_agent = user_agent
        self.timeout = timeout
        self.headers = {
            "User-Agent": user_agent,
            "Accept-Encoding": "gzip, deflate",
        }

    # ── HTTP ──────────────────────────────────────────────────────────

    def _request(self, url: str, accept: str) -> requests.Response:
        """Make a single GET request with the identifying headers.

        Translates every requests failure into the package's error taxonomy.
        """
        headers = {**self.headers, "Accept": accept}
        try:
            resp = requests.get(url, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
        except requests.exceptions.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            if status == 404:
                raise NotFoundError(f"SEC returned 404 for {url}") from exc
            raise UpstreamError(f"SEC returned {status} for {url}", status=status) from exc
        except requests.exceptions.Timeout as exc:
            raise UpstreamError(f"Request to {url} timed out") from exc
        except requests.exceptions.RequestException as exc:
            raise UpstreamError(f"Request to {url} failed: {exc}") from exc
        return resp

    def get_json(self, url: str) -> dict:
        """GET request that returns parsed JSON."""
        resp = self._request(url, JSON_ACCEPT)
        try:
            return resp.json()
        except ValueError as exc:
            raise UpstreamError(f"SEC returned invalid JSON for {url}") from exc

    def get_text(self, url: str) -> str:
        """GET request that returns the raw body (XML/HTML)."""
        return self._request(url, TEXT_ACCEPT).text

    # ── Endpoints ─────────────────────────────────────────────────────

    def get_company_tickers(self) -> dict:
        """Raw company_tickers.json: {"0": {"cik_str", "ticker", "title"}, ...}."""
        log.info("Fetching SEC company_tickers.json")
        return self.get_json(TICKERS_URL)

    def get_company_facts(self, cik: str | int) -> dict:
        """Fetch ALL XBRL facts for a company.

        Structure: {
            "cik": 320193,
            "entityName": "Apple Inc.",
            "facts": {
                "us-gaap": {
                    "Revenues": {
                        "units": {
                            "USD": [
                                {"start": "2023-10-01", "end": "2024-09-28",
                                 "form": "10-K", "fp": "FY", "val": 391035000000, ...},
                            ]
                        }
                    },
                },
                "dei": {...}
            }
        }
        """
        cik_padded = pad_cik(cik)
        log.info("Fetching XBRL companyfacts for CIK %s", cik_padded)
        return self.get_json(COMPANY_FACTS_URL.format(cik=cik_padded))

    def get_submissions(self, cik: str | int) -> dict:
        """Fetch company metadata + recent filings (columnar arrays)."""
        cik_padded = pad_cik(cik)
        log.info("Fetching submissions for CIK %s", cik_padded)
        return self.get_json(SUBMISSIONS_URL.format(cik=cik_padded))

    def get_filing_index(self, cik: str | int, accession: str) -> dict:
        """Directory listing of one filing: {"directory": {"item": [{"name"}, ...]}}."""
        url = FILING_INDEX_URL.format(cik=archive_cik(cik), accession=accession.replace("-", ""))
        return self.get_json(url)

    def get_filing_document(self, cik: str | int, accession: str, filename: str) -> str:
        """Raw text of one file inside a filing directory."""
        url = FILING_DOCUMENT_URL.format(
            cik=archive_cik(cik),
            accession=accession.replace("-", ""),
            filename=filename,
        )
        return self.get_text(url)


# ═══════════════════════════════════════════════════════════════════════════
#  Module-level singleton, shared across the app
# ═══════════════════════════════════════════════════════════════════════════

_client: SECClient | None = None


def get_sec_client() -> SECClient:
    """Get or create the shared SECClient singleton.

    Reads EDGAR_IDENTITY and REQUEST_TIMEOUT from config.
    """
    global _client
    if _client is None:
        from sec_segments.config import get_config
        config = get_config()
        _client = SECClient(user_agent=config.edgar_identity, timeout=config.request_timeout)
    return _client
