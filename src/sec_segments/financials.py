"""Consolidated financial metrics + the per-request orchestrator.

Data flow for one request:
  1. TickerCache.resolve() → CIK (only when no CIK was given)
  2. SECClient.get_company_facts() ┐
     SECClient.get_submissions()   ┘ fetched concurrently
  3. extract_all_metrics()          → latest annual value per metric
  4. fetch_segment_revenue()        → per-segment revenue from the 10-K
                                      instance document (never fails)
  5. CompanyFinancials              → one response

Metric resolution evaluates EVERY alias concept and keeps the one with the
most recent fiscal year. Companies rename concepts over time (e.g.
"Revenues" → "RevenueFromContractWithCustomerExcludingAssessedTax"), so the
first alias with any data at all may only hold years-old values.
"""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pandas as pd

from sec_segments.errors import NotFoundError
from sec_segments.models import CompanyFinancials, Financials
from sec_segments.sec_client import SECClient, get_sec_client, pad_cik
from sec_segments.segments import fetch_segment_revenue
from sec_segments.tickers import TickerCache, get_ticker_cache
from sec_segments.xbrl_mappings import CONCEPT_MAP, DEI, EMPLOYEES, US_GAAP, ConceptEntry

log = logging.getLogger(__name__)

ANNUAL_FORM = "10-K"
FULL_YEAR = "FY"

# Unit preference: currency first, then dimensionless counts
_PREFERRED_UNITS = ("USD", "pure")


# ═══════════════════════════════════════════════════════════════════════════
#  Concept resolver
# ═══════════════════════════════════════════════════════════════════════════

class ResolvedMetric:
    """The single value chosen for one metric."""

    __slots__ = ("value", "period", "source")

    def __init__(self, value: int | float | None, period: str, source: str):
        self.value = value
        self.period = period      # 4-digit fiscal year of the period end
        self.source = source      # which XBRL concept was matched

    def __repr__(self) -> str:
        return f"ResolvedMetric({self.value!r}, period={self.period!r}, source={self.source!r})"


def _plain(v: Any) -> int | float | None:
    """numpy scalar → Python number; NaN → None."""
    if v is None:
        return None
    if hasattr(v, "item"):
        v = v.item()
    if isinstance(v, float) and math.isnan(v):
        return None
    return v


def _unit_records(units: dict) -> list[dict]:
    for unit in _PREFERRED_UNITS:
        if unit in units:
            return units[unit] or []
    for records in units.values():
        return records or []
    return []


def _latest_annual_record(records: list[dict]) -> tuple[Any, str] | None:
    """(val, end) of the 10-K/FY record with the latest end date."""
    df = pd.DataFrame(records)
    if df.empty or not {"form", "fp", "val"} <= set(df.columns):
        return None
    annual = df[(df["form"] == ANNUAL_FORM) & (df["fp"] == FULL_YEAR)]
    if annual.empty:
        return None
    ends = annual["end"].fillna("").astype(str) if "end" in annual else pd.Series("", index=annual.index)
    annual = annual.assign(_end=ends).sort_values("_end", ascending=False, kind="stable")
    return annual["val"].iloc[0], annual["_end"].iloc[0]


def extract_latest_annual(
    facts_section: dict | None,
    concepts: list[ConceptEntry] | list[str],
) -> ResolvedMetric | None:
    """Latest annual (10-K, FY) value across all alias concepts.

    Every alias is evaluated; the candidate whose period year is greatest
    wins, with ties going to the earlier (higher-priority) alias.
    Returns None when no alias has any annual data.
    """
    if not facts_section:
        return None

    best: ResolvedMetric | None = None
    for concept in concepts:
        name = getattr(concept, "xbrl_concept", concept)
        entry = facts_section.get(name)
        if not entry:
            continue
        units = entry.get("units")
        if not units:
            continue
        records = _unit_records(units)
        if not records:
            continue

        latest = _latest_annual_record(records)
        if latest is None:
            continue
        val, end = latest
        candidate = ResolvedMetric(_plain(val), end[:4], name)

        if best is None or candidate.period > best.period:
            best = candidate

    return best


def extract_all_metrics(companyfacts: dict) -> tuple[Financials, str | None]:
    """Resolve every consolidated metric from a companyfacts response.

    Returns (financials, filing_period) where filing_period is the most
    recent fiscal year among the us-gaap metrics.
    """
    facts = (companyfacts or {}).get("facts") or {}
    us_gaap = facts.get(US_GAAP)
    dei = facts.get(DEI)

    values: dict[str, int | float | None] = {}
    filing_period: str | None = None

    for metric, concepts in CONCEPT_MAP.items():
        resolved = extract_latest_annual(us_gaap, concepts)
        if resolved is None:
            values[metric] = None
            continue
        values[metric] = resolved.value
        log.debug("%s ← %s (%s)", metric, resolved.source, resolved.period)
        if resolved.period and (filing_period is None or resolved.period > filing_period):
            filing_period = resolved.period

    # Employees from DEI section
    employees = extract_latest_annual(dei, EMPLOYEES)
    values["employees"] = employees.value if employees else None

    return Financials(**values), filing_period


# ═══════════════════════════════════════════════════════════════════════════
#  Orchestrator
# ═══════════════════════════════════════════════════════════════════════════

def _fetch_company(client: SECClient, cik_padded: str) -> tuple[dict, dict]:
    """companyfacts + submissions in parallel; both must succeed."""
    with ThreadPoolExecutor(max_workers=2) as executor:
        facts_future = executor.submit(client.get_company_facts, cik_padded)
        submissions_future = executor.submit(client.get_submissions, cik_padded)
        try:
            return facts_future.result(), submissions_future.result()
        except NotFoundError as exc:
            raise NotFoundError(f"CIK {cik_padded} not found on SEC EDGAR") from exc


def get_company_financials(
    ticker: str | None = None,
    cik: str | int | None = None,
    fy_end_date: str | None = None,
    *,
    client: SECClient | None = None,
    ticker_cache: TickerCache | None = None,
) -> CompanyFinancials:
    """Consolidated metrics + segment revenue for one company.

    Args:
        ticker: ticker symbol (e.g. 'AAPL'); used when cik is not given
        cik: SEC CIK, padded or not
        fy_end_date: target fiscal-year end (YYYY-MM-DD) for segment period
            selection; None = infer from the document

    Raises:
        ValueError: neither ticker nor cik given, or cik is not numeric
        NotFoundError: ticker or CIK unknown to SEC
        UpstreamError: SEC unreachable or returned an error
    """
    cik = str(cik).strip() if cik is not None else ""
    ticker = ticker.strip() if ticker else ""
    if not cik and not ticker:
        raise ValueError("Missing required parameter: cik or ticker")

    client = client or get_sec_client()

    if not cik:
        cik = (ticker_cache or get_ticker_cache()).resolve(ticker)

    cik_padded = pad_cik(cik)
    if not cik_padded.isdigit():
        raise ValueError(f"Invalid CIK: {cik!r}")

    companyfacts, submissions = _fetch_company(client, cik_padded)

    financials, filing_period = extract_all_metrics(companyfacts)
    segment_result = fetch_segment_revenue(cik_padded, submissions, client, fy_end_date)

    tickers = submissions.get("tickers") or []
    return CompanyFinancials(
        cik=cik_padded,
        entity_name=(companyfacts.get("entityName") or submissions.get("name") or "").upper(),
        ticker=ticker.upper() if ticker else (tickers[0] if tickers else None),
        sic_description=submissions.get("sicDescription") or None,
        filing_period=filing_period,
        financials=financials,
        segments=segment_result.segments,
        segment_type=segment_result.segment_type,
    )
