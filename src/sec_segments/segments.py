"""Segment revenue extraction from 10-K XBRL instance documents.

The companyfacts API only provides consolidated (company-level) financials.
Segment revenue required by ASC 280 lives in the XBRL instance document of
the filing itself, tagged against dimensional contexts. This module fetches
that document, joins revenue facts to their contexts, and returns one value
per segment for the annual period.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from typing import NamedTuple

from bs4 import BeautifulSoup

from sec_segments.contexts import Dimension, XbrlContext, parse_segment_contexts
from sec_segments.errors import NoFilingFound, NoInstanceDocument
from sec_segments.facts import RevenueFact, parse_revenue_facts
from sec_segments.filings import find_instance_file, find_latest_10k
from sec_segments.markup import parse_markup
from sec_segments.models import Segment, SegmentResult
from sec_segments.xbrl_mappings import BUSINESS_SEGMENT_AXIS, SEGMENT_REVENUE_PRIORITY

log = logging.getLogger(__name__)

GEOGRAPHIC = "geographic"
BUSINESS = "business"

_UNKNOWN_PRIORITY = 999


# ═══════════════════════════════════════════════════════════════════════════
#  Name cleaning + classification
# ═══════════════════════════════════════════════════════════════════════════

_SUFFIX_RE = re.compile(r"(?:SegmentMember|Member|Segment)$", re.IGNORECASE)
_CAMEL_RE = re.compile(r"([a-z])([A-Z])")


def clean_segment_name(member: str) -> str:
    """Turn an XBRL member QName into a readable label.

    "aapl:AmericasSegmentMember" → "Americas"
    "msft:IntelligentCloudMember" → "Intelligent Cloud"
    """
    name = member.rsplit(":", 1)[-1].strip()
    while True:
        stripped = _SUFFIX_RE.sub("", name).rstrip()
        if stripped == name:
            break
        name = stripped
    return _CAMEL_RE.sub(r"\1 \2", name).strip()


GEO_PATTERNS: list[re.Pattern] = [
    # Continents / regions
    re.compile(r"\bamericas?\b", re.I),
    re.compile(r"\beurope\b", re.I),
    re.compile(r"\basia\b", re.I),
    re.compile(r"\bafrica\b", re.I),
    re.compile(r"\bemea\b", re.I),
    re.compile(r"\bapac\b", re.I),
    re.compile(r"\blatin\s*america\b", re.I),
    re.compile(r"\bmiddle\s*east\b", re.I),
    re.compile(r"\basia\s*pacific\b", re.I),
    re.compile(r"\bnorth\s*america\b", re.I),
    re.compile(r"\bsouth\s*america\b", re.I),
    # Major countries
    re.compile(r"\bchina\b", re.I),
    re.compile(r"\bjapan\b", re.I),
    re.compile(r"\bindia\b", re.I),
    re.compile(r"\bu\.?k\.?\b", re.I),
    re.compile(r"\bgermany\b", re.I),
    re.compile(r"\bfrance\b", re.I),
    re.compile(r"\bbrazil\b", re.I),
    re.compile(r"\bcanada\b", re.I),
    re.compile(r"\bkorea\b", re.I),
    re.compile(r"\baustralia\b", re.I),
    re.compile(r"\bunited\s*kingdom\b", re.I),
    re.compile(r"\bunited\s*states\b", re.I),
    # Geographic qualifiers
    re.compile(r"\bgreater\b", re.I),
    re.compile(r"\brest\s*of\b", re.I),
    re.compile(r"\binternational\b", re.I),
    re.compile(r"\bdomestic\b", re.I),
]


def classify_segment_type(segments: list[Segment] | list[dict]) -> str:
    """Label a segment set geographic when more than half the names look like regions."""
    if not segments:
        return BUSINESS
    geo = 0
    for seg in segments:
        name = (seg.get("name") if isinstance(seg, dict) else seg.name) or ""
        if any(p.search(name) for p in GEO_PATTERNS):
            geo += 1
    return GEOGRAPHIC if geo > len(segments) / 2 else BUSINESS


# ═══════════════════════════════════════════════════════════════════════════
#  Join + aggregate
# ═══════════════════════════════════════════════════════════════════════════

class _Joined(NamedTuple):
    fact: RevenueFact
    context: XbrlContext
    dimension: Dimension

    @property
    def end_date(self) -> str | None:
        return self.context.end_date


def _is_business_axis(dim: Dimension) -> bool:
    return BUSINESS_SEGMENT_AXIS in dim.axis


def _segment_dimension(ctx: XbrlContext) -> Dimension | None:
    # Multi-dimension contexts (e.g. ConsolidationItemsAxis + business axis)
    # are only usable through the business axis.
    for dim in ctx.dimensions:
        if _is_business_axis(dim):
            return dim
    if len(ctx.dimensions) == 1:
        return ctx.dimensions[0]
    return None


def _join(facts: list[RevenueFact], contexts: dict[str, XbrlContext]) -> list[_Joined]:
    joined: list[_Joined] = []
    for fact in facts:
        ctx = contexts.get(fact.context_ref)
        if ctx is None or ctx.is_instant:
            continue
        dim = _segment_dimension(ctx)
        if dim is None:
            continue
        joined.append(_Joined(fact, ctx, dim))
    return joined


def _select_period(joined: list[_Joined], fy_end_date: str | None) -> list[_Joined]:
    """Keep the annual column: the target FY end if given, else the commonest end date.

    Ties on frequency go to the latest end date, so a restated comparative
    year never beats the current one.
    """
    if fy_end_date:
        matching = [j for j in joined if j.end_date == fy_end_date]
        if matching:
            joined = matching

    counts = Counter(j.end_date for j in joined if j.end_date)
    if not counts:
        return joined
    best_date, _ = max(counts.items(), key=lambda kv: (kv[1], kv[0]))
    return [j for j in joined if j.end_date == best_date]


def extract_segment_revenue(
    xml: str | BeautifulSoup,
    fy_end_date: str | None = None,
) -> SegmentResult:
    """Per-segment revenue for one XBRL instance document.

    Args:
        xml: raw instance text (plain XBRL or iXBRL) or a parsed soup
        fy_end_date: expected fiscal-year end (YYYY-MM-DD), or None to infer
    """
    soup = parse_markup(xml)
    contexts = parse_segment_contexts(soup)
    facts = parse_revenue_facts(soup)
    if not contexts or not facts:
        return SegmentResult()

    joined = _join(facts, contexts)
    if not joined:
        return SegmentResult()

    # Never mix the business axis with geographic/other axes
    if any(_is_business_axis(j.dimension) for j in joined):
        joined = [j for j in joined if _is_business_axis(j.dimension)]

    joined = _select_period(joined, fy_end_date)

    best: dict[str, tuple[int, int | float]] = {}
    for j in joined:
        name = clean_segment_name(j.dimension.member)
        priority = SEGMENT_REVENUE_PRIORITY.get(j.fact.concept, _UNKNOWN_PRIORITY)
        existing = best.get(name)
        if existing is None or priority < existing[0]:
            best[name] = (priority, j.fact.value)

    segments = sorted(
        (Segment(name=name, revenue=value) for name, (_, value) in best.items()),
        key=lambda s: s.revenue,
        reverse=True,
    )
    return SegmentResult(segments=segments, segment_type=classify_segment_type(segments))


# ═══════════════════════════════════════════════════════════════════════════
#  Fetch pipeline
# ═══════════════════════════════════════════════════════════════════════════

def _load_instance(cik: str, submissions: dict, client) -> str:
    filing = find_latest_10k(submissions)
    if filing is None:
        raise NoFilingFound("No 10-K filing found")
    log.info("[Segments] Found 10-K accession: %s", filing.accession_number)

    index_json = client.get_filing_index(cik, filing.accession_number)
    xbrl_file = find_instance_file(index_json)
    if not xbrl_file:
        raise NoInstanceDocument(f"No XBRL instance file in filing {filing.accession_number}")
    log.info("[Segments] XBRL instance file: %s", xbrl_file)

    xml = client.get_filing_document(cik, filing.accession_number, xbrl_file)
    if not xml:
        raise NoInstanceDocument(f"Empty XBRL document {xbrl_file}")
    log.info("[Segments] XBRL document size: %d chars", len(xml))
    return xml


def fetch_segment_revenue(
    cik: str,
    submissions: dict,
    client,
    fy_end_date: str | None = None,
) -> SegmentResult:
    """Fetch the latest 10-K instance document and extract segment revenue.

    Never raises: any failure (no 10-K, no instance file, network error,
    unparseable document) degrades to an empty result.
    """
    try:
        xml = _load_instance(cik, submissions, client)
        result = extract_segment_revenue(xml, fy_end_date)
    except Exception as exc:
        log.warning("[Segments] No segment data for CIK %s: %s", cik, exc)
        return SegmentResult()

    log.info(
        "[Segments] Extracted %d segments (%s)",
        len(result.segments), result.segment_type,
    )
    return result
