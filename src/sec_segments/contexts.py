"""Dimensional context extraction from XBRL instance documents.

A context names the period a fact covers and, optionally, the dimensional
slice it belongs to:

    <xbrli:context id="c-12">
      <xbrli:entity>
        <xbrli:identifier scheme="http://www.sec.gov/CIK">0000320193</xbrli:identifier>
        <xbrli:segment>
          <xbrldi:explicitMember dimension="us-gaap:StatementBusinessSegmentsAxis">aapl:AmericasSegmentMember</xbrldi:explicitMember>
        </xbrli:segment>
      </xbrli:entity>
      <xbrli:period>
        <xbrli:startDate>2023-10-01</xbrli:startDate>
        <xbrli:endDate>2024-09-28</xbrli:endDate>
      </xbrli:period>
    </xbrli:context>

Only contexts carrying at least one explicitMember are kept; undimensioned
contexts are consolidated totals, already available from companyfacts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import NamedTuple

from bs4 import BeautifulSoup, Tag

from sec_segments.markup import attr, find_local, parse_markup

log = logging.getLogger(__name__)


class Dimension(NamedTuple):
    axis: str       # e.g. "us-gaap:StatementBusinessSegmentsAxis"
    member: str     # e.g. "aapl:AmericasSegmentMember"


@dataclass
class XbrlContext:
    context_id: str
    dimensions: list[Dimension] = field(default_factory=list)
    start_date: str | None = None
    end_date: str | None = None       # for instants, the instant date
    instant: str | None = None
    is_instant: bool = False


def parse_segment_contexts(markup: str | BeautifulSoup) -> dict[str, XbrlContext]:
    """Return every dimensioned context keyed by context id.

    Accepts raw instance text or a soup from ``parse_markup``, and both
    ``<xbrli:context>`` and unprefixed ``<context>``.
    """
    soup = parse_markup(markup)
    contexts: dict[str, XbrlContext] = {}

    for element in find_local(soup, "context"):
        ctx = _read_context(element)
        if ctx is not None:
            contexts[ctx.context_id] = ctx

    log.debug("Parsed %d dimensioned contexts", len(contexts))
    return contexts


def _read_context(element: Tag) -> XbrlContext | None:
    context_id = attr(element, "id")
    if not context_id:
        return None

    dimensions: list[Dimension] = []
    for member in find_local(element, "explicitmember"):
        axis = attr(member, "dimension")
        value = member.get_text().strip()
        if axis and value:
            dimensions.append(Dimension(axis, value))
    if not dimensions:
        return None

    instant = _first_text(element, "instant")
    return XbrlContext(
        context_id=context_id,
        dimensions=dimensions,
        start_date=_first_text(element, "startdate"),
        end_date=_first_text(element, "enddate") or instant,
        instant=instant,
        is_instant=instant is not None,
    )


def _first_text(element: Tag, name: str) -> str | None:
    for found in find_local(element, name):
        value = found.get_text().strip()
        if value:
            return value
    return None
