"""Revenue fact extraction from XBRL and inline XBRL (iXBRL) documents.

Two syntaxes carry the same concepts:

  Plain XBRL (the ``*_htm.xml`` companion and classic instances):
      <us-gaap:Revenues contextRef="c-12" unitRef="usd" decimals="-6">1234000000</us-gaap:Revenues>

  Inline XBRL (facts embedded in the 10-K HTML):
      <ix:nonFraction name="us-gaap:Revenues" contextRef="c-12" unitRef="usd"
                      scale="6" decimals="-6">1,234</ix:nonFraction>

For iXBRL the displayed number is multiplied by 10**scale. Only the segment
revenue concepts in xbrl_mappings are kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from bs4 import BeautifulSoup, Tag

from sec_segments.markup import attr, local_name, parse_markup, qualified_name
from sec_segments.xbrl_mappings import SEGMENT_REVENUE_PRIORITY, SEGMENT_REVENUE_TAGS

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RevenueFact:
    concept: str             # "us-gaap:Revenues"
    context_ref: str
    value: int | float       # already scale-adjusted
    unit_ref: str = ""
    scale: int = 0


def parse_number(text: str) -> Decimal | None:
    """``" 1,234.5 "`` → Decimal("1234.5"); None when not a finite number."""
    raw = "".join(text.split()).replace(",", "")
    if not raw:
        return None
    try:
        value = Decimal(raw)
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


def to_number(value: Decimal) -> int | float:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def parse_revenue_facts(markup: str | BeautifulSoup) -> list[RevenueFact]:
    """Return every revenue fact in document order, plain XBRL and iXBRL alike.

    Nested facts are each reported; an outer fact's value is the text of
    everything inside it.
    """
    soup = parse_markup(markup)
    facts: list[RevenueFact] = []
    for tag in soup.find_all(True):
        fact = _read_fact(tag)
        if fact is not None:
            facts.append(fact)

    log.debug("Parsed %d revenue facts", len(facts))
    return facts


def _is_nil(tag: Tag) -> bool:
    return (attr(tag, "xsi:nil") or "").strip().lower() == "true"


def _read_fact(tag: Tag) -> RevenueFact | None:
    name = qualified_name(tag)

    # Plain XBRL: the element name is the concept
    concept = SEGMENT_REVENUE_TAGS.get(name)
    scale = 0
    negate = False
    if concept is None:
        # iXBRL: generic wrapper, concept in the name attribute
        if local_name(name) != "nonfraction":
            return None
        concept = attr(tag, "name")
        if concept not in SEGMENT_REVENUE_PRIORITY:
            return None

        scale_attr = (attr(tag, "scale") or "0").strip()
        try:
            scale = int(scale_attr)
        except ValueError:
            log.debug("Skipping %s: bad scale %r", concept, scale_attr)
            return None
        negate = (attr(tag, "sign") or "").strip() == "-"

    context_ref = attr(tag, "contextRef")
    if not context_ref or _is_nil(tag):
        return None

    number = parse_number(tag.get_text())
    if number is None:
        return None
    if scale:
        number = number.scaleb(scale)
    if negate:
        number = -number
    return RevenueFact(
        concept=concept,
        context_ref=context_ref,
        value=to_number(number),
        unit_ref=attr(tag, "unitRef", ""),
        scale=scale,
    )
