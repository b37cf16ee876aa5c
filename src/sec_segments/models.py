"""Pydantic models for API / tool outputs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Serializes with camelCase keys (``model_dump(by_alias=True)``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Filing basics
# ---------------------------------------------------------------------------

class Filing(BaseModel):
    accession_number: str            # dashes stripped
    primary_document: str | None = None
    form_type: str
    period: str | None = None        # reportDate, when the submissions carry it


# ---------------------------------------------------------------------------
# Segment revenue
# ---------------------------------------------------------------------------

class Segment(BaseModel):
    name: str
    revenue: int | float


class SegmentResult(_CamelModel):
    segments: list[Segment] = []
    segment_type: str = "business"   # "geographic" | "business"


# ---------------------------------------------------------------------------
# Consolidated metrics + full response
# ---------------------------------------------------------------------------

class Financials(_CamelModel):
    """Latest annual value per metric.  None means not reported."""
    revenue: int | float | None = None
    cogs: int | float | None = None
    opex: int | float | None = None
    capex: int | float | None = None
    net_income: int | float | None = None
    employees: int | float | None = None


class CompanyFinancials(_CamelModel):
    cik: str
    entity_name: str = ""
    ticker: str | None = None
    sic_description: str | None = None
    filing_period: str | None = None
    financials: Financials = Financials()
    segments: list[Segment] = []
    segment_type: str = "business"
