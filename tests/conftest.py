"""Shared fixtures: a fake SEC client and small XBRL documents."""

from __future__ import annotations

import pytest

from sec_segments.errors import NotFoundError
from sec_segments.tickers import TickerCache


CIK = "0000320193"
ACCESSION = "000032019324000123"


def annual(val, end, form="10-K", fp="FY"):
    """One companyfacts record."""
    return {"val": val, "end": end, "form": form, "fp": fp}


def usd(*records):
    return {"units": {"USD": list(records)}}


def context_xml(context_id, dims, end="2023-12-31", start="2023-01-01", instant=None, prefix="xbrli:"):
    members = "".join(
        f'<xbrldi:explicitMember dimension="{axis}">{member}</xbrldi:explicitMember>'
        for axis, member in dims
    )
    segment = f"<{prefix}segment>{members}</{prefix}segment>" if dims else ""
    if instant:
        period = f"<{prefix}instant>{instant}</{prefix}instant>"
    else:
        period = f"<{prefix}startDate>{start}</{prefix}startDate><{prefix}endDate>{end}</{prefix}endDate>"
    return (
        f'<{prefix}context id="{context_id}">'
        f'<{prefix}entity><{prefix}identifier scheme="http://www.sec.gov/CIK">{CIK}</{prefix}identifier>'
        f"{segment}</{prefix}entity>"
        f"<{prefix}period>{period}</{prefix}period>"
        f"</{prefix}context>"
    )


def fact_xml(concept, context_ref, value, unit="usd"):
    return (
        f'<us-gaap:{concept} contextRef="{context_ref}" unitRef="{unit}" decimals="-6">'
        f"{value}</us-gaap:{concept}>"
    )


def instance(*parts):
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<xbrli:xbrl xmlns:xbrli="http://www.xbrl.org/2003/instance" '
        'xmlns:xbrldi="http://xbrl.org/2006/xbrldi" '
        'xmlns:us-gaap="http://fasb.org/us-gaap/2023">\n'
        + "\n".join(parts)
        + "\n</xbrli:xbrl>"
    )


BIZ_AXIS = "us-gaap:StatementBusinessSegmentsAxis"
GEO_AXIS = "srt:StatementGeographicalAxis"


@pytest.fixture
def segment_instance() -> str:
    """Two business segments plus a geographic breakdown and a prior year."""
    return instance(
        context_xml("c-total", []),
        context_xml("c-cloud", [(BIZ_AXIS, "acme:CloudSegmentMember")]),
        context_xml("c-hw", [(BIZ_AXIS, "acme:HardwareSegmentMember")]),
        context_xml("c-cloud-py", [(BIZ_AXIS, "acme:CloudSegmentMember")],
                    start="2022-01-01", end="2022-12-31"),
        context_xml("c-us", [(GEO_AXIS, "country:US")]),
        context_xml("c-eu", [(GEO_AXIS, "srt:EuropeMember")]),
        fact_xml("Revenues", "c-total", "900000000"),
        fact_xml("Revenues", "c-cloud", "600000000"),
        fact_xml("Revenues", "c-hw", "300000000"),
        fact_xml("Revenues", "c-cloud-py", "500000000"),
        fact_xml("Revenues", "c-us", "700000000"),
        fact_xml("Revenues", "c-eu", "200000000"),
    )


@pytest.fixture
def companyfacts() -> dict:
    return {
        "cik": 320193,
        "entityName": "Acme Corp",
        "facts": {
            "us-gaap": {
                "Revenues": usd(annual(800, "2021-12-31")),
                "RevenueFromContractWithCustomerExcludingAssessedTax": usd(
                    annual(900, "2022-12-31"),
                    annual(1000, "2023-12-31"),
                    annual(250, "2023-09-30", form="10-Q", fp="Q3"),
                ),
                "CostOfRevenue": usd(annual(400, "2023-12-31")),
                "OperatingExpenses": usd(annual(300, "2023-12-31")),
                "PaymentsToAcquirePropertyPlantAndEquipment": usd(annual(50, "2023-12-31")),
                "NetIncomeLoss": usd(annual(120, "2023-12-31")),
            },
            "dei": {
                "EntityNumberOfEmployees": {"units": {"pure": [annual(1500, "2023-12-31")]}},
            },
        },
    }


@pytest.fixture
def submissions() -> dict:
    return {
        "cik": "320193",
        "name": "Acme Corp",
        "tickers": ["ACME"],
        "sicDescription": "Services-Prepackaged Software",
        "filings": {
            "recent": {
                "form": ["8-K", "10-Q", "10-K", "10-K"],
                "accessionNumber": [
                    "0000320193-24-000200",
                    "0000320193-24-000150",
                    "0000320193-24-000123",
                    "0000320193-23-000100",
                ],
                "primaryDocument": ["a8k.htm", "a10q.htm", "acme-20231231.htm", "acme-20221231.htm"],
                "reportDate": ["2024-05-01", "2024-03-31", "2023-12-31", "2022-12-31"],
            }
        },
    }


class FakeSECClient:
    """In-memory stand-in for SECClient. Records every call."""

    def __init__(self, companyfacts=None, submissions=None, index=None, documents=None,
                 tickers=None, errors=None):
        self.companyfacts = companyfacts or {}
        self.submissions = submissions or {}
        self.index = index if index is not None else {"directory": {"item": []}}
        self.documents = documents or {}
        self.tickers = tickers or {}
        self.errors = errors or {}
        self.calls: list[tuple] = []

    def _maybe_raise(self, name):
        exc = self.errors.get(name)
        if exc is not None:
            raise exc

    def get_company_tickers(self):
        self.calls.append(("tickers",))
        self._maybe_raise("tickers")
        return self.tickers

    def get_company_facts(self, cik):
        self.calls.append(("companyfacts", cik))
        self._maybe_raise("companyfacts")
        return self.companyfacts

    def get_submissions(self, cik):
        self.calls.append(("submissions", cik))
        self._maybe_raise("submissions")
        return self.submissions

    def get_filing_index(self, cik, accession):
        self.calls.append(("index", cik, accession))
        self._maybe_raise("index")
        return self.index

    def get_filing_document(self, cik, accession, filename):
        self.calls.append(("document", cik, accession, filename))
        self._maybe_raise("document")
        if filename not in self.documents:
            raise NotFoundError(filename)
        return self.documents[filename]


TICKERS_JSON = {
    "0": {"cik_str": 320193, "ticker": "ACME", "title": "Acme Corp"},
    "1": {"cik_str": 789019, "ticker": "MSFT", "title": "MICROSOFT CORP"},
}


@pytest.fixture
def fake_client(companyfacts, submissions, segment_instance) -> FakeSECClient:
    return FakeSECClient(
        companyfacts=companyfacts,
        submissions=submissions,
        index={"directory": {"item": [
            {"name": "acme-20231231.htm"},
            {"name": "acme-20231231.xsd"},
            {"name": "acme-20231231_cal.xml"},
            {"name": "acme-20231231_htm.xml"},
        ]}},
        documents={"acme-20231231_htm.xml": segment_instance},
        tickers=TICKERS_JSON,
    )


@pytest.fixture
def ticker_cache(fake_client) -> TickerCache:
    return TickerCache(fetch=fake_client.get_company_tickers)
