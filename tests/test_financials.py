"""Tests for consolidated metric resolution and the request orchestrator."""

import pytest

from sec_segments.errors import NotFoundError, UpstreamError
from sec_segments.financials import extract_all_metrics, extract_latest_annual, get_company_financials
from sec_segments.tickers import TickerCache
from sec_segments.xbrl_mappings import REVENUE

from conftest import CIK, FakeSECClient, annual, usd


# --- extract_latest_annual ---


def test_renamed_concept_most_recent_wins():
    section = {
        "Revenues": usd(annual(100, "2019-12-31"), annual(110, "2020-12-31"), annual(120, "2021-12-31")),
        "RevenueFromContractWithCustomerExcludingAssessedTax": usd(
            annual(130, "2022-12-31"), annual(140, "2023-12-31"),
        ),
    }
    result = extract_latest_annual(section, REVENUE)
    assert result.value == 140
    assert result.period == "2023"
    assert result.source == "RevenueFromContractWithCustomerExcludingAssessedTax"


def test_quarterly_and_non_fy_records_ignored():
    section = {"Revenues": usd(
        annual(100, "2022-12-31"),
        annual(30, "2023-03-31", form="10-Q", fp="Q1"),
        annual(999, "2023-12-31", form="10-K", fp="Q4"),
        annual(888, "2023-12-31", form="8-K", fp="FY"),
    )}
    result = extract_latest_annual(section, ["Revenues"])
    assert (result.value, result.period) == (100, "2022")


def test_records_out_of_order():
    section = {"Revenues": usd(annual(3, "2023-12-31"), annual(1, "2021-12-31"), annual(2, "2022-12-31"))}
    assert extract_latest_annual(section, ["Revenues"]).value == 3


def test_same_year_tie_keeps_higher_priority_alias():
    section = {
        "Revenues": usd(annual(1, "2023-12-31")),
        "SalesRevenueNet": usd(annual(2, "2023-12-31")),
    }
    assert extract_latest_annual(section, ["Revenues", "SalesRevenueNet"]).value == 1
    assert extract_latest_annual(section, ["SalesRevenueNet", "Revenues"]).value == 2


def test_no_annual_data_is_none():
    section = {"Revenues": usd(annual(1, "2023-03-31", form="10-Q", fp="Q1"))}
    assert extract_latest_annual(section, ["Revenues"]) is None
    assert extract_latest_annual({}, ["Revenues"]) is None
    assert extract_latest_annual(None, ["Revenues"]) is None
    assert extract_latest_annual({"Revenues": {"units": {}}}, ["Revenues"]) is None


def test_unit_preference():
    section = {"X": {"units": {"EUR": [annual(5, "2023-12-31")], "USD": [annual(7, "2020-12-31")]}}}
    assert extract_latest_annual(section, ["X"]).value == 7

    section = {"X": {"units": {"shares": [annual(5, "2023-12-31")], "pure": [annual(9, "2020-12-31")]}}}
    assert extract_latest_annual(section, ["X"]).value == 9

    section = {"X": {"units": {"employees": [annual(42, "2023-12-31")]}}}
    assert extract_latest_annual(section, ["X"]).value == 42


def test_value_types_preserved():
    section = {"Revenues": usd(annual(391035000000, "2024-09-28"))}
    value = extract_latest_annual(section, ["Revenues"]).value
    assert value == 391035000000
    assert isinstance(value, int)


# --- extract_all_metrics ---


def test_extract_all_metrics(companyfacts):
    financials, period = extract_all_metrics(companyfacts)
    assert financials.model_dump(by_alias=True) == {
        "revenue": 1000,
        "cogs": 400,
        "opex": 300,
        "capex": 50,
        "netIncome": 120,
        "employees": 1500,
    }
    assert period == "2023"


def test_extract_all_metrics_missing_everything():
    financials, period = extract_all_metrics({"facts": {}})
    assert all(v is None for v in financials.model_dump().values())
    assert period is None


def test_employees_do_not_set_filing_period():
    facts = {"facts": {
        "us-gaap": {"NetIncomeLoss": usd(annual(1, "2021-12-31"))},
        "dei": {"EntityNumberOfEmployees": {"units": {"pure": [annual(10, "2024-12-31")]}}},
    }}
    _, period = extract_all_metrics(facts)
    assert period == "2021"


# --- get_company_financials ---


def test_orchestrator_by_ticker(fake_client, ticker_cache):
    result = get_company_financials(ticker="acme", client=fake_client, ticker_cache=ticker_cache)
    data = result.model_dump(by_alias=True)
    assert data["cik"] == CIK
    assert data["entityName"] == "ACME CORP"
    assert data["ticker"] == "ACME"
    assert data["sicDescription"] == "Services-Prepackaged Software"
    assert data["filingPeriod"] == "2023"
    assert data["financials"]["revenue"] == 1000
    assert data["segments"] == [
        {"name": "Cloud", "revenue": 600000000},
        {"name": "Hardware", "revenue": 300000000},
    ]
    assert data["segmentType"] == "business"


def test_ticker_and_padded_cik_identical(fake_client, ticker_cache):
    by_ticker = get_company_financials(ticker="ACME", client=fake_client, ticker_cache=ticker_cache)
    by_cik = get_company_financials(cik="0000320193", client=fake_client, ticker_cache=ticker_cache)
    by_short_cik = get_company_financials(cik="320193", client=fake_client, ticker_cache=ticker_cache)
    assert by_ticker == by_cik == by_short_cik


def test_both_fetches_use_padded_cik(fake_client):
    get_company_financials(cik=320193, client=fake_client)
    assert ("companyfacts", CIK) in fake_client.calls
    assert ("submissions", CIK) in fake_client.calls


def test_missing_parameters():
    with pytest.raises(ValueError):
        get_company_financials(client=FakeSECClient())
    with pytest.raises(ValueError):
        get_company_financials(ticker="  ", cik="", client=FakeSECClient())


def test_invalid_cik():
    with pytest.raises(ValueError):
        get_company_financials(cik="abc", client=FakeSECClient())


def test_unknown_ticker(fake_client, ticker_cache):
    with pytest.raises(NotFoundError):
        get_company_financials(ticker="NOPE", client=fake_client, ticker_cache=ticker_cache)


def test_unknown_cik_is_not_found(companyfacts):
    client = FakeSECClient(companyfacts=companyfacts, errors={"submissions": NotFoundError("404")})
    with pytest.raises(NotFoundError, match="0000000042"):
        get_company_financials(cik="42", client=client)


def test_upstream_failure_aborts(submissions):
    client = FakeSECClient(submissions=submissions, errors={"companyfacts": UpstreamError("down", status=503)})
    with pytest.raises(UpstreamError):
        get_company_financials(cik="42", client=client)


def test_segment_failure_does_not_abort(companyfacts, submissions):
    client = FakeSECClient(
        companyfacts=companyfacts,
        submissions=submissions,
        errors={"index": UpstreamError("down", status=500)},
    )
    data = get_company_financials(cik=CIK, client=client).model_dump(by_alias=True)
    assert data["financials"]["revenue"] == 1000
    assert data["segments"] == []
    assert data["segmentType"] == "business"


def test_response_fallbacks(submissions):
    subs = {**submissions, "tickers": [], "sicDescription": ""}
    client = FakeSECClient(companyfacts={"facts": {}}, submissions=subs)
    data = get_company_financials(cik=CIK, client=client).model_dump(by_alias=True)
    assert data["entityName"] == "ACME CORP"
    assert data["ticker"] is None
    assert data["sicDescription"] is None
    assert data["filingPeriod"] is None
    assert set(data["financials"]) == {"revenue", "cogs", "opex", "capex", "netIncome", "employees"}


def test_ticker_cache_loaded_once(fake_client):
    cache = TickerCache(fetch=fake_client.get_company_tickers)
    get_company_financials(ticker="ACME", client=fake_client, ticker_cache=cache)
    get_company_financials(ticker="MSFT", client=FakeSECClient(), ticker_cache=cache)
    assert fake_client.calls.count(("tickers",)) == 1
    assert cache.get_map() == {"ACME": "320193", "MSFT": "789019"}
