"""Latest 10-K lookup and XBRL instance file selection."""

from __future__ import annotations

from sec_segments.models import Filing

ANNUAL_FORM = "10-K"

# Linkbases share the .xml extension with the instance document
LINKBASE_SUFFIXES = ("_cal.xml", "_def.xml", "_lab.xml", "_pre.xml")


def find_latest_10k(submissions: dict | None) -> Filing | None:
    """First 10-K in the submissions' recent filings (newest first).

    The submissions response has filings in columnar format:
    {"filings": {"recent": {"form": [...], "accessionNumber": [...], ...}}}
    """
    recent = ((submissions or {}).get("filings") or {}).get("recent") or {}
    forms = recent.get("form") or []
    accessions = recent.get("accessionNumber") or []
    primary_docs = recent.get("primaryDocument")
    report_dates = recent.get("reportDate") or []

    for i, form in enumerate(forms):
        if form != ANNUAL_FORM:
            continue
        if i >= len(accessions):
            break
        return Filing(
            accession_number=accessions[i].replace("-", ""),
            primary_document=primary_docs[i] if primary_docs and i < len(primary_docs) else None,
            form_type=form,
            period=(report_dates[i] or None) if i < len(report_dates) else None,
        )
    return None


def find_instance_file(index_json: dict | None) -> str | None:
    """Pick the XBRL instance document out of a filing directory listing.

    Priority 1: ``*_htm.xml`` (iXBRL companion, pure XML)
    Priority 2: first ``.xml`` that isn't a linkbase
    """
    items = ((index_json or {}).get("directory") or {}).get("item") or []

    htm_xml: str | None = None
    plain_xml: str | None = None
    for item in items:
        name = item.get("name") or ""
        lower = name.lower()
        if lower.endswith("_htm.xml"):
            htm_xml = name
        elif lower.endswith(".xml") and not lower.endswith(LINKBASE_SUFFIXES):
            if plain_xml is None:
                plain_xml = name

    return htm_xml or plain_xml
