#!/usr/bin/env python3
"""Standalone CLI to exercise the extraction engine from the terminal.

Usage — run any of these from the project root:

  # Resolve a ticker to its CIK
  python run_tools.py resolve AAPL

  # Full response (same JSON the HTTP API returns)
  python run_tools.py financials AAPL
  python run_tools.py financials 0000789019

  # Segment revenue only, optionally pinned to a fiscal-year end
  python run_tools.py segments MSFT
  python run_tools.py segments AAPL 2024-09-28

  # Latest 10-K and its XBRL instance file
  python run_tools.py filing NVDA

  # Parse a local instance document (no network)
  python run_tools.py parse ./aapl-20240928_htm.xml
"""

from __future__ import annotations

import json
import sys
import os

# Ensure the src directory is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))


def _header(title: str):
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}\n")


def _fmt_money(v) -> str:
    if v is None:
        return "N/A"
    if abs(v) >= 1e9:
        return f"${v/1e9:>12.2f}B"
    if abs(v) >= 1e6:
        return f"${v/1e6:>12.1f}M"
    return f"{v:>13,}"


def _is_cik(arg: str) -> bool:
    return arg.upper().removeprefix("CIK").isdigit()


def _print_segments(segments: list[dict], segment_type: str):
    if not segments:
        print("  No segment data disclosed.")
        return
    print(f"  Segments ({segment_type}):")
    for seg in segments:
        print(f"    {seg['name']:36s}  {_fmt_money(seg['revenue'])}")


def cmd_resolve(ticker: str):
    """Resolve a ticker through the SEC ticker directory."""
    _header(f"Resolve: {ticker}")
    from sec_segments.sec_client import pad_cik
    from sec_segments.tickers import get_ticker_cache
    cik = get_ticker_cache().resolve(ticker)
    print(f"  {ticker.upper():8s}  CIK {pad_cik(cik)}")


def cmd_financials(query: str):
    """Full consolidated + segment response."""
    _header(f"Financials: {query}")
    from sec_segments.financials import get_company_financials
    kwargs = {"cik": query} if _is_cik(query) else {"ticker": query}
    data = get_company_financials(**kwargs).model_dump(by_alias=True)

    print(f"  Company:    {data['entityName']}")
    print(f"  CIK:        {data['cik']}")
    print(f"  Ticker:     {data['ticker'] or '?'}")
    print(f"  Industry:   {data['sicDescription'] or '?'}")
    print(f"  Period:     {data['filingPeriod'] or '?'}")
    print("\n  Key Metrics:")
    for k, v in data["financials"].items():
        print(f"    {k:30s}  {_fmt_money(v)}")
    print()
    _print_segments(data["segments"], data["segmentType"])
    print("\n  Raw JSON:")
    print(json.dumps(data, indent=2))


def cmd_segments(query: str, fy_end: str | None = None):
    """Segment revenue only."""
    _header(f"Segments: {query} | FY end={fy_end or 'inferred'}")
    from sec_segments.financials import get_company_financials
    kwargs = {"cik": query} if _is_cik(query) else {"ticker": query}
    data = get_company_financials(fy_end_date=fy_end, **kwargs)
    _print_segments([s.model_dump() for s in data.segments], data.segment_type)


def cmd_filing(query: str):
    """Latest 10-K accession + XBRL instance filename."""
    _header(f"Latest 10-K: {query}")
    from sec_segments.filings import find_instance_file, find_latest_10k
    from sec_segments.sec_client import get_sec_client, pad_cik
    from sec_segments.tickers import get_ticker_cache
    client = get_sec_client()
    cik = pad_cik(query if _is_cik(query) else get_ticker_cache().resolve(query))
    filing = find_latest_10k(client.get_submissions(cik))
    if filing is None:
        print("  No 10-K found.")
        return
    print(f"  Accession:  {filing.accession_number}")
    print(f"  Primary:    {filing.primary_document or '?'}")
    print(f"  Period:     {filing.period or '?'}")
    instance = find_instance_file(client.get_filing_index(cik, filing.accession_number))
    print(f"  Instance:   {instance or 'none'}")


def cmd_parse(path: str, fy_end: str | None = None):
    """Run the segment extractor over a local instance document."""
    _header(f"Parse: {path}")
    from sec_segments.contexts import parse_segment_contexts
    from sec_segments.facts import parse_revenue_facts
    from sec_segments.markup import parse_markup
    from sec_segments.segments import extract_segment_revenue
    with open(path, encoding="utf-8", errors="replace") as fh:
        xml = fh.read()
    print(f"  Size:       {len(xml):,} chars")
    soup = parse_markup(xml)
    print(f"  Contexts:   {len(parse_segment_contexts(soup))} dimensioned")
    print(f"  Facts:      {len(parse_revenue_facts(soup))} revenue facts\n")
    result = extract_segment_revenue(soup, fy_end)
    _print_segments([s.model_dump() for s in result.segments], result.segment_type)


COMMANDS = {
    "resolve": (cmd_resolve, "<ticker>"),
    "financials": (cmd_financials, "<ticker|cik>"),
    "segments": (cmd_segments, "<ticker|cik> [fy-end YYYY-MM-DD]"),
    "filing": (cmd_filing, "<ticker|cik>"),
    "parse": (cmd_parse, "<instance.xml> [fy-end YYYY-MM-DD]"),
}


def main():
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help", "help"):
        print("\nUsage: python run_tools.py <command> [args]\n")
        print("Commands:")
        for cmd, (_, args) in COMMANDS.items():
            print(f"  {cmd:12s}  {args}")
        print()
        return

    cmd_name = sys.argv[1].lower()
    if cmd_name not in COMMANDS:
        print(f"Unknown command: {cmd_name}")
        print(f"Available: {', '.join(COMMANDS.keys())}")
        return

    import logging
    logging.basicConfig(level=logging.INFO, format="  %(levelname)s %(message)s")

    fn, _ = COMMANDS[cmd_name]
    args = sys.argv[2:] or ["AAPL"]
    fn(*args)


if __name__ == "__main__":
    main()
