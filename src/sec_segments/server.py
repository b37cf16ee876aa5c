"""SEC-Segments MCP server.

Tools
─────
  1. get_company_financials  — consolidated metrics + segment revenue
  2. get_revenue_segments    — segment revenue only (business or geographic)

Both accept a ticker ('AAPL') or a CIK ('320193', '0000320193').
"""

from __future__ import annotations

from fastmcp import FastMCP

from sec_segments.errors import SECError
from sec_segments.financials import get_company_financials

mcp = FastMCP(name="SEC-Segments")


def _lookup(ticker_or_cik: str, fy_end_date: str | None = None) -> dict:
    query = ticker_or_cik.strip()
    kwargs = {"cik": query} if query.upper().removeprefix("CIK").isdigit() else {"ticker": query}
    try:
        result = get_company_financials(fy_end_date=fy_end_date, **kwargs)
    except (SECError, ValueError) as exc:
        return {"ticker_or_cik": ticker_or_cik, "error": str(exc)}
    return result.model_dump(by_alias=True)


# ═══════════════════════════════════════════════════════════════════════════
#  TOOLS
# ═══════════════════════════════════════════════════════════════════════════


def company_financials(ticker_or_cik: str, fy_end_date: str | None = None) -> dict:
    """Get the latest annual SEC XBRL financials for a company.

    Args:
        ticker_or_cik: ticker (e.g. 'AAPL') or CIK number
        fy_end_date: fiscal-year end (YYYY-MM-DD) used to pick the segment
            period; None = inferred from the filing

    Returns revenue, cogs, opex, capex, netIncome and employees from the
    most recent 10-K, plus per-segment revenue where the 10-K tags it.
    """
    return _lookup(ticker_or_cik, fy_end_date)


def revenue_segments(ticker_or_cik: str, fy_end_date: str | None = None) -> dict:
    """Get revenue by business or geographic segment from the latest 10-K.

    Returns:
      - segments: [{name, revenue}] sorted by revenue, largest first
      - segmentType: "business" or "geographic"
    """
    data = _lookup(ticker_or_cik, fy_end_date)
    if "error" in data:
        return data
    return {
        "cik": data["cik"],
        "entityName": data["entityName"],
        "filingPeriod": data["filingPeriod"],
        "segments": data["segments"],
        "segmentType": data["segmentType"],
        "totalRevenue": data["financials"]["revenue"],
    }


mcp.tool(name="get_company_financials")(company_financials)
mcp.tool(name="get_revenue_segments")(revenue_segments)


# ═══════════════════════════════════════════════════════════════════════════
#  ENTRY POINT
# ═══════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    import sys

    # python -m sec_segments.server --sse   for remote hosting
    # Default is STDIO (for local MCP clients)
    if "--sse" in sys.argv:
        mcp.run(transport="sse")
    else:
        mcp.run()
