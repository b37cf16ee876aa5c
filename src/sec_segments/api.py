"""HTTP front end for the extraction engine.

    GET /?ticker=AAPL
    GET /financials?cik=320193&fyEnd=2024-09-28

Response:
    {cik, entityName, ticker, sicDescription, filingPeriod,
     financials: {revenue, cogs, opex, capex, netIncome, employees},
     segments: [{name, revenue}], segmentType}

Status codes: 400 missing/invalid parameters, 404 unknown ticker/CIK,
502 SEC EDGAR failure.

Run:  python -m sec_segments.api
Open: http://localhost:{PORT}/?ticker=AAPL  (default 8877)
"""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sec_segments.config import get_config
from sec_segments.errors import NotFoundError, UpstreamError
from sec_segments.financials import get_company_financials
from sec_segments.sec_client import SECClient, get_sec_client
from sec_segments.tickers import TickerCache, get_ticker_cache

log = logging.getLogger(__name__)

app = FastAPI(title="SEC Segments")

# Open CORS for browser clients; read-only API
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def _error(message: str, status: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status)


@app.get("/health")
def health():
    """Liveness check."""
    return {"status": "ok"}


@app.get("/")
@app.get("/financials")
def company_financials(
    ticker: str | None = None,
    cik: str | None = None,
    fy_end: str | None = Query(default=None, alias="fyEnd"),
    client: SECClient = Depends(get_sec_client),
    ticker_cache: TickerCache = Depends(get_ticker_cache),
):
    """Consolidated metrics + segment revenue for one company."""
    if not (cik or "").strip() and not (ticker or "").strip():
        return _error("Missing required parameter: cik or ticker", 400)

    try:
        result = get_company_financials(
            ticker=ticker,
            cik=cik,
            fy_end_date=fy_end,
            client=client,
            ticker_cache=ticker_cache,
        )
    except ValueError as exc:
        return _error(str(exc), 400)
    except NotFoundError as exc:
        return _error(str(exc), 404)
    except UpstreamError as exc:
        log.error("SEC fetch failed: %s", exc)
        return _error(f"SEC EDGAR request failed: {exc}", 502)

    return result.model_dump(by_alias=True)


if __name__ == "__main__":
    import uvicorn

    config = get_config()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print(f"\n  SEC Segments → http://localhost:{config.port}\n")
    uvicorn.run(app, host="0.0.0.0", port=config.port, log_level=config.log_level.lower())
