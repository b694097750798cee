"""Token price router."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_portfolio_service, get_price_history_repository
from api.models import PriceHistoryEntry, PriceQuoteResponse, PriceResponse
from api.utils.error_handler import await_task
from core.database.repository import PriceHistoryRepository
from core.services import PortfolioService, render_price_message

router = APIRouter(prefix="/v1/prices", tags=["prices"])


@router.get("", response_model=PriceQuoteResponse)
async def get_prices(
    service: Annotated[PortfolioService, Depends(get_portfolio_service)],
    symbols: str = Query(description="Comma-separated token symbols"),
    subject_id: str = Query(default="api"),
) -> PriceQuoteResponse:
    """Prices for several tokens in one scheduled task."""
    requested = [symbol.strip() for symbol in symbols.split(",") if symbol.strip()]
    if not requested:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="No symbols given"
        )

    handle = service.submit_price_quote(subject_id, requested)
    prices = await await_task(handle, f"Price quote for {', '.join(requested)}")
    return PriceQuoteResponse(prices=prices)


@router.get("/{symbol}", response_model=PriceResponse)
async def get_price(
    symbol: str,
    service: Annotated[PortfolioService, Depends(get_portfolio_service)],
    subject_id: str = Query(default="api"),
) -> PriceResponse:
    """Current price of one token with a rendered price card."""
    handle = service.submit_price_quote(subject_id, [symbol])
    prices = await await_task(handle, f"Price quote for {symbol}")
    record = prices[symbol.upper()]
    return PriceResponse(price=record, message=render_price_message(record))


@router.get("/{symbol}/history", response_model=list[PriceHistoryEntry])
async def get_price_history(
    symbol: str,
    repository: Annotated[
        PriceHistoryRepository, Depends(get_price_history_repository)
    ],
    limit: int = Query(default=24, ge=1, le=500),
) -> list[PriceHistoryEntry]:
    """Stored price samples, newest first."""
    return [
        PriceHistoryEntry(
            symbol=row.symbol,
            price=row.price,
            price_rub=row.price_rub,
            ath=row.ath,
            source=row.source,
            timestamp=row.timestamp.isoformat(),
        )
        for row in repository.recent(symbol, limit=limit)
    ]
