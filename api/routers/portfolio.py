"""Wallet portfolio router."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_catalog, get_portfolio_service
from api.models import PortfolioResponse
from api.utils.error_handler import await_task
from core.log import get_logger
from core.networks import NetworkCatalog
from core.services import PortfolioService, render_wallet_message

logger = get_logger(__name__)

router = APIRouter(prefix="/v1/portfolio", tags=["portfolio"])


@router.get("/{network_id}/{address}", response_model=PortfolioResponse)
async def get_portfolio(
    network_id: str,
    address: str,
    catalog: Annotated[NetworkCatalog, Depends(get_catalog)],
    service: Annotated[PortfolioService, Depends(get_portfolio_service)],
    subject_id: str = Query(default="api", description="Who the lookup is for"),
) -> PortfolioResponse:
    """Load balances and prices for a wallet through the background scheduler.

    Unknown networks are served by a stub adapter and come back degraded.
    Known networks reject malformed addresses with 400.
    """
    if catalog.is_supported(network_id) and not catalog.validate_address(
        network_id, address
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {catalog.display_name(network_id)} address",
        )

    handle = service.submit_portfolio(subject_id, network_id, address)
    snapshot = await await_task(handle, f"Portfolio for {address} on {network_id}")
    return PortfolioResponse(snapshot=snapshot, message=render_wallet_message(snapshot))
