"""Supported networks router."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_catalog
from api.models import (
    AddressValidationResponse,
    NetworkResponse,
    TokenResponse,
    TransferLimitsResponse,
)
from core.models.domain.network import NetworkConfig
from core.networks import NetworkCatalog

router = APIRouter(prefix="/v1/networks", tags=["networks"])


def _to_response(network: NetworkConfig) -> NetworkResponse:
    return NetworkResponse(
        network_id=network.network_id,
        name=network.name,
        kind=network.kind,
        native_token=network.native_token,
        explorer=network.explorer,
        emoji=network.emoji,
        tokens=[
            TokenResponse(
                symbol=token.symbol,
                name=token.name,
                address=token.address,
                decimals=token.decimals,
            )
            for token in network.tokens.values()
        ],
    )


def _require_network(catalog: NetworkCatalog, network_id: str) -> NetworkConfig:
    network = catalog.get(network_id)
    if network is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Network {network_id} is not supported",
        )
    return network


@router.get("", response_model=list[NetworkResponse])
async def list_networks(
    catalog: Annotated[NetworkCatalog, Depends(get_catalog)],
) -> list[NetworkResponse]:
    """List every supported network with its tokens."""
    return [_to_response(network) for network in catalog]


@router.get("/{network_id}", response_model=NetworkResponse)
async def get_network(
    network_id: str,
    catalog: Annotated[NetworkCatalog, Depends(get_catalog)],
) -> NetworkResponse:
    return _to_response(_require_network(catalog, network_id))


@router.get(
    "/{network_id}/addresses/{address}", response_model=AddressValidationResponse
)
async def validate_address(
    network_id: str,
    address: str,
    catalog: Annotated[NetworkCatalog, Depends(get_catalog)],
) -> AddressValidationResponse:
    """Check whether an address is well-formed for the network."""
    _require_network(catalog, network_id)
    return AddressValidationResponse(
        network_id=network_id,
        address=address,
        valid=catalog.validate_address(network_id, address),
    )


@router.get(
    "/{network_id}/tokens/{symbol}/limits", response_model=TransferLimitsResponse
)
async def get_transfer_limits(
    network_id: str,
    symbol: str,
    catalog: Annotated[NetworkCatalog, Depends(get_catalog)],
) -> TransferLimitsResponse:
    """Minimum transfer amount and estimated fee for a token."""
    network = _require_network(catalog, network_id)
    symbol = symbol.upper()
    if symbol != network.native_token and network.token(symbol) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Token {symbol} is not configured on {network.name}",
        )

    fee, fee_token = catalog.estimate_fee(network_id, symbol)
    return TransferLimitsResponse(
        network_id=network_id,
        symbol=symbol,
        minimum_transfer=catalog.minimum_transfer(network_id, symbol),
        estimated_fee=fee,
        fee_token=fee_token,
    )
