"""API endpoints for the pool manager."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Path, Query

from multipool.manager import PoolManager, get_default_manager
from multipool.models.api import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    InitializePoolRequest,
    InitializePoolResponse,
    PoolInfoResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    SwapRequest,
    SwapResponse,
)
from multipool.models.types import short

logger = structlog.get_logger()

router = APIRouter()

ADDRESS_PATTERN = r"^0x[a-fA-F0-9]{40}$"
AddressPath = Annotated[str, Path(pattern=ADDRESS_PATTERN)]


def get_manager() -> PoolManager:
    """Dependency provider for the pool manager.

    Override this in tests to inject a prepared manager:
        app.dependency_overrides[get_manager] = lambda: manager
    """
    return get_default_manager()


@router.get("/pools/{asset_a}/{asset_b}")
def get_pool(
    asset_a: AddressPath,
    asset_b: AddressPath,
    manager: PoolManager = Depends(get_manager),
) -> PoolInfoResponse:
    """Pool state with reserves in path order."""
    info = manager.get_pool_info(asset_a, asset_b)
    return PoolInfoResponse(
        initialized=info.initialized,
        reserve_a=info.reserve_a,
        reserve_b=info.reserve_b,
        share_supply=manager.get_share_supply(asset_a, asset_b),
    )


@router.post("/pools")
def initialize_pool(
    request: InitializePoolRequest,
    manager: PoolManager = Depends(get_manager),
) -> InitializePoolResponse:
    key = manager.initialize_pool(request.asset_a, request.asset_b)
    return InitializePoolResponse(pool_key="0x" + key.hex())


@router.post("/liquidity/add")
def add_liquidity(
    request: AddLiquidityRequest,
    manager: PoolManager = Depends(get_manager),
) -> AddLiquidityResponse:
    liquidity = manager.add_liquidity(
        request.sender,
        request.asset_a,
        request.asset_b,
        request.amount_a_in,
        request.amount_b_in,
        request.amount_a_in_min,
        request.amount_b_in_min,
    )
    return AddLiquidityResponse(liquidity=liquidity)


@router.post("/liquidity/remove")
def remove_liquidity(
    request: RemoveLiquidityRequest,
    manager: PoolManager = Depends(get_manager),
) -> RemoveLiquidityResponse:
    amount_a_out, amount_b_out = manager.remove_liquidity(
        request.sender,
        request.recipient,
        request.asset_a,
        request.asset_b,
        request.liquidity,
    )
    return RemoveLiquidityResponse(amount_a_out=amount_a_out, amount_b_out=amount_b_out)


@router.post("/swap")
def swap(
    request: SwapRequest,
    manager: PoolManager = Depends(get_manager),
) -> SwapResponse:
    logger.info(
        "received_swap",
        sender=short(request.sender),
        asset_in=short(request.asset_in),
        asset_out=short(request.asset_out),
    )
    amount_out = manager.swap(
        request.sender,
        request.asset_in,
        request.amount_in,
        request.asset_out,
        request.amount_out_min,
        request.recipient,
    )
    return SwapResponse(amount_out=amount_out)


@router.get("/quote")
def quote(
    asset_in: Annotated[str, Query(alias="assetIn", pattern=ADDRESS_PATTERN)],
    amount_in: Annotated[str, Query(alias="amountIn", pattern=r"^[0-9]{1,78}$")],
    asset_out: Annotated[str, Query(alias="assetOut", pattern=ADDRESS_PATTERN)],
    manager: PoolManager = Depends(get_manager),
) -> SwapResponse:
    """Price a swap against current reserves without executing it."""
    return SwapResponse(amount_out=manager.quote_swap(asset_in, int(amount_in), asset_out))
