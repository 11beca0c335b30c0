"""Pydantic models and shared types."""

from multipool.models.api import (
    AddLiquidityRequest,
    AddLiquidityResponse,
    ErrorResponse,
    InitializePoolRequest,
    InitializePoolResponse,
    PoolInfoResponse,
    RemoveLiquidityRequest,
    RemoveLiquidityResponse,
    SwapRequest,
    SwapResponse,
)
from multipool.models.types import AccountId, Address, AssetId, Uint256

__all__ = [
    # Types
    "AccountId",
    "Address",
    "AssetId",
    "Uint256",
    # API models
    "AddLiquidityRequest",
    "AddLiquidityResponse",
    "ErrorResponse",
    "InitializePoolRequest",
    "InitializePoolResponse",
    "PoolInfoResponse",
    "RemoveLiquidityRequest",
    "RemoveLiquidityResponse",
    "SwapRequest",
    "SwapResponse",
]
