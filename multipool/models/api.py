"""Pydantic models for the pool manager HTTP API.

Amounts are uint256 values sent as decimal strings and returned as decimal
strings, so they survive JSON clients that parse numbers as doubles.
"""

from pydantic import BaseModel, Field, field_serializer

from multipool.models.types import Address, Uint256


class _AmountModel(BaseModel):
    model_config = {"populate_by_name": True}


class InitializePoolRequest(_AmountModel):
    asset_a: Address = Field(alias="assetA")
    asset_b: Address = Field(alias="assetB")


class InitializePoolResponse(_AmountModel):
    pool_key: str = Field(alias="poolKey", description="0x-prefixed keccak-256 pool key")


class AddLiquidityRequest(_AmountModel):
    """Deposit request. The *_min fields cap the optimal amounts pulled."""

    sender: Address
    asset_a: Address = Field(alias="assetA")
    asset_b: Address = Field(alias="assetB")
    amount_a_in: Uint256 = Field(alias="amountAIn")
    amount_b_in: Uint256 = Field(alias="amountBIn")
    amount_a_in_min: Uint256 = Field(alias="amountAInMin")
    amount_b_in_min: Uint256 = Field(alias="amountBInMin")


class AddLiquidityResponse(_AmountModel):
    liquidity: int

    @field_serializer("liquidity")
    def serialize_amount(self, value: int) -> str:
        return str(value)


class RemoveLiquidityRequest(_AmountModel):
    sender: Address
    recipient: Address
    asset_a: Address = Field(alias="assetA")
    asset_b: Address = Field(alias="assetB")
    liquidity: Uint256


class RemoveLiquidityResponse(_AmountModel):
    amount_a_out: int = Field(alias="amountAOut")
    amount_b_out: int = Field(alias="amountBOut")

    @field_serializer("amount_a_out", "amount_b_out")
    def serialize_amount(self, value: int) -> str:
        return str(value)


class SwapRequest(_AmountModel):
    sender: Address
    asset_in: Address = Field(alias="assetIn")
    amount_in: Uint256 = Field(alias="amountIn")
    asset_out: Address = Field(alias="assetOut")
    amount_out_min: Uint256 = Field(alias="amountOutMin")
    recipient: Address


class SwapResponse(_AmountModel):
    amount_out: int = Field(alias="amountOut")

    @field_serializer("amount_out")
    def serialize_amount(self, value: int) -> str:
        return str(value)


class PoolInfoResponse(_AmountModel):
    """Pool state with reserves in the order the assets appear in the request path."""

    initialized: bool
    reserve_a: int = Field(alias="reserveA")
    reserve_b: int = Field(alias="reserveB")
    share_supply: int = Field(alias="shareSupply")

    @field_serializer("reserve_a", "reserve_b", "share_supply")
    def serialize_amount(self, value: int) -> str:
        return str(value)


class ErrorResponse(BaseModel):
    error: str = Field(description="Exception class name, e.g. PoolNotExist")
    detail: str
