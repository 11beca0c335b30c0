"""Constant product swaps."""

from __future__ import annotations

import structlog

from multipool.engine.base import BaseEngine
from multipool.errors import InsufficientLiquidity, InvalidAmount, MinAmountIssue
from multipool.models.types import AccountId, AssetId, short
from multipool.pools import PoolInfo
from multipool.safe_int import S

logger = structlog.get_logger()


class SwapEngine(BaseEngine):
    """Prices and settles swaps against a single pool."""

    def swap(
        self,
        sender: AccountId,
        asset_in: AssetId,
        amount_in: int,
        asset_out: AssetId,
        amount_out_min: int,
        recipient: AccountId,
    ) -> int:
        """Swap amount_in of asset_in for as much asset_out as the curve allows.

        Reserves are read once on entry. The input is pulled before the output
        is priced, and the price is computed against the entry reserves.

        Returns:
            Amount of asset_out sent to recipient

        Raises:
            PoolNotExist: If the pool is not initialized
            InvalidAmount: If amount_in is zero
            InsufficientLiquidity: If the output would shrink reserve_in * reserve_out
            MinAmountIssue: If the output is below amount_out_min
        """
        info = self._require_pool(asset_in, asset_out)
        if amount_in == 0:
            raise InvalidAmount("Swap amount must be positive")
        reserve_in, reserve_out = info.reserve_a, info.reserve_b

        self.ctx.mover.pull_from(asset_in, sender, self.ctx.config.pool_address, amount_in)

        amount_out = self.ctx.amm.get_amount_out(amount_in, reserve_in, reserve_out)
        if amount_out > reserve_out or not self.ctx.amm.invariant_holds(
            amount_in, amount_out, reserve_in, reserve_out
        ):
            raise InsufficientLiquidity(
                f"Output {amount_out} breaks the invariant for reserves ({reserve_in}, {reserve_out})"
            )
        if amount_out < amount_out_min:
            raise MinAmountIssue(f"Output {amount_out} is below minimum {amount_out_min}")

        self.ctx.mover.push_to(asset_out, recipient, amount_out)
        self.ctx.store.put_pool(
            asset_in,
            asset_out,
            PoolInfo(
                initialized=True,
                reserve_a=(S(reserve_in) + amount_in).to_uint256(),
                reserve_b=(S(reserve_out) - amount_out).to_uint256(),
            ),
        )

        logger.info(
            "swap_executed",
            sender=short(sender),
            recipient=short(recipient),
            asset_in=short(asset_in),
            asset_out=short(asset_out),
            amount_in=amount_in,
            amount_out=amount_out,
        )
        return amount_out

    def quote(self, asset_in: AssetId, amount_in: int, asset_out: AssetId) -> int:
        """Output a swap would produce right now, without executing it.

        Raises:
            PoolNotExist: If the pool is not initialized
            InvalidAmount: If amount_in is zero
        """
        info = self._require_pool(asset_in, asset_out)
        if amount_in == 0:
            raise InvalidAmount("Swap amount must be positive")
        return self.ctx.amm.get_amount_out(amount_in, info.reserve_a, info.reserve_b)
