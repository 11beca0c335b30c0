"""Adding and removing pool liquidity."""

from __future__ import annotations

import structlog

from multipool.engine.base import BaseEngine
from multipool.errors import (
    IncorrectAmount,
    LiquidityMustBeNotZero,
    ReserveDepleted,
    SeedSharesLocked,
)
from multipool.models.types import AccountId, AssetId, normalize_address, short
from multipool.pools import PoolInfo, pool_key_for, share_class_id
from multipool.safe_int import S

logger = structlog.get_logger()


class LiquidityEngine(BaseEngine):
    """Mints and burns LP shares against deposits and withdrawals."""

    def add_liquidity(
        self,
        sender: AccountId,
        asset_a: AssetId,
        asset_b: AssetId,
        amount_a_in: int,
        amount_b_in: int,
        amount_a_in_min: int,
        amount_b_in_min: int,
    ) -> int:
        """Deposit both assets and mint LP shares to sender.

        The first deposit after creation takes the amounts as given and mints
        floor(sqrt(amount_a_in * amount_b_in)) shares. Later deposits take the
        optimal amount of each side at the current reserve ratio, where
        ``amount_*_in_min`` caps how much of that side may be pulled.

        Args:
            sender: Account the assets are pulled from and the shares minted to
            asset_a: First asset (either order)
            asset_b: Second asset
            amount_a_in: Offered amount of asset_a
            amount_b_in: Offered amount of asset_b
            amount_a_in_min: Largest optimal amount of asset_a accepted
            amount_b_in_min: Largest optimal amount of asset_b accepted

        Returns:
            Number of shares minted

        Raises:
            PoolNotExist: If the pool is not initialized
            ReserveDepleted: If exactly one reserve is zero
            IncorrectAmount: If an optimal amount exceeds its bound
            LiquidityMustBeNotZero: If the deposit would mint zero shares
        """
        info = self._require_pool(asset_a, asset_b)
        key = pool_key_for(asset_a, asset_b)
        total_shares = self.ctx.store.get_share_supply(key)
        funded = not (info.reserve_a == 0 and info.reserve_b == 0)
        if funded and (info.reserve_a == 0 or info.reserve_b == 0):
            raise ReserveDepleted(
                f"Pool {short(asset_a)}/{short(asset_b)} has reserves "
                f"({info.reserve_a}, {info.reserve_b}); deposits need both sides"
            )

        quote = self.ctx.amm.quote_deposit(
            amount_a_in, amount_b_in, info.reserve_a, info.reserve_b, total_shares
        )
        if funded and quote.amount_a > amount_a_in_min:
            raise IncorrectAmount(
                f"Optimal amount of {short(asset_a)} is {quote.amount_a}, bound is {amount_a_in_min}"
            )
        if funded and quote.amount_b > amount_b_in_min:
            raise IncorrectAmount(
                f"Optimal amount of {short(asset_b)} is {quote.amount_b}, bound is {amount_b_in_min}"
            )
        if quote.liquidity == 0:
            raise LiquidityMustBeNotZero("Deposit would mint zero shares")

        pool_address = self.ctx.config.pool_address
        self.ctx.mover.pull_from(asset_a, sender, pool_address, quote.amount_a)
        self.ctx.mover.pull_from(asset_b, sender, pool_address, quote.amount_b)
        self.ctx.ledger.mint(sender, share_class_id(key), quote.liquidity)
        self.ctx.store.set_share_supply(key, (S(total_shares) + quote.liquidity).to_uint256())
        self.ctx.store.put_pool(
            asset_a,
            asset_b,
            PoolInfo(
                initialized=True,
                reserve_a=(S(info.reserve_a) + quote.amount_a).to_uint256(),
                reserve_b=(S(info.reserve_b) + quote.amount_b).to_uint256(),
            ),
        )

        logger.info(
            "liquidity_added",
            sender=short(sender),
            asset_a=short(asset_a),
            asset_b=short(asset_b),
            amount_a=quote.amount_a,
            amount_b=quote.amount_b,
            liquidity=quote.liquidity,
            first_deposit=not funded,
        )
        return quote.liquidity

    def remove_liquidity(
        self,
        sender: AccountId,
        recipient: AccountId,
        asset_a: AssetId,
        asset_b: AssetId,
        liquidity: int,
    ) -> tuple[int, int]:
        """Burn sender's LP shares and send the pro-rata reserves to recipient.

        Reserves, supply and the share burn are all settled before any asset
        leaves the pool.

        Returns:
            (amount_a_out, amount_b_out) in the caller's asset order

        Raises:
            PoolNotExist: If the pool is not initialized
            LiquidityMustBeNotZero: If liquidity is zero
            SeedSharesLocked: If sender is the burn address holding the seed shares
            InsufficientShareBalance: If sender owns fewer than liquidity shares
        """
        info = self._require_pool(asset_a, asset_b)
        if liquidity == 0:
            raise LiquidityMustBeNotZero("Cannot remove zero liquidity")
        if normalize_address(sender, validate=True) == self.ctx.config.burn_address:
            raise SeedSharesLocked("Seed shares held by the burn address are not withdrawable")

        key = pool_key_for(asset_a, asset_b)
        total_shares = self.ctx.store.get_share_supply(key)
        amount_a_out, amount_b_out = self.ctx.amm.withdrawal_amounts(
            liquidity, info.reserve_a, info.reserve_b, total_shares
        )

        self.ctx.store.put_pool(
            asset_a,
            asset_b,
            PoolInfo(
                initialized=True,
                reserve_a=(S(info.reserve_a) - amount_a_out).to_uint256(),
                reserve_b=(S(info.reserve_b) - amount_b_out).to_uint256(),
            ),
        )
        self.ctx.store.set_share_supply(key, (S(total_shares) - liquidity).to_uint256())
        self.ctx.ledger.burn(sender, share_class_id(key), liquidity)

        self.ctx.mover.push_to(asset_a, recipient, amount_a_out)
        self.ctx.mover.push_to(asset_b, recipient, amount_b_out)

        logger.info(
            "liquidity_removed",
            sender=short(sender),
            recipient=short(recipient),
            asset_a=short(asset_a),
            asset_b=short(asset_b),
            liquidity=liquidity,
            amount_a=amount_a_out,
            amount_b=amount_b_out,
        )
        return amount_a_out, amount_b_out
