"""Constant product (x * y = k) pool math.

Pure functions over reserves and amounts; no state, no transfers. All
division rounds down, which always favours the pool: a trader or LP never
receives the extra unit a round-up would hand out.
"""

from __future__ import annotations

from dataclasses import dataclass

from multipool.safe_int import S


@dataclass(frozen=True)
class DepositQuote:
    """Amounts a deposit actually pulls and the shares it mints.

    Amounts are in the caller's asset order.
    """

    amount_a: int
    amount_b: int
    liquidity: int


class ConstantProduct:
    """Constant product AMM math without fees.

    Formula: amount_out = (reserve_out * amount_in) / (reserve_in + amount_in)
    """

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount for a given input, rounded down.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount, always strictly less than reserve_out
            when amount_in and reserve_in are not both zero

        Raises:
            DivisionByZero: If amount_in and reserve_in are both zero
        """
        numerator = S(reserve_out) * S(amount_in)
        denominator = S(reserve_in) + S(amount_in)
        return (numerator // denominator).to_uint256()

    def invariant_holds(
        self, amount_in: int, amount_out: int, reserve_in: int, reserve_out: int
    ) -> bool:
        """Check (reserve_in + in) * (reserve_out - out) >= reserve_in * reserve_out.

        Raises:
            Underflow: If amount_out exceeds reserve_out
        """
        k_before = S(reserve_in) * S(reserve_out)
        k_after = (S(reserve_in) + S(amount_in)) * (S(reserve_out) - S(amount_out))
        return k_after >= k_before

    def optimal_amount(self, amount_in: int, reserve_same: int, reserve_other: int) -> int:
        """Scale a deposit amount by reserve_same / reserve_other, rounded down.

        Raises:
            DivisionByZero: If reserve_other is zero
        """
        return ((S(amount_in) * S(reserve_same)) // S(reserve_other)).to_uint256()

    def initial_liquidity(self, amount_a: int, amount_b: int) -> int:
        """Shares minted by the first deposit: floor(sqrt(amount_a * amount_b))."""
        return (S(amount_a) * S(amount_b)).sqrt().to_uint256()

    def proportional_liquidity(
        self,
        amount_a: int,
        amount_b: int,
        reserve_a: int,
        reserve_b: int,
        total_shares: int,
    ) -> int:
        """Shares minted for a deposit into a funded pool.

        The smaller of the two per-side share values, so a lopsided deposit
        is credited only for its scarcer side.
        """
        shares_a = (S(amount_a) * S(total_shares)) // S(reserve_a)
        shares_b = (S(amount_b) * S(total_shares)) // S(reserve_b)
        return shares_a.min(shares_b).to_uint256()

    def quote_deposit(
        self,
        amount_a_in: int,
        amount_b_in: int,
        reserve_a: int,
        reserve_b: int,
        total_shares: int,
    ) -> DepositQuote:
        """Amounts pulled and shares minted for a deposit, before bound checks.

        An empty pool takes the amounts as given. A funded pool takes each
        side's optimal amount at the current reserve ratio.
        """
        if reserve_a == 0 and reserve_b == 0:
            return DepositQuote(
                amount_a=amount_a_in,
                amount_b=amount_b_in,
                liquidity=self.initial_liquidity(amount_a_in, amount_b_in),
            )

        optimal_a = self.optimal_amount(amount_a_in, reserve_a, reserve_b)
        optimal_b = self.optimal_amount(amount_b_in, reserve_b, reserve_a)
        return DepositQuote(
            amount_a=optimal_a,
            amount_b=optimal_b,
            liquidity=self.proportional_liquidity(
                optimal_a, optimal_b, reserve_a, reserve_b, total_shares
            ),
        )

    def withdrawal_amounts(
        self, liquidity: int, reserve_a: int, reserve_b: int, total_shares: int
    ) -> tuple[int, int]:
        """Pro-rata share of each reserve for burning liquidity shares, rounded down.

        Raises:
            DivisionByZero: If total_shares is zero
        """
        amount_a = (S(liquidity) * S(reserve_a)) // S(total_shares)
        amount_b = (S(liquidity) * S(reserve_b)) // S(total_shares)
        return amount_a.to_uint256(), amount_b.to_uint256()


# Singleton instance
constant_product = ConstantProduct()
