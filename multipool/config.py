"""Pool manager configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass

from multipool.constants import BURN_ADDRESS, DEFAULT_POOL_ADDRESS, MINIMUM_LIQUIDITY
from multipool.models.types import normalize_address


@dataclass(frozen=True)
class PoolManagerConfig:
    """Centralized configuration for a pool manager instance.

    Attributes:
        pool_address: Account that holds every pool's assets in the asset mover.
            Callers approve this address before depositing or swapping.
        burn_address: Holder of the seed shares minted at pool creation.
        minimum_liquidity: Number of seed shares (default: 1000)
    """

    pool_address: str = DEFAULT_POOL_ADDRESS
    burn_address: str = BURN_ADDRESS
    minimum_liquidity: int = MINIMUM_LIQUIDITY

    def __post_init__(self) -> None:
        object.__setattr__(self, "pool_address", normalize_address(self.pool_address, validate=True))
        object.__setattr__(self, "burn_address", normalize_address(self.burn_address, validate=True))
        if self.minimum_liquidity <= 0:
            raise ValueError(f"minimum_liquidity must be positive: {self.minimum_liquidity}")
        if self.pool_address == self.burn_address:
            raise ValueError("pool_address and burn_address must differ")

    @classmethod
    def from_env(cls) -> PoolManagerConfig:
        """Build a configuration from environment variables.

        - MULTIPOOL_POOL_ADDRESS: Pool account (default: DEFAULT_POOL_ADDRESS)
        - MULTIPOOL_BURN_ADDRESS: Seed share holder (default: BURN_ADDRESS)
        """
        return cls(
            pool_address=os.environ.get("MULTIPOOL_POOL_ADDRESS", DEFAULT_POOL_ADDRESS),
            burn_address=os.environ.get("MULTIPOOL_BURN_ADDRESS", BURN_ADDRESS),
        )


# Default configuration instance
DEFAULT_CONFIG = PoolManagerConfig()
