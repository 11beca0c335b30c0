"""Protocol constants for the pool manager."""

from multipool.models.types import is_valid_address

# Shares minted to the burn address when a pool is created.
# They are never withdrawable, so share supply never drops below this.
MINIMUM_LIQUIDITY = 1000


def _validate_account_address(name: str, address: str) -> str:
    """Validate and return a well-known account address.

    Raises:
        ValueError: If the address is invalid
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid {name} address: {address} (must be 0x + 40 hex chars)")
    return address


# Holder of the seed shares (lowercase for consistency)
BURN_ADDRESS = _validate_account_address(
    "BURN_ADDRESS", "0x000000000000000000000000000000000000dead"
)

# Default account of the pool manager itself inside the asset mover
DEFAULT_POOL_ADDRESS = _validate_account_address(
    "DEFAULT_POOL_ADDRESS", "0x00000000000000000000000000000000000a3300"
)
