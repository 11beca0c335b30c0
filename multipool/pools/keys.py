"""Pool key derivation.

A pool is addressed by the keccak-256 hash of its ABI-encoded sorted asset
pair, so (A, B) and (B, A) always resolve to the same key. The same key,
read as a big-endian integer, is the share-class id of the pool's LP shares.
"""

from __future__ import annotations

from eth_abi import encode  # type: ignore[attr-defined]
from web3 import Web3

from multipool.models.types import AssetId, normalize_address
from multipool.pools.types import PoolKey


def sort_assets(asset_a: AssetId, asset_b: AssetId) -> tuple[AssetId, AssetId]:
    """Order two assets by numeric address value, lowest first.

    Args:
        asset_a: First asset address (any case)
        asset_b: Second asset address (any case)

    Returns:
        Normalized (lo, hi) pair

    Raises:
        ValueError: If either address is malformed
    """
    a = normalize_address(asset_a, validate=True)
    b = normalize_address(asset_b, validate=True)
    if int(a, 16) <= int(b, 16):
        return a, b
    return b, a


def derive_pool_key(lo: AssetId, hi: AssetId) -> PoolKey:
    """keccak256(abi.encode(address lo, address hi)).

    Callers pass the output of sort_assets(); the digest itself does not sort.
    """
    return bytes(Web3.keccak(encode(["address", "address"], [lo, hi])))


def pool_key_for(asset_a: AssetId, asset_b: AssetId) -> PoolKey:
    """Order-independent key for an asset pair."""
    return derive_pool_key(*sort_assets(asset_a, asset_b))


def is_flipped(asset_a: AssetId, asset_b: AssetId) -> bool:
    """True if the caller named the pair in non-canonical order."""
    a = normalize_address(asset_a, validate=True)
    b = normalize_address(asset_b, validate=True)
    return int(a, 16) > int(b, 16)


def share_class_id(key: PoolKey) -> int:
    """Share-class id of a pool's LP shares."""
    return int.from_bytes(key, "big")
