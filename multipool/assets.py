"""Asset mover: moves the traded assets in and out of the pool manager.

The manager pulls deposits and swap inputs from callers (who approve the
manager's pool address first) and pushes withdrawals and swap outputs from
the pool address to recipients.
"""

from __future__ import annotations

import threading
from typing import Protocol

import structlog

from multipool.errors import InsufficientAllowance, InsufficientBalance
from multipool.models.types import AccountId, AssetId, normalize_address, short
from multipool.safe_int import require_uint256
from multipool.transaction import record_undo

logger = structlog.get_logger()


class AssetMover(Protocol):
    """Protocol for external asset transfers."""

    def pull_from(self, asset: AssetId, sender: AccountId, recipient: AccountId, amount: int) -> None:
        """Move amount of asset from sender to recipient using the pool's allowance.

        Raises:
            InsufficientAllowance: If sender has not approved enough
            InsufficientBalance: If sender does not hold enough
        """
        ...

    def push_to(self, asset: AssetId, recipient: AccountId, amount: int) -> None:
        """Move amount of asset from the pool's own account to recipient.

        Raises:
            InsufficientBalance: If the pool does not hold enough
        """
        ...


class InMemoryAssetMover:
    """Token balances and allowances for any number of assets.

    Balances are keyed by (asset, holder); allowances by (asset, owner),
    always granted to the pool address this mover serves.
    """

    def __init__(self, pool_address: AccountId) -> None:
        self.pool_address = normalize_address(pool_address, validate=True)
        self._balances: dict[tuple[AssetId, AccountId], int] = {}
        self._allowances: dict[tuple[AssetId, AccountId], int] = {}
        self._lock = threading.Lock()

    # --- Funding (test and bootstrap helpers) ---

    def credit(self, asset: AssetId, holder: AccountId, amount: int) -> None:
        """Create amount of asset out of thin air for holder."""
        require_uint256(amount, "amount")
        self._adjust(self._balances, (_norm(asset), _norm(holder)), amount)

    def approve(self, asset: AssetId, owner: AccountId, amount: int) -> None:
        """Set owner's allowance of asset for the pool address."""
        require_uint256(amount, "amount")
        key = (_norm(asset), _norm(owner))
        with self._lock:
            current = self._allowances.get(key, 0)
        self._adjust(self._allowances, key, amount - current)

    def balance_of(self, asset: AssetId, holder: AccountId) -> int:
        return self._balances.get((_norm(asset), _norm(holder)), 0)

    def allowance(self, asset: AssetId, owner: AccountId) -> int:
        return self._allowances.get((_norm(asset), _norm(owner)), 0)

    # --- AssetMover protocol ---

    def pull_from(self, asset: AssetId, sender: AccountId, recipient: AccountId, amount: int) -> None:
        require_uint256(amount, "amount")
        asset, sender, recipient = _norm(asset), _norm(sender), _norm(recipient)
        allowed = self.allowance(asset, sender)
        if allowed < amount:
            raise InsufficientAllowance(
                f"Allowance of {short(sender)} for {short(asset)} is {allowed}, need {amount}"
            )
        self._transfer(asset, sender, recipient, amount)
        self._adjust(self._allowances, (asset, sender), -amount)

    def push_to(self, asset: AssetId, recipient: AccountId, amount: int) -> None:
        require_uint256(amount, "amount")
        self._transfer(_norm(asset), self.pool_address, _norm(recipient), amount)

    # --- Internals ---

    def _transfer(self, asset: AssetId, sender: AccountId, recipient: AccountId, amount: int) -> None:
        available = self.balance_of(asset, sender)
        if available < amount:
            raise InsufficientBalance(
                f"Balance of {short(sender)} in {short(asset)} is {available}, need {amount}"
            )
        self._adjust(self._balances, (asset, sender), -amount)
        self._adjust(self._balances, (asset, recipient), amount)
        logger.debug(
            "asset_transferred",
            asset=short(asset),
            sender=short(sender),
            recipient=short(recipient),
            amount=amount,
        )

    def _adjust(
        self,
        table: dict[tuple[AssetId, AccountId], int],
        key: tuple[AssetId, AccountId],
        delta: int,
    ) -> None:
        with self._lock:
            new_value = table.get(key, 0) + delta
            if new_value < 0:
                raise InsufficientBalance(f"Balance would go negative: {key} by {delta}")
            require_uint256(new_value, "balance")
            _store(table, key, new_value)
        record_undo(lambda: self._revert(table, key, delta))

    def _revert(
        self,
        table: dict[tuple[AssetId, AccountId], int],
        key: tuple[AssetId, AccountId],
        delta: int,
    ) -> None:
        with self._lock:
            _store(table, key, table.get(key, 0) - delta)


def _store(table: dict[tuple[AssetId, AccountId], int], key: tuple[AssetId, AccountId], value: int) -> None:
    if value == 0:
        table.pop(key, None)
    else:
        table[key] = value


def _norm(address: str) -> str:
    return normalize_address(address, validate=True)
