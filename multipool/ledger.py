"""Share ledger: fungible LP shares, one share class per pool.

The pool manager only needs mint, burn and balance_of. InMemoryShareLedger
is the reference implementation used by the default manager and the tests.
"""

from __future__ import annotations

import threading
from typing import Protocol

import structlog

from multipool.errors import InsufficientShareBalance
from multipool.models.types import AccountId, normalize_address, short
from multipool.safe_int import require_uint256
from multipool.transaction import record_undo

logger = structlog.get_logger()


class ShareLedger(Protocol):
    """Protocol for the multi-class LP share ledger."""

    def mint(self, holder: AccountId, share_class_id: int, amount: int) -> None:
        """Credit amount shares of a class to holder."""
        ...

    def burn(self, holder: AccountId, share_class_id: int, amount: int) -> None:
        """Debit amount shares of a class from holder.

        Raises:
            InsufficientShareBalance: If holder owns fewer than amount shares
        """
        ...

    def balance_of(self, holder: AccountId, share_class_id: int) -> int:
        """Shares of a class owned by holder."""
        ...


class InMemoryShareLedger:
    """Share balances keyed by (holder, share_class_id).

    Notes:
    - Balances are always non-negative and fit in uint256.
    - Zero balances are omitted to keep the table sparse.
    - Every change is journaled as an inverse delta.
    """

    def __init__(self) -> None:
        self._balances: dict[tuple[AccountId, int], int] = {}
        self._lock = threading.Lock()

    def mint(self, holder: AccountId, share_class_id: int, amount: int) -> None:
        require_uint256(amount, "amount")
        self._apply(normalize_address(holder), share_class_id, amount)

    def burn(self, holder: AccountId, share_class_id: int, amount: int) -> None:
        require_uint256(amount, "amount")
        self._apply(normalize_address(holder), share_class_id, -amount)

    def balance_of(self, holder: AccountId, share_class_id: int) -> int:
        return self._balances.get((normalize_address(holder), share_class_id), 0)

    def holders(self, share_class_id: int) -> dict[AccountId, int]:
        """All non-zero holders of a share class."""
        return {
            holder: amount
            for (holder, class_id), amount in self._balances.items()
            if class_id == share_class_id
        }

    def _apply(self, holder: AccountId, share_class_id: int, delta: int) -> None:
        key = (holder, share_class_id)
        with self._lock:
            current = self._balances.get(key, 0)
            new_balance = current + delta
            if new_balance < 0:
                raise InsufficientShareBalance(
                    f"Insufficient shares for {holder}: {current} < {-delta}"
                )
            require_uint256(new_balance, "share balance")
            if new_balance == 0:
                self._balances.pop(key, None)
            else:
                self._balances[key] = new_balance
        logger.debug("share_balance_changed", holder=short(holder), delta=delta)
        record_undo(lambda: self._revert(key, delta))

    def _revert(self, key: tuple[AccountId, int], delta: int) -> None:
        with self._lock:
            restored = self._balances.get(key, 0) - delta
            if restored == 0:
                self._balances.pop(key, None)
            else:
                self._balances[key] = restored

    def __repr__(self) -> str:
        return f"InMemoryShareLedger({len(self._balances)} entries)"
