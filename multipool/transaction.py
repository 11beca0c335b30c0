"""All-or-nothing transaction boundary for pool operations.

Each public operation runs inside ``atomic()``. Mutating collaborators (the
state store, the share ledger and the asset mover) record a compensating
action on the active journal for every write they make. If the operation
raises, the journal replays those actions in reverse order, so the store,
the share balances and the asset balances all end up where they started.

Compensations for balances are inverse deltas rather than saved values.
Two pools that share an asset both move the manager's balance of it, and
undoing one operation's delta leaves the other pool's concurrent delta intact.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

import structlog

logger = structlog.get_logger()

_local = threading.local()


class Journal:
    """Undo log and after-commit hooks for one transaction."""

    def __init__(self) -> None:
        self._undo: list[Callable[[], None]] = []
        self._after_commit: list[Callable[[], None]] = []

    def record(self, undo: Callable[[], None]) -> None:
        """Register the action that reverses a write just made."""
        self._undo.append(undo)

    def after_commit(self, callback: Callable[[], None]) -> None:
        """Run callback once the transaction has committed."""
        self._after_commit.append(callback)

    @property
    def pending(self) -> int:
        return len(self._undo)

    def rollback(self) -> None:
        """Undo every recorded write, newest first."""
        while self._undo:
            undo = self._undo.pop()
            undo()
        self._after_commit.clear()

    def commit(self) -> None:
        self._undo.clear()
        callbacks, self._after_commit = self._after_commit, []
        for callback in callbacks:
            callback()


def current_journal() -> Journal | None:
    """The journal of the transaction running on this thread, if any."""
    return getattr(_local, "journal", None)


def record_undo(undo: Callable[[], None]) -> None:
    """Record undo on the active journal. Outside a transaction writes are final."""
    journal = current_journal()
    if journal is not None:
        journal.record(undo)


@contextmanager
def atomic() -> Iterator[Journal]:
    """Run the block as one transaction.

    Nested calls join the outermost transaction; only the outermost one
    commits or rolls back.
    """
    outer = current_journal()
    if outer is not None:
        yield outer
        return

    journal = Journal()
    _local.journal = journal
    try:
        yield journal
    except BaseException:
        logger.debug("transaction_rollback", writes=journal.pending)
        journal.rollback()
        raise
    finally:
        _local.journal = None
    journal.commit()


def on_commit(callback: Callable[[], None]) -> None:
    """Run callback when the active transaction commits, or now if there is none."""
    journal = current_journal()
    if journal is None:
        callback()
    else:
        journal.after_commit(callback)
