"""Pool manager error classes.

Every error aborts the whole operation; the manager rolls back any state,
share or asset movement already made before re-raising.
"""


class PoolManagerError(Exception):
    """Base error for pool manager operations."""

    pass


class PoolAlreadyExists(PoolManagerError):
    """A pool for this asset pair has already been initialized."""

    pass


class PoolNotExist(PoolManagerError):
    """No initialized pool exists for this asset pair."""

    pass


class SameAssetNotAllowed(PoolManagerError):
    """Both sides of the pair resolve to the same asset."""

    pass


class IncorrectAmount(PoolManagerError):
    """An optimal deposit amount exceeds the caller's stated bound."""

    pass


class LiquidityMustBeNotZero(PoolManagerError):
    """Zero liquidity supplied to a removal, or a deposit would mint zero shares."""

    pass


class InvalidAmount(PoolManagerError):
    """Swap input amount is zero."""

    pass


class InsufficientLiquidity(PoolManagerError):
    """Swap output would break the constant-product invariant."""

    pass


class MinAmountIssue(PoolManagerError):
    """Swap output is below the caller's minimum acceptable amount."""

    pass


class SeedSharesLocked(PoolManagerError):
    """The burn address tried to withdraw the pool's seed shares."""

    pass


class ReserveDepleted(PoolManagerError):
    """One reserve of a funded pool is zero, so it has no price to deposit at."""

    pass


class ShareLedgerError(Exception):
    """Base error for share ledger operations."""

    pass


class InsufficientShareBalance(ShareLedgerError):
    """Holder does not own enough shares of the class to burn."""

    pass


class AssetTransferError(Exception):
    """Base error for asset transfers."""

    pass


class InsufficientBalance(AssetTransferError):
    """Source account does not hold enough of the asset."""

    pass


class InsufficientAllowance(AssetTransferError):
    """Owner has not approved the pool to pull this much of the asset."""

    pass
