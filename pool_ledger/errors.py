"""Pool ledger error classes.

Every error aborts the operation that raised it; the ledger and token
balances are left exactly as they were before the call.
"""


class LedgerError(Exception):
    """Base error for pool ledger operations."""

    pass


class InvalidAmount(LedgerError):
    """Zero or otherwise disallowed quantity."""

    pass


class InsufficientShares(LedgerError):
    """Withdrawal exceeds the caller's share balance."""

    pass


class InsufficientLiquidity(LedgerError):
    """Swap or price query against a pool with a zero-side reserve."""

    pass


class SlippageExceeded(LedgerError):
    """Computed output is below the caller's minimum."""

    pass


class Unauthorized(LedgerError):
    """Admin-only operation invoked by a non-admin."""

    pass


class TransferFailed(LedgerError):
    """The asset-transfer collaborator reported failure."""

    pass


class PoolPaused(LedgerError):
    """Mutating operation attempted while the pause gate is set."""

    pass


class InvalidAddress(LedgerError):
    """Malformed account address, or the null address where it is not allowed."""

    pass


class UnknownAsset(LedgerError, ValueError):
    """Asset is not one of the pool's two tokens."""

    pass


class InvalidState(LedgerError):
    """Operation does not apply in the current state (e.g. pausing twice)."""

    pass
