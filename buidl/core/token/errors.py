"""
Ledger error taxonomy.

Every rejected ledger operation raises exactly one of the classes below.
They form a closed set keyed by ErrorKind, so callers can branch on
`error.kind` (or the class) instead of parsing reason strings. Each error
carries the structured data that caused it; `reason` mirrors the familiar
ERC-20 revert string for display only.

A rejected operation never leaves partial state behind.
"""

from enum import Enum
from typing import Any, Hashable


class ErrorKind(str, Enum):
    """Closed set of ledger failure categories."""
    VALUE_OUT_OF_BOUNDS = "value_out_of_bounds"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    INSUFFICIENT_ALLOWANCE = "insufficient_allowance"
    OVERFLOW = "overflow"
    UNAUTHORIZED = "unauthorized"
    INVALID_ACCOUNT = "invalid_account"


class LedgerError(Exception):
    """Base class for all ledger failures."""

    kind: ErrorKind

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason

    def to_dict(self) -> dict:
        """Structured form for logging and CLI output."""
        data = {"kind": self.kind.value, "reason": self.reason}
        data.update(
            {k: v for k, v in vars(self).items() if k not in ("reason", "args")}
        )
        return data


class ValueOutOfBounds(LedgerError):
    """An amount was negative, non-integral, or wider than uint256."""

    kind = ErrorKind.VALUE_OUT_OF_BOUNDS

    def __init__(self, value: Any, field: str = "amount"):
        super().__init__("value out-of-bounds")
        self.value = value
        self.field = field


class InsufficientBalance(LedgerError):
    """A debit exceeded the source account's balance."""

    kind = ErrorKind.INSUFFICIENT_BALANCE

    def __init__(
        self,
        account: Hashable,
        requested: int,
        available: int,
        reason: str = "ERC20: transfer amount exceeds balance",
    ):
        super().__init__(reason)
        self.account = account
        self.requested = requested
        self.available = available


class InsufficientAllowance(LedgerError):
    """A delegated spend exceeded the remaining allowance."""

    kind = ErrorKind.INSUFFICIENT_ALLOWANCE

    def __init__(
        self,
        owner: Hashable,
        spender: Hashable,
        requested: int,
        available: int,
        reason: str = "ERC20: insufficient allowance",
    ):
        super().__init__(reason)
        self.owner = owner
        self.spender = spender
        self.requested = requested
        self.available = available


class Overflow(LedgerError):
    """A credit would push a quantity past the uint256 maximum."""

    kind = ErrorKind.OVERFLOW

    def __init__(self, account: Hashable, requested: int, limit: int):
        super().__init__("arithmetic overflow")
        self.account = account
        self.requested = requested
        self.limit = limit


class Unauthorized(LedgerError):
    """The acting account may not perform a restricted action."""

    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, account: Hashable, action: str):
        super().__init__(f"caller is not allowed to {action}")
        self.account = account
        self.action = action


class InvalidAccount(LedgerError):
    """An account identifier could not be decoded into an address."""

    kind = ErrorKind.INVALID_ACCOUNT

    def __init__(self, value: Any, field: str = "account"):
        super().__init__(f"invalid address for {field}")
        self.value = value
        self.field = field
