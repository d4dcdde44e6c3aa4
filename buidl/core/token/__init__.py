"""Token ledger, amount checks, events and error taxonomy"""
from buidl.core.token.errors import (
    ErrorKind,
    LedgerError,
    ValueOutOfBounds,
    InsufficientBalance,
    InsufficientAllowance,
    Overflow,
    Unauthorized,
    InvalidAccount,
)
from buidl.core.token.amount import check_amount, coerce_amount
from buidl.core.token.events import TransferEvent, ApprovalEvent, EventLog
from buidl.core.token.ledger import TokenLedger, TokenMetadata, LedgerSnapshot

__all__ = [
    "ErrorKind",
    "LedgerError",
    "ValueOutOfBounds",
    "InsufficientBalance",
    "InsufficientAllowance",
    "Overflow",
    "Unauthorized",
    "InvalidAccount",
    "check_amount",
    "coerce_amount",
    "TransferEvent",
    "ApprovalEvent",
    "EventLog",
    "TokenLedger",
    "TokenMetadata",
    "LedgerSnapshot",
]
