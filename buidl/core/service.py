"""
LedgerService - request boundary in front of a TokenLedger.

Conceptual Background:
---------------------
The ledger speaks in uint256 amounts and opaque accounts. Callers speak in
whatever their transport hands them: JSON numbers, numeric strings, hex
addresses in any letter case. The service sits between the two:

1. **Decode**: parameters are parsed with pydantic request models. Amounts
   become uint256 ints or fail with ValueOutOfBounds; addresses become
   EIP-55 checksum strings or fail with InvalidAccount. Nothing reaches the
   ledger until decoding has fully succeeded.
2. **Dispatch**: each ERC-20 function name maps 1:1 onto a ledger call.
3. **Report**: ledger errors come back as a CallResult carrying the typed
   error. Malformed requests (unknown op, missing or extra parameters) are
   programming errors on the caller's side and raise.

The ledger serializes its own operations, so one service may be shared
between threads.
"""

from dataclasses import dataclass
from typing import Annotated, Any, Callable, Dict, Optional, Tuple, Type

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError

from buidl.core.config import TokenConfig
from buidl.core.token.amount import coerce_amount
from buidl.core.token.errors import (
    ErrorKind,
    InvalidAccount,
    LedgerError,
    ValueOutOfBounds,
)
from buidl.core.token.ledger import TokenLedger, TokenMetadata
from buidl.crypto import to_checksum_address
from buidl.utils.logger import get_logger
from buidl.utils.validation import validate_address

logger = get_logger("service")


# =============================================================================
# Field Decoders
# =============================================================================


def _decode_amount(value: Any) -> int:
    try:
        return coerce_amount(value)
    except ValueOutOfBounds as e:
        raise ValueError(e.reason) from e


def _decode_address(value: Any) -> str:
    valid, error = validate_address(value)
    if not valid:
        raise ValueError(error)
    return to_checksum_address(value)


Amount = Annotated[int, BeforeValidator(_decode_amount)]
Address = Annotated[str, BeforeValidator(_decode_address)]


# =============================================================================
# Request Models
# =============================================================================


class _Request(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)


class EmptyRequest(_Request):
    caller: Optional[Address] = None


class AmountRequest(_Request):
    caller: Address
    amount: Amount


class ApproveRequest(_Request):
    caller: Address
    spender: Address
    amount: Amount


class IncreaseAllowanceRequest(_Request):
    caller: Address
    spender: Address
    added_value: Amount = Field(alias="addedValue")


class DecreaseAllowanceRequest(_Request):
    caller: Address
    spender: Address
    subtracted_value: Amount = Field(alias="subtractedValue")


class TransferRequest(_Request):
    caller: Address
    to: Address
    amount: Amount


class TransferFromRequest(_Request):
    caller: Address
    sender: Address = Field(alias="from")
    to: Address
    amount: Amount


class BurnFromRequest(_Request):
    caller: Address
    account: Address
    amount: Amount


class BalanceOfRequest(_Request):
    caller: Optional[Address] = None
    account: Address


class AllowanceRequest(_Request):
    caller: Optional[Address] = None
    owner: Address
    spender: Address


# Fields decoded as amounts vs addresses, for mapping validation failures
AMOUNT_FIELDS = {"amount", "added_value", "addedValue", "subtracted_value", "subtractedValue"}
ADDRESS_FIELDS = {"caller", "spender", "to", "from", "sender", "account", "owner"}


# =============================================================================
# Call Result
# =============================================================================


@dataclass
class CallResult:
    """
    Outcome of one service call.

    Attributes:
        op: Operation name as requested
        success: True if the call was applied (or the query answered)
        value: Return value (query result, new allowance) or None
        error: Typed ledger error when success is False
    """
    op: str
    success: bool
    value: Any = None
    error: Optional[LedgerError] = None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None

    @property
    def reason(self) -> str:
        return self.error.reason if self.error else ""

    def to_dict(self) -> dict:
        data = {"op": self.op, "success": self.success}
        if self.value is not None:
            data["value"] = self.value
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data


# =============================================================================
# Service
# =============================================================================


Handler = Callable[[TokenLedger, Any], Any]


class LedgerService:
    """
    Decoding and dispatch front-end for a single TokenLedger.

    Operation names follow the ERC-20 ABI (camelCase).
    """

    OPERATIONS: Dict[str, Tuple[Type[_Request], Handler]] = {
        # Mutations
        "mint": (AmountRequest, lambda lg, r: lg.mint(r.caller, r.amount)),
        "burn": (AmountRequest, lambda lg, r: lg.burn(r.caller, r.amount)),
        "approve": (ApproveRequest, lambda lg, r: lg.approve(r.caller, r.spender, r.amount)),
        "increaseAllowance": (
            IncreaseAllowanceRequest,
            lambda lg, r: lg.increase_allowance(r.caller, r.spender, r.added_value),
        ),
        "decreaseAllowance": (
            DecreaseAllowanceRequest,
            lambda lg, r: lg.decrease_allowance(r.caller, r.spender, r.subtracted_value),
        ),
        "transfer": (TransferRequest, lambda lg, r: lg.transfer(r.caller, r.to, r.amount)),
        "transferFrom": (
            TransferFromRequest,
            lambda lg, r: lg.transfer_from(r.caller, r.sender, r.to, r.amount),
        ),
        "burnFrom": (BurnFromRequest, lambda lg, r: lg.burn_from(r.caller, r.account, r.amount)),
        # Queries
        "totalSupply": (EmptyRequest, lambda lg, r: lg.total_supply),
        "balanceOf": (BalanceOfRequest, lambda lg, r: lg.balance_of(r.account)),
        "allowance": (AllowanceRequest, lambda lg, r: lg.allowance(r.owner, r.spender)),
        "name": (EmptyRequest, lambda lg, r: lg.name),
        "symbol": (EmptyRequest, lambda lg, r: lg.symbol),
        "decimals": (EmptyRequest, lambda lg, r: lg.decimals),
    }

    def __init__(self, ledger: TokenLedger):
        self.ledger = ledger

    @classmethod
    def from_config(cls, config: Optional[TokenConfig] = None) -> "LedgerService":
        """Create a service around a fresh ledger built from configuration."""
        config = config or TokenConfig()
        ledger = TokenLedger(
            initial_supply=config.initial_supply,
            owner=config.owner,
            metadata=TokenMetadata(config.name, config.symbol, config.decimals),
            restrict_mint=config.restrict_mint,
        )
        return cls(ledger)

    def call(self, op: str, caller: Optional[str] = None, **params: Any) -> CallResult:
        """
        Decode and apply one operation.

        Args:
            op: ERC-20 function name (e.g. "transferFrom")
            caller: Acting account address (optional for queries)
            **params: Function parameters by ABI name

        Returns:
            CallResult; ledger failures are reported, not raised

        Raises:
            KeyError: Unknown operation
            pydantic.ValidationError: Missing or unexpected parameters
        """
        if op not in self.OPERATIONS:
            raise KeyError(f"Unknown operation: {op}")

        model, handler = self.OPERATIONS[op]
        payload = dict(params)
        if caller is not None:
            payload["caller"] = caller

        try:
            request = self._decode(model, payload)
            value = handler(self.ledger, request)
        except LedgerError as e:
            logger.debug(f"{op} failed: {e.kind.value}")
            return CallResult(op=op, success=False, error=e)

        return CallResult(op=op, success=True, value=value)

    def execute(self, request: Dict[str, Any]) -> CallResult:
        """
        Apply a request in dict form: {"op": ..., "caller": ..., "params": {...}}.
        """
        return self.call(
            request["op"],
            request.get("caller"),
            **request.get("params", {}),
        )

    @staticmethod
    def _decode(model: Type[_Request], payload: Dict[str, Any]) -> _Request:
        """
        Validate a payload against its request model.

        Bounds and address failures are surfaced as ledger errors; any other
        validation failure is re-raised unchanged.
        """
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            for err in e.errors():
                if err["type"] != "value_error" or not err["loc"]:
                    continue
                name = str(err["loc"][0])
                if name in AMOUNT_FIELDS:
                    raise ValueOutOfBounds(err["input"], name) from e
                if name in ADDRESS_FIELDS:
                    raise InvalidAccount(err["input"], name) from e
            raise

    # =========================================================================
    # Convenience wrappers
    # =========================================================================

    def total_supply(self) -> int:
        return self.ledger.total_supply

    def balance_of(self, account: str) -> int:
        return self._query("balanceOf", account=account)

    def allowance(self, owner: str, spender: str) -> int:
        return self._query("allowance", owner=owner, spender=spender)

    def _query(self, op: str, **params: Any) -> Any:
        """Run a query and return its value, raising the ledger error on failure."""
        result = self.call(op, **params)
        if not result.success:
            raise result.error
        return result.value
