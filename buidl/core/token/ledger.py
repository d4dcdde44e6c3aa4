"""
TokenLedger - balance and allowance state for the BUIDL token.

Conceptual Background:
---------------------
The ledger is the whole token: a map of balances, a map of allowances and
the total supply. It follows the ERC-20 model:

1. **Balances**: account -> amount, absent means 0
2. **Allowances**: (owner, spender) -> amount a spender may still move
3. **Total supply**: always equal to the sum of all balances

State Transitions:
-----------------
Every operation validates all of its preconditions first and only then
mutates, so a rejected call leaves no trace:
1. Check amount bounds (uint256)
2. Check authorization / allowance / balance, in that order
3. Apply debits and credits
4. Record the matching event

Allowance is checked before balance on delegated spends, and balance is
always re-read at spend time: an owner may approve more than they hold,
and a later burn can make an earlier approval unspendable.

Concurrency:
-----------
One re-entrant lock guards the whole ledger. Conservation spans several
fields, so it cannot be kept with per-field locking.
"""

import threading
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Hashable, List, Mapping, Optional, Tuple

from buidl.core.token.amount import check_amount, fits
from buidl.core.token.errors import (
    InsufficientAllowance,
    InsufficientBalance,
    LedgerError,
    Overflow,
    Unauthorized,
)
from buidl.core.token.events import EventLog, LedgerEvent
from buidl.crypto import ZERO_ADDRESS
from buidl.utils.logger import get_logger
from buidl.utils.validation import MAX_AMOUNT

logger = get_logger("ledger")


# =============================================================================
# Metadata & Snapshot
# =============================================================================


@dataclass(frozen=True)
class TokenMetadata:
    """Descriptive ERC-20 fields. Not used in accounting."""
    name: str = "Buidl"
    symbol: str = "BUIDL"
    decimals: int = 18


@dataclass(frozen=True)
class LedgerSnapshot:
    """
    Read-only copy of ledger state at one point in time.

    Two snapshots compare equal exactly when the accounting state is equal,
    which makes "rejected call changed nothing" a one-line assertion.
    """
    total_supply: int
    balances: Mapping[Hashable, int] = field(default_factory=dict)
    allowances: Mapping[Tuple[Hashable, Hashable], int] = field(default_factory=dict)
    event_count: int = 0

    def __post_init__(self):
        object.__setattr__(self, "balances", MappingProxyType(dict(self.balances)))
        object.__setattr__(self, "allowances", MappingProxyType(dict(self.allowances)))

    def is_conserved(self) -> bool:
        return self.total_supply == sum(self.balances.values())

    def __hash__(self) -> int:
        return hash((
            self.total_supply,
            frozenset(self.balances.items()),
            frozenset(self.allowances.items()),
            self.event_count,
        ))


# =============================================================================
# Ledger
# =============================================================================


class TokenLedger:
    """
    Fungible-token ledger with ERC-20 semantics.

    Attributes:
        owner: Account credited with the initial supply
        metadata: Name, symbol and decimals
        restrict_mint: If True, only the owner may mint
    """

    def __init__(
        self,
        initial_supply: int,
        owner: Hashable,
        metadata: Optional[TokenMetadata] = None,
        restrict_mint: bool = False,
    ):
        """
        Initialize the ledger and credit the initial supply to the owner.

        Args:
            initial_supply: Amount minted to the owner at creation
            owner: Owner / initial minter account
            metadata: Token metadata. None = defaults
            restrict_mint: Gate mint on the owner account

        Raises:
            ValueOutOfBounds: If initial_supply is not a uint256
        """
        check_amount(initial_supply, "initial_supply")

        self.owner = owner
        self.metadata = metadata or TokenMetadata()
        self.restrict_mint = restrict_mint

        self._balances: Dict[Hashable, int] = {}
        self._allowances: Dict[Tuple[Hashable, Hashable], int] = {}
        self._total_supply = 0
        self._events = EventLog()
        self._lock = threading.RLock()

        if initial_supply > 0:
            self._credit(owner, initial_supply)
            self._total_supply = initial_supply
            self._events.transfer(ZERO_ADDRESS, owner, initial_supply)

        logger.info(
            f"Ledger created: {self.metadata.symbol} supply={initial_supply} owner={owner}"
        )

    # =========================================================================
    # Metadata
    # =========================================================================

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def symbol(self) -> str:
        return self.metadata.symbol

    @property
    def decimals(self) -> int:
        return self.metadata.decimals

    # =========================================================================
    # State Access
    # =========================================================================

    @property
    def total_supply(self) -> int:
        """Sum of all balances."""
        with self._lock:
            return self._total_supply

    def balance_of(self, account: Hashable) -> int:
        """Get balance for an account (0 if never credited)."""
        with self._lock:
            return self._balances.get(account, 0)

    def allowance(self, owner: Hashable, spender: Hashable) -> int:
        """Get remaining amount spender may move from owner."""
        with self._lock:
            return self._allowances.get((owner, spender), 0)

    def holders(self) -> List[Hashable]:
        """Accounts with a non-zero balance."""
        with self._lock:
            return [a for a, bal in self._balances.items() if bal > 0]

    @property
    def events(self) -> List[LedgerEvent]:
        """All recorded events, oldest first."""
        with self._lock:
            return list(self._events)

    def events_for(self, account: Hashable) -> List[LedgerEvent]:
        """Events in which an account was sender, recipient, owner or spender."""
        with self._lock:
            return self._events.for_account(account)

    def snapshot(self) -> LedgerSnapshot:
        """Take a read-only copy of the current state."""
        with self._lock:
            return LedgerSnapshot(
                total_supply=self._total_supply,
                balances=self._balances,
                allowances=self._allowances,
                event_count=len(self._events),
            )

    # =========================================================================
    # Supply
    # =========================================================================

    def mint(self, caller: Hashable, amount: int) -> None:
        """
        Create new supply and credit it to the caller.

        Raises:
            ValueOutOfBounds: amount is not a uint256
            Unauthorized: mint is restricted and caller is not the owner
            Overflow: total supply or caller balance would exceed uint256
        """
        check_amount(amount)
        with self._lock:
            if self.restrict_mint and caller != self.owner:
                self._reject("mint", Unauthorized(caller, "mint"))

            new_total = self._total_supply + amount
            if not fits(new_total):
                self._reject("mint", Overflow(caller, amount, MAX_AMOUNT))
            if not fits(self._balances.get(caller, 0) + amount):
                self._reject("mint", Overflow(caller, amount, MAX_AMOUNT))

            self._credit(caller, amount)
            self._total_supply = new_total
            self._events.transfer(ZERO_ADDRESS, caller, amount)

        logger.debug(f"Mint {amount} to {caller} (supply={new_total})")

    def burn(self, caller: Hashable, amount: int) -> None:
        """
        Destroy supply from the caller's own balance.

        Gated only by the caller's balance; total supply is the sum of
        balances so it cannot be exceeded separately.

        Raises:
            ValueOutOfBounds: amount is not a uint256
            InsufficientBalance: amount exceeds caller balance
        """
        check_amount(amount)
        with self._lock:
            self._require_balance("burn", caller, amount,
                                  "ERC20: burn amount exceeds balance")
            self._burn(caller, amount)

    def burn_from(self, spender: Hashable, owner: Hashable, amount: int) -> None:
        """
        Destroy supply from owner's balance using spender's allowance.

        Raises:
            ValueOutOfBounds: amount is not a uint256
            InsufficientAllowance: amount exceeds the allowance
            InsufficientBalance: amount exceeds owner balance
        """
        check_amount(amount)
        with self._lock:
            self._require_allowance("burn_from", owner, spender, amount)
            self._require_balance("burn_from", owner, amount,
                                  "ERC20: burn amount exceeds balance")
            self._spend_allowance(owner, spender, amount)
            self._burn(owner, amount)

    # =========================================================================
    # Allowances
    # =========================================================================

    def approve(self, owner: Hashable, spender: Hashable, amount: int) -> None:
        """
        Set spender's allowance over owner's tokens.

        Overwrites any previous value. Not checked against owner balance.

        Raises:
            ValueOutOfBounds: amount is not a uint256
        """
        check_amount(amount)
        with self._lock:
            self._set_allowance(owner, spender, amount)
        logger.debug(f"Approve {owner} -> {spender}: {amount}")

    def increase_allowance(self, owner: Hashable, spender: Hashable, added: int) -> int:
        """
        Atomically raise an allowance.

        Returns:
            The new allowance

        Raises:
            ValueOutOfBounds: added is not a uint256
            Overflow: the allowance would exceed uint256
        """
        check_amount(added, "added_value")
        with self._lock:
            new_value = self._allowances.get((owner, spender), 0) + added
            if not fits(new_value):
                self._reject("increase_allowance", Overflow(owner, added, MAX_AMOUNT))
            self._set_allowance(owner, spender, new_value)
        return new_value

    def decrease_allowance(self, owner: Hashable, spender: Hashable, subtracted: int) -> int:
        """
        Atomically lower an allowance.

        Returns:
            The new allowance

        Raises:
            ValueOutOfBounds: subtracted is not a uint256
            InsufficientAllowance: the allowance would go below zero
        """
        check_amount(subtracted, "subtracted_value")
        with self._lock:
            current = self._allowances.get((owner, spender), 0)
            if subtracted > current:
                self._reject(
                    "decrease_allowance",
                    InsufficientAllowance(
                        owner, spender, subtracted, current,
                        reason="ERC20: decreased allowance below zero",
                    ),
                )
            self._set_allowance(owner, spender, current - subtracted)
            return current - subtracted

    # =========================================================================
    # Transfers
    # =========================================================================

    def transfer(self, sender: Hashable, recipient: Hashable, amount: int) -> None:
        """
        Move tokens from sender to recipient. Total supply is unchanged.

        Raises:
            ValueOutOfBounds: amount is not a uint256
            InsufficientBalance: amount exceeds sender balance
        """
        check_amount(amount)
        with self._lock:
            self._require_balance("transfer", sender, amount)
            self._move(sender, recipient, amount)

    def transfer_from(
        self,
        spender: Hashable,
        owner: Hashable,
        recipient: Hashable,
        amount: int,
    ) -> None:
        """
        Move tokens out of owner's balance on owner's behalf.

        Preconditions, in order: allowance covers amount, then owner
        balance covers amount. The allowance is consumed by exactly amount.

        Raises:
            ValueOutOfBounds: amount is not a uint256
            InsufficientAllowance: amount exceeds the allowance
            InsufficientBalance: amount exceeds owner balance
        """
        check_amount(amount)
        with self._lock:
            self._require_allowance("transfer_from", owner, spender, amount)
            self._require_balance("transfer_from", owner, amount)
            self._spend_allowance(owner, spender, amount)
            self._move(owner, recipient, amount)

    # =========================================================================
    # Internals (caller holds the lock, preconditions already checked)
    # =========================================================================

    def _reject(self, op: str, error: LedgerError) -> None:
        logger.info(f"Rejected {op}: {error.kind.value} ({error.reason})")
        raise error

    def _require_balance(
        self,
        op: str,
        account: Hashable,
        amount: int,
        reason: str = "ERC20: transfer amount exceeds balance",
    ) -> None:
        available = self._balances.get(account, 0)
        if amount > available:
            self._reject(op, InsufficientBalance(account, amount, available, reason))

    def _require_allowance(self, op: str, owner: Hashable, spender: Hashable, amount: int) -> None:
        available = self._allowances.get((owner, spender), 0)
        if amount > available:
            self._reject(op, InsufficientAllowance(owner, spender, amount, available))

    def _credit(self, account: Hashable, amount: int) -> None:
        if not amount:
            return
        self._balances[account] = self._balances.get(account, 0) + amount

    def _debit(self, account: Hashable, amount: int) -> None:
        remaining = self._balances.get(account, 0) - amount
        if remaining:
            self._balances[account] = remaining
        else:
            self._balances.pop(account, None)

    def _move(self, sender: Hashable, recipient: Hashable, amount: int) -> None:
        self._debit(sender, amount)
        self._credit(recipient, amount)
        self._events.transfer(sender, recipient, amount)
        logger.debug(f"Transfer {amount} {sender} -> {recipient}")

    def _burn(self, account: Hashable, amount: int) -> None:
        self._debit(account, amount)
        self._total_supply -= amount
        self._events.transfer(account, ZERO_ADDRESS, amount)
        logger.debug(f"Burn {amount} from {account} (supply={self._total_supply})")

    def _set_allowance(self, owner: Hashable, spender: Hashable, amount: int) -> None:
        self._allowances[(owner, spender)] = amount
        self._events.approval(owner, spender, amount)

    def _spend_allowance(self, owner: Hashable, spender: Hashable, amount: int) -> None:
        self._set_allowance(owner, spender, self._allowances.get((owner, spender), 0) - amount)

    # =========================================================================
    # Utility
    # =========================================================================

    def __repr__(self) -> str:
        return (
            f"TokenLedger(symbol={self.symbol}, supply={self.total_supply}, "
            f"holders={len(self.holders())})"
        )

    def stats(self) -> dict:
        """Get ledger statistics."""
        with self._lock:
            return {
                "name": self.name,
                "symbol": self.symbol,
                "decimals": self.decimals,
                "total_supply": self._total_supply,
                "holder_count": sum(1 for b in self._balances.values() if b > 0),
                "allowance_count": sum(1 for a in self._allowances.values() if a > 0),
                "event_count": len(self._events),
            }
