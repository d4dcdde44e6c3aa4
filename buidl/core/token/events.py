"""
Events - append-only record of ledger state changes.

Mirrors the two ERC-20 events:
- Transfer(from, to, value): transfers, mints (from = zero address) and
  burns (to = zero address)
- Approval(owner, spender, value): every allowance change, carrying the
  resulting allowance rather than the delta
"""

from dataclasses import dataclass
from typing import Hashable, Iterator, List, Union

from buidl.crypto import ZERO_ADDRESS


@dataclass(frozen=True)
class TransferEvent:
    """Value moved between holders."""
    seq: int
    sender: Hashable
    recipient: Hashable
    amount: int

    @property
    def is_mint(self) -> bool:
        return self.sender == ZERO_ADDRESS

    @property
    def is_burn(self) -> bool:
        return self.recipient == ZERO_ADDRESS

    def involves(self, account: Hashable) -> bool:
        return account in (self.sender, self.recipient)

    def to_dict(self) -> dict:
        return {
            "event": "Transfer",
            "seq": self.seq,
            "from": self.sender,
            "to": self.recipient,
            "value": self.amount,
        }


@dataclass(frozen=True)
class ApprovalEvent:
    """An allowance was set."""
    seq: int
    owner: Hashable
    spender: Hashable
    amount: int

    def involves(self, account: Hashable) -> bool:
        return account in (self.owner, self.spender)

    def to_dict(self) -> dict:
        return {
            "event": "Approval",
            "seq": self.seq,
            "owner": self.owner,
            "spender": self.spender,
            "value": self.amount,
        }


LedgerEvent = Union[TransferEvent, ApprovalEvent]


class EventLog:
    """
    Ordered event list with monotonically increasing sequence numbers.

    Not synchronized on its own; the owning ledger appends under its lock.
    """

    def __init__(self):
        self._events: List[LedgerEvent] = []

    def transfer(self, sender: Hashable, recipient: Hashable, amount: int) -> TransferEvent:
        event = TransferEvent(len(self._events), sender, recipient, amount)
        self._events.append(event)
        return event

    def approval(self, owner: Hashable, spender: Hashable, amount: int) -> ApprovalEvent:
        event = ApprovalEvent(len(self._events), owner, spender, amount)
        self._events.append(event)
        return event

    def for_account(self, account: Hashable) -> List[LedgerEvent]:
        """Events in which the account took part, oldest first."""
        return [e for e in self._events if e.involves(account)]

    def __iter__(self) -> Iterator[LedgerEvent]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def __getitem__(self, index):
        return self._events[index]
