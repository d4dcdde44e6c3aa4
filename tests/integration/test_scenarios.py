"""
Reference scenarios for the BUIDL token.

Each test deploys a fresh token with 1000 units credited to the owner and
drives it through the request boundary, the way a contract caller would.

Accounts:
- OWNER: deployer and initial holder
- RANDOM: second account, starts empty
- ANOTHER: third account, starts empty
"""

import pytest

from buidl.core.config import TokenConfig
from buidl.core.service import LedgerService
from buidl.core.token import ErrorKind


OWNER = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
RANDOM = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
ANOTHER = "0x3C44CdDdB6a900fa2b585dd299e03d12FA4293BC"

INITIAL_SUPPLY = 1000


@pytest.fixture
def token():
    """Freshly deployed token."""
    return LedgerService.from_config(TokenConfig(initial_supply=INITIAL_SUPPLY, owner=OWNER))


class TestMint:

    def test_mint_minus_one_fails(self, token):
        result = token.call("mint", OWNER, amount=-1)
        assert result.kind == ErrorKind.VALUE_OUT_OF_BOUNDS
        assert token.total_supply() == INITIAL_SUPPLY

    def test_mint_ten_passes(self, token):
        assert token.call("mint", OWNER, amount=10).success
        assert token.total_supply() == INITIAL_SUPPLY + 10


class TestBurn:

    def test_burn_minus_one_fails(self, token):
        result = token.call("burn", OWNER, amount=-1)
        assert result.kind == ErrorKind.VALUE_OUT_OF_BOUNDS
        assert token.total_supply() == INITIAL_SUPPLY

    def test_burn_unowned_tokens_fails(self, token):
        result = token.call("burn", RANDOM, amount=100)
        assert result.kind == ErrorKind.INSUFFICIENT_BALANCE
        assert token.total_supply() == INITIAL_SUPPLY

    def test_burn_owned_tokens_passes(self, token):
        assert token.call("burn", OWNER, amount=100).success
        assert token.total_supply() == INITIAL_SUPPLY - 100
        assert token.balance_of(OWNER) == INITIAL_SUPPLY - 100


class TestApprove:

    def test_approve_minus_one_fails(self, token):
        result = token.call("approve", OWNER, spender=RANDOM, amount=-1)
        assert result.kind == ErrorKind.VALUE_OUT_OF_BOUNDS
        assert token.allowance(OWNER, RANDOM) == 0

    def test_approve_ten_passes(self, token):
        assert token.call("approve", OWNER, spender=RANDOM, amount=10).success
        assert token.allowance(OWNER, RANDOM) == 10

    def test_reapprove_sets_latest_value(self, token):
        token.call("approve", OWNER, spender=RANDOM, amount=10)
        token.call("approve", OWNER, spender=RANDOM, amount=25)
        assert token.allowance(OWNER, RANDOM) == 25


class TestTransfer:

    def test_transfer_minus_one_fails(self, token):
        result = token.call("transfer", OWNER, to=RANDOM, amount=-1)
        assert result.kind == ErrorKind.VALUE_OUT_OF_BOUNDS

    def test_transfer_more_than_owned_fails(self, token):
        result = token.call("transfer", OWNER, to=RANDOM, amount=1001)
        assert result.kind == ErrorKind.INSUFFICIENT_BALANCE
        assert token.balance_of(OWNER) == INITIAL_SUPPLY
        assert token.balance_of(RANDOM) == 0

    def test_transfer_ten_passes(self, token):
        assert token.call("transfer", OWNER, to=RANDOM, amount=10).success
        assert token.balance_of(RANDOM) == 10
        assert token.balance_of(OWNER) == INITIAL_SUPPLY - 10


class TestTransferFromScenario:

    def test_spender_cannot_spend_more_than_owner_has(self, token):
        token.call("approve", OWNER, spender=RANDOM, amount=10)
        assert token.allowance(OWNER, RANDOM) == 10
        token.call("burn", OWNER, amount=INITIAL_SUPPLY)

        result = token.call("transferFrom", RANDOM, **{"from": OWNER, "to": ANOTHER, "amount": 10})

        assert result.kind == ErrorKind.INSUFFICIENT_BALANCE
        assert token.allowance(OWNER, RANDOM) == 10
        assert token.balance_of(ANOTHER) == 0

    def test_spender_spends_what_owner_has(self, token):
        token.call("approve", OWNER, spender=RANDOM, amount=10)
        assert token.allowance(OWNER, RANDOM) == 10

        result = token.call("transferFrom", RANDOM, **{"from": OWNER, "to": ANOTHER, "amount": 10})

        assert result.success
        assert token.allowance(OWNER, RANDOM) == 0
        assert token.balance_of(ANOTHER) == 10
        assert token.balance_of(OWNER) == INITIAL_SUPPLY - 10
