"""
Amount - the ledger's uint256 quantity type.

Python ints are unbounded and signed, so the ledger cannot lean on the type
system the way a contract VM does. Every amount is instead checked on the
way in: `check_amount` for values that claim to already be amounts, and
`coerce_amount` for caller-native numbers decoded at the request boundary.
Both reject with ValueOutOfBounds before any state is read or written.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

from buidl.core.token.errors import ValueOutOfBounds
from buidl.utils.validation import MAX_AMOUNT, validate_integer


def check_amount(amount: Any, field: str = "amount") -> int:
    """
    Assert that an amount is a uint256.

    Raises:
        ValueOutOfBounds: If the value is not an int in [0, 2**256 - 1]
    """
    valid, _ = validate_integer(amount, field)
    if not valid:
        raise ValueOutOfBounds(amount, field)
    return amount


def coerce_amount(value: Any, field: str = "amount") -> int:
    """
    Convert a caller-native number into a uint256 amount.

    Accepts ints, integral floats and Decimals, and base-10 integer strings.
    Anything negative, fractional, boolean, non-numeric or wider than
    uint256 is rejected.

    Args:
        value: Raw value from the caller
        field: Parameter name reported in the error

    Returns:
        The amount as int

    Raises:
        ValueOutOfBounds: If the value cannot be represented
    """
    if isinstance(value, bool):
        raise ValueOutOfBounds(value, field)

    if isinstance(value, int):
        return check_amount(value, field)

    if isinstance(value, (float, Decimal, str)):
        try:
            number = Decimal(value.strip() if isinstance(value, str) else value)
        except (InvalidOperation, ValueError):
            raise ValueOutOfBounds(value, field) from None
        if not number.is_finite() or number != number.to_integral_value():
            raise ValueOutOfBounds(value, field)
        # Range check on the Decimal: int() of "1e100000000" expands every digit
        if number < 0 or number > MAX_AMOUNT:
            raise ValueOutOfBounds(value, field)
        if number.is_zero():
            return 0
        return check_amount(int(number), field)

    raise ValueOutOfBounds(value, field)


def fits(value: int) -> bool:
    """True if value is a representable amount."""
    return 0 <= value <= MAX_AMOUNT
