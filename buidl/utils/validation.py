"""
Input Validation - bounds checks for values entering the ledger.

Provides validation for external inputs to prevent:
- Negative amounts
- Integer overflows past uint256
- Malformed addresses
"""

from typing import Any, Tuple

from buidl.crypto import is_valid_address

# =============================================================================
# Constants
# =============================================================================

AMOUNT_BITS = 256
MIN_AMOUNT = 0
MAX_AMOUNT = 2**AMOUNT_BITS - 1


# =============================================================================
# Validation Functions
# =============================================================================


def validate_integer(
    value: Any,
    name: str,
    min_val: int = MIN_AMOUNT,
    max_val: int = MAX_AMOUNT,
) -> Tuple[bool, str]:
    """
    Validate integer within bounds.

    Args:
        value: Value to validate
        name: Field name for errors
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        (is_valid, error_message)
    """
    # bool is an int subclass but never a quantity
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{name} must be int, got {type(value).__name__}"

    # messages stay value-free: str() of a huge int hits the digit limit
    if value < min_val:
        return False, f"{name} must be >= {min_val}"

    if value > max_val:
        return False, f"{name} must be <= {max_val} ({value.bit_length()} bits given)"

    return True, ""


def validate_amount(amount: Any) -> Tuple[bool, str]:
    """Validate a token amount."""
    return validate_integer(amount, "amount", MIN_AMOUNT, MAX_AMOUNT)


def validate_address(address: Any) -> Tuple[bool, str]:
    """Validate a 0x-prefixed 20-byte hex address."""
    if not isinstance(address, str):
        return False, f"address must be str, got {type(address).__name__}"
    if not is_valid_address(address):
        return False, f"address must be 0x followed by 40 hex chars, got {address!r}"
    return True, ""
