"""Checked unsigned arithmetic matching the on-chain program's integer widths.

The program stores counters as u64 and performs multiply-then-divide in u128.
Python integers never overflow, so these helpers check the same bounds
explicitly and fail loudly instead of silently producing impossible numbers.
"""

from ..constants import U64_MAX, U128_MAX
from ..errors import AccountingError, ArithmeticOverflowError


def checked_u64(value: int, operation: str = "u64") -> int:
    """Return value if it fits in u64, raise otherwise."""
    if value < 0:
        raise AccountingError(f"Negative result in {operation}: {value}")
    if value > U64_MAX:
        raise ArithmeticOverflowError(operation, value, U64_MAX)
    return value


def mul_div(a: int, b: int, c: int, operation: str = "mul_div") -> int:
    """
    Compute floor(a * b / c) with a u128 intermediate and a u64 result.

    Args:
        a: First factor (non-negative)
        b: Second factor (non-negative)
        c: Divisor (positive)
        operation: Label used in error messages

    Returns:
        Truncated quotient

    Raises:
        AccountingError: If c is zero or an operand is negative
        ArithmeticOverflowError: If the product exceeds u128 or the
            quotient exceeds u64
    """
    if c == 0:
        raise AccountingError(f"Division by zero in {operation}")
    if a < 0 or b < 0 or c < 0:
        raise AccountingError(f"Negative operand in {operation}: ({a}, {b}, {c})")

    product = a * b
    if product > U128_MAX:
        raise ArithmeticOverflowError(f"{operation} (intermediate)", product, U128_MAX)

    return checked_u64(product // c, operation)


def saturating_sub(a: int, b: int) -> int:
    """Subtract, clamping at zero."""
    return max(0, a - b)
