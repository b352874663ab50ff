"""
Numeric helpers for the holding algebra.

The algebra is generic over any number type that supports ``+ - * /``,
comparison with zero, ``abs`` and construction from the integers 0 and 1.
The expected instantiations are:

- ``fractions.Fraction``: exact, every algebraic law holds bit for bit
- ``decimal.Decimal``: exact up to the active context precision (28 digits
  by default); divisions such as a weighted average may round

PRECISION CONSIDERATIONS:
``float`` is accepted but lossy. Repeated merges accumulate rounding error,
so the equivalence checks of ``Holding.__eq__`` may fail for holdings that are
economically identical. Use ``quantize`` before comparing float results.
"""

from decimal import ROUND_HALF_EVEN, Decimal
from fractions import Fraction
from numbers import Number
from typing import Any

from position_ledger.core.constants import FINANCIAL_DECIMALS
from position_ledger.core.exceptions.ledger import InvalidReversedPrice

# Additive and multiplicative identities. Plain ints mix with Decimal,
# Fraction and float without changing the operand's type.
ZERO = 0
ONE = 1


def is_zero(value: Any) -> bool:
    """Check whether a number equals zero."""
    return value == ZERO


def is_positive(value: Any) -> bool:
    """Check whether a number is strictly positive."""
    return value > ZERO


def is_negative(value: Any) -> bool:
    """Check whether a number is strictly negative."""
    return value < ZERO


def same_sign(a: Any, b: Any) -> bool:
    """Check whether two nonzero numbers share a sign.

    Returns False when either operand is zero.
    """
    return (is_positive(a) and is_positive(b)) or (is_negative(a) and is_negative(b))


def is_lossy(value: Any) -> bool:
    """Check whether a number uses binary floating point."""
    return isinstance(value, float)


def is_number(value: Any) -> bool:
    """Check whether a value can take part in holding arithmetic.

    ``bool`` is rejected even though it subclasses ``int``.
    """
    return isinstance(value, Number) and not isinstance(value, bool)


def reciprocal(value: Any, operation: str = "reversed conversion") -> Any:
    """Return ``1 / value``.

    Args:
        value: Number to invert
        operation: Description of the operation for error messages

    Returns:
        The multiplicative inverse, in the operand's number type

    Raises:
        InvalidReversedPrice: If value is zero
    """
    if is_zero(value):
        raise InvalidReversedPrice(value, operation)
    return ONE / value


def to_decimal(value: str | int | float | Fraction | Decimal) -> Decimal:
    """Convert various numeric types to Decimal.

    Floats go through their shortest repr so ``0.1`` becomes ``Decimal("0.1")``.

    Examples:
        >>> to_decimal(0.1)
        Decimal('0.1')
        >>> to_decimal(Fraction(1, 4))
        Decimal('0.25')
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, Fraction):
        return Decimal(value.numerator) / Decimal(value.denominator)
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def quantize(value: Any, places: int = FINANCIAL_DECIMALS) -> Decimal:
    """Round a number to a fixed number of decimal places.

    Args:
        value: Number to round
        places: Decimal places to keep

    Returns:
        Rounded Decimal (banker's rounding)
    """
    exponent = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(exponent, rounding=ROUND_HALF_EVEN)
