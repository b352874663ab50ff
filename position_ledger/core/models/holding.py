"""
Holding algebra.

A ``Holding`` is a ``(price, size, value)`` triple in canonical quote-per-base
orientation:

- ``price``: average entry price
- ``size``: signed exposure in the base asset (positive = long)
- ``value``: realized or residual amount in the quote asset not yet folded into ``price``

Merging two holdings keeps a weighted-average cost while exposure grows and
realizes PnL into ``value`` while exposure shrinks or flips. The same economic
state has many triples; two re-expressions are legal:

- Equivalence I: fold ``value`` into ``price`` (``consume``)
- Equivalence II: move to another nominal price and adjust ``value`` (``convert``)

``Holding.__eq__`` compares these equivalence classes, not fields.
"""

from dataclasses import dataclass
from typing import Any

from position_ledger.core.exceptions.ledger import ValidationError
from position_ledger.core.types.numeric import (
    ONE,
    ZERO,
    is_zero,
    reciprocal,
    same_sign,
)
from position_ledger.core.utils.validation import validate_number


@dataclass(eq=False)
class Holding:
    """Canonical (price, size, value) triple. Defaults to the merge identity."""

    price: Any = ONE
    size: Any = ZERO
    value: Any = ZERO

    def __post_init__(self) -> None:
        validate_number(self.price, "price")
        validate_number(self.size, "size")
        validate_number(self.value, "value")

    @classmethod
    def identity(cls) -> "Holding":
        """The merge identity ``(one, zero, zero)``."""
        return cls()

    def copy(self) -> "Holding":
        return Holding(self.price, self.size, self.value)

    def is_identity(self) -> bool:
        """Check if this is exactly the identity triple used to seed folds."""
        return self.price == ONE and is_zero(self.size) and is_zero(self.value)

    def consumed(self) -> "Holding | None":
        """Return an equivalent holding with ``value`` folded into ``price``.

        Returns None if ``size`` is zero.
        """
        if is_zero(self.size):
            return None
        return Holding(self.price - self.value / self.size, self.size, ZERO)

    def consume(self) -> None:
        """Fold ``value`` into ``price`` in place. No effect if ``size`` is zero."""
        if not is_zero(self.size):
            self.price = self.price - self.value / self.size
            self.value = ZERO

    def converted(self, price: Any) -> "Holding":
        """Return an equivalent holding re-expressed at ``price``."""
        validate_number(price, "price")
        return Holding(price, self.size, self.value + (price - self.price) * self.size)

    def convert(self, price: Any) -> None:
        """Re-express this holding at ``price`` in place.

        The price offset times size is added to ``value``, so the holding
        stays equivalent even when it already carries value.
        """
        validate_number(price, "price")
        self.value = self.value + (price - self.price) * self.size
        self.price = price

    def take(self) -> Any:
        """Extract ``value`` and reset it to zero.

        The holding is no longer equivalent to what it was before.
        """
        value, self.value = self.value, ZERO
        return value

    def closed(self, price: Any) -> Any:
        """Value carried after closing the whole size at canonical ``price``."""
        return (self - (price, self.size)).value

    def notional(self) -> Any:
        return self.price * self.size

    def __eq__(self, other: object) -> bool:
        try:
            rhs = to_holding(other)
        except ValidationError:
            return NotImplemented
        if self.size != rhs.size:
            return False
        if self.price == rhs.price and self.value == rhs.value:
            return True
        if is_zero(self.size):
            return self.value == rhs.value
        return self.consumed().price == rhs.consumed().price

    def __add__(self, other: Any) -> "Holding":
        return merge(self, to_holding(other))

    def __radd__(self, other: Any) -> "Holding":
        return merge(to_holding(other), self)

    def __iadd__(self, other: Any) -> "Holding":
        merged = merge(self, to_holding(other))
        self.price, self.size, self.value = merged.price, merged.size, merged.value
        return self

    def __neg__(self) -> "Holding":
        return Holding(self.price, -self.size, -self.value)

    def __sub__(self, other: Any) -> "Holding":
        return merge(self, -to_holding(other))

    def __isub__(self, other: Any) -> "Holding":
        return self.__iadd__(-to_holding(other))


@dataclass(frozen=True)
class Reversed:
    """Marks a trade input as quoted in inverse terms.

    ``Reversed((price, size, value))`` stores as
    ``(1 / price, -size, value)``. Inverse (coin-margined) contracts are
    traded in this form.
    """

    inner: Any

    def to_holding(self) -> Holding:
        """Convert to canonical form.

        Raises:
            InvalidReversedPrice: If the inner price is zero
        """
        inner = to_holding(self.inner)
        return Holding(reciprocal(inner.price), -inner.size, inner.value)


def to_holding(trade: Any) -> Holding:
    """Coerce a trade input to a fresh Holding.

    Accepted inputs: ``Holding``, ``Reversed``, ``(price, size)``,
    ``(price, size, value)`` or a bare number (pure value, no exposure).

    Raises:
        ValidationError: If the input has none of these shapes
    """
    if isinstance(trade, Holding):
        return trade.copy()
    if isinstance(trade, Reversed):
        return trade.to_holding()
    if isinstance(trade, tuple):
        if len(trade) == 2:
            return Holding(trade[0], trade[1])
        if len(trade) == 3:
            return Holding(*trade)
        raise ValidationError(f"Trade tuple must be (price, size) or (price, size, value), got {len(trade)} items")
    return Holding(ONE, ZERO, validate_number(trade, "value"))


def merge(a: Holding, b: Holding) -> Holding:
    """Merge two holdings into a new one.

    The operand with the larger ``|size|`` drives the result; on a tie ``a``
    does. Same-sign sizes average the price; opposite signs realize
    ``(small.price - big.price) * -small.size`` into ``value`` and keep
    ``big.price`` for whatever remains, which also covers flips through zero.
    """
    big, small = (b, a) if abs(b.size) > abs(a.size) else (a, b)
    if is_zero(small.size):
        return Holding(big.price, big.size, big.value + small.value)
    if same_sign(big.size, small.size):
        total = big.size + small.size
        price = (big.price * big.size + small.price * small.size) / total
        return Holding(price, total, big.value + small.value)
    realized = (small.price - big.price) * -small.size
    return Holding(big.price, big.size + small.size, big.value + small.value + realized)
