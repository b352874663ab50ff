"""
Position domain model.

Binds a canonical Holding to an instrument and presents it in the
instrument's preferred quoting direction.
"""

from dataclasses import InitVar, dataclass, field
from typing import TYPE_CHECKING, Any

from loguru import logger

from position_ledger.core.constants import REVERSED_MARK, UNDEFINED_PRICE
from position_ledger.core.exceptions.ledger import InstrumentMismatchError, ValidationError
from position_ledger.core.models.holding import Holding, to_holding
from position_ledger.core.models.instrument import Instrument
from position_ledger.core.types.numeric import is_lossy, is_negative, is_zero, reciprocal
from position_ledger.core.utils.validation import validate_instrument

if TYPE_CHECKING:
    from position_ledger.core.models.valuation import ValuationTree


@dataclass(eq=False)
class Position:
    """A holding on one instrument.

    ``holding`` is always stored in canonical form. ``price()`` and ``size()``
    follow the instrument's reversed preference; everything else works on the
    canonical triple.
    """

    instrument: Instrument
    holding: Any = None
    warn_lossy: InitVar[bool] = field(default=True, kw_only=True)

    def __post_init__(self, warn_lossy: bool) -> None:
        """Validate the instrument and coerce the trade input."""
        validate_instrument(self.instrument)
        self.holding = Holding() if self.holding is None else to_holding(self.holding)
        if warn_lossy and any(is_lossy(x) for x in (self.holding.price, self.holding.size, self.holding.value)):
            logger.warning(f"Position {self.instrument} uses float arithmetic; results are lossy")

    def copy(self) -> "Position":
        # the source position already warned
        return Position(self.instrument, self.holding.copy(), warn_lossy=False)

    def price(self) -> Any | None:
        """Average price in display terms.

        Returns:
            The canonical price, or its inverse for reversed-preferring
            instruments (None when the canonical price is zero)
        """
        if not self.instrument.prefer_reversed:
            return self.holding.price
        if is_zero(self.holding.price):
            return None
        return reciprocal(self.holding.price)

    def size(self) -> Any:
        """Size in display terms (negated for reversed-preferring instruments)."""
        if self.instrument.prefer_reversed:
            return -self.holding.size
        return self.holding.size

    def value(self) -> Any:
        """Unfolded value, in the quote asset."""
        return self.holding.value

    def notional_value(self) -> Any:
        """Canonical ``price * size``, in the quote asset."""
        return self.holding.notional()

    def closed(self, price: Any) -> Any:
        """Value after fully closing at ``price`` without mutating the position.

        Args:
            price: Closing quote in display terms

        Raises:
            InvalidReversedPrice: If the instrument is reversed-preferring and price is zero
        """
        return close_holding(self.instrument, self.holding, price)

    def convert(self, to: Any) -> None:
        """Rebase the holding onto the display price ``to``, keeping it equivalent.

        Raises:
            InvalidReversedPrice: If the instrument is reversed-preferring and ``to`` is zero
        """
        self.holding.convert(canonical_price(self.instrument, to, f"converting {self.instrument}"))

    def converted(self, to: Any) -> "Position":
        position = self.copy()
        position.convert(to)
        return position

    def take(self) -> Any:
        """Extract the position's value, leaving price and size unchanged."""
        return self.holding.take()

    def merge(self, other: "Position") -> None:
        """Move ``other``'s holding into this position.

        ``other`` is left holding the identity.

        Raises:
            InstrumentMismatchError: If the instruments differ
        """
        if other is self:
            raise ValidationError(f"Cannot merge position {self.instrument} into itself")
        if other.instrument != self.instrument:
            raise InstrumentMismatchError(str(self.instrument), str(other.instrument))
        self.holding += other.holding
        other.holding = Holding()

    def is_zero(self) -> bool:
        """Check if both size and value are zero."""
        return is_zero(self.holding.size) and is_zero(self.holding.value)

    def as_tree(self) -> "ValuationTree":
        """View this position as a valuation tree rooted at its quote asset."""
        from position_ledger.core.models.positions import Positions

        return Positions.from_position(self).as_tree(self.instrument.quote)

    def __iadd__(self, trade: Any) -> "Position":
        self.holding += trade
        return self

    def __isub__(self, trade: Any) -> "Position":
        self.holding -= trade
        return self

    def __add__(self, trade: Any) -> "Position":
        return Position(self.instrument, self.holding + trade)

    def __neg__(self) -> "Position":
        return Position(self.instrument, -self.holding)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return self.instrument == other.instrument and self.holding == other.holding

    def __str__(self) -> str:
        price = self.price()
        mark = REVERSED_MARK if self.instrument.prefer_reversed else ""
        text = f"({UNDEFINED_PRICE if price is None else price}, {self.size()} {self.instrument.base}){mark}"
        value = self.value()
        if not is_zero(value):
            sign = "-" if is_negative(value) else "+"
            text += f" {sign} {abs(value)} {self.instrument.quote}"
        return text


def canonical_price(instrument: Instrument, price: Any, operation: str) -> Any:
    """Translate a display price of ``instrument`` into canonical form.

    Raises:
        InvalidReversedPrice: If the instrument is reversed-preferring and price is zero
    """
    if instrument.prefer_reversed:
        return reciprocal(price, operation)
    return price


def close_holding(instrument: Instrument, holding: Holding, price: Any) -> Any:
    """Value of ``holding`` after closing it at the display price of ``instrument``."""
    return holding.closed(canonical_price(instrument, price, f"closing {instrument}"))
