"""
Instrument identifiers.

A ``Symbol`` is the identity of a tradable instrument; an ``Instrument``
attaches the base/quote assets and the display preference to that identity.
Equality and hashing of both are defined solely on the canonical symbol text.
"""

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from position_ledger.core.constants import DERIVATIVE_SEPARATOR, SPOT_SEPARATOR
from position_ledger.core.enums import SymbolKind
from position_ledger.core.exceptions.ledger import SymbolParseError, ValidationError
from position_ledger.core.models.asset import Asset

if TYPE_CHECKING:
    from position_ledger.core.models.position import Position


@dataclass(frozen=True, order=True)
class Symbol:
    """Canonical instrument symbol.

    Spot pairs read ``BASE-QUOTE`` and derivatives read ``PREFIX:BODY``.
    """

    text: str
    kind: SymbolKind = field(init=False, compare=False)

    def __post_init__(self) -> None:
        text = self.text.strip().upper() if isinstance(self.text, str) else ""
        if not text:
            raise SymbolParseError(str(self.text), "empty symbol")
        object.__setattr__(self, "text", text)
        object.__setattr__(self, "kind", SymbolKind.detect(text))

    @classmethod
    def spot(cls, base: Asset, quote: Asset) -> "Symbol":
        """Create the symbol of a spot pair."""
        return cls(f"{base}{SPOT_SEPARATOR}{quote}")

    @classmethod
    def derivative(cls, prefix: str, body: str) -> "Symbol":
        """Create the symbol of a derivative contract.

        Args:
            prefix: Contract family, e.g. ``SWAP`` or ``FUTURES``
            body: Exchange-specific contract name, e.g. ``BTC-USD-SWAP``

        Raises:
            SymbolParseError: If prefix or body is empty or the prefix contains a separator
        """
        prefix = prefix.strip().upper()
        body = body.strip().upper()
        if not prefix or not body or DERIVATIVE_SEPARATOR in prefix:
            raise SymbolParseError(f"{prefix}{DERIVATIVE_SEPARATOR}{body}", "invalid derivative symbol")
        return cls(f"{prefix}{DERIVATIVE_SEPARATOR}{body}")

    @classmethod
    def parse(cls, text: str) -> "Symbol":
        """Parse canonical symbol text.

        Args:
            text: ``BASE-QUOTE`` or ``PREFIX:BODY``

        Returns:
            The parsed Symbol

        Raises:
            SymbolParseError: If the text matches neither shape
        """
        if not isinstance(text, str) or not text.strip():
            raise SymbolParseError(str(text), "empty symbol")
        text = text.strip()
        if SymbolKind.detect(text).is_derivative:
            prefix, _, body = text.partition(DERIVATIVE_SEPARATOR)
            return cls.derivative(prefix, body)
        parts = text.split(SPOT_SEPARATOR)
        if len(parts) != 2:
            raise SymbolParseError(text, "spot symbol must be BASE-QUOTE")
        return cls.spot(Asset(parts[0]), Asset(parts[1]))

    @property
    def prefix(self) -> str | None:
        """Contract family of a derivative, None for spot pairs."""
        if self.kind.is_spot:
            return None
        return self.text.partition(DERIVATIVE_SEPARATOR)[0]

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Instrument:
    """A tradable instrument.

    ``prefer_reversed`` marks inverse (coin-margined) contracts whose price and
    size are displayed as the inverse/negation of the stored quote-per-base form.
    It is an attribute, not part of the identity.
    """

    symbol: Symbol
    base: Asset = field(compare=False)
    quote: Asset = field(compare=False)
    prefer_reversed: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.symbol, Symbol):
            raise ValidationError(f"symbol must be Symbol, got {type(self.symbol).__name__}")
        if not isinstance(self.base, Asset) or not isinstance(self.quote, Asset):
            raise ValidationError("base and quote must be Asset instances")
        if self.base == self.quote:
            raise ValidationError(f"Instrument {self.symbol} cannot have identical base and quote {self.base}")

    @classmethod
    def spot(cls, base: Asset, quote: Asset) -> "Instrument":
        """Create a spot pair instrument."""
        return cls(Symbol.spot(base, quote), base, quote)

    @classmethod
    def derivative(cls, prefix: str, body: str, base: Asset, quote: Asset) -> "Instrument":
        """Create a derivative instrument.

        Examples:
            >>> Instrument.derivative("SWAP", "BTC-USDT-SWAP", Asset("BTC"), Asset("USDT")).symbol.text
            'SWAP:BTC-USDT-SWAP'
        """
        return cls(Symbol.derivative(prefix, body), base, quote)

    def with_reversed(self, prefer: bool = True) -> "Instrument":
        """Return a copy with the given reversed preference."""
        return replace(self, prefer_reversed=prefer)

    @property
    def is_derivative(self) -> bool:
        """Check if the instrument is a derivative."""
        return self.symbol.kind.is_derivative

    def position(self, trade: Any = None) -> "Position":
        """Create a Position on this instrument from a trade input."""
        from position_ledger.core.models.position import Position

        return Position(self, trade)

    def __str__(self) -> str:
        return self.symbol.text
