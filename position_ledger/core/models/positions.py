"""
Positions table.

Groups positions by quote asset. Each bucket carries a settled scalar balance
in its asset plus the positions quoted in that asset.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from loguru import logger

from position_ledger.core.constants import TREE_LAST, TREE_MIDDLE
from position_ledger.core.exceptions.ledger import BucketInvariantError, ValidationError
from position_ledger.core.models.asset import Asset
from position_ledger.core.models.holding import Reversed
from position_ledger.core.models.instrument import Instrument, Symbol
from position_ledger.core.models.position import Position
from position_ledger.core.types.numeric import ZERO
from position_ledger.core.utils.decorators import log_ledger_operation, validate_inputs

if TYPE_CHECKING:
    from position_ledger.core.models.valuation import PositionsExpr, ValuationTree


@dataclass
class Bucket:
    """Settled value and open positions of a single quote asset."""

    value: Any = ZERO
    positions: dict[Symbol, Position] = field(default_factory=dict)

    def insert(self, position: Position, asset: Asset) -> None:
        """Merge a position into this bucket, keeping the caller's object untouched."""
        if position.instrument.quote != asset:
            raise BucketInvariantError(str(position.instrument), str(position.instrument.quote), str(asset))
        existing = self.positions.get(position.instrument.symbol)
        if existing is None:
            self.positions[position.instrument.symbol] = position.copy()
        else:
            existing.holding += position.holding

    def merge(self, other: "Bucket", asset: Asset) -> None:
        self.value = self.value + other.value
        for position in list(other.positions.values()):
            self.insert(position, asset)

    def concentrate(self) -> Any:
        """Move every position's value into the settled balance."""
        taken = ZERO
        for position in self.positions.values():
            taken = taken + position.take()
        self.value = self.value + taken
        return taken

    def copy(self) -> "Bucket":
        return Bucket(self.value, {symbol: p.copy() for symbol, p in self.positions.items()})

    def render(self, asset: Asset) -> list[str]:
        lines = [f"{asset} => {self.value} {asset}"]
        shown = [(symbol, p) for symbol, p in self.positions.items() if not p.is_zero()]
        for idx, (symbol, position) in enumerate(shown):
            glyph = TREE_LAST if idx == len(shown) - 1 else TREE_MIDDLE
            lines.append(f"{glyph}{symbol} => {position}")
        return lines


class Positions:
    """A table of positions keyed by quote asset.

    Invariant: every position lives in the bucket of its instrument's quote asset.

    ``+=`` accepts another table, a Position, ``(value, asset)``,
    ``(price, size, instrument)``, ``(price, size, value, instrument)`` or a
    ``Reversed`` wrapping one of the instrument tuples.
    """

    def __init__(self) -> None:
        self._buckets: dict[Asset, Bucket] = {}

    @classmethod
    def from_position(cls, position: Position) -> "Positions":
        return cls().insert_position(position)

    @classmethod
    def from_value(cls, value: Any, asset: Asset) -> "Positions":
        return cls().insert_value(value, asset)

    def _bucket(self, asset: Asset) -> Bucket:
        bucket = self._buckets.get(asset)
        if bucket is None:
            bucket = self._buckets[asset] = Bucket()
        return bucket

    def insert_position(self, position: Position) -> "Positions":
        """Insert a position, merging into an existing one on the same instrument."""
        if not isinstance(position, Position):
            raise ValidationError(f"Expected Position, got {type(position).__name__}")
        quote = position.instrument.quote
        self._bucket(quote).insert(position, quote)
        logger.debug(f"Inserted {position.instrument} ({position}) into {quote} bucket")
        return self

    @validate_inputs
    def insert_value(self, value: Any, asset: Asset) -> "Positions":
        """Add ``value`` to the settled balance of ``asset``."""
        current = self.get_value(asset)
        total = value if current is None else current + value
        self._bucket(asset).value = total
        return self

    @validate_inputs
    def set_value(self, value: Any, asset: Asset) -> "Positions":
        """Overwrite the settled balance of ``asset``."""
        self._bucket(asset).value = value
        return self

    def get_position(self, instrument: Instrument) -> Position | None:
        """Return the stored position of ``instrument`` (live object), or None."""
        bucket = self._buckets.get(instrument.quote)
        if bucket is None:
            return None
        return bucket.positions.get(instrument.symbol)

    def get_value(self, asset: Asset) -> Any | None:
        """Return the settled balance of ``asset``, or None if there is no bucket."""
        bucket = self._buckets.get(asset)
        return None if bucket is None else bucket.value

    def get_bucket(self, asset: Asset) -> Bucket | None:
        return self._buckets.get(asset)

    def assets(self) -> list[Asset]:
        return list(self._buckets)

    def positions(self) -> Iterator[Position]:
        for bucket in self._buckets.values():
            yield from bucket.positions.values()

    def items(self) -> Iterator[tuple[Asset, Bucket]]:
        yield from self._buckets.items()

    @log_ledger_operation
    def concentrate(self) -> "Positions":
        """Move every open position's value into its bucket's settled balance."""
        for bucket in self._buckets.values():
            bucket.concentrate()
        return self

    def merge(self, other: "Positions") -> "Positions":
        """Add another table into this one; ``other`` is left unchanged."""
        if other is self:
            other = self.copy()
        for asset, bucket in other.items():
            existing = self._buckets.get(asset)
            if existing is None:
                self._buckets[asset] = bucket.copy()
            else:
                existing.merge(bucket, asset)
        return self

    def copy(self) -> "Positions":
        table = Positions()
        table._buckets = {asset: bucket.copy() for asset, bucket in self._buckets.items()}
        return table

    def as_expr(self) -> "PositionsExpr":
        """Snapshot this table as a valuation expression."""
        from position_ledger.core.models.valuation import PositionsExpr

        return PositionsExpr(self)

    def as_tree(self, root: Asset) -> "ValuationTree":
        """Snapshot this table as a valuation tree rooted at ``root``."""
        return self.as_expr().tree(root)

    def _add_trade(self, entry: Any) -> None:
        if isinstance(entry, Positions):
            self.merge(entry)
        elif isinstance(entry, Position):
            self.insert_position(entry)
        elif (
            isinstance(entry, Reversed)
            and isinstance(entry.inner, tuple)
            and entry.inner
            and isinstance(entry.inner[-1], Instrument)
        ):
            *trade, instrument = entry.inner
            self.insert_position(Position(instrument, Reversed(tuple(trade))))
        elif isinstance(entry, tuple) and len(entry) == 2 and isinstance(entry[1], Asset):
            self.insert_value(*entry)
        elif isinstance(entry, tuple) and len(entry) in (3, 4) and isinstance(entry[-1], Instrument):
            *trade, instrument = entry
            self.insert_position(Position(instrument, tuple(trade)))
        else:
            raise ValidationError(f"Cannot add {entry!r} to a positions table")

    def __iadd__(self, entry: Any) -> "Positions":
        self._add_trade(entry)
        return self

    def __add__(self, entry: Any) -> "Positions":
        table = self.copy()
        table._add_trade(entry)
        return table

    def __len__(self) -> int:
        return len(self._buckets)

    def __contains__(self, asset: object) -> bool:
        return asset in self._buckets

    def __str__(self) -> str:
        lines: list[str] = []
        for asset, bucket in self._buckets.items():
            lines.extend(bucket.render(asset))
        return "\n".join(lines)
