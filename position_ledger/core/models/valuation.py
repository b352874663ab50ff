"""
Valuation engine.

Folds a positions table into a single equity figure expressed in a chosen
root asset. Every bucket is valued in its own asset first (settled balance
plus the closing value of each position); a non-root bucket is then treated as
a synthetic spot position in ``(bucket_asset, root)`` and closed at that pair's
price.

Views own a deep copy of the table taken at construction, so later mutation of
the table never leaks into a live view. Evaluation is all-or-nothing: a single
missing price yields None.
"""

from collections.abc import Iterator
from typing import Any

from loguru import logger

from position_ledger.core.constants import REVERSED_MARK, UNDEFINED_PRICE
from position_ledger.core.models.asset import Asset
from position_ledger.core.models.holding import Holding
from position_ledger.core.models.instrument import Instrument
from position_ledger.core.models.position import Position, close_holding
from position_ledger.core.models.positions import Bucket, Positions
from position_ledger.core.protocols import PriceMap, Valuer
from position_ledger.core.types.numeric import ZERO, is_negative, is_positive, is_zero, reciprocal
from position_ledger.core.utils.decorators import log_ledger_operation
from position_ledger.core.utils.validation import validate_asset


def price_valuer(prices: PriceMap) -> Valuer:
    """Build a valuer that closes each holding at the price of its instrument.

    Prices are looked up by symbol and read in the instrument's display terms.
    """

    def value(instrument: Instrument, holding: Holding) -> Any | None:
        price = prices.get(instrument.symbol)
        if price is None:
            logger.debug(f"Missing price for {instrument}; valuation aborted")
            return None
        return close_holding(instrument, holding, price)

    return value


def _render_position(position: Position) -> str:
    holding = position.holding
    instrument = position.instrument
    if not instrument.prefer_reversed:
        return f"({holding.price}, {holding.size} {instrument.base})"
    price = UNDEFINED_PRICE if is_zero(holding.price) else reciprocal(holding.price)
    return f"({price}, {-holding.size} {instrument.base}){REVERSED_MARK}"


def _render_bucket(asset: Asset, bucket: Bucket, children: list[str] | None = None) -> str:
    parts = list(children or [])
    subtotal = bucket.value
    for position in bucket.positions.values():
        parts.append(_render_position(position))
        subtotal = subtotal + position.value()
    text = " + ".join(parts)
    if not parts:
        return f"- {abs(subtotal)} {asset}" if is_negative(subtotal) else f"{subtotal} {asset}"
    if is_positive(subtotal):
        return f"{text} + {subtotal} {asset}"
    if is_negative(subtotal):
        return f"{text} - {abs(subtotal)} {asset}"
    return text


class ValuationTree:
    """A positions snapshot rooted at one asset.

    The root bucket is valued directly; every other bucket becomes a child
    linked to the root through a synthetic spot instrument.
    """

    def __init__(self, root: Asset, buckets: dict[Asset, Bucket]) -> None:
        self.root = validate_asset(root, "root")
        self._buckets = buckets

    def children(self) -> Iterator[tuple[Instrument, Asset, Bucket]]:
        """Non-root buckets with the spot instrument linking each to the root."""
        for asset, bucket in self._buckets.items():
            if asset != self.root:
                yield Instrument.spot(asset, self.root), asset, bucket

    def instruments(self) -> Iterator[Instrument]:
        """Every instrument whose price the evaluation needs."""
        for bucket in self._buckets.values():
            for position in bucket.positions.values():
                yield position.instrument
        for pair, _, _ in self.children():
            yield pair

    def eval(self, prices: PriceMap) -> Any | None:
        """Evaluate total equity in the root asset.

        Args:
            prices: Price of each instrument keyed by symbol, in display terms

        Returns:
            Equity in the root asset, or None if any required price is missing
        """
        return self.eval_with(price_valuer(prices))

    def eval_with(self, valuer: Valuer) -> Any | None:
        """Evaluate total equity with caller-supplied per-instrument valuation.

        ``valuer(instrument, holding)`` returns the value of ``holding`` in the
        instrument's quote asset, or None to abort. Synthetic spot positions
        are passed as ``Holding(0, bucket_value)``.
        """
        total = ZERO
        for asset, bucket in self._buckets.items():
            subtotal = bucket.value
            for position in bucket.positions.values():
                value = valuer(position.instrument, position.holding.copy())
                if value is None:
                    return None
                subtotal = subtotal + value
            if asset != self.root:
                subtotal = valuer(Instrument.spot(asset, self.root), Holding(ZERO, subtotal))
                if subtotal is None:
                    return None
            total = total + subtotal
        return total

    def __str__(self) -> str:
        children = [f"[{_render_bucket(asset, bucket)}]" for _, asset, bucket in self.children()]
        root_bucket = self._buckets.get(self.root)
        if root_bucket is None:
            root_bucket = Bucket()
        return _render_bucket(self.root, root_bucket, children)


class PositionsExpr:
    """Unrooted valuation view over a positions table snapshot.

    The root asset is chosen per query.
    """

    def __init__(self, table: Positions) -> None:
        self._buckets = {asset: bucket.copy() for asset, bucket in table.items()}

    def tree(self, root: Asset) -> ValuationTree:
        return ValuationTree(root, self._buckets)

    def instruments(self, root: Asset) -> list[Instrument]:
        """Instruments whose prices must be supplied to evaluate in ``root``."""
        return list(self.tree(root).instruments())

    @log_ledger_operation
    def eval(self, root: Asset, prices: PriceMap) -> Any | None:
        """Evaluate total equity in ``root``; None if a price is missing."""
        return self.tree(root).eval(prices)

    def eval_with(self, root: Asset, valuer: Valuer) -> Any | None:
        """Evaluate total equity in ``root`` with a custom valuer."""
        return self.tree(root).eval_with(valuer)

    def __str__(self) -> str:
        return " + ".join(f"[{_render_bucket(asset, bucket)}]" for asset, bucket in self._buckets.items())
