"""
Pydantic schemas for structured encode/decode of ledger state.

Numbers travel as strings so Decimal and Fraction values survive exactly;
decoding picks the number type.
"""

from collections.abc import Callable
from decimal import Decimal
from fractions import Fraction
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from position_ledger.core.exceptions.ledger import SymbolParseError
from position_ledger.core.models.asset import Asset
from position_ledger.core.models.holding import Holding
from position_ledger.core.models.instrument import Instrument, Symbol
from position_ledger.core.models.position import Position
from position_ledger.core.models.positions import Positions
from position_ledger.core.types.numeric import is_number, to_decimal

NumberType = Callable[[str], Any]


def parse_number(text: str, number_type: NumberType = Decimal) -> Any:
    """Parse encoded number text into ``number_type``.

    Fraction text such as ``"1/3"`` is accepted for Decimal decoding and
    rounded to the active context precision.
    """
    if number_type is Decimal and "/" in text:
        return to_decimal(Fraction(text))
    return number_type(text)


def _number_text(value: Any) -> str:
    if isinstance(value, str):
        try:
            Fraction(value)
        except (ValueError, ZeroDivisionError) as e:
            raise ValueError(f"not a number: {value!r}") from e
        return value
    if is_number(value):
        return str(value)
    raise ValueError(f"not a number: {value!r}")


class HoldingModel(BaseModel):
    """Encoded canonical holding."""

    price: str = Field(default="1", description="Canonical quote-per-base price")
    size: str = Field(default="0", description="Signed size in the base asset")
    value: str = Field(default="0", description="Unfolded value in the quote asset")

    @field_validator("price", "size", "value", mode="before")
    @classmethod
    def validate_number_text(cls, v: Any) -> str:
        """Accept numbers or numeric text and store the text form."""
        return _number_text(v)

    @classmethod
    def from_holding(cls, holding: Holding) -> "HoldingModel":
        return cls(price=holding.price, size=holding.size, value=holding.value)

    def to_holding(self, number_type: NumberType = Decimal) -> Holding:
        return Holding(
            parse_number(self.price, number_type),
            parse_number(self.size, number_type),
            parse_number(self.value, number_type),
        )


class InstrumentModel(BaseModel):
    """Encoded instrument, keyed by its canonical symbol text."""

    symbol: str = Field(..., description="BASE-QUOTE or PREFIX:BODY")
    base: str
    quote: str
    prefer_reversed: bool = Field(default=False, description="Display in inverse terms")

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v: str) -> str:
        """Validate and canonicalize the symbol text."""
        try:
            return Symbol.parse(v).text
        except SymbolParseError as e:
            raise ValueError(str(e)) from e

    @field_validator("base", "quote")
    @classmethod
    def validate_asset(cls, v: str) -> str:
        """Validate and normalize an asset token."""
        try:
            return Asset.parse(v).token
        except SymbolParseError as e:
            raise ValueError(str(e)) from e

    @classmethod
    def from_instrument(cls, instrument: Instrument) -> "InstrumentModel":
        return cls(
            symbol=instrument.symbol.text,
            base=instrument.base.token,
            quote=instrument.quote.token,
            prefer_reversed=instrument.prefer_reversed,
        )

    def to_instrument(self) -> Instrument:
        return Instrument(
            Symbol.parse(self.symbol), Asset(self.base), Asset(self.quote), self.prefer_reversed
        )


class PositionModel(BaseModel):
    """Encoded position."""

    instrument: InstrumentModel
    holding: HoldingModel = Field(default_factory=HoldingModel)

    @classmethod
    def from_position(cls, position: Position) -> "PositionModel":
        return cls(
            instrument=InstrumentModel.from_instrument(position.instrument),
            holding=HoldingModel.from_holding(position.holding),
        )

    def to_position(self, number_type: NumberType = Decimal) -> Position:
        return Position(self.instrument.to_instrument(), self.holding.to_holding(number_type))


class BucketModel(BaseModel):
    """Encoded bucket of a positions table."""

    asset: str
    value: str = "0"
    positions: list[PositionModel] = Field(default_factory=list)

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, v: Any) -> str:
        return _number_text(v)

    @model_validator(mode="after")
    def validate_quotes(self) -> "BucketModel":
        """Every position must be quoted in the bucket's asset."""
        try:
            asset = Asset.parse(self.asset).token
        except SymbolParseError as e:
            raise ValueError(str(e)) from e
        for position in self.positions:
            if position.instrument.quote != asset:
                raise ValueError(
                    f"Position {position.instrument.symbol} is quoted in "
                    f"{position.instrument.quote}, not {asset}"
                )
        self.asset = asset
        return self


class PositionsModel(BaseModel):
    """Encoded positions table."""

    buckets: list[BucketModel] = Field(default_factory=list)

    @classmethod
    def from_positions(cls, table: Positions) -> "PositionsModel":
        return cls(
            buckets=[
                BucketModel(
                    asset=asset.token,
                    value=bucket.value,
                    positions=[PositionModel.from_position(p) for p in bucket.positions.values()],
                )
                for asset, bucket in table.items()
            ]
        )

    def to_positions(self, number_type: NumberType = Decimal) -> Positions:
        table = Positions()
        for bucket in self.buckets:
            asset = Asset(bucket.asset)
            table.insert_value(parse_number(bucket.value, number_type), asset)
            for position in bucket.positions:
                table.insert_position(position.to_position(number_type))
        return table
