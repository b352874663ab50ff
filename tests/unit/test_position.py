"""
Unit tests for Position domain model.
Testing display terms for reversed instruments, merging and closing.
"""

from fractions import Fraction
from unittest.mock import patch

import pytest

from position_ledger.core.exceptions.ledger import (
    InstrumentMismatchError,
    InvalidReversedPrice,
    ValidationError,
)
from position_ledger.core.models.asset import Asset
from position_ledger.core.models.holding import Holding, Reversed
from position_ledger.core.models.instrument import Instrument, Symbol
from position_ledger.core.models.position import Position
from position_ledger.core.models.positions import Positions

BTC, USD, USDT = Asset("BTC"), Asset("USD"), Asset("USDT")


@pytest.fixture
def btc_usdt() -> Instrument:
    return Instrument.spot(BTC, USDT)


@pytest.fixture
def inverse_swap() -> Instrument:
    return Instrument.derivative("SWAP", "BTC-USD-SWAP", USD, BTC).with_reversed()


class TestPositionCreation:
    """Tests for creating positions."""

    def test_should_default_to_identity_holding(self, btc_usdt: Instrument) -> None:
        """Test that a position without a trade is flat."""
        position = Position(btc_usdt)
        assert position.holding.is_identity()
        assert position.is_zero()

    def test_should_coerce_trade_inputs(self, btc_usdt: Instrument) -> None:
        """Test tuple trade input."""
        position = btc_usdt.position((17000, 2))
        assert position.holding == Holding(17000, 2)

    def test_should_reject_non_instrument(self) -> None:
        """Test that the instrument is type checked."""
        with pytest.raises(TypeError, match="instrument must be Instrument"):
            Position("BTC-USDT", (1, 2))  # type: ignore[arg-type]

    def test_should_warn_on_float_arithmetic(self, btc_usdt: Instrument) -> None:
        """Test that float holdings log a lossy-arithmetic warning."""
        with patch("position_ledger.core.models.position.logger") as mock_logger:
            Position(btc_usdt, (17000.0, 1.5))
            mock_logger.warning.assert_called_once()
            assert "lossy" in mock_logger.warning.call_args[0][0]

    def test_should_not_warn_on_exact_numbers(self, btc_usdt: Instrument) -> None:
        """Test that Fraction holdings stay silent."""
        with patch("position_ledger.core.models.position.logger") as mock_logger:
            Position(btc_usdt, (Fraction(17000), Fraction(3, 2)))
            mock_logger.warning.assert_not_called()

    def test_should_warn_once_across_copies_and_valuation(self, btc_usdt: Instrument) -> None:
        """Test that stored copies and valuation snapshots do not repeat the lossy warning."""
        with patch("position_ledger.core.models.position.logger") as mock_logger:
            position = Position(btc_usdt, (17000.0, 1.5))
            mock_logger.warning.reset_mock()

            position.copy()
            table = Positions.from_position(position)
            value = table.as_expr().eval(USDT, {Symbol.spot(BTC, USDT): 18000.0})

            mock_logger.warning.assert_not_called()
            assert value == pytest.approx(1500.0)


class TestPositionDisplayTerms:
    """Tests for price and size in the instrument's preferred direction."""

    def test_should_show_canonical_terms_by_default(self, btc_usdt: Instrument) -> None:
        """Test a plain instrument shows the stored price and size."""
        position = Position(btc_usdt, (17000, 2, 5))
        assert position.price() == 17000
        assert position.size() == 2
        assert position.value() == 5
        assert position.notional_value() == 34000

    def test_should_invert_reversed_instrument(self, inverse_swap: Instrument) -> None:
        """Test a reversed trade round-trips to its display terms."""
        position = Position(inverse_swap, Reversed((Fraction(16000), Fraction(-16000))))

        assert position.holding.price == Fraction(1, 16000)
        assert position.holding.size == 16000
        assert position.price() == 16000
        assert position.size() == -16000

    def test_should_round_trip_reversed_float_input(self, inverse_swap: Instrument) -> None:
        """Test a float reversed trade shows its original terms."""
        position = Position(inverse_swap, Reversed((2.0, 2.0, 3.0)))

        assert (position.holding.price, position.holding.size) == (0.5, -2.0)
        assert (position.price(), position.size(), position.value()) == (2.0, 2.0, 3.0)

    def test_should_return_none_for_zero_reversed_price(self, inverse_swap: Instrument) -> None:
        """Test an undefined display price."""
        position = Position(inverse_swap, Holding(0, 0, 1))
        assert position.price() is None

    def test_should_render_plain_position(self, btc_usdt: Instrument) -> None:
        """Test string rendering with and without value."""
        assert str(Position(btc_usdt, (17000, 2))) == "(17000, 2 BTC)"
        assert str(Position(btc_usdt, (17000, 2, -5))) == "(17000, 2 BTC) - 5 USDT"
        assert str(Position(btc_usdt, (17000, 2, 5))) == "(17000, 2 BTC) + 5 USDT"

    def test_should_render_reversed_position(self, inverse_swap: Instrument) -> None:
        """Test reversed rendering carries the mark."""
        position = Position(inverse_swap, Reversed((Fraction(16000), Fraction(-16000))))
        assert str(position) == "(16000, -16000 USD)*"
        assert str(Position(inverse_swap, Holding(0, 0, 1))) == "(Nan, 0 USD)* + 1 BTC"


class TestPositionClosing:
    """Tests for closing and converting positions."""

    def test_should_close_at_display_price(self, btc_usdt: Instrument) -> None:
        """Test closing a plain long position."""
        position = Position(btc_usdt, (17000, 2))
        assert position.closed(17500) == 1000
        assert position.holding == Holding(17000, 2)

    def test_should_close_reversed_position_at_display_price(self, inverse_swap: Instrument) -> None:
        """Test a short inverse position losing as the price rises."""
        position = Position(inverse_swap, Reversed((Fraction(16000), Fraction(-16000))))
        assert position.closed(Fraction(17000)) == Fraction(-1, 17)

    def test_should_reject_zero_close_on_reversed(self, inverse_swap: Instrument) -> None:
        """Test closing a reversed instrument at zero."""
        position = Position(inverse_swap, Reversed((Fraction(16000), Fraction(-16000))))
        with pytest.raises(InvalidReversedPrice, match="closing SWAP:BTC-USD-SWAP"):
            position.closed(0)

    def test_should_convert_to_display_price(self, inverse_swap: Instrument) -> None:
        """Test convert keeps the position equivalent."""
        position = Position(inverse_swap, Reversed((Fraction(16000), Fraction(-16000))))
        before = position.copy()

        position.convert(Fraction(17000))

        assert position.price() == 17000
        assert position.value() == Fraction(-1, 17)
        assert position == before

    def test_should_return_converted_copy(self, btc_usdt: Instrument) -> None:
        """Test converted() leaves the original untouched."""
        position = Position(btc_usdt, (10, 2))
        converted = position.converted(12)
        assert converted.value() == 4
        assert position.value() == 0

    def test_should_reject_zero_convert_on_reversed(self, inverse_swap: Instrument) -> None:
        """Test converting a reversed instrument to zero."""
        position = Position(inverse_swap, Reversed((Fraction(16000), Fraction(-16000))))
        with pytest.raises(InvalidReversedPrice):
            position.convert(0)

    def test_should_take_value(self, btc_usdt: Instrument) -> None:
        """Test take() leaves price and size."""
        position = Position(btc_usdt, (10, 2, 3))
        assert position.take() == 3
        assert position.holding == Holding(10, 2)


class TestPositionMerge:
    """Tests for merging positions and applying trades."""

    def test_should_move_holding_on_merge(self, btc_usdt: Instrument) -> None:
        """Test merge drains the other position."""
        a = Position(btc_usdt, (10, 2))
        b = Position(btc_usdt, (12, 2))

        a.merge(b)

        assert a.holding == Holding(11, 4)
        assert b.holding.is_identity()

    def test_should_reject_mismatched_instruments(self, btc_usdt: Instrument) -> None:
        """Test merging positions of different instruments."""
        other = Position(Instrument.spot(Asset("ETH"), USDT), (1, 1))
        with pytest.raises(InstrumentMismatchError, match="ETH-USDT into position of BTC-USDT"):
            Position(btc_usdt, (10, 2)).merge(other)

    def test_should_reject_self_merge(self, btc_usdt: Instrument) -> None:
        """Test merging a position into itself."""
        position = Position(btc_usdt, (10, 2))
        with pytest.raises(ValidationError, match="into itself"):
            position.merge(position)

    def test_should_apply_trades_with_operators(self, btc_usdt: Instrument) -> None:
        """Test += and -= with trade inputs."""
        position = Position(btc_usdt)
        position += (10, 2)
        position -= (12, 1)
        assert position.holding == Holding(10, 1, 2)

        added = position + (10, 1)
        assert added.holding == Holding(10, 2, 2)
        assert position.holding == Holding(10, 1, 2)

    def test_should_negate_position(self, btc_usdt: Instrument) -> None:
        """Test unary negation."""
        assert (-Position(btc_usdt, (10, 2))).size() == -2

    def test_should_compare_by_instrument_and_equivalence(self, btc_usdt: Instrument) -> None:
        """Test equality uses the holding equivalence."""
        assert Position(btc_usdt, (5, 2, 8)) == Position(btc_usdt, (1, 2, 0))
        other = Instrument.spot(Asset("ETH"), USDT)
        assert Position(btc_usdt, (1, 2)) != Position(other, (1, 2))
        assert Position(btc_usdt, (1, 2)) != (1, 2)


class TestPositionAsTree:
    """Tests for viewing a position as a valuation tree."""

    def test_should_root_tree_at_quote(self, btc_usdt: Instrument) -> None:
        """Test a single position tree evaluates in its quote asset."""
        tree = Position(btc_usdt, (17000, 2)).as_tree()

        assert tree.root == USDT
        assert tree.eval({Symbol.spot(BTC, USDT): 17500}) == 1000
        assert tree.eval({}) is None
