"""
Unit tests for PositionsSummaryGenerator.
Testing DataFrame views and summary statistics of positions tables.
"""

from fractions import Fraction

import pandas as pd
import pytest

from position_ledger.core.models.asset import Asset
from position_ledger.core.models.holding import Reversed
from position_ledger.core.models.instrument import Instrument
from position_ledger.core.models.position import Position
from position_ledger.core.models.positions import Positions
from position_ledger.infrastructure.reporting import PositionsSummaryGenerator

BTC, ETH, USD, USDT = Asset("BTC"), Asset("ETH"), Asset("USD"), Asset("USDT")


class TestPositionsSummaryGenerator:
    """Test suite for PositionsSummaryGenerator."""

    @pytest.fixture
    def generator(self) -> PositionsSummaryGenerator:
        """Create summary generator instance."""
        return PositionsSummaryGenerator()

    @pytest.fixture
    def table(self) -> Positions:
        """Create a table with plain, reversed and flat positions."""
        inverse = Instrument.derivative("SWAP", "BTC-USD-SWAP", USD, BTC).with_reversed()
        table = Positions()
        table += (Fraction(-16000), USDT)
        table += (Fraction(17000), Fraction(2), Fraction(5), Instrument.spot(BTC, USDT))
        table += Reversed((Fraction(16000), Fraction(-16000), inverse))
        table += Position(Instrument.spot(ETH, BTC))
        return table

    def test_should_build_positions_frame(self, generator: PositionsSummaryGenerator, table: Positions) -> None:
        """Test one row per position in display terms."""
        frame = generator.positions_frame(table)

        assert list(frame.columns) == [
            "quote",
            "symbol",
            "base",
            "reversed",
            "price",
            "size",
            "value",
            "notional",
        ]
        assert len(frame) == 3

        spot = frame[frame["symbol"] == "BTC-USDT"].iloc[0]
        assert spot["quote"] == "USDT"
        assert spot["price"] == 17000
        assert spot["value"] == 5
        assert spot["notional"] == 34000

        swap = frame[frame["symbol"] == "SWAP:BTC-USD-SWAP"].iloc[0]
        assert bool(swap["reversed"]) is True
        assert swap["price"] == 16000
        assert swap["size"] == -16000
        assert swap["notional"] == 1

    def test_should_keep_exact_numbers(self, generator: PositionsSummaryGenerator, table: Positions) -> None:
        """Test numeric columns hold the original number objects."""
        frame = generator.positions_frame(table)
        swap = frame[frame["symbol"] == "SWAP:BTC-USD-SWAP"].iloc[0]
        assert isinstance(swap["price"], Fraction)

    def test_should_build_values_frame(self, generator: PositionsSummaryGenerator, table: Positions) -> None:
        """Test one row per bucket."""
        frame = generator.values_frame(table)

        assert list(frame.columns) == ["asset", "value", "positions"]
        assert frame["asset"].tolist() == ["USDT", "BTC"]
        assert frame["value"].tolist() == [-16000, 0]
        assert frame["positions"].tolist() == [1, 2]

    def test_should_return_empty_frames(self, generator: PositionsSummaryGenerator) -> None:
        """Test empty tables give empty frames with columns."""
        frame = generator.positions_frame(Positions())
        assert isinstance(frame, pd.DataFrame)
        assert frame.empty
        assert "notional" in frame.columns

    def test_should_summarize_table(self, generator: PositionsSummaryGenerator, table: Positions) -> None:
        """Test summary counts."""
        summary = generator.get_summary(table)

        assert summary["status"] == "valid"
        assert summary["buckets"] == 2
        assert summary["positions"] == 3
        assert summary["open_positions"] == 2
        assert summary["flat_positions"] == 1
        assert summary["reversed_positions"] == 1
        assert summary["positions_per_quote"] == {"BTC": 2, "USDT": 1}

    def test_should_summarize_empty_table(self, generator: PositionsSummaryGenerator) -> None:
        """Test summary of a table with values but no positions."""
        summary = generator.get_summary(Positions.from_value(1, USDT))
        assert summary == {"status": "empty", "buckets": 1, "positions": 0}
