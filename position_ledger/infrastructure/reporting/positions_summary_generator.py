"""
Positions table summary generation module.

Provides tabular views and summary statistics for a positions table.
"""

from typing import Any

import pandas as pd

from position_ledger.core.models.positions import Positions
from position_ledger.core.types.numeric import is_zero

POSITION_COLUMNS = ["quote", "symbol", "base", "reversed", "price", "size", "value", "notional"]
VALUE_COLUMNS = ["asset", "value", "positions"]


class PositionsSummaryGenerator:
    """
    Positions table summary generator.

    Features:
    - One row per position, in display terms
    - One row per bucket with its settled value
    - Counts of open, flat and reversed-preferring positions
    """

    def positions_frame(self, table: Positions) -> pd.DataFrame:
        """
        Build a DataFrame with one row per position.

        Numbers keep their original type (object columns), so Decimal and
        Fraction values are not rounded through float.

        Args:
            table: Positions table

        Returns:
            DataFrame with POSITION_COLUMNS
        """
        rows = [
            {
                "quote": position.instrument.quote.token,
                "symbol": position.instrument.symbol.text,
                "base": position.instrument.base.token,
                "reversed": position.instrument.prefer_reversed,
                "price": position.price(),
                "size": position.size(),
                "value": position.value(),
                "notional": position.notional_value(),
            }
            for position in table.positions()
        ]
        return pd.DataFrame(rows, columns=POSITION_COLUMNS)

    def values_frame(self, table: Positions) -> pd.DataFrame:
        """Build a DataFrame with one row per bucket."""
        rows = [
            {"asset": asset.token, "value": bucket.value, "positions": len(bucket.positions)}
            for asset, bucket in table.items()
        ]
        return pd.DataFrame(rows, columns=VALUE_COLUMNS)

    def get_summary(self, table: Positions) -> dict[str, Any]:
        """
        Get summary statistics for a positions table.

        Args:
            table: Positions table

        Returns:
            Dictionary with summary statistics
        """
        frame = self.positions_frame(table)
        if frame.empty:
            return {"status": "empty", "buckets": len(table), "positions": 0}

        open_mask = frame["size"].map(lambda size: not is_zero(size))
        return {
            "status": "valid",
            "buckets": len(table),
            "positions": len(frame),
            "open_positions": int(open_mask.sum()),
            "flat_positions": int((~open_mask).sum()),
            "reversed_positions": int(frame["reversed"].sum()),
            "positions_per_quote": {str(k): int(v) for k, v in frame.groupby("quote").size().items()},
        }
