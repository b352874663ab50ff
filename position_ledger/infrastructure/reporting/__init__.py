"""
Reporting infrastructure.

This module renders positions tables as pandas DataFrames for analysis.
"""

from .positions_summary_generator import PositionsSummaryGenerator

__all__ = ["PositionsSummaryGenerator"]
