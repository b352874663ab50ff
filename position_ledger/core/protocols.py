"""
Core type definitions and protocols.

This module defines shared types used by the valuation engine so callers can
supply prices or valuation callbacks without importing the engine itself.
"""

from collections.abc import Callable, Mapping
from typing import Any

from position_ledger.core.models.holding import Holding
from position_ledger.core.models.instrument import Instrument, Symbol

# Type aliases for commonly used types
PriceMap = Mapping[Symbol, Any]
Valuer = Callable[[Instrument, Holding], Any | None]
