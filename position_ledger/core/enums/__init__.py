"""
Core enumerations for the position ledger.

This module provides centralized enumerations for domain concepts
like instrument symbol kinds.
"""

from .symbols import SymbolKind

__all__ = ["SymbolKind"]
