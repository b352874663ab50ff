"""
Symbol kind enumerations.

This module defines the two shapes of instrument symbol the ledger understands.
"""

from enum import StrEnum

from position_ledger.core.constants import DERIVATIVE_SEPARATOR, SPOT_SEPARATOR


class SymbolKind(StrEnum):
    """
    Allowed symbol kinds.

    Spot pairs are written ``BASE-QUOTE``; derivatives are written
    ``PREFIX:BODY`` where the prefix names the contract family (``SWAP``,
    ``FUTURES``...).
    """

    SPOT = "spot"
    DERIVATIVE = "derivative"

    @property
    def is_spot(self) -> bool:
        """Check if the kind is a spot pair."""
        return self == self.SPOT

    @property
    def is_derivative(self) -> bool:
        """Check if the kind is a derivative."""
        return self == self.DERIVATIVE

    @property
    def separator(self) -> str:
        """Separator used in the canonical text of this kind."""
        return SPOT_SEPARATOR if self.is_spot else DERIVATIVE_SEPARATOR

    @classmethod
    def detect(cls, text: str) -> "SymbolKind":
        """
        Detect the symbol kind from its canonical text.

        Args:
            text: Canonical symbol text

        Returns:
            DERIVATIVE if the text carries a prefix, SPOT otherwise
        """
        return cls.DERIVATIVE if DERIVATIVE_SEPARATOR in text else cls.SPOT
