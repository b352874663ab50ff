"""
Asset identifier.

Assets are plain immutable value objects compared by their case-normalized token.
"""

from dataclasses import dataclass

from position_ledger.core.constants import DERIVATIVE_SEPARATOR, MAX_ASSET_LENGTH, SPOT_SEPARATOR
from position_ledger.core.exceptions.ledger import SymbolParseError


@dataclass(frozen=True, order=True)
class Asset:
    """A currency, coin or contract unit, e.g. ``BTC`` or ``USDT``."""

    token: str

    def __post_init__(self) -> None:
        """Normalize and validate the token."""
        token = self.token.strip().upper() if isinstance(self.token, str) else ""
        if not token:
            raise SymbolParseError(str(self.token), "asset token must be a non-empty string")
        if len(token) > MAX_ASSET_LENGTH:
            raise SymbolParseError(token, f"asset token longer than {MAX_ASSET_LENGTH} characters")
        if SPOT_SEPARATOR in token or DERIVATIVE_SEPARATOR in token or any(c.isspace() for c in token):
            raise SymbolParseError(token, "asset token cannot contain separators or whitespace")
        object.__setattr__(self, "token", token)

    @classmethod
    def parse(cls, text: str) -> "Asset":
        """Parse an asset from text, case-insensitively.

        Examples:
            >>> Asset.parse("usdt")
            Asset(token='USDT')
        """
        return cls(text)

    def __str__(self) -> str:
        return self.token
