"""
Core constants and display settings.

Defines ledger-wide precision, identifier formatting and rendering constants.
"""

# Precision
FINANCIAL_DECIMALS = 8  # 8 decimal places (crypto standard)
EQUITY_DECIMALS = 1  # Precision used when comparing aggregate equity figures

# Identifier formatting
SPOT_SEPARATOR = "-"  # BASE-QUOTE
DERIVATIVE_SEPARATOR = ":"  # PREFIX:BODY
MAX_ASSET_LENGTH = 32  # Longest accepted asset token

# Rendering
REVERSED_MARK = "*"  # Suffix for reversed-preferring instruments
UNDEFINED_PRICE = "Nan"  # Shown when a reversed price has no inverse
TREE_MIDDLE = "├ "
TREE_LAST = "└ "
