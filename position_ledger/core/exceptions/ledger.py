"""
Custom exception hierarchy for the position ledger.

This module defines domain-specific exceptions for better error handling.
"""


class LedgerException(Exception):
    """Base exception for all ledger-related errors."""

    pass


class ValidationError(LedgerException):
    """Raised when input validation fails."""

    pass


class SymbolParseError(ValidationError):
    """Raised when an asset or symbol text cannot be parsed."""

    def __init__(self, text: str, reason: str = "malformed symbol"):
        self.text = text
        self.reason = reason
        super().__init__(f"Cannot parse {text!r}: {reason}")


class InvalidReversedPrice(ValidationError):
    """Raised when a price must be inverted but is zero."""

    def __init__(self, price: object, operation: str = "reversed conversion"):
        self.price = price
        self.operation = operation
        super().__init__(f"Zero price cannot be inverted for {operation}: price={price}")


class InstrumentMismatchError(LedgerException):
    """Raised when merging positions that belong to different instruments."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Cannot merge position of {actual} into position of {expected}")


class BucketInvariantError(ValidationError):
    """Raised when a position is stored under a bucket other than its quote asset."""

    def __init__(self, symbol: str, quote: str, bucket: str):
        self.symbol = symbol
        self.quote = quote
        self.bucket = bucket
        super().__init__(f"Position {symbol} is quoted in {quote} but was placed in bucket {bucket}")
