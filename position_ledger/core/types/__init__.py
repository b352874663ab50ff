"""
Core type definitions and utilities.
"""

# Re-export numeric utilities for easy access
from .numeric import (
    ONE,
    ZERO,
    is_lossy,
    is_negative,
    is_number,
    is_positive,
    is_zero,
    quantize,
    reciprocal,
    same_sign,
    to_decimal,
)

__all__ = [
    # Utility functions
    "is_zero",
    "is_positive",
    "is_negative",
    "is_number",
    "is_lossy",
    "same_sign",
    "reciprocal",
    "to_decimal",
    "quantize",
    # Constants
    "ZERO",
    "ONE",
]
