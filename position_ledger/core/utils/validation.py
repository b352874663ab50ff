"""
Validation utilities for core domain models.

Provides consistent validation across the application.
"""

from typing import Any

from position_ledger.core.exceptions.ledger import ValidationError
from position_ledger.core.models.asset import Asset
from position_ledger.core.models.instrument import Instrument
from position_ledger.core.types.numeric import is_number


def validate_number(value: Any, param_name: str) -> Any:
    """Validate that a value can take part in holding arithmetic.

    Args:
        value: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated value

    Raises:
        ValidationError: If value is not a number (booleans are rejected)
    """
    if not is_number(value):
        raise ValidationError(f"{param_name} must be a number, got {type(value).__name__}")
    return value


def validate_asset(asset: Any, param_name: str = "asset") -> Asset:
    """Validate that a value is an Asset.

    Args:
        asset: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated Asset

    Raises:
        TypeError: If asset is not an Asset
    """
    if not isinstance(asset, Asset):
        raise TypeError(f"{param_name} must be Asset, got {type(asset).__name__}")
    return asset


def validate_instrument(instrument: Any, param_name: str = "instrument") -> Instrument:
    """Validate that a value is an Instrument.

    Args:
        instrument: Value to validate
        param_name: Parameter name for error messages

    Returns:
        The validated Instrument

    Raises:
        TypeError: If instrument is not an Instrument
    """
    if not isinstance(instrument, Instrument):
        raise TypeError(f"{param_name} must be Instrument, got {type(instrument).__name__}")
    return instrument
