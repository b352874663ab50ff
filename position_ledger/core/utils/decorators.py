"""
Decorators for ledger entry points.

``validate_inputs`` checks assets and numeric arguments by parameter name;
``log_ledger_operation`` wraps an operation in structured loguru records.
"""

import functools
import inspect
import time
import uuid
from collections.abc import Callable
from typing import Any, TypeVar

from position_ledger.core.exceptions.ledger import ValidationError
from position_ledger.core.types.numeric import is_number
from position_ledger.core.utils.validation import validate_asset, validate_number

NUMERIC_PARAMS = ("price", "size", "value", "to")
CONTEXT_PARAMS = ("asset", "root", "instrument", "position", "price", "size", "value")

F = TypeVar("F", bound=Callable[..., Any])


def _bind_arguments(func: Callable[..., Any], args: tuple[Any, ...], kwargs: dict[str, Any]) -> inspect.BoundArguments:
    bound = inspect.signature(func).bind(*args, **kwargs)
    bound.apply_defaults()
    return bound


def _validate_ledger_parameter(param_name: str, value: Any, optional: bool = False) -> None:
    if value is None and optional:
        return
    if param_name == "asset":
        try:
            validate_asset(value)
        except TypeError as e:
            raise ValidationError(f"Invalid {param_name}: {e}") from e
    elif param_name in NUMERIC_PARAMS:
        validate_number(value, param_name)


def validate_inputs(func: F) -> F:
    """Decorator to validate ledger inputs (asset, price, size, value, to)."""

    # None passes only where the parameter itself defaults to None
    parameters = inspect.signature(func).parameters

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        bound = _bind_arguments(func, args, kwargs)
        for param_name, value in bound.arguments.items():
            if param_name != "self":
                optional = parameters[param_name].default is None
                _validate_ledger_parameter(param_name, value, optional)
        return func(*bound.args, **bound.kwargs)

    return wrapper  # type: ignore


def _serialize_parameter_value(value: Any) -> Any:
    """Render a parameter for structured log records.

    Decimal and Fraction values become text so no precision is lost in the sink.
    """
    if isinstance(value, int | float | str | bool):
        return value
    return str(value)


def _extract_ledger_context(bound_args: Any) -> dict[str, Any]:
    """Pick the ledger arguments worth recording from a call."""
    context: dict[str, Any] = {}
    for param_name, value in bound_args.arguments.items():
        if param_name in CONTEXT_PARAMS:
            context[param_name] = _serialize_parameter_value(value)
        elif param_name == "prices" and value is not None:
            context["price_count"] = len(value)
    return context


def _outcome_context(base_context: dict[str, Any], started: float, **outcome: Any) -> dict[str, Any]:
    elapsed_ms = (time.perf_counter() - started) * 1000
    return {**base_context, "execution_time_ms": round(elapsed_ms, 2), **outcome}


def _result_fields(result: Any) -> dict[str, Any]:
    fields: dict[str, Any] = {"success": True, "result_type": type(result).__name__}
    if result is not None and is_number(result):
        fields["result"] = _serialize_parameter_value(result)
    return fields


def log_ledger_operation(func: F) -> F:
    """Decorator to log ledger operations with correlation IDs.

    Emits a debug record on entry and on success, and an error record before
    re-raising on failure. Arguments named in CONTEXT_PARAMS travel in
    ``extra=`` so sinks can filter on them.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        from loguru import logger

        func_name = func.__qualname__
        context = {
            "correlation_id": uuid.uuid4().hex[:8],
            "timestamp": str(time.time()),
            **_extract_ledger_context(_bind_arguments(func, args, kwargs)),
        }
        logger.debug(f"Ledger operation started: {func_name}", extra=context)
        started = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(
                f"Ledger operation failed: {func_name}",
                extra=_outcome_context(
                    context, started, success=False, error_type=type(e).__name__, error_message=str(e)
                ),
            )
            raise
        logger.debug(
            f"Ledger operation completed: {func_name}",
            extra=_outcome_context(context, started, **_result_fields(result)),
        )
        return result

    return wrapper  # type: ignore
