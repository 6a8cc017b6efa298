"""
Validation utilities for configuration and controller inputs.
Provides input checks with clear error messages.
"""

from typing import Optional
import math
import numbers


class ValidationError(ValueError):
    """Raised when a parameter or input value is rejected."""
    pass


def _require_real(value, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValidationError(f"{name} must be a real number, got {type(value).__name__}")
    return float(value)


def validate_finite(value: float, name: str) -> float:
    """
    Validate that a value is a finite real number.

    Args:
        value: The value to validate
        name: Parameter name for error messages

    Returns:
        The validated value as float

    Raises:
        ValidationError: If value is NaN, infinite or not a number
    """
    value = _require_real(value, name)
    if not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value}")
    return value


def validate_positive(value: float, name: str) -> float:
    """
    Validate that a value is strictly positive and finite.

    Raises:
        ValidationError: If value is not positive
    """
    value = validate_finite(value, name)
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def validate_non_negative(value: float, name: str) -> float:
    """Validate that a value is finite and >= 0."""
    value = validate_finite(value, name)
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def validate_range(
    value: float,
    name: str,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
    min_inclusive: bool = True,
    max_inclusive: bool = True
) -> float:
    """
    Validate that a value falls within a specified range.

    Args:
        value: The value to validate
        name: Parameter name for error messages
        min_val: Minimum allowed value (None for no lower bound)
        max_val: Maximum allowed value (None for no upper bound)
        min_inclusive: Whether the lower bound is inclusive
        max_inclusive: Whether the upper bound is inclusive

    Returns:
        The validated value

    Raises:
        ValidationError: If value is outside the range
    """
    value = validate_finite(value, name)

    if min_val is not None:
        if min_inclusive and value < min_val:
            raise ValidationError(f"{name} must be >= {min_val}, got {value}")
        elif not min_inclusive and value <= min_val:
            raise ValidationError(f"{name} must be > {min_val}, got {value}")

    if max_val is not None:
        if max_inclusive and value > max_val:
            raise ValidationError(f"{name} must be <= {max_val}, got {value}")
        elif not max_inclusive and value >= max_val:
            raise ValidationError(f"{name} must be < {max_val}, got {value}")

    return value


def validate_min_int(value: int, name: str, minimum: int) -> int:
    """Validate that a value is an integer no smaller than ``minimum``."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ValidationError(f"{name} must be an integer, got {type(value).__name__}")
    if value < minimum:
        raise ValidationError(f"{name} must be at least {minimum}, got {value}")
    return int(value)
