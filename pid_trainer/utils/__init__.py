"""Utility functions and helpers."""

from pid_trainer.utils.validators import (
    ValidationError,
    validate_finite,
    validate_positive,
    validate_non_negative,
    validate_range,
    validate_min_int,
)
from pid_trainer.utils.math_utils import clamp, lerp, wrap_degrees
from pid_trainer.utils.logging_config import setup_logging

__all__ = [
    "ValidationError",
    "validate_finite",
    "validate_positive",
    "validate_non_negative",
    "validate_range",
    "validate_min_int",
    "clamp",
    "lerp",
    "wrap_degrees",
    "setup_logging",
]
