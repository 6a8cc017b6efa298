"""
Scalar math helpers shared by the controller and plant models.
"""

from typing import Optional
import numpy as np


def clamp(value: float, min_val: Optional[float], max_val: Optional[float]) -> float:
    """Clamp a value between minimum and maximum bounds."""
    if min_val is None and max_val is None:
        return value
    return float(np.clip(value, min_val, max_val))


def lerp(start: float, end: float, t: float) -> float:
    """Linear interpolation from ``start`` towards ``end`` by fraction ``t``."""
    return start + (end - start) * t


def wrap_degrees(angle: float) -> float:
    """Wrap an angle in degrees to the interval (-180, 180]."""
    wrapped = float(np.mod(angle + 180.0, 360.0) - 180.0)
    if wrapped == -180.0:
        return 180.0
    return wrapped
