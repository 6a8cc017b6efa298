"""
Signal filtering for the derivative path of the PID controller.
"""

from abc import ABC, abstractmethod

from pid_trainer.utils.math_utils import lerp
from pid_trainer.utils.validators import validate_range


class BaseFilter(ABC):
    """Abstract base class for all filters."""

    @abstractmethod
    def update(self, value: float) -> float:
        """Update filter with new value and return filtered output."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Reset filter state."""
        pass

    @property
    @abstractmethod
    def output(self) -> float:
        """Current filter output."""
        pass


class LowPassFilter(BaseFilter):
    """
    First-order exponential low-pass filter.

    Each update moves the output a fixed fraction ``alpha`` of the way
    towards the new input: ``output = lerp(output, value, alpha)``.
    The output starts at ``initial_value`` rather than at the first
    sample, so the first update is smoothed too.
    """

    def __init__(self, alpha: float = 0.1, initial_value: float = 0.0):
        self._alpha = validate_range(alpha, "alpha", 0.0, 1.0, min_inclusive=False)
        self._initial_value = initial_value
        self._output: float = initial_value

    def update(self, value: float) -> float:
        self._output = lerp(self._output, value, self._alpha)
        return self._output

    def reset(self) -> None:
        self._output = self._initial_value

    @property
    def output(self) -> float:
        return self._output

    @property
    def alpha(self) -> float:
        return self._alpha

    @alpha.setter
    def alpha(self, value: float) -> None:
        self._alpha = validate_range(value, "alpha", 0.0, 1.0, min_inclusive=False)
