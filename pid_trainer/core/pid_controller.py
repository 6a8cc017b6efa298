"""
Discrete PID Controller.

Features:
- Proportional, Integral, Derivative control on the error signal
- Integral clamping anti-windup
- Exponential low-pass filtering of the derivative term
- Per-tick debug snapshot of the individual terms
"""

from typing import Optional, Dict, Any
from dataclasses import dataclass, asdict

from pid_trainer.core.pid_params import PIDParameters
from pid_trainer.core.filters import LowPassFilter
from pid_trainer.utils.math_utils import clamp
from pid_trainer.utils.validators import validate_finite, validate_positive


@dataclass(frozen=True)
class PIDDebugInfo:
    """Terms computed by the most recent controller update."""
    error: float = 0.0
    p_term: float = 0.0
    i_term: float = 0.0
    d_term: float = 0.0
    output: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    def __str__(self) -> str:
        return (
            f"Error: {self.error:.2f}\n"
            f"P: {self.p_term:.2f}, I: {self.i_term:.2f}, D: {self.d_term:.2f}\n"
            f"Output: {self.output:.2f}"
        )


class PIDController:
    """
    Stateful discrete PID controller.

    The integral accumulator is clamped to ``±integral_limit`` and the
    derivative of the error is smoothed with a first-order low-pass
    filter before it is added to the output. Gains can be changed at
    any time and take effect on the next ``update``.

    Example:
        >>> pid = PIDController(kp=100.0, ki=1.0, kd=20.0)
        >>> output = pid.update(current_value=0.0, target_value=90.0, delta_time=0.02)
        >>> pid.get_debug_info().p_term
        9000.0
    """

    def __init__(
        self,
        kp: float = 0.0,
        ki: float = 0.0,
        kd: float = 0.0,
        integral_limit: float = 100.0,
        derivative_filter_factor: float = 0.1
    ):
        """
        Initialize PID controller.

        Args:
            kp: Proportional gain
            ki: Integral gain
            kd: Derivative gain
            integral_limit: Symmetric bound on the integral accumulator
            derivative_filter_factor: Smoothing factor alpha in (0, 1]
        """
        self._integral_limit = validate_positive(integral_limit, "integral_limit")
        self._derivative_filter = LowPassFilter(alpha=derivative_filter_factor)

        self._kp = 0.0
        self._ki = 0.0
        self._kd = 0.0
        self.set_gains(kp, ki, kd)

        # Internal state
        self._integral: float = 0.0
        self._last_error: float = 0.0
        self._debug_info = PIDDebugInfo()

    @classmethod
    def from_parameters(
        cls,
        params: PIDParameters,
        integral_limit: float = 100.0,
        derivative_filter_factor: float = 0.1
    ) -> 'PIDController':
        """Create a controller from a parameter set (target is ignored)."""
        return cls(
            params.kp, params.ki, params.kd,
            integral_limit=integral_limit,
            derivative_filter_factor=derivative_filter_factor
        )

    @property
    def kp(self) -> float:
        return self._kp

    @property
    def ki(self) -> float:
        return self._ki

    @property
    def kd(self) -> float:
        return self._kd

    @property
    def integral(self) -> float:
        """Current integral accumulator."""
        return self._integral

    @property
    def last_error(self) -> float:
        return self._last_error

    @property
    def last_filtered_derivative(self) -> float:
        """Filtered derivative term from the last update."""
        return self._derivative_filter.output

    @property
    def integral_limit(self) -> float:
        return self._integral_limit

    @property
    def derivative_filter_factor(self) -> float:
        return self._derivative_filter.alpha

    def set_gains(self, kp: float, ki: float, kd: float) -> None:
        """
        Replace all three gains.

        No bumpless transfer is attempted: the new gains apply as-is on
        the next update.
        """
        self._kp = validate_finite(kp, "kp")
        self._ki = validate_finite(ki, "ki")
        self._kd = validate_finite(kd, "kd")

    def update(
        self,
        current_value: float,
        target_value: float,
        delta_time: float
    ) -> float:
        """
        Compute the control output for one tick.

        Args:
            current_value: Measured value of the plant
            target_value: Desired value
            delta_time: Time since the previous update

        Returns:
            Control output. 0.0 when ``delta_time <= 0``, in which case
            no internal state is touched.

        Raises:
            ValidationError: If an input is NaN or infinite
        """
        if delta_time <= 0:
            return 0.0

        validate_finite(current_value, "current_value")
        validate_finite(target_value, "target_value")
        validate_finite(delta_time, "delta_time")

        error = target_value - current_value

        p_term = self._kp * error

        self._integral = clamp(
            self._integral + error * delta_time,
            -self._integral_limit,
            self._integral_limit
        )
        i_term = self._ki * self._integral

        # Derivative of error, so a target step produces a derivative kick
        raw_derivative = (error - self._last_error) / delta_time
        d_term = self._derivative_filter.update(self._kd * raw_derivative)

        output = p_term + i_term + d_term

        self._last_error = error
        self._debug_info = PIDDebugInfo(
            error=error,
            p_term=p_term,
            i_term=i_term,
            d_term=d_term,
            output=output
        )

        return output

    def get_debug_info(self) -> PIDDebugInfo:
        """Terms of the last update. All zeros before the first update."""
        return self._debug_info

    def reset(self) -> None:
        """Reset controller state."""
        self._integral = 0.0
        self._last_error = 0.0
        self._derivative_filter.reset()
        self._debug_info = PIDDebugInfo()

    def __repr__(self) -> str:
        return (
            f"PIDController(kp={self._kp}, ki={self._ki}, kd={self._kd}, "
            f"integral_limit={self._integral_limit}, "
            f"derivative_filter_factor={self.derivative_filter_factor})"
        )
