"""
Base plant model abstract class.
Defines the capability interface the simulation drives.
"""

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Dict, Any, Callable
import numpy as np
from scipy.integrate import solve_ivp

from pid_trainer.utils.validators import validate_positive


class ModelId(IntEnum):
    """Identifiers of the trainer's plant models."""
    PENDULUM = 0
    HOVERCRAFT = 1
    CRANE = 2


class BasePlant(ABC):
    """
    Abstract base class for controlled plants.

    The simulation only reads the value, target and velocity, and writes
    the control input; everything else about the plant stays internal.
    ``step`` advances the physics by one fixed time step using the most
    recent control input.
    """

    def __init__(
        self,
        target_value: float,
        value_tolerance: float,
        velocity_tolerance: float
    ):
        """
        Initialize base plant.

        Args:
            target_value: Initial target
            value_tolerance: Max |value - target| for ``is_stable``
            velocity_tolerance: Max |velocity| for ``is_stable``
        """
        self._target_value: float = 0.0
        self._control_input: float = 0.0
        self._time: float = 0.0
        self._value_tolerance = validate_positive(value_tolerance, "value_tolerance")
        self._velocity_tolerance = validate_positive(velocity_tolerance, "velocity_tolerance")
        self.set_target_value(target_value)

    @abstractmethod
    def get_current_value(self) -> float:
        """Current controlled value (angle, altitude, position)."""
        pass

    @abstractmethod
    def get_current_velocity(self) -> float:
        """Rate of change of the controlled value."""
        pass

    @abstractmethod
    def set_control_input(self, control_input: float) -> None:
        """Apply the controller output (torque, thrust, force)."""
        pass

    @abstractmethod
    def step(self, dt: float) -> None:
        """Advance the plant physics by ``dt`` seconds."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Reset plant to initial state."""
        pass

    @abstractmethod
    def get_value_unit(self) -> str:
        pass

    @abstractmethod
    def get_model_name(self) -> str:
        pass

    @abstractmethod
    def get_model_id(self) -> ModelId:
        pass

    def get_target_value(self) -> float:
        return self._target_value

    def set_target_value(self, target: float) -> None:
        """Set the target. Subclasses may restrict the allowed range."""
        self._target_value = float(target)

    def is_stable(self) -> bool:
        """True when the value is near the target and nearly at rest."""
        error = abs(self.get_current_value() - self._target_value)
        velocity = abs(self.get_current_velocity())
        return error < self._value_tolerance and velocity < self._velocity_tolerance

    @property
    def control_input(self) -> float:
        """Control input as last applied, after limiting."""
        return self._control_input

    @property
    def time(self) -> float:
        """Physics time advanced by ``step``."""
        return self._time

    def _integrate(
        self,
        dynamics: Callable[[np.ndarray], np.ndarray],
        state: np.ndarray,
        dt: float
    ) -> np.ndarray:
        """Integrate ``dynamics`` over one step with scipy's solve_ivp."""
        sol = solve_ivp(
            lambda t, y: dynamics(y),
            [0, dt],
            state,
            method='RK45',
            dense_output=False
        )
        return sol.y[:, -1]

    def get_info(self) -> Dict[str, Any]:
        """Get plant information/parameters."""
        return {
            'type': type(self).__name__,
            'model_id': int(self.get_model_id()),
            'name': self.get_model_name(),
            'unit': self.get_value_unit(),
            'target_value': self._target_value,
            'value_tolerance': self._value_tolerance,
            'velocity_tolerance': self._velocity_tolerance,
        }
