"""
Vertically hovering craft held at a target altitude.
"""

from typing import Dict, Any
import numpy as np

from pid_trainer.plants.base_plant import BasePlant, ModelId
from pid_trainer.utils.math_utils import clamp
from pid_trainer.utils.validators import validate_positive, validate_non_negative


class HovercraftPlant(BasePlant):
    """
    Point mass lifted by a rotor.

    The control input is a thrust correction added on top of the thrust
    that exactly cancels gravity; the total thrust is limited to
    ``[0, max_thrust]``. The ground sits at altitude 0.

    Dynamics:
        m * h'' = thrust - m * g - c * h'
    """

    def __init__(
        self,
        mass: float = 5.0,
        drag: float = 0.5,
        gravity: float = 9.81,
        max_thrust: float = 200.0,
        target_altitude: float = 10.0,
        initial_altitude: float = 0.0,
        altitude_tolerance: float = 0.1,
        velocity_tolerance: float = 0.1
    ):
        """
        Initialize hovercraft.

        Args:
            mass: Craft mass (kg)
            drag: Linear vertical drag coefficient (N*s/m)
            gravity: Gravitational acceleration (m/s^2)
            max_thrust: Rotor thrust limit (N)
            target_altitude: Initial target altitude (m)
            initial_altitude: Altitude restored by ``reset`` (m)
            altitude_tolerance: ``is_stable`` altitude band (m)
            velocity_tolerance: ``is_stable`` vertical speed band (m/s)
        """
        self.m = validate_positive(mass, "mass")
        self.c = validate_non_negative(drag, "drag")
        self.g = validate_non_negative(gravity, "gravity")
        self.max_thrust = validate_positive(max_thrust, "max_thrust")
        self.initial_altitude = validate_non_negative(initial_altitude, "initial_altitude")
        self._thrust = 0.0

        super().__init__(target_altitude, altitude_tolerance, velocity_tolerance)

        # State: [altitude, vertical_velocity]
        self.state = np.array([self.initial_altitude, 0.0])

    def _dynamics(self, state: np.ndarray) -> np.ndarray:
        _, velocity = state
        acceleration = (self._thrust - self.m * self.g - self.c * velocity) / self.m
        return np.array([velocity, acceleration])

    @property
    def thrust(self) -> float:
        """Total rotor thrust currently applied."""
        return self._thrust

    def get_current_value(self) -> float:
        return float(self.state[0])

    def get_current_velocity(self) -> float:
        return float(self.state[1])

    def set_control_input(self, control_input: float) -> None:
        base_thrust = self.m * self.g
        self._thrust = clamp(base_thrust + control_input, 0.0, self.max_thrust)
        self._control_input = self._thrust - base_thrust

    def set_target_value(self, target: float) -> None:
        """Target altitude, never below ground."""
        self._target_value = max(0.0, float(target))

    def step(self, dt: float) -> None:
        if dt <= 0:
            return
        self.state = self._integrate(self._dynamics, self.state, dt)
        if self.state[0] < 0.0:
            self.state[0] = 0.0
            self.state[1] = max(0.0, self.state[1])
        self._time += dt

    def reset(self) -> None:
        self.state = np.array([self.initial_altitude, 0.0])
        self._control_input = 0.0
        self._thrust = 0.0
        self._time = 0.0

    def get_value_unit(self) -> str:
        return "m"

    def get_model_name(self) -> str:
        return "Hovercraft altitude hold"

    def get_model_id(self) -> ModelId:
        return ModelId.HOVERCRAFT

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info.update({
            'mass': self.m,
            'drag': self.c,
            'gravity': self.g,
            'max_thrust': self.max_thrust,
            'initial_altitude': self.initial_altitude,
        })
        return info
