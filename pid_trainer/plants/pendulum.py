"""
Motor-driven rod swung up about a fixed pivot.

Angle convention (degrees): 0 hangs straight down, 90 points horizontally,
180 is upright. Values are reported in (-180, 180].
"""

from typing import Dict, Any
import numpy as np

from pid_trainer.plants.base_plant import BasePlant, ModelId
from pid_trainer.utils.math_utils import clamp, wrap_degrees
from pid_trainer.utils.validators import validate_positive, validate_non_negative


class PendulumPlant(BasePlant):
    """
    Uniform rod on a motorized hinge.

    Dynamics (theta in rad, measured from hanging down):
        I * theta'' = tau - m * g * (L / 2) * sin(theta) - b * theta'
        I = m * L^2 / 3

    Control input: motor torque, limited to ``±max_torque``.
    """

    def __init__(
        self,
        mass: float = 1.0,
        length: float = 1.0,
        damping: float = 0.5,
        gravity: float = 9.81,
        max_torque: float = 100.0,
        target_angle: float = 90.0,
        initial_angle: float = 0.0,
        angle_tolerance: float = 2.0,
        angular_velocity_tolerance: float = 5.0
    ):
        """
        Initialize pendulum.

        Args:
            mass: Rod mass (kg)
            length: Rod length (m)
            damping: Viscous hinge damping (N*m*s/rad)
            gravity: Gravitational acceleration (m/s^2)
            max_torque: Motor torque limit (N*m)
            target_angle: Initial target angle (deg)
            initial_angle: Angle restored by ``reset`` (deg)
            angle_tolerance: ``is_stable`` angle band (deg)
            angular_velocity_tolerance: ``is_stable`` rate band (deg/s)
        """
        self.m = validate_positive(mass, "mass")
        self.L = validate_positive(length, "length")
        self.b = validate_non_negative(damping, "damping")
        self.g = validate_non_negative(gravity, "gravity")
        self.max_torque = validate_positive(max_torque, "max_torque")
        self.inertia = self.m * self.L ** 2 / 3.0
        self.initial_angle = initial_angle

        super().__init__(target_angle, angle_tolerance, angular_velocity_tolerance)

        # State: [theta, theta_dot] in rad, rad/s
        self.state = np.array([np.radians(initial_angle), 0.0])

    def _dynamics(self, state: np.ndarray) -> np.ndarray:
        theta, theta_dot = state
        gravity_torque = self.m * self.g * (self.L / 2.0) * np.sin(theta)
        theta_ddot = (self._control_input - gravity_torque - self.b * theta_dot) / self.inertia
        return np.array([theta_dot, theta_ddot])

    def get_current_value(self) -> float:
        return wrap_degrees(np.degrees(self.state[0]))

    def get_current_velocity(self) -> float:
        """Angular velocity in deg/s."""
        return float(np.degrees(self.state[1]))

    def set_control_input(self, control_input: float) -> None:
        self._control_input = clamp(control_input, -self.max_torque, self.max_torque)

    def set_target_value(self, target: float) -> None:
        """Target angle, limited to [-180, 180] degrees."""
        self._target_value = clamp(float(target), -180.0, 180.0)

    def step(self, dt: float) -> None:
        if dt <= 0:
            return
        self.state = self._integrate(self._dynamics, self.state, dt)
        self.state[0] = np.arctan2(np.sin(self.state[0]), np.cos(self.state[0]))
        self._time += dt

    def reset(self) -> None:
        self.state = np.array([np.radians(self.initial_angle), 0.0])
        self._control_input = 0.0
        self._time = 0.0

    def get_value_unit(self) -> str:
        return "deg"

    def get_model_name(self) -> str:
        return "Pendulum swing-up"

    def get_model_id(self) -> ModelId:
        return ModelId.PENDULUM

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info.update({
            'mass': self.m,
            'length': self.L,
            'damping': self.b,
            'gravity': self.g,
            'max_torque': self.max_torque,
            'initial_angle': self.initial_angle,
        })
        return info
