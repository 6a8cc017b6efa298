"""
Overhead crane: a cart carrying a payload on a cable.

The controlled value is the cart position; the swinging payload couples
back into the cart dynamics.
"""

from typing import Dict, Any
import numpy as np

from pid_trainer.plants.base_plant import BasePlant, ModelId
from pid_trainer.utils.math_utils import clamp
from pid_trainer.utils.validators import validate_positive, validate_non_negative


class CranePlant(BasePlant):
    """
    Cart with a suspended point-mass payload.

    State vector: [x, x_dot, phi, phi_dot]
    where:
        x = cart position (m)
        phi = cable angle from vertical (rad)

    Equations of motion:
        (M + m) x'' + m l (phi'' cos phi - phi'^2 sin phi) = F - b x'
        l phi'' + x'' cos phi + g sin phi = -c phi'

    Control input: horizontal force on the cart, limited to ``±max_force``.
    """

    def __init__(
        self,
        cart_mass: float = 10.0,
        payload_mass: float = 2.0,
        cable_length: float = 2.0,
        cart_friction: float = 1.0,
        swing_damping: float = 0.1,
        gravity: float = 9.81,
        max_force: float = 500.0,
        target_position: float = 5.0,
        initial_position: float = 0.0,
        position_tolerance: float = 0.1,
        velocity_tolerance: float = 0.1
    ):
        """
        Initialize crane.

        Args:
            cart_mass: Cart mass M (kg)
            payload_mass: Payload mass m (kg)
            cable_length: Cable length l (m)
            cart_friction: Viscous cart friction b (N*s/m)
            swing_damping: Viscous swing damping c (1/s)
            gravity: Gravitational acceleration (m/s^2)
            max_force: Drive force limit (N)
            target_position: Initial target position (m)
            initial_position: Cart position restored by ``reset`` (m)
            position_tolerance: ``is_stable`` position band (m)
            velocity_tolerance: ``is_stable`` cart speed band (m/s)
        """
        self.M = validate_positive(cart_mass, "cart_mass")
        self.m = validate_positive(payload_mass, "payload_mass")
        self.l = validate_positive(cable_length, "cable_length")
        self.b = validate_non_negative(cart_friction, "cart_friction")
        self.c = validate_non_negative(swing_damping, "swing_damping")
        self.g = validate_non_negative(gravity, "gravity")
        self.max_force = validate_positive(max_force, "max_force")
        self.initial_position = initial_position

        super().__init__(target_position, position_tolerance, velocity_tolerance)

        self.state = np.array([initial_position, 0.0, 0.0, 0.0])

    def _dynamics(self, state: np.ndarray) -> np.ndarray:
        _, x_dot, phi, phi_dot = state
        s = np.sin(phi)
        c = np.cos(phi)

        # Mass matrix * [x_ddot, phi_ddot] = F_vector
        M_matrix = np.array([
            [self.M + self.m, self.m * self.l * c],
            [c, self.l],
        ])
        F_vector = np.array([
            self._control_input - self.b * x_dot + self.m * self.l * phi_dot ** 2 * s,
            -self.g * s - self.c * phi_dot,
        ])

        x_ddot, phi_ddot = np.linalg.solve(M_matrix, F_vector)

        return np.array([x_dot, x_ddot, phi_dot, phi_ddot])

    def get_current_value(self) -> float:
        return float(self.state[0])

    def get_current_velocity(self) -> float:
        return float(self.state[1])

    @property
    def payload_angle(self) -> float:
        """Cable angle from vertical (deg)."""
        return float(np.degrees(self.state[2]))

    @property
    def payload_position(self) -> float:
        """Horizontal payload position (m)."""
        return float(self.state[0] + self.l * np.sin(self.state[2]))

    def set_control_input(self, control_input: float) -> None:
        self._control_input = clamp(control_input, -self.max_force, self.max_force)

    def step(self, dt: float) -> None:
        if dt <= 0:
            return
        self.state = self._integrate(self._dynamics, self.state, dt)
        self._time += dt

    def reset(self) -> None:
        self.state = np.array([self.initial_position, 0.0, 0.0, 0.0])
        self._control_input = 0.0
        self._time = 0.0

    def get_value_unit(self) -> str:
        return "m"

    def get_model_name(self) -> str:
        return "Crane with payload"

    def get_model_id(self) -> ModelId:
        return ModelId.CRANE

    def get_info(self) -> Dict[str, Any]:
        info = super().get_info()
        info.update({
            'cart_mass': self.M,
            'payload_mass': self.m,
            'cable_length': self.l,
            'cart_friction': self.b,
            'swing_damping': self.c,
            'gravity': self.g,
            'max_force': self.max_force,
            'initial_position': self.initial_position,
        })
        return info
