"""
Simulation session configuration.
Encapsulates the numeric knobs of a run in a validated structure.
"""

from dataclasses import dataclass, asdict, replace
from typing import Dict, Any
import json

from pid_trainer.utils.validators import (
    ValidationError,
    validate_positive,
    validate_non_negative,
    validate_range,
    validate_min_int,
)


@dataclass(frozen=True)
class SimulationConfig:
    """
    Settings of a simulation session.

    Defaults reproduce the trainer's standard run: 50 ms recording
    interval, 2000 samples, 30 s time limit, 1 s stability window,
    ±5 % tolerance with a 0.1 floor.
    """

    # Recording
    sampling_interval: float = 0.05
    max_data_points: int = 2000

    # Termination
    max_simulation_time: float = 30.0
    stability_check_duration: float = 1.0
    stability_tolerance: float = 0.05  # Fraction of |target|
    minimum_tolerance: float = 0.1  # Floor for near-zero targets

    # Controller
    integral_limit: float = 100.0
    derivative_filter_factor: float = 0.1

    # Fixed step used by the built-in driver
    time_step: float = 0.02

    def __post_init__(self):
        """Validate parameters after initialization."""
        validate_positive(self.sampling_interval, "sampling_interval")
        validate_min_int(self.max_data_points, "max_data_points", 1)
        validate_positive(self.max_simulation_time, "max_simulation_time")
        validate_non_negative(self.stability_check_duration, "stability_check_duration")
        validate_non_negative(self.stability_tolerance, "stability_tolerance")
        validate_non_negative(self.minimum_tolerance, "minimum_tolerance")
        validate_positive(self.integral_limit, "integral_limit")
        validate_range(
            self.derivative_filter_factor, "derivative_filter_factor",
            0.0, 1.0, min_inclusive=False
        )
        validate_positive(self.time_step, "time_step")

    def copy(self, **changes) -> 'SimulationConfig':
        """Create a copy with optional changes."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        """
        Create from dictionary.

        Raises:
            ValidationError: On keys that are not configuration fields
        """
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValidationError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**data)

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'SimulationConfig':
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))
