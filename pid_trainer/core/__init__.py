"""Core PID controller components."""

from pid_trainer.core.pid_controller import PIDController, PIDDebugInfo
from pid_trainer.core.pid_params import (
    PIDParameters,
    PIDPreset,
    PIDPresets,
    GainRange,
    GAIN_RANGES,
    DEFAULT_PARAMETERS,
)
from pid_trainer.core.filters import LowPassFilter

__all__ = [
    "PIDController",
    "PIDDebugInfo",
    "PIDParameters",
    "PIDPreset",
    "PIDPresets",
    "GainRange",
    "GAIN_RANGES",
    "DEFAULT_PARAMETERS",
    "LowPassFilter",
]
