"""
PID Trainer
===========

Control-and-evaluation engine for an interactive PID tuning trainer:
- Discrete PID controller with anti-windup and derivative filtering
- Bounded, decimated recording of each run
- Fixed-step simulation session with stability detection
- Scoring of settling time, overshoot and steady-state error
- Pendulum, hovercraft and crane reference plants
"""

import logging

from pid_trainer.core.pid_controller import PIDController, PIDDebugInfo
from pid_trainer.core.pid_params import PIDParameters, PIDPresets
from pid_trainer.recording.data_recorder import DataRecorder, DataPoint
from pid_trainer.analyzer.evaluator import SimulationResult, evaluate
from pid_trainer.simulation.config import SimulationConfig
from pid_trainer.simulation.simulator import SimulationSession, SimulationState
from pid_trainer.utils.logging_config import setup_logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "1.0.0"
__all__ = [
    "PIDController",
    "PIDDebugInfo",
    "PIDParameters",
    "PIDPresets",
    "DataRecorder",
    "DataPoint",
    "SimulationResult",
    "evaluate",
    "SimulationConfig",
    "SimulationSession",
    "SimulationState",
    "setup_logging",
]
