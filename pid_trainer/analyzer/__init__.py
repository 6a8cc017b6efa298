"""Run scoring and visualization components."""

from pid_trainer.analyzer.evaluator import (
    SimulationResult,
    evaluate,
    calculate_overshoot,
    calculate_steady_state_error,
    calculate_score,
)
from pid_trainer.analyzer.plots import ResponsePlotter

__all__ = [
    "SimulationResult",
    "evaluate",
    "calculate_overshoot",
    "calculate_steady_state_error",
    "calculate_score",
    "ResponsePlotter",
]
