"""
Performance scoring of a recorded simulation run.
Uses numpy for the per-sample calculations.
"""

from typing import Dict, Sequence, Union
from dataclasses import dataclass, asdict
import numpy as np

from pid_trainer.recording.data_recorder import DataPoint, DataRecorder

DEFAULT_MAX_TIME = 30.0

TIME_SCORE_MAX = 50.0
OVERSHOOT_SCORE_MAX = 30.0
STEADY_STATE_SCORE_MAX = 20.0

OVERSHOOT_PENALTY_PER_PERCENT = 0.5
STEADY_STATE_PENALTY_PER_UNIT = 100.0

MIN_SAMPLES_FOR_FULL_TIME_SCORE = 100


@dataclass(frozen=True)
class SimulationResult:
    """Scored outcome of a run."""
    settling_time: float
    overshoot_percentage: float = 0.0
    steady_state_error: float = 0.0
    score: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def calculate_overshoot(current_values: np.ndarray, target: float) -> float:
    """
    Overshoot of the response past ``target`` in percent of ``|target|``.

    The deviation kept is the first one with the largest magnitude,
    whatever its sign. When that deviation is at or below the target the
    result is 0, even if a smaller positive deviation exists elsewhere.
    """
    if target == 0 or len(current_values) == 0:
        return 0.0

    deviations = current_values - target
    # argmax returns the first index on ties, matching a strict running max
    max_deviation = float(deviations[np.argmax(np.abs(deviations))])

    if max_deviation <= 0:
        return 0.0

    return max_deviation / abs(target) * 100.0


def calculate_steady_state_error(current_values: np.ndarray, target: float) -> float:
    """Absolute error of the last recorded sample."""
    if len(current_values) == 0:
        return 0.0
    return abs(target - float(current_values[-1]))


def calculate_score(
    settling_time: float,
    overshoot_percentage: float,
    steady_state_error: float,
    sample_count: int,
    max_time: float = DEFAULT_MAX_TIME
) -> float:
    """
    Composite score out of 100.

    - time: up to 50, linear in ``max_time - settling_time``; halved when
      fewer than 100 samples were recorded
    - overshoot: up to 30, minus 0.5 per percent
    - steady-state error: up to 20, minus 1 per 0.01
    """
    time_score = max(0.0, max_time - settling_time) / max_time * TIME_SCORE_MAX
    if sample_count < MIN_SAMPLES_FOR_FULL_TIME_SCORE:
        time_score *= 0.5

    overshoot_score = max(
        0.0, OVERSHOOT_SCORE_MAX - overshoot_percentage * OVERSHOOT_PENALTY_PER_PERCENT
    )
    steady_state_score = max(
        0.0, STEADY_STATE_SCORE_MAX - steady_state_error * STEADY_STATE_PENALTY_PER_UNIT
    )

    return time_score + overshoot_score + steady_state_score


def evaluate(
    samples: Union[Sequence[DataPoint], DataRecorder],
    settling_time: float,
    stability_tolerance: float = 0.05,
    max_time: float = DEFAULT_MAX_TIME
) -> SimulationResult:
    """
    Score a recorded run.

    Args:
        samples: Recorded samples (or the recorder holding them)
        settling_time: Settling time reported by the simulation
        stability_tolerance: Tolerance the run was judged with; kept for
            reporting parity, it does not enter the score
        max_time: Reference time for the time score

    Returns:
        SimulationResult. With no samples every field except
        ``settling_time`` is 0.
    """
    if isinstance(samples, DataRecorder):
        samples = samples.get_data()

    if len(samples) == 0:
        return SimulationResult(settling_time=settling_time)

    target = samples[-1].target_value
    current_values = np.array([p.current_value for p in samples], dtype=float)

    overshoot = calculate_overshoot(current_values, target)
    steady_state_error = calculate_steady_state_error(current_values, target)
    score = calculate_score(
        settling_time, overshoot, steady_state_error, len(samples), max_time
    )

    return SimulationResult(
        settling_time=settling_time,
        overshoot_percentage=overshoot,
        steady_state_error=steady_state_error,
        score=score
    )
