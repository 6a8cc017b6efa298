"""
Bounded time-series recording of a simulation run.

Features:
- Decimation to a minimum sampling interval
- FIFO eviction once the capacity is reached
- Defensive copies on read
- Column export to numpy arrays and CSV
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, asdict, fields
from collections import deque
from pathlib import Path
import csv
import logging

import numpy as np

from pid_trainer.core.pid_controller import PIDDebugInfo
from pid_trainer.utils.validators import validate_positive, validate_min_int

logger = logging.getLogger(__name__)

MIN_SAMPLING_INTERVAL = 0.001
MIN_CAPACITY_SETTING = 100


@dataclass(frozen=True)
class DataPoint:
    """One recorded sample."""
    time: float
    current_value: float
    target_value: float
    p_term: float = 0.0
    i_term: float = 0.0
    d_term: float = 0.0
    control_output: float = 0.0

    @property
    def error(self) -> float:
        return self.target_value - self.current_value

    @property
    def abs_error(self) -> float:
        return abs(self.error)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def __str__(self) -> str:
        return (
            f"Time: {self.time:.2f}s, Value: {self.current_value:.2f}, "
            f"Target: {self.target_value:.2f}, P: {self.p_term:.2f}, "
            f"I: {self.i_term:.2f}, D: {self.d_term:.2f}"
        )


COLUMNS = [f.name for f in fields(DataPoint)]


class DataRecorder:
    """
    Sliding-window recorder for simulation samples.

    Samples closer together than ``sampling_interval`` are dropped unless
    forced. Once ``max_data_points`` samples are held, the oldest one is
    removed before each new sample is appended.

    Example:
        >>> recorder = DataRecorder(sampling_interval=0.05, max_data_points=2000)
        >>> recorder.record(0.1, 12.0, 90.0, controller.get_debug_info())
        True
        >>> recorder.get_last_data_point().current_value
        12.0
    """

    def __init__(self, sampling_interval: float = 0.05, max_data_points: int = 2000):
        """
        Initialize recorder.

        Args:
            sampling_interval: Minimum time between stored samples
            max_data_points: Maximum number of samples kept
        """
        self._sampling_interval = validate_positive(sampling_interval, "sampling_interval")
        self._max_data_points = validate_min_int(max_data_points, "max_data_points", 1)

        self._buffer: deque = deque()
        self._last_recorded_time: float = 0.0

    @property
    def sampling_interval(self) -> float:
        return self._sampling_interval

    @property
    def max_data_points(self) -> int:
        return self._max_data_points

    @property
    def last_recorded_time(self) -> float:
        return self._last_recorded_time

    def record(
        self,
        time: float,
        current_value: float,
        target_value: float,
        debug_info: PIDDebugInfo,
        force_record: bool = False
    ) -> bool:
        """
        Record a sample.

        Args:
            time: Elapsed simulation time
            current_value: Plant value at ``time``
            target_value: Target at ``time``
            debug_info: Controller terms for this tick
            force_record: Bypass the sampling interval check

        Returns:
            True if the sample was stored, False if it was decimated
        """
        if not force_record and time - self._last_recorded_time < self._sampling_interval:
            return False

        if len(self._buffer) >= self._max_data_points:
            self._buffer.popleft()

        self._buffer.append(DataPoint(
            time=time,
            current_value=current_value,
            target_value=target_value,
            p_term=debug_info.p_term,
            i_term=debug_info.i_term,
            d_term=debug_info.d_term,
            control_output=debug_info.output
        ))
        self._last_recorded_time = time
        return True

    def get_data(self) -> List[DataPoint]:
        """Copy of all recorded samples, oldest first."""
        return list(self._buffer)

    def get_data_count(self) -> int:
        return len(self._buffer)

    def clear(self) -> None:
        """Clear samples and the decimation clock."""
        self._buffer.clear()
        self._last_recorded_time = 0.0

    def set_sampling_interval(self, interval: float) -> None:
        """Set the sampling interval, floored at 1 ms."""
        self._sampling_interval = max(MIN_SAMPLING_INTERVAL, interval)

    def set_max_data_points(self, max_points: int) -> None:
        """
        Set the capacity, floored at 100 samples.

        If the buffer currently holds more samples than the new capacity,
        the oldest ones are dropped.
        """
        self._max_data_points = max(MIN_CAPACITY_SETTING, int(max_points))
        while len(self._buffer) > self._max_data_points:
            self._buffer.popleft()

    def get_data_in_range(self, start_time: float, end_time: float) -> List[DataPoint]:
        """Samples with ``start_time <= time <= end_time``."""
        return [p for p in self._buffer if start_time <= p.time <= end_time]

    def get_last_data_point(self) -> Optional[DataPoint]:
        """Most recent sample, or None when nothing has been recorded."""
        if self._buffer:
            return self._buffer[-1]
        return None

    def to_arrays(self) -> Dict[str, np.ndarray]:
        """
        Recorded samples as one numpy array per column.

        Returns:
            Dictionary keyed by ``DataPoint`` field name
        """
        data = list(self._buffer)
        return {
            column: np.array([getattr(p, column) for p in data], dtype=float)
            for column in COLUMNS
        }

    def to_csv(self, file_path: str) -> Path:
        """
        Export recorded samples to a CSV file.

        Args:
            file_path: Output file path (parent directories are created)

        Returns:
            Path of the written file
        """
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=COLUMNS)
            writer.writeheader()
            writer.writerows(p.to_dict() for p in self._buffer)

        logger.info("Exported %d samples to %s", len(self._buffer), path)
        return path

    def __len__(self) -> int:
        return len(self._buffer)

    def __repr__(self) -> str:
        return (
            f"DataRecorder(sampling_interval={self._sampling_interval}, "
            f"max_data_points={self._max_data_points}, count={len(self._buffer)})"
        )
