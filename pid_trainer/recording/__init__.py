"""Time-series recording of simulation runs."""

from pid_trainer.recording.data_recorder import DataRecorder, DataPoint, COLUMNS

__all__ = [
    "DataRecorder",
    "DataPoint",
    "COLUMNS",
]
