"""
Unit tests for run plotting.
"""

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_trainer.analyzer.evaluator import SimulationResult
from pid_trainer.analyzer.plots import ResponsePlotter, response_y_limit
from pid_trainer.core.pid_controller import PIDDebugInfo
from pid_trainer.recording.data_recorder import DataRecorder


@pytest.fixture
def recorder():
    rec = DataRecorder(sampling_interval=0.05)
    for i in range(1, 41):
        t = i * 0.05
        value = 90.0 * (1.0 - np.exp(-t))
        rec.record(t, value, 90.0, PIDDebugInfo(90.0 - value, 1.0, 0.5, 0.2, 1.7))
    return rec


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


class TestResponseYLimit:
    """Test suite for the response axis limit."""

    def test_default_headroom(self):
        """Without overshoot the limit is 1.2 x target."""
        assert response_y_limit(np.array([0.0, 50.0, 89.0]), 90.0) == pytest.approx(108.0)

    def test_large_overshoot(self):
        """Large overshoot raises the limit to 1.1 x the peak."""
        assert response_y_limit(np.array([0.0, 120.0]), 90.0) == pytest.approx(132.0)

    def test_empty(self):
        assert response_y_limit(np.array([]), 10.0) == pytest.approx(12.0)


class TestResponsePlotter:
    """Test suite for ResponsePlotter."""

    def test_plot_response(self, recorder):
        """Response plot has target and current lines."""
        fig = ResponsePlotter().plot_response(recorder, unit="deg")
        ax = fig.axes[0]
        assert len(ax.get_lines()) == 2
        assert ax.get_ylabel() == 'Value (deg)'

    def test_plot_terms_from_arrays(self, recorder):
        """Column dictionaries are accepted as well as recorders."""
        fig = ResponsePlotter().plot_terms(recorder.to_arrays())
        labels = [line.get_label() for line in fig.axes[0].get_lines()]
        assert labels[:4] == ['P', 'I', 'D', 'Output']

    def test_plot_run_with_result(self, recorder, tmp_path):
        """The run figure marks the settling time and can be saved."""
        result = SimulationResult(1.0, 0.0, 0.1, 60.0)
        plotter = ResponsePlotter()
        fig = plotter.plot_run(recorder, result, title="Pendulum")

        assert len(fig.axes) == 2
        assert "Score 60.0" in fig.axes[0].get_title()

        path = tmp_path / "run.png"
        plotter.save(fig, str(path))
        assert path.exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
