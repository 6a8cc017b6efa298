"""
Plotting of recorded simulation runs.
"""

from typing import Dict, Optional, Tuple, Union
import numpy as np
import matplotlib.pyplot as plt
import matplotlib.gridspec as gridspec
from matplotlib.figure import Figure
from matplotlib.axes import Axes

from pid_trainer.recording.data_recorder import DataRecorder
from pid_trainer.analyzer.evaluator import SimulationResult

RunData = Union[DataRecorder, Dict[str, np.ndarray]]


def response_y_limit(current_values: np.ndarray, target: float) -> float:
    """
    Upper y-limit for a response plot.

    At least 1.2 x target; raised to 1.1 x the data maximum when the
    response goes above that.
    """
    y_max = target * 1.2
    if len(current_values) > 0:
        data_max = float(np.max(current_values))
        if data_max > y_max:
            y_max = data_max * 1.1
    return y_max


class ResponsePlotter:
    """
    Plots a recorded run: response against target and the PID terms.

    Every plot method accepts either a ``DataRecorder`` or the column
    dictionary returned by ``DataRecorder.to_arrays()``.
    """

    def __init__(self, style: str = 'seaborn-v0_8-whitegrid'):
        """
        Initialize plotter.

        Args:
            style: Matplotlib style to use
        """
        try:
            plt.style.use(style)
        except OSError:
            plt.style.use('default')

        self._colors = {
            'target': '#2ecc71',
            'current': '#3498db',
            'error': '#e74c3c',
            'output': '#9b59b6',
            'p_term': '#f39c12',
            'i_term': '#1abc9c',
            'd_term': '#e67e22',
        }

    @staticmethod
    def _columns(data: RunData) -> Dict[str, np.ndarray]:
        if isinstance(data, DataRecorder):
            return data.to_arrays()
        return data

    def draw_response(self, ax: Axes, data: RunData, unit: str = "") -> Axes:
        """Draw current value and target over time onto ``ax``."""
        cols = self._columns(data)
        t = cols['time']

        ax.plot(t, cols['target_value'], '--', color=self._colors['target'],
                linewidth=2, label='Target')
        ax.plot(t, cols['current_value'], '-', color=self._colors['current'],
                linewidth=1.5, label='Current')

        if len(t) > 0:
            target = float(cols['target_value'][-1])
            y_max = response_y_limit(cols['current_value'], target)
            y_min = min(0.0, float(np.min(cols['current_value'])) * 1.1)
            if y_max > y_min:
                ax.set_ylim(y_min, y_max)

        ax.set_xlabel('Time (s)')
        ax.set_ylabel(f'Value ({unit})' if unit else 'Value')
        ax.legend(loc='lower right')
        ax.grid(True, alpha=0.3)
        return ax

    def draw_terms(self, ax: Axes, data: RunData) -> Axes:
        """Draw P, I, D and total control output onto ``ax``."""
        cols = self._columns(data)
        t = cols['time']

        ax.plot(t, cols['p_term'], '-', color=self._colors['p_term'], linewidth=1.2, label='P')
        ax.plot(t, cols['i_term'], '-', color=self._colors['i_term'], linewidth=1.2, label='I')
        ax.plot(t, cols['d_term'], '-', color=self._colors['d_term'], linewidth=1.2, label='D')
        ax.plot(t, cols['control_output'], 'k-', linewidth=1.0, alpha=0.6, label='Output')
        ax.axhline(y=0, color='gray', linestyle=':', alpha=0.5)

        ax.set_xlabel('Time (s)')
        ax.set_ylabel('Component Value')
        ax.legend(loc='upper right', fontsize=9)
        ax.grid(True, alpha=0.3)
        return ax

    def plot_response(
        self,
        data: RunData,
        title: str = "Response",
        unit: str = "",
        figsize: Tuple[int, int] = (12, 6)
    ) -> Figure:
        """
        Plot current value against target.

        Args:
            data: Recorded run
            title: Plot title
            unit: Value unit shown on the y-axis
            figsize: Figure size

        Returns:
            Matplotlib Figure
        """
        fig, ax = plt.subplots(figsize=figsize)
        self.draw_response(ax, data, unit)
        ax.set_title(title, fontsize=14, fontweight='bold')
        plt.tight_layout()
        return fig

    def plot_terms(
        self,
        data: RunData,
        title: str = "PID Components",
        figsize: Tuple[int, int] = (12, 6)
    ) -> Figure:
        """Plot the P/I/D terms and control output."""
        fig, ax = plt.subplots(figsize=figsize)
        self.draw_terms(ax, data)
        ax.set_title(title, fontsize=14, fontweight='bold')
        plt.tight_layout()
        return fig

    def plot_run(
        self,
        data: RunData,
        result: Optional[SimulationResult] = None,
        title: str = "Simulation Run",
        unit: str = "",
        figsize: Tuple[int, int] = (12, 9)
    ) -> Figure:
        """
        Two-panel figure: response on top, PID terms below.

        When ``result`` is given its metrics are shown in the title and
        the settling time is marked on the response panel.
        """
        fig = plt.figure(figsize=figsize)
        gs = gridspec.GridSpec(2, 1, height_ratios=[2, 1], hspace=0.3)

        ax1 = fig.add_subplot(gs[0])
        self.draw_response(ax1, data, unit)

        if result is not None:
            ax1.axvline(x=result.settling_time, color=self._colors['error'],
                        linestyle=':', alpha=0.8, label='Settling time')
            ax1.legend(loc='lower right')
            title = (
                f"{title}\nSettling {result.settling_time:.2f}s, "
                f"Overshoot {result.overshoot_percentage:.1f}%, "
                f"SSE {result.steady_state_error:.3f}, Score {result.score:.1f}"
            )
        ax1.set_title(title, fontsize=13, fontweight='bold')

        ax2 = fig.add_subplot(gs[1], sharex=ax1)
        self.draw_terms(ax2, data)

        return fig

    @staticmethod
    def show():
        """Display all plots."""
        plt.show()

    @staticmethod
    def save(fig: Figure, path: str, dpi: int = 150):
        """Save figure to file."""
        fig.savefig(path, dpi=dpi, bbox_inches='tight')
