"""
Fixed-step simulation session.

A session owns one PID controller and one data recorder, drives a plant
through the capability interface, and decides when the run is over:
either the response stays within tolerance for the stability window,
or the time limit is reached.
"""

from typing import Optional
from enum import Enum
import math
import logging

from pid_trainer.core.pid_controller import PIDController
from pid_trainer.core.pid_params import PIDParameters
from pid_trainer.recording.data_recorder import DataRecorder
from pid_trainer.analyzer.evaluator import DEFAULT_MAX_TIME, SimulationResult, evaluate
from pid_trainer.plants.base_plant import BasePlant
from pid_trainer.simulation.config import SimulationConfig
from pid_trainer.simulation.events import (
    EventDispatcher,
    SimulationEvent,
    SimulationEventType,
)
from pid_trainer.utils.validators import validate_finite, validate_positive

logger = logging.getLogger(__name__)

# Slack for comparisons against times accumulated from many float steps
TIME_EPSILON = 1e-9

MIN_MAX_SIMULATION_TIME = 1.0
STABILITY_TOLERANCE_RANGE = (0.01, 0.5)


class SimulationState(Enum):
    """Lifecycle of a session."""
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"
    COMPLETED = "completed"


class SimulationSession:
    """
    PID simulation state machine.

    Call ``tick(dt)`` once per fixed time step while the plant physics is
    advanced by the caller, or use ``run()`` which does both.

    Example:
        >>> from pid_trainer.plants import PendulumPlant
        >>> session = SimulationSession()
        >>> session.initialize(PendulumPlant(), kp=100.0, ki=1.0, kd=20.0, target_value=90.0)
        >>> session.run(delta_time=0.02)
        <SimulationState.COMPLETED: 'completed'>
        >>> result = session.evaluate()
    """

    def __init__(
        self,
        config: Optional[SimulationConfig] = None,
        controller: Optional[PIDController] = None,
        recorder: Optional[DataRecorder] = None,
        plant: Optional[BasePlant] = None
    ):
        """
        Initialize session.

        Args:
            config: Session settings (defaults if None)
            controller: PID controller (built from ``config`` if None)
            recorder: Data recorder (built from ``config`` if None)
            plant: Plant to attach without resetting it
        """
        self._config = config if config is not None else SimulationConfig()

        self._controller = controller if controller is not None else PIDController(
            integral_limit=self._config.integral_limit,
            derivative_filter_factor=self._config.derivative_filter_factor
        )
        self._recorder = recorder if recorder is not None else DataRecorder(
            self._config.sampling_interval,
            self._config.max_data_points
        )
        self._plant = plant
        self._events = EventDispatcher()

        self._max_simulation_time = self._config.max_simulation_time
        self._stability_tolerance = self._config.stability_tolerance

        self._state = SimulationState.IDLE
        self._elapsed_time = 0.0
        self._stability_timer = 0.0
        self._stability_achieved = False
        self._settling_time = 0.0

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def controller(self) -> PIDController:
        return self._controller

    @property
    def recorder(self) -> DataRecorder:
        return self._recorder

    @property
    def plant(self) -> Optional[BasePlant]:
        return self._plant

    @property
    def events(self) -> EventDispatcher:
        """Subscribe callbacks here to receive session events."""
        return self._events

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def elapsed_time(self) -> float:
        return self._elapsed_time

    @property
    def stability_timer(self) -> float:
        """Time the response has continuously been within tolerance."""
        return self._stability_timer

    @property
    def settling_time(self) -> float:
        return self._settling_time

    @property
    def is_stability_achieved(self) -> bool:
        return self._stability_achieved

    @property
    def is_terminal(self) -> bool:
        return self._state in (SimulationState.STOPPED, SimulationState.COMPLETED)

    @property
    def max_simulation_time(self) -> float:
        return self._max_simulation_time

    @property
    def stability_tolerance(self) -> float:
        return self._stability_tolerance

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def initialize(
        self,
        plant: BasePlant,
        kp: float,
        ki: float,
        kd: float,
        target_value: float
    ) -> None:
        """
        Prepare a new run.

        Attaches and resets the plant, applies gains and target, clears the
        recording and returns the session to IDLE.
        """
        self._plant = plant

        self._controller.set_gains(kp, ki, kd)
        self._controller.reset()

        plant.set_target_value(target_value)
        plant.reset()

        self._recorder.clear()

        self._elapsed_time = 0.0
        self._stability_timer = 0.0
        self._stability_achieved = False
        self._settling_time = 0.0
        self._state = SimulationState.IDLE

        logger.info(
            "Simulation initialized: model=%s, Kp=%s, Ki=%s, Kd=%s, Target=%s",
            plant.get_model_name(), kp, ki, kd, target_value
        )

    def initialize_from_parameters(self, plant: BasePlant, params: PIDParameters) -> None:
        """``initialize`` with gains and target taken from ``params``."""
        self.initialize(plant, params.kp, params.ki, params.kd, params.target_value)

    def set_plant(self, plant: Optional[BasePlant]) -> None:
        """Attach a plant without resetting anything."""
        self._plant = plant

    def set_pid_gains(self, kp: float, ki: float, kd: float) -> None:
        """Change gains; applies from the next tick, also mid-run."""
        self._controller.set_gains(kp, ki, kd)

    def set_target_value(self, target: float) -> None:
        if self._plant is not None:
            self._plant.set_target_value(target)

    def set_max_simulation_time(self, max_time: float) -> None:
        """Set the time limit, floored at 1 s."""
        self._max_simulation_time = max(MIN_MAX_SIMULATION_TIME, max_time)

    def set_stability_tolerance(self, tolerance: float) -> None:
        """Set the relative tolerance, clamped to [0.01, 0.5]."""
        low, high = STABILITY_TOLERANCE_RANGE
        self._stability_tolerance = min(max(tolerance, low), high)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def start_simulation(self) -> bool:
        """
        IDLE -> RUNNING.

        Returns:
            True if the run started. False when no plant is attached or
            the session is not idle; the state is left unchanged.
        """
        if self._plant is None:
            logger.error("Cannot start simulation: no plant attached")
            return False

        if self._state is not SimulationState.IDLE:
            logger.debug("start_simulation ignored in state %s", self._state.value)
            return False

        self._state = SimulationState.RUNNING
        self._elapsed_time = 0.0
        self._stability_timer = 0.0
        self._stability_achieved = False

        self._emit(SimulationEventType.STARTED)
        logger.info("Simulation started")
        return True

    def stop_simulation(self) -> None:
        """RUNNING or PAUSED -> STOPPED. No-op otherwise."""
        if self._state in (SimulationState.RUNNING, SimulationState.PAUSED):
            self._state = SimulationState.STOPPED
            self._emit(SimulationEventType.STOPPED)
            logger.info("Simulation stopped at t=%.2fs", self._elapsed_time)

    def pause_simulation(self) -> None:
        if self._state is SimulationState.RUNNING:
            self._state = SimulationState.PAUSED
            logger.info("Simulation paused")
        else:
            logger.debug("pause_simulation ignored in state %s", self._state.value)

    def resume_simulation(self) -> None:
        if self._state is SimulationState.PAUSED:
            self._state = SimulationState.RUNNING
            logger.info("Simulation resumed")
        else:
            logger.debug("resume_simulation ignored in state %s", self._state.value)

    def _complete_simulation(self) -> None:
        self._state = SimulationState.COMPLETED

        if not self._stability_achieved:
            self._settling_time = self._max_simulation_time
            logger.info("Time limit reached without achieving stability")

        self._emit(SimulationEventType.COMPLETED, self._settling_time)
        logger.info("Simulation completed: settling time = %.2fs", self._settling_time)

    def _emit(self, event_type: SimulationEventType, value: Optional[float] = None) -> None:
        self._events.emit(SimulationEvent(event_type, self, value))

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def tick(self, delta_time: float) -> None:
        """
        Advance the run by one fixed step. Does nothing unless RUNNING.

        Reads the plant, computes and applies the control input, records
        a sample, then checks for stability and the time limit. A missing
        plant stops the run. A step of zero or less still reaches the
        controller but does not advance the clocks.

        Raises:
            ValidationError: If the plant reports a NaN or infinite value;
                the session is left as it was before the tick
        """
        if self._state is not SimulationState.RUNNING:
            return

        if self._plant is None:
            logger.error("Plant detached during simulation; stopping run")
            self.stop_simulation()
            return

        current_value = validate_finite(self._plant.get_current_value(), "current_value")
        target_value = validate_finite(self._plant.get_target_value(), "target_value")

        if delta_time > 0:
            self._elapsed_time += delta_time
        self._emit(SimulationEventType.TIME_UPDATED, self._elapsed_time)

        control_input = self._controller.update(current_value, target_value, delta_time)
        self._plant.set_control_input(control_input)

        self._recorder.record(
            self._elapsed_time, current_value, target_value,
            self._controller.get_debug_info()
        )

        self._check_stability(current_value, target_value, delta_time)

        if (self._state is SimulationState.RUNNING and
                self._elapsed_time >= self._max_simulation_time - TIME_EPSILON):
            self._complete_simulation()

    def stability_band(self, target_value: float) -> float:
        """Absolute tolerance around ``target_value``."""
        return max(abs(target_value) * self._stability_tolerance,
                   self._config.minimum_tolerance)

    def _check_stability(self, current_value: float, target_value: float, delta_time: float) -> None:
        if self._stability_achieved:
            return

        tolerance = self.stability_band(target_value)
        error = abs(current_value - target_value)
        velocity = abs(self._plant.get_current_velocity())

        if error <= tolerance and velocity <= tolerance:
            if delta_time > 0:
                self._stability_timer += delta_time

            duration = self._config.stability_check_duration
            if self._stability_timer >= duration - TIME_EPSILON:
                self._stability_achieved = True
                # Back-dated to the start of the stable window
                self._settling_time = self._elapsed_time - duration
                logger.info("Stability achieved: settling time %.2fs", self._settling_time)
                self._complete_simulation()
        else:
            self._stability_timer = 0.0

    def run(self, delta_time: Optional[float] = None, max_steps: Optional[int] = None) -> SimulationState:
        """
        Drive the run to the end with a fixed time step.

        Starts the session if it is idle, then alternates ``tick`` and
        ``plant.step`` while RUNNING.

        Args:
            delta_time: Fixed step (``config.time_step`` if None)
            max_steps: Upper bound on ticks (enough to reach the time limit
                if None)

        Returns:
            State when the loop ended
        """
        dt = validate_positive(
            delta_time if delta_time is not None else self._config.time_step,
            "delta_time"
        )
        if max_steps is None:
            max_steps = int(math.ceil(self._max_simulation_time / dt)) + 1

        if self._state is SimulationState.IDLE and not self.start_simulation():
            return self._state

        steps = 0
        while self._state is SimulationState.RUNNING and steps < max_steps:
            self.tick(dt)
            if self._plant is not None:
                self._plant.step(dt)
            steps += 1

        return self._state

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def evaluate(self) -> SimulationResult:
        """
        Score the current recording.

        The time score is always measured against the standard 30 s run,
        whatever time limit this session uses.
        """
        return evaluate(
            self._recorder,
            self._settling_time,
            self._stability_tolerance,
            max_time=DEFAULT_MAX_TIME
        )

    def __repr__(self) -> str:
        return (
            f"SimulationSession(state={self._state.value}, "
            f"elapsed={self._elapsed_time:.2f}s, plant={type(self._plant).__name__})"
        )
