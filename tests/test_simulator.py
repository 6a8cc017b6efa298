"""
Unit tests for the simulation session.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_trainer.analyzer.evaluator import calculate_score
from pid_trainer.core.pid_params import PIDParameters
from pid_trainer.plants.base_plant import BasePlant, ModelId
from pid_trainer.simulation.config import SimulationConfig
from pid_trainer.simulation.events import (
    EventDispatcher,
    EventLog,
    SimulationEvent,
    SimulationEventType,
)
from pid_trainer.simulation.simulator import SimulationSession, SimulationState
from pid_trainer.utils.validators import ValidationError


class FakePlant(BasePlant):
    """Plant whose value and velocity are set directly by the test."""

    def __init__(self, value=0.0, velocity=0.0, target=90.0):
        super().__init__(target, 1.0, 1.0)
        self.initial_value = value
        self.value = value
        self.velocity = velocity
        self.steps = 0

    def get_current_value(self):
        return self.value

    def get_current_velocity(self):
        return self.velocity

    def set_control_input(self, control_input):
        self._control_input = control_input

    def step(self, dt):
        self.steps += 1
        self._time += dt

    def reset(self):
        self.value = self.initial_value
        self._control_input = 0.0
        self._time = 0.0

    def get_value_unit(self):
        return "u"

    def get_model_name(self):
        return "Fake"

    def get_model_id(self):
        return ModelId.PENDULUM


class RampPlant(FakePlant):
    """Ramps from 0 to 90.5 over two seconds of its own time, then holds."""

    def step(self, dt):
        super().step(dt)
        if self._time < 2.0 - 1e-9:
            self.value = 45.25 * self._time
            self.velocity = 45.25
        else:
            self.value = 90.5
            self.velocity = 0.0


def running_session(plant=None, **config):
    session = SimulationSession(SimulationConfig(**config))
    session.initialize(plant or FakePlant(), kp=100.0, ki=1.0, kd=20.0, target_value=90.0)
    assert session.start_simulation()
    return session


class TestTransitions:
    """Test suite for the session state machine."""

    def test_initial_state(self):
        """A new session is idle with zeroed timers."""
        session = SimulationSession()
        assert session.state is SimulationState.IDLE
        assert session.elapsed_time == 0.0
        assert session.settling_time == 0.0
        assert not session.is_stability_achieved
        assert session.plant is None

    def test_start_without_plant_fails(self):
        """Starting without a plant leaves the session idle."""
        session = SimulationSession()
        log = EventLog()
        session.events.subscribe(log)

        assert not session.start_simulation()
        assert session.state is SimulationState.IDLE
        assert len(log) == 0

    def test_start(self):
        """IDLE -> RUNNING emits STARTED."""
        session = SimulationSession()
        session.initialize(FakePlant(), 1.0, 0.0, 0.0, 90.0)
        log = EventLog()
        session.events.subscribe(log)

        assert session.start_simulation()
        assert session.state is SimulationState.RUNNING
        assert log.types() == [SimulationEventType.STARTED]

    def test_start_when_not_idle_is_ignored(self):
        """A second start does nothing."""
        session = running_session()
        session.tick(0.02)

        assert not session.start_simulation()
        assert session.state is SimulationState.RUNNING
        assert session.elapsed_time == pytest.approx(0.02)

    def test_pause_and_resume(self):
        """Ticks are ignored while paused."""
        session = running_session()
        session.tick(0.1)

        session.pause_simulation()
        assert session.state is SimulationState.PAUSED
        session.tick(0.1)
        assert session.elapsed_time == pytest.approx(0.1)

        session.resume_simulation()
        assert session.state is SimulationState.RUNNING
        session.tick(0.1)
        assert session.elapsed_time == pytest.approx(0.2)

    def test_pause_and_resume_ignored_in_wrong_state(self):
        """Pause needs RUNNING and resume needs PAUSED."""
        session = SimulationSession()
        session.pause_simulation()
        assert session.state is SimulationState.IDLE

        session = running_session()
        session.resume_simulation()
        assert session.state is SimulationState.RUNNING

    @pytest.mark.parametrize("pause_first", [False, True])
    def test_stop(self, pause_first):
        """RUNNING or PAUSED -> STOPPED emits STOPPED."""
        session = running_session()
        if pause_first:
            session.pause_simulation()
        log = EventLog()
        session.events.subscribe(log)

        session.stop_simulation()
        assert session.state is SimulationState.STOPPED
        assert session.is_terminal
        assert log.types() == [SimulationEventType.STOPPED]

    def test_stop_when_idle_is_noop(self):
        """Stopping an idle session does nothing."""
        session = SimulationSession()
        log = EventLog()
        session.events.subscribe(log)

        session.stop_simulation()
        assert session.state is SimulationState.IDLE
        assert len(log) == 0

    def test_terminal_states_ignore_ticks(self):
        """Nothing changes after the run is stopped."""
        session = running_session()
        session.tick(0.1)
        session.stop_simulation()

        session.tick(0.1)
        session.resume_simulation()
        assert session.elapsed_time == pytest.approx(0.1)
        assert session.state is SimulationState.STOPPED

    def test_initialize_returns_to_idle(self):
        """Initialize clears the previous run."""
        session = running_session(max_simulation_time=1.0)
        session.run(delta_time=0.1)
        assert session.state is SimulationState.COMPLETED

        plant = FakePlant()
        session.initialize(plant, 2.0, 0.0, 0.0, 45.0)
        assert session.state is SimulationState.IDLE
        assert session.elapsed_time == 0.0
        assert session.settling_time == 0.0
        assert session.recorder.get_data_count() == 0
        assert session.controller.kp == 2.0
        assert plant.get_target_value() == 45.0

    def test_initialize_from_parameters(self):
        """Gains and target can come from a parameter set."""
        session = SimulationSession()
        plant = FakePlant()
        session.initialize_from_parameters(plant, PIDParameters(3.0, 0.5, 1.0, 30.0))

        assert (session.controller.kp, session.controller.ki, session.controller.kd) == (3.0, 0.5, 1.0)
        assert plant.get_target_value() == 30.0

    def test_plant_detached_mid_run_stops(self):
        """A missing plant at tick time stops the run."""
        session = running_session()
        session.set_plant(None)

        session.tick(0.02)
        assert session.state is SimulationState.STOPPED


class TestTick:
    """Test suite for a single simulation step."""

    def test_tick_applies_control_and_records(self):
        """The controller output reaches the plant and is recorded."""
        plant = FakePlant(value=80.0)
        session = running_session(plant)
        session.set_pid_gains(2.0, 0.0, 0.0)

        session.tick(0.1)

        assert plant.control_input == pytest.approx(20.0)
        point = session.recorder.get_last_data_point()
        assert point.time == pytest.approx(0.1)
        assert point.current_value == 80.0
        assert point.target_value == 90.0
        assert point.control_output == pytest.approx(20.0)

    def test_time_updated_events(self):
        """Each tick reports the new elapsed time."""
        session = running_session()
        log = EventLog()
        session.events.subscribe(log)

        session.tick(0.25)
        session.tick(0.25)

        values = [e.value for e in log.of_type(SimulationEventType.TIME_UPDATED)]
        assert values == [0.25, 0.5]
        assert all(e.session is session for e in log.events)

    def test_zero_dt_is_tolerated(self):
        """A zero step neither fails nor advances the run."""
        plant = FakePlant(value=10.0)
        session = running_session(plant)

        session.tick(0.0)
        assert session.state is SimulationState.RUNNING
        assert session.elapsed_time == 0.0
        assert plant.control_input == 0.0
        assert session.controller.integral == 0.0

    def test_negative_dt_keeps_clocks(self):
        """A negative step rewinds neither elapsed time nor the stability timer."""
        plant = FakePlant(value=90.0)
        session = running_session(plant)

        session.tick(0.5)
        session.tick(-0.25)

        assert session.state is SimulationState.RUNNING
        assert session.elapsed_time == 0.5
        assert session.stability_timer == 0.5
        assert plant.control_input == 0.0

    def test_non_finite_plant_value_leaves_no_partial_tick(self):
        """A NaN reading fails the tick before any state changes."""
        plant = FakePlant(value=float('nan'))
        session = running_session(plant)
        log = EventLog()
        session.events.subscribe(log)

        with pytest.raises(ValidationError):
            session.tick(0.25)

        assert session.elapsed_time == 0.0
        assert len(log) == 0
        assert session.recorder.get_data_count() == 0
        assert session.state is SimulationState.RUNNING

    def test_gains_change_mid_run(self):
        """New gains apply from the next tick."""
        plant = FakePlant(value=0.0)
        session = running_session(plant)
        session.set_pid_gains(1.0, 0.0, 0.0)
        session.tick(0.1)
        assert plant.control_input == pytest.approx(90.0)

        session.set_pid_gains(0.5, 0.0, 0.0)
        session.tick(0.1)
        assert plant.control_input == pytest.approx(45.0)

    def test_target_change_mid_run(self):
        """A new target is read from the plant on the next tick."""
        plant = FakePlant(value=0.0)
        session = running_session(plant)
        session.set_pid_gains(1.0, 0.0, 0.0)

        session.set_target_value(10.0)
        session.tick(0.1)
        assert plant.control_input == pytest.approx(10.0)


class TestStability:
    """Test suite for stability detection and completion."""

    def test_stability_band(self):
        """The band is a fraction of |target| with a floor."""
        session = SimulationSession()
        assert session.stability_band(90.0) == pytest.approx(4.5)
        assert session.stability_band(-90.0) == pytest.approx(4.5)
        assert session.stability_band(0.0) == pytest.approx(0.1)

    def test_timer_resets_when_leaving_band(self):
        """Only consecutive stable ticks count."""
        plant = FakePlant(value=89.0)
        session = running_session(plant)

        for _ in range(3):
            session.tick(0.25)
        assert session.stability_timer == pytest.approx(0.75)

        plant.value = 50.0
        session.tick(0.25)
        assert session.stability_timer == 0.0
        assert session.state is SimulationState.RUNNING

    def test_velocity_outside_band_is_unstable(self):
        """Being on target while moving fast does not count."""
        plant = FakePlant(value=90.0, velocity=10.0)
        session = running_session(plant)

        session.tick(0.25)
        assert session.stability_timer == 0.0

    def test_settling_time_is_back_dated(self):
        """Settling time is the start of the stable window."""
        plant = FakePlant(value=0.0)
        session = running_session(plant)
        log = EventLog(include_time_updates=False)
        session.events.subscribe(log)

        while session.state is SimulationState.RUNNING:
            next_time = session.elapsed_time + 0.25
            plant.value = 90.0 if next_time > 5.0 else 0.0
            session.tick(0.25)

        assert session.state is SimulationState.COMPLETED
        assert session.is_stability_achieved
        assert session.elapsed_time == 6.0
        assert session.settling_time == 5.0

        completed = log.of_type(SimulationEventType.COMPLETED)
        assert len(completed) == 1
        assert completed[0].value == 5.0

    def test_time_limit_completes_run(self):
        """Reaching the limit completes without stability."""
        session = running_session(FakePlant(value=0.0), max_simulation_time=2.0)
        log = EventLog(include_time_updates=False)
        session.events.subscribe(log)

        for _ in range(8):
            session.tick(0.25)

        assert session.state is SimulationState.COMPLETED
        assert not session.is_stability_achieved
        assert session.settling_time == 2.0
        assert log.types() == [SimulationEventType.COMPLETED]
        assert log.events[0].value == 2.0

    def test_zero_duration_window(self):
        """With no stability window the first stable tick completes the run."""
        session = running_session(FakePlant(value=90.0), stability_check_duration=0.0)

        session.tick(0.5)
        assert session.state is SimulationState.COMPLETED
        assert session.settling_time == 0.5


class TestRun:
    """End-to-end runs with the built-in driver."""

    def test_converging_plant(self):
        """A plant settled by t=2 is confirmed stable at t=3."""
        session = running_session(RampPlant())
        dt = 0.02

        state = session.run(delta_time=dt)

        assert state is SimulationState.COMPLETED
        assert session.is_stability_achieved
        assert session.settling_time == pytest.approx(3.0 - 1.0, abs=dt)
        assert session.elapsed_time == pytest.approx(3.0, abs=dt)

        result = session.evaluate()
        assert result.settling_time == session.settling_time
        assert result.overshoot_percentage == 0.0
        assert result.steady_state_error == pytest.approx(0.5)
        assert result.score == pytest.approx(calculate_score(
            session.settling_time, 0.0, 0.5, session.recorder.get_data_count()
        ))

    def test_never_converging_plant(self):
        """A plant stuck away from target runs to the 30 s limit."""
        plant = FakePlant(value=0.0)
        session = running_session(plant)

        state = session.run(delta_time=0.02)

        assert state is SimulationState.COMPLETED
        assert not session.is_stability_achieved
        assert session.settling_time == 30.0
        assert session.elapsed_time == pytest.approx(30.0)
        assert plant.steps == 1500

    def test_run_starts_idle_session(self):
        """run() starts an idle session."""
        session = SimulationSession(SimulationConfig(max_simulation_time=1.0))
        session.initialize(FakePlant(), 1.0, 0.0, 0.0, 90.0)

        assert session.run(delta_time=0.1) is SimulationState.COMPLETED

    def test_run_without_plant(self):
        """run() with no plant stays idle."""
        session = SimulationSession()
        assert session.run() is SimulationState.IDLE

    def test_run_max_steps(self):
        """max_steps bounds the loop and leaves the run going."""
        plant = FakePlant()
        session = running_session(plant)

        assert session.run(delta_time=0.02, max_steps=10) is SimulationState.RUNNING
        assert plant.steps == 10

    def test_run_rejects_bad_dt(self):
        """The driver needs a positive step."""
        session = running_session()
        with pytest.raises(ValidationError):
            session.run(delta_time=0.0)

    def test_evaluate_empty_recording(self):
        """Evaluating before any sample passes the settling time through."""
        session = SimulationSession()
        result = session.evaluate()
        assert result.settling_time == 0.0
        assert result.score == 0.0

    def test_time_score_uses_standard_run_length(self):
        """A longer time limit does not stretch the time score."""
        plant = FakePlant(value=0.0)
        session = running_session(plant, max_simulation_time=60.0)

        while session.state is SimulationState.RUNNING:
            next_time = session.elapsed_time + 0.25
            plant.value = 90.0 if next_time > 39.0 else 0.0
            session.tick(0.25)

        assert session.is_stability_achieved
        assert session.settling_time == 39.0
        assert session.recorder.get_data_count() >= 100

        result = session.evaluate()
        assert result.overshoot_percentage == 0.0
        assert result.steady_state_error == 0.0
        assert result.score == pytest.approx(0.0 + 30.0 + 20.0)


class TestSettings:
    """Test suite for session setters."""

    def test_max_simulation_time_floor(self):
        """The time limit is at least 1 s."""
        session = SimulationSession()
        session.set_max_simulation_time(0.2)
        assert session.max_simulation_time == 1.0

        session.set_max_simulation_time(12.0)
        assert session.max_simulation_time == 12.0

    def test_stability_tolerance_clamped(self):
        """The tolerance is clamped to [0.01, 0.5]."""
        session = SimulationSession()
        session.set_stability_tolerance(0.0)
        assert session.stability_tolerance == 0.01

        session.set_stability_tolerance(2.0)
        assert session.stability_tolerance == 0.5

        session.set_stability_tolerance(0.1)
        assert session.stability_band(90.0) == pytest.approx(9.0)

    def test_config_drives_components(self):
        """Controller and recorder are built from the configuration."""
        config = SimulationConfig(sampling_interval=0.1, max_data_points=500,
                                  integral_limit=10.0, derivative_filter_factor=0.5)
        session = SimulationSession(config)

        assert session.recorder.sampling_interval == 0.1
        assert session.recorder.max_data_points == 500
        assert session.controller.integral_limit == 10.0
        assert session.controller.derivative_filter_factor == 0.5

    def test_repr(self):
        """Test representation."""
        assert "idle" in repr(SimulationSession())


class TestEvents:
    """Test suite for the event dispatcher."""

    def test_subscribe_unsubscribe(self):
        """Callbacks are called until removed."""
        dispatcher = EventDispatcher()
        received = []
        dispatcher.subscribe(received.append)
        dispatcher.subscribe(received.append)
        assert len(dispatcher) == 1

        event = SimulationEvent(SimulationEventType.STARTED)
        dispatcher.emit(event)
        dispatcher.unsubscribe(received.append)
        dispatcher.emit(event)

        assert received == [event]

    def test_subscribe_requires_callable(self):
        """Non-callables are rejected."""
        with pytest.raises(TypeError):
            EventDispatcher().subscribe("not callable")

    def test_listener_exception_propagates(self):
        """An exception in a listener reaches the caller."""
        session = SimulationSession()
        session.initialize(FakePlant(), 1.0, 0.0, 0.0, 90.0)

        def broken(event):
            raise RuntimeError("listener failed")

        session.events.subscribe(broken)
        with pytest.raises(RuntimeError):
            session.start_simulation()

    def test_event_log_maxlen(self):
        """The log keeps only the newest events."""
        log = EventLog(maxlen=2)
        for value in (1.0, 2.0, 3.0):
            log(SimulationEvent(SimulationEventType.TIME_UPDATED, value=value))

        assert [e.value for e in log.events] == [2.0, 3.0]
        log.clear()
        assert len(log) == 0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
