"""Simulation session and its configuration and events."""

from pid_trainer.simulation.config import SimulationConfig
from pid_trainer.simulation.events import (
    EventDispatcher,
    EventLog,
    SimulationEvent,
    SimulationEventType,
)
from pid_trainer.simulation.simulator import SimulationSession, SimulationState

__all__ = [
    "SimulationConfig",
    "EventDispatcher",
    "EventLog",
    "SimulationEvent",
    "SimulationEventType",
    "SimulationSession",
    "SimulationState",
]
