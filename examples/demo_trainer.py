#!/usr/bin/env python3
"""
PID Trainer Demo

Demonstrates:
- Running each trainer model to completion with a fixed step
- Pendulum presets
- Scoring a run
- CSV export and plotting of the recording
"""

import logging
import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import matplotlib
matplotlib.use("Agg")

from pid_trainer import SimulationSession, SimulationConfig, PIDParameters, PIDPresets, setup_logging
from pid_trainer.analyzer import ResponsePlotter
from pid_trainer.plants import PendulumPlant, HovercraftPlant, CranePlant
from pid_trainer.simulation import EventLog

OUTPUT_DIR = Path("output")


def run_model(plant, params, title, plotter):
    session = SimulationSession(SimulationConfig())
    log = EventLog(include_time_updates=False)
    session.events.subscribe(log)

    session.initialize_from_parameters(plant, params)
    state = session.run()
    result = session.evaluate()

    print(f"\n{title}")
    print("-" * 60)
    print(f"  {params}")
    print(f"  Final state:   {state.value}")
    print(f"  Events:        {', '.join(t.value for t in log.types())}")
    print(f"  Stable:        {session.is_stability_achieved}")
    print(f"  Settling time: {result.settling_time:.2f}s")
    print(f"  Overshoot:     {result.overshoot_percentage:.1f}%")
    print(f"  SSE:           {result.steady_state_error:.3f} {plant.get_value_unit()}")
    print(f"  Score:         {result.score:.1f} / 100")

    slug = title.lower().replace(" ", "_")
    session.recorder.to_csv(str(OUTPUT_DIR / f"{slug}.csv"))
    fig = plotter.plot_run(session.recorder, result, title=title, unit=plant.get_value_unit())
    plotter.save(fig, str(OUTPUT_DIR / f"{slug}.png"))

    return result


def main():
    setup_logging(logging.WARNING)

    print("=" * 60)
    print("PID Trainer Demo")
    print("=" * 60)

    OUTPUT_DIR.mkdir(exist_ok=True)
    plotter = ResponsePlotter()

    # Pendulum: every preset at the default 90 degree target
    for preset in PIDPresets.for_model(0):
        run_model(
            PendulumPlant(),
            preset.to_parameters(90.0),
            f"Pendulum {preset.name}",
            plotter
        )

    run_model(
        HovercraftPlant(),
        PIDParameters(kp=40.0, ki=2.0, kd=30.0, target_value=10.0),
        "Hovercraft",
        plotter
    )

    run_model(
        CranePlant(),
        PIDParameters(kp=60.0, ki=0.5, kd=80.0, target_value=5.0),
        "Crane",
        plotter
    )

    print("\n" + "=" * 60)
    print(f"Recordings and plots written to {OUTPUT_DIR}/")
    print("=" * 60)


if __name__ == "__main__":
    main()
