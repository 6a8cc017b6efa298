"""Plant models driven by the trainer."""

from pid_trainer.plants.base_plant import BasePlant, ModelId
from pid_trainer.plants.pendulum import PendulumPlant
from pid_trainer.plants.hovercraft import HovercraftPlant
from pid_trainer.plants.crane import CranePlant

__all__ = [
    "BasePlant",
    "ModelId",
    "PendulumPlant",
    "HovercraftPlant",
    "CranePlant",
    "create_plant",
]


def create_plant(model_id: int) -> BasePlant:
    """Create the default plant for a model id."""
    plants = {
        ModelId.PENDULUM: PendulumPlant,
        ModelId.HOVERCRAFT: HovercraftPlant,
        ModelId.CRANE: CranePlant,
    }
    return plants[ModelId(model_id)]()
