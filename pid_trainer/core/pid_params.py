"""
PID parameter sets, presets and tuning ranges.
"""

from dataclasses import dataclass, asdict, replace
from typing import Dict, Any, List
import json

from pid_trainer.utils.validators import validate_finite, validate_non_negative


@dataclass(frozen=True)
class PIDParameters:
    """
    Gains plus the initial target chosen for a run.

    Immutable: use ``copy(**changes)`` to derive a modified set.
    """

    kp: float = 0.0
    ki: float = 0.0
    kd: float = 0.0
    target_value: float = 0.0

    def __post_init__(self):
        """Validate parameters after initialization."""
        validate_non_negative(self.kp, "kp")
        validate_non_negative(self.ki, "ki")
        validate_non_negative(self.kd, "kd")
        validate_finite(self.target_value, "target_value")

    def copy(self, **changes) -> 'PIDParameters':
        """
        Create a copy with optional parameter changes.

        Args:
            **changes: Parameters to override

        Returns:
            New PIDParameters instance
        """
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PIDParameters':
        """Create from dictionary, ignoring unknown keys."""
        known = {k: data[k] for k in ('kp', 'ki', 'kd', 'target_value') if k in data}
        return cls(**known)

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> 'PIDParameters':
        """Create from JSON string."""
        return cls.from_dict(json.loads(json_str))

    def __str__(self) -> str:
        return (
            f"PIDParameters(Kp={self.kp:.2f}, Ki={self.ki:.2f}, "
            f"Kd={self.kd:.2f}, Target={self.target_value:.2f})"
        )


@dataclass(frozen=True)
class PIDPreset:
    """Named gain set offered to the user before a run."""
    name: str
    kp: float
    ki: float
    kd: float
    description: str = ""

    def to_parameters(self, target_value: float) -> PIDParameters:
        """Combine the preset gains with a target value."""
        return PIDParameters(self.kp, self.ki, self.kd, target_value)


@dataclass(frozen=True)
class GainRange:
    """Inclusive bounds of a tuning slider."""
    minimum: float
    maximum: float

    def clamp(self, value: float) -> float:
        return min(max(value, self.minimum), self.maximum)

    def contains(self, value: float) -> bool:
        return self.minimum <= value <= self.maximum


GAIN_RANGES: Dict[str, GainRange] = {
    'kp': GainRange(0.0, 300.0),
    'ki': GainRange(0.0, 5.0),
    'kd': GainRange(0.0, 50.0),
}

DEFAULT_PARAMETERS = PIDParameters(kp=100.0, ki=1.0, kd=20.0, target_value=90.0)


class PIDPresets:
    """Gain presets per plant model."""

    @staticmethod
    def stable() -> PIDPreset:
        """Slow but reliably reaches the target."""
        return PIDPreset(
            "stable", kp=50.0, ki=0.5, kd=10.0,
            description="Slow but reliably reaches the target angle."
        )

    @staticmethod
    def balanced() -> PIDPreset:
        """Good balance between response speed and stability."""
        return PIDPreset(
            "balanced", kp=100.0, ki=1.0, kd=20.0,
            description="Good balance between response speed and stability."
        )

    @staticmethod
    def fast() -> PIDPreset:
        """Reaches the target quickly, prone to overshoot."""
        return PIDPreset(
            "fast", kp=200.0, ki=2.0, kd=5.0,
            description="Reaches the target quickly but tends to overshoot."
        )

    @classmethod
    def for_model(cls, model_id: int) -> List[PIDPreset]:
        """
        Presets for a plant model id.

        Only the pendulum (id 0) ships presets; other models return an
        empty list.
        """
        if int(model_id) == 0:
            return [cls.stable(), cls.balanced(), cls.fast()]
        return []
