"""wmagent/motivation/state.py

Emotional, needs and personality state records.

Ranges: happiness in [-1, 1]; every other field in [0, 1].
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


def clamp01(x: float) -> float:
    return float(np.clip(float(x), 0.0, 1.0))


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation with t clamped to [0, 1]."""
    t = clamp01(t)
    return float(a + (b - a) * t)


@dataclass
class EmotionalState:
    happiness: float = 0.0
    energy: float = 0.0
    stress: float = 0.0
    social_need: float = 0.0
    confidence: float = 0.0

    def clamp(self) -> None:
        self.happiness = float(np.clip(self.happiness, -1.0, 1.0))
        self.energy = clamp01(self.energy)
        self.stress = clamp01(self.stress)
        self.social_need = clamp01(self.social_need)
        self.confidence = clamp01(self.confidence)


@dataclass
class InnateNeeds:
    rest: float = 0.0
    hunger: float = 0.0
    comfort: float = 0.0
    achievement: float = 0.0

    def clamp(self) -> None:
        self.rest = clamp01(self.rest)
        self.hunger = clamp01(self.hunger)
        self.comfort = clamp01(self.comfort)
        self.achievement = clamp01(self.achievement)


@dataclass(frozen=True)
class Personality:
    extraversion: float = 0.5
    neuroticism: float = 0.5
    conscientiousness: float = 0.5

    def motivation_bias(self) -> float:
        """Trait offset added to every action weight."""
        return (
            (self.extraversion - 0.5) * 0.1
            - self.neuroticism * 0.2
            + self.conscientiousness * 0.2
        )
