"""wmagent/observation/composer.py

Observation and context composition.

Layout contract (trained models depend on it; version before changing):

    observation = [perception ; motivation(12) ; consciousness]
    context     = [sin(2*pi*time) ; tick_duration ; motivation(12) ; consciousness]

Both builders are pure: same inputs, same output, inputs never mutated.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from ..config import MOTIVATION_DIM, InferenceConfig


def _flat(values: Sequence[float] | np.ndarray) -> np.ndarray:
    return np.asarray(values, dtype=float).reshape(-1)


def compose_observation(
    perception: Sequence[float] | np.ndarray,
    motivation: Sequence[float] | np.ndarray,
    consciousness: Sequence[float] | np.ndarray,
) -> np.ndarray:
    """Concatenate perception, motivation, consciousness (in that order)."""
    return np.concatenate([_flat(perception), _flat(motivation), _flat(consciousness)])


def compose_context(
    clock_phase: float,
    tick_duration: float,
    motivation: Sequence[float] | np.ndarray,
    consciousness: Sequence[float] | np.ndarray,
) -> np.ndarray:
    """Build the context vector: periodic time signal, tick duration, then state."""
    head = np.array([math.sin(2.0 * math.pi * float(clock_phase)), float(tick_duration)], dtype=float)
    return np.concatenate([head, _flat(motivation), _flat(consciousness)])


class ObservationComposer:
    """Fixed-layout wrapper over the pure builders.

    Checks every sub-vector against the configured length; a deviation is a
    configuration error (ValueError), never adapted to at runtime.
    """

    def __init__(self, cfg: InferenceConfig):
        self.perception_dim = int(cfg.perception_dim)
        self.motivation_dim = MOTIVATION_DIM
        self.consciousness_dim = int(cfg.consciousness_dim)

    @property
    def observation_dim(self) -> int:
        return self.perception_dim + self.motivation_dim + self.consciousness_dim

    @property
    def context_dim(self) -> int:
        return 2 + self.motivation_dim + self.consciousness_dim

    def _check(self, what: str, values: np.ndarray, expected: int) -> np.ndarray:
        if values.size != expected:
            raise ValueError(f"{what} length {values.size} != configured {expected}")
        return values

    def observation(self, perception, motivation, consciousness) -> np.ndarray:
        return compose_observation(
            self._check("perception", _flat(perception), self.perception_dim),
            self._check("motivation", _flat(motivation), self.motivation_dim),
            self._check("consciousness", _flat(consciousness), self.consciousness_dim),
        )

    def context(self, clock_phase: float, tick_duration: float, motivation, consciousness) -> np.ndarray:
        return compose_context(
            clock_phase,
            tick_duration,
            self._check("motivation", _flat(motivation), self.motivation_dim),
            self._check("consciousness", _flat(consciousness), self.consciousness_dim),
        )
