"""Synthetic collaborators for the harness."""

from __future__ import annotations

from typing import List

import numpy as np

from ..types import Clock, DiscreteAction


class SineWavePerception:
    """Phase-shifted sine channels plus Gaussian sensor noise."""

    def __init__(self, dim: int, clock: Clock, seed: int, noise_std: float = 0.05):
        self.dim = int(dim)
        self.clock = clock
        self.noise_std = float(noise_std)
        self.rng = np.random.default_rng(int(seed))
        self.phase = self.rng.uniform(0.0, 2.0 * np.pi, size=self.dim)
        self.freq = self.rng.uniform(0.2, 1.0, size=self.dim)

    def get_observation_data(self) -> List[float]:
        t = float(self.clock.time)
        x = np.sin(self.freq * t + self.phase)
        x = x + self.rng.normal(scale=self.noise_std, size=self.dim)
        return x.astype(float).tolist()


class DriftingConsciousness:
    """AR(1) drift clipped to [0, 1]; advanced once per read."""

    def __init__(self, dim: int, seed: int, rho: float = 0.95, noise_std: float = 0.05):
        self.dim = int(dim)
        self.rho = float(rho)
        self.noise_std = float(noise_std)
        self.rng = np.random.default_rng(int(seed))
        self.x = self.rng.uniform(0.0, 1.0, size=self.dim)

    def get_consciousness_state(self) -> List[float]:
        noise = self.rng.normal(scale=self.noise_std, size=self.dim)
        self.x = np.clip(0.5 + self.rho * (self.x - 0.5) + noise, 0.0, 1.0)
        return self.x.astype(float).tolist()


class RecordingBrain:
    """Action sink and reward sink that keeps everything it receives."""

    def __init__(self) -> None:
        self.actions: List[DiscreteAction] = []
        self.rewards: List[float] = []

    def request_action(self, discrete_action: DiscreteAction) -> None:
        self.actions.append(np.asarray(discrete_action).copy())

    def add_reward(self, reward: float) -> None:
        self.rewards.append(float(reward))

    @property
    def total_reward(self) -> float:
        return float(sum(self.rewards))
