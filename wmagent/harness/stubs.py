"""Deterministic stand-in stages for the harness and tests.

All stubs are plain classes so they pickle like real stage artifacts.
"""

from __future__ import annotations

from typing import Dict, Mapping, Sequence, Tuple

import numpy as np

from ..config import InferenceConfig
from ..types import STAGE_INPUT_NAMES, StageType


class ConstantStage:
    """Ignore inputs; return fixed outputs."""

    def __init__(self, stage_type: StageType, outputs: Mapping[str, Sequence[float]]):
        self.input_names = frozenset(STAGE_INPUT_NAMES[StageType.parse(stage_type)])
        self.outputs = {k: np.asarray(v, dtype=float).copy() for k, v in outputs.items()}
        self.calls = 0

    def __call__(self, inputs: Mapping[str, np.ndarray]) -> Dict[str, np.ndarray]:
        self.calls += 1
        return {k: v.copy() for k, v in self.outputs.items()}


class IncrementRNN:
    """hidden' = hidden + step; predicted_latent echoes the latent."""

    def __init__(self, step: float = 1.0):
        self.input_names = frozenset(STAGE_INPUT_NAMES[StageType.RNN])
        self.step = float(step)

    def __call__(self, inputs: Mapping[str, np.ndarray]) -> Dict[str, np.ndarray]:
        hidden = np.asarray(inputs["hidden_state"], dtype=float)
        return {
            "hidden_state": hidden + self.step,
            "predicted_latent": np.asarray(inputs["latent_state"], dtype=float).copy(),
        }


class FailingStage:
    """Raise on every call; for exercising the failure path."""

    def __init__(self, stage_type: StageType, message: str = "stub failure"):
        self.input_names = frozenset(STAGE_INPUT_NAMES[StageType.parse(stage_type)])
        self.message = message

    def __call__(self, inputs: Mapping[str, np.ndarray]) -> Dict[str, np.ndarray]:
        raise RuntimeError(self.message)


class ProjectionStage:
    """tanh of a fixed random projection of the concatenated inputs.

    A stand-in with the right shapes, not a trained model.
    """

    def __init__(self, stage_type: StageType, in_dims: Mapping[str, int], out_dims: Mapping[str, int], seed: int, scale: float = 0.5):
        self.stage_type = StageType.parse(stage_type)
        self.input_names = frozenset(STAGE_INPUT_NAMES[self.stage_type])
        self.order: Tuple[str, ...] = STAGE_INPUT_NAMES[self.stage_type]
        rng = np.random.default_rng(int(seed))
        n_in = int(sum(int(in_dims[k]) for k in self.order))
        self.weights = {
            name: rng.normal(scale=float(scale) / np.sqrt(max(1, n_in)), size=(int(dim), n_in))
            for name, dim in out_dims.items()
        }

    def __call__(self, inputs: Mapping[str, np.ndarray]) -> Dict[str, np.ndarray]:
        x = np.concatenate([np.asarray(inputs[k], dtype=float).reshape(-1) for k in self.order])
        return {name: np.tanh(W @ x) for name, W in self.weights.items()}


def make_stub_stages(
    cfg: InferenceConfig,
    *,
    latent: Sequence[float] | None = None,
    action: Sequence[float] = (0.2, 1.7),
) -> Tuple[ConstantStage, IncrementRNN, ConstantStage]:
    """Fixed encoder, +1 transition, constant controller."""
    if latent is None:
        latent = np.linspace(-1.0, 1.0, int(cfg.latent_dim))
    encoder = ConstantStage(StageType.ENCODER, {"latent_state": latent})
    controller = ConstantStage(StageType.CONTROLLER, {"action": action})
    return encoder, IncrementRNN(1.0), controller


def make_projection_stages(
    cfg: InferenceConfig,
    *,
    n_actions: int = 2,
    seed: int = 0,
) -> Tuple[ProjectionStage, ProjectionStage, ProjectionStage]:
    """Random-projection encoder/rnn/controller with the configured shapes."""
    L = int(cfg.latent_dim)
    H = int(cfg.hidden_dim)
    C = int(cfg.context_dim)
    encoder = ProjectionStage(
        StageType.ENCODER,
        {"observation": int(cfg.observation_dim), "context": C},
        {"latent_state": L},
        seed=seed,
    )
    rnn = ProjectionStage(
        StageType.RNN,
        {"latent_state": L, "hidden_state": H, "context": C},
        {"hidden_state": H, "predicted_latent": L},
        seed=seed + 1,
        scale=1.5,
    )
    controller = ProjectionStage(
        StageType.CONTROLLER,
        {"latent_state": L, "hidden_state": H, "context": C},
        {"action": int(n_actions)},
        seed=seed + 2,
        scale=3.0,
    )
    return encoder, rnn, controller
