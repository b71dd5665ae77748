"""wmagent/inference/pipeline.py

RecurrentPipeline: encoder -> rnn -> controller, once per tick.

Step order (authoritative, never reordered or skipped)
------------------------------------------------------
1. latent  = encoder(observation, context)[latent_state]
2. hidden' = rnn(latent, hidden_prev, context)[hidden_state]
             (+ predicted_latent when the stage provides it)
3. action  = controller(latent, hidden', context)[action]
4. command = discretize(action)

Commit discipline
-----------------
Nothing the pipeline owns (hidden state, cached latent, predicted latent,
history, tick counter) is touched until all three stages have succeeded. A
failing stage aborts the tick with InferenceStageFailure naming the stage and
leaves every piece of carried state exactly as it was, so the caller can skip
the tick and retry on the next one.

Ownership
---------
The pipeline exclusively owns its three ModelExecutors and its hidden state.
``dispose()`` disposes the executors transitively.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from ..config import InferenceConfig
from ..errors import InferenceStageFailure, UseAfterDispose
from ..logging import _dbg, _log_tick_event
from ..observation.history import BoundedHistory
from ..types import DiscreteAction, PipelineSnapshot, StageType, TickResult
from .discretize import discretize
from .executor import ModelExecutor
from .stages import Stage, load_stage


class RecurrentPipeline:
    """Single-owner, single-threaded recurrent inference pipeline."""

    def __init__(self, cfg: InferenceConfig, encoder: Stage, rnn: Stage, controller: Stage):
        cfg.validate()
        self.cfg = cfg
        self.encoder = ModelExecutor(encoder, StageType.ENCODER)
        self.rnn = ModelExecutor(rnn, StageType.RNN)
        self.controller = ModelExecutor(controller, StageType.CONTROLLER)

        self._hidden = np.zeros(int(cfg.hidden_dim), dtype=float)
        self._latent = np.zeros(int(cfg.latent_dim), dtype=float)
        self._predicted_latent: Optional[np.ndarray] = None
        self.history: BoundedHistory[np.ndarray] = BoundedHistory(int(cfg.history_capacity))
        self.tick_count = 0

        # Pinned on the first successful tick; constant afterwards.
        self._obs_dim: Optional[int] = None
        self._ctx_dim: Optional[int] = None
        self._disposed = False

    @classmethod
    def from_artifacts(
        cls,
        cfg: InferenceConfig,
        encoder_path: Path,
        rnn_path: Path,
        controller_path: Path,
    ) -> "RecurrentPipeline":
        """Build a pipeline from three pickled stage artifacts."""
        return cls(cfg, load_stage(encoder_path), load_stage(rnn_path), load_stage(controller_path))

    # ------------------------------------------------------------------
    # Carried state (copies; callers cannot mutate pipeline state)
    # ------------------------------------------------------------------
    @property
    def hidden_state(self) -> np.ndarray:
        return self._hidden.copy()

    @property
    def latent_state(self) -> np.ndarray:
        return self._latent.copy()

    @property
    def predicted_latent(self) -> Optional[np.ndarray]:
        return None if self._predicted_latent is None else self._predicted_latent.copy()

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _check_alive(self) -> None:
        if self._disposed:
            raise UseAfterDispose("RecurrentPipeline")

    # ------------------------------------------------------------------
    # Individual stages (no state is committed here)
    # ------------------------------------------------------------------
    def encode(self, observation: np.ndarray, context: np.ndarray) -> np.ndarray:
        out = self.encoder.execute({"observation": observation, "context": context})
        latent = out["latent_state"]
        if latent.size != int(self.cfg.latent_dim):
            raise InferenceStageFailure(
                self.encoder.name, f"latent_state length {latent.size} != latent_dim {self.cfg.latent_dim}"
            )
        return latent

    def transition(
        self, latent: np.ndarray, hidden: np.ndarray, context: np.ndarray
    ) -> tuple[np.ndarray, Optional[np.ndarray]]:
        out = self.rnn.execute({"latent_state": latent, "hidden_state": hidden, "context": context})
        hidden_next = out["hidden_state"]
        if hidden_next.size != int(self.cfg.hidden_dim):
            raise InferenceStageFailure(
                self.rnn.name, f"hidden_state length {hidden_next.size} != hidden_dim {self.cfg.hidden_dim}"
            )
        return hidden_next, out.get("predicted_latent")

    def control(self, latent: np.ndarray, hidden: np.ndarray, context: np.ndarray) -> np.ndarray:
        out = self.controller.execute({"latent_state": latent, "hidden_state": hidden, "context": context})
        return out["action"]

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def _check_dims(self, observation: np.ndarray, context: np.ndarray) -> None:
        if self._obs_dim is not None and observation.size != self._obs_dim:
            raise ValueError(f"observation length changed: {observation.size} != {self._obs_dim}")
        if self._ctx_dim is not None and context.size != self._ctx_dim:
            raise ValueError(f"context length changed: {context.size} != {self._ctx_dim}")

    def run_tick(
        self,
        observation: Sequence[float] | np.ndarray,
        context: Sequence[float] | np.ndarray,
    ) -> TickResult:
        """Run one full tick and return everything it produced."""
        self._check_alive()
        obs = np.asarray(observation, dtype=float).reshape(-1).copy()
        ctx = np.asarray(context, dtype=float).reshape(-1).copy()
        self._check_dims(obs, ctx)

        latent = self.encode(obs, ctx)
        hidden_next, predicted = self.transition(latent, self._hidden, ctx)
        action = self.control(latent, hidden_next, ctx)
        command = discretize(action)

        # Commit: every stage succeeded.
        self._hidden = hidden_next
        self._latent = latent
        if predicted is not None:
            self._predicted_latent = predicted
        self.history.push(obs)
        self._obs_dim = obs.size
        self._ctx_dim = ctx.size
        self.tick_count += 1

        _dbg(f"[tick] action={command.tolist()} hidden_norm={float(np.linalg.norm(hidden_next)):.4f}", tick=self.tick_count)
        log_every = int(self.cfg.log_every)
        if log_every > 0 and self.tick_count % log_every == 0:
            _log_tick_event(
                "tick",
                {
                    "tick": int(self.tick_count),
                    "action": command.tolist(),
                    "continuous_action": [float(v) for v in action],
                    "hidden_norm": float(np.linalg.norm(hidden_next)),
                    "latent_norm": float(np.linalg.norm(latent)),
                },
            )

        return TickResult(
            action=command,
            continuous_action=action,
            latent_state=latent.copy(),
            hidden_state=hidden_next.copy(),
            predicted_latent=None if predicted is None else predicted.copy(),
        )

    def tick(self, observation: Sequence[float] | np.ndarray, context: Sequence[float] | np.ndarray) -> DiscreteAction:
        """Run one tick and return the discrete action."""
        return self.run_tick(observation, context).action

    # ------------------------------------------------------------------
    # State management
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Zero the recurrent state and clear history. Executors are kept."""
        self._check_alive()
        self._hidden = np.zeros(int(self.cfg.hidden_dim), dtype=float)
        self._latent = np.zeros(int(self.cfg.latent_dim), dtype=float)
        self._predicted_latent = None
        self.history.clear()
        self.tick_count = 0

    def snapshot(self) -> PipelineSnapshot:
        return PipelineSnapshot(
            hidden_state=self._hidden.copy(),
            latent_state=self._latent.copy(),
            predicted_latent=self.predicted_latent,
            history=[obs.copy() for obs in self.history],
            tick_count=int(self.tick_count),
            meta={
                "latent_dim": int(self.cfg.latent_dim),
                "hidden_dim": int(self.cfg.hidden_dim),
                "obs_dim": self._obs_dim,
                "ctx_dim": self._ctx_dim,
            },
        )

    def restore(self, snap: PipelineSnapshot) -> None:
        """Adopt carried state from a snapshot.

        Dimensions must match the config, and observation/context lengths must
        match any lengths this pipeline has already pinned. Nothing is changed
        when a check fails.
        """
        self._check_alive()
        hidden = np.asarray(snap.hidden_state, dtype=float).reshape(-1)
        latent = np.asarray(snap.latent_state, dtype=float).reshape(-1)
        if hidden.size != int(self.cfg.hidden_dim):
            raise ValueError(f"snapshot hidden_state length {hidden.size} != hidden_dim {self.cfg.hidden_dim}")
        if latent.size != int(self.cfg.latent_dim):
            raise ValueError(f"snapshot latent_state length {latent.size} != latent_dim {self.cfg.latent_dim}")

        history = [np.asarray(obs, dtype=float).reshape(-1).copy() for obs in snap.history]
        history_dims = {obs.size for obs in history}
        if len(history_dims) > 1:
            raise ValueError(f"snapshot history has mixed observation lengths {sorted(history_dims)}")
        obs_dim = snap.meta.get("obs_dim")
        if obs_dim is None and history_dims:
            obs_dim = history_dims.pop()
        elif obs_dim is not None and history_dims and history_dims != {int(obs_dim)}:
            raise ValueError(f"snapshot history length {history_dims.pop()} != recorded obs_dim {obs_dim}")
        ctx_dim = snap.meta.get("ctx_dim")
        if obs_dim is not None and self._obs_dim is not None and int(obs_dim) != self._obs_dim:
            raise ValueError(f"snapshot observation length {obs_dim} != pinned length {self._obs_dim}")
        if ctx_dim is not None and self._ctx_dim is not None and int(ctx_dim) != self._ctx_dim:
            raise ValueError(f"snapshot context length {ctx_dim} != pinned length {self._ctx_dim}")

        self._hidden = hidden.copy()
        self._latent = latent.copy()
        self._predicted_latent = (
            None if snap.predicted_latent is None else np.asarray(snap.predicted_latent, dtype=float).copy()
        )
        self.history.clear()
        self.history.extend(history)
        if obs_dim is not None:
            self._obs_dim = int(obs_dim)
        if ctx_dim is not None:
            self._ctx_dim = int(ctx_dim)
        self.tick_count = int(snap.tick_count)

    def dispose(self) -> None:
        """Dispose all three executors. Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        for executor in (self.encoder, self.rnn, self.controller):
            executor.dispose()

    def __enter__(self) -> "RecurrentPipeline":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()
