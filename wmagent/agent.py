"""wmagent/agent.py

Public agent wrapper for the world-model pipeline.

This file MUST remain a thin orchestrator:
- It owns the RecurrentPipeline and the ObservationComposer.
- It queries the collaborators once per tick, composes observation and
  context, delegates the authoritative stage order to
  ``RecurrentPipeline.run_tick`` and hands the discrete action to the brain.
- It applies the per-tick failure policy: an InferenceStageFailure skips the
  tick (no action requested, pipeline state untouched); after
  ``cfg.max_consecutive_failures`` failures in a row the error is re-raised.

The agent is driven from outside: the host scheduler calls
``update_world_model()`` once per decision interval.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .config import InferenceConfig
from .errors import InferenceStageFailure
from .inference.pipeline import RecurrentPipeline
from .inference.stages import Stage
from .observation.composer import ObservationComposer
from .types import (
    ActionSink,
    Clock,
    ConsciousnessSource,
    DiscreteAction,
    MotivationSource,
    PerceptionSource,
)

logger = logging.getLogger(__name__)


class WorldModelAgent:
    """Stateful agent wrapper. The pipeline is the authority."""

    def __init__(
        self,
        cfg: InferenceConfig,
        *,
        perception: PerceptionSource,
        motivation: MotivationSource,
        consciousness: ConsciousnessSource,
        brain: ActionSink,
        clock: Clock,
        encoder: Optional[Stage] = None,
        rnn: Optional[Stage] = None,
        controller: Optional[Stage] = None,
    ):
        cfg.validate()
        self.cfg = cfg
        self.perception = perception
        self.motivation = motivation
        self.consciousness = consciousness
        self.brain = brain
        self.clock = clock
        self.composer = ObservationComposer(cfg)
        self.consecutive_failures = 0
        self.last_action: Optional[DiscreteAction] = None

        self.pipeline: Optional[RecurrentPipeline] = None
        if cfg.use_inference:
            if encoder is None or rnn is None or controller is None:
                raise ValueError("use_inference=True requires encoder, rnn and controller stages")
            self.pipeline = RecurrentPipeline(cfg, encoder, rnn, controller)

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------
    def current_inputs(self) -> tuple[np.ndarray, np.ndarray]:
        """Query collaborators once and build (observation, context)."""
        perception = self.perception.get_observation_data()
        motivation = self.motivation.get_motivational_context()
        consciousness = self.consciousness.get_consciousness_state()
        observation = self.composer.observation(perception, motivation, consciousness)
        context = self.composer.context(self.clock.time, self.clock.delta_time, motivation, consciousness)
        return observation, context

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def update_world_model(self) -> Optional[DiscreteAction]:
        """Run one decision tick. Returns the requested action, or None if skipped."""
        if not self.cfg.use_inference or self.pipeline is None:
            return None

        observation, context = self.current_inputs()
        try:
            action = self.pipeline.tick(observation, context)
        except InferenceStageFailure as exc:
            self.consecutive_failures += 1
            if self.consecutive_failures >= int(self.cfg.max_consecutive_failures):
                logger.error(
                    "stage %s failed %d ticks in a row; giving up: %s",
                    exc.stage,
                    self.consecutive_failures,
                    exc,
                )
                raise
            logger.warning(
                "tick skipped (%d/%d consecutive): %s",
                self.consecutive_failures,
                self.cfg.max_consecutive_failures,
                exc,
            )
            return None

        self.consecutive_failures = 0
        self.last_action = action
        self.brain.request_action(action)
        return action

    tick = update_world_model

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Reset carried recurrent state and history; stages are kept."""
        if self.pipeline is not None:
            self.pipeline.reset()
        self.consecutive_failures = 0
        self.last_action = None

    def dispose(self) -> None:
        if self.pipeline is not None:
            self.pipeline.dispose()

    def __enter__(self) -> "WorldModelAgent":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()


__all__ = ["WorldModelAgent"]
