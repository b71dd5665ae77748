"""
wmagent/config.py

World-model agent configuration.

What this file does
-------------------
This module defines two immutable (frozen) dataclasses:

  - :class:`InferenceConfig` collects the shape and lifecycle parameters of
    the three-stage inference pipeline (encoder -> rnn -> controller) and of
    the agent wrapper that drives it once per tick.
  - :class:`MotivationConfig` collects the tuning constants of the
    emotional/needs simulation that feeds the pipeline's context.

Implementation modules read constants from config rather than hard-coding
them. Missing/invalid parameters fail fast via ``validate()``.

Notes on defaults
-----------------
Motivation constants are the reference tuning of the character simulation
(see DESIGN.md for the energy blend and the achievement clamp).
Inference dimensions default to latent 32 / hidden 256.

This file is deliberately *not* a "framework" configuration system; it is a
plain dataclass with clear, auditable defaults.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, replace as dc_replace
from typing import Any, Dict

# Length of the motivational context vector: 5 emotions, 4 needs, 3 traits.
MOTIVATION_DIM = 12


@dataclass(frozen=True)
class InferenceConfig:
    """
    Immutable configuration for a world-model inference pipeline.

    Inputs
    ------
    Constructed either directly (``InferenceConfig(latent_dim=...)``) or via
    :func:`default_config` and then :meth:`replace`.

    Outputs
    -------
    An immutable configuration object read by the pipeline, the composer and
    the agent wrapper.
    """

    # =========================================================================
    # Stage shapes
    # =========================================================================
    # Length of the encoder's latent_state output.
    latent_dim: int = 32

    # Length of the recurrent hidden state carried across ticks.
    hidden_dim: int = 256

    # Master switch. When False the agent tick is a no-op and no collaborator
    # is queried; executors are never constructed.
    use_inference: bool = True

    # Lookahead of the transition stage's predicted_latent, in ticks.
    # Recorded for trained-artifact metadata; the pipeline does not roll out.
    prediction_horizon: float = 1.0

    # =========================================================================
    # Observation layout
    # =========================================================================
    # Perception sensor vector length.
    perception_dim: int = 8

    # Consciousness state vector length.
    consciousness_dim: int = 4

    # Observation history capacity (FIFO).
    history_capacity: int = 10

    # =========================================================================
    # Failure policy / diagnostics
    # =========================================================================
    # Consecutive InferenceStageFailure ticks tolerated by the agent before the
    # failure is re-raised to the embedding layer.
    max_consecutive_failures: int = 5

    # Emit a JSON tick event every N ticks (0 disables).
    log_every: int = 0

    # =========================================================================
    # Derived sizes
    # =========================================================================
    @property
    def observation_dim(self) -> int:
        """Total ObservationVector length: perception + motivation + consciousness."""
        return int(self.perception_dim) + MOTIVATION_DIM + int(self.consciousness_dim)

    @property
    def context_dim(self) -> int:
        """Total ContextVector length: 2 time slots + motivation + consciousness."""
        return 2 + MOTIVATION_DIM + int(self.consciousness_dim)

    # =========================================================================
    # Methods
    # =========================================================================
    def validate(self) -> None:
        """
        Validate basic shape and lifecycle invariants.

        Outputs
        -------
        None. Raises ValueError if an invariant is violated.
        """
        for name in ("latent_dim", "hidden_dim", "history_capacity"):
            v = getattr(self, name)
            if not isinstance(v, int) or v <= 0:
                raise ValueError(f"{name} must be a positive int.")
        for name in ("perception_dim", "consciousness_dim"):
            v = getattr(self, name)
            if not isinstance(v, int) or v < 0:
                raise ValueError(f"{name} must be a non-negative int.")
        if self.max_consecutive_failures < 1:
            raise ValueError("max_consecutive_failures must be >= 1.")
        if self.log_every < 0:
            raise ValueError("log_every must be >= 0.")
        if self.prediction_horizon <= 0.0:
            raise ValueError("prediction_horizon must be > 0.")

    def replace(self, **overrides: Any) -> "InferenceConfig":
        """Create a modified copy of this config (immutable update)."""
        return dc_replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Convert this configuration to a plain Python dictionary."""
        return asdict(self)


@dataclass(frozen=True)
class MotivationConfig:
    """
    Immutable tuning for the emotional/needs simulation.

    Rates are per second; the simulation integrates them over
    ``update_interval`` each time an update fires.
    """

    # Seconds between motivation updates.
    update_interval: float = 0.5

    # Scale applied to the motivational reward before it is emitted.
    emotional_influence_strength: float = 0.3

    # Emotional decay rates (per second).
    happiness_decay: float = 0.05
    energy_decay: float = 0.03
    stress_recovery: float = 0.08
    social_decay: float = 0.07
    confidence_rate: float = 0.1

    # Need accumulation rates (per second).
    rest_rate: float = 0.08
    hunger_rate: float = 0.12
    comfort_rate: float = 0.04
    achievement_decay: float = 0.02

    # Personality traits, each in [0, 1].
    extraversion: float = 0.5
    neuroticism: float = 0.5
    conscientiousness: float = 0.5

    def validate(self) -> None:
        """Raise ValueError if a rate is negative or a trait is out of [0, 1]."""
        if self.update_interval <= 0.0:
            raise ValueError("update_interval must be > 0.")
        for name in (
            "happiness_decay",
            "energy_decay",
            "stress_recovery",
            "social_decay",
            "confidence_rate",
            "rest_rate",
            "hunger_rate",
            "comfort_rate",
            "achievement_decay",
            "emotional_influence_strength",
        ):
            if getattr(self, name) < 0.0:
                raise ValueError(f"{name} must be >= 0.")
        for name in ("extraversion", "neuroticism", "conscientiousness"):
            v = getattr(self, name)
            if not (0.0 <= v <= 1.0):
                raise ValueError(f"{name} must be in [0, 1].")

    def replace(self, **overrides: Any) -> "MotivationConfig":
        """Create a modified copy of this config (immutable update)."""
        return dc_replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def default_config() -> InferenceConfig:
    """
    Return the default InferenceConfig, validated.

    The returned config is the baseline against which overrides are applied.
    """
    cfg = InferenceConfig()
    cfg.validate()
    return cfg
