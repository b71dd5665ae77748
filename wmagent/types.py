"""wmagent/types.py

Shared contract across wmagent modules.

This file keeps cross-module imports stable: vector aliases, the stage-type
table, collaborator protocols and the small record types passed between the
pipeline, the agent wrapper and persistence. It contains no policy logic.

WARNING:
- The stage output-name table is part of the trained-artifact contract. Do not
  change it without versioning the artifacts that depend on it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

import numpy as np

from .errors import UnknownStageType

# =============================================================================
# Core aliases
# =============================================================================

# Named float arrays exchanged with a stage.
TensorMap = Dict[str, np.ndarray]

# Discrete command handed to the external brain.
DiscreteAction = np.ndarray


# =============================================================================
# Stage types
# =============================================================================


class StageType(str, Enum):
    """The three inference stages. Values are the artifact-level type names."""

    ENCODER = "encoder"
    RNN = "rnn"
    CONTROLLER = "controller"

    @classmethod
    def parse(cls, value: "str | StageType") -> "StageType":
        """Resolve a type name. ``transition`` is accepted as an alias of ``rnn``."""
        if isinstance(value, StageType):
            return value
        key = str(value).strip().lower()
        if key == "transition":
            key = "rnn"
        for member in cls:
            if member.value == key:
                return member
        raise UnknownStageType(str(value))


# Output tensors each stage type produces, in read order.
STAGE_OUTPUT_NAMES: Dict[StageType, Tuple[str, ...]] = {
    StageType.ENCODER: ("latent_state",),
    StageType.RNN: ("hidden_state", "predicted_latent"),
    StageType.CONTROLLER: ("action",),
}

# Input tensors each stage type is fed by the pipeline.
STAGE_INPUT_NAMES: Dict[StageType, Tuple[str, ...]] = {
    StageType.ENCODER: ("observation", "context"),
    StageType.RNN: ("latent_state", "hidden_state", "context"),
    StageType.CONTROLLER: ("latent_state", "hidden_state", "context"),
}


# =============================================================================
# Collaborator protocols
# =============================================================================


class PerceptionSource(Protocol):
    def get_observation_data(self) -> Sequence[float]: ...


class MotivationSource(Protocol):
    def get_motivational_context(self) -> Sequence[float]: ...


class ConsciousnessSource(Protocol):
    def get_consciousness_state(self) -> Sequence[float]: ...


class ActionSink(Protocol):
    def request_action(self, discrete_action: DiscreteAction) -> None: ...


class Clock(Protocol):
    """Time source for the context vector (seconds)."""

    @property
    def time(self) -> float: ...

    @property
    def delta_time(self) -> float: ...


# =============================================================================
# Records
# =============================================================================


@dataclass
class TickResult:
    """Everything one successful pipeline tick produced."""
    action: DiscreteAction
    continuous_action: np.ndarray
    latent_state: np.ndarray
    hidden_state: np.ndarray
    predicted_latent: Optional[np.ndarray] = None


@dataclass
class PipelineSnapshot:
    """Carried pipeline state, as written by persistence.

    Only recurrent state is stored; stage artifacts are supplied externally.
    """
    hidden_state: np.ndarray
    latent_state: np.ndarray
    predicted_latent: Optional[np.ndarray] = None
    history: List[np.ndarray] = field(default_factory=list)
    tick_count: int = 0
    meta: Mapping[str, object] = field(default_factory=dict)
