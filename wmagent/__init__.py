"""wmagent: recurrent world-model inference for simulated agents."""

from .agent import WorldModelAgent
from .config import InferenceConfig, MotivationConfig, default_config
from .errors import (
    InferenceStageFailure,
    InvalidInputName,
    UnknownStageType,
    UseAfterDispose,
    WorldModelError,
)
from .inference import ModelExecutor, RecurrentPipeline, discretize
from .observation import BoundedHistory, ObservationComposer, compose_context, compose_observation

__all__ = [
    "BoundedHistory",
    "InferenceConfig",
    "InferenceStageFailure",
    "InvalidInputName",
    "ModelExecutor",
    "MotivationConfig",
    "ObservationComposer",
    "RecurrentPipeline",
    "UnknownStageType",
    "UseAfterDispose",
    "WorldModelAgent",
    "WorldModelError",
    "compose_context",
    "compose_observation",
    "default_config",
    "discretize",
]
