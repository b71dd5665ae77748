from .composer import ObservationComposer, compose_context, compose_observation
from .history import BoundedHistory

__all__ = [
    "BoundedHistory",
    "ObservationComposer",
    "compose_context",
    "compose_observation",
]
