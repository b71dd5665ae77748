from .runner import build_agent, run_task
from .stubs import ConstantStage, FailingStage, IncrementRNN, ProjectionStage, make_projection_stages, make_stub_stages
from .worlds import DriftingConsciousness, RecordingBrain, SineWavePerception

__all__ = [
    "ConstantStage",
    "DriftingConsciousness",
    "FailingStage",
    "IncrementRNN",
    "ProjectionStage",
    "RecordingBrain",
    "SineWavePerception",
    "build_agent",
    "make_projection_stages",
    "make_stub_stages",
    "run_task",
]
