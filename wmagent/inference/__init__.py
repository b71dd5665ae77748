from .buffers import StageBuffers, TensorBuffer
from .discretize import discretize
from .executor import ModelExecutor
from .pipeline import RecurrentPipeline
from .stages import FunctionStage, Stage, load_stage, save_stage

__all__ = [
    "FunctionStage",
    "ModelExecutor",
    "RecurrentPipeline",
    "Stage",
    "StageBuffers",
    "TensorBuffer",
    "discretize",
    "load_stage",
    "save_stage",
]
