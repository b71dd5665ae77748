"""wmagent/inference/stages.py

Opaque inference stages.

A stage is any callable taking a mapping of named float arrays and returning a
mapping of named float arrays, plus an ``input_names`` attribute listing the
tensors it accepts. The architecture behind the callable is not this
package's concern: trained artifacts are produced by the offline training
system and handed over as pickled stage objects.
"""

from __future__ import annotations

import pickle
from pathlib import Path
from typing import Callable, Iterable, Mapping, Optional, Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class Stage(Protocol):
    input_names: frozenset

    def __call__(self, inputs: Mapping[str, np.ndarray]) -> Mapping[str, np.ndarray]: ...


class FunctionStage:
    """Wrap a plain function as a Stage with a declared input contract."""

    def __init__(
        self,
        fn: Callable[[Mapping[str, np.ndarray]], Mapping[str, np.ndarray]],
        input_names: Iterable[str],
        *,
        name: Optional[str] = None,
    ):
        self.fn = fn
        self.input_names = frozenset(str(n) for n in input_names)
        self.name = name or getattr(fn, "__name__", "stage")

    def __call__(self, inputs: Mapping[str, np.ndarray]) -> Mapping[str, np.ndarray]:
        return self.fn(inputs)

    def __repr__(self) -> str:
        return f"FunctionStage({self.name!r}, inputs={sorted(self.input_names)})"


def load_stage(path: Path) -> Stage:
    """Load a pickled stage artifact from `path`.

    Raises FileNotFoundError if the artifact is missing and TypeError if the
    unpickled object does not satisfy the Stage contract.
    """
    path = Path(path)
    with path.open("rb") as fid:
        stage = pickle.load(fid)
    if not callable(stage) or not hasattr(stage, "input_names"):
        raise TypeError(f"{path} does not contain a stage (got {type(stage).__name__})")
    return stage


def save_stage(stage: Stage, path: Path) -> None:
    """Write a stage artifact. Used by tooling and tests; the pipeline only loads."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as fid:
        pickle.dump(stage, fid)
