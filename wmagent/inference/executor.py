"""wmagent/inference/executor.py

ModelExecutor: one named inference stage plus the buffers it owns.

Lifecycle
---------
- Construction validates the stage type (UnknownStageType) and binds the
  stage as the execution context.
- ``execute`` replaces input buffers name by name (old one released first),
  runs the stage to completion, then replaces the retained output buffers the
  same way. Live buffers never exceed one per input name plus one per output
  name, however many ticks run.
- ``dispose`` releases every retained buffer and closes the stage. A second
  call is a no-op; ``execute`` after dispose raises UseAfterDispose.

The orchestrator never touches TensorBuffer handles directly.
"""

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, Mapping, Optional, Sequence

import numpy as np

from ..errors import InferenceStageFailure, InvalidInputName, UseAfterDispose
from ..types import STAGE_INPUT_NAMES, STAGE_OUTPUT_NAMES, StageType, TensorMap
from .buffers import StageBuffers
from .stages import Stage

logger = logging.getLogger(__name__)

# Outputs a stage may legitimately omit on a given call.
OPTIONAL_OUTPUTS: FrozenSet[str] = frozenset({"predicted_latent"})


class ModelExecutor:
    """Run one stage on demand; own its named input/output buffers."""

    def __init__(self, stage: Stage, stage_type: str | StageType):
        self.stage_type = StageType.parse(stage_type)
        self._stage: Optional[Stage] = stage
        declared = getattr(stage, "input_names", None)
        if declared is None:
            declared = STAGE_INPUT_NAMES[self.stage_type]
        self.input_names: FrozenSet[str] = frozenset(str(n) for n in declared)
        self.output_names = STAGE_OUTPUT_NAMES[self.stage_type]
        self.inputs = StageBuffers(f"{self.stage_type.value}.inputs")
        self.outputs = StageBuffers(f"{self.stage_type.value}.outputs")
        self._disposed = False

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    @property
    def name(self) -> str:
        return self.stage_type.value

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def live_buffer_count(self) -> int:
        return self.inputs.live_count + self.outputs.live_count

    def last_output(self, name: str) -> Optional[np.ndarray]:
        """Copy of the retained output buffer `name`, or None."""
        self._check_alive()
        buf = self.outputs.get(name)
        return buf.to_array() if buf is not None else None

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def _check_alive(self) -> None:
        if self._disposed:
            raise UseAfterDispose(f"ModelExecutor({self.name})")

    def execute(self, inputs: Mapping[str, Sequence[float] | np.ndarray]) -> TensorMap:
        """Run the stage on `inputs` and return its outputs as plain float arrays.

        Raises:
          - UseAfterDispose if called after dispose()
          - InvalidInputName if any input name is not accepted by the stage
          - InferenceStageFailure if the stage raises or omits a required output
        """
        self._check_alive()
        for key in inputs:
            if key not in self.input_names:
                raise InvalidInputName(self.name, key, self.input_names)

        for key, values in inputs.items():
            self.inputs.replace(key, values)

        try:
            raw = self._stage(self.inputs.views())
        except Exception as exc:
            raise InferenceStageFailure(self.name, f"{type(exc).__name__}: {exc}") from exc
        if not isinstance(raw, Mapping):
            raise InferenceStageFailure(self.name, f"stage returned {type(raw).__name__}, expected a mapping")

        # Check every required output before any output buffer is replaced.
        for out_name in self.output_names:
            if out_name not in raw and out_name not in OPTIONAL_OUTPUTS:
                raise InferenceStageFailure(self.name, f"missing output {out_name!r}")

        staged: Dict[str, np.ndarray] = {}
        for out_name in self.output_names:
            if out_name not in raw:
                continue
            try:
                arr = np.asarray(raw[out_name], dtype=float).reshape(-1)
            except (TypeError, ValueError) as exc:
                raise InferenceStageFailure(self.name, f"output {out_name!r} is not numeric") from exc
            if not np.all(np.isfinite(arr)):
                raise InferenceStageFailure(self.name, f"output {out_name!r} is not finite")
            staged[out_name] = arr

        results: TensorMap = {}
        for out_name, arr in staged.items():
            buf = self.outputs.replace(out_name, arr)
            results[out_name] = buf.to_array()
        return results

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------
    def dispose(self) -> None:
        """Release all retained buffers and the execution context. Idempotent."""
        if self._disposed:
            logger.debug("ModelExecutor(%s).dispose() called twice; ignoring", self.name)
            return
        self._disposed = True
        self.inputs.release_all()
        self.outputs.release_all()
        stage, self._stage = self._stage, None
        close = getattr(stage, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "ModelExecutor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else f"live_buffers={self.live_buffer_count}"
        return f"ModelExecutor({self.name}, {state})"
