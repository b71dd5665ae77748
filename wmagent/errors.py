"""wmagent/errors.py

Error taxonomy for the inference pipeline.

- InvalidInputName / UnknownStageType / UseAfterDispose: integration or
  lifecycle bugs. Fatal at the call site; never retried.
- InferenceStageFailure: the stage itself failed (bad weights, shape
  mismatch, missing output). The tick is aborted with state untouched, so the
  caller may skip the tick and retry on the next one.
"""

from __future__ import annotations

from typing import Iterable, Optional


class WorldModelError(RuntimeError):
    """Base class for all wmagent errors."""


class InvalidInputName(WorldModelError):
    def __init__(self, stage: str, name: str, accepted: Iterable[str]):
        self.stage = str(stage)
        self.name = str(name)
        self.accepted = tuple(sorted(accepted))
        super().__init__(
            f"stage {self.stage!r} does not accept input {self.name!r} (accepted: {list(self.accepted)})"
        )


class UnknownStageType(WorldModelError):
    def __init__(self, stage_type: str):
        self.stage_type = str(stage_type)
        super().__init__(f"unknown stage type {self.stage_type!r}")


class UseAfterDispose(WorldModelError):
    def __init__(self, what: str):
        self.what = str(what)
        super().__init__(f"{self.what} used after dispose()")


class InferenceStageFailure(WorldModelError):
    """A stage failed during execution. `stage` names which one."""

    def __init__(self, stage: str, reason: Optional[str] = None):
        self.stage = str(stage)
        self.reason = reason
        msg = f"inference stage {self.stage!r} failed"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


__all__ = [
    "WorldModelError",
    "InvalidInputName",
    "UnknownStageType",
    "UseAfterDispose",
    "InferenceStageFailure",
]
