"""wmagent/inference/buffers.py

Named compute buffers owned by a single stage executor.

A TensorBuffer stands in for an accelerator-resident tensor: it is not
reclaimed by the garbage collector in the accelerator sense, so every
allocation is paired with an explicit ``release()``. StageBuffers is the
owned name -> buffer map; overwriting a name releases the old buffer before
the new one is stored (drop-then-assign), so repeated ticks reusing the same
names never accumulate buffers.
"""

from __future__ import annotations

from typing import Dict, Iterator, Optional, Sequence

import numpy as np

from ..errors import UseAfterDispose


class TensorBuffer:
    """One live named buffer. Release exactly once."""

    __slots__ = ("name", "_data", "_released", "_owner")

    def __init__(self, name: str, values: Sequence[float] | np.ndarray, owner: Optional["StageBuffers"] = None):
        self.name = str(name)
        self._data = np.array(values, dtype=np.float32, copy=True).reshape(-1)
        self._released = False
        self._owner = owner

    @property
    def released(self) -> bool:
        return self._released

    @property
    def data(self) -> np.ndarray:
        if self._released:
            raise UseAfterDispose(f"buffer {self.name!r}")
        return self._data

    def __len__(self) -> int:
        return int(self._data.size)

    def to_array(self) -> np.ndarray:
        """Read the buffer into a plain float64 array (a copy)."""
        return np.asarray(self.data, dtype=float).copy()

    def release(self) -> None:
        """Release the backing storage. A second release is a lifecycle bug."""
        if self._released:
            raise UseAfterDispose(f"buffer {self.name!r}")
        self._released = True
        self._data = np.zeros(0, dtype=np.float32)
        if self._owner is not None:
            self._owner._on_release()


class StageBuffers:
    """Owned map from tensor name to TensorBuffer.

    Counters:
      - allocated: buffers ever created through this map
      - freed: buffers released through this map
      - live_count: allocated - freed (at most one per stored name)
    """

    def __init__(self, owner: str):
        self.owner = str(owner)
        self._buffers: Dict[str, TensorBuffer] = {}
        self.allocated = 0
        self.freed = 0

    def _on_release(self) -> None:
        self.freed += 1

    @property
    def live_count(self) -> int:
        return self.allocated - self.freed

    def __contains__(self, name: object) -> bool:
        return name in self._buffers

    def __len__(self) -> int:
        return len(self._buffers)

    def __iter__(self) -> Iterator[str]:
        return iter(self._buffers)

    def get(self, name: str) -> Optional[TensorBuffer]:
        return self._buffers.get(name)

    def replace(self, name: str, values: Sequence[float] | np.ndarray) -> TensorBuffer:
        """Release the buffer stored under `name` (if any), then allocate a new one."""
        old = self._buffers.pop(name, None)
        if old is not None:
            old.release()
        buf = TensorBuffer(name, values, owner=self)
        self.allocated += 1
        self._buffers[name] = buf
        return buf

    def views(self) -> Dict[str, np.ndarray]:
        """Read-only views of the current buffers, keyed by name."""
        out: Dict[str, np.ndarray] = {}
        for name, buf in self._buffers.items():
            view = buf.data.view()
            view.flags.writeable = False
            out[name] = view
        return out

    def release_all(self) -> None:
        """Release every stored buffer and forget the names."""
        buffers = list(self._buffers.values())
        self._buffers.clear()
        for buf in buffers:
            buf.release()
