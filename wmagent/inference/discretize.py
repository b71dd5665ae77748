"""wmagent/inference/discretize.py

Continuous action -> discrete command.

Rounding rule: nearest integer, ties rounded half away from zero
(0.5 -> 1, -0.5 -> -1, 2.5 -> 3). Applied element-wise and uniformly so a
given action vector always maps to the same command.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..types import DiscreteAction


def round_half_away(x: np.ndarray) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    # np.round is exact off-tie; only exact .5 fractions need moving away from zero.
    out = np.round(x)
    whole = np.trunc(x)
    tie = np.abs(x - whole) == 0.5
    out[tie] = whole[tie] + np.sign(x[tie])
    return out


def discretize(continuous: Sequence[float] | np.ndarray) -> DiscreteAction:
    """Element-wise nearest-integer rounding, ties away from zero.

    >>> discretize([1.4, -2.6, 0.5]).tolist()
    [1, -3, 1]
    """
    arr = np.asarray(continuous, dtype=float).reshape(-1)
    if not np.all(np.isfinite(arr)):
        raise ValueError("cannot discretize a non-finite action")
    return round_half_away(arr).astype(np.int64)
