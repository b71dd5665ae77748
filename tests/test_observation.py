import math

import numpy as np
import pytest

from wmagent.config import InferenceConfig
from wmagent.observation.composer import ObservationComposer, compose_context, compose_observation
from wmagent.observation.history import BoundedHistory

MOTIVATION = [0.1 * i for i in range(12)]


def test_observation_order_and_length() -> None:
    perception = np.arange(8, dtype=float) + 100.0
    consciousness = [7.0, 8.0, 9.0, 10.0]
    obs = compose_observation(perception, MOTIVATION, consciousness)
    assert obs.shape == (8 + 12 + 4,)
    assert np.array_equal(obs[:8], perception)
    assert np.allclose(obs[8:20], MOTIVATION)
    assert np.array_equal(obs[20:], consciousness)


def test_context_layout() -> None:
    ctx = compose_context(0.25, 0.02, MOTIVATION, [1.0, 2.0])
    assert ctx.shape == (2 + 12 + 2,)
    assert ctx[0] == pytest.approx(math.sin(2.0 * math.pi * 0.25))
    assert ctx[1] == pytest.approx(0.02)
    assert np.allclose(ctx[2:14], MOTIVATION)
    assert np.array_equal(ctx[14:], [1.0, 2.0])


def test_composition_is_pure() -> None:
    perception = np.linspace(0.0, 1.0, 8)
    before = perception.copy()
    a = compose_observation(perception, MOTIVATION, [0.5] * 4)
    b = compose_observation(perception, MOTIVATION, [0.5] * 4)
    assert np.array_equal(a, b)
    assert np.array_equal(perception, before)
    a[0] = 99.0
    assert perception[0] == before[0]

    c1 = compose_context(3.7, 0.1, MOTIVATION, [0.5] * 4)
    c2 = compose_context(3.7, 0.1, MOTIVATION, [0.5] * 4)
    assert np.array_equal(c1, c2)


def test_composition_is_order_sensitive() -> None:
    a = compose_observation([1.0], [2.0], [3.0])
    b = compose_observation([3.0], [2.0], [1.0])
    assert not np.array_equal(a, b)


def test_composer_checks_configured_lengths() -> None:
    composer = ObservationComposer(InferenceConfig(perception_dim=3, consciousness_dim=2))
    assert composer.observation_dim == 3 + 12 + 2
    assert composer.context_dim == 2 + 12 + 2
    obs = composer.observation([0.0] * 3, MOTIVATION, [1.0, 1.0])
    assert obs.size == composer.observation_dim
    with pytest.raises(ValueError):
        composer.observation([0.0] * 4, MOTIVATION, [1.0, 1.0])
    with pytest.raises(ValueError):
        composer.context(0.0, 0.1, MOTIVATION[:11], [1.0, 1.0])


def test_history_keeps_newest_ten() -> None:
    history: BoundedHistory[int] = BoundedHistory(10)
    for n in range(1, 26):
        history.push(n)
        assert len(history) == min(n, 10)
        assert history.newest() == n
    assert list(history) == list(range(16, 26))
    assert next(iter(history)) == 16


def test_history_copy_and_clear() -> None:
    history: BoundedHistory[str] = BoundedHistory(3)
    history.extend(["a", "b", "c", "d"])
    snap = list(history)
    assert snap == ["b", "c", "d"]
    history.clear()
    assert len(history) == 0
    assert snap == ["b", "c", "d"]


def test_history_rejects_non_positive_capacity() -> None:
    with pytest.raises(ValueError):
        BoundedHistory(0)
