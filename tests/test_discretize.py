import numpy as np
import pytest

from wmagent.inference.discretize import discretize


def test_reference_vector() -> None:
    assert discretize([1.4, -2.6, 0.5]).tolist() == [1, -3, 1]


def test_ties_round_away_from_zero() -> None:
    assert discretize([-0.5, 1.5, 2.5, -2.5, 0.0]).tolist() == [-1, 2, 3, -3, 0]


def test_just_below_half_rounds_to_zero() -> None:
    below = np.nextafter(0.5, 0.0)
    assert discretize([below, -below]).tolist() == [0, 0]


def test_large_odd_integers_are_unchanged() -> None:
    big = 2.0 ** 52 + 1
    assert discretize([big, -big]).tolist() == [2 ** 52 + 1, -(2 ** 52 + 1)]


def test_output_is_integer_typed() -> None:
    out = discretize(np.array([0.2, 1.7]))
    assert out.dtype.kind == "i"
    assert out.tolist() == [0, 2]


def test_non_finite_rejected() -> None:
    with pytest.raises(ValueError):
        discretize([np.inf])
