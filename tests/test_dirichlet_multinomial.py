import itertools
import warnings

import numpy as np
import pandas as pd
import pytest
from scipy.special import gammaln

from extradist import DomainWarning, ShapeMismatchError, dirichlet_multinomial_pmf


def _domain_warnings(record: pytest.WarningsRecorder) -> list[warnings.WarningMessage]:
    return [item for item in record if issubclass(item.category, DomainWarning)]


def _compositions(total: int, k: int) -> np.ndarray:
    rows = [row for row in itertools.product(range(total + 1), repeat=k) if sum(row) == total]
    return np.asarray(rows, dtype=float)


def _reference_log_pmf(x: np.ndarray, size: float, alpha: np.ndarray) -> float:
    return float(
        gammaln(size + 1)
        + gammaln(alpha.sum())
        - gammaln(size + alpha.sum())
        + np.sum(gammaln(x + alpha) - gammaln(x + 1) - gammaln(alpha))
    )


def test_valid_composition_is_finite_positive() -> None:
    value = dirichlet_multinomial_pmf([2, 3], 5, [1.0, 1.0])[0]
    assert np.isfinite(value)
    assert value > 0
    # alpha = 1 gives the uniform distribution over the six compositions of 5.
    assert value == pytest.approx(1.0 / 6.0)


def test_matches_reference_formula() -> None:
    x = np.array([[3.0, 0.0, 4.0], [1.0, 5.0, 1.0]])
    alpha = np.array([0.5, 2.0, 1.5])
    out = dirichlet_multinomial_pmf(x, 7, alpha, log_prob=True)
    expected = [_reference_log_pmf(row, 7.0, alpha) for row in x]
    np.testing.assert_allclose(out, expected, rtol=1e-12)


def test_pmf_sums_to_one_over_all_compositions() -> None:
    rows = _compositions(4, 3)
    total = dirichlet_multinomial_pmf(rows, 4, [0.5, 2.0, 1.5]).sum()
    assert total == pytest.approx(1.0)


def test_log_scale_matches_natural_scale() -> None:
    rows = _compositions(6, 2)
    natural = dirichlet_multinomial_pmf(rows, 6, [2.5, 0.7])
    logged = dirichlet_multinomial_pmf(rows, 6, [2.5, 0.7], log_prob=True)
    np.testing.assert_allclose(np.exp(logged), natural)


def test_large_counts_stay_finite_in_log_space() -> None:
    logged = dirichlet_multinomial_pmf([[4000, 6000]], 10000, [30.0, 45.0], log_prob=True)
    assert np.isfinite(logged[0])
    assert logged[0] < 0


def test_sum_mismatch_is_nan_with_single_warning() -> None:
    with pytest.warns(DomainWarning) as record:
        out = dirichlet_multinomial_pmf([2, 2], 5, [1.0, 1.0])
    assert len(_domain_warnings(record)) == 1
    assert np.isnan(out[0])


def test_non_positive_alpha_is_nan_with_single_warning() -> None:
    rows = np.tile([[2.0, 3.0]], (30, 1))
    with pytest.warns(DomainWarning) as record:
        out = dirichlet_multinomial_pmf(rows, 5, [[1.0, 0.0], [1.0, -2.0], [1.0, 1.0]])
    assert len(_domain_warnings(record)) == 1
    assert np.isnan(out[0]) and np.isnan(out[1])
    assert out[2] == pytest.approx(1.0 / 6.0)


def test_invalid_size_is_parameter_violation() -> None:
    with pytest.warns(DomainWarning):
        out = dirichlet_multinomial_pmf([[0, 0], [1, 1]], [0.0, np.nan], [1.0, 1.0])
    assert np.isnan(out).all()


def test_non_integer_or_negative_counts_are_outside_support() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error", DomainWarning)
        out = dirichlet_multinomial_pmf([[2.5, 2.5], [-1.0, 6.0]], 5, [1.0, 1.0])
        logged = dirichlet_multinomial_pmf([[2.5, 2.5]], 5, [1.0, 1.0], log_prob=True)
    np.testing.assert_array_equal(out, [0.0, 0.0])
    assert logged[0] == -np.inf


def test_parameter_violation_takes_precedence_over_support() -> None:
    with pytest.warns(DomainWarning):
        out = dirichlet_multinomial_pmf([2.5, 2.5], 5, [1.0, -1.0])
    assert np.isnan(out[0])


def test_rows_recycle_independently() -> None:
    x = np.array([[2.0, 3.0], [0.0, 5.0]])
    alpha = np.array([[1.0, 1.0], [2.0, 3.0], [0.5, 0.5]])
    out = dirichlet_multinomial_pmf(x, [5.0], alpha)
    assert out.shape == (3,)
    expected = [
        dirichlet_multinomial_pmf(x[0], 5, alpha[0])[0],
        dirichlet_multinomial_pmf(x[1], 5, alpha[1])[0],
        dirichlet_multinomial_pmf(x[0], 5, alpha[2])[0],
    ]
    np.testing.assert_allclose(out, expected)


def test_size_vector_recycles() -> None:
    out = dirichlet_multinomial_pmf([[1, 1], [2, 2], [3, 3]], [2.0, 4.0, 6.0], [1.0, 1.0])
    np.testing.assert_allclose(out, [1.0 / 3.0, 1.0 / 5.0, 1.0 / 7.0])


def test_accepts_data_frames() -> None:
    frame = pd.DataFrame({"a": [2, 0], "b": [3, 5]})
    out = dirichlet_multinomial_pmf(frame, 5, [1.0, 1.0])
    np.testing.assert_allclose(out, [1.0 / 6.0, 1.0 / 6.0])


def test_column_mismatch_aborts_call() -> None:
    with pytest.raises(ShapeMismatchError):
        dirichlet_multinomial_pmf([[1, 2, 2]], 5, [1.0, 1.0])
    with pytest.raises(ShapeMismatchError):
        dirichlet_multinomial_pmf([[1, 4]], 5, [1.0, 1.0, 1.0])


def test_fewer_than_two_categories_aborts_call() -> None:
    with pytest.raises(ShapeMismatchError, match=">= 2"):
        dirichlet_multinomial_pmf([[5]], 5, [1.0])


@pytest.mark.parametrize("x", [[], np.empty((0, 2))])
def test_empty_observations_give_empty_output(x) -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error", DomainWarning)
        out = dirichlet_multinomial_pmf(x, 5, [1.0, 1.0])
    assert out.shape == (0,)
