import math
import warnings

import numpy as np
import pytest
from scipy import stats

from extradist import (
    DomainWarning,
    zero_inflated_poisson_cdf,
    zero_inflated_poisson_pmf,
    zero_inflated_poisson_quantile,
    zero_inflated_poisson_sample,
)


def _domain_warnings(record: pytest.WarningsRecorder) -> list[warnings.WarningMessage]:
    return [item for item in record if issubclass(item.category, DomainWarning)]


def test_pmf_at_zero_closed_form() -> None:
    value = zero_inflated_poisson_pmf(0, 2.0, 0.3)[0]
    assert value == pytest.approx(0.3 + 0.7 * math.exp(-2.0), rel=1e-15, abs=0.0)


def test_pmf_positive_counts_scale_poisson() -> None:
    x = np.arange(1, 8)
    expected = 0.7 * stats.poisson.pmf(x, 2.0)
    np.testing.assert_allclose(zero_inflated_poisson_pmf(x, 2.0, 0.3), expected, rtol=1e-12)


def test_pmf_sums_to_one() -> None:
    x = np.arange(0, 60)
    assert zero_inflated_poisson_pmf(x, 4.5, 0.25).sum() == pytest.approx(1.0)


def test_pmf_outside_support_is_zero_without_warning() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error", DomainWarning)
        out = zero_inflated_poisson_pmf([-1.0, 0.5, 2.5], 2.0, 0.3)
        log_out = zero_inflated_poisson_pmf([-1.0, 0.5], 2.0, 0.3, log_prob=True)
    np.testing.assert_array_equal(out, [0.0, 0.0, 0.0])
    np.testing.assert_array_equal(log_out, [-np.inf, -np.inf])


def test_recycling_over_three_vectors() -> None:
    out = zero_inflated_poisson_pmf([0, 1, 2, 3], [1.0, 2.0], [0.1, 0.2, 0.3])
    expected = [
        zero_inflated_poisson_pmf(0, 1.0, 0.1)[0],
        zero_inflated_poisson_pmf(1, 2.0, 0.2)[0],
        zero_inflated_poisson_pmf(2, 1.0, 0.3)[0],
        zero_inflated_poisson_pmf(3, 2.0, 0.1)[0],
    ]
    np.testing.assert_allclose(out, expected)


def test_cdf_bounds_and_monotonicity() -> None:
    x = np.arange(-3, 20)
    values = zero_inflated_poisson_cdf(x, 3.0, 0.4)
    assert np.all(values >= 0.0)
    assert np.all(values <= 1.0)
    assert np.all(np.diff(values) >= 0.0)
    np.testing.assert_array_equal(values[x < 0], 0.0)
    assert values[x == 0][0] == pytest.approx(0.4 + 0.6 * math.exp(-3.0))


def test_cdf_upper_tail_and_log_scale() -> None:
    x = np.arange(0, 6)
    lower = zero_inflated_poisson_cdf(x, 2.0, 0.3)
    upper = zero_inflated_poisson_cdf(x, 2.0, 0.3, lower_tail=False)
    np.testing.assert_allclose(upper, 1.0 - lower)
    log_lower = zero_inflated_poisson_cdf(x, 2.0, 0.3, log_prob=True)
    np.testing.assert_allclose(np.exp(log_lower), lower)
    log_pmf = zero_inflated_poisson_pmf(x, 2.0, 0.3, log_prob=True)
    np.testing.assert_allclose(np.exp(log_pmf), zero_inflated_poisson_pmf(x, 2.0, 0.3))


@pytest.mark.parametrize("lam", [0.5, 2.0, 10.0])
@pytest.mark.parametrize("pi", [0.0, 0.2, 0.3])
def test_quantile_round_trips_integer_counts(lam: float, pi: float) -> None:
    x = np.arange(0, 80, dtype=float)
    p = zero_inflated_poisson_cdf(x, lam, pi)
    # counts whose cdf is below one and distinct from the previous count
    keep = (p < 1.0) & np.concatenate(([True], np.diff(p) > 0.0))
    assert keep.sum() > 10
    np.testing.assert_array_equal(zero_inflated_poisson_quantile(p[keep], lam, pi), x[keep])


def test_quantile_just_above_inflation_weight() -> None:
    p = zero_inflated_poisson_cdf([0.0, 1.0], 10.0, 0.2)
    np.testing.assert_array_equal(zero_inflated_poisson_quantile(p, 10.0, 0.2), [0.0, 1.0])


def test_quantile_below_inflation_weight_is_zero() -> None:
    out = zero_inflated_poisson_quantile([0.0, 0.1, 0.29], 2.0, 0.3)
    np.testing.assert_array_equal(out, [0.0, 0.0, 0.0])


def test_quantile_edges() -> None:
    out = zero_inflated_poisson_quantile([1.0, 0.5], 2.0, [0.3, 1.0])
    assert out[0] == np.inf
    assert out[1] == 0.0


def test_quantile_with_all_mass_at_zero() -> None:
    np.testing.assert_array_equal(zero_inflated_poisson_quantile([0.0, 0.5, 1.0], 3.0, 1.0), 0.0)


def test_quantile_log_and_tail_options() -> None:
    p = np.array([0.35, 0.6, 0.95])
    base = zero_inflated_poisson_quantile(p, 3.0, 0.2)
    via_log = zero_inflated_poisson_quantile(np.log(p), 3.0, 0.2, log_prob=True)
    via_upper = zero_inflated_poisson_quantile(1.0 - p, 3.0, 0.2, lower_tail=False)
    np.testing.assert_array_equal(via_log, base)
    np.testing.assert_array_equal(via_upper, base)


@pytest.mark.parametrize("lam,pi", [(0.0, 0.3), (-1.0, 0.3), (2.0, -0.1), (2.0, 1.5)])
def test_invalid_parameters_nan_with_single_warning(lam: float, pi: float) -> None:
    n = 25
    calls = [
        lambda: zero_inflated_poisson_pmf(np.arange(n), lam, pi),
        lambda: zero_inflated_poisson_cdf(np.arange(n), lam, pi),
        lambda: zero_inflated_poisson_quantile(np.linspace(0.0, 1.0, n), lam, pi),
        lambda: zero_inflated_poisson_sample(n, lam, pi, random_state=5),
    ]
    for call in calls:
        with pytest.warns(DomainWarning) as record:
            out = call()
        assert len(_domain_warnings(record)) == 1
        assert out.shape == (n,)
        assert np.isnan(out).all()


def test_nan_inputs_propagate_silently() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error", DomainWarning)
        out = zero_inflated_poisson_pmf([np.nan, 1.0], [2.0, np.nan], 0.3)
    assert np.isnan(out).all()


def test_sample_follows_stream_order() -> None:
    draws = zero_inflated_poisson_sample(30, 3.0, 0.5, random_state=np.random.default_rng(99))
    rng = np.random.default_rng(99)
    expected = []
    for _ in range(30):
        if rng.random() < 0.5:
            expected.append(0.0)
        else:
            expected.append(float(rng.poisson(3.0)))
    np.testing.assert_array_equal(draws, expected)


def test_sample_degenerate_weights() -> None:
    zeros = zero_inflated_poisson_sample(50, 4.0, 1.0, random_state=1)
    np.testing.assert_array_equal(zeros, 0.0)
    counts = zero_inflated_poisson_sample(500, 4.0, 0.0, random_state=1)
    assert np.all(counts >= 0)
    assert np.all(np.floor(counts) == counts)
    assert counts.mean() == pytest.approx(4.0, rel=0.2)
