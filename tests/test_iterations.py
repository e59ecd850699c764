import math

import pytest

from gdlsstar.ransac import MACHINE_EPSILON, compute_confidence, compute_max_iterations

LOG_P = math.log(0.01)


def _max_iters(ratio: float, min_iterations: int = 0, max_iterations: int = 1000) -> int:
    return compute_max_iterations(ratio, LOG_P, min_iterations=min_iterations, max_iterations=max_iterations)


def test_machine_epsilon_is_double_precision():
    assert MACHINE_EPSILON == 2.0 ** -52


def test_half_inliers_needs_71_iterations():
    expected = math.floor(LOG_P / (math.log(1.0 - 0.5 ** 4) - MACHINE_EPSILON))
    assert expected == 71
    assert _max_iters(0.5) == 71


def test_perfect_ratio_collapses_to_min_iterations():
    assert _max_iters(1.0, min_iterations=0) == 0
    assert _max_iters(1.0, min_iterations=7) == 7


def test_ratio_above_one_collapses_to_min_iterations():
    # previous ratio 1.0 plus the scorer's epsilon floor
    assert _max_iters(1.0 + MACHINE_EPSILON, min_iterations=3) == 3


def test_epsilon_ratio_hits_max_iterations():
    assert _max_iters(MACHINE_EPSILON, max_iterations=500) == 500


def test_result_clamped_to_min_iterations():
    # raw estimate is 1 for w = 0.99
    assert _max_iters(0.99, min_iterations=10) == 10


def test_result_within_bounds():
    for ratio in (1e-6, 0.05, 0.1, 0.3, 0.5, 0.7, 0.9, 0.999, 1.0):
        k = _max_iters(ratio, min_iterations=5, max_iterations=200)
        assert 5 <= k <= 200


def test_more_inliers_never_need_more_iterations():
    ratios = [0.1 * i for i in range(1, 11)]
    iters = [_max_iters(r) for r in ratios]
    assert iters == sorted(iters, reverse=True)


@pytest.mark.parametrize("ratio", [0.0, -0.25])
def test_non_positive_ratio_raises(ratio):
    with pytest.raises(ValueError):
        _max_iters(ratio)


def test_confidence_formula():
    for n in (1, 10, 71, 300):
        assert compute_confidence(0.5, n) == pytest.approx(1.0 - (1.0 - 0.5 ** 4) ** n)


def test_confidence_zero_ratio_is_zero():
    assert compute_confidence(0.0, 1000) == 0.0
    assert compute_confidence(MACHINE_EPSILON, 1000) == 0.0


def test_confidence_caps_ratio_at_one():
    assert compute_confidence(1.0 + MACHINE_EPSILON, 3) == 1.0
