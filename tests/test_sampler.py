import numpy as np
import pytest

from gdlsstar.ransac import MinimalSampler


def _replay(seed: int, n: int, num_draws: int) -> tuple[list[list[int]], list[int]]:
    """Partial Fisher-Yates by hand, same generator calls as the sampler."""
    rng = np.random.default_rng(seed)
    buf = list(range(n))
    draws = []
    for _ in range(num_draws):
        sample = []
        for i in range(4):
            j = int(rng.integers(i, n))
            buf[i], buf[j] = buf[j], buf[i]
            sample.append(buf[i])
        draws.append(sample)
    return draws, buf


def test_sample_is_four_distinct_items():
    items = list(range(12))
    sampler = MinimalSampler(seed=3)
    sampler.reset(len(items))
    for _ in range(50):
        sample = sampler.sample(items)
        assert len(sample) == 4
        assert len(set(sample)) == 4
        assert all(0 <= s < 12 for s in sample)


def test_sample_sequence_matches_partial_shuffle_replay():
    items = list(range(10))
    sampler = MinimalSampler(seed=7)
    sampler.reset(len(items))
    got = [list(sampler.sample(items)) for _ in range(20)]

    expected, expected_buf = _replay(seed=7, n=10, num_draws=20)
    assert got == expected
    # Buffer is carried over between draws, never reset
    assert sampler.indices == expected_buf


def test_same_seed_same_samples():
    items = list(range(9))
    a = MinimalSampler(seed=11)
    b = MinimalSampler(seed=11)
    a.reset(9)
    b.reset(9)
    for _ in range(30):
        assert list(a.sample(items)) == list(b.sample(items))


def test_reset_restores_buffer_but_keeps_random_state():
    items = list(range(6))
    sampler = MinimalSampler(seed=5)
    sampler.reset(6)
    sampler.sample(items)
    sampler.reset(6)
    assert sampler.indices == list(range(6))

    # The second run continues the generator stream
    rng = np.random.default_rng(5)
    for i in range(4):
        rng.integers(i, 6)
    buf = list(range(6))
    expected = []
    for i in range(4):
        j = int(rng.integers(i, 6))
        buf[i], buf[j] = buf[j], buf[i]
        expected.append(buf[i])
    assert list(sampler.sample(items)) == expected


def test_sample_buffer_is_reused():
    items = list(range(8))
    sampler = MinimalSampler(seed=0)
    sampler.reset(8)
    first = sampler.sample(items)
    second = sampler.sample(items)
    assert first is second


def test_rand_int_is_inclusive():
    sampler = MinimalSampler(seed=1)
    assert sampler.rand_int(3, 3) == 3
    values = {sampler.rand_int(0, 2) for _ in range(200)}
    assert values == {0, 1, 2}


def test_sample_without_reset_raises():
    sampler = MinimalSampler(seed=0)
    with pytest.raises(ValueError):
        sampler.sample(list(range(5)))


def test_sample_too_few_items_raises():
    sampler = MinimalSampler(seed=0)
    sampler.reset(3)
    with pytest.raises(ValueError):
        sampler.sample(list(range(3)))
