"""Unit tests for jitter sources."""

import random

import pytest

from riskgate.engine import FixedJitter, RandomJitter


def test_fixed_jitter_defaults_to_zero():
    jitter = FixedJitter()
    assert [jitter.draw(10) for _ in range(5)] == [0, 0, 0, 0, 0]


def test_fixed_jitter_cycles_sequence():
    jitter = FixedJitter(1, 2, 3)
    assert [jitter.draw(10) for _ in range(7)] == [1, 2, 3, 1, 2, 3, 1]


def test_fixed_jitter_rejects_negative_values():
    with pytest.raises(ValueError):
        FixedJitter(3, -1)


def test_random_jitter_stays_in_half_open_range():
    jitter = RandomJitter(seed=7)
    draws = [jitter.draw(10) for _ in range(1000)]

    assert min(draws) >= 0
    assert max(draws) <= 9
    # Uniform over ten values: all of them show up in 1000 draws
    assert set(draws) == set(range(10))


def test_random_jitter_zero_upper_bound():
    assert RandomJitter(seed=7).draw(0) == 0


def test_random_jitter_accepts_injected_generator():
    expected = random.Random(99)
    jitter = RandomJitter(rng=random.Random(99))

    assert [jitter.draw(10) for _ in range(10)] == [expected.randrange(10) for _ in range(10)]
