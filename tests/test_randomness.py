from __future__ import annotations

import pytest

from wcs.core import DeterministicRandomSource, InvalidArgumentError, seeded_random


def test_same_seed_same_stream():
    a = seeded_random("determinism-seed")
    b = seeded_random("determinism-seed")
    assert [a.next_uint32() for _ in range(50)] == [b.next_uint32() for _ in range(50)]


def test_different_seeds_diverge():
    a = seeded_random("alpha")
    b = seeded_random("beta")
    assert [a.next_uint32() for _ in range(10)] != [b.next_uint32() for _ in range(10)]


def test_restore_continues_from_serialized_position():
    source = seeded_random(1234)
    for _ in range(17):
        source.rand()
    opaque = source.serialize()
    expected = [source.randint(0, 1000) for _ in range(20)]

    restored = DeterministicRandomSource.restore(1234, opaque)
    assert [restored.randint(0, 1000) for _ in range(20)] == expected
    assert restored.serialize() == source.serialize()


def test_rand_and_randint_ranges():
    source = seeded_random("ranges")
    for _ in range(500):
        value = source.rand()
        assert 0.0 <= value < 1.0
        assert 3 <= source.randint(3, 6) <= 6


def test_inverted_bounds_and_empty_choice_raise():
    source = seeded_random("misuse")
    with pytest.raises(InvalidArgumentError):
        source.randint(5, 1)
    with pytest.raises(InvalidArgumentError):
        source.choice([])
    with pytest.raises(InvalidArgumentError):
        DeterministicRandomSource.restore("misuse", "not-a-number")


def test_shuffle_is_a_permutation_and_reproducible():
    a = list(range(20))
    b = list(range(20))
    seeded_random(9).shuffle(a)
    seeded_random(9).shuffle(b)
    assert a == b
    assert sorted(a) == list(range(20))
