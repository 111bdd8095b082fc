from __future__ import annotations

import math
from typing import Any, Sequence

from wcs.contracts import RandomSource
from wcs.core.errors import InvalidArgumentError

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def hash_seed(seed: str | int) -> int:
    if isinstance(seed, int):
        state = seed & _MASK32
    else:
        h = 0
        for ch in seed:
            h = (_imul(31, h) + ord(ch)) & _MASK32
        state = h
    return state or 1


class DeterministicRandomSource(RandomSource):
    """Mulberry32 stream; every chance roll in the engine goes through one of these."""

    def __init__(self, seed: str | int) -> None:
        self._seed = seed
        self._state = hash_seed(seed)

    @property
    def seed(self) -> str | int:
        return self._seed

    def next_uint32(self) -> int:
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return (t ^ (t >> 14)) & _MASK32

    def rand(self) -> float:
        return self.next_uint32() / _TWO_POW_32

    def randint(self, a: int, b: int) -> int:
        if b < a:
            raise InvalidArgumentError(f"randint bounds inverted: {a} > {b}")
        return a + self.next_uint32() % (b - a + 1)

    def chance(self, p: float) -> bool:
        return self.rand() < p

    def normal(self) -> float:
        u = 0.0
        v = 0.0
        while u == 0.0:
            u = self.rand()
        while v == 0.0:
            v = self.rand()
        return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)

    def choice(self, items: Sequence[Any]) -> Any:
        if not items:
            raise InvalidArgumentError("choice items must not be empty")
        return items[self.randint(0, len(items) - 1)]

    def shuffle(self, items: list[Any]) -> None:
        for i in range(len(items) - 1, 0, -1):
            j = self.randint(0, i)
            items[i], items[j] = items[j], items[i]

    def serialize(self) -> str:
        return str(self._state)

    @staticmethod
    def restore(seed: str | int, opaque: str) -> DeterministicRandomSource:
        source = DeterministicRandomSource(seed)
        try:
            source._state = int(opaque) & _MASK32
        except ValueError as exc:
            raise InvalidArgumentError(f"unreadable random state '{opaque}'") from exc
        return source


def seeded_random(seed: str | int) -> DeterministicRandomSource:
    return DeterministicRandomSource(seed)
