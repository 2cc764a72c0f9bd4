"""
Seeded PRNG - Deterministic randomness for replays, tests and bot sampling.

String seeds are hashed to 32 bits with xmur3; the core generator is
mulberry32. Integer seeds are used directly (mod 2^32). Two generators
created from equal seeds always yield identical sequences.
"""

from __future__ import annotations
from typing import Sequence, TypeVar, Union

from .errors import EmptyInputError

T = TypeVar("T")

Seed = Union[int, str]

_MASK = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply (low 32 bits, unsigned)."""
    return (a * b) & _MASK


def _xmur3(text: str) -> int:
    """Hash a string to a 32-bit seed (first output of xmur3)."""
    units = text.encode("utf-16-le")
    length = len(units) // 2
    h = (1779033703 ^ length) & _MASK
    for i in range(length):
        code = units[2 * i] | (units[2 * i + 1] << 8)
        h = _imul(h ^ code, 3432918353)
        h = ((h << 13) | (h >> 19)) & _MASK
    h = _imul(h ^ (h >> 16), 2246822507)
    h = _imul(h ^ (h >> 13), 3266489909)
    h ^= h >> 16
    return h & _MASK


def seed_to_int(seed: Seed) -> int:
    """Normalize a seed to the 32-bit integer that drives the core generator."""
    if isinstance(seed, str):
        return _xmur3(seed)
    return int(seed) & _MASK


class Prng:
    """
    mulberry32 generator with helpers.

    Instances are single-owner: never share one between a match and a
    bot simulation. Derive a child with create_prng(f"{seed}:{salt}").
    """

    def __init__(self, seed: Seed):
        self.seed = seed
        self._state = seed_to_int(seed)

    def next(self) -> float:
        """Next float in [0, 1)."""
        self._state = (self._state + 0x6D2B79F5) & _MASK
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK
        return ((t ^ (t >> 14)) & _MASK) / 4294967296

    def float(self) -> float:
        return self.next()

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], bounds inclusive (swapped if reversed)."""
        if high < low:
            low, high = high, low
        return int(self.next() * (high - low + 1)) + low

    def pick(self, items: Sequence[T]) -> T:
        """Pick one element uniformly."""
        if len(items) == 0:
            raise EmptyInputError("pick() from empty sequence")
        return items[int(self.next() * len(items))]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a shuffled copy (Fisher-Yates); the input is left untouched."""
        out = list(items)
        for i in range(len(out) - 1, 0, -1):
            j = int(self.next() * (i + 1))
            out[i], out[j] = out[j], out[i]
        return out

    def child(self, *salt: object) -> Prng:
        """Independent generator seeded from this one's seed and a salt."""
        return create_prng(":".join([str(self.seed), *(str(s) for s in salt)]))

    def __repr__(self) -> str:
        return f"Prng(seed={self.seed!r})"


def create_prng(seed: Seed) -> Prng:
    """Create a PRNG from an int or string seed."""
    return Prng(seed)
