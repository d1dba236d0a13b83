"""Sources of random bytes for the CXKK instruction."""

import itertools
from typing import Iterable, Protocol

import jax


class RandomSource(Protocol):
    """Anything that can hand out one random byte at a time."""

    def next_byte(self) -> int:
        ...


class KeyRandomSource:
    """Uniform random bytes drawn from a JAX PRNG key."""

    def __init__(self, seed: int = 0):
        self.key = jax.random.PRNGKey(seed)

    def next_byte(self) -> int:
        self.key, subkey = jax.random.split(self.key)
        return int(jax.random.randint(subkey, shape=(), minval=0, maxval=256))


class SequenceRandomSource:
    """Repeats a fixed sequence of bytes, for reproducible runs."""

    def __init__(self, values: Iterable[int]):
        values = [value & 0xFF for value in values]
        if not values:
            raise ValueError("SequenceRandomSource needs at least one value")
        self._values = itertools.cycle(values)

    def next_byte(self) -> int:
        return next(self._values)
