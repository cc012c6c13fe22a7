"""Random byte sources and the unbiased sampling primitives built on them.

Every draw in the engine goes through :func:`uniform_random_index`, which turns
raw bytes into an index in ``[0, n)`` by rejection sampling. Rejection loops are
bounded in expectation only: a source that keeps emitting rejected values stalls
the caller instead of producing a biased result.
"""
from __future__ import annotations

import os
from typing import Callable, Iterable, List, MutableSequence, Sequence, TypeVar

from secretforge.core.error_dialect import InvalidArgumentError, RandomSourceError

T = TypeVar("T")

# bytes(length) -> exactly `length` uniformly distributed bytes.
RandomSource = Callable[[int], bytes]


def secure_random_bytes(length: int) -> bytes:
    try:
        data = os.urandom(length)
    except OSError as exc:
        raise OSError(f"OS CSPRNG failure requesting {length} byte(s): {exc}") from exc
    if len(data) != length:
        raise OSError(f"OS CSPRNG returned unexpected byte count ({len(data)} != {length})")
    return data


def assert_csprng_ready() -> None:
    secure_random_bytes(1)


class DeterministicSource:
    """Replays a fixed byte pattern, cycling when exhausted.

    Only for tests and reproducible tooling; never a production source.
    """

    def __init__(self, pattern: Iterable[int]) -> None:
        self._pattern = bytes(pattern)
        if not self._pattern:
            raise ValueError("pattern must contain at least one byte")
        self._pos = 0
        self.consumed = 0

    def __call__(self, length: int) -> bytes:
        out = bytearray()
        for _ in range(length):
            out.append(self._pattern[self._pos])
            self._pos = (self._pos + 1) % len(self._pattern)
        self.consumed += length
        return bytes(out)


def _draw(random: RandomSource, length: int) -> bytes:
    try:
        data = bytes(random(length))
    except (TypeError, ValueError) as exc:
        raise RandomSourceError(f"random source returned invalid data: {exc}") from exc
    if len(data) != length:
        raise RandomSourceError(f"random source returned {len(data)} byte(s), expected {length}")
    return data


def uniform_random_index(random: RandomSource, n: int) -> int:
    """Return an index in ``[0, n)`` with every value equally likely."""
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        raise InvalidArgumentError(f"n must be a positive integer, got {n!r}")
    if n == 1:
        return 0

    if n <= 256:
        if 256 % n == 0:
            return _draw(random, 1)[0] % n
        limit = (256 // n) * n
        while True:
            byte = _draw(random, 1)[0]
            if byte < limit:
                return byte % n

    nbytes = ((n - 1).bit_length() + 7) // 8
    limit = ((256 ** nbytes) // n) * n
    while True:
        value = int.from_bytes(_draw(random, nbytes), "big")
        if value < limit:
            return value % n


def shuffle(items: MutableSequence[T], random: RandomSource) -> None:
    """Fisher-Yates, in place."""
    for i in range(len(items) - 1, 0, -1):
        j = uniform_random_index(random, i + 1)
        items[i], items[j] = items[j], items[i]


def choose(random: RandomSource, population: Sequence[T]) -> T:
    return population[uniform_random_index(random, len(population))]


def choose_many(random: RandomSource, population: Sequence[T], count: int) -> List[T]:
    return [choose(random, population) for _ in range(count)]
