"""
Xorshift pseudo-random number generators

This module provides the xorshift* and xorshift+ generators described by
Sebastiano Vigna at <http://xorshift.di.unimi.it/>. Every generator
produces 64-bit unsigned integers and is fully determined by its seed.

    import xorshift
    gen = xorshift.xorshift(1)
    [next(gen) for _ in range(2)]
    # => [7451323229901468385, 9167080926773312003]

A generator object is initialized by its constructor, seeded once with
seed(), then advanced with next(). It is also its own iterator, so it
can be handed to anything that pulls from an iterator:

    gen = xorshift.Algorithm.select("xorshift128+").create(1)
    list(itertools.islice(gen, 3))

These generators are fast and pass BigCrush, but they are NOT suitable
for cryptographic use: the output is predictable from a few samples.

A seed of zero is accepted, and the xorshift64* generator used to expand
seeds maps it to itself, so every generator seeded with zero yields zero forever.
It is left that way so that a seed always names the same sequence.

This is free and unencumbered software released into the public domain.
"""

import enum
import typing

import numpy

MASK64 = 0xffffffffffffffff

class UnknownAlgorithm(ValueError):
    """Raised when an algorithm name does not match any generator."""
    pass

class Xorshift:
    """Common interface of the xorshift generators.

    Subclasses allocate their state in __init__, fill it in seed(), and
    mutate it in place on every next().

    seed() is meant to be called once, on a fresh generator. Seeding a
    used generator again does not reset every part of its state (the
    cursor of the array generators keeps its position), so it does not
    reproduce a fresh generator's sequence. Create a new one instead.
    """

    name: str = ""

    def seed(self, seed: int) -> None:
        raise NotImplementedError

    def next(self) -> int:
        raise NotImplementedError

    def __iter__(self) -> "Xorshift":
        return self

    def __next__(self) -> int:
        return self.next()

class Xorshift64Star(Xorshift):
    """xorshift64*: a single word of state.

    Fast but small. Besides being selectable on its own, it expands a
    seed into the state of the larger generators.
    """

    name = "xorshift64*"

    _A: numpy.uint64 = numpy.uint64(12)
    _B: numpy.uint64 = numpy.uint64(25)
    _C: numpy.uint64 = numpy.uint64(27)
    _M: numpy.uint64 = numpy.uint64(2685821657736338717)

    def __init__(self) -> None:
        self.state: numpy.uint64 = numpy.uint64(0)

    def seed(self, seed: int) -> None:
        self.state = numpy.uint64(seed & MASK64)

    def next(self) -> int:
        x: numpy.uint64 = self.state
        x ^= x >> self._A
        x ^= x << self._B
        x ^= x >> self._C
        self.state = x
        with numpy.errstate(over="ignore"):
            return int(x * self._M)

class _XorshiftStar(Xorshift):
    """xorshift* over an array of words with a rotating cursor."""

    size: int
    _A: numpy.uint64
    _B: numpy.uint64
    _C: numpy.uint64
    _M: numpy.uint64

    def __init__(self) -> None:
        self.state: numpy.ndarray = numpy.zeros(self.size, dtype=numpy.uint64)
        self.current: int = 0

    def seed(self, seed: int) -> None:
        mixer = Xorshift64Star()
        mixer.seed(seed)
        # Filled from the last word down
        for n in range(self.size - 1, -1, -1):
            self.state[n] = mixer.next()

    def next(self) -> int:
        s = self.state
        s0: numpy.uint64 = s[self.current]
        self.current = (self.current + 1) % self.size
        s1: numpy.uint64 = s[self.current]
        s1 ^= s1 << self._A
        s1 ^= s1 >> self._B
        s0 ^= s0 >> self._C
        r: numpy.uint64 = s0 ^ s1
        s[self.current] = r
        with numpy.errstate(over="ignore"):
            return int(r * self._M)

class Xorshift1024Star(_XorshiftStar):
    """xorshift1024*: 16 words of state, period 2^1024 - 1."""

    name = "xorshift1024*"
    size = 16

    _A = numpy.uint64(31)
    _B = numpy.uint64(11)
    _C = numpy.uint64(30)
    _M = numpy.uint64(1181783497276652981)

class Xorshift4096Star(_XorshiftStar):
    """xorshift4096*: 64 words of state, period 2^4096 - 1."""

    name = "xorshift4096*"
    size = 64

    _A = numpy.uint64(25)
    _B = numpy.uint64(3)
    _C = numpy.uint64(49)
    _M = numpy.uint64(8372773778140471301)

class Xorshift128Plus(Xorshift):
    """xorshift128+: two words of state, period 2^128 - 1.

    The fastest of the family, though the short period makes it a poor
    choice for heavily parallel use.
    """

    name = "xorshift128+"

    _A: numpy.uint64 = numpy.uint64(23)
    _B: numpy.uint64 = numpy.uint64(17)
    _C: numpy.uint64 = numpy.uint64(26)

    def __init__(self) -> None:
        self.state: numpy.ndarray = numpy.zeros(2, dtype=numpy.uint64)

    def seed(self, seed: int) -> None:
        mixer = Xorshift64Star()
        mixer.seed(seed)
        self.state[0] = mixer.next()
        self.state[1] = mixer.next()

    def next(self) -> int:
        s = self.state
        s1: numpy.uint64 = s[0]
        s0: numpy.uint64 = s[1]
        s[0] = s0
        s1 ^= s1 << self._A
        r: numpy.uint64 = s1 ^ s0 ^ (s1 >> self._B) ^ (s0 >> self._C)
        s[1] = r
        with numpy.errstate(over="ignore"):
            return int(r + s0)

class Algorithm(enum.Enum):
    XORSHIFT64STAR   = "xorshift64*"
    XORSHIFT1024STAR = "xorshift1024*"
    XORSHIFT4096STAR = "xorshift4096*"
    XORSHIFT128PLUS  = "xorshift128+"

    @classmethod
    def select(cls, name: typing.Optional[str] = None) -> "Algorithm":
        """Return the algorithm with exactly this name, or the default."""
        if name is None:
            return DEFAULT_ALGORITHM
        try:
            return cls(name)
        except ValueError:
            raise UnknownAlgorithm(f"unrecognized algorithm: {name}") from None

    def create(self, seed: int) -> Xorshift:
        """Return a new generator of this kind seeded with seed."""
        generator = _GENERATORS[self]()
        generator.seed(seed)
        return generator

DEFAULT_ALGORITHM = Algorithm.XORSHIFT1024STAR

_GENERATORS: typing.Dict[Algorithm, typing.Type[Xorshift]] = {
    Algorithm.XORSHIFT64STAR:   Xorshift64Star,
    Algorithm.XORSHIFT1024STAR: Xorshift1024Star,
    Algorithm.XORSHIFT4096STAR: Xorshift4096Star,
    Algorithm.XORSHIFT128PLUS:  Xorshift128Plus,
}

def xorshift(
    seed: int,
    algorithm: Algorithm = DEFAULT_ALGORITHM,
) -> typing.Generator[int, None, None]:
    """Yields 64-bit random numbers."""
    generator = algorithm.create(seed)
    while True:
        yield generator.next()
