"""Deterministic integer-only random source.

A linear congruential generator with the Numerical Recipes constants,
reduced modulo 2**31. Every function takes the current seed and returns
the advanced seed alongside its output, so the caller owns the stream:
replaying the same calls from the same seed always yields the same values.
"""

from typing import Sequence, Tuple, TypeVar

from fairgames.errors import InvalidSeedError

T = TypeVar("T")

LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2**31

DIE_FACES = 6


def check_seed(seed: int) -> int:
    """Return seed unchanged, or raise if it is not a non-negative int."""
    # bool is an int subclass but never a meaningful seed
    if isinstance(seed, bool) or not isinstance(seed, int):
        raise InvalidSeedError(f"Seed must be an integer, got {type(seed).__name__}")
    if seed < 0:
        raise InvalidSeedError(f"Seed must be non-negative, got {seed}")
    return seed


def lcg_next(seed: int) -> Tuple[int, int]:
    """Advance the generator once.

    Returns:
        (value, new_seed). The drawn value and the next seed are the same
        number; both are returned so call sites read the same way.
    """
    nxt = (LCG_MULTIPLIER * seed + LCG_INCREMENT) % LCG_MODULUS
    return nxt, nxt


def roll_dice(seed: int, count: int) -> Tuple[Tuple[int, ...], int]:
    """Roll `count` six-sided dice, one generator step per die."""
    values = []
    current = seed
    for _ in range(count):
        value, current = lcg_next(current)
        values.append(value % DIE_FACES + 1)
    return tuple(values), current


def shuffle(seed: int, items: Sequence[T]) -> Tuple[Tuple[T, ...], int]:
    """Seeded Fisher-Yates shuffle, walking from the last index down to 1."""
    result = list(items)
    current = seed
    for i in range(len(result) - 1, 0, -1):
        value, current = lcg_next(current)
        j = value % (i + 1)
        result[i], result[j] = result[j], result[i]
    return tuple(result), current
