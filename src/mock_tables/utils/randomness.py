"""
Randomness helpers.

Every stochastic call in a generation run draws from one explicit
``numpy.random.Generator``. The helpers here only consume that generator; they
never reseed or copy it, so a fixed seed reproduces the whole run.
"""

from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Any, Optional, Sequence, Union

import numpy as np
from faker import Faker

# Process-wide default used when no RNG is supplied (not reproducible across runs)
GLOBAL_RNG: np.random.Generator = np.random.default_rng()

RngLike = Union[np.random.Generator, int, None]


def resolve_rng(rng: RngLike = None) -> np.random.Generator:
    """
    Return the generator to thread through a run.

    Args:
        rng: An existing Generator (used as-is), an integer seed, or None for
            the process-wide default generator.
    """
    if rng is None:
        return GLOBAL_RNG
    if isinstance(rng, np.random.Generator):
        return rng
    if isinstance(rng, (int, np.integer)) and not isinstance(rng, bool):
        return np.random.default_rng(int(rng))
    raise TypeError(f"Expected numpy Generator, int seed or None, got {type(rng).__name__}")


def uuid4(rng: np.random.Generator) -> uuid.UUID:
    """Random version 4 UUID drawn from ``rng``."""
    return uuid.UUID(bytes=rng.bytes(16), version=4)


def seeded_faker(rng: np.random.Generator, locale: Optional[str] = None) -> Faker:
    """Faker instance seeded from the next draw of ``rng``."""
    fake = Faker(locale)
    fake.seed_instance(int(rng.integers(0, 2**32)))
    return fake


def as_range(value: Any) -> Sequence[Any]:
    """
    Construct a range from a scalar or a range.

    An int ``n`` becomes ``range(n, n + 1)``, a timedelta becomes a one-element
    sequence and an existing range is returned unchanged.
    """
    if isinstance(value, range):
        return value
    if isinstance(value, bool):
        raise TypeError("as_range() does not accept booleans")
    if isinstance(value, (int, np.integer)):
        return range(int(value), int(value) + 1)
    if isinstance(value, timedelta):
        return [value]
    raise TypeError(f"Cannot build a range from {type(value).__name__}")


def sample_from(rng: np.random.Generator, value: Any) -> Any:
    """Pick one element uniformly from ``as_range(value)``."""
    choices = as_range(value)
    if len(choices) == 0:
        raise ValueError(f"Cannot sample from empty range {choices!r}")
    return choices[int(rng.integers(len(choices)))]


def sample_count(rng: np.random.Generator, value: Union[int, range]) -> int:
    """Draw a row count from a fixed count or a range of counts."""
    return int(sample_from(rng, value))
