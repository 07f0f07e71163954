"""
Utility helpers for randomness and ranges.
"""

from mock_tables.utils.randomness import (
    GLOBAL_RNG,
    as_range,
    resolve_rng,
    sample_count,
    sample_from,
    seeded_faker,
    uuid4,
)

__all__ = [
    "GLOBAL_RNG",
    "as_range",
    "resolve_rng",
    "sample_count",
    "sample_from",
    "seeded_faker",
    "uuid4",
]
