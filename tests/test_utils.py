"""Tests for randomness helpers."""

import uuid
from datetime import timedelta

import numpy as np
import pytest

from mock_tables.utils import GLOBAL_RNG, as_range, resolve_rng, sample_count, seeded_faker, uuid4


class TestResolveRng:
    def test_generator_passthrough(self):
        rng = np.random.default_rng(1)
        assert resolve_rng(rng) is rng

    def test_default(self):
        assert resolve_rng(None) is GLOBAL_RNG

    def test_integer_seed(self):
        assert resolve_rng(4).integers(10**9) == resolve_rng(4).integers(10**9)

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            resolve_rng("seed")
        with pytest.raises(TypeError):
            resolve_rng(True)


class TestUuid4:
    def test_version_and_determinism(self):
        value = uuid4(np.random.default_rng(1))
        assert isinstance(value, uuid.UUID)
        assert value.version == 4
        assert value == uuid4(np.random.default_rng(1))
        assert value != uuid4(np.random.default_rng(2))


class TestSeededFaker:
    def test_deterministic(self):
        a = seeded_faker(np.random.default_rng(10))
        b = seeded_faker(np.random.default_rng(10))
        assert [a.name() for _ in range(3)] == [b.name() for _ in range(3)]

    def test_advances_rng(self):
        rng = np.random.default_rng(10)
        seeded_faker(rng)
        assert rng.integers(10**9) != np.random.default_rng(10).integers(10**9)


class TestAsRange:
    def test_integer(self):
        assert as_range(2) == range(2, 3)

    def test_timedelta(self):
        assert list(as_range(timedelta(hours=2))) == [timedelta(hours=2)]

    def test_range_unchanged(self):
        r = range(1, 6, 2)
        assert as_range(r) is r

    def test_rejects_other_types(self):
        with pytest.raises(TypeError):
            as_range("3")
        with pytest.raises(TypeError):
            as_range(False)


class TestSampleCount:
    def test_fixed(self):
        assert sample_count(np.random.default_rng(1), 4) == 4

    def test_range_bounds(self):
        rng = np.random.default_rng(0)
        seen = {sample_count(rng, range(1, 3)) for _ in range(100)}
        assert seen == {1, 2}

    def test_stepped_range(self):
        rng = np.random.default_rng(0)
        seen = {sample_count(rng, range(0, 10, 5)) for _ in range(100)}
        assert seen == {0, 5}

    def test_empty_range(self):
        with pytest.raises(ValueError):
            sample_count(np.random.default_rng(0), range(0))
