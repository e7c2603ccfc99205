"""Tests for the scoring helpers."""

import math

import numpy as np
import pytest

from coderot.math import Scoring


class TestClamp:
    @pytest.mark.parametrize(
        "value,expected",
        [(-0.5, 0.0), (0.0, 0.0), (0.42, 0.42), (1.0, 1.0), (7.0, 1.0), (math.nan, 0.0)],
    )
    def test_clamp(self, value, expected):
        assert Scoring.clamp(value) == expected


class TestSaturate:
    def test_no_excess_is_zero(self):
        assert Scoring.saturate(0, 10.0) == 0.0
        assert Scoring.saturate(-3, 10.0) == 0.0

    def test_one_scale_of_excess(self):
        assert Scoring.saturate(10, 10.0) == pytest.approx(1 - math.exp(-1))

    def test_monotone_and_bounded(self):
        values = [Scoring.saturate(x, 3.0) for x in range(0, 60)]
        assert values == sorted(values)
        assert all(0.0 <= v < 1.0 for v in values)


class TestWeightedMean:
    def test_basic(self):
        assert Scoring.weighted_mean([0.1, 0.5, 0.9], [1, 2, 1]) == pytest.approx(0.5)

    def test_accepts_arrays(self):
        assert Scoring.weighted_mean(np.array([1.0, 0.0]), np.array([3.0, 1.0])) == pytest.approx(
            0.75
        )

    def test_empty(self):
        assert Scoring.weighted_mean([], []) == 0.0

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            Scoring.weighted_mean([0.1, 0.2], [1.0])


class TestColumnMeans:
    def test_means(self):
        means = Scoring.column_means([[0.0, 1.0], [0.5, 0.0]], 2)
        assert means == pytest.approx([0.25, 0.5])

    def test_no_rows(self):
        assert Scoring.column_means([], 3) == [0.0, 0.0, 0.0]
