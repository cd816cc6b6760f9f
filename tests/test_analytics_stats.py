"""Tests for setmetrics.analytics.stats -- mean, stddev, CV, normalization."""

import math

import numpy as np
import pytest

from setmetrics.analytics.stats import (
    mean,
    standard_deviation,
    coefficient_of_variation,
    normalize_intensity,
    clamp,
)


class TestMean:
    def test_empty(self):
        assert mean([]) == 0.0

    def test_single(self):
        assert mean([42.0]) == 42.0

    def test_known_values(self):
        assert mean([1.0, 2.0, 3.0, 4.0]) == pytest.approx(2.5)

    def test_numpy_compatible(self):
        assert mean(np.array([10, 20, 30])) == pytest.approx(20.0)


class TestStandardDeviation:
    def test_empty(self):
        assert standard_deviation([]) == 0.0

    def test_single_value_is_zero(self):
        assert standard_deviation([300.0]) == 0.0

    def test_constant(self):
        assert standard_deviation([5.0, 5.0, 5.0]) == 0.0

    def test_uses_bessel_correction(self):
        # mean 150, squared diffs 2 * 2500, / (n - 1) = 5000
        assert standard_deviation([100.0, 200.0]) == pytest.approx(math.sqrt(5000.0))

    def test_known_values(self):
        # Sample variance of 2,4,4,4,5,5,7,9 = 32 / 7
        values = [2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0]
        assert standard_deviation(values) == pytest.approx(math.sqrt(32.0 / 7.0))


class TestCoefficientOfVariation:
    def test_empty(self):
        assert coefficient_of_variation([]) == 0.0

    def test_zero_mean(self):
        assert coefficient_of_variation([0.0, 0.0, 0.0]) == 0.0

    def test_constant(self):
        assert coefficient_of_variation([120.0] * 4) == 0.0

    def test_known_value(self):
        expected = math.sqrt(5000.0) / 150.0
        assert coefficient_of_variation([100.0, 200.0]) == pytest.approx(expected)

    def test_scale_free(self):
        a = coefficient_of_variation([1.0, 2.0, 3.0])
        b = coefficient_of_variation([100.0, 200.0, 300.0])
        assert a == pytest.approx(b)


class TestNormalizeIntensity:
    @pytest.mark.parametrize("level,expected", [
        (1, 0.0),
        (2, 0.25),
        (3, 0.5),
        (4, 0.75),
        (5, 1.0),
    ])
    def test_scale(self, level, expected):
        assert normalize_intensity(level) == expected


class TestClamp:
    def test_inside(self):
        assert clamp(0.3) == 0.3

    def test_below(self):
        assert clamp(-0.2) == 0.0

    def test_above(self):
        assert clamp(1.7) == 1.0

    def test_custom_bounds(self):
        assert clamp(12.0, 0.0, 10.0) == 10.0
