import math

import pytest

from bulkspeed.measurements.models import AggregateStats
from bulkspeed.measurements.stats import aggregate, average, median


def test_empty_series_is_zero():
    assert aggregate([]) == AggregateStats(average=0, median=0)


@pytest.mark.parametrize("value", [0.0, 12.5, 941.25])
def test_single_sample(value):
    assert aggregate([value]) == AggregateStats(average=value, median=value)


def test_two_samples_average_and_median_match():
    stats = aggregate([10.0, 30.0])
    assert stats.average == pytest.approx(20.0)
    assert stats.median == pytest.approx(20.0)


@pytest.mark.parametrize("samples", [[1, 2, 3, 4, 5], [5, 3, 1, 4, 2], [2, 5, 4, 1, 3]])
def test_odd_series(samples):
    assert aggregate(samples) == AggregateStats(average=3, median=3)


@pytest.mark.parametrize("samples", [[1, 2, 3, 4], [4, 1, 3, 2]])
def test_even_series(samples):
    assert aggregate(samples) == AggregateStats(average=2.5, median=2.5)


def test_median_differs_from_average_on_skewed_series():
    assert median([1, 2, 100]) == 2
    assert average([1, 2, 100]) == pytest.approx(103 / 3)


def test_caller_order_is_preserved():
    samples = [9.0, 1.0, 5.0, 3.0]
    aggregate(samples)
    assert samples == [9.0, 1.0, 5.0, 3.0]


def test_non_finite_samples_do_not_raise():
    stats = aggregate([10.0, math.inf, 20.0])
    assert stats.average == math.inf
    assert stats.median == 20.0
