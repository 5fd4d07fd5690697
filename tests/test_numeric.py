"""
Tests for the Numeric Summarizer.

Tests verify that the summarizer:
    - Parses numbers leniently and drops the rest
    - Trims outliers with the IQR fence
    - Uses the lower middle value as the median
    - Bins with Sturges' rule over the trimmed range
"""

import math
import random

import pytest
from livepoll.numeric import (
    exclude_outliers,
    histogram,
    lower_median,
    parse_number,
    parse_numbers,
    quantile,
    sturges_bins,
    summarize_numbers,
)


class TestParse:

    @pytest.mark.parametrize("value,expected", [
        (3, 3.0),
        (2.5, 2.5),
        ("4", 4.0),
        (" 7.25 ", 7.25),
        ("-1e2", -100.0),
    ])
    def test_numeric_values(self, value, expected):
        assert parse_number(value) == expected

    @pytest.mark.parametrize("value", [
        None, "", "   ", "abc", "3 apples", True, False,
        float("nan"), float("inf"), "inf", "NaN", [1], {"a": 1},
    ])
    def test_non_numeric_values(self, value):
        assert parse_number(value) is None

    def test_parse_numbers_drops_garbage(self):
        assert parse_numbers(["1", "x", 2, None, "3.5"]) == [1.0, 2.0, 3.5]


class TestQuantile:

    def test_linear_interpolation(self):
        data = [1.0, 2.0, 3.0, 4.0, 5.0, 100.0]
        assert quantile(data, 0.25) == pytest.approx(2.25)
        assert quantile(data, 0.75) == pytest.approx(4.75)

    def test_endpoints(self):
        data = [1.0, 2.0, 3.0]
        assert quantile(data, 0.0) == 1.0
        assert quantile(data, 1.0) == 3.0

    def test_single_value(self):
        assert quantile([5.0], 0.5) == 5.0


class TestOutliers:

    def test_drops_far_value(self):
        assert exclude_outliers([1, 2, 3, 4, 5, 100]) == [1, 2, 3, 4, 5]

    def test_fewer_than_four_points_untouched(self):
        assert exclude_outliers([1, 2, 1000]) == [1, 2, 1000]

    def test_zero_iqr_untouched(self):
        values = [5, 5, 5, 5, 5, 90]
        assert exclude_outliers(values) == values


class TestSturges:

    @pytest.mark.parametrize("n,k", [(0, 1), (1, 1), (2, 3), (4, 3), (5, 4), (8, 4), (9, 5), (100, 8)])
    def test_bin_count(self, n, k):
        assert sturges_bins(n) == k


class TestHistogram:

    def test_empty(self):
        assert histogram([]) == []

    def test_degenerate_range_is_one_bin(self):
        bins = histogram([7.0, 7.0, 7.0])
        assert len(bins) == 1
        assert bins[0].label == "7"
        assert bins[0].count == 3

    def test_max_value_folds_into_last_bin(self):
        bins = histogram([0.0, 10.0])
        assert [b.count for b in bins] == [1, 0, 1]
        assert [b.label for b in bins] == ["0-3", "3-7", "7-10"]

    def test_last_edge_is_true_max(self):
        bins = histogram([1.0, 2.0, 3.0, 4.0, 5.0])
        assert bins[-1].label.endswith("-5")

    def test_subnormal_range_is_one_bin(self):
        bins = histogram([0.0, 5e-324, 0.0])
        assert [b.count for b in bins] == [3]

    def test_overflowing_range_is_one_bin(self):
        bins = histogram([-1e308, 0.0, 1e308])
        assert [b.count for b in bins] == [3]

    def test_counts_sum_and_labels_ascend(self):
        rng = random.Random(11)
        values = [rng.uniform(0, 100) for _ in range(200)]
        bins = histogram(values)
        assert sum(b.count for b in bins) == len(values)
        starts = [int(b.label.split("-")[0]) for b in bins]
        assert starts == sorted(starts)


class TestMedian:

    def test_odd(self):
        assert lower_median([3, 1, 2]) == 2

    def test_even_takes_lower_middle(self):
        assert lower_median([4, 1, 3, 2]) == 2

    def test_empty(self):
        assert lower_median([]) is None


class TestSummarize:

    def test_outlier_excluded_from_statistics(self):
        summary = summarize_numbers([1, 2, 3, 4, 5, 100])
        assert summary.n == 5
        assert summary.parsed_count == 6
        assert summary.mean == pytest.approx(3.0)
        assert summary.median == 3
        assert summary.max == 5
        assert sum(b.count for b in summary.bins) == 5
        assert [b.label for b in summary.bins] == ["1-2", "2-3", "3-4", "4-5"]
        assert [b.count for b in summary.bins] == [1, 1, 1, 2]

    def test_even_count_median_is_not_an_average(self):
        summary = summarize_numbers(["1", "2", "3", "4"])
        assert summary.median == 2
        assert summary.mean == pytest.approx(2.5)

    def test_all_equal(self):
        summary = summarize_numbers([7, "7", 7.0])
        assert summary.n == 3
        assert len(summary.bins) == 1
        assert summary.bins[0].count == 3
        assert summary.mean == 7
        assert summary.median == 7

    def test_garbage_does_not_abort_batch(self):
        summary = summarize_numbers(["abc", None, "", "10", 20, "thirty"])
        assert summary.parsed_count == 2
        assert summary.n == 2
        assert summary.mean == pytest.approx(15.0)

    def test_empty_input(self):
        summary = summarize_numbers([])
        assert summary.bins == []
        assert summary.mean is None
        assert summary.median is None
        assert summary.n == 0
        assert summary.parsed_count == 0

    def test_only_garbage(self):
        summary = summarize_numbers(["a", None, float("nan")])
        assert summary.n == 0
        assert summary.bins == []

    def test_range_too_wide_for_a_float(self):
        summary = summarize_numbers(["-1e308", "1e308"])
        assert summary.n == 2
        assert len(summary.bins) == 1
        assert summary.bins[0].count == 2
        assert summary.min == -1e308
        assert summary.max == 1e308

    def test_range_too_narrow_for_a_float(self):
        summary = summarize_numbers([0.0, 5e-324, 0.0])
        assert summary.n == 3
        assert len(summary.bins) == 1
        assert summary.bins[0].count == 3
        assert summary.median == 0.0

    def test_bins_cover_post_trim_n(self):
        rng = random.Random(3)
        values = [rng.gauss(10, 2) for _ in range(60)] + [500, -400]
        summary = summarize_numbers(values)
        assert summary.n <= 60
        assert sum(b.count for b in summary.bins) == summary.n
        assert math.isfinite(summary.mean)
