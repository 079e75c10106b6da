"""
Tests for the Counter histogram
"""

from exercise_grader.counter import (
    BLANK_KEY, NULL_KEY, Counter, count_values, format_histogram, format_percent,
)


class TestCounter:
    """Tallying and ordering"""

    def test_null_and_blank_keys(self):
        counter = Counter()
        counter.increment(None)
        counter.increment("")
        counter.increment("   ")
        counter.increment(None)
        assert counter.get(None) == 2
        assert counter.get("") == 2
        assert counter.counts == {NULL_KEY: 2, BLANK_KEY: 2}

    def test_descending_by_count_ties_by_key(self):
        counter = count_values(["a", "c", "b", "c", "b"])
        assert counter.descending_by_count() == [("b", 2), ("c", 2), ("a", 1)]

    def test_ascending_by_key(self):
        counter = count_values(["b", "a", "b"])
        assert counter.ascending_by_key() == [("a", 1), ("b", 2)]

    def test_total_and_amount(self):
        counter = Counter()
        counter.increment("40m", 3)
        counter.increment("80m")
        assert counter.total() == 4
        assert len(counter) == 2
        assert "40m" in counter

    def test_values_are_stripped(self):
        counter = count_values([" ETO ", "ETO"])
        assert counter.get("ETO") == 2

    def test_merge(self):
        first = count_values(["a", "b"])
        second = count_values(["b", None])
        first.merge(second)
        assert first.get("b") == 2
        assert first.get(None) == 1
        assert first.total() == 4


class TestFormatting:
    def test_percent(self):
        assert format_percent(1, 3) == "33.33%"
        assert format_percent(0, 0) == "0%"

    def test_histogram_lines(self):
        counter = count_values(["x", "x", "y", "z"])
        lines = format_histogram(counter, limit=2)
        assert lines == ["  x: 2 (50.00%)", "  y: 1 (25.00%)"]
