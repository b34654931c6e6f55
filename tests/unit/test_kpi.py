from __future__ import annotations

import pytest

from fieldmis.services.kpi import count_by, percent_distribution, ranked_shares, sum_by, top_n, total, unique_count


ITEMS = [("a", 10.0), ("b", 30.0), ("a", 20.0), ("c", 0.0)]


def test_sum_and_count_keep_first_seen_order():
    assert sum_by(ITEMS, lambda i: i[0], lambda i: i[1]) == {"a": 30.0, "b": 30.0, "c": 0.0}
    assert list(count_by(ITEMS, lambda i: i[0])) == ["a", "b", "c"]
    assert count_by(ITEMS, lambda i: i[0])["a"] == 2


def test_total_and_unique_count():
    assert total(ITEMS, lambda i: i[1]) == 60.0
    assert unique_count(ITEMS, lambda i: i[0]) == 3


def test_percentages_sum_to_hundred():
    shares = percent_distribution({"x": 1.0, "y": 2.0, "z": 3.0})
    assert sum(s.percent for s in shares) == pytest.approx(100.0)


def test_zero_total_yields_zero_percent():
    shares = percent_distribution({"x": 0.0})
    assert shares[0].percent == 0.0
    assert percent_distribution({}) == []


def test_explicit_denominator():
    shares = percent_distribution({"Male": 1, "Female": 1}, 4)
    assert [s.percent for s in shares] == [25.0, 25.0]


def test_ranked_shares_stable_on_ties():
    shares = ranked_shares({"first": 5.0, "big": 10.0, "second": 5.0})
    assert [s.label for s in shares] == ["big", "first", "second"]


def test_top_n():
    assert top_n({"a": 1.0, "b": 3.0, "c": 2.0}, 2) == [("b", 3.0), ("c", 2.0)]
