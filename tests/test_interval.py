"""Tests for interval primitives."""

import pytest

from matchtree import EPSILON, IntegerInterval, NumberInterval


class TestIntegerIntervalContains:
    def test_closed(self) -> None:
        i = IntegerInterval(min=18, max=60)
        assert i.contains(18) is True
        assert i.contains(60) is True
        assert i.contains(17) is False
        assert i.contains(61) is False

    def test_open(self) -> None:
        i = IntegerInterval(min=0, max=10, min_excluded=True, max_excluded=True)
        assert i.contains(0) is False
        assert i.contains(1) is True
        assert i.contains(9) is True
        assert i.contains(10) is False

    def test_unbounded_min(self) -> None:
        i = IntegerInterval(max=5)
        assert i.contains(-(2**63)) is True
        assert i.contains(6) is False

    def test_unbounded_both(self) -> None:
        assert IntegerInterval().contains(123456789) is True


class TestIntegerIntervalEquals:
    def test_same_bounds(self) -> None:
        assert IntegerInterval(1, 2).equals(IntegerInterval(1, 2)) is True

    def test_different_flag(self) -> None:
        a = IntegerInterval(1, 2)
        b = IntegerInterval(1, 2, max_excluded=True)
        assert a.equals(b) is False

    def test_presence_differs(self) -> None:
        assert IntegerInterval(min=1).equals(IntegerInterval(min=1, max=5)) is False

    def test_flag_on_absent_bound_ignored(self) -> None:
        a = IntegerInterval(max=5, min_excluded=True)
        b = IntegerInterval(max=5)
        assert a.equals(b) is True


class TestNumberInterval:
    def test_inclusive_bound_admits_epsilon_overshoot(self) -> None:
        i = NumberInterval(min=0.0, max=10.0)
        assert i.contains(10.0 + 5e-11) is True
        assert i.contains(10.0 + 5e-9) is False
        assert i.contains(-5e-11) is True

    def test_exclusive_bound_rejects_epsilon_region(self) -> None:
        i = NumberInterval(min=10.0, max=20.0, min_excluded=True, max_excluded=True)
        assert i.contains(10.0) is False
        assert i.contains(10.0 + 5e-11) is False
        assert i.contains(20.0 - 5e-11) is False
        assert i.contains(15.0) is True

    def test_equals_within_epsilon(self) -> None:
        a = NumberInterval(min=1.0, max=2.0)
        b = NumberInterval(min=1.0 + EPSILON / 2, max=2.0)
        assert a.equals(b) is True

    def test_not_equal_beyond_epsilon(self) -> None:
        a = NumberInterval(min=1.0)
        b = NumberInterval(min=1.0 + 1e-6)
        assert a.equals(b) is False

    @pytest.mark.parametrize(
        ("interval", "point", "expected"),
        [
            (NumberInterval(min=0.5), 0.5, True),
            (NumberInterval(min=0.5, min_excluded=True), 0.5, False),
            (NumberInterval(max=-1.0), -1.0, True),
            (NumberInterval(max=-1.0, max_excluded=True), -1.0, False),
            (NumberInterval(), float("1e300"), True),
        ],
    )
    def test_half_open(self, interval: NumberInterval, point: float, expected: bool) -> None:
        assert interval.contains(point) is expected
