"""Tests for models.py: data classes and enums."""

from datetime import date, time

import pytest

from dhsched.models import DayOfWeek, Game, Matchup, Result


class TestDayOfWeek:
    def test_from_str_full(self):
        assert DayOfWeek.from_str("Monday") == DayOfWeek.Mon
        assert DayOfWeek.from_str("Tuesday") == DayOfWeek.Tue

    def test_from_str_short_and_case(self):
        assert DayOfWeek.from_str("tue") == DayOfWeek.Tue
        assert DayOfWeek.from_str("FRI") == DayOfWeek.Fri

    def test_of_date(self):
        # 2025-05-13 is a Tuesday
        assert DayOfWeek.of(date(2025, 5, 13)) == DayOfWeek.Tue

    def test_unknown(self):
        with pytest.raises(KeyError):
            DayOfWeek.from_str("Funday")


class TestMatchup:
    def test_ordered(self):
        assert Matchup(1, 2) != Matchup(2, 1)


class TestGame:
    def _game(self):
        return Game(date=date(2025, 5, 13), timeslot=time(18, 15),
                    diamond=1, home=3, away=7)

    def test_opponent(self):
        g = self._game()
        assert g.opponent(3) == 7
        assert g.opponent(7) == 3

    def test_hashable_and_frozen(self):
        g = self._game()
        assert g == self._game()
        assert len({g, self._game()}) == 1
        with pytest.raises(AttributeError):
            g.home = 4


class TestResult:
    def test_fields(self):
        g = Game(date(2025, 5, 13), time(18, 15), 1, 1, 2)
        r = Result(schedule=(g,), score=1080)
        assert r.schedule == (g,)
        assert r.score == 1080
