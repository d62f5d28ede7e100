"""Data models for the doubleheader schedule search."""

from dataclasses import dataclass
from datetime import date, time
from enum import Enum


class DayOfWeek(Enum):
    Mon = 0
    Tue = 1
    Wed = 2
    Thu = 3
    Fri = 4
    Sat = 5
    Sun = 6

    @classmethod
    def from_str(cls, s: str) -> "DayOfWeek":
        return cls[s.strip()[:3].capitalize()]

    @classmethod
    def of(cls, d: date) -> "DayOfWeek":
        return cls(d.weekday())


@dataclass(frozen=True)
class Matchup:
    """An ordered pairing: one game with `home` hosting `away`."""
    home: int
    away: int


@dataclass(frozen=True)
class Game:
    """A matchup placed on a date, timeslot and diamond."""
    date: date
    timeslot: time
    diamond: int
    home: int
    away: int

    def involves(self, team: int) -> bool:
        return team in (self.home, self.away)

    def opponent(self, team: int) -> int:
        if team == self.home:
            return self.away
        return self.home


@dataclass(frozen=True)
class Result:
    """An accepted schedule and its score."""
    schedule: tuple[Game, ...]
    score: int
