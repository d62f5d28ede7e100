"""Config loading, validation and pre-flight feasibility for dhsched."""

import math
import os
from dataclasses import dataclass, field
from datetime import date, time, timedelta
from functools import cached_property
from pathlib import Path
from typing import Optional

import yaml

from dhsched.models import DayOfWeek


DEFAULT_START_DATE = date(2025, 5, 13)
DEFAULT_END_DATE = date(2025, 9, 2)
DEFAULT_TIMESLOTS = (time(18, 15), time(19, 45))


class ConfigError(ValueError):
    """Raised when configuration values cannot describe a season."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def parse_time(s: str) -> time:
    """Parse time strings like '5:30pm', '10am', '17:00'."""
    s = s.strip()
    s_lower = s.lower()

    is_pm = s_lower.endswith("pm")
    is_am = s_lower.endswith("am")

    # Strip am/pm suffix
    s_clean = s_lower
    if is_pm or is_am:
        s_clean = s_clean[:-2].strip()

    if ":" in s_clean:
        parts = s_clean.split(":")
        h = int(parts[0])
        m = int(parts[1])
    else:
        h = int(s_clean)
        m = 0

    if is_pm and h < 12:
        h += 12
    elif is_am and h == 12:
        h = 0

    return time(h, m)


def parse_date(s: str) -> date:
    """Parse date string YYYY-MM-DD."""
    parts = s.strip().split("-")
    return date(int(parts[0]), int(parts[1]), int(parts[2]))


def default_max_workers() -> int:
    return (os.cpu_count() or 1) * 2


def build_game_days(start_date: date, end_date: date,
                    game_day: DayOfWeek) -> list[date]:
    """Every `game_day` weekday from the first one on/after start to end."""
    offset = (game_day.value - start_date.weekday()) % 7
    current = start_date + timedelta(days=offset)
    days = []
    while current <= end_date:
        days.append(current)
        current += timedelta(days=7)
    return days


@dataclass(frozen=True)
class SeasonConfig:
    """Everything a search run needs. Immutable once built."""
    total_teams: int
    games_per_team: int
    start_date: date
    end_date: date
    diamond_count: int
    timeslots: tuple[time, ...]
    target_valid: int = 100
    save_top: int = 10
    min_score: int = 2000
    max_workers: int = field(default_factory=default_max_workers)
    game_day: Optional[DayOfWeek] = None
    max_consecutive_singles: int = 2
    seed: Optional[int] = None

    def __post_init__(self):
        # Accept any sequence of times but store a tuple
        object.__setattr__(self, "timeslots", tuple(self.timeslots))
        if self.game_day is None:
            object.__setattr__(self, "game_day", DayOfWeek.of(self.start_date))

        errors = []
        if self.total_teams < 2:
            errors.append(f"teams must be at least 2 (got {self.total_teams})")
        if self.games_per_team < 1:
            errors.append(
                f"games_per_team must be at least 1 (got {self.games_per_team})"
            )
        if self.diamond_count < 1:
            errors.append(
                f"diamonds must be at least 1 (got {self.diamond_count})"
            )
        if not self.timeslots:
            errors.append("at least one timeslot is required")
        elif len(set(self.timeslots)) != len(self.timeslots):
            errors.append("timeslots must not repeat")
        if self.end_date < self.start_date:
            errors.append(
                f"end_date {self.end_date} is before start_date {self.start_date}"
            )
        if self.target_valid < 1:
            errors.append(
                f"target_valid must be at least 1 (got {self.target_valid})"
            )
        if self.save_top < 1:
            errors.append(f"save_top must be at least 1 (got {self.save_top})")
        if self.max_workers < 1:
            errors.append(
                f"max_workers must be at least 1 (got {self.max_workers})"
            )
        if self.max_consecutive_singles < 0:
            errors.append("max_consecutive_singles must not be negative")
        if errors:
            raise ConfigError(errors)

    @property
    def teams(self) -> range:
        return range(1, self.total_teams + 1)

    @property
    def doubleheaders_needed(self) -> int:
        return math.ceil((self.total_teams - 1) / 2)

    @property
    def total_games_needed(self) -> int:
        return self.total_teams * self.games_per_team // 2

    @property
    def early_timeslot(self) -> time:
        return self.timeslots[0]

    @cached_property
    def game_days(self) -> list[date]:
        return build_game_days(self.start_date, self.end_date, self.game_day)


@dataclass(frozen=True)
class Violation:
    """One reason a configuration cannot produce a schedule."""
    code: str
    message: str
    required: int
    available: int


def check_feasibility(config: SeasonConfig) -> list[Violation]:
    """Theoretical checks run before any trial.

    Returns an empty list when the season can be attempted.
    """
    violations = []

    games_per_day = config.diamond_count * len(config.timeslots)
    total_game_days = len(config.game_days)
    total_possible = games_per_day * total_game_days
    total_required = config.total_games_needed
    round_robin_weeks = math.ceil(
        config.total_teams * config.games_per_team / (2 * games_per_day)
    )

    if total_possible < total_required:
        violations.append(Violation(
            code="insufficient_slots",
            message=(
                f"Not enough game slots: {total_possible} available, "
                f"{total_required} needed "
                f"({total_required - total_possible} more slots required)"
            ),
            required=total_required,
            available=total_possible,
        ))

    if round_robin_weeks > total_game_days:
        violations.append(Violation(
            code="insufficient_weeks",
            message=(
                f"Not enough weeks for round robin: {total_game_days} "
                f"available, {round_robin_weeks} needed"
            ),
            required=round_robin_weeks,
            available=total_game_days,
        ))

    if config.games_per_team % 2 != 0:
        violations.append(Violation(
            code="odd_games_per_team",
            message=f"Games per team must be even (got {config.games_per_team})",
            required=config.games_per_team + 1,
            available=config.games_per_team,
        ))

    total_slots_used = config.total_teams * config.games_per_team
    if total_slots_used % 2 != 0:
        violations.append(Violation(
            code="odd_total_games",
            message=(
                f"Teams x games per team must be even "
                f"(got {total_slots_used})"
            ),
            required=total_slots_used + 1,
            available=total_slots_used,
        ))

    return violations


def _require(section: dict, key: str, section_name: str, errors: list[str]):
    if key not in section:
        errors.append(f"missing {section_name}.{key}")
        return None
    return section[key]


def load_config(path: str | Path) -> SeasonConfig:
    """Load config YAML into a validated SeasonConfig.

    Expected layout:
    - season: {start_date, end_date, game_day}
    - league: {teams, games_per_team, diamonds, timeslots,
               max_consecutive_singles}
    - search: {target_valid, save_top, min_score, max_workers, seed}

    Every key except league.teams and league.games_per_team has a default.
    """
    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    season = raw.get("season", {}) or {}
    league = raw.get("league", {}) or {}
    search = raw.get("search", {}) or {}

    errors = []
    teams = _require(league, "teams", "league", errors)
    games_per_team = _require(league, "games_per_team", "league", errors)
    if errors:
        raise ConfigError(errors)

    start_date = (parse_date(str(season["start_date"]))
                  if "start_date" in season else DEFAULT_START_DATE)
    end_date = (parse_date(str(season["end_date"]))
                if "end_date" in season else DEFAULT_END_DATE)
    game_day = (DayOfWeek.from_str(str(season["game_day"]))
                if season.get("game_day") else None)

    # Blank means the default; 0 must still fail validation
    max_workers = search.get("max_workers")

    if "timeslots" in league:
        timeslots = tuple(parse_time(str(t)) for t in league["timeslots"])
    else:
        timeslots = DEFAULT_TIMESLOTS

    return SeasonConfig(
        total_teams=int(teams),
        games_per_team=int(games_per_team),
        start_date=start_date,
        end_date=end_date,
        diamond_count=int(league.get("diamonds", 4)),
        timeslots=timeslots,
        target_valid=int(search.get("target_valid", 100)),
        save_top=int(search.get("save_top", 10)),
        min_score=int(search.get("min_score", 2000)),
        max_workers=(int(max_workers) if max_workers is not None
                     else default_max_workers()),
        game_day=game_day,
        max_consecutive_singles=int(league.get("max_consecutive_singles", 2)),
        seed=search.get("seed"),
    )
