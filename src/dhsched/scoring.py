"""Fairness scoring for valid schedules.

A schedule starts at BASE_SCORE, earns bonuses for byes and doubleheaders on
every theoretical game day, then pays a spread penalty and a deviation
penalty for each of three per-team metrics:

- doubleheader count
- longest run of consecutive single-game dates (byes and doubleheaders reset)
- early/late imbalance of single games

The more evenly those are shared across teams, the higher the score.
"""

import math
import statistics
from collections import defaultdict
from datetime import date

from dhsched.config import SeasonConfig
from dhsched.models import Game


BASE_SCORE = 1000
SPREAD_PENALTY_MULTIPLIER = 250  # applied to every distribution penalty
POINTS_DOUBLEHEADER = 40
POINTS_BYE_WEEK = 20

METRICS = ("doubleheaders", "consecutive_singles", "early_late_imbalance")


def _spread_penalties(values: list[int]) -> tuple[int, int]:
    """(spread penalty, deviation penalty) for one per-team metric."""
    spread = (max(values) - min(values)) * SPREAD_PENALTY_MULTIPLIER
    deviation = math.floor(statistics.pstdev(values) * SPREAD_PENALTY_MULTIPLIER)
    return spread, deviation


def score_breakdown(games: list[Game], config: SeasonConfig) -> dict:
    """Score a schedule and return every component of the score.

    Returns dict with:
    - score: int
    - bye_bonus, doubleheader_bonus: total bonus points
    - penalties: metric -> {"spread": int, "deviation": int}
    - teams: metric -> {team: value}, plus "early" and "late" single counts
    """
    teams = list(config.teams)

    games_by_date: dict[date, dict[int, list[Game]]] = defaultdict(
        lambda: defaultdict(list)
    )
    for g in games:
        games_by_date[g.date][g.home].append(g)
        games_by_date[g.date][g.away].append(g)

    doubleheaders = {t: 0 for t in teams}
    early = {t: 0 for t in teams}
    late = {t: 0 for t in teams}
    run = {t: 0 for t in teams}
    peak_run = {t: 0 for t in teams}
    bye_bonus = 0
    doubleheader_bonus = 0

    for d in config.game_days:
        day = games_by_date.get(d, {})
        for team in teams:
            team_games = day.get(team, [])
            if not team_games:
                run[team] = 0
                bye_bonus += POINTS_BYE_WEEK
            elif len(team_games) == 1:
                run[team] += 1
                peak_run[team] = max(peak_run[team], run[team])
                if team_games[0].timeslot == config.early_timeslot:
                    early[team] += 1
                else:
                    late[team] += 1
            elif len(team_games) == 2:
                run[team] = 0
                doubleheaders[team] += 1
                doubleheader_bonus += POINTS_DOUBLEHEADER
            else:
                run[team] = 0

    imbalance = {
        t: round(abs(early[t] - (early[t] + late[t]) / 2)) for t in teams
    }

    metrics = {
        "doubleheaders": doubleheaders,
        "consecutive_singles": peak_run,
        "early_late_imbalance": imbalance,
    }

    score = BASE_SCORE + bye_bonus + doubleheader_bonus
    penalties = {}
    for name in METRICS:
        spread, deviation = _spread_penalties(list(metrics[name].values()))
        penalties[name] = {"spread": spread, "deviation": deviation}
        score -= spread
        score -= deviation

    return {
        "score": score,
        "bye_bonus": bye_bonus,
        "doubleheader_bonus": doubleheader_bonus,
        "penalties": penalties,
        "teams": {**metrics, "early": early, "late": late},
    }


def score_schedule(games: list[Game], config: SeasonConfig) -> int:
    """Integer fitness of a schedule; higher is fairer."""
    return score_breakdown(games, config)["score"]
