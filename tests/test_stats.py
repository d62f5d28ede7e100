"""Tests for stats.py: per-team statistics."""

from datetime import date, time, timedelta

from dhsched.config import SeasonConfig
from dhsched.models import Game
from dhsched.stats import compute_stats, early_percent, format_stats_report


EARLY = time(18, 15)
LATE = time(19, 45)
START = date(2025, 5, 13)  # Tuesday


def _make_config():
    return SeasonConfig(
        total_teams=4, games_per_team=6,
        start_date=START, end_date=date(2025, 6, 17),
        diamond_count=1, timeslots=(EARLY, LATE), max_workers=1,
    )


def _pair_doubleheader_schedule():
    pairs = [(1, 2), (3, 4), (1, 3), (2, 4), (1, 4), (2, 3)]
    games = []
    for week, (a, b) in enumerate(pairs):
        d = START + timedelta(weeks=week)
        games.append(Game(d, EARLY, 1, a, b))
        games.append(Game(d, LATE, 1, b, a))
    return games


class TestComputeStats:
    def test_balanced_schedule(self):
        stats = compute_stats(_pair_doubleheader_schedule(), _make_config())
        assert stats["all_teams"] == [1, 2, 3, 4]
        for t in range(1, 5):
            assert stats["home_counts"][t] == 3
            assert stats["away_counts"][t] == 3
            assert stats["total_games"][t] == 6
            assert stats["doubleheaders"][t] == 3
            assert stats["byes"][t] == 3
            assert stats["early_games"][t] == 3
            assert stats["late_games"][t] == 3
            assert stats["longest_single_run"][t] == 0
        assert stats["breakdown"]["score"] == 1720

    def test_team_without_games(self):
        config = _make_config()
        games = [Game(START, EARLY, 1, 1, 2)]
        stats = compute_stats(games, config)
        assert stats["total_games"][3] == 0
        assert stats["byes"][3] == 6
        assert early_percent(stats, 3) == 0.0
        assert early_percent(stats, 1) == 100.0


class TestFormatStatsReport:
    def test_contains_sections(self):
        stats = compute_stats(_pair_doubleheader_schedule(), _make_config())
        report = format_stats_report(stats)
        assert "TEAM BALANCE" in report
        assert "Team 4" in report
        assert "SCORE" in report
        assert "1720" in report
