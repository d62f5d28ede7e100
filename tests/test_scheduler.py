"""Tests for scheduler.py: randomized slot filling."""

import random
import threading
from collections import Counter, defaultdict
from datetime import date, time

from dhsched.config import SeasonConfig
from dhsched.roundrobin import generate_matchups
from dhsched.scheduler import fill_slots, generate_schedule


EARLY = time(18, 15)
LATE = time(19, 45)


def _make_config(**kwargs):
    defaults = dict(
        total_teams=4, games_per_team=6,
        start_date=date(2025, 5, 13), end_date=date(2025, 7, 29),  # 12 Tuesdays
        diamond_count=1, timeslots=(EARLY,), max_workers=1,
    )
    defaults.update(kwargs)
    return SeasonConfig(**defaults)


class TestFillSlots:
    def test_zero_slack_uses_every_slot(self):
        config = _make_config()
        matchups = generate_matchups(4)
        assert len(matchups) == config.total_games_needed == 12

        games = generate_schedule(config, matchups, random.Random(1))
        assert games is not None
        assert len(games) == 12
        per_date = Counter(g.date for g in games)
        assert set(per_date) == set(config.game_days)
        assert all(c == 1 for c in per_date.values())

    def test_places_every_matchup_once(self):
        config = _make_config(total_teams=6, games_per_team=10,
                              diamond_count=3, timeslots=(EARLY, LATE))
        matchups = generate_matchups(6)
        games = generate_schedule(config, matchups, random.Random(7))
        assert games is not None
        placed = sorted((g.home, g.away) for g in games)
        assert placed == sorted((m.home, m.away) for m in matchups)

    def test_no_team_twice_in_a_slot(self):
        config = _make_config(total_teams=6, games_per_team=10,
                              diamond_count=3, timeslots=(EARLY, LATE))
        games = generate_schedule(config, generate_matchups(6), random.Random(3))
        assert games is not None
        by_slot = defaultdict(list)
        for g in games:
            by_slot[(g.date, g.timeslot)].append(g)
        for slot_games in by_slot.values():
            teams = [t for g in slot_games for t in (g.home, g.away)]
            assert len(teams) == len(set(teams))
            assert len(slot_games) <= config.diamond_count

    def test_diamonds_numbered_from_one(self):
        config = _make_config(total_teams=6, games_per_team=10,
                              diamond_count=3, timeslots=(EARLY, LATE))
        games = generate_schedule(config, generate_matchups(6), random.Random(5))
        by_slot = defaultdict(list)
        for g in games:
            by_slot[(g.date, g.timeslot)].append(g.diamond)
        for diamonds in by_slot.values():
            assert diamonds == list(range(1, len(diamonds) + 1))

    def test_games_only_on_grid(self):
        config = _make_config(diamond_count=2, timeslots=(EARLY, LATE))
        games = generate_schedule(config, generate_matchups(4), random.Random(2))
        assert all(g.date in config.game_days for g in games)
        assert all(g.timeslot in config.timeslots for g in games)

    def test_not_enough_slots_returns_none(self):
        # 12 matchups, 5 single-game days
        days = [date(2025, 5, 13), date(2025, 5, 20), date(2025, 5, 27),
                date(2025, 6, 3), date(2025, 6, 10)]
        result = fill_slots(generate_matchups(4), days, (EARLY,), 1,
                            random.Random(0), max_attempts=25)
        assert result is None

    def test_cancelled_returns_none(self):
        cancelled = threading.Event()
        cancelled.set()
        config = _make_config()
        result = generate_schedule(config, generate_matchups(4),
                                   random.Random(0), cancelled=cancelled)
        assert result is None

    def test_same_seed_same_schedule(self):
        config = _make_config(total_teams=6, games_per_team=10,
                              diamond_count=3, timeslots=(EARLY, LATE))
        matchups = generate_matchups(6)
        a = generate_schedule(config, matchups, random.Random(11))
        b = generate_schedule(config, matchups, random.Random(11))
        assert a == b

    def test_does_not_mutate_matchups(self):
        config = _make_config()
        matchups = generate_matchups(4)
        before = list(matchups)
        generate_schedule(config, matchups, random.Random(4))
        assert matchups == before
