"""Randomized slot filling for dhsched.

One call builds one candidate schedule:
1. Shuffle the matchups
2. Sweep every game day (outer) and timeslot (inner), filling up to
   diamond_count games per slot with random eligible matchups
3. If any matchup is left over, start again from a fresh shuffle

There is no backtracking. A pick made for a slot is never revisited within
an attempt; a failed sweep is thrown away whole.
"""

import random
import threading
from datetime import date, time
from typing import Optional

from dhsched.config import SeasonConfig
from dhsched.models import Game, Matchup


MAX_FILL_ATTEMPTS = 1_000_000


def fill_slots(matchups: list[Matchup],
               game_days: list[date],
               timeslots: tuple[time, ...],
               diamond_count: int,
               rng: random.Random,
               max_attempts: int = MAX_FILL_ATTEMPTS,
               cancelled: Optional[threading.Event] = None,
               ) -> Optional[list[Game]]:
    """Place every matchup into a (date, timeslot, diamond) slot.

    Returns the list of games, or None if max_attempts sweeps all left
    matchups unplaced (or `cancelled` was set between sweeps).
    """
    for _ in range(max_attempts):
        if cancelled is not None and cancelled.is_set():
            return None

        remaining = list(matchups)
        rng.shuffle(remaining)
        games: list[Game] = []

        for d in game_days:
            for t in timeslots:
                teams_in_slot: set[int] = set()
                diamond = 0

                while diamond < diamond_count and remaining:
                    # Only matchups where neither team already plays in this slot
                    eligible = [
                        i for i, m in enumerate(remaining)
                        if m.home not in teams_in_slot
                        and m.away not in teams_in_slot
                    ]
                    if not eligible:
                        break

                    m = remaining.pop(eligible[rng.randrange(len(eligible))])
                    diamond += 1
                    games.append(Game(
                        date=d, timeslot=t, diamond=diamond,
                        home=m.home, away=m.away,
                    ))
                    teams_in_slot.add(m.home)
                    teams_in_slot.add(m.away)

            if not remaining:
                return games

        if not remaining:
            return games

    return None


def generate_schedule(config: SeasonConfig, matchups: list[Matchup],
                      rng: random.Random,
                      max_attempts: int = MAX_FILL_ATTEMPTS,
                      cancelled: Optional[threading.Event] = None,
                      ) -> Optional[list[Game]]:
    """fill_slots() over the config's game days, timeslots and diamonds."""
    return fill_slots(
        matchups, config.game_days, config.timeslots, config.diamond_count,
        rng, max_attempts=max_attempts, cancelled=cancelled,
    )
