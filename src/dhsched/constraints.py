"""Hard-constraint validation for dhsched.

Each check is a generator of violation messages. The search loop only needs
to know whether a check yields anything, so is_valid() stops at the first
message of the first failing check; validate_schedule() drains them all for
a human-readable report.
"""

from collections import defaultdict
from datetime import date
from typing import Iterator

from dhsched.config import SeasonConfig
from dhsched.models import Game


def team_games_per_date(games: list[Game]) -> dict[int, dict[date, int]]:
    """team -> date -> number of games that team plays on that date."""
    per_date: dict[int, dict[date, int]] = defaultdict(lambda: defaultdict(int))
    for g in games:
        per_date[g.home][g.date] += 1
        per_date[g.away][g.date] += 1
    return per_date


def check_game_counts(games: list[Game], config: SeasonConfig) -> Iterator[str]:
    """Total game count and exact per-team game counts."""
    if len(games) != config.total_games_needed:
        yield (f"Schedule has {len(games)} games, "
               f"expected {config.total_games_needed}")

    counts = {t: 0 for t in config.teams}
    for g in games:
        for team in (g.home, g.away):
            if team not in counts:
                yield f"Unknown team {team} on {g.date}"
                continue
            counts[team] += 1
        if g.home == g.away:
            yield f"Team {g.home} plays itself on {g.date}"

    for team, count in counts.items():
        if count != config.games_per_team:
            yield (f"Team {team} plays {count} games "
                   f"(expected {config.games_per_team})")


def check_slot_integrity(games: list[Game],
                         config: SeasonConfig) -> Iterator[str]:
    """No team twice in one (date, timeslot); no more teams than diamonds hold."""
    by_slot: dict[tuple, list[Game]] = defaultdict(list)
    for g in games:
        by_slot[(g.date, g.timeslot)].append(g)

    max_teams = config.diamond_count * 2
    for (d, t), slot_games in by_slot.items():
        teams_in_slot: set[int] = set()
        for g in slot_games:
            for team in (g.home, g.away):
                if team in teams_in_slot:
                    yield f"Team {team} is double-booked on {d} at {t:%H:%M}"
                teams_in_slot.add(team)
        if len(teams_in_slot) > max_teams:
            yield (f"{len(teams_in_slot)} teams play on {d} at {t:%H:%M}, "
                   f"{config.diamond_count} diamond(s) hold {max_teams}")


def check_doubleheaders(games: list[Game], config: SeasonConfig) -> Iterator[str]:
    """Every team needs at least doubleheaders_needed two-game dates."""
    per_date = team_games_per_date(games)
    for team in config.teams:
        doubleheaders = sum(
            1 for count in per_date.get(team, {}).values() if count == 2
        )
        if doubleheaders < config.doubleheaders_needed:
            yield (f"Team {team} has {doubleheaders} doubleheaders "
                   f"(needs {config.doubleheaders_needed})")


def check_consecutive_singles(games: list[Game],
                              config: SeasonConfig) -> Iterator[str]:
    """No long single-game stretch between two doubleheaders.

    Only dates a team actually plays are considered. Counting starts at the
    team's first doubleheader. A stretch after the team's last doubleheader
    is allowed to run long.
    """
    limit = config.max_consecutive_singles
    per_date = team_games_per_date(games)

    for team in config.teams:
        counts = [c for _, c in sorted(per_date.get(team, {}).items())]
        consecutive = 0
        seen_doubleheader = False

        for i, count in enumerate(counts):
            if count == 2:
                seen_doubleheader = True
                consecutive = 0
            elif count == 1 and seen_doubleheader:
                consecutive += 1
                if consecutive > limit and 2 in counts[i + 1:]:
                    yield (f"Team {team} plays {consecutive} single-game "
                           f"dates in a row between doubleheaders "
                           f"(max {limit})")
                    break


HARD_CONSTRAINTS = (
    check_game_counts,
    check_slot_integrity,
    check_doubleheaders,
    check_consecutive_singles,
)


def is_valid(games: list[Game], config: SeasonConfig) -> bool:
    """True if the schedule passes every hard constraint."""
    for check in HARD_CONSTRAINTS:
        if next(check(games, config), None) is not None:
            return False
    return True


def validate_schedule(games: list[Game], config: SeasonConfig) -> dict:
    """Validate a schedule against all constraints.

    Returns dict with:
    - valid: bool (True if no hard constraint violations)
    - errors: list of hard constraint violations
    - warnings: list of soft issues (games outside the configured grid)
    """
    errors = []
    for check in HARD_CONSTRAINTS:
        errors.extend(check(games, config))

    warnings = []
    game_days = set(config.game_days)
    timeslots = set(config.timeslots)
    for g in games:
        if g.date not in game_days:
            warnings.append(
                f"Game {g.home} vs {g.away} on {g.date} is not on a "
                f"configured game day"
            )
        if g.timeslot not in timeslots:
            warnings.append(
                f"Game {g.home} vs {g.away} on {g.date} starts at "
                f"{g.timeslot:%H:%M}, which is not a configured timeslot"
            )
        if g.diamond > config.diamond_count:
            warnings.append(
                f"Game {g.home} vs {g.away} on {g.date} uses diamond "
                f"{g.diamond} of {config.diamond_count}"
            )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }


def format_validation_report(result: dict) -> str:
    """Format validation results as text."""
    lines = []
    lines.append("=" * 60)
    lines.append("SCHEDULE VALIDATION REPORT")
    lines.append("=" * 60)

    if result["valid"]:
        lines.append("\nRESULT: VALID (no hard constraint violations)")
    else:
        lines.append(f"\nRESULT: INVALID ({len(result['errors'])} violations)")

    if result["errors"]:
        lines.append(f"\n--- ERRORS ({len(result['errors'])}) ---")
        for e in result["errors"]:
            lines.append(f"  ERROR: {e}")

    if result["warnings"]:
        lines.append(f"\n--- WARNINGS ({len(result['warnings'])}) ---")
        for w in result["warnings"]:
            lines.append(f"  WARN: {w}")

    return "\n".join(lines)
