"""Double round-robin matchup generation for dhsched."""

from dhsched.models import Matchup


def generate_matchups(total_teams: int) -> list[Matchup]:
    """Every ordered (home, away) pair of teams 1..total_teams.

    Each pair of teams meets twice, once hosted by each side, giving
    N * (N - 1) matchups. Deterministic: the slot filler does the shuffling.
    """
    matchups = []
    for i in range(1, total_teams + 1):
        for j in range(i + 1, total_teams + 1):
            matchups.append(Matchup(home=i, away=j))
            matchups.append(Matchup(home=j, away=i))
    return matchups


def verify_matchups(matchups: list[Matchup], total_teams: int) -> dict:
    """Verify a matchup list is a complete double round robin.

    Returns dict with:
    - valid: bool
    - errors: list of error strings
    - pair_counts: dict of (home, away) -> count
    - games_per_team: dict of team -> matchup count
    """
    errors = []
    pair_counts: dict[tuple[int, int], int] = {}
    games_per_team: dict[int, int] = {t: 0 for t in range(1, total_teams + 1)}

    for m in matchups:
        if m.home == m.away:
            errors.append(f"Team {m.home} is matched against itself")
            continue
        unknown = [t for t in (m.home, m.away) if t not in games_per_team]
        if unknown:
            errors.append(
                f"Matchup {m.home} vs {m.away} has unknown team(s) "
                f"{', '.join(str(t) for t in unknown)}"
            )
            continue

        key = (m.home, m.away)
        pair_counts[key] = pair_counts.get(key, 0) + 1
        games_per_team[m.home] += 1
        games_per_team[m.away] += 1

    # Every ordered pair should appear exactly once
    for home in range(1, total_teams + 1):
        for away in range(1, total_teams + 1):
            if home == away:
                continue
            count = pair_counts.get((home, away), 0)
            if count != 1:
                errors.append(
                    f"{home} hosting {away}: listed {count} times (expected 1)"
                )

    return {
        "valid": len(errors) == 0,
        "errors": errors,
        "pair_counts": pair_counts,
        "games_per_team": games_per_team,
    }
