"""Per-team statistics and balance reporting for dhsched."""

from collections import defaultdict

from dhsched.config import SeasonConfig
from dhsched.constraints import team_games_per_date
from dhsched.models import Game
from dhsched.scoring import score_breakdown


def compute_stats(games: list[Game], config: SeasonConfig) -> dict:
    """Compute per-team statistics for a schedule.

    Returns dict keyed by stat name, each a team -> value mapping, plus
    "all_teams" and the score "breakdown".
    """
    all_teams = list(config.teams)

    home_counts = defaultdict(int)
    away_counts = defaultdict(int)
    early_games = defaultdict(int)
    late_games = defaultdict(int)

    for g in games:
        home_counts[g.home] += 1
        away_counts[g.away] += 1
        for team in (g.home, g.away):
            if g.timeslot == config.early_timeslot:
                early_games[team] += 1
            else:
                late_games[team] += 1

    per_date = team_games_per_date(games)
    doubleheaders = {
        t: sum(1 for c in per_date.get(t, {}).values() if c == 2)
        for t in all_teams
    }
    byes = {
        t: sum(1 for d in config.game_days if d not in per_date.get(t, {}))
        for t in all_teams
    }

    breakdown = score_breakdown(games, config)

    return {
        "all_teams": all_teams,
        "home_counts": {t: home_counts.get(t, 0) for t in all_teams},
        "away_counts": {t: away_counts.get(t, 0) for t in all_teams},
        "total_games": {
            t: home_counts.get(t, 0) + away_counts.get(t, 0) for t in all_teams
        },
        "early_games": {t: early_games.get(t, 0) for t in all_teams},
        "late_games": {t: late_games.get(t, 0) for t in all_teams},
        "doubleheaders": doubleheaders,
        "byes": byes,
        "longest_single_run": breakdown["teams"]["consecutive_singles"],
        "breakdown": breakdown,
    }


def early_percent(stats: dict, team: int) -> float:
    total = stats["total_games"][team]
    if total == 0:
        return 0.0
    return stats["early_games"][team] * 100.0 / total


def format_stats_report(stats: dict) -> str:
    """Format statistics into a human-readable report."""
    lines = []
    lines.append("=" * 70)
    lines.append("SCHEDULE STATISTICS")
    lines.append("=" * 70)

    lines.append("\n--- TEAM BALANCE ---")
    lines.append(f"{'Team':<8} {'Home':>5} {'Away':>5} {'Total':>5} "
                 f"{'Early':>5} {'Late':>5} {'Early%':>7} "
                 f"{'DH':>3} {'BYE':>3} {'RUN':>3}")
    lines.append("-" * 60)
    for t in stats["all_teams"]:
        lines.append(
            f"{'Team ' + str(t):<8} {stats['home_counts'][t]:>5} "
            f"{stats['away_counts'][t]:>5} {stats['total_games'][t]:>5} "
            f"{stats['early_games'][t]:>5} {stats['late_games'][t]:>5} "
            f"{early_percent(stats, t):>6.2f}% "
            f"{stats['doubleheaders'][t]:>3} {stats['byes'][t]:>3} "
            f"{stats['longest_single_run'][t]:>3}"
        )

    breakdown = stats["breakdown"]
    lines.append("\n--- SCORE ---")
    lines.append(f"  Bye bonus:           {breakdown['bye_bonus']:>+7}")
    lines.append(f"  Doubleheader bonus:  {breakdown['doubleheader_bonus']:>+7}")
    for name, penalty in breakdown["penalties"].items():
        label = name.replace("_", " ")
        lines.append(f"  {label + ' spread:':<21}{-penalty['spread']:>+7}")
        lines.append(f"  {label + ' deviation:':<21}{-penalty['deviation']:>+7}")
    lines.append(f"  Score:               {breakdown['score']:>7}")

    return "\n".join(lines)
