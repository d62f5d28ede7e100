"""Output formatters for dhsched."""

import csv
from datetime import date
from io import StringIO
from pathlib import Path

from dhsched.config import SeasonConfig
from dhsched.config_report import generate_report
from dhsched.models import Game, Result
from dhsched.output_xlsx import write_schedule_xlsx
from dhsched.stats import compute_stats, format_stats_report


CSV_HEADER = ["Date", "Time", "Diamond", "Home", "Away"]


def _sorted_games(games: list[Game]) -> list[Game]:
    return sorted(games, key=lambda g: (g.date, g.timeslot, g.diamond))


def format_schedule(games: list[Game], config: SeasonConfig,
                    score: int | None = None) -> str:
    """Format schedule as human-readable text, organized by game day."""
    lines = []
    lines.append("=" * 60)
    title = "LEAGUE SCHEDULE"
    if score is not None:
        title += f" (score {score})"
    lines.append(title)
    lines.append("=" * 60)

    by_date: dict[date, list[Game]] = {}
    for g in _sorted_games(games):
        by_date.setdefault(g.date, []).append(g)

    for week, d in enumerate(config.game_days, 1):
        lines.append(f"\n--- WEEK {week}: {d.strftime('%A %m/%d/%Y')} ---")
        day_games = by_date.get(d, [])
        if not day_games:
            lines.append("  (no games)")
        for g in day_games:
            lines.append(
                f"  {g.timeslot:%H:%M}  Diamond {g.diamond}  "
                f"Team {g.home:<3} vs Team {g.away:<3}"
            )

    # Games outside the configured calendar (only from imported schedules)
    extra_dates = sorted(set(by_date) - set(config.game_days))
    for d in extra_dates:
        lines.append(f"\n--- {d.strftime('%A %m/%d/%Y')} (not a game day) ---")
        for g in by_date[d]:
            lines.append(
                f"  {g.timeslot:%H:%M}  Diamond {g.diamond}  "
                f"Team {g.home:<3} vs Team {g.away:<3}"
            )

    lines.append("\n" + "=" * 60)
    lines.append("PER-TEAM SCHEDULES")
    lines.append("=" * 60)

    for team in config.teams:
        team_games = [g for g in _sorted_games(games) if g.involves(team)]
        per_date: dict[date, int] = {}
        for g in team_games:
            per_date[g.date] = per_date.get(g.date, 0) + 1

        lines.append(f"\nTeam {team}:")
        for i, g in enumerate(team_games, 1):
            h_a = "H" if g.home == team else "A"
            dh = " DH" if per_date[g.date] == 2 else ""
            lines.append(
                f"  {i:>2}. {g.date.strftime('%a %m/%d')} {g.timeslot:%H:%M} "
                f"{h_a} vs Team {g.opponent(team):<3} "
                f"@ Diamond {g.diamond}{dh}"
            )

    return "\n".join(lines)


def format_schedule_csv(games: list[Game]) -> str:
    """Format schedule as CSV: Date,Time,Diamond,Home,Away."""
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(CSV_HEADER)
    for g in _sorted_games(games):
        writer.writerow([
            g.date.isoformat(), f"{g.timeslot:%H:%M}", g.diamond,
            g.home, g.away,
        ])
    return output.getvalue()


def result_stem(rank: int, result: Result) -> str:
    """File name stem for a ranked result, e.g. '01_2315'."""
    return f"{rank:02d}_{result.score:04d}"


def write_results(results: list[Result], config: SeasonConfig,
                  output_dir: str | Path) -> list[Path]:
    """Write the config summary and every ranked result into output_dir.

    Each result gets {stem}.txt (schedule + stats), {stem}.csv and
    {stem}.xlsx. Returns the written paths.
    """
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []

    config_path = out_dir / "config.txt"
    config_path.write_text(generate_report(config))
    print(f"Written: {config_path}")
    written.append(config_path)

    for rank, result in enumerate(results, 1):
        games = list(result.schedule)
        stem = result_stem(rank, result)
        stats = compute_stats(games, config)

        text_path = out_dir / f"{stem}.txt"
        text_path.write_text(
            format_schedule(games, config, score=result.score)
            + "\n\n" + format_stats_report(stats) + "\n"
        )

        csv_path = out_dir / f"{stem}.csv"
        csv_path.write_text(format_schedule_csv(games))

        xlsx_path = out_dir / f"{stem}.xlsx"
        write_schedule_xlsx(games, config, xlsx_path, stats=stats)

        print(f"Written: {text_path}, {csv_path.name}, {xlsx_path.name}")
        written.extend([text_path, csv_path, xlsx_path])

    return written
