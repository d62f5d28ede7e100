"""Generate a human-readable config summary for a search run."""

import math
import sys
from pathlib import Path

from dhsched.config import (
    ConfigError, SeasonConfig, check_feasibility, load_config,
)


def fmt_time(t) -> str:
    return f"{t:%H:%M}"


def capacity_summary(config: SeasonConfig) -> dict:
    """The theoretical numbers behind the feasibility check."""
    games_per_day = config.diamond_count * len(config.timeslots)
    total_game_days = len(config.game_days)
    return {
        "total_game_days": total_game_days,
        "games_per_day": games_per_day,
        "total_slots": games_per_day * total_game_days,
        "total_games_needed": config.total_games_needed,
        "round_robin_weeks": math.ceil(
            config.total_teams * config.games_per_team / (2 * games_per_day)
        ),
    }


def generate_report(config: SeasonConfig) -> str:
    """Plain-text summary of a config: inputs, capacity and problems."""
    cap = capacity_summary(config)

    lines = []
    lines.append("SCHEDULE GENERATOR CONFIGURATION")
    lines.append("=" * 60)
    lines.append(f"Teams: {config.total_teams}")
    lines.append(f"Games per team: {config.games_per_team}")
    lines.append(f"Start date: {config.start_date:%A, %B %d, %Y}")
    lines.append(f"End date: {config.end_date:%A, %B %d, %Y}")
    lines.append(f"Game day: {config.game_day.name}")
    lines.append(f"Diamond count: {config.diamond_count}")
    lines.append(f"Game times: {', '.join(fmt_time(t) for t in config.timeslots)}")
    lines.append(f"Valid schedules to generate: {config.target_valid:,}")
    lines.append(f"Save top: {config.save_top}")
    lines.append(f"Minimum score: {config.min_score}")
    lines.append(f"Maximum threads: {config.max_workers}")
    lines.append(f"Double headers needed: {config.doubleheaders_needed}")
    lines.append(f"Max consecutive singles: {config.max_consecutive_singles}")
    if config.seed is not None:
        lines.append(f"Seed: {config.seed}")

    lines.append("")
    lines.append("Statistics:")
    lines.append(f"- Total game days: {cap['total_game_days']}")
    lines.append(f"- Games per day possible: {cap['games_per_day']}")
    lines.append(f"- Total game slots available: {cap['total_slots']}")
    lines.append(f"- Total games needed: {cap['total_games_needed']}")
    lines.append(f"- Required round robin weeks: {cap['round_robin_weeks']}")

    violations = check_feasibility(config)
    if violations:
        lines.append("")
        lines.append("Validation errors:")
        for v in violations:
            lines.append(f"- ERROR: {v.message}")

    lines.append("")
    return "\n".join(lines)


def main():
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.yaml"
    output_arg = sys.argv[2] if len(sys.argv) > 2 else None

    try:
        config = load_config(config_path)
    except ConfigError as e:
        print("Config validation errors:")
        for err in e.errors:
            print(f"  {err}")
        sys.exit(1)

    report = generate_report(config)
    if output_arg:
        out_dir = Path(output_arg)
        out_dir.mkdir(parents=True, exist_ok=True)
        txt_path = out_dir / "config.txt"
        txt_path.write_text(report)
        print(f"Written: {txt_path}")
    else:
        print(report)


if __name__ == "__main__":
    main()
