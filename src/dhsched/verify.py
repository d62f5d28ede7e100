"""Standalone verifier for dhsched.

Re-imports a schedule CSV (Date,Time,Diamond,Home,Away) written by a
search run and checks it against the hard constraints in config.yaml.
Usage: dhsched-verify <schedule.csv> [config.yaml]
"""

import csv
import sys
from pathlib import Path

from dhsched.config import ConfigError, SeasonConfig, load_config, parse_date, parse_time
from dhsched.constraints import format_validation_report, validate_schedule
from dhsched.models import Game
from dhsched.stats import compute_stats, format_stats_report


def _team_id(value: str) -> int:
    """Accept '7' or 'Team 7'."""
    value = value.strip()
    if value.lower().startswith("team"):
        value = value[4:].strip()
    return int(value)


def parse_csv_schedule(csv_path: str | Path) -> list[Game]:
    """Parse a schedule CSV back into Game objects."""
    games = []
    with open(csv_path, newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            date_str = (row.get("Date") or "").strip()
            home = (row.get("Home") or "").strip()
            away = (row.get("Away") or "").strip()
            if not date_str or not home or not away:
                continue

            diamond_str = (row.get("Diamond") or "").strip()
            games.append(Game(
                date=parse_date(date_str),
                timeslot=parse_time(row.get("Time") or "0:00"),
                diamond=int(diamond_str) if diamond_str else 1,
                home=_team_id(home),
                away=_team_id(away),
            ))
    return games


def verify_schedule(games: list[Game], config: SeasonConfig) -> tuple[dict, str]:
    """Validate games and build the combined validation + stats report."""
    result = validate_schedule(games, config)
    stats = compute_stats(games, config)
    report = format_validation_report(result) + "\n\n" + format_stats_report(stats)
    return result, report


def main():
    if len(sys.argv) < 2:
        print("Usage: dhsched-verify <schedule.csv> [config.yaml]")
        print("  Validates a schedule CSV against constraints in config.")
        sys.exit(1)

    csv_path = sys.argv[1]
    config_path = sys.argv[2] if len(sys.argv) > 2 else "config.yaml"

    if not Path(csv_path).exists():
        print(f"Error: {csv_path} not found")
        sys.exit(1)
    if not Path(config_path).exists():
        print(f"Error: {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print("Config validation errors:")
        for err in e.errors:
            print(f"  {err}")
        sys.exit(1)

    print(f"Parsing schedule from {csv_path}...")
    games = parse_csv_schedule(csv_path)
    print(f"Loaded {len(games)} games")

    if not games:
        print("No games found in CSV. Check the format.")
        sys.exit(1)

    result, report = verify_schedule(games, config)
    print(report)
    sys.exit(0 if result["valid"] else 1)


if __name__ == "__main__":
    main()
