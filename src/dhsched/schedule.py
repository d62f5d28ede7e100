#!/usr/bin/env python3
"""Doubleheader league schedule generator.

Generate mode (default):
    dhsched [config.yaml] [--seed N] [-o DIR] [--workers N] [--target N]
            [--max-attempts N] [--time-limit SECONDS]

    Runs randomized trials on a worker pool until --target valid schedules
    have been found, then writes the best ones into DIR:
      DIR/config.txt          - Configuration summary
      DIR/NN_SCORE.txt        - Schedule by week + per team, with stats
      DIR/NN_SCORE.csv        - Date,Time,Diamond,Home,Away
      DIR/NN_SCORE.xlsx       - Workbook: stats, schedule, one sheet per team

Verify mode:
    dhsched --verify <schedule.csv> [config.yaml]

    Re-imports a schedule CSV and checks all constraints against config.
    Exit code 0 if valid, 1 if violations found.

Examples:
    dhsched                                 # default config
    dhsched --seed 42 -o spring             # reproducible seeds, custom dir
    dhsched --time-limit 600                # give up after ten minutes
    dhsched --verify spring/01_2315.csv
"""

import argparse
import dataclasses
import sys
from datetime import datetime
from pathlib import Path

from dhsched.config import ConfigError, check_feasibility, load_config
from dhsched.config_report import capacity_summary
from dhsched.output import write_results
from dhsched.roundrobin import verify_matchups
from dhsched.search import Leaderboard, SearchEngine, SearchStats
from dhsched.verify import parse_csv_schedule, verify_schedule


def format_elapsed(seconds: float) -> str:
    seconds = int(seconds)
    return f"{seconds // 3600:02d}:{seconds % 3600 // 60:02d}:{seconds % 60:02d}"


def make_progress_printer(target: int, leaderboard: Leaderboard | None = None):
    """Progress callback that redraws one status line."""
    def _print_progress(stats: SearchStats):
        best = stats.best_score if stats.best_score is not None else "-"
        kept = ""
        if leaderboard is not None and leaderboard.lowest_score is not None:
            kept = f"Lowest kept: {leaderboard.lowest_score} | "
        status = (
            f"Time: {format_elapsed(stats.elapsed)} | "
            f"Valid: {stats.valid_attempts:,}/{target:,} "
            f"({stats.valid_attempts * 100.0 / target:.2f}%) | "
            f"Rate: {stats.rate:.2f}/s | "
            f"Highest so far: {best} | "
            f"{kept}"
            f"Press Ctrl+C to stop"
        )
        print(f"\r{status}", end="", flush=True)
    return _print_progress


def print_config_errors(e: ConfigError):
    print("Config validation errors:")
    for err in e.errors:
        print(f"  {err}")


def main():
    parser = argparse.ArgumentParser(
        description="Doubleheader league schedule generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Output files (generate mode):
  {dir}/config.txt        Configuration summary
  {dir}/NN_SCORE.txt      Human-readable schedule and statistics
  {dir}/NN_SCORE.csv      Schedule CSV (re-importable with --verify)
  {dir}/NN_SCORE.xlsx     Workbook with stats, schedule and team sheets

Exit codes:
  0  Search finished (or verified schedule is valid)
  1  Config errors, infeasible config, or constraint violations
""",
    )
    parser.add_argument(
        "config", nargs="?", default="config.yaml",
        help="Path to config YAML file (default: config.yaml)"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Base seed for the per-worker random sources"
    )
    parser.add_argument(
        "--output-dir", "-o", default=None,
        help="Output directory (default: schedules/<timestamp>)"
    )
    parser.add_argument(
        "--workers", type=int, default=None,
        help="Worker threads (overrides search.max_workers)"
    )
    parser.add_argument(
        "--target", type=int, default=None,
        help="Valid schedules to find (overrides search.target_valid)"
    )
    parser.add_argument(
        "--max-attempts", type=int, default=None,
        help="Stop after this many attempts even if the target is not met"
    )
    parser.add_argument(
        "--time-limit", type=float, default=None,
        help="Stop after this many seconds even if the target is not met"
    )
    parser.add_argument(
        "--verify", metavar="CSV",
        help="Verify an existing schedule CSV instead of generating"
    )
    args = parser.parse_args()

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: config file {config_path} not found")
        sys.exit(1)

    print(f"Loading config from {config_path}...")
    try:
        config = load_config(config_path)
        overrides = {}
        if args.workers is not None:
            overrides["max_workers"] = args.workers
        if args.target is not None:
            overrides["target_valid"] = args.target
        if args.seed is not None:
            overrides["seed"] = args.seed
        if overrides:
            config = dataclasses.replace(config, **overrides)
    except ConfigError as e:
        print_config_errors(e)
        sys.exit(1)

    if args.verify:
        print(f"Verifying schedule from {args.verify}...")
        games = parse_csv_schedule(args.verify)
        print(f"Loaded {len(games)} games")
        result, report = verify_schedule(games, config)
        print(report)
        sys.exit(0 if result["valid"] else 1)

    print("\nConfiguration:")
    print(f"- Teams: {config.total_teams}")
    print(f"- Games per team: {config.games_per_team}")
    print(f"- Start date: {config.start_date:%A, %B %d, %Y}")
    print(f"- End date: {config.end_date:%A, %B %d, %Y}")
    print(f"- Diamond count: {config.diamond_count}")
    print(f"- Game times: {', '.join(f'{t:%H:%M}' for t in config.timeslots)}")

    violations = check_feasibility(config)
    if violations:
        print("\nValidation:")
        for v in violations:
            print(f"  ERROR: {v.message}")
        print("\nSchedule generation cannot proceed due to validation errors.")
        sys.exit(1)

    cap = capacity_summary(config)
    print("\nStatistics:")
    print(f"- Total game days: {cap['total_game_days']}")
    print(f"- Games per day possible: {cap['games_per_day']}")
    print(f"- Total game slots available: {cap['total_slots']}")
    print(f"- Total games needed: {cap['total_games_needed']}")
    print(f"- Required round robin weeks: {cap['round_robin_weeks']}")

    engine = SearchEngine(config)
    matchup_check = verify_matchups(engine.matchups, config.total_teams)
    if not matchup_check["valid"]:
        print("\nMatchup errors:")
        for err in matchup_check["errors"]:
            print(f"  ERROR: {err}")
        sys.exit(1)
    print(f"- Matchups: {len(engine.matchups)} (every team hosts every other once)")

    output_dir = args.output_dir or str(
        Path("schedules") / datetime.now().strftime("%Y%m%d_%H%M%S")
    )
    print(f"\nSearching with {config.max_workers} workers, "
          f"press Ctrl+C to stop...")

    interrupted = False
    try:
        results = engine.run(
            max_attempts=args.max_attempts,
            time_limit=args.time_limit,
            progress=make_progress_printer(config.target_valid,
                                           engine.leaderboard),
        )
    except KeyboardInterrupt:
        interrupted = True
        results = engine.leaderboard.results()
    print()

    stats = engine.stats
    label = "stopped" if interrupted else "completed"
    print(f"\nGeneration {label} in {format_elapsed(stats.elapsed)}!")
    print(f"Tried {stats.total_attempts:,} total schedules to find "
          f"{stats.valid_attempts:,} valid ones "
          f"({stats.valid_percent:.2f}% valid)")
    print(f"Rate: {stats.rate:.2f} attempts/second "
          f"({stats.valid_rate:.2f} valid/second)")

    if not results:
        print(f"No schedules scored at least {config.min_score}; "
              f"nothing written.")
        return

    scores = [r.score for r in results]
    print(f"Lowest score: {min(scores)}")
    print(f"Highest score: {max(scores)}")
    print(f"Average score: {sum(scores) / len(scores):.2f}")

    print(f"\nWriting {len(results)} schedules to {output_dir}...")
    write_results(results, config, output_dir)


if __name__ == "__main__":
    main()
