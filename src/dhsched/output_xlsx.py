"""Excel workbook output for dhsched.

Sheets:
- General Stats: configuration block and per-team balance table
- Schedule: every game by date, time and diamond
- Team N: one sheet per team, doubleheader dates highlighted
"""

from pathlib import Path

import xlsxwriter

from dhsched.config import SeasonConfig
from dhsched.models import Game
from dhsched.stats import compute_stats, early_percent


DATE_FORMAT = "yyyy-mm-dd"
DOUBLEHEADER_FILL = "#FFFFE0"  # light yellow


def _sorted_games(games: list[Game]) -> list[Game]:
    return sorted(games, key=lambda g: (g.date, g.timeslot, g.diamond))


def _write_general_stats(workbook, formats: dict, config: SeasonConfig,
                         stats: dict):
    ws = workbook.add_worksheet("General Stats")

    ws.write(0, 0, "Configuration", formats["title"])
    config_rows = [
        ("Teams", config.total_teams),
        ("Games per team", config.games_per_team),
        ("Start date", config.start_date),
        ("End date", config.end_date),
        ("Diamond count", config.diamond_count),
        ("Game times", ", ".join(f"{t:%H:%M}" for t in config.timeslots)),
        ("Double headers needed", config.doubleheaders_needed),
        ("Score", stats["breakdown"]["score"]),
    ]
    row = 2
    for label, value in config_rows:
        ws.write(row, 0, label, formats["bold"])
        if hasattr(value, "isoformat"):
            ws.write_datetime(row, 1, value, formats["date"])
        else:
            ws.write(row, 1, value)
        row += 1

    row += 1
    ws.write(row, 0, "Team Statistics", formats["title"])
    row += 1
    headers = ["Team", "Home Games", "Away Games", "Total Games",
               "Early Games", "Late Games", "Early %", "Double Headers",
               "Byes", "Longest Single Run"]
    ws.write_row(row, 0, headers, formats["header"])
    row += 1

    for t in stats["all_teams"]:
        ws.write_row(row, 0, [
            f"Team {t}",
            stats["home_counts"][t],
            stats["away_counts"][t],
            stats["total_games"][t],
            stats["early_games"][t],
            stats["late_games"][t],
        ])
        ws.write_number(row, 6, early_percent(stats, t) / 100.0,
                        formats["percent"])
        ws.write_row(row, 7, [
            stats["doubleheaders"][t],
            stats["byes"][t],
            stats["longest_single_run"][t],
        ])
        row += 1

    ws.set_column(0, 0, 22)
    ws.set_column(1, len(headers) - 1, 14)


def _write_full_schedule(workbook, formats: dict, games: list[Game]):
    ws = workbook.add_worksheet("Schedule")
    ws.write_row(0, 0, ["Date", "Time", "Diamond", "Home", "Away"],
                 formats["header"])
    for row, g in enumerate(_sorted_games(games), 1):
        ws.write_datetime(row, 0, g.date, formats["date"])
        ws.write(row, 1, f"{g.timeslot:%H:%M}")
        ws.write_number(row, 2, g.diamond)
        ws.write(row, 3, f"Team {g.home}")
        ws.write(row, 4, f"Team {g.away}")
    ws.set_column(0, 0, 12)
    ws.set_column(1, 4, 10)
    ws.freeze_panes(1, 0)


def _write_team_schedule(workbook, formats: dict, games: list[Game],
                         team: int):
    ws = workbook.add_worksheet(f"Team {team}")
    ws.write_row(0, 0, ["Date", "Time", "Diamond", "Home/Away", "Opponent"],
                 formats["header"])

    team_games = [g for g in _sorted_games(games) if g.involves(team)]
    games_on_date: dict = {}
    for g in team_games:
        games_on_date[g.date] = games_on_date.get(g.date, 0) + 1

    for row, g in enumerate(team_games, 1):
        is_dh = games_on_date[g.date] > 1
        cell = formats["dh"] if is_dh else None
        ws.write_datetime(row, 0, g.date,
                          formats["dh_date"] if is_dh else formats["date"])
        ws.write(row, 1, f"{g.timeslot:%H:%M}", cell)
        ws.write_number(row, 2, g.diamond, cell)
        ws.write(row, 3, "Home" if g.home == team else "Away", cell)
        ws.write(row, 4, f"Team {g.opponent(team)}", cell)

    ws.set_column(0, 0, 12)
    ws.set_column(1, 4, 11)


def write_schedule_xlsx(games: list[Game], config: SeasonConfig,
                        path: str | Path, stats: dict | None = None) -> Path:
    """Write one schedule as a formatted workbook."""
    path = Path(path)
    if stats is None:
        stats = compute_stats(games, config)

    workbook = xlsxwriter.Workbook(str(path))
    try:
        formats = {
            "title": workbook.add_format({"bold": True, "font_size": 13}),
            "bold": workbook.add_format({"bold": True}),
            "header": workbook.add_format({"bold": True, "bottom": 1}),
            "date": workbook.add_format({"num_format": DATE_FORMAT}),
            "percent": workbook.add_format({"num_format": "0.00%"}),
            "dh": workbook.add_format({"bg_color": DOUBLEHEADER_FILL}),
            "dh_date": workbook.add_format({
                "bg_color": DOUBLEHEADER_FILL, "num_format": DATE_FORMAT,
            }),
        }
        _write_general_stats(workbook, formats, config, stats)
        _write_full_schedule(workbook, formats, games)
        for team in config.teams:
            _write_team_schedule(workbook, formats, games, team)
    finally:
        workbook.close()

    return path
