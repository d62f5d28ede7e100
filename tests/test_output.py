"""Tests for output.py, output_xlsx.py and verify.py: file output and re-import."""

import csv
from datetime import date, time, timedelta
from io import StringIO

from dhsched.config import SeasonConfig
from dhsched.config_report import capacity_summary, generate_report
from dhsched.models import Game, Result
from dhsched.output import (
    CSV_HEADER, format_schedule, format_schedule_csv, result_stem,
    write_results,
)
from dhsched.output_xlsx import write_schedule_xlsx
from dhsched.verify import parse_csv_schedule, verify_schedule


EARLY = time(18, 15)
LATE = time(19, 45)
START = date(2025, 5, 13)  # Tuesday


def _make_config(**kwargs):
    defaults = dict(
        total_teams=4, games_per_team=6,
        start_date=START, end_date=date(2025, 6, 17),
        diamond_count=1, timeslots=(EARLY, LATE), max_workers=1,
    )
    defaults.update(kwargs)
    return SeasonConfig(**defaults)


def _pair_doubleheader_schedule():
    pairs = [(1, 2), (3, 4), (1, 3), (2, 4), (1, 4), (2, 3)]
    games = []
    for week, (a, b) in enumerate(pairs):
        d = START + timedelta(weeks=week)
        games.append(Game(d, EARLY, 1, a, b))
        games.append(Game(d, LATE, 1, b, a))
    return games


class TestCSV:
    def test_header_and_rows(self):
        text = format_schedule_csv(_pair_doubleheader_schedule())
        rows = list(csv.reader(StringIO(text)))
        assert rows[0] == CSV_HEADER == ["Date", "Time", "Diamond", "Home", "Away"]
        assert rows[1] == ["2025-05-13", "18:15", "1", "1", "2"]
        assert rows[2] == ["2025-05-13", "19:45", "1", "2", "1"]
        assert len(rows) == 13

    def test_sorted_by_date_and_time(self):
        games = list(reversed(_pair_doubleheader_schedule()))
        rows = list(csv.reader(StringIO(format_schedule_csv(games))))[1:]
        assert rows == sorted(rows, key=lambda r: (r[0], r[1]))

    def test_round_trip_through_verify(self, tmp_path):
        config = _make_config()
        games = _pair_doubleheader_schedule()
        path = tmp_path / "schedule.csv"
        path.write_text(format_schedule_csv(games))

        parsed = parse_csv_schedule(path)
        assert sorted(parsed, key=lambda g: (g.date, g.timeslot)) == games
        result, report = verify_schedule(parsed, config)
        assert result["valid"], result["errors"]
        assert "RESULT: VALID" in report

    def test_parse_team_prefix(self, tmp_path):
        path = tmp_path / "schedule.csv"
        path.write_text(
            "Date,Time,Diamond,Home,Away\n"
            "2025-05-13,6:15pm,2,Team 3,Team 7\n"
            ",,,,\n"
        )
        games = parse_csv_schedule(path)
        assert games == [Game(START, EARLY, 2, 3, 7)]

    def test_verify_reports_violations(self, tmp_path):
        config = _make_config()
        path = tmp_path / "schedule.csv"
        path.write_text(format_schedule_csv(_pair_doubleheader_schedule()[:-1]))
        result, report = verify_schedule(parse_csv_schedule(path), config)
        assert not result["valid"]
        assert "RESULT: INVALID" in report


class TestTextOutput:
    def test_format_schedule(self):
        config = _make_config()
        text = format_schedule(_pair_doubleheader_schedule(), config, score=1720)
        assert "LEAGUE SCHEDULE (score 1720)" in text
        assert "WEEK 6" in text
        assert "PER-TEAM SCHEDULES" in text
        assert " DH" in text

    def test_empty_week(self):
        config = _make_config(end_date=date(2025, 6, 24))
        text = format_schedule(_pair_doubleheader_schedule(), config)
        assert "WEEK 7" in text
        assert "(no games)" in text

    def test_result_stem(self):
        assert result_stem(1, Result(schedule=(), score=2315)) == "01_2315"
        assert result_stem(10, Result(schedule=(), score=980)) == "10_0980"


class TestConfigReport:
    def test_capacity(self):
        cap = capacity_summary(_make_config())
        assert cap == {
            "total_game_days": 6, "games_per_day": 2, "total_slots": 12,
            "total_games_needed": 12, "round_robin_weeks": 6,
        }

    def test_report_lists_errors(self):
        report = generate_report(_make_config(end_date=date(2025, 6, 3)))
        assert "Validation errors:" in report
        assert "Not enough game slots" in report

    def test_report_clean(self):
        report = generate_report(_make_config())
        assert "Teams: 4" in report
        assert "Validation errors:" not in report


class TestWriteResults:
    def test_writes_every_file(self, tmp_path):
        config = _make_config()
        games = tuple(_pair_doubleheader_schedule())
        results = [Result(schedule=games, score=1720)]

        out_dir = tmp_path / "run"
        written = write_results(results, config, out_dir)

        names = sorted(p.name for p in written)
        assert names == ["01_1720.csv", "01_1720.txt", "01_1720.xlsx",
                         "config.txt"]
        for p in written:
            assert p.exists()
            assert p.stat().st_size > 0
        assert "Teams: 4" in (out_dir / "config.txt").read_text()
        assert "SCHEDULE STATISTICS" in (out_dir / "01_1720.txt").read_text()
        assert parse_csv_schedule(out_dir / "01_1720.csv") == list(games)

    def test_no_results_writes_config_only(self, tmp_path):
        written = write_results([], _make_config(), tmp_path)
        assert [p.name for p in written] == ["config.txt"]

    def test_xlsx_is_a_zip(self, tmp_path):
        path = tmp_path / "schedule.xlsx"
        write_schedule_xlsx(_pair_doubleheader_schedule(), _make_config(), path)
        assert path.read_bytes()[:2] == b"PK"
