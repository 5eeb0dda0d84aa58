"""Test per tabstat/report_manager.py - report testuali e tabellari."""
from __future__ import annotations

from pathlib import Path

import pytest

from tabstat.dataset import Dataset
from tabstat.report_manager import (
    REPORT_COLUMNS,
    ReportFormats,
    ReportManager,
    format_statistics_report,
    format_statistics_text,
)
from tabstat.statistics import StatisticsEngine


class TestTextReports:
    def test_compact_text(self):
        text = format_statistics_text(StatisticsEngine([1, 2, 3, 4], "v"))

        assert text.startswith("=== Statistics for v ===")
        assert "Count: 4" in text
        assert "Mean: 2.50" in text
        assert "Std Dev: 1.12" in text
        assert "Sum: 10.00" in text

    def test_boxed_report(self):
        report = format_statistics_report(StatisticsEngine([1, 2, 3, 4], "v"))

        assert "Statistical Analysis Report" in report
        assert "Column: v" in report
        assert "Data Points: 4" in report
        assert "Q1 (25th percentile):" in report
        assert "2.00" in report

    def test_boxed_report_lines_have_same_width(self):
        report = format_statistics_report(StatisticsEngine([1, 2, 3, 4], "v"))
        boxed = [line for line in report.splitlines() if line[:1] in ("┌", "│", "└")]
        assert len({len(line) for line in boxed}) == 1

    def test_boxed_report_decimals(self):
        report = format_statistics_report(StatisticsEngine([1, 2, 3, 4], "v"), decimals=3)
        assert "2.500" in report
        assert "1.118" in report

    def test_boxed_report_without_numbers(self):
        report = format_statistics_report(StatisticsEngine([], "name"))
        assert report == "No numeric data in column: name\n"


class TestReportFormats:
    @pytest.mark.parametrize(
        "token,expected",
        [
            ("csv", (True, False, False)),
            ("CSV+MD", (True, True, False)),
            ("csv+html", (True, False, True)),
            ("csv+md+html", (True, True, True)),
            ("boh", (True, False, False)),
        ],
    )
    def test_from_token(self, token, expected):
        fmt = ReportFormats.from_token(token)
        assert (fmt.csv, fmt.md, fmt.html) == expected


class TestReportManager:
    def test_build_report_table_numeric_columns(self, people: Dataset, tmp_path: Path):
        table = ReportManager(outputs_dir=tmp_path).build_report_table(people)

        assert list(table.columns) == REPORT_COLUMNS
        assert table["column"].tolist() == ["age"]
        row = table.iloc[0]
        assert row["count"] == 3
        assert row["mean"] == pytest.approx(85 / 3)
        assert row["mode"] == 30.0

    def test_build_report_table_explicit_columns(self, people: Dataset, tmp_path: Path):
        table = ReportManager(outputs_dir=tmp_path).build_report_table(people, ["name", "missing"])

        assert table["column"].tolist() == ["name"]
        assert table.iloc[0]["count"] == 0

    def test_generate_report_writes_files(self, people: Dataset, tmp_path: Path):
        out = ReportManager(outputs_dir=tmp_path).generate_report(people, formats="csv+md+html", base_name="people")

        assert out["csv"].exists() and out["csv"].parent == tmp_path
        assert out["csv"].read_text(encoding="utf-8").splitlines()[0] == ",".join(REPORT_COLUMNS)
        md = out["md"].read_text(encoding="utf-8")
        assert "|column|count|" in md
        assert "|age|3|" in md
        assert "<table" in out["html"].read_text(encoding="utf-8")

    def test_generate_report_csv_only(self, people: Dataset, tmp_path: Path):
        out = ReportManager(outputs_dir=tmp_path).generate_report(people)
        assert out["csv"] is not None
        assert out["md"] is None and out["html"] is None
