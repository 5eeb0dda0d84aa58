from __future__ import annotations

from pathlib import Path

import pytest

from tabstat.csv_reader import SourceNotFoundError, SourceReadError
from tabstat.loader import EmptySourceError, load_dataset


def test_load_dataset_uses_first_row_as_header(sample_csv: Path) -> None:
    ds = load_dataset(str(sample_csv))

    assert ds.get_column_names() == ["region", "amount", "note"]
    assert ds.row_count == 4
    assert ds.get_value(1, "note") == "late, partial"
    assert ds.get_column_as_numbers("amount") == [10.0, 4.5, 7.0]


def test_load_dataset_custom_delimiter(tmp_path: Path) -> None:
    csv_path = tmp_path / "semicolon.csv"
    csv_path.write_text("x;y;z\n10;20;30\n40;50;60\n", encoding="utf-8")

    ds = load_dataset(csv_path, delimiter=";")

    assert ds.column_count == 3
    assert ds.get_column("y") == ["20", "50"]


def test_load_dataset_header_only(tmp_path: Path) -> None:
    csv_path = tmp_path / "header.csv"
    csv_path.write_text("a,b\n", encoding="utf-8")

    ds = load_dataset(csv_path)

    assert ds.column_count == 2
    assert ds.row_count == 0


def test_load_dataset_ragged_rows(tmp_path: Path) -> None:
    csv_path = tmp_path / "ragged.csv"
    csv_path.write_text("a,b,c\n1,2,3\n4,5\n7,8,9,10\n", encoding="utf-8")

    ds = load_dataset(csv_path)

    assert ds.row_count == 3
    assert ds.get_column("c") == ["3", "9"]
    assert ds.get_value(1, "c") == ""


def test_load_dataset_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SourceNotFoundError):
        load_dataset(str(tmp_path / "missing.csv"))


def test_load_dataset_empty_file(tmp_path: Path) -> None:
    csv_path = tmp_path / "empty.csv"
    csv_path.write_text("", encoding="utf-8")

    with pytest.raises(EmptySourceError):
        load_dataset(csv_path)


def test_load_dataset_decode_error(tmp_path: Path) -> None:
    csv_path = tmp_path / "broken.csv"
    csv_path.write_bytes(b"a,b\n1,2\n\xff\xfe\xfa,3\n")

    with pytest.raises(SourceReadError):
        load_dataset(csv_path, encoding="utf-8")
