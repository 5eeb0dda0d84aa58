"""Configurazione pytest e fixtures condivise."""
from __future__ import annotations

from pathlib import Path

import pytest

from tabstat.dataset import Dataset


@pytest.fixture
def sample_csv(tmp_path: Path) -> Path:
    """CSV base con una colonna testuale, una numerica e una mista."""
    csv_path = tmp_path / "sales.csv"
    csv_path.write_text(
        "region,amount,note\n"
        "north,10,ok\n"
        "south,4.5,\"late, partial\"\n"
        "north,7,n/a\n"
        "east,x,\"said \"\"hi\"\"\"\n",
        encoding="utf-8",
    )
    return csv_path


@pytest.fixture
def people() -> Dataset:
    """Dataset in memoria con valori duplicati e una riga corta."""
    ds = Dataset()
    ds.set_headers(["name", "age", "city"])
    ds.add_row(["alice", "30", "rome"])
    ds.add_row(["bob", "25", "milan"])
    ds.add_row(["carol", "30", "rome"])
    ds.add_row(["dave", "unknown", "turin"])
    ds.add_row(["eve"])
    return ds
