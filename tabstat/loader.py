from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .config import load_config
from .csv_reader import CsvReader
from .dataset import Dataset
from .logger import LogManager

log = LogManager("loader").get_logger()


class EmptySourceError(ValueError):
    """Il file CSV non contiene nemmeno la riga di header."""


def load_dataset(
    path_str: Union[str, Path],
    delimiter: Optional[str] = None,
    encoding: Optional[str] = None,
) -> Dataset:
    """
    Carica il CSV in un Dataset usando la prima riga come header.

    - delimiter/encoding a None: valori di config.json (encoding None = BOM).
    - SourceNotFoundError / SourceReadError / EmptySourceError vengono
      propagati: nessun Dataset parziale viene restituito.
    """
    cfg = load_config()
    reader = CsvReader(
        path_str,
        delimiter=delimiter or cfg["delimiter"],
        encoding=encoding or cfg["encoding"],
    )
    rows = reader.read_csv()

    if not rows:
        msg = f"File CSV vuoto: {reader.path}"
        log.error(msg)
        raise EmptySourceError(msg)

    dataset = Dataset()
    dataset.set_headers(rows[0])
    for row in rows[1:]:
        dataset.add_row(row)

    log.info(
        "CSV caricato: %s (righe=%d, colonne=%d, col_numeric=%d)",
        reader.path.name,
        dataset.row_count,
        dataset.column_count,
        len(dataset.numeric_columns()),
    )
    return dataset
