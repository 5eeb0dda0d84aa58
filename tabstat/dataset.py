from __future__ import annotations

import math
import re
from functools import cmp_to_key
from typing import Dict, Iterable, List, Optional, Sequence, Union

import pandas as pd

from .logger import LogManager

log = LogManager("dataset").get_logger()

NOT_FOUND = -1


# decimale con esponente opzionale, solo cifre ASCII
NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\d*\.?\d+)(?:[eE][+-]?\d+)?", re.ASCII)
SPECIAL_RE = re.compile(r"[+-]?(?:NaN|Infinity)")
# spazi rimossi ai bordi: solo caratteri di controllo ASCII e spazio
TRIM_CHARS = "".join(chr(c) for c in range(0x21))


def parse_number(text: str) -> Optional[float]:
    """
    Converte una cella in float, None se non è un numero.

    Accetta decimali con esponente opzionale (cifre ASCII) e le sole grafie
    esatte `NaN` / `Infinity` (con segno opzionale): `nan`, `inf`,
    `infinity` e le cifre Unicode non ASCII vengono rifiutate.
    Nessuna gestione locale: niente virgola decimale né separatori delle
    migliaia (anche la sintassi `1_000` di Python viene rifiutata).
    I suffissi `d`/`f` e la notazione esadecimale non sono supportati.
    """
    if text is None:
        return None
    stripped = text.strip(TRIM_CHARS)
    if NUMBER_RE.fullmatch(stripped) or SPECIAL_RE.fullmatch(stripped):
        return float(stripped)
    return None


def _compare(a: float, b: float) -> int:
    # NaN è maggiore di ogni altro valore e uguale a sé stesso
    if a < b:
        return -1
    if a > b:
        return 1
    a_nan, b_nan = math.isnan(a), math.isnan(b)
    if a_nan == b_nan:
        return 0
    return 1 if a_nan else -1


class Dataset:
    """
    Contenitore tabellare: header ordinati, righe di stringhe e mappa
    nome -> indice colonna.

    Le righe possono essere più corte o più lunghe dell'header: i valori in
    eccesso vengono ignorati in lettura, quelli mancanti valgono "".
    Con header duplicati la mappa riflette l'ultima occorrenza.
    """

    def __init__(self) -> None:
        self._headers: List[str] = []
        self._rows: List[List[str]] = []
        self._index: Dict[str, int] = {}

    def __repr__(self) -> str:
        return f"Dataset(rows={self.row_count}, columns={self.column_count})"

    # ---------- popolamento ---------- #
    def set_headers(self, names: Iterable[str]) -> None:
        headers = list(names)
        index: Dict[str, int] = {}
        for position, name in enumerate(headers):
            index[name] = position
        self._headers = headers
        self._index = index
        if len(index) != len(headers):
            log.debug("Header duplicati: %d nomi per %d colonne", len(index), len(headers))

    def add_row(self, values: Iterable[str]) -> None:
        self._rows.append(list(values))

    # ---------- dimensioni / header ---------- #
    @property
    def row_count(self) -> int:
        return len(self._rows)

    @property
    def column_count(self) -> int:
        return len(self._headers)

    def get_column_names(self) -> List[str]:
        return list(self._headers)

    def get_column_index(self, name: str) -> int:
        return self._index.get(name, NOT_FOUND)

    # ---------- accesso celle / righe ---------- #
    def get_value(self, row_index: int, column: Union[int, str]) -> str:
        """Valore della cella, "" per riga/colonna fuori range o nome sconosciuto."""
        if isinstance(column, str):
            column = self.get_column_index(column)
            if column == NOT_FOUND:
                return ""
        if not (0 <= row_index < len(self._rows)):
            return ""
        if not (0 <= column < len(self._headers)):
            return ""
        row = self._rows[row_index]
        return row[column] if column < len(row) else ""

    def get_row(self, row_index: int) -> List[str]:
        if 0 <= row_index < len(self._rows):
            return list(self._rows[row_index])
        return []

    def get_all_data(self) -> List[List[str]]:
        return [list(row) for row in self._rows]

    # ---------- accesso colonne ---------- #
    def get_column(self, name: str) -> List[str]:
        """Valori della colonna per tutte le righe abbastanza lunghe."""
        idx = self.get_column_index(name)
        if idx == NOT_FOUND:
            return []
        return [row[idx] for row in self._rows if idx < len(row)]

    def get_column_as_numbers(self, name: str) -> List[float]:
        """Vista numerica della colonna: i valori non numerici vengono scartati."""
        numbers: List[float] = []
        for value in self.get_column(name):
            number = parse_number(value)
            if number is not None:
                numbers.append(number)
        return numbers

    def numeric_columns(self) -> List[str]:
        """Colonne (ordine header, senza duplicati) con almeno un valore numerico."""
        return [name for name in dict.fromkeys(self._headers) if self.get_column_as_numbers(name)]

    # ---------- trasformazioni ---------- #
    def copy(self) -> "Dataset":
        """Nuovo Dataset con gli stessi header e una copia di ogni riga."""
        duplicate = Dataset()
        duplicate.set_headers(self._headers)
        for row in self._rows:
            duplicate.add_row(row)
        return duplicate

    def filter_by_column(self, name: str, target_value: str) -> "Dataset":
        """Nuovo Dataset con le sole righe il cui valore è esattamente target_value."""
        filtered = Dataset()
        filtered.set_headers(self._headers)

        idx = self.get_column_index(name)
        if idx != NOT_FOUND:
            for row in self._rows:
                if idx < len(row) and row[idx] == target_value:
                    filtered.add_row(row)

        log.debug("filter_by_column(%r, %r): %d -> %d righe", name, target_value, self.row_count, filtered.row_count)
        return filtered

    def sort_by_column(self, name: str, ascending: bool = True) -> None:
        """
        Ordina le righe sul valore numerico della colonna (stabile, in place).

        Se uno dei due valori confrontati non è numerico (o manca) la coppia
        risulta uguale: quelle righe non vengono spostate agli estremi.
        """
        idx = self.get_column_index(name)
        if idx == NOT_FOUND:
            return

        def numeric_at(row: Sequence[str]) -> Optional[float]:
            return parse_number(row[idx]) if idx < len(row) else None

        def compare(row1: Sequence[str], row2: Sequence[str]) -> int:
            v1 = numeric_at(row1)
            v2 = numeric_at(row2)
            if v1 is None or v2 is None:
                return 0
            result = _compare(v1, v2)
            return result if ascending else -result

        self._rows.sort(key=cmp_to_key(compare))

    # ---------- presentazione ---------- #
    def get_summary(self) -> str:
        return (
            "Dataset Summary:\n"
            f"Rows: {self.row_count}\n"
            f"Columns: {self.column_count}\n"
            f"Headers: [{', '.join(self._headers)}]\n"
        )

    def to_dataframe(self) -> pd.DataFrame:
        """DataFrame di stringhe allineato all'header (righe troncate o completate con "")."""
        width = len(self._headers)
        data = [(row + [""] * (width - len(row)))[:width] for row in self._rows]
        return pd.DataFrame(data, columns=self._headers, dtype="string")
