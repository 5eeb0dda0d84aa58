from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List

import numpy as np

from .dataset import Dataset
from .logger import LogManager

log = LogManager("statistics").get_logger()

_NAN_BITS = int(np.array([np.nan]).view(np.int64)[0])


@dataclass
class ColumnStatistics:
    column: str
    count: int
    sum: float
    mean: float
    median: float
    mode: float
    std: float
    min: float
    max: float
    range: float
    q1: float
    q2: float
    q3: float

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


class StatisticsEngine:
    """
    Statistiche descrittive su una sequenza numerica (copia in sola lettura).

    Ogni metodo è indipendente e non modifica i dati; con sequenza vuota
    tutte le statistiche valgono 0.0.
    """

    def __init__(self, data: Iterable[float], column_name: str = "") -> None:
        values = np.array(list(data), dtype=np.float64)
        values.setflags(write=False)
        self._data = values
        self.column_name = column_name

    @classmethod
    def from_dataset(cls, dataset: Dataset, column_name: str) -> "StatisticsEngine":
        """Costruisce il motore dalla vista numerica di una colonna del Dataset."""
        return cls(dataset.get_column_as_numbers(column_name), column_name)

    @property
    def data(self) -> np.ndarray:
        return self._data

    def _sorted(self) -> np.ndarray:
        return np.sort(self._data)

    # ---------- tendenza centrale ---------- #
    def count(self) -> int:
        return int(self._data.size)

    def sum(self) -> float:
        if self._data.size == 0:
            return 0.0
        return float(np.sum(self._data))

    def mean(self) -> float:
        if self._data.size == 0:
            return 0.0
        return self.sum() / self._data.size

    def median(self) -> float:
        size = self._data.size
        if size == 0:
            return 0.0
        ordered = self._sorted()
        if size % 2 == 0:
            return float((ordered[size // 2 - 1] + ordered[size // 2]) / 2.0)
        return float(ordered[size // 2])

    def _bit_keys(self) -> List[int]:
        # uguaglianza per pattern di bit: 0.0 != -0.0, tutti i NaN coincidono
        bits = self._data.view(np.int64)
        return np.where(np.isnan(self._data), _NAN_BITS, bits).tolist()

    def mode(self) -> float:
        """
        Valore più frequente (uguaglianza esatta sul pattern di bit dei float).

        A parità di frequenza vince il valore che per primo, scorrendo i dati
        nell'ordine originale, raggiunge la frequenza massima.
        """
        if self._data.size == 0:
            return 0.0
        keys = self._bit_keys()
        max_freq = max(Counter(keys).values())

        running: Counter = Counter()
        for position, key in enumerate(keys):
            running[key] += 1
            if running[key] == max_freq:
                return float(self._data[position])
        # non raggiungibile: almeno un valore arriva a max_freq
        return float(self._data[0])

    # ---------- dispersione ---------- #
    def standard_deviation(self) -> float:
        """Deviazione standard di popolazione (divisore n, non n-1)."""
        if self._data.size == 0:
            return 0.0
        deviations = self._data - self.mean()
        return float(np.sqrt(np.sum(deviations * deviations) / self._data.size))

    def min(self) -> float:
        """Scansione lineare dal primo valore: i NaN successivi non vincono mai il confronto."""
        if self._data.size == 0:
            return 0.0
        values = self._data.tolist()
        current = values[0]
        for value in values:
            if value < current:
                current = value
        return float(current)

    def max(self) -> float:
        if self._data.size == 0:
            return 0.0
        values = self._data.tolist()
        current = values[0]
        for value in values:
            if value > current:
                current = value
        return float(current)

    def range(self) -> float:
        return self.max() - self.min()

    def quartiles(self) -> List[float]:
        """
        [Q1, Q2, Q3] con metodo nearest-rank a indice troncato:
        Q1 = sorted[n // 4], Q2 = mediana, Q3 = sorted[(3 * n) // 4].

        Con meno di 4 valori restituisce [min, mediana, max].
        """
        size = self._data.size
        if size < 4:
            return [self.min(), self.median(), self.max()]
        ordered = self._sorted()
        return [float(ordered[size // 4]), self.median(), float(ordered[(3 * size) // 4])]

    # ---------- riepilogo ---------- #
    def summary(self) -> ColumnStatistics:
        q1, q2, q3 = self.quartiles()
        stats = ColumnStatistics(
            column=self.column_name,
            count=self.count(),
            sum=self.sum(),
            mean=self.mean(),
            median=self.median(),
            mode=self.mode(),
            std=self.standard_deviation(),
            min=self.min(),
            max=self.max(),
            range=self.range(),
            q1=q1,
            q2=q2,
            q3=q3,
        )
        log.debug("Statistiche calcolate per '%s' (n=%d)", self.column_name, stats.count)
        return stats
