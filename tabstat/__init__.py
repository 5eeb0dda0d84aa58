"""
Core module: lettura CSV, Dataset tabellare e statistiche descrittive.

Il Copy-on-Write di pandas è attivo globalmente: i DataFrame prodotti da
Dataset.to_dataframe() vengono solo letti da tabelle e grafici.
"""

import pandas as pd

pd.options.mode.copy_on_write = True

from .csv_reader import CsvReader, SourceNotFoundError, SourceReadError, parse_line  # noqa: E402
from .dataset import Dataset, parse_number  # noqa: E402
from .loader import EmptySourceError, load_dataset  # noqa: E402
from .statistics import ColumnStatistics, StatisticsEngine  # noqa: E402

__all__ = [
    "ColumnStatistics",
    "CsvReader",
    "Dataset",
    "EmptySourceError",
    "SourceNotFoundError",
    "SourceReadError",
    "StatisticsEngine",
    "load_dataset",
    "parse_line",
    "parse_number",
]
