from __future__ import annotations

import re
import webbrowser
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

import plotly.graph_objects as go

from .config import load_config, outputs_dir as default_outputs_dir
from .dataset import Dataset, parse_number
from .logger import LogManager

__all__ = ["ChartKind", "PlotManager", "build_figure", "chart_points", "default_chart_columns"]

log = LogManager("plot").get_logger()


class ChartKind(Enum):
    BAR = "bar"
    LINE = "line"
    PIE = "pie"

    @property
    def label(self) -> str:
        return f"{self.value.capitalize()} Chart"


def default_chart_columns(dataset: Dataset) -> Tuple[Optional[str], Optional[str]]:
    """(colonna categorie, colonna valori): prima colonna e prima colonna numerica."""
    names = dataset.get_column_names()
    if not names:
        return None, None
    numeric = dataset.numeric_columns()
    return names[0], (numeric[0] if numeric else names[0])


def chart_points(dataset: Dataset, category_column: str, value_column: str) -> Tuple[List[str], List[float]]:
    """
    Coppie (etichetta, valore) riga per riga; le righe con valore non
    numerico vengono scartate insieme alla loro etichetta.
    """
    labels: List[str] = []
    values: List[float] = []
    for row in range(dataset.row_count):
        number = parse_number(dataset.get_value(row, value_column))
        if number is None:
            continue
        labels.append(dataset.get_value(row, category_column))
        values.append(number)
    return labels, values


def _empty_figure(title: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(text="No data to display", showarrow=False, x=0.5, y=0.5, xref="paper", yref="paper")
    fig.update_layout(title=title)
    return fig


def build_figure(
    dataset: Dataset,
    category_column: str,
    value_column: str,
    kind: ChartKind = ChartKind.BAR,
) -> go.Figure:
    labels, values = chart_points(dataset, category_column, value_column)

    if kind is ChartKind.BAR:
        title = f"Bar Chart: {value_column} by {category_column}"
        if not values:
            return _empty_figure(title)
        fig = go.Figure(go.Bar(x=list(range(len(values))), y=values, text=values, name=value_column))
        fig.update_xaxes(title=category_column, tickmode="array", tickvals=list(range(len(labels))), ticktext=labels)
        fig.update_yaxes(title=value_column)
    elif kind is ChartKind.LINE:
        title = f"Line Chart: {value_column} over time"
        if len(values) < 2:
            return _empty_figure(title)
        fig = go.Figure(go.Scatter(y=values, mode="lines+markers", name=value_column))
        fig.update_xaxes(title="index")
        fig.update_yaxes(title=value_column)
    elif kind is ChartKind.PIE:
        title = f"Pie Chart: Distribution of {value_column}"
        if not values:
            return _empty_figure(title)
        fig = go.Figure(go.Pie(labels=labels, values=values, sort=False))
    else:
        raise ValueError(f"Tipo di grafico non supportato: {kind!r}")

    fig.update_layout(title=title, margin=dict(l=40, r=20, t=50, b=40), height=520)
    return fig


class PlotManager:
    """Genera i grafici Plotly di un Dataset e li salva come HTML in outputs/."""

    def __init__(self, outputs_dir: Optional[Path] = None) -> None:
        self.cfg = load_config()
        if outputs_dir is None:
            outputs_dir = default_outputs_dir(self.cfg)
        self.outputs_dir = Path(outputs_dir)
        self.outputs_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _sanitize_name(name: str) -> str:
        return re.sub(r"[^A-Za-z0-9_-]+", "_", str(name)).strip("_") or "plot"

    def save_figure_html(self, fig: go.Figure, base: str, open_browser: Optional[bool] = None) -> Path:
        path = (self.outputs_dir / f"{self._sanitize_name(base)}_{datetime.now():%Y%m%d_%H%M%S}.html").resolve()
        fig.write_html(str(path), include_plotlyjs="cdn", full_html=True)
        log.info("Grafico salvato: %s", path)

        if open_browser is None:
            open_browser = self.cfg["open_mode"] == "html"
        if open_browser:
            webbrowser.open_new_tab(path.as_uri())
        return path

    def plot(
        self,
        dataset: Dataset,
        category_column: str,
        value_column: str,
        kind: ChartKind = ChartKind.BAR,
        open_browser: Optional[bool] = None,
    ) -> Path:
        fig = build_figure(dataset, category_column, value_column, kind)
        return self.save_figure_html(fig, f"{kind.value}_{value_column}", open_browser=open_browser)
