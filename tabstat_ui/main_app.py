from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Label,
    Select,
    Static,
)

from tabstat.config import load_config
from tabstat.dataset import Dataset
from tabstat.loader import load_dataset
from tabstat.logger import LogManager
from tabstat.plot_manager import ChartKind, PlotManager, default_chart_columns
from tabstat.report_manager import ReportManager, format_statistics_report
from tabstat.statistics import StatisticsEngine

__all__ = ["TabStatApp"]

log = LogManager("tui").get_logger()

# righe mostrate nella tabella (le statistiche usano sempre tutte le righe)
MAX_TABLE_ROWS = 2_000


def _selected(select: Select) -> Optional[str]:
    value = select.value
    return value if isinstance(value, str) else None


class TabStatApp(App):
    CSS = """
    #left { width: 36%; min-width: 30%; }
    #right { width: 64%; }
    .box { border: solid #444; padding: 1; margin: 1; height: auto; }
    #stats { height: auto; }
    """

    BINDINGS = [
        ("q", "quit", "Esci"),
    ]

    def __init__(self, initial_path: Optional[str] = None, config: Optional[Dict[str, Any]] = None) -> None:
        super().__init__()
        self.initial_path = initial_path
        self.cfg = config if config is not None else load_config()
        self.decimals = int(self.cfg.get("report_decimals", 2))
        # dataset caricato da file e vista corrente (ordinata/filtrata)
        self.source: Optional[Dataset] = None
        self.dataset: Optional[Dataset] = None
        self.columns: List[str] = []

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal():
            with VerticalScroll(id="left"):
                with Vertical(classes="box"):
                    yield Label("Percorso CSV:")
                    yield Input(value=self.initial_path or "", placeholder="/path/file.csv", id="csv_path")
                    yield Button("Carica", id="btn_load")

                with Vertical(classes="box"):
                    yield Label("Colonna:")
                    yield Select([], id="sel_col", prompt="—")
                    with Horizontal():
                        yield Button("Ordina ↑", id="btn_sort_asc")
                        yield Button("Ordina ↓", id="btn_sort_desc")
                    yield Input(placeholder="Valore esatto per il filtro", id="filter_value")
                    with Horizontal():
                        yield Button("Filtra", id="btn_filter")
                        yield Button("Reset", id="btn_reset")

                with Vertical(classes="box"):
                    yield Label("Grafico:")
                    yield Select([(k.label, k.value) for k in ChartKind], value=ChartKind.BAR.value, id="sel_chart")
                    yield Label("Colonna categorie:")
                    yield Select([], id="sel_category", prompt="—")
                    with Horizontal():
                        yield Button("Plot", id="btn_plot")
                        yield Button("Report CSV", id="btn_report")

            with Vertical(id="right"):
                yield DataTable(id="table")
                yield Static("", id="stats")
                yield Static("", id="status")

        yield Footer()

    def on_mount(self) -> None:
        if self.initial_path:
            self._do_load()

    # ---------- helpers ---------- #
    def _set_status(self, msg: str) -> None:
        self.query_one("#status", Static).update(Text(msg))

    def _refresh_columns(self) -> None:
        opts = [(c, c) for c in dict.fromkeys(self.columns)]
        self.query_one("#sel_col", Select).set_options(opts)
        self.query_one("#sel_category", Select).set_options(opts)

        category, value = default_chart_columns(self.dataset)
        if value is not None:
            self.query_one("#sel_col", Select).value = value
        if category is not None:
            self.query_one("#sel_category", Select).value = category

    def _update_table(self) -> None:
        tbl = self.query_one("#table", DataTable)
        tbl.clear(columns=True)
        if self.dataset is None:
            return
        width = self.dataset.column_count
        for i, name in enumerate(self.dataset.get_column_names()):
            tbl.add_column(name, key=f"c{i}")
        for row in range(min(self.dataset.row_count, MAX_TABLE_ROWS)):
            tbl.add_row(*[self.dataset.get_value(row, col) for col in range(width)])

    def _update_stats(self) -> None:
        stats = self.query_one("#stats", Static)
        column = _selected(self.query_one("#sel_col", Select))
        if self.dataset is None or column is None:
            stats.update("No columns available")
            return
        stats.update(Text(self._stats_text(column)))

    def _stats_text(self, column: str) -> str:
        engine = StatisticsEngine.from_dataset(self.dataset, column)
        return format_statistics_report(engine, decimals=self.decimals)

    def _show_view(self, msg: str) -> None:
        self._update_table()
        self._update_stats()
        self._set_status(f"{msg} (Rows: {self.dataset.row_count}, Columns: {self.dataset.column_count})")

    # ---------- events ---------- #
    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn_load":
            self._do_load()
        elif event.button.id == "btn_sort_asc":
            self._do_sort(True)
        elif event.button.id == "btn_sort_desc":
            self._do_sort(False)
        elif event.button.id == "btn_filter":
            self._do_filter()
        elif event.button.id == "btn_reset":
            self._do_reset()
        elif event.button.id == "btn_plot":
            self._do_plot()
        elif event.button.id == "btn_report":
            self._do_report()

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "sel_col":
            self._update_stats()

    # ---------- actions ---------- #
    def _do_load(self) -> None:
        path = self.query_one("#csv_path", Input).value.strip()
        if not path:
            self.notify("Percorso vuoto.", severity="warning")
            return
        self._set_status(f"Loading file: {path}...")
        try:
            loaded = load_dataset(path, delimiter=self.cfg.get("delimiter"), encoding=self.cfg.get("encoding"))
        except (OSError, ValueError) as e:
            log.error("Caricamento fallito (%s): %s", path, e)
            self._set_status(f"Error: {e}")
            self.notify(f"Errore caricamento: {e}", severity="error")
            return

        self.source = loaded
        self.dataset = loaded
        self.columns = loaded.get_column_names()
        self._refresh_columns()
        self._show_view(f"Successfully loaded: {path}")

    def _require_dataset(self) -> bool:
        if self.dataset is None:
            self.notify("Nessun dataset caricato.", severity="warning")
            return False
        return True

    def _do_sort(self, ascending: bool) -> None:
        if not self._require_dataset():
            return
        column = _selected(self.query_one("#sel_col", Select))
        if column is None:
            self.notify("Seleziona una colonna.", severity="warning")
            return
        # la vista ordinata non deve alterare l'ordine del file caricato
        if self.dataset is self.source:
            self.dataset = self.source.copy()
        self.dataset.sort_by_column(column, ascending)
        self._show_view(f"Ordinato per {column} ({'asc' if ascending else 'desc'})")

    def _do_filter(self) -> None:
        if not self._require_dataset():
            return
        column = _selected(self.query_one("#sel_col", Select))
        if column is None:
            self.notify("Seleziona una colonna.", severity="warning")
            return
        target = self.query_one("#filter_value", Input).value
        self.dataset = self.dataset.filter_by_column(column, target)
        self._show_view(f"Filtro {column} == {target!r}")

    def _do_reset(self) -> None:
        if self.source is None:
            return
        self.dataset = self.source
        self._show_view("Vista ripristinata (ordine e filtro del file)")

    def _do_plot(self) -> None:
        if not self._require_dataset():
            return
        value_col = _selected(self.query_one("#sel_col", Select))
        category_col = _selected(self.query_one("#sel_category", Select))
        kind_value = _selected(self.query_one("#sel_chart", Select))
        if value_col is None or category_col is None or kind_value is None:
            self.notify("Seleziona colonne e tipo di grafico.", severity="warning")
            return
        path = PlotManager().plot(self.dataset, category_col, value_col, ChartKind(kind_value))
        self._set_status(f"Grafico salvato: {path}")

    def _do_report(self) -> None:
        if not self._require_dataset():
            return
        out = ReportManager().generate_report(self.dataset, formats="csv+md")
        self._set_status(f"Report salvato: {out['csv']}")
        self.notify("Report generato.", severity="information")
