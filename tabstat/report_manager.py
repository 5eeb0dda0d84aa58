from __future__ import annotations

import html
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import pandas as pd

from .config import load_config, outputs_dir as default_outputs_dir
from .dataset import Dataset
from .logger import LogManager
from .statistics import StatisticsEngine

log = LogManager("report").get_logger()

REPORT_COLUMNS = [
    "column", "count", "sum", "mean", "median", "mode", "std",
    "min", "max", "range", "q1", "q2", "q3",
]


# ---------- report testuali ---------- #
def format_statistics_text(engine: StatisticsEngine, decimals: int = 2) -> str:
    """Blocco compatto '=== Statistics for <col> ===' con le statistiche principali."""
    d = decimals
    lines = [
        f"=== Statistics for {engine.column_name} ===",
        f"Count: {engine.count()}",
        f"Mean: {engine.mean():.{d}f}",
        f"Median: {engine.median():.{d}f}",
        f"Mode: {engine.mode():.{d}f}",
        f"Std Dev: {engine.standard_deviation():.{d}f}",
        f"Min: {engine.min():.{d}f}",
        f"Max: {engine.max():.{d}f}",
        f"Range: {engine.range():.{d}f}",
        f"Sum: {engine.sum():.{d}f}",
    ]
    return "\n".join(lines) + "\n"


def format_statistics_report(engine: StatisticsEngine, decimals: int = 2) -> str:
    """Report a riquadri (tendenza centrale, dispersione, somma e quartili)."""
    if engine.count() == 0:
        return f"No numeric data in column: {engine.column_name}\n"

    width = 44

    def box(title: str, items: List[tuple]) -> List[str]:
        out = [f"┌─ {title} " + "─" * max(0, width - len(title) - 3) + "┐"]
        for label, value in items:
            out.append(f"│ {label:<22} {value:>12.{decimals}f}" + " " * (width - 36) + "│")
        out.append("└" + "─" * width + "┘")
        return out

    q1, _, q3 = engine.quartiles()
    lines = [
        "╔" + "═" * width + "╗",
        "║" + "Statistical Analysis Report".center(width) + "║",
        "╚" + "═" * width + "╝",
        "",
        f"Column: {engine.column_name}",
        f"Data Points: {engine.count()}",
        "",
    ]
    lines += box("Measures of Central Tendency", [
        ("Mean (Average):", engine.mean()),
        ("Median (Middle):", engine.median()),
        ("Mode (Most Frequent):", engine.mode()),
    ])
    lines.append("")
    lines += box("Measures of Dispersion", [
        ("Standard Deviation:", engine.standard_deviation()),
        ("Range:", engine.range()),
        ("Minimum:", engine.min()),
        ("Maximum:", engine.max()),
    ])
    lines.append("")
    lines += box("Additional Statistics", [
        ("Sum:", engine.sum()),
        ("Q1 (25th percentile):", q1),
        ("Q3 (75th percentile):", q3),
    ])
    return "\n".join(lines) + "\n"


# ---------- report tabellare + salvataggi ---------- #
@dataclass
class ReportFormats:
    csv: bool = True
    md: bool = False
    html: bool = False

    @classmethod
    def from_token(cls, token: str) -> "ReportFormats":
        t = (token or "csv").strip().lower()
        if t == "csv+md":
            return cls(csv=True, md=True, html=False)
        if t == "csv+html":
            return cls(csv=True, md=False, html=True)
        if t == "csv+md+html":
            return cls(csv=True, md=True, html=True)
        return cls(csv=True, md=False, html=False)


class ReportManager:
    """
    Statistiche descrittive per colonne di un Dataset:
    - una riga per colonna numerica (count, sum, mean, median, mode, std,
      min/max/range, quartili nearest-rank),
    - output CSV (+ opzionale MD/HTML) in outputs/.
    """

    def __init__(self, outputs_dir: Optional[Path] = None) -> None:
        self.cfg = load_config()
        if outputs_dir is None:
            outputs_dir = default_outputs_dir(self.cfg)
        self.outputs_dir = Path(outputs_dir)
        self.outputs_dir.mkdir(parents=True, exist_ok=True)

    def build_report_table(
        self,
        dataset: Dataset,
        columns: Optional[Iterable[str]] = None,
    ) -> pd.DataFrame:
        """
        Una riga di statistiche per colonna.

        columns=None usa tutte le colonne numeriche; nomi sconosciuti vengono
        ignorati. Non scrive su disco.
        """
        if columns is None:
            selected = dataset.numeric_columns()
        else:
            selected = [c for c in columns if dataset.get_column_index(c) != -1]

        records = [StatisticsEngine.from_dataset(dataset, name).summary().to_dict() for name in selected]
        return pd.DataFrame.from_records(records, columns=REPORT_COLUMNS)

    def _save_csv(self, table: pd.DataFrame, path: Path) -> Path:
        table.to_csv(path, index=False, encoding="utf-8")
        log.info("Report CSV salvato: %s", path)
        return path

    @staticmethod
    def _to_markdown_simple(table: pd.DataFrame, decimals: int) -> str:
        def cell(v) -> str:
            if isinstance(v, float):
                return f"{v:.{decimals}f}"
            return str(v)

        cols = list(table.columns)
        header = "|" + "|".join(str(c) for c in cols) + "|\n"
        align = "|" + "|".join("---" for _ in cols) + "|\n"
        rows = ["|" + "|".join(cell(v) for v in row) + "|" for row in table.itertuples(index=False)]
        return header + align + "\n".join(rows) + "\n"

    def _save_md(self, table: pd.DataFrame, path: Path, title: str) -> Path:
        content = f"# {title}\n\nGenerato il {datetime.now():%Y-%m-%d %H:%M:%S}\n\n"
        content += self._to_markdown_simple(table, int(self.cfg["report_decimals"]))
        path.write_text(content, encoding="utf-8")
        log.info("Report Markdown salvato: %s", path)
        return path

    def _save_html(self, table: pd.DataFrame, path: Path, title: str) -> Path:
        page = f"""<!DOCTYPE html>
<html><head><meta charset="UTF-8"><title>{html.escape(title)}</title>
<style>body{{font-family:Segoe UI,Arial,sans-serif;margin:20px;}} table{{border-collapse:collapse;width:100%;}}
th,td{{border:1px solid #ddd;padding:6px;}} th{{background:#f4f4f4;}}</style></head>
<body>
<h1>{html.escape(title)}</h1>
<p>Generato il {datetime.now():%Y-%m-%d %H:%M:%S}</p>
{table.to_html(index=False)}
</body></html>"""
        path.write_text(page, encoding="utf-8")
        log.info("Report HTML salvato: %s", path)
        return path

    def generate_report(
        self,
        dataset: Dataset,
        columns: Optional[Iterable[str]] = None,
        formats: Union[str, ReportFormats] = "csv",
        base_name: Optional[str] = None,
    ) -> Dict[str, Optional[Path]]:
        """
        Costruisce la tabella e salva i formati richiesti in outputs/.
        Ritorna {'csv': Path|None, 'md': Path|None, 'html': Path|None}.
        """
        fmt = ReportFormats.from_token(formats) if isinstance(formats, str) else formats

        table = self.build_report_table(dataset, columns)
        base = (base_name or "report") + f"_{datetime.now():%Y%m%d_%H%M%S}"
        title = "Report statistico"

        out: Dict[str, Optional[Path]] = {"csv": None, "md": None, "html": None}
        if fmt.csv:
            out["csv"] = self._save_csv(table, self.outputs_dir / f"{base}.csv")
        if fmt.md:
            out["md"] = self._save_md(table, self.outputs_dir / f"{base}.md", title)
        if fmt.html:
            out["html"] = self._save_html(table, self.outputs_dir / f"{base}.html", title)

        log.info("Report generato. Formati: %s", ", ".join(k for k, v in out.items() if v))
        return out
