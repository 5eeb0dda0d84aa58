from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from .logger import LogManager

log = LogManager("config").get_logger()

DEFAULTS: Dict[str, Any] = {
    "delimiter": ",",
    "encoding": None,  # None = rilevamento BOM
    "report_decimals": 2,
    "open_mode": "html",  # html | none
    "outputs_dir": "outputs",
    "logs_dir": "logs",
}


def project_root() -> Path:
    return Path(__file__).resolve().parents[1]


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Carica config.json (root del progetto o path esplicito) sopra i default.

    Le chiavi sconosciute vengono ignorate; un file non valido produce un
    warning e si usano i default.
    """
    cfg = dict(DEFAULTS)
    cfg_path = path if path is not None else project_root() / "config.json"
    if not cfg_path.exists():
        return cfg

    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        log.warning("Config non valida (%s). Uso defaults.", e)
        return cfg

    if not isinstance(data, dict):
        log.warning("Config non valida (atteso un oggetto JSON). Uso defaults.")
        return cfg

    for key in DEFAULTS:
        if key in data:
            cfg[key] = data[key]

    delimiter = cfg["delimiter"]
    if not isinstance(delimiter, str) or len(delimiter) != 1:
        log.warning("delimiter '%s' non valido. Fallback a ','.", delimiter)
        cfg["delimiter"] = ","

    mode = str(cfg["open_mode"]).strip().lower()
    if mode not in {"html", "none"}:
        log.warning("open_mode '%s' non valido. Fallback a 'html'.", cfg["open_mode"])
        mode = "html"
    cfg["open_mode"] = mode

    log.info("Config caricata: %s", cfg_path)
    return cfg


def outputs_dir(cfg: Optional[Dict[str, Any]] = None) -> Path:
    """Directory di output (relativa alla root del progetto se non assoluta)."""
    cfg = cfg if cfg is not None else load_config()
    out = Path(cfg.get("outputs_dir") or DEFAULTS["outputs_dir"])
    if not out.is_absolute():
        out = project_root() / out
    out.mkdir(parents=True, exist_ok=True)
    return out


def logs_dir(cfg: Optional[Dict[str, Any]] = None) -> Path:
    cfg = cfg if cfg is not None else load_config()
    out = Path(cfg.get("logs_dir") or DEFAULTS["logs_dir"])
    if not out.is_absolute():
        out = project_root() / out
    return out
