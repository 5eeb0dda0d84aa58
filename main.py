from __future__ import annotations

import sys

from tabstat.config import load_config, logs_dir
from tabstat.logger import LogManager
from tabstat_ui.main_app import TabStatApp


def main() -> None:
    """Avvia l'interfaccia TUI basata su Textual (percorso CSV opzionale come argomento)."""
    cfg = load_config()
    LogManager.configure(logs_dir=logs_dir(cfg))
    logger = LogManager("main").get_logger()
    initial_path = sys.argv[1] if len(sys.argv) > 1 else None
    try:
        TabStatApp(initial_path, config=cfg).run()
    except Exception as exc:
        logger.error("Errore critico nella TUI: %s", exc, exc_info=True)
        raise


if __name__ == "__main__":
    main()
