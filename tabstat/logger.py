from __future__ import annotations

import logging
from datetime import datetime
from logging import Logger
from pathlib import Path
from typing import Optional, Union

BASE_LOGGER = "tabstat"
CONSOLE_FMT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_FMT = "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(lineno)d | %(message)s"


def _is_console(handler: logging.Handler) -> bool:
    # FileHandler eredita da StreamHandler
    return isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)


class LogManager:
    """
    Logger gerarchici 'tabstat.<componente>'.

    Al primo utilizzo il logger base riceve un file UTF-8 giornaliero
    (logs/tabstat_YYYYMMDD.log accanto al package) e un handler console.
    La console mostra solo WARNING e superiori, così la TUI non viene
    sporcata dai messaggi INFO; il file riceve tutto da INFO in su.

    configure() permette di spostare la cartella dei log o cambiare il
    livello console; shutdown() chiude e rimuove gli handler.
    """

    _logs_dir: Optional[Path] = None
    _logfile_path: Optional[Path] = None
    _console_level: int = logging.WARNING

    def __init__(self, component: str = "app", level: int = logging.INFO) -> None:
        self.component = component.strip() or "app"
        self.level = level
        if self._logfile_path is None:
            self.configure()

    @staticmethod
    def _default_logs_dir() -> Path:
        # .../tabstat/logger.py -> <root>/logs
        return Path(__file__).resolve().parents[1] / "logs"

    @classmethod
    def configure(
        cls,
        logs_dir: Optional[Union[str, Path]] = None,
        console_level: Optional[int] = None,
    ) -> Path:
        """(Ri)configura gli handler del logger base e restituisce il file di log."""
        base = logging.getLogger(BASE_LOGGER)
        base.setLevel(logging.INFO)
        base.propagate = False

        target_dir = Path(logs_dir) if logs_dir is not None else (cls._logs_dir or cls._default_logs_dir())
        target_dir.mkdir(parents=True, exist_ok=True)
        logfile = target_dir / f"tabstat_{datetime.now():%Y%m%d}.log"

        if console_level is not None:
            cls._console_level = console_level

        for handler in list(base.handlers):
            stale_file = isinstance(handler, logging.FileHandler) and handler.baseFilename != str(logfile)
            if stale_file:
                base.removeHandler(handler)
                handler.close()

        if not any(isinstance(h, logging.FileHandler) for h in base.handlers):
            fh = logging.FileHandler(logfile, encoding="utf-8")
            fh.setLevel(logging.INFO)
            fh.setFormatter(logging.Formatter(FILE_FMT))
            base.addHandler(fh)

        consoles = [h for h in base.handlers if _is_console(h)]
        if not consoles:
            sh = logging.StreamHandler()
            sh.setFormatter(logging.Formatter(CONSOLE_FMT))
            base.addHandler(sh)
            consoles = [sh]
        for handler in consoles:
            handler.setLevel(cls._console_level)

        cls._logs_dir = target_dir
        cls._logfile_path = logfile
        base.info("Logger configurato. File: %s", logfile)
        return logfile

    @classmethod
    def shutdown(cls) -> None:
        base = logging.getLogger(BASE_LOGGER)
        for handler in list(base.handlers):
            base.removeHandler(handler)
            handler.close()
        cls._logfile_path = None

    def get_logger(self, level: Optional[int] = None) -> Logger:
        logger = logging.getLogger(BASE_LOGGER).getChild(self.component)
        logger.setLevel(level if level is not None else self.level)
        return logger

    @classmethod
    def logfile_path(cls) -> Optional[Path]:
        return cls._logfile_path
