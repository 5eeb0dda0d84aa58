from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from .logger import LogManager

log = LogManager("reader").get_logger()

QUOTE = '"'


class SourceNotFoundError(FileNotFoundError):
    """Il file sorgente non esiste, non è un file regolare o non è leggibile."""


class SourceReadError(OSError):
    """Errore di I/O (o di decodifica) durante la lettura del file sorgente."""


def parse_line(line: str, delimiter: str = ",") -> List[str]:
    """
    Divide una riga nei suoi campi, gestendo le virgolette.

    - `""` produce un singolo `"` letterale (anche fuori dalle virgolette);
    - ogni altra `"` inverte lo stato "dentro le virgolette";
    - il delimitatore separa i campi solo fuori dalle virgolette;
    - ogni campo viene ripulito dagli spazi iniziali/finali.

    Una virgoletta non chiusa a fine riga non è un errore. Il numero di campi
    è sempre pari ai delimitatori "attivi" + 1: una riga vuota dà `[""]`.
    """
    if len(delimiter) != 1:
        raise ValueError(f"Il delimitatore deve essere un singolo carattere: {delimiter!r}")

    fields: List[str] = []
    buf: List[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        c = line[i]
        if c == QUOTE:
            if i + 1 < n and line[i + 1] == QUOTE:
                buf.append(QUOTE)
                i += 1
            else:
                in_quotes = not in_quotes
        elif c == delimiter and not in_quotes:
            fields.append("".join(buf).strip())
            buf = []
        else:
            buf.append(c)
        i += 1

    fields.append("".join(buf).strip())
    return fields


def detect_encoding(path: Union[str, Path]) -> str:
    """Rileva l'encoding in base al BOM (Byte Order Mark); default utf-8."""
    with open(path, "rb") as f:
        start = f.read(4)

    if start.startswith(b"\xff\xfe"):
        return "utf-16"
    if start.startswith(b"\xfe\xff"):
        return "utf-16-be"
    if start.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"
    return "utf-8"


class CsvReader:
    """Legge un file delimitato riga per riga e restituisce liste di campi."""

    def __init__(
        self,
        file_path: Union[str, Path],
        delimiter: str = ",",
        encoding: Optional[str] = None,
    ) -> None:
        if len(delimiter) != 1:
            raise ValueError(f"Il delimitatore deve essere un singolo carattere: {delimiter!r}")
        self.path = Path(file_path)
        self.delimiter = delimiter
        self.encoding = encoding

    def _check_source(self) -> None:
        if not self.path.is_file():
            msg = f"File non trovato: {self.path}"
            log.error(msg)
            raise SourceNotFoundError(msg)

    def read_csv(self) -> List[List[str]]:
        """
        Legge l'intero file: una riga di campi per ogni riga di testo.

        Tutto-o-niente: in caso di errore viene sollevata un'eccezione e non
        viene restituito alcun risultato parziale.
        """
        self._check_source()

        rows: List[List[str]] = []
        try:
            encoding = self.encoding or detect_encoding(self.path)
            with open(self.path, "r", encoding=encoding) as f:
                for line in f:
                    rows.append(parse_line(line.rstrip("\r\n"), self.delimiter))
        except (FileNotFoundError, PermissionError) as e:
            msg = f"File non leggibile: {self.path} ({e})"
            log.error(msg)
            raise SourceNotFoundError(msg) from e
        except UnicodeDecodeError as e:
            log.error("Errore di decodifica in %s: %s", self.path.name, e, exc_info=True)
            raise SourceReadError(f"Errore di decodifica in {self.path}: {e}") from e
        except OSError as e:
            log.error("Errore in lettura CSV: %s", e, exc_info=True)
            raise SourceReadError(f"Errore in lettura di {self.path}: {e}") from e

        log.info("Lette %d righe da %s (delimiter=%r)", len(rows), self.path.name, self.delimiter)
        return rows

    def read_csv_skip_header(self) -> List[List[str]]:
        """Come read_csv(), senza la prima riga (header)."""
        return self.read_csv()[1:]

    def get_header(self) -> List[str]:
        """Prima riga del file, oppure lista vuota se il file è vuoto."""
        rows = self.read_csv()
        return rows[0] if rows else []
