"""
Lectura y escritura de archivos CSV delimitados por coma.

- Lectura en streaming con la primera fila como cabecera.
- Comillas/escapes según las convenciones habituales (comas, comillas
  dobladas y saltos de línea dentro de campos entre comillas).
- Escritura atómica: archivo temporal en el mismo directorio + os.replace.
"""

from __future__ import annotations

import csv
import os
import secrets
from pathlib import Path
from typing import Iterable, Optional, Sequence

from loguru import logger

from inventory_sync.shared.exceptions.sync import CsvParseException, FileAccessException


def read_csv_rows(
    path: str | Path,
    *,
    encoding: str = "utf-8",
    expected_labels: Optional[Sequence[str]] = None,
) -> list[dict[str, str]]:
    """
    Parsea el archivo completo a una lista de filas (etiqueta -> texto).

    Filas con más o menos celdas que la cabecera se registran como warning
    y se conservan: las celdas faltantes quedan vacías y las sobrantes se
    descartan. Las líneas completamente vacías se ignoran.

    Raises:
        FileAccessException: si el archivo no se puede abrir/leer
        CsvParseException: si no hay cabecera o el texto está mal formado
    """
    path_str = str(path)
    # utf-8-sig tolera el BOM que agregan algunas planillas.
    if encoding.lower().replace("_", "-") == "utf-8":
        encoding = "utf-8-sig"

    rows: list[dict[str, str]] = []
    try:
        with open(path, "r", encoding=encoding, newline="") as fh:
            reader = csv.reader(fh, delimiter=",", strict=True)
            try:
                header = next(reader, None)
                if not header or not any(label.strip() for label in header):
                    raise CsvParseException(path_str, "falta la fila de cabecera", line=1)
                _check_header(path_str, header, expected_labels)

                for cells in reader:
                    if not cells:
                        continue
                    if len(cells) != len(header):
                        logger.warning(
                            f"{path_str} línea {reader.line_num}: {len(cells)} celdas, "
                            f"se esperaban {len(header)}. Se completan con valores por defecto."
                        )
                    padded = list(cells[: len(header)]) + [""] * (len(header) - len(cells))
                    rows.append(dict(zip(header, padded)))
            except csv.Error as e:
                raise CsvParseException(path_str, str(e), line=reader.line_num) from e
    except UnicodeDecodeError as e:
        raise CsvParseException(path_str, f"codificación inválida ({e.reason})") from e
    except OSError as e:
        raise FileAccessException(path_str, e.strerror or str(e)) from e

    logger.info(f"Parsing completo: {len(rows)} registros en {path_str}")
    return rows


def _check_header(path: str, header: list[str], expected_labels: Optional[Sequence[str]]) -> None:
    seen: set[str] = set()
    for label in header:
        if label in seen:
            raise CsvParseException(path, f"etiqueta de cabecera duplicada '{label}'", line=1)
        seen.add(label)

    if expected_labels is None:
        return
    missing = [label for label in expected_labels if label not in seen]
    if missing:
        logger.warning(f"{path}: columnas ausentes (se usarán defaults): {missing}")
    known = set(expected_labels)
    unknown = [label for label in header if label not in known]
    if unknown:
        logger.debug(f"{path}: columnas no reconocidas ignoradas: {unknown}")


def write_csv_rows(
    path: str | Path,
    header: Sequence[str],
    rows: Iterable[dict[str, str]],
    *,
    encoding: str = "utf-8",
) -> int:
    """
    Serializa cabecera + filas y reemplaza el destino de forma atómica.

    Se citan solo los campos que contienen coma, comilla, CR o LF; el
    terminador CRLF hace que el writer cite también un CR suelto.

    Returns:
        Cantidad de filas de datos escritas.

    Raises:
        FileAccessException: si el destino no se puede escribir
    """
    target = Path(path)
    tmp = target.with_name(f".{target.name}.tmp.{os.getpid()}.{secrets.token_hex(3)}")
    count = 0
    try:
        with open(tmp, "w", encoding=encoding, newline="") as fh:
            writer = csv.DictWriter(
                fh,
                fieldnames=list(header),
                delimiter=",",
                quoting=csv.QUOTE_MINIMAL,
                lineterminator="\r\n",
            )
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
                count += 1
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp, target)
    except (OSError, UnicodeError) as e:
        tmp.unlink(missing_ok=True)
        raise FileAccessException(str(target), getattr(e, "strerror", None) or str(e)) from e

    return count
