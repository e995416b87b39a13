"""
CLI: importa/exporta el CSV de inventario de LightSpeed (S-Series).

Uso:
  inventory-csv -i -f <archivo.csv> -u <usuario PostgreSQL>   (borra los datos existentes)
  inventory-csv -e -f <archivo.csv> -u <usuario PostgreSQL>

La contraseña se pide por consola (sin eco) salvo que DATABASE_PASSWORD
esté definida en el entorno o en el .env.

Códigos de salida: 0 si la transferencia terminó, 1 ante cualquier error.
"""

from __future__ import annotations

import argparse
import asyncio
import getpass
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from loguru import logger

from inventory_sync.application.use_cases.inventory_sync_use_cases import (
    TransferMode,
    TransferRequest,
    run_transfer,
)
from inventory_sync.core.config import Settings
from inventory_sync.core.logging import setup_logging
from inventory_sync.infrastructure.database.session import StorageCredentials
from inventory_sync.shared.exceptions.base import AppException


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inventory-csv",
        description="Importa o exporta el inventario entre un CSV y la tabla Inventory.",
    )
    parser.add_argument("-i", "--import", dest="do_import", action="store_true", help="Importa el CSV (borra la tabla).")
    parser.add_argument("-e", "--export", dest="do_export", action="store_true", help="Exporta la tabla al CSV.")
    parser.add_argument("-f", "--file", dest="csv_file", default="", help="Archivo CSV de origen/destino.")
    parser.add_argument("-u", "--user", dest="user", default="", help="Usuario de PostgreSQL.")
    parser.add_argument("--env-file", default=".env", help="Archivo .env opcional (default: .env).")
    return parser


def _validate_args(args: argparse.Namespace, config: Settings) -> Optional[str]:
    if args.do_import and args.do_export:
        return "No se puede importar y exportar al mismo tiempo"
    if not args.do_import and not args.do_export:
        return "Debe indicar import (-i) o export (-e)"
    if not args.csv_file:
        return "Debe indicar un archivo CSV (-f)"
    if not (args.user or config.DATABASE_USER or config.uses_url_override):
        return "Debe indicar un usuario de PostgreSQL (-u)"
    return None


def _resolve_password(user: str, config: Settings) -> str:
    if config.DATABASE_PASSWORD or config.uses_url_override:
        return config.DATABASE_PASSWORD
    return getpass.getpass(f"Contraseña de PostgreSQL para el usuario {user}: ")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv(args.env_file, override=False)
    config = Settings()
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)

    error = _validate_args(args, config)
    if error:
        logger.error(error)
        return 1

    user = args.user or config.DATABASE_USER
    password = _resolve_password(user, config)
    if not password and not config.uses_url_override:
        logger.error("Debe indicar una contraseña de PostgreSQL")
        return 1

    request = TransferRequest(
        mode=TransferMode.IMPORT if args.do_import else TransferMode.EXPORT,
        path=Path(args.csv_file),
    )
    credentials = StorageCredentials.from_settings(config, username=user, password=password)

    try:
        count = asyncio.run(run_transfer(request, credentials, config))
    except AppException as e:
        logger.error(f"[{e.error_code}] {e.message}")
        return e.exit_code

    logger.success(f"{request.mode.value.capitalize()} OK: {count} registros")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
