"""
Casos de uso de transferencia de inventario CSV <-> tabla "Inventory".

Diseño (resumen):
- Import: parsea el CSV completo en memoria, mapea cada fila a un
  InventoryRecord y reemplaza todo el contenido de la tabla
- Export: lee toda la tabla, mapea cada registro a una fila CSV,
  antepone la cabecera y escribe el archivo de forma atómica

Estrategias de reemplazo en el import:
- reset: drop + create de la tabla y un insert concurrente por registro.
  No es atómico: si un insert falla la tabla queda parcialmente poblada.
- swap: tabla staging + rename. Si algo falla la tabla previa queda intacta.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from loguru import logger

from inventory_sync.application.services import record_mapper
from inventory_sync.core.config import Settings, settings as default_settings
from inventory_sync.domain.entities.inventory_record import InventoryRecord
from inventory_sync.infrastructure.csv_files.csv_codec import read_csv_rows, write_csv_rows
from inventory_sync.infrastructure.database.session import StorageCredentials, connect, disconnect
from inventory_sync.infrastructure.repositories.inventory_repository import InventoryRepository
from inventory_sync.shared.exceptions.base import AppException
from inventory_sync.shared.exceptions.sync import StorageException


class ImportStrategy(str, Enum):
    """Estrategia para reemplazar el contenido de la tabla."""
    RESET = "reset"
    SWAP = "swap"


class TransferMode(str, Enum):
    """Dirección de la transferencia."""
    IMPORT = "import"
    EXPORT = "export"


@dataclass(frozen=True)
class TransferRequest:
    """Una corrida: exactamente un modo y un archivo."""

    mode: TransferMode
    path: Path


class InventorySyncUseCases:
    """
    Orquestador de import/export sobre un repositorio ya conectado.
    """

    def __init__(
        self,
        repository: InventoryRepository,
        *,
        strategy: ImportStrategy = ImportStrategy.RESET,
        concurrency: int = 5,
        encoding: str = "utf-8",
    ) -> None:
        self._repo = repository
        self._strategy = ImportStrategy(strategy)
        self._concurrency = max(1, concurrency)
        self._encoding = encoding

    async def import_csv(self, source_path: str | Path) -> int:
        """
        Importa el CSV reemplazando todo el contenido de la tabla.

        El archivo se parsea completo antes de tocar la tabla: un error de
        parsing o de lectura no produce ninguna mutación.

        Returns:
            Cantidad de registros escritos.
        """
        logger.info(f"Importando archivo CSV {source_path} en la base de datos")

        rows = read_csv_rows(
            source_path,
            encoding=self._encoding,
            expected_labels=record_mapper.header_row(),
        )
        records = [record_mapper.to_record(row) for row in rows]

        if self._strategy is ImportStrategy.SWAP:
            written = await self._repo.replace_all_atomically(records)
        else:
            await self._repo.reset_schema()
            written = await self._insert_concurrently(records)

        logger.info(f"Import completo: {written} registros")
        return written

    async def _insert_concurrently(self, records: list[InventoryRecord]) -> int:
        """
        Lanza un insert por registro y espera a que todos terminen.

        Los registros no dependen entre sí; la unicidad la valida la base
        al escribir. Se reporta el primer error después de la barrera.
        """
        semaphore = asyncio.Semaphore(self._concurrency)

        async def _insert(record: InventoryRecord) -> None:
            async with semaphore:
                await self._repo.insert(record)

        results = await asyncio.gather(
            *(_insert(r) for r in records),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.error(
                f"{len(failures)} de {len(records)} inserts fallaron; "
                f"la tabla quedó parcialmente poblada"
            )
            for failure in failures[1:]:
                logger.debug(f"Insert fallido: {failure}")
            first = failures[0]
            if isinstance(first, AppException):
                raise first
            raise StorageException(f"Error inesperado al insertar: {first}") from first

        return len(records)

    async def export_csv(self, destination_path: str | Path) -> int:
        """
        Exporta la tabla completa al CSV destino (sobrescribe si existe).

        No modifica la tabla.

        Returns:
            Cantidad de registros escritos (sin contar la cabecera).
        """
        logger.info(f"Exportando tabla a archivo CSV {destination_path}")

        records = await self._repo.read_all()
        written = write_csv_rows(
            destination_path,
            record_mapper.header_row(),
            (record_mapper.to_row(r) for r in records),
            encoding=self._encoding,
        )

        logger.info(f"Export completo: {written} registros")
        return written


async def run_transfer(
    request: TransferRequest,
    credentials: StorageCredentials,
    config: Optional[Settings] = None,
) -> int:
    """
    Punto de entrada de una corrida completa.

    Conecta (si falla, no hay ninguna mutación), ejecuta el import o el
    export y siempre cierra la conexión.

    Returns:
        Cantidad de registros transferidos.
    """
    config = config or default_settings
    engine = await connect(credentials, config)
    try:
        use_cases = InventorySyncUseCases(
            InventoryRepository(engine),
            strategy=ImportStrategy(config.IMPORT_STRATEGY),
            concurrency=config.IMPORT_CONCURRENCY,
            encoding=config.CSV_ENCODING,
        )
        if request.mode is TransferMode.IMPORT:
            return await use_cases.import_csv(request.path)
        return await use_cases.export_csv(request.path)
    finally:
        await disconnect(engine)
