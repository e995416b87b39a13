"""
Configuración de fixtures para pytest.
"""
import csv
import io
from pathlib import Path
from typing import AsyncGenerator, Callable

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from inventory_sync.application.services.record_mapper import header_row
from inventory_sync.infrastructure.database.session import StorageCredentials, connect, disconnect
from inventory_sync.infrastructure.repositories.inventory_repository import InventoryRepository


HEADER_LINE = ",".join(header_row())


@pytest.fixture
def sqlite_credentials(tmp_path: Path) -> StorageCredentials:
    """Credenciales hacia una base SQLite en archivo (una por test)."""
    return StorageCredentials(
        username="",
        password="",
        url=f"sqlite+aiosqlite:///{tmp_path / 'inventory.db'}",
    )


@pytest.fixture(scope="function")
async def engine(sqlite_credentials: StorageCredentials) -> AsyncGenerator[AsyncEngine, None]:
    """
    Engine conectado a la base de prueba.
    Se usa un archivo (no :memory:) para que los inserts concurrentes
    compartan la misma base desde distintas conexiones.
    """
    engine = await connect(sqlite_credentials)
    yield engine
    await disconnect(engine)


@pytest.fixture
def repository(engine: AsyncEngine) -> InventoryRepository:
    return InventoryRepository(engine)


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """
    Escribe un CSV de prueba con la cabecera estándar.

    Uso:
        path = write_csv("a.csv", [csv_line({"Name": "Mug", "Quantity": "3"})])
    """
    def _write(name: str, lines: list[str], header: str = HEADER_LINE) -> Path:
        path = tmp_path / name
        content = "\n".join([header, *lines]) + "\n"
        path.write_text(content, encoding="utf-8")
        return path

    return _write


def _csv_line(values: dict[str, str]) -> str:
    """Serializa una fila (etiqueta -> texto) respetando las comillas CSV."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="")
    writer.writerow([values.get(label, "") for label in header_row()])
    return buffer.getvalue()


@pytest.fixture
def csv_line() -> Callable[[dict[str, str]], str]:
    return _csv_line
