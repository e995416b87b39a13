"""
Repositorio de la tabla de inventario.

Operaciones que necesita la transferencia:
- reset_schema: drop + create de la tabla (borra todo el contenido)
- insert: inserta un registro en su propia transacción
- read_all: lee todos los registros en orden de id
- replace_all_atomically: staging + rename, sin estados intermedios visibles
"""
from __future__ import annotations

from typing import Iterable

from loguru import logger
from sqlalchemy import MetaData, Table, func, insert, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from inventory_sync.domain.entities.inventory_record import InventoryRecord
from inventory_sync.infrastructure.database.models import InventoryModel, INVENTORY_TABLE_NAME
from inventory_sync.shared.exceptions.sync import StorageException


STAGING_TABLE_NAME = f"{INVENTORY_TABLE_NAME}_staging"


def _describe(record: InventoryRecord) -> str:
    return f"item '{record.item_name}' (sku={record.sku}, uuid={record.item_uuid})"


def _require_name(record: InventoryRecord) -> None:
    if not record.item_name:
        raise StorageException(
            f"No se puede insertar {_describe(record)}: itemName es obligatorio",
            record=record.identity(),
        )


def _column_values(record: InventoryRecord) -> dict:
    """Atributos Python -> nombres de columna (itemUUID, updatedQty, ...)."""
    attrs = InventoryModel.__mapper__.column_attrs
    return {attrs[name].columns[0].key: value for name, value in record.to_dict().items()}


def _to_record(model: InventoryModel) -> InventoryRecord:
    return InventoryRecord(
        item_uuid=model.item_uuid,
        item_name=model.item_name,
        sku=model.sku,
        option_name=model.option_name,
        option_value=model.option_value,
        discountable=model.discountable,
        upc=model.upc,
        taxable=model.taxable,
        department=model.department,
        category=model.category,
        supplier=model.supplier,
        supplier_code=model.supplier_code,
        price_type=model.price_type,
        track_inventory=model.track_inventory,
        register_status=model.register_status,
        price=model.price,
        original_qty=model.original_qty,
        updated_qty=model.updated_qty,
        cost=model.cost,
    )


class InventoryRepository:
    """
    Gestiona la tabla "Inventory" sobre un AsyncEngine ya conectado.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._table: Table = InventoryModel.__table__
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False
        )

    async def reset_schema(self) -> None:
        """
        Crea la tabla, borrando cualquier tabla previa (y su contenido).
        """
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(self._table.drop, checkfirst=True)
                await conn.run_sync(self._table.create)
        except SQLAlchemyError as e:
            raise StorageException(f"No se pudo recrear la tabla {INVENTORY_TABLE_NAME}: {e}") from e
        logger.info(f"Tabla {INVENTORY_TABLE_NAME} recreada (contenido previo eliminado)")

    async def insert(self, record: InventoryRecord) -> None:
        """
        Inserta un registro en su propia sesión/transacción.

        Raises:
            StorageException: violación de unicidad (itemUUID, sku), itemName
                vacío u otra falla de escritura
        """
        _require_name(record)
        try:
            async with self._session_factory() as session:
                session.add(InventoryModel(**record.to_dict()))
                await session.commit()
        except IntegrityError as e:
            raise StorageException(
                f"Violación de restricción al insertar {_describe(record)}: {e.orig}",
                record=record.identity(),
            ) from e
        except SQLAlchemyError as e:
            raise StorageException(
                f"Error al insertar {_describe(record)}: {e}",
                record=record.identity(),
            ) from e

    async def read_all(self) -> list[InventoryRecord]:
        """
        Lee todos los registros en orden de id (estable dentro de una corrida).
        """
        query = select(InventoryModel).order_by(InventoryModel.id)
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                models = result.scalars().all()
        except SQLAlchemyError as e:
            raise StorageException(f"No se pudo leer la tabla {INVENTORY_TABLE_NAME}: {e}") from e
        return [_to_record(m) for m in models]

    async def count(self) -> int:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(func.count()).select_from(self._table))
                return int(result.scalar_one())
        except SQLAlchemyError as e:
            raise StorageException(f"No se pudo contar la tabla {INVENTORY_TABLE_NAME}: {e}") from e

    async def replace_all_atomically(self, records: Iterable[InventoryRecord]) -> int:
        """
        Reemplaza el contenido de la tabla sin dejar estados parciales.

        1. Crea una tabla staging con el mismo esquema
        2. Inserta todos los registros en una sola transacción
        3. Drop de la tabla viva + rename de staging, en otra transacción

        Si falla el paso 2 la tabla viva queda intacta y staging se elimina.
        """
        staging = self._table.to_metadata(MetaData(), name=STAGING_TABLE_NAME)

        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(staging.drop, checkfirst=True)
                await conn.run_sync(staging.create)
        except SQLAlchemyError as e:
            raise StorageException(f"No se pudo crear la tabla {STAGING_TABLE_NAME}: {e}") from e

        inserted = 0
        try:
            async with self._engine.begin() as conn:
                for record in records:
                    await self._insert_into(conn, staging, record)
                    inserted += 1
        except Exception:
            await self._drop_quietly(staging)
            raise

        try:
            async with self._engine.begin() as conn:
                preparer = conn.dialect.identifier_preparer
                await conn.run_sync(self._table.drop, checkfirst=True)
                await conn.execute(
                    text(
                        f"ALTER TABLE {preparer.format_table(staging)} "
                        f"RENAME TO {preparer.quote(INVENTORY_TABLE_NAME)}"
                    )
                )
        except SQLAlchemyError as e:
            await self._drop_quietly(staging)
            raise StorageException(f"No se pudo intercambiar {STAGING_TABLE_NAME} -> {INVENTORY_TABLE_NAME}: {e}") from e

        logger.info(f"Tabla {INVENTORY_TABLE_NAME} reemplazada atómicamente ({inserted} registros)")
        return inserted

    async def _insert_into(self, conn, table: Table, record: InventoryRecord) -> None:
        _require_name(record)
        try:
            await conn.execute(insert(table).values(**_column_values(record)))
        except IntegrityError as e:
            raise StorageException(
                f"Violación de restricción al insertar {_describe(record)}: {e.orig}",
                record=record.identity(),
            ) from e
        except SQLAlchemyError as e:
            raise StorageException(
                f"Error al insertar {_describe(record)}: {e}",
                record=record.identity(),
            ) from e

    async def _drop_quietly(self, table: Table) -> None:
        # Se relanza el error original; una falla aquí solo se registra.
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(table.drop, checkfirst=True)
        except SQLAlchemyError as e:
            logger.warning(f"No se pudo eliminar {table.name}: {e}")
