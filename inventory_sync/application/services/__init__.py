"""
Servicios de aplicacion.

Contiene la logica reutilizable que no pertenece
a un caso de uso especifico.
"""
from inventory_sync.application.services.record_mapper import (
    COLUMN_MAPPINGS,
    ColumnMapping,
    header_row,
    to_record,
    to_row,
)

__all__ = [
    "COLUMN_MAPPINGS",
    "ColumnMapping",
    "header_row",
    "to_record",
    "to_row",
]
