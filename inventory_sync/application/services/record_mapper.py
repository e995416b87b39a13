"""
Mapeo fijo entre etiquetas de columna CSV y campos de InventoryRecord.

La tabla COLUMN_MAPPINGS es la única fuente de verdad del esquema CSV:
se usa igual en import y export para que los nombres de columna
sobrevivan el round trip. No hay configuración ni descubrimiento dinámico
de columnas.

Este módulo no realiza I/O ni levanta errores: valores inválidos
(p.ej. cantidad no numérica) pasan como texto opaco.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional

from inventory_sync.domain.entities.inventory_record import InventoryRecord


_RECORD_DEFAULTS: dict[str, Any] = {
    f.name: f.default for f in fields(InventoryRecord) if f.name != "item_name"
}
_RECORD_DEFAULTS["item_name"] = None


@dataclass(frozen=True)
class ColumnMapping:
    """
    Define el mapeo de una columna CSV a un campo del registro.

    - csv_label: etiqueta de la columna en la cabecera
    - import_field: campo que se llena al importar
    - export_field: campo que se emite al exportar (por defecto el mismo)
    """

    csv_label: str
    import_field: str
    export_field: Optional[str] = None

    @property
    def output_field(self) -> str:
        return self.export_field or self.import_field

    @property
    def default(self) -> Any:
        return _RECORD_DEFAULTS[self.import_field]


# Orden exacto del layout de LightSpeed (S-Series).
COLUMN_MAPPINGS: tuple[ColumnMapping, ...] = (
    ColumnMapping("Item UUID", "item_uuid"),
    ColumnMapping("Name", "item_name"),
    ColumnMapping("SKU (Do Not Edit)", "sku"),
    ColumnMapping("Option1 Name (Do Not Edit)", "option_name"),
    ColumnMapping("Option1 Value (Do Not Edit)", "option_value"),
    ColumnMapping("Discountable", "discountable"),
    ColumnMapping("UPC", "upc"),
    ColumnMapping("Taxable", "taxable"),
    ColumnMapping("Department", "department"),
    ColumnMapping("Category", "category"),
    ColumnMapping("Supplier", "supplier"),
    ColumnMapping("Supplier Code", "supplier_code"),
    ColumnMapping("Price Type", "price_type"),
    ColumnMapping("Track Inventory", "track_inventory"),
    ColumnMapping("Register Status", "register_status"),
    ColumnMapping("Price", "price"),
    # Entra como cantidad original; sale la cantidad actualizada.
    ColumnMapping("Quantity", "original_qty", export_field="updated_qty"),
    ColumnMapping("Cost", "cost"),
)


def header_row() -> list[str]:
    """Etiquetas de cabecera en el orden del layout."""
    return [m.csv_label for m in COLUMN_MAPPINGS]


def to_record(row: Mapping[str, Optional[str]]) -> InventoryRecord:
    """
    Mapea una fila CSV (etiqueta -> texto) a un InventoryRecord.

    Reglas:
    - Columna ausente o vacía: se usa el default declarado del campo
    - Cualquier otro valor se guarda tal cual (sin validar enums/booleanos)
    - "Quantity" llena original_qty; updated_qty arranca en su default
    """
    values: dict[str, Any] = {}
    for m in COLUMN_MAPPINGS:
        raw = row.get(m.csv_label)
        values[m.import_field] = raw if raw else m.default
    return InventoryRecord(**values)


def to_row(record: InventoryRecord) -> dict[str, str]:
    """
    Mapea un InventoryRecord a una fila CSV (etiqueta -> texto).

    Excluye original_qty (inmutable) y emite updated_qty bajo "Quantity".
    """
    row: dict[str, str] = {}
    for m in COLUMN_MAPPINGS:
        value = getattr(record, m.output_field)
        row[m.csv_label] = "" if value is None else str(value)
    return row
