"""
Registro de inventario (una línea del catálogo).

Los campos de negocio se mantienen como texto tal como vienen en el CSV
(precios, costos, flags "true"/"false"), evitando conversiones con pérdida.
Cualquier interpretación numérica o booleana pertenece a una capa superior.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Optional


@dataclass(frozen=True)
class InventoryRecord:
    """
    Representación canónica en memoria de un item del catálogo.
    
    - item_uuid / sku: asignados por LightSpeed. None para items nuevos,
      únicos cuando existen.
    - item_name: obligatorio; puede repetirse entre variantes
      (option_name / option_value las diferencian).
    - original_qty: cantidad al momento del import, no cambia después.
    - updated_qty: cantidad que procesos externos (POS) modifican entre
      import y export; es la que sale en el export.
    """

    item_name: Optional[str]
    item_uuid: Optional[str] = None
    sku: Optional[str] = None
    option_name: str = ""
    option_value: str = ""
    discountable: str = "true"
    upc: str = ""
    taxable: str = "true"
    department: str = "general"
    category: str = "general"
    supplier: str = ""
    supplier_code: str = ""
    price_type: str = "system"  # 'open' o 'system'
    track_inventory: str = "true"
    register_status: str = "active"  # 'active' o 'inactive'
    price: str = "0"
    original_qty: str = ""
    updated_qty: int = 0
    cost: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convierte el registro a diccionario (atributos Python)."""
        return asdict(self)

    def identity(self) -> dict[str, Any]:
        """Campos que identifican el registro en mensajes de error."""
        return {
            "item_uuid": self.item_uuid,
            "sku": self.sku,
            "item_name": self.item_name,
            "option_name": self.option_name,
            "option_value": self.option_value,
        }
