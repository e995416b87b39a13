"""
Entidades del dominio.
"""
from inventory_sync.domain.entities.inventory_record import InventoryRecord

__all__ = [
    "InventoryRecord",
]
