"""
Casos de uso de la aplicacion.
"""
from inventory_sync.application.use_cases.inventory_sync_use_cases import (
    ImportStrategy,
    InventorySyncUseCases,
    TransferMode,
    TransferRequest,
    run_transfer,
)

__all__ = [
    "ImportStrategy",
    "InventorySyncUseCases",
    "TransferMode",
    "TransferRequest",
    "run_transfer",
]
