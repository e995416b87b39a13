"""
Configuración de base de datos.

Importa el modelo para que se registre con Base
antes de crear la tabla.
"""
from inventory_sync.infrastructure.database.models import InventoryModel
