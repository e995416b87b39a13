"""
Transferencia de inventario CSV <-> PostgreSQL (tabla "Inventory").

Se ejecuta como comando de una sola corrida: importa un CSV exportado desde
LightSpeed (S-Series) reemplazando el contenido de la tabla, o exporta la
tabla a un CSV con el mismo layout de columnas.

Objetivos de diseño:
- Esquema CSV fijo: una única tabla de etiquetas para ambas direcciones.
- Campos de negocio como texto opaco (precios, flags "true"/"false").
- Import destructivo (reemplazo total), con estrategia atómica opcional.
"""

__version__ = "1.0.0"
