"""
Excepciones de la transferencia CSV <-> base de datos.

Todas son terminales para la corrida: no hay política de reintentos.
"""
from typing import Any, Optional

from inventory_sync.shared.exceptions.base import AppException


class StorageConnectionException(AppException):
    """No se pudo establecer la sesión con la base de datos."""
    
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="CONNECTION_ERROR",
            details=details
        )


class CsvParseException(AppException):
    """El archivo no es texto delimitado bien formado con fila de cabecera."""
    
    def __init__(self, path: str, reason: str, line: Optional[int] = None):
        location = f" (línea {line})" if line is not None else ""
        super().__init__(
            message=f"CSV inválido '{path}'{location}: {reason}",
            error_code="PARSE_ERROR",
            details={"path": path, "line": line, "reason": reason}
        )


class StorageException(AppException):
    """Falla al recrear el esquema, escribir o leer la tabla."""
    
    def __init__(self, message: str, record: Optional[dict[str, Any]] = None):
        details = {"record": record} if record else None
        super().__init__(
            message=message,
            error_code="STORAGE_ERROR",
            details=details
        )


class FileAccessException(AppException):
    """No se puede leer el archivo origen o escribir el destino."""
    
    def __init__(self, path: str, reason: str):
        super().__init__(
            message=f"No se pudo acceder al archivo '{path}': {reason}",
            error_code="IO_ERROR",
            details={"path": path}
        )
