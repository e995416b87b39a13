"""
Excepciones tipadas del sistema.
"""
from inventory_sync.shared.exceptions.base import AppException
from inventory_sync.shared.exceptions.sync import (
    StorageConnectionException,
    CsvParseException,
    StorageException,
    FileAccessException,
)

__all__ = [
    "AppException",
    "StorageConnectionException",
    "CsvParseException",
    "StorageException",
    "FileAccessException",
]
