"""Adapters de infraestructura: Storage (disco local)."""

from .errors import (
    InvalidStorageKeyError,
    StorageConfigurationError,
    StorageError,
    StorageNotFoundError,
)
from .local_file_storage import LocalFileStorageAdapter

__all__ = [
    "LocalFileStorageAdapter",
    "StorageError",
    "StorageConfigurationError",
    "StorageNotFoundError",
    "InvalidStorageKeyError",
]
