"""
===============================================================================
CRC CARD: infrastructure/storage/errors.py
===============================================================================

Componente:
  Errores tipados de Storage (disco local)

Responsabilidades:
  - Definir un lenguaje común de fallas del subsistema de almacenamiento.
  - Evitar que OSError se filtre a capas superiores sin contexto.

Colaboradores:
  - infrastructure/storage/local_file_storage.py
  - api/exception_handlers.py (StorageError -> 500 genérico)
===============================================================================
"""


class StorageError(Exception):
    """Base de errores del subsistema de Storage."""


class StorageConfigurationError(StorageError):
    """Configuración inválida (directorio inexistente y no creable, etc.)."""


class StorageNotFoundError(StorageError):
    """Archivo no encontrado."""

    def __init__(self, key: str):
        super().__init__(f"Archivo no encontrado en storage. key={key}")
        self.key = key


class InvalidStorageKeyError(StorageError):
    """Key con separadores de path o segmentos relativos (path traversal)."""

    def __init__(self, key: str):
        super().__init__(f"Nombre de archivo inválido. key={key!r}")
        self.key = key
