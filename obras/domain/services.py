"""
===============================================================================
TARJETA CRC: domain/services.py
===============================================================================

Módulo:
    Puertos de servicios externos

Responsabilidades:
    - Definir el contrato de almacenamiento de adjuntos (FileStoragePort).

Colaboradores:
    - infrastructure/storage/local_file_storage.py (implementación en disco)
    - application/attachments.py (File Intake)
===============================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class FileStoragePort(Protocol):
    """Contrato de storage de archivos."""

    def upload_file(
        self, key: str, content: bytes, content_type: str | None
    ) -> None: ...

    def delete_file(self, key: str) -> None: ...

    def resolve_path(self, key: str) -> Path:
        """Ruta local legible del archivo (StorageNotFoundError si no existe)."""
        ...
