"""
===============================================================================
CRC CARD: infrastructure/storage/local_file_storage.py
===============================================================================

Clase:
  LocalFileStorageAdapter (Adapter)

Responsabilidades:
  - Implementar FileStoragePort sobre un directorio local (UPLOAD_DIR).
  - Escribir de forma atómica (archivo temporal + rename) para que nunca se
    sirva un PDF a medio escribir.
  - Rechazar keys con separadores o segmentos relativos (path traversal).
  - Mapear OSError -> StorageError.

Colaboradores:
  - domain.services.FileStoragePort (port)
  - infrastructure.storage.errors (errores tipados)
  - crosscutting.logger
===============================================================================
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from ...crosscutting.logger import logger
from ...domain.services import FileStoragePort
from .errors import (
    InvalidStorageKeyError,
    StorageConfigurationError,
    StorageError,
    StorageNotFoundError,
)


class LocalFileStorageAdapter(FileStoragePort):
    """
    Adapter de disco local.

    Implementa:
      - upload_file
      - delete_file
      - resolve_path
    """

    def __init__(self, base_dir: str | os.PathLike[str]) -> None:
        self._base_dir = Path(base_dir).resolve()
        try:
            self._base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageConfigurationError(
                f"No se pudo crear el directorio de uploads: {self._base_dir}"
            ) from exc

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    # =========================================================================
    # Helpers
    # =========================================================================
    def _path_for(self, key: str) -> Path:
        name = (key or "").strip()
        if (
            not name
            or name in {".", ".."}
            or "/" in name
            or "\\" in name
            or "\x00" in name
        ):
            raise InvalidStorageKeyError(key)
        return self._base_dir / name

    # =========================================================================
    # FileStoragePort
    # =========================================================================
    def upload_file(self, key: str, content: bytes, content_type: str | None) -> None:
        target = self._path_for(key)
        tmp_name: str | None = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self._base_dir, prefix=".upload-")
            with os.fdopen(fd, "wb") as fh:
                fh.write(content)
            os.replace(tmp_name, target)
            tmp_name = None
        except OSError as exc:
            logger.exception(
                "LocalFileStorageAdapter: upload_file failed",
                extra={"key": key, "size_bytes": len(content)},
            )
            raise StorageError(f"No se pudo guardar el archivo {key}: {exc}") from exc
        finally:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info(
            "Archivo almacenado",
            extra={
                "key": key,
                "size_bytes": len(content),
                "content_type": content_type,
            },
        )

    def delete_file(self, key: str) -> None:
        target = self._path_for(key)
        try:
            target.unlink()
        except FileNotFoundError as exc:
            raise StorageNotFoundError(key) from exc
        except OSError as exc:
            logger.exception(
                "LocalFileStorageAdapter: delete_file failed", extra={"key": key}
            )
            raise StorageError(f"No se pudo eliminar el archivo {key}: {exc}") from exc

    def resolve_path(self, key: str) -> Path:
        target = self._path_for(key)
        if not target.is_file():
            raise StorageNotFoundError(key)
        return target
