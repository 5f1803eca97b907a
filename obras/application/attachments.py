"""
===============================================================================
TARJETA CRC: application/attachments.py (File Intake)
===============================================================================

Clase:
  AttachmentIntake

Responsabilidades:
  - Aceptar un adjunto PDF subido por el cliente:
      * content-type normalizado debe ser application/pdf
      * tamaño <= max_bytes (2 MiB por defecto)
  - Generar un nombre de almacenamiento único, sin colisiones entre uploads
    concurrentes: archivo-<epoch_ms>-<hex aleatorio><ext>.
  - Persistir los bytes vía FileStoragePort.
  - Exponer la URL pública del adjunto, su existencia y el descarte best-effort.

Colaboradores:
  - domain.services.FileStoragePort
  - infrastructure.storage.errors.StorageError (exists / discard)
  - crosscutting.logger

Notas:
  - Devuelve resultados tipados (AttachmentErrorCode), igual que los use cases.
  - Fallas de storage al guardar NO se traducen acá: propagan como StorageError
    y la API responde 500 genérico (con log completo).
===============================================================================
"""

from __future__ import annotations

import os
import re
import secrets
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Final

from ..crosscutting.logger import logger
from ..domain.services import FileStoragePort
from ..infrastructure.storage.errors import StorageError, StorageNotFoundError

PDF_MIME: Final[str] = "application/pdf"
UPLOADS_PUBLIC_PATH: Final[str] = "/uploads/pdfs"
DEFAULT_MAX_BYTES: Final[int] = 2 * 1024 * 1024

_DEFAULT_EXTENSION: Final[str] = ".pdf"
_EXTENSION_RE = re.compile(r"^\.[a-z0-9]{1,10}$")

_MSG_MISSING: Final[str] = "Se requiere un archivo PDF (campo 'archivo')."
_MSG_NOT_PDF: Final[str] = "Solo se permiten archivos PDF."


class AttachmentErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNSUPPORTED_MEDIA = "UNSUPPORTED_MEDIA"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"


@dataclass(frozen=True)
class AttachmentError:
    code: AttachmentErrorCode
    message: str


@dataclass
class AttachmentResult:
    """
    Contrato:
      - Éxito: stored_name != None y error == None
      - Falla:  stored_name == None y error != None
    """

    stored_name: str | None = None
    error: AttachmentError | None = None


def normalize_mime_type(mime_type: str | None) -> str:
    """'Application/PDF; charset=binary' -> 'application/pdf'."""
    return (mime_type or "").split(";", 1)[0].strip().lower()


def format_size(size_bytes: int) -> str:
    if size_bytes % (1024 * 1024) == 0:
        return f"{size_bytes // (1024 * 1024)} MB"
    if size_bytes % 1024 == 0:
        return f"{size_bytes // 1024} KB"
    return f"{size_bytes} bytes"


def too_large_message(max_bytes: int) -> str:
    return f"El archivo excede el máximo permitido ({format_size(max_bytes)})."


class AttachmentIntake:
    """Valida y persiste adjuntos PDF."""

    def __init__(
        self,
        storage: FileStoragePort,
        *,
        max_bytes: int = DEFAULT_MAX_BYTES,
        clock_ms: Callable[[], int] | None = None,
    ) -> None:
        self._storage = storage
        self._max_bytes = max_bytes
        self._clock_ms = clock_ms or (lambda: int(time.time() * 1000))

    @property
    def max_bytes(self) -> int:
        return self._max_bytes

    def accept(
        self,
        content: bytes | None,
        mime_type: str | None,
        size_bytes: int | None = None,
        original_filename: str | None = None,
    ) -> AttachmentResult:
        if not content:
            return self._error(AttachmentErrorCode.VALIDATION_ERROR, _MSG_MISSING)

        if normalize_mime_type(mime_type) != PDF_MIME:
            return self._error(AttachmentErrorCode.UNSUPPORTED_MEDIA, _MSG_NOT_PDF)

        size = len(content) if size_bytes is None else size_bytes
        if size > self._max_bytes:
            return self._error(
                AttachmentErrorCode.PAYLOAD_TOO_LARGE,
                too_large_message(self._max_bytes),
            )

        stored_name = self._build_name(original_filename)
        self._storage.upload_file(stored_name, content, PDF_MIME)
        return AttachmentResult(stored_name=stored_name)

    @staticmethod
    def public_url(stored_name: str) -> str:
        return f"{UPLOADS_PUBLIC_PATH}/{stored_name}"

    def exists(self, stored_name: str | None) -> bool:
        if not stored_name:
            return False
        try:
            self._storage.resolve_path(stored_name)
        except StorageError:
            return False
        return True

    def discard(self, stored_name: str | None) -> bool:
        """Borrado best-effort: nunca falla hacia el caller."""
        if not stored_name:
            return False
        try:
            self._storage.delete_file(stored_name)
        except StorageNotFoundError:
            logger.warning(
                "Adjunto inexistente al descartar", extra={"key": stored_name}
            )
            return False
        except StorageError:
            logger.warning(
                "No se pudo descartar el adjunto",
                extra={"key": stored_name},
                exc_info=True,
            )
            return False
        return True

    # =========================================================================
    # Helpers
    # =========================================================================
    def _build_name(self, original_filename: str | None) -> str:
        ext = os.path.splitext(os.path.basename(original_filename or ""))[1].lower()
        if not _EXTENSION_RE.match(ext):
            ext = _DEFAULT_EXTENSION
        return f"archivo-{self._clock_ms()}-{secrets.token_hex(8)}{ext}"

    @staticmethod
    def _error(code: AttachmentErrorCode, message: str) -> AttachmentResult:
        return AttachmentResult(error=AttachmentError(code=code, message=message))
