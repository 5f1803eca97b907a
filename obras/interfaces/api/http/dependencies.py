"""
===============================================================================
TARJETA CRC: dependencies.py (Dependencias y helpers comunes)
===============================================================================

Responsabilidades:
  - Lectura de UploadFile con límite duro (anti OOM): se leen como máximo
    max_bytes + 1 bytes; el caso de uso decide PAYLOAD_TOO_LARGE.
  - Sanitizar el nombre de archivo original.
  - Convertir un UploadFile en CaseAttachment.

Colaboradores:
  - application.usecases.cases.CaseAttachment
  - fastapi.UploadFile
===============================================================================
"""

from __future__ import annotations

import os

from fastapi import UploadFile

from ....application.usecases.cases import CaseAttachment

_CHUNK_SIZE = 1024 * 1024  # 1 MiB


def sanitize_filename(filename: str | None) -> str:
    """Nos quedamos con el basename (sin directorios del cliente)."""
    if not filename:
        return "upload.pdf"
    return os.path.basename(filename.replace("\\", "/")) or "upload.pdf"


async def read_upload_bytes(file: UploadFile, *, max_bytes: int) -> tuple[bytes, int]:
    """
    Lee un UploadFile por chunks sin pasar de max_bytes + 1.

    Devuelve (contenido, tamaño_observado). Si tamaño_observado > max_bytes el
    archivo excede el límite (el contenido queda truncado y no se usa).
    """
    data = bytearray()
    while True:
        piece = await file.read(_CHUNK_SIZE)
        if not piece:
            break
        data.extend(piece)
        if len(data) > max_bytes:
            return bytes(data[: max_bytes + 1]), len(data)
    return bytes(data), len(data)


async def to_case_attachment(
    file: UploadFile | None, *, max_bytes: int
) -> CaseAttachment | None:
    if file is None or not file.filename:
        return None
    content, size = await read_upload_bytes(file, max_bytes=max_bytes)
    return CaseAttachment(
        content=content,
        mime_type=file.content_type,
        filename=sanitize_filename(file.filename),
        size_bytes=size,
    )
