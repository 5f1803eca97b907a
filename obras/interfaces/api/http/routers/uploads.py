"""
===============================================================================
TARJETA CRC: interfaces/api/http/routers/uploads.py
===============================================================================

Responsibilities:
    - POST /upload (y su alias histórico POST /casos/upload): subir un PDF
      suelto y devolver su nombre + ubicación pública.
    - GET /uploads/pdfs/{filename}: servir un adjunto almacenado.

Collaborators:
    - application.attachments.AttachmentIntake
    - domain.services.FileStoragePort (resolve_path)
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse
from starlette.concurrency import run_in_threadpool

from .....application.attachments import (
    UPLOADS_PUBLIC_PATH,
    AttachmentErrorCode,
    AttachmentIntake,
    PDF_MIME,
)
from .....container import get_attachment_intake, get_file_storage
from .....crosscutting.error_responses import (
    not_found,
    payload_too_large,
    unsupported_media,
    validation_error,
)
from .....domain.services import FileStoragePort
from .....infrastructure.storage.errors import (
    InvalidStorageKeyError,
    StorageNotFoundError,
)
from ..dependencies import to_case_attachment
from ..schemas.cases import UploadRes

router = APIRouter(tags=["uploads"])


@router.post("/upload", response_model=UploadRes)
@router.post("/casos/upload", response_model=UploadRes, include_in_schema=False)
async def upload_pdf(
    archivo: UploadFile | None = File(None),
    intake: AttachmentIntake = Depends(get_attachment_intake),
):
    attachment = await to_case_attachment(archivo, max_bytes=intake.max_bytes)
    if attachment is None:
        raise validation_error("Se requiere un archivo PDF (campo 'archivo').")

    result = await run_in_threadpool(
        intake.accept,
        attachment.content,
        attachment.mime_type,
        attachment.size_bytes,
        attachment.filename,
    )
    if result.error is not None:
        if result.error.code == AttachmentErrorCode.UNSUPPORTED_MEDIA:
            raise unsupported_media(result.error.message)
        if result.error.code == AttachmentErrorCode.PAYLOAD_TOO_LARGE:
            raise payload_too_large(result.error.message)
        raise validation_error(result.error.message)

    return UploadRes(
        message="Archivo subido exitosamente.",
        file_name=result.stored_name,
        location=intake.public_url(result.stored_name),
    )


@router.get(UPLOADS_PUBLIC_PATH + "/{filename}", include_in_schema=False)
def serve_pdf(
    filename: str,
    storage: FileStoragePort = Depends(get_file_storage),
):
    try:
        path = storage.resolve_path(filename)
    except (StorageNotFoundError, InvalidStorageKeyError):
        raise not_found("Archivo", filename)
    return FileResponse(path, media_type=PDF_MIME)
