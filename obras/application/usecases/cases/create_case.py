"""
===============================================================================
USE CASE: Create Case (alta de caso con adjunto PDF)
===============================================================================

Business Goal:
    Registrar un caso nuevo junto con su adjunto PDF obligatorio.

Why (Context / Intención):
    - Un caso sin adjunto no es válido para el gabinete.
    - El adjunto se guarda primero; si la persistencia del caso falla, el
      archivo se descarta para no dejar huérfanos en UPLOAD_DIR.

-------------------------------------------------------------------------------
CRC CARD (Class-Responsibility-Collaborator)
-------------------------------------------------------------------------------
Class:
    CreateCaseUseCase

Responsibilities:
    - Normalizar y validar los campos descriptivos (case_fields).
    - Exigir el adjunto y delegar su validación/guardado a AttachmentIntake.
    - Inicializar estado=Cargado, fechaEntrega=None, bitácoras vacías.
    - Mapear unicidad de codigoPersonalizado -> CONFLICT.

Collaborators:
    - CaseRepository.create_case
    - AttachmentIntake.accept / discard
    - case_fields.normalize_case_fields
    - case_results

-------------------------------------------------------------------------------
INPUTS / OUTPUTS
-------------------------------------------------------------------------------
Inputs:
    CreateCaseInput(fields: Mapping[attr -> value], attachment: CaseAttachment | None)

Outputs:
    CaseResult

Error Mapping:
    - VALIDATION_ERROR: campos inválidos / sin adjunto
    - UNSUPPORTED_MEDIA: adjunto no PDF
    - PAYLOAD_TOO_LARGE: adjunto > límite
    - CONFLICT: codigoPersonalizado duplicado
===============================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping
from uuid import uuid4

from ....crosscutting.exceptions import UniqueConstraintError
from ....crosscutting.logger import logger
from ....domain.entities import Case, CaseStatus
from ....domain.repositories import CaseRepository
from ...attachments import AttachmentErrorCode, AttachmentIntake
from .case_fields import normalize_case_fields, summarize_errors
from .case_results import CaseErrorCode, CaseResult, case_error

_ATTACHMENT_CODES = {
    AttachmentErrorCode.VALIDATION_ERROR: CaseErrorCode.VALIDATION_ERROR,
    AttachmentErrorCode.UNSUPPORTED_MEDIA: CaseErrorCode.UNSUPPORTED_MEDIA,
    AttachmentErrorCode.PAYLOAD_TOO_LARGE: CaseErrorCode.PAYLOAD_TOO_LARGE,
}


@dataclass(frozen=True)
class CaseAttachment:
    content: bytes
    mime_type: str | None
    filename: str | None = None
    size_bytes: int | None = None


@dataclass(frozen=True)
class CreateCaseInput:
    fields: Mapping[str, Any] = field(default_factory=dict)
    attachment: CaseAttachment | None = None


class CreateCaseUseCase:
    def __init__(self, repository: CaseRepository, intake: AttachmentIntake) -> None:
        self._cases = repository
        self._intake = intake

    def execute(self, input_data: CreateCaseInput) -> CaseResult:
        # ---------------------------------------------------------------------
        # 1) Campos descriptivos.
        # ---------------------------------------------------------------------
        values, errors = normalize_case_fields(input_data.fields, partial=False)
        if errors:
            return case_error(
                CaseErrorCode.VALIDATION_ERROR, summarize_errors(errors), errors=errors
            )

        # ---------------------------------------------------------------------
        # 2) Adjunto obligatorio.
        # ---------------------------------------------------------------------
        attachment = input_data.attachment
        if attachment is None:
            return case_error(
                CaseErrorCode.VALIDATION_ERROR,
                "Se requiere un archivo PDF (campo 'archivo').",
            )

        accepted = self._intake.accept(
            attachment.content,
            attachment.mime_type,
            attachment.size_bytes,
            attachment.filename,
        )
        if accepted.error is not None:
            return case_error(_ATTACHMENT_CODES[accepted.error.code], accepted.error.message)
        stored_name = accepted.stored_name

        # ---------------------------------------------------------------------
        # 3) Persistir.
        # ---------------------------------------------------------------------
        case = Case(
            id=uuid4(),
            archivo=stored_name,
            estado=CaseStatus.CARGADO,
            fecha_entrega=None,
            actuaciones=[],
            modificaciones=[],
            **values,
        )
        try:
            created = self._cases.create_case(case)
        except UniqueConstraintError:
            self._intake.discard(stored_name)
            return case_error(
                CaseErrorCode.CONFLICT, "El código personalizado ya está en uso."
            )
        except Exception:
            self._intake.discard(stored_name)
            raise

        logger.info(
            "Caso creado",
            extra={"case_id": str(created.id), "archivo": created.archivo},
        )
        return CaseResult(case=created)
