"""
===============================================================================
USE CASE: Delete Case (borrado protegido por secreto)
===============================================================================

Responsibilities:
    - Validar id y secreto DELETE_CASE_TOKEN (mismo orden que la entrega).
    - Borrar el caso y devolver su último snapshot.
    - Descartar el adjunto PDF (best-effort, configurable) salvo que otro
      caso todavía lo referencie.

Collaborators:
    - CaseRepository.delete_case
    - CaseRepository.archivo_in_use
    - AttachmentIntake.discard
    - identity.passwords.secrets_match
===============================================================================
"""

from __future__ import annotations

from uuid import UUID

from ....crosscutting.config import OperationalSecrets
from ....crosscutting.logger import logger
from ....domain.repositories import CaseRepository
from ....identity.passwords import secrets_match
from ...attachments import AttachmentIntake
from ..users.user_results import INVALID_CREDENTIALS_MESSAGE
from .case_results import (
    CaseErrorCode,
    CaseResult,
    case_error,
    not_found_result,
    parse_case_id,
)


class DeleteCaseUseCase:
    def __init__(
        self,
        repository: CaseRepository,
        secrets: OperationalSecrets,
        *,
        intake: AttachmentIntake | None = None,
        delete_attachment: bool = True,
    ) -> None:
        self._cases = repository
        self._secrets = secrets
        self._intake = intake
        self._delete_attachment = delete_attachment

    def execute(self, case_id: str | UUID, supplied_secret: str | None) -> CaseResult:
        parsed_id, id_error = parse_case_id(case_id)
        if id_error is not None:
            return CaseResult(error=id_error)

        if not secrets_match(supplied_secret, self._secrets.delete_case_token):
            logger.warning("Borrado de caso rechazado", extra={"case_id": str(parsed_id)})
            return case_error(CaseErrorCode.UNAUTHORIZED, INVALID_CREDENTIALS_MESSAGE)

        deleted = self._cases.delete_case(parsed_id)
        if deleted is None:
            return not_found_result()

        if self._delete_attachment and self._intake is not None:
            if self._cases.archivo_in_use(deleted.archivo):
                logger.warning(
                    "Adjunto compartido: no se descarta",
                    extra={"case_id": str(parsed_id), "key": deleted.archivo},
                )
            else:
                self._intake.discard(deleted.archivo)

        logger.info("Caso eliminado", extra={"case_id": str(parsed_id)})
        return CaseResult(case=deleted)
