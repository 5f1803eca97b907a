"""
Name: Case Use Case Tests

Responsibilities:
  - Create (fields + mandatory PDF), Get, List (paging)
  - Update fields (one modificación per changed field, append-only actuaciones)
  - Status machine (manual statuses only, Entregado terminal, CAS retry)
  - Delivery / delete gated by operational secrets

Notes:
  - In-memory repositories + local storage on tmp_path
  - Fixed clock injected where timestamps matter
"""

from dataclasses import replace
from datetime import date, datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from obras.application.attachments import AttachmentIntake
from obras.application.usecases.cases import (
    AddActuacionUseCase,
    CaseAttachment,
    CaseErrorCode,
    CaseStatsByParroquiaUseCase,
    ConfirmDeliveryUseCase,
    CreateCaseInput,
    CreateCaseUseCase,
    DeleteCaseUseCase,
    GetCaseUseCase,
    ListCasesUseCase,
    UpdateCaseStatusUseCase,
    UpdateCaseUseCase,
)
from obras.crosscutting.exceptions import DatabaseError
from obras.domain.entities import NOT_AVAILABLE, Actuacion, CaseStatus
from obras.infrastructure.repositories import InMemoryCaseRepository
from obras.infrastructure.storage import LocalFileStorageAdapter

pytestmark = pytest.mark.unit

NOW = datetime(2024, 6, 10, 15, 30, tzinfo=timezone.utc)


@pytest.fixture
def repo():
    return InMemoryCaseRepository()


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorageAdapter(tmp_path / "pdfs")


@pytest.fixture
def intake(storage):
    return AttachmentIntake(storage, max_bytes=1024)


@pytest.fixture
def attachment(pdf_bytes):
    return CaseAttachment(
        content=pdf_bytes, mime_type="application/pdf", filename="acta.pdf"
    )


def _stored_files(storage):
    return sorted(p.name for p in storage.base_dir.iterdir())


# ============================================================================
# Create
# ============================================================================


class TestCreateCase:
    def test_creates_case_with_defaults(self, repo, intake, storage, case_fields, attachment):
        result = CreateCaseUseCase(repo, intake).execute(
            CreateCaseInput(fields=case_fields, attachment=attachment)
        )

        assert result.error is None
        case = result.case
        assert case.estado == CaseStatus.CARGADO
        assert case.fecha_entrega is None
        assert case.actuaciones == [] and case.modificaciones == []
        assert case.case_date == date(2024, 3, 15)
        assert case.ente_responsable == NOT_AVAILABLE
        assert case.cantidad_familiares == 0
        assert case.codigo_personalizado is None
        assert _stored_files(storage) == [case.archivo]
        assert repo.get_case(case.id) is not None

    def test_missing_attachment(self, repo, intake, case_fields):
        result = CreateCaseUseCase(repo, intake).execute(
            CreateCaseInput(fields=case_fields, attachment=None)
        )
        assert result.error.code == CaseErrorCode.VALIDATION_ERROR
        assert repo.count_cases() == 0

    def test_invalid_fields_store_nothing(self, repo, intake, storage, case_fields, attachment):
        case_fields["parroquia"] = "  "
        case_fields["case_date"] = "no-es-fecha"
        result = CreateCaseUseCase(repo, intake).execute(
            CreateCaseInput(fields=case_fields, attachment=attachment)
        )

        assert result.error.code == CaseErrorCode.VALIDATION_ERROR
        assert {e["field"] for e in result.error.errors} == {"parroquia", "caseDate"}
        assert _stored_files(storage) == []

    def test_non_pdf_is_unsupported_media(self, repo, intake, case_fields):
        result = CreateCaseUseCase(repo, intake).execute(
            CreateCaseInput(
                fields=case_fields,
                attachment=CaseAttachment(content=b"GIF89a", mime_type="image/gif"),
            )
        )
        assert result.error.code == CaseErrorCode.UNSUPPORTED_MEDIA
        assert repo.count_cases() == 0

    def test_oversized_attachment(self, repo, intake, case_fields):
        result = CreateCaseUseCase(repo, intake).execute(
            CreateCaseInput(
                fields=case_fields,
                attachment=CaseAttachment(
                    content=b"x" * 2048, mime_type="application/pdf"
                ),
            )
        )
        assert result.error.code == CaseErrorCode.PAYLOAD_TOO_LARGE

    def test_duplicate_codigo_is_conflict_and_discards_file(
        self, repo, intake, storage, case_fields, attachment
    ):
        case_fields["codigo_personalizado"] = "OBR-7"
        use_case = CreateCaseUseCase(repo, intake)
        first = use_case.execute(CreateCaseInput(fields=case_fields, attachment=attachment))

        second = use_case.execute(CreateCaseInput(fields=case_fields, attachment=attachment))

        assert second.error.code == CaseErrorCode.CONFLICT
        assert _stored_files(storage) == [first.case.archivo]

    def test_database_failure_discards_file_and_propagates(
        self, intake, storage, case_fields, attachment
    ):
        failing = MagicMock()
        failing.create_case.side_effect = DatabaseError("down")

        with pytest.raises(DatabaseError):
            CreateCaseUseCase(failing, intake).execute(
                CreateCaseInput(fields=case_fields, attachment=attachment)
            )
        assert _stored_files(storage) == []


# ============================================================================
# Get / List / Stats
# ============================================================================


class TestReadCases:
    def test_get_invalid_id(self, repo):
        result = GetCaseUseCase(repo).execute("no-es-uuid")
        assert result.error.code == CaseErrorCode.INVALID_ID

    def test_get_not_found(self, repo):
        result = GetCaseUseCase(repo).execute(str(uuid4()))
        assert result.error.code == CaseErrorCode.NOT_FOUND

    def test_get_found(self, repo, make_case):
        case = repo.create_case(make_case())
        assert GetCaseUseCase(repo).execute(str(case.id)).case.id == case.id

    def test_list_without_paging_returns_everything(self, repo, make_case):
        for _ in range(12):
            repo.create_case(make_case())
        result = ListCasesUseCase(repo).execute()
        assert len(result.cases) == 12
        assert result.page is None

    def test_list_paged(self, repo, make_case):
        created = [repo.create_case(make_case()) for _ in range(5)]
        result = ListCasesUseCase(repo).execute(page=2, limit=2)

        assert result.total == 5
        assert result.total_pages == 3
        assert [c.id for c in result.cases] == [created[2].id, created[1].id]

    def test_list_default_limit_when_only_page(self, repo, make_case):
        for _ in range(12):
            repo.create_case(make_case())
        result = ListCasesUseCase(repo).execute(page=1)
        assert result.limit == 10
        assert len(result.cases) == 10

    def test_list_limit_is_capped(self, repo, make_case):
        repo.create_case(make_case())
        result = ListCasesUseCase(repo, max_limit=50).execute(page=1, limit=10000)
        assert result.limit == 50

    @pytest.mark.parametrize("page,limit", [(0, 10), (1, 0), (-1, 5)])
    def test_list_rejects_non_positive(self, repo, page, limit):
        result = ListCasesUseCase(repo).execute(page=page, limit=limit)
        assert result.error.code == CaseErrorCode.VALIDATION_ERROR

    def test_stats_by_parroquia(self, repo, make_case):
        repo.create_case(make_case(parroquia="Catedral"))
        repo.create_case(make_case(parroquia="Catedral"))
        items = CaseStatsByParroquiaUseCase(repo).execute().items
        assert [(i.parroquia, i.count) for i in items] == [("Catedral", 2)]


# ============================================================================
# Update fields
# ============================================================================


class TestUpdateCase:
    def _use_case(self, repo):
        return UpdateCaseUseCase(repo, now=lambda: NOW)

    def test_records_one_modificacion_per_changed_field(self, repo, make_case):
        case = repo.create_case(make_case())

        result = self._use_case(repo).execute(
            case.id,
            {"eje": "Eje Sur", "parroquia": case.parroquia, "case_date": "2024-04-01"},
            acting_user="ana",
        )

        updated = result.case
        assert updated.eje == "Eje Sur"
        assert updated.case_date == date(2024, 4, 1)
        campos = {m.campo: m for m in updated.modificaciones}
        assert set(campos) == {"eje", "caseDate"}
        assert campos["eje"].valor_antiguo == "Eje Norte"
        assert campos["eje"].valor_nuevo == "Eje Sur"
        assert campos["caseDate"].valor_antiguo == "2024-03-15"
        assert campos["eje"].usuario == "ana"
        assert campos["eje"].fecha == NOW

    def test_no_changes_no_write(self, repo, make_case):
        case = repo.create_case(make_case())
        result = self._use_case(repo).execute(case.id, {"eje": case.eje})
        assert result.case.modificaciones == []
        assert result.case.updated_at == case.updated_at

    def test_system_fields_are_ignored(self, repo, make_case):
        case = repo.create_case(make_case())
        result = self._use_case(repo).execute(
            case.id,
            {"estado": "Entregado", "fecha_entrega": "2024-01-01", "eje": "Eje Sur"},
        )
        assert result.case.estado == CaseStatus.CARGADO
        assert result.case.fecha_entrega is None

    def test_invalid_values(self, repo, make_case):
        case = repo.create_case(make_case())
        result = self._use_case(repo).execute(
            case.id, {"cantidad_familiares": "-3", "case_date": "31/12/2024"}
        )
        assert result.error.code == CaseErrorCode.VALIDATION_ERROR

    def test_actuaciones_must_extend_existing_log(self, repo, make_case):
        case = repo.create_case(make_case())
        repo.append_actuacion(case.id, Actuacion(descripcion="Visita", fecha=NOW, usuario="ana"))
        use_case = self._use_case(repo)

        existing = {"descripcion": "Visita", "fecha": NOW.isoformat(), "usuario": "ana"}
        appended = use_case.execute(
            case.id,
            {"actuaciones": [existing, {"descripcion": "Inspección"}]},
            acting_user="luis",
        )
        assert [a.descripcion for a in appended.case.actuaciones] == ["Visita", "Inspección"]
        assert appended.case.actuaciones[1].usuario == "luis"
        assert appended.case.actuaciones[1].fecha == NOW

        rewritten = use_case.execute(
            case.id, {"actuaciones": [{"descripcion": "Otra cosa"}]}
        )
        assert rewritten.error.code == CaseErrorCode.VALIDATION_ERROR
        assert len(repo.get_case(case.id).actuaciones) == 2

    def test_duplicate_codigo_conflict(self, repo, make_case):
        repo.create_case(make_case(codigo_personalizado="OBR-1"))
        other = repo.create_case(make_case())
        result = self._use_case(repo).execute(
            other.id, {"codigo_personalizado": "OBR-1"}
        )
        assert result.error.code == CaseErrorCode.CONFLICT

    def test_not_found(self, repo):
        result = self._use_case(repo).execute(uuid4(), {"eje": "x"})
        assert result.error.code == CaseErrorCode.NOT_FOUND

    def test_archivo_can_point_to_an_uploaded_file(self, repo, intake, make_case, pdf_bytes):
        case = repo.create_case(make_case())
        uploaded = intake.accept(pdf_bytes, "application/pdf").stored_name

        result = UpdateCaseUseCase(repo, intake=intake, now=lambda: NOW).execute(
            case.id, {"archivo": uploaded}
        )

        assert result.case.archivo == uploaded
        assert result.case.modificaciones[0].campo == "archivo"

    def test_archivo_of_another_case_is_rejected(self, repo, intake, make_case, pdf_bytes):
        owned = intake.accept(pdf_bytes, "application/pdf").stored_name
        repo.create_case(make_case(archivo=owned))
        other = repo.create_case(make_case(archivo="archivo-2-def.pdf"))

        result = UpdateCaseUseCase(repo, intake=intake).execute(
            other.id, {"archivo": owned}
        )

        assert result.error.code == CaseErrorCode.VALIDATION_ERROR
        assert result.error.errors[0]["field"] == "archivo"
        assert repo.get_case(other.id).archivo == "archivo-2-def.pdf"

    def test_archivo_must_exist_in_storage(self, repo, intake, make_case):
        case = repo.create_case(make_case())
        result = UpdateCaseUseCase(repo, intake=intake).execute(
            case.id, {"archivo": "archivo-999-fantasma.pdf"}
        )
        assert result.error.code == CaseErrorCode.VALIDATION_ERROR


# ============================================================================
# Status machine
# ============================================================================


class TestUpdateCaseStatus:
    def test_transition_appends_modificacion(self, repo, make_case):
        case = repo.create_case(make_case())
        result = UpdateCaseStatusUseCase(repo, now=lambda: NOW).execute(
            str(case.id), "Supervisado", acting_user="ana"
        )

        assert result.case.estado == CaseStatus.SUPERVISADO
        [mod] = result.case.modificaciones
        assert (mod.campo, mod.valor_antiguo, mod.valor_nuevo) == (
            "estado",
            "Cargado",
            "Supervisado",
        )
        assert mod.usuario == "ana"

    def test_entregado_is_not_a_manual_status(self, repo, make_case):
        case = repo.create_case(make_case())
        result = UpdateCaseStatusUseCase(repo).execute(case.id, "Entregado")
        assert result.error.code == CaseErrorCode.VALIDATION_ERROR
        assert repo.get_case(case.id).estado == CaseStatus.CARGADO

    def test_unknown_status(self, repo, make_case):
        case = repo.create_case(make_case())
        result = UpdateCaseStatusUseCase(repo).execute(case.id, "Archivado")
        assert result.error.code == CaseErrorCode.VALIDATION_ERROR

    @pytest.mark.parametrize(
        "target", ["Cargado", "Supervisado", "En Desarrollo", "Entregado"]
    )
    def test_delivered_case_is_forbidden(self, repo, make_case, target):
        case = repo.create_case(make_case(estado=CaseStatus.ENTREGADO))
        result = UpdateCaseStatusUseCase(repo).execute(case.id, target)
        assert result.error.code == CaseErrorCode.FORBIDDEN
        assert repo.get_case(case.id).modificaciones == []

    def test_invalid_id_checked_first(self, repo):
        result = UpdateCaseStatusUseCase(repo).execute("xyz", "Entregado")
        assert result.error.code == CaseErrorCode.INVALID_ID

    def test_retries_after_losing_race(self, make_case):
        case = make_case()
        moved = replace(case, estado=CaseStatus.SUPERVISADO)
        repo = MagicMock()
        repo.get_case.return_value = case
        repo.update_case_status.side_effect = [None, moved]

        result = UpdateCaseStatusUseCase(repo, max_attempts=3).execute(
            case.id, "Supervisado"
        )

        assert result.case is moved
        assert repo.update_case_status.call_count == 2

    def test_conflict_after_exhausting_attempts(self, make_case):
        repo = MagicMock()
        repo.get_case.return_value = make_case()
        repo.update_case_status.return_value = None

        result = UpdateCaseStatusUseCase(repo, max_attempts=3).execute(
            uuid4(), "Supervisado"
        )

        assert result.error.code == CaseErrorCode.CONFLICT
        assert repo.update_case_status.call_count == 3


# ============================================================================
# Delivery / Delete / Actuaciones
# ============================================================================


class TestConfirmDelivery:
    def test_wrong_secret_leaves_case_untouched(self, repo, make_case, secrets):
        case = repo.create_case(make_case())
        result = ConfirmDeliveryUseCase(repo, secrets).execute(case.id, "nope")

        assert result.error.code == CaseErrorCode.UNAUTHORIZED
        stored = repo.get_case(case.id)
        assert stored.estado == CaseStatus.CARGADO
        assert stored.fecha_entrega is None

    def test_confirms_delivery(self, repo, make_case, secrets):
        case = repo.create_case(make_case(estado=CaseStatus.EN_DESARROLLO))
        result = ConfirmDeliveryUseCase(repo, secrets, now=lambda: NOW).execute(
            str(case.id), secrets.confirm_case_token, acting_user="ana"
        )

        assert result.case.estado == CaseStatus.ENTREGADO
        assert result.case.fecha_entrega == date(2024, 6, 10)
        [actuacion] = result.case.actuaciones
        assert actuacion.usuario == "ana"

    def test_unknown_case(self, repo, secrets):
        result = ConfirmDeliveryUseCase(repo, secrets).execute(
            uuid4(), secrets.confirm_case_token
        )
        assert result.error.code == CaseErrorCode.NOT_FOUND


class TestDeleteCase:
    def test_wrong_secret(self, repo, make_case, secrets):
        case = repo.create_case(make_case())
        result = DeleteCaseUseCase(repo, secrets).execute(case.id, secrets.confirm_case_token)
        assert result.error.code == CaseErrorCode.UNAUTHORIZED
        assert repo.get_case(case.id) is not None

    def test_deletes_case_and_attachment(self, repo, intake, storage, make_case, secrets, pdf_bytes):
        stored = intake.accept(pdf_bytes, "application/pdf").stored_name
        case = repo.create_case(make_case(archivo=stored))

        result = DeleteCaseUseCase(repo, secrets, intake=intake).execute(
            str(case.id), secrets.delete_case_token
        )

        assert result.case.id == case.id
        assert repo.get_case(case.id) is None
        assert _stored_files(storage) == []

    def test_keeps_attachment_when_disabled(self, repo, intake, storage, make_case, secrets, pdf_bytes):
        stored = intake.accept(pdf_bytes, "application/pdf").stored_name
        case = repo.create_case(make_case(archivo=stored))

        DeleteCaseUseCase(repo, secrets, intake=intake, delete_attachment=False).execute(
            case.id, secrets.delete_case_token
        )
        assert _stored_files(storage) == [stored]

    def test_keeps_attachment_still_used_by_another_case(
        self, repo, intake, storage, make_case, secrets, pdf_bytes
    ):
        stored = intake.accept(pdf_bytes, "application/pdf").stored_name
        survivor = repo.create_case(make_case(archivo=stored))
        doomed = repo.create_case(make_case(archivo=stored))

        DeleteCaseUseCase(repo, secrets, intake=intake).execute(
            doomed.id, secrets.delete_case_token
        )

        assert repo.get_case(survivor.id) is not None
        assert _stored_files(storage) == [stored]

    def test_unknown_case(self, repo, secrets):
        result = DeleteCaseUseCase(repo, secrets).execute(uuid4(), secrets.delete_case_token)
        assert result.error.code == CaseErrorCode.NOT_FOUND


class TestAddActuacion:
    def test_appends_entry(self, repo, make_case):
        case = repo.create_case(make_case())
        result = AddActuacionUseCase(repo, now=lambda: NOW).execute(
            case.id, "  Reunión con voceros  "
        )
        [actuacion] = result.case.actuaciones
        assert actuacion.descripcion == "Reunión con voceros"
        assert actuacion.usuario == "Sistema"
        assert actuacion.fecha == NOW

    def test_blank_description(self, repo, make_case):
        case = repo.create_case(make_case())
        result = AddActuacionUseCase(repo).execute(case.id, " ")
        assert result.error.code == CaseErrorCode.VALIDATION_ERROR
