"""
===============================================================================
TARJETA CRC: interfaces/api/http/routers/cases.py
===============================================================================

Class/Module:
    Case Router (/casos)

Responsibilities:
    - Exponer endpoints HTTP del ciclo de vida de los casos.
    - Convertir requests HTTP (JSON / multipart) -> inputs de casos de uso.
    - Traducir CaseError -> RFC7807 (error_mapping).
    - Mapear entidades -> DTOs con los nombres JSON históricos.

Collaborators:
    - obras.application.usecases.cases
    - obras.container (factories DI)
    - schemas.cases

Notes:
    - La ruta fija /casos/stats/parroquia se registra antes que
      /casos/{case_id}.
===============================================================================
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile
from starlette.concurrency import run_in_threadpool

from .....application.usecases.cases import (
    AddActuacionUseCase,
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
from .....container import (
    get_add_actuacion_use_case,
    get_attachment_intake,
    get_case_stats_use_case,
    get_confirm_delivery_use_case,
    get_create_case_use_case,
    get_delete_case_use_case,
    get_get_case_use_case,
    get_list_cases_use_case,
    get_update_case_status_use_case,
    get_update_case_use_case,
)
from .....crosscutting.error_responses import validation_error
from .....domain.entities import Case
from ..dependencies import to_case_attachment
from ..error_mapping import raise_case_error
from ..schemas.cases import (
    ActuacionRes,
    AddActuacionReq,
    CaseCreatedRes,
    CaseMessageRes,
    CaseRes,
    ConfirmDeliveryReq,
    DeleteCaseReq,
    ModificacionRes,
    ParroquiaCountRes,
    UpdateCaseReq,
    UpdateStatusReq,
)

router = APIRouter(tags=["casos"])


# =============================================================================
# Helpers internos (puros / sin IO)
# =============================================================================


def to_case_res(case: Case) -> CaseRes:
    """Mapea entidad de dominio -> DTO HTTP."""
    return CaseRes(
        id=case.id,
        tipo_obra=case.tipo_obra,
        nombre_obra=case.nombre_obra,
        parroquia=case.parroquia,
        circuito=case.circuito,
        eje=case.eje,
        comuna=case.comuna,
        codigo_comuna=case.codigo_comuna,
        name_jc=case.name_jc,
        name_ju=case.name_ju,
        enlace_comunal=case.enlace_comunal,
        case_description=case.case_description,
        case_date=case.case_date,
        archivo=case.archivo,
        ente_responsable=case.ente_responsable,
        cantidad_consejos_comunales=case.cantidad_consejos_comunales,
        consejo_comunal_ejecuta=case.consejo_comunal_ejecuta,
        cantidad_familiares=case.cantidad_familiares,
        direccion_exacta=case.direccion_exacta,
        responsable_sala_autogobierno=case.responsable_sala_autogobierno,
        jefe_calle=case.jefe_calle,
        jefe_politico_eje=case.jefe_politico_eje,
        jefe_juventud_circuito_comunal=case.jefe_juventud_circuito_comunal,
        codigo_personalizado=case.codigo_personalizado,
        estado=case.estado,
        fecha_entrega=case.fecha_entrega,
        actuaciones=[
            ActuacionRes(descripcion=a.descripcion, fecha=a.fecha, usuario=a.usuario)
            for a in case.actuaciones
        ],
        modificaciones=[
            ModificacionRes(
                campo=m.campo,
                valor_antiguo=m.valor_antiguo,
                valor_nuevo=m.valor_nuevo,
                fecha=m.fecha,
                usuario=m.usuario,
            )
            for m in case.modificaciones
        ],
        created_at=case.created_at,
        updated_at=case.updated_at,
    )


def _parse_positive_int(raw: str | None, name: str) -> int | None:
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise validation_error(f"{name} debe ser un entero.")


# =============================================================================
# Endpoints: lectura
# =============================================================================


@router.get("/casos", response_model=list[CaseRes])
def list_cases(
    response: Response,
    page: str | None = Query(None),
    limit: str | None = Query(None),
    use_case: ListCasesUseCase = Depends(get_list_cases_use_case),
):
    result = use_case.execute(
        page=_parse_positive_int(page, "page"),
        limit=_parse_positive_int(limit, "limit"),
    )
    if result.error is not None:
        raise_case_error(result.error)

    if result.page is not None:
        response.headers["X-Total-Count"] = str(result.total)
        response.headers["X-Total-Pages"] = str(result.total_pages)
    return [to_case_res(case) for case in result.cases]


@router.get("/casos/stats/parroquia", response_model=list[ParroquiaCountRes])
def stats_by_parroquia(
    use_case: CaseStatsByParroquiaUseCase = Depends(get_case_stats_use_case),
):
    result = use_case.execute()
    return [
        ParroquiaCountRes(parroquia=item.parroquia, count=item.count)
        for item in result.items
    ]


@router.get("/casos/{case_id}", response_model=CaseRes)
def get_case(
    case_id: str,
    use_case: GetCaseUseCase = Depends(get_get_case_use_case),
):
    result = use_case.execute(case_id)
    if result.error is not None:
        raise_case_error(result.error, case_id=case_id)
    return to_case_res(result.case)


# =============================================================================
# Endpoints: alta (multipart)
# =============================================================================


@router.post("/casos", response_model=CaseCreatedRes, status_code=201)
async def create_case(
    archivo: UploadFile | None = File(None),
    tipo_obra: str | None = Form(None),
    nombre_obra: str | None = Form(None),
    parroquia: str | None = Form(None),
    circuito: str | None = Form(None),
    eje: str | None = Form(None),
    comuna: str | None = Form(None),
    codigo_comuna: str | None = Form(None, alias="codigoComuna"),
    name_jc: str | None = Form(None, alias="nameJC"),
    name_ju: str | None = Form(None, alias="nameJU"),
    enlace_comunal: str | None = Form(None, alias="enlaceComunal"),
    case_description: str | None = Form(None, alias="caseDescription"),
    case_date: str | None = Form(None, alias="caseDate"),
    ente_responsable: str | None = Form(None),
    cantidad_consejos_comunales: str | None = Form(None),
    consejo_comunal_ejecuta: str | None = Form(None),
    cantidad_familiares: str | None = Form(None),
    direccion_exacta: str | None = Form(None),
    responsable_sala_autogobierno: str | None = Form(None),
    jefe_calle: str | None = Form(None),
    jefe_politico_eje: str | None = Form(None),
    jefe_juventud_circuito_comunal: str | None = Form(None),
    codigo_personalizado: str | None = Form(None, alias="codigoPersonalizado"),
    use_case: CreateCaseUseCase = Depends(get_create_case_use_case),
):
    fields: dict[str, Any] = {
        "tipo_obra": tipo_obra,
        "nombre_obra": nombre_obra,
        "parroquia": parroquia,
        "circuito": circuito,
        "eje": eje,
        "comuna": comuna,
        "codigo_comuna": codigo_comuna,
        "name_jc": name_jc,
        "name_ju": name_ju,
        "enlace_comunal": enlace_comunal,
        "case_description": case_description,
        "case_date": case_date,
        "ente_responsable": ente_responsable,
        "cantidad_consejos_comunales": cantidad_consejos_comunales,
        "consejo_comunal_ejecuta": consejo_comunal_ejecuta,
        "cantidad_familiares": cantidad_familiares,
        "direccion_exacta": direccion_exacta,
        "responsable_sala_autogobierno": responsable_sala_autogobierno,
        "jefe_calle": jefe_calle,
        "jefe_politico_eje": jefe_politico_eje,
        "jefe_juventud_circuito_comunal": jefe_juventud_circuito_comunal,
        "codigo_personalizado": codigo_personalizado,
    }
    attachment = await to_case_attachment(
        archivo, max_bytes=get_attachment_intake().max_bytes
    )

    result = await run_in_threadpool(
        use_case.execute, CreateCaseInput(fields=fields, attachment=attachment)
    )
    if result.error is not None:
        raise_case_error(result.error)

    return CaseCreatedRes(
        message="Caso creado exitosamente.",
        id=result.case.id,
        caso=to_case_res(result.case),
    )


# =============================================================================
# Endpoints: edición / estado / entrega
# =============================================================================


@router.patch("/casos/{case_id}", response_model=CaseMessageRes)
def update_case(
    case_id: str,
    req: UpdateCaseReq,
    use_case: UpdateCaseUseCase = Depends(get_update_case_use_case),
):
    changes = req.model_dump(exclude_unset=True, exclude={"username"})
    result = use_case.execute(case_id, changes, acting_user=req.username)
    if result.error is not None:
        raise_case_error(result.error, case_id=case_id)
    return CaseMessageRes(
        message="Caso actualizado exitosamente.", caso=to_case_res(result.case)
    )


@router.patch("/casos/{case_id}/estado", response_model=CaseMessageRes)
def update_case_status(
    case_id: str,
    req: UpdateStatusReq,
    use_case: UpdateCaseStatusUseCase = Depends(get_update_case_status_use_case),
):
    result = use_case.execute(case_id, req.estado, acting_user=req.username)
    if result.error is not None:
        raise_case_error(result.error, case_id=case_id)
    return CaseMessageRes(
        message="Estado del caso actualizado.", caso=to_case_res(result.case)
    )


@router.patch("/casos/{case_id}/confirm-delivery", response_model=CaseMessageRes)
def confirm_delivery(
    case_id: str,
    req: ConfirmDeliveryReq,
    use_case: ConfirmDeliveryUseCase = Depends(get_confirm_delivery_use_case),
):
    result = use_case.execute(case_id, req.password, acting_user=req.username)
    if result.error is not None:
        raise_case_error(result.error, case_id=case_id)
    return CaseMessageRes(
        message="Entrega del caso confirmada.", caso=to_case_res(result.case)
    )


@router.post(
    "/casos/{case_id}/actuaciones", response_model=CaseMessageRes, status_code=201
)
def add_actuacion(
    case_id: str,
    req: AddActuacionReq,
    use_case: AddActuacionUseCase = Depends(get_add_actuacion_use_case),
):
    result = use_case.execute(case_id, req.descripcion, acting_user=req.username)
    if result.error is not None:
        raise_case_error(result.error, case_id=case_id)
    return CaseMessageRes(message="Actuación agregada.", caso=to_case_res(result.case))


@router.delete("/casos/{case_id}/delete-with-password", response_model=CaseMessageRes)
def delete_case(
    case_id: str,
    req: DeleteCaseReq,
    use_case: DeleteCaseUseCase = Depends(get_delete_case_use_case),
):
    result = use_case.execute(case_id, req.password)
    if result.error is not None:
        raise_case_error(result.error, case_id=case_id)
    return CaseMessageRes(
        message="Caso eliminado exitosamente.", caso=to_case_res(result.case)
    )
