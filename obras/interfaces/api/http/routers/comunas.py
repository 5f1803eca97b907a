"""
===============================================================================
TARJETA CRC: interfaces/api/http/routers/comunas.py
===============================================================================

Responsibilities:
    - POST /comunas: alta en el catálogo (201).
    - GET /comunas/parroquia/{parroquia}: comunas de una parroquia.
    - GET /comunas/stats/no-contactadas: comunas sin casos registrados.
===============================================================================
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from .....application.usecases.comunas import (
    CreateComunaInput,
    CreateComunaUseCase,
    ListComunasByParroquiaUseCase,
    ListComunasNoContactadasUseCase,
)
from .....container import (
    get_create_comuna_use_case,
    get_list_comunas_by_parroquia_use_case,
    get_list_comunas_no_contactadas_use_case,
)
from .....domain.entities import Comuna
from ..error_mapping import raise_comuna_error
from ..schemas.comunas import ComunaRes, ConsejoComunalRes, CreateComunaReq

router = APIRouter(tags=["comunas"])


def to_comuna_res(comuna: Comuna) -> ComunaRes:
    return ComunaRes(
        id=comuna.id,
        nombre=comuna.nombre,
        codigo_circuito_comunal=comuna.codigo_circuito_comunal,
        parroquia=comuna.parroquia,
        consejos_comunales=[
            ConsejoComunalRes(nombre=c.nombre, codigo_situr=c.codigo_situr)
            for c in comuna.consejos_comunales
        ],
        created_at=comuna.created_at,
        updated_at=comuna.updated_at,
    )


@router.post("/comunas", response_model=ComunaRes, status_code=201)
def create_comuna(
    req: CreateComunaReq,
    use_case: CreateComunaUseCase = Depends(get_create_comuna_use_case),
):
    result = use_case.execute(
        CreateComunaInput(
            nombre=req.nombre,
            codigo_circuito_comunal=req.codigo_circuito_comunal,
            parroquia=req.parroquia,
            consejos_comunales=[c.model_dump() for c in req.consejos_comunales],
        )
    )
    if result.error is not None:
        raise_comuna_error(result.error)
    return to_comuna_res(result.comuna)


@router.get("/comunas/parroquia/{parroquia}", response_model=list[ComunaRes])
def list_by_parroquia(
    parroquia: str,
    use_case: ListComunasByParroquiaUseCase = Depends(
        get_list_comunas_by_parroquia_use_case
    ),
):
    return [to_comuna_res(c) for c in use_case.execute(parroquia).comunas]


@router.get("/comunas/stats/no-contactadas", response_model=list[ComunaRes])
def list_no_contactadas(
    use_case: ListComunasNoContactadasUseCase = Depends(
        get_list_comunas_no_contactadas_use_case
    ),
):
    return [to_comuna_res(c) for c in use_case.execute().comunas]
