"""
GET /api/config: bootstrap del frontend.

Expone los tokens de registro por rol y la URL base del API, tal como los
consume el formulario de alta de usuarios.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from .....container import get_operational_secrets
from .....crosscutting.config import OperationalSecrets, get_settings

router = APIRouter(tags=["config"])


@router.get("/api/config")
def public_config(secrets: OperationalSecrets = Depends(get_operational_secrets)):
    return {
        "ROLES_TOKENS": secrets.role_tokens(),
        "API_BASE_URL": get_settings().api_base_url,
    }
