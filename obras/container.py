"""
===============================================================================
TARJETA CRC: obras/container.py (Composition Root / DI manual)
===============================================================================

Responsabilidades:
  - Componer dependencias (repositorios, storage, casos de uso) siguiendo DIP.
  - Exponer factories para FastAPI (Depends).
  - Mantener singletons con caching (lru_cache).
  - Construir UNA vez el snapshot inmutable de secretos operativos.

Colaboradores:
  - obras.crosscutting.config (Settings, OperationalSecrets)
  - obras.domain.repositories.* (puertos)
  - obras.infrastructure.* (implementaciones)
  - obras.application.usecases.* (casos de uso)

Notas:
  - Este archivo NO contiene lógica de negocio.
  - Este archivo NO depende de FastAPI (solo expone factories).
  - En APP_ENV=test se usan repositorios in-memory.
===============================================================================
"""

from __future__ import annotations

from functools import lru_cache

from .application.attachments import AttachmentIntake
from .application.usecases.cases import (
    AddActuacionUseCase,
    CaseStatsByParroquiaUseCase,
    ConfirmDeliveryUseCase,
    CreateCaseUseCase,
    DeleteCaseUseCase,
    GetCaseUseCase,
    ListCasesUseCase,
    UpdateCaseStatusUseCase,
    UpdateCaseUseCase,
)
from .application.usecases.comunas import (
    CreateComunaUseCase,
    ListComunasByParroquiaUseCase,
    ListComunasNoContactadasUseCase,
)
from .application.usecases.users import (
    FindUserUseCase,
    ListUsersUseCase,
    RegisterUserUseCase,
    VerifyCredentialsUseCase,
)
from .crosscutting.config import OperationalSecrets, get_settings
from .domain.repositories import CaseRepository, ComunaRepository, UserRepository
from .domain.services import FileStoragePort
from .infrastructure.repositories import (
    InMemoryCaseRepository,
    InMemoryComunaRepository,
    InMemoryUserRepository,
    PostgresCaseRepository,
    PostgresComunaRepository,
    PostgresUserRepository,
)
from .infrastructure.storage import LocalFileStorageAdapter

# =============================================================================
# Repositorios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    """Repositorio de usuarios (in-memory en test; Postgres en runtime)."""
    if get_settings().is_test():
        return InMemoryUserRepository()
    return PostgresUserRepository()


@lru_cache(maxsize=1)
def get_case_repository() -> CaseRepository:
    """Repositorio de casos (in-memory en test; Postgres en runtime)."""
    if get_settings().is_test():
        return InMemoryCaseRepository()
    return PostgresCaseRepository()


@lru_cache(maxsize=1)
def get_comuna_repository() -> ComunaRepository:
    if get_settings().is_test():
        return InMemoryComunaRepository()
    return PostgresComunaRepository()


# =============================================================================
# Servicios (singletons)
# =============================================================================


@lru_cache(maxsize=1)
def get_file_storage() -> FileStoragePort:
    """Storage en disco local (UPLOAD_DIR)."""
    return LocalFileStorageAdapter(get_settings().upload_dir)


@lru_cache(maxsize=1)
def get_attachment_intake() -> AttachmentIntake:
    return AttachmentIntake(
        get_file_storage(), max_bytes=get_settings().max_upload_bytes
    )


@lru_cache(maxsize=1)
def get_operational_secrets() -> OperationalSecrets:
    """Snapshot inmutable de los secretos operativos (se lee una sola vez)."""
    return OperationalSecrets.from_settings(get_settings())


# =============================================================================
# Casos de uso: usuarios
# =============================================================================


def get_register_user_use_case() -> RegisterUserUseCase:
    return RegisterUserUseCase(get_user_repository())


def get_verify_credentials_use_case() -> VerifyCredentialsUseCase:
    return VerifyCredentialsUseCase(get_user_repository())


def get_find_user_use_case() -> FindUserUseCase:
    return FindUserUseCase(get_user_repository())


def get_list_users_use_case() -> ListUsersUseCase:
    return ListUsersUseCase(get_user_repository())


# =============================================================================
# Casos de uso: casos
# =============================================================================


def get_create_case_use_case() -> CreateCaseUseCase:
    return CreateCaseUseCase(get_case_repository(), get_attachment_intake())


def get_get_case_use_case() -> GetCaseUseCase:
    return GetCaseUseCase(get_case_repository())


def get_list_cases_use_case() -> ListCasesUseCase:
    return ListCasesUseCase(
        get_case_repository(), max_limit=get_settings().cases_page_max_limit
    )


def get_update_case_use_case() -> UpdateCaseUseCase:
    return UpdateCaseUseCase(get_case_repository(), intake=get_attachment_intake())


def get_update_case_status_use_case() -> UpdateCaseStatusUseCase:
    return UpdateCaseStatusUseCase(
        get_case_repository(),
        max_attempts=get_settings().status_update_max_attempts,
    )


def get_confirm_delivery_use_case() -> ConfirmDeliveryUseCase:
    return ConfirmDeliveryUseCase(get_case_repository(), get_operational_secrets())


def get_delete_case_use_case() -> DeleteCaseUseCase:
    return DeleteCaseUseCase(
        get_case_repository(),
        get_operational_secrets(),
        intake=get_attachment_intake(),
        delete_attachment=get_settings().delete_attachment_on_case_delete,
    )


def get_add_actuacion_use_case() -> AddActuacionUseCase:
    return AddActuacionUseCase(get_case_repository())


def get_case_stats_use_case() -> CaseStatsByParroquiaUseCase:
    return CaseStatsByParroquiaUseCase(get_case_repository())


# =============================================================================
# Casos de uso: comunas
# =============================================================================


def get_create_comuna_use_case() -> CreateComunaUseCase:
    return CreateComunaUseCase(get_comuna_repository())


def get_list_comunas_by_parroquia_use_case() -> ListComunasByParroquiaUseCase:
    return ListComunasByParroquiaUseCase(get_comuna_repository())


def get_list_comunas_no_contactadas_use_case() -> ListComunasNoContactadasUseCase:
    return ListComunasNoContactadasUseCase(
        get_comuna_repository(), get_case_repository()
    )


def reset_container() -> None:
    """Limpia los singletons (tests)."""
    for factory in (
        get_user_repository,
        get_case_repository,
        get_comuna_repository,
        get_file_storage,
        get_attachment_intake,
        get_operational_secrets,
    ):
        factory.cache_clear()
