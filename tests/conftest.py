"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure the test environment BEFORE importing the app (APP_ENV=test)
  - Provide reusable fixtures (sample cases, PDF payloads, TestClient)
  - Reset cached settings / container singletons between tests

Collaborators:
  - pytest: Test framework
  - obras.crosscutting.config: Settings (env parsing)
  - obras.container: DI singletons (in-memory repositories in test env)

Notes:
  - Fixtures are auto-discovered by pytest
  - Every test gets a fresh container: repositories never leak between tests
"""

import os
import sys
import tempfile
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict
from uuid import uuid4

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="obras-uploads-"))
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("SUPER_ADMIN_TOKEN", "test-super-admin-token")
os.environ.setdefault("ADMIN_TOKEN", "test-admin-token")
os.environ.setdefault("USER_TOKEN", "test-user-token")
os.environ.setdefault("CONFIRM_CASE_TOKEN", "test-confirm-secret")
os.environ.setdefault("DELETE_CASE_TOKEN", "test-delete-secret")

from obras.crosscutting import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from obras.container import reset_container  # noqa: E402
from obras.crosscutting.config import OperationalSecrets, get_settings  # noqa: E402
from obras.domain.entities import Case, CaseStatus  # noqa: E402

CONFIRM_SECRET = "test-confirm-secret"
DELETE_SECRET = "test-delete-secret"

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n%%EOF\n"


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (require PostgreSQL)"
    )


# ============================================================================
# Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def _fresh_container():
    """R: Settings y singletons nuevos por test."""
    get_settings.cache_clear()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_container()


@pytest.fixture
def upload_dir(tmp_path: Path, monkeypatch) -> Path:
    """R: UPLOAD_DIR aislado por test."""
    target = tmp_path / "pdfs"
    monkeypatch.setenv("UPLOAD_DIR", str(target))
    get_settings.cache_clear()
    reset_container()
    return target


@pytest.fixture
def client(upload_dir: Path):
    """R: TestClient sobre una app recién construida (repos in-memory)."""
    from fastapi.testclient import TestClient

    from obras.api.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


# ============================================================================
# Domain Fixtures
# ============================================================================


@pytest.fixture
def secrets() -> OperationalSecrets:
    return OperationalSecrets(
        super_admin_token="sa-token",
        admin_token="admin-token",
        user_token="user-token",
        confirm_case_token=CONFIRM_SECRET,
        delete_case_token=DELETE_SECRET,
    )


@pytest.fixture
def pdf_bytes() -> bytes:
    return PDF_BYTES


@pytest.fixture
def case_fields() -> Dict[str, Any]:
    """R: Campos descriptivos válidos (claves = atributos de Case)."""
    return {
        "tipo_obra": "Vialidad",
        "nombre_obra": "Asfaltado calle 5",
        "parroquia": "Catedral",
        "circuito": "Circuito 1",
        "eje": "Eje Norte",
        "comuna": "Comuna El Progreso",
        "codigo_comuna": "COM-001",
        "name_jc": "Ana Pérez",
        "name_ju": "Luis Gómez",
        "enlace_comunal": "María Díaz",
        "case_description": "Bacheo y asfaltado de 300 metros.",
        "case_date": "2024-03-15",
    }


@pytest.fixture
def case_form() -> Dict[str, str]:
    """R: Mismos campos pero con los nombres del formulario multipart."""
    return {
        "tipo_obra": "Vialidad",
        "nombre_obra": "Asfaltado calle 5",
        "parroquia": "Catedral",
        "circuito": "Circuito 1",
        "eje": "Eje Norte",
        "comuna": "Comuna El Progreso",
        "codigoComuna": "COM-001",
        "nameJC": "Ana Pérez",
        "nameJU": "Luis Gómez",
        "enlaceComunal": "María Díaz",
        "caseDescription": "Bacheo y asfaltado de 300 metros.",
        "caseDate": "2024-03-15",
    }


@pytest.fixture
def make_case() -> Callable[..., Case]:
    """R: Factory de entidades Case listas para persistir."""

    def _make(**overrides: Any) -> Case:
        values: Dict[str, Any] = {
            "id": uuid4(),
            "tipo_obra": "Vialidad",
            "nombre_obra": None,
            "parroquia": "Catedral",
            "circuito": "Circuito 1",
            "eje": "Eje Norte",
            "comuna": "Comuna El Progreso",
            "codigo_comuna": "COM-001",
            "name_jc": "Ana Pérez",
            "name_ju": "Luis Gómez",
            "enlace_comunal": "María Díaz",
            "case_description": "Bacheo",
            "case_date": date(2024, 3, 15),
            "archivo": "archivo-1-abc.pdf",
            "estado": CaseStatus.CARGADO,
        }
        values.update(overrides)
        return Case(**values)

    return _make
