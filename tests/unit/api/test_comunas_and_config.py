"""
Name: Comunas + Frontend Config Endpoint Tests
"""

import pytest

pytestmark = pytest.mark.unit


def _comuna(client, nombre, parroquia="Catedral"):
    return client.post(
        "/comunas",
        json={
            "nombre": nombre,
            "codigo_circuito_comunal": "CC-01",
            "parroquia": parroquia,
            "consejos_comunales": [{"nombre": "CC Los Pinos", "codigo_situr": "S-1"}],
        },
    )


def test_create_comuna(client):
    res = _comuna(client, "El Progreso")
    assert res.status_code == 201
    body = res.json()
    assert body["nombre"] == "El Progreso"
    assert body["consejos_comunales"] == [{"nombre": "CC Los Pinos", "codigo_situr": "S-1"}]
    assert "_id" in body


def test_create_comuna_invalid(client):
    res = client.post("/comunas", json={"nombre": "Sin datos"})
    assert res.status_code == 400
    assert res.json()["code"] == "VALIDATION_ERROR"


def test_list_by_parroquia(client):
    _comuna(client, "Beta")
    _comuna(client, "Alfa")
    _comuna(client, "Gamma", parroquia="Santa Rosa")

    res = client.get("/comunas/parroquia/Catedral")
    assert [c["nombre"] for c in res.json()] == ["Alfa", "Beta"]


def test_no_contactadas(client, case_form, pdf_bytes):
    _comuna(client, "Comuna El Progreso")
    _comuna(client, "Comuna Olvidada")
    client.post(
        "/casos",
        data=case_form,
        files={"archivo": ("acta.pdf", pdf_bytes, "application/pdf")},
    )

    res = client.get("/comunas/stats/no-contactadas")
    assert [c["nombre"] for c in res.json()] == ["Comuna Olvidada"]


def test_api_config_exposes_role_tokens(client):
    res = client.get("/api/config")
    assert res.status_code == 200
    body = res.json()
    assert body["ROLES_TOKENS"] == {
        "SUPER_ADMIN_TOKEN": "test-super-admin-token",
        "ADMIN_TOKEN": "test-admin-token",
        "USER_TOKEN": "test-user-token",
    }
    assert "API_BASE_URL" in body
    # Los secretos de entrega / borrado nunca se publican.
    assert "test-confirm-secret" not in res.text
    assert "test-delete-secret" not in res.text
