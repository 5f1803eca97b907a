"""
Name: Case Endpoint Tests (/casos)

Responsibilities:
  - Multipart create with PDF attachment (201 / 400 family)
  - Read, paging headers, stats
  - Edit, status machine, delivery and delete over HTTP
  - RFC7807 error bodies

Notes:
  - TestClient over an app wired with in-memory repositories
"""

from uuid import uuid4

import pytest

pytestmark = pytest.mark.unit

CONFIRM_SECRET = "test-confirm-secret"
DELETE_SECRET = "test-delete-secret"


def _create(client, form, pdf_bytes, **overrides):
    data = {**form, **overrides}
    return client.post(
        "/casos",
        data=data,
        files={"archivo": ("acta.pdf", pdf_bytes, "application/pdf")},
    )


@pytest.fixture
def created(client, case_form, pdf_bytes):
    res = _create(client, case_form, pdf_bytes)
    assert res.status_code == 201, res.text
    return res.json()


# ============================================================================
# Create
# ============================================================================


class TestCreateCaseEndpoint:
    def test_create_returns_201_with_public_names(self, client, created, upload_dir):
        caso = created["caso"]
        assert created["message"] == "Caso creado exitosamente."
        assert created["id"] == caso["_id"]
        assert caso["estado"] == "Cargado"
        assert caso["codigoComuna"] == "COM-001"
        assert caso["caseDate"] == "2024-03-15"
        assert caso["fechaEntrega"] is None
        assert caso["actuaciones"] == [] and caso["modificaciones"] == []
        assert caso["ente_responsable"] == "N/A"
        assert (upload_dir / caso["archivo"]).is_file()

    def test_attachment_over_limit_is_400(self, client, case_form):
        big = b"%PDF-1.4\n" + b"0" * (3 * 1024 * 1024)
        res = _create(client, case_form, big)

        assert res.status_code == 400
        assert res.headers["content-type"].startswith("application/problem+json")
        assert res.json()["code"] == "PAYLOAD_TOO_LARGE"
        assert client.get("/casos").json() == []

    def test_attachment_over_body_limit_is_400_not_413(self, client, case_form):
        # 6 MiB: supera también MAX_BODY_BYTES (5 MiB).
        huge = b"%PDF-1.4\n" + b"0" * (6 * 1024 * 1024)
        res = _create(client, case_form, huge)

        assert res.status_code == 400
        assert res.headers["content-type"].startswith("application/problem+json")
        body = res.json()
        assert body["code"] == "PAYLOAD_TOO_LARGE"
        assert body["detail"] == "El archivo excede el máximo permitido (2 MB)."
        assert client.get("/casos").json() == []

    def test_non_pdf_is_400(self, client, case_form):
        res = client.post(
            "/casos",
            data=case_form,
            files={"archivo": ("foto.png", b"\x89PNG....", "image/png")},
        )
        assert res.status_code == 400
        assert res.json()["code"] == "UNSUPPORTED_MEDIA"

    def test_missing_attachment_is_400(self, client, case_form):
        res = client.post("/casos", data=case_form)
        assert res.status_code == 400
        assert res.json()["code"] == "VALIDATION_ERROR"

    def test_missing_fields_listed(self, client, case_form, pdf_bytes):
        del case_form["parroquia"]
        res = _create(client, case_form, pdf_bytes, caseDate="ayer")
        body = res.json()
        assert res.status_code == 400
        fields = {e["field"] for e in body["errors"] if "field" in e}
        assert fields == {"parroquia", "caseDate"}

    def test_duplicate_codigo_is_409(self, client, case_form, pdf_bytes, upload_dir):
        first = _create(client, case_form, pdf_bytes, codigoPersonalizado="OBR-1")
        second = _create(client, case_form, pdf_bytes, codigoPersonalizado="OBR-1")

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["code"] == "CONFLICT"
        assert sorted(p.name for p in upload_dir.iterdir()) == [
            first.json()["caso"]["archivo"]
        ]


# ============================================================================
# Read
# ============================================================================


class TestReadEndpoints:
    def test_get_by_id(self, client, created):
        res = client.get(f"/casos/{created['id']}")
        assert res.status_code == 200
        assert res.json()["_id"] == created["id"]

    def test_invalid_id_is_400(self, client):
        res = client.get("/casos/not-a-uuid")
        assert res.status_code == 400
        assert res.json()["code"] == "INVALID_ID"

    def test_unknown_id_is_404(self, client):
        res = client.get(f"/casos/{uuid4()}")
        assert res.status_code == 404
        assert res.json()["code"] == "NOT_FOUND"

    def test_list_without_paging_has_no_headers(self, client, created):
        res = client.get("/casos")
        assert res.status_code == 200
        assert len(res.json()) == 1
        assert "X-Total-Count" not in res.headers

    def test_list_paging_headers(self, client, case_form, pdf_bytes):
        for _ in range(3):
            assert _create(client, case_form, pdf_bytes).status_code == 201

        res = client.get("/casos", params={"page": 2, "limit": 2})

        assert res.status_code == 200
        assert len(res.json()) == 1
        assert res.headers["X-Total-Count"] == "3"
        assert res.headers["X-Total-Pages"] == "2"

    @pytest.mark.parametrize("params", [{"page": "0"}, {"limit": "abc"}])
    def test_list_bad_paging_is_400(self, client, params):
        res = client.get("/casos", params=params)
        assert res.status_code == 400
        assert res.json()["code"] == "VALIDATION_ERROR"

    def test_stats_by_parroquia(self, client, case_form, pdf_bytes):
        _create(client, case_form, pdf_bytes)
        _create(client, case_form, pdf_bytes, parroquia="Santa Rosa")
        _create(client, case_form, pdf_bytes, parroquia="Santa Rosa")

        res = client.get("/casos/stats/parroquia")

        assert res.status_code == 200
        counts = {item["_id"]: item["count"] for item in res.json()}
        assert counts == {"Catedral": 1, "Santa Rosa": 2}


# ============================================================================
# Edit / status / delivery / delete
# ============================================================================


class TestEditEndpoint:
    def test_patch_records_modificaciones(self, client, created):
        res = client.patch(
            f"/casos/{created['id']}",
            json={"eje": "Eje Sur", "caseDate": "2024-04-01", "username": "ana"},
        )

        assert res.status_code == 200
        caso = res.json()["caso"]
        assert caso["eje"] == "Eje Sur"
        campos = {m["campo"]: m for m in caso["modificaciones"]}
        assert set(campos) == {"eje", "caseDate"}
        assert campos["eje"]["valorAntiguo"] == "Eje Norte"
        assert campos["eje"]["valorNuevo"] == "Eje Sur"
        assert campos["eje"]["usuario"] == "ana"

    def test_patch_ignores_status(self, client, created):
        res = client.patch(f"/casos/{created['id']}", json={"estado": "Entregado"})
        assert res.status_code == 200
        assert res.json()["caso"]["estado"] == "Cargado"

    def test_patch_rewriting_actuaciones_is_400(self, client, created):
        case_id = created["id"]
        client.post(f"/casos/{case_id}/actuaciones", json={"descripcion": "Visita"})

        res = client.patch(
            f"/casos/{case_id}", json={"actuaciones": [{"descripcion": "Otra"}]}
        )
        assert res.status_code == 400

    def test_patch_cannot_take_over_another_case_pdf(
        self, client, case_form, pdf_bytes, upload_dir
    ):
        first = _create(client, case_form, pdf_bytes).json()
        second = _create(client, case_form, pdf_bytes).json()
        first_pdf = first["caso"]["archivo"]

        res = client.patch(f"/casos/{second['id']}", json={"archivo": first_pdf})
        assert res.status_code == 400

        client.request(
            "DELETE",
            f"/casos/{second['id']}/delete-with-password",
            json={"password": DELETE_SECRET},
        )
        assert (upload_dir / first_pdf).is_file()
        assert client.get(f"/uploads/pdfs/{first_pdf}").status_code == 200

    def test_patch_archivo_with_uploaded_pdf(self, client, created, pdf_bytes):
        uploaded = client.post(
            "/upload", files={"archivo": ("nueva.pdf", pdf_bytes, "application/pdf")}
        ).json()["fileName"]

        res = client.patch(f"/casos/{created['id']}", json={"archivo": uploaded})

        assert res.status_code == 200
        assert res.json()["caso"]["archivo"] == uploaded


class TestStatusEndpoint:
    def test_transition_appends_one_modificacion(self, client, created):
        res = client.patch(
            f"/casos/{created['id']}/estado",
            json={"estado": "Supervisado", "username": "ana"},
        )

        assert res.status_code == 200
        caso = res.json()["caso"]
        assert caso["estado"] == "Supervisado"
        assert len(caso["modificaciones"]) == 1
        mod = caso["modificaciones"][0]
        assert (mod["campo"], mod["valorAntiguo"], mod["valorNuevo"]) == (
            "estado",
            "Cargado",
            "Supervisado",
        )

    def test_entregado_via_status_is_400(self, client, created):
        res = client.patch(f"/casos/{created['id']}/estado", json={"estado": "Entregado"})
        assert res.status_code == 400
        assert res.json()["code"] == "VALIDATION_ERROR"

    @pytest.mark.parametrize(
        "target", ["Cargado", "Supervisado", "En Desarrollo", "Entregado"]
    )
    def test_delivered_case_is_403(self, client, created, target):
        case_id = created["id"]
        client.patch(
            f"/casos/{case_id}/confirm-delivery", json={"password": CONFIRM_SECRET}
        )

        res = client.patch(f"/casos/{case_id}/estado", json={"estado": target})
        assert res.status_code == 403
        assert res.json()["code"] == "FORBIDDEN"

    def test_invalid_id_is_400(self, client):
        res = client.patch("/casos/123/estado", json={"estado": "Supervisado"})
        assert res.status_code == 400
        assert res.json()["code"] == "INVALID_ID"


class TestDeliveryEndpoint:
    def test_wrong_secret_is_401_and_case_unchanged(self, client, created):
        case_id = created["id"]
        res = client.patch(
            f"/casos/{case_id}/confirm-delivery", json={"password": "wrong"}
        )

        assert res.status_code == 401
        assert res.json()["detail"] == "Credenciales inválidas."
        caso = client.get(f"/casos/{case_id}").json()
        assert caso["estado"] == "Cargado"
        assert caso["fechaEntrega"] is None

    def test_confirm_sets_fecha_entrega(self, client, created):
        res = client.patch(
            f"/casos/{created['id']}/confirm-delivery",
            json={"password": CONFIRM_SECRET, "username": "ana"},
        )

        assert res.status_code == 200
        caso = res.json()["caso"]
        assert caso["estado"] == "Entregado"
        assert caso["fechaEntrega"] is not None
        assert caso["actuaciones"][-1]["usuario"] == "ana"


class TestDeleteEndpoint:
    def test_wrong_secret_is_401(self, client, created):
        res = client.request(
            "DELETE",
            f"/casos/{created['id']}/delete-with-password",
            json={"password": "wrong"},
        )
        assert res.status_code == 401
        assert client.get(f"/casos/{created['id']}").status_code == 200

    def test_delete_removes_case_and_pdf(self, client, created, upload_dir):
        res = client.request(
            "DELETE",
            f"/casos/{created['id']}/delete-with-password",
            json={"password": DELETE_SECRET},
        )

        assert res.status_code == 200
        assert res.json()["message"] == "Caso eliminado exitosamente."
        assert client.get(f"/casos/{created['id']}").status_code == 404
        assert not (upload_dir / created["caso"]["archivo"]).exists()

    def test_delete_unknown_is_404(self, client):
        res = client.request(
            "DELETE",
            f"/casos/{uuid4()}/delete-with-password",
            json={"password": DELETE_SECRET},
        )
        assert res.status_code == 404


class TestActuacionesEndpoint:
    def test_add_actuacion(self, client, created):
        res = client.post(
            f"/casos/{created['id']}/actuaciones",
            json={"descripcion": "Reunión con voceros", "username": "luis"},
        )
        assert res.status_code == 201
        [actuacion] = res.json()["caso"]["actuaciones"]
        assert actuacion["descripcion"] == "Reunión con voceros"
        assert actuacion["usuario"] == "luis"

    def test_blank_actuacion_is_400(self, client, created):
        res = client.post(f"/casos/{created['id']}/actuaciones", json={"descripcion": ""})
        assert res.status_code == 400
