import json

import pytest
from fastapi.testclient import TestClient

from student_registry.config.settings import settings
from student_registry.main import create_application

from conftest import ANA_GOMEZ, API_PREFIX, JOSE_PEREZ, LUCIA_DIAZ

STUDENTS_URL = f"{API_PREFIX}/students"


class TestHealth:
    def test_reports_service_and_record_count(self, client):
        response = client.get(f"{API_PREFIX}/health")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["status"] == "healthy"
        assert body["data"]["records"] == 0

    def test_echoes_request_id(self, client):
        request_id = "0b6f1f9e-8d0c-4b8e-9a55-6f4f1b7f2c11"

        response = client.get(f"{API_PREFIX}/health", headers={"X-Request-ID": request_id})

        assert response.headers["X-Request-ID"] == request_id
        assert response.json()["requestId"] == request_id


class TestValidationEndpoints:
    """Per-keystroke and whole-form validation."""

    def test_lists_fields(self, client):
        response = client.get(f"{STUDENTS_URL}/fields")

        assert response.status_code == 200
        keys = [item["key"] for item in response.json()["data"]]
        assert keys == list(ANA_GOMEZ)

    def test_valid_field(self, client):
        response = client.post(
            f"{STUDENTS_URL}/validate-field", json={"field": "landline", "value": "6056123456"}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["valid"] is True
        assert data.get("message") is None

    def test_invalid_field_returns_fixed_message(self, client):
        response = client.post(
            f"{STUDENTS_URL}/validate-field", json={"field": "landline", "value": "6055123456"}
        )

        data = response.json()["data"]
        assert data["valid"] is False
        assert data["message"] == (
            "El teléfono fijo debe empezar con 6056 y tener 10 dígitos en total."
        )

    def test_unknown_field_is_a_request_error(self, client):
        response = client.post(
            f"{STUDENTS_URL}/validate-field", json={"field": "nickname", "value": "Ana"}
        )

        assert response.status_code == 422
        assert response.json()["meta"]["error_code"] == "VALIDATION_ERROR"

    def test_validate_draft_does_not_store(self, app, client):
        response = client.post(f"{STUDENTS_URL}/validate", json={**ANA_GOMEZ, "email": "a@b"})

        assert response.status_code == 200
        assert response.json()["data"] == {
            "valid": False,
            "errors": {"email": "Ingrese un correo electrónico válido."},
        }
        assert app.state.record_store.count() == 0


class TestSubmitAndList:
    """Form submission and listing."""

    def test_submit_valid_student(self, client, ana_payload):
        response = client.post(STUDENTS_URL, json=ana_payload)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Estudiante agregado correctamente"
        assert body["data"]["student"] == ana_payload
        assert body["data"]["total"] == 1

    def test_submit_invalid_student_is_rejected(self, app, client, ana_payload):
        response = client.post(
            STUDENTS_URL, json={**ana_payload, "code": "01234567", "mobile": "2123456789"}
        )

        assert response.status_code == 422
        body = response.json()
        assert body["meta"]["error_code"] == "FIELD_VALIDATION_ERROR"
        assert {error["field"] for error in body["errors"]} == {"code", "mobile"}
        assert app.state.record_store.count() == 0

    def test_missing_fields_are_submitted_as_empty(self, client):
        response = client.post(STUDENTS_URL, json={"name": "Ana Gomez"})

        assert response.status_code == 422
        assert len(response.json()["errors"]) == 6

    def test_list_is_paginated_in_insertion_order(self, client):
        for payload in (ANA_GOMEZ, JOSE_PEREZ, LUCIA_DIAZ):
            client.post(STUDENTS_URL, json=payload)

        response = client.get(STUDENTS_URL, params={"page": 1, "perPage": 2})

        assert response.status_code == 200
        body = response.json()
        assert [item["code"] for item in body["data"]] == ["12345678", "87654321"]
        assert body["pagination"]["total"] == 3

    def test_each_application_has_its_own_store(self, app, client, ana_payload):
        client.post(STUDENTS_URL, json=ana_payload)

        with TestClient(create_application()) as other_client:
            response = other_client.get(f"{API_PREFIX}/health")

        assert response.json()["data"]["records"] == 0
        assert app.state.record_store.count() == 1


class TestExportEndpoint:
    """File download."""

    def test_empty_store_refuses_export(self, client):
        response = client.get(f"{STUDENTS_URL}/export/csv")

        assert response.status_code == 409
        body = response.json()
        assert body["message"] == "No hay datos para exportar"
        assert body["meta"]["error_code"] == "EMPTY_EXPORT"

    @pytest.mark.parametrize(
        "export_format,filename,content_type",
        [
            ("text", "estudiantes.txt", "text/plain"),
            ("csv", "estudiantes.csv", "text/csv"),
            ("xml", "estudiantes.xml", "application/xml"),
            ("json", "estudiantes.json", "application/json"),
        ],
    )
    def test_downloads_file(self, client, ana_payload, export_format, filename, content_type):
        client.post(STUDENTS_URL, json=ana_payload)

        response = client.get(f"{STUDENTS_URL}/export/{export_format}")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(content_type)
        assert filename in response.headers["content-disposition"]
        assert "12345678" in response.text

    def test_unknown_format_is_a_request_error(self, client):
        response = client.get(f"{STUDENTS_URL}/export/excel")

        assert response.status_code == 422

    def test_basename_follows_current_setting(self, client, ana_payload, monkeypatch):
        monkeypatch.setattr(settings, "EXPORT_BASENAME", "alumnos")
        client.post(STUDENTS_URL, json=ana_payload)

        response = client.get(f"{STUDENTS_URL}/export/csv")

        assert "alumnos.csv" in response.headers["content-disposition"]

    def test_xml_refuses_control_characters_other_formats_do_not(self, client):
        content = json.dumps([{**ANA_GOMEZ, "name": "Ana\x0bGomez"}])
        client.post(
            f"{STUDENTS_URL}/import",
            files={"file": ("estudiantes.json", content, "application/json")},
        )

        response = client.get(f"{STUDENTS_URL}/export/xml")

        assert response.status_code == 422
        assert response.json()["meta"]["error_code"] == "ENCODE_ERROR"
        assert client.get(f"{STUDENTS_URL}/export/csv").status_code == 200
        assert client.get(f"{STUDENTS_URL}/export/json").status_code == 200


class TestImportEndpoint:
    """File upload."""

    def test_exported_file_imports_back(self, client, ana_payload):
        client.post(STUDENTS_URL, json=ana_payload)
        exported = client.get(f"{STUDENTS_URL}/export/xml")

        response = client.post(
            f"{STUDENTS_URL}/import",
            files={"file": ("estudiantes.xml", exported.content, "application/xml")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Se importaron 1 estudiantes"
        assert body["data"]["imported"] == 1
        assert body["data"]["total"] == 2

    def test_invalid_records_are_imported_with_warnings(self, app, client):
        content = json.dumps([{**ANA_GOMEZ, "name": "X", "code": "abc"}])

        response = client.post(
            f"{STUDENTS_URL}/import",
            files={"file": ("estudiantes.json", content, "application/json")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "warning"
        assert body["data"]["invalidRecords"] == [1]
        assert len(body["warnings"]) == 1
        assert app.state.record_store.count() == 1

    def test_malformed_xml_fails_without_side_effects(self, app, client, ana_payload):
        client.post(STUDENTS_URL, json=ana_payload)

        response = client.post(
            f"{STUDENTS_URL}/import",
            files={"file": ("estudiantes.xml", "<students><student><name>Ana", "application/xml")},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Error al importar el archivo. Verifique el formato."
        assert body["meta"]["error_code"] == "DECODE_ERROR"
        assert app.state.record_store.count() == 1

    def test_unsupported_extension(self, client):
        response = client.post(
            f"{STUDENTS_URL}/import",
            files={"file": ("estudiantes.xlsx", b"irrelevant", "application/octet-stream")},
        )

        assert response.status_code == 400
        assert response.json()["meta"]["error_code"] == "UNSUPPORTED_FORMAT"

    def test_oversized_upload_is_rejected(self, app, client, monkeypatch):
        monkeypatch.setattr(settings, "MAX_IMPORT_BYTES", 10)

        response = client.post(
            f"{STUDENTS_URL}/import",
            files={"file": ("estudiantes.json", json.dumps([ANA_GOMEZ]), "application/json")},
        )

        assert response.status_code == 413
        assert app.state.record_store.count() == 0

    def test_lone_surrogate_is_rejected_and_export_still_works(self, app, client, ana_payload):
        client.post(STUDENTS_URL, json=ana_payload)
        content = json.dumps([{**ANA_GOMEZ, "name": "\ud800"}])

        response = client.post(
            f"{STUDENTS_URL}/import",
            files={"file": ("estudiantes.json", content, "application/json")},
        )

        assert response.status_code == 400
        assert response.json()["meta"]["error_code"] == "DECODE_ERROR"
        assert app.state.record_store.count() == 1
        assert client.get(f"{STUDENTS_URL}/export/json").status_code == 200

    def test_deeply_nested_json_is_a_decode_error(self, app, client):
        content = "[" * 100000 + "]" * 100000

        response = client.post(
            f"{STUDENTS_URL}/import",
            files={"file": ("estudiantes.json", content, "application/json")},
        )

        assert response.status_code == 400
        assert response.json()["meta"]["error_code"] == "DECODE_ERROR"
        assert app.state.record_store.count() == 0
