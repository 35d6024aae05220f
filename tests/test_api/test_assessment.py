"""Tests for the assessment API."""

import logging

import pytest
from fastapi.testclient import TestClient

from pedi_eval.config import Settings
from pedi_eval.reference.tables import REFERENCE_TABLES_VERSION


@pytest.fixture
def client():
    """Full application client with default settings."""
    from pedi_eval.api.app import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


class TestComputeEndpoint:
    def test_compute(self, client, snapshot_payload):
        response = client.post("/api/v1/assessment/compute", json=snapshot_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["torticollis"]["grade"] == 3
        assert data["goniometry"]["rotation"]["restricted_side"] == "left"
        assert data["cranial"]["plagiocephaly"]["code"] == "moderate"
        assert response.headers["X-Process-Time"]

    def test_minimal_payload(self, client):
        response = client.post("/api/v1/assessment/compute", json={"age_months": 5})

        assert response.status_code == 200
        assert response.json()["torticollis"]["status"] == "insufficient_data"

    def test_responses_carry_reference_version(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="pedi_eval.api.middleware"):
            response = client.post("/api/v1/assessment/compute", json={"age_months": 5})

        assert response.headers["X-Reference-Tables-Version"] == REFERENCE_TABLES_VERSION
        assert f"tables={REFERENCE_TABLES_VERSION}" in caplog.text
        assert "status=200" in caplog.text

    def test_large_readings(self, client):
        response = client.post(
            "/api/v1/assessment/compute",
            json={"age_months": 4, "goniometry": {"rotation": {"passive_right": 1e30, "passive_left": 1e30}}},
        )

        assert response.status_code == 200
        assert response.json()["torticollis"]["grade"] == 1

    def test_invalid_payload_rejected(self, client):
        response = client.post(
            "/api/v1/assessment/compute",
            json={"palpation": {"clinical_type": "unknown-type"}},
        )
        assert response.status_code == 422


class TestDiagnosisEndpoint:
    def test_diagnosis(self, client, snapshot_payload):
        response = client.post("/api/v1/assessment/diagnosis", json=snapshot_payload)

        assert response.status_code == 200
        data = response.json()
        assert "torticollis-grade-3" in data["diagnosis"]["tags"]
        assert data["diagnosis"]["narrative"].startswith("Patient Ana")
        assert data["assessment"]["reference_version"]


class TestAIMSPrefill:
    def test_prefill(self, client):
        response = client.post(
            "/api/v1/assessment/aims/prefill",
            json={"checked_items": {"P1": True}, "age_threshold": 2},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["checked_items"] == {"P1": True, "P2": True, "S1": True}
        assert sorted(data["newly_checked"]) == ["P2", "S1"]

    def test_negative_threshold_rejected(self, client):
        response = client.post("/api/v1/assessment/aims/prefill", json={"age_threshold": -1})
        assert response.status_code == 422


class TestReferenceTables:
    def test_tables(self, client):
        response = client.get("/api/v1/reference/tables")

        assert response.status_code == 200
        data = response.json()
        assert set(data["band_tables"]) == {"rom_asymmetry", "plagiocephaly_cvai", "cephalic_index"}
        assert len(data["aims_percentiles"]) == 18


class TestAPIKey:
    @pytest.fixture
    def secured_client(self, monkeypatch):
        from pedi_eval.api import app as app_module

        monkeypatch.setattr(app_module, "get_settings", lambda: Settings(api_key="secret"))
        with TestClient(app_module.create_app()) as test_client:
            yield test_client

    def test_missing_key_rejected(self, secured_client):
        response = secured_client.post("/api/v1/assessment/compute", json={})
        assert response.status_code == 401

    def test_valid_key_accepted(self, secured_client):
        response = secured_client.post(
            "/api/v1/assessment/compute", json={}, headers={"X-API-Key": "secret"}
        )
        assert response.status_code == 200

    def test_health_is_public(self, secured_client):
        assert secured_client.get("/health").status_code == 200
