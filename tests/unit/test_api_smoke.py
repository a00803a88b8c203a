"""
Module 09D - API Smoke Tests

Tests for the FastAPI endpoints:
1. GET /health returns ok
2. POST /sim/generate returns count, root and sampled proof
3. POST /sim/verify accepts a generated payload and rejects tampering
4. Malformed payloads return 400 with a stable error code
5. POST /sim/estimate returns footprint figures
"""

import pytest
from fastapi.testclient import TestClient

from api.app import create_app, load_app_config
from api.deps import get_generator, get_runtime_config
from core.config.runtime import RuntimeConfig, SimulationConfig
from core.crypto.hashing import sha256_hex


# =============================================================================
# Health
# =============================================================================

class TestHealth:
    """Tests for health endpoints."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["service"] == "capsule-sim-api"
        assert data["version"].startswith("v")

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["ok"] is True


# =============================================================================
# Generate
# =============================================================================

class TestGenerate:
    """Tests for POST /sim/generate."""

    def test_generate(self, client):
        response = client.post("/sim/generate", json={"datasetGB": 500, "auditRatio": 10, "cacheWarm": True})

        assert response.status_code == 200
        data = response.json()
        assert data["capsules"] == 1250
        assert len(data["anchorRoot"]) == 64
        assert data["proofSample"]["leaf"] == sha256_hex("500:10:2")
        assert data["proofSample"]["index"] == 2
        assert len(data["proofSample"]["path"]) == 11
        assert data["cacheWarm"] is True

    def test_empty_body_uses_defaults(self, client):
        response = client.post("/sim/generate")

        assert response.status_code == 200
        assert response.json()["capsules"] == 1250

    def test_deterministic(self, client):
        body = {"datasetGB": 1000, "auditRatio": 15}
        first = client.post("/sim/generate", json=body).json()
        second = client.post("/sim/generate", json=body).json()

        assert first == second
        assert first["capsules"] == 1875

    def test_zero_ratio_single_capsule(self, client):
        data = client.post("/sim/generate", json={"auditRatio": 0}).json()

        assert data["capsules"] == 1
        assert data["proofSample"]["path"] == []

    def test_bool_audit_ratio_rejected(self, client):
        response = client.post("/sim/generate", json={"auditRatio": True})

        assert response.status_code == 400
        data = response.json()
        assert data["ok"] is False
        assert data["error"]["code"] == "SCHEMA_VALIDATION_ERROR"

    def test_invalid_json(self, client):
        response = client.post(
            "/sim/generate",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"

    def test_capsule_limit(self):
        config = RuntimeConfig(simulation=SimulationConfig(max_capsules=1000))
        client = TestClient(create_app(config))

        response = client.post("/sim/generate", json={"auditRatio": 10})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "CAPSULE_LIMIT_EXCEEDED"
        assert error["details"]["requested"] == 1250
        assert error["details"]["limit"] == 1000

    def test_huge_negative_ratio_single_capsule(self, client):
        response = client.post("/sim/generate", json={"auditRatio": -1e308})

        assert response.status_code == 200
        assert response.json()["capsules"] == 1

    def test_huge_ratio_hits_limit(self, client):
        response = client.post("/sim/generate", json={"auditRatio": 1e308})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "CAPSULE_LIMIT_EXCEEDED"

    def test_get_not_allowed(self, client):
        assert client.get("/sim/generate").status_code == 405


# =============================================================================
# Verify
# =============================================================================

class TestVerify:
    """Tests for POST /sim/verify."""

    def _generated(self, client, **body):
        return client.post("/sim/generate", json=body or {"datasetGB": 500, "auditRatio": 10}).json()

    def test_round_trip(self, client):
        payload = self._generated(client)
        response = client.post("/sim/verify", json=payload)

        assert response.status_code == 200
        assert response.json() == {"verified": True, "retrievalMs": 18}

    def test_cold_cache(self, client):
        payload = self._generated(client, cacheWarm=False)
        data = client.post("/sim/verify", json=payload).json()

        assert data == {"verified": True, "retrievalMs": 58}

    def test_tampered_path(self, client, flip_hex_char):
        payload = self._generated(client)
        payload["proofSample"]["path"][0] = flip_hex_char(payload["proofSample"]["path"][0])

        response = client.post("/sim/verify", json=payload)

        assert response.status_code == 200
        assert response.json()["verified"] is False

    def test_tampered_leaf(self, client, flip_hex_char):
        payload = self._generated(client)
        payload["proofSample"]["leaf"] = flip_hex_char(payload["proofSample"]["leaf"], 3)

        assert client.post("/sim/verify", json=payload).json()["verified"] is False

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"anchorRoot": "", "proofSample": {"leaf": "a", "path": []}},
            {"anchorRoot": "r", "proofSample": {"leaf": "", "path": []}},
            {"anchorRoot": "r", "proofSample": {"leaf": "a", "path": "abc"}},
            {"anchorRoot": "r", "proofSample": {"leaf": "a"}},
            {"anchorRoot": "r"},
        ],
    )
    def test_invalid_payload(self, client, body):
        response = client.post("/sim/verify", json=body)

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_PROOF_PAYLOAD"
        assert error["message"] == "Invalid proof payload"

    def test_missing_body(self, client):
        response = client.post("/sim/verify")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_PROOF_PAYLOAD"


# =============================================================================
# Estimate
# =============================================================================

class TestEstimate:
    """Tests for POST /sim/estimate."""

    def test_estimate(self, client):
        response = client.post("/sim/estimate", json={"datasetGB": 500, "auditRatio": 10})

        assert response.status_code == 200
        data = response.json()
        assert data["capsules"] == 1373
        assert data["totalEvents"] == 13725
        assert data["estimatedRetrievalMs"] == 35
        assert data["tempWorkspaceGB"] == 0

    def test_persist_expanded(self, client):
        data = client.post(
            "/sim/estimate",
            json={"datasetGB": 500, "auditRatio": 10, "persistExpanded": True, "cacheWarm": False},
        ).json()

        assert data["tempWorkspaceGB"] == 25
        assert data["estimatedRetrievalMs"] == 111

    def test_out_of_range(self, client):
        response = client.post("/sim/estimate", json={"auditRatio": 250})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "SCHEMA_VALIDATION_ERROR"

    def test_huge_dataset_rejected(self, client):
        response = client.post("/sim/estimate", json={"datasetGB": 1e308})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "SCHEMA_VALIDATION_ERROR"


# =============================================================================
# Unexpected errors
# =============================================================================

class TestInternalError:
    """Unhandled exceptions map to a structured 500."""

    def test_generic_handler(self, runtime_config):
        class _Broken:
            def generate(self, request):
                raise RuntimeError("boom")

        app = create_app(runtime_config)
        app.dependency_overrides[get_generator] = lambda: _Broken()
        client = TestClient(app, raise_server_exceptions=False)

        response = client.post("/sim/generate", json={})

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "INTERNAL_ERROR"
        assert error["details"]["type"] == "RuntimeError"


# =============================================================================
# Module-level app config
# =============================================================================

class TestModuleConfig:
    """A broken config file in the working directory falls back to defaults."""

    @pytest.fixture(autouse=True)
    def _fresh_config_cache(self):
        get_runtime_config.cache_clear()
        yield
        get_runtime_config.cache_clear()

    def test_broken_config_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "capsule.json").write_text("{not json")

        assert load_app_config() == RuntimeConfig()

    def test_valid_config_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "capsule.json").write_text('{"service": {"port": 9100}}')

        assert load_app_config().service.port == 9100
