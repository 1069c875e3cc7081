import logging

from fastapi.testclient import TestClient

import config
from api.main import app


def test_health_endpoints_report_ok() -> None:
    with TestClient(app) as client:
        for path in ("/", "/health"):
            response = client.get(path)
            assert response.status_code == 200, path
            assert response.json() == {"status": "ok"}


def test_openapi_lists_safe_output_routes() -> None:
    with TestClient(app) as client:
        payload = client.get("/openapi.json").json()

    assert payload["info"]["title"] == "Safe Output Guard API"
    for path in (
        "/api/safe-outputs/permissions/validate",
        "/api/safe-outputs/permissions/enforce",
        "/api/safe-outputs/update-payload",
    ):
        assert path in payload["paths"]


def test_missing_env_vars_are_logged_at_debug(monkeypatch, caplog) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.setenv("ENVIRONMENT", "test")
    logger = logging.getLogger("config.test")

    with caplog.at_level(logging.DEBUG, logger="config.test"):
        config.log_missing_env_vars(logger)

    assert "GITHUB_TOKEN is not set" in caplog.text
    assert "ENVIRONMENT is not set" not in caplog.text
