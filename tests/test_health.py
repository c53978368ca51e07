# =============================================================================
# tests/test_health.py - Health Check Tests
# =============================================================================

from unittest.mock import AsyncMock, patch


def test_root(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["name"] == "DevTree API"


def test_health(client):
    response = client.get("/api/v1/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_ready(client):
    with patch("app.routers.health.ping_db", new=AsyncMock(return_value=True)):
        response = client.get("/api/v1/health/ready")

    assert response.json()["status"] == "ready"


def test_degraded_when_database_down(client):
    with patch("app.routers.health.ping_db", new=AsyncMock(side_effect=ConnectionError("refused"))):
        response = client.get("/api/v1/health/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"


def test_run_serves_configured_host_and_port():
    from app import main
    from app.config import settings

    with patch("app.main.uvicorn.run") as serve:
        main.run()

    serve.assert_called_once_with(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development,
    )
