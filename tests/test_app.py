"""Health, readiness and startup loading."""

from fastapi.testclient import TestClient

from app.config import settings
from app.main import app
from app.modules.content.fetcher import ContentFetcher
from app.modules.workshops.service import WorkshopRegistry


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_ready_without_workshops_urls(monkeypatch):
    monkeypatch.setattr(app.state, "workshop_registry", WorkshopRegistry())
    response = TestClient(app).get("/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready", "workshops": 0}


def test_not_ready_when_nothing_loaded(monkeypatch):
    monkeypatch.setattr(settings, "workshops_urls", "https://labs.example.com/w.yml")
    monkeypatch.setattr(app.state, "workshop_registry", WorkshopRegistry(failed_urls=["https://labs.example.com/w.yml"]))
    response = TestClient(app).get("/ready")
    assert response.status_code == 503
    assert response.json()["failed_urls"] == ["https://labs.example.com/w.yml"]


def test_startup_loads_workshops(content_dir, monkeypatch):
    good = str(content_dir / "spring-boot-config.yml")
    missing = str(content_dir / "missing.yml")
    monkeypatch.setattr(settings, "workshops_urls", f"{good},{missing}")
    monkeypatch.setattr(app.state, "fetcher", ContentFetcher(cache_ttl_seconds=0))
    monkeypatch.setattr(app.state, "workshop_registry", WorkshopRegistry())

    with TestClient(app) as client:
        assert client.get("/ready").json() == {"status": "ready", "workshops": 1}
        assert [w["id"] for w in client.get("/api/v1/workshops").json()] == ["spring-boot-config"]
        page = client.get("/workshop/spring-boot-config/lab/README")
        assert "Project coolstore" in page.text

    assert app.state.workshop_registry.failed_urls == [missing]
