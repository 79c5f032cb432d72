import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.core.dependencies import get_fetcher, get_workshop_registry
from app.main import app
from app.modules.content.fetcher import ContentFetcher
from app.modules.workshops.service import WorkshopRegistry, parse_workshop_definition

WORKSHOP_YAML = """\
id: spring-boot-config
name: Externalized Configuration
description: Spring Boot ConfigMaps on OpenShift
vars:
  PROJECT: coolstore
modules:
  - id: README
    name: Getting Started
  - id: config-management
    name: Managing Application Configuration
    vars:
      DB_SERVICE: inventory-postgresql
"""

README_LAB = """\
# Getting Started

Project {{ PROJECT }} on {{ UNKNOWN_VALUE }}.
"""

CONFIG_LAB = """\
# Managing Application Configuration

Log in to {{ MASTER_URL }} as user{{ GUID }} and open {{ DB_SERVICE }}.

![architecture]({% image_path config-arch.png %})

{% if JAVA_APP %}Run the Java app.{% else %}Run the Node app.{% endif %}
"""


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Pin every setting the renderer reads so the host environment does not leak in."""
    monkeypatch.setattr(settings, "workshops_urls", "")
    monkeypatch.setattr(settings, "content_url_prefix", None)
    monkeypatch.setattr(settings, "default_workshop", None)
    monkeypatch.setattr(settings, "java_app", False)
    monkeypatch.setattr(settings, "openshift_master", "https://master.example.com:8443")
    monkeypatch.setattr(settings, "guid", None)
    monkeypatch.setattr(settings, "template_vars", {})
    monkeypatch.setattr(settings, "environment", "development")
    yield


@pytest.fixture
def content_dir(tmp_path):
    (tmp_path / "spring-boot-config.yml").write_text(WORKSHOP_YAML, encoding="utf-8")
    (tmp_path / "README.md").write_text(README_LAB, encoding="utf-8")
    (tmp_path / "config-management.md").write_text(CONFIG_LAB, encoding="utf-8")
    return tmp_path


@pytest.fixture
def registry(content_dir):
    source = str(content_dir / "spring-boot-config.yml")
    workshop = parse_workshop_definition(WORKSHOP_YAML, source_url=source)
    return WorkshopRegistry([workshop])


@pytest.fixture
def client(registry):
    fetcher = ContentFetcher(cache_ttl_seconds=0)
    app.dependency_overrides[get_workshop_registry] = lambda: registry
    app.dependency_overrides[get_fetcher] = lambda: fetcher
    yield TestClient(app)
    app.dependency_overrides.clear()
