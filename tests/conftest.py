from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from storyforge.config import Settings
from storyforge.main import create_app
from storyforge.storage.doc_store import DocStore


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        data_dir=tmp_path / "data",
        token_secret="test-secret",
        expose_reset_tokens=True,
        ai_provider="mock",
        export_worker_enabled=False,
        export_delay_s=0,
        store_connect_attempts=1,
    )


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def services(app):
    return app.state.services


@pytest.fixture
def store(services) -> DocStore:
    return services.store


def register(client: TestClient, name: str, password: str = "password123") -> dict:
    r = client.post(
        "/api/auth/register",
        json={"username": name, "email": f"{name}@example.com", "password": password, "first_name": name.title()},
    )
    assert r.status_code == 201, r.text
    body = r.json()
    return {"id": body["user"]["id"], "token": body["token"], "headers": {"Authorization": f"Bearer {body['token']}"}}


def make_project(client: TestClient, headers: dict, title: str = "The Lost Map") -> dict:
    r = client.post(
        "/api/projects",
        json={"title": title, "genre": "fantasy", "target_audience": "middle grade", "narrative_type": "Novel"},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def alice(client: TestClient) -> dict:
    return register(client, "alice")


@pytest.fixture
def bob(client: TestClient) -> dict:
    return register(client, "bob")


@pytest.fixture
def project(client: TestClient, alice: dict) -> dict:
    return make_project(client, alice["headers"])
