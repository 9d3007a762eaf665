import asyncio
import json
import threading

import httpx
import pytest
from fastapi.testclient import TestClient

from conftest import make_project, register
from storyforge.context import RequestContext
from storyforge.main import create_app
from storyforge.schemas.ai import CharacterRequest
from storyforge.services.llm_gateway import LLMError, LLMGateway


@pytest.fixture
def base(project):
    return f"/api/projects/{project['id']}"


def test_generate_with_mock_provider(client, alice, project, base):
    h = alice["headers"]
    r = client.post(
        "/api/ai/generate",
        json={"task": "character", "project_id": project["id"], "name": "Mira", "key_traits": ["curious"]},
        headers=h,
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["content"].startswith("Mock response: ")
    assert "Mira" in body["content"]
    assert body["metadata"]["model"] == "mock-gpt-4"
    usage = body["metadata"]["token_usage"]
    assert usage["total"] == usage["prompt"] + usage["completion"]

    stored = client.get(f"/api/ai/generations/{body['id']}", headers=h).json()
    assert stored["task"] == "character"
    assert stored["user_id"] == alice["id"]
    assert stored["is_saved"] is False
    assert stored["request_params"]["name"] == "Mira"


def test_task_specific_endpoints_and_listing(client, alice, project, base):
    h = alice["headers"]
    pid = project["id"]
    plot = client.post("/api/ai/plot", json={"project_id": pid, "conflict_type": "person vs nature"}, headers=h).json()
    character = client.post("/api/ai/character", json={"project_id": pid, "role": "mentor"}, headers=h).json()
    chapter = client.post("/api/ai/generate", json={"task": "chapter", "project_id": pid, "parent_id": plot["id"]}, headers=h)
    assert chapter.status_code == 200

    listed = client.get(f"{base}/ai/generations", headers=h).json()
    assert [g["id"] for g in listed][:2] == [chapter.json()["id"], character["id"]]
    assert listed[0]["parent_id"] == plot["id"]

    assert client.post(f"/api/ai/generations/{plot['id']}/save", headers=h).json()["is_saved"] is True
    assert [g["id"] for g in client.get(f"{base}/ai/generations?saved_only=true", headers=h).json()] == [plot["id"]]
    assert client.post(f"/api/ai/generations/{plot['id']}/toggle-saved", headers=h).json()["is_saved"] is False
    assert client.post(f"/api/ai/generations/{plot['id']}/toggle-saved", headers=h).json()["is_saved"] is True

    assert client.delete(f"/api/ai/generations/{character['id']}", headers=h).json()["success"] is True
    assert client.get(f"/api/ai/generations/{character['id']}", headers=h).status_code == 404


def test_generation_rules(client, alice, bob, project):
    pid = project["id"]
    h = alice["headers"]
    assert client.post("/api/ai/generate", json={"task": "character", "project_id": pid}).status_code == 401
    assert client.post("/api/ai/generate", json={"task": "character", "project_id": pid}, headers=bob["headers"]).status_code == 403
    assert client.post("/api/ai/generate", json={"task": "poem", "project_id": pid}, headers=h).status_code == 400
    r = client.post("/api/ai/generate", json={"task": "editorial", "project_id": pid}, headers=h)
    assert r.status_code == 400
    r = client.post(
        "/api/ai/generate",
        json={"task": "setting", "project_id": pid, "parent_id": "0123456789abcdef0123456789abcdef"},
        headers=h,
    )
    assert r.status_code == 404


def test_image_generation_mock(client, alice, project):
    r = client.post("/api/ai/image", json={"project_id": project["id"], "prompt": "A lighthouse at dusk", "size": "512x512"}, headers=alice["headers"])
    assert r.status_code == 200
    assert r.json()["url"].startswith("https://placeholder.url/ai-images/")
    assert r.json()["url"].endswith("-512x512.png")


def _openai_handler(request: httpx.Request) -> httpx.Response:
    payload = json.loads(request.content)
    assert request.headers["Authorization"] == "Bearer sk-test"
    if request.url.path == "/v1/chat/completions":
        assert payload["temperature"] == 0.6
        assert payload["max_tokens"] == 800
        assert payload["messages"][0]["role"] == "system"
        return httpx.Response(
            200,
            json={
                "model": "gpt-4-0613",
                "choices": [{"message": {"role": "assistant", "content": "A storm gathers."}}],
                "usage": {"prompt_tokens": 40, "completion_tokens": 5, "total_tokens": 45},
            },
        )
    if request.url.path == "/v1/images/generations":
        return httpx.Response(200, json={"data": [{"url": "https://img.example/1.png"}]})
    return httpx.Response(404)


def _compat_gateway(handler) -> LLMGateway:
    return LLMGateway(
        provider="openai_compat",
        base_url="https://llm.example",
        api_key="sk-test",
        transport=httpx.MockTransport(handler),
    )


def test_openai_compatible_provider(settings):
    app = create_app(settings, gateway=_compat_gateway(_openai_handler))
    client = TestClient(app)
    user = register(client, "ivy")
    pid = make_project(client, user["headers"])["id"]
    r = client.post("/api/ai/plot", json={"project_id": pid}, headers=user["headers"])
    assert r.status_code == 200, r.text
    assert r.json()["content"] == "A storm gathers."
    assert r.json()["metadata"]["model"] == "gpt-4-0613"
    assert r.json()["metadata"]["token_usage"] == {"prompt": 40, "completion": 5, "total": 45}

    r = client.post("/api/ai/image", json={"project_id": pid, "prompt": "storm"}, headers=user["headers"])
    assert r.json()["url"] == "https://img.example/1.png"


def test_provider_failure_maps_to_internal_error(settings):
    gateway = _compat_gateway(lambda request: httpx.Response(503, json={"error": "overloaded"}))
    client = TestClient(create_app(settings, gateway=gateway))
    user = register(client, "jay")
    pid = make_project(client, user["headers"])["id"]
    r = client.post("/api/ai/generate", json={"task": "setting", "project_id": pid}, headers=user["headers"])
    assert r.status_code == 500
    err = r.json()["error"]
    assert err["code"] == "INTERNAL_SERVER_ERROR"
    assert err["message"] == "Failed to generate AI content"
    assert "503" in err["cause"]
    listed = client.get(f"/api/projects/{pid}/ai/generations", headers=user["headers"]).json()
    assert listed == []


def test_gateway_rejects_unknown_provider():
    gateway = LLMGateway(provider="carrier-pigeon")
    with pytest.raises(LLMError):
        asyncio.run(gateway.chat_complete([{"role": "user", "content": "hi"}], 0.5, 10))


def test_generation_store_work_runs_off_the_event_loop(services, alice, project, monkeypatch):
    ai = services.ai
    loop_threads, store_threads = set(), set()

    real_chat = ai.gateway.chat_complete
    real_authorize = ai._authorize
    real_insert = ai.store.insert

    async def chat(*args, **kwargs):
        loop_threads.add(threading.get_ident())
        return await real_chat(*args, **kwargs)

    def authorize(*args, **kwargs):
        store_threads.add(threading.get_ident())
        return real_authorize(*args, **kwargs)

    def insert(*args, **kwargs):
        store_threads.add(threading.get_ident())
        return real_insert(*args, **kwargs)

    monkeypatch.setattr(ai.gateway, "chat_complete", chat)
    monkeypatch.setattr(ai, "_authorize", authorize)
    monkeypatch.setattr(ai.store, "insert", insert)

    ctx = RequestContext(alice["id"])
    out = asyncio.run(ai.generate_content(ctx, CharacterRequest(project_id=project["id"], name="Mira")))
    assert "Mira" in out["content"]
    assert loop_threads and store_threads
    assert not loop_threads & store_threads
