from conftest import register


def test_writing_session_end_to_end(client, services):
    owner = register(client, "author")
    editor = register(client, "coauthor")
    h = owner["headers"]

    pid = client.post(
        "/api/projects",
        json={"title": "Sky Harbor", "genre": "science fiction", "target_audience": "young adult", "narrative_type": "Novel"},
        headers=h,
    ).json()["id"]
    client.post(f"/api/projects/{pid}/collaborators", json={"user_id": editor["id"], "role": "Editor"}, headers=h)

    hero = client.post(f"/api/projects/{pid}/characters", json={"name": "Tess", "role": "Protagonist"}, headers=editor["headers"]).json()
    rival = client.post(f"/api/projects/{pid}/characters", json={"name": "Voss", "role": "Antagonist"}, headers=h).json()
    client.post(
        f"/api/projects/{pid}/characters/{hero['id']}/relationships",
        json={"character_id": rival["id"], "relationship_type": "Enemy", "relationship_status": "Hostile"},
        headers=h,
    )
    client.post(f"/api/projects/{pid}/settings", json={"name": "Dock Nine", "type": "Building"}, headers=h)
    plot = client.post(
        f"/api/projects/{pid}/plots",
        json={"title": "Escape", "description": "Tess escapes the harbor", "type": "Main Plot"},
        headers=h,
    ).json()
    client.post(f"/api/projects/{pid}/plots/{plot['id']}/points", json={"type": "Setup", "description": "Tess at work"}, headers=h)

    ai = client.post(
        "/api/ai/generate",
        json={"task": "chapter", "project_id": pid, "title": "Departure", "characters_present": ["Tess"]},
        headers=editor["headers"],
    ).json()
    chapter = client.post(
        f"/api/projects/{pid}/chapters",
        json={"title": "Departure", "content": ai["content"], "ai_generated": {"is_generated": True, "model": ai["metadata"]["model"]}},
        headers=editor["headers"],
    ).json()
    assert chapter["word_count"] == len(ai["content"].split())
    client.put(f"/api/projects/{pid}/chapters/{chapter['id']}/content", json={"content": "Tess ran."}, headers=h)

    export = client.post(f"/api/projects/{pid}/exports", json={"name": "Draft 1", "format": "pdf"}, headers=h).json()
    services.worker.run_once()
    link = client.post(f"/api/projects/{pid}/exports/{export['id']}/download", headers=editor["headers"]).json()
    assert link["url"].endswith(f"{export['id']}.pdf")

    assert client.delete(f"/api/projects/{pid}", headers=editor["headers"]).status_code == 403
    assert client.delete(f"/api/projects/{pid}", headers=h).status_code == 200
    assert client.get("/api/projects", headers=editor["headers"]).json() == []
