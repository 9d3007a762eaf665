from conftest import make_project, register


def test_create_and_list_mine(client, alice, bob):
    p1 = make_project(client, alice["headers"], "First")
    p2 = make_project(client, alice["headers"], "Second")
    make_project(client, bob["headers"], "Bob's")
    assert p1["owner_id"] == alice["id"]
    assert p1["status"] == "Draft"
    assert p1["collaborators"] == []

    listed = client.get("/api/projects", headers=alice["headers"]).json()
    assert {p["id"] for p in listed} == {p1["id"], p2["id"]}
    # most recently updated first
    client.patch(f"/api/projects/{p1['id']}", json={"description": "touched"}, headers=alice["headers"])
    listed = client.get("/api/projects", headers=alice["headers"]).json()
    assert listed[0]["id"] == p1["id"]


def test_owner_id_cannot_be_spoofed(client, alice, bob):
    r = client.post(
        "/api/projects",
        json={"title": "Mine", "genre": "mystery", "target_audience": "adult", "narrative_type": "Novel", "owner_id": bob["id"]},
        headers=alice["headers"],
    )
    assert r.json()["owner_id"] == alice["id"]


def test_access_levels(client, alice, bob, project):
    pid = project["id"]
    carol = register(client, "carol")
    stranger = register(client, "stranger")

    assert client.get(f"/api/projects/{pid}", headers=bob["headers"]).status_code == 403

    r = client.post(f"/api/projects/{pid}/collaborators", json={"user_id": bob["id"], "role": "Editor"}, headers=alice["headers"])
    assert r.status_code == 201
    r = client.post(f"/api/projects/{pid}/collaborators", json={"user_id": carol["id"]}, headers=alice["headers"])
    assert r.json()[-1]["role"] == "Viewer"

    # editor: read and write, not owner actions
    assert client.get(f"/api/projects/{pid}", headers=bob["headers"]).status_code == 200
    assert client.patch(f"/api/projects/{pid}", json={"title": "Edited"}, headers=bob["headers"]).status_code == 200
    assert client.delete(f"/api/projects/{pid}", headers=bob["headers"]).status_code == 403
    r = client.post(f"/api/projects/{pid}/collaborators", json={"user_id": stranger["id"]}, headers=bob["headers"])
    assert r.status_code == 403

    # viewer: read only
    assert client.get(f"/api/projects/{pid}", headers=carol["headers"]).status_code == 200
    r = client.patch(f"/api/projects/{pid}", json={"title": "Nope"}, headers=carol["headers"])
    assert r.status_code == 403
    assert r.json()["error"]["code"] == "FORBIDDEN"
    r = client.post(f"/api/projects/{pid}/characters", json={"name": "Ghost"}, headers=carol["headers"])
    assert r.status_code == 403

    # stranger: nothing
    assert client.get(f"/api/projects/{pid}/chapters", headers=stranger["headers"]).status_code == 403
    # collaborator projects show up in list-mine
    assert pid in {p["id"] for p in client.get("/api/projects", headers=carol["headers"]).json()}


def test_missing_project_and_anonymous(client, alice):
    assert client.get("/api/projects/0123456789abcdef0123456789abcdef", headers=alice["headers"]).status_code == 404
    assert client.get("/api/projects/not-an-id", headers=alice["headers"]).status_code == 404
    assert client.get("/api/projects/not-an-id").status_code == 401


def test_collaborator_rules(client, alice, bob, project):
    pid = project["id"]
    url = f"/api/projects/{pid}/collaborators"
    assert client.post(url, json={"user_id": alice["id"]}, headers=alice["headers"]).status_code == 400
    assert client.post(url, json={"user_id": "0123456789abcdef0123456789abcdef"}, headers=alice["headers"]).status_code == 404
    assert client.post(url, json={"user_id": bob["id"]}, headers=alice["headers"]).status_code == 201
    assert client.post(url, json={"user_id": bob["id"], "role": "Editor"}, headers=alice["headers"]).status_code == 409

    r = client.patch(f"{url}/{bob['id']}", json={"role": "Contributor"}, headers=alice["headers"])
    assert r.status_code == 200
    assert r.json() == [{"user_id": bob["id"], "role": "Contributor", "added_at": r.json()[0]["added_at"]}]
    # contributors may read but not write
    assert client.patch(f"/api/projects/{pid}", json={"title": "x"}, headers=bob["headers"]).status_code == 403

    assert client.delete(f"{url}/{bob['id']}", headers=alice["headers"]).json() == []
    assert client.delete(f"{url}/{bob['id']}", headers=alice["headers"]).status_code == 404
    assert client.patch(f"{url}/{bob['id']}", json={"role": "Editor"}, headers=alice["headers"]).status_code == 404


def test_update_merges_nested_metadata(client, alice, project):
    pid = project["id"]
    r = client.patch(f"/api/projects/{pid}", json={"target_length": {"value": 40000}}, headers=alice["headers"])
    assert r.status_code == 200
    assert r.json()["target_length"] == {"type": "Words", "value": 40000}
    assert r.json()["title"] == project["title"]
    r = client.patch(f"/api/projects/{pid}", json={"status": "Finished"}, headers=alice["headers"])
    assert r.status_code == 400


def test_delete_cascades_to_children(client, alice, project, store):
    pid = project["id"]
    h = alice["headers"]
    client.post(f"/api/projects/{pid}/characters", json={"name": "Mira"}, headers=h)
    client.post(f"/api/projects/{pid}/chapters", json={"title": "One", "content": "words here"}, headers=h)
    client.post(f"/api/projects/{pid}/settings", json={"name": "Harbor", "type": "Location"}, headers=h)
    client.post(f"/api/projects/{pid}/objects", json={"name": "Compass", "type": "Tool"}, headers=h)
    client.post(f"/api/projects/{pid}/exports", json={"name": "Draft", "format": "pdf"}, headers=h)
    other = make_project(client, h, "Keep me")
    client.post(f"/api/projects/{other['id']}/characters", json={"name": "Stays"}, headers=h)

    r = client.delete(f"/api/projects/{pid}", headers=h)
    assert r.json() == {"success": True, "id": pid}
    assert client.get(f"/api/projects/{pid}", headers=h).status_code == 404
    for collection in ("characters", "chapters", "settings", "objects", "exports", "export_jobs"):
        assert store.count(collection, {"project_id": pid}) == 0
    assert store.count("characters", {"project_id": other["id"]}) == 1
