import pytest


@pytest.fixture
def base(project):
    return f"/api/projects/{project['id']}"


def _chapter(client, base, headers, title, **extra):
    r = client.post(f"{base}/chapters", json={"title": title, **extra}, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_plot_points_ordering(client, alice, base):
    h = alice["headers"]
    r = client.post(
        f"{base}/plots",
        json={
            "title": "Main",
            "description": "The quest",
            "type": "Main Plot",
            "elements": [
                {"type": "Climax", "description": "Battle", "order": 5},
                {"type": "Setup", "description": "Village"},
            ],
        },
        headers=h,
    )
    assert r.status_code == 201
    plot = r.json()
    assert plot["importance"] == 3
    assert plot["structure"] == "Three-Act"
    assert [(e["description"], e["order"]) for e in plot["elements"]] == [("Battle", 5), ("Village", 6)]
    points = f"{base}/plots/{plot['id']}/points"

    r = client.post(points, json={"type": "Inciting Incident", "description": "Letter arrives", "order": 1}, headers=h)
    assert [e["description"] for e in r.json()["elements"]] == ["Letter arrives", "Battle", "Village"]
    r = client.post(points, json={"type": "Resolution", "description": "Home"}, headers=h)
    assert r.json()["elements"][-1]["order"] == 7

    ids = {e["description"]: e["id"] for e in r.json()["elements"]}
    r = client.post(
        f"{points}/reorder",
        json={"points": [{"id": ids["Village"], "order": 0}, {"id": ids["Battle"], "order": 8}]},
        headers=h,
    )
    assert r.status_code == 200
    assert [e["description"] for e in r.json()["elements"]] == ["Village", "Letter arrives", "Home", "Battle"]

    dup = client.post(
        f"{points}/reorder",
        json={"points": [{"id": ids["Village"], "order": 1}, {"id": ids["Village"], "order": 2}]},
        headers=h,
    )
    assert dup.status_code == 400
    unknown = client.post(
        f"{points}/reorder",
        json={"points": [{"id": ids["Village"], "order": 3}, {"id": "nope", "order": 4}]},
        headers=h,
    )
    assert unknown.status_code == 404
    # nothing moved by the failed reorder
    assert client.get(f"{base}/plots/{plot['id']}", headers=h).json()["elements"][0]["order"] == 0

    r = client.patch(f"{points}/{ids['Home']}", json={"description": "Homecoming"}, headers=h)
    assert any(e["description"] == "Homecoming" for e in r.json()["elements"])
    r = client.delete(f"{points}/{ids['Home']}", headers=h)
    assert len(r.json()["elements"]) == 3
    assert client.delete(f"{points}/{ids['Home']}", headers=h).status_code == 404


def test_plot_validation(client, alice, base):
    r = client.post(f"{base}/plots", json={"title": "x", "description": "y", "type": "Main Plot", "importance": 9}, headers=alice["headers"])
    assert r.status_code == 400
    assert "importance" in r.json()["error"]["fields"]


def test_chapter_positions_and_word_count(client, alice, base):
    h = alice["headers"]
    one = _chapter(client, base, h, "One", content="It was a dark night")
    two = _chapter(client, base, h, "Two")
    assert (one["position"], two["position"]) == (0, 1)
    assert one["word_count"] == 5
    assert one["edits"] == []

    r = client.post(f"{base}/chapters", json={"title": "Clash", "position": 1}, headers=h)
    assert r.status_code == 409

    r = client.put(f"{base}/chapters/{two['id']}/content", json={"content": "a  b\tc"}, headers=h)
    assert r.json()["word_count"] == 3
    assert r.json()["edits"][-1]["changes"] == "Updated chapter content"
    assert r.json()["edits"][-1]["user_id"] == alice["id"]

    r = client.patch(f"{base}/chapters/{two['id']}", json={"synopsis": "Things happen", "content": ""}, headers=h)
    assert r.json()["word_count"] == 0
    assert r.json()["edits"][-1]["changes"] == "Updated chapter metadata"
    assert client.patch(f"{base}/chapters/{two['id']}", json={"position": 0}, headers=h).status_code == 409

    r = client.post(f"{base}/chapters/{one['id']}/edits", json={"changes": "Proofread"}, headers=h)
    assert r.status_code == 201
    assert [e["changes"] for e in r.json()["edits"]] == ["Proofread"]


def test_chapter_reorder_is_all_or_nothing(client, alice, base):
    h = alice["headers"]
    one = _chapter(client, base, h, "One")
    two = _chapter(client, base, h, "Two")
    three = _chapter(client, base, h, "Three")

    r = client.post(
        f"{base}/chapters/reorder",
        json={"chapters": [{"id": one["id"], "position": 2}, {"id": three["id"], "position": 0}]},
        headers=h,
    )
    assert r.status_code == 200
    assert [c["title"] for c in r.json()] == ["Three", "Two", "One"]

    # would collide with "Two" at position 1
    r = client.post(f"{base}/chapters/reorder", json={"chapters": [{"id": one["id"], "position": 1}]}, headers=h)
    assert r.status_code == 409
    listed = client.get(f"{base}/chapters", headers=h).json()
    assert [c["title"] for c in listed] == ["Three", "Two", "One"]

    r = client.post(
        f"{base}/chapters/reorder",
        json={"chapters": [{"id": one["id"], "position": 5}, {"id": one["id"], "position": 6}]},
        headers=h,
    )
    assert r.status_code == 400
    assert client.post(f"{base}/chapters/reorder", json={"chapters": []}, headers=h).status_code == 400
    assert two["position"] == 1


def test_chapter_delete_compacts_positions(client, alice, base):
    h = alice["headers"]
    one = _chapter(client, base, h, "One")
    _chapter(client, base, h, "Two")
    _chapter(client, base, h, "Three")
    client.delete(f"{base}/chapters/{one['id']}", headers=h)
    listed = client.get(f"{base}/chapters", headers=h).json()
    assert [(c["title"], c["position"]) for c in listed] == [("Two", 0), ("Three", 1)]
    assert _chapter(client, base, h, "Four")["position"] == 2
