import pytest

from conftest import make_project

VOLATILE = {"updated_at", "edits"}

CHILDREN = [
    ("characters", {"name": "Mira", "role": "Protagonist", "attributes": {"physical": {"height": "tall"}, "motivation": "Find home"}}),
    ("plots", {"title": "Heist", "description": "Steal the map back", "type": "Main Plot", "elements": [{"type": "Setup", "description": "Meet the crew"}]}),
    ("chapters", {"title": "Opening", "content": "It was a dark night", "synopsis": "Start"}),
    ("settings", {"name": "Harbor", "type": "Location", "details": {"climate": "foggy"}}),
    ("objects", {"name": "Compass", "type": "Tool", "properties": {"physical": {"material": "brass"}}}),
]


def _stable(doc):
    return {k: v for k, v in doc.items() if k not in VOLATILE}


def test_empty_patch_leaves_project_unchanged(client, alice):
    h = alice["headers"]
    before = make_project(client, h)
    r = client.patch(f"/api/projects/{before['id']}", json={}, headers=h)
    assert r.status_code == 200
    assert _stable(r.json()) == _stable(before)
    assert _stable(client.get(f"/api/projects/{before['id']}", headers=h).json()) == _stable(before)


@pytest.mark.parametrize("collection,body", CHILDREN, ids=[c for c, _ in CHILDREN])
def test_empty_patch_leaves_record_unchanged(client, alice, project, collection, body):
    h = alice["headers"]
    base = f"/api/projects/{project['id']}/{collection}"
    created = client.post(base, json=body, headers=h)
    assert created.status_code == 201
    before = created.json()

    r = client.patch(f"{base}/{before['id']}", json={}, headers=h)
    assert r.status_code == 200
    assert _stable(r.json()) == _stable(before)
    assert _stable(client.get(f"{base}/{before['id']}", headers=h).json()) == _stable(before)
