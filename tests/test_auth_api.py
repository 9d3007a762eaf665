from conftest import register


def test_register_login_and_me(client):
    user = register(client, "writer1")
    r = client.post("/api/auth/login", json={"email": "WRITER1@example.com", "password": "password123"})
    assert r.status_code == 200
    body = r.json()
    assert body["user"]["username"] == "writer1"
    assert "password_hash" not in body["user"]
    assert "reset_token_hash" not in body["user"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["id"] == user["id"]
    assert me.json()["last_login"] is not None
    assert me.json()["preferences"]["theme"] == "light"


def test_duplicate_email_and_username_conflict(client):
    register(client, "dupe")
    r = client.post("/api/auth/register", json={"username": "other", "email": "dupe@example.com", "password": "password123"})
    assert r.status_code == 409
    assert r.json()["error"]["code"] == "CONFLICT"
    r = client.post("/api/auth/register", json={"username": "dupe", "email": "new@example.com", "password": "password123"})
    assert r.status_code == 409


def test_register_validation_errors_list_fields(client):
    r = client.post("/api/auth/register", json={"username": "ab", "email": "not-an-email", "password": "short"})
    assert r.status_code == 400
    err = r.json()["error"]
    assert err["code"] == "VALIDATION_ERROR"
    assert {"username", "email", "password"} <= set(err["fields"])


def test_bad_login(client):
    register(client, "carol")
    r = client.post("/api/auth/login", json={"email": "carol@example.com", "password": "wrong-password"})
    assert r.status_code == 401
    r = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "password123"})
    assert r.status_code == 401
    assert r.json()["error"]["message"] == "Invalid email or password"


def test_invalid_token_is_anonymous(client):
    r = client.get("/api/auth/me", headers={"Authorization": "Bearer not.valid"})
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "UNAUTHORIZED"
    assert client.get("/api/projects").status_code == 401


def test_refresh_and_change_password(client):
    user = register(client, "dave")
    r = client.post("/api/auth/refresh", headers=user["headers"])
    assert r.status_code == 200
    assert r.json()["token"]

    r = client.post(
        "/api/auth/change-password",
        json={"current_password": "nope-nope", "new_password": "newpassword1"},
        headers=user["headers"],
    )
    assert r.status_code == 400
    r = client.post(
        "/api/auth/change-password",
        json={"current_password": "password123", "new_password": "newpassword1"},
        headers=user["headers"],
    )
    assert r.status_code == 200
    assert client.post("/api/auth/login", json={"email": "dave@example.com", "password": "newpassword1"}).status_code == 200


def test_forgot_and_reset_password(client):
    register(client, "erin")
    unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@example.com"})
    assert unknown.status_code == 200
    assert "reset_token" not in unknown.json()

    r = client.post("/api/auth/forgot-password", json={"email": "erin@example.com"})
    assert r.status_code == 200
    token = r.json()["reset_token"]

    r = client.post("/api/auth/reset-password", json={"token": token, "password": "brand-new-pass"})
    assert r.status_code == 200
    # single use
    r = client.post("/api/auth/reset-password", json={"token": token, "password": "another-pass1"})
    assert r.status_code == 400
    assert client.post("/api/auth/login", json={"email": "erin@example.com", "password": "brand-new-pass"}).status_code == 200


def test_logout_requires_auth(client):
    user = register(client, "frank")
    assert client.post("/api/auth/logout").status_code == 401
    assert client.post("/api/auth/logout", headers=user["headers"]).json()["success"] is True


def test_profile_and_preferences(client):
    user = register(client, "gina")
    other = register(client, "hank")
    r = client.patch("/api/users/me", json={"first_name": "Georgina", "age": 14}, headers=user["headers"])
    assert r.status_code == 200
    assert r.json()["first_name"] == "Georgina"
    assert r.json()["username"] == "gina"

    r = client.patch("/api/users/me", json={"username": "hank"}, headers=user["headers"])
    assert r.status_code == 409
    r = client.patch("/api/users/me", json={"email": "HANK@example.com"}, headers=user["headers"])
    assert r.status_code == 409
    assert other["id"] != user["id"]

    r = client.patch(
        "/api/users/me/preferences",
        json={"theme": "dark", "notification_settings": {"email": False}},
        headers=user["headers"],
    )
    assert r.status_code == 200
    assert r.json() == {
        "theme": "dark",
        "font_size": 16,
        "reading_level": "middle grade",
        "notification_settings": {"email": False, "app": True},
    }
    assert client.get("/api/users/me/preferences", headers=user["headers"]).json()["theme"] == "dark"

    r = client.post(
        "/api/users/me/password",
        json={"current_password": "password123", "new_password": "password456"},
        headers=user["headers"],
    )
    assert r.status_code == 200
