"""Register, login, refresh rotation and logout against the real app."""


def _register(client, login="newbie", password="longenough1"):
    return client.post(
        "/api/auth/register",
        json={"login": login, "email": f"{login}@example.com", "password": password},
    )


def test_register_sets_default_role_and_session(client):
    res = _register(client)

    assert res.status_code == 201
    body = res.json()
    assert body["user"]["roles"] == ["subscriber"]
    assert body["token_type"] == "bearer"
    assert "cms_access" in res.cookies
    assert "password_hash" not in body["user"]


def test_register_rejects_short_password_and_duplicates(client):
    short = _register(client, password="short")
    assert short.status_code == 400
    assert short.json()["detail"]["error"] == "validation_failed"

    assert _register(client).status_code == 201
    dup = _register(client)
    assert dup.status_code == 409


def test_login_by_login_or_email(client, make_user):
    make_user("alice", "editor")

    by_login = client.post("/api/auth/login", json={"identifier": "alice", "password": "password123"})
    by_email = client.post(
        "/api/auth/login", json={"identifier": "ALICE@example.com", "password": "password123"}
    )

    assert by_login.status_code == 200
    assert by_email.status_code == 200
    assert by_login.json()["user"]["roles"] == ["editor"]


def test_login_failures(client, make_user):
    make_user("bob", "author")
    make_user("carol", "author", status="disabled")

    wrong = client.post("/api/auth/login", json={"identifier": "bob", "password": "nope"})
    assert wrong.status_code == 401
    assert wrong.json()["detail"]["error"] == "invalid_credentials"

    unknown = client.post("/api/auth/login", json={"identifier": "nobody", "password": "x"})
    assert unknown.status_code == 401

    disabled = client.post("/api/auth/login", json={"identifier": "carol", "password": "password123"})
    assert disabled.status_code == 403
    assert disabled.json()["detail"]["error"] == "account_disabled"


def test_me_with_bearer_token(client, make_user):
    make_user("dave", "author")
    token = client.post(
        "/api/auth/login", json={"identifier": "dave", "password": "password123"}
    ).json()["access_token"]
    client.cookies.clear()

    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200
    assert res.json()["login"] == "dave"

    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer junk"}).status_code == 401


def test_me_with_session_cookie(client, make_user):
    make_user("erin", "author")
    client.post("/api/auth/login", json={"identifier": "erin", "password": "password123"})

    assert client.get("/api/auth/me").json()["login"] == "erin"


def test_refresh_rotates_and_old_token_is_rejected(client, make_user):
    make_user("frank", "author")
    first = client.post(
        "/api/auth/login", json={"identifier": "frank", "password": "password123"}
    ).json()["refresh_token"]
    client.cookies.clear()

    rotated = client.post("/api/auth/refresh", json={"refresh_token": first})
    assert rotated.status_code == 200
    second = rotated.json()["refresh_token"]
    assert second != first

    replay = client.post("/api/auth/refresh", json={"refresh_token": first})
    assert replay.status_code == 401
    assert replay.json()["detail"]["error"] == "token_revoked"

    client.cookies.clear()
    assert client.post("/api/auth/refresh", json={"refresh_token": second}).status_code == 200


def test_refresh_rejects_access_tokens_and_missing_tokens(client, make_user):
    make_user("gina", "author")
    access = client.post(
        "/api/auth/login", json={"identifier": "gina", "password": "password123"}
    ).json()["access_token"]
    client.cookies.clear()

    res = client.post("/api/auth/refresh", json={"refresh_token": access})
    assert res.status_code == 401
    assert res.json()["detail"]["error"] == "invalid_token"

    assert client.post("/api/auth/refresh", json={}).status_code == 401


def test_logout_revokes_refresh_tokens(client, make_user):
    make_user("hank", "author")
    session = client.post(
        "/api/auth/login", json={"identifier": "hank", "password": "password123"}
    ).json()
    client.cookies.clear()
    headers = {"Authorization": f"Bearer {session['access_token']}"}

    assert client.post("/api/auth/logout", headers=headers).status_code == 200

    res = client.post("/api/auth/refresh", json={"refresh_token": session["refresh_token"]})
    assert res.status_code == 401
    assert res.json()["detail"]["error"] == "token_revoked"
