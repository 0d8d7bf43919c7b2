from __future__ import annotations

from uuid import uuid4

import pytest

from auth import security


def _signup(client, *, name="A", email="a@x.com", password="p"):
    return client.post("/signup", json={"name": name, "email": email, "password": password})


def _signin(client, *, email="a@x.com", password="p"):
    return client.post("/signin", json={"email": email, "password": password})


def test_signup_signin_then_admin_route_is_forbidden(client):
    resp = _signup(client)
    assert resp.status_code == 201
    assert resp.json() == {"message": "User created"}

    resp = _signin(client)
    assert resp.status_code == 200
    body = resp.json()
    assert body["user"]["email"] == "a@x.com"
    assert body["user"]["role"] == "normal"
    token = body["token"]

    resp = client.get("/users", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403
    assert resp.json()["error"] == "forbidden"


def test_password_is_never_returned(client, store):
    _signup(client, password="s3cret-value")
    signin = _signin(client, password="s3cret-value").json()
    headers = {"Authorization": f"Bearer {signin['token']}"}
    me = client.get("/get-current-user", headers=headers).json()

    for payload in (signin, signin["user"], me):
        assert "password" not in payload
        assert "password_hash" not in payload
    assert "s3cret-value" not in str(signin) + str(me)

    stored = next(iter(store.users.values()))
    assert stored["password_hash"] != "s3cret-value"
    assert security.verify_password("s3cret-value", stored["password_hash"])


def test_token_is_accepted_repeatedly(client):
    _signup(client)
    token = _signin(client).json()["token"]
    headers = {"Authorization": f"Bearer {token}"}

    first = client.get("/get-current-user", headers=headers)
    second = client.get("/get-current-user", headers=headers)
    assert first.status_code == 200
    assert second.status_code == 200
    assert first.json() == second.json()
    assert first.json()["name"] == "A"


def test_signup_email_is_normalized_and_unique(client):
    assert _signup(client, email="Mixed@Example.com").status_code == 201
    resp = _signup(client, email="mixed@example.com ")
    assert resp.status_code == 409
    assert resp.json()["error"] == "conflict"

    assert _signin(client, email="MIXED@example.com").status_code == 200


@pytest.mark.parametrize(
    "payload",
    [
        {"email": "a@x.com", "password": "p"},
        {"name": "A", "password": "p"},
        {"name": "A", "email": "a@x.com"},
        {"name": "   ", "email": "a@x.com", "password": "p"},
    ],
)
def test_signup_rejects_missing_fields(client, payload):
    resp = client.post("/signup", json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"] == "validation"


def test_signin_rejects_bad_credentials(client):
    _signup(client)
    assert _signin(client, password="wrong").status_code == 401
    resp = _signin(client, email="nobody@x.com")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Invalid credentials"


def test_missing_token_is_unauthenticated(client):
    resp = client.get("/get-current-user")
    assert resp.status_code == 401
    assert resp.json() == {"message": "No token provided", "error": "unauthenticated"}


def test_non_bearer_authorization_is_unauthenticated(client):
    resp = client.get("/get-current-user", headers={"Authorization": "Basic abc"})
    assert resp.status_code == 401


def test_invalid_token_is_forbidden(client):
    resp = client.get("/get-current-user", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 403
    assert resp.json()["error"] == "forbidden"


def test_token_signed_with_other_secret_is_forbidden(client, member):
    token = security.build_access_token(user_id=member["id"], role="normal", secret="other-secret")
    resp = client.get("/get-current-user", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_expired_token_is_forbidden(client, member, settings):
    token = security.build_access_token(
        user_id=member["id"],
        role="normal",
        secret=settings.jwt_secret,
        expire_minutes=-1,
    )
    resp = client.get("/get-current-user", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403
    assert "expired" in resp.json()["message"].lower()


def test_legacy_token_header_is_accepted(client, member, member_headers):
    raw = member_headers["Authorization"].split(" ", 1)[1]
    resp = client.get("/get-current-user", headers={"token": raw})
    assert resp.status_code == 200
    assert resp.json()["id"] == str(member["id"])


def test_current_user_gone_is_unauthenticated(client, store, member, member_headers):
    store.users.pop(member["id"])
    resp = client.get("/get-current-user", headers=member_headers)
    assert resp.status_code == 401


def test_logout_is_stateless(client, member_headers):
    resp = client.post("/logout", headers=member_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Logout successful", "token": None}

    assert client.get("/get-current-user", headers=member_headers).status_code == 200


def test_logout_requires_token(client):
    assert client.post("/logout").status_code == 401


def test_hash_and_verify_password():
    hashed = security.hash_password("hunter2")
    assert hashed != "hunter2"
    assert security.verify_password("hunter2", hashed)
    assert not security.verify_password("hunter3", hashed)
    assert not security.verify_password("hunter2", "not-a-bcrypt-hash")
    assert not security.verify_password("", hashed)


def test_hash_password_rejects_empty():
    with pytest.raises(security.AuthSecurityError):
        security.hash_password("")


def test_token_round_trip_yields_principal():
    user_id = uuid4()
    token = security.build_access_token(user_id=user_id, role="admin", secret="k")
    principal = security.principal_from_payload(security.decode_access_token(token, secret="k"))
    assert principal == security.Principal(id=user_id, role="admin")
    assert principal.is_admin


@pytest.mark.parametrize(
    "payload",
    [
        {"sub": "not-a-uuid", "role": "normal"},
        {"sub": str(uuid4()), "role": "superuser"},
        {"sub": str(uuid4())},
    ],
)
def test_principal_rejects_bad_claims(payload):
    with pytest.raises(security.AuthSecurityError):
        security.principal_from_payload(payload)
