import pytest

from app.modules.auth.service import AuthService


def register(client, **overrides):
    payload = {"email": "new@example.com", "password": "secret123", "full_name": "New Person"}
    payload.update(overrides)
    return client.post("/api/v1/auth/register", json=payload)


def test_register_creates_principal_and_profile(client, store):
    response = register(client)
    assert response.status_code == 201
    body = response.json()
    assert body["profile"]["role"] == "member"
    assert body["profile"]["committee_id"] is None
    assert store.find("profiles", body["user_id"])["email"] == "new@example.com"


def test_register_into_existing_committee(client, store, tenants):
    response = register(client, committee_id=tenants.design)
    assert response.status_code == 201
    assert response.json()["profile"]["committee_id"] == tenants.design


def test_register_rejects_unknown_committee(client, store):
    response = register(client, committee_id="does-not-exist")
    assert response.status_code == 422
    assert "new@example.com" not in store.users_by_email


def test_admin_cannot_self_join_a_committee(client, store, tenants):
    response = register(client, role="admin", committee_id=tenants.design)
    assert response.status_code == 422
    assert "new@example.com" not in store.users_by_email


def test_duplicate_email_is_400_without_second_profile(client, store):
    assert register(client).status_code == 201
    response = register(client, full_name="Impostor")
    assert response.status_code == 400
    assert len([p for p in store.rows("profiles") if p["email"] == "new@example.com"]) == 1


def test_profile_failure_rolls_back_principal(client, store):
    store.fail("insert", "profiles")
    response = register(client)
    assert response.status_code == 500
    assert "rolled back" in response.json()["detail"]
    assert "new@example.com" not in store.users_by_email
    assert store.rows("profiles") == []


def test_failed_rollback_is_reported(client, store):
    store.fail("insert", "profiles")
    store.fail("delete_user", "auth")
    response = register(client)
    assert response.status_code == 500
    assert "could not be removed" in response.json()["detail"]


def test_login_returns_token_and_profile(client, store, tenants):
    store.add_profile(tenants.design, full_name="Erin", email="erin@example.com", password="hunter22")

    response = client.post("/api/v1/auth/login", json={"email": "erin@example.com", "password": "hunter22"})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["profile"]["committee_id"] == tenants.design

    me = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["profile"]["full_name"] == "Erin"


def test_login_with_wrong_password(client, store, tenants):
    store.add_profile(tenants.design, email="erin@example.com", password="hunter22")
    response = client.post("/api/v1/auth/login", json={"email": "erin@example.com", "password": "wrong-one"})
    assert response.status_code == 401


@pytest.mark.parametrize("message,detail", [
    ("Email not confirmed", "Email not confirmed"),
    ("User is banned", "Invalid email or password"),
    ("Request rate limit reached", "Invalid email or password"),
])
def test_every_refused_sign_in_is_unauthorized(client, store, tenants, monkeypatch, message, detail):
    def refuse(credentials):
        raise Exception(message)

    monkeypatch.setattr(store.auth, "sign_in_with_password", refuse)
    response = client.post("/api/v1/auth/login", json={"email": "erin@example.com", "password": "hunter22"})
    assert response.status_code == 401
    assert response.json()["detail"] == detail


def test_me_lists_role_permissions(client, store, tenants):
    member = client.get("/api/v1/auth/me", headers=store.headers(tenants.alice)).json()
    assert member["permissions"] == sorted(member["permissions"])
    assert "dashboard:read" in member["permissions"]
    assert "weeks:create" not in member["permissions"]

    admin = client.get("/api/v1/auth/me", headers=store.headers(tenants.admin)).json()
    assert "weeks:create" in admin["permissions"]


def test_invalid_token(client):
    response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == 401


def test_logout_is_idempotent_and_revokes(client, store, tenants):
    headers = store.headers(tenants.alice)
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 200

    assert client.post("/api/v1/auth/logout", headers=headers).status_code == 200
    assert client.post("/api/v1/auth/logout", headers=headers).status_code == 200
    assert client.get("/api/v1/auth/me", headers=headers).status_code == 401


def test_principal_without_profile_is_inconsistent(client, store):
    orphan = store.create_user("orphan@example.com", "secret123")
    response = client.get(
        "/api/v1/profiles/me", headers={"Authorization": f"Bearer {store.token_for(orphan.id)}"}
    )
    assert response.status_code == 500


def test_get_current_user_is_cached(store, tenants):
    service = AuthService(store)
    token = store.token_for(tenants.alice.id)
    assert service.get_current_user(token)["id"] == tenants.alice.id

    # served from cache even though the auth backend no longer knows the token
    store.tokens.pop(token)
    assert service.get_current_user(token)["id"] == tenants.alice.id
