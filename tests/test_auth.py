"""
Tests for token handling, login and registration.
"""

from starlette.requests import Request

from storeadmin.auth import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    token_from_request,
    verify_password,
)
from storeadmin.models import User


def test_token_roundtrip():
    payload = decode_access_token(create_access_token({"sub": "admin@example.com"}))
    assert payload["sub"] == "admin@example.com"
    assert "exp" in payload


def test_expired_token_rejected():
    assert decode_access_token(create_access_token({"sub": "a@example.com"}, expires_minutes=-1)) is None


def test_garbage_token_rejected():
    assert decode_access_token("not.a.token") is None


def test_password_hash_verifies():
    hashed = get_password_hash("correct horse")
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_unknown_hash_format_fails_closed():
    assert verify_password("anything", "plaintext-not-a-hash") is False


class TestLogin:

    def test_login_sets_cookie(self, client, user_store):
        user_store.users.append(User(
            id=3, email="owner@example.com", full_name="Owner",
            password_hash=get_password_hash("s3cret-pass"), is_admin=True,
        ))

        response = client.post("/api/auth/login", json={"email": "owner@example.com", "password": "s3cret-pass"})

        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert decode_access_token(body["access_token"])["sub"] == "owner@example.com"
        assert "vf_token" in response.cookies

    def test_login_then_open_dashboard_page(self, client, user_store):
        user_store.users.append(User(
            id=3, email="owner@example.com", full_name="Owner",
            password_hash=get_password_hash("s3cret-pass"), is_admin=True,
        ))
        client.post("/api/auth/login", json={"email": "owner@example.com", "password": "s3cret-pass"})

        assert client.get("/dashboard", follow_redirects=False).status_code == 200

    def test_wrong_password(self, client, user_store):
        user_store.users.append(User(
            id=3, email="owner@example.com", full_name="Owner",
            password_hash=get_password_hash("s3cret-pass"), is_admin=True,
        ))
        response = client.post("/api/auth/login", json={"email": "owner@example.com", "password": "nope"})
        assert response.status_code == 401

    def test_unknown_user(self, client):
        response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "whatever1"})
        assert response.status_code == 401

    def test_logout_clears_cookie(self, client, admin_token):
        client.cookies.set("vf_token", admin_token)
        response = client.post("/api/auth/logout")
        assert response.status_code == 204
        assert 'vf_token=""' in response.headers["set-cookie"] or "Max-Age=0" in response.headers["set-cookie"]


class TestRegistration:

    def test_register(self, client, user_store):
        response = client.post(
            "/api/auth/register",
            json={"email": "new@example.com", "full_name": "New Admin", "password": "longenough"},
        )

        assert response.status_code == 201
        assert response.json()["email"] == "new@example.com"
        assert "password" not in response.json()
        assert user_store.users[-1].email == "new@example.com"

    def test_register_duplicate(self, client, admin_user):
        response = client.post(
            "/api/auth/register",
            json={"email": admin_user.email, "full_name": "Again", "password": "longenough"},
        )
        assert response.status_code == 400

    def test_register_short_password(self, client):
        response = client.post(
            "/api/auth/register",
            json={"email": "short@example.com", "full_name": "Short", "password": "abc"},
        )
        assert response.status_code == 400


def test_me(client, auth_headers, admin_user):
    response = client.get("/api/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == admin_user.email


def test_token_from_request_ignores_empty_bearer():
    request = Request({"type": "http", "headers": [(b"authorization", b"Bearer ")]})
    assert token_from_request(request) is None


def test_login_store_outage(client, user_store):
    user_store.fail = True
    response = client.post("/api/auth/login", json={"email": "owner@example.com", "password": "s3cret-pass"})
    assert response.status_code == 500
    assert response.json() == "Internal server error"
