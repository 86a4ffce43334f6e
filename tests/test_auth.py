"""Tests for signup, login and change-password."""

from httpx import AsyncClient
import pytest

from ratings_api.models import Role

SIGNUP = {
    "name": "Bob the Weekend Shopper",
    "email": "bob@ratings.io",
    "address": "42 Harbour Road, Leith",
    "password": "Passw0rd!",
}


@pytest.mark.asyncio
async def test_signup_creates_normal_user_with_token(client: AsyncClient):
    response = await client.post("/api/auth/signup", json=SIGNUP)
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Signup successful"
    assert body["user"]["email"] == "bob@ratings.io"
    assert body["user"]["role"] == "NORMAL_USER"
    assert "password" not in body["user"]
    assert "password_hash" not in body["user"]

    # The returned token works right away
    stores = await client.get(
        "/api/user/stores",
        headers={"Authorization": f"Bearer {body['token']}"},
    )
    assert stores.status_code == 200


@pytest.mark.asyncio
async def test_signup_ignores_requested_role(client: AsyncClient):
    response = await client.post("/api/auth/signup", json={**SIGNUP, "role": "SYSTEM_ADMIN"})
    assert response.status_code == 201
    assert response.json()["user"]["role"] == "NORMAL_USER"


@pytest.mark.asyncio
async def test_signup_address_is_optional(client: AsyncClient):
    payload = {k: v for k, v in SIGNUP.items() if k != "address"}
    response = await client.post("/api/auth/signup", json=payload)
    assert response.status_code == 201
    assert response.json()["user"]["address"] is None


@pytest.mark.asyncio
@pytest.mark.parametrize("weak", ["abcdefgh", "Abcdefgh", "Ab#1", "Abcdefghijklmn#12"])
async def test_signup_enforces_password_policy(client: AsyncClient, weak: str):
    response = await client.post("/api/auth/signup", json={**SIGNUP, "password": weak})
    assert response.status_code == 400
    assert response.json()["message"].startswith("password: Password must be 8-16 chars")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("name", "Too Short Name"),
        ("name", "x" * 61),
        ("email", "not-an-email"),
        ("address", "a" * 401),
    ],
)
async def test_signup_rejects_invalid_fields(client: AsyncClient, field: str, value: str):
    response = await client.post("/api/auth/signup", json={**SIGNUP, field: value})
    assert response.status_code == 400
    assert response.json()["message"].startswith(field)


@pytest.mark.asyncio
async def test_signup_duplicate_email_is_409(client: AsyncClient):
    first = await client.post("/api/auth/signup", json=SIGNUP)
    assert first.status_code == 201

    second = await client.post("/api/auth/signup", json={**SIGNUP, "name": "Another Bob With Same Email"})
    assert second.status_code == 409
    assert second.json() == {"message": "Email already in use"}


@pytest.mark.asyncio
async def test_login_any_role(client: AsyncClient, make_user, password: str):
    owner = await make_user(Role.STORE_OWNER, email="owner@ratings.io")
    response = await client.post(
        "/api/auth/login",
        json={"email": "owner@ratings.io", "password": password},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["user"]["id"] == owner.id
    assert body["user"]["role"] == "STORE_OWNER"

    mine = await client.get(
        "/api/owner/stores",
        headers={"Authorization": f"Bearer {body['token']}"},
    )
    assert mine.status_code == 200


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client: AsyncClient, make_user):
    await make_user(email="known@ratings.io")

    unknown = await client.post(
        "/api/auth/login",
        json={"email": "nobody@ratings.io", "password": "Whatever#1"},
    )
    wrong = await client.post(
        "/api/auth/login",
        json={"email": "known@ratings.io", "password": "Whatever#1"},
    )
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json() == {"message": "Invalid credentials"}


@pytest.mark.asyncio
async def test_change_password_then_login_with_new_one(
    client: AsyncClient, make_user, auth_headers, password: str
):
    user = await make_user(email="changer@ratings.io")
    response = await client.post(
        "/api/auth/change-password",
        json={"oldPassword": password, "newPassword": "N3w@Secret"},
        headers=auth_headers(user),
    )
    assert response.status_code == 200

    old = await client.post("/api/auth/login", json={"email": "changer@ratings.io", "password": password})
    assert old.status_code == 401
    new = await client.post("/api/auth/login", json={"email": "changer@ratings.io", "password": "N3w@Secret"})
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_change_password_wrong_old_password(client: AsyncClient, make_user, auth_headers):
    user = await make_user()
    response = await client.post(
        "/api/auth/change-password",
        json={"oldPassword": "Not#MyPass1", "newPassword": "N3w@Secret"},
        headers=auth_headers(user),
    )
    assert response.status_code == 401
    assert response.json() == {"message": "Old password is incorrect"}


@pytest.mark.asyncio
async def test_change_password_policy_applies(client: AsyncClient, make_user, auth_headers, password: str):
    user = await make_user()
    response = await client.post(
        "/api/auth/change-password",
        json={"oldPassword": password, "newPassword": "weakpass"},
        headers=auth_headers(user),
    )
    assert response.status_code == 400
    assert response.json()["message"].startswith("newPassword")


@pytest.mark.asyncio
async def test_change_password_requires_token(client: AsyncClient):
    response = await client.post(
        "/api/auth/change-password",
        json={"oldPassword": "Secret#123", "newPassword": "N3w@Secret"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_with_mixed_case_signup_email(client: AsyncClient):
    payload = {**SIGNUP, "email": "Bob.Smith@Example.COM"}
    signup = await client.post("/api/auth/signup", json=payload)
    assert signup.status_code == 201

    same = await client.post(
        "/api/auth/login",
        json={"email": "Bob.Smith@Example.COM", "password": SIGNUP["password"]},
    )
    assert same.status_code == 200
    assert same.json()["user"]["id"] == signup.json()["user"]["id"]

    lowered = await client.post(
        "/api/auth/login",
        json={"email": "bob.smith@example.com", "password": SIGNUP["password"]},
    )
    assert lowered.status_code == 200
