"""Login, registration, token refresh, logout and status."""
import pytest
from sqlalchemy import select

from app.core.redis import RedisClient, get_redis
from app.main import app
from app.models import PersonalAccessToken
from tests.factories import create_user

AUTH = "/api/v1/auth"


class FakeRedis:
    """In-memory stand-in for the counter commands RedisClient issues."""

    def __init__(self):
        self.values: dict[str, int] = {}
        self.ttl: dict[str, int] = {}

    async def incrby(self, key, amount):
        self.values[key] = self.values.get(key, 0) + amount
        return self.values[key]

    async def expire(self, key, seconds):
        self.ttl[key] = seconds
        return True

    async def delete(self, key):
        self.values.pop(key, None)
        return 1


@pytest.fixture
def fake_redis():
    client = RedisClient()
    client.redis = FakeRedis()
    app.dependency_overrides[get_redis] = lambda: client
    yield client.redis
    app.dependency_overrides.pop(get_redis, None)


async def test_login_with_username(client, user, password):
    response = await client.post(f"{AUTH}/login", json={"username": user.username, "password": password})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    data = body["data"]
    assert data["token_type"] == "Bearer"
    assert data["expires_in"] == 24 * 60 * 60
    assert data["user"]["username"] == user.username
    assert "password" not in data["user"]

    token_id, _, secret = data["access_token"].partition("|")
    assert token_id.isdigit() and len(secret) == 40


async def test_login_with_email(client, user, password):
    response = await client.post(f"{AUTH}/login", json={"username": user.email, "password": password})

    assert response.status_code == 200


async def test_login_email_ignores_a_username_that_looks_like_it(client, db, password):
    await create_user(db, username="shared@example.com", email="first@example.com", password="other-password")
    owner = await create_user(db, username="second", email="shared@example.com")

    response = await client.post(f"{AUTH}/login", json={"username": "shared@example.com", "password": password})

    assert response.status_code == 200
    assert response.json()["data"]["user"]["id"] == owner.id


async def test_login_stores_only_token_hashes(client, db, user, password):
    data = (await client.post(f"{AUTH}/login", json={"username": user.username, "password": password})).json()["data"]

    secret = data["access_token"].partition("|")[2]
    stored = (await db.execute(select(PersonalAccessToken.token))).scalars().all()
    assert secret not in stored
    assert all(len(value) == 64 for value in stored)


async def test_login_with_wrong_password(client, user):
    response = await client.post(f"{AUTH}/login", json={"username": user.username, "password": "nope-nope"})

    assert response.status_code == 401
    body = response.json()
    assert body["error"]["code"] == "UNAUTHORIZED"
    assert body["message"] == "Invalid credentials"


async def test_login_inactive_user(client, db, password):
    inactive = await create_user(db, active=False)

    response = await client.post(f"{AUTH}/login", json={"username": inactive.username, "password": password})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "ACCESS_DENIED"


async def test_login_validation(client):
    response = await client.post(f"{AUTH}/login", json={"username": "someone"})

    assert response.status_code == 422
    assert "password" in response.json()["error"]["validation_errors"]


async def test_login_is_rate_limited(client, user, fake_redis):
    for _ in range(5):
        response = await client.post(f"{AUTH}/login", json={"username": user.username, "password": "wrong-pass"})
        assert response.status_code == 401

    response = await client.post(f"{AUTH}/login", json={"username": user.username, "password": "wrong-pass"})

    assert response.status_code == 429
    assert response.json()["error"]["code"] == "RATE_LIMITED"
    assert list(fake_redis.ttl.values()) == [60]


async def test_successful_login_resets_attempts(client, user, password, fake_redis):
    await client.post(f"{AUTH}/login", json={"username": user.username, "password": "wrong-pass"})
    assert fake_redis.values

    response = await client.post(f"{AUTH}/login", json={"username": user.username, "password": password})

    assert response.status_code == 200
    assert fake_redis.values == {}


async def test_register(client):
    response = await client.post(f"{AUTH}/register", json={
        "name": "Kiran Das",
        "email": "kiran@example.com",
        "username": "kiran",
        "password": "a-strong-one",
        "password_confirmation": "a-strong-one",
    })

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Registration successful"
    assert body["data"]["user"]["role"] == "user"
    assert body["data"]["user"]["active"] is True

    me = await client.get(
        f"{AUTH}/status",
        headers={"Authorization": f"Bearer {body['data']['access_token']}"},
    )
    assert me.json()["data"]["authenticated"] is True


async def test_register_password_mismatch(client):
    response = await client.post(f"{AUTH}/register", json={
        "name": "Kiran Das",
        "email": "kiran@example.com",
        "username": "kiran",
        "password": "a-strong-one",
        "password_confirmation": "another-one",
    })

    assert response.status_code == 422
    assert "password_confirmation" in response.json()["error"]["validation_errors"]


async def test_register_duplicate_email(client, user):
    response = await client.post(f"{AUTH}/register", json={
        "name": "Copy Cat",
        "email": user.email,
        "username": "copycat",
        "password": "a-strong-one",
        "password_confirmation": "a-strong-one",
    })

    assert response.status_code == 409
    assert response.json()["error"]["details"]["field"] == "email"


async def test_refresh_rotates_tokens(client, tokens):
    response = await client.post(f"{AUTH}/refresh", json={"refreshToken": tokens["refresh_token"]})

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Token refreshed successfully"
    assert body["data"]["refresh_token"] != tokens["refresh_token"]

    reused = await client.post(f"{AUTH}/refresh", json={"refreshToken": tokens["refresh_token"]})
    assert reused.status_code == 401


async def test_access_token_cannot_refresh(client, tokens):
    response = await client.post(f"{AUTH}/refresh", json={"refresh_token": tokens["access_token"]})

    assert response.status_code == 401


async def test_refresh_token_cannot_access_resources(client, tokens):
    response = await client.get(
        "/api/v1/products",
        headers={"Authorization": f"Bearer {tokens['refresh_token']}"},
    )

    assert response.status_code == 401


async def test_logout_revokes_tokens(client, auth_headers, tokens):
    response = await client.post(f"{AUTH}/logout", headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"

    assert (await client.get("/api/v1/products", headers=auth_headers)).status_code == 401
    refreshed = await client.post(f"{AUTH}/refresh", json={"refreshToken": tokens["refresh_token"]})
    assert refreshed.status_code == 401


async def test_logout_requires_authentication(client):
    response = await client.post(f"{AUTH}/logout")

    assert response.status_code == 401


async def test_status(client, user, auth_headers):
    anonymous = (await client.get(f"{AUTH}/status")).json()
    assert anonymous["data"] == {"authenticated": False, "user": None}

    signed_in = (await client.get(f"{AUTH}/status", headers=auth_headers)).json()
    assert signed_in["message"] == "Authentication status retrieved"
    assert signed_in["data"]["authenticated"] is True
    assert signed_in["data"]["user"]["id"] == user.id


async def test_expired_token_is_rejected(client, db, tokens, auth_headers):
    token_id = int(tokens["access_token"].partition("|")[0])
    token = await db.get(PersonalAccessToken, token_id)
    token.expires_at = token.created_at
    await db.commit()

    response = await client.get("/api/v1/products", headers=auth_headers)

    assert response.status_code == 401
