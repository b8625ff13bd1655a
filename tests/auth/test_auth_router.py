"""Integration tests for signup and login."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from happy_thoughts.main import create_app
from happy_thoughts.models import User


@pytest.mark.asyncio
async def test_signup_success(client):
    """Signup returns only the email and the new id."""
    response = await client.post("/signup", json={"email": "a@b.com", "password": "secret1"})

    assert response.status_code == 201
    data = response.json()
    assert set(data) == {"email", "id"}
    assert data["email"] == "a@b.com"


@pytest.mark.asyncio
async def test_signup_stores_only_a_hash(app, client):
    await client.post("/signup", json={"email": "hash@example.com", "password": "secret1"})

    async with app.state.db.session_maker() as session:
        user = (await session.execute(select(User).where(User.email == "hash@example.com"))).scalar_one()

    assert user.hashed_password != "secret1"
    assert user.hashed_password.startswith("$2")


@pytest.mark.asyncio
async def test_signup_normalizes_email(client):
    response = await client.post("/signup", json={"email": "  Mixed.Case@Example.COM ", "password": "secret1"})

    assert response.status_code == 201
    assert response.json()["email"] == "mixed.case@example.com"


@pytest.mark.asyncio
async def test_signup_duplicate_email(app, client):
    payload = {"email": "dup@example.com", "password": "secret1"}
    assert (await client.post("/signup", json=payload)).status_code == 201

    response = await client.post("/signup", json={"email": "DUP@example.com", "password": "another1"})

    assert response.status_code == 400
    assert response.json()["error"] == "Validation failed"
    assert "details" in response.json()

    async with app.state.db.session_maker() as session:
        count = (
            await session.execute(select(func.count()).select_from(User).where(User.email == "dup@example.com"))
        ).scalar_one()
    assert count == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"email": "not-an-email", "password": "secret1"},
        {"email": "short@example.com", "password": "abc"},
        {"email": "long@example.com", "password": "é" * 40},
        {"password": "secret1"},
        {"email": "nopass@example.com"},
    ],
)
async def test_signup_validation_errors(client, payload):
    response = await client.post("/signup", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    assert isinstance(body["details"], list) and body["details"]


@pytest.mark.asyncio
async def test_login_success(client):
    signup = await client.post("/signup", json={"email": "login@example.com", "password": "secret1"})

    response = await client.post("/login", json={"email": "login@example.com", "password": "secret1"})

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == signup.json()["id"]
    assert data["email"] == "login@example.com"
    assert data["token"]


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client):
    """Wrong password and unknown email give the same status and body."""
    await client.post("/signup", json={"email": "known@example.com", "password": "secret1"})
    headers = {"X-Request-ID": "fixed-request-id"}

    wrong_password = await client.post(
        "/login", json={"email": "known@example.com", "password": "wrongpass"}, headers=headers
    )
    unknown_email = await client.post(
        "/login", json={"email": "ghost@example.com", "password": "wrongpass"}, headers=headers
    )

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.content == unknown_email.content
    assert wrong_password.json()["error"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_malformed_email_is_plain_401(client):
    response = await client.post("/login", json={"email": "nobody", "password": "whatever"})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_login_empty_password_is_plain_401(client):
    await client.post("/signup", json={"email": "empty@example.com", "password": "secret1"})
    headers = {"X-Request-ID": "fixed-request-id"}

    empty = await client.post("/login", json={"email": "empty@example.com", "password": ""}, headers=headers)
    wrong = await client.post("/login", json={"email": "empty@example.com", "password": "wrongpass"}, headers=headers)

    assert empty.status_code == 401
    assert empty.content == wrong.content


@pytest.mark.asyncio
async def test_default_settings_do_not_throttle_auth(client):
    """Without explicit opt-in, repeated signups and failed logins are never 429."""
    for i in range(6):
        response = await client.post("/signup", json={"email": f"user{i}@example.com", "password": "secret1"})
        assert response.status_code == 201

    for _ in range(8):
        response = await client.post("/login", json={"email": "user0@example.com", "password": "wrongpass"})
        assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_token_identifies_the_caller(client, alice, bob):
    alice_id, alice_headers = alice
    bob_id, bob_headers = bob

    a = await client.post("/thoughts", json={"message": "from alice"}, headers=alice_headers)
    b = await client.post("/thoughts", json={"message": "from bob!"}, headers=bob_headers)

    assert a.json()["createdBy"] == str(alice_id)
    assert b.json()["createdBy"] == str(bob_id)


@pytest.mark.asyncio
async def test_login_rate_limited(settings_factory):
    app = create_app(settings_factory(rate_limit_enabled=True, login_rate_limit=2))
    await app.state.db.init_db()
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            payload = {"email": "spam@example.com", "password": "wrongpass"}
            assert (await ac.post("/login", json=payload)).status_code == 401
            assert (await ac.post("/login", json=payload)).status_code == 401

            response = await ac.post("/login", json=payload)

        assert response.status_code == 429
        assert int(response.headers["Retry-After"]) > 0
        assert response.json()["error"] == "Too many login attempts. Please try again later."
    finally:
        await app.state.db.dispose()


@pytest.mark.asyncio
async def test_signup_rate_limited(settings_factory):
    app = create_app(settings_factory(rate_limit_enabled=True, signup_rate_limit=1))
    await app.state.db.init_db()
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            first = await ac.post("/signup", json={"email": "one@example.com", "password": "secret1"})
            second = await ac.post("/signup", json={"email": "two@example.com", "password": "secret1"})

        assert first.status_code == 201
        assert second.status_code == 429
    finally:
        await app.state.db.dispose()
