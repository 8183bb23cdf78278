import pytest
import httpx
from httpx import ASGITransport
from jose import jwt
from structlog.testing import capture_logs
from authapi.main import app
from authapi.config import settings
from authapi.auth.jwt import create_access_token
from authapi.auth.tokens import now_epoch
from authapi.testing import generate
from authapi.testing.client import Failure
from authapi.testing.db import reset_db, insert_user

@pytest.mark.asyncio
async def test_register_and_login(client):
    form = generate.login_form()
    r1 = await client.post("auth/register", json=form)
    assert r1.ok
    r2 = await client.post("auth/login", json=form)
    assert r2.ok
    assert r2.data == r1.data

@pytest.mark.asyncio
async def test_login_wrong_password(client):
    form = generate.login_form()
    await client.post_data("auth/register", json=form)
    r = await client.post("auth/login", json={"username": form["username"], "password": "not-it"})
    assert isinstance(r, Failure)
    assert str(r) == '400: {"message":"username or password is invalid"}'

@pytest.mark.asyncio
async def test_blank_strings_count_as_missing(client):
    r = await client.post("auth/register", json={"username": "", "password": "pw_123"})
    assert r.body == {"message": "username can't be blank"}
    r = await client.post("auth/login", json={"username": "someone", "password": ""})
    assert r.body == {"message": "password can't be blank"}

@pytest.mark.asyncio
async def test_missing_body(client):
    r = await client.post("auth/register")
    assert r.status_code == 400
    assert r.body == {"message": "username can't be blank"}

@pytest.mark.asyncio
async def test_malformed_body(client):
    r = await client.post("auth/register", json=["user", "pw"])
    assert str(r) == '400: {"message":"invalid request body"}'

@pytest.mark.asyncio
async def test_me_bad_scheme(client):
    r = await client.get("auth/me", headers={"Authorization": "Token abc"})
    assert str(r) == '401: {"code":"credentials_bad_scheme","message":"Format is Authorization: Bearer [token]"}'

@pytest.mark.asyncio
async def test_me_forged_token(client):
    data = await client.post_data("auth/register", json=generate.login_form())
    user = data["user"]
    forged = jwt.encode({"sub": user["id"], "username": user["username"]}, "wrong-secret", algorithm="HS256")
    r = await client.get("auth/me", token=forged)
    assert str(r) == '401: {"code":"invalid_token","message":"invalid token"}'

@pytest.mark.asyncio
async def test_me_malformed_token(client):
    r = await client.get("auth/me", token="not-a-jwt")
    assert r.status_code == 401
    assert r.body["code"] == "invalid_token"

@pytest.mark.asyncio
async def test_me_expired_token(client):
    user = await insert_user(generate.build_user())
    issued_at = now_epoch() - settings.access_token_expire_minutes * 60 - 10
    token = create_access_token(str(user.id), user.username, issued_at)
    r = await client.get("auth/me", token=token)
    assert str(r) == '401: {"code":"invalid_token","message":"jwt expired"}'

@pytest.mark.asyncio
async def test_me_after_reset_rejects_token(client):
    data = await client.post_data("auth/register", json=generate.login_form())
    await reset_db()
    r = await client.get("auth/me", token=data["user"]["token"])
    assert r.status_code == 401
    assert r.body == {"code": "invalid_token", "message": "invalid token"}

@pytest.mark.asyncio
async def test_login_rotates_nearly_expired_token(client):
    pw = generate.password()
    # leave less than the rotation window on the stored token
    stale_iat = now_epoch() - settings.access_token_expire_minutes * 60 + 60
    user = await insert_user(generate.build_user(password=pw, token_issued_at=stale_iat))
    old_token = create_access_token(str(user.id), user.username, stale_iat)

    assert (await client.get("auth/me", token=old_token)).ok
    data = await client.post_data("auth/login", json={"username": user.username, "password": pw})
    new_token = data["user"]["token"]
    assert new_token != old_token

    assert (await client.get("auth/me", token=new_token)).ok
    r = await client.get("auth/me", token=old_token)
    assert r.status_code == 401

@pytest.mark.asyncio
async def test_password_strength_enforced(client, monkeypatch):
    monkeypatch.setattr(settings, "enforce_password_strength", True)
    r = await client.post("auth/register", json={"username": generate.username(), "password": "pw_123"})
    assert str(r) == '400: {"message":"password is not strong enough"}'
    r = await client.post("auth/register", json={"username": generate.username(), "password": "Str0ng!pass"})
    assert r.ok

@pytest.mark.asyncio
async def test_health():
    async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        health = await ac.get("/health")
        assert health.status_code == 200
        assert health.json() == {"status": "ok"}

@pytest.mark.asyncio
async def test_non_string_field(client):
    r = await client.post("auth/register", json={"username": 123, "password": "x"})
    assert str(r) == '400: {"message":"invalid request body"}'
    r = await client.post("auth/login", json={"username": "someone", "password": 123})
    assert str(r) == '400: {"message":"invalid request body"}'

@pytest.mark.asyncio
async def test_credentials_never_logged(client):
    form = generate.login_form()
    with capture_logs() as events:
        data = await client.post_data("auth/register", json=form)
        token = data["user"]["token"]
        await client.post_data("auth/login", json=form)
        await client.post("auth/login", json={"username": form["username"], "password": "wrong_pw_1"})
        await client.get("auth/me", token=token + "x")
    names = [e["event"] for e in events]
    assert "user_registered" in names
    assert "user_login" in names
    assert "login_failed" in names
    assert "auth_rejected" in names
    for event in events:
        rendered = repr(event)
        assert form["password"] not in rendered
        assert "wrong_pw_1" not in rendered
        assert token not in rendered
