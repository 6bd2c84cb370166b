from fastapi import FastAPI
from fastapi.testclient import TestClient

from authupload.apigateway.errors import install_exception_handlers
from authupload.authservice import (
    AuthConfig, AuthService, CredentialHasher, InMemoryUserRepo, TokenIssuer, auth_router, set_auth_service,
)

SECRET = "unit-test-secret-with-enough-bytes-for-hs256"


def make_app():
    app = FastAPI()
    cfg = AuthConfig(secret=SECRET)
    svc = AuthService(user_repo=InMemoryUserRepo(), issuer=TokenIssuer(cfg), hasher=CredentialHasher(rounds=4), cfg=cfg)
    set_auth_service(svc)
    install_exception_handlers(app)
    app.include_router(auth_router)
    return app


def _register(client, email="alice@example.com"):
    return client.post("/auth/register", json={"email": email, "password": "secret123", "name": "Alice"})


def test_register_login_refresh_me_flow():
    client = TestClient(make_app())

    res = _register(client)
    assert res.status_code == 201
    body = res.json()
    assert set(body) == {"user", "tokens"}
    assert body["user"]["email"] == "alice@example.com"
    assert "createdAt" in body["user"]
    assert "passwordHash" not in body["user"] and "password_hash" not in body["user"]
    assert body["tokens"]["expiresIn"] == 900

    res = client.post("/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    assert res.status_code == 200
    access = res.json()["tokens"]["accessToken"]
    refresh = res.json()["tokens"]["refreshToken"]

    res = client.get("/auth/me", headers={"Authorization": f"Bearer {access}"})
    assert res.status_code == 200
    assert res.json()["user"]["name"] == "Alice"

    res = client.post("/auth/refresh", json={"refreshToken": refresh})
    assert res.status_code == 200
    assert set(res.json()) == {"accessToken", "refreshToken", "expiresIn"}

    # snake_case input is accepted too
    res = client.post("/auth/refresh", json={"refresh_token": refresh})
    assert res.status_code == 200


def test_duplicate_register_is_409():
    client = TestClient(make_app())
    assert _register(client).status_code == 201
    res = _register(client, email="ALICE@example.com")
    assert res.status_code == 409
    body = res.json()
    assert body["statusCode"] == 409
    assert body["error"] == "Conflict"
    assert body["path"] == "/auth/register"


def test_register_validation_is_400():
    client = TestClient(make_app())
    res = client.post("/auth/register", json={"email": "not-an-email", "password": "123", "name": "A"})
    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "Bad Request"
    assert isinstance(body["message"], list) and len(body["message"]) == 3


def test_bad_login_is_401():
    client = TestClient(make_app())
    _register(client)
    res = client.post("/auth/login", json={"email": "alice@example.com", "password": "wrong-password"})
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid credentials"


def test_me_requires_access_token():
    client = TestClient(make_app())
    tokens = _register(client).json()["tokens"]

    assert client.get("/auth/me").status_code == 401
    assert client.get("/auth/me", headers={"Authorization": "Token abc"}).status_code == 401
    res = client.get("/auth/me", headers={"Authorization": f"Bearer {tokens['refreshToken']}"})
    assert res.status_code == 401


def test_refresh_with_access_token_is_401():
    client = TestClient(make_app())
    tokens = _register(client).json()["tokens"]
    res = client.post("/auth/refresh", json={"refreshToken": tokens["accessToken"]})
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid or expired token"


def test_me_rejections_share_one_body(caplog):
    import logging
    import time

    client = TestClient(make_app())
    _register(client)

    forged = TokenIssuer(AuthConfig(secret="another-secret-that-is-also-long-enough")).issue_pair("u1", "alice@example.com")

    class PastClock:
        def now_utc_ts(self) -> int:
            return int(time.time()) - 3600

    expired = TokenIssuer(AuthConfig(secret=SECRET), clock=PastClock()).issue_pair("u1", "alice@example.com")

    with caplog.at_level(logging.WARNING, logger="authupload.auth"):
        bad_sig = client.get("/auth/me", headers={"Authorization": f"Bearer {forged.access_token}"})
        stale = client.get("/auth/me", headers={"Authorization": f"Bearer {expired.access_token}"})

    assert bad_sig.status_code == stale.status_code == 401
    assert bad_sig.json()["message"] == stale.json()["message"] == "Unauthorized"
    assert "Signature" not in bad_sig.text
    assert "expired" not in stale.text.lower()
    assert "Token expired" in caplog.text
