import pytest

from authupload.authservice import AuthConfig, AuthService, CredentialHasher, InMemoryUserRepo, TokenIssuer
from authupload.authservice.contracts import LoginRequest, RefreshRequest, RegisterRequest
from authupload.errors import ConflictError, UnauthorizedError

SECRET = "unit-test-secret-with-enough-bytes-for-hs256"


def make_service():
    cfg = AuthConfig(secret=SECRET)
    repo = InMemoryUserRepo()
    svc = AuthService(user_repo=repo, issuer=TokenIssuer(cfg), hasher=CredentialHasher(rounds=4), cfg=cfg)
    return svc, repo


def register(svc, email="alice@example.com", password="secret123", name="Alice", **kw):
    return svc.register(RegisterRequest(email=email, password=password, name=name, **kw))


def test_register_returns_user_and_tokens():
    svc, repo = make_service()
    res = register(svc)
    assert res.user.email == "alice@example.com"
    assert res.user.timezone == "America/Sao_Paulo"
    assert res.tokens.expires_in == 900
    stored = repo.get_by_id(res.user.id)
    assert stored.password_hash != "secret123"


def test_register_lowercases_email_and_rejects_duplicate():
    svc, _ = make_service()
    register(svc, email="Alice@Example.com")
    with pytest.raises(ConflictError) as ei:
        register(svc, email="ALICE@example.COM")
    assert ei.value.status_code == 409
    assert ei.value.message == "Email already registered"


def test_register_keeps_explicit_timezone():
    svc, _ = make_service()
    res = register(svc, timezone="Europe/Bucharest")
    assert res.user.timezone == "Europe/Bucharest"


def test_login_success():
    svc, _ = make_service()
    reg = register(svc)
    res = svc.login(LoginRequest(email="ALICE@example.com", password="secret123"))
    assert res.user.id == reg.user.id
    assert svc.verify_access(res.tokens.access_token).id == reg.user.id


def test_login_unknown_email_and_wrong_password_are_indistinguishable():
    svc, _ = make_service()
    register(svc)
    with pytest.raises(UnauthorizedError) as unknown:
        svc.login(LoginRequest(email="bob@example.com", password="secret123"))
    with pytest.raises(UnauthorizedError) as wrong:
        svc.login(LoginRequest(email="alice@example.com", password="nope-nope"))
    assert unknown.value.message == wrong.value.message == "Invalid credentials"
    assert unknown.value.code == wrong.value.code


def test_refresh_issues_new_pair():
    svc, _ = make_service()
    reg = register(svc)
    pair = svc.refresh(RefreshRequest(refresh_token=reg.tokens.refresh_token))
    assert svc.verify_access(pair.access_token).id == reg.user.id
    # no revocation: the same refresh token keeps working
    again = svc.refresh(RefreshRequest(refresh_token=reg.tokens.refresh_token))
    assert again.expires_in == 900


def test_refresh_rejects_access_token():
    svc, _ = make_service()
    reg = register(svc)
    with pytest.raises(UnauthorizedError) as ei:
        svc.refresh(RefreshRequest(refresh_token=reg.tokens.access_token))
    assert ei.value.message == "Invalid or expired token"


def test_refresh_rejects_garbage():
    svc, _ = make_service()
    with pytest.raises(UnauthorizedError):
        svc.refresh(RefreshRequest(refresh_token="garbage"))


def test_refresh_rejects_deleted_user():
    svc, repo = make_service()
    reg = register(svc)
    repo.delete(reg.user.id)
    with pytest.raises(UnauthorizedError) as ei:
        svc.refresh(RefreshRequest(refresh_token=reg.tokens.refresh_token))
    assert ei.value.message == "Invalid or expired token"


def test_get_profile():
    svc, _ = make_service()
    reg = register(svc)
    assert svc.get_profile(reg.user.id).email == "alice@example.com"
    with pytest.raises(UnauthorizedError) as ei:
        svc.get_profile("missing")
    assert ei.value.message == "User not found"


def test_verify_access_rejects_refresh_token():
    svc, _ = make_service()
    reg = register(svc)
    with pytest.raises(UnauthorizedError):
        svc.verify_access(reg.tokens.refresh_token)
