import httpx
import pytest
from fastapi import HTTPException

from src.core import auth
from src.core.configs import Settings


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("TIMEZONE", "Europe/Amsterdam")
    monkeypatch.setenv("IOT_API_KEY", "device-secret")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = Settings()

    assert settings.timezone == "Europe/Amsterdam"
    assert settings.IOT_API_KEY == "device-secret"
    assert settings.log_level == "DEBUG"


def test_identity_is_read_from_provider(monkeypatch) -> None:
    calls = []

    def fake_get(url, headers, timeout):
        calls.append((url, headers))
        return httpx.Response(
            200,
            json={
                "id": "user-7",
                "email": "user7@example.com",
                "app_metadata": {"role": "admin"},
            },
        )

    monkeypatch.setattr(auth.httpx, "get", fake_get)

    user = auth.fetch_identity("token-abc")

    assert user.id == "user-7"
    assert user.email == "user7@example.com"
    assert user.is_admin
    assert calls[0][0].endswith("/user")
    assert calls[0][1]["Authorization"] == "Bearer token-abc"


def test_rejected_token_yields_no_identity(monkeypatch) -> None:
    monkeypatch.setattr(
        auth.httpx, "get", lambda url, headers, timeout: httpx.Response(401, json={})
    )

    assert auth.fetch_identity("expired") is None


def test_unreachable_provider_is_unavailable(monkeypatch) -> None:
    def fake_get(url, headers, timeout):
        raise httpx.ConnectError("connection refused")

    monkeypatch.setattr(auth.httpx, "get", fake_get)

    with pytest.raises(HTTPException) as exc_info:
        auth.fetch_identity("token-abc")

    assert exc_info.value.status_code == 503


def test_missing_credentials_are_unauthorized() -> None:
    with pytest.raises(HTTPException) as exc_info:
        auth.get_current_user(None)

    assert exc_info.value.status_code == 401


def test_non_admin_is_forbidden() -> None:
    with pytest.raises(HTTPException) as exc_info:
        auth.require_admin(auth.CurrentUser(id="farmer-1"))

    assert exc_info.value.status_code == 403
