"""
Orchestration tests: validate -> provider -> cookie / error translation.
"""

from __future__ import annotations

import pytest
from starlette.responses import Response

from gateway.auth.errors import GatewayError, ProviderFailure, ValidationFailure
from gateway.auth.gateway import AuthGateway

GOOD = {"email": "a@b.com", "password": "x"}

INVALID_PAYLOADS = [
    {},
    {"password": "x"},
    {"email": "a@b.com"},
    {"email": "not-an-email", "password": "x"},
    {"email": "a@b.com", "password": ""},
]


def _set_cookies(resp: Response) -> list:
    return [v.lower() for v in resp.headers.getlist("set-cookie")]


@pytest.mark.asyncio
async def test_register_success_sets_no_cookie(cfg, provider) -> None:
    gw = AuthGateway(provider, cfg)
    body = await gw.register(GOOD)
    assert body == {"status": "success", "data": None}
    assert provider.calls == [("register", "a@b.com", "x")]


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", INVALID_PAYLOADS)
async def test_invalid_payload_never_reaches_provider(cfg, provider, payload) -> None:
    gw = AuthGateway(provider, cfg)
    resp = Response()

    with pytest.raises(ValidationFailure):
        await gw.register(payload)
    with pytest.raises(ValidationFailure):
        await gw.authenticate(payload, resp)

    assert provider.calls == []
    assert _set_cookies(resp) == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "code,field",
    [("auth/email-already-in-use", "email"), ("auth/invalid-email", "email"), ("auth/weak-password", "password")],
)
async def test_register_failure_is_field_attributed(cfg, provider, code, field) -> None:
    provider.failure = ProviderFailure(code, "rejected")
    gw = AuthGateway(provider, cfg)

    with pytest.raises(GatewayError) as ei:
        await gw.register(GOOD)

    assert ei.value.status_code == 400
    assert ei.value.error.field == field
    assert ei.value.error.message == "rejected"


@pytest.mark.asyncio
async def test_authenticate_success_issues_cookie(cfg, provider) -> None:
    gw = AuthGateway(provider, cfg)
    resp = Response()

    body = await gw.authenticate(GOOD, resp)

    assert body["status"] == "success"
    cookies = _set_cookies(resp)
    assert len(cookies) == 1
    assert cookies[0].startswith("clocks_session=uid-123")
    assert "httponly" in cookies[0]
    assert "max-age=3600" in cookies[0]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "code,field",
    [("auth/user-not-found", "email"), ("auth/invalid-email", "email"), ("auth/wrong-password", "password")],
)
async def test_authenticate_failure_sets_no_cookie(cfg, provider, code, field) -> None:
    provider.failure = ProviderFailure(code, "Wrong credentials")
    gw = AuthGateway(provider, cfg)
    resp = Response()

    with pytest.raises(GatewayError) as ei:
        await gw.authenticate(GOOD, resp)

    assert ei.value.status_code == 401
    assert ei.value.error.field == field
    assert _set_cookies(resp) == []


@pytest.mark.asyncio
async def test_authenticate_unmapped_failure_is_generic_401(cfg, provider) -> None:
    provider.failure = ProviderFailure("auth/too-many-requests", "Slow down")
    gw = AuthGateway(provider, cfg)

    with pytest.raises(GatewayError) as ei:
        await gw.authenticate(GOOD, Response())

    assert ei.value.status_code == 401
    assert ei.value.error.field is None
    assert ei.value.error.message == "Slow down"


@pytest.mark.asyncio
async def test_federated_success_issues_cookie_without_validation(cfg, provider) -> None:
    gw = AuthGateway(provider, cfg)
    resp = Response()

    await gw.authenticate_federated(resp, "opaque-token")

    assert provider.calls == [("authenticate_federated", "opaque-token")]
    assert _set_cookies(resp)[0].startswith("clocks_session=uid-123")


@pytest.mark.asyncio
async def test_federated_failure_is_generic(cfg, provider) -> None:
    provider.failure = ProviderFailure("auth/invalid-credential", "Credential expired")
    gw = AuthGateway(provider, cfg)
    resp = Response()

    with pytest.raises(GatewayError) as ei:
        await gw.authenticate_federated(resp)

    assert ei.value.status_code == 500
    assert ei.value.error.field is None
    assert ei.value.error.message == "Credential expired"
    assert _set_cookies(resp) == []


@pytest.mark.asyncio
async def test_deauthenticate_clears_cookie(cfg, provider) -> None:
    gw = AuthGateway(provider, cfg)
    resp = Response()

    await gw.deauthenticate(resp)

    assert provider.calls == [("revoke_session",)]
    cookies = _set_cookies(resp)
    assert len(cookies) == 1
    assert "max-age=0" in cookies[0]


@pytest.mark.asyncio
async def test_failed_deauthenticate_leaves_cookie_alone(cfg, provider) -> None:
    provider.failure = ProviderFailure("auth/network-request-failed", "offline", unavailable=True)
    gw = AuthGateway(provider, cfg)
    resp = Response()

    with pytest.raises(GatewayError) as ei:
        await gw.deauthenticate(resp)

    assert ei.value.status_code == 500
    assert ei.value.error.field is None
    assert _set_cookies(resp) == []


@pytest.mark.asyncio
async def test_unexpected_provider_exception_becomes_500(cfg, provider) -> None:
    provider.failure = RuntimeError("kaboom")
    gw = AuthGateway(provider, cfg)
    resp = Response()

    with pytest.raises(GatewayError) as ei:
        await gw.authenticate(GOOD, resp)

    assert ei.value.status_code == 500
    assert "kaboom" not in ei.value.error.message
    assert _set_cookies(resp) == []
