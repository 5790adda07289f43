from __future__ import annotations

from starlette.responses import Response

from gateway.auth.config import GatewayConfig


def session_cookie_kwargs(cfg: GatewayConfig, user_id: str) -> dict:
    return {
        "key": cfg.cookie_name,
        "value": user_id,
        "max_age": cfg.cookie_max_age_seconds,
        "httponly": True,
        "secure": cfg.cookie_secure,
        "samesite": "lax",
        "path": "/",
    }


def clear_session_cookie_kwargs(cfg: GatewayConfig) -> dict:
    return {
        "key": cfg.cookie_name,
        "value": "",
        "max_age": 0,
        "httponly": True,
        "secure": cfg.cookie_secure,
        "samesite": "lax",
        "path": "/",
    }


def create_session_cookie(response: Response, cfg: GatewayConfig, user_id: str) -> None:
    """Set the session cookie. Calling again replaces it with a fresh expiry."""
    response.set_cookie(**session_cookie_kwargs(cfg, user_id))


def clear_session_cookie(response: Response, cfg: GatewayConfig) -> None:
    # Expiring a cookie the client never had is harmless.
    response.set_cookie(**clear_session_cookie_kwargs(cfg))
