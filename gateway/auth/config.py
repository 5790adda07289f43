from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

_ENV_PREFIX = "CLOCKS_API_"
_DEFAULT_PORT = 8080
_DEFAULT_COOKIE_NAME = "access_token"
_DEFAULT_COOKIE_MAX_AGE = 24 * 60 * 60
_DEFAULT_PROVIDER_TIMEOUT = 10.0
_PRODUCTION_MODES = ("prod", "production")


@dataclass(frozen=True)
class GatewayConfig:
    # HTTP server
    port: int
    browser_dist_dir: str

    # Session cookie
    cookie_name: str
    cookie_max_age_seconds: int
    mode: str  # dev|prod

    # Identity provider (Firebase project settings)
    firebase_api_key: Optional[str]
    firebase_auth_domain: Optional[str]
    firebase_project_id: Optional[str]
    firebase_storage_bucket: Optional[str]
    firebase_messaging_sender_id: Optional[str]
    firebase_app_id: Optional[str]
    firebase_measurement_id: Optional[str]
    firebase_auth_emulator_host: Optional[str]  # host:port, e.g. "localhost:9099"
    provider_timeout_seconds: float

    @property
    def production(self) -> bool:
        return self.mode in _PRODUCTION_MODES

    @property
    def cookie_secure(self) -> bool:
        """Secure cookies only in a production deployment."""
        return self.production

    @property
    def provider_configured(self) -> bool:
        return bool(self.firebase_api_key)


def _env(name: str) -> Optional[str]:
    return (os.getenv(_ENV_PREFIX + name, "") or "").strip() or None


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(float(raw))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _default_browser_dist() -> str:
    # Prebuilt client bundle sits next to the server checkout.
    return str(Path(__file__).resolve().parents[2] / "browser")


@lru_cache(maxsize=1)
def load_gateway_config() -> GatewayConfig:
    """
    Load gateway configuration from environment variables.

    Values are read once; call `load_gateway_config.cache_clear()` to re-read
    (tests do this after monkeypatching the environment).
    """
    max_age = _env_int("COOKIE_ACCESS_TOKEN_MAX_AGE", _DEFAULT_COOKIE_MAX_AGE)
    if max_age <= 0:
        max_age = _DEFAULT_COOKIE_MAX_AGE

    timeout = _env_float("PROVIDER_TIMEOUT_SECONDS", _DEFAULT_PROVIDER_TIMEOUT)
    if timeout <= 0:
        timeout = _DEFAULT_PROVIDER_TIMEOUT

    return GatewayConfig(
        port=_env_int("PORT", _DEFAULT_PORT),
        browser_dist_dir=_env("BROWSER_DIST") or _default_browser_dist(),
        cookie_name=_env("COOKIE_ACCESS_TOKEN_NAME") or _DEFAULT_COOKIE_NAME,
        cookie_max_age_seconds=max_age,
        mode=(_env("MODE") or "dev").lower(),
        firebase_api_key=_env("FIREBASE_API_KEY"),
        firebase_auth_domain=_env("FIREBASE_AUTH_DOMAIN"),
        firebase_project_id=_env("FIREBASE_PROJECT_ID"),
        firebase_storage_bucket=_env("FIREBASE_STORAGE_BUCKET"),
        firebase_messaging_sender_id=_env("FIREBASE_MESSAGING_SENDER_ID"),
        firebase_app_id=_env("FIREBASE_APP_ID"),
        firebase_measurement_id=_env("FIREBASE_MEASUREMENT_ID"),
        firebase_auth_emulator_host=_env("FIREBASE_AUTH_EMULATOR_HOST"),
        provider_timeout_seconds=timeout,
    )


def public_config_summary(cfg: GatewayConfig) -> dict:
    """Non-secret view of the effective configuration (safe to print/log)."""
    return {
        "port": cfg.port,
        "mode": cfg.mode,
        "cookieName": cfg.cookie_name,
        "cookieMaxAgeSeconds": cfg.cookie_max_age_seconds,
        "cookieSecure": cfg.cookie_secure,
        "browserDist": cfg.browser_dist_dir,
        "providerConfigured": cfg.provider_configured,
        "firebaseProjectId": cfg.firebase_project_id,
        "firebaseAuthDomain": cfg.firebase_auth_domain,
        "firebaseStorageBucket": cfg.firebase_storage_bucket,
        "firebaseMessagingSenderId": cfg.firebase_messaging_sender_id,
        "firebaseAppId": cfg.firebase_app_id,
        "firebaseMeasurementId": cfg.firebase_measurement_id,
        "firebaseAuthEmulatorHost": cfg.firebase_auth_emulator_host,
    }
