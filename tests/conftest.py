"""
Pytest config.

Local imports like `import gateway` rely on the repo root being on sys.path. When
invoking a global `pytest` entrypoint without an editable install that doesn't
happen reliably during collection, so we pin the behavior here.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pytest


def _ensure_repo_root_on_syspath() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


_ensure_repo_root_on_syspath()

from gateway.auth.config import GatewayConfig, load_gateway_config  # noqa: E402
from gateway.auth.models import Identity  # noqa: E402

COOKIE_NAME = "clocks_session"
COOKIE_MAX_AGE = 3600


class FakeIdentityProvider:
    """Records every call; raises `failure` (if set) instead of succeeding."""

    def __init__(self, *, user_id: str = "uid-123", failure: Optional[BaseException] = None) -> None:
        self.user_id = user_id
        self.failure = failure
        self.calls: List[Tuple] = []

    def _result(self) -> Identity:
        if self.failure is not None:
            raise self.failure
        return Identity(user_id=self.user_id)

    def register(self, email: str, password: str) -> Identity:
        self.calls.append(("register", email, password))
        return self._result()

    def authenticate_password(self, email: str, password: str) -> Identity:
        self.calls.append(("authenticate_password", email, password))
        return self._result()

    def authenticate_federated(self, credential: Optional[str] = None) -> Identity:
        self.calls.append(("authenticate_federated", credential))
        return self._result()

    def revoke_session(self) -> None:
        self.calls.append(("revoke_session",))
        if self.failure is not None:
            raise self.failure


@pytest.fixture(autouse=True)
def _gateway_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """
    Deterministic configuration for every test.

    The bundle directory points at a path that doesn't exist, so static serving is
    off unless a test creates it.
    """
    for name in (
        "CLOCKS_API_PORT",
        "CLOCKS_API_MODE",
        "CLOCKS_API_FIREBASE_API_KEY",
        "CLOCKS_API_FIREBASE_AUTH_EMULATOR_HOST",
        "CLOCKS_API_PROVIDER_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("CLOCKS_API_COOKIE_ACCESS_TOKEN_NAME", COOKIE_NAME)
    monkeypatch.setenv("CLOCKS_API_COOKIE_ACCESS_TOKEN_MAX_AGE", str(COOKIE_MAX_AGE))
    monkeypatch.setenv("CLOCKS_API_BROWSER_DIST", str(tmp_path / "browser"))
    load_gateway_config.cache_clear()
    yield
    load_gateway_config.cache_clear()


@pytest.fixture
def cfg() -> GatewayConfig:
    return load_gateway_config()


@pytest.fixture
def provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()
