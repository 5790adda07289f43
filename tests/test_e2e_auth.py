"""E2E tests for authentication flows.

These tests require a running gateway wired to the dev identity provider mock
(`python dev/mock-identity-toolkit.py` + CLOCKS_API_FIREBASE_AUTH_EMULATOR_HOST=localhost:9099).
Run with: pytest -m e2e
"""

import os
import time
import uuid
from typing import Generator

import pytest
import requests

BASE_URL = os.getenv("GATEWAY_BASE_URL", "http://localhost:8080")
COOKIE_NAME = os.getenv("CLOCKS_API_COOKIE_ACCESS_TOKEN_NAME", "access_token")

pytestmark = pytest.mark.e2e


@pytest.fixture(scope="module")
def wait_for_server() -> Generator[None, None, None]:
    """Wait for server to be ready."""
    max_retries = 30
    for i in range(max_retries):
        try:
            r = requests.get(f"{BASE_URL}/healthz", timeout=2)
            if r.status_code == 200:
                break
        except requests.RequestException:
            if i == max_retries - 1:
                raise Exception("Server failed to start within 30 seconds")
            time.sleep(1)
    yield


@pytest.fixture
def account(wait_for_server) -> dict:
    creds = {"email": f"e2e-{uuid.uuid4().hex[:8]}@example.com", "password": "correct-horse"}
    r = requests.post(f"{BASE_URL}/api/sign-up", json=creds)
    assert r.status_code == 200, f"Sign-up failed: {r.text}"
    return creds


def test_healthz_endpoint(wait_for_server):
    r = requests.get(f"{BASE_URL}/healthz")
    assert r.status_code == 200
    assert r.json()["ok"] is True


def test_sign_up_does_not_start_session(wait_for_server):
    creds = {"email": f"e2e-{uuid.uuid4().hex[:8]}@example.com", "password": "correct-horse"}
    r = requests.post(f"{BASE_URL}/api/sign-up", json=creds)
    assert r.status_code == 200
    assert COOKIE_NAME not in r.cookies


def test_duplicate_sign_up_blames_email(account):
    r = requests.post(f"{BASE_URL}/api/sign-up", json=account)
    assert r.status_code == 400
    assert r.json()["field"] == "email"


def test_sign_in_flow(account):
    r = requests.post(f"{BASE_URL}/api/sign-in", json=account)
    assert r.status_code == 200, f"Sign-in failed: {r.text}"
    assert r.json()["status"] == "success"
    assert COOKIE_NAME in r.cookies


def test_sign_in_wrong_password(account):
    r = requests.post(f"{BASE_URL}/api/sign-in", json={"email": account["email"], "password": "wrong"})
    assert r.status_code == 401
    assert r.json()["field"] == "password"
    assert COOKIE_NAME not in r.cookies


def test_sign_out(account):
    r = requests.post(f"{BASE_URL}/api/sign-in", json=account)
    cookies = r.cookies

    r = requests.post(f"{BASE_URL}/api/sign-out", cookies=cookies)
    assert r.status_code == 200
    assert "max-age=0" in r.headers.get("set-cookie", "").lower()
