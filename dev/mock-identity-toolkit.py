#!/usr/bin/env python3
"""
Mock Identity Toolkit (Firebase Auth REST) server for local development.

Point the gateway at it with CLOCKS_API_FIREBASE_AUTH_EMULATOR_HOST=localhost:9099.
Accounts live in memory and vanish on restart. Any Google idToken is accepted and
mapped to `google:<token>`.
"""

import sys
import uuid

from flask import Flask, jsonify, request

app = Flask(__name__)

_PREFIX = "/identitytoolkit.googleapis.com/v1"
_users = {}  # email -> {"localId": ..., "password": ...}


def _error(message, status=400):
    return jsonify({"error": {"code": status, "message": message, "errors": [{"message": message}]}}), status


@app.route(f"{_PREFIX}/accounts:signUp", methods=["POST"])
def sign_up():
    body = request.get_json(silent=True) or {}
    email = str(body.get("email") or "").strip().lower()
    password = str(body.get("password") or "")
    if "@" not in email:
        return _error("INVALID_EMAIL")
    if len(password) < 6:
        return _error("WEAK_PASSWORD : Password should be at least 6 characters")
    if email in _users:
        return _error("EMAIL_EXISTS")
    _users[email] = {"localId": uuid.uuid4().hex[:28], "password": password}
    return jsonify({"localId": _users[email]["localId"], "email": email, "idToken": "mock", "refreshToken": "mock"})


@app.route(f"{_PREFIX}/accounts:signInWithPassword", methods=["POST"])
def sign_in_with_password():
    body = request.get_json(silent=True) or {}
    email = str(body.get("email") or "").strip().lower()
    user = _users.get(email)
    if user is None:
        return _error("EMAIL_NOT_FOUND")
    if user["password"] != str(body.get("password") or ""):
        return _error("INVALID_PASSWORD")
    return jsonify({"localId": user["localId"], "email": email, "idToken": "mock", "registered": True})


@app.route(f"{_PREFIX}/accounts:signInWithIdp", methods=["POST"])
def sign_in_with_idp():
    body = request.get_json(silent=True) or {}
    post_body = str(body.get("postBody") or "")
    token = ""
    for part in post_body.split("&"):
        key, _, value = part.partition("=")
        if key == "id_token":
            token = value
    if not token:
        return _error("INVALID_IDP_RESPONSE : Missing id_token")
    return jsonify({"localId": f"google:{token[:20]}", "providerId": "google.com", "idToken": "mock"})


@app.route("/healthz")
def health():
    """Health check endpoint."""
    return jsonify({"status": "ok"})


if __name__ == "__main__":
    print("Mock Identity Toolkit starting on http://0.0.0.0:9099", file=sys.stderr)
    app.run(host="0.0.0.0", port=9099, debug=False)
