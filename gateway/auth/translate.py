"""
Provider failure -> client error translation.

Each auth context owns a lookup table from provider code to the field the failure
is attributed to and the status to answer with. Codes missing from a table fall
through to an unattributed error with the context's default status.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Mapping

from gateway.auth.errors import ProviderFailure
from gateway.auth.models import StructuredError

UNAVAILABLE_MESSAGE = "Authentication service is unavailable. Please try again later."
INTERNAL_ERROR_MESSAGE = "Internal server error"


class AuthContext(str, enum.Enum):
    REGISTER = "register"
    AUTHENTICATE = "authenticate"
    FEDERATED = "federated"
    DEAUTHENTICATE = "deauthenticate"


@dataclass(frozen=True)
class FieldOutcome:
    field: str
    status_code: int


FIELD_OUTCOMES: Mapping[AuthContext, Mapping[str, FieldOutcome]] = {
    AuthContext.REGISTER: {
        "email-already-in-use": FieldOutcome("email", 400),
        "invalid-email": FieldOutcome("email", 400),
        "weak-password": FieldOutcome("password", 400),
    },
    AuthContext.AUTHENTICATE: {
        "user-not-found": FieldOutcome("email", 401),
        "invalid-email": FieldOutcome("email", 401),
        "wrong-password": FieldOutcome("password", 401),
    },
    # Federated and sign-out failures are never field-attributable.
    AuthContext.FEDERATED: {},
    AuthContext.DEAUTHENTICATE: {},
}

DEFAULT_STATUS: Dict[AuthContext, int] = {
    AuthContext.REGISTER: 400,
    AuthContext.AUTHENTICATE: 401,
    AuthContext.FEDERATED: 500,
    AuthContext.DEAUTHENTICATE: 500,
}


def normalize_code(code: str) -> str:
    """`auth/wrong-password` and `wrong-password` are the same code."""
    c = (code or "").strip().lower()
    if c.startswith("auth/"):
        c = c[len("auth/") :]
    return c


def translate(failure: ProviderFailure, context: AuthContext) -> StructuredError:
    if failure.unavailable:
        # Transport/availability problems: no field, no provider internals.
        return StructuredError(status_code=500, message=UNAVAILABLE_MESSAGE)

    outcome = FIELD_OUTCOMES[context].get(normalize_code(failure.code))
    if outcome is not None:
        return StructuredError(status_code=outcome.status_code, message=failure.message, field=outcome.field)
    return StructuredError(status_code=DEFAULT_STATUS[context], message=failure.message)


def unexpected_error() -> StructuredError:
    return StructuredError(status_code=500, message=INTERNAL_ERROR_MESSAGE)
