"""
Exceptions raised across the authentication flow.

Providers raise ProviderFailure; the gateway converts every failure into a
GatewayError carrying the StructuredError that is rendered to the client.
"""

from __future__ import annotations

from typing import List

from gateway.auth.models import FieldError, StructuredError


class ProviderFailure(Exception):
    """Identity provider rejected the request or could not be reached."""

    def __init__(self, code: str, message: str = "", *, unavailable: bool = False) -> None:
        super().__init__(message or code)
        self.code = code
        self.message = message or code
        self.unavailable = unavailable

    def __repr__(self) -> str:
        return f"ProviderFailure(code={self.code!r}, unavailable={self.unavailable})"


class GatewayError(Exception):
    """A failure that has already been translated into a client-facing error."""

    def __init__(self, error: StructuredError) -> None:
        super().__init__(error.message)
        self.error = error

    @property
    def status_code(self) -> int:
        return self.error.status_code


class ValidationFailure(GatewayError):
    """Credential payload failed validation; the provider was not called."""

    def __init__(self, errors: List[FieldError]) -> None:
        super().__init__(StructuredError(status_code=400, message="Invalid request body", errors=list(errors)))

    @property
    def errors(self) -> List[FieldError]:
        return self.error.errors
