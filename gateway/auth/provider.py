from __future__ import annotations

from typing import Optional, Protocol

from gateway.auth.models import Identity


class IdentityProvider(Protocol):
    """
    Identity provider capability consumed by the gateway.

    Implementations are blocking (the gateway runs them off the event loop) and
    signal every rejection by raising ProviderFailure.
    """

    def register(self, email: str, password: str) -> Identity:
        """Create an account. Does not start a session."""
        ...

    def authenticate_password(self, email: str, password: str) -> Identity:
        """Verify an email/password pair."""
        ...

    def authenticate_federated(self, credential: Optional[str] = None) -> Identity:
        """
        Complete a federated (Google) sign-in.

        `credential` is whatever the client obtained from its own interactive
        exchange; the gateway passes it through untouched.
        """
        ...

    def revoke_session(self) -> None:
        """End the provider-side session, if the provider keeps one."""
        ...
