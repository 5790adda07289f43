"""
Authentication request lifecycle.

validate -> provider call -> cookie write (success) or error translation (failure).
The cookie is only touched after the provider call has fully resolved.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Optional, TypeVar

from starlette.responses import Response

from gateway.auth.config import GatewayConfig
from gateway.auth.errors import GatewayError, ProviderFailure
from gateway.auth.models import Identity, success_body
from gateway.auth.provider import IdentityProvider
from gateway.auth.session import clear_session_cookie, create_session_cookie
from gateway.auth.translate import AuthContext, translate, unexpected_error
from gateway.auth.validation import validate_credentials

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AuthGateway:
    def __init__(self, provider: IdentityProvider, cfg: GatewayConfig) -> None:
        self.provider = provider
        self.cfg = cfg

    async def _call_provider(self, context: AuthContext, fn: Callable[..., T], *args: Any) -> T:
        try:
            return await asyncio.to_thread(fn, *args)
        except ProviderFailure as failure:
            error = translate(failure, context)
            logger.info(
                "Provider rejected %s: code=%s status=%d field=%s",
                context.value,
                failure.code,
                error.status_code,
                error.field or "-",
            )
            raise GatewayError(error) from failure
        except Exception as e:
            logger.exception("Identity provider call failed unexpectedly during %s", context.value)
            raise GatewayError(unexpected_error()) from e

    async def register(self, payload: Any) -> Dict[str, Any]:
        """Create an account. Never sets a cookie; the caller signs in separately."""
        creds = validate_credentials(payload)
        await self._call_provider(AuthContext.REGISTER, self.provider.register, creds.email, creds.password)
        return success_body()

    async def authenticate(self, payload: Any, response: Response) -> Dict[str, Any]:
        creds = validate_credentials(payload)
        identity: Identity = await self._call_provider(
            AuthContext.AUTHENTICATE, self.provider.authenticate_password, creds.email, creds.password
        )
        create_session_cookie(response, self.cfg, identity.user_id)
        return success_body()

    async def authenticate_federated(self, response: Response, credential: Optional[str] = None) -> Dict[str, Any]:
        # Credentials are opaque here: no validation, straight to the provider.
        identity: Identity = await self._call_provider(
            AuthContext.FEDERATED, self.provider.authenticate_federated, credential
        )
        create_session_cookie(response, self.cfg, identity.user_id)
        return success_body()

    async def deauthenticate(self, response: Response) -> Dict[str, Any]:
        """Revoke, then clear the cookie. A failed revoke leaves the cookie alone."""
        await self._call_provider(AuthContext.DEAUTHENTICATE, self.provider.revoke_session)
        clear_session_cookie(response, self.cfg)
        return success_body()
