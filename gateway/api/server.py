"""
HTTP surface for the authentication gateway.

Four POST endpoints under /api plus the prebuilt client bundle on every other path.
"""

from __future__ import annotations

import json
import logging
import os
import time
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from gateway.api.headers import SecurityHeadersMiddleware, apply_security_headers
from gateway.api.static import mount_browser_bundle
from gateway.auth.config import GatewayConfig, load_gateway_config
from gateway.auth.errors import GatewayError
from gateway.auth.firebase import FirebaseIdentityProvider
from gateway.auth.gateway import AuthGateway
from gateway.auth.models import StructuredError
from gateway.auth.translate import unexpected_error

logger = logging.getLogger(__name__)

router = APIRouter()


def get_gateway(request: Request) -> AuthGateway:
    return request.app.state.gateway


async def read_payload(request: Request) -> Any:
    """
    Parse a JSON or urlencoded request body.

    An empty body parses to `{}` so that validation reports the missing fields.
    """
    body = await request.body()
    if not body.strip():
        return {}
    content_type = (request.headers.get("content-type") or "").split(";", 1)[0].strip().lower()
    if content_type == "application/x-www-form-urlencoded":
        return dict(parse_qsl(body.decode("utf-8", errors="replace"), keep_blank_values=True))
    try:
        return json.loads(body)
    except ValueError as e:
        raise GatewayError(StructuredError(status_code=400, message="Malformed JSON body")) from e


@router.get("/healthz")
def healthz() -> Dict[str, Any]:
    return {"ok": True}


@router.post("/api/sign-up")
async def sign_up(request: Request, response: Response, gateway: AuthGateway = Depends(get_gateway)):
    """Create an account with email and password."""
    payload = await read_payload(request)
    response.headers["Cache-Control"] = "no-store"
    return await gateway.register(payload)


@router.post("/api/sign-in")
async def sign_in(request: Request, response: Response, gateway: AuthGateway = Depends(get_gateway)):
    """Sign in with email and password; sets the session cookie."""
    payload = await read_payload(request)
    response.headers["Cache-Control"] = "no-store"
    return await gateway.authenticate(payload, response)


@router.post("/api/sign-in/google")
async def sign_in_google(request: Request, response: Response, gateway: AuthGateway = Depends(get_gateway)):
    """Sign in with Google; an optional `idToken` is handed to the provider as-is."""
    payload = await read_payload(request)
    credential: Optional[str] = None
    if isinstance(payload, dict) and isinstance(payload.get("idToken"), str):
        credential = payload["idToken"]
    response.headers["Cache-Control"] = "no-store"
    return await gateway.authenticate_federated(response, credential)


@router.post("/api/sign-out")
async def sign_out(response: Response, gateway: AuthGateway = Depends(get_gateway)):
    """Sign out and clear the session cookie."""
    response.headers["Cache-Control"] = "no-store"
    return await gateway.deauthenticate(response)


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    resp = JSONResponse(status_code=exc.status_code, content=exc.error.to_body())
    resp.headers["Cache-Control"] = "no-store"
    return resp


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Served by ServerErrorMiddleware, outside the app middleware stack.
    resp = JSONResponse(status_code=500, content=unexpected_error().to_body())
    resp.headers["Cache-Control"] = "no-store"
    cfg = getattr(request.app.state, "config", None)
    return apply_security_headers(resp, production=bool(cfg and cfg.production))


async def log_requests(request: Request, call_next):
    """Log all incoming HTTP requests."""
    start_time = time.time()
    logger.debug("%s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
        process_time = time.time() - start_time
        logger.debug("%s %s - %d (%.3fs)", request.method, request.url.path, response.status_code, process_time)
        return response
    except Exception as e:
        process_time = time.time() - start_time
        logger.exception("%s %s - ERROR after %.3fs: %s", request.method, request.url.path, process_time, str(e))
        raise


def create_app(gateway: Optional[AuthGateway] = None, cfg: Optional[GatewayConfig] = None) -> FastAPI:
    """
    Build the application.

    The identity provider is injected through `gateway`; when omitted, a
    Firebase-backed gateway is built from `cfg` (or the environment).
    """
    cfg = cfg or load_gateway_config()
    if gateway is None:
        if not cfg.provider_configured and not cfg.firebase_auth_emulator_host:
            logger.warning("CLOCKS_API_FIREBASE_API_KEY is not set; authentication requests will fail")
        gateway = AuthGateway(FirebaseIdentityProvider(cfg), cfg)

    app = FastAPI(title="Clocks authentication gateway")
    app.state.gateway = gateway
    app.state.config = cfg

    app.add_middleware(SecurityHeadersMiddleware, production=cfg.production)
    app.middleware("http")(log_requests)
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(router)
    # Catch-all mount goes last so API routes take precedence.
    mount_browser_bundle(app, cfg.browser_dist_dir)
    return app


def run(host: str = "0.0.0.0", port: Optional[int] = None) -> None:
    import uvicorn

    # Configure logging for the application
    log_level = os.getenv("LOG_LEVEL", "info").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Map Python logging levels to uvicorn log levels
    uvicorn_log_level = (
        log_level.lower() if log_level.lower() in ["critical", "error", "warning", "info", "debug", "trace"] else "info"
    )

    cfg = load_gateway_config()
    listen_port = port if port is not None else cfg.port
    app = create_app(cfg=cfg)

    logger.info("Server listening on %s:%d (mode=%s, log_level=%s)", host, listen_port, cfg.mode, log_level)
    uvicorn.run(app, host=host, port=listen_port, log_level=uvicorn_log_level)
