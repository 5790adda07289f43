from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from starlette.exceptions import HTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

logger = logging.getLogger(__name__)

ONE_YEAR_SECONDS = 365 * 24 * 60 * 60


class BundleStaticFiles(StaticFiles):
    """
    Serve the prebuilt client bundle.

    Files only: no directory index and no trailing-slash redirects. Long-lived
    caching since bundle file names are content-hashed.
    """

    def __init__(self, *, directory: str, max_age: int = ONE_YEAR_SECONDS) -> None:
        super().__init__(directory=directory, html=False, check_dir=True)
        self.max_age = max_age

    async def get_response(self, path: str, scope: Scope) -> Response:
        # API paths never fall through to the bundle.
        if path == "api" or path.startswith("api" + os.sep):
            raise HTTPException(status_code=404)
        return await super().get_response(path, scope)

    def file_response(self, *args, **kwargs) -> Response:  # type: ignore[no-untyped-def]
        response = super().file_response(*args, **kwargs)
        response.headers.setdefault("Cache-Control", f"public, max-age={self.max_age}")
        return response


def mount_browser_bundle(app: FastAPI, directory: str) -> bool:
    """Mount the bundle at `/`. Must run after API routes are registered."""
    if not os.path.isdir(directory):
        logger.warning("Client bundle not found at %s; static serving disabled", directory)
        return False
    app.mount("/", BundleStaticFiles(directory=directory), name="browser")
    logger.info("Serving client bundle from %s", directory)
    return True
