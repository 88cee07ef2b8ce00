"""Nano Studio - FastAPI Application.

This module defines the local generation server: a thin, stateless proxy
between clients and the Gemini API that keeps the API key server-side and
optionally guards generation behind a shared access code.

Endpoints
---------
========  ====================  ==========================================
Method    Path                  Purpose
========  ====================  ==========================================
GET       ``/health``           Liveness probe
GET       ``/api/config``       Models, aspect ratios, sizes, auth flag
POST      ``/api/generate``     Generate images, returned as data URLs
========  ====================  ==========================================

Error bodies
------------
- ``401 {"error": ..., "code": "UNAUTHORIZED"}`` when the access gate
  rejects the call.
- ``500 {"error": ...}`` for every other failure, including input
  validation and remote API errors.

Usage
-----
CLI (installed entry point)::

    nanostudio-server

Direct invocation::

    python -m nanostudio.api.main
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nanostudio import __version__
from nanostudio.api.models import GenerateRequest, GenerateResponse
from nanostudio.core.access_gate import ACCESS_HEADER, AccessGate
from nanostudio.core.config import StudioConfig, config
from nanostudio.core.errors import StudioError, UnauthorizedError
from nanostudio.core.gemini_client import GeminiClient
from nanostudio.core.generator import ImageGenerator
from nanostudio.core.models import ASPECT_RATIOS, IMAGE_SIZES, ModelId
from nanostudio.core.orchestrator import validate_request

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error responses.
# ---------------------------------------------------------------------------


async def _unauthorized_handler(request: Request, exc: UnauthorizedError) -> JSONResponse:
    return JSONResponse(status_code=401, content={"error": exc.message, "code": "UNAUTHORIZED"})


async def _studio_error_handler(request: Request, exc: StudioError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": exc.message})


async def _request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed bodies with the same ``{"error"}`` shape as other failures."""
    details = "; ".join(
        f"{'.'.join(str(loc) for loc in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=500, content={"error": f"Invalid request: {details}"})


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    settings: StudioConfig | None = None,
    generator: ImageGenerator | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Configuration to use (defaults to the global ``config``).
        generator: Backend for generation calls.  Defaults to a
            :class:`GeminiClient` built from ``settings``; tests pass a fake.

    Returns:
        The configured application.
    """
    settings = settings or config

    app = FastAPI(
        title="Nano Studio",
        description="Image generation proxy for the Gemini Nano image models.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.gate = AccessGate(settings.access_secret)
    app.state.generator = generator or GeminiClient.from_config(settings)

    # The browser front end may be served from a different origin during
    # development.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Handlers are matched along the exception MRO: UnauthorizedError before StudioError.
    app.add_exception_handler(UnauthorizedError, _unauthorized_handler)
    app.add_exception_handler(StudioError, _studio_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    @app.get("/api/config")
    async def get_config() -> dict:
        """Return the options the front end needs to render its form.

        Returns:
            Dictionary with ``version``, ``models`` (id and label),
            ``aspect_ratios``, ``image_sizes`` and ``auth_required``.
        """
        return {
            "version": __version__,
            "models": [{"id": model.value, "label": model.label} for model in ModelId],
            "aspect_ratios": list(ASPECT_RATIOS),
            "image_sizes": list(IMAGE_SIZES),
            "auth_required": app.state.gate.enabled,
        }

    @app.post("/api/generate", response_model=GenerateResponse)
    async def generate_images(
        req: GenerateRequest,
        access_code: str | None = Header(default=None, alias=ACCESS_HEADER),
    ) -> GenerateResponse:
        """Generate images for one request.

        The access gate runs first, then input validation, then the single
        remote call.  Nothing is stored server-side.

        Args:
            req: Validated :class:`GenerateRequest` payload.
            access_code: Value of the ``X-Access-Code`` header, if any.

        Returns:
            :class:`GenerateResponse` with one data URL per image.

        Raises:
            UnauthorizedError: Missing or wrong access code (401).
            StudioError: Any other failure (500).
        """
        app.state.gate.check(access_code)

        generation_request = req.to_generation_request()
        validate_request(generation_request)

        logger.info(
            f"Generate request: model={generation_request.model.value}, "
            f"reference_images={len(generation_request.reference_images)}"
        )
        urls = await app.state.generator.generate_images(generation_request)
        return GenerateResponse(images=urls)

    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Host and port come from ``NANOSTUDIO_SERVER_HOST`` and
    ``NANOSTUDIO_SERVER_PORT`` (defaults ``0.0.0.0:8787``).
    """
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if not config.gemini_api_key:
        logger.warning("No Gemini API key configured; generation calls will fail")

    uvicorn.run(
        "nanostudio.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
