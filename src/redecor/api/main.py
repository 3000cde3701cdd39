"""Redecor — FastAPI Application.

This module is the single entry point for the web application.  It defines
the application factory, the module-level ``app`` instance, the REST routes
and the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application is stateless between requests:

- **Configuration** comes from :data:`redecor.core.config.config`
  (environment variables and ``.env``).
- **Uploads** are validated, then written to the upload directory under a
  unique ``<ms>-<salt><ext>`` name; the directory is served back by
  FastAPI's ``StaticFiles`` at ``/uploads`` and is the only persisted state.
- **Suggestions** come from the generation service through a single
  :class:`~redecor.core.generation.GenerationClient` created at startup.
- **Errors** raised anywhere in the pipeline are :class:`DecorError`
  subclasses; one exception handler turns them into ``{"error": ...}``
  bodies and logs the diagnostic detail.

Endpoints
---------
========  ======================  ======================================
Method    Path                    Purpose
========  ======================  ======================================
GET       ``/api/test``           Liveness check
POST      ``/api/decor``          Photo + style → suggestions + image URL
GET       ``/uploads/{file}``     Previously uploaded photos
========  ======================  ======================================

Usage
-----
CLI (installed entry point)::

    redecor

Direct invocation::

    python -m redecor.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from redecor import __version__
from redecor.api.models import DecorResponse, ErrorResponse
from redecor.api.prompt_builder import build_decor_prompt
from redecor.core.config import DEFAULT_STYLE, MAX_UPLOAD_BYTES, RedecorConfig, config
from redecor.core.errors import DecorError, NoFileProvided, UpstreamError
from redecor.core.extraction import StructuredSuggestions, extract_suggestions
from redecor.core.generation import GenerationClient
from redecor.core.storage import prepare_upload_dir, store_upload
from redecor.core.validation import validate_upload

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Dependencies.
# ---------------------------------------------------------------------------


def get_config(request: Request) -> RedecorConfig:
    """Return the configuration the application was built with."""
    return request.app.state.config


def get_generation_client(request: Request) -> GenerationClient:
    """Return the generation client created during startup."""
    return request.app.state.generation_client


# ---------------------------------------------------------------------------
# Error handling.
# ---------------------------------------------------------------------------


async def decor_error_handler(request: Request, exc: DecorError) -> JSONResponse:
    """Render a pipeline failure as ``{"error": message}``.

    Client errors are logged at info level.  Server errors are logged with
    the full exception chain and, for upstream failures, the upstream body;
    none of that detail reaches the response.
    """
    if exc.status_code >= 500:
        detail = f"{type(exc).__name__} on {request.url.path}: {exc}"
        if isinstance(exc, UpstreamError):
            detail += f" (upstream status={exc.upstream_status}, payload={exc.payload!r})"
        logger.error(detail, exc_info=exc)
    else:
        logger.info(f"Rejected {request.url.path}: {type(exc).__name__}: {exc}")

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.public_message).model_dump(),
    )


async def form_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Treat a ``photo`` field that is not a file as a missing photo.

    Any other validation failure keeps FastAPI's default rendering.
    """
    if any(tuple(error.get("loc", ())) == ("body", "photo") for error in exc.errors()):
        return await decor_error_handler(request, NoFileProvided("photo field is not a file"))
    return await request_validation_exception_handler(request, exc)


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@router.get("/api/test")
async def liveness() -> dict:
    """Liveness check.

    Returns:
        ``{"ok": true}``.
    """
    return {"ok": True}


@router.post(
    "/api/decor",
    response_model=DecorResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_decor_suggestions(
    request: Request,
    photo: UploadFile | None = File(default=None),
    style: str | None = Form(default=None),
    app_config: RedecorConfig = Depends(get_config),
    generation_client: GenerationClient = Depends(get_generation_client),
) -> DecorResponse:
    """Suggest redecoration ideas for an uploaded room photo.

    This endpoint:

    1. Checks a ``photo`` file is present and is an image of at most 6 MiB.
    2. Stores it under a unique name in the upload directory.
    3. Resolves the photo's public URL from the request's scheme and host.
    4. Renders the decoration prompt for the requested style.
    5. Calls the generation service.
    6. Extracts the suggestion list from its answer.

    Args:
        request: Incoming request, used to build the public image URL.
        photo: Uploaded room photo (``image/*``).
        style: Desired decoration style; ``"moderne"`` when absent or empty.

    Returns:
        :class:`DecorResponse` with ``suggestions`` and ``imageUrl``.

    Raises:
        NoFileProvided: 400, no ``photo`` field.
        UnsupportedMediaType: 400, not an image.
        PayloadTooLarge: 400, larger than 6 MiB.
        MissingCredential: 500, no generation credential configured.
        StorageWriteError: 500, the photo could not be written.
        UpstreamError: 500, the generation call failed.
    """
    # --- Validate ----------------------------------------------------------
    if photo is None:
        raise NoFileProvided("request has no photo field")

    # Reading one byte past the ceiling is enough to detect an oversized
    # upload without buffering all of it.
    data = await photo.read(MAX_UPLOAD_BYTES + 1)
    validate_upload(photo.content_type, len(data), MAX_UPLOAD_BYTES)

    # --- Store -------------------------------------------------------------
    asset = await run_in_threadpool(
        store_upload,
        app_config.uploads_dir,
        photo.filename,
        photo.content_type,
        data,
    )

    # --- Prompt ------------------------------------------------------------
    resolved_style = style or DEFAULT_STYLE
    image_url = str(request.url_for("uploads", path=asset.generated_filename))
    prompt = build_decor_prompt(resolved_style, image_url)

    # --- Generate and extract ----------------------------------------------
    result = await generation_client.complete(prompt)
    extracted = extract_suggestions(result.raw_text)
    if not isinstance(extracted, StructuredSuggestions):
        logger.warning(f"Degraded suggestions for {asset.generated_filename}: {result.raw_text!r}")

    return DecorResponse(suggestions=extracted.items, image_url=image_url)


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(app_config: RedecorConfig = config) -> FastAPI:
    """Build the FastAPI application for *app_config*.

    Startup creates the upload directory before any request is accepted,
    then the generation client.  Shutdown closes the client's connection
    pool.

    Args:
        app_config: Configuration to serve with (the global config by
            default).

    Returns:
        The configured application.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # --- Startup -------------------------------------------------------
        prepare_upload_dir(app_config.uploads_dir)
        app.state.generation_client = GenerationClient(
            app_config.generation,
            app_config.openai_api_key,
        )
        if not app.state.generation_client.has_credential:
            logger.warning("No OPENAI_API_KEY configured; /api/decor will fail with 500.")
        logger.info(f"Generation client ready (model {app_config.generation.model}).")

        yield  # Application runs here.

        # --- Shutdown ------------------------------------------------------
        await app.state.generation_client.aclose()
        logger.info("Generation client closed on shutdown.")

    app = FastAPI(
        title="Redecor",
        description="Interior redecoration suggestions from a room photo and a style.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = app_config

    # The frontend is served from a different origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # The directory is created by the lifespan, after the mount is declared.
    app.mount(
        "/uploads",
        StaticFiles(directory=str(app_config.uploads_dir), check_dir=False),
        name="uploads",
    )

    app.add_exception_handler(DecorError, decor_error_handler)
    app.add_exception_handler(RequestValidationError, form_validation_error_handler)
    app.include_router(router)
    return app


app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~redecor.core.config.config` (``PORT`` or
    ``REDECOR_SERVER_PORT``, ``REDECOR_SERVER_HOST``).  Defaults to
    ``0.0.0.0:3000``.

    This function is registered as the ``redecor`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    uvicorn.run(
        "redecor.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
