"""Error taxonomy for the decoration pipeline.

Every failure that can end a ``POST /api/decor`` request is a subclass of
:class:`DecorError`.  Each class carries the HTTP status and the message that
is safe to show to the caller; diagnostic detail (upstream payloads, OS error
text) stays on the exception instance and is only ever logged.

Poor-quality upstream output is not an error: the suggestion extractor
degrades to a shorter list instead of raising.
"""

from __future__ import annotations

from typing import Any


class DecorError(Exception):
    """Base class for pipeline failures mapped to an HTTP response."""

    status_code: int = 500
    public_message: str = "Erreur serveur lors de la génération IA."


class NoFileProvided(DecorError):
    """The request carried no ``photo`` file."""

    status_code = 400
    public_message = "Aucune image reçue."


class UnsupportedMediaType(DecorError):
    """The uploaded file does not declare an ``image/*`` media type."""

    status_code = 400
    public_message = "Seules les images sont acceptées."


class PayloadTooLarge(DecorError):
    """The uploaded file exceeds the size ceiling."""

    status_code = 400
    public_message = "Image trop volumineuse (6 Mo maximum)."


class MissingCredential(DecorError):
    """No credential is configured for the generation service."""

    status_code = 500
    public_message = "OPENAI_API_KEY introuvable côté serveur."


class StorageWriteError(DecorError):
    """The accepted upload could not be written to disk."""


class UpstreamError(DecorError):
    """The generation service call failed.

    Covers network errors, timeouts, authentication and rate-limit
    rejections, and responses that do not have the chat-completion shape.

    Args:
        message: Short description for the logs.
        payload: Diagnostic body returned by the upstream, if any.
        upstream_status: HTTP status returned by the upstream, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        payload: Any = None,
        upstream_status: int | None = None,
    ) -> None:
        super().__init__(message)
        self.payload = payload
        self.upstream_status = upstream_status
