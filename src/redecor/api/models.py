"""Pydantic response models for the Redecor API.

``POST /api/decor`` takes a multipart form (``photo`` file, optional
``style`` text), so there is no JSON request model; these models describe
the JSON bodies the API returns and feed FastAPI's OpenAPI documentation.

Models
------
DecorResponse
    Success body of ``POST /api/decor``.
ErrorResponse
    Body of every 400/500 response produced by the decoration pipeline.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class DecorResponse(BaseModel):
    """Response body for a successful ``POST /api/decor``.

    Attributes:
        suggestions: Ordered redecoration suggestions (normally five, may be
            fewer when the generation output was not well-formed).
        image_url: Public URL of the stored photo, serialised as
            ``imageUrl``.
    """

    model_config = ConfigDict(populate_by_name=True)

    suggestions: list[str] = Field(
        ...,
        description="Ordered redecoration suggestions.",
    )
    image_url: str = Field(
        ...,
        alias="imageUrl",
        description="Public URL of the uploaded photo under /uploads.",
    )


class ErrorResponse(BaseModel):
    """Response body for pipeline failures.

    Attributes:
        error: Message safe to display to the end user.
    """

    error: str = Field(
        ...,
        description="User-facing error message.",
    )
