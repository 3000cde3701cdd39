"""Upload validation for incoming photos."""

import logging

from .config import MAX_UPLOAD_BYTES
from .errors import PayloadTooLarge, UnsupportedMediaType

logger = logging.getLogger(__name__)

IMAGE_MEDIA_PREFIX = "image/"


def validate_media_type(content_type: str | None) -> None:
    """Reject anything that is not declared as an image.

    Args:
        content_type: Media type declared by the client for the upload.

    Raises:
        UnsupportedMediaType: If the type is missing or not ``image/*``.
    """
    if not content_type or not content_type.lower().startswith(IMAGE_MEDIA_PREFIX):
        logger.info(f"Rejected upload with media type {content_type!r}")
        raise UnsupportedMediaType(f"media type {content_type!r} is not an image")


def validate_size(byte_size: int, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    """Reject payloads larger than *max_bytes*.

    Raises:
        PayloadTooLarge: If ``byte_size`` exceeds the ceiling.
    """
    if byte_size > max_bytes:
        logger.info(f"Rejected upload of {byte_size} bytes (limit {max_bytes})")
        raise PayloadTooLarge(f"{byte_size} bytes exceeds the {max_bytes} byte limit")


def validate_upload(
    content_type: str | None,
    byte_size: int,
    max_bytes: int = MAX_UPLOAD_BYTES,
) -> None:
    """Accept an upload only if it is an image no larger than *max_bytes*.

    The media type is checked first, so an oversized non-image is reported
    as an unsupported type.  Validation has no side effects.

    Args:
        content_type: Declared media type of the upload.
        byte_size: Size of the upload in bytes.
        max_bytes: Inclusive size ceiling.

    Raises:
        UnsupportedMediaType: Wrong media type.
        PayloadTooLarge: Payload exceeds the ceiling.
    """
    validate_media_type(content_type)
    validate_size(byte_size, max_bytes)
