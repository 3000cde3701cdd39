"""Upload storage for the Redecor service.

Accepted photos are written to a single flat upload directory and served
back to clients (and to the generation service) by the ``/uploads`` static
mount.  There is no database and no index file: the directory listing is the
only persisted record.

Filenames follow the pattern ``<millisecond timestamp>-<salt><extension>``
where the salt is a random integer in ``[0, 1_000_000)`` and the extension is
copied from the client's original filename.  Files are created with
exclusive-create semantics, so two requests that draw the same name in the
same millisecond never overwrite each other: the loser draws a new salt.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from pathlib import Path

from .errors import StorageWriteError

logger = logging.getLogger(__name__)

SALT_UPPER_BOUND = 1_000_000

# Name draws before giving up on a directory that keeps colliding.
_MAX_NAME_ATTEMPTS = 16


@dataclass(frozen=True)
class UploadedAsset:
    """A photo accepted and persisted for one request.

    Attributes:
        generated_filename: Unique name inside the upload directory.
        source_mime_type: Media type declared by the client.
        byte_size: Number of bytes written.
        storage_path: Absolute path of the stored file.
    """

    generated_filename: str
    source_mime_type: str
    byte_size: int
    storage_path: Path


def prepare_upload_dir(upload_dir: Path) -> Path:
    """Create the upload directory if needed and return its absolute path.

    Called once during application startup, before requests are accepted.
    Safe to call repeatedly.

    Raises:
        StorageWriteError: If the directory cannot be created.
    """
    try:
        upload_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageWriteError(f"cannot create upload directory {upload_dir}: {e}") from e
    resolved = upload_dir.resolve()
    logger.info(f"Upload directory ready: {resolved}")
    return resolved


def generate_filename(
    original_filename: str | None,
    *,
    timestamp_ms: int | None = None,
    salt: int | None = None,
) -> str:
    """Build a storage filename from the time, a random salt and the extension.

    Only the extension of *original_filename* is kept; the client's base name
    and any directory components are discarded.

    Args:
        original_filename: Filename supplied by the client, may be empty.
        timestamp_ms: Milliseconds since the epoch (defaults to now).
        salt: Integer in ``[0, 1_000_000)`` (defaults to a random draw).

    Returns:
        A name such as ``1718031234567-482913.jpg``.
    """
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    if salt is None:
        salt = random.randrange(SALT_UPPER_BOUND)
    extension = Path(original_filename).suffix if original_filename else ""
    return f"{timestamp_ms}-{salt}{extension}"


def store_upload(
    upload_dir: Path,
    original_filename: str | None,
    content_type: str,
    data: bytes,
) -> UploadedAsset:
    """Write an accepted upload to *upload_dir* under a fresh name.

    The directory must already exist (see :func:`prepare_upload_dir`).
    This function performs blocking I/O; async callers should run it in a
    worker thread.

    Args:
        upload_dir: Destination directory.
        original_filename: Client filename, used for its extension only.
        content_type: Declared media type, recorded on the asset.
        data: File contents.

    Returns:
        The persisted :class:`UploadedAsset`.

    Raises:
        StorageWriteError: If the file cannot be written (disk full,
            permission denied, missing directory, ...).  Not retried.
    """
    for _ in range(_MAX_NAME_ATTEMPTS):
        filename = generate_filename(original_filename)
        path = upload_dir / filename
        try:
            with open(path, "xb") as handle:
                handle.write(data)
        except FileExistsError:
            logger.debug(f"Filename collision on {filename}, drawing a new salt")
            continue
        except OSError as e:
            # Leave no truncated file behind.
            path.unlink(missing_ok=True)
            raise StorageWriteError(f"cannot write {path}: {e}") from e

        logger.info(f"Stored upload {filename} ({len(data)} bytes, {content_type})")
        return UploadedAsset(
            generated_filename=filename,
            source_mime_type=content_type,
            byte_size=len(data),
            storage_path=path.resolve(),
        )

    raise StorageWriteError(f"no free filename in {upload_dir} after {_MAX_NAME_ATTEMPTS} attempts")
