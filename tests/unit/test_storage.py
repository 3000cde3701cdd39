"""Unit tests for redecor.core.storage — filenames and upload writes."""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from redecor.core import storage
from redecor.core.errors import StorageWriteError
from redecor.core.storage import (
    SALT_UPPER_BOUND,
    UploadedAsset,
    generate_filename,
    prepare_upload_dir,
    store_upload,
)

FILENAME_PATTERN = re.compile(r"^(\d+)-(\d+)(\.\w+)?$")


class TestGenerateFilename:
    """Tests for generate_filename."""

    def test_explicit_parts(self):
        assert generate_filename("salon.jpg", timestamp_ms=1718031234567, salt=42) == (
            "1718031234567-42.jpg"
        )

    def test_default_parts_match_pattern(self):
        name = generate_filename("salon.png")
        match = FILENAME_PATTERN.match(name)
        assert match
        assert 0 <= int(match.group(2)) < SALT_UPPER_BOUND
        assert match.group(3) == ".png"

    def test_keeps_only_last_extension(self):
        assert generate_filename("archive.tar.gz", timestamp_ms=1, salt=2) == "1-2.gz"

    def test_no_extension(self):
        assert generate_filename("photo", timestamp_ms=1, salt=2) == "1-2"

    def test_missing_original_name(self):
        assert generate_filename(None, timestamp_ms=1, salt=2) == "1-2"
        assert generate_filename("", timestamp_ms=1, salt=2) == "1-2"

    def test_directory_components_discarded(self):
        assert generate_filename("../../etc/evil.jpg", timestamp_ms=1, salt=2) == "1-2.jpg"

    def test_extension_case_preserved(self):
        assert generate_filename("IMG_0001.JPG", timestamp_ms=1, salt=2) == "1-2.JPG"


class TestPrepareUploadDir:
    """Tests for prepare_upload_dir."""

    def test_creates_directory(self, temp_dir: Path):
        target = temp_dir / "uploads"
        resolved = prepare_upload_dir(target)
        assert target.is_dir()
        assert resolved == target.resolve()

    def test_creates_nested_directories(self, temp_dir: Path):
        target = temp_dir / "a" / "b" / "uploads"
        prepare_upload_dir(target)
        assert target.is_dir()

    def test_idempotent(self, temp_dir: Path):
        target = temp_dir / "uploads"
        prepare_upload_dir(target)
        (target / "existing.png").write_bytes(b"x")
        prepare_upload_dir(target)
        assert (target / "existing.png").exists()

    def test_fails_when_path_is_a_file(self, temp_dir: Path):
        target = temp_dir / "uploads"
        target.write_text("not a directory")
        with pytest.raises(StorageWriteError):
            prepare_upload_dir(target)


class TestStoreUpload:
    """Tests for store_upload."""

    def test_writes_file(self, temp_dir: Path):
        asset = store_upload(temp_dir, "salon.png", "image/png", b"png-bytes")
        assert isinstance(asset, UploadedAsset)
        assert asset.storage_path == (temp_dir / asset.generated_filename).resolve()
        assert asset.storage_path.read_bytes() == b"png-bytes"
        assert asset.byte_size == 9
        assert asset.source_mime_type == "image/png"
        assert asset.generated_filename.endswith(".png")

    def test_asset_is_immutable(self, temp_dir: Path):
        asset = store_upload(temp_dir, "salon.png", "image/png", b"x")
        with pytest.raises(AttributeError):
            asset.byte_size = 2

    def test_identical_bytes_stored_twice(self, temp_dir: Path):
        first = store_upload(temp_dir, "salon.png", "image/png", b"same")
        second = store_upload(temp_dir, "salon.png", "image/png", b"same")
        assert first.generated_filename != second.generated_filename
        assert len(list(temp_dir.iterdir())) == 2

    def test_unique_names_under_concurrency(self, temp_dir: Path):
        """1000 concurrent submissions never share a filename."""
        with ThreadPoolExecutor(max_workers=32) as pool:
            assets = list(
                pool.map(
                    lambda i: store_upload(temp_dir, "room.jpg", "image/jpeg", str(i).encode()),
                    range(1000),
                )
            )
        names = {asset.generated_filename for asset in assets}
        assert len(names) == 1000
        assert len(list(temp_dir.iterdir())) == 1000
        # Every submission kept its own bytes.
        for i, asset in enumerate(assets):
            assert asset.storage_path.read_bytes() == str(i).encode()

    def test_collision_draws_new_name(self, temp_dir: Path, monkeypatch):
        """A name already on disk is never overwritten."""
        (temp_dir / "1-1.png").write_bytes(b"original")
        names = iter(["1-1.png", "1-2.png"])
        monkeypatch.setattr(storage, "generate_filename", lambda original: next(names))

        asset = store_upload(temp_dir, "x.png", "image/png", b"new")

        assert asset.generated_filename == "1-2.png"
        assert (temp_dir / "1-1.png").read_bytes() == b"original"

    def test_gives_up_when_every_name_collides(self, temp_dir: Path, monkeypatch):
        (temp_dir / "1-1.png").write_bytes(b"original")
        monkeypatch.setattr(storage, "generate_filename", lambda original: "1-1.png")
        with pytest.raises(StorageWriteError):
            store_upload(temp_dir, "x.png", "image/png", b"new")

    def test_missing_directory(self, temp_dir: Path):
        with pytest.raises(StorageWriteError):
            store_upload(temp_dir / "missing", "salon.png", "image/png", b"x")
