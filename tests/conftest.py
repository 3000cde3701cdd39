"""Shared pytest fixtures for Redecor tests."""

from __future__ import annotations

import io
import json
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import httpx
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from redecor.api.main import create_app, get_generation_client
from redecor.core.config import RedecorConfig
from redecor.core.generation import GenerationClient

FIVE_SUGGESTIONS = [
    "Remplacer le canapé par un modèle en lin clair.",
    "Peindre un mur d'accent en vert sauge.",
    "Ajouter un tapis en laine à motifs géométriques.",
    "Mélanger bois blond et textiles tressés.",
    "Installer une suspension en rotin au-dessus de la table.",
]


def completion_body(content: str | None) -> dict:
    """Build a chat-completion response body with a single choice."""
    return {
        "id": "chatcmpl-test",
        "object": "chat.completion",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


class FakeUpstream:
    """Scriptable stand-in for the chat-completion endpoint.

    Records every request it receives.  By default it answers 200 with the
    five :data:`FIVE_SUGGESTIONS` as JSON; tests change ``status_code``,
    ``body`` or ``error`` to simulate other behaviour.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: object = completion_body(json.dumps({"suggestions": FIVE_SUGGESTIONS}))
        self.error: Exception | None = None

    def reply_with_text(self, content: str | None) -> None:
        self.body = completion_body(content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, (dict, list)):
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code, text=str(self.body))

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> RedecorConfig:
    """Create a test configuration with a temporary upload directory.

    The upload directory is not created here; application startup does it.
    """
    return RedecorConfig(
        openai_api_key="sk-test",
        uploads_dir=str(temp_dir / "uploads"),
        _env_file=None,
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    """Fake generation service answering with five JSON suggestions."""
    return FakeUpstream()


@pytest.fixture
def generation_client(test_config: RedecorConfig, upstream: FakeUpstream) -> GenerationClient:
    """Generation client wired to the fake upstream."""
    return GenerationClient(
        test_config.generation,
        test_config.openai_api_key,
        transport=upstream.transport,
    )


@pytest.fixture
def test_client(
    test_config: RedecorConfig,
    generation_client: GenerationClient,
) -> Generator[TestClient, None, None]:
    """FastAPI TestClient whose generation calls go to the fake upstream.

    The client is used as a context manager so the application lifespan
    (upload directory creation) runs.
    """
    app = create_app(test_config)
    app.dependency_overrides[get_generation_client] = lambda: generation_client
    with TestClient(app) as client:
        yield client


@pytest.fixture
def png_bytes() -> bytes:
    """A small valid PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 180, 150)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def five_suggestions() -> list[str]:
    """The suggestions the fake upstream returns by default."""
    return list(FIVE_SUGGESTIONS)
