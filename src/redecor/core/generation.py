"""Chat-completion client for the generation service.

:class:`GenerationClient` wraps a single :class:`httpx.AsyncClient` that is
created when the application starts and closed on shutdown.  Each call sends
a two-message exchange (fixed system persona, then the rendered prompt) with
the fixed sampling parameters from
:class:`~redecor.core.config.GenerationParameters`, and returns the text of
the first completion.

Request body::

    {
        "model": "gpt-3.5-turbo",
        "messages": [
            {"role": "system", "content": "<persona>"},
            {"role": "user", "content": "<prompt>"}
        ],
        "temperature": 0.8,
        "max_tokens": 400
    }

Failure Mapping
---------------
- empty credential → :class:`MissingCredential` (no request is sent)
- timeout, connection error → :class:`UpstreamError`
- non-2xx status (auth, rate limit, ...) → :class:`UpstreamError` carrying
  the upstream body as ``payload``
- body without ``choices[0].message`` → :class:`UpstreamError`

No call is ever retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .config import GenerationParameters
from .errors import MissingCredential, UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """Raw text produced by one upstream call."""

    raw_text: str


def _response_payload(response: httpx.Response) -> Any:
    """Best-effort decode of an upstream body for diagnostics."""
    try:
        return response.json()
    except ValueError:
        return response.text


def _first_completion_text(body: Any) -> str:
    """Return ``choices[0].message.content`` or raise :class:`UpstreamError`."""
    choices = body.get("choices") if isinstance(body, dict) else None
    if not isinstance(choices, list) or not choices:
        raise UpstreamError("response has no choices", payload=body)

    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    if not isinstance(message, dict):
        raise UpstreamError("first choice has no message", payload=body)

    content = message.get("content")
    if content is None:
        return ""
    if not isinstance(content, str):
        raise UpstreamError("message content is not text", payload=body)
    return content


class GenerationClient:
    """Async client for the chat-completion endpoint.

    Args:
        params: Fixed model and sampling parameters.
        api_key: Bearer credential.  May be empty, in which case every call
            fails with :class:`MissingCredential`.
        transport: Optional httpx transport, used by tests to stub the
            upstream service.
    """

    def __init__(
        self,
        params: GenerationParameters,
        api_key: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.params = params
        self._api_key = api_key
        self._client = httpx.AsyncClient(
            timeout=params.timeout_seconds,
            transport=transport,
        )

    @property
    def has_credential(self) -> bool:
        return bool(self._api_key and self._api_key.strip())

    def build_payload(self, prompt: str) -> dict:
        """Build the JSON body for one completion request."""
        return {
            "model": self.params.model,
            "messages": [
                {"role": "system", "content": self.params.system_message},
                {"role": "user", "content": prompt},
            ],
            "temperature": self.params.temperature,
            "max_tokens": self.params.max_tokens,
        }

    async def complete(self, prompt: str) -> GenerationResult:
        """Send *prompt* to the generation service and return its answer.

        Args:
            prompt: Rendered user prompt.

        Returns:
            The first completion's text, empty if the service sent none.

        Raises:
            MissingCredential: No credential configured.
            UpstreamError: Transport, HTTP or response-shape failure.
        """
        if not self.has_credential:
            raise MissingCredential("no credential configured for the generation service")

        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._client.post(
                self.params.api_url,
                json=self.build_payload(prompt),
                headers=headers,
            )
        except httpx.TimeoutException as e:
            raise UpstreamError(
                f"generation service timed out after {self.params.timeout_seconds}s"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(f"generation service unreachable: {e}") from e

        if response.is_error:
            raise UpstreamError(
                f"generation service returned HTTP {response.status_code}",
                payload=_response_payload(response),
                upstream_status=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError("generation service returned non-JSON body", payload=response.text) from e

        text = _first_completion_text(body)
        logger.info(f"Generation completed with model {self.params.model} ({len(text)} chars)")
        return GenerationResult(raw_text=text)

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()
