"""Core pipeline for the Redecor service.

This package holds everything between the HTTP layer and the outside world:

- **config.py**: Environment-based configuration using Pydantic Settings
  (``REDECOR_`` prefix) and the fixed generation parameters.
- **errors.py**: Failure taxonomy, each class mapped to an HTTP status.
- **validation.py**: Media-type and size checks for uploads.
- **storage.py**: Unique filenames and writes into the upload directory.
- **generation.py**: Async chat-completion client.
- **extraction.py**: Two-branch suggestion extraction from raw model text.

Usage Example
-------------
    from redecor.core import GenerationClient, config, extract_suggestions

    client = GenerationClient(config.generation, config.openai_api_key)
    result = await client.complete(prompt)
    suggestions = extract_suggestions(result.raw_text).items
"""

from redecor.core.config import GenerationParameters, RedecorConfig, config
from redecor.core.extraction import (
    LineFallbackSuggestions,
    StructuredSuggestions,
    extract_suggestions,
)
from redecor.core.generation import GenerationClient, GenerationResult
from redecor.core.storage import UploadedAsset, prepare_upload_dir, store_upload

__all__ = [
    "GenerationClient",
    "GenerationParameters",
    "GenerationResult",
    "LineFallbackSuggestions",
    "RedecorConfig",
    "StructuredSuggestions",
    "UploadedAsset",
    "config",
    "extract_suggestions",
    "prepare_upload_dir",
    "store_upload",
]
