"""Configuration management for the Redecor suggestion service.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the REDECOR_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (REDECOR_* prefix, plus the bare ``OPENAI_API_KEY``
   and ``PORT`` variables understood by most hosting platforms)
2. .env file in the project root
3. Default values defined in RedecorConfig

Example .env file:
    OPENAI_API_KEY=sk-...
    PORT=3000
    REDECOR_UPLOADS_DIR=uploads
    REDECOR_GENERATION__MODEL=gpt-4o-mini

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time.
Constructing the configuration has no filesystem side effects: the upload directory is created by
:func:`redecor.core.storage.prepare_upload_dir` during application startup.

Generation Parameters
---------------------
The sampling parameters sent to the chat-completion endpoint are constants of
the service, not values computed per request.  They are grouped in
:class:`GenerationParameters` so they can be documented and overridden in one
place:

- model: ``gpt-3.5-turbo``
- temperature: 0.8
- max_tokens: 400
- timeout_seconds: 30.0 (expiry is reported as an upstream failure)
"""

from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# 6 MiB upload ceiling.
MAX_UPLOAD_BYTES = 6 * 1024 * 1024

DEFAULT_STYLE = "moderne"

SYSTEM_MESSAGE = "You are a helpful interior designer that returns JSON."


class GenerationParameters(BaseModel):
    """Fixed parameters for the upstream chat-completion call.

    Attributes:
        api_url: Chat-completion endpoint URL.
        model: Model identifier sent with every request.
        temperature: Sampling temperature.
        max_tokens: Output length cap.
        timeout_seconds: Total timeout for one upstream call.
        system_message: System turn establishing the designer persona.
    """

    model_config = ConfigDict(frozen=True)

    api_url: str = Field(
        default="https://api.openai.com/v1/chat/completions",
        description="Chat-completion endpoint URL",
    )
    model: str = Field(
        default="gpt-3.5-turbo",
        description="Model identifier for the generation service",
    )
    temperature: float = Field(default=0.8, ge=0.0, le=2.0)
    max_tokens: int = Field(default=400, ge=1)
    timeout_seconds: float = Field(
        default=30.0,
        description="Upstream timeout; expiry is reported as an upstream failure",
        gt=0,
    )
    system_message: str = Field(default=SYSTEM_MESSAGE)


class RedecorConfig(BaseSettings):
    """Main configuration for the Redecor service.

    Attributes
    ----------
    Credentials:
        openai_api_key : str
            Bearer credential for the generation service.  Empty means the
            service starts but every ``POST /api/decor`` fails with 500.

    Server:
        server_host : str
            Bind address for uvicorn.
        server_port : int
            Listen port (1024-65535).

    Uploads:
        uploads_dir : Path
            Directory where accepted photos are written and served from.

    Generation:
        generation : GenerationParameters
            Fixed upstream sampling parameters.

    Examples
    --------
        >>> custom_config = RedecorConfig(
        ...     openai_api_key="sk-test",
        ...     uploads_dir="/tmp/uploads",
        ... )
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="REDECOR_",
        env_nested_delimiter="__",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("openai_api_key", "REDECOR_OPENAI_API_KEY", "OPENAI_API_KEY"),
        description="Credential for the generation service",
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=3000,
        validation_alias=AliasChoices("server_port", "REDECOR_SERVER_PORT", "PORT"),
        description="Server port",
        ge=1024,
        le=65535,
    )

    # Upload settings
    uploads_dir: Path = Field(
        default=Path("uploads"),
        description="Directory for uploaded photos",
    )

    generation: GenerationParameters = Field(default_factory=GenerationParameters)


# Global configuration instance, loaded from the environment and .env file.
config = RedecorConfig()
