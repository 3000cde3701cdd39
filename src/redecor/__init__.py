"""Redecor - interior redecoration suggestions from a room photo."""

__version__ = "0.1.0"

from redecor.core.config import GenerationParameters, RedecorConfig, config

__all__ = [
    "GenerationParameters",
    "RedecorConfig",
    "config",
]
