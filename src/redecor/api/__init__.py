"""Redecor — FastAPI REST API layer.

This package contains the FastAPI application, Pydantic response models,
and the decoration prompt template.

Modules
-------
main
    Application factory, route handlers and the ``main()`` CLI entry point.
models
    Pydantic models for API response bodies.
prompt_builder
    Decoration prompt rendering.
"""
