"""Nano Studio - FastAPI REST API layer.

Modules
-------
main
    FastAPI application factory, routes, error handlers and the
    ``main()`` CLI entry point.
models
    Pydantic models for request and response validation.
"""
