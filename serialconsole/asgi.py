"""ASGI application factory for uvicorn.

Usage:
    uvicorn serialconsole.asgi:create_app_from_env --factory

Environment variables:
    SERIALCONSOLE_CONFIG_PATH: Path to config file (default: config.yaml)
    SERIALCONSOLE_LOG_LEVEL: Log level (default: WARNING)
"""

from fastapi import FastAPI


def create_app_from_env() -> FastAPI:
    """Create the FastAPI app, wiring dependencies at startup."""
    from serialconsole.app import create_app

    return create_app()
