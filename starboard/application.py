"""Application factory that wires configuration into the management UI."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import FastAPI

from .client import RecordsClient
from .config import Settings, load_settings
from .web import create_app as create_web_app


def create_application(
    *,
    config_path: Optional[Path] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Create the ASGI application from the effective configuration."""

    if settings is None:
        settings = load_settings(config_path)
    return create_web_app(settings=settings, client=RecordsClient.from_settings(settings))


__all__ = ["create_application"]
