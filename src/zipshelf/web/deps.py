"""Request-scoped accessors for application state."""

from __future__ import annotations

from fastapi import Request

from zipshelf.catalog.store import CatalogStore
from zipshelf.config import AppConfig


def get_catalog(request: Request) -> CatalogStore:
    return request.app.state.catalog


def get_config(request: Request) -> AppConfig:
    return request.app.state.config
