"""FastAPI application serving the archive catalog."""

from __future__ import annotations

import logging
import mimetypes
import re
from typing import Any, List

from fastapi import APIRouter, Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from zipshelf.catalog.codec import decode_identifier
from zipshelf.catalog.errors import (
    ArchiveNotFoundError,
    ArchiveReadError,
    EntryNotFoundError,
    IdentifierError,
)
from zipshelf.catalog.locator import open_entry
from zipshelf.catalog.store import CatalogStore
from zipshelf.config import AppConfig
from zipshelf.models import ArchiveEntry
from zipshelf.web.deps import get_catalog, get_config
from zipshelf.web.frontend import router as frontend_router

LOGGER = logging.getLogger(__name__)

router = APIRouter()

_INDEX_PATTERN = re.compile(r"-?[0-9]+")


class ArchiveSummary(BaseModel):
    identifier: str
    name: str
    entry_count: int


class ArchiveDetail(ArchiveSummary):
    entry_names: List[str]
    pages: List[int]


class ArchiveListing(BaseModel):
    archives: List[ArchiveSummary]
    count: int


def _summary(identifier: str, archive: ArchiveEntry) -> ArchiveSummary:
    return ArchiveSummary(identifier=identifier, name=archive.name, entry_count=archive.entry_count)


@router.get("/health")
async def health(catalog: CatalogStore = Depends(get_catalog)) -> dict[str, Any]:
    return {"status": "ok", "archives": len(catalog)}


@router.get("/api/archives")
async def list_archives(catalog: CatalogStore = Depends(get_catalog)) -> ArchiveListing:
    """List all indexed archives."""
    archives = [_summary(identifier, archive) for identifier, archive in catalog.all()]
    return ArchiveListing(archives=archives, count=len(archives))


@router.get("/api/archives/{identifier}")
async def describe_archive(
    identifier: str, catalog: CatalogStore = Depends(get_catalog)
) -> ArchiveDetail:
    try:
        archive = catalog.lookup(identifier)
    except ArchiveNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Archive not found") from exc
    return ArchiveDetail(
        identifier=identifier,
        name=archive.name,
        entry_count=archive.entry_count,
        entry_names=list(archive.entry_names),
        pages=list(archive.pages),
    )


@router.get("/{identifier}/{index}")
def get_page(
    identifier: str,
    index: str,
    catalog: CatalogStore = Depends(get_catalog),
    config: AppConfig = Depends(get_config),
) -> StreamingResponse:
    """Stream one archive entry."""
    if not _INDEX_PATTERN.fullmatch(index):
        raise HTTPException(status_code=400, detail=f"Invalid page index: {index!r}")
    try:
        position = int(index)
    except ValueError as exc:
        # Longer than the int conversion limit, so far past any archive.
        raise HTTPException(status_code=404, detail="Page not found") from exc

    try:
        path = decode_identifier(identifier)
    except IdentifierError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if identifier not in catalog:
        raise HTTPException(status_code=404, detail="Archive not found")

    try:
        stream = open_entry(path, position)
    except EntryNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Page not found") from exc
    except ArchiveReadError as exc:
        LOGGER.error("Unable to read %s[%s]: %s", path, position, exc)
        raise HTTPException(status_code=500, detail="Unable to read archive") from exc

    media_type = mimetypes.guess_type(stream.name)[0] or "application/octet-stream"
    headers = {
        "Cache-Control": config.cache_control,
        "Content-Length": str(stream.size),
    }
    return StreamingResponse(
        stream.iter_chunks(config.chunk_size), media_type=media_type, headers=headers
    )


def create_app(catalog: CatalogStore, config: AppConfig | None = None) -> FastAPI:
    """Create the web application around an already built catalog."""
    app = FastAPI(title="zipshelf", version="0.1.0")
    app.state.catalog = catalog
    app.state.config = config if config is not None else AppConfig()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    # Fixed paths first: "/{identifier}" would otherwise shadow them.
    app.include_router(router)
    app.include_router(frontend_router)
    return app
