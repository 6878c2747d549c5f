"""HTML pages for browsing and reading archives."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from zipshelf.catalog.errors import ArchiveNotFoundError
from zipshelf.catalog.store import CatalogStore
from zipshelf.web.deps import get_catalog

LOGGER = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
TEMPLATES = Jinja2Templates(directory=str(TEMPLATE_DIR))

router = APIRouter()


def _render(request: Request, template_name: str, context: dict[str, Any]) -> HTMLResponse:
    try:
        return TEMPLATES.TemplateResponse(request, template_name, context)
    except TemplateError as exc:
        LOGGER.exception("Unable to render %s: %s", template_name, exc)
        raise HTTPException(status_code=500, detail="Template rendering failed") from exc


@router.get("/", response_class=HTMLResponse)
async def listing(request: Request, catalog: CatalogStore = Depends(get_catalog)) -> HTMLResponse:
    return _render(request, "index.html", {"archives": catalog.all()})


@router.get("/{identifier}", response_class=HTMLResponse)
async def viewer(
    request: Request, identifier: str, catalog: CatalogStore = Depends(get_catalog)
) -> HTMLResponse:
    try:
        archive = catalog.lookup(identifier)
    except ArchiveNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Archive not found") from exc
    return _render(request, "viewer.html", {"identifier": identifier, "archive": archive})
