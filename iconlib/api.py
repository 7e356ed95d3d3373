"""
FastAPI application for the icon library.

- GET  /health              liveness plus snapshot sizes
- GET  /api/icons           search / filter / sort / paginate the catalog
- GET  /api/icons/aliases   live alias lookup for one composite icon key
- POST /api/reload          re-read both artifacts and swap the snapshot

Query parameters are accepted as raw strings and coerced leniently by
:class:`~iconlib.config.CatalogQuery`; bad paging values fall back to
defaults instead of producing a 422.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .catalog_query import query_catalog
from .config import (
    CORS_ALLOW_ORIGINS,
    AliasResponse,
    CatalogQuery,
    HealthResponse,
    IconsResponse,
)
from .snapshot import CatalogStore


def create_app(store: Optional[CatalogStore] = None) -> FastAPI:
    catalog_store = store or CatalogStore()

    app = FastAPI(title="Icon Library")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.catalog_store = catalog_store

    @app.on_event("startup")
    def startup_event() -> None:
        logger.info("Loading icon catalog...")
        catalog_store.load()

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        snapshot = catalog_store.snapshot
        return HealthResponse(
            status="healthy", icons=len(snapshot.icons), aliases=len(snapshot.aliases)
        )

    @app.get("/api/icons", response_model=IconsResponse)
    def list_icons(
        q: Optional[str] = None,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
        page: Optional[str] = None,
        limit: Optional[str] = None,
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        sort_order: Optional[str] = Query(None, alias="sortOrder"),
    ) -> IconsResponse:
        params = CatalogQuery(
            q=q,
            category=category,
            subcategory=subcategory,
            page=page,
            limit=limit,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        return query_catalog(catalog_store.snapshot, params)

    @app.get("/api/icons/aliases", response_model=AliasResponse)
    def icon_aliases(icon_key: Optional[str] = Query(None, alias="iconKey")) -> AliasResponse:
        if not icon_key or not icon_key.strip():
            raise HTTPException(status_code=400, detail="Missing iconKey parameter")
        aliases = catalog_store.snapshot.aliases_for(icon_key)
        return AliasResponse(icon_key=icon_key, aliases=aliases)

    @app.post("/api/reload", response_model=HealthResponse)
    def reload_catalog() -> HealthResponse:
        snapshot = catalog_store.reload()
        return HealthResponse(
            status="reloaded", icons=len(snapshot.icons), aliases=len(snapshot.aliases)
        )

    return app


app = create_app()
