"""FastAPI HTTP API for browsing, exporting and importing notes."""

import logging
from datetime import datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import Response

from ..config import Config
from ..errors import DecodeError, StoreError
from ..exchange import (
    ImportMode,
    decode,
    delete_all,
    export_all,
    export_filename,
    import_batch,
)
from ..store import SQLiteNoteStore, StorePort, format_timestamp

logger = logging.getLogger(__name__)


def create_app(config: Config, store: StorePort) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Application configuration.
        store: Connected note store. The caller owns its lifecycle.

    Returns:
        Configured FastAPI application.
    """
    app = FastAPI(
        title="notesjson",
        description="Export and import notes as portable JSON",
        version="0.1.0",
    )

    app.state.config = config
    app.state.store = store

    @app.get("/api/notes")
    async def api_notes(limit: int = Query(100, ge=0)) -> dict[str, Any]:
        """List notes, newest first."""
        try:
            notes = store.fetch_all_sorted()
        except StoreError as e:
            raise HTTPException(status_code=500, detail=str(e))

        return {
            "count": len(notes),
            "notes": [
                {
                    "id": n.id,
                    "title": n.title,
                    "content": n.content,
                    "timestamp": format_timestamp(n.timestamp) if n.timestamp else None,
                }
                for n in notes[:limit]
            ],
        }

    @app.get("/api/export")
    async def api_export() -> Response:
        """Download every complete note as a JSON file."""
        try:
            data = export_all(store, indent=config.export.indent)
        except StoreError as e:
            raise HTTPException(status_code=500, detail=str(e))

        return Response(
            content=data,
            media_type="application/json",
            headers={
                "Content-Disposition": f'attachment; filename="{export_filename()}"'
            },
        )

    @app.post("/api/import")
    async def api_import(request: Request, mode: str | None = None) -> dict[str, Any]:
        """Import a JSON notes document sent as the request body."""
        try:
            import_mode = ImportMode.parse(mode or config.importing.default_mode)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        body = await request.body()

        try:
            records = decode(body)
        except DecodeError as e:
            raise HTTPException(status_code=400, detail=str(e))

        try:
            result = import_batch(records, import_mode, store)
        except StoreError as e:
            logger.error(f"Import failed: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        return result.to_dict()

    @app.delete("/api/notes")
    async def api_delete_all() -> dict[str, Any]:
        """Delete every note."""
        try:
            removed = delete_all(store)
        except StoreError as e:
            raise HTTPException(status_code=500, detail=str(e))

        return {"deleted": removed}

    @app.get("/api/stats")
    async def api_stats() -> dict[str, Any]:
        """Get store statistics."""
        stats: dict[str, Any] = {"timestamp": datetime.now().isoformat()}

        if isinstance(store, SQLiteNoteStore):
            stats.update(store.get_stats())
        else:
            stats["note_count"] = store.count()

        return stats

    @app.get("/api/health")
    async def api_health() -> dict[str, Any]:
        """Health check endpoint.

        Always returns 200 OK; store problems are reported in the body.
        """
        health: dict[str, Any] = {
            "status": "ok",
            "timestamp": datetime.now().isoformat(),
            "components": {"store": True},
        }

        try:
            health["components"]["note_count"] = store.count()
        except StoreError as e:
            health["status"] = "degraded"
            health["components"]["store_error"] = str(e)

        return health

    return app
