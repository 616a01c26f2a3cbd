"""Change signals and explicit index refreshes."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException  # type: ignore[import-not-found]
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]
from pydantic import BaseModel  # type: ignore[import-not-found]

from codenotes.index import ChangeKind

from ..utils import get_service

router = APIRouter()


class ChangeEvent(BaseModel):
    """A note document was saved, created or deleted."""

    kind: ChangeKind
    path: str | None = None


@router.post("/refresh")
async def refresh() -> JSONResponse:
    """Rebuild the index from the note store."""

    service = get_service()
    count = service.refresh()
    return JSONResponse(
        {"references": count, "revision": service.index.revision}
    )


@router.post("/events")
async def change_event(payload: ChangeEvent) -> JSONResponse:
    """Apply a change signal to the index."""

    if payload.kind is not ChangeKind.REFRESH and not payload.path:
        raise HTTPException(status_code=422, detail="path is required")

    service = get_service()
    path = Path(payload.path) if payload.path else None
    changed = service.notify(payload.kind, path)
    return JSONResponse(
        {
            "changed": changed,
            "references": len(service.index),
            "revision": service.index.revision,
        }
    )
