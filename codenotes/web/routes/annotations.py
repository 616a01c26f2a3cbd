"""Annotations anchored to a source file."""

from __future__ import annotations

from fastapi import APIRouter, Query  # type: ignore[import-not-found]
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]

from codenotes.json_utils import plain_data

from ..utils import get_service

router = APIRouter()


@router.get("/annotations")
async def annotations_for_source(path: str = Query(...)) -> JSONResponse:
    """Return the inline markers for the source file at ``path``.

    Args:
        path: Full path of the source file as stored in the notes.

    Returns:
        Markers ordered by source line.
    """

    markers = get_service().markers(path)
    return JSONResponse([plain_data(m) for m in markers])
