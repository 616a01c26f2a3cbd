"""Free-text search across all notes."""

from __future__ import annotations

from fastapi import APIRouter  # type: ignore[import-not-found]
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]
from pydantic import BaseModel  # type: ignore[import-not-found]

from codenotes.json_utils import plain_data

from ..utils import get_service

router = APIRouter()


class SearchRequest(BaseModel):
    """Input payload for the search endpoint."""

    query: str


@router.get("/search")
async def search_get(query: str) -> JSONResponse:
    """Search titles, annotations and code snippets via query params.

    Args:
        query: Text to search for.

    Returns:
        Matches grouped by note document.
    """

    results = get_service().search(query)
    return JSONResponse([plain_data(r) for r in results])


@router.post("/search")
async def search_post(payload: SearchRequest) -> JSONResponse:
    """Search titles, annotations and code snippets via JSON body."""

    results = get_service().search(payload.query)
    return JSONResponse([plain_data(r) for r in results])
