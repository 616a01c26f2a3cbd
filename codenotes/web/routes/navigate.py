"""Resolve jumps from a note section to its source line."""

from __future__ import annotations

from fastapi import APIRouter  # type: ignore[import-not-found]
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]

from codenotes.errors import CodeNotesError
from codenotes.json_utils import plain_data

from ..utils import get_service, http_error

router = APIRouter()


@router.get("/navigate")
async def navigate(note_id: str, section_line: int) -> JSONResponse:
    """Return the source and note positions of a section.

    Args:
        note_id: Note document holding the section.
        section_line: Line of the section header in the note.

    Returns:
        Navigation targets; 404 when the section or its source file is gone.
    """

    try:
        navigation = get_service().navigate(note_id, section_line)
    except CodeNotesError as exc:
        raise http_error(exc) from exc
    return JSONResponse(plain_data(navigation))
