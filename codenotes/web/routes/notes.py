"""Create, list, select and delete note documents."""

from __future__ import annotations

from fastapi import APIRouter  # type: ignore[import-not-found]
from fastapi.responses import JSONResponse  # type: ignore[import-not-found]
from pydantic import BaseModel, Field  # type: ignore[import-not-found]

from codenotes.errors import CodeNotesError
from codenotes.json_utils import plain_data

from ..utils import get_service, http_error

router = APIRouter()


class CreateNoteRequest(BaseModel):
    """Input payload for creating a note."""

    name: str


class AnnotationRequest(BaseModel):
    """Input payload for annotating a source line."""

    path: str
    line: int = Field(ge=1)
    annotation: str | None = None
    snippet: str | None = None
    language: str | None = None


@router.get("/notes")
async def list_notes() -> JSONResponse:
    """List the note documents with their reference counts."""

    service = get_service()
    current = service.current_note
    return JSONResponse(
        [
            {
                **plain_data(summary),
                "references_label": summary.references_label,
                "current": summary.note_id == current,
            }
            for summary in service.list_notes()
        ]
    )


@router.post("/notes", status_code=201)
async def create_note(payload: CreateNoteRequest) -> JSONResponse:
    """Create a note and make it the current one."""

    service = get_service()
    try:
        path = service.create_note(payload.name)
    except CodeNotesError as exc:
        raise http_error(exc) from exc
    return JSONResponse(
        {"note_id": path.name, "path": str(path)}, status_code=201
    )


@router.get("/notes/{note_id}")
async def get_note(note_id: str) -> JSONResponse:
    """Return the indexed sections of a note."""

    service = get_service()
    try:
        found = service.note_sections(note_id)
    except CodeNotesError as exc:
        raise http_error(exc) from exc
    return JSONResponse(
        {
            "note_id": service.store.note_id(note_id),
            "sections": [plain_data(s) for s in found],
        }
    )


@router.post("/notes/{note_id}/select")
async def select_note(note_id: str) -> JSONResponse:
    """Make a note the current one."""

    service = get_service()
    try:
        selected = service.select_note(note_id)
    except CodeNotesError as exc:
        raise http_error(exc) from exc
    return JSONResponse({"current_note": selected})


@router.delete("/notes/{note_id}")
async def delete_note(note_id: str) -> JSONResponse:
    """Delete a note and drop its references from the index."""

    service = get_service()
    try:
        path = service.delete_note(note_id)
    except CodeNotesError as exc:
        raise http_error(exc) from exc
    return JSONResponse({"deleted": path.name})


@router.post("/notes/{note_id}/annotations", status_code=201)
async def add_annotation(
    note_id: str, payload: AnnotationRequest
) -> JSONResponse:
    """Append an annotation section for a source line to a note."""

    service = get_service()
    try:
        entry = service.add_annotation(
            payload.path,
            payload.line,
            annotation=payload.annotation,
            snippet=payload.snippet,
            note=note_id,
            language=payload.language,
        )
    except CodeNotesError as exc:
        raise http_error(exc) from exc
    return JSONResponse(plain_data(entry), status_code=201)
