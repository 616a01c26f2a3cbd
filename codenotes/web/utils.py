"""Utility helpers for web routes."""

from __future__ import annotations

from fastapi import HTTPException  # type: ignore[import-not-found]

from codenotes.config import load_settings
from codenotes.errors import (
    CodeNotesError,
    EntryNotFoundError,
    InvalidLineError,
    InvalidNoteNameError,
    InvalidSnippetError,
    NoCurrentNoteError,
    NoteExistsError,
    NoteNotFoundError,
    TargetMissingError,
)
from codenotes.service import NotesService

# Service of the note store configured through the environment; built on
# first use.
_SERVICE: NotesService | None = None

# HTTP status codes for the errors a route may report.
_STATUS = {
    NoteNotFoundError: 404,
    EntryNotFoundError: 404,
    TargetMissingError: 404,
    NoteExistsError: 409,
    NoCurrentNoteError: 409,
    InvalidNoteNameError: 422,
    InvalidLineError: 422,
    InvalidSnippetError: 422,
}


def get_service() -> NotesService:
    """Return the shared service, building its index on first use."""

    global _SERVICE
    if _SERVICE is None:
        _SERVICE = NotesService.open(load_settings())
    return _SERVICE


def http_error(exc: CodeNotesError) -> HTTPException:
    """Return the HTTP error reporting ``exc`` to the client."""

    status = next(
        (code for cls, code in _STATUS.items() if isinstance(exc, cls)), 400
    )
    return HTTPException(status_code=status, detail=str(exc))
