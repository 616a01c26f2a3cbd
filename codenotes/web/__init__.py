"""FastAPI application exposing the note index to editor integrations."""

from __future__ import annotations

from fastapi import FastAPI  # type: ignore[import-not-found]

from .routes import annotations, events, navigate, notes, search

app = FastAPI(title="codenotes")

app.include_router(notes.router)
app.include_router(annotations.router)
app.include_router(search.router)
app.include_router(navigate.router)
app.include_router(events.router)
