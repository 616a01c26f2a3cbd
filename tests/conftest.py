"""Shared fixtures building note stores on disk."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from codenotes.config import Settings
from codenotes.index import NoteIndex
from codenotes.service import NotesService
from codenotes.store import NoteStore

WriteNote = Callable[[str, str], Path]


def section_text(
    name: str,
    line: int,
    path: str,
    note: str | None = None,
    code: str | None = "print('hi')",
    language: str = "python",
) -> str:
    """Return a section laid out the way the note format stores it."""

    text = f"\n## {name}:{line}\n\n**Path:** `{path}`\n</br>\n**Line:** {line}\n\n"
    if note is not None:
        text += f"**Note:** {note}\n\n"
    if code is not None:
        text += f"```{language}\n{code}\n```\n"
    return text


@pytest.fixture
def notes_dir(tmp_path: Path) -> Path:
    """Return an existing, empty note store directory."""

    directory = tmp_path / "notes"
    directory.mkdir()
    return directory


@pytest.fixture
def write_note(notes_dir: Path) -> WriteNote:
    """Return a helper writing a note document into the store."""

    def _write(name: str, text: str) -> Path:
        path = notes_dir / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def store(notes_dir: Path) -> NoteStore:
    return NoteStore(notes_dir)


@pytest.fixture
def index(store: NoteStore) -> NoteIndex:
    return NoteIndex(store)


@pytest.fixture
def service(notes_dir: Path) -> NotesService:
    return NotesService.open(Settings(notes_dir=notes_dir))


@pytest.fixture
def source_file(tmp_path: Path) -> Path:
    """Return a 50-line Python source file."""

    path = tmp_path / "src" / "app.py"
    path.parent.mkdir()
    path.write_text(
        "".join(f"value_{i} = {i}\n" for i in range(1, 51)), encoding="utf-8"
    )
    return path


@pytest.fixture
def make_section() -> Callable[..., str]:
    """Return the helper rendering a section in the stored layout."""

    return section_text
