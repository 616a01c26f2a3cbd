"""Directory of note documents."""

from __future__ import annotations

import datetime
import logging
from pathlib import Path

from attrs import define

from codenotes.errors import (
    InvalidNoteNameError,
    NoteExistsError,
    NoteNotFoundError,
)
from codenotes.parser import render_note_header
from codenotes.parser.utils import count_headers, reference_count_label

logger = logging.getLogger(__name__)


@define(slots=True)
class NoteSummary:
    """Listing entry for one note document.

    Attributes:
        note_id: File name of the document inside the store.
        title: File stem shown to the user.
        path: Location of the document on disk.
        modified: Last modification time in ISO 8601 format.
        references: Number of section headers in the document.
    """

    note_id: str
    title: str
    path: str
    modified: str
    references: int

    @property
    def references_label(self) -> str:
        return reference_count_label(self.references)


class NoteStore:
    """Note documents kept as files with a common extension in one folder."""

    def __init__(self, root: Path, extension: str = ".md") -> None:
        self.root = root
        self.extension = extension

    def ensure_exists(self) -> None:
        """Create the store directory when missing."""

        self.root.mkdir(parents=True, exist_ok=True)

    def note_paths(self) -> list[Path]:
        """Return note document paths sorted by file name.

        A missing directory yields an empty list.
        """

        if not self.root.is_dir():
            return []

        return sorted(
            (
                p
                for p in self.root.iterdir()
                if p.is_file() and p.suffix == self.extension
            ),
            key=lambda p: p.name,
        )

    def contains(self, path: Path) -> bool:
        """Tell whether ``path`` names a document of this store."""

        if path.suffix != self.extension:
            return False
        return path.resolve().parent == self.root.resolve()

    def note_id(self, name: str) -> str:
        """Return the note identifier for a name with or without extension.

        Throws:
            InvalidNoteNameError: If the name is blank or has path parts.
        """

        name = name.strip()
        if not name or name in (".", "..") or "/" in name or "\\" in name:
            raise InvalidNoteNameError(f"Invalid note name: {name!r}")
        if name.endswith(self.extension):
            return name
        return f"{name}{self.extension}"

    def path_for(self, name: str) -> Path:
        return self.root / self.note_id(name)

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def read(self, name: str) -> str:
        """Return the text of a note document.

        Throws:
            NoteNotFoundError: If the document does not exist.
        """

        path = self.path_for(name)
        if not path.is_file():
            raise NoteNotFoundError(path.name)
        return path.read_text(encoding="utf-8")

    def create_note(self, name: str) -> Path:
        """Create an empty note document titled ``name``.

        Returns:
            Path of the new document.

        Throws:
            NoteExistsError: If a document with that name already exists.
        """

        path = self.path_for(name)
        if path.exists():
            raise NoteExistsError(str(path))

        self.ensure_exists()
        path.write_text(render_note_header(path.stem), encoding="utf-8")
        logger.info(f"Created note {path}")
        return path

    def append(self, name: str, text: str) -> Path:
        """Append ``text`` to an existing note document.

        Throws:
            NoteNotFoundError: If the document does not exist.
        """

        path = self.path_for(name)
        if not path.is_file():
            raise NoteNotFoundError(path.name)

        with path.open("a", encoding="utf-8") as handle:
            handle.write(text)
        return path

    def delete_note(self, name: str) -> Path:
        """Remove a note document from disk.

        Throws:
            NoteNotFoundError: If the document does not exist.
        """

        path = self.path_for(name)
        if not path.is_file():
            raise NoteNotFoundError(path.name)

        path.unlink()
        logger.info(f"Deleted note {path}")
        return path

    def summaries(self) -> list[NoteSummary]:
        """Return a listing entry for every note document."""

        result: list[NoteSummary] = []
        for path in self.note_paths():
            stat = path.stat()
            modified = datetime.datetime.fromtimestamp(stat.st_mtime)
            result.append(
                NoteSummary(
                    note_id=path.name,
                    title=path.stem,
                    path=str(path),
                    modified=modified.isoformat(timespec="seconds"),
                    references=count_headers(
                        path.read_text(encoding="utf-8", errors="replace")
                    ),
                )
            )
        return result
