"""Store-level service tying the note store, index and session together."""

from __future__ import annotations

import logging
from pathlib import Path

from attrs import asdict

from codenotes.config import Settings
from codenotes.errors import (
    CodeNotesError,
    InvalidLineError,
    NoCurrentNoteError,
    NoteNotFoundError,
    TargetMissingError,
)
from codenotes.index import ChangeKind, CrossReference, EntryKey, NoteIndex
from codenotes.navigation import Navigation, SourceMarker, markers_for_source
from codenotes.navigation import navigate as navigate_entry
from codenotes.parser import AnnotationSection, render_section
from codenotes.parser.utils import split_lines
from codenotes.search import SearchResult, search_notes
from codenotes.session import Session
from codenotes.store import NoteStore, NoteSummary

logger = logging.getLogger(__name__)


def read_source_line(path: Path, line: int) -> str:
    """Return line ``line`` of the file at ``path`` or an empty string."""

    lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    if 1 <= line <= len(lines):
        return lines[line - 1]
    return ""


class NotesService:
    """Entry point used by the CLI and the web application.

    The service owns the one live index of its note store and forwards every
    change it makes to the documents to that index.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.store = NoteStore(settings.notes_dir, settings.extension)
        self.index = NoteIndex(self.store)
        self.session = Session.load(settings.notes_dir)

    @classmethod
    def open(cls, settings: Settings) -> NotesService:
        """Create a service and build its index from the note store."""

        service = cls(settings)
        service.refresh()
        return service

    def refresh(self) -> int:
        """Rebuild the whole index from the note store."""

        return self.index.rebuild_all()

    def notify(self, kind: ChangeKind | str, path: Path | None = None) -> int:
        """Forward a change signal to the index."""

        return self.index.handle_change(kind, path)

    @property
    def current_note(self) -> str | None:
        """Identifier of the selected note when it still exists."""

        note_id = self.session.current_note
        if note_id is None or not self.store.exists(note_id):
            return None
        return note_id

    def list_notes(self) -> list[NoteSummary]:
        return self.store.summaries()

    def note_sections(self, name: str) -> list[AnnotationSection]:
        """Return the indexed sections of a note document.

        Throws:
            NoteNotFoundError: If the note is not part of the index.
        """

        note_id = self.store.note_id(name)
        document = self.index.document(note_id)
        if document is None:
            raise NoteNotFoundError(note_id)
        return document.sections

    def create_note(self, name: str) -> Path:
        """Create a note, select it and add it to the index."""

        path = self.store.create_note(name)
        self.index.handle_change(ChangeKind.CREATED, path)
        self.session.select(path.name)
        return path

    def select_note(self, name: str) -> str:
        """Make an existing note the current one.

        Throws:
            NoteNotFoundError: If the note does not exist.
        """

        note_id = self.store.note_id(name)
        if not self.store.exists(note_id):
            raise NoteNotFoundError(note_id)
        self.session.select(note_id)
        return note_id

    def delete_note(self, name: str) -> Path:
        """Delete a note and prune its references from the index."""

        path = self.store.delete_note(name)
        self.index.handle_change(ChangeKind.DELETED, path)
        self.session.clear_if(path.name)
        return path

    def add_annotation(
        self,
        source_path: str,
        line: int,
        annotation: str | None = None,
        snippet: str | None = None,
        note: str | None = None,
        language: str | None = None,
    ) -> CrossReference:
        """Append an annotation section for a source line to a note.

        Args:
            source_path: File being annotated.
            line: 1-based line in that file.
            annotation: Optional commentary.
            snippet: Code excerpt; read from ``source_path`` when omitted.
            note: Target note; defaults to the current note.
            language: Code fence language; derived from the file name when
                omitted.

        Returns:
            The index entry of the new section.

        Throws:
            InvalidLineError: If ``line`` is below 1.
            NoCurrentNoteError: If no note is given or selected.
            NoteNotFoundError: If the target note does not exist.
            InvalidSnippetError: If the snippet holds a section header line.
            TargetMissingError: If the snippet must be read from a missing
                source file.
        """

        if line < 1:
            raise InvalidLineError(line)

        note_id = self.store.note_id(note) if note else self.current_note
        if note_id is None:
            raise NoCurrentNoteError()

        source = Path(source_path).expanduser().resolve()
        if snippet is None:
            if not source.is_file():
                raise TargetMissingError(str(source))
            snippet = read_source_line(source, line)

        text = render_section(
            file_name=source.name,
            line=line,
            full_path=str(source),
            snippet=snippet,
            annotation=annotation,
            language=language,
        )
        # The rendered section opens with a blank line, so its header lands
        # one line past the current last line of the note.
        section_line = len(split_lines(self.store.read(note_id))) + 1

        path = self.store.append(note_id, text)
        self.index.handle_change(ChangeKind.SAVED, path)

        entry = self.index.lookup_by_identity(EntryKey(note_id, section_line))
        if entry is None:
            raise CodeNotesError(f"The new section of {note_id} is unreadable")
        logger.info(f"Added {entry.anchor_file_name}:{line} to {note_id}")
        return entry

    def lookup(self, source_path: str) -> list[CrossReference]:
        return self.index.lookup_by_source_path(source_path)

    def markers(self, source_path: str) -> list[SourceMarker]:
        return markers_for_source(self.index, source_path)

    def search(self, query: str) -> list[SearchResult]:
        return search_notes(self.index, query, self.settings.preview_length)

    def navigate(self, note: str, section_line: int) -> Navigation:
        """Resolve the jump from a note section to its source line."""

        key = EntryKey(self.store.note_id(note), section_line)
        return navigate_entry(self.index, key)

    def export(self) -> dict[str, list[dict[str, object]]]:
        """Return the note listing and every index entry as plain data."""

        return {
            "notes": [asdict(n) for n in self.list_notes()],
            "references": [asdict(e) for e in self.index.entries()],
        }
