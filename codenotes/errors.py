"""Exceptions raised by the note store, index and navigation helpers."""

from __future__ import annotations


class CodeNotesError(Exception):
    """Base class for all errors reported to CLI and web callers."""


class ConfigError(CodeNotesError):
    """The configuration file cannot be used."""


class InvalidNoteNameError(CodeNotesError, ValueError):
    """A note name is empty or would escape the note store."""


class InvalidLineError(CodeNotesError, ValueError):
    """A source line number is below 1."""

    def __init__(self, line: int) -> None:
        super().__init__(f"Line numbers start at 1, got {line}")
        self.line = line


class InvalidSnippetError(CodeNotesError, ValueError):
    """A code snippet cannot be stored without breaking the note layout."""


class NoteExistsError(CodeNotesError):
    """A note with the requested name already exists."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Note already exists: {path}")
        self.path = path


class NoteNotFoundError(CodeNotesError):
    """The requested note is not part of the note store."""

    def __init__(self, note_id: str) -> None:
        super().__init__(f"Note not found: {note_id}")
        self.note_id = note_id


class NoCurrentNoteError(CodeNotesError):
    """An annotation was added while no note is selected."""

    def __init__(self) -> None:
        super().__init__("No note selected. Select or create one first.")


class EntryNotFoundError(CodeNotesError):
    """The index holds no reference with the requested identity."""

    def __init__(self, note_id: str, section_line: int) -> None:
        super().__init__(
            f"No reference at line {section_line} of note {note_id}"
        )
        self.note_id = note_id
        self.section_line = section_line


class TargetMissingError(CodeNotesError):
    """The annotated source file no longer exists."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path
