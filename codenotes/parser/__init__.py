"""Parser package for note documents."""

from .note_document import NoteDocument
from .parse_note import parse_note, parse_sections
from .render import language_for, render_note_header, render_section
from .section import AnnotationSection

__all__ = [
    "AnnotationSection",
    "NoteDocument",
    "language_for",
    "parse_note",
    "parse_sections",
    "render_note_header",
    "render_section",
]
