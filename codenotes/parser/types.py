"""Common type aliases for parser structures."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .note_document import NoteDocument  # noqa: F401
    from .section import AnnotationSection  # noqa: F401


SectionList = list["AnnotationSection"]
DocumentList = list["NoteDocument"]
StrList = list[str]
