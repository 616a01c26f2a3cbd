"""Parsed representation of a whole note document."""

from __future__ import annotations

from attrs import define, field

from .types import SectionList


@define(slots=True)
class NoteDocument:
    """A note document and the annotation sections found in it.

    Attributes:
        note_id: File name of the document inside the note store.
        path: Location of the document on disk.
        title: Document title, taken from the file stem.
        sections: Indexable sections in header order.
    """

    note_id: str
    path: str
    title: str
    sections: SectionList = field(factory=list, repr=False)
