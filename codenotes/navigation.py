"""Translate index entries into places to jump to."""

from __future__ import annotations

import logging
from pathlib import Path

from attrs import define

from codenotes.errors import EntryNotFoundError, TargetMissingError
from codenotes.index import CrossReference, EntryKey, NoteIndex

logger = logging.getLogger(__name__)


@define(frozen=True, slots=True)
class SourceMarker:
    """Inline marker placed on an annotated source line.

    Attributes:
        line: 1-based source line carrying the marker.
        note_id: Note document holding the annotation.
        note_path: Location of the note document.
        section_line: Line of the section to open when activated.
        label: ``name:line`` label of the section.
        annotation_text: Annotation of the section, if any.
    """

    line: int
    note_id: str
    note_path: str
    section_line: int
    label: str
    annotation_text: str | None = None


@define(frozen=True, slots=True)
class NoteTarget:
    """Position inside a note document."""

    path: str
    line: int


@define(frozen=True, slots=True)
class SourceTarget:
    """Position inside an annotated source file.

    Attributes:
        path: Source file to open.
        line: Line to move the caret to.
        requested_line: Line stored in the note.
        clamped: Whether ``line`` differs from ``requested_line``.
    """

    path: str
    line: int
    requested_line: int
    clamped: bool = False


@define(frozen=True, slots=True)
class Navigation:
    """Both ends of a jump from a note section to its source line."""

    source: SourceTarget
    note: NoteTarget


def clamp_line(line: int, line_count: int) -> int:
    """Return ``line`` when it exists in a file of ``line_count`` lines.

    Lines outside the file fall back to the first line.
    """

    if 1 <= line <= line_count:
        return line
    return 1


def _count_lines(path: Path) -> int:
    with path.open("rb") as handle:
        return sum(1 for _ in handle)


def markers_for_source(index: NoteIndex, path: str) -> list[SourceMarker]:
    """Return the inline markers for the source file at ``path``.

    Markers are ordered by source line; annotations of the same line keep
    the note enumeration order.
    """

    markers = [
        SourceMarker(
            line=entry.anchor_line,
            note_id=entry.note_id,
            note_path=entry.note_path,
            section_line=entry.section_line,
            label=f"{entry.anchor_file_name}:{entry.anchor_line}",
            annotation_text=entry.annotation_text,
        )
        for entry in index.lookup_by_source_path(path)
    ]
    return sorted(markers, key=lambda m: m.line)


def note_target(entry: CrossReference) -> NoteTarget:
    """Return where to scroll the note document of ``entry``."""

    return NoteTarget(path=entry.note_path, line=entry.section_line)


def resolve_source(entry: CrossReference) -> SourceTarget:
    """Return where to place the caret in the annotated source file.

    Throws:
        TargetMissingError: If the source file no longer exists.
    """

    path = Path(entry.anchor_full_path)
    if not path.is_file():
        logger.warning(f"Annotated file is missing: {path}")
        raise TargetMissingError(entry.anchor_full_path)

    line = clamp_line(entry.anchor_line, _count_lines(path))
    if line != entry.anchor_line:
        logger.debug(
            f"Line {entry.anchor_line} is past the end of {path}; using {line}"
        )

    return SourceTarget(
        path=entry.anchor_full_path,
        line=line,
        requested_line=entry.anchor_line,
        clamped=line != entry.anchor_line,
    )


def navigate(index: NoteIndex, key: EntryKey) -> Navigation:
    """Resolve a jump from the note section ``key`` to its source line.

    Throws:
        EntryNotFoundError: If the index holds no entry for ``key``.
        TargetMissingError: If the source file no longer exists.
    """

    entry = index.lookup_by_identity(key)
    if entry is None:
        raise EntryNotFoundError(key.note_id, key.section_line)

    # Nothing is returned unless the source side resolves.
    source = resolve_source(entry)
    return Navigation(source=source, note=note_target(entry))
