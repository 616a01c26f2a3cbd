"""Free-text search over note titles, annotations and code snippets."""

from __future__ import annotations

import enum

from attrs import define, field

from codenotes.index import NoteIndex
from codenotes.parser import AnnotationSection, NoteDocument
from codenotes.parser.utils import truncate

DEFAULT_PREVIEW_LENGTH = 80


class MatchKind(str, enum.Enum):
    """Field of a note that matched the query."""

    TITLE = "title"
    ANNOTATION = "annotation"
    CODE = "code"


@define(slots=True)
class SearchMatch:
    """One matching field.

    Attributes:
        kind: Matched field.
        preview: Content of the field, shortened for code matches.
        section_line: Header line of the matched section; ``None`` for
            title matches.
        label: ``name:line`` label of the matched section, if any.
        anchor_full_path: Annotated source file of the section, if any.
        anchor_line: Annotated source line of the section, if any.
    """

    kind: MatchKind
    preview: str
    section_line: int | None = None
    label: str | None = None
    anchor_full_path: str | None = None
    anchor_line: int | None = None


@define(slots=True)
class SearchResult:
    """Matches found in one note document."""

    note_id: str
    title: str
    path: str
    matches: list[SearchMatch] = field(factory=list)


def _section_matches(
    section: AnnotationSection, needle: str, preview_length: int
) -> list[SearchMatch]:
    annotation = section.annotation_text or ""
    code = section.code_snippet or ""

    # The section must match as a whole before single fields are checked.
    if needle not in f"{annotation}\n{code}".lower():
        return []

    common = {
        "section_line": section.section_line,
        "label": section.label,
        "anchor_full_path": section.anchor_full_path,
        "anchor_line": section.anchor_line,
    }
    matches: list[SearchMatch] = []
    if needle in annotation.lower():
        matches.append(
            SearchMatch(kind=MatchKind.ANNOTATION, preview=annotation, **common)
        )
    if needle in code.lower():
        matches.append(
            SearchMatch(
                kind=MatchKind.CODE,
                preview=truncate(code, preview_length),
                **common,
            )
        )
    return matches


def search_document(
    document: NoteDocument,
    query: str,
    preview_length: int = DEFAULT_PREVIEW_LENGTH,
) -> SearchResult | None:
    """Search a single parsed note document.

    The title matches when the file name of the document, extension
    included, contains the query. The query is used as given; surrounding
    whitespace is part of it.

    Args:
        document: Parsed note document.
        query: Text to look for, case-insensitively.
        preview_length: Maximum length of code previews.

    Returns:
        The matches of the document or ``None`` when nothing matched.
    """

    if not query.strip():
        return None
    needle = query.lower()

    result = SearchResult(
        note_id=document.note_id, title=document.title, path=document.path
    )
    if needle in document.note_id.lower():
        result.matches.append(
            SearchMatch(kind=MatchKind.TITLE, preview=document.note_id)
        )

    for section in document.sections:
        result.matches.extend(_section_matches(section, needle, preview_length))

    return result if result.matches else None


def search_notes(
    index: NoteIndex,
    query: str,
    preview_length: int = DEFAULT_PREVIEW_LENGTH,
) -> list[SearchResult]:
    """Search every note document held by ``index``.

    Results follow the note enumeration order, then section order, with
    title, annotation and code matches in that order. Blank queries match
    nothing.

    Args:
        index: Index holding the parsed note documents.
        query: Text to look for, case-insensitively.
        preview_length: Maximum length of code previews.

    Returns:
        One result per note document with at least one match.
    """

    results: list[SearchResult] = []
    for document in index.documents():
        found = search_document(document, query, preview_length)
        if found is not None:
            results.append(found)
    return results
