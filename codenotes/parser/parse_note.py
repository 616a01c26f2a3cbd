"""Parse note document text into annotation sections."""

from __future__ import annotations

import enum
import logging
from pathlib import Path

from attrs import define, field

from .note_document import NoteDocument
from .section import AnnotationSection
from .types import SectionList, StrList
from .utils import (
    FENCE_RE,
    HEADER_RE,
    LINE_RE,
    LINE_WINDOW,
    NOTE_RE,
    PATH_RE,
    PATH_WINDOW,
    split_lines,
)

logger = logging.getLogger(__name__)


class _State(enum.Enum):
    """Position of the scanner relative to the current section."""

    SEEKING_HEADER = "seeking_header"
    SEEKING_PATH = "seeking_path"
    SEEKING_LINE = "seeking_line"
    IN_BODY = "in_body"
    IN_CODE_BLOCK = "in_code_block"


@define(slots=True)
class _PendingSection:
    """Fields collected for the section currently being scanned."""

    file_name: str
    header_number: int
    section_line: int
    full_path: str | None = None
    line_number: int | None = None
    annotation: str | None = None
    language: str | None = None
    code_lines: StrList = field(factory=list)
    has_code: bool = False
    fence_length: int = 0

    def build(self) -> AnnotationSection | None:
        """Return the finished section or ``None`` when it is not indexable."""

        if self.full_path is None:
            logger.debug(
                f"Skipping section at line {self.section_line}: no path"
            )
            return None

        line = (
            self.line_number
            if self.line_number is not None
            else self.header_number
        )
        if line < 1:
            logger.debug(
                f"Skipping section at line {self.section_line}: "
                f"unusable line number {line}"
            )
            return None

        return AnnotationSection(
            anchor_file_name=self.file_name,
            anchor_line=line,
            anchor_full_path=self.full_path,
            section_line=self.section_line,
            annotation_text=self.annotation,
            code_snippet="\n".join(self.code_lines) if self.has_code else None,
            language=self.language,
        )


class _SectionScanner:
    """Line-by-line state machine turning note text into sections."""

    def __init__(self) -> None:
        self.state = _State.SEEKING_HEADER
        self.pending: _PendingSection | None = None
        self.window = 0
        self.sections: SectionList = []

    def feed(self, number: int, line: str) -> None:
        """Consume document line ``line`` found at 1-based ``number``."""

        header = HEADER_RE.match(line)
        if header:
            # A new header always closes the previous section.
            self._close()
            self.pending = _PendingSection(
                file_name=header.group(1),
                header_number=int(header.group(2)),
                section_line=number,
            )
            self.state = _State.SEEKING_PATH
            self.window = PATH_WINDOW
            return

        if self.pending is None:
            return

        if self.state is _State.SEEKING_PATH:
            self._seek_path(line)
        elif self.state is _State.SEEKING_LINE:
            self._seek_line(line)
        else:
            self._consume_body(line)

    def finish(self) -> SectionList:
        """Close the last section and return every indexable section."""

        self._close()
        return self.sections

    def _seek_path(self, line: str) -> None:
        assert self.pending is not None

        match = PATH_RE.match(line.strip())
        if match:
            self.pending.full_path = match.group(1)
            self.state = _State.SEEKING_LINE
            self.window = LINE_WINDOW
            return

        self.window -= 1
        if self.window == 0:
            # The stored layout puts the path at a fixed offset; without it
            # the section cannot be anchored.
            logger.debug(
                f"Skipping section at line {self.pending.section_line}: "
                f"no path within {PATH_WINDOW} lines"
            )
            self.pending = None
            self.state = _State.SEEKING_HEADER

    def _seek_line(self, line: str) -> None:
        assert self.pending is not None

        match = LINE_RE.match(line.strip())
        if match:
            self.pending.line_number = int(match.group(1))
            self.state = _State.IN_BODY
            return

        self.window -= 1
        if self.window == 0:
            self.state = _State.IN_BODY
        self._consume_body(line)

    def _consume_body(self, line: str) -> None:
        assert self.pending is not None

        fence = FENCE_RE.match(line.strip())
        if self.state is _State.IN_CODE_BLOCK:
            # Only a bare fence at least as long as the opening one closes.
            if (
                fence
                and not fence.group(2)
                and len(fence.group(1)) >= self.pending.fence_length
            ):
                self.state = _State.IN_BODY
            else:
                self.pending.code_lines.append(line)
            return

        if fence:
            # Snippets of several code blocks are joined together.
            if self.pending.has_code:
                self.pending.code_lines.append("")
            self.pending.has_code = True
            self.pending.fence_length = len(fence.group(1))
            if self.pending.language is None and fence.group(2):
                self.pending.language = fence.group(2)
            self.state = _State.IN_CODE_BLOCK
            return

        note = NOTE_RE.match(line.strip())
        if note and self.pending.annotation is None:
            text = note.group(1).strip()
            self.pending.annotation = text or None

    def _close(self) -> None:
        if self.pending is not None:
            section = self.pending.build()
            if section is not None:
                self.sections.append(section)
        self.pending = None
        self.state = _State.SEEKING_HEADER


def _scan(text: str) -> SectionList:
    scanner = _SectionScanner()
    for number, line in enumerate(split_lines(text), start=1):
        scanner.feed(number, line)
    return scanner.finish()


def parse_sections(text: str) -> SectionList:
    """Parse the full text of a note document into annotation sections.

    Sections are returned in the order their headers appear. Sections whose
    header is not followed by a path marker are left out.

    Args:
        text: Raw content of the note document.

    Returns:
        Ordered list of indexable sections.
    """

    return _scan(text)


def parse_note(text: str, path: Path) -> NoteDocument:
    """Parse a note document located at ``path``.

    Args:
        text: Raw content of the note document.
        path: Location of the document; its name is the note identifier.

    Returns:
        The parsed ``NoteDocument``.
    """

    return NoteDocument(
        note_id=path.name,
        path=str(path),
        title=path.stem,
        sections=_scan(text),
    )
