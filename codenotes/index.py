"""In-memory cross-reference index between source lines and note sections."""

from __future__ import annotations

import copy
import enum
import logging
import threading
from pathlib import Path

from attrs import define

from codenotes.parser import NoteDocument, parse_note
from codenotes.parser.types import DocumentList
from codenotes.store import NoteStore

logger = logging.getLogger(__name__)


class ChangeKind(str, enum.Enum):
    """Change signals that trigger an index update."""

    SAVED = "saved"
    CREATED = "created"
    DELETED = "deleted"
    REFRESH = "refresh"


@define(frozen=True, slots=True)
class EntryKey:
    """Identity of an index entry: the section's position in its note."""

    note_id: str
    section_line: int


@define(frozen=True, slots=True)
class CrossReference:
    """Link between an annotated source line and its note section.

    Attributes:
        note_id: File name of the note document.
        note_path: Location of the note document on disk.
        section_line: 1-based line of the section header in the note.
        anchor_full_path: Full path of the annotated source file.
        anchor_line: 1-based line number in the source file.
        anchor_file_name: Display name of the source file.
        annotation_text: Annotation of the section, if any.
    """

    note_id: str
    note_path: str
    section_line: int
    anchor_full_path: str
    anchor_line: int
    anchor_file_name: str
    annotation_text: str | None = None

    @property
    def key(self) -> EntryKey:
        return EntryKey(self.note_id, self.section_line)


ReferenceList = list[CrossReference]
KeySet = set[EntryKey]


def _sort_key(entry: CrossReference) -> tuple[str, int]:
    return (entry.note_id, entry.section_line)


class NoteIndex:
    """Bidirectional index over every note document of a store.

    The index is derived from the documents only and can be rebuilt at any
    time. A re-entrant lock serializes rebuilds, incremental updates and
    reads so no caller observes a half-applied update. Lookups hand out new
    lists of immutable entries.
    """

    def __init__(self, store: NoteStore) -> None:
        self.store = store
        self.revision = 0
        self._lock = threading.RLock()
        self._documents: dict[str, NoteDocument] = {}
        self._entries: dict[EntryKey, CrossReference] = {}
        self._by_source: dict[str, KeySet] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def rebuild_all(self) -> int:
        """Reparse every note document and replace the whole index.

        Returns:
            Number of entries in the new index.
        """

        with self._lock:
            # Everything is parsed before the live maps are replaced.
            loaded = [self._load(path) for path in self.store.note_paths()]

            self._documents = {}
            self._entries = {}
            self._by_source = {}
            for document in loaded:
                if document is not None:
                    self._add(document)

            self.revision += 1
            logger.info(
                f"Indexed {len(self._documents)} notes with "
                f"{len(self._entries)} references (revision {self.revision})"
            )
            return len(self._entries)

    def rebuild_one(self, path: Path) -> int:
        """Reparse one note document and replace only its entries.

        A path that no longer exists is treated as a deletion. Paths outside
        the store are ignored.

        Args:
            path: Location of the note document.

        Returns:
            Number of entries now contributed by the document.
        """

        if not self.store.contains(path):
            logger.debug(f"Ignoring {path}: not a note document")
            return 0

        with self._lock:
            document = self._load(path) if path.is_file() else None
            self._drop(path.name)

            count = 0
            if document is not None:
                self._add(document)
                count = len(document.sections)

            self.revision += 1
            logger.debug(
                f"Reindexed {path.name}: {count} references "
                f"(revision {self.revision})"
            )
            return count

    def remove_document(self, note_id: str) -> int:
        """Drop every entry contributed by ``note_id``.

        Returns:
            Number of removed entries.
        """

        with self._lock:
            removed = self._drop(note_id)
            self.revision += 1
            logger.debug(f"Removed {removed} references of {note_id}")
            return removed

    def handle_change(
        self, kind: ChangeKind | str, path: Path | None = None
    ) -> int:
        """Apply a change signal coming from the note store.

        Args:
            kind: What happened to the document.
            path: Affected document; unused for ``refresh``.

        Returns:
            The result of the index operation that was run.
        """

        kind = ChangeKind(kind)
        if kind is ChangeKind.REFRESH:
            return self.rebuild_all()

        if path is None:
            raise ValueError(f"A path is required for '{kind.value}' changes")

        if kind is ChangeKind.DELETED:
            if not self.store.contains(path):
                logger.debug(f"Ignoring {path}: not a note document")
                return 0
            return self.remove_document(path.name)

        return self.rebuild_one(path)

    def lookup_by_source_path(self, path: str) -> ReferenceList:
        """Return every entry anchored to the source file at ``path``.

        Entries are ordered by note identifier, then by section position.
        """

        with self._lock:
            keys = self._by_source.get(path, set())
            found = [self._entries[key] for key in keys]
        return sorted(found, key=_sort_key)

    def lookup_by_identity(self, key: EntryKey) -> CrossReference | None:
        with self._lock:
            return self._entries.get(key)

    def entries(self) -> ReferenceList:
        """Return all entries ordered by note and section position."""

        with self._lock:
            found = list(self._entries.values())
        return sorted(found, key=_sort_key)

    def documents(self) -> DocumentList:
        """Return copies of the parsed documents in enumeration order."""

        with self._lock:
            ordered = [self._documents[k] for k in sorted(self._documents)]
            return copy.deepcopy(ordered)

    def document(self, note_id: str) -> NoteDocument | None:
        with self._lock:
            found = self._documents.get(note_id)
            return copy.deepcopy(found) if found is not None else None

    def _load(self, path: Path) -> NoteDocument | None:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(f"Skipping {path}: {exc}")
            return None
        return parse_note(text, path)

    def _add(self, document: NoteDocument) -> None:
        self._documents[document.note_id] = document

        for section in document.sections:
            entry = CrossReference(
                note_id=document.note_id,
                note_path=document.path,
                section_line=section.section_line,
                anchor_full_path=section.anchor_full_path,
                anchor_line=section.anchor_line,
                anchor_file_name=section.anchor_file_name,
                annotation_text=section.annotation_text,
            )
            self._entries[entry.key] = entry
            self._by_source.setdefault(entry.anchor_full_path, set()).add(
                entry.key
            )

    def _drop(self, note_id: str) -> int:
        document = self._documents.pop(note_id, None)
        if document is None:
            return 0

        for section in document.sections:
            key = EntryKey(note_id, section.section_line)
            self._entries.pop(key, None)

            keys = self._by_source.get(section.anchor_full_path)
            if keys is not None:
                keys.discard(key)
                if not keys:
                    del self._by_source[section.anchor_full_path]

        return len(document.sections)
