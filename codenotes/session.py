"""Current note selection persisted next to the notes."""

from __future__ import annotations

import logging
from pathlib import Path

from attrs import asdict, define

from codenotes.json_utils import json_dumps, json_loads

logger = logging.getLogger(__name__)

# File inside the note store holding the session; its extension keeps it out
# of note enumeration.
SESSION_FILE = ".codenotes-session.json"


@define(slots=True)
class Session:
    """Session state of a note store.

    Attributes:
        path: Location of the session file.
        current_note: Identifier of the selected note, if any.
    """

    path: Path
    current_note: str | None = None

    @classmethod
    def load(cls, root: Path) -> Session:
        """Read the session stored in the note store at ``root``.

        Unreadable or malformed session files start an empty session.
        """

        path = root / SESSION_FILE
        session = cls(path=path)
        if not path.is_file():
            return session

        try:
            data = json_loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning(f"Ignoring session file {path}: {exc}")
            return session

        if isinstance(data, dict) and isinstance(data.get("current_note"), str):
            session.current_note = data["current_note"]
        return session

    def save(self) -> None:
        """Write the session file, creating the store directory if needed."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = asdict(self, filter=lambda a, _: a.name != "path")
        self.path.write_text(json_dumps(data), encoding="utf-8")

    def select(self, note_id: str | None) -> None:
        self.current_note = note_id
        self.save()

    def clear_if(self, note_id: str) -> bool:
        """Drop the selection when it points at ``note_id``."""

        if self.current_note != note_id:
            return False
        self.select(None)
        return True
