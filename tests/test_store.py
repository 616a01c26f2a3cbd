"""Tests for the note store directory."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from codenotes.errors import (
    InvalidNoteNameError,
    NoteExistsError,
    NoteNotFoundError,
)
from codenotes.store import NoteStore


def test_note_paths_are_sorted_and_filtered(
    store: NoteStore, notes_dir: Path, write_note: Callable
) -> None:
    write_note("b.md", "")
    write_note("a.md", "")
    write_note("c.txt", "")
    (notes_dir / "d.md").mkdir()

    assert [p.name for p in store.note_paths()] == ["a.md", "b.md"]


def test_missing_directory_lists_nothing(tmp_path: Path) -> None:
    assert NoteStore(tmp_path / "absent").note_paths() == []


def test_create_note_writes_title(tmp_path: Path) -> None:
    store = NoteStore(tmp_path / "new")

    path = store.create_note("my-note")

    assert path == tmp_path / "new" / "my-note.md"
    assert path.read_text(encoding="utf-8") == "# my-note\n\n"
    with pytest.raises(NoteExistsError):
        store.create_note("my-note.md")


@pytest.mark.parametrize("name", ["", "  ", "../up", "a/b", "..", "a\\b"])
def test_invalid_names(store: NoteStore, name: str) -> None:
    with pytest.raises(InvalidNoteNameError):
        store.note_id(name)


def test_append_read_and_delete(store: NoteStore) -> None:
    store.create_note("n")

    store.append("n", "more\n")
    assert store.read("n.md") == "# n\n\nmore\n"

    store.delete_note("n")
    assert not store.exists("n")
    with pytest.raises(NoteNotFoundError):
        store.read("n")
    with pytest.raises(NoteNotFoundError):
        store.append("n", "x")
    with pytest.raises(NoteNotFoundError):
        store.delete_note("n")


def test_contains(store: NoteStore, notes_dir: Path, tmp_path: Path) -> None:
    assert store.contains(notes_dir / "a.md")
    assert not store.contains(notes_dir / "a.txt")
    assert not store.contains(tmp_path / "a.md")


def test_summaries_count_references(
    store: NoteStore, write_note: Callable, make_section: Callable[..., str]
) -> None:
    write_note(
        "a.md",
        make_section("x.py", 1, "/x.py") + "\n## broken.py:2\n\nno path\n",
    )
    write_note("b.md", make_section("x.py", 1, "/x.py"))

    first, second = store.summaries()

    assert first.title == "a"
    assert first.references == 2
    assert first.references_label == "2 refs"
    assert second.references_label == "1 ref"
