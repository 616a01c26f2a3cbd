"""Tests for resolving jumps between notes and source files."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from codenotes import navigation
from codenotes.errors import EntryNotFoundError, TargetMissingError
from codenotes.index import EntryKey, NoteIndex


@pytest.mark.parametrize(
    ("line", "count", "expected"),
    [(5, 10, 5), (10, 10, 10), (500, 50, 1), (0, 10, 1), (3, 0, 1)],
)
def test_clamp_line(line: int, count: int, expected: int) -> None:
    assert navigation.clamp_line(line, count) == expected


def test_navigate_to_existing_line(
    index: NoteIndex,
    write_note: Callable,
    make_section: Callable[..., str],
    source_file: Path,
) -> None:
    note = write_note("a.md", "# a\n" + make_section("app.py", 7, str(source_file)))
    index.rebuild_all()

    result = navigation.navigate(index, EntryKey("a.md", 3))

    assert result.source.path == str(source_file)
    assert result.source.line == 7
    assert not result.source.clamped
    assert result.note == navigation.NoteTarget(path=str(note), line=3)


def test_stale_line_is_clamped_to_first_line(
    index: NoteIndex,
    write_note: Callable,
    make_section: Callable[..., str],
    source_file: Path,
) -> None:
    """A line past the end of a 50-line file resolves to line 1."""

    write_note("a.md", make_section("app.py", 500, str(source_file)))
    index.rebuild_all()
    (entry,) = index.entries()

    target = navigation.resolve_source(entry)

    assert target.line == 1
    assert target.requested_line == 500
    assert target.clamped


def test_missing_target_is_reported(
    index: NoteIndex,
    write_note: Callable,
    make_section: Callable[..., str],
    tmp_path: Path,
) -> None:
    write_note("a.md", make_section("gone.py", 3, str(tmp_path / "gone.py")))
    index.rebuild_all()
    (entry,) = index.entries()

    with pytest.raises(TargetMissingError) as info:
        navigation.navigate(index, entry.key)
    assert info.value.path == str(tmp_path / "gone.py")


def test_unknown_entry(index: NoteIndex) -> None:
    index.rebuild_all()

    with pytest.raises(EntryNotFoundError):
        navigation.navigate(index, EntryKey("a.md", 1))


def test_markers_for_source(
    index: NoteIndex, write_note: Callable, make_section: Callable[..., str]
) -> None:
    """Markers are sorted by line and carry the note position."""

    write_note(
        "b.md",
        make_section("a.ts", 30, "/src/a.ts", note="later")
        + make_section("a.ts", 4, "/src/a.ts"),
    )
    write_note("a.md", make_section("a.ts", 30, "/src/a.ts", note="first"))
    index.rebuild_all()

    markers = navigation.markers_for_source(index, "/src/a.ts")

    assert [(m.line, m.note_id) for m in markers] == [
        (4, "b.md"),
        (30, "a.md"),
        (30, "b.md"),
    ]
    assert markers[1].annotation_text == "first"
    assert markers[1].label == "a.ts:30"
    assert navigation.markers_for_source(index, "/src/other.ts") == []
