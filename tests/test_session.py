"""Tests for the persisted note selection."""

from __future__ import annotations

from pathlib import Path

from codenotes.session import SESSION_FILE, Session


def test_empty_session(tmp_path: Path) -> None:
    session = Session.load(tmp_path)

    assert session.current_note is None
    assert session.path == tmp_path / SESSION_FILE


def test_select_persists(tmp_path: Path) -> None:
    Session.load(tmp_path / "store").select("a.md")

    assert Session.load(tmp_path / "store").current_note == "a.md"


def test_clear_if_only_matching(tmp_path: Path) -> None:
    session = Session.load(tmp_path)
    session.select("a.md")

    assert not session.clear_if("b.md")
    assert session.clear_if("a.md")
    assert Session.load(tmp_path).current_note is None


def test_malformed_session_file(tmp_path: Path) -> None:
    (tmp_path / SESSION_FILE).write_text("{not json", encoding="utf-8")
    assert Session.load(tmp_path).current_note is None

    (tmp_path / SESSION_FILE).write_text('{"current_note": 3}', encoding="utf-8")
    assert Session.load(tmp_path).current_note is None
