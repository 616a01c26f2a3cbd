"""Tests for the note document parser."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from codenotes import parser
from codenotes.errors import InvalidSnippetError

TWO_SECTIONS = """# review

## a.ts:10

**Path:** `/src/a.ts`
</br>
**Line:** 10

**Note:** check bounds

```typescript
const a = 1;
```

## b.ts:5

**Path:** `/src/b.ts`
</br>
**Line:** 5

```typescript
let b = 2;
let c = 3;
```
"""


def test_parses_sections_in_header_order() -> None:
    """Both sections should be returned with their fields."""

    sections = parser.parse_sections(TWO_SECTIONS)

    assert [s.label for s in sections] == ["a.ts:10", "b.ts:5"]
    first, second = sections
    assert first.anchor_full_path == "/src/a.ts"
    assert first.anchor_line == 10
    assert first.section_line == 3
    assert first.annotation_text == "check bounds"
    assert first.code_snippet == "const a = 1;"
    assert first.language == "typescript"
    assert second.annotation_text is None
    assert second.code_snippet == "let b = 2;\nlet c = 3;"
    assert second.section_line == 15


def test_round_trip_of_rendered_section() -> None:
    """Parsing a rendered section should give back the rendered values."""

    text = "# n\n\n" + parser.render_section(
        file_name="main.py",
        line=42,
        full_path="/home/me/proj/main.py",
        snippet="def main():\n    return 0\n",
        annotation="entry point",
    )

    (section,) = parser.parse_sections(text)

    assert section.anchor_file_name == "main.py"
    assert section.anchor_line == 42
    assert section.anchor_full_path == "/home/me/proj/main.py"
    assert section.annotation_text == "entry point"
    assert section.code_snippet == "def main():\n    return 0\n"
    assert section.language == "python"


def test_rendered_annotation_is_collapsed_to_one_line() -> None:
    """Multi-line annotations should stay parseable."""

    text = parser.render_section(
        "a.py", 1, "/a.py", "x = 1", annotation="first\nsecond  line"
    )

    (section,) = parser.parse_sections(text)
    assert section.annotation_text == "first second line"


def test_header_without_path_is_skipped() -> None:
    """A header followed by unrelated text yields no section."""

    text = "## notes.txt:3\n\nJust some prose here.\nMore prose.\n"

    assert parser.parse_sections(text) == []


def test_path_outside_window_is_skipped() -> None:
    """The path marker must follow the header at the fixed offset."""

    text = "## a.py:3\n\n\n\n**Path:** `/a.py`\n"

    assert parser.parse_sections(text) == []


def test_malformed_section_does_not_hide_the_next_one(
    make_section: Callable[..., str],
) -> None:
    """Only the broken section is dropped."""

    text = "## broken.py:1\n\nno path\n" + make_section("ok.py", 7, "/ok.py")

    sections = parser.parse_sections(text)
    assert [s.anchor_full_path for s in sections] == ["/ok.py"]


def test_line_marker_overrides_header_number() -> None:
    """The ``**Line:**`` marker carries the corrected line number."""

    text = "## a.py:3\n\n**Path:** `/a.py`\n<br/> **Line:** 9\n"

    (section,) = parser.parse_sections(text)
    assert section.anchor_line == 9


def test_missing_line_marker_defaults_to_header_number() -> None:
    text = "## a.py:12\n\n**Path:** `/a.py`\n\n**Note:** hello\n"

    (section,) = parser.parse_sections(text)
    assert section.anchor_line == 12
    assert section.annotation_text == "hello"
    assert section.code_snippet is None


def test_zero_line_without_marker_is_skipped() -> None:
    text = "## a.py:0\n\n**Path:** `/a.py`\n"

    assert parser.parse_sections(text) == []


def test_windows_line_endings() -> None:
    """Carriage returns should not leak into fields."""

    text = TWO_SECTIONS.replace("\n", "\r\n")

    sections = parser.parse_sections(text)
    assert sections[0].annotation_text == "check bounds"
    assert sections[1].code_snippet == "let b = 2;\nlet c = 3;"


def test_code_blocks_are_joined() -> None:
    text = (
        "## a.py:1\n\n**Path:** `/a.py`\n</br>\n**Line:** 1\n\n"
        "```python\nfirst\n```\n\n```\nsecond\n```\n"
    )

    (section,) = parser.parse_sections(text)
    assert section.code_snippet == "first\n\nsecond"


def test_note_inside_code_is_code() -> None:
    text = (
        "## a.md:1\n\n**Path:** `/a.md`\n</br>\n**Line:** 1\n\n"
        "```markdown\n**Note:** not a note\n```\n"
    )

    (section,) = parser.parse_sections(text)
    assert section.annotation_text is None
    assert section.code_snippet == "**Note:** not a note"


def test_parse_note_identity_and_sections() -> None:
    """Only indexable sections are kept on the document."""

    text = TWO_SECTIONS + "\n## orphan.py:1\n\nnothing\n"

    document = parser.parse_note(text, Path("/notes/review.md"))

    assert document.note_id == "review.md"
    assert document.title == "review"
    assert len(document.sections) == 2


def test_parsing_is_deterministic() -> None:
    assert parser.parse_sections(TWO_SECTIONS) == parser.parse_sections(
        TWO_SECTIONS
    )


@pytest.mark.parametrize(
    ("path", "language"),
    [("/a/b.ts", "typescript"), ("/x.PY", "python"), ("/Makefile", "plaintext")],
)
def test_language_for(path: str, language: str) -> None:
    assert parser.language_for(path) == language


def test_oversized_header_number_is_not_a_header() -> None:
    text = (
        "## x.py:" + "9" * 5000 + "\n\n**Path:** `/x.py`\n</br>\n**Line:** 3\n"
        "\n## y.py:4\n\n**Path:** `/y.py`\n</br>\n**Line:** 4\n"
    )

    (section,) = parser.parse_sections(text)

    assert section.anchor_full_path == "/y.py"
    assert section.section_line == 7


def test_oversized_line_marker_falls_back_to_header() -> None:
    text = "## y.py:4\n\n**Path:** `/y.py`\n</br>\n**Line:** " + "1" * 5000

    (section,) = parser.parse_sections(text)

    assert section.anchor_line == 4


def test_snippet_with_fence_lines_round_trips() -> None:
    snippet = 'doc = """\n```python\nprint(1)\n```\n"""'

    text = parser.render_section("a.py", 3, "/src/a.py", snippet)
    (section,) = parser.parse_sections(text)

    assert "````python\n" in text
    assert section.code_snippet == snippet
    assert section.language == "python"


def test_snippet_with_header_line_is_rejected() -> None:
    with pytest.raises(InvalidSnippetError):
        parser.render_section(
            "a.md", 3, "/src/a.md", "x = 1\n## TODO:2 later\ny = 2"
        )
