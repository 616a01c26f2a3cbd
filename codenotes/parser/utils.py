"""Patterns and helpers shared by the note parser and renderer."""

from __future__ import annotations

import re

# ``## <file name>:<line>`` starts a new annotation section. Numbers longer
# than nine digits do not form a header.
HEADER_RE = re.compile(r"^## (.+?):(\d{1,9})(?!\d)")

# ``**Path:** `<full path>``` right after the header.
PATH_RE = re.compile(r"^\*\*Path:\*\*\s*`(.+?)`")

# ``**Line:** <n>``, optionally preceded by an HTML line break.
LINE_RE = re.compile(
    r"^(?:<\/?br\s*\/?>\s*)?\*\*Line:\*\*\s*([0-9]{1,9})(?![0-9])",
    re.IGNORECASE,
)

# ``**Note:** <text>`` holding the user's annotation.
NOTE_RE = re.compile(r"^\*\*Note:\*\*\s?(.*)$")

# Opening or closing code fence of three or more backticks, capturing the
# language on opening fences.
FENCE_RE = re.compile(r"^(`{3,})\s*([\w+#.-]*)\s*$")

# Number of lines after the header that may hold the path marker.
PATH_WINDOW = 2

# Number of lines after the path marker that may hold the line marker.
LINE_WINDOW = 2


def normalize_whitespace(text: str) -> str:
    """Collapse consecutive whitespace, including newlines, to one space."""

    return re.sub(r"\s+", " ", text).strip()


def split_lines(text: str) -> list[str]:
    """Split ``text`` on ``\\n`` dropping carriage returns.

    Line ``n`` of the document is at index ``n - 1`` of the result, which
    keeps header numbering aligned with what an editor shows.
    """

    return [line.rstrip("\r") for line in text.split("\n")]


def count_headers(text: str) -> int:
    """Count section headers in ``text`` whether or not they are valid."""

    return sum(1 for line in split_lines(text) if HEADER_RE.match(line))


def reference_count_label(count: int) -> str:
    """Return a short ``N refs`` label for ``count`` references."""

    return "1 ref" if count == 1 else f"{count} refs"


def truncate(text: str, length: int) -> str:
    """Shorten ``text`` to ``length`` characters, marking the cut."""

    if len(text) <= length:
        return text
    return text[:length] + "..."
