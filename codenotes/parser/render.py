"""Render annotation sections in the note document format."""

from __future__ import annotations

import re
from pathlib import PurePath

from codenotes.errors import InvalidSnippetError

from .utils import HEADER_RE, normalize_whitespace, split_lines

DEFAULT_LANGUAGE = "plaintext"

# Backtick runs opening a line, which a reader could take for a fence.
_BACKTICKS_RE = re.compile(r"^\s*(`{3,})", re.MULTILINE)

# File suffixes mapped to the language identifier of the code fence.
LANGUAGES = {
    ".c": "c",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".css": "css",
    ".go": "go",
    ".h": "c",
    ".html": "html",
    ".java": "java",
    ".js": "javascript",
    ".json": "json",
    ".jsx": "javascriptreact",
    ".md": "markdown",
    ".py": "python",
    ".rb": "ruby",
    ".rs": "rust",
    ".sh": "shellscript",
    ".sql": "sql",
    ".toml": "toml",
    ".ts": "typescript",
    ".tsx": "typescriptreact",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def language_for(path: str) -> str:
    """Return the code fence language for the file at ``path``."""

    return LANGUAGES.get(PurePath(path).suffix.lower(), DEFAULT_LANGUAGE)


def _fence_for(snippet: str) -> str:
    """Return a backtick fence longer than any fence inside ``snippet``."""

    longest = max(
        (len(m.group(1)) for m in _BACKTICKS_RE.finditer(snippet)), default=2
    )
    return "`" * (longest + 1)


def render_note_header(name: str) -> str:
    """Return the initial content of a newly created note document."""

    return f"# {name}\n\n"


def render_section(
    file_name: str,
    line: int,
    full_path: str,
    snippet: str,
    annotation: str | None = None,
    language: str | None = None,
) -> str:
    """Render one annotation section ready to be appended to a note.

    Args:
        file_name: Display name of the annotated source file.
        line: 1-based line number in the source file.
        full_path: Full path of the annotated source file.
        snippet: Source excerpt placed in the fenced code block.
        annotation: Optional commentary; newlines are collapsed to spaces.
        language: Code fence language, derived from ``full_path`` if omitted.

    Returns:
        Section text starting with a blank line and ending with a newline.

    Throws:
        InvalidSnippetError: If a snippet line would read back as a section
            header.
    """

    if any(HEADER_RE.match(text) for text in split_lines(snippet)):
        raise InvalidSnippetError(
            f"Snippet for {file_name}:{line} contains a section header line"
        )

    # Field order and spacing are fixed; the parser looks for the path and
    # line markers at set offsets from the header.
    entry = f"\n## {file_name}:{line}\n\n"
    entry += f"**Path:** `{full_path}`\n"
    entry += "</br>\n"
    entry += f"**Line:** {line}\n\n"

    if annotation:
        text = normalize_whitespace(annotation)
        if text:
            entry += f"**Note:** {text}\n\n"

    fence = _fence_for(snippet)
    entry += f"{fence}{language or language_for(full_path)}\n"
    entry += snippet
    entry += f"\n{fence}\n"
    return entry
