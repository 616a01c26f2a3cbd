"""Annotation section stored inside a note document."""

from __future__ import annotations

from attrs import define


@define(slots=True)
class AnnotationSection:
    """One annotation anchored to a line of a source file.

    Attributes:
        anchor_file_name: Display name of the annotated source file.
        anchor_line: 1-based line number in the source file.
        anchor_full_path: Full path of the annotated source file.
        section_line: 1-based line of the section header in the note.
        annotation_text: Optional commentary written by the user.
        code_snippet: Optional excerpt of the referenced source lines.
        language: Language identifier of the fenced code block, if any.
    """

    anchor_file_name: str
    anchor_line: int
    anchor_full_path: str
    section_line: int
    annotation_text: str | None = None
    code_snippet: str | None = None
    language: str | None = None

    @property
    def label(self) -> str:
        """Return the ``name:line`` label shown for the section."""

        return f"{self.anchor_file_name}:{self.anchor_line}"
