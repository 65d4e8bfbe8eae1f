"""Data model for a raw comment block handed over by the scanner."""

from dataclasses import dataclass


@dataclass
class CommentBlock:
    """One documentation comment and the code it documents."""

    comment: str  # comment text with comment markers stripped
    code: str  # documented construct, first line plus its body
    comment_start: int
    code_start: int | None = None  # None when nothing follows the comment
    code_end: int | None = None
    poster: bool = False  # //// file-level block

    @property
    def code_line(self) -> str:
        """Return the first line of the documented code."""
        return self.code.split("\n", 1)[0] if self.code else ""
