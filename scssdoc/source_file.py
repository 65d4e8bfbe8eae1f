"""Data model for a source file flowing through the pipeline."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SourceFile:
    """A stylesheet file and its raw bytes."""

    path: Path
    contents: bytes

    @classmethod
    def read(cls, path: Path | str) -> "SourceFile":
        """Read a file from disk."""
        p = Path(path)
        return cls(path=p, contents=p.read_bytes())

    def text(self) -> str:
        """Decode the contents as UTF-8, tolerating a byte order mark."""
        return self.contents.decode("utf-8-sig")
