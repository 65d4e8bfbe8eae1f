"""Index-based references between records of one run."""

from dataclasses import dataclass
from typing import Final

CIRCULAR: Final = "Circular"


@dataclass(frozen=True)
class RecordRef:
    """Points at a record in the owning RecordStore by its arena index."""

    uid: int
    type: str
    name: str

    def __str__(self) -> str:
        """Render the reference the way it reads in a comment."""
        return f"{self.type} {self.name}"
