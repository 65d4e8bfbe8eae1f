"""Data model for a documented stylesheet item."""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from scssdoc.record_fields import (
    Example,
    Link,
    Parameter,
    Property,
    Require,
    Return,
    See,
    Since,
)
from scssdoc.record_ref import CIRCULAR, RecordRef

CONTEXT_TYPES = ("function", "mixin", "placeholder", "variable", "css", "unknown")


@dataclass
class Context:
    """What the comment documents, as inferred from the following code."""

    type: str
    name: str = ""
    value: str | None = None  # variables only
    scope: str | None = None  # default | global | private, variables only
    code: str = ""
    line_start: int | None = None
    line_end: int | None = None


@dataclass
class FileRef:
    """Where a record was declared."""

    path: str
    name: str

    @classmethod
    def from_path(cls, path: Path | str) -> "FileRef":
        """Build a file reference from a path."""
        p = Path(path)
        return cls(path=p.as_posix(), name=p.name)


@dataclass
class Record:
    """Represents one documented item extracted from a comment block."""

    context: Context
    file: FileRef
    description: str = ""
    comment_line: int = 0
    uid: int = -1  # arena index, assigned by RecordStore

    group: list[str] = field(default_factory=list)
    group_description: str | None = None
    access: str | None = None
    deprecated: str | None = None
    since: list[Since] = field(default_factory=list)
    author: list[str] = field(default_factory=list)
    link: list[Link] = field(default_factory=list)
    see: list[See] = field(default_factory=list)
    todo: list[str] = field(default_factory=list)
    type: list[str] = field(default_factory=list)
    ignore: list[str] = field(default_factory=list)

    parameter: list[Parameter] = field(default_factory=list)
    property_: list[Property] = field(default_factory=list)
    return_: Return | None = None
    content: str | None = None
    output: str | None = None
    throw: list[str] = field(default_factory=list)
    example: list[Example] = field(default_factory=list)

    alias: list[str] = field(default_factory=list)
    aliased: list[RecordRef] = field(default_factory=list)
    require: list[Require] = field(default_factory=list)
    used_by: list[RecordRef | str] = field(default_factory=list)

    unknown: dict[str, list[str]] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)  # user annotations
    # annotations explicitly set by the comment, canonical names
    annotations: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        """Return the documented item's name."""
        return self.context.name

    @property
    def context_type(self) -> str:
        """Return the documented item's context type."""
        return self.context.type

    @property
    def line(self) -> int:
        """Return the line used to order records within a file."""
        if self.context.line_start is not None:
            return self.context.line_start
        return self.comment_line

    def ref(self) -> RecordRef:
        """Return an index-based reference to this record."""
        return RecordRef(uid=self.uid, type=self.context.type, name=self.context.name)

    def has(self, annotation: str) -> bool:
        """Check whether the comment set an annotation explicitly."""
        return annotation in self.annotations

    def to_dict(self) -> dict[str, Any]:
        """Serialize into plain data for a renderer.

        References stay shallow so the result is finite even for usage cycles.
        """
        data = asdict(self)
        data["return"] = data.pop("return_")
        data["property"] = data.pop("property_")
        data["used_by"] = [
            u if u == CIRCULAR else asdict(u)  # type: ignore[arg-type]
            for u in self.used_by
        ]
        return {k: v for k, v in data.items() if v not in (None, [], {})}
