"""Data models for the structured values annotations store on a record."""

from dataclasses import dataclass

from scssdoc.record_ref import RecordRef


@dataclass
class Parameter:
    """A ``@parameter`` entry."""

    name: str
    type: str | None = None
    description: str = ""
    default: str | None = None


@dataclass
class Property:
    """A ``@property`` entry describing a map key path."""

    path: str
    type: str | None = None
    default: str | None = None
    description: str = ""


@dataclass
class Return:
    """A ``@return`` entry."""

    type: str
    description: str = ""


@dataclass
class Since:
    """A ``@since`` entry."""

    version: str | None = None
    description: str = ""


@dataclass
class Link:
    """A ``@link`` entry."""

    url: str
    caption: str = ""


@dataclass
class Example:
    """A ``@example`` entry."""

    code: str
    type: str | None = None
    description: str = ""


@dataclass
class See:
    """A ``@see`` entry; ``item`` is set once resolved."""

    name: str
    type: str | None = None
    item: RecordRef | None = None


@dataclass
class Require:
    """A declared dependency on another record; ``item`` is set once resolved."""

    name: str
    type: str
    autofill: bool = False
    description: str = ""
    url: str | None = None
    item: RecordRef | None = None

    def key(self) -> tuple[str, str]:
        """Return the (type, name) pair used to deduplicate requirements."""
        return (self.type, self.name)
