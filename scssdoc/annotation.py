"""Data model for an annotation handler and its optional capabilities."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from scssdoc.record import FileRef, Record
    from scssdoc.record_store import RecordStore

ParseFn = Callable[[str, "Record", "FileRef"], None]
ResolveFn = Callable[["Record", "RecordStore"], Iterable[str] | None]
AutofillFn = Callable[["Record"], Any]
DefaultFn = Callable[["Record"], Any]


@dataclass(frozen=True)
class Annotation:
    """A named handler for one ``@tag``.

    Every capability is optional:

    - ``parse(raw, record, file)`` stores structured data onto the record and
      raises ``AnnotationSyntaxError`` on malformed input.
    - ``resolve(record, store)`` runs after cross-references are linked and
      returns resolution warnings, if any.
    - ``autofill(record)`` synthesizes a value from the record's code.
    - ``default(record)`` provides a value when the comment sets none.

    ``attr`` names the record field that ``autofill`` and ``default`` values
    are merged into.
    """

    name: str
    parse: ParseFn | None = None
    resolve: ResolveFn | None = None
    autofill: AutofillFn | None = None
    default: DefaultFn | None = None
    attr: str | None = None
    aliases: tuple[str, ...] = ()
    multiple: bool = True
    allowed_on: frozenset[str] | None = None

    def allows(self, context_type: str) -> bool:
        """Check whether the annotation may be used on a context type."""
        return self.allowed_on is None or context_type in self.allowed_on
