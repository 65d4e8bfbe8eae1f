"""Built-in annotations carrying descriptive metadata."""

from typing import Any

from scssdoc.annotation import Annotation
from scssdoc.errors import AnnotationSyntaxError
from scssdoc.record import FileRef, Record
from scssdoc.record_fields import Link, Since

ACCESS_LEVELS = ("public", "private")


def _required(raw: str, annotation: str) -> str:
    value = raw.strip()
    if not value:
        msg = f"@{annotation} requires a value"
        raise AnnotationSyntaxError(msg)
    return value


def access(config: dict[str, Any]) -> Annotation:
    """``@access public|private|auto``; ``auto`` uses the private prefix."""
    prefix = config.get("private_prefix") or ""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        value = raw.strip().lower()
        if value == "auto":
            private = bool(prefix) and record.name.startswith(prefix)
            value = "private" if private else "public"
        if value not in ACCESS_LEVELS:
            msg = f"@access must be public, private or auto, not `{raw.strip()}`"
            raise AnnotationSyntaxError(msg)
        record.access = value

    return Annotation(
        name="access",
        parse=parse,
        default=lambda record: "public",
        attr="access",
        multiple=False,
    )


def author(config: dict[str, Any]) -> Annotation:
    """``@author name``."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        record.author.append(_required(raw, "author"))

    return Annotation(name="author", parse=parse, attr="author")


def deprecated(config: dict[str, Any]) -> Annotation:
    """``@deprecated [message]``."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        record.deprecated = raw.strip()

    return Annotation(name="deprecated", parse=parse, attr="deprecated", multiple=False)


def group(config: dict[str, Any]) -> Annotation:
    """``@group name``; names are case-insensitive."""
    default_group = config.get("default_group", "undefined")

    def parse(raw: str, record: Record, file: FileRef) -> None:
        record.group = [_required(raw, "group").lower()]

    return Annotation(
        name="group",
        parse=parse,
        default=lambda record: [default_group],
        attr="group",
        multiple=False,
    )


def group_description(config: dict[str, Any]) -> Annotation:
    """``@groupDescription text``, meaningful in poster comments."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        record.group_description = _required(raw, "groupDescription")

    return Annotation(
        name="groupDescription",
        parse=parse,
        attr="group_description",
        multiple=False,
    )


def ignore(config: dict[str, Any]) -> Annotation:
    """``@ignore text``: kept on the record but not meant for display."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        record.ignore.append(raw.strip())

    return Annotation(name="ignore", parse=parse, attr="ignore")


def link(config: dict[str, Any]) -> Annotation:
    """``@link url [caption]``."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        url, _, caption = _required(raw, "link").partition(" ")
        record.link.append(Link(url=url, caption=caption.strip()))

    return Annotation(name="link", parse=parse, attr="link", aliases=("source",))


def name(config: dict[str, Any]) -> Annotation:
    """``@name name`` overrides the name inferred from the code."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        value = _required(raw, "name")
        if " " in value:
            msg = f"@name must be a single identifier, not `{value}`"
            raise AnnotationSyntaxError(msg)
        record.context.name = value

    return Annotation(name="name", parse=parse, multiple=False)


def since(config: dict[str, Any]) -> Annotation:
    """``@since version [- description]``."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        value = _required(raw, "since")
        if value.startswith("-"):
            record.since.append(Since(description=value[1:].strip()))
            return
        version, _, rest = value.partition(" ")
        rest = rest.strip()
        if rest.startswith("-"):
            rest = rest[1:].strip()
        record.since.append(Since(version=version, description=rest))

    return Annotation(name="since", parse=parse, attr="since")


def todo(config: dict[str, Any]) -> Annotation:
    """``@todo text``."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        record.todo.append(_required(raw, "todo"))

    return Annotation(name="todo", parse=parse, attr="todo")


def type_(config: dict[str, Any]) -> Annotation:
    """``@type Type | Type`` on variables."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        types = [t.strip() for t in _required(raw, "type").split("|")]
        if not all(types):
            msg = f"@type has an empty alternative in `{raw.strip()}`"
            raise AnnotationSyntaxError(msg)
        record.type = types

    return Annotation(
        name="type",
        parse=parse,
        attr="type",
        multiple=False,
        allowed_on=frozenset({"variable"}),
    )
