"""Built-in annotations describing signatures, output and examples."""

import re
import textwrap
from typing import Any

from scssdoc.annotation import Annotation
from scssdoc.errors import AnnotationSyntaxError
from scssdoc.record import FileRef, Record
from scssdoc.record_fields import Example, Parameter, Property, Return

# {type} name [default] - description
TYPED_ENTRY_RE = re.compile(
    r"^\s*(?:\{(?P<type>[^}]*)\})?\s*"
    r"(?P<name>[^\s\[\]{}-][^\s\[\]{}]*)?\s*"
    r"(?:\[(?P<default>[^\]]*)\])?\s*"
    r"(?:-\s*)?(?P<desc>.*)$",
    re.DOTALL,
)
RETURN_RE = re.compile(r"^\s*\{(?P<type>[^}]+)\}\s*(?P<desc>.*)$", re.DOTALL)
ERROR_RE = re.compile(r"@error\s+(?:(['\"])(?P<quoted>.*?)\1|(?P<bare>[^;\n]+))")

CALLABLES = frozenset({"function", "mixin"})


def _typed_entry(raw: str, annotation: str) -> dict[str, str | None]:
    m = TYPED_ENTRY_RE.match(raw)
    if not m or not m.group("name"):
        msg = f"@{annotation} is missing a name in `{raw.strip()}`"
        raise AnnotationSyntaxError(msg)
    type_ = m.group("type")
    if type_ is not None and not type_.strip():
        msg = f"@{annotation} has an empty type in `{raw.strip()}`"
        raise AnnotationSyntaxError(msg)
    default = m.group("default")
    return {
        "type": type_.strip() if type_ else None,
        "name": m.group("name"),
        "default": default.strip() if default is not None else None,
        "description": (m.group("desc") or "").strip(),
    }


def parameter(config: dict[str, Any]) -> Annotation:
    """``@parameter {type} $name [default] - description``."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        entry = _typed_entry(raw, "parameter")
        if any(p.name == entry["name"] for p in record.parameter):
            msg = f"Parameter `{entry['name']}` is documented twice"
            raise AnnotationSyntaxError(msg)
        record.parameter.append(
            Parameter(
                name=str(entry["name"]),
                type=entry["type"],
                description=str(entry["description"]),
                default=entry["default"],
            )
        )

    return Annotation(
        name="parameter",
        parse=parse,
        attr="parameter",
        aliases=("param", "arg", "argument"),
        allowed_on=CALLABLES,
    )


def property_(config: dict[str, Any]) -> Annotation:
    """``@property {type} path [default] - description`` on map variables."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        entry = _typed_entry(raw, "property")
        record.property_.append(
            Property(
                path=str(entry["name"]),
                type=entry["type"],
                default=entry["default"],
                description=str(entry["description"]),
            )
        )

    return Annotation(
        name="property",
        parse=parse,
        attr="property_",
        aliases=("prop",),
        allowed_on=frozenset({"variable"}),
    )


def return_(config: dict[str, Any]) -> Annotation:
    """``@return {type} description`` on functions."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        m = RETURN_RE.match(raw)
        if not m:
            msg = f"@return requires a {{type}} in `{raw.strip()}`"
            raise AnnotationSyntaxError(msg)
        record.return_ = Return(
            type=m.group("type").strip(), description=m.group("desc").strip()
        )

    return Annotation(
        name="return",
        parse=parse,
        attr="return_",
        aliases=("returns",),
        multiple=False,
        allowed_on=frozenset({"function"}),
    )


def content(config: dict[str, Any]) -> Annotation:
    """``@content description``; autofilled for mixins using ``@content``."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        record.content = raw.strip()

    def autofill(record: Record) -> str | None:
        if "@content" in record.context.code:
            return ""
        return None

    return Annotation(
        name="content",
        parse=parse,
        autofill=autofill,
        attr="content",
        multiple=False,
        allowed_on=frozenset({"mixin"}),
    )


def output(config: dict[str, Any]) -> Annotation:
    """``@output description`` on mixins."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        record.output = raw.strip()

    return Annotation(
        name="output",
        parse=parse,
        attr="output",
        aliases=("outputs",),
        multiple=False,
        allowed_on=frozenset({"mixin"}),
    )


def throw(config: dict[str, Any]) -> Annotation:
    """``@throw message``; autofilled from ``@error`` directives."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        value = raw.strip()
        if not value:
            msg = "@throw requires a message"
            raise AnnotationSyntaxError(msg)
        record.throw.append(value)

    def autofill(record: Record) -> list[str]:
        found: list[str] = []
        for m in ERROR_RE.finditer(record.context.code):
            message = (m.group("quoted") or m.group("bare") or "").strip()
            if message and message not in found:
                found.append(message)
        return found

    return Annotation(
        name="throw",
        parse=parse,
        autofill=autofill,
        attr="throw",
        aliases=("throws", "exception"),
        allowed_on=frozenset({"function", "mixin", "placeholder"}),
    )


def example(config: dict[str, Any]) -> Annotation:
    """``@example [type] [- description]`` followed by indented code lines."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        head, _, body = raw.partition("\n")
        code = textwrap.dedent(body).strip("\n")
        if not code.strip():
            msg = "@example has no code"
            raise AnnotationSyntaxError(msg)
        type_, _, description = head.strip().partition(" ")
        if type_.startswith("-"):
            description, type_ = head.strip()[1:], ""
        description = description.strip()
        if description.startswith("-"):
            description = description[1:].strip()
        record.example.append(
            Example(code=code, type=type_ or None, description=description)
        )

    return Annotation(name="example", parse=parse, attr="example")
