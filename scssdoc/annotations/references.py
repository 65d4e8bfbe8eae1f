"""Built-in annotations that refer to other records."""

import re
from typing import Any

from scssdoc.annotation import Annotation
from scssdoc.errors import AnnotationSyntaxError
from scssdoc.infer_context import signature_parameters
from scssdoc.record import FileRef, Record
from scssdoc.record_fields import Require, See
from scssdoc.record_store import RecordStore

REFERENCE_TYPES = ("function", "mixin", "placeholder", "variable")
SIGILS = {"$": "variable", "%": "placeholder"}

REQUIRE_RE = re.compile(
    r"^\s*(?:\{(?P<type>[^}]*)\})?\s*"
    r"(?P<name>[$%]?[\w-]+)\s*"
    r"(?:-?\s*(?P<desc>[^<]*?))?\s*"
    r"(?:<(?P<url>[^>]*)>)?\s*$",
    re.DOTALL,
)
SEE_RE = re.compile(r"^\s*(?:\{(?P<type>[^}]*)\})?\s*(?P<name>[$%]?[\w-]+)\s*$")
ALIAS_RE = re.compile(r"^\s*[$%]?(?P<name>[\w-]+)\s*$")

COMMENT_RE = re.compile(r"/\*.*?\*/|//[^\n]*", re.DOTALL)
DECLARATION_RE = re.compile(r"@(?:mixin|function|include)\s+[\w.-]+")
FUNCTION_CALL_RE = re.compile(r"(?<![\w.$%@:#-])([a-zA-Z_][\w-]*)\(")
INCLUDE_RE = re.compile(r"@include\s+([\w-]+)(?![\w.-])")
EXTEND_RE = re.compile(r"@extend\s+%([\w-]+)")
VARIABLE_RE = re.compile(r"(?<![\w-])\$([\w-]+)")

BUILTIN_FUNCTIONS = frozenset(
    {
        # Sass
        "abs", "adjust-color", "adjust-hue", "alpha", "append", "blue", "call",
        "ceil", "change-color", "comparable", "complement", "content-exists",
        "darken", "desaturate", "fade-in", "fade-out", "feature-exists", "floor",
        "function-exists", "get-function", "global-variable-exists", "grayscale",
        "green", "hue", "ie-hex-str", "if", "index", "inspect", "invert",
        "is-bracketed", "is-superselector", "join", "keywords", "length",
        "lighten", "lightness", "list-separator", "map-get", "map-has-key",
        "map-keys", "map-merge", "map-remove", "map-values", "max", "min", "mix",
        "mixin-exists", "nth", "opacify", "opacity", "percentage", "quote",
        "random", "red", "round", "saturate", "saturation", "scale-color",
        "selector-append", "selector-extend", "selector-nest", "selector-parse",
        "selector-replace", "selector-unify", "set-nth", "simple-selectors",
        "str-index", "str-insert", "str-length", "str-slice", "to-lower-case",
        "to-upper-case", "transparentize", "type-of", "unique-id", "unit",
        "unitless", "unquote", "variable-exists", "zip",
        # CSS
        "attr", "blur", "brightness", "calc", "clamp", "conic-gradient",
        "contrast", "counter", "counters", "cubic-bezier", "drop-shadow", "env",
        "fit-content", "format", "hsl", "hsla", "hue-rotate", "image-set",
        "linear-gradient", "local", "matrix", "matrix3d", "minmax", "not",
        "perspective", "radial-gradient", "repeat", "repeating-conic-gradient",
        "repeating-linear-gradient", "repeating-radial-gradient", "rgb", "rgba",
        "rotate", "rotate3d", "rotateX", "rotateY", "rotateZ", "scale",
        "scale3d", "scaleX", "scaleY", "sepia", "skew", "skewX", "skewY",
        "steps", "translate", "translate3d", "translateX", "translateY",
        "translateZ", "url", "var", "and", "or",
    }
)  # fmt: skip


def _reference_type(name: str, explicit: str | None, annotation: str) -> tuple[str, str]:
    """Split a sigil off a name and work out the referenced context type."""
    type_ = explicit.strip().lower() if explicit else None
    if name[0] in SIGILS:
        type_ = type_ or SIGILS[name[0]]
        name = name[1:]
    type_ = type_ or "function"
    if type_ not in REFERENCE_TYPES:
        msg = f"@{annotation} has unknown type `{type_}`"
        raise AnnotationSyntaxError(msg)
    return name, type_


def alias(config: dict[str, Any]) -> Annotation:
    """``@alias name``: this record stands in for another one."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        m = ALIAS_RE.match(raw)
        if not m:
            msg = f"@alias expects a single name, not `{raw.strip()}`"
            raise AnnotationSyntaxError(msg)
        if m.group("name") == record.name:
            msg = f"`{record.name}` cannot be an alias of itself"
            raise AnnotationSyntaxError(msg)
        record.alias.append(m.group("name"))

    return Annotation(name="alias", parse=parse, attr="alias")


def require(config: dict[str, Any]) -> Annotation:
    """``@require {type} name - description <url>``; autofilled from code."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        m = REQUIRE_RE.match(raw)
        if not m:
            msg = f"Malformed @require `{raw.strip()}`"
            raise AnnotationSyntaxError(msg)
        name, type_ = _reference_type(m.group("name"), m.group("type"), "require")
        entry = Require(
            name=name,
            type=type_,
            description=(m.group("desc") or "").strip(),
            url=(m.group("url") or "").strip() or None,
        )
        if any(r.key() == entry.key() for r in record.require):
            return
        record.require.append(entry)

    return Annotation(
        name="require",
        parse=parse,
        autofill=autofill_requires,
        attr="require",
        aliases=("requires",),
    )


def autofill_requires(record: Record) -> list[Require]:
    """Find mixins, placeholders, variables and functions a record's code uses."""
    code = COMMENT_RE.sub("", record.context.code)
    if not code:
        return []
    own_parameters = {p[1:] for p in signature_parameters(code)}
    own_parameters.update(p.name.lstrip("$") for p in record.parameter)

    found: list[Require] = []

    def add(name: str, type_: str) -> None:
        if (type_, name) == (record.context_type, record.name):
            return
        if any(r.key() == (type_, name) for r in found):
            return
        found.append(Require(name=name, type=type_, autofill=True))

    for name in FUNCTION_CALL_RE.findall(DECLARATION_RE.sub("", code)):
        if name not in BUILTIN_FUNCTIONS:
            add(name, "function")
    for name in INCLUDE_RE.findall(code):
        add(name, "mixin")
    for name in EXTEND_RE.findall(code):
        add(name, "placeholder")
    for name in VARIABLE_RE.findall(code):
        if name not in own_parameters:
            add(name, "variable")
    return found


def see(config: dict[str, Any]) -> Annotation:
    """``@see {type} name``: resolved against the run's records."""

    def parse(raw: str, record: Record, file: FileRef) -> None:
        m = SEE_RE.match(raw)
        if not m:
            msg = f"Malformed @see `{raw.strip()}`"
            raise AnnotationSyntaxError(msg)
        raw_name = m.group("name")
        if m.group("type") or raw_name[0] in SIGILS:
            name, type_ = _reference_type(raw_name, m.group("type"), "see")
            record.see.append(See(name=name, type=type_))
        else:
            record.see.append(See(name=raw_name))

    def resolve(record: Record, store: RecordStore) -> list[str]:
        problems: list[str] = []
        for entry in record.see:
            target = store.find(entry.name, entry.type)
            if target is None:
                problems.append(
                    f"Item `{record.name}` refers to `{entry.name}` "
                    "but this item doesn't exist."
                )
                continue
            entry.item = target.ref()
            if entry.type is None:
                entry.type = target.context_type
        return problems

    return Annotation(name="see", parse=parse, resolve=resolve, attr="see")
