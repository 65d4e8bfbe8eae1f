"""Logic for inferring what a comment documents from the code after it."""

import re

from scssdoc.comment_block import CommentBlock
from scssdoc.record import Context

CALLABLE_RE = re.compile(r"^\s*@(mixin|function)\s+([\w-]+)")
PLACEHOLDER_RE = re.compile(r"^\s*%([\w-]+)")
VARIABLE_RE = re.compile(r"^\s*\$([\w-]+)\s*:")
CSS_RE = re.compile(r"^\s*([^\s@$%/][^{;]*?)\s*\{")
FLAG_RE = re.compile(r"\s*!(default|global)\b")


def infer_context(block: CommentBlock) -> Context:
    """Return the context (type, name, value) of a comment block."""
    code = block.code
    line = block.code_line
    ctx = Context(
        type="unknown",
        code=code,
        line_start=block.code_start,
        line_end=block.code_end,
    )
    if not code:
        return ctx

    if m := CALLABLE_RE.match(line):
        ctx.type, ctx.name = m.group(1), m.group(2)
    elif m := PLACEHOLDER_RE.match(line):
        ctx.type, ctx.name = "placeholder", m.group(1)
    elif m := VARIABLE_RE.match(line):
        ctx.type, ctx.name = "variable", m.group(1)
        ctx.value, ctx.scope = _variable_value(code)
    elif m := CSS_RE.match(line):
        ctx.type, ctx.name = "css", m.group(1)
    return ctx


def _variable_value(code: str) -> tuple[str, str]:
    """Split ``$name: value !default;`` into its value and scope."""
    value = code.split(":", 1)[1].strip()
    if value.endswith(";"):
        value = value[:-1].rstrip()
    scope = "private"
    for flag in FLAG_RE.findall(value):
        scope = flag
    value = FLAG_RE.sub("", value).strip()
    return value, scope


def signature_defaults(code: str) -> dict[str, str]:
    """Read ``$name: default`` pairs from a mixin or function signature."""
    m = re.match(r"\s*@(?:mixin|function)\s+[\w-]+\s*\(", code)
    if not m:
        return {}
    args = _balanced_args(code[m.end() :])
    defaults: dict[str, str] = {}
    for arg in _split_top_level(args):
        name, sep, default = arg.partition(":")
        name = name.strip()
        if sep and name.startswith("$"):
            defaults[name] = default.strip()
    return defaults


def _balanced_args(rest: str) -> str:
    depth = 1
    for i, ch in enumerate(rest):
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return rest[:i]
    return rest


def _split_top_level(args: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current = ""
    for ch in args:
        if ch in "([":
            depth += 1
        elif ch in ")]":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += ch
    if current.strip():
        parts.append(current)
    return parts


def signature_parameters(code: str) -> list[str]:
    """Return the ``$name`` of every parameter in a signature."""
    m = re.match(r"\s*@(?:mixin|function)\s+[\w-]+\s*\(", code)
    if not m:
        return []
    names = []
    for arg in _split_top_level(_balanced_args(code[m.end() :])):
        name = arg.partition(":")[0].strip()
        if name.endswith("..."):
            name = name[:-3]
        if name.startswith("$"):
            names.append(name)
    return names
