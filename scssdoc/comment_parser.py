"""Turns raw comment blocks into documentation records."""

import copy
import logging
import re
import textwrap
from typing import Any

from scssdoc.annotation import Annotation
from scssdoc.annotation_registry import AnnotationRegistry
from scssdoc.comment_block import CommentBlock
from scssdoc.errors import AnnotationSyntaxError, RegistryError
from scssdoc.event_channel import EventChannel
from scssdoc.infer_context import infer_context, signature_defaults
from scssdoc.record import Context, FileRef, Record
from scssdoc.record_fields import Require
from scssdoc.scan_blocks import scan_blocks

logger = logging.getLogger(__name__)

TAG_RE = re.compile(r"^@([A-Za-z][\w-]*)\s*(.*)$")

# Poster values that only make sense on the poster itself.
POSTER_LOCAL = frozenset({"groupDescription", "name"})


class CommentParser:
    """Parses one comment block at a time against an annotation registry."""

    def __init__(
        self,
        registry: AnnotationRegistry,
        config: dict[str, Any],
        channel: EventChannel,
    ) -> None:
        """Initialize the parser and resolve the autofill list."""
        self.registry = registry
        self.config = config
        self.channel = channel
        self.include_unknown = bool(config.get("include_unknown_contexts"))
        self.default_group = config.get("default_group", "undefined")
        self.autofill: list[Annotation] = []
        for name in config.get("autofill") or []:
            handler = registry.get(name)
            if handler is None:
                msg = f"Cannot autofill unknown annotation `{name}`"
                raise RegistryError(msg)
            if handler.autofill is None:
                msg = f"Annotation `{handler.name}` has no autofill step"
                raise RegistryError(msg)
            self.autofill.append(handler)

    def parse_source(
        self, text: str, file: FileRef
    ) -> tuple[list[Record], dict[str, str]]:
        """Parse every block of a source file.

        Returns the file's records, with poster values merged in, and the group
        descriptions its posters declare.
        """
        posters: list[Record] = []
        records: list[Record] = []
        for block in scan_blocks(text):
            record = self._extract(block, file)
            if record is None:
                continue
            (posters if block.poster else records).append(record)

        group_descriptions: dict[str, str] = {}
        for poster in posters:
            if poster.group_description:
                key = poster.group[0] if poster.group else self.default_group
                group_descriptions[key] = poster.group_description
            for record in records:
                self._merge_poster(poster, record)
        for record in records:
            self._apply_defaults(record)
        return records, group_descriptions

    def parse(self, block: CommentBlock, file: FileRef) -> Record | None:
        """Parse one block into a record; None when there is nothing to keep."""
        record = self._extract(block, file)
        if record is not None and not block.poster:
            self._apply_defaults(record)
        return record

    def _extract(self, block: CommentBlock, file: FileRef) -> Record | None:
        """Parse a block and autofill it, leaving defaults unset."""
        if block.poster:
            context = Context(type="unknown")
        else:
            context = infer_context(block)
            if context.type == "unknown" and not self.include_unknown:
                logger.debug("Skipping comment at %s:%s", file.path, block.comment_start)
                return None

        description, invocations = split_comment(block.comment)
        record = Record(
            context=context,
            file=file,
            description=description,
            comment_line=block.comment_start,
        )
        for tag, raw, offset in self._fold_example_code(invocations):
            self._invoke(record, tag, raw, block.comment_start + offset, poster=block.poster)

        if block.poster:
            return record
        self._fill_signature_defaults(record)
        for handler in self.autofill:
            if handler.allows(record.context_type) and handler.autofill is not None:
                _merge(record, handler, handler.autofill(record))
        return record

    def _fold_example_code(
        self, invocations: list[tuple[str, str, int]]
    ) -> list[tuple[str, str, int]]:
        """Keep unregistered column-0 ``@`` lines after ``@example`` as its code."""
        folded: list[tuple[str, str, int]] = []
        for tag, raw, offset in invocations:
            if (
                folded
                and tag not in self.registry
                and self.registry.canonical(folded[-1][0]) == "example"
            ):
                logger.debug("Keeping `@%s` line as @example code", tag)
                prev_tag, prev_raw, prev_offset = folded[-1]
                folded[-1] = (prev_tag, f"{prev_raw}\n@{tag} {raw}".rstrip(), prev_offset)
                continue
            folded.append((tag, raw, offset))
        return folded

    def _invoke(
        self, record: Record, tag: str, raw: str, line: int, *, poster: bool
    ) -> None:
        """Dispatch one ``@tag`` to its handler."""
        handler = self.registry.get(tag)
        if handler is None:
            if self.include_unknown:
                record.unknown.setdefault(tag, []).append(raw.strip())
            else:
                logger.debug("Dropping unknown annotation @%s at line %s", tag, line)
            return
        if handler.parse is None:
            logger.debug("Annotation @%s has no parse step", handler.name)
            return

        path = record.file.path
        if not poster and not handler.allows(record.context_type):
            self.channel.warn(
                "syntax",
                f"Annotation `{handler.name}` is not allowed on comment "
                f"from type `{record.context_type}`.",
                path,
                line,
            )
            return
        if not handler.multiple and record.has(handler.name):
            self.channel.warn(
                "syntax",
                f"Annotation `{handler.name}` is only allowed once per comment, "
                "second value will be ignored.",
                path,
                line,
            )
            return
        try:
            handler.parse(raw, record, record.file)
        except AnnotationSyntaxError as exc:
            self.channel.warn("syntax", str(exc), path, line)
            return
        if handler.name not in record.annotations:
            record.annotations.append(handler.name)

    def _fill_signature_defaults(self, record: Record) -> None:
        """Take parameter defaults missing from comments out of the signature."""
        if record.context_type not in ("function", "mixin") or not record.parameter:
            return
        defaults = signature_defaults(record.context.code)
        for param in record.parameter:
            if param.default is None and param.name in defaults:
                param.default = defaults[param.name]

    def _apply_defaults(self, record: Record) -> None:
        for handler in self.registry:
            if handler.default is None or record.has(handler.name):
                continue
            if handler.attr and not getattr(record, handler.attr):
                setattr(record, handler.attr, handler.default(record))

    def _merge_poster(self, poster: Record, record: Record) -> None:
        """Copy file-level values a record does not set itself."""
        for name in poster.annotations:
            handler = self.registry.get(name)
            if name in POSTER_LOCAL or handler is None or handler.attr is None:
                continue
            if record.has(name) or not handler.allows(record.context_type):
                continue
            # lists keep autofilled entries; scalars fill only when unset
            _merge(record, handler, copy.deepcopy(getattr(poster, handler.attr)))
            record.annotations.append(name)


def split_comment(comment: str) -> tuple[str, list[tuple[str, str, int]]]:
    """Split comment text into its description and ``(tag, raw, offset)`` items.

    A line is an annotation when ``@`` is its first character once the common
    indentation is removed; lines after it that are not annotations belong to
    its value.
    """
    description: list[str] = []
    invocations: list[tuple[str, list[str], int]] = []
    for offset, line in enumerate(textwrap.dedent(comment).split("\n")):
        m = TAG_RE.match(line)
        if m:
            invocations.append((m.group(1), [m.group(2)], offset))
        elif invocations:
            invocations[-1][1].append(line)
        else:
            description.append(line)

    items = [(tag, "\n".join(parts).rstrip(), offset) for tag, parts, offset in invocations]
    return textwrap.dedent("\n".join(description)).strip(), items


def _merge(record: Record, handler: Annotation, value: Any) -> None:
    """Merge an autofilled value without overriding what the comment set."""
    if value is None or value == []:
        return
    if handler.attr is None:
        if handler.name not in record.extra:
            record.extra[handler.name] = value
        return

    current = getattr(record, handler.attr)
    if isinstance(current, list):
        seen = [_identity(v) for v in current]
        for entry in value:
            if _identity(entry) not in seen:
                current.append(entry)
                seen.append(_identity(entry))
    elif current is None:
        setattr(record, handler.attr, value)


def _identity(entry: Any) -> Any:
    return entry.key() if isinstance(entry, Require) else entry
