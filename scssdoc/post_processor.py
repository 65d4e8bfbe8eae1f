"""Second pass linking records to each other once every file is parsed."""

import logging
from typing import Any

from scssdoc.annotation_registry import AnnotationRegistry
from scssdoc.errors import AliasCycleError, ScssDocError
from scssdoc.event_channel import Event, EventChannel
from scssdoc.record import Record
from scssdoc.record_ref import CIRCULAR
from scssdoc.record_store import RecordStore

logger = logging.getLogger(__name__)


class PostProcessor:
    """Resolves aliases, requirements and handler ``resolve`` steps.

    Order matters: alias and require links are in place before any handler
    ``resolve`` step runs, so custom annotations can rely on them.
    """

    def __init__(
        self,
        registry: AnnotationRegistry,
        config: dict[str, Any],
        channel: EventChannel,
    ) -> None:
        """Initialize the post-processor."""
        self.registry = registry
        self.channel = channel
        self.strict = bool(config.get("strict"))
        self.problems: list[Event] = []

    def run(self, store: RecordStore) -> None:
        """Link every record of the store in place.

        In strict mode the first resolution problem raises ``ScssDocError``.
        """
        self.problems = []
        items = [r for r in store if r.context_type != "unknown"]
        self._link_aliases(store, items)
        self._link_requires(store, items)
        self._run_resolvers(store, items)

        if self.strict and self.problems:
            first = self.problems[0]
            self.channel.error(first.message, first.file, first.line)
            raise ScssDocError(str(first))

    def _problem(self, record: Record, message: str) -> None:
        event = self.channel.warn("resolution", message, record.file.path, record.line)
        self.problems.append(event)

    def _link_aliases(self, store: RecordStore, items: list[Record]) -> None:
        for record in items:
            for name in record.alias:
                target = store.find(name, record.context_type)
                if target is None:
                    self._problem(
                        record,
                        f"Item `{record.name}` is an alias of `{name}` "
                        "but this item doesn't exist.",
                    )
                    continue
                if self._in_alias_cycle(store, record, target):
                    continue
                ref = record.ref()
                if ref not in target.aliased:
                    target.aliased.append(ref)

    def _in_alias_cycle(
        self, store: RecordStore, record: Record, target: Record
    ) -> bool:
        """Report a cycle when ``record`` itself is part of one.

        Records that merely alias into a loop they are not part of are linked
        as usual.
        """
        try:
            if target.uid == record.uid:
                raise AliasCycleError(
                    [record.name, target.name], frozenset({record.uid})
                )
            store.resolve_alias(target)
        except AliasCycleError as exc:
            if record.uid not in exc.cycle:
                return False
            self.channel.notice(
                "cycle",
                f"Item `{record.name}` is part of an alias cycle: {exc.chain}",
                record.file.path,
                record.line,
            )
            return True
        return False

    def _link_requires(self, store: RecordStore, items: list[Record]) -> None:
        for record in items:
            kept = []
            for req in record.require:
                target = store.find(req.name, req.type)
                if target is None:
                    if req.autofill:
                        logger.debug(
                            "Dropping autofilled %s `%s` of `%s`",
                            req.type,
                            req.name,
                            record.name,
                        )
                        continue
                    self._problem(
                        record,
                        f"Item `{record.name}` requires `{req.name}` from type "
                        f"`{req.type}` but this item doesn't exist.",
                    )
                    kept.append(req)
                    continue

                req.item = target.ref()
                kept.append(req)
                if store.reaches(record, target):
                    target.used_by.append(CIRCULAR)
                    self.channel.notice(
                        "cycle",
                        f"Usage cycle between `{record.name}` and `{target.name}`",
                        record.file.path,
                        record.line,
                    )
                elif record.ref() not in target.used_by:
                    target.used_by.append(record.ref())
            record.require = kept

    def _run_resolvers(self, store: RecordStore, items: list[Record]) -> None:
        for handler in self.registry:
            if handler.resolve is None:
                continue
            for record in items:
                try:
                    messages = handler.resolve(record, store) or []
                except Exception as exc:  # noqa: BLE001
                    self._problem(
                        record,
                        f"Annotation `{handler.name}` failed to resolve "
                        f"`{record.name}`: {exc}",
                    )
                    continue
                for message in messages:
                    self._problem(record, message)
