"""In-memory, insertion-ordered collection of the records of one run."""

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from scssdoc.errors import AliasCycleError
from scssdoc.record import Record
from scssdoc.record_ref import CIRCULAR, RecordRef

logger = logging.getLogger(__name__)


class RecordStore:
    """Owns every record of a run and addresses them by arena index.

    Cross-reference fields hold ``RecordRef`` values pointing back into this
    store rather than the records themselves.
    """

    def __init__(self, reference_match: str = "prefer_type") -> None:
        """Initialize an empty store."""
        self.reference_match = reference_match
        self.records: list[Record] = []
        self.group_descriptions: dict[str, str] = {}
        self._by_key: dict[tuple[str, str], int] = {}
        self._by_name: dict[str, int] = {}

    def add(self, record: Record) -> Record:
        """Append a record and index it; the last declaration wins lookups."""
        record.uid = len(self.records)
        self.records.append(record)
        if record.context_type == "unknown":
            return record

        key = (record.context_type, record.name)
        if key in self._by_key:
            logger.debug(
                "Duplicate declaration of %s `%s` in %s",
                record.context_type,
                record.name,
                record.file.path,
            )
        self._by_key[key] = record.uid
        self._by_name[record.name] = record.uid
        return record

    def extend(self, records: Iterable[Record]) -> None:
        """Append records from one file at once."""
        for record in records:
            self.add(record)

    def get(self, ref: RecordRef | int) -> Record:
        """Return the record a reference points at."""
        uid = ref.uid if isinstance(ref, RecordRef) else ref
        return self.records[uid]

    def find(self, name: str, type_: str | None = None) -> Record | None:
        """Look a record up by name, preferring the given context type.

        With ``reference_match`` set to ``exact_type`` a typed lookup never
        falls back to records of another type.
        """
        if type_ is not None:
            uid = self._by_key.get((type_, name))
            if uid is not None:
                return self.records[uid]
            if self.reference_match == "exact_type":
                return None
        uid = self._by_name.get(name)
        return self.records[uid] if uid is not None else None

    def resolve_alias(self, record: Record) -> Record:
        """Follow a record's alias chain to the record it finally stands for.

        Raises ``AliasCycleError`` if the chain revisits a record; its ``cycle``
        holds the indexes of the records inside the loop.
        """
        current = record
        visited = [current.uid]
        chain = [current.name]
        while current.alias:
            target = self.find(current.alias[0], current.context_type)
            if target is None:
                break
            chain.append(target.name)
            if target.uid in visited:
                loop = visited[visited.index(target.uid) :]
                raise AliasCycleError(chain, frozenset(loop))
            visited.append(target.uid)
            current = target
        return current

    def reaches(self, start: Record, target: Record) -> bool:
        """Check whether ``target`` is reachable from ``start`` via ``used_by``."""
        seen: set[int] = set()
        stack = [start.uid]
        while stack:
            uid = stack.pop()
            if uid == target.uid:
                return True
            if uid in seen:
                continue
            seen.add(uid)
            stack.extend(
                u.uid for u in self.records[uid].used_by if isinstance(u, RecordRef)
            )
        return False

    def used_by_tree(self, record: Record) -> list[dict[str, Any] | str]:
        """Expand ``used_by`` recursively into nested plain data.

        Ends in concrete records or the ``"Circular"`` marker.
        """
        return self._expand(record, frozenset({record.uid}))

    def _expand(
        self, record: Record, path: frozenset[int]
    ) -> list[dict[str, Any] | str]:
        tree: list[dict[str, Any] | str] = []
        for user in record.used_by:
            if not isinstance(user, RecordRef) or user.uid in path:
                tree.append(CIRCULAR)
                continue
            node = self.get(user)
            tree.append(
                {
                    "type": node.context_type,
                    "name": node.name,
                    "used_by": self._expand(node, path | {node.uid}),
                }
            )
        return tree

    def __iter__(self) -> Iterator[Record]:
        """Iterate records in insertion order."""
        return iter(self.records)

    def __len__(self) -> int:
        """Return the number of records."""
        return len(self.records)
