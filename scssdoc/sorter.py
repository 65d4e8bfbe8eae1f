"""Deterministic ordering of the final record collection."""

from collections.abc import Iterable, Sequence

from scssdoc.record import Record


def primary_group(record: Record, default_group: str = "undefined") -> str:
    """Return the lowercased group a record is ordered by."""
    return (record.group[0] if record.group else default_group).lower()


def sort_records(
    records: Sequence[Record],
    groups: Iterable[str],
    default_group: str = "undefined",
) -> list[Record]:
    """Order records by group, file path, line and name.

    Configured groups come first, in configuration order; other groups follow
    in the order they are first seen. Group keys compare case-insensitively.
    The sort is stable and returns a new list.
    """
    rank: dict[str, int] = {}
    for key in groups:
        rank.setdefault(key.lower(), len(rank))
    for record in records:
        rank.setdefault(primary_group(record, default_group), len(rank))

    def sort_key(record: Record) -> tuple[int, str, int, str]:
        return (
            rank[primary_group(record, default_group)],
            record.file.path,
            record.line,
            record.name,
        )

    return sorted(records, key=sort_key)
