"""Logic for keeping only records of the configured access levels."""

from collections.abc import Iterable

from scssdoc.record import Record


def filter_access(records: Iterable[Record], access: Iterable[str]) -> list[Record]:
    """Drop records whose access level is not listed."""
    allowed = set(access)
    return [r for r in records if (r.access or "public") in allowed]
