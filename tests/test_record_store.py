"""Tests for the record store lookups and graph walks."""

import pytest

from scssdoc.errors import AliasCycleError
from scssdoc.record import Context, FileRef, Record
from scssdoc.record_ref import CIRCULAR, RecordRef
from scssdoc.record_store import RecordStore

FILE = FileRef(path="a.scss", name="a.scss")


def make_record(type_: str, name: str, **fields: object) -> Record:
    """Create a record of a given context type."""
    return Record(context=Context(type=type_, name=name), file=FILE, **fields)


def test_add_assigns_arena_indexes() -> None:
    """Verify uids follow insertion order."""
    store = RecordStore()
    store.extend([make_record("mixin", "a"), make_record("function", "b")])
    assert [r.uid for r in store] == [0, 1]
    assert store.get(1).name == "b"
    assert store.get(RecordRef(0, "mixin", "a")).name == "a"
    assert len(store) == 2


def test_find_prefers_matching_type() -> None:
    """Verify typed lookups and the name-only fallback."""
    store = RecordStore()
    store.add(make_record("mixin", "size"))
    store.add(make_record("function", "size"))

    found = store.find("size", "mixin")
    assert found is not None
    assert found.context_type == "mixin"
    fallback = store.find("size", "placeholder")
    assert fallback is not None
    assert fallback.context_type == "function"
    assert store.find("missing") is None


def test_find_exact_type_never_falls_back() -> None:
    """Verify the exact_type reference mode."""
    store = RecordStore("exact_type")
    store.add(make_record("mixin", "size"))
    assert store.find("size", "function") is None
    assert store.find("size") is not None


def test_duplicate_declarations_are_kept() -> None:
    """Verify both records remain and the last one wins lookups."""
    store = RecordStore()
    first = store.add(make_record("variable", "color"))
    second = store.add(make_record("variable", "color"))
    assert len(store) == 2
    assert store.find("color", "variable") is second
    assert first.uid == 0


def test_unknown_records_are_not_indexed() -> None:
    """Verify unknown contexts never satisfy lookups."""
    store = RecordStore()
    store.add(make_record("unknown", ""))
    assert len(store) == 1
    assert store.find("") is None


def test_resolve_alias_follows_chains() -> None:
    """Verify transitive alias resolution."""
    store = RecordStore()
    a = store.add(make_record("mixin", "a", alias=["b"]))
    store.add(make_record("mixin", "b", alias=["c"]))
    c = store.add(make_record("mixin", "c"))
    assert store.resolve_alias(a) is c
    assert store.resolve_alias(c) is c


def test_resolve_alias_detects_cycles() -> None:
    """Verify alias cycles raise instead of looping."""
    store = RecordStore()
    a = store.add(make_record("mixin", "a", alias=["b"]))
    store.add(make_record("mixin", "b", alias=["a"]))
    with pytest.raises(AliasCycleError) as info:
        store.resolve_alias(a)
    assert info.value.chain == ["a", "b", "a"]
    assert info.value.cycle == {0, 1}
    assert "a -> b -> a" in str(info.value)


def test_reaches_and_used_by_tree() -> None:
    """Verify graph walks stay finite on cyclic usage."""
    store = RecordStore()
    a = store.add(make_record("mixin", "a"))
    b = store.add(make_record("mixin", "b"))
    c = store.add(make_record("function", "c"))
    a.used_by.append(b.ref())
    b.used_by.append(a.ref())
    b.used_by.append(c.ref())

    assert store.reaches(a, c)
    assert not store.reaches(c, a)
    assert store.used_by_tree(a) == [
        {
            "type": "mixin",
            "name": "b",
            "used_by": [CIRCULAR, {"type": "function", "name": "c", "used_by": []}],
        }
    ]


def test_alias_cycle_reports_only_loop_members() -> None:
    """Verify a chain leading into a loop does not count as part of it."""
    store = RecordStore()
    a = store.add(make_record("mixin", "a", alias=["b"]))
    b = store.add(make_record("mixin", "b", alias=["c"]))
    c = store.add(make_record("mixin", "c", alias=["b"]))
    with pytest.raises(AliasCycleError) as info:
        store.resolve_alias(a)
    assert info.value.cycle == {b.uid, c.uid}
    assert info.value.chain == ["a", "b", "c", "b"]
