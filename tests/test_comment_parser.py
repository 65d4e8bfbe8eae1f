"""Tests for turning comment blocks into records."""

from typing import Any

import pytest

from scssdoc.annotations.builtin import default_registry
from scssdoc.comment_block import CommentBlock
from scssdoc.comment_parser import CommentParser, split_comment
from scssdoc.errors import RegistryError
from scssdoc.event_channel import EventChannel
from scssdoc.load_config import build_config
from scssdoc.record import FileRef, Record

FILE = FileRef(path="src/_tools.scss", name="_tools.scss")


def make_parser(**overrides: Any) -> tuple[CommentParser, EventChannel]:
    """Create a parser with built-in annotations and a fresh channel."""
    config = build_config(overrides)
    channel = EventChannel()
    return CommentParser(default_registry(config), config, channel), channel


def parse_one(
    comment: str, code: str = "@mixin m($x) {\n}", **overrides: Any
) -> tuple[Record | None, EventChannel]:
    """Parse a single block documenting the given code."""
    parser, channel = make_parser(**overrides)
    block = CommentBlock(comment=comment, code=code, comment_start=10, code_start=12)
    return parser.parse(block, FILE), channel


def test_split_comment_groups_continuation_lines() -> None:
    """Verify description and annotation values are split correctly."""
    comment = (
        "Builds a button.\n"
        "Second line.\n"
        "@param {Number} $x - first\n"
        "  continued\n"
        "@example scss\n"
        "  @include m;"
    )
    description, items = split_comment(comment)
    assert description == "Builds a button.\nSecond line."
    assert items == [
        ("param", "{Number} $x - first\n  continued", 2),
        ("example", "scss\n  @include m;", 4),
    ]


def test_param_and_require_scenario() -> None:
    """Verify the parameter plus explicit require example."""
    record, channel = parse_one(
        "@param {Number} $x - the x value\n@require $y",
        code="@mixin m($x) {\n  width: $x;\n}",
    )
    assert record is not None
    assert [(p.name, p.type, p.description) for p in record.parameter] == [
        ("$x", "Number", "the x value")
    ]
    assert [(r.type, r.name, r.item) for r in record.require] == [
        ("variable", "y", None)
    ]
    assert channel.events == []


def test_defaults_are_applied() -> None:
    """Verify access and group defaults."""
    record, _ = parse_one("Just a description.")
    assert record is not None
    assert record.description == "Just a description."
    assert record.access == "public"
    assert record.group == ["undefined"]
    assert record.annotations == []


def test_malformed_value_warns_and_keeps_record() -> None:
    """Verify a syntax problem skips only the bad value."""
    record, channel = parse_one("@param {Number}\n@param $x - fine")
    assert record is not None
    assert [p.name for p in record.parameter] == ["$x"]
    assert [(e.kind, e.line) for e in channel.warnings] == [("syntax", 10)]


def test_single_valued_annotation_used_twice() -> None:
    """Verify the second value of a single-valued annotation is ignored."""
    record, channel = parse_one(
        "@return {Number} first\n@return {String} second",
        code="@function f() {\n}",
    )
    assert record is not None
    assert record.return_ is not None
    assert record.return_.type == "Number"
    assert "only allowed once" in channel.warnings[0].message
    assert channel.warnings[0].line == 11


def test_annotation_not_allowed_on_context() -> None:
    """Verify context restrictions produce a warning."""
    record, channel = parse_one("@return {Number} nope")
    assert record is not None
    assert record.return_ is None
    assert "not allowed on comment from type `mixin`" in channel.warnings[0].message


def test_unknown_annotation_dropped_silently() -> None:
    """Verify unknown tags vanish without events when pass-through is off."""
    record, channel = parse_one("@custom something")
    assert record is not None
    assert record.unknown == {}
    assert channel.events == []


def test_unknown_annotation_preserved() -> None:
    """Verify unknown tags are kept opaque when pass-through is on."""
    record, _ = parse_one(
        "@custom one\n@custom two", include_unknown_contexts=True
    )
    assert record is not None
    assert record.unknown == {"custom": ["one", "two"]}


def test_unknown_context_needs_pass_through() -> None:
    """Verify comments without a recognizable construct."""
    record, _ = parse_one("Loose note", code="")
    assert record is None

    record, _ = parse_one("Loose note", code="", include_unknown_contexts=True)
    assert record is not None
    assert record.context_type == "unknown"
    assert record.line == 12


def test_signature_defaults_fill_parameters() -> None:
    """Verify defaults come from the code when the comment omits them."""
    record, _ = parse_one(
        "@param $a\n@param $b\n@param $c [3px]",
        code="@mixin m($a, $b: 2px, $c: 1px) {\n}",
    )
    assert record is not None
    assert [p.default for p in record.parameter] == [None, "2px", "3px"]


def test_autofill_merges_with_explicit_values() -> None:
    """Verify synthesized requires do not duplicate declared ones."""
    record, _ = parse_one(
        "@require {mixin} shadow - declared",
        code="@mixin m {\n  @include shadow;\n  @include glow;\n  @content;\n}",
    )
    assert record is not None
    assert [(r.name, r.autofill) for r in record.require] == [
        ("shadow", False),
        ("glow", True),
    ]
    assert record.content == ""


def test_autofill_can_be_disabled() -> None:
    """Verify an empty autofill list synthesizes nothing."""
    record, _ = parse_one(
        "Doc", code="@mixin m {\n  @include glow;\n  @content;\n}", autofill=[]
    )
    assert record is not None
    assert record.require == []
    assert record.content is None


def test_unknown_autofill_name_is_a_registry_error() -> None:
    """Verify misconfigured autofill lists fail fast."""
    with pytest.raises(RegistryError):
        make_parser(autofill=["nothing"])
    with pytest.raises(RegistryError):
        make_parser(autofill=["group"])


def test_poster_values_apply_to_the_whole_file() -> None:
    """Verify poster defaults and group descriptions."""
    source = (
        "/// Before the poster\n"
        "@mixin early {\n}\n"
        "////\n"
        "/// @group forms\n"
        "/// @groupDescription Form helpers.\n"
        "/// @access private\n"
        "////\n"
        "\n"
        "/// @access public\n"
        "@mixin field {\n}\n"
    )
    parser, _ = make_parser()
    records, descriptions = parser.parse_source(source, FILE)

    assert [r.name for r in records] == ["early", "field"]
    assert [r.group for r in records] == [["forms"], ["forms"]]
    assert [r.access for r in records] == ["private", "public"]
    assert descriptions == {"forms": "Form helpers."}
    assert records[0].group_description is None


def test_poster_lists_merge_with_autofilled_entries() -> None:
    """Verify poster requires are added to, not replacing, synthesized ones."""
    source = (
        "////\n"
        "/// @require $base\n"
        "////\n"
        "\n"
        "/// Card.\n"
        "@mixin card {\n"
        "  @include other;\n"
        "}\n"
    )
    parser, _ = make_parser()
    records, _ = parser.parse_source(source, FILE)

    assert [(r.type, r.name, r.autofill) for r in records[0].require] == [
        ("mixin", "other", True),
        ("variable", "base", False),
    ]
    assert records[0].group == ["undefined"]


def test_tags_after_extra_marker_spacing() -> None:
    """Verify annotations indented by the whole block are still recognized."""
    parser, _ = make_parser()
    records, _ = parser.parse_source(
        "///  @param {Number} $x - x\n@mixin m($x) {\n}\n", FILE
    )
    assert [(p.name, p.type) for p in records[0].parameter] == [("$x", "Number")]
    assert records[0].description == ""


def test_column_zero_code_stays_in_example() -> None:
    """Verify unregistered @ lines after @example are kept as its code."""
    record, channel = parse_one(
        "@example scss\n@include m(1px);\n@content-like stuff\n@since 1.0"
    )
    assert record is not None
    assert record.example[0].code == "@include m(1px);\n@content-like stuff"
    assert [s.version for s in record.since] == ["1.0"]
    assert record.unknown == {}
    assert channel.events == []
