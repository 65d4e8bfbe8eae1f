"""Tests for locating comment blocks in stylesheet source."""

from scssdoc.scan_blocks import scan_blocks

SOURCE = """\
////
/// @group helpers
////

/// Adds two numbers.
/// @param {Number} $a
@function add($a, $b: 1) {
  @if $a == 0 { @return $b; }
  @return $a + $b;
}

/**
 * Primary color.
 * @type Color
 */
$primary: #333 !default;

// plain comment, not documentation
.foo { color: red; }

/// Dangling comment at the end
"""


def test_scan_finds_every_block() -> None:
    """Verify that posters, line runs and block comments are found."""
    blocks = scan_blocks(SOURCE)
    assert [b.poster for b in blocks] == [True, False, False, False]


def test_poster_body_is_between_delimiters() -> None:
    """Verify that a delimited poster keeps only its inner lines."""
    poster = scan_blocks(SOURCE)[0]
    assert poster.comment == "@group helpers"
    assert poster.code == ""
    assert poster.comment_start == 1


def test_line_run_captures_balanced_code() -> None:
    """Verify that the documented function body is captured up to its brace."""
    block = scan_blocks(SOURCE)[1]
    assert block.comment == "Adds two numbers.\n@param {Number} $a"
    assert block.code_line == "@function add($a, $b: 1) {"
    assert block.code.endswith("@return $a + $b;\n}")
    assert (block.code_start, block.code_end) == (7, 10)


def test_block_comment_strips_gutter() -> None:
    """Verify that /** */ gutters are removed."""
    block = scan_blocks(SOURCE)[2]
    assert block.comment.strip() == "Primary color.\n@type Color"
    assert block.code == "$primary: #333 !default;"
    assert block.code_start == 16


def test_comment_without_code() -> None:
    """Verify that a trailing comment has no code attached."""
    block = scan_blocks(SOURCE)[3]
    assert block.comment == "Dangling comment at the end"
    assert block.code == ""
    assert block.code_start is None


def test_single_line_poster_run() -> None:
    """Verify the undelimited poster form."""
    blocks = scan_blocks("//// @group forms\n//// @access private\n/// Doc\n$a: 1;\n")
    assert blocks[0].poster
    assert blocks[0].comment == "@group forms\n@access private"
    assert blocks[1].comment == "Doc"
    assert blocks[1].code == "$a: 1;"


def test_comment_followed_by_comment_has_no_code() -> None:
    """Verify that code is not borrowed across another comment."""
    blocks = scan_blocks("/// First\n// something else\n$a: 1;\n")
    assert blocks[0].code == ""


def test_indented_example_lines_are_kept() -> None:
    """Verify that indentation inside a comment survives scanning."""
    source = "/// @example scss\n///   @include foo;\n@mixin foo { a: b; }\n"
    block = scan_blocks(source)[0]
    assert block.comment == "@example scss\n  @include foo;"


def test_multiline_map_variable() -> None:
    """Verify that a map variable spans until its semicolon."""
    source = "/// Map\n$map: (\n  'a': 1,\n  'b': 2\n);\n$next: 1;\n"
    block = scan_blocks(source)[0]
    assert block.code == "$map: (\n  'a': 1,\n  'b': 2\n);"
