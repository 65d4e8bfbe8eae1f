"""Logic for locating documentation comments and the code they document."""

from scssdoc.comment_block import CommentBlock

LINE_MARKER = "///"
POSTER_MARKER = "////"
BLOCK_OPEN = "/**"
BLOCK_CLOSE = "*/"


def scan_blocks(text: str) -> list[CommentBlock]:
    """Split stylesheet source into documentation comment blocks.

    Supports ``///`` line runs, ``////`` poster runs and ``/** */`` blocks.
    Line numbers are 1-based.
    """
    lines = text.replace("\r\n", "\n").split("\n")
    blocks: list[CommentBlock] = []
    i = 0
    while i < len(lines):
        stripped = lines[i].lstrip()
        if stripped.startswith(POSTER_MARKER):
            poster = True
            end, body = _poster_run(lines, i)
            comment = "\n".join(body)
        elif stripped.startswith(LINE_MARKER):
            poster = False
            end = _line_run_end(lines, i)
            comment = "\n".join(_strip_line_marker(ln) for ln in lines[i:end])
        elif stripped.startswith(BLOCK_OPEN) and not stripped.startswith("/**/"):
            poster = False
            end = _block_end(lines, i)
            comment = _strip_block(lines[i:end])
        else:
            i += 1
            continue

        block = CommentBlock(comment=comment, code="", comment_start=i + 1, poster=poster)
        if not poster:
            _attach_code(block, lines, end)
        blocks.append(block)
        i = end
    return blocks


def _line_run_end(lines: list[str], start: int) -> int:
    """Return the index after the last line of a ``///`` run."""
    end = start
    while end < len(lines):
        stripped = lines[end].lstrip()
        if not stripped.startswith(LINE_MARKER) or stripped.startswith(POSTER_MARKER):
            break
        end += 1
    return end


def _poster_run(lines: list[str], start: int) -> tuple[int, list[str]]:
    """Collect a poster comment.

    Either ``////`` delimiters around ``///`` lines, or a run of ``////`` lines
    carrying text. Returns the index after the poster and its text lines.
    """
    delimited = _is_delimiter(lines[start])
    body = [] if delimited else [_strip_line_marker(lines[start], poster=True)]
    end = start + 1
    while end < len(lines):
        stripped = lines[end].lstrip()
        if not stripped.startswith(LINE_MARKER):
            break
        if _is_delimiter(lines[end]):
            end += 1 if delimited else 0
            break
        is_poster_line = stripped.startswith(POSTER_MARKER)
        if not delimited and not is_poster_line:
            break
        body.append(_strip_line_marker(lines[end], poster=is_poster_line))
        end += 1
    return end, body


def _is_delimiter(line: str) -> bool:
    return line.strip().rstrip("/") == "" and line.strip().startswith(POSTER_MARKER)


def _strip_line_marker(line: str, *, poster: bool = False) -> str:
    body = line.lstrip()[len(POSTER_MARKER if poster else LINE_MARKER) :]
    return body[1:] if body.startswith(" ") else body


def _block_end(lines: list[str], start: int) -> int:
    """Return the index after the line closing a ``/** */`` block."""
    first = lines[start].lstrip()[len(BLOCK_OPEN) :]
    if BLOCK_CLOSE in first:
        return start + 1
    end = start + 1
    while end < len(lines):
        if BLOCK_CLOSE in lines[end]:
            return end + 1
        end += 1
    return end


def _strip_block(raw: list[str]) -> str:
    """Remove ``/**``, ``*/`` and leading ``*`` gutters from a block comment."""
    out: list[str] = []
    for n, line in enumerate(raw):
        body = line.lstrip()
        if n == 0:
            body = body[len(BLOCK_OPEN) :]
        if BLOCK_CLOSE in body:
            body = body[: body.index(BLOCK_CLOSE)]
        if n > 0 and body.startswith("*"):
            body = body[1:]
        body = body[1:] if body.startswith(" ") else body
        out.append(body.rstrip())
    while out and not out[-1].strip():
        out.pop()
    return "\n".join(out)


def _attach_code(block: CommentBlock, lines: list[str], after: int) -> None:
    """Capture the construct following a comment, up to its balanced body."""
    j = after
    while j < len(lines) and not lines[j].strip():
        j += 1
    if j >= len(lines):
        return
    head = lines[j].lstrip()
    if head.startswith(("//", "/*")):
        return

    depth = 0
    seen_brace = False
    end = j
    while end < len(lines):
        line = _strip_inline_comment(lines[end])
        depth += line.count("{") - line.count("}")
        seen_brace = seen_brace or "{" in line
        if depth <= 0 and (seen_brace or ";" in line):
            break
        end += 1
    end = min(end, len(lines) - 1)

    block.code = "\n".join(lines[j : end + 1])
    block.code_start = j + 1
    block.code_end = end + 1


def _strip_inline_comment(line: str) -> str:
    idx = line.find("//")
    # keep urls such as url(http://...)
    if idx > 0 and line[idx - 1] == ":":
        return line
    return line if idx < 0 else line[:idx]
