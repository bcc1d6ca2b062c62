#  repocards - Extractor Base
#
#  Shared data types and lexical helpers for all language extractors:
#  the brace/indent block matchers and the three doc-comment locators.
#  Nothing here builds a syntax tree; every helper is a bounded scan that
#  returns None instead of raising when the text does not cooperate.
#
#  Depends on: (none)
#  Used by:    extractors/__init__.py, extractors/*.py, ranker.py, generate.py

import re
from dataclasses import dataclass

BLOCK_KINDS = ("function", "type", "concept", "pattern", "file")

# Candidates longer than this are dropped, never truncated
MAX_LINES = {
    "function": 40,
    "type": 30,
    "concept": 50,
    "pattern": 50,
    "file": 40,
}

# Max characters any doc locator will look at around a declaration
DOC_WINDOW = 500

DEFAULT_QUOTES = "\"'`"


@dataclass(frozen=True)
class SourceFile:
    """One fetched file: repo-relative '/'-separated path and decoded text."""

    path: str
    content: str


@dataclass(frozen=True)
class ExtractedBlock:
    """A candidate learning fragment produced by a language extractor."""

    name: str
    kind: str
    code: str
    file_path: str
    language: str
    doc_text: str | None
    line_count: int


def count_lines(text: str) -> int:
    return len(text.split("\n"))


def make_block(
    name: str,
    kind: str,
    code: str,
    file_path: str,
    language: str,
    doc_text: str | None = None,
) -> ExtractedBlock | None:
    """Build a block, or return None when it is empty or over its kind's line ceiling."""
    code = code.strip()
    if not code:
        return None
    line_count = count_lines(code)
    if line_count > MAX_LINES[kind]:
        return None
    return ExtractedBlock(
        name=name,
        kind=kind,
        code=code,
        file_path=file_path,
        language=language,
        doc_text=doc_text,
        line_count=line_count,
    )


def whole_file_block(file_path: str, content: str, language: str) -> ExtractedBlock | None:
    """Fallback for files with no declarations: the whole file as one 'file' block."""
    if not content.strip():
        return None
    if count_lines(content) > MAX_LINES["file"]:
        return None
    file_name = file_path.split("/")[-1] or file_path
    return make_block(file_name, "file", content, file_path, language)


def containing_directory(file_path: str) -> str:
    """Directory part of a '/'-separated path, or '' for top-level files.

    e.g. "src/utils/helpers.ts" → "src/utils", "helpers.ts" → ""
    """
    parts = file_path.split("/")
    return "/".join(parts[:-1])


def line_index_at(source: str, pos: int) -> int:
    """0-based line number of a character offset."""
    return source.count("\n", 0, pos)


# ---------------------------------------------------------------------------
# Block matchers
# ---------------------------------------------------------------------------


def _skip_quoted(source: str, i: int) -> int:
    """Given source[i] is a quote, return the index of its unescaped closer (or len)."""
    quote = source[i]
    n = len(source)
    i += 1
    while i < n and source[i] != quote:
        if source[i] == "\\":
            i += 1  # escape consumes the next char unconditionally
        i += 1
    return i


def _skip_comment(source: str, i: int) -> int:
    """Given a comment opener at source[i], return the index of its last char."""
    if source[i + 1] == "/":
        end = source.find("\n", i)
        return len(source) if end < 0 else end
    end = source.find("*/", i + 2)
    return len(source) if end < 0 else end + 1


def match_brace_block(
    source: str,
    start: int,
    scan_from: int | None = None,
    quotes: str = DEFAULT_QUOTES,
) -> str | None:
    """Return source[start:end] where end closes the first balanced {...} unit.

    Scanning begins at scan_from (default: start) so callers can step over a
    parameter list before looking for the body. Delimiters inside quoted
    literals and C-style comments are ignored.

    Returns None if the input ends before the braces balance.
    """
    depth = 0
    opened = False
    i = start if scan_from is None else scan_from
    n = len(source)

    while i < n:
        ch = source[i]
        if ch == "{":
            depth += 1
            opened = True
        elif ch == "}":
            if opened:
                depth -= 1
                if depth == 0:
                    return source[start : i + 1]
        elif ch in quotes:
            i = _skip_quoted(source, i)
        elif ch == "/" and i + 1 < n and source[i + 1] in "/*":
            i = _skip_comment(source, i)
        i += 1

    return None


def find_closing_paren(source: str, open_idx: int, quotes: str = DEFAULT_QUOTES) -> int | None:
    """Index just past the ')' balancing the '(' at open_idx, or None."""
    if open_idx < 0 or open_idx >= len(source) or source[open_idx] != "(":
        return None
    depth = 0
    i = open_idx
    n = len(source)
    while i < n:
        ch = source[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i + 1
        elif ch in quotes:
            i = _skip_quoted(source, i)
        i += 1
    return None


def find_body_brace(source: str, pos: int, terminators: tuple[str, ...] = (";",)) -> int | None:
    """Index of the first '{' after pos, unless a terminator comes first.

    Used to tell a declaration with a body from a bodiless signature
    (overloads, trait/protocol requirements, expression-bodied functions).
    """
    brace = source.find("{", pos)
    if brace < 0:
        return None
    for term in terminators:
        t = source.find(term, pos, brace)
        if t >= 0:
            return None
    return brace


# A '{' right after one of these opens an object type, not the body
TYPE_LITERAL_LEADERS = (":", "|", "&", ",", "(", "[", "<", "=>", "?")


def find_annotated_body_brace(source: str, pos: int, prev: str = ")", quotes: str = DEFAULT_QUOTES) -> int | None:
    """Like find_body_brace, but steps over braces inside type annotations.

    Handles `): { ok: boolean } {` and `class Store<T extends { id: string }> {`,
    where the first '{' belongs to a type. Returns None if a ';' at the top
    level comes before the body.
    """
    depth = 0
    i = pos
    n = len(source)
    while i < n:
        ch = source[i]
        if ch in quotes:
            i = _skip_quoted(source, i)
            prev = ch
        elif ch == "{":
            if depth == 0 and prev not in TYPE_LITERAL_LEADERS:
                return i
            depth += 1
            prev = ch
        elif ch == ">" and prev == "=":
            prev = "=>"
        elif ch in "(<[":
            depth += 1
            prev = ch
        elif ch in ")>]}":
            depth -= 1
            prev = ch
        elif ch == ";" and depth <= 0:
            return None
        elif not ch.isspace():
            prev = ch
        i += 1
    return None


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def find_header_end(lines: list[str], start_line: int) -> int:
    """Last line of a declaration header whose brackets may span several lines."""
    depth = 0
    i = start_line
    while i < len(lines):
        code = lines[i].split("#", 1)[0]
        depth += code.count("(") + code.count("[") - code.count(")") - code.count("]")
        if depth <= 0:
            return i
        i += 1
    return start_line


def match_indent_block(lines: list[str], start_line: int) -> str | None:
    """Return the indentation-delimited block whose header is lines[start_line].

    The body indent is the width of the first non-blank line after the
    header; the block runs until a non-blank line shallower than that.
    A body no deeper than the header means a one-line definition.

    Returns None for a degenerate line list (fewer than 2 lines) or an
    out-of-range start.
    """
    if len(lines) < 2 or not 0 <= start_line < len(lines):
        return None

    header_indent = _indent_width(lines[start_line])
    header_end = find_header_end(lines, start_line)

    body_indent = 0
    for line in lines[header_end + 1 :]:
        if line.strip():
            body_indent = _indent_width(line)
            break

    if body_indent <= header_indent:
        return "\n".join(lines[start_line : header_end + 1])

    end = header_end + 1
    while end < len(lines):
        line = lines[end]
        if line.strip() and _indent_width(line) < body_indent:
            break
        end += 1

    # Trailing blank lines belong to whatever follows
    while end > header_end + 1 and not lines[end - 1].strip():
        end -= 1

    return "\n".join(lines[start_line:end])


# ---------------------------------------------------------------------------
# Doc-comment locators
# ---------------------------------------------------------------------------

# /** ... */ at the very end of the window; interior may not contain "*/"
BLOCK_DOC_RE = re.compile(r"/\*\*((?:(?!\*/).)*)\*/\s*$", re.DOTALL)
BLOCK_DOC_MARKER_RE = re.compile(r"^\s*\*\s?")

DOCSTRING_RE = re.compile(r"\s*[rRuU]?(\"\"\"|''')(.*?)\1", re.DOTALL)


def _join_prose(lines: list[str]) -> str | None:
    text = " ".join(line.strip() for line in lines if line.strip())
    return text or None


def find_block_doc(source: str, pos: int) -> str | None:
    """Find a /** ... */ comment immediately before pos."""
    before = source[max(0, pos - DOC_WINDOW) : pos].rstrip()
    m = BLOCK_DOC_RE.search(before)
    if not m:
        return None
    return _join_prose([BLOCK_DOC_MARKER_RE.sub("", line) for line in m.group(1).split("\n")])


def find_line_doc(source: str, pos: int, marker: str) -> str | None:
    """Find an unbroken run of `marker` comment lines directly above pos's line."""
    line_start = source.rfind("\n", 0, pos) + 1
    window_start = max(0, line_start - DOC_WINDOW)
    lines = source[window_start:line_start].split("\n")
    lines.pop()  # empty tail after the final newline
    if window_start > 0 and lines:
        lines.pop(0)  # partial line cut by the window

    collected = []
    for line in reversed(lines):
        stripped = line.strip()
        if not stripped.startswith(marker):
            break
        collected.append(stripped[len(marker) :])

    collected.reverse()
    return _join_prose(collected)


def find_docstring(source: str, pos: int) -> str | None:
    """Find a triple-quoted string that is the next token after pos."""
    m = DOCSTRING_RE.match(source[pos : pos + DOC_WINDOW])
    if not m:
        return None
    return _join_prose(m.group(2).split("\n"))
