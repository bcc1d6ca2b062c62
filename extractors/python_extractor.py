#  repocards - Python Extractor
#
#  Extracts top-level functions and classes from Python sources by
#  indentation. Decorators directly above a definition are kept with it;
#  doc text is the docstring that opens the body.
#
#  Depends on: extractors/base.py
#  Used by:    extractors/__init__.py (via extractor registry)

import re

from extractors import register_extractor
from extractors.base import (
    ExtractedBlock,
    find_docstring,
    find_header_end,
    line_index_at,
    make_block,
    match_indent_block,
)

# Top-level only: no leading indentation. Lexical, so a `def` at column 0
# inside a triple-quoted string also matches.
DEF_RE = re.compile(r"^(async\s+def|def|class)\s+(\w+)", re.MULTILINE)

# Private by convention, except the constructor
PRIVATE_PREFIX = "_"
CONSTRUCTOR_NAME = "__init__"


def _is_private(name: str) -> bool:
    return name.startswith(PRIVATE_PREFIX) and name != CONSTRUCTOR_NAME


def _decorator_start(lines: list[str], def_line: int) -> int:
    start = def_line
    while start > 0 and lines[start - 1].startswith("@"):
        start -= 1
    return start


def extract_python(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    """Extract top-level def/class blocks from a Python source file."""
    lines = src.split("\n")
    blocks = []

    for m in DEF_RE.finditer(src):
        keyword, name = m.group(1), m.group(2)
        is_class = keyword == "class"
        if not is_class and _is_private(name):
            continue

        def_line = line_index_at(src, m.start())
        code = match_indent_block(lines, def_line)
        if code is None:
            continue

        start = _decorator_start(lines, def_line)
        if start < def_line:
            code = "\n".join(lines[start:def_line]) + "\n" + code

        # Docstring must be the first statement after the (possibly multi-line)
        # header; comment lines in between are not statements
        doc_line = find_header_end(lines, def_line)
        while doc_line + 1 < len(lines) and lines[doc_line + 1].lstrip().startswith("#"):
            doc_line += 1
        body_pos = sum(len(line) + 1 for line in lines[: doc_line + 1]) - 1
        doc = find_docstring(src, body_pos)

        block = make_block(name, "concept" if is_class else "function", code, path, lang, doc)
        if block:
            blocks.append(block)

    return blocks


register_extractor("python", extract_python)
