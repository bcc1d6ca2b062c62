#  repocards - Go Extractor
#
#  Extracts exported (capitalized) functions and methods, and exported
#  struct / interface type declarations. Doc text is the run of // lines
#  directly above the declaration.
#
#  Depends on: extractors/base.py
#  Used by:    extractors/__init__.py (via extractor registry)

import re

from extractors import register_extractor
from extractors.base import (
    ExtractedBlock,
    find_body_brace,
    find_closing_paren,
    find_line_doc,
    make_block,
    match_brace_block,
)

DOC_MARKER = "//"

FUNC_RE = re.compile(
    r"^func\s+(?:\([^)]*\)\s*)?"  # optional method receiver
    r"([A-Z]\w*)"  # exported name
    r"\s*(?:\[[^\]]*\])?\s*"  # optional type parameters
    r"\(",
    re.MULTILINE,
)

TYPE_RE = re.compile(r"^type\s+([A-Z]\w*)(?:\[[^\]]*\])?\s+(?:struct|interface)\s*\{", re.MULTILINE)


def _func_blocks(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    blocks = []
    for m in FUNC_RE.finditer(src):
        name = m.group(1)
        params_end = find_closing_paren(src, m.end() - 1)
        if params_end is None:
            continue
        # Go keeps the opening brace on the signature's last line
        body = find_body_brace(src, params_end, terminators=("\n",))
        if body is None:
            continue
        code = match_brace_block(src, m.start(), scan_from=body)
        if code is None:
            continue
        block = make_block(name, "function", code, path, lang, find_line_doc(src, m.start(), DOC_MARKER))
        if block:
            blocks.append(block)
    return blocks


def _type_blocks(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    blocks = []
    for m in TYPE_RE.finditer(src):
        name = m.group(1)
        code = match_brace_block(src, m.start(), scan_from=m.end() - 1)
        if code is None:
            continue
        block = make_block(name, "type", code, path, lang, find_line_doc(src, m.start(), DOC_MARKER))
        if block:
            blocks.append(block)
    return blocks


def extract_go(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    """Extract exported funcs and types from a Go source file."""
    return _func_blocks(path, src, lang) + _type_blocks(path, src, lang)


register_extractor("go", extract_go)
