#  repocards - Rust Extractor
#
#  Extracts pub functions, pub structs/enums/traits/type aliases and impl
#  blocks. Attribute lines (#[derive(...)] etc.) directly above a declaration
#  are kept with it; doc text is the run of /// lines above those.
#
#  Single quotes are not treated as string delimiters here: lifetimes ('a)
#  are far more common than brace char literals.
#
#  Depends on: extractors/base.py
#  Used by:    extractors/__init__.py (via extractor registry)

import re

from extractors import register_extractor
from extractors.base import (
    DOC_WINDOW,
    ExtractedBlock,
    find_body_brace,
    find_closing_paren,
    find_line_doc,
    make_block,
    match_brace_block,
)

DOC_MARKER = "///"
QUOTES = '"'

# Zero or more attribute lines, captured so the block starts at them
_ATTRS = r"^[ \t]*(?:#\[[^\n]*\][ \t]*\n[ \t]*)*"
_PUB = r"pub(?:\([\w:\s]+\))?\s+"

FN_RE = re.compile(
    _ATTRS + _PUB + r"(?:(?:async|const|unsafe|extern\s+\"\w+\")\s+)*fn\s+(\w+)",
    re.MULTILINE,
)

TYPE_RE = re.compile(_ATTRS + _PUB + r"(struct|enum|trait|union|type)\s+(\w+)", re.MULTILINE)

IMPL_RE = re.compile(
    _ATTRS + r"(?:unsafe\s+)?impl(?:<[^{\n]*?>)?\s+"
    r"(?:([\w:]+)(?:<[^{\n]*?>)?\s+for\s+)?"  # optional trait
    r"([\w:]+)",  # implementing type
    re.MULTILINE,
)


def _fn_blocks(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    blocks = []
    for m in FN_RE.finditer(src):
        name = m.group(1)
        params_end = find_closing_paren(src, src.find("(", m.end()), quotes=QUOTES)
        if params_end is None:
            continue
        body = find_body_brace(src, params_end)
        if body is None:
            continue  # trait method signature
        code = match_brace_block(src, m.start(), scan_from=body, quotes=QUOTES)
        if code is None:
            continue
        block = make_block(name, "function", code, path, lang, find_line_doc(src, m.start(), DOC_MARKER))
        if block:
            blocks.append(block)
    return blocks


def _type_blocks(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    blocks = []
    for m in TYPE_RE.finditer(src):
        keyword, name = m.group(1), m.group(2)
        body = None if keyword == "type" else find_body_brace(src, m.end())
        if body is not None:
            code = match_brace_block(src, m.start(), scan_from=body, quotes=QUOTES)
        else:
            # Type alias, unit struct or tuple struct: runs to the semicolon
            semi = src.find(";", m.end(), m.end() + DOC_WINDOW)
            code = src[m.start() : semi + 1] if semi >= 0 else None
        if code is None:
            continue
        block = make_block(name, "type", code, path, lang, find_line_doc(src, m.start(), DOC_MARKER))
        if block:
            blocks.append(block)
    return blocks


def _impl_blocks(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    blocks = []
    for m in IMPL_RE.finditer(src):
        trait, target = m.group(1), m.group(2)
        name = f"{trait} for {target}" if trait else target
        body = find_body_brace(src, m.end())
        if body is None:
            continue
        code = match_brace_block(src, m.start(), scan_from=body, quotes=QUOTES)
        if code is None:
            continue
        block = make_block(name, "concept", code, path, lang, find_line_doc(src, m.start(), DOC_MARKER))
        if block:
            blocks.append(block)
    return blocks


def extract_rust(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    """Extract pub items and impl blocks from a Rust source file."""
    return _fn_blocks(path, src, lang) + _type_blocks(path, src, lang) + _impl_blocks(path, src, lang)


register_extractor("rust", extract_rust)
