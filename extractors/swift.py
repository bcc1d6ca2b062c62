#  repocards - Swift / Kotlin Extractor
#
#  Both languages mark exported API with a visibility keyword (public / open).
#  Extracts such functions and aggregate types; protocols and interfaces are
#  tagged "type", everything else (struct, class, enum, object, actor) "concept".
#  No doc extraction.
#
#  Both put the opening brace on the signature line, so a newline before any
#  '{' means a bodiless requirement or an expression body.
#
#  Depends on: extractors/base.py
#  Used by:    extractors/__init__.py (via extractor registry)

import re

from extractors import register_extractor
from extractors.base import (
    ExtractedBlock,
    find_body_brace,
    find_closing_paren,
    make_block,
    match_brace_block,
)

_ANNOTATIONS = r"^[ \t]*(?:@\w+(?:\([^)\n]*\))?\s+)*"
_VISIBILITY = r"(?:public|open)\s+"

FUNC_RE = re.compile(
    _ANNOTATIONS + _VISIBILITY
    + r"(?:(?:static|class|final|override|mutating|nonmutating|async|suspend|inline|operator|infix|tailrec)\s+)*"
    r"(?:func|fun)\s+"
    r"(?:<[^>\n]*>\s*)?"  # Kotlin type parameters come before the name
    r"(?:[\w.<>]+\.)?"  # Kotlin extension receiver
    r"(\w+)",
    re.MULTILINE,
)

TYPE_RE = re.compile(
    _ANNOTATIONS + _VISIBILITY
    + r"(?:(?:final|abstract|sealed|data|enum|indirect|inner|value|annotation|fun)\s+)*"
    r"(struct|class|enum|protocol|interface|object|actor)\s+(\w+)",
    re.MULTILINE,
)

PROTOCOL_KEYWORDS = {"protocol", "interface"}

BODY_TERMINATORS = ("\n", ";", "=")


def _func_blocks(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    blocks = []
    for m in FUNC_RE.finditer(src):
        name = m.group(1)
        params_end = find_closing_paren(src, src.find("(", m.end()))
        if params_end is None:
            continue
        body = find_body_brace(src, params_end, terminators=BODY_TERMINATORS)
        if body is None:
            continue
        code = match_brace_block(src, m.start(), scan_from=body)
        if code is None:
            continue
        block = make_block(name, "function", code, path, lang)
        if block:
            blocks.append(block)
    return blocks


def _type_blocks(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    blocks = []
    for m in TYPE_RE.finditer(src):
        keyword, name = m.group(1), m.group(2)
        pos = m.end()
        # Kotlin primary constructor may span lines
        paren = re.match(r"\s*(?:<[^>\n]*>)?\s*\(", src[pos:])
        if paren:
            pos = find_closing_paren(src, pos + paren.end() - 1)
            if pos is None:
                continue
        body = find_body_brace(src, pos, terminators=("\n", ";"))
        if body is None:
            continue
        code = match_brace_block(src, m.start(), scan_from=body)
        if code is None:
            continue
        kind = "type" if keyword in PROTOCOL_KEYWORDS else "concept"
        block = make_block(name, kind, code, path, lang)
        if block:
            blocks.append(block)
    return blocks


def extract_visibility(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    """Extract public/open functions and types from a Swift or Kotlin file."""
    return _func_blocks(path, src, lang) + _type_blocks(path, src, lang)


register_extractor("swift", extract_visibility)
register_extractor("kotlin", extract_visibility)
