#  repocards - Curly-Brace Extractor
#
#  Extracts exported declarations from TypeScript / JavaScript style sources:
#  functions, arrow-function bindings, UI components (capitalized functions
#  that return markup), interfaces, type aliases and classes.
#  Doc text comes from a /** ... */ comment directly above the declaration.
#
#  Also the default route for unrecognized extensions ("text").
#
#  Depends on: extractors/base.py
#  Used by:    extractors/__init__.py (via extractor registry)

import re

from extractors import register_extractor
from extractors.base import (
    ExtractedBlock,
    find_annotated_body_brace,
    find_block_doc,
    find_closing_paren,
    make_block,
    match_brace_block,
)

FUNCTION_RE = re.compile(
    r"export\s+(?:default\s+)?(?:async\s+)?function\s*\*?\s*"
    r"(\w+)"  # function name
    r"\s*(?:<[^>]*>)?\s*"  # optional generics
    r"\("
)

ARROW_RE = re.compile(
    r"export\s+const\s+(\w+)"  # binding name
    r"\s*(?::[^=\n]+)?\s*=\s*"  # optional type annotation
    r"(?:async\s*)?(?:<[^>]*>\s*)?"
    r"(?:\([^)]*\)|\w+)"  # parameter list or single bare parameter
    r"\s*(?::[^=\n]+)?\s*=>"  # optional return type, then the arrow
)

# Where an expression-bodied arrow binding stops
ARROW_END_RE = re.compile(r"\n\nexport\s|;\n\n|\nconst\s|\nfunction\s|\nclass\s")
ARROW_CAP = 1000

TYPE_RE = re.compile(r"export\s+(?:declare\s+)?(type|interface)\s+(\w+)")
TYPE_CAP = 200

CLASS_RE = re.compile(r"export\s+(?:default\s+)?(?:abstract\s+)?class\s+(\w+)")

# Markup inside a body: a closing tag, a fragment close, or a self-closing tag
MARKUP_RE = re.compile(r"</[A-Za-z]|</>|/>")


def _function_kind(name: str, code: str) -> str:
    """Capitalized functions that render markup are UI components."""
    if name[:1].isupper() and MARKUP_RE.search(code):
        return "pattern"
    return "function"


def _function_blocks(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    blocks = []
    for m in FUNCTION_RE.finditer(src):
        name = m.group(1)
        params_end = find_closing_paren(src, m.end() - 1)
        if params_end is None:
            continue
        body = find_annotated_body_brace(src, params_end)
        if body is None:
            continue  # overload signature
        code = match_brace_block(src, m.start(), scan_from=body)
        if code is None:
            continue
        block = make_block(name, _function_kind(name, code), code, path, lang, find_block_doc(src, m.start()))
        if block:
            blocks.append(block)
    return blocks


def _arrow_end(src: str, start: int, arrow_end: int) -> int:
    """Offset where an arrow-function binding's text ends."""
    rest = src[arrow_end:].lstrip()
    if rest.startswith("{"):
        body = arrow_end + (len(src) - arrow_end - len(rest))
        code = match_brace_block(src, start, scan_from=body)
        if code is not None:
            end = start + len(code)
            if src[end : end + 1] == ";":
                end += 1
            return end

    m = ARROW_END_RE.search(src, start)
    if m:
        return m.start() + 1 if m.group().startswith(";") else m.start()
    return min(len(src), start + ARROW_CAP)


def _arrow_blocks(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    blocks = []
    for m in ARROW_RE.finditer(src):
        name = m.group(1)
        code = src[m.start() : _arrow_end(src, m.start(), m.end())]
        block = make_block(name, _function_kind(name, code), code, path, lang, find_block_doc(src, m.start()))
        if block:
            blocks.append(block)
    return blocks


def _type_alias_code(src: str, start: int) -> str:
    """Braced aliases are brace-matched; everything else runs to the first ';'."""
    rest = src[start:]
    semi = rest.find(";")
    eq = rest.find("=")
    brace = rest.find("{", eq) if eq >= 0 else -1

    if brace >= 0 and (semi < 0 or brace < semi):
        code = match_brace_block(src, start, scan_from=start + brace)
        return code if code is not None else rest[:TYPE_CAP]
    if semi > 0:
        return rest[: semi + 1]
    blank = rest.find("\n\n")
    return rest[:blank] if blank > 0 else rest[:TYPE_CAP]


def _type_blocks(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    blocks = []
    for m in TYPE_RE.finditer(src):
        keyword, name = m.group(1), m.group(2)
        if keyword == "interface":
            code = match_brace_block(src, m.start())
            if code is None:
                code = src[m.start() : m.start() + TYPE_CAP]
        else:
            code = _type_alias_code(src, m.start())
        block = make_block(name, "type", code, path, lang, find_block_doc(src, m.start()))
        if block:
            blocks.append(block)
    return blocks


def _class_blocks(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    blocks = []
    for m in CLASS_RE.finditer(src):
        name = m.group(1)
        body = find_annotated_body_brace(src, m.end(), prev=name[-1])
        if body is None:
            continue
        code = match_brace_block(src, m.start(), scan_from=body)
        if code is None:
            continue
        block = make_block(name, "concept", code, path, lang, find_block_doc(src, m.start()))
        if block:
            blocks.append(block)
    return blocks


def extract_curly(path: str, src: str, lang: str) -> list[ExtractedBlock]:
    """Extract exported declarations from a curly-brace source file."""
    return (
        _function_blocks(path, src, lang)
        + _arrow_blocks(path, src, lang)
        + _type_blocks(path, src, lang)
        + _class_blocks(path, src, lang)
    )


register_extractor("typescript", extract_curly)
register_extractor("javascript", extract_curly)
register_extractor("text", extract_curly)
