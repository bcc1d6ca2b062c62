#  repocards - Card Generator
#
#  Turns ranked blocks into learning cards. Difficulty comes from structural
#  signals in the code; the explanation is the author's own doc text when
#  there is one, otherwise a short sentence built from the block's kind,
#  directory and name.
#
#  Depends on: extractors/base.py
#  Used by:    pipeline.py, server.py, deck.py

import re
from dataclasses import asdict, dataclass

from extractors.base import ExtractedBlock, containing_directory

MAX_CARDS = 50

ASYNC_MARKERS = ("async", "await")

EXPLANATION_TEMPLATES = {
    "function": "Exported function{where}. Read the code to understand what {name} does and when you'd use it.",
    "type": "Type definition{where}. Defines the shape of {name}; study the fields and their constraints.",
    "concept": "Class{where}. Encapsulates {name}; look at the methods and how state is managed.",
    "pattern": "Pattern{where}. A reusable approach to a recurring problem.",
    "file": "Key file{where}. Read through to understand the module's responsibilities.",
}


@dataclass(frozen=True)
class LearningCard:
    id: str
    kind: str
    title: str
    file_path: str
    code: str
    language: str
    explanation: str
    difficulty: int

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "LearningCard":
        return cls(
            id=data["id"],
            kind=data["kind"],
            title=data["title"],
            file_path=data["file_path"],
            code=data["code"],
            language=data["language"],
            explanation=data["explanation"],
            difficulty=int(data["difficulty"]),
        )


def _max_brace_depth(code: str) -> int:
    # Raw count, strings included
    depth = 0
    max_depth = 0
    for ch in code:
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
        max_depth = max(max_depth, depth)
    return max_depth


def _is_recursive(block: ExtractedBlock) -> bool:
    # The declaration itself accounts for one occurrence
    calls = re.findall(rf"\b{re.escape(block.name)}\(", block.code)
    return len(calls) > 1


def complexity_score(block: ExtractedBlock) -> int:
    """Additive complexity from size, nesting, generics, async and recursion."""
    code = block.code
    complexity = 0

    if block.line_count > 20:
        complexity += 2
    elif block.line_count > 10:
        complexity += 1

    max_depth = _max_brace_depth(code)
    if max_depth > 4:
        complexity += 2
    elif max_depth > 2:
        complexity += 1

    if "<" in code and ">" in code:
        complexity += 1

    if any(marker in code for marker in ASYNC_MARKERS):
        complexity += 1

    if block.kind == "function" and _is_recursive(block):
        complexity += 2

    return complexity


def estimate_difficulty(block: ExtractedBlock) -> int:
    """Map complexity to a 1-3 difficulty tier."""
    complexity = complexity_score(block)
    if complexity >= 4:
        return 3
    if complexity >= 2:
        return 2
    return 1


def generate_explanation(block: ExtractedBlock) -> str:
    if block.doc_text:
        return block.doc_text

    directory = containing_directory(block.file_path)
    where = f" in {directory}" if directory else ""
    return EXPLANATION_TEMPLATES[block.kind].format(where=where, name=block.name)


def generate_cards(blocks: list[ExtractedBlock], max_cards: int = MAX_CARDS) -> list[LearningCard]:
    """Convert ranked blocks into cards, keeping at most max_cards.

    Card ids are "gen-<index>-<name>": the same ranked input always yields
    the same ids, and the index keeps them unique within one call.
    """
    return [
        LearningCard(
            id=f"gen-{i}-{block.name}",
            kind=block.kind,
            title=block.name,
            file_path=block.file_path,
            code=block.code,
            language=block.language,
            explanation=generate_explanation(block),
            difficulty=estimate_difficulty(block),
        )
        for i, block in enumerate(blocks[:max_cards])
    ]
