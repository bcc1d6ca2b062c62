#  repocards - Block Ranker
#
#  Deduplicates extracted blocks and orders them by a fixed "learnability"
#  heuristic: mid-length, documented functions and types first.
#
#  Dedup key is (name, kind), so same-named declarations of the same kind in
#  different files collide and only the first survives.
#
#  Depends on: extractors/
#  Used by:    pipeline.py

import logging

from extractors import extract_blocks
from extractors.base import ExtractedBlock, SourceFile

log = logging.getLogger("pipeline")

# Sweet spot for a card, then a wider acceptable band
IDEAL_LINES = (8, 25)
OK_LINES = (4, 35)


def score_block(block: ExtractedBlock) -> int:
    """Integer learnability score for one block. Higher is better."""
    score = 0
    if IDEAL_LINES[0] <= block.line_count <= IDEAL_LINES[1]:
        score += 10
    elif OK_LINES[0] <= block.line_count <= OK_LINES[1]:
        score += 5
    if block.doc_text:
        score += 5
    if block.kind == "function":
        score += 3
    elif block.kind == "type":
        score += 2
    return score


def rank_blocks(blocks: list[ExtractedBlock]) -> list[ExtractedBlock]:
    """Drop duplicate (name, kind) pairs, then sort by score, best first.

    The sort is stable, so equal scores keep their extraction order.
    """
    seen: set[tuple[str, str]] = set()
    unique = []
    for block in blocks:
        key = (block.name, block.kind)
        if key in seen:
            continue
        seen.add(key)
        unique.append(block)

    return sorted(unique, key=score_block, reverse=True)


def extract_and_rank(files: list[SourceFile]) -> list[ExtractedBlock]:
    """Extract blocks from every file and return them deduplicated and ranked."""
    all_blocks = []
    for source_file in files:
        all_blocks.extend(extract_blocks(source_file))

    ranked = rank_blocks(all_blocks)
    log.info(f"[extract] {len(all_blocks)} candidate blocks, {len(ranked)} after dedup")
    return ranked
