#  repocards - Test Fixtures
#
#  Shared pytest fixtures for extractor, ranking, repetition and deck tests.
#  Uses tmp_path (pytest built-in) for anything touching disk.
#
#  Depends on: (none)
#  Used by:    all test files

import pytest

from extractors.base import ExtractedBlock
from generate import LearningCard
from store import MemoryStore


def make_test_block(name="thing", kind="function", lines=10, doc=None, file_path="src/lib.ts", code=None):
    """An ExtractedBlock with a given line count, for ranking/generation tests."""
    if code is None:
        code = "\n".join(f"line {i}" for i in range(lines))
    return ExtractedBlock(
        name=name,
        kind=kind,
        code=code,
        file_path=file_path,
        language="typescript",
        doc_text=doc,
        line_count=lines,
    )


def make_test_card(card_id, title=None):
    return LearningCard(
        id=card_id,
        kind="function",
        title=title or card_id,
        file_path="src/lib.ts",
        code="export function f() {}",
        language="typescript",
        explanation="Explains f.",
        difficulty=1,
    )


@pytest.fixture
def cards():
    """Three cards in generation order."""
    return [make_test_card("gen-0-a"), make_test_card("gen-1-b"), make_test_card("gen-2-c")]


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def ts_source():
    """A TypeScript module with one of each exported declaration kind."""
    return """\
import { thing } from "./thing";

/**
 * Adds two numbers.
 * @param a first
 */
export function add(a: number, b: number): number {
  return a + b;
}

/** Doubles a value. */
export const double = (n: number): number => n * 2;

export const greet = async (name: string) => {
  const msg = `Hello ${name}`;
  return msg;
};

export default function Button({ label }: Props) {
  return <button className="btn">{label}</button>;
}

/** A user record. */
export interface User {
  id: string;
  name: string;
}

export type Id = string | number;

export type Point = { x: number; y: number };

export class Counter {
  private count = 0;
  increment() {
    this.count++;
  }
}
"""


@pytest.fixture
def tmp_config(tmp_path):
    """A minimal valid config dict pointing the database at tmp_path."""
    return {
        "github": {"api_url": "https://api.github.com", "timeout": 5.0},
        "fetch": {"max_files": 40, "batch_size": 8, "max_file_size": 50000},
        "cards": {"max_cards": 50},
        "database": {"path": str(tmp_path / "test.db")},
        "mcp": {"server_name": "repocards-test"},
    }
