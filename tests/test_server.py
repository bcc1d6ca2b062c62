#  repocards - Server Tests
#
#  Tests for card and progress formatting, and server construction.

import asyncio
import json

from conftest import make_test_card
from mcp.server.fastmcp import FastMCP

from deck import Deck
from repetition import CardReviewState
from server import create_server, format_card, format_progress, review_current
from streak import get_streak

# ---------------------------------------------------------------------------
# format_card tests
# ---------------------------------------------------------------------------


def test_format_card_none():
    """An empty queue renders a fixed message."""
    assert format_card(None) == "No cards in the queue."


def test_format_card_unseen():
    """Header carries title, kind, file and difficulty; body has explanation and code."""
    result = format_card(make_test_card("gen-0-f", title="f"))
    assert "f [function]" in result
    assert "File: src/lib.ts" in result
    assert "Difficulty: easy" in result
    assert "Progress: ○○○" in result
    assert "Explains f." in result
    assert "```typescript\nexport function f() {}\n```" in result


def test_format_card_progress_dots():
    """Consecutive confirms fill the dots."""
    state = CardReviewState("gen-0-f", times_confirmed=2, mastered=False, last_reviewed_at=1)
    assert "Progress: ●●○" in format_card(make_test_card("gen-0-f"), state)


# ---------------------------------------------------------------------------
# format_progress tests
# ---------------------------------------------------------------------------


def test_format_progress(cards, memory_store):
    deck = Deck(cards, memory_store, "progress:o/r")
    assert format_progress(deck) == "0/3 cards mastered."


def test_format_progress_all_mastered(memory_store):
    deck = Deck([make_test_card("gen-0-a")], memory_store, "progress:o/r")
    for _ in range(3):
        deck.confirm()
    assert format_progress(deck) == "All 1 cards mastered."


# ---------------------------------------------------------------------------
# review_current tests
# ---------------------------------------------------------------------------


def test_review_announces_mastery_once(memory_store):
    """The third confirm reports mastery; the fourth does not."""
    deck = Deck([make_test_card("gen-0-a", title="a")], memory_store, "progress:o/r")
    replies = [review_current(deck, memory_store, "confirm") for _ in range(4)]
    assert ["Mastered a!" in r for r in replies] == [False, False, True, False]
    assert replies[2].startswith("confirm: a")
    assert "All 1 cards mastered." in replies[2]
    assert deck.just_mastered is None
    assert get_streak(memory_store).total_mastered == 1


def test_review_skip_not_counted(cards, memory_store):
    """Confirms and rejects count toward the streak, skips don't."""
    deck = Deck(cards, memory_store, "progress:o/r")
    review_current(deck, memory_store, "confirm")
    review_current(deck, memory_store, " Reject ")
    assert get_streak(memory_store).total_swipes == 2

    reply = review_current(deck, memory_store, "skip")
    assert reply.startswith("skip: ")
    assert get_streak(memory_store).total_swipes == 2


def test_review_invalid_action(cards, memory_store):
    """An unknown action is reported and changes nothing."""
    deck = Deck(cards, memory_store, "progress:o/r")
    reply = review_current(deck, memory_store, "swipe-down")
    assert reply.startswith("Error: ")
    assert deck.progress == {}
    assert deck.last_acted_id is None
    assert get_streak(memory_store).total_swipes == 0


def test_review_empty_deck(memory_store):
    deck = Deck([], memory_store, "progress:o/r")
    assert review_current(deck, memory_store, "confirm") == "No cards in the queue."


# ---------------------------------------------------------------------------
# create_server tests
# ---------------------------------------------------------------------------


def test_create_server_registers_tools(tmp_path, tmp_config):
    """The server exposes the four review tools."""
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps(tmp_config), encoding="utf-8")

    server = create_server(config_path)
    assert isinstance(server, FastMCP)

    tools = asyncio.run(server.list_tools())
    assert {t.name for t in tools} == {"current_card", "review", "progress", "restart"}
    assert (tmp_path / "test.db").exists()
