#!/usr/bin/env python3
#  repocards - Review MCP Server
#
#  Exposes card review over the Model Context Protocol (MCP): show the
#  current card, confirm / reject / skip it, check progress, start over.
#  Decks are loaded lazily per repository from the app database, which
#  `python pipeline.py ingest owner/repo` fills.
#
#  Depends on: config.json, data/*.db, mcp, pipeline.py, deck.py, streak.py
#  Used by:    MCP clients

import json
import logging
import sys
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from deck import Deck
from generate import LearningCard
from github import InvalidRepoError, parse_repo_input
from pipeline import load_cards, open_store
from repetition import CardReviewState, ReviewAction, seen_dots
from store import KeyValueStore, progress_key
from streak import record_swipe

SCRIPT_DIR = Path(__file__).parent

log = logging.getLogger("repocards-server")

DIFFICULTY_LABELS = {1: "easy", 2: "medium", 3: "hard"}


def format_card(card: LearningCard | None, state: CardReviewState | None = None) -> str:
    """Render one card as readable text."""
    if card is None:
        return "No cards in the queue."

    dots = "".join("●" if d else "○" for d in seen_dots(state))
    header_parts = [
        f"{card.title} [{card.kind}]",
        f"File: {card.file_path}",
        f"Difficulty: {DIFFICULTY_LABELS.get(card.difficulty, card.difficulty)}",
        f"Progress: {dots}",
    ]
    header = " | ".join(header_parts)
    return f"--- [{header}] ---\n{card.explanation}\n\n```{card.language}\n{card.code}\n```"


def format_progress(deck: Deck) -> str:
    """One-line summary of a deck's mastery."""
    if deck.all_mastered:
        return f"All {deck.total} cards mastered."
    return f"{deck.mastered}/{deck.total} cards mastered."


def review_current(deck: Deck, store: KeyValueStore, action: str) -> str:
    """Apply a review action to the deck's current card and show the next one.

    Confirms and rejects count toward the streak; skips do not. The mastery
    signal is announced once and then cleared.
    """
    try:
        review_action = ReviewAction(action.strip().lower())
    except ValueError as e:
        return f"Error: {e}"

    card = deck.review(review_action)
    if card is None:
        return format_card(None)

    lines = [f"{review_action.value}: {card.title}"]
    if review_action is not ReviewAction.SKIP:
        mastered_now = deck.just_mastered is not None
        try:
            record_swipe(store, mastered_now)
        except Exception as e:
            log.warning(f"Could not update streak: {e}")
        if mastered_now:
            lines.append(f"Mastered {deck.just_mastered.title}!")
            deck.clear_just_mastered()

    lines.append(format_progress(deck))
    upcoming = deck.current
    lines.append(format_card(upcoming, deck.progress.get(upcoming.id) if upcoming else None))
    return "\n\n".join(lines)


def create_server(config_path: Path | None = None) -> FastMCP:
    """Create and configure the MCP server from a config file.

    Loads config, opens the app database and registers the review tools.
    Returns the FastMCP instance.
    """
    if config_path is None:
        config_path = SCRIPT_DIR / "config.json"

    if not config_path.exists():
        log.error(f"{config_path} not found. Copy config.example.json.")
        sys.exit(1)

    with open(config_path, encoding="utf-8") as f:
        config = json.load(f)

    server_name = config.get("mcp", {}).get("server_name", "repocards")

    logging.basicConfig(
        level=logging.INFO,
        format=f"[{server_name}] %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    store = open_store(config)
    decks: dict[str, Deck] = {}
    mcp_server = FastMCP(server_name)

    def get_deck(repo: str) -> Deck | None:
        owner, name = parse_repo_input(repo)
        full_name = f"{owner}/{name}".lower()
        if full_name not in decks:
            cards = load_cards(store, full_name)
            if not cards:
                return None
            decks[full_name] = Deck(cards, store, progress_key(full_name))
            log.info(f"Loaded deck {full_name} ({len(cards)} cards)")
        return decks[full_name]

    def not_ingested(repo: str) -> str:
        return f"No cards for '{repo}'. Run 'python pipeline.py ingest {repo}' first."

    @mcp_server.tool(name="current_card", description="Show the card to review next for a repository.")
    async def current_card(repo: str) -> str:
        """Show the current card.

        Args:
            repo: Repository as owner/repo or a GitHub URL.
        """
        try:
            deck = get_deck(repo)
        except InvalidRepoError as e:
            return f"Error: {e}"
        if deck is None:
            return not_ingested(repo)
        card = deck.current
        return format_card(card, deck.progress.get(card.id) if card else None)

    @mcp_server.tool(name="review", description="Review the current card: confirm, reject or skip.")
    async def review(repo: str, action: str) -> str:
        """Apply a review action to the current card and show the next one.

        Args:
            repo: Repository as owner/repo or a GitHub URL.
            action: "confirm" (understood), "reject" (not yet) or "skip".
        """
        try:
            deck = get_deck(repo)
        except InvalidRepoError as e:
            return f"Error: {e}"
        if deck is None:
            return not_ingested(repo)
        return review_current(deck, store, action)

    @mcp_server.tool(name="progress", description="Show mastery progress for a repository.")
    async def progress(repo: str) -> str:
        """Summarize mastery progress.

        Args:
            repo: Repository as owner/repo or a GitHub URL.
        """
        try:
            deck = get_deck(repo)
        except InvalidRepoError as e:
            return f"Error: {e}"
        if deck is None:
            return not_ingested(repo)
        return format_progress(deck)

    @mcp_server.tool(name="restart", description="Forget all review progress for a repository.")
    async def restart(repo: str) -> str:
        """Clear progress and start the deck over.

        Args:
            repo: Repository as owner/repo or a GitHub URL.
        """
        try:
            deck = get_deck(repo)
        except InvalidRepoError as e:
            return f"Error: {e}"
        if deck is None:
            return not_ingested(repo)
        deck.restart()
        return f"Progress cleared. {deck.total} cards to review."

    return mcp_server


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    server = create_server()
    server.run(transport="stdio")
