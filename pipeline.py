#!/usr/bin/env python3
#  repocards - Ingestion Pipeline
#
#  Turns a public GitHub repository into a deck of learning cards:
#  repo → file tree → file contents → extract blocks → rank → generate cards,
#  then stores the cards in the app database for review.
#
#  Also the command-line entry point for inspecting decks and progress.
#
#  Depends on: config.json, extractors/, ranker.py, generate.py, github.py,
#              store.py, deck.py, streak.py, recent.py, httpx
#  Used by:    Manual CLI invocation (python pipeline.py ingest owner/repo), server.py

import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from deck import Deck
from extractors.base import SourceFile
from generate import MAX_CARDS, LearningCard, generate_cards
from github import (
    BATCH_SIZE,
    MAX_FILE_SIZE,
    MAX_FILES,
    RepoMeta,
    fetch_files,
    fetch_repo,
    fetch_tree,
    filter_code_files,
    make_client,
    parse_repo_input,
)
from ranker import extract_and_rank
from recent import add_recent, get_recent
from repetition import now_ms, seen_dots
from store import SQLiteStore, cards_key, progress_key
from streak import activity_days, get_streak, record_repo

SCRIPT_DIR = Path(__file__).parent
CONFIG_PATH = SCRIPT_DIR / "config.json"

log = logging.getLogger("pipeline")


class ConfigError(ValueError):
    """Raised when config.json is missing or invalid."""


class IngestError(Exception):
    """An ingestion that produced nothing worth reviewing."""


class NoSupportedFilesError(IngestError):
    def __init__(self):
        super().__init__("No supported code files found in this repo.")


class NothingLearnableError(IngestError):
    def __init__(self):
        super().__init__("Couldn't extract any learnable code blocks.")


@dataclass(frozen=True)
class IngestResult:
    meta: RepoMeta
    cards: list[LearningCard]


def load_config() -> dict:
    if not CONFIG_PATH.exists():
        log.error(f"{CONFIG_PATH} not found. Copy config.example.json to config.json.")
        sys.exit(1)
    with open(CONFIG_PATH, encoding="utf-8") as f:
        config = json.load(f)
    try:
        _validate_config(config)
    except ConfigError as e:
        log.error(str(e))
        sys.exit(1)
    return config


def _validate_config(config: dict):
    """Validate that the config has all required fields.

    Raises ConfigError on invalid config.
    """
    required_sections = ["github", "database"]
    for section in required_sections:
        if section not in config:
            raise ConfigError(f"config.json missing required section '{section}'.")

    api_url = config["github"].get("api_url", "https://api.github.com")
    if not isinstance(api_url, str) or not api_url.startswith("http"):
        raise ConfigError("config.json 'github.api_url' must be a URL starting with http.")

    if not isinstance(config["database"].get("path"), str):
        raise ConfigError("config.json 'database.path' must be a string.")

    fetch = config.get("fetch", {})
    for key in ("max_files", "batch_size", "max_file_size"):
        if key in fetch and (not isinstance(fetch[key], int) or fetch[key] <= 0):
            raise ConfigError(f"config.json 'fetch.{key}' must be a positive integer.")

    max_cards = config.get("cards", {}).get("max_cards", MAX_CARDS)
    if not isinstance(max_cards, int) or max_cards <= 0:
        raise ConfigError("config.json 'cards.max_cards' must be a positive integer.")


def open_store(config: dict) -> SQLiteStore:
    return SQLiteStore(SCRIPT_DIR / config["database"]["path"])


# ---------------------------------------------------------------------------
# Ingest
# ---------------------------------------------------------------------------


def build_cards(files: list[SourceFile], max_cards: int = MAX_CARDS) -> list[LearningCard]:
    """Extract, rank and generate cards from fetched files.

    Raises NothingLearnableError if no file yields a block.
    """
    ranked = extract_and_rank(files)
    if not ranked:
        raise NothingLearnableError()
    return generate_cards(ranked, max_cards)


async def ingest_repo(text: str, config: dict) -> IngestResult:
    """Run the full ingestion for one repository input (owner/repo or URL).

    Raises InvalidRepoError, RepoNotFoundError, or an IngestError subclass.
    """
    owner, repo = parse_repo_input(text)
    github_config = config.get("github", {})
    fetch_config = config.get("fetch", {})
    max_cards = config.get("cards", {}).get("max_cards", MAX_CARDS)

    async with make_client(
        api_url=github_config.get("api_url", "https://api.github.com"),
        timeout=github_config.get("timeout", 30.0),
        token=github_config.get("token"),
    ) as client:
        log.info(f"[ingest] Loading {owner}/{repo}...")
        meta = await fetch_repo(client, owner, repo)

        log.info("[ingest] Scanning file tree...")
        tree = await fetch_tree(client, owner, repo, meta.default_branch)
        code_files = filter_code_files(tree, fetch_config.get("max_file_size", MAX_FILE_SIZE))
        if not code_files:
            raise NoSupportedFilesError()

        max_files = fetch_config.get("max_files", MAX_FILES)
        log.info(f"[ingest] Reading {min(len(code_files), max_files)} files...")
        files = await fetch_files(
            client,
            owner,
            repo,
            [entry.path for entry in code_files],
            max_files=max_files,
            batch_size=fetch_config.get("batch_size", BATCH_SIZE),
        )

    cards = build_cards(files, max_cards)
    log.info(f"[ingest] Created {len(cards)} cards for {meta.full_name}")
    return IngestResult(meta=meta, cards=cards)


def save_ingest(store, result: IngestResult):
    """Store a freshly generated card set and note the repo as recently visited."""
    meta = result.meta
    store.set(cards_key(meta.full_name), [card.to_dict() for card in result.cards])
    owner, _, repo = meta.full_name.partition("/")
    add_recent(
        store,
        {
            "owner": owner,
            "repo": repo,
            "full_name": meta.full_name,
            "description": meta.description or "",
            "stars": meta.stars,
            "card_count": len(result.cards),
        },
        now=now_ms(),
    )
    record_repo(store)


def load_cards(store, full_name: str) -> list[LearningCard]:
    raw = store.get(cards_key(full_name)) or []
    return [LearningCard.from_dict(c) for c in raw]


def cmd_ingest(config: dict, repo_input: str):
    """Ingest a repository and store its cards."""
    result = asyncio.run(ingest_repo(repo_input, config))
    store = open_store(config)
    try:
        save_ingest(store, result)
    finally:
        store.close()

    for card in result.cards[:10]:
        log.info(f"  [{card.kind}] {card.title} ({card.file_path}) difficulty {card.difficulty}")
    if len(result.cards) > 10:
        log.info(f"  ... and {len(result.cards) - 10} more")


# ---------------------------------------------------------------------------
# Queue / reset / stats
# ---------------------------------------------------------------------------


def cmd_queue(config: dict, repo_input: str):
    """Print the review queue for an ingested repository."""
    owner, repo = parse_repo_input(repo_input)
    full_name = f"{owner}/{repo}"
    store = open_store(config)
    try:
        cards = load_cards(store, full_name)
        if not cards:
            log.info(f"[queue] No cards for {full_name}. Run 'ingest' first.")
            return
        deck = Deck(cards, store, progress_key(full_name))
        log.info(f"[queue] {full_name}: {deck.mastered}/{deck.total} mastered")
        for i, card in enumerate(deck.queue):
            dots = "".join("●" if d else "○" for d in seen_dots(deck.progress.get(card.id)))
            log.info(f"  {i + 1:>3}. {dots} {card.title} [{card.kind}]")
    finally:
        store.close()


def cmd_reset(config: dict, repo_input: str):
    """Clear review progress for a repository."""
    owner, repo = parse_repo_input(repo_input)
    full_name = f"{owner}/{repo}"
    store = open_store(config)
    try:
        Deck(load_cards(store, full_name), store, progress_key(full_name)).restart()
        log.info(f"[reset] Progress cleared for {full_name}")
    finally:
        store.close()


def cmd_stats(config: dict):
    """Print streak counters and recently ingested repos."""
    store = open_store(config)
    try:
        streak = get_streak(store)
        log.info(f"[streak] current {streak.current}, longest {streak.longest}")
        log.info(
            f"[totals] {streak.total_swipes} reviews, {streak.total_mastered} mastered, {streak.total_repos} repos"
        )
        heatmap = "".join("■" if active else "·" for _, active in activity_days(streak))
        log.info(f"[activity] {heatmap}")
        log.info(f"[decks] {len(store.keys('cards:'))} stored")

        recent = get_recent(store)
        if recent:
            log.info("Recent repos:")
            for entry in recent:
                log.info(f"  {entry['full_name']} ({entry['card_count']} cards, {entry['stars']} stars)")
    finally:
        store.close()


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

USAGE = "Usage: python pipeline.py <command> [owner/repo]"
COMMANDS = "Commands: ingest <repo>, queue <repo>, reset <repo>, stats"


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if len(sys.argv) < 2:
        print(USAGE)
        print(COMMANDS)
        sys.exit(1)

    command = sys.argv[1]
    config = load_config()

    if command == "stats":
        cmd_stats(config)
        return

    if command not in ("ingest", "queue", "reset"):
        log.error(f"Unknown command: {command}")
        print(COMMANDS)
        sys.exit(1)

    if len(sys.argv) < 3:
        print(USAGE)
        sys.exit(1)

    try:
        if command == "ingest":
            cmd_ingest(config, sys.argv[2])
        elif command == "queue":
            cmd_queue(config, sys.argv[2])
        else:
            cmd_reset(config, sys.argv[2])
    except (ValueError, RuntimeError, IngestError) as e:
        log.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
