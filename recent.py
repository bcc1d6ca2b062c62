#  repocards - Recent Repositories
#
#  Remembers the last few ingested repositories, most recent first.
#
#  Depends on: store.py
#  Used by:    pipeline.py, server.py

from store import RECENT_KEY, KeyValueStore

MAX_RECENT = 8


def get_recent(store: KeyValueStore) -> list[dict]:
    return store.get(RECENT_KEY) or []


def add_recent(store: KeyValueStore, entry: dict, now: int) -> list[dict]:
    """Put a repository at the front of the list, replacing any older entry for it.

    entry keys: owner, repo, full_name, description, stars, card_count.
    """
    others = [r for r in get_recent(store) if r.get("full_name") != entry["full_name"]]
    updated = [{**entry, "last_visited": now}, *others][:MAX_RECENT]
    store.set(RECENT_KEY, updated)
    return updated
