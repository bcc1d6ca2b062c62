#  repocards - Store Tests

from store import MemoryStore, SQLiteStore, cards_key, progress_key


def test_keys_are_case_insensitive():
    """Repository keys are normalised to lowercase."""
    assert cards_key("Owner/Repo") == "cards:owner/repo"
    assert progress_key("OWNER/repo") == "progress:owner/repo"


def test_memory_store_copies_values():
    """Mutating a returned value doesn't touch what's stored."""
    store = MemoryStore()
    store.set("k", {"a": [1, 2]})
    value = store.get("k")
    value["a"].append(3)
    assert store.get("k") == {"a": [1, 2]}
    store.delete("k")
    assert store.get("k") is None
    store.delete("k")


def test_sqlite_round_trip_and_overwrite(tmp_path):
    """Values persist across connections; set replaces the previous value."""
    path = tmp_path / "nested" / "app.db"
    store = SQLiteStore(path)
    store.set("cards:o/r", [{"id": "gen-0-a"}])
    store.set("cards:o/r", [{"id": "gen-0-b"}])
    store.set("streak", {"current": 2})
    store.close()

    reopened = SQLiteStore(path)
    try:
        assert reopened.get("cards:o/r") == [{"id": "gen-0-b"}]
        assert reopened.get("streak") == {"current": 2}
        assert reopened.get("missing") is None
    finally:
        reopened.close()


def test_sqlite_delete_and_keys(tmp_path):
    """keys() filters by prefix; delete removes one key."""
    store = SQLiteStore(tmp_path / "app.db")
    try:
        store.set("cards:a/b", [])
        store.set("cards:c/d", [])
        store.set("progress:a/b", {})
        assert store.keys("cards:") == ["cards:a/b", "cards:c/d"]
        store.delete("cards:a/b")
        assert store.keys("cards:") == ["cards:c/d"]
        assert len(store.keys()) == 2
    finally:
        store.close()


def test_sqlite_unicode(tmp_path):
    """Non-ASCII text survives storage."""
    store = SQLiteStore(tmp_path / "app.db")
    try:
        store.set("recent", [{"description": "Grüße ✓"}])
        assert store.get("recent") == [{"description": "Grüße ✓"}]
    finally:
        store.close()
