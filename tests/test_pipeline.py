#  repocards - Pipeline Tests
#
#  Config validation, card building and end-to-end ingestion against a
#  mocked GitHub API.

import asyncio
import base64

import httpx
import pytest

import pipeline
from extractors.base import SourceFile
from github import InvalidRepoError, RepoNotFoundError
from pipeline import (
    ConfigError,
    NoSupportedFilesError,
    NothingLearnableError,
    _validate_config,
    build_cards,
    ingest_repo,
    load_cards,
    save_ingest,
)
from recent import get_recent
from streak import get_streak

LIB_TS = """\
/** Adds two numbers. */
export function add(a: number, b: number): number {
  return a + b;
}

export interface User {
  id: string;
  name: string;
}
"""


def _github(files, tree=None, status=200):
    """A MockTransport handler serving one repo o/r with the given files."""
    if tree is None:
        tree = [{"path": p, "type": "blob", "size": len(c)} for p, c in files.items()]

    def handler(request):
        path = request.url.path
        if path == "/repos/o/r":
            if status != 200:
                return httpx.Response(status)
            return httpx.Response(
                200,
                json={"name": "r", "full_name": "o/r", "description": "Demo", "stargazers_count": 3,
                      "language": "TypeScript", "default_branch": "main"},
            )
        if path == "/repos/o/r/git/trees/main":
            return httpx.Response(200, json={"tree": tree})
        prefix = "/repos/o/r/contents/"
        if path.startswith(prefix) and path[len(prefix):] in files:
            raw = files[path[len(prefix):]].encode()
            return httpx.Response(200, json={"encoding": "base64", "content": base64.b64encode(raw).decode()})
        return httpx.Response(404)

    return handler


@pytest.fixture
def mock_github(monkeypatch):
    """Route pipeline's HTTP client through a MockTransport handler."""

    def install(handler):
        def make_client(**kwargs):
            return httpx.AsyncClient(base_url=kwargs["api_url"], transport=httpx.MockTransport(handler))

        monkeypatch.setattr(pipeline, "make_client", make_client)

    return install


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


def test_valid_config(tmp_config):
    _validate_config(tmp_config)


def test_missing_section(tmp_config):
    del tmp_config["database"]
    with pytest.raises(ConfigError, match="database"):
        _validate_config(tmp_config)


@pytest.mark.parametrize(
    "section,key,value",
    [
        ("github", "api_url", "ftp://example.com"),
        ("database", "path", 42),
        ("fetch", "batch_size", 0),
        ("fetch", "max_files", "ten"),
        ("cards", "max_cards", -1),
    ],
)
def test_invalid_values(tmp_config, section, key, value):
    tmp_config[section][key] = value
    with pytest.raises(ConfigError):
        _validate_config(tmp_config)


def test_optional_sections(tmp_config):
    """fetch and cards fall back to defaults when absent."""
    del tmp_config["fetch"]
    del tmp_config["cards"]
    _validate_config(tmp_config)


# ---------------------------------------------------------------------------
# build_cards
# ---------------------------------------------------------------------------


def test_build_cards():
    cards = build_cards([SourceFile("src/lib.ts", LIB_TS)])
    assert [c.title for c in cards] == ["add", "User"]
    assert cards[0].explanation == "Adds two numbers."


def test_build_cards_nothing_learnable():
    """Files that are all too long to fall back on yield no cards."""
    big = "\n".join(f"let x{i} = {i};" for i in range(80))
    with pytest.raises(NothingLearnableError):
        build_cards([SourceFile("src/big.ts", big)])
    with pytest.raises(NothingLearnableError):
        build_cards([])


def test_build_cards_respects_cap():
    source = "\n\n".join(f"export function f{i}() {{\n  return {i};\n}}" for i in range(10))
    assert len(build_cards([SourceFile("src/many.ts", source)], max_cards=4)) == 4


# ---------------------------------------------------------------------------
# ingest_repo
# ---------------------------------------------------------------------------


def test_ingest_repo(tmp_config, mock_github):
    mock_github(_github({"src/lib.ts": LIB_TS, "README.md": "# Demo"}))
    result = asyncio.run(ingest_repo("https://github.com/o/r", tmp_config))
    assert result.meta.full_name == "o/r"
    assert [c.id for c in result.cards] == ["gen-0-add", "gen-1-User"]


def test_ingest_no_supported_files(tmp_config, mock_github):
    mock_github(_github({"README.md": "# Demo", "docs/guide.md": "text"}))
    with pytest.raises(NoSupportedFilesError, match="No supported code files"):
        asyncio.run(ingest_repo("o/r", tmp_config))


def test_ingest_all_fetches_fail(tmp_config, mock_github):
    """A tree listing files that can't be fetched ends in NothingLearnableError."""
    tree = [{"path": "src/gone.ts", "type": "blob", "size": 10}]
    mock_github(_github({}, tree=tree))
    with pytest.raises(NothingLearnableError):
        asyncio.run(ingest_repo("o/r", tmp_config))


def test_ingest_repo_not_found(tmp_config, mock_github):
    mock_github(_github({}, status=404))
    with pytest.raises(RepoNotFoundError):
        asyncio.run(ingest_repo("o/r", tmp_config))


def test_ingest_invalid_input(tmp_config):
    with pytest.raises(InvalidRepoError):
        asyncio.run(ingest_repo("not a repo", tmp_config))


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------


def test_save_and_load(tmp_config, mock_github, memory_store):
    """Saved cards load back by any casing of the repo name."""
    mock_github(_github({"src/lib.ts": LIB_TS}))
    result = asyncio.run(ingest_repo("o/r", tmp_config))
    save_ingest(memory_store, result)

    assert load_cards(memory_store, "O/R") == result.cards
    [entry] = get_recent(memory_store)
    assert entry["full_name"] == "o/r"
    assert entry["card_count"] == 2
    assert get_streak(memory_store).total_repos == 1


def test_load_cards_missing(memory_store):
    assert load_cards(memory_store, "nobody/nothing") == []
