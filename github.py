#  repocards - GitHub Content Source
#
#  Fetches repository metadata, the recursive file tree and raw file contents
#  from the public GitHub REST API. No SDK, no GraphQL; a token is optional.
#
#  File contents are fetched in small batches, each batch awaited in full
#  before the next. A file that fails to fetch or decode is logged and left
#  out; it never fails the whole fetch.
#
#  Depends on: httpx, extractors/base.py
#  Used by:    pipeline.py

import asyncio
import base64
import logging
import re
from dataclasses import dataclass
from urllib.parse import quote

import httpx

from extractors.base import SourceFile

log = logging.getLogger("pipeline")

API_URL = "https://api.github.com"

CODE_EXTENSIONS = {
    ".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".py", ".rs", ".go", ".swift", ".kt", ".kts",
}

# Tests, vendored deps and build output aren't worth learning from
SKIP_MARKERS = ("__tests__", ".test.", ".spec.", "node_modules", ".d.ts", "dist/", "build/")

MAX_FILE_SIZE = 50_000
MAX_FILES = 40
BATCH_SIZE = 8

URL_RE = re.compile(r"(?:https?://)?github\.com/([^/]+)/([^/]+)")
SHORT_RE = re.compile(r"^([^/\s]+)/([^/\s]+)$")


class InvalidRepoError(ValueError):
    """Raised when input isn't owner/repo or a GitHub URL."""


class RepoNotFoundError(RuntimeError):
    """Raised when repo metadata or its tree can't be fetched."""


@dataclass(frozen=True)
class RepoMeta:
    name: str
    full_name: str
    description: str | None
    stars: int
    language: str | None
    default_branch: str


@dataclass(frozen=True)
class TreeEntry:
    path: str
    is_blob: bool
    size: int | None = None


def parse_repo_input(text: str) -> tuple[str, str]:
    """Parse "owner/repo" or a github.com URL into (owner, repo).

    Raises InvalidRepoError if neither form matches.
    """
    trimmed = text.strip().rstrip("/")

    m = URL_RE.search(trimmed)
    if m:
        return m.group(1), m.group(2).removesuffix(".git")

    m = SHORT_RE.match(trimmed)
    if m:
        return m.group(1), m.group(2)

    raise InvalidRepoError(f"Invalid repo format: '{text}'. Use owner/repo or a GitHub URL.")


def make_client(api_url: str = API_URL, timeout: float = 30.0, token: str | None = None) -> httpx.AsyncClient:
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.AsyncClient(base_url=api_url, timeout=timeout, headers=headers)


async def fetch_repo(client: httpx.AsyncClient, owner: str, repo: str) -> RepoMeta:
    try:
        resp = await client.get(f"/repos/{owner}/{repo}")
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise RepoNotFoundError(f"Repo not found: {owner}/{repo} ({e})") from e

    return RepoMeta(
        name=data["name"],
        full_name=data["full_name"],
        description=data.get("description"),
        stars=data.get("stargazers_count", 0),
        language=data.get("language"),
        default_branch=data.get("default_branch", "main"),
    )


async def fetch_tree(client: httpx.AsyncClient, owner: str, repo: str, branch: str) -> list[TreeEntry]:
    """Recursive tree listing, blobs only."""
    try:
        resp = await client.get(f"/repos/{owner}/{repo}/git/trees/{branch}", params={"recursive": "1"})
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        raise RepoNotFoundError(f"Failed to fetch tree for {owner}/{repo}@{branch} ({e})") from e

    return [
        TreeEntry(path=e["path"], is_blob=True, size=e.get("size"))
        for e in data.get("tree", [])
        if e.get("type") == "blob"
    ]


def filter_code_files(tree: list[TreeEntry], max_file_size: int = MAX_FILE_SIZE) -> list[TreeEntry]:
    """Keep supported source files; drop tests, generated output and large files."""
    result = []
    for entry in tree:
        if not entry.is_blob:
            continue
        ext = "." + entry.path.rsplit(".", 1)[-1]
        if ext not in CODE_EXTENSIONS:
            continue
        if any(marker in entry.path for marker in SKIP_MARKERS):
            continue
        if entry.size and entry.size > max_file_size:
            continue
        result.append(entry)
    return result


async def _fetch_one(client: httpx.AsyncClient, owner: str, repo: str, path: str) -> SourceFile | None:
    try:
        resp = await client.get(f"/repos/{owner}/{repo}/contents/{quote(path)}")
        resp.raise_for_status()
        data = resp.json()
        if data.get("encoding") != "base64":
            return None
        raw = base64.b64decode(data["content"].replace("\n", ""))
        return SourceFile(path=path, content=raw.decode("utf-8", errors="replace"))
    except (httpx.HTTPError, ValueError, KeyError) as e:
        log.warning(f"[fetch] Skipping {path}: {e}")
        return None


async def fetch_files(
    client: httpx.AsyncClient,
    owner: str,
    repo: str,
    paths: list[str],
    max_files: int = MAX_FILES,
    batch_size: int = BATCH_SIZE,
) -> list[SourceFile]:
    """Fetch up to max_files files, batch_size at a time, in path order."""
    selected = paths[:max_files]
    results: list[SourceFile] = []

    for batch_start in range(0, len(selected), batch_size):
        batch = selected[batch_start : batch_start + batch_size]
        fetched = await asyncio.gather(*(_fetch_one(client, owner, repo, p) for p in batch))
        results.extend(f for f in fetched if f is not None)

    log.info(f"[fetch] {len(results)}/{len(selected)} files fetched")
    return results
