#  repocards - Extractor Registry
#
#  Maps language identifiers to extractor functions and routes source files
#  to them by extension. Built-in extractors self-register on import.
#
#  An extractor is a plain function (path, source, language) -> list[ExtractedBlock].
#
#  Depends on: extractors/base.py
#  Used by:    ranker.py, pipeline.py

import logging
from collections.abc import Callable

from extractors.base import ExtractedBlock, SourceFile, whole_file_block

log = logging.getLogger("pipeline")

Extractor = Callable[[str, str, str], list[ExtractedBlock]]

EXTRACTOR_REGISTRY: dict[str, Extractor] = {}

LANGUAGE_BY_EXTENSION = {
    "ts": "typescript",
    "tsx": "typescript",
    "js": "javascript",
    "jsx": "javascript",
    "mjs": "javascript",
    "cjs": "javascript",
    "py": "python",
    "rs": "rust",
    "go": "go",
    "swift": "swift",
    "kt": "kotlin",
    "kts": "kotlin",
}

DEFAULT_LANGUAGE = "text"


def register_extractor(language: str, fn: Extractor):
    """Register an extractor function under the given language identifier."""
    EXTRACTOR_REGISTRY[language] = fn


def get_extractor(language: str) -> Extractor:
    """Get the extractor for a language, falling back to the generic curly-brace one."""
    if language not in EXTRACTOR_REGISTRY:
        log.debug(f"No extractor for '{language}', using '{DEFAULT_LANGUAGE}'")
        return EXTRACTOR_REGISTRY[DEFAULT_LANGUAGE]
    return EXTRACTOR_REGISTRY[language]


def detect_language(path: str) -> str:
    """Detect language from the substring after the last '.' in the path."""
    file_name = path.split("/")[-1]
    if "." not in file_name:
        return DEFAULT_LANGUAGE
    ext = file_name.rsplit(".", 1)[-1].lower()
    return LANGUAGE_BY_EXTENSION.get(ext, DEFAULT_LANGUAGE)


def extract_blocks(file: SourceFile) -> list[ExtractedBlock]:
    """Extract candidate blocks from one file.

    Falls back to a single whole-file block when no declarations are found
    and the file is short enough. Malformed content never raises: a failing
    extractor is logged and treated as finding nothing.
    """
    content = file.content or ""
    if not content.strip():
        return []

    language = detect_language(file.path)
    extractor = get_extractor(language)

    try:
        blocks = extractor(file.path, content, language)
    except Exception as e:
        log.warning(f"Extractor '{language}' failed on {file.path}: {e}")
        blocks = []

    if not blocks:
        fallback = whole_file_block(file.path, content, language)
        if fallback:
            blocks = [fallback]

    return blocks


# Import built-in extractors to trigger self-registration
from extractors import curly as _curly  # noqa: F401, E402
from extractors import go as _go  # noqa: F401, E402
from extractors import python_extractor as _python  # noqa: F401, E402
from extractors import rust as _rust  # noqa: F401, E402
from extractors import swift as _swift  # noqa: F401, E402
