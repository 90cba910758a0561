"""
Corpus accessor: read-only listing, paginated reads and search over the docs tree.

Responsibility: Own the corpus root and route every agent-supplied path through
the sandbox before the filesystem sees it. Raises CorpusError subclasses; the
tool layer converts them into tool results. No HTTP or LLM here.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Literal

from docs_rag.core.config import (
    DOC_EXTENSIONS,
    DOCS_ROOT,
    GREP_MAX_RESULTS,
    MATCH_TEXT_MAX_CHARS,
    READ_PAGE_SIZE,
)
from docs_rag.core.errors import (
    DocumentNotFoundError,
    NotADirectoryCorpusError,
    OutsideRootError,
    UnsupportedDocumentError,
)
from docs_rag.services.filesystem import FileSystem, LocalFileSystem
from docs_rag.services.sandbox import canonical_root, resolve_within_root
from docs_rag.services.search import (
    SearchResult,
    compile_pattern,
    is_document,
    relative_posix,
    search_tree,
    split_lines,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DirectoryEntry:
    name: str
    kind: Literal["file", "dir"]

    def to_dict(self) -> dict:
        return {"name": self.name, "type": self.kind}


@dataclass
class ReadResult:
    content: str
    total_lines: int
    showing: str


def _showing(start: int, end: int, total: int) -> str:
    if end <= start:
        return f"lines {total}-{total} of {total}"
    return f"lines {start + 1}-{end} of {total}"


class Corpus:
    """Read-only view of the documentation tree rooted at root."""

    def __init__(
        self,
        root: Path | str,
        fs: FileSystem | None = None,
        extensions: frozenset[str] = DOC_EXTENSIONS,
    ) -> None:
        self.root = canonical_root(root)
        self.fs: FileSystem = fs if fs is not None else LocalFileSystem()
        self.extensions = extensions

    def resolve(self, path: str) -> Path:
        """Sandboxed absolute path for path. Raises OutsideRootError."""
        resolved = resolve_within_root(self.root, path)
        if resolved is None:
            raise OutsideRootError(path)
        return resolved

    def relative(self, path: Path) -> str:
        return relative_posix(self.root, path)

    def list_entries(self, path: str) -> list[DirectoryEntry]:
        """Sorted entries of a directory."""
        target = self.resolve(path)
        if not self.fs.exists(target):
            raise DocumentNotFoundError(f"Directory not found: {path}")
        if not self.fs.is_dir(target):
            raise NotADirectoryCorpusError(f"Not a directory: {path}")
        try:
            children = self.fs.list_dir(target)
        except OSError as e:
            raise DocumentNotFoundError(f"Directory is not readable: {path}") from e
        entries = [DirectoryEntry(name=name, kind="dir" if is_dir else "file") for name, is_dir in children]
        entries.sort(key=lambda e: e.name)
        logger.info("[corpus:list_entries] path=%r entries=%d", path, len(entries))
        return entries

    def read_range(self, path: str, offset: int = 0, limit: int = READ_PAGE_SIZE) -> ReadResult:
        """
        Lines [offset, offset + limit) of a document (0-based offset).

        An offset past the end of the file yields an empty slice, not an error.
        """
        target = self.resolve(path)
        if not self.fs.exists(target) or self.fs.is_dir(target):
            raise DocumentNotFoundError(f"File not found: {path}")
        if not is_document(target.name, self.extensions):
            allowed = ", ".join(sorted(self.extensions))
            raise UnsupportedDocumentError(f"Not a document ({allowed}): {path}")
        try:
            text = self.fs.read_text(target)
        except OSError as e:
            raise DocumentNotFoundError(f"File is not readable: {path}") from e

        lines = split_lines(text)
        total = len(lines)
        start = min(max(offset, 0), total)
        end = min(start + max(limit, 0), total)
        logger.info("[corpus:read_range] path=%r offset=%d limit=%d total=%d", path, offset, limit, total)
        return ReadResult(
            content="\n".join(lines[start:end]),
            total_lines=total,
            showing=_showing(start, end, total),
        )

    def search(self, path: str, pattern: str, max_results: int = GREP_MAX_RESULTS) -> SearchResult:
        """Case-insensitive regex search under path, capped at max_results matches."""
        regex = compile_pattern(pattern)
        target = self.resolve(path)
        result = search_tree(
            self.fs,
            self.root,
            target,
            regex,
            max_results,
            self.extensions,
            max_text_chars=MATCH_TEXT_MAX_CHARS,
        )
        logger.info(
            "[corpus:search] pattern=%r path=%r matches=%d truncated=%s",
            pattern,
            path,
            len(result.matches),
            result.truncated,
        )
        return result


@lru_cache(maxsize=1)
def get_corpus() -> Corpus:
    """Process-wide corpus over DOCS_ROOT."""
    corpus = Corpus(DOCS_ROOT)
    if not corpus.root.is_dir():
        logger.warning("[corpus] DOCS_ROOT is not a directory: %s", corpus.root)
    else:
        logger.info("[corpus] root=%s extensions=%s", corpus.root, sorted(corpus.extensions))
    return corpus
