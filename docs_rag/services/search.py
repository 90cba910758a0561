"""
Search engine: recursive, line-oriented regex search over the corpus tree.

search_tree is a pure function of (filesystem, root, start path, pattern); it
never touches the disk directly, so it runs unchanged over an in-memory tree.
The result cap is global across the whole walk, not per file or directory.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from docs_rag.core.errors import DocumentNotFoundError, InvalidPatternError
from docs_rag.services.filesystem import FileSystem
from docs_rag.services.sandbox import is_within_root

logger = logging.getLogger(__name__)


@dataclass
class SearchMatch:
    file: str
    line: int
    text: str

    def to_dict(self) -> dict:
        return {"file": self.file, "line": self.line, "text": self.text}


@dataclass
class SearchResult:
    matches: list[SearchMatch] = field(default_factory=list)
    truncated: bool = False


def compile_pattern(pattern: str) -> re.Pattern:
    """Compile a case-insensitive search regex. Raises InvalidPatternError."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise InvalidPatternError(f"Invalid pattern {pattern!r}: {e}") from e


def relative_posix(root: Path, path: Path) -> str:
    """Root-relative path with forward slashes ('.' for the root itself)."""
    rel = PurePosixPath(*path.relative_to(root).parts)
    return str(rel) if rel.parts else "."


def is_document(name: str, extensions: frozenset[str]) -> bool:
    return PurePosixPath(name).suffix.lower() in extensions


def split_lines(text: str) -> list[str]:
    """Lines split on newline characters only; a trailing newline does not start another line."""
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def iter_document_files(fs: FileSystem, root: Path, start: Path, extensions: frozenset[str]):
    """
    Depth-first walk from start yielding document files.

    Children are visited in name order and a subdirectory is fully walked
    before its next sibling. Directories that cannot be listed are skipped.
    Entries whose symlinks lead outside root are skipped, and each real
    directory is walked once.
    """
    visited: set[Path] = set()
    stack: list[tuple[Path, bool]] = [(start, True)]
    while stack:
        current, is_dir = stack.pop()
        real = fs.realpath(current)
        if not is_within_root(root, real):
            logger.warning("[search:walk] skip outside root path=%s real=%s", current, real)
            continue
        if not is_dir:
            yield current
            continue
        if real in visited:
            logger.info("[search:walk] skip revisited dir=%s real=%s", current, real)
            continue
        visited.add(real)
        try:
            children = sorted(fs.list_dir(current))
        except OSError as e:
            logger.info("[search:walk] skip unreadable dir=%s err=%s", current, e)
            continue
        for name, child_is_dir in reversed(children):
            if child_is_dir or is_document(name, extensions):
                stack.append((current / name, child_is_dir))


def search_tree(
    fs: FileSystem,
    root: Path,
    start: Path,
    regex: re.Pattern,
    max_results: int,
    extensions: frozenset[str],
    max_text_chars: int = 200,
) -> SearchResult:
    """
    Collect up to max_results matching lines under start.

    start may be a single file (searched regardless of extension) or a
    directory (walked recursively, documents only). Unreadable files are
    skipped. Once the cap is reached the walk only continues until one more
    match is seen, which is what marks the result truncated.
    """
    if not fs.exists(start):
        raise DocumentNotFoundError(f"Path not found: {relative_posix(root, start)}")

    files = iter_document_files(fs, root, start, extensions) if fs.is_dir(start) else iter([start])
    result = SearchResult()
    for path in files:
        try:
            content = fs.read_text(path)
        except OSError as e:
            logger.info("[search:search_tree] skip unreadable file=%s err=%s", path, e)
            continue
        rel = relative_posix(root, path)
        for line_no, line in enumerate(split_lines(content), start=1):
            if not regex.search(line):
                continue
            if len(result.matches) >= max_results:
                result.truncated = True
                return result
            result.matches.append(SearchMatch(file=rel, line=line_no, text=line.strip()[:max_text_chars]))
    return result
