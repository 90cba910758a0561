"""
Filesystem binding for the corpus.

The corpus accessor and the search engine only talk to a FileSystem, so the
tree walk can run over the real disk or over an in-memory tree in tests.
"""

import os
from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    def exists(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def realpath(self, path: Path) -> Path:
        """Canonical form of path with every symlink resolved."""
        ...

    def list_dir(self, path: Path) -> list[tuple[str, bool]]:
        """Return (name, is_dir) for each child. May raise OSError."""
        ...

    def read_text(self, path: Path) -> str:
        """Return file content decoded as UTF-8. May raise OSError."""
        ...


class LocalFileSystem:
    """FileSystem over the local disk."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def realpath(self, path: Path) -> Path:
        return Path(os.path.realpath(path))

    def list_dir(self, path: Path) -> list[tuple[str, bool]]:
        out: list[tuple[str, bool]] = []
        for child in path.iterdir():
            try:
                is_dir = child.is_dir()
            except OSError:
                continue
            out.append((child.name, is_dir))
        return out

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8", errors="replace")
