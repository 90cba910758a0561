"""
Shared fixtures: an on-disk docs tree, an in-memory filesystem, and a scripted chat model.
"""

from pathlib import Path, PurePosixPath

import pytest

from docs_rag.services.corpus import Corpus


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture
def docs_root(tmp_path: Path) -> Path:
    """
    tmp_path/
      docs/
        index.mdx
        notes.txt                (not a document)
        01-app/
          01-getting-started/installation.mdx
          02-guides/caching.mdx  (450 lines)
        02-pages/index.md
      docs-secret/secret.mdx     (sibling of the root, must stay unreachable)
    """
    root = tmp_path / "docs"
    _write(root / "index.mdx", "# Next.js Docs\nWelcome to the docs.\n")
    _write(root / "notes.txt", "cache notes that are not documentation\n")
    _write(
        root / "01-app" / "01-getting-started" / "installation.mdx",
        "# Installation\nRun create-next-app.\nConfigure the cache in next.config.js.\n",
    )
    _write(
        root / "01-app" / "02-guides" / "caching.mdx",
        "\n".join(f"line {i}: cache entry {i}" if i % 50 == 0 else f"line {i}" for i in range(450)) + "\n",
    )
    _write(root / "02-pages" / "index.md", "# Pages Router\nThe pages directory.\n")
    _write(tmp_path / "docs-secret" / "secret.mdx", "cache secret\n")
    return root


@pytest.fixture
def corpus(docs_root: Path) -> Corpus:
    return Corpus(docs_root)


class FakeFileSystem:
    """In-memory FileSystem: files map absolute POSIX paths to content."""

    def __init__(self, files: dict[str, str], unreadable: tuple[str, ...] = ()) -> None:
        self.files = {Path(p): text for p, text in files.items()}
        self.dirs: set[Path] = set()
        for p in self.files:
            self.dirs.update(p.parents)
        self.unreadable = {Path(p) for p in unreadable}
        self.reads: list[str] = []

    def exists(self, path: Path) -> bool:
        return path in self.files or path in self.dirs

    def is_dir(self, path: Path) -> bool:
        return path in self.dirs

    def realpath(self, path: Path) -> Path:
        return path

    def list_dir(self, path: Path) -> list[tuple[str, bool]]:
        if path in self.unreadable:
            raise PermissionError(str(path))
        children = {p for p in set(self.files) | self.dirs if p.parent == path and p != path}
        return [(p.name, p in self.dirs) for p in children]

    def read_text(self, path: Path) -> str:
        if path in self.unreadable:
            raise PermissionError(str(path))
        self.reads.append(str(PurePosixPath(*path.parts)))
        return self.files[path]


@pytest.fixture
def fake_fs() -> FakeFileSystem:
    """
    /corpus/a.md                cache on lines 1 and 3
    /corpus/b.txt               not a document
    /corpus/guides/c.mdx        CACHE on line 1
    /corpus/guides/deep/d.md    cache on line 2
    """
    return FakeFileSystem(
        {
            "/corpus/a.md": "Cache basics\nnothing here\ncache again",
            "/corpus/b.txt": "cache in a text file",
            "/corpus/guides/c.mdx": "CACHE components\nother",
            "/corpus/guides/deep/d.md": "no match\ncache deep down",
        }
    )


class ScriptedChat:
    """
    Chat model stand-in. Replays turns of (content, tool_calls); the last turn
    repeats once the script runs out. Records the conversation seen on every call.
    """

    def __init__(self, turns: list[tuple]) -> None:
        self.turns = list(turns)
        self.calls: list[list[dict]] = []

    def __call__(self, messages, tools, max_tokens=None):
        self.calls.append([dict(m) for m in messages])
        index = min(len(self.calls) - 1, len(self.turns) - 1)
        return self.turns[index]


@pytest.fixture
def make_chat():
    return ScriptedChat


def tool_call(call_id: str, name: str, **arguments) -> dict:
    return {"id": call_id, "name": name, "arguments": arguments}


@pytest.fixture
def make_tool_call():
    return tool_call
