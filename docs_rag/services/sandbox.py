"""
Path sandbox: confine agent-supplied paths to the corpus root.

Every path that reaches the corpus accessor or the search engine has been
through resolve_within_root first. Containment is decided on canonical paths
(symlinks followed, . and .. collapsed) and on whole path components, so a
root of /docs never admits /docs-secret.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def canonical_root(root: Path | str) -> Path:
    """Absolute, symlink-free form of the corpus root."""
    return Path(os.path.realpath(os.path.expanduser(str(root))))


def is_within_root(root: Path, candidate: Path) -> bool:
    """True when candidate equals root or is nested under it (component-wise)."""
    root_s = str(root)
    cand_s = str(candidate)
    try:
        return os.path.commonpath([root_s, cand_s]) == root_s
    except ValueError:
        # Mixed absolute/relative or different drives
        return False


def resolve_within_root(root: Path, relative_path: str) -> Path | None:
    """
    Resolve relative_path against root and return the canonical absolute path,
    or None when the result would lie outside root.

    root is expected to be canonical already (see canonical_root). Never raises.
    """
    if not isinstance(relative_path, str) or "\x00" in relative_path:
        logger.info("[sandbox:resolve] reject invalid path=%r", relative_path)
        return None
    text = relative_path.strip() or "."
    try:
        resolved = Path(os.path.realpath(os.path.join(str(root), text)))
    except (OSError, ValueError):
        logger.info("[sandbox:resolve] reject unresolvable path=%r", relative_path)
        return None
    if not is_within_root(root, resolved):
        logger.warning("[sandbox:resolve] reject outside root path=%r resolved=%s", relative_path, resolved)
        return None
    return resolved
