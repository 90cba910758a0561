"""
Whole-corpus context for eager mode: every document concatenated into one block.

Files are visited in the same depth-first, name-ordered walk the search engine
uses; unreadable files and directories are skipped.
"""

import logging

from docs_rag.services.corpus import Corpus
from docs_rag.services.search import iter_document_files

logger = logging.getLogger(__name__)


def load_all_documents(corpus: Corpus) -> str:
    """Return '--- FILE: <rel> ---' framed content of every document under the root."""
    if not corpus.fs.is_dir(corpus.root):
        logger.warning("[eager_context] root is not a directory: %s", corpus.root)
        return ""
    parts: list[str] = []
    for path in iter_document_files(corpus.fs, corpus.root, corpus.root, corpus.extensions):
        try:
            content = corpus.fs.read_text(path)
        except OSError as e:
            logger.info("[eager_context] skip unreadable file=%s err=%s", path, e)
            continue
        parts.append(f"\n--- FILE: {corpus.relative(path)} ---\n{content}\n")
    block = "".join(parts)
    logger.info("[eager_context] loaded files=%d chars=%d (~%d tokens)", len(parts), len(block), len(block) // 4)
    return block
