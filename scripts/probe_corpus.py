#!/usr/bin/env python3
"""
Run one corpus tool against the configured docs root and print the JSON result.

Run from project root:

    python scripts/probe_corpus.py list .
    python scripts/probe_corpus.py read app/getting-started/index.mdx --offset 0 --limit 40
    python scripts/probe_corpus.py grep "server actions?" . --max-results 5

Set DOCS_ROOT (or pass --root) to point at a different documentation tree.
The same sandbox and argument validation as the agent apply.
"""

import argparse
import json
import sys
from pathlib import Path

# Project root on path so "docs_rag" resolves
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from docs_rag.agent.tools import ToolName, execute_tool
from docs_rag.core.config import DOCS_ROOT
from docs_rag.services.corpus import Corpus


def main() -> int:
    parser = argparse.ArgumentParser(description="Probe the documentation corpus with the agent's tools.")
    parser.add_argument("--root", default=str(DOCS_ROOT), help="Documentation root (default: DOCS_ROOT).")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="list_files")
    p_list.add_argument("path")

    p_read = sub.add_parser("read", help="read_file")
    p_read.add_argument("path")
    p_read.add_argument("--offset", type=int, default=None)
    p_read.add_argument("--limit", type=int, default=None)

    p_grep = sub.add_parser("grep", help="grep")
    p_grep.add_argument("pattern")
    p_grep.add_argument("path")
    p_grep.add_argument("--max-results", type=int, default=None)

    args = parser.parse_args()
    corpus = Corpus(args.root)

    if args.command == "list":
        name, tool_args = ToolName.LIST_FILES, {"path": args.path}
    elif args.command == "read":
        name, tool_args = ToolName.READ_FILE, {"path": args.path}
        if args.offset is not None:
            tool_args["offset"] = args.offset
        if args.limit is not None:
            tool_args["limit"] = args.limit
    else:
        name, tool_args = ToolName.GREP, {"pattern": args.pattern, "path": args.path}
        if args.max_results is not None:
            tool_args["maxResults"] = args.max_results

    result = execute_tool(name.value, tool_args, corpus=corpus)
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return 1 if "error" in result else 0


if __name__ == "__main__":
    sys.exit(main())
