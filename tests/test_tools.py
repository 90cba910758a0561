"""
Tests for the tool registry: schemas, argument validation, result shapes.
"""

import json

import pytest

from docs_rag.agent.tools import AGENT_TOOLS, TOOL_SPECS, ToolName, execute_tool, tool_result_content
from docs_rag.services.corpus import Corpus


def test_every_tool_is_registered_and_described() -> None:
    assert set(TOOL_SPECS) == set(ToolName)
    assert [t["function"]["name"] for t in AGENT_TOOLS] == ["list_files", "read_file", "grep"]


def test_definitions_declare_required_fields_and_defaults() -> None:
    params = {t["function"]["name"]: t["function"]["parameters"] for t in AGENT_TOOLS}
    assert params["list_files"]["required"] == ["path"]
    assert sorted(params["read_file"]["required"]) == ["path"]
    assert params["read_file"]["properties"]["offset"]["default"] == 0
    assert params["read_file"]["properties"]["limit"]["default"] == 200
    assert sorted(params["grep"]["required"]) == ["path", "pattern"]
    assert params["grep"]["properties"]["maxResults"]["default"] == 20
    assert params["grep"]["properties"]["maxResults"]["type"] == "integer"


class TestListFiles:
    def test_success_shape(self, corpus: Corpus) -> None:
        result = execute_tool("list_files", {"path": "."}, corpus=corpus)
        assert result == {
            "entries": [
                {"name": "01-app", "type": "dir"},
                {"name": "02-pages", "type": "dir"},
                {"name": "index.mdx", "type": "file"},
                {"name": "notes.txt", "type": "file"},
            ]
        }

    def test_missing_directory_is_an_error_result(self, corpus: Corpus) -> None:
        result = execute_tool("list_files", {"path": "nope"}, corpus=corpus)
        assert set(result) == {"error"}

    def test_escape_is_an_error_result(self, corpus: Corpus) -> None:
        result = execute_tool("list_files", {"path": "../"}, corpus=corpus)
        assert "outside the allowed directory" in result["error"]


class TestReadFile:
    def test_defaults(self, corpus: Corpus) -> None:
        result = execute_tool("read_file", {"path": "01-app/02-guides/caching.mdx"}, corpus=corpus)
        assert set(result) == {"content", "totalLines", "showing"}
        assert result["totalLines"] == 450
        assert len(result["content"].split("\n")) == 200

    def test_offset_beyond_end(self, corpus: Corpus) -> None:
        result = execute_tool("read_file", {"path": "index.mdx", "offset": 500}, corpus=corpus)
        assert result == {"content": "", "totalLines": 2, "showing": "lines 2-2 of 2"}

    @pytest.mark.parametrize(
        "arguments",
        [
            {},
            {"path": 3},
            {"path": "index.mdx", "offset": -1},
            {"path": "index.mdx", "limit": 0},
            {"path": "index.mdx", "offset": "10"},
            {"path": "index.mdx", "limit": True},
            {"path": "index.mdx", "unexpected": 1},
        ],
    )
    def test_malformed_arguments_never_reach_the_corpus(self, corpus: Corpus, arguments: dict) -> None:
        class ExplodingCorpus:
            def read_range(self, *args, **kwargs):
                raise AssertionError("corpus must not be called")

        result = execute_tool("read_file", arguments, corpus=ExplodingCorpus())  # type: ignore[arg-type]
        assert result["error"].startswith("Invalid arguments for read_file")


class TestGrep:
    def test_success_shape(self, corpus: Corpus) -> None:
        result = execute_tool(
            "grep",
            {"pattern": "create-next-app", "path": "."},
            corpus=corpus,
        )
        assert result == {
            "matches": [
                {"file": "01-app/01-getting-started/installation.mdx", "line": 2, "text": "Run create-next-app."},
            ],
            "totalFound": 1,
            "truncated": False,
        }

    def test_zero_matches(self, corpus: Corpus) -> None:
        result = execute_tool("grep", {"pattern": "turbopack", "path": "."}, corpus=corpus)
        assert result == {"matches": [], "totalFound": 0, "truncated": False}

    def test_cap(self, corpus: Corpus) -> None:
        result = execute_tool("grep", {"pattern": "cache", "path": ".", "maxResults": 2}, corpus=corpus)
        assert result["totalFound"] == 2
        assert len(result["matches"]) == 2
        assert result["truncated"] is True

    def test_invalid_regex_is_an_error_result(self, corpus: Corpus) -> None:
        result = execute_tool("grep", {"pattern": "[unclosed", "path": "."}, corpus=corpus)
        assert "Invalid pattern" in result["error"]

    def test_missing_path(self, corpus: Corpus) -> None:
        result = execute_tool("grep", {"pattern": "cache", "path": "missing"}, corpus=corpus)
        assert "not found" in result["error"]

    def test_missing_required_pattern(self, corpus: Corpus) -> None:
        result = execute_tool("grep", {"path": "."}, corpus=corpus)
        assert "pattern" in result["error"]

    def test_symlink_escape_is_blocked_for_grep_like_read_file(self, corpus: Corpus) -> None:
        corpus.root.joinpath("escape").symlink_to(corpus.root.parent / "docs-secret", target_is_directory=True)
        read = execute_tool("read_file", {"path": "escape/secret.mdx"}, corpus=corpus)
        assert "outside the allowed directory" in read["error"]
        grep = execute_tool("grep", {"pattern": "secret", "path": "."}, corpus=corpus)
        assert grep == {"matches": [], "totalFound": 0, "truncated": False}


class TestExecuteTool:
    def test_unknown_tool(self, corpus: Corpus) -> None:
        assert execute_tool("write_file", {"path": "x"}, corpus=corpus) == {"error": "Unknown tool: write_file"}

    def test_arguments_must_be_an_object(self, corpus: Corpus) -> None:
        result = execute_tool("list_files", '{"path": ', corpus=corpus)
        assert result == {"error": "Arguments for list_files must be a JSON object"}

    def test_unexpected_failure_is_reported_not_raised(self) -> None:
        class BrokenCorpus:
            def list_entries(self, path):
                raise RuntimeError("disk on fire")

        result = execute_tool("list_files", {"path": "."}, corpus=BrokenCorpus())  # type: ignore[arg-type]
        assert result == {"error": "list_files failed: disk on fire"}

    def test_result_content_is_json(self) -> None:
        payload = {"matches": [], "totalFound": 0, "truncated": False}
        assert json.loads(tool_result_content(payload)) == payload
