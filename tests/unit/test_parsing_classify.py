"""Unit tests for example classification."""

import pytest

from workflow_conventions.parsing.classify import classify_block, is_workflow_mapping, looks_like_workflow, script_family
from workflow_conventions.parsing.models import CodeBlock, ExampleKind


def make_block(language: str, content: str) -> CodeBlock:
    """Build a code block for tests."""
    return CodeBlock(language=language, info=language, content=content, start_line=1)


WORKFLOW = """name: Assign
on:
  issue_comment:
    types: [created]
jobs:
  assign:
    runs-on: ubuntu-latest
    steps:
      - run: node .github/scripts/assign.js
"""

ABRIDGED_WORKFLOW = """on:
  issues:
jobs:
  triage:
    steps:
      - uses: actions/checkout@v4
      ...
      - run: [unbalanced
"""


def test_workflow_example_is_classified() -> None:
    """Test that YAML with `on` and `jobs` is a workflow example."""
    assert classify_block(make_block("yaml", WORKFLOW)) == ExampleKind.WORKFLOW


def test_non_workflow_yaml_is_other() -> None:
    """Test that plain YAML configuration is not a workflow example."""
    assert classify_block(make_block("yml", "labels:\n  - bug\n")) == ExampleKind.OTHER


def test_abridged_workflow_falls_back_to_key_search() -> None:
    """Test that unparsable YAML with top-level `on:` and `jobs:` still counts as a workflow."""
    assert looks_like_workflow(ABRIDGED_WORKFLOW) is True


def test_unparsable_yaml_without_keys_is_not_workflow() -> None:
    """Test that unparsable YAML without workflow keys is not a workflow."""
    assert looks_like_workflow("key: [unbalanced\n") is False


def test_boolean_on_key_counts_as_trigger() -> None:
    """Test that a YAML 1.1 style boolean `on` key is accepted."""
    assert is_workflow_mapping({True: {"issues": None}, "jobs": {}}) is True
    assert is_workflow_mapping(["on", "jobs"]) is False


@pytest.mark.parametrize("language", ["javascript", "js", "ts", "bash", "sh", "python"])
def test_script_languages_are_scripts(language: str) -> None:
    """Test that script fence languages are script examples."""
    assert classify_block(make_block(language, "x = 1")) == ExampleKind.SCRIPT


def test_console_transcript_is_other() -> None:
    """Test that a shell block holding a console session is not a script example."""
    assert classify_block(make_block("bash", "$ npm test\nok\n")) == ExampleKind.OTHER


def test_unknown_language_is_other() -> None:
    """Test that other fence languages are ignored."""
    assert classify_block(make_block("json", "{}")) == ExampleKind.OTHER


@pytest.mark.parametrize(
    "key,expected",
    [
        ("js", "slash"),
        ("TypeScript", "slash"),
        ("zsh", "hash"),
        ("py", "python"),
        (".github/scripts/assign.cjs", "slash"),
        ("scripts/check.sh", "hash"),
        ("tools/validate.py", "python"),
        ("README.md", None),
    ],
)
def test_script_family(key: str, expected: str | None) -> None:
    """Test mapping of languages and paths to comment style families."""
    assert script_family(key) == expected


def test_impossible_date_falls_back_to_key_search() -> None:
    """Test that YAML the loader rejects for an out-of-range date still counts as a workflow."""
    assert looks_like_workflow("on: push\nenv:\n  SINCE: 2024-02-30\njobs:\n  a:\n    steps: []\n") is True
