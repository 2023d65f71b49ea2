"""Classifies fenced code blocks as workflow examples, script examples or neither."""

from pathlib import PurePosixPath
from typing import Any

import structlog
from ruamel.yaml.error import YAMLError
from structlog.stdlib import BoundLogger

from workflow_conventions.parsing.models import CodeBlock, ExampleKind
from workflow_conventions.utils.constants import (
    CONSOLE_PROMPT_PATTERN,
    SCRIPT_EXTENSION_FAMILIES,
    SCRIPT_LANGUAGE_FAMILIES,
    TOP_LEVEL_JOBS_PATTERN,
    TOP_LEVEL_ON_PATTERN,
    WORKFLOW_LANGUAGES,
)
from workflow_conventions.utils.yaml import load_yaml_text

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


def is_workflow_mapping(data: Any) -> bool:
    """Return True if parsed YAML has the shape of a workflow.

    YAML 1.1 loaders read a bare `on` key as boolean True, so both spellings
    count as the trigger key.
    """
    if not isinstance(data, dict):
        return False
    return "jobs" in data and ("on" in data or True in data)


def looks_like_workflow(text: str) -> bool:
    """Return True if YAML text describes a workflow.

    Examples in guides are often abridged (e.g., `...` placeholders) and fail
    to parse, or hold values the loader rejects such as impossible dates; those
    fall back to a search for top-level `on:` and `jobs:` keys.
    """
    try:
        data = load_yaml_text(text)
    except (YAMLError, ValueError) as exc:
        logger.debug("YAML example did not parse, falling back to key search", error=str(exc))
        return bool(TOP_LEVEL_ON_PATTERN.search(text) and TOP_LEVEL_JOBS_PATTERN.search(text))
    return is_workflow_mapping(data)


def _is_console_transcript(text: str) -> bool:
    """Return True if the block opens with a `$ command` prompt, i.e. a console transcript."""
    lines = [line for line in text.splitlines() if line.strip()]
    return bool(lines) and CONSOLE_PROMPT_PATTERN.match(lines[0]) is not None


def script_family(language_or_path: str) -> str | None:
    """Map a fence language or a file path to its comment style family."""
    key = language_or_path.lower()
    if key in SCRIPT_LANGUAGE_FAMILIES:
        return SCRIPT_LANGUAGE_FAMILIES[key]
    return SCRIPT_EXTENSION_FAMILIES.get(PurePosixPath(key).suffix)


def classify_block(block: CodeBlock) -> ExampleKind:
    """Classify a fenced code block."""
    if block.language in WORKFLOW_LANGUAGES:
        return ExampleKind.WORKFLOW if looks_like_workflow(block.content) else ExampleKind.OTHER
    family = SCRIPT_LANGUAGE_FAMILIES.get(block.language)
    if family is None:
        return ExampleKind.OTHER
    if family == "hash" and _is_console_transcript(block.content):
        return ExampleKind.OTHER
    return ExampleKind.SCRIPT
