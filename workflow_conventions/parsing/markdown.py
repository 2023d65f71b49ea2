"""Extracts fenced code blocks from Markdown documents."""

import re

import structlog
from structlog.stdlib import BoundLogger

from workflow_conventions.parsing.models import CodeBlock
from workflow_conventions.utils.constants import ATX_HEADING_PATTERN, FENCE_OPEN_PATTERN

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


def _closes_fence(line: str, fence: str) -> bool:
    """A closing fence uses the opening character and is at least as long."""
    pattern = rf"^ {{0,3}}{re.escape(fence[0])}{{{len(fence)},}}[ \t]*$"
    return re.match(pattern, line) is not None


def _strip_indent(line: str, indent: int) -> str:
    """Remove up to `indent` leading spaces, as CommonMark does for indented fences."""
    removed = 0
    while removed < indent and removed < len(line) and line[removed] == " ":
        removed += 1
    return line[removed:]


def extract_code_blocks(text: str, path: str | None = None) -> list[CodeBlock]:
    """Extract every fenced code block from a Markdown document.

    Args:
        text (str): The Markdown document.
        path (str | None): The document path, recorded on each block.

    Returns:
        list[CodeBlock]: Blocks in document order. An unterminated fence runs to
        the end of the document.
    """
    blocks: list[CodeBlock] = []
    lines = text.splitlines()
    heading: str | None = None
    index = 0
    while index < len(lines):
        line = lines[index]
        opening = FENCE_OPEN_PATTERN.match(line)
        # Backtick fences may not carry backticks in their info string.
        if opening is None or (opening.group(2)[0] == "`" and "`" in opening.group(3)):
            heading_match = ATX_HEADING_PATTERN.match(line)
            if heading_match is not None:
                heading = (heading_match.group(2) or "").strip() or None
            index += 1
            continue

        indent, fence, info = opening.groups()
        body: list[str] = []
        cursor = index + 1
        while cursor < len(lines) and not _closes_fence(lines[cursor], fence):
            body.append(_strip_indent(lines[cursor], len(indent)))
            cursor += 1
        if cursor >= len(lines):
            logger.debug("Unterminated code fence runs to end of document", path=path, line=index + 1)

        info = info.strip()
        language = info.split()[0].lower().strip("{}.") if info else ""
        blocks.append(
            CodeBlock(
                language=language,
                info=info,
                content="\n".join(body),
                start_line=index + 1,
                heading=heading,
                path=path,
            )
        )
        index = cursor + 1

    logger.debug("Extracted code blocks", path=path, block_count=len(blocks))
    return blocks
