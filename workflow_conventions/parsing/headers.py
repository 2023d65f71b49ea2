"""Extracts and inspects the header comment block of a script.

A header block is the leading run of comments in a script, after an optional
shebang and blank lines. Conventions require it to carry labelled sections such
as `PURPOSE:`, `CALLED BY:` and `MAJOR RULES:`.
"""

import re

from workflow_conventions.parsing.models import HeaderBlock

_DOCSTRING_OPEN_PATTERN = re.compile(r'^[rRuU]?("""|\'\'\')')


def _first_content_index(lines: list[str]) -> int:
    index = 0
    if lines and lines[0].startswith("#!"):
        index = 1
    while index < len(lines) and not lines[index].strip():
        index += 1
    return index


def _slash_header(lines: list[str], start: int) -> HeaderBlock | None:
    first = lines[start].lstrip()
    if first.startswith("/*"):
        collected: list[str] = []
        for index in range(start, len(lines)):
            line = lines[index].strip()
            closed = "*/" in line
            line = line.split("*/", 1)[0]
            if index == start:
                line = line[2:].lstrip("*")
            line = re.sub(r"^\*\s?", "", line.strip())
            collected.append(line)
            if closed:
                return HeaderBlock(text="\n".join(collected).strip("\n"), start_line=start + 1, end_line=index + 1)
        return HeaderBlock(text="\n".join(collected).strip("\n"), start_line=start + 1, end_line=len(lines))
    if first.startswith("//"):
        return _line_comment_header(lines, start, "//")
    return None


def _line_comment_header(lines: list[str], start: int, marker: str) -> HeaderBlock | None:
    collected: list[str] = []
    index = start
    while index < len(lines) and lines[index].lstrip().startswith(marker):
        text = lines[index].lstrip()[len(marker) :]
        text = text.lstrip(marker[0])
        collected.append(text[1:] if text.startswith(" ") else text)
        index += 1
    if not collected:
        return None
    return HeaderBlock(text="\n".join(collected), start_line=start + 1, end_line=index)


def _docstring_header(lines: list[str], start: int) -> HeaderBlock | None:
    opening = _DOCSTRING_OPEN_PATTERN.match(lines[start].lstrip())
    if opening is None:
        return None
    quote = opening.group(1)
    first = lines[start].lstrip()[opening.end() :]
    if quote in first:
        return HeaderBlock(text=first.split(quote, 1)[0].strip(), start_line=start + 1, end_line=start + 1)
    collected = [first]
    for index in range(start + 1, len(lines)):
        if quote in lines[index]:
            collected.append(lines[index].split(quote, 1)[0])
            return HeaderBlock(text="\n".join(collected).strip("\n"), start_line=start + 1, end_line=index + 1)
        collected.append(lines[index])
    return HeaderBlock(text="\n".join(collected).strip("\n"), start_line=start + 1, end_line=len(lines))


def extract_header_block(source: str, family: str) -> HeaderBlock | None:
    """Return the header comment block of a script, or None if it has none.

    Args:
        source (str): The script source.
        family (str): Comment style family: "slash" (JS/TS), "hash" (shell) or "python".

    Returns:
        HeaderBlock | None: The header with comment markers removed. Line numbers
        are 1-based and relative to the start of `source`.
    """
    lines = source.splitlines()
    start = _first_content_index(lines)
    if start >= len(lines):
        return None
    if family == "slash":
        return _slash_header(lines, start)
    if family == "python":
        comments = _line_comment_header(lines, start, "#")
        if comments is None:
            return _docstring_header(lines, start)
        # A module docstring may follow leading comments (e.g., an encoding pragma).
        after = comments.end_line
        while after < len(lines) and not lines[after].strip():
            after += 1
        docstring = _docstring_header(lines, after) if after < len(lines) else None
        if docstring is None:
            return comments
        return HeaderBlock(
            text=f"{comments.text}\n{docstring.text}",
            start_line=comments.start_line,
            end_line=docstring.end_line,
        )
    return _line_comment_header(lines, start, "#")


def section_pattern(section: str) -> re.Pattern[str]:
    """Build the pattern matching a labelled header section (e.g., `CALLED BY:`)."""
    words = r"[\s_-]+".join(re.escape(word) for word in section.split())
    return re.compile(rf"^[^\w\n]*{words}\s*:", re.IGNORECASE | re.MULTILINE)


def find_missing_sections(header_text: str, sections: list[str]) -> list[str]:
    """Return the required sections absent from a header, in the order given."""
    return [section for section in sections if section_pattern(section).search(header_text) is None]


def section_text(header_text: str, section: str, sections: list[str]) -> str | None:
    """Return the body of a labelled section, up to the next known section label."""
    match = section_pattern(section).search(header_text)
    if match is None:
        return None
    end = len(header_text)
    for other in sections:
        if other == section:
            continue
        other_match = section_pattern(other).search(header_text, match.end())
        if other_match is not None:
            end = min(end, other_match.start())
    return header_text[match.end() : end].strip()
