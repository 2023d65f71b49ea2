"""Internal data models for parsed documents, workflows and scripts."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ExampleKind(Enum):
    """Enum for the kind of example a fenced code block holds."""

    WORKFLOW = "workflow"
    SCRIPT = "script"
    OTHER = "other"


@dataclass
class CodeBlock:
    """A fenced code block extracted from a Markdown document."""

    language: str
    info: str
    content: str
    start_line: int
    heading: str | None = None
    path: str | None = None

    def file_line(self, content_line: int) -> int:
        """Translate a 1-based line within the block body to a line in the document."""
        return self.start_line + content_line


@dataclass
class HeaderBlock:
    """The leading comment block of a script with comment markers removed."""

    text: str
    start_line: int
    end_line: int


@dataclass
class ScriptInvocation:
    """A script path invoked by a workflow step."""

    path: str
    line: int
    job_id: str
    source: str


@dataclass
class WorkflowFile:
    """A workflow file loaded from disk."""

    path: str
    text: str
    data: dict[str, Any]
    root: str | None = None


@dataclass
class ScriptFile:
    """A companion script file loaded from disk."""

    path: str
    text: str
    family: str
