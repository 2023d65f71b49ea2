"""Pydantic schema for lint findings and reports."""

from enum import Enum

from pydantic import BaseModel, Field, computed_field


class Severity(str, Enum):
    """Enum for finding severities."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Numeric rank of the severity; higher is more severe."""
        return _SEVERITY_RANKS[self]


_SEVERITY_RANKS = {Severity.INFO: 0, Severity.WARNING: 1, Severity.ERROR: 2}


class Finding(BaseModel):
    """Pydantic model for a single rule violation at a file location."""

    rule_id: str
    severity: Severity
    message: str
    path: str
    line: int = 1
    hint: str | None = None


class LintReport(BaseModel):
    """Pydantic model for the result of a lint run."""

    findings: list[Finding] = Field(default_factory=list)
    files_checked: int = 0
    blocks_checked: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def error_count(self) -> int:
        """Number of error findings."""
        return sum(1 for finding in self.findings if finding.severity == Severity.ERROR)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def warning_count(self) -> int:
        """Number of warning findings."""
        return sum(1 for finding in self.findings if finding.severity == Severity.WARNING)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def info_count(self) -> int:
        """Number of info findings."""
        return sum(1 for finding in self.findings if finding.severity == Severity.INFO)

    def has_failures(self, threshold: Severity = Severity.ERROR) -> bool:
        """Return True if any finding is at or above the threshold severity."""
        return any(finding.severity.rank >= threshold.rank for finding in self.findings)

    def sorted_findings(self) -> list[Finding]:
        """Return findings ordered by path, line and rule."""
        return sorted(self.findings, key=lambda f: (f.path, f.line, f.rule_id))

    def merge(self, other: "LintReport") -> "LintReport":
        """Return a new report combining this report with another."""
        return LintReport(
            findings=[*self.findings, *other.findings],
            files_checked=self.files_checked + other.files_checked,
            blocks_checked=self.blocks_checked + other.blocks_checked,
        )
