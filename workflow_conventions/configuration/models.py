"""Models for configuration between CLI arguments, environment variables and the config file."""

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from workflow_conventions.schemas.findings import Severity
from workflow_conventions.utils.constants import (
    DEFAULT_DOC_GLOBS,
    DEFAULT_DRY_RUN_FLAG,
    DEFAULT_HEADER_SECTIONS,
    DEFAULT_MUTATING_PATTERNS,
    DEFAULT_SCRIPT_DIRS,
    DEFAULT_SCRIPT_EXTENSIONS,
    DEFAULT_WORKFLOW_DIR,
)


class OutputFormat(str, Enum):
    """Enum for report output formats."""

    TEXT = "text"
    JSON = "json"
    GITHUB = "github"
    MARKDOWN = "markdown"


class RuleSettings(BaseModel):
    """Pydantic model for per-rule settings in the config file."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    severity: Severity | None = None


class LinterConfig(BaseModel):
    """Pydantic model for the linter configuration file."""

    model_config = ConfigDict(extra="forbid")

    workflow_dir: str = DEFAULT_WORKFLOW_DIR
    script_dirs: list[str] = Field(default_factory=lambda: list(DEFAULT_SCRIPT_DIRS))
    doc_globs: list[str] = Field(default_factory=lambda: list(DEFAULT_DOC_GLOBS))
    script_extensions: list[str] = Field(default_factory=lambda: list(DEFAULT_SCRIPT_EXTENSIONS))
    header_sections: list[str] = Field(default_factory=lambda: list(DEFAULT_HEADER_SECTIONS))
    dry_run_flag: str = DEFAULT_DRY_RUN_FLAG
    mutating_patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_MUTATING_PATTERNS))
    rules: dict[str, RuleSettings] = Field(default_factory=dict)

    @field_validator("script_extensions")
    @classmethod
    def normalize_extensions(cls, value: list[str]) -> list[str]:
        """Lower-case extensions and ensure each starts with a dot."""
        normalized: list[str] = []
        for extension in value:
            extension = extension.strip().lower()
            if not extension:
                raise ValueError("script extensions must not be empty")
            normalized.append(extension if extension.startswith(".") else f".{extension}")
        return normalized

    @field_validator("header_sections")
    @classmethod
    def require_header_sections(cls, value: list[str]) -> list[str]:
        """Reject blank header section names."""
        if any(not section.strip() for section in value):
            raise ValueError("header sections must not be blank")
        return [section.strip() for section in value]

    @field_validator("mutating_patterns")
    @classmethod
    def compile_mutating_patterns(cls, value: list[str]) -> list[str]:
        """Ensure every mutating pattern is a valid regular expression."""
        for pattern in value:
            try:
                re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"invalid mutating pattern {pattern!r}: {exc}") from exc
        return value

    @field_validator("dry_run_flag")
    @classmethod
    def require_dry_run_flag(cls, value: str) -> str:
        """Reject a blank dry-run flag."""
        if not value.strip():
            raise ValueError("dry_run_flag must not be blank")
        return value.strip()

    def rule_enabled(self, rule_id: str) -> bool:
        """Return whether the rule is enabled."""
        settings = self.rules.get(rule_id)
        return settings is None or settings.enabled

    def severity_for(self, rule_id: str, default: Severity) -> Severity:
        """Return the configured severity for a rule, falling back to its default."""
        settings = self.rules.get(rule_id)
        if settings is None or settings.severity is None:
            return default
        return settings.severity


@dataclass
class BaseConfig:
    """Configuration class for the workflow-conventions CLI."""

    debug: bool
    output_format: OutputFormat
    fail_on: Severity
    summary_file: Path | None
    linter: LinterConfig = field(default_factory=LinterConfig)


@dataclass
class LintDocsConfig(BaseConfig):
    """Configuration class for the lint-docs command."""

    paths: list[Path] = field(default_factory=list)


@dataclass
class LintRepoConfig(BaseConfig):
    """Configuration class for the lint-repo command."""

    root: Path = field(default_factory=Path.cwd)
