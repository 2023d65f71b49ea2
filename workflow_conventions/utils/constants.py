"""Shared constants used across the application."""

# This file is intended to hold shared constants.

import re

# Markdown Constants
# ------------------

FENCE_OPEN_PATTERN = re.compile(r"^( {0,3})(`{3,}|~{3,})(.*)$")
"""Pattern to match an opening code fence (backticks or tildes, up to 3 spaces of indentation)."""

ATX_HEADING_PATTERN = re.compile(r"^ {0,3}(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
"""Pattern to match an ATX heading (e.g., ## Commenting scripts)."""

MARKDOWN_SUFFIXES = (".md", ".markdown")
"""File suffixes treated as Markdown documents."""

# Example Classification Constants
# --------------------------------

WORKFLOW_LANGUAGES = frozenset({"yaml", "yml"})
"""Fence languages that may hold a workflow example."""

SCRIPT_LANGUAGE_FAMILIES: dict[str, str] = {
    "javascript": "slash",
    "js": "slash",
    "mjs": "slash",
    "cjs": "slash",
    "typescript": "slash",
    "ts": "slash",
    "bash": "hash",
    "sh": "hash",
    "shell": "hash",
    "zsh": "hash",
    "python": "python",
    "py": "python",
}
"""Fence languages that hold a script example, mapped to their comment style family."""

SCRIPT_EXTENSION_FAMILIES: dict[str, str] = {
    ".js": "slash",
    ".cjs": "slash",
    ".mjs": "slash",
    ".ts": "slash",
    ".sh": "hash",
    ".bash": "hash",
    ".py": "python",
}
"""Script file extensions mapped to their comment style family."""

CONSOLE_PROMPT_PATTERN = re.compile(r"^\s*\$\s+\S")
"""Pattern to match an interactive shell prompt line (e.g., $ npm test)."""

TOP_LEVEL_ON_PATTERN = re.compile(r"""^(?:on|"on"|'on')\s*:""", re.MULTILINE)
"""Pattern to match a top-level workflow trigger key."""

TOP_LEVEL_JOBS_PATTERN = re.compile(r"^jobs\s*:", re.MULTILINE)
"""Pattern to match a top-level workflow jobs key."""

# Default Linter Settings
# -----------------------

DEFAULT_CONFIG_FILENAME = ".workflow-conventions.yaml"
"""Configuration file looked up at the repository root when no path is given."""

DEFAULT_WORKFLOW_DIR = ".github/workflows"
"""Default directory holding workflow files, relative to the repository root."""

DEFAULT_SCRIPT_DIRS = [".github/scripts"]
"""Default directories holding companion scripts, relative to the repository root."""

DEFAULT_DOC_GLOBS = ["docs/**/*.md"]
"""Default globs selecting Markdown guides, relative to the repository root."""

DEFAULT_SCRIPT_EXTENSIONS = [".js", ".cjs", ".mjs", ".ts", ".sh", ".py"]
"""Default extensions that mark a token as a script path."""

DEFAULT_HEADER_SECTIONS = ["PURPOSE", "CALLED BY", "MAJOR RULES"]
"""Sections every script header block must contain."""

DEFAULT_DRY_RUN_FLAG = "DRY_RUN"
"""Name of the flag that replaces mutating actions with log statements."""

DEFAULT_MUTATING_PATTERNS = [
    r"\baddAssignees\b",
    r"\bremoveAssignees\b",
    r"\bcreateComment\b",
    r"\baddLabels\b",
    r"\bremoveLabel\b",
    r"\.update\(",
    r"\.lock\(",
    r"\bgh\s+(?:issue|pr)\s+(?:edit|comment|close)\b",
    r"\bcurl\b.*-X\s*(?:POST|PATCH|PUT|DELETE)\b",
]
"""Default patterns identifying calls that mutate repository state."""

# Workflow Rule Constants
# -----------------------

ISSUE_EVENT_TRIGGERS = frozenset(
    {
        "issues",
        "issue_comment",
        "pull_request",
        "pull_request_target",
        "pull_request_review",
        "pull_request_review_comment",
    }
)
"""Triggers whose runs act on a single issue or pull request."""

SECRET_EXPRESSION_PATTERN = re.compile(r"\$\{\{\s*secrets\.[A-Za-z0-9_]+\s*\}\}")
"""Pattern to match a secrets expression (e.g., ${{ secrets.GITHUB_TOKEN }})."""

PRINT_COMMAND_PATTERN = re.compile(r"\b(?:echo|printf|print|console\.log|core\.info|Write-Host)\b")
"""Pattern to match a command that writes its arguments to the job log."""

# Script Rule Constants
# ---------------------

LOG_CALL_PATTERN = re.compile(
    r"\b(?:console\.(?:log|info|warn|error|debug)"
    r"|core\.(?:info|notice|warning|error|debug)"
    r"|logger\.\w+"
    r"|logging\.(?:debug|info|warning|error|exception|critical)"
    r"|print|echo|printf)\b"
)
"""Pattern to match a logging call in a script."""

SECRET_NAME_PARTS = frozenset({"token", "secret", "secrets", "password", "passwd", "apikey", "pat", "credential", "credentials"})
"""Identifier parts that mark a value as secret."""

KEY_QUALIFIERS = frozenset({"api", "private", "access", "secret", "signing", "deploy", "ssh"})
"""Parts that, directly before `key`, mark a value as secret (e.g., api_key, privateKey)."""

SAFE_NAME_SUFFIXES = frozenset({"exists", "set", "present", "length", "count", "name", "names"})
"""Trailing identifier parts that mark a secret-looking name as safe to log."""

FAILURE_TIER_PATTERNS: dict[str, re.Pattern[str]] = {
    "expected": re.compile(r"\b(?:expected|user[\s-]facing)\b", re.IGNORECASE),
    "operational": re.compile(r"\b(?:operational|api)\b", re.IGNORECASE),
    "system": re.compile(r"\b(?:system|escalat\w*|maintainers?)\b", re.IGNORECASE),
}
"""Whole-word patterns naming each failure tier in a script's rules section or body."""

RULES_SECTION = "MAJOR RULES"
"""Header section that describes how the script handles failures."""

DIVERTED_OUTPUT_PATTERN = re.compile(r"(?<!\|)\|(?!\|)|>")
"""Pattern to match a shell pipe or redirect, which keeps output out of the job log."""

ADD_MASK_COMMAND = "::add-mask::"
"""Workflow command that registers a value to be masked in the job log."""
