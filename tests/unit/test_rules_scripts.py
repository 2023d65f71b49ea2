"""Unit tests for script file rules."""

import pytest

from workflow_conventions.configuration.models import LinterConfig
from workflow_conventions.parsing.models import ScriptFile
from workflow_conventions.rules.scripts import (
    check_dry_run_flag,
    check_failure_tiers,
    check_script_header,
    check_secret_logging,
    is_secret_name,
    logged_identifiers,
    name_parts,
)

GOOD_SCRIPT = """/*
 * PURPOSE: Assign the commenter when they ask to take an issue.
 * CALLED BY: .github/workflows/assign.yml
 * MAJOR RULES:
 *   - Expected failures (user-facing) get a friendly comment.
 *   - Operational API failures are retried once.
 *   - System failures escalate to maintainers.
 */
const DRY_RUN = process.env.DRY_RUN === 'true';

module.exports = async ({ github, context, core }) => {
  if (DRY_RUN) {
    core.info(`Would assign ${context.actor}`);
    return;
  }
  await github.rest.issues.addAssignees({ owner, repo, issue_number, assignees: [context.actor] });
};
"""


def make_script(text: str, family: str = "slash") -> ScriptFile:
    """Build a script file for tests."""
    return ScriptFile(path=".github/scripts/test.js", text=text, family=family)


def test_good_script_passes_every_rule(linter_config: LinterConfig) -> None:
    """Test that a well-formed script passes all script rules."""
    script = make_script(GOOD_SCRIPT)
    for check in (check_script_header, check_dry_run_flag, check_secret_logging, check_failure_tiers):
        assert list(check(script, linter_config)) == []


def test_missing_header(linter_config: LinterConfig) -> None:
    """Test that a script without header is reported."""
    violations = list(check_script_header(make_script("'use strict';\n"), linter_config))
    assert [v.message for v in violations] == ["Script has no header comment block"]


def test_mutation_without_dry_run(linter_config: LinterConfig) -> None:
    """Test that a mutating call without the dry-run flag is reported at the call."""
    text = "// PURPOSE: a\nconst x = 1;\nawait github.rest.issues.createComment({ body });\nawait github.rest.issues.addLabels({});\n"
    violations = list(check_dry_run_flag(make_script(text), linter_config))
    assert len(violations) == 1
    assert violations[0].line == 3
    assert "DRY_RUN" in violations[0].message


def test_shell_mutation_without_dry_run(linter_config: LinterConfig) -> None:
    """Test that gh CLI and curl mutations are detected."""
    assert len(list(check_dry_run_flag(make_script('gh issue edit "$N" --add-label x\n', "hash"), linter_config))) == 1
    assert len(list(check_dry_run_flag(make_script("curl -s -X POST https://api.github.com\n", "hash"), linter_config))) == 1


def test_custom_dry_run_flag() -> None:
    """Test that a custom dry-run flag is honoured."""
    config = LinterConfig(dry_run_flag="PREVIEW")
    text = "if PREVIEW:\n    print('would comment')\nissue.createComment('hi')\n"
    assert list(check_dry_run_flag(make_script(text, "python"), config)) == []
    assert len(list(check_dry_run_flag(make_script("issue.createComment('hi')\n", "python"), config))) == 1


def test_read_only_script_needs_no_dry_run(linter_config: LinterConfig) -> None:
    """Test that scripts without mutating calls are not required to use the flag."""
    assert list(check_dry_run_flag(make_script("const issues = await github.rest.issues.listForRepo();\n"), linter_config)) == []


@pytest.mark.parametrize(
    "identifier,expected",
    [
        ("GITHUB_TOKEN", ["github", "token"]),
        ("apiKey", ["api", "key"]),
        ("HTTPToken", ["http", "token"]),
        ("token_exists", ["token", "exists"]),
    ],
)
def test_name_parts(identifier: str, expected: list[str]) -> None:
    """Test splitting identifiers on underscores and camelCase."""
    assert name_parts(identifier) == expected


@pytest.mark.parametrize(
    "identifier,expected",
    [
        ("GITHUB_TOKEN", True),
        ("apiKey", True),
        ("private_key", True),
        ("dbPassword", True),
        ("tokenExists", False),
        ("TOKEN_SET", False),
        ("key", False),
        ("keys", False),
        ("issueNumber", False),
    ],
)
def test_is_secret_name(identifier: str, expected: bool) -> None:
    """Test classification of secret-looking identifiers."""
    assert is_secret_name(identifier) is expected


@pytest.mark.parametrize(
    "line,expected",
    [
        ("console.log(`Token is ${token}`);", ["token"]),
        ('console.log("Missing token");', []),
        ("core.info(apiKey);", ["apiKey"]),
        ('echo "Using $GITHUB_TOKEN"', ["GITHUB_TOKEN"]),
        ('echo "$GH_TOKEN" | gh auth login --with-token', []),
        ('print(f"token={token}")', ["token", "f"]),
        ("const token = process.env.GITHUB_TOKEN;", []),
        ('echo "::add-mask::$API_TOKEN"', []),
        ("core.info(`::add-mask::${apiKey}`);", []),
    ],
)
def test_logged_identifiers(line: str, expected: list[str]) -> None:
    """Test which identifiers a logging call would print."""
    assert logged_identifiers(line) == expected


def test_secret_logging_reported(linter_config: LinterConfig) -> None:
    """Test that logging a secret is reported on its line."""
    text = "// PURPOSE: a\nconst token = process.env.GITHUB_TOKEN;\nconsole.log(`token: ${token}`);\nconsole.log('token set:', Boolean(tokenSet));\n"
    violations = list(check_secret_logging(make_script(text), linter_config))
    assert [(v.line, v.message) for v in violations] == [(3, "Logging call may print secret value(s): token")]


def test_failure_tiers_missing(linter_config: LinterConfig) -> None:
    """Test that undocumented failure tiers are listed."""
    text = "# PURPOSE: label issues\n# CALLED BY: label.yml\n# MAJOR RULES: expected failures are ignored\n"
    violations = list(check_failure_tiers(make_script(text, "hash"), linter_config))
    assert len(violations) == 1
    assert violations[0].message.endswith("operational, system")


def test_failure_tiers_skipped_without_header(linter_config: LinterConfig) -> None:
    """Test that the tier rule defers to the header rule when no header exists."""
    assert list(check_failure_tiers(make_script("echo hi\n", "hash"), linter_config)) == []


def test_failure_tiers_match_whole_words(linter_config: LinterConfig) -> None:
    """Test that tier keywords inside longer words do not count."""
    text = (
        "# PURPOSE: rapid labelling of capital letters in the filesystem\n"
        "# CALLED BY: label.yml\n"
        "# MAJOR RULES: unexpected input is skipped\n"
    )
    violations = list(check_failure_tiers(make_script(text, "hash"), linter_config))
    assert len(violations) == 1
    assert violations[0].message.endswith("expected, operational, system")


def test_failure_tiers_ignore_other_header_sections(linter_config: LinterConfig) -> None:
    """Test that only the MAJOR RULES section and the script body describe failure tiers."""
    text = (
        "# PURPOSE: Sync labels through the GitHub API for the system team.\n"
        "# CALLED BY: labels.yml\n"
        "# MAJOR RULES: Expected failures are reported to the user.\n"
        "echo syncing\n"
    )
    violations = list(check_failure_tiers(make_script(text, "hash"), linter_config))
    assert len(violations) == 1
    assert violations[0].message.endswith("operational, system")
    body = text + "# Operational API errors are retried; anything else escalates to a maintainer.\n"
    assert list(check_failure_tiers(make_script(body, "hash"), linter_config)) == []
