"""Rules for companion script files invoked by workflows."""

import re
from typing import Iterator

from workflow_conventions.configuration.models import LinterConfig
from workflow_conventions.parsing.headers import extract_header_block, find_missing_sections, section_text
from workflow_conventions.parsing.models import ScriptFile
from workflow_conventions.rules.registry import RuleTarget, Violation, register_rule
from workflow_conventions.schemas.findings import Severity
from workflow_conventions.utils.constants import (
    ADD_MASK_COMMAND,
    DIVERTED_OUTPUT_PATTERN,
    FAILURE_TIER_PATTERNS,
    KEY_QUALIFIERS,
    LOG_CALL_PATTERN,
    RULES_SECTION,
    SAFE_NAME_SUFFIXES,
    SECRET_NAME_PARTS,
)

_STRING_LITERAL_PATTERN = re.compile(r"""'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|`(?:[^`\\]|\\.)*`""")
_INTERPOLATION_PATTERN = re.compile(r"\$\{([^}]*)\}|\$([A-Za-z_][A-Za-z0-9_]*)")
_FSTRING_FIELD_PATTERN = re.compile(r"\{([^{}]+)\}")
_IDENTIFIER_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NAME_PART_PATTERN = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z0-9]+")


def check_header_sections(source: str, family: str, sections: list[str], subject: str = "Script") -> Iterator[Violation]:
    """Yield a violation if the script header is missing or lacks required sections."""
    header = extract_header_block(source, family)
    required = ", ".join(f"{section}:" for section in sections)
    if header is None:
        yield Violation(
            line=1,
            message=f"{subject} has no header comment block",
            hint=f"Start the script with a comment block containing {required}",
        )
        return
    missing = find_missing_sections(header.text, sections)
    if missing:
        yield Violation(
            line=header.start_line,
            message=f"{subject} header is missing section(s): {', '.join(missing)}",
            hint=f"The header must contain {required}",
        )


def name_parts(identifier: str) -> list[str]:
    """Split an identifier into lower-case parts on underscores and camelCase boundaries."""
    parts: list[str] = []
    for chunk in identifier.split("_"):
        parts.extend(part.lower() for part in _NAME_PART_PATTERN.findall(chunk))
    return parts


def is_secret_name(identifier: str) -> bool:
    """Return True if an identifier names a secret value."""
    parts = name_parts(identifier)
    if not parts or parts[-1] in SAFE_NAME_SUFFIXES:
        return False
    if any(part in SECRET_NAME_PARTS for part in parts):
        return True
    return any(part == "key" and previous in KEY_QUALIFIERS for previous, part in zip(parts, parts[1:]))


def logged_identifiers(line: str) -> list[str]:
    """Return the identifiers whose values a logging call on this line would print."""
    call = LOG_CALL_PATTERN.search(line)
    if call is None:
        return []
    rest = line[call.end() :]
    # Masking a value prints a workflow command, not the value.
    if ADD_MASK_COMMAND in rest:
        return []
    # Piped or redirected shell output does not reach the log.
    if call.group(0) in ("echo", "printf") and DIVERTED_OUTPUT_PATTERN.search(rest):
        return []
    names: list[str] = []
    for match in _INTERPOLATION_PATTERN.finditer(rest):
        expression = match.group(1) if match.group(1) is not None else match.group(2)
        names.extend(_IDENTIFIER_PATTERN.findall(expression))
    if re.search(r"\bf['\"]", rest):
        for match in _FSTRING_FIELD_PATTERN.finditer(rest):
            names.extend(_IDENTIFIER_PATTERN.findall(match.group(1)))
    # Bare arguments; shell words are literal text unless `$`-prefixed.
    if call.group(0) not in ("echo", "printf"):
        names.extend(_IDENTIFIER_PATTERN.findall(_STRING_LITERAL_PATTERN.sub(" ", rest)))
    return names


@register_rule(
    "SCR001",
    "Scripts start with a PURPOSE / CALLED BY / MAJOR RULES header",
    Severity.ERROR,
    RuleTarget.SCRIPT_FILE,
)
def check_script_header(script: ScriptFile, config: LinterConfig) -> Iterator[Violation]:
    """Every script opens with a header block carrying the required sections."""
    yield from check_header_sections(script.text, script.family, config.header_sections)


@register_rule(
    "SCR002",
    "Scripts that mutate repository state honour the dry-run flag",
    Severity.WARNING,
    RuleTarget.SCRIPT_FILE,
)
def check_dry_run_flag(script: ScriptFile, config: LinterConfig) -> Iterator[Violation]:
    """A script containing a mutating call references the dry-run flag."""
    if config.dry_run_flag in script.text:
        return
    patterns = [re.compile(pattern) for pattern in config.mutating_patterns]
    for number, line in enumerate(script.text.splitlines(), start=1):
        for pattern in patterns:
            if pattern.search(line):
                yield Violation(
                    line=number,
                    message=f"Script performs a mutating call but never checks {config.dry_run_flag}",
                    hint=f"Guard mutating calls with {config.dry_run_flag} and log the intended action instead",
                )
                return


@register_rule(
    "SCR003",
    "Scripts never log secret values",
    Severity.ERROR,
    RuleTarget.SCRIPT_FILE,
)
def check_secret_logging(script: ScriptFile, config: LinterConfig) -> Iterator[Violation]:
    """No logging call interpolates an identifier that names a secret."""
    for number, line in enumerate(script.text.splitlines(), start=1):
        secrets = sorted({name for name in logged_identifiers(line) if is_secret_name(name)})
        if secrets:
            yield Violation(
                line=number,
                message=f"Logging call may print secret value(s): {', '.join(secrets)}",
                hint="Log whether the secret is set, never its value",
            )


@register_rule(
    "SCR004",
    "Scripts describe expected, operational and system failure tiers",
    Severity.INFO,
    RuleTarget.SCRIPT_FILE,
)
def check_failure_tiers(script: ScriptFile, config: LinterConfig) -> Iterator[Violation]:
    """The script's MAJOR RULES section or body names how each failure tier is handled."""
    header = extract_header_block(script.text, script.family)
    if header is None:
        return
    sections = config.header_sections if RULES_SECTION in config.header_sections else [*config.header_sections, RULES_SECTION]
    rules = section_text(header.text, RULES_SECTION, sections) or ""
    body = "\n".join(script.text.splitlines()[header.end_line :])
    missing = [tier for tier, pattern in FAILURE_TIER_PATTERNS.items() if not (pattern.search(rules) or pattern.search(body))]
    if missing:
        yield Violation(
            line=header.start_line,
            message=f"Script does not describe handling for failure tier(s): {', '.join(missing)}",
            hint="Describe expected (user-facing), operational (API) and system (maintainer escalation) failures",
        )
