"""Registry of lint rules.

Each rule is a plain function registered with `register_rule`. A rule receives
its subject (a code block, a workflow file or a script file) and the linter
configuration, and yields `Violation`s. The engine turns violations into
`Finding`s, applying the configured severity.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

from workflow_conventions.configuration.models import LinterConfig
from workflow_conventions.schemas.findings import Severity


class RuleTarget(str, Enum):
    """Enum for the subject a rule inspects."""

    DOC_WORKFLOW = "doc-workflow"
    DOC_SCRIPT = "doc-script"
    WORKFLOW_FILE = "workflow-file"
    SCRIPT_FILE = "script-file"


@dataclass
class Violation:
    """A rule violation before severity and path are attached."""

    line: int
    message: str
    hint: str | None = None


RuleCheck = Callable[[Any, LinterConfig], Iterable[Violation]]


@dataclass(frozen=True)
class Rule:
    """A registered lint rule."""

    rule_id: str
    summary: str
    default_severity: Severity
    target: RuleTarget
    check: RuleCheck


RULES: dict[str, Rule] = {}


def register_rule(rule_id: str, summary: str, default_severity: Severity, target: RuleTarget) -> Callable[[RuleCheck], RuleCheck]:
    """Register the decorated function as a rule."""

    def decorator(check: RuleCheck) -> RuleCheck:
        if rule_id in RULES:
            raise ValueError(f"Rule {rule_id} is already registered")
        RULES[rule_id] = Rule(rule_id=rule_id, summary=summary, default_severity=default_severity, target=target, check=check)
        return check

    return decorator


def rules_for(target: RuleTarget, config: LinterConfig) -> list[Rule]:
    """Return the enabled rules for a target, ordered by rule ID."""
    return [rule for rule_id, rule in sorted(RULES.items()) if rule.target == target and config.rule_enabled(rule_id)]


def unknown_rule_ids(rule_ids: Iterable[str]) -> list[str]:
    """Return the rule IDs that are not registered, sorted."""
    return sorted(rule_id for rule_id in set(rule_ids) if rule_id not in RULES)
