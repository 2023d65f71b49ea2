"""Lint rules for workflow guides, workflow files and companion scripts."""

# Importing the rule modules registers their rules.
from . import docs, scripts, workflow_files  # noqa: F401
from .registry import RULES, Rule, RuleTarget, Violation, rules_for, unknown_rule_ids

__all__ = [
    "RULES",
    "Rule",
    "RuleTarget",
    "Violation",
    "rules_for",
    "unknown_rule_ids",
]
