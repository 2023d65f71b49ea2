"""Unit tests for configuration models."""

import pytest
from pydantic import ValidationError

from workflow_conventions.configuration.models import LinterConfig, RuleSettings
from workflow_conventions.schemas.findings import Severity


def test_defaults_are_independent() -> None:
    """Test that list defaults are not shared between instances."""
    first = LinterConfig()
    first.script_dirs.append("other")
    assert LinterConfig().script_dirs == [".github/scripts"]


@pytest.mark.parametrize(
    "field,value",
    [
        ("script_extensions", [""]),
        ("header_sections", ["PURPOSE", " "]),
        ("mutating_patterns", ["[unclosed"]),
        ("dry_run_flag", "  "),
    ],
)
def test_invalid_values_rejected(field: str, value: object) -> None:
    """Test validation of configuration values."""
    with pytest.raises(ValidationError):
        LinterConfig.model_validate({field: value})


def test_rule_settings_lookup() -> None:
    """Test rule enablement and severity lookups."""
    config = LinterConfig(rules={"SCR004": RuleSettings(enabled=False), "SCR002": RuleSettings(severity=Severity.ERROR)})
    assert config.rule_enabled("SCR004") is False
    assert config.rule_enabled("SCR001") is True
    assert config.severity_for("SCR002", Severity.WARNING) == Severity.ERROR
    assert config.severity_for("SCR001", Severity.ERROR) == Severity.ERROR
