"""Contains exceptions raised when reconciling application configuration."""

from typing import Any


class ConfigurationFileError(Exception):
    """Raised when the linter configuration file cannot be loaded or validated."""

    def __init__(self, path: str, errors: list[dict[str, Any]]) -> None:
        """Initializes the exception with the file path and every error found in it."""
        super().__init__(f"Invalid linter configuration file: {path}")
        self.path = path
        self.errors = errors


class RequiredConfigurationElementError(Exception):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, cli_name: str, env_name: str) -> None:
        """Initializes the exception with the name of the missing element."""
        super().__init__(f"Missing required configuration element: {name}")
        self.name = name
        self.cli_name = cli_name
        self.env_name = env_name


class UnknownRuleError(Exception):
    """Raised when configuration references a rule ID that does not exist."""

    def __init__(self, rule_ids: list[str]) -> None:
        super().__init__(f"Unknown rule ID(s) in configuration: {', '.join(rule_ids)}")
        self.rule_ids = rule_ids
