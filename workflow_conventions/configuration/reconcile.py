"""Reconciles configuration between CLI arguments, environment variables and the config file.

Precedence, highest first: CLI option, environment variable, config file, default.
"""

from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError
from ruamel.yaml.error import YAMLError
from structlog.stdlib import BoundLogger

from workflow_conventions.configuration.env import Settings, get_settings
from workflow_conventions.configuration.exceptions import (
    ConfigurationFileError,
    RequiredConfigurationElementError,
    UnknownRuleError,
)
from workflow_conventions.configuration.models import LintDocsConfig, LinterConfig, LintRepoConfig, OutputFormat
from workflow_conventions.rules import unknown_rule_ids
from workflow_conventions.schemas.findings import Severity
from workflow_conventions.utils.constants import DEFAULT_CONFIG_FILENAME
from workflow_conventions.utils.yaml import load_yaml_file

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


async def load_linter_config_file(path: Path) -> LinterConfig:
    """Load and validate a linter configuration file.

    Args:
        path (Path): Path to the YAML configuration file.

    Raises:
        ConfigurationFileError: If the file cannot be read, is not a mapping,
            fails validation or references unknown rules. Every problem found
            is collected on the exception.

    Returns:
        LinterConfig: The validated configuration.
    """
    try:
        content = load_yaml_file(path)
    except (OSError, YAMLError, ValueError) as exc:
        logger.error("Failed to load linter configuration file", path=str(path), error=str(exc))
        raise ConfigurationFileError(str(path), [{"error": str(exc)}]) from exc

    if content is None:
        content = {}
    if not isinstance(content, dict):
        logger.error("Linter configuration file is not a mapping", path=str(path))
        raise ConfigurationFileError(str(path), [{"error": "Configuration file must be a mapping"}])

    try:
        linter_config = LinterConfig.model_validate(content)
    except ValidationError as ve:
        errors: list[dict[str, Any]] = [{"location": ".".join(str(part) for part in error["loc"]), "error": error["msg"]} for error in ve.errors()]
        logger.error("Linter configuration file failed validation", path=str(path), errors=errors)
        raise ConfigurationFileError(str(path), errors) from ve

    unknown = unknown_rule_ids(linter_config.rules)
    if unknown:
        raise ConfigurationFileError(str(path), [{"location": "rules", "error": str(UnknownRuleError(unknown))}])

    logger.debug("Loaded linter configuration file", path=str(path))
    return linter_config


async def reconcile_linter_configuration(
    cli_config_path: Path | None,
    cli_dry_run_flag: str | None,
    search_root: Path,
    settings: Settings,
) -> LinterConfig:
    """Resolve the linter configuration from the config file and overrides.

    The config file is the CLI path, else WORKFLOW_CONVENTIONS_CONFIG, else
    `.workflow-conventions.yaml` under search_root if it exists. An explicitly
    named file that does not exist is an error.
    """
    config_path = cli_config_path or settings.WORKFLOW_CONVENTIONS_CONFIG
    if config_path is not None:
        if not config_path.exists():
            raise ConfigurationFileError(str(config_path), [{"error": "Configuration file not found"}])
        linter_config = await load_linter_config_file(config_path)
    elif (search_root / DEFAULT_CONFIG_FILENAME).is_file():
        linter_config = await load_linter_config_file(search_root / DEFAULT_CONFIG_FILENAME)
    else:
        linter_config = LinterConfig()

    dry_run_flag = cli_dry_run_flag or settings.DRY_RUN_FLAG
    if dry_run_flag:
        linter_config = linter_config.model_copy(update={"dry_run_flag": dry_run_flag})
    return linter_config


def _reconcile_enum(cli_value: str | None, env_value: str | None, enum_type: Any, default: Any, cli_name: str, env_name: str) -> Any:
    raw = cli_value if cli_value is not None else env_value
    if raw is None:
        return default
    try:
        return enum_type(raw.lower())
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_type)
        raise ValueError(f"Invalid value {raw!r} for {cli_name} / {env_name}; expected one of: {choices}") from exc


async def reconcile_base_configuration(
    cli_debug: bool | None,
    cli_output_format: str | None,
    cli_fail_on: str | None,
    cli_summary_file: Path | None,
    settings: Settings,
) -> dict[str, Any]:
    """Resolve the settings shared by every lint command."""
    return {
        "debug": bool(cli_debug) or settings.DEBUG,
        "output_format": _reconcile_enum(cli_output_format, settings.OUTPUT_FORMAT, OutputFormat, OutputFormat.TEXT, "--format", "OUTPUT_FORMAT"),
        "fail_on": _reconcile_enum(cli_fail_on, settings.FAIL_ON, Severity, Severity.ERROR, "--fail-on", "FAIL_ON"),
        "summary_file": cli_summary_file or settings.GITHUB_STEP_SUMMARY,
    }


async def reconcile_lint_docs_configuration(
    cli_paths: list[Path] | None = None,
    cli_config_path: Path | None = None,
    cli_debug: bool | None = None,
    cli_output_format: str | None = None,
    cli_fail_on: str | None = None,
    cli_summary_file: Path | None = None,
    cli_dry_run_flag: str | None = None,
    settings: Settings | None = None,
) -> LintDocsConfig:
    """Reconcile configuration for the lint-docs command.

    With no paths given, the config file's doc globs are expanded from the
    current directory.

    Raises:
        RequiredConfigurationElementError: If no Markdown paths can be determined.
    """
    settings = settings or get_settings()
    cwd = Path.cwd()
    linter_config = await reconcile_linter_configuration(cli_config_path, cli_dry_run_flag, cwd, settings)
    base = await reconcile_base_configuration(cli_debug, cli_output_format, cli_fail_on, cli_summary_file, settings)

    paths = list(cli_paths or [])
    if not paths:
        paths = sorted({path for pattern in linter_config.doc_globs for path in cwd.glob(pattern) if path.is_file()})
    if not paths:
        raise RequiredConfigurationElementError(name="Markdown paths", cli_name="PATHS", env_name="doc_globs (config file)")

    return LintDocsConfig(linter=linter_config, paths=paths, **base)


async def reconcile_lint_repo_configuration(
    cli_root: Path | None = None,
    cli_config_path: Path | None = None,
    cli_debug: bool | None = None,
    cli_output_format: str | None = None,
    cli_fail_on: str | None = None,
    cli_summary_file: Path | None = None,
    cli_dry_run_flag: str | None = None,
    settings: Settings | None = None,
) -> LintRepoConfig:
    """Reconcile configuration for the lint-repo command."""
    settings = settings or get_settings()
    root = cli_root or Path.cwd()
    if not root.is_dir():
        raise ValueError(f"Repository root is not a directory: {root.absolute()}")
    linter_config = await reconcile_linter_configuration(cli_config_path, cli_dry_run_flag, root, settings)
    base = await reconcile_base_configuration(cli_debug, cli_output_format, cli_fail_on, cli_summary_file, settings)
    return LintRepoConfig(linter=linter_config, root=root, **base)
