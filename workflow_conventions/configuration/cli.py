"""Defines the Command Line Interface (CLI) using Typer."""

from pathlib import Path
from typing import NoReturn

import structlog
import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from workflow_conventions.configuration.driver import get_lint_docs_config, get_lint_repo_config
from workflow_conventions.configuration.exceptions import ConfigurationFileError, RequiredConfigurationElementError
from workflow_conventions.configuration.models import BaseConfig
from workflow_conventions.processing.engine import PARSE_ERROR_RULE_ID, lint_markdown_files, lint_repository
from workflow_conventions.reporting.formatters import format_report, write_step_summary
from workflow_conventions.rules import RULES
from workflow_conventions.schemas.findings import LintReport
from workflow_conventions.utils.log_config import configure_logging

load_dotenv()

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Lint GitHub Actions workflows, scripts and guides against commenting conventions.")

CONFIGURATION_ERROR_EXIT_CODE = 2

ConfigOption = Annotated[
    Path | None,
    Option("--config", envvar="WORKFLOW_CONVENTIONS_CONFIG", help="Path to a .workflow-conventions.yaml file."),
]
FormatOption = Annotated[str | None, Option("--format", help="Output format: text, json, github or markdown.")]
FailOnOption = Annotated[str | None, Option("--fail-on", help="Lowest severity that fails the run: error, warning or info.")]
SummaryFileOption = Annotated[
    Path | None,
    Option("--summary-file", help="Append a Markdown summary to this file. Defaults to $GITHUB_STEP_SUMMARY when set."),
]
DryRunFlagOption = Annotated[str | None, Option("--dry-run-flag", help="Name of the dry-run flag scripts must honour.")]
DebugOption = Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")]


def _configuration_error(error: Exception) -> NoReturn:
    typer.echo(f"Configuration error: {error}", err=True)
    if isinstance(error, ConfigurationFileError):
        for detail in error.errors:
            location = detail.get("location")
            typer.echo(f"  {location}: {detail['error']}" if location else f"  {detail['error']}", err=True)
    if isinstance(error, RequiredConfigurationElementError):
        typer.echo(f"  Provide {error.cli_name} or set {error.env_name}", err=True)
    raise typer.Exit(CONFIGURATION_ERROR_EXIT_CODE)


def _emit_report(report: LintReport, config: BaseConfig) -> None:
    output = format_report(report, config.output_format)
    if output:
        typer.echo(output)
    if config.summary_file is not None:
        write_step_summary(report, config.summary_file)
    if report.has_failures(config.fail_on):
        raise typer.Exit(1)


@typer_app.command(name="lint-docs")
def lint_docs_cli(
    paths: Annotated[list[Path] | None, Argument(help="Markdown files or directories. Defaults to the configured doc globs.")] = None,
    config_path: ConfigOption = None,
    output_format: FormatOption = None,
    fail_on: FailOnOption = None,
    summary_file: SummaryFileOption = None,
    dry_run_flag: DryRunFlagOption = None,
    debug: DebugOption = False,
) -> None:
    """Lint the workflow and script examples embedded in Markdown guides."""
    configure_logging(debug)
    try:
        config = get_lint_docs_config(
            paths=paths,
            config_path=config_path,
            debug=debug,
            output_format=output_format,
            fail_on=fail_on,
            summary_file=summary_file,
            dry_run_flag=dry_run_flag,
        )
    except (ConfigurationFileError, RequiredConfigurationElementError, ValueError) as e:
        _configuration_error(e)

    logger.info("Linting Markdown guides", path_count=len(config.paths))
    report = lint_markdown_files(config.paths, config.linter)
    _emit_report(report, config)


@typer_app.command(name="lint-repo")
def lint_repo_cli(
    root: Annotated[Path | None, Argument(help="Repository root. Defaults to the current directory.")] = None,
    config_path: ConfigOption = None,
    output_format: FormatOption = None,
    fail_on: FailOnOption = None,
    summary_file: SummaryFileOption = None,
    dry_run_flag: DryRunFlagOption = None,
    debug: DebugOption = False,
) -> None:
    """Lint a repository's workflow files, companion scripts and Markdown guides."""
    configure_logging(debug)
    try:
        config = get_lint_repo_config(
            root=root,
            config_path=config_path,
            debug=debug,
            output_format=output_format,
            fail_on=fail_on,
            summary_file=summary_file,
            dry_run_flag=dry_run_flag,
        )
    except (ConfigurationFileError, RequiredConfigurationElementError, ValueError) as e:
        _configuration_error(e)

    report = lint_repository(config.root, config.linter)
    _emit_report(report, config)


@typer_app.command(name="list-rules")
def list_rules_cli() -> None:
    """List every rule with its default severity."""
    for rule_id, rule in sorted(RULES.items()):
        typer.echo(f"{rule_id}  {rule.default_severity.value:<7}  {rule.target.value:<13}  {rule.summary}")
    typer.echo(f"{PARSE_ERROR_RULE_ID}  {'error':<7}  {'any':<13}  Input files can be read and parsed")


if __name__ == "__main__":
    typer_app()
