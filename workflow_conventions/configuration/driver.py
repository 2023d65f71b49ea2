"""Synchronous driver for configuration reconciliation for the CLI entry point."""

import asyncio
from pathlib import Path

from workflow_conventions.configuration import reconcile
from workflow_conventions.configuration.models import LintDocsConfig, LintRepoConfig


def get_lint_docs_config(
    paths: list[Path] | None = None,
    config_path: Path | None = None,
    debug: bool | None = None,
    output_format: str | None = None,
    fail_on: str | None = None,
    summary_file: Path | None = None,
    dry_run_flag: str | None = None,
) -> LintDocsConfig:
    """Synchronously get the reconciled lint-docs configuration."""
    return asyncio.run(
        reconcile.reconcile_lint_docs_configuration(
            cli_paths=paths,
            cli_config_path=config_path,
            cli_debug=debug,
            cli_output_format=output_format,
            cli_fail_on=fail_on,
            cli_summary_file=summary_file,
            cli_dry_run_flag=dry_run_flag,
        )
    )


def get_lint_repo_config(
    root: Path | None = None,
    config_path: Path | None = None,
    debug: bool | None = None,
    output_format: str | None = None,
    fail_on: str | None = None,
    summary_file: Path | None = None,
    dry_run_flag: str | None = None,
) -> LintRepoConfig:
    """Synchronously get the reconciled lint-repo configuration."""
    return asyncio.run(
        reconcile.reconcile_lint_repo_configuration(
            cli_root=root,
            cli_config_path=config_path,
            cli_debug=debug,
            cli_output_format=output_format,
            cli_fail_on=fail_on,
            cli_summary_file=summary_file,
            cli_dry_run_flag=dry_run_flag,
        )
    )
