"""Unit tests for configuration reconciliation."""

from pathlib import Path

import pytest

from workflow_conventions.configuration.env import Settings
from workflow_conventions.configuration.exceptions import ConfigurationFileError, RequiredConfigurationElementError
from workflow_conventions.configuration.models import OutputFormat
from workflow_conventions.configuration.reconcile import (
    load_linter_config_file,
    reconcile_lint_docs_configuration,
    reconcile_lint_repo_configuration,
)
from workflow_conventions.schemas.findings import Severity
from workflow_conventions.utils.constants import DEFAULT_DRY_RUN_FLAG


def empty_settings(**overrides: object) -> Settings:
    """Settings that ignore the process environment and any .env file."""
    values: dict[str, object] = {
        "DEBUG": False,
        "WORKFLOW_CONVENTIONS_CONFIG": None,
        "DRY_RUN_FLAG": None,
        "FAIL_ON": None,
        "OUTPUT_FORMAT": None,
        "GITHUB_STEP_SUMMARY": None,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_load_valid_config_file(tmp_path: Path) -> None:
    """Test loading a config file with overrides."""
    path = tmp_path / "conventions.yaml"
    path.write_text("script_dirs: [scripts]\nscript_extensions: [js, .SH]\nrules:\n  WFC005:\n    enabled: false\n  SCR002:\n    severity: error\n")
    config = await load_linter_config_file(path)
    assert config.script_dirs == ["scripts"]
    assert config.script_extensions == [".js", ".sh"]
    assert config.rule_enabled("WFC005") is False
    assert config.severity_for("SCR002", Severity.WARNING) == Severity.ERROR


@pytest.mark.asyncio
async def test_empty_config_file_uses_defaults(tmp_path: Path) -> None:
    """Test that an empty config file yields the defaults."""
    path = tmp_path / "conventions.yaml"
    path.write_text("")
    config = await load_linter_config_file(path)
    assert config.dry_run_flag == DEFAULT_DRY_RUN_FLAG


@pytest.mark.asyncio
async def test_invalid_config_collects_every_error(tmp_path: Path) -> None:
    """Test that all validation errors are collected on the exception."""
    path = tmp_path / "conventions.yaml"
    path.write_text("unknown_key: 1\nmutating_patterns: ['(']\n")
    with pytest.raises(ConfigurationFileError) as exc_info:
        await load_linter_config_file(path)
    locations = {error["location"] for error in exc_info.value.errors}
    assert locations == {"unknown_key", "mutating_patterns"}


@pytest.mark.asyncio
async def test_unknown_rule_rejected(tmp_path: Path) -> None:
    """Test that configuration for an unregistered rule is rejected."""
    path = tmp_path / "conventions.yaml"
    path.write_text("rules:\n  NOPE001:\n    enabled: false\n")
    with pytest.raises(ConfigurationFileError) as exc_info:
        await load_linter_config_file(path)
    assert "NOPE001" in exc_info.value.errors[0]["error"]


@pytest.mark.asyncio
async def test_non_mapping_and_malformed_config(tmp_path: Path) -> None:
    """Test that non-mapping and malformed YAML are rejected."""
    listing = tmp_path / "list.yaml"
    listing.write_text("- a\n")
    with pytest.raises(ConfigurationFileError):
        await load_linter_config_file(listing)
    malformed = tmp_path / "bad.yaml"
    malformed.write_text("key: [unclosed\n")
    with pytest.raises(ConfigurationFileError):
        await load_linter_config_file(malformed)


@pytest.mark.asyncio
async def test_repo_config_defaults(tmp_path: Path) -> None:
    """Test lint-repo defaults when nothing is configured."""
    config = await reconcile_lint_repo_configuration(cli_root=tmp_path, settings=empty_settings())
    assert config.root == tmp_path
    assert config.output_format == OutputFormat.TEXT
    assert config.fail_on == Severity.ERROR
    assert config.summary_file is None
    assert config.linter.dry_run_flag == DEFAULT_DRY_RUN_FLAG


@pytest.mark.asyncio
async def test_repo_config_discovers_file_at_root(tmp_path: Path) -> None:
    """Test that .workflow-conventions.yaml at the root is loaded."""
    (tmp_path / ".workflow-conventions.yaml").write_text("dry_run_flag: PREVIEW\n")
    config = await reconcile_lint_repo_configuration(cli_root=tmp_path, settings=empty_settings())
    assert config.linter.dry_run_flag == "PREVIEW"


@pytest.mark.asyncio
async def test_precedence_cli_over_env_over_file(tmp_path: Path) -> None:
    """Test that CLI values beat environment values, which beat the config file."""
    (tmp_path / ".workflow-conventions.yaml").write_text("dry_run_flag: FROM_FILE\n")
    settings = empty_settings(DRY_RUN_FLAG="FROM_ENV", FAIL_ON="warning", OUTPUT_FORMAT="json")
    from_env = await reconcile_lint_repo_configuration(cli_root=tmp_path, settings=settings)
    assert from_env.linter.dry_run_flag == "FROM_ENV"
    assert from_env.fail_on == Severity.WARNING
    assert from_env.output_format == OutputFormat.JSON
    from_cli = await reconcile_lint_repo_configuration(
        cli_root=tmp_path, cli_dry_run_flag="FROM_CLI", cli_fail_on="INFO", cli_output_format="github", settings=settings
    )
    assert from_cli.linter.dry_run_flag == "FROM_CLI"
    assert from_cli.fail_on == Severity.INFO
    assert from_cli.output_format == OutputFormat.GITHUB


@pytest.mark.asyncio
async def test_summary_file_from_environment(tmp_path: Path) -> None:
    """Test that $GITHUB_STEP_SUMMARY is used when no summary file is given."""
    settings = empty_settings(GITHUB_STEP_SUMMARY=tmp_path / "summary.md")
    config = await reconcile_lint_repo_configuration(cli_root=tmp_path, settings=settings)
    assert config.summary_file == tmp_path / "summary.md"


@pytest.mark.asyncio
async def test_invalid_enum_value(tmp_path: Path) -> None:
    """Test that an unknown output format is rejected with the valid choices."""
    with pytest.raises(ValueError) as exc_info:
        await reconcile_lint_repo_configuration(cli_root=tmp_path, cli_output_format="xml", settings=empty_settings())
    assert "text, json, github, markdown" in str(exc_info.value)


@pytest.mark.asyncio
async def test_missing_explicit_config_file(tmp_path: Path) -> None:
    """Test that an explicitly named config file must exist."""
    with pytest.raises(ConfigurationFileError):
        await reconcile_lint_repo_configuration(cli_root=tmp_path, cli_config_path=tmp_path / "nope.yaml", settings=empty_settings())


@pytest.mark.asyncio
async def test_repo_root_must_be_directory(tmp_path: Path) -> None:
    """Test that the repository root must be a directory."""
    with pytest.raises(ValueError):
        await reconcile_lint_repo_configuration(cli_root=tmp_path / "missing", settings=empty_settings())


@pytest.mark.asyncio
async def test_docs_config_expands_doc_globs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that lint-docs falls back to the configured doc globs."""
    (tmp_path / "docs").mkdir()
    (tmp_path / "docs" / "guide.md").write_text("# Guide\n")
    monkeypatch.chdir(tmp_path)
    config = await reconcile_lint_docs_configuration(settings=empty_settings())
    assert config.paths == [tmp_path / "docs" / "guide.md"]


@pytest.mark.asyncio
async def test_docs_config_requires_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that lint-docs fails when no Markdown paths can be found."""
    monkeypatch.chdir(tmp_path)
    with pytest.raises(RequiredConfigurationElementError) as exc_info:
        await reconcile_lint_docs_configuration(settings=empty_settings())
    assert exc_info.value.cli_name == "PATHS"


@pytest.mark.asyncio
async def test_docs_config_uses_cli_paths(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that explicit paths are used as given."""
    monkeypatch.chdir(tmp_path)
    config = await reconcile_lint_docs_configuration(cli_paths=[Path("README.md")], settings=empty_settings())
    assert config.paths == [Path("README.md")]


@pytest.mark.asyncio
async def test_config_file_with_impossible_date(tmp_path: Path) -> None:
    """Test that a value the YAML loader rejects is a configuration file error."""
    path = tmp_path / "conventions.yaml"
    path.write_text("workflow_dir: 2024-02-30\n")
    with pytest.raises(ConfigurationFileError) as exc_info:
        await load_linter_config_file(path)
    assert exc_info.value.path == str(path)
