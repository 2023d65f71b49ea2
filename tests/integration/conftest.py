"""Fixtures for CLI integration tests."""

from pathlib import Path

import pytest

ENVIRONMENT_VARIABLES = ["DEBUG", "WORKFLOW_CONVENTIONS_CONFIG", "DRY_RUN_FLAG", "FAIL_ON", "OUTPUT_FORMAT", "GITHUB_STEP_SUMMARY"]


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test from an empty directory without linter environment variables."""
    for name in ENVIRONMENT_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
