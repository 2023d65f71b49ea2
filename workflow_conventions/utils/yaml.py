"""Contains utility functions for working with YAML files."""

from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

yaml = YAML(typ="safe")


def load_yaml_file(path: Path) -> Any:
    """Loads a YAML file and returns its content."""
    with open(path, encoding="utf-8") as f:
        return yaml.load(f)


def load_yaml_text(text: str) -> Any:
    """Loads YAML from a string and returns its content."""
    return yaml.load(text)
