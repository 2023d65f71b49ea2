"""Utility modules for shared functionality."""

from .constants import (
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_DRY_RUN_FLAG,
    DEFAULT_HEADER_SECTIONS,
    DEFAULT_SCRIPT_EXTENSIONS,
    MARKDOWN_SUFFIXES,
)
from .log_config import configure_logging

__all__ = [
    "DEFAULT_CONFIG_FILENAME",
    "DEFAULT_DRY_RUN_FLAG",
    "DEFAULT_HEADER_SECTIONS",
    "DEFAULT_SCRIPT_EXTENSIONS",
    "MARKDOWN_SUFFIXES",
    "configure_logging",
]
