"""Runtime infrastructure for tallybook.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Ledger export configuration via load_ledger_export_config()

Usage:
    from tallybook.runtime import get_logger, get_paths

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.root, paths.expenses)
"""

from tallybook.runtime.category_accounts import load_ledger_export_config
from tallybook.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from tallybook.runtime.paths import ProjectPaths, get_paths, reset_paths

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Config
    "load_ledger_export_config",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
]
