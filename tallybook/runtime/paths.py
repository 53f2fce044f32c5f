"""Centralized path management for tallybook.

All data lives under one home directory, ``~/.tallybook`` unless the
``TALLYBOOK_HOME`` environment variable points elsewhere:

    ~/.tallybook/
    ├── config/
    │   └── category_accounts.toml   - category -> ledger account overrides
    └── data/
        └── expenses.json            - the stored expense collection
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

HOME_ENV_VAR = "TALLYBOOK_HOME"


def _get_home_root() -> Path:
    """Determine the tallybook home directory."""
    override = os.environ.get(HOME_ENV_VAR, "").strip()
    if override:
        return Path(override).expanduser()
    return Path("~/.tallybook").expanduser()


@dataclass
class ProjectPaths:
    """Container for all tallybook paths.

    Paths are computed from ``root`` so every module agrees on locations
    regardless of the current working directory.
    """

    root: Path = field(default_factory=_get_home_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    # --- Configuration paths ---
    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def category_accounts(self) -> Path:
        """Category -> beancount account mapping TOML file."""
        return self.config / "category_accounts.toml"

    # --- Data paths ---
    @property
    def data(self) -> Path:
        """Data directory (data/)."""
        return self.root / "data"

    @property
    def expenses(self) -> Path:
        """Stored expense collection."""
        return self.data / "expenses.json"

    def ensure_directories(self) -> None:
        """Create config and data directories if they don't exist."""
        self.config.mkdir(parents=True, exist_ok=True)
        self.data.mkdir(parents=True, exist_ok=True)


# Module-level singleton
_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance.

    Returns:
        The global ProjectPaths instance.
    """
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Drop the cached instance so the next get_paths() re-reads the environment."""
    global _paths
    _paths = None
