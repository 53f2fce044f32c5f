"""Runtime loader for the category -> ledger account configuration.

Example ``config/category_accounts.toml``::

    currency = "CAD"
    funding_account = "Liabilities:CreditCard:Visa"

    [accounts]
    "Dairy" = "Expenses:Food:Grocery:Dairy"
    "Fuel / Gas" = "Expenses:Car:Gas"
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from tallybook.domain.ledger_export import LedgerExportConfig
from tallybook.runtime.logging import get_logger
from tallybook.runtime.paths import get_paths

logger = get_logger(__name__)


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


def load_ledger_export_config(path: Path | None = None) -> LedgerExportConfig:
    """Build the export config from TOML, keeping defaults for anything unset."""
    if path is None:
        path = get_paths().category_accounts

    data = _load_toml(path)
    defaults = LedgerExportConfig()

    raw_accounts = data.get("accounts", {})
    if not isinstance(raw_accounts, dict):
        logger.warning("Ignoring non-table [accounts] in %s", path)
        raw_accounts = {}
    accounts = {
        str(category).strip().lower(): str(account).strip()
        for category, account in raw_accounts.items()
        if str(account).strip()
    }

    config = LedgerExportConfig(
        currency=str(data.get("currency") or defaults.currency),
        funding_account=str(data.get("funding_account") or defaults.funding_account),
        category_accounts=accounts,
    )
    logger.debug("Loaded %d category account overrides from %s", len(accounts), path)
    return config
