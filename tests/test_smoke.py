"""Public smoke tests for basic module wiring.

Keep these minimal and free of any real-world data.
"""

from __future__ import annotations


def test_imports() -> None:
    import tallybook
    import tallybook.application.expenses
    import tallybook.bulk_import
    import tallybook.cli.main
    import tallybook.domain
    import tallybook.runtime

    assert tallybook is not None
    assert tallybook.application.expenses is not None
    assert tallybook.bulk_import is not None
    assert tallybook.cli.main is not None
    assert tallybook.domain is not None
    assert tallybook.runtime is not None
