"""Vulture whitelist — references that appear unused but are called dynamically.

Items listed here are known false positives: the console-script entry
point, pytest fixtures consumed via dependency injection, and service
methods reached only through the ``dispatch`` handler table.

Usage:
    uv run vulture tradejournal tests vulture_whitelist.py
"""

# ── Entry points (called by setuptools console_scripts, not imported) ──
from tradejournal.main import main  # noqa: F401

# ── Pytest fixtures (injected by pytest, never called directly) ──
from tests.conftest import db  # noqa: F401
from tests.conftest import sample_planned_entry  # noqa: F401
from tests.conftest import sample_trade  # noqa: F401
from tests.conftest import sample_zone  # noqa: F401
from tests.conftest import service  # noqa: F401

# ── Service operations (looked up by method name in dispatch) ──
from tradejournal.service import JournalService

JournalService.delete_setting  # noqa: B018
JournalService.performance_by_zone  # noqa: B018
JournalService.monthly_report  # noqa: B018
