"""JSON export of the whole trading journal.

Produces a single JSON document holding every table plus an export
timestamp and a static format version::

    {"trades": [...], "zones": [...], "planned_entries": [...],
     "settings": [...], "export_date": "...", "version": "1.0"}

Non-finite numbers (NaN, infinity) have no JSON form and are written
as ``null``.
"""

from __future__ import annotations

import json
import math
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from tradejournal.db.records import PlannedEntry, Setting, Trade, Zone

EXPORT_VERSION = "1.0"


def _json_safe(record: dict[str, Any]) -> dict[str, Any]:
    return {
        key: None if isinstance(value, float) and not math.isfinite(value) else value
        for key, value in record.items()
    }


def export_journal_json(
    trades: list[Trade],
    zones: list[Zone],
    planned_entries: list[PlannedEntry],
    settings: list[Setting],
    output_path: str | None = None,
) -> str:
    """Export journal data to JSON format.

    Args:
        trades: Trades in listing order.
        zones: Zones in listing order.
        planned_entries: Planned entries in listing order.
        settings: Settings in storage order.
        output_path: File path to write. If None, returns JSON string.

    Returns:
        JSON string, or file path if output_path given.

    """
    export_data: dict[str, Any] = {
        "trades": [_json_safe(t.to_dict()) for t in trades],
        "zones": [_json_safe(z.to_dict()) for z in zones],
        "planned_entries": [_json_safe(p.to_dict()) for p in planned_entries],
        "settings": [_json_safe(s.to_dict()) for s in settings],
        "export_date": datetime.now(tz=UTC).isoformat(),
        "version": EXPORT_VERSION,
    }

    content = json.dumps(export_data, indent=2, allow_nan=False)

    if output_path:
        Path(output_path).write_text(content, encoding="utf-8")
        return output_path
    return content
