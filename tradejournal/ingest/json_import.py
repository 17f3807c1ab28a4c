"""JSON import pipeline for journal exports.

Parses a document produced by ``export_journal_json`` into a
:class:`~tradejournal.db.records.JournalSnapshot`. Every record is
decoded with the same ``from_dict`` used for normal saves, so a
document is fully validated before the database is touched.

The ``version`` and ``export_date`` keys are ignored.

"""

from __future__ import annotations

import json
import logging
from typing import Any

from tradejournal.db.records import (
    JournalRecord,
    JournalSnapshot,
    PlannedEntry,
    Setting,
    Trade,
    Zone,
)
from tradejournal.errors import ValidationError

logger = logging.getLogger(__name__)


def _decode_table(
    document: dict[str, Any],
    record_type: type[JournalRecord],
) -> list[Any]:
    """Decode one table array; a missing or null key means no records.

    Raises:
        ValidationError: If the table value is present but not an array.
        RecordDecodeError: If any element fails to decode.

    """
    items = document.get(record_type.TABLE)
    if items is None:
        return []
    if not isinstance(items, list):
        msg = (
            f"'{record_type.TABLE}' must be an array, "
            f"got {type(items).__name__}"
        )
        raise ValidationError(msg)
    return [record_type.from_dict(item) for item in items]


def parse_journal_json(json_data: str) -> JournalSnapshot:
    """Parse and validate an exported journal document.

    Args:
        json_data: JSON text as produced by ``export_journal_json``.

    Returns:
        Decoded snapshot of all four tables.

    Raises:
        ValidationError: If the text is not JSON, the top level is not an
            object, or a table value is not an array.
        RecordDecodeError: If any record fails to decode; the message
            names the table, the field and the record id.

    """
    try:
        document = json.loads(json_data)
    except (TypeError, ValueError) as exc:
        msg = f"Import data is not valid JSON: {exc}"
        raise ValidationError(msg) from exc

    if not isinstance(document, dict):
        msg = f"Import data must be a JSON object, got {type(document).__name__}"
        raise ValidationError(msg)

    snapshot = JournalSnapshot(
        trades=_decode_table(document, Trade),
        zones=_decode_table(document, Zone),
        planned_entries=_decode_table(document, PlannedEntry),
        settings=_decode_table(document, Setting),
    )
    logger.debug("Parsed import document: %s", snapshot.counts())
    return snapshot
