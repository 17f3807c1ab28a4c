"""Journal data store: DuckDB CRUD for trades, zones, planned entries, settings.

Every save is an upsert keyed by the record's caller-supplied id; a
second save with the same id replaces the whole row. Deletes are
idempotent. Listing returns full tables in a fixed order with no
filtering or pagination.

Driver failures surface as :class:`~tradejournal.errors.StorageIOError`;
rows that do not decode surface as
:class:`~tradejournal.errors.RecordDecodeError`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta
from typing import Any

import duckdb

from tradejournal.db.records import (
    JournalRecord,
    JournalSnapshot,
    PlannedEntry,
    Setting,
    Trade,
    Zone,
)
from tradejournal.db.schema import TABLE_NAMES
from tradejournal.errors import StorageIOError

logger = logging.getLogger(__name__)


def _quoted_columns(record_type: type[JournalRecord]) -> str:
    return ", ".join(f'"{name}"' for name in record_type.column_names())


def _upsert_sql(record_type: type[JournalRecord]) -> str:
    placeholders = ", ".join("?" for _ in record_type.column_names())
    return (
        f"INSERT OR REPLACE INTO {record_type.TABLE} "  # noqa: S608
        f"({_quoted_columns(record_type)}) VALUES ({placeholders})"
    )


def _select_sql(record_type: type[JournalRecord], order_by: str | None) -> str:
    sql = f"SELECT {_quoted_columns(record_type)} FROM {record_type.TABLE}"  # noqa: S608
    if order_by:
        sql += f" ORDER BY {order_by}"
    return sql


_UPSERT_TRADE = _upsert_sql(Trade)
_UPSERT_ZONE = _upsert_sql(Zone)
_UPSERT_PLANNED_ENTRY = _upsert_sql(PlannedEntry)
_UPSERT_SETTING = _upsert_sql(Setting)

_SELECT_TRADES = _select_sql(Trade, "date DESC")
_SELECT_ZONES = _select_sql(Zone, "date DESC")
_SELECT_PLANNED_ENTRIES = _select_sql(PlannedEntry, "created_at DESC")
_SELECT_SETTINGS = _select_sql(Setting, None)


@contextmanager
def _driver_errors(action: str) -> Iterator[None]:
    """Re-raise DuckDB failures as StorageIOError."""
    try:
        yield
    except duckdb.Error as exc:
        msg = f"Failed to {action}: {exc}"
        raise StorageIOError(msg) from exc


@contextmanager
def _transaction(conn: duckdb.DuckDBPyConnection, action: str) -> Iterator[None]:
    """Run the body in one transaction, rolling back on any failure."""
    with _driver_errors(f"begin transaction to {action}"):
        conn.begin()
    try:
        yield
    except Exception:
        conn.rollback()
        logger.warning("Rolled back transaction to %s", action)
        raise
    with _driver_errors(action):
        conn.commit()


def _fetch_records(
    conn: duckdb.DuckDBPyConnection,
    sql: str,
    record_type: type[JournalRecord],
) -> list[Any]:
    with _driver_errors(f"read {record_type.TABLE}"):
        rows = conn.execute(sql).fetchall()
    columns = record_type.column_names()
    return [
        record_type.from_dict(dict(zip(columns, row, strict=True))) for row in rows
    ]


# ── Trades ──


def save_trade(conn: duckdb.DuckDBPyConnection, trade: Trade) -> None:
    """Insert or replace a trade by id.

    Args:
        conn: Active DuckDB connection.
        trade: Trade to persist; every field is stored verbatim.

    """
    with _driver_errors(f"save trade '{trade.id}'"):
        conn.execute(_UPSERT_TRADE, trade.to_row())
    logger.debug("Saved trade %s (%s %s)", trade.id, trade.pair, trade.status)


def get_trades(conn: duckdb.DuckDBPyConnection) -> list[Trade]:
    """Get every trade, newest ``date`` first."""
    return _fetch_records(conn, _SELECT_TRADES, Trade)


def delete_trade(conn: duckdb.DuckDBPyConnection, trade_id: str) -> None:
    """Delete a trade by id. Deleting an unknown id is a no-op."""
    with _driver_errors(f"delete trade '{trade_id}'"):
        conn.execute("DELETE FROM trades WHERE id = ?", [trade_id])


# ── Zones ──


def save_zone(conn: duckdb.DuckDBPyConnection, zone: Zone) -> None:
    """Insert or replace a zone by id.

    Trades and planned entries that cache this zone's name are not
    touched.
    """
    with _driver_errors(f"save zone '{zone.id}'"):
        conn.execute(_UPSERT_ZONE, zone.to_row())
    logger.debug("Saved zone %s (%s)", zone.id, zone.name)


def get_zones(conn: duckdb.DuckDBPyConnection) -> list[Zone]:
    """Get every zone, newest ``date`` first."""
    return _fetch_records(conn, _SELECT_ZONES, Zone)


def delete_zone(conn: duckdb.DuckDBPyConnection, zone_id: str) -> None:
    """Delete a zone by id. Referencing trades and planned entries remain."""
    with _driver_errors(f"delete zone '{zone_id}'"):
        conn.execute("DELETE FROM zones WHERE id = ?", [zone_id])


# ── Planned Entries ──


def save_planned_entry(
    conn: duckdb.DuckDBPyConnection,
    entry: PlannedEntry,
) -> None:
    """Insert or replace a planned entry by id."""
    with _driver_errors(f"save planned entry '{entry.id}'"):
        conn.execute(_UPSERT_PLANNED_ENTRY, entry.to_row())
    logger.debug("Saved planned entry %s for zone %s", entry.id, entry.zone_id)


def get_planned_entries(conn: duckdb.DuckDBPyConnection) -> list[PlannedEntry]:
    """Get every planned entry, most recently created first."""
    return _fetch_records(conn, _SELECT_PLANNED_ENTRIES, PlannedEntry)


def delete_planned_entry(conn: duckdb.DuckDBPyConnection, entry_id: str) -> None:
    """Delete a planned entry by id. Deleting an unknown id is a no-op."""
    with _driver_errors(f"delete planned entry '{entry_id}'"):
        conn.execute("DELETE FROM planned_entries WHERE id = ?", [entry_id])


# ── Settings ──


# Stored stamps at most this far ahead of now get bumped past.
_CLOCK_RESOLUTION = timedelta(milliseconds=1)


def _setting_timestamp(conn: duckdb.DuckDBPyConnection, key: str) -> str:
    """Current UTC instant, nudged past the stored timestamp for ``key``.

    The nudge only applies when the stored value is within clock
    resolution of now; a stamp further in the future is ignored.
    """
    now = datetime.now(tz=UTC)
    row = conn.execute(
        "SELECT updated_at FROM settings WHERE key = ?", [key]
    ).fetchone()
    if row is not None:
        try:
            previous = datetime.fromisoformat(row[0])
        except ValueError:
            previous = None
        if (
            previous is not None
            and previous.tzinfo is not None
            and timedelta(0) <= previous - now < _CLOCK_RESOLUTION
        ):
            now = previous + timedelta(microseconds=1)
    return now.isoformat()


def save_setting(
    conn: duckdb.DuckDBPyConnection,
    key: str,
    value: str,
    updated_at: str | None = None,
) -> str:
    """Insert or replace a setting.

    Args:
        conn: Active DuckDB connection.
        key: Setting key; exactly one row exists per key.
        value: Setting value, stored verbatim.
        updated_at: Timestamp to store. Generated from the current UTC
            time when omitted, which is the case for every normal save.

    Returns:
        The stored ``updated_at`` value.

    """
    with _driver_errors(f"save setting '{key}'"):
        if updated_at is None:
            updated_at = _setting_timestamp(conn, key)
        conn.execute(_UPSERT_SETTING, [key, value, updated_at])
    logger.debug("Saved setting %s", key)
    return updated_at


def get_setting(conn: duckdb.DuckDBPyConnection, key: str) -> str | None:
    """Look up one setting value.

    Returns:
        The stored value (possibly an empty string), or None when the
        key does not exist.

    """
    with _driver_errors(f"read setting '{key}'"):
        row = conn.execute("SELECT value FROM settings WHERE key = ?", [key]).fetchone()
    return None if row is None else row[0]


def get_all_settings(conn: duckdb.DuckDBPyConnection) -> list[Setting]:
    """Get every setting, in storage order."""
    return _fetch_records(conn, _SELECT_SETTINGS, Setting)


def delete_setting(conn: duckdb.DuckDBPyConnection, key: str) -> None:
    """Delete a setting by key. Deleting an unknown key is a no-op."""
    with _driver_errors(f"delete setting '{key}'"):
        conn.execute("DELETE FROM settings WHERE key = ?", [key])


# ── Whole-database operations ──


def count_records(conn: duckdb.DuckDBPyConnection) -> dict[str, int]:
    """Count rows per table, plus their total.

    A count that fails is logged and reported as zero, so this function
    never raises.

    Returns:
        Dict with keys ``total``, ``trades``, ``zones``,
        ``planned_entries`` and ``settings``.

    """
    counts: dict[str, int] = {}
    for table in TABLE_NAMES:
        try:
            row = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()  # noqa: S608
            counts[table] = int(row[0]) if row else 0
        except duckdb.Error as exc:
            logger.warning("Counting %s failed, reporting 0: %s", table, exc)
            counts[table] = 0
    return {"total": sum(counts.values()), **counts}


def _delete_all_rows(conn: duckdb.DuckDBPyConnection) -> None:
    for table in TABLE_NAMES:
        with _driver_errors(f"clear {table}"):
            conn.execute(f"DELETE FROM {table}")  # noqa: S608


def clear_all(conn: duckdb.DuckDBPyConnection) -> None:
    """Delete every row from all four tables. Not reversible."""
    with _transaction(conn, "clear all tables"):
        _delete_all_rows(conn)
    logger.info("Cleared all journal tables")


def load_snapshot(conn: duckdb.DuckDBPyConnection) -> JournalSnapshot:
    """Read all four tables in their listing order."""
    return JournalSnapshot(
        trades=get_trades(conn),
        zones=get_zones(conn),
        planned_entries=get_planned_entries(conn),
        settings=get_all_settings(conn),
    )


def replace_all(conn: duckdb.DuckDBPyConnection, snapshot: JournalSnapshot) -> None:
    """Replace the whole database with ``snapshot``, atomically.

    All tables are cleared and repopulated through the normal save
    functions inside one transaction. If any write fails the
    transaction is rolled back and the previous contents remain.

    Settings keep the ``updated_at`` they carry; those without one get
    the current time.
    """
    with _transaction(conn, "replace journal contents"):
        _delete_all_rows(conn)
        for trade in snapshot.trades:
            save_trade(conn, trade)
        for zone in snapshot.zones:
            save_zone(conn, zone)
        for entry in snapshot.planned_entries:
            save_planned_entry(conn, entry)
        for setting in snapshot.settings:
            save_setting(conn, setting.key, setting.value, setting.updated_at)
    logger.info("Replaced journal contents: %s", snapshot.counts())
