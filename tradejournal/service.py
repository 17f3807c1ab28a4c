"""Service façade over the journal store.

:class:`JournalService` owns the single DuckDB connection for the
lifetime of the process and exposes every store operation as an
independent call. Each call runs inside one exclusive access scope:
at most one operation touches the database at a time, and a caller
that cannot get in within ``lock_timeout`` seconds gets an error
instead of waiting forever.

Internal failures are logged with their :class:`~tradejournal.errors.ErrorKind`
and re-raised as :class:`~tradejournal.errors.ServiceError`, which
carries only a display message.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from tradejournal.analysis import journal_stats
from tradejournal.config import DEFAULT_LOCK_TIMEOUT, StoreConfig
from tradejournal.db import journal_store
from tradejournal.db.connection import init_journal_db
from tradejournal.db.records import PlannedEntry, Trade, Zone
from tradejournal.errors import (
    ErrorKind,
    LockTimeoutError,
    ServiceError,
    StorageError,
)
from tradejournal.export.json_export import export_journal_json
from tradejournal.ingest.json_import import parse_journal_json

if TYPE_CHECKING:
    import duckdb

logger = logging.getLogger(__name__)


def _error_kind(exc: Exception) -> ErrorKind:
    if isinstance(exc, StorageError):
        return exc.kind
    if isinstance(exc, OSError):
        return ErrorKind.IO
    return ErrorKind.VALIDATION


class JournalService:
    """Serialized access to one journal database.

    Args:
        conn: Open connection with the journal schema in place. The
            service takes ownership and closes it in :meth:`close`.
        lock_timeout: Seconds to wait for exclusive access.

    """

    def __init__(
        self,
        conn: duckdb.DuckDBPyConnection,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT,
    ) -> None:
        self._conn = conn
        self._lock = threading.Lock()
        self._lock_timeout = lock_timeout

    @classmethod
    def open(cls, config: StoreConfig | None = None) -> JournalService:
        """Create the data directory, open the database and build a service.

        Raises:
            StorageIOError: If the database cannot be opened or initialized.

        """
        config = config or StoreConfig()
        conn = init_journal_db(config.db_path)
        return cls(conn, lock_timeout=config.lock_timeout)

    def close(self) -> None:
        """Close the underlying connection once in-flight work finishes.

        Raises:
            ServiceError: If exclusive access is not granted within
                ``lock_timeout``.

        """
        with self._access("close") as conn:
            conn.close()
        logger.info("Journal database closed")

    @contextmanager
    def _access(self, operation: str) -> Iterator[duckdb.DuckDBPyConnection]:
        """Exclusive access scope that flattens failures to ServiceError."""
        try:
            if not self._lock.acquire(timeout=self._lock_timeout):
                msg = (
                    f"Timed out after {self._lock_timeout}s waiting for "
                    f"database access ({operation})"
                )
                raise LockTimeoutError(msg)
            try:
                yield self._conn
            finally:
                self._lock.release()
        except (StorageError, OSError, ValueError) as exc:
            kind = _error_kind(exc)
            logger.warning("%s failed [%s]: %s", operation, kind.value, exc)
            raise ServiceError(str(exc)) from exc

    # ── Trades ──

    def save_trade(self, trade: dict[str, Any]) -> None:
        """Upsert a trade given as a JSON-shaped dict."""
        with self._access("save_trade") as conn:
            journal_store.save_trade(conn, Trade.from_dict(trade))

    def get_trades(self) -> list[dict[str, Any]]:
        """List all trades, newest date first."""
        with self._access("get_trades") as conn:
            return [t.to_dict() for t in journal_store.get_trades(conn)]

    def delete_trade(self, id: str) -> None:  # noqa: A002
        """Delete a trade; unknown ids are ignored."""
        with self._access("delete_trade") as conn:
            journal_store.delete_trade(conn, id)

    # ── Zones ──

    def save_zone(self, zone: dict[str, Any]) -> None:
        """Upsert a zone given as a JSON-shaped dict."""
        with self._access("save_zone") as conn:
            journal_store.save_zone(conn, Zone.from_dict(zone))

    def get_zones(self) -> list[dict[str, Any]]:
        """List all zones, newest date first."""
        with self._access("get_zones") as conn:
            return [z.to_dict() for z in journal_store.get_zones(conn)]

    def delete_zone(self, id: str) -> None:  # noqa: A002
        """Delete a zone; referencing records are left as they are."""
        with self._access("delete_zone") as conn:
            journal_store.delete_zone(conn, id)

    # ── Planned Entries ──

    def save_planned_entry(self, entry: dict[str, Any]) -> None:
        """Upsert a planned entry given as a JSON-shaped dict."""
        with self._access("save_planned_entry") as conn:
            journal_store.save_planned_entry(conn, PlannedEntry.from_dict(entry))

    def get_planned_entries(self) -> list[dict[str, Any]]:
        """List all planned entries, most recently created first."""
        with self._access("get_planned_entries") as conn:
            return [p.to_dict() for p in journal_store.get_planned_entries(conn)]

    def delete_planned_entry(self, id: str) -> None:  # noqa: A002
        """Delete a planned entry; unknown ids are ignored."""
        with self._access("delete_planned_entry") as conn:
            journal_store.delete_planned_entry(conn, id)

    # ── Settings ──

    def save_setting(self, key: str, value: str) -> None:
        """Upsert a setting; its timestamp is set to the current time."""
        with self._access("save_setting") as conn:
            journal_store.save_setting(conn, key, value)

    def get_setting(self, key: str) -> str | None:
        """Return a setting value, or None when the key is absent."""
        with self._access("get_setting") as conn:
            return journal_store.get_setting(conn, key)

    def get_all_settings(self) -> list[dict[str, Any]]:
        """List every setting."""
        with self._access("get_all_settings") as conn:
            return [s.to_dict() for s in journal_store.get_all_settings(conn)]

    def delete_setting(self, key: str) -> None:
        """Delete a setting; unknown keys are ignored."""
        with self._access("delete_setting") as conn:
            journal_store.delete_setting(conn, key)

    # ── Export / Import ──

    def export_data(self, output_path: str | None = None) -> str:
        """Export every table as one JSON document.

        Args:
            output_path: Optional file to write the document to.

        Returns:
            The JSON text, or ``output_path`` when a file was written.

        """
        with self._access("export_data") as conn:
            snapshot = journal_store.load_snapshot(conn)
            return export_journal_json(
                snapshot.trades,
                snapshot.zones,
                snapshot.planned_entries,
                snapshot.settings,
                output_path=output_path,
            )

    def import_data(self, json_data: str) -> None:
        """Replace the whole database with an exported document.

        The document is decoded in full first, then all tables are
        cleared and repopulated in one transaction. Any failure leaves
        the database unchanged.
        """
        with self._access("import_data") as conn:
            snapshot = parse_journal_json(json_data)
            journal_store.replace_all(conn, snapshot)

    # ── Database info ──

    def get_database_info(self) -> dict[str, int]:
        """Row counts per table and their total. Counting never fails."""
        with self._access("get_database_info") as conn:
            return journal_store.count_records(conn)

    def clear_all_data(self) -> None:
        """Empty all four tables."""
        with self._access("clear_all_data") as conn:
            journal_store.clear_all(conn)

    # ── Analysis ──

    def trading_stats(
        self,
        start_date: str | None = None,
        end_date: str | None = None,
    ) -> dict[str, Any]:
        """Summary statistics over all trades, optionally in a date range."""
        with self._access("trading_stats") as conn:
            trades = journal_store.get_trades(conn)
        return journal_stats.trading_stats(trades, start_date, end_date)

    def monthly_report(self, year: int, month: int) -> list[dict[str, Any]]:
        """Per-day totals for one month."""
        with self._access("monthly_report") as conn:
            trades = journal_store.get_trades(conn)
            return journal_stats.monthly_report(trades, year, month)

    def performance_by_zone(self) -> list[dict[str, Any]]:
        """Trade performance grouped by originating zone."""
        with self._access("performance_by_zone") as conn:
            trades = journal_store.get_trades(conn)
            zones = journal_store.get_zones(conn)
        return journal_stats.performance_by_zone(trades, zones)
