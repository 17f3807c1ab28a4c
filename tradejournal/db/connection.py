"""DuckDB connection management for the trading journal.

Handles database initialization, schema creation, and connection
lifecycle. The journal lives in a single file inside the application
data directory (see ``tradejournal.config``)::

    ~/.tradejournal/
      data/
        trading_system.db

"""

from __future__ import annotations

import logging
from pathlib import Path

import duckdb

from tradejournal.config import StoreConfig
from tradejournal.db.schema import ALL_TABLES
from tradejournal.errors import StorageIOError

logger = logging.getLogger(__name__)


def get_connection(
    db_path: str | Path | None = None,
) -> duckdb.DuckDBPyConnection:
    """Open a DuckDB connection.

    Args:
        db_path: Path to the database file. If None, uses in-memory database.

    Returns:
        Active DuckDB connection.

    Raises:
        StorageIOError: If the directory cannot be created or the file
            cannot be opened.

    """
    if db_path is None:
        return duckdb.connect(":memory:")

    path = Path(db_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return duckdb.connect(str(path))
    except (OSError, duckdb.Error) as exc:
        msg = f"Cannot open journal database at {path}: {exc}"
        raise StorageIOError(msg) from exc


def _create_schema(conn: duckdb.DuckDBPyConnection) -> None:
    try:
        for ddl in ALL_TABLES:
            conn.execute(ddl)
    except duckdb.Error as exc:
        msg = f"Cannot create journal schema: {exc}"
        raise StorageIOError(msg) from exc


def init_journal_db(
    db_path: str | Path | None = None,
) -> duckdb.DuckDBPyConnection:
    """Initialize the journal database with schema.

    Creates tables: trades, zones, planned_entries, settings. Safe to
    call against an existing database.

    Args:
        db_path: Path to the database file.
            Defaults to ~/.tradejournal/data/trading_system.db.

    Returns:
        Initialized DuckDB connection.

    """
    if db_path is None:
        db_path = StoreConfig().db_path

    conn = get_connection(db_path)
    try:
        _create_schema(conn)
    except StorageIOError:
        conn.close()
        raise
    logger.info("Journal database initialized at %s", db_path)
    return conn


def init_memory_db() -> duckdb.DuckDBPyConnection:
    """Create an in-memory database with full schema.

    Useful for testing and ephemeral operations.

    Returns:
        In-memory DuckDB connection with all tables created.

    """
    conn = get_connection(None)
    _create_schema(conn)
    return conn
