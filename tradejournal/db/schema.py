"""DuckDB schema definitions for the trading journal.

Contains DDL statements for the four journal tables:
- trades: Executed and open trades
- zones: Support/resistance and order-block price bands
- planned_entries: Queued entry plans derived from zones
- settings: Key/value application settings

Every table is keyed by a caller-supplied string. There are no foreign
keys; ``zone_id`` and ``planned_entry_id`` are informational only.
Dates and timestamps are stored verbatim as ISO-8601 strings.

"""

from __future__ import annotations

# ── Trades ──

CREATE_TRADES = """
CREATE TABLE IF NOT EXISTS trades (
    id                VARCHAR PRIMARY KEY,
    date              VARCHAR NOT NULL,
    pair              VARCHAR NOT NULL,
    trade_type        VARCHAR NOT NULL,
    entry             DOUBLE NOT NULL,
    "exit"            DOUBLE,
    stop_loss         DOUBLE NOT NULL,
    take_profit       DOUBLE NOT NULL,
    size              DOUBLE NOT NULL,
    status            VARCHAR NOT NULL,
    pnl               DOUBLE,
    zone_id           VARCHAR,
    zone_name         VARCHAR,
    planned_entry_id  VARCHAR,
    risk_amount       DOUBLE NOT NULL,
    risk_ratio        DOUBLE NOT NULL,
    notes             VARCHAR,
    created_at        VARCHAR NOT NULL,
    updated_at        VARCHAR NOT NULL
);
"""

# ── Zones ──

CREATE_ZONES = """
CREATE TABLE IF NOT EXISTS zones (
    id                    VARCHAR PRIMARY KEY,
    zone_type             VARCHAR NOT NULL,
    name                  VARCHAR NOT NULL,
    start_price           DOUBLE NOT NULL,
    end_price             DOUBLE NOT NULL,
    strength              VARCHAR NOT NULL,
    break_strength        VARCHAR,
    "position"            VARCHAR,
    liquidity_type        VARCHAR,
    order_block_relation  VARCHAR,
    notes                 VARCHAR NOT NULL,
    date                  VARCHAR NOT NULL,
    active                BOOLEAN NOT NULL,
    created_at            VARCHAR NOT NULL,
    updated_at            VARCHAR NOT NULL
);
"""

# ── Planned Entries ──

CREATE_PLANNED_ENTRIES = """
CREATE TABLE IF NOT EXISTS planned_entries (
    id               VARCHAR PRIMARY KEY,
    zone_id          VARCHAR NOT NULL,
    zone_name        VARCHAR NOT NULL,
    zone_type        VARCHAR NOT NULL,
    entry_level      DOUBLE NOT NULL,
    take_profit      DOUBLE NOT NULL,
    stop_loss        DOUBLE NOT NULL,
    risk_ratio       DOUBLE NOT NULL,
    planned_entries  INTEGER NOT NULL,
    notes            VARCHAR NOT NULL,
    created_at       VARCHAR NOT NULL,
    updated_at       VARCHAR NOT NULL
);
"""

# ── Settings ──

CREATE_SETTINGS = """
CREATE TABLE IF NOT EXISTS settings (
    key         VARCHAR PRIMARY KEY,
    value       VARCHAR NOT NULL,
    updated_at  VARCHAR NOT NULL
);
"""

# All DDL statements in creation order
ALL_TABLES: list[str] = [
    CREATE_TRADES,
    CREATE_ZONES,
    CREATE_PLANNED_ENTRIES,
    CREATE_SETTINGS,
]

# Table names in export/clear order
TABLE_NAMES: tuple[str, ...] = ("trades", "zones", "planned_entries", "settings")
