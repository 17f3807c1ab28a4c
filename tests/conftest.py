"""Shared pytest fixtures for the trading journal tests."""

from __future__ import annotations

from typing import Any

import pytest
from tradejournal.db.connection import init_memory_db
from tradejournal.service import JournalService


@pytest.fixture
def db():
    """Provide an in-memory journal database."""
    conn = init_memory_db()
    yield conn
    conn.close()


@pytest.fixture
def service():
    """Provide a journal service over an in-memory database."""
    svc = JournalService(init_memory_db(), lock_timeout=1.0)
    yield svc
    svc.close()


@pytest.fixture
def sample_trade() -> dict[str, Any]:
    """Provide a complete open EURUSD trade."""
    return {
        "id": "t1",
        "date": "2024-03-15T09:30:00Z",
        "pair": "EURUSD",
        "trade_type": "buy",
        "entry": 1.1000,
        "exit": None,
        "stop_loss": 1.0950,
        "take_profit": 1.1100,
        "size": 10000.0,
        "status": "open",
        "pnl": None,
        "zone_id": "z1",
        "zone_name": "Weekly demand",
        "planned_entry_id": None,
        "risk_amount": 50.0,
        "risk_ratio": 2.0,
        "notes": "London open breakout",
        "created_at": "2024-03-15T09:30:00Z",
        "updated_at": "2024-03-15T09:30:00Z",
    }


@pytest.fixture
def sample_zone() -> dict[str, Any]:
    """Provide an active demand zone."""
    return {
        "id": "z1",
        "zone_type": "demand",
        "name": "Weekly demand",
        "start_price": 1.0900,
        "end_price": 1.0950,
        "strength": "strong",
        "break_strength": None,
        "position": "below",
        "liquidity_type": None,
        "order_block_relation": "inside",
        "notes": "",
        "date": "2024-03-10",
        "active": True,
        "created_at": "2024-03-10T08:00:00Z",
        "updated_at": "2024-03-10T08:00:00Z",
    }


@pytest.fixture
def sample_planned_entry() -> dict[str, Any]:
    """Provide a planned entry at the weekly demand zone."""
    return {
        "id": "p1",
        "zone_id": "z1",
        "zone_name": "Weekly demand",
        "zone_type": "demand",
        "entry_level": 1.0940,
        "take_profit": 1.1050,
        "stop_loss": 1.0890,
        "risk_ratio": 2.2,
        "planned_entries": 2,
        "notes": "scale in",
        "created_at": "2024-03-11T10:00:00Z",
        "updated_at": "2024-03-11T10:00:00Z",
    }
