"""Aggregate reports over journal trades.

Provides the fixed summary views the journal front-end shows:
overall trading statistics, a per-day monthly report, and
performance grouped by originating zone.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tradejournal.db.records import Trade, Zone

_CLOSED = "closed"
_OPEN = "open"
_MONTHS_PER_YEAR = 12


def _pnl_array(trades: Sequence[Trade]) -> np.ndarray:
    """P&L per trade, with missing values as 0."""
    return np.array(
        [t.pnl if t.pnl is not None else 0.0 for t in trades], dtype=np.float64
    )


def _mean_risk_ratio(trades: Sequence[Trade]) -> float:
    if not trades:
        return 0.0
    return float(np.mean([t.risk_ratio for t in trades]))


def _win_rate(closed: Sequence[Trade]) -> float:
    """Percentage of closed trades with positive P&L."""
    if not closed:
        return 0.0
    winners = int(np.count_nonzero(_pnl_array(closed) > 0))
    return winners / len(closed) * 100.0


def trading_stats(
    trades: Sequence[Trade],
    start_date: str | None = None,
    end_date: str | None = None,
) -> dict[str, Any]:
    """Summarize trade outcomes.

    Args:
        trades: Trades to summarize.
        start_date: Inclusive lower bound on ``date``. Only applied
            together with ``end_date``.
        end_date: Inclusive upper bound on ``date``.

    Returns:
        Dict with total/closed/open/winning/losing counts, total P&L,
        average risk ratio, and win rate (percent of closed trades).

    """
    if start_date and end_date:
        trades = [t for t in trades if start_date <= t.date <= end_date]

    closed = [t for t in trades if t.status == _CLOSED]
    closed_pnl = _pnl_array(closed)

    return {
        "total_trades": len(trades),
        "closed_trades": len(closed),
        "open_trades": sum(1 for t in trades if t.status == _OPEN),
        "winning_trades": int(np.count_nonzero(closed_pnl > 0)),
        "losing_trades": int(np.count_nonzero(closed_pnl < 0)),
        "total_pnl": float(np.sum(_pnl_array(trades))),
        "avg_risk_ratio": _mean_risk_ratio(trades),
        "win_rate": _win_rate(closed),
    }


def monthly_report(
    trades: Sequence[Trade],
    year: int,
    month: int,
) -> list[dict[str, Any]]:
    """Per-day totals for one calendar month.

    Args:
        trades: Trades to group. Only those whose ``date`` starts with
            ``YYYY-MM`` are included.
        year: Calendar year.
        month: Calendar month, 1-12.

    Returns:
        One dict per trading day, sorted by ``trade_date`` ascending.

    Raises:
        ValueError: If month is outside 1-12.

    """
    if not 1 <= month <= _MONTHS_PER_YEAR:
        msg = f"month must be between 1 and 12, got {month}"
        raise ValueError(msg)

    prefix = f"{year:04d}-{month:02d}"
    by_day: dict[str, list[Trade]] = {}
    for trade in trades:
        if not trade.date.startswith(prefix):
            continue
        day = trade.date.split("T")[0]
        by_day.setdefault(day, []).append(trade)

    return [
        {
            "trade_date": day,
            "trades_count": len(day_trades),
            "daily_pnl": float(np.sum(_pnl_array(day_trades))),
            "avg_risk_ratio": _mean_risk_ratio(day_trades),
        }
        for day, day_trades in sorted(by_day.items())
    ]


def performance_by_zone(
    trades: Sequence[Trade],
    zones: Sequence[Zone],
) -> list[dict[str, Any]]:
    """Trade performance grouped by the zone each trade came from.

    Zones with no trades are omitted. Trades whose ``zone_id`` does not
    match any zone are ignored.

    Args:
        trades: All trades.
        zones: All zones, in the order results should follow.

    Returns:
        One dict per zone with at least one trade.

    """
    results: list[dict[str, Any]] = []
    for zone in zones:
        zone_trades = [t for t in trades if t.zone_id == zone.id]
        if not zone_trades:
            continue
        closed = [t for t in zone_trades if t.status == _CLOSED]
        results.append(
            {
                "zone_id": zone.id,
                "zone_name": zone.name,
                "zone_type": zone.zone_type,
                "total_trades": len(zone_trades),
                "closed_trades": len(closed),
                "winning_trades": int(np.count_nonzero(_pnl_array(closed) > 0)),
                "total_pnl": float(np.sum(_pnl_array(zone_trades))),
                "win_rate": _win_rate(closed),
                "avg_risk_ratio": _mean_risk_ratio(zone_trades),
            }
        )
    return results
