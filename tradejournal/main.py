"""Trading journal sidecar entry point.

Opens the journal database once, then communicates with the desktop
shell via stdin/stdout using newline-delimited JSON messages.

Protocol:
    Request:  {"id": "uuid", "method": "string", "params": {}}
    Response: {"id": "uuid", "result": {}}
    Error:    {"id": "uuid", "error": {"message": "string"}}
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Any

from tradejournal import log_config
from tradejournal.config import DEFAULT_DATA_DIR, StoreConfig
from tradejournal.service import JournalService

logger = logging.getLogger(__name__)


def dispatch(service: JournalService, method: str, params: dict[str, Any]) -> Any:
    """Route a method call to the appropriate service operation.

    Args:
        service: The journal service owning the database.
        method: The method name (e.g., "trades.save").
        params: Keyword arguments for the operation.

    Returns:
        The result of the method call.

    Raises:
        ValueError: If the method is not recognized.

    """
    handlers: dict[str, Any] = {
        # Trades
        "trades.save": service.save_trade,
        "trades.list": service.get_trades,
        "trades.delete": service.delete_trade,
        # Zones
        "zones.save": service.save_zone,
        "zones.list": service.get_zones,
        "zones.delete": service.delete_zone,
        # Planned entries
        "planned_entries.save": service.save_planned_entry,
        "planned_entries.list": service.get_planned_entries,
        "planned_entries.delete": service.delete_planned_entry,
        # Settings
        "settings.save": service.save_setting,
        "settings.get": service.get_setting,
        "settings.list": service.get_all_settings,
        "settings.delete": service.delete_setting,
        # Export/Import
        "data.export": service.export_data,
        "data.import": service.import_data,
        # Database info
        "data.info": service.get_database_info,
        "data.clear": service.clear_all_data,
        # Analysis
        "analysis.trading_stats": service.trading_stats,
        "analysis.monthly_report": service.monthly_report,
        "analysis.performance_by_zone": service.performance_by_zone,
    }
    if method not in handlers:
        msg = f"Unknown method: {method}"
        raise ValueError(msg)
    return handlers[method](**params)


def handle_request(service: JournalService, line: str) -> dict[str, Any]:
    """Answer one protocol line with a result or an error payload."""
    request: Any = None
    try:
        request = json.loads(line)
        method = request["method"]
        result = dispatch(service, method, request.get("params", {}))
    except Exception as exc:  # noqa: BLE001 - every failure becomes an error response
        request_id = (
            request.get("id", "unknown") if isinstance(request, dict) else "unknown"
        )
        return {
            "id": request_id,
            "error": {
                "message": str(exc),
                "traceback": traceback.format_exc(),
            },
        }
    return {"id": request.get("id", "unknown"), "result": result}


def serve(service: JournalService) -> None:
    """Run the message loop until stdin is closed.

    Blank lines are skipped; every other line gets exactly one
    response line on stdout.
    """
    for raw_line in sys.stdin:
        stripped = raw_line.strip()
        if not stripped:
            continue
        response = handle_request(service, stripped)
        sys.stdout.write(json.dumps(response) + "\n")
        sys.stdout.flush()


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Trading journal storage sidecar")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=DEFAULT_DATA_DIR,
        help=f"Directory holding the journal database (default: {DEFAULT_DATA_DIR})",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Open the journal database and serve requests until stdin closes."""
    args = _parse_args(argv)
    log_config.setup(verbose=args.verbose)

    config = StoreConfig(data_dir=args.data_dir)
    service = JournalService.open(config)
    logger.info("Serving journal requests for %s", config.db_path)
    try:
        serve(service)
    finally:
        service.close()


if __name__ == "__main__":
    main()
