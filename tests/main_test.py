"""Tests for the sidecar entry point (dispatch and message loop)."""

from __future__ import annotations

import json
from io import StringIO
from unittest.mock import patch

import pytest
from tradejournal.main import dispatch, handle_request, main, serve


def _run(service, *requests: dict) -> list[dict]:
    stdin = StringIO("".join(json.dumps(r) + "\n" for r in requests))
    stdout = StringIO()
    with patch("sys.stdin", stdin), patch("sys.stdout", stdout):
        serve(service)
    return [json.loads(line) for line in stdout.getvalue().splitlines() if line]


class TestDispatch:
    """Tests for the dispatch function."""

    def test_unknown_method_raises(self, service) -> None:
        with pytest.raises(ValueError, match="Unknown method"):
            dispatch(service, "nonexistent.method", {})

    def test_unknown_method_includes_name(self, service) -> None:
        with pytest.raises(ValueError, match=r"foo\.bar"):
            dispatch(service, "foo.bar", {})

    def test_routes_to_service(self, service, sample_trade) -> None:
        dispatch(service, "trades.save", {"trade": sample_trade})
        assert dispatch(service, "trades.list", {}) == [sample_trade]
        dispatch(service, "trades.delete", {"id": "t1"})
        assert dispatch(service, "data.info", {})["total"] == 0


class TestServe:
    """Tests for the stdin/stdout message loop."""

    def test_valid_request_returns_response(self, service) -> None:
        responses = _run(
            service,
            {"id": "1", "method": "settings.save", "params": {"key": "k", "value": "v"}},
            {"id": "2", "method": "settings.get", "params": {"key": "k"}},
        )
        assert responses[0] == {"id": "1", "result": None}
        assert responses[1] == {"id": "2", "result": "v"}

    def test_missing_setting_returns_null(self, service) -> None:
        responses = _run(
            service, {"id": "1", "method": "settings.get", "params": {"key": "nope"}}
        )
        assert responses[0]["result"] is None
        assert "error" not in responses[0]

    def test_invalid_json_returns_error(self, service) -> None:
        stdin = StringIO("not valid json\n")
        stdout = StringIO()

        with patch("sys.stdin", stdin), patch("sys.stdout", stdout):
            serve(service)

        response = json.loads(stdout.getvalue().strip())
        assert response["id"] == "unknown"
        assert "error" in response

    def test_missing_method_returns_error(self, service) -> None:
        responses = _run(service, {"id": "2"})
        assert responses[0]["id"] == "2"
        assert "error" in responses[0]

    def test_empty_lines_are_skipped(self, service) -> None:
        request = json.dumps({"id": "3", "method": "data.info", "params": {}})
        stdin = StringIO("\n\n" + request + "\n\n")
        stdout = StringIO()

        with patch("sys.stdin", stdin), patch("sys.stdout", stdout):
            serve(service)

        lines = [line for line in stdout.getvalue().strip().split("\n") if line]
        assert len(lines) == 1

    def test_storage_error_is_flattened_to_message(self, service, sample_trade) -> None:
        del sample_trade["pair"]
        responses = _run(
            service, {"id": "4", "method": "trades.save", "params": {"trade": sample_trade}}
        )
        error = responses[0]["error"]
        assert "trades record 't1'" in error["message"]
        assert "traceback" in error

    def test_import_export_over_protocol(self, service, sample_zone) -> None:
        service.save_zone(sample_zone)
        exported = _run(service, {"id": "5", "method": "data.export", "params": {}})
        document = exported[0]["result"]

        responses = _run(
            service,
            {"id": "6", "method": "data.clear", "params": {}},
            {"id": "7", "method": "data.import", "params": {"json_data": document}},
            {"id": "8", "method": "zones.list", "params": {}},
        )
        assert responses[2]["result"] == [sample_zone]

    def test_analysis_results_are_plain_json(self, service, sample_trade) -> None:
        service.save_trade({**sample_trade, "status": "closed", "pnl": 40.0})
        responses = _run(
            service,
            {"id": "9", "method": "analysis.trading_stats", "params": {}},
            {
                "id": "10",
                "method": "analysis.monthly_report",
                "params": {"year": 2024, "month": 3},
            },
        )
        assert responses[0]["result"]["total_pnl"] == 40.0
        assert responses[0]["result"]["closed_trades"] == 1
        assert responses[1]["result"][0]["trades_count"] == 1


class TestHandleRequest:
    """Tests for answering a single protocol line."""

    def test_result_carries_request_id(self, service) -> None:
        line = json.dumps({"id": "a", "method": "settings.list"})
        assert handle_request(service, line) == {"id": "a", "result": []}

    def test_non_object_request_is_error(self, service) -> None:
        response = handle_request(service, "[1, 2]")
        assert response["id"] == "unknown"
        assert "message" in response["error"]

    def test_bad_params_is_error(self, service) -> None:
        line = json.dumps({"id": "b", "method": "settings.get", "params": {"nope": 1}})
        response = handle_request(service, line)
        assert response["id"] == "b"
        assert "nope" in response["error"]["message"]


class TestMain:
    """Tests for process bootstrap."""

    def test_opens_database_in_data_dir(self, tmp_path) -> None:
        request = json.dumps({"id": "1", "method": "data.info", "params": {}})
        stdout = StringIO()

        with (
            patch("sys.stdin", StringIO(request + "\n")),
            patch("sys.stdout", stdout),
            patch("tradejournal.main.log_config.setup"),
        ):
            main(["--data-dir", str(tmp_path / "journal")])

        response = json.loads(stdout.getvalue().strip())
        assert response["result"]["total"] == 0
        assert (tmp_path / "journal" / "trading_system.db").exists()
