"""Tests for record decoding."""

from __future__ import annotations

import pytest
from tradejournal.db.records import PlannedEntry, Setting, Trade, Zone
from tradejournal.errors import ErrorKind, RecordDecodeError


class TestTradeFromDict:
    """Tests for decoding trades."""

    def test_decodes_complete_trade(self, sample_trade):
        trade = Trade.from_dict(sample_trade)
        assert trade.id == "t1"
        assert trade.entry == 1.1
        assert trade.exit is None
        assert trade.to_dict() == sample_trade

    def test_optional_fields_may_be_missing(self, sample_trade):
        for name in ("exit", "pnl", "zone_id", "zone_name", "planned_entry_id", "notes"):
            del sample_trade[name]
        trade = Trade.from_dict(sample_trade)
        assert trade.pnl is None
        assert trade.notes is None

    def test_integer_numbers_become_floats(self, sample_trade):
        sample_trade["size"] = 10000
        trade = Trade.from_dict(sample_trade)
        assert isinstance(trade.size, float)

    def test_unknown_keys_ignored(self, sample_trade):
        sample_trade["legacy_field"] = "x"
        assert Trade.from_dict(sample_trade).id == "t1"

    def test_missing_required_field(self, sample_trade):
        del sample_trade["stop_loss"]
        with pytest.raises(RecordDecodeError, match="stop_loss") as exc_info:
            Trade.from_dict(sample_trade)
        assert exc_info.value.record_id == "t1"
        assert exc_info.value.field == "stop_loss"
        assert exc_info.value.kind is ErrorKind.DECODE

    def test_string_for_number_rejected(self, sample_trade):
        sample_trade["entry"] = "1.1000"
        with pytest.raises(RecordDecodeError, match="expected a number"):
            Trade.from_dict(sample_trade)

    def test_bool_for_number_rejected(self, sample_trade):
        sample_trade["risk_ratio"] = True
        with pytest.raises(RecordDecodeError, match="risk_ratio"):
            Trade.from_dict(sample_trade)

    def test_non_object_rejected(self):
        with pytest.raises(RecordDecodeError, match="expected an object"):
            Trade.from_dict(["t1"])

    def test_error_without_readable_id(self, sample_trade):
        del sample_trade["id"]
        with pytest.raises(RecordDecodeError) as exc_info:
            Trade.from_dict(sample_trade)
        assert exc_info.value.record_id is None
        assert exc_info.value.field == "id"


class TestZoneFromDict:
    """Tests for decoding zones."""

    def test_active_must_be_bool(self, sample_zone):
        sample_zone["active"] = 1
        with pytest.raises(RecordDecodeError, match="expected a boolean"):
            Zone.from_dict(sample_zone)

    def test_no_range_validation(self, sample_zone):
        sample_zone["start_price"] = -5.0
        sample_zone["end_price"] = -10.0
        zone = Zone.from_dict(sample_zone)
        assert zone.start_price == -5.0


class TestPlannedEntryFromDict:
    """Tests for decoding planned entries."""

    def test_planned_entries_must_be_integer(self, sample_planned_entry):
        sample_planned_entry["planned_entries"] = 2.5
        with pytest.raises(RecordDecodeError, match="expected an integer"):
            PlannedEntry.from_dict(sample_planned_entry)

    def test_planned_entries_32_bit_range(self, sample_planned_entry):
        sample_planned_entry["planned_entries"] = 2**31
        with pytest.raises(RecordDecodeError, match="32-bit"):
            PlannedEntry.from_dict(sample_planned_entry)


class TestSettingFromDict:
    """Tests for decoding settings."""

    def test_updated_at_optional(self):
        setting = Setting.from_dict({"key": "theme", "value": "dark"})
        assert setting.updated_at is None

    def test_error_names_key(self):
        with pytest.raises(RecordDecodeError, match="'theme'"):
            Setting.from_dict({"key": "theme", "value": 3})

    def test_column_order(self):
        assert Setting.column_names() == ["key", "value", "updated_at"]
