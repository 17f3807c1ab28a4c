"""Typed record shapes for the four journal tables.

Each record is a dataclass whose fields match its table's columns
one-to-one. ``from_dict`` decodes a JSON-shaped mapping field by field
and is the single entry point for every write, whether it comes from
a save request or from an imported document.

Notes:
    ``zone_name`` on trades and planned entries, and ``zone_type`` on
    planned entries, are copies taken at save time. They are not kept
    in sync when the referenced zone changes.

"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, ClassVar

from tradejournal.errors import RecordDecodeError

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


def _as_str(value: Any) -> str:
    if not isinstance(value, str):
        msg = f"expected a string, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def _as_float(value: Any) -> float:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int | float):
        msg = f"expected a number, got {type(value).__name__}"
        raise TypeError(msg)
    return float(value)


def _as_int32(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"expected an integer, got {type(value).__name__}"
        raise TypeError(msg)
    if not _INT32_MIN <= value <= _INT32_MAX:
        msg = f"integer {value} is out of the 32-bit range"
        raise TypeError(msg)
    return value


def _as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        msg = f"expected a boolean, got {type(value).__name__}"
        raise TypeError(msg)
    return value


# Keyed by the annotation string as written on the dataclass fields
_DECODERS: dict[str, Any] = {
    "str": _as_str,
    "float": _as_float,
    "int": _as_int32,
    "bool": _as_bool,
}


class JournalRecord:
    """Shared decode/encode behaviour for journal records."""

    TABLE: ClassVar[str]
    ID_FIELD: ClassVar[str] = "id"

    @classmethod
    def from_dict(cls, data: Any) -> Any:
        """Decode a JSON-shaped mapping into a record.

        Required fields must be present and non-null. Fields annotated
        ``X | None`` may be missing or null. Unknown keys are ignored.

        Args:
            data: Mapping of field name to value.

        Returns:
            A new record instance.

        Raises:
            RecordDecodeError: If ``data`` is not a mapping or any field
                has a missing or wrongly typed value.

        """
        if not isinstance(data, dict):
            msg = f"expected an object, got {type(data).__name__}"
            raise RecordDecodeError(cls.TABLE, msg)

        raw_id = data.get(cls.ID_FIELD)
        record_id = raw_id if isinstance(raw_id, str) else None

        values: dict[str, Any] = {}
        for f in fields(cls):  # type: ignore[arg-type]
            annotation = str(f.type)
            optional = annotation.endswith(" | None")
            decode = _DECODERS[annotation.removesuffix(" | None")]
            value = data.get(f.name)
            if value is None:
                if not optional:
                    raise RecordDecodeError(
                        cls.TABLE,
                        "missing required value",
                        field=f.name,
                        record_id=record_id,
                    )
                values[f.name] = None
                continue
            try:
                values[f.name] = decode(value)
            except TypeError as exc:
                raise RecordDecodeError(
                    cls.TABLE, str(exc), field=f.name, record_id=record_id
                ) from exc
        return cls(**values)  # type: ignore[call-arg]

    @classmethod
    def column_names(cls) -> list[str]:
        """Column names in table order."""
        return [f.name for f in fields(cls)]  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, Any]:
        """Convert the record to a JSON-ready dict."""
        return asdict(self)  # type: ignore[call-overload]

    def to_row(self) -> list[Any]:
        """Column values in table order, for parameter binding."""
        return [getattr(self, name) for name in self.column_names()]


@dataclass
class Trade(JournalRecord):
    """An executed or open trade.

    ``zone_id`` and ``planned_entry_id`` are informational
    back-references; they may point at records that no longer exist.
    """

    TABLE: ClassVar[str] = "trades"

    id: str
    date: str
    pair: str
    trade_type: str
    entry: float
    exit: float | None
    stop_loss: float
    take_profit: float
    size: float
    status: str
    pnl: float | None
    zone_id: str | None
    zone_name: str | None
    planned_entry_id: str | None
    risk_amount: float
    risk_ratio: float
    notes: str | None
    created_at: str
    updated_at: str


@dataclass
class Zone(JournalRecord):
    """A support/resistance or order-block price band."""

    TABLE: ClassVar[str] = "zones"

    id: str
    zone_type: str
    name: str
    start_price: float
    end_price: float
    strength: str
    break_strength: str | None
    position: str | None
    liquidity_type: str | None
    order_block_relation: str | None
    notes: str
    date: str
    active: bool
    created_at: str
    updated_at: str


@dataclass
class PlannedEntry(JournalRecord):
    """A queued, not-yet-executed trade plan derived from a zone."""

    TABLE: ClassVar[str] = "planned_entries"

    id: str
    zone_id: str
    zone_name: str
    zone_type: str
    entry_level: float
    take_profit: float
    stop_loss: float
    risk_ratio: float
    planned_entries: int
    notes: str
    created_at: str
    updated_at: str


@dataclass
class Setting(JournalRecord):
    """A key/value application setting.

    ``updated_at`` is assigned by the store on save; a decoded setting
    may leave it unset.
    """

    TABLE: ClassVar[str] = "settings"
    ID_FIELD: ClassVar[str] = "key"

    key: str
    value: str
    updated_at: str | None = None


@dataclass
class JournalSnapshot:
    """Decoded contents of all four tables, as read from an export."""

    trades: list[Trade]
    zones: list[Zone]
    planned_entries: list[PlannedEntry]
    settings: list[Setting]

    def counts(self) -> dict[str, int]:
        """Number of records per table."""
        return {
            "trades": len(self.trades),
            "zones": len(self.zones),
            "planned_entries": len(self.planned_entries),
            "settings": len(self.settings),
        }
