"""Error types for the journal store and its service boundary.

Storage code raises subclasses of :class:`StorageError`, each tagged
with an :class:`ErrorKind`. The service façade logs the kind and
re-raises a :class:`ServiceError` carrying only a display message.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Category of an internal storage failure."""

    DECODE = "decode"
    VALIDATION = "validation"
    IO = "io"
    LOCK = "lock"


class StorageError(Exception):
    """Base class for every failure raised by the journal store."""

    kind: ErrorKind = ErrorKind.IO


class RecordDecodeError(StorageError):
    """A value could not be decoded into its record shape.

    Attributes:
        table: Table the record belongs to.
        field: Offending field name, if the failure is field-specific.
        record_id: Identifier of the record, when it could be read.

    """

    kind = ErrorKind.DECODE

    def __init__(
        self,
        table: str,
        message: str,
        *,
        field: str | None = None,
        record_id: str | None = None,
    ) -> None:
        self.table = table
        self.field = field
        self.record_id = record_id
        where = table if record_id is None else f"{table} record '{record_id}'"
        if field is not None:
            where = f"{where}, field '{field}'"
        super().__init__(f"Invalid {where}: {message}")


class ValidationError(StorageError):
    """A document failed structural validation before any write happened."""

    kind = ErrorKind.VALIDATION


class StorageIOError(StorageError):
    """The database could not be opened, read, or written."""

    kind = ErrorKind.IO


class LockTimeoutError(StorageError):
    """Exclusive access to the store could not be acquired in time."""

    kind = ErrorKind.LOCK


class ServiceError(Exception):
    """Opaque, display-only error returned across the service boundary."""
