"""Runtime configuration for the trading journal sidecar.

Configuration comes only from process-startup flags (see
``tradejournal.main``) and constructor arguments; there is no
environment-variable layer. The on-disk layout is::

    ~/.tradejournal/
      data/
        trading_system.db

"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

# Default data directory (can be overridden for testing)
DEFAULT_DATA_DIR = Path.home() / ".tradejournal" / "data"
DEFAULT_DB_FILENAME = "trading_system.db"
DEFAULT_LOCK_TIMEOUT = 30.0


@dataclass
class StoreConfig:
    """Location of the journal database and access-scope settings.

    Attributes:
        data_dir: Application-scoped data directory, created on first run.
        db_filename: Name of the database file inside ``data_dir``.
        lock_timeout: Seconds to wait for exclusive access before failing.

    """

    data_dir: Path = field(default_factory=lambda: DEFAULT_DATA_DIR)
    db_filename: str = DEFAULT_DB_FILENAME
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT

    def __post_init__(self) -> None:
        """Normalize the data directory and validate the lock timeout."""
        self.data_dir = Path(self.data_dir).expanduser()
        if self.lock_timeout <= 0:
            msg = f"lock_timeout must be positive, got {self.lock_timeout}"
            raise ValueError(msg)

    @property
    def db_path(self) -> Path:
        """Full path of the database file."""
        return self.data_dir / self.db_filename
