"""Name-based column access and single-value queries on top of a `Driver`.

A `Session` never raises for database trouble. Failed statements come back
as `False` from `execute`, unknown column names read as the type's empty
value, and the `query_single_*` helpers return 0, 0.0 or "" whenever the
statement fails or yields no row. `last_error` keeps the driver's most recent
exception for callers that need to tell those cases apart.
"""

from enum import Enum
from typing import Any, Iterator, List, Optional, Union
import logging
import urllib.parse

from .config import SessionConfig
from .driver import Driver, RowStatus
from .errors import DriverError
from .http_driver import HttpDriver
from .result import find_column
from .sqlite_driver import SqliteDriver

logger = logging.getLogger(__name__)

Key = Union[int, str]

class SessionState(Enum):
    IDLE = "idle"
    EXECUTING = "executing"
    ITERATING = "iterating"
    ROW_READY = "row_ready"

def driver_for_url(url: str) -> Driver:
    """Pick a driver from the URL scheme.

    `http` and `https` reach a libsql server; `file`, a bare path or
    `:memory:` open a local SQLite database.
    """
    parsed_url = urllib.parse.urlparse(url)
    if parsed_url.scheme in ("http", "https"):
        return HttpDriver()
    elif parsed_url.scheme in ("file", ""):
        return SqliteDriver()
    else:
        raise ValueError(f"Unsupported URL scheme: {parsed_url.scheme!r}")

class Session:
    """A database session that reads columns by index or by name."""

    _config: SessionConfig
    _driver: Driver
    _columns: List[str]
    _state: SessionState

    def __init__(self, config: SessionConfig, driver: Optional[Driver] = None) -> None:
        self._config = config
        self._driver = driver if driver is not None else driver_for_url(config.host)
        self._columns = []
        self._state = SessionState.IDLE

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def driver(self) -> Driver:
        return self._driver

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def columns(self) -> List[str]:
        """Column names of the current result, in ordinal order."""
        return list(self._columns)

    @property
    def num_columns(self) -> int:
        return len(self._columns)

    @property
    def last_error(self) -> Optional[DriverError]:
        return self._driver.last_error

    def connect(self) -> bool:
        return self._driver.connect(
            self._config.host,
            self._config.user,
            self._config.credential.get_secret_value(),
        )

    def close(self) -> None:
        self._columns = []
        self._state = SessionState.IDLE
        self._driver.close()

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Row iteration
    # ------------------------------------------------------------------

    def execute(self, sql: str) -> bool:
        """Run `sql` and make its result current. Returns False on failure."""
        self._state = SessionState.EXECUTING
        self._columns = []
        if not self._driver.execute(sql):
            self._state = SessionState.IDLE
            return False
        self._columns = [self._driver.column_name(i) for i in range(self._driver.column_count())]
        return True

    def start_iteration(self) -> bool:
        if not self._driver.start_row_iteration():
            self._state = SessionState.IDLE
            return False
        self._state = SessionState.ITERATING
        return True

    def next_row(self) -> bool:
        """Advance to the next row; False once the rows are exhausted or on error."""
        if self._driver.advance_row() is RowStatus.ROW:
            self._state = SessionState.ROW_READY
            return True
        self._state = SessionState.ITERATING
        return False

    def end_iteration(self) -> None:
        self._driver.end_row_iteration()
        self._state = SessionState.IDLE

    def iter_rows(self) -> Iterator["Session"]:
        """Yield the session once per row of the current result.

        Iteration is ended when the rows run out and when the generator is
        closed early.
        """
        if not self.start_iteration():
            return
        try:
            while self.next_row():
                yield self
        finally:
            self.end_iteration()

    # ------------------------------------------------------------------
    # Column access
    # ------------------------------------------------------------------

    def resolve_column(self, name: str) -> Optional[int]:
        """Ordinal of the first column called `name`, or None if there is none."""
        return find_column(tuple(self._columns), name)

    def _index(self, key: Key) -> Optional[int]:
        if isinstance(key, str):
            index = self.resolve_column(key)
            if index is None:
                logger.debug("No column named %r in %r", key, self._columns)
            return index
        return key

    def get_null(self, key: Key) -> bool:
        index = self._index(key)
        if index is None:
            return True
        return self._driver.is_null(index)

    def get_string(self, key: Key) -> str:
        index = self._index(key)
        if index is None:
            return ""
        return self._driver.read_string(index)

    def get_int32(self, key: Key) -> int:
        index = self._index(key)
        if index is None:
            return 0
        return self._driver.read_int32(index)

    def get_float(self, key: Key) -> float:
        index = self._index(key)
        if index is None:
            return 0.0
        return self._driver.read_float(index)

    def get_bool(self, key: Key) -> bool:
        index = self._index(key)
        if index is None:
            return False
        return self._driver.read_bool(index)

    def get_binary(self, key: Key, buffer: bytearray, max_size: int) -> int:
        """Copy at most `max_size` bytes of the column into `buffer`; returns the count."""
        index = self._index(key)
        if index is None:
            return 0
        return self._driver.read_binary(index, buffer, max_size)

    def get_bigint(self, key: Key) -> int:
        index = self._index(key)
        if index is None:
            return 0
        return self._driver.read_bigint(index)

    # ------------------------------------------------------------------
    # Single value queries
    # ------------------------------------------------------------------

    def _first_row(self, sql: str) -> bool:
        if self.execute(sql) and self.start_iteration() and self.next_row():
            return True
        logger.warning("No value from query: %s", sql)
        # drop whatever part of the cursor got opened
        if self._state is not SessionState.IDLE:
            self.end_iteration()
        return False

    def query_single_int(self, sql: str) -> int:
        if not self._first_row(sql):
            return 0
        ret = self._driver.read_int32(0)
        self.end_iteration()
        return ret

    def query_single_float(self, sql: str) -> float:
        if not self._first_row(sql):
            return 0.0
        ret = self._driver.read_float(0)
        self.end_iteration()
        return ret

    def query_single_string(self, sql: str) -> str:
        if not self._first_row(sql):
            return ""
        ret = self._driver.read_string(0)
        self.end_iteration()
        return ret

    # ------------------------------------------------------------------
    # Escaping
    # ------------------------------------------------------------------

    def escape(self, value: str) -> str:
        """Quote `value` as a literal the driver's SQL dialect parses back unchanged."""
        data = value.encode()
        return self._driver.escape_bytes(data, len(data))
