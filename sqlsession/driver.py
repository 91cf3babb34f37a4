from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterator, Optional
import logging

from . import coerce
from .errors import DriverError, NotConnectedError
from .result import ResultSet, Row, Value

logger = logging.getLogger(__name__)

class RowStatus(Enum):
    ROW = "row"
    DONE = "done"
    ERROR = "error"

class Driver(ABC):
    """Capability interface a `Session` runs on top of.

    Every operation reports failure through its return value: `bool` for
    connect, execute and start of iteration, `RowStatus` for advancing. Column
    reads take an ordinal index into the current row.
    """

    last_error: Optional[DriverError] = None

    @abstractmethod
    def connect(self, host: str, user: str, credential: str) -> bool:
        raise NotImplementedError()

    @abstractmethod
    def execute(self, sql: str) -> bool:
        raise NotImplementedError()

    @abstractmethod
    def start_row_iteration(self) -> bool:
        raise NotImplementedError()

    @abstractmethod
    def advance_row(self) -> RowStatus:
        raise NotImplementedError()

    @abstractmethod
    def end_row_iteration(self) -> None:
        raise NotImplementedError()

    @abstractmethod
    def column_count(self) -> int:
        raise NotImplementedError()

    @abstractmethod
    def column_name(self, index: int) -> str:
        raise NotImplementedError()

    @abstractmethod
    def is_null(self, index: int) -> bool:
        raise NotImplementedError()

    @abstractmethod
    def read_string(self, index: int) -> str:
        raise NotImplementedError()

    @abstractmethod
    def read_int32(self, index: int) -> int:
        raise NotImplementedError()

    @abstractmethod
    def read_float(self, index: int) -> float:
        raise NotImplementedError()

    @abstractmethod
    def read_bool(self, index: int) -> bool:
        raise NotImplementedError()

    @abstractmethod
    def read_binary(self, index: int, buffer: bytearray, max_size: int) -> int:
        raise NotImplementedError()

    @abstractmethod
    def read_bigint(self, index: int) -> int:
        raise NotImplementedError()

    @abstractmethod
    def escape_bytes(self, buffer: bytes, length: int) -> str:
        raise NotImplementedError()

    def close(self) -> None:
        pass

class _BufferedDriver(Driver):
    """Base for drivers that fetch a whole result set per statement.

    Subclasses implement `_open`, `_run` and optionally `_close`; this class
    keeps the buffered `ResultSet`, the row cursor and the per-index reads.
    """

    _connected: bool
    _result: Optional[ResultSet]
    _cursor: Optional[Iterator[Row]]
    _row: Optional[Row]

    def __init__(self) -> None:
        self._connected = False
        self._result = None
        self._cursor = None
        self._row = None
        self.last_error = None

    @abstractmethod
    def _open(self, host: str, user: str, credential: str) -> None:
        raise NotImplementedError()

    @abstractmethod
    def _run(self, sql: str) -> ResultSet:
        raise NotImplementedError()

    def _close(self) -> None:
        pass

    def connect(self, host: str, user: str, credential: str) -> bool:
        self.close()
        try:
            self._open(host, user, credential)
        except DriverError as e:
            logger.error("Could not connect to %r: %s", host, e)
            self.last_error = e
            self._connected = False
            return False
        self.last_error = None
        self._connected = True
        return True

    def execute(self, sql: str) -> bool:
        self._reset()
        logger.debug("Executing %r", sql)
        try:
            if not self._connected:
                raise NotConnectedError()
            self._result = self._run(sql)
        except DriverError as e:
            logger.warning("Statement failed: %s | Query: %r", e, sql)
            self.last_error = e
            return False
        self.last_error = None
        return True

    def start_row_iteration(self) -> bool:
        if self._result is None:
            return False
        self._cursor = iter(self._result)
        self._row = None
        return True

    def advance_row(self) -> RowStatus:
        if self._cursor is None:
            return RowStatus.ERROR
        self._row = next(self._cursor, None)
        if self._row is None:
            return RowStatus.DONE
        return RowStatus.ROW

    def end_row_iteration(self) -> None:
        self._reset()

    def column_count(self) -> int:
        if self._result is None:
            return 0
        return len(self._result.columns)

    def column_name(self, index: int) -> str:
        if self._result is None:
            return ""
        return self._result.columns[index]

    def _value(self, index: int) -> Value:
        if self._row is None:
            return None
        return self._row.value(index)

    def is_null(self, index: int) -> bool:
        return self._value(index) is None

    def read_string(self, index: int) -> str:
        return coerce.to_text(self._value(index))

    def read_int32(self, index: int) -> int:
        return coerce.to_int32(self._value(index))

    def read_float(self, index: int) -> float:
        return coerce.to_float(self._value(index))

    def read_bool(self, index: int) -> bool:
        return coerce.to_bool(self._value(index))

    def read_binary(self, index: int, buffer: bytearray, max_size: int) -> int:
        data = coerce.to_blob(self._value(index))[:max(max_size, 0)]
        buffer[:len(data)] = data
        return len(data)

    def read_bigint(self, index: int) -> int:
        return coerce.to_int64(self._value(index))

    def close(self) -> None:
        self._reset()
        if self._connected:
            self._connected = False
            self._close()

    def _reset(self) -> None:
        self._result = None
        self._cursor = None
        self._row = None
