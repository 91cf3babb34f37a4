from typing import Dict, List, Optional, Sequence, Tuple
import os
import pytest
import requests

import sqlsession
from sqlsession.driver import Driver, RowStatus
from sqlsession.errors import DriverResponseError
from sqlsession.result import Value

Script = Dict[str, Tuple[Sequence[str], Sequence[Sequence[Value]]]]

class FakeDriver(Driver):
    """In-memory driver that answers scripted statements.

    SQL missing from the script fails to execute. Reads delegate to plain
    Python conversions so tests see exactly which index was asked for.
    """

    def __init__(self, script: Optional[Script] = None) -> None:
        self.script: Script = dict(script or {})
        self.executed: List[str] = []
        self.reads: List[Tuple[str, int]] = []
        self.connected_with: Optional[Tuple[str, str, str]] = None
        self.cursor_open = False
        self.ended = 0
        self.closed = False
        self.fail_start = False
        self.last_error = None
        self._columns: Sequence[str] = ()
        self._rows: Sequence[Sequence[Value]] = ()
        self._has_result = False
        self._pos = -1

    def connect(self, host: str, user: str, credential: str) -> bool:
        self.connected_with = (host, user, credential)
        return True

    def execute(self, sql: str) -> bool:
        self.executed.append(sql)
        if sql not in self.script:
            self.last_error = DriverResponseError(f"no such statement: {sql}")
            self._has_result = False
            return False
        self.last_error = None
        self._columns, self._rows = self.script[sql]
        self._has_result = True
        self._pos = -1
        return True

    def start_row_iteration(self) -> bool:
        if not self._has_result or self.fail_start:
            return False
        self.cursor_open = True
        self._pos = -1
        return True

    def advance_row(self) -> RowStatus:
        if not self.cursor_open:
            return RowStatus.ERROR
        self._pos += 1
        if self._pos >= len(self._rows):
            return RowStatus.DONE
        return RowStatus.ROW

    def end_row_iteration(self) -> None:
        self.cursor_open = False
        self.ended += 1

    def column_count(self) -> int:
        return len(self._columns) if self._has_result else 0

    def column_name(self, index: int) -> str:
        return self._columns[index]

    def _value(self, kind: str, index: int) -> Value:
        self.reads.append((kind, index))
        return self._rows[self._pos][index]

    def is_null(self, index: int) -> bool:
        return self._value("null", index) is None

    def read_string(self, index: int) -> str:
        value = self._value("string", index)
        return "" if value is None else str(value)

    def read_int32(self, index: int) -> int:
        return int(self._value("int32", index) or 0)

    def read_float(self, index: int) -> float:
        return float(self._value("float", index) or 0.0)

    def read_bool(self, index: int) -> bool:
        return bool(self._value("bool", index))

    def read_binary(self, index: int, buffer: bytearray, max_size: int) -> int:
        data = self._value("binary", index)
        assert isinstance(data, bytes)
        data = data[:max_size]
        buffer[:len(data)] = data
        return len(data)

    def read_bigint(self, index: int) -> int:
        return int(self._value("bigint", index) or 0)

    def escape_bytes(self, buffer: bytes, length: int) -> str:
        return "<" + bytes(buffer[:length]).hex() + ">"

    def close(self) -> None:
        self.closed = True

@pytest.fixture
def fake_driver():
    return FakeDriver()

@pytest.fixture
def session(fake_driver):
    config = sqlsession.SessionConfig(host="fake://db", user="alice", credential="s3cret")
    return sqlsession.Session(config, driver=fake_driver)

@pytest.fixture
def file_url(tmp_path):
    return f"file://{tmp_path.absolute() / 'test.db'}"

@pytest.fixture
def sqlite_session(file_url):
    with sqlsession.Session(sqlsession.SessionConfig(host=file_url)) as session:
        assert session.connect()
        yield session

@pytest.fixture
def http_url():
    env_name = "SQLSESSION_TEST_URL"
    env_url = os.getenv(env_name)
    if env_url is not None:
        return env_url

    default_url = "http://localhost:8080"
    if is_libsql_alive(default_url):
        return default_url

    pytest.skip(f"Skipping HTTP test because environment variable {env_name} is not defined "
        f"and we could not reach the default server at {default_url}")

def is_libsql_alive(url: str) -> bool:
    try:
        return requests.get(f"{url}/health", timeout=1).status_code == 200
    except requests.RequestException:
        return False
