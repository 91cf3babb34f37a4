from typing import Optional
import logging
import sqlite3
import urllib.parse

from .driver import _BufferedDriver
from .errors import DriverError, DriverResponseError
from .result import ResultSet

logger = logging.getLogger(__name__)

class SqliteDriver(_BufferedDriver):
    """Driver for a local SQLite database.

    The `host` given to `connect` is a `file:` URL, a plain path or
    `:memory:`. SQLite has no accounts, so `user` and `credential` are ignored.
    """

    _conn: Optional[sqlite3.Connection]

    def __init__(self) -> None:
        super().__init__()
        self._conn = None

    def _open(self, host: str, user: str, credential: str) -> None:
        path = database_path(host)
        try:
            self._conn = sqlite3.connect(path, check_same_thread=False, isolation_level=None)
        except sqlite3.Error as e:
            raise DriverError(str(e)) from e
        logger.debug("Opened SQLite database %r", path)

    def _run(self, sql: str) -> ResultSet:
        assert self._conn is not None
        try:
            cursor = self._conn.execute(sql)
            rows = cursor.fetchall()
        except (sqlite3.Error, sqlite3.Warning, ValueError) as e:
            raise DriverResponseError(str(e)) from e

        if cursor.description is not None:
            columns = tuple(descr[0] for descr in cursor.description)
        else:
            columns = ()
        cursor.close()
        return ResultSet.from_values(columns, rows)

    def _close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def escape_bytes(self, buffer: bytes, length: int) -> str:
        return sqlite_literal(bytes(buffer[:length]))

def database_path(host: str) -> str:
    if host in ("", ":memory:"):
        return ":memory:"
    parsed_url = urllib.parse.urlparse(host)
    if parsed_url.scheme == "file":
        return urllib.parse.unquote(parsed_url.path) or ":memory:"
    return host

def sqlite_literal(data: bytes) -> str:
    """Render `data` as an SQLite literal that parses back to the same bytes.

    UTF-8 text without NUL becomes a quoted string with embedded quotes
    doubled; anything else becomes a hex blob literal.
    """
    text: Optional[str]
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        text = None
    if text is None or "\x00" in text:
        return "X'" + data.hex().upper() + "'"
    return "'" + text.replace("'", "''") + "'"
