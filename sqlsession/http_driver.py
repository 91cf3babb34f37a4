from typing import Any, Dict, Optional
import base64
import json
import logging

import requests

from .driver import _BufferedDriver
from .errors import DriverError, DriverHttpError, DriverResponseError
from .result import ResultSet, Row, Value, column_index
from .sqlite_driver import sqlite_literal

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

class HttpDriver(_BufferedDriver):
    """Driver for a libsql server (sqld) reached over its HTTP interface.

    `connect` takes the server URL as `host`. With both `user` and
    `credential` the requests use basic auth; a lone `credential` is sent
    as a bearer token.
    """

    _session: Optional[requests.Session]
    _url: str
    _timeout: float

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        super().__init__()
        self._session = None
        self._url = ""
        self._timeout = timeout

    def _open(self, host: str, user: str, credential: str) -> None:
        session = requests.Session()
        if user:
            session.auth = (user, credential)
        elif credential:
            session.headers["Authorization"] = f"Bearer {credential}"

        health_url = host.rstrip("/") + "/health"
        try:
            resp = session.get(health_url, timeout=self._timeout)
        except requests.RequestException as e:
            session.close()
            raise DriverError(str(e)) from e
        if resp.status_code != 200:
            session.close()
            raise DriverHttpError(resp.status_code, _error_message(resp.content))

        self._session = session
        self._url = host
        logger.debug("Connected to %s", host)

    def _run(self, sql: str) -> ResultSet:
        assert self._session is not None
        req_body = {
            "statements": [_encode_stmt(sql)],
        }

        try:
            resp = self._session.post(self._url, json=req_body, timeout=self._timeout)
        except requests.RequestException as e:
            raise DriverError(str(e)) from e
        if not resp.ok:
            raise DriverHttpError(resp.status_code, _error_message(resp.content))

        try:
            resp_json = resp.json()
        except ValueError as e:
            raise DriverResponseError(f"Invalid JSON response: {e}") from e
        if not isinstance(resp_json, list) or len(resp_json) != 1:
            raise DriverResponseError(f"Expected one result, got {resp_json!r}")
        try:
            return _decode_result_set(resp_json[0])
        except (KeyError, TypeError, ValueError) as e:
            raise DriverResponseError(f"Malformed result: {e!r}") from e

    def _close(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    def escape_bytes(self, buffer: bytes, length: int) -> str:
        return sqlite_literal(bytes(buffer[:length]))

def _error_message(resp_body: bytes) -> Optional[str]:
    try:
        message = json.loads(resp_body).get("error")
    except (ValueError, AttributeError):
        return None
    return message if isinstance(message, str) else None

def _encode_stmt(sql: str) -> Any:
    return {
        "q": sql,
        "params": [],
    }

def _decode_result_set(result_set_json: Any) -> ResultSet:
    if "error" in result_set_json:
        raise DriverResponseError(result_set_json["error"]["message"])

    results_json = result_set_json["results"]
    columns = tuple(str(col_json) for col_json in results_json["columns"])
    column_idxs = column_index(columns)
    rows = [_decode_row(row_json, len(columns), column_idxs) for row_json in results_json["rows"]]
    return ResultSet(columns, rows)

def _decode_row(row_json: Any, column_count: int, column_idxs: Dict[str, int]) -> Row:
    values = tuple(_decode_value(value_json) for value_json in row_json)
    if len(values) != column_count:
        raise DriverResponseError(f"Received {len(values)} values, expected {column_count} columns")
    return Row(column_idxs, values)

def _decode_value(value_json: Any) -> Value:
    if isinstance(value_json, int) or isinstance(value_json, float):
        return value_json
    elif isinstance(value_json, str):
        return value_json
    elif value_json is None:
        return None
    elif isinstance(value_json, dict) and "base64" in value_json:
        return base64.b64decode(value_json["base64"] + "===")
    else:
        raise DriverResponseError(f"Received unexpected JSON value of type {type(value_json)}")
