from .config import SessionConfig, get_config
from .driver import Driver, RowStatus
from .errors import DriverError, DriverHttpError, DriverResponseError, NotConnectedError
from .http_driver import HttpDriver
from .result import ResultSet, Row, Value
from .session import Session, SessionState, driver_for_url
from .sqlite_driver import SqliteDriver, sqlite_literal

__all__ = [
    "Session",
    "SessionState",
    "SessionConfig",
    "get_config",
    "driver_for_url",
    "Driver",
    "RowStatus",
    "SqliteDriver",
    "HttpDriver",
    "sqlite_literal",
    "ResultSet",
    "Row",
    "Value",
    "DriverError",
    "DriverResponseError",
    "DriverHttpError",
    "NotConnectedError",
]
