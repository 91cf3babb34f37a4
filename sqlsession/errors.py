from typing import Optional

class DriverError(RuntimeError):
    pass

class DriverResponseError(DriverError):
    pass

class NotConnectedError(DriverError):
    def __str__(self) -> str:
        return "Driver is not connected"

class DriverHttpError(DriverError):
    def __init__(self, status: int, message: Optional[str]):
        self.status = status
        self.message = message

    def __str__(self) -> str:
        return f"HTTP status {self.status}, message={self.message!r}"
