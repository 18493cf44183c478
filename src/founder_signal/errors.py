"""Error type raised by routers and rendered as ``{"error", "details"}``."""

from typing import Any


class ApiError(Exception):
    """An error that maps directly onto an HTTP status and JSON body."""

    def __init__(self, status_code: int, message: str, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details

    def to_body(self) -> dict:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body
