"""
Error taxonomy for the ingestion pipeline and its HTTP translation table.
"""

from enum import Enum
from typing import Dict, Tuple


class ErrorKind(str, Enum):
    """Failure categories surfaced to API callers"""
    VALIDATION = "validation"
    STORAGE = "storage"
    INTERNAL = "internal"


# kind -> (status code, client-facing message)
ERROR_RESPONSES: Dict[ErrorKind, Tuple[int, str]] = {
    ErrorKind.VALIDATION: (400, "Invalid input data"),
    ErrorKind.STORAGE: (500, "Failed to save the provided data"),
    ErrorKind.INTERNAL: (500, "Internal Server Error"),
}


class IngestError(Exception):
    """Raised by routes so the central exception handler can build the response."""

    def __init__(self, kind: ErrorKind):
        self.kind = kind
        super().__init__(kind.value)

    @property
    def message(self) -> str:
        return ERROR_RESPONSES[self.kind][1]


def error_response(kind: ErrorKind) -> Tuple[int, Dict[str, str]]:
    status_code, message = ERROR_RESPONSES[kind]
    return status_code, {"error": message}
