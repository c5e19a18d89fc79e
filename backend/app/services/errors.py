from __future__ import annotations

from typing import Any


class SearchError(Exception):
    """Base class for failures that map onto a client-facing HTTP status."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message}


class RequestValidationFailed(SearchError):
    status_code = 400


class MissingKeywords(RequestValidationFailed):
    def __init__(self) -> None:
        super().__init__("keywords required")


class InvalidWindow(RequestValidationFailed):
    def __init__(self) -> None:
        super().__init__("hours must be one of 1,3,6,12,24")


class NoValidKeywords(RequestValidationFailed):
    def __init__(self) -> None:
        super().__init__("No valid keywords")


class MissingCredential(SearchError):
    status_code = 401

    def __init__(self) -> None:
        super().__init__("Missing Authorization header: Bearer <token>")


class UpstreamError(SearchError):
    """Non-success answer from the search API, relayed to the caller as-is."""

    def __init__(self, status_code: int, details: Any) -> None:
        super().__init__("X API error", status_code=status_code)
        self.details = details

    def to_body(self) -> dict[str, Any]:
        return {"error": self.message, "details": self.details}
