"""Errors raised by the API gateway."""

from __future__ import annotations

from typing import Optional

import httpx


class ApiError(Exception):
    """A failed API call, reduced to one human-readable message.

    ``status_code`` is ``None`` when the request never produced a response
    (connection refused, timeout).
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        """Build the error from a non-2xx response.

        Prefers the ``error`` field of a JSON body and falls back to the
        status text.
        """
        message: Optional[str] = None
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            candidate = body.get("error")
            if isinstance(candidate, str) and candidate.strip():
                message = candidate
        if not message:
            message = response.reason_phrase or f"HTTP {response.status_code}"
        return cls(message, status_code=response.status_code)

    @classmethod
    def from_transport(cls, exc: httpx.HTTPError) -> "ApiError":
        return cls(str(exc) or type(exc).__name__)
