"""Errors raised by the API client."""

from typing import Optional


class APIError(Exception):
    """A buffered API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
