from __future__ import annotations


class HubError(Exception):
    """Base class for errors raised by the hub store."""


class MissingFieldError(HubError):
    """A required request field was missing or empty."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
