"""Errors surfaced to callers when setting a default application."""

from __future__ import annotations


class DefappsError(Exception):
    """Base class for errors reported to the user."""


class UnknownApplication(DefappsError):
    """The application has no descriptor file that could be cited."""

    def __init__(self, identity: str) -> None:
        super().__init__(f"No desktop file known for {identity!r}")
        self.identity = identity


class WriteFailure(DefappsError):
    """The default-applications file could not be rewritten."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Failed to store settings in {path}: {reason}")
        self.path = path
        self.reason = reason
