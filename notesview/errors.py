"""Error variants raised by notes actions and startup code.

``UserError`` subclasses are recoverable: the loop shows them and carries on.
``SystemFailure`` subclasses wrap OS/terminal failures.
"""

from __future__ import annotations


class NotesError(RuntimeError):
    """Base error for notes browser operations."""


class UserError(NotesError):
    """Invalid request from the user; no filesystem state was touched."""


class BoundaryViolation(UserError):
    """Raised when a typed path resolves outside the notes root."""

    def __init__(self, path: str = "") -> None:
        self.path = path
        super().__init__("Path must be within the notes directory")


class AlreadyExists(UserError):
    """Raised when a create target already exists."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"{path} already exists")


class SelfReferentialMove(UserError):
    """Raised when a directory would be moved into itself."""

    def __init__(self) -> None:
        super().__init__("Cannot move a directory into itself or its subdirectory")


class RootProtected(UserError):
    """Raised when an action targets the notes root itself."""


class InvalidInput(UserError):
    """Raised for input that cannot name a valid target."""


class SystemFailure(NotesError):
    """Base error for OS and terminal failures."""


class IOFailure(SystemFailure):
    """Raised when a filesystem call fails."""


class TerminalInitError(SystemFailure):
    """Raised when the terminal cannot be put into TUI mode."""
