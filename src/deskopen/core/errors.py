"""Terminal outcomes of a deskopen invocation and their exit codes."""

from __future__ import annotations


class DeskopenError(Exception):
    """Base class. Only the entry point turns these into exit codes."""

    exit_code = 3

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UsageError(DeskopenError):
    """Bad invocation: missing, extra or unknown arguments."""

    exit_code = 1


class TargetMissing(DeskopenError):
    exit_code = 2


class NoHandlerFound(DeskopenError):
    """No MIME type could be derived, or every candidate was exhausted."""

    exit_code = 3


class ActionFailed(DeskopenError):
    """A qualified candidate could not be started."""

    exit_code = 4


class PermissionDenied(DeskopenError):
    exit_code = 5
