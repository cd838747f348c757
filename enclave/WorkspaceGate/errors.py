"""
WorkspaceGate error types.

Every failure a workspace operation can report carries a stable ``kind``
string so transports can render it without inspecting the class.
"""

from typing import Optional


class WorkspaceError(Exception):
    """Base class for workspace operation failures."""

    kind = "workspace_error"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.path = path


class AccessDenied(WorkspaceError):
    """Raised when a path resolves outside the workspace root."""

    kind = "access_denied"


class NotFound(WorkspaceError):
    """Raised when the target does not exist."""

    kind = "not_found"


class PermissionDenied(WorkspaceError):
    """Raised on an OS-level access failure."""

    kind = "permission_denied"


class NotAFile(WorkspaceError):
    """Raised when a file operation targets a directory."""

    kind = "not_a_file"


class NotADirectory(WorkspaceError):
    """Raised when a directory operation targets something else."""

    kind = "not_a_directory"


class DecodeError(WorkspaceError):
    """Raised when content cannot be interpreted under an encoding."""

    kind = "decode_error"


class WorkspaceUnavailable(WorkspaceError):
    """Raised at startup when no workspace root can be established."""

    kind = "workspace_unavailable"


def from_os_error(exc: OSError, path: str, action: str) -> WorkspaceError:
    """
    Translate an OSError into the matching WorkspaceError.

    Args:
        exc: The OS error raised by the filesystem call
        path: Workspace-relative path shown to the caller
        action: Short verb phrase for the message, e.g. "read file"

    Returns:
        A WorkspaceError subclass instance (not raised)
    """
    detail = exc.strerror or str(exc)
    message = f"Failed to {action}: {path}: {detail}"

    if isinstance(exc, FileNotFoundError):
        return NotFound(message, path)
    if isinstance(exc, IsADirectoryError):
        return NotAFile(message, path)
    if isinstance(exc, (NotADirectoryError, FileExistsError)):
        return NotADirectory(message, path)
    return PermissionDenied(message, path)
