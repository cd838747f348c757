"""
WorkspaceGate security module.

Resolves caller-supplied paths against the workspace root and rejects
anything that would land outside it.
"""

import os

from .errors import AccessDenied


def normalize_path(path: str) -> str:
    """
    Canonicalize a configured directory path.

    Args:
        path: Raw path string (may use ~)

    Returns:
        Absolute path with . and .. collapsed and symlinks resolved
    """
    path = os.path.expanduser(path)
    return os.path.realpath(os.path.abspath(path))


class PathGuard:
    """
    Confines request paths to a single workspace root.

    The root is canonicalized once; every resolved path is compared to it
    segment by segment, so a root of /app/workspace never admits
    /app/workspace-other.
    """

    def __init__(self, root: str):
        self.root = normalize_path(root)

    def contains(self, candidate: str) -> bool:
        """Check whether an absolute canonical path is the root or below it."""
        try:
            return os.path.commonpath([self.root, candidate]) == self.root
        except ValueError:
            # Mixed absolute/relative or different drives
            return False

    def resolve(self, request_path: str, follow_symlinks: bool = True) -> str:
        """
        Resolve a request path to an absolute path inside the workspace.

        Args:
            request_path: Path relative to the workspace root. Absolute
                paths replace the root and are accepted only if they land
                inside it.
            follow_symlinks: When False the final component is kept as-is
                (its parent is still canonicalized), so a symlink can be
                addressed rather than its target.

        Returns:
            Absolute canonical path

        Raises:
            AccessDenied: If the path escapes the workspace
        """
        if request_path is None:
            request_path = "."
        if "\x00" in request_path:
            raise AccessDenied("Access denied: invalid path", request_path)

        joined = os.path.normpath(os.path.join(self.root, request_path or "."))

        if follow_symlinks or joined == self.root:
            resolved = os.path.realpath(joined)
        else:
            parent = os.path.realpath(os.path.dirname(joined))
            resolved = os.path.join(parent, os.path.basename(joined))

        if not self.contains(resolved):
            raise AccessDenied("Access denied: path outside workspace", request_path)

        return resolved

    def relative(self, resolved: str) -> str:
        """
        Express an absolute path inside the workspace relative to the root.

        The root itself is reported as "." and separators are always "/".
        """
        rel = os.path.relpath(resolved, self.root)
        return rel.replace(os.sep, "/")
