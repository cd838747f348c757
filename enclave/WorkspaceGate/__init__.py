"""
WorkspaceGate - Sandboxed file access for Enclave.

Provides:
- Confinement of every path to one workspace root (segment-aware,
  symlink-aware)
- Listing and recursive search with a result cap
- Read/write/delete/mkdir
- File metadata and shareable link issuance

Usage:
    from enclave.WorkspaceGate import WorkspaceGate, establish_workspace

    workspace = establish_workspace("/app/workspace")
    gate = WorkspaceGate(workspace)

    gate.write_file("docs/a.txt", "hello")
    listing = gate.list_files(".", recursive=True)
    hits = gate.search_files("a.txt")
"""

import os
from typing import Any, Dict, List, Optional

from enclave.shared.gate import GateLogger, build_health_status

from .errors import (
    AccessDenied,
    DecodeError,
    NotADirectory,
    NotAFile,
    NotFound,
    PermissionDenied,
    WorkspaceError,
    WorkspaceUnavailable,
    from_os_error,
)
from .models import (
    DeleteResult,
    DirectoryResult,
    DirEntryRecord,
    EntryKind,
    FullInfoRecord,
    ListResult,
    MatchType,
    ReadResult,
    SearchHit,
    SearchQuery,
    SearchResult,
    ShareToken,
    Workspace,
    WriteResult,
)
from .security import PathGuard, normalize_path
from .probe import (
    DEFAULT_CONTENT_TYPE,
    ContentTypeLookup,
    MetadataProbe,
    guess_content_type,
    table_lookup,
)
from .walker import PatternMatcher, Walker, listing_order
from .sharing import ShareTokenIssuer
from .workspace import establish_workspace
from . import operations

_log = GateLogger.get("WorkspaceGate")


class WorkspaceGate:
    """
    The eight workspace operations over one immutable Workspace.

    Instances hold no mutable state, so one gate can serve concurrent
    requests.
    """

    def __init__(
        self,
        workspace: Workspace,
        content_type: Optional[ContentTypeLookup] = None,
        strict_traversal: bool = True,
        search_max_file_bytes: int = 0,
    ):
        self.workspace = workspace
        self.guard = PathGuard(workspace.root)
        self.probe = MetadataProbe(self.guard, content_type)
        self.walker = Walker(
            self.guard,
            self.probe,
            strict=strict_traversal,
            max_content_bytes=search_max_file_bytes,
        )
        self.issuer = ShareTokenIssuer(self.guard, self.probe, workspace.base_url)

    @classmethod
    def from_settings(cls, settings, content_type: Optional[ContentTypeLookup] = None) -> "WorkspaceGate":
        """
        Establish the workspace described by Settings and build a gate on it.

        Raises:
            WorkspaceUnavailable: If no workspace directory can be created
        """
        workspace = establish_workspace(
            settings.workspace_dir,
            settings.workspace_fallback_dir,
            settings.platform_url,
        )
        return cls(
            workspace,
            content_type=content_type,
            strict_traversal=settings.strict_traversal,
            search_max_file_bytes=settings.search_max_file_bytes,
        )

    # ==================== Listing & Search ====================

    def list_files(self, path: str = ".", recursive: bool = False) -> ListResult:
        """List a directory; directories sort before files."""
        resolved = self.guard.resolve(path)
        items = self.walker.list(resolved, recursive)
        return ListResult(path=self.guard.relative(resolved), items=items)

    def search_files(
        self,
        pattern: str,
        search_content: bool = False,
        max_results: int = 50,
    ) -> SearchResult:
        """Search the workspace by file name and optionally by content."""
        query = SearchQuery(
            pattern=pattern,
            search_content=search_content,
            max_results=max_results,
        )
        return self.walker.search(query)

    # ==================== File Operations ====================

    def read_file(self, path: str, encoding: str = operations.DEFAULT_ENCODING) -> ReadResult:
        """Read a file's content."""
        return operations.read_file(self.guard, self.probe, path, encoding)

    def write_file(
        self,
        path: str,
        content: str,
        encoding: str = operations.DEFAULT_ENCODING,
    ) -> WriteResult:
        """Write a file, creating parent directories."""
        return operations.write_file(self.guard, path, content, encoding)

    def delete_file(self, path: str) -> DeleteResult:
        """Delete a file or directory tree."""
        return operations.delete_path(self.guard, path)

    def create_directory(self, path: str) -> DirectoryResult:
        """Create a directory with parents."""
        return operations.make_directory(self.guard, path)

    def get_file_info(self, path: str) -> FullInfoRecord:
        """Detailed metadata for one file or directory."""
        resolved = self.guard.resolve(path)
        return self.probe.describe(resolved, full=True)

    def get_shareable_url(self, path: str, expires_in: float = 24) -> ShareToken:
        """Issue a time-bounded share link for a file."""
        resolved = self.guard.resolve(path)
        return self.issuer.issue(resolved, expires_in)

    # ==================== Health Checks ====================

    def is_healthy(self) -> bool:
        """Check if the workspace root is usable."""
        root = self.guard.root
        return os.path.isdir(root) and os.access(root, os.R_OK | os.W_OK)

    def get_health_status(self) -> Dict[str, Any]:
        """Get detailed health information."""
        root = self.guard.root
        checks = {
            "workspace_exists": os.path.isdir(root),
            "workspace_readable": os.access(root, os.R_OK),
            "workspace_writable": os.access(root, os.W_OK),
        }
        return build_health_status(
            gate_name="WorkspaceGate",
            initialized=True,
            dependencies=self.get_dependencies(),
            checks=checks,
            details={"fallback_used": self.workspace.fallback_used},
        )

    def get_dependencies(self) -> List[str]:
        """List external dependencies."""
        return ["filesystem"]


__all__ = [
    # Main class
    "WorkspaceGate",
    "establish_workspace",
    # Components
    "PathGuard",
    "MetadataProbe",
    "Walker",
    "ShareTokenIssuer",
    "PatternMatcher",
    "listing_order",
    "normalize_path",
    "guess_content_type",
    "table_lookup",
    "DEFAULT_CONTENT_TYPE",
    "ContentTypeLookup",
    # Models
    "Workspace",
    "EntryKind",
    "MatchType",
    "DirEntryRecord",
    "FullInfoRecord",
    "SearchQuery",
    "SearchHit",
    "SearchResult",
    "ShareToken",
    "ListResult",
    "ReadResult",
    "WriteResult",
    "DeleteResult",
    "DirectoryResult",
    # Errors
    "WorkspaceError",
    "AccessDenied",
    "NotFound",
    "PermissionDenied",
    "NotAFile",
    "NotADirectory",
    "DecodeError",
    "WorkspaceUnavailable",
    "from_os_error",
]
