"""
WorkspaceGate metadata probe.

Turns stat results into DirEntryRecord / FullInfoRecord snapshots and
derives content types from file names.
"""

import mimetypes
import os
import stat as stat_module
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Union

from .errors import from_os_error
from .models import DirEntryRecord, EntryKind, FullInfoRecord
from .security import PathGuard

DEFAULT_CONTENT_TYPE = "application/octet-stream"

ContentTypeLookup = Callable[[str], str]


def guess_content_type(name: str) -> str:
    """Content type for a file name, from its extension."""
    guessed, _ = mimetypes.guess_type(name, strict=False)
    return guessed or DEFAULT_CONTENT_TYPE


def table_lookup(table: Dict[str, str], default: str = DEFAULT_CONTENT_TYPE) -> ContentTypeLookup:
    """
    Build a content-type lookup from an extension table.

    Args:
        table: Mapping of extension (".txt" or "txt") to content type
        default: Content type for unknown extensions

    Returns:
        Function mapping a file name to a content type
    """
    normalized = {
        (ext if ext.startswith(".") else f".{ext}").lower(): value
        for ext, value in table.items()
    }

    def lookup(name: str) -> str:
        _, ext = os.path.splitext(name)
        return normalized.get(ext.lower(), default)

    return lookup


def _timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


class MetadataProbe:
    """
    Builds typed metadata snapshots for paths already cleared by PathGuard.
    """

    def __init__(self, guard: PathGuard, content_type: Optional[ContentTypeLookup] = None):
        self.guard = guard
        self.content_type = content_type or guess_content_type

    def record(self, path: str, st: os.stat_result) -> DirEntryRecord:
        """
        Build a lightweight record from an existing stat result.

        Args:
            path: Absolute path inside the workspace (not necessarily canonical
                in its last component, e.g. a symlink entry)
            st: Stat result for the node
        """
        return DirEntryRecord(**self._base_fields(path, st))

    def describe(self, path: str, full: bool = False) -> Union[DirEntryRecord, FullInfoRecord]:
        """
        Snapshot the attributes of a path.

        Args:
            path: Absolute path returned by PathGuard.resolve
            full: Include creation/access times and permission bits

        Returns:
            DirEntryRecord, or FullInfoRecord when full=True

        Raises:
            NotFound: If the path does not exist
            PermissionDenied: If it cannot be stat'ed
        """
        rel = self.guard.relative(path)
        try:
            st = os.stat(path)
        except OSError as e:
            raise from_os_error(e, rel, "get file info") from e

        if not full:
            return self.record(path, st)

        created = getattr(st, "st_birthtime", None) or st.st_ctime
        return FullInfoRecord(
            **self._base_fields(path, st),
            created=_timestamp(created),
            accessed=_timestamp(st.st_atime),
            permissions=st.st_mode,
            permissions_octal=oct(stat_module.S_IMODE(st.st_mode)),
        )

    def _base_fields(self, path: str, st: os.stat_result) -> dict:
        rel = self.guard.relative(path)
        is_dir = stat_module.S_ISDIR(st.st_mode)
        name = os.path.basename(path) if rel != "." else "."
        return {
            "name": name,
            "path": rel,
            "type": EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
            "size": st.st_size,
            "modified": _timestamp(st.st_mtime),
            "content_type": None if is_dir else self.content_type(name),
        }
