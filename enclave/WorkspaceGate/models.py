"""
WorkspaceGate Pydantic models.

Defines the workspace descriptor, directory entry records, search
queries/results, share tokens and the per-operation result shapes.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field


class EntryKind(str, Enum):
    """Kind of filesystem node."""
    FILE = "file"
    DIRECTORY = "directory"


class MatchType(str, Enum):
    """Which check made a search hit."""
    FILENAME = "filename"
    CONTENT = "content"


class Workspace(BaseModel):
    """The single root directory bounding all operations."""
    model_config = ConfigDict(frozen=True)

    root: str = Field(description="Absolute canonical workspace path")
    base_url: str = Field(description="Base address for shareable links")
    fallback_used: bool = Field(default=False)


class DirEntryRecord(BaseModel):
    """A single listing or search entry."""
    model_config = ConfigDict(frozen=True)

    name: str
    path: str = Field(description="Path relative to the workspace root")
    type: EntryKind
    size: int = 0
    modified: datetime
    content_type: Optional[str] = Field(default=None, description="None for directories")

    @property
    def is_directory(self) -> bool:
        return self.type == EntryKind.DIRECTORY

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return self.model_dump(mode="json")


class FullInfoRecord(DirEntryRecord):
    """Detailed information for a single file or directory."""
    created: datetime
    accessed: datetime
    permissions: int = Field(description="Raw st_mode bits")
    permissions_octal: str = Field(description="Permission bits, e.g. 0o644")


class SearchQuery(BaseModel):
    """Name/content search request."""
    pattern: str = Field(min_length=1)
    search_content: bool = False
    max_results: int = Field(default=50, gt=0)


class SearchHit(DirEntryRecord):
    """A search result entry."""
    match_type: MatchType


class SearchResult(BaseModel):
    """Hits of one search, in traversal order."""
    pattern: str
    results: List[SearchHit] = Field(default_factory=list)
    total_found: int = 0
    search_content: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return self.model_dump(mode="json")


class ShareToken(BaseModel):
    """Time-bounded capability reference for one file."""
    model_config = ConfigDict(frozen=True)

    file_id: str
    path: str
    url: str
    expires_at: datetime
    size: int
    content_type: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return self.model_dump(mode="json")


class ListResult(BaseModel):
    """Result of listing a directory."""
    path: str
    items: List[DirEntryRecord] = Field(default_factory=list)


class ReadResult(BaseModel):
    """Content of a file."""
    path: str
    content: str
    size: int
    encoding: str
    content_type: str


class WriteResult(BaseModel):
    """Outcome of a file write."""
    path: str
    bytes_written: int
    created: bool
    message: str = ""


class DeleteResult(BaseModel):
    """Outcome of a delete."""
    path: str
    type: EntryKind
    message: str = ""


class DirectoryResult(BaseModel):
    """Outcome of creating a directory."""
    path: str
    created: bool
    message: str = ""
