"""
ToolGate Protocol Models.

Defines the closed set of workspace operations, one argument model per
operation, and the result envelope handed back to transports.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Any, Dict, Literal, Optional, Type, Union

from pydantic import BaseModel, Field


class Operation(str, Enum):
    """The workspace operations a caller can invoke."""

    LIST_FILES = "list_files"
    READ_FILE = "read_file"
    WRITE_FILE = "write_file"
    DELETE_FILE = "delete_file"
    CREATE_DIRECTORY = "create_directory"
    GET_FILE_INFO = "get_file_info"
    SEARCH_FILES = "search_files"
    GET_SHAREABLE_URL = "get_shareable_url"


class PolicyClass(str, Enum):
    """Security policy classes for tools."""

    READ_ONLY = "read_only"  # No side effects
    WRITE = "write"  # Creates/modifies data
    DESTRUCTIVE = "destructive"  # Can delete data


# =============================================================================
# Argument models (one per Operation, tagged by "op")
# =============================================================================


class ListFilesArgs(BaseModel):
    op: Literal["list_files"] = "list_files"
    path: str = Field(default=".", description="Directory path to list (relative to workspace)")
    recursive: bool = Field(default=False, description="List files recursively")


class ReadFileArgs(BaseModel):
    op: Literal["read_file"] = "read_file"
    path: str = Field(description="File path to read (relative to workspace)")
    encoding: str = Field(default="utf-8", description="File encoding (utf-8, base64, hex, ...)")


class WriteFileArgs(BaseModel):
    op: Literal["write_file"] = "write_file"
    path: str = Field(description="File path to write (relative to workspace)")
    content: str = Field(description="Content to write to file")
    encoding: str = Field(default="utf-8", description="File encoding (utf-8, base64, hex, ...)")


class DeleteFileArgs(BaseModel):
    op: Literal["delete_file"] = "delete_file"
    path: str = Field(description="File or directory path to delete (relative to workspace)")


class CreateDirectoryArgs(BaseModel):
    op: Literal["create_directory"] = "create_directory"
    path: str = Field(description="Directory path to create (relative to workspace)")


class GetFileInfoArgs(BaseModel):
    op: Literal["get_file_info"] = "get_file_info"
    path: str = Field(description="File or directory path (relative to workspace)")


class SearchFilesArgs(BaseModel):
    op: Literal["search_files"] = "search_files"
    pattern: str = Field(min_length=1, description="Search pattern (substring or regex)")
    search_content: bool = Field(default=False, description="Search within file contents")
    max_results: int = Field(default=50, gt=0, description="Maximum number of results")


class GetShareableUrlArgs(BaseModel):
    op: Literal["get_shareable_url"] = "get_shareable_url"
    path: str = Field(description="File path (relative to workspace)")
    expires_in: float = Field(default=24, gt=0, description="URL expiration time in hours")


ToolRequest = Annotated[
    Union[
        ListFilesArgs,
        ReadFileArgs,
        WriteFileArgs,
        DeleteFileArgs,
        CreateDirectoryArgs,
        GetFileInfoArgs,
        SearchFilesArgs,
        GetShareableUrlArgs,
    ],
    Field(discriminator="op"),
]

ARGS_BY_OPERATION: Dict[Operation, Type[BaseModel]] = {
    Operation.LIST_FILES: ListFilesArgs,
    Operation.READ_FILE: ReadFileArgs,
    Operation.WRITE_FILE: WriteFileArgs,
    Operation.DELETE_FILE: DeleteFileArgs,
    Operation.CREATE_DIRECTORY: CreateDirectoryArgs,
    Operation.GET_FILE_INFO: GetFileInfoArgs,
    Operation.SEARCH_FILES: SearchFilesArgs,
    Operation.GET_SHAREABLE_URL: GetShareableUrlArgs,
}


# =============================================================================
# Results and definitions
# =============================================================================


class ToolResult(BaseModel):
    """Result from tool execution."""

    type: Literal["tool_result"] = "tool_result"
    id: str
    ok: bool
    result: Optional[Any] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def success(cls, call_id: str, result: Any) -> "ToolResult":
        """Create a successful result."""
        return cls(id=call_id, ok=True, result=result)

    @classmethod
    def failure(cls, call_id: str, error: str, error_kind: str = "error") -> "ToolResult":
        """Create a failed result."""
        return cls(id=call_id, ok=False, error=error, error_kind=error_kind)

    def to_compact(self) -> Dict[str, Any]:
        """Convert to compact dict for conversation injection."""
        if self.ok:
            return {"id": self.id, "ok": True, "result": self.result}
        return {"id": self.id, "ok": False, "error": self.error, "error_kind": self.error_kind}

    def to_text(self) -> str:
        """Render for text-only transports: JSON on success, "Error: ..." otherwise."""
        if self.ok:
            return json.dumps(self.result, indent=2)
        return f"Error: {self.error}"


class ToolDefinition(BaseModel):
    """Complete tool definition for registry."""

    name: Operation
    description: str = Field(description="Human-readable description")
    policy_class: PolicyClass = Field(default=PolicyClass.READ_ONLY)
    args_model: Type[BaseModel]

    def get_json_schema(self) -> Dict[str, Any]:
        """Generate JSON Schema for this tool's arguments (without the op tag)."""
        schema = self.args_model.model_json_schema()
        properties = {
            key: value
            for key, value in schema.get("properties", {}).items()
            if key != "op"
        }
        required = [key for key in schema.get("required", []) if key != "op"]
        return {
            "type": "object",
            "properties": properties,
            "required": required,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name.value,
            "description": self.description,
            "policy_class": self.policy_class.value,
            "input_schema": self.get_json_schema(),
        }


__all__ = [
    "Operation",
    "PolicyClass",
    "ListFilesArgs",
    "ReadFileArgs",
    "WriteFileArgs",
    "DeleteFileArgs",
    "CreateDirectoryArgs",
    "GetFileInfoArgs",
    "SearchFilesArgs",
    "GetShareableUrlArgs",
    "ToolRequest",
    "ARGS_BY_OPERATION",
    "ToolResult",
    "ToolDefinition",
]
