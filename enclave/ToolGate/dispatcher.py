"""
ToolGate Dispatcher.

Validates a tool name and its arguments once, at the transport boundary,
into a typed request, runs it against a WorkspaceGate and wraps the
outcome in a ToolResult. Dispatch never raises.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from enclave.shared.gate import GateErrorHandler, GateLogger
from enclave.WorkspaceGate import WorkspaceError, WorkspaceGate
from enclave.ToolGate.models import (
    CreateDirectoryArgs,
    DeleteFileArgs,
    GetFileInfoArgs,
    GetShareableUrlArgs,
    ListFilesArgs,
    Operation,
    ReadFileArgs,
    SearchFilesArgs,
    ToolRequest,
    ToolResult,
    WriteFileArgs,
)

_log = GateLogger.get("ToolGate")

_REQUEST_ADAPTER: TypeAdapter = TypeAdapter(ToolRequest)


class ToolGateError(Exception):
    """Base class for errors raised before a request reaches the gate."""

    kind = "tool_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnknownTool(ToolGateError):
    kind = "unknown_tool"


class InvalidArguments(ToolGateError):
    kind = "invalid_arguments"


def generate_call_id() -> str:
    """Generate a unique tool call ID."""
    return f"tc_{uuid.uuid4().hex[:8]}"


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item["loc"][1:]) or "arguments"
        parts.append(f"{loc}: {item['msg']}")
    return "; ".join(parts)


class Dispatcher:
    """Maps workspace tool calls onto a WorkspaceGate."""

    def __init__(self, gate: WorkspaceGate):
        self.gate = gate

    def parse(self, name: str, args: Optional[Dict[str, Any]] = None) -> ToolRequest:
        """
        Validate a tool call into its typed request.

        Raises:
            UnknownTool: If name is not one of the workspace operations
            InvalidArguments: If args do not fit the operation's model
        """
        try:
            op = Operation(name)
        except ValueError:
            raise UnknownTool(f"Unknown tool: {name}") from None

        if args is None:
            args = {}
        if not isinstance(args, dict):
            raise InvalidArguments(f"Arguments for {name} must be an object")

        payload = {**args, "op": op.value}
        try:
            return _REQUEST_ADAPTER.validate_python(payload)
        except ValidationError as e:
            raise InvalidArguments(f"Invalid arguments for {name}: {_summarize(e)}") from e

    def execute(self, request: ToolRequest) -> BaseModel:
        """Run a validated request. Workspace errors propagate."""
        gate = self.gate

        if isinstance(request, ListFilesArgs):
            return gate.list_files(request.path, request.recursive)
        if isinstance(request, ReadFileArgs):
            return gate.read_file(request.path, request.encoding)
        if isinstance(request, WriteFileArgs):
            return gate.write_file(request.path, request.content, request.encoding)
        if isinstance(request, DeleteFileArgs):
            return gate.delete_file(request.path)
        if isinstance(request, CreateDirectoryArgs):
            return gate.create_directory(request.path)
        if isinstance(request, GetFileInfoArgs):
            return gate.get_file_info(request.path)
        if isinstance(request, SearchFilesArgs):
            return gate.search_files(request.pattern, request.search_content, request.max_results)
        if isinstance(request, GetShareableUrlArgs):
            return gate.get_shareable_url(request.path, request.expires_in)

        raise TypeError(f"Unsupported request type: {type(request).__name__}")

    def dispatch(
        self,
        name: str,
        args: Optional[Dict[str, Any]] = None,
        call_id: Optional[str] = None,
    ) -> ToolResult:
        """
        Parse, execute and wrap one tool call.

        Returns:
            ToolResult; failures carry a message and an error_kind
        """
        call_id = call_id or generate_call_id()

        try:
            request = self.parse(name, args)
            result = self.execute(request)
        except (ToolGateError, WorkspaceError) as e:
            _log.info(f"{name} failed ({e.kind}): {e.message}")
            return ToolResult.failure(call_id, e.message, e.kind)
        except ValueError as e:
            _log.info(f"{name} rejected: {e}")
            return ToolResult.failure(call_id, str(e), InvalidArguments.kind)
        except Exception as e:
            GateErrorHandler.handle("ToolGate", name, e)
            return ToolResult.failure(call_id, f"{name} failed: {e}", "internal_error")

        return ToolResult.success(call_id, result.model_dump(mode="json"))
