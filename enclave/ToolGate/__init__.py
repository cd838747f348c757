"""
ToolGate - Enclave tool call boundary.

Turns (tool name, arguments) pairs from any transport into typed
workspace requests and packages the outcome.

## Usage

```python
from enclave.ToolGate import Dispatcher, ToolRegistry

dispatcher = Dispatcher(gate)
result = dispatcher.dispatch("read_file", {"path": "docs/a.txt"})
if result.ok:
    print(result.result["content"])
```

## Result Format

```json
{"type": "tool_result", "id": "tc_123", "ok": true, "result": {...}}
{"type": "tool_result", "id": "tc_124", "ok": false, "error": "...", "error_kind": "not_found"}
```
"""

from __future__ import annotations

from enclave.ToolGate.models import (
    ARGS_BY_OPERATION,
    CreateDirectoryArgs,
    DeleteFileArgs,
    GetFileInfoArgs,
    GetShareableUrlArgs,
    ListFilesArgs,
    Operation,
    PolicyClass,
    ReadFileArgs,
    SearchFilesArgs,
    ToolDefinition,
    ToolRequest,
    ToolResult,
    WriteFileArgs,
)
from enclave.ToolGate.registry import ToolRegistry
from enclave.ToolGate.dispatcher import (
    Dispatcher,
    InvalidArguments,
    ToolGateError,
    UnknownTool,
    generate_call_id,
)

__all__ = [
    "ARGS_BY_OPERATION",
    "CreateDirectoryArgs",
    "DeleteFileArgs",
    "Dispatcher",
    "GetFileInfoArgs",
    "GetShareableUrlArgs",
    "InvalidArguments",
    "ListFilesArgs",
    "Operation",
    "PolicyClass",
    "ReadFileArgs",
    "SearchFilesArgs",
    "ToolDefinition",
    "ToolGateError",
    "ToolRegistry",
    "ToolRequest",
    "ToolResult",
    "UnknownTool",
    "WriteFileArgs",
    "generate_call_id",
]
