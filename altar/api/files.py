from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from enclave.ToolGate import Dispatcher, Operation, ToolRegistry, ToolResult


class FileWriteRequest(BaseModel):
    """Model for writing a file."""
    path: str
    content: str
    encoding: str = "utf-8"


# error_kind -> HTTP status
STATUS_BY_KIND: Dict[str, int] = {
    "access_denied": 403,
    "permission_denied": 403,
    "not_found": 404,
    "unknown_tool": 404,
    "not_a_file": 409,
    "not_a_directory": 409,
    "decode_error": 422,
    "invalid_arguments": 422,
}


def _unwrap(result: ToolResult) -> Any:
    if not result.ok:
        status = STATUS_BY_KIND.get(result.error_kind, 500)
        raise HTTPException(
            status_code=status,
            detail={"error": result.error, "error_kind": result.error_kind},
        )
    return result.result


def create_router(dispatcher: Dispatcher) -> APIRouter:
    router = APIRouter()

    def run(op: Operation, args: Dict[str, Any]) -> Any:
        return _unwrap(dispatcher.dispatch(op.value, args))

    @router.get("/api/files/list")
    async def api_list_files(path: str = ".", recursive: bool = False):
        """List directory contents."""
        return run(Operation.LIST_FILES, {"path": path, "recursive": recursive})

    @router.get("/api/files/read")
    async def api_read_file(path: str, encoding: str = "utf-8"):
        """Read a file's contents."""
        return run(Operation.READ_FILE, {"path": path, "encoding": encoding})

    @router.post("/api/files/write")
    async def api_write_file(data: FileWriteRequest):
        """Write content to a file."""
        return run(Operation.WRITE_FILE, data.model_dump())

    @router.delete("/api/files/delete")
    async def api_delete_file(path: str):
        """Delete a file or directory."""
        return run(Operation.DELETE_FILE, {"path": path})

    @router.post("/api/files/mkdir")
    async def api_mkdir(path: str):
        """Create a directory."""
        return run(Operation.CREATE_DIRECTORY, {"path": path})

    @router.get("/api/files/info")
    async def api_file_info(path: str):
        """Get file or directory information."""
        return run(Operation.GET_FILE_INFO, {"path": path})

    @router.get("/api/files/search")
    async def api_search_files(pattern: str, search_content: bool = False, max_results: int = 50):
        """Search by file name and optionally content."""
        return run(
            Operation.SEARCH_FILES,
            {"pattern": pattern, "search_content": search_content, "max_results": max_results},
        )

    @router.post("/api/files/share")
    async def api_share_file(path: str, expires_in: float = 24):
        """Issue a shareable URL for a file."""
        return run(Operation.GET_SHAREABLE_URL, {"path": path, "expires_in": expires_in})

    @router.get("/api/files/health")
    async def api_files_health():
        """Get WorkspaceGate health."""
        return dispatcher.gate.get_health_status()

    @router.get("/api/tools")
    async def api_list_tools():
        """List the workspace tools and their schemas."""
        return {"tools": [tool.to_dict() for tool in ToolRegistry.list_tools()]}

    @router.post("/api/tools/{name}")
    async def api_call_tool(name: str, args: Dict[str, Any] | None = None):
        """Invoke a workspace tool by name with a JSON argument object."""
        return dispatcher.dispatch(name, args or {}).to_compact()

    return router


__all__ = ["create_router", "STATUS_BY_KIND"]
