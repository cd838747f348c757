"""
MCPServer - stdio MCP transport for the workspace tools.

Registers the eight workspace operations as MCP tools on a FastMCP server.
Each tool returns the JSON-rendered result, or "Error: <message>" when
the operation fails; a failing call never stops the server.

Run with:
    enclave-mcp
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from enclave import Config
from enclave.shared.gate import GateLogger
from enclave.ToolGate import Dispatcher, Operation, ToolRegistry
from enclave.WorkspaceGate import WorkspaceGate

_log = GateLogger.get("MCPServer")

SERVER_NAME = "filesystem-mcp"


def _description(op: Operation) -> str:
    return ToolRegistry.get_tool(op.value).description


def build_server(dispatcher: Dispatcher, name: str = SERVER_NAME) -> FastMCP:
    """
    Create a FastMCP server exposing the workspace tools.

    Args:
        dispatcher: Dispatcher bound to the workspace gate
        name: Server name reported to clients

    Returns:
        Configured FastMCP instance (not yet running)
    """
    server = FastMCP(name)

    def call(op: Operation, args: Dict[str, Any]) -> str:
        return dispatcher.dispatch(op.value, args).to_text()

    @server.tool(name=Operation.LIST_FILES.value, description=_description(Operation.LIST_FILES))
    def list_files(path: str = ".", recursive: bool = False) -> str:
        return call(Operation.LIST_FILES, {"path": path, "recursive": recursive})

    @server.tool(name=Operation.READ_FILE.value, description=_description(Operation.READ_FILE))
    def read_file(path: str, encoding: str = "utf-8") -> str:
        return call(Operation.READ_FILE, {"path": path, "encoding": encoding})

    @server.tool(name=Operation.WRITE_FILE.value, description=_description(Operation.WRITE_FILE))
    def write_file(path: str, content: str, encoding: str = "utf-8") -> str:
        return call(Operation.WRITE_FILE, {"path": path, "content": content, "encoding": encoding})

    @server.tool(name=Operation.DELETE_FILE.value, description=_description(Operation.DELETE_FILE))
    def delete_file(path: str) -> str:
        return call(Operation.DELETE_FILE, {"path": path})

    @server.tool(
        name=Operation.CREATE_DIRECTORY.value,
        description=_description(Operation.CREATE_DIRECTORY),
    )
    def create_directory(path: str) -> str:
        return call(Operation.CREATE_DIRECTORY, {"path": path})

    @server.tool(name=Operation.GET_FILE_INFO.value, description=_description(Operation.GET_FILE_INFO))
    def get_file_info(path: str) -> str:
        return call(Operation.GET_FILE_INFO, {"path": path})

    @server.tool(name=Operation.SEARCH_FILES.value, description=_description(Operation.SEARCH_FILES))
    def search_files(pattern: str, search_content: bool = False, max_results: int = 50) -> str:
        return call(
            Operation.SEARCH_FILES,
            {"pattern": pattern, "search_content": search_content, "max_results": max_results},
        )

    @server.tool(
        name=Operation.GET_SHAREABLE_URL.value,
        description=_description(Operation.GET_SHAREABLE_URL),
    )
    def get_shareable_url(path: str, expires_in: float = 24) -> str:
        return call(Operation.GET_SHAREABLE_URL, {"path": path, "expires_in": expires_in})

    return server


def create_server(settings: Optional[Config.Settings] = None) -> FastMCP:
    """
    Build the server from configuration.

    Raises:
        WorkspaceUnavailable: If no workspace directory can be established
    """
    settings = settings or Config.load_settings()
    GateLogger.set_level(settings.log_level)

    gate = WorkspaceGate.from_settings(settings)
    _log.info(f"Serving workspace at {gate.workspace.root}")
    return build_server(Dispatcher(gate))


def main() -> None:
    """Console entry point: serve the workspace tools over stdio."""
    server = create_server()
    _log.info("File System MCP server running on stdio")
    server.run("stdio")


if __name__ == "__main__":
    main()
