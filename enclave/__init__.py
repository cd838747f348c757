"""
Enclave - sandboxed, tool-callable workspace file service.

Gates:
- WorkspaceGate: path confinement, traversal, search and file operations
- ToolGate: typed tool-call dispatch over WorkspaceGate
- MCPServer: stdio MCP transport
- Config: environment-driven settings
"""

__version__ = "1.0.0"
