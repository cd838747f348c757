"""
ToolGate Registry.

Definitions of the workspace tools with their schemas and policy classes.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Set

from enclave.ToolGate.models import (
    ARGS_BY_OPERATION,
    Operation,
    PolicyClass,
    ToolDefinition,
)


_DESCRIPTIONS: Dict[Operation, str] = {
    Operation.LIST_FILES: "List files and directories in a path",
    Operation.READ_FILE: "Read the contents of a file",
    Operation.WRITE_FILE: "Write content to a file",
    Operation.DELETE_FILE: "Delete a file or directory",
    Operation.CREATE_DIRECTORY: "Create a directory (including parent directories)",
    Operation.GET_FILE_INFO: "Get detailed information about a file or directory",
    Operation.SEARCH_FILES: "Search for files by name pattern or content",
    Operation.GET_SHAREABLE_URL: "Generate a shareable URL for a file",
}

_POLICIES: Dict[Operation, PolicyClass] = {
    Operation.WRITE_FILE: PolicyClass.WRITE,
    Operation.CREATE_DIRECTORY: PolicyClass.WRITE,
    Operation.DELETE_FILE: PolicyClass.DESTRUCTIVE,
}


class ToolRegistry:
    """
    Registry of the workspace tools.

    The tool set is fixed by the Operation enum; the registry only adds
    descriptions, policy classes and argument schemas.
    """

    _tools: Dict[Operation, ToolDefinition] = {
        op: ToolDefinition(
            name=op,
            description=_DESCRIPTIONS[op],
            policy_class=_POLICIES.get(op, PolicyClass.READ_ONLY),
            args_model=ARGS_BY_OPERATION[op],
        )
        for op in Operation
    }

    @classmethod
    def get_tool(cls, name: str) -> Optional[ToolDefinition]:
        """Get a tool definition by name, or None if unknown."""
        try:
            return cls._tools[Operation(name)]
        except ValueError:
            return None

    @classmethod
    def list_tools(cls, policies: Optional[Set[PolicyClass]] = None) -> List[ToolDefinition]:
        """
        List tool definitions.

        Args:
            policies: Only include tools in these policy classes (None = all)
        """
        tools = list(cls._tools.values())
        if policies is not None:
            tools = [t for t in tools if t.policy_class in policies]
        return tools

    @classmethod
    def list_tool_names(cls) -> List[str]:
        return [op.value for op in cls._tools]
