"""
Workspace root bootstrap.

Resolves the workspace directory once at process start, falling back to a
secondary location when the primary cannot be created.
"""

import os

from enclave.shared.gate import GateLogger

from .errors import WorkspaceUnavailable
from .models import Workspace
from .security import normalize_path

_log = GateLogger.get("WorkspaceGate")

DEFAULT_WORKSPACE_DIR = "/app/workspace"
DEFAULT_FALLBACK_DIR = "/tmp/filesystem-workspace"
DEFAULT_PLATFORM_URL = "https://mcp.platform.dev"


def _ensure_directory(path: str) -> str:
    path = normalize_path(path)
    parent = os.path.dirname(path)
    if not os.path.exists(parent):
        _log.debug(f"Parent directory does not exist: {parent}")
    os.makedirs(path, exist_ok=True)
    return path


def establish_workspace(
    primary: str = DEFAULT_WORKSPACE_DIR,
    fallback: str = DEFAULT_FALLBACK_DIR,
    base_url: str = DEFAULT_PLATFORM_URL,
) -> Workspace:
    """
    Create (if needed) and return the workspace root.

    Args:
        primary: Preferred workspace directory
        fallback: Directory used when primary cannot be created
        base_url: Base address for shareable links

    Returns:
        Immutable Workspace

    Raises:
        WorkspaceUnavailable: If neither directory can be established
    """
    try:
        root = _ensure_directory(primary)
        _log.info(f"Workspace initialized at {root}")
        return Workspace(root=root, base_url=base_url)
    except OSError as e:
        _log.warning(f"Failed to create workspace directory {primary}: {e}")

    try:
        root = _ensure_directory(fallback)
    except OSError as e:
        _log.error(f"Fallback workspace creation also failed: {e}")
        raise WorkspaceUnavailable(
            f"Cannot establish workspace at {primary} or {fallback}: {e}"
        ) from e

    _log.info(f"Using fallback workspace directory: {root}")
    return Workspace(root=root, base_url=base_url, fallback_used=True)
