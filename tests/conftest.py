"""
Pytest configuration and fixtures for Enclave tests.
"""

import os
import sys
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from enclave.Config import CONFIG_SCHEMA, Settings
from enclave.ToolGate import Dispatcher
from enclave.WorkspaceGate import Workspace, WorkspaceGate, normalize_path


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    temp_path = Path(normalize_path(tempfile.mkdtemp()))
    yield temp_path
    # Cleanup
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def sample_workspace(temp_dir: Path) -> Path:
    """Create a workspace root with a few test files."""
    root = temp_dir / "workspace"
    root.mkdir(parents=True, exist_ok=True)

    (root / "readme.txt").write_text("Hello World")
    (root / "data.json").write_text('{"key": "value"}')

    subfolder = root / "subfolder"
    subfolder.mkdir()
    (subfolder / "nested.txt").write_text("Nested content")

    return root


@pytest.fixture
def workspace(sample_workspace: Path) -> Workspace:
    """Workspace descriptor over the sample tree."""
    return Workspace(root=str(sample_workspace), base_url="https://files.example.test")


@pytest.fixture
def gate(workspace: Workspace) -> WorkspaceGate:
    """WorkspaceGate over the sample tree."""
    return WorkspaceGate(workspace)


@pytest.fixture
def dispatcher(gate: WorkspaceGate) -> Dispatcher:
    """Dispatcher bound to the sample gate."""
    return Dispatcher(gate)


@pytest.fixture
def settings_for(temp_dir: Path):
    """Build Settings rooted under the temp directory."""
    def _build(**overrides) -> Settings:
        values = {
            "workspace_dir": str(temp_dir / "primary"),
            "workspace_fallback_dir": str(temp_dir / "fallback"),
            "platform_url": "https://files.example.test",
            "log_level": "INFO",
        }
        values.update(overrides)
        return Settings(**values)
    return _build


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every configuration key from the environment for one test."""
    for field in CONFIG_SCHEMA:
        # setenv first so the variable is removed again on teardown even if
        # a .env file sets it during the test
        monkeypatch.setenv(field.env_var, "placeholder")
        monkeypatch.delenv(field.env_var)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_module_state():
    """Reset module-level state between tests."""
    yield

    try:
        import enclave.Config as config_module
        config_module._manager = None
    except (ImportError, AttributeError):
        pass


requires_symlinks = pytest.mark.skipif(
    not hasattr(os, "symlink") or os.name == "nt",
    reason="Symlinks not available"
)

requires_fifo = pytest.mark.skipif(
    not hasattr(os, "mkfifo"),
    reason="Named pipes not available"
)
