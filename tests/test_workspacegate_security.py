"""
Tests for WorkspaceGate path confinement and workspace bootstrap.
"""

import os

import pytest

from enclave.WorkspaceGate import (
    AccessDenied,
    PathGuard,
    WorkspaceUnavailable,
    establish_workspace,
    normalize_path,
)

from conftest import requires_symlinks


class TestNormalizePath:
    """Tests for normalize_path."""

    def test_collapses_dot_segments(self, temp_dir):
        """Test that . and .. segments are collapsed."""
        raw = os.path.join(str(temp_dir), "a", "..", "b", ".")
        assert normalize_path(raw) == os.path.join(str(temp_dir), "b")

    def test_expands_user(self):
        """Test that ~ expands to the home directory."""
        assert normalize_path("~") == normalize_path(os.path.expanduser("~"))


class TestPathGuard:
    """Tests for PathGuard.resolve and friends."""

    def test_root_resolves_to_itself(self, sample_workspace):
        """Test that '.' and '' resolve to the root."""
        guard = PathGuard(str(sample_workspace))
        assert guard.resolve(".") == guard.root
        assert guard.resolve("") == guard.root

    def test_relative_path_inside(self, sample_workspace):
        """Test a normal relative path."""
        guard = PathGuard(str(sample_workspace))
        resolved = guard.resolve("subfolder/nested.txt")
        assert resolved == os.path.join(guard.root, "subfolder", "nested.txt")

    def test_nonexistent_path_inside_is_allowed(self, sample_workspace):
        """Test that resolution does not require the path to exist."""
        guard = PathGuard(str(sample_workspace))
        resolved = guard.resolve("new/dir/file.txt")
        assert resolved.startswith(guard.root + os.sep)

    def test_inner_dotdot_that_stays_inside(self, sample_workspace):
        """Test that .. segments are fine while they stay in the root."""
        guard = PathGuard(str(sample_workspace))
        assert guard.resolve("subfolder/../readme.txt") == os.path.join(guard.root, "readme.txt")

    def test_traversal_denied(self, sample_workspace):
        """Test that ../ escapes are rejected."""
        guard = PathGuard(str(sample_workspace))
        with pytest.raises(AccessDenied) as exc_info:
            guard.resolve("../../etc/passwd")
        assert exc_info.value.kind == "access_denied"
        assert "outside workspace" in exc_info.value.message

    def test_traversal_through_subdirectory_denied(self, sample_workspace):
        """Test that an escape hidden behind a subdirectory is rejected."""
        guard = PathGuard(str(sample_workspace))
        with pytest.raises(AccessDenied):
            guard.resolve("subfolder/../../outside.txt")

    def test_absolute_path_outside_denied(self, sample_workspace):
        """Test that an absolute path outside the root is rejected."""
        guard = PathGuard(str(sample_workspace))
        with pytest.raises(AccessDenied):
            guard.resolve("/etc/passwd")

    def test_absolute_path_inside_allowed(self, sample_workspace):
        """Test that an absolute path inside the root is accepted."""
        guard = PathGuard(str(sample_workspace))
        target = os.path.join(guard.root, "readme.txt")
        assert guard.resolve(target) == target

    def test_sibling_with_shared_prefix_denied(self, temp_dir):
        """Test that /w does not admit /w-evil."""
        root = temp_dir / "w"
        evil = temp_dir / "w-evil"
        root.mkdir()
        evil.mkdir()
        (evil / "secret.txt").write_text("secret")

        guard = PathGuard(str(root))
        with pytest.raises(AccessDenied):
            guard.resolve("../w-evil/secret.txt")
        with pytest.raises(AccessDenied):
            guard.resolve(str(evil / "secret.txt"))
        assert guard.contains(str(evil)) is False

    def test_nul_byte_denied(self, sample_workspace):
        """Test that embedded NUL bytes are rejected."""
        guard = PathGuard(str(sample_workspace))
        with pytest.raises(AccessDenied):
            guard.resolve("readme.txt\x00.png")

    @requires_symlinks
    def test_symlink_escape_denied(self, temp_dir, sample_workspace):
        """Test that a symlink pointing outside the root is rejected."""
        outside = temp_dir / "outside"
        outside.mkdir()
        (outside / "secret.txt").write_text("secret")
        os.symlink(str(outside), str(sample_workspace / "escape"))

        guard = PathGuard(str(sample_workspace))
        with pytest.raises(AccessDenied):
            guard.resolve("escape")
        with pytest.raises(AccessDenied):
            guard.resolve("escape/secret.txt")

    @requires_symlinks
    def test_symlink_inside_allowed(self, sample_workspace):
        """Test that a symlink whose target stays inside is followed."""
        os.symlink(
            str(sample_workspace / "subfolder"),
            str(sample_workspace / "shortcut"),
        )
        guard = PathGuard(str(sample_workspace))
        assert guard.resolve("shortcut/nested.txt") == os.path.join(
            guard.root, "subfolder", "nested.txt"
        )

    @requires_symlinks
    def test_symlink_addressed_without_following(self, temp_dir, sample_workspace):
        """Test that follow_symlinks=False keeps the link itself."""
        outside = temp_dir / "outside.txt"
        outside.write_text("x")
        os.symlink(str(outside), str(sample_workspace / "link.txt"))

        guard = PathGuard(str(sample_workspace))
        resolved = guard.resolve("link.txt", follow_symlinks=False)
        assert resolved == os.path.join(guard.root, "link.txt")

    def test_relative(self, sample_workspace):
        """Test root-relative rendering."""
        guard = PathGuard(str(sample_workspace))
        assert guard.relative(guard.root) == "."
        assert guard.relative(os.path.join(guard.root, "subfolder", "nested.txt")) == "subfolder/nested.txt"

    def test_root_is_canonicalized(self, sample_workspace):
        """Test that a root given with .. segments is canonicalized."""
        guard = PathGuard(str(sample_workspace / "subfolder" / ".."))
        assert guard.root == normalize_path(str(sample_workspace))


class TestEstablishWorkspace:
    """Tests for workspace bootstrap."""

    def test_creates_primary(self, temp_dir):
        """Test that the primary directory is created."""
        primary = temp_dir / "primary" / "workspace"
        workspace = establish_workspace(str(primary), str(temp_dir / "fallback"))

        assert primary.is_dir()
        assert workspace.root == str(primary)
        assert workspace.fallback_used is False

    def test_existing_primary(self, sample_workspace, temp_dir):
        """Test that an existing directory is reused as-is."""
        workspace = establish_workspace(str(sample_workspace), str(temp_dir / "fallback"))
        assert workspace.root == str(sample_workspace)
        assert (sample_workspace / "readme.txt").exists()

    def test_falls_back_when_primary_blocked(self, temp_dir):
        """Test fallback when the primary cannot be created."""
        blocker = temp_dir / "blocker"
        blocker.write_text("not a directory")
        fallback = temp_dir / "fallback"

        workspace = establish_workspace(str(blocker / "workspace"), str(fallback))

        assert workspace.fallback_used is True
        assert workspace.root == str(fallback)
        assert fallback.is_dir()

    def test_primary_is_a_file(self, temp_dir):
        """Test fallback when the primary path is an existing file."""
        blocker = temp_dir / "blocker"
        blocker.write_text("not a directory")
        fallback = temp_dir / "fallback"

        workspace = establish_workspace(str(blocker), str(fallback))
        assert workspace.fallback_used is True
        assert workspace.root == str(fallback)
        assert blocker.read_text() == "not a directory"

    def test_unavailable_when_both_blocked(self, temp_dir):
        """Test that startup fails when neither directory works."""
        blocker = temp_dir / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(WorkspaceUnavailable) as exc_info:
            establish_workspace(str(blocker / "a"), str(blocker / "b"))
        assert exc_info.value.kind == "workspace_unavailable"

    def test_base_url_carried(self, temp_dir):
        """Test that the base URL ends up on the Workspace."""
        workspace = establish_workspace(
            str(temp_dir / "ws"), str(temp_dir / "fb"), "https://share.example.test"
        )
        assert workspace.base_url == "https://share.example.test"
