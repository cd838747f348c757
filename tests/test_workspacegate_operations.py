"""
Tests for WorkspaceGate file operations and metadata.
"""

import base64
import os

import pytest

from enclave.WorkspaceGate import (
    AccessDenied,
    DecodeError,
    EntryKind,
    FullInfoRecord,
    NotADirectory,
    NotAFile,
    NotFound,
    WorkspaceError,
    WorkspaceGate,
    Workspace,
    from_os_error,
    table_lookup,
)
from enclave.WorkspaceGate import operations

from conftest import requires_fifo, requires_symlinks


class TestReadWrite:
    """Tests for read_file / write_file."""

    def test_read_existing(self, gate):
        """Test reading a UTF-8 file."""
        result = gate.read_file("readme.txt")

        assert result.path == "readme.txt"
        assert result.content == "Hello World"
        assert result.size == 11
        assert result.encoding == "utf-8"
        assert result.content_type == "text/plain"

    def test_write_then_read_text(self, gate):
        """Test that text written is read back unchanged."""
        content = "line one\r\nline two\nñandú ✓"
        written = gate.write_file("notes/today.txt", content)
        read = gate.read_file("notes/today.txt")

        assert read.content == content
        assert written.bytes_written == len(content.encode("utf-8"))
        assert read.size == written.bytes_written

    def test_write_creates_parents(self, gate, sample_workspace):
        """Test that missing parent directories are created."""
        gate.write_file("a/b/c/deep.txt", "deep")
        assert (sample_workspace / "a" / "b" / "c" / "deep.txt").read_text() == "deep"

    def test_write_reports_created(self, gate):
        """Test the created flag and message."""
        first = gate.write_file("fresh.txt", "one")
        second = gate.write_file("fresh.txt", "two")

        assert first.created is True
        assert second.created is False
        assert second.message == "File written successfully: fresh.txt (3 bytes)"
        assert gate.read_file("fresh.txt").content == "two"

    def test_write_counts_bytes_not_characters(self, gate):
        """Test that bytes_written is the encoded length."""
        result = gate.write_file("accent.txt", "héllo")
        assert result.bytes_written == 6

    def test_base64_round_trip(self, gate, sample_workspace):
        """Test writing and reading raw bytes through base64."""
        payload = bytes(range(256))
        encoded = base64.b64encode(payload).decode("ascii")

        result = gate.write_file("blob.bin", encoded, encoding="base64")
        assert result.bytes_written == 256
        assert (sample_workspace / "blob.bin").read_bytes() == payload

        read = gate.read_file("blob.bin", encoding="base64")
        assert read.content == encoded
        assert read.size == 256

    def test_hex_round_trip(self, gate):
        """Test writing and reading raw bytes through hex."""
        gate.write_file("tiny.bin", "00ff10", encoding="hex")
        assert gate.read_file("tiny.bin", encoding="hex").content == "00ff10"

    def test_other_codec(self, gate, sample_workspace):
        """Test a non-UTF-8 text codec."""
        gate.write_file("latin.txt", "café", encoding="latin-1")
        assert (sample_workspace / "latin.txt").read_bytes() == b"caf\xe9"
        assert gate.read_file("latin.txt", encoding="latin-1").content == "café"

    def test_read_binary_as_utf8_fails(self, gate, sample_workspace):
        """Test that undecodable bytes raise DecodeError."""
        (sample_workspace / "raw.bin").write_bytes(b"\xff\xfe\x00")
        with pytest.raises(DecodeError) as exc_info:
            gate.read_file("raw.bin")
        assert exc_info.value.kind == "decode_error"
        assert "base64" in exc_info.value.message

    def test_unknown_encoding(self, gate):
        """Test that an unknown codec name raises DecodeError."""
        with pytest.raises(DecodeError):
            gate.read_file("readme.txt", encoding="no-such-codec")
        with pytest.raises(DecodeError):
            gate.write_file("x.txt", "x", encoding="no-such-codec")

    def test_invalid_base64(self, gate, sample_workspace):
        """Test that malformed base64 is rejected without writing."""
        with pytest.raises(DecodeError):
            gate.write_file("bad.bin", "not base64!!", encoding="base64")
        assert not (sample_workspace / "bad.bin").exists()

    def test_unencodable_text(self, gate):
        """Test text that the target codec cannot represent."""
        with pytest.raises(DecodeError):
            gate.write_file("ascii.txt", "✓", encoding="ascii")

    def test_read_missing(self, gate):
        """Test reading a file that does not exist."""
        with pytest.raises(NotFound):
            gate.read_file("missing.txt")

    def test_read_directory(self, gate):
        """Test that reading a directory raises NotAFile."""
        with pytest.raises(NotAFile):
            gate.read_file("subfolder")

    def test_write_onto_directory(self, gate):
        """Test that writing onto a directory raises NotAFile."""
        with pytest.raises(NotAFile):
            gate.write_file("subfolder", "x")
        with pytest.raises(NotAFile):
            gate.write_file(".", "x")

    @requires_fifo
    def test_named_pipe_not_a_file(self, gate, sample_workspace):
        """Test that reads and writes refuse a named pipe."""
        os.mkfifo(str(sample_workspace / "pipe"))

        with pytest.raises(NotAFile):
            gate.read_file("pipe")
        with pytest.raises(NotAFile):
            gate.write_file("pipe", "x")

    def test_write_outside_denied(self, gate, temp_dir):
        """Test that writes cannot escape the workspace."""
        with pytest.raises(AccessDenied):
            gate.write_file("../escaped.txt", "x")
        assert not (temp_dir / "escaped.txt").exists()

    def test_read_outside_denied(self, gate):
        """Test that reads cannot escape the workspace."""
        with pytest.raises(AccessDenied):
            gate.read_file("../../etc/passwd")


class TestDelete:
    """Tests for delete_file."""

    def test_delete_file(self, gate, sample_workspace):
        """Test deleting a file."""
        result = gate.delete_file("readme.txt")

        assert result.type == EntryKind.FILE
        assert result.message == "Deleted successfully: readme.txt"
        assert not (sample_workspace / "readme.txt").exists()

    def test_delete_directory_tree(self, gate, sample_workspace):
        """Test deleting a non-empty directory."""
        result = gate.delete_file("subfolder")

        assert result.type == EntryKind.DIRECTORY
        assert not (sample_workspace / "subfolder").exists()

    def test_delete_missing(self, gate):
        """Test deleting a path that does not exist."""
        with pytest.raises(NotFound):
            gate.delete_file("missing.txt")

    def test_delete_root_denied(self, gate, sample_workspace):
        """Test that the workspace root cannot be deleted."""
        with pytest.raises(AccessDenied):
            gate.delete_file(".")
        with pytest.raises(AccessDenied):
            gate.delete_file("subfolder/..")
        assert sample_workspace.is_dir()

    def test_delete_outside_denied(self, gate, temp_dir):
        """Test that deletes cannot escape the workspace."""
        victim = temp_dir / "victim.txt"
        victim.write_text("keep me")
        with pytest.raises(AccessDenied):
            gate.delete_file("../victim.txt")
        assert victim.exists()

    @requires_symlinks
    def test_delete_symlink_keeps_target(self, gate, temp_dir, sample_workspace):
        """Test that deleting a link leaves the target alone."""
        target = temp_dir / "target.txt"
        target.write_text("keep me")
        link = sample_workspace / "link.txt"
        os.symlink(str(target), str(link))

        gate.delete_file("link.txt")

        assert not os.path.lexists(str(link))
        assert target.read_text() == "keep me"

    @requires_symlinks
    def test_delete_symlinked_directory_keeps_contents(self, gate, sample_workspace):
        """Test that deleting a link to a directory does not empty it."""
        os.symlink(
            str(sample_workspace / "subfolder"),
            str(sample_workspace / "shortcut"),
        )

        result = gate.delete_file("shortcut")

        assert result.type == EntryKind.FILE
        assert (sample_workspace / "subfolder" / "nested.txt").exists()


class TestCreateDirectory:
    """Tests for create_directory."""

    def test_create_nested(self, gate, sample_workspace):
        """Test creating a directory with missing parents."""
        result = gate.create_directory("x/y/z")

        assert result.created is True
        assert result.path == "x/y/z"
        assert result.message == "Directory created successfully: x/y/z"
        assert (sample_workspace / "x" / "y" / "z").is_dir()

    def test_create_existing_is_idempotent(self, gate):
        """Test that creating an existing directory succeeds."""
        result = gate.create_directory("subfolder")

        assert result.created is False
        assert result.message == "Directory already exists"

    def test_create_over_file(self, gate):
        """Test that an existing file blocks directory creation."""
        with pytest.raises(NotADirectory):
            gate.create_directory("readme.txt")

    def test_create_outside_denied(self, gate, temp_dir):
        """Test that mkdir cannot escape the workspace."""
        with pytest.raises(AccessDenied):
            gate.create_directory("../sneaky")
        assert not (temp_dir / "sneaky").exists()


class TestFileInfo:
    """Tests for get_file_info."""

    def test_file_info(self, gate, sample_workspace):
        """Test detailed metadata for a file."""
        os.chmod(str(sample_workspace / "readme.txt"), 0o640)
        info = gate.get_file_info("readme.txt")

        assert isinstance(info, FullInfoRecord)
        assert info.name == "readme.txt"
        assert info.path == "readme.txt"
        assert info.type == EntryKind.FILE
        assert info.size == 11
        assert info.content_type == "text/plain"
        assert info.permissions_octal == "0o640"
        assert info.permissions & 0o777 == 0o640
        assert info.created.tzinfo is not None

    def test_directory_info(self, gate):
        """Test detailed metadata for a directory."""
        info = gate.get_file_info("subfolder")

        assert info.type == EntryKind.DIRECTORY
        assert info.content_type is None

    def test_root_info(self, gate):
        """Test metadata for the workspace root itself."""
        info = gate.get_file_info(".")

        assert info.path == "."
        assert info.name == "."
        assert info.type == EntryKind.DIRECTORY

    def test_info_missing(self, gate):
        """Test metadata for a missing path."""
        with pytest.raises(NotFound):
            gate.get_file_info("missing.txt")

    def test_unknown_extension(self, gate, sample_workspace):
        """Test the default content type."""
        (sample_workspace / "thing.zzzunknown").write_text("x")
        info = gate.get_file_info("thing.zzzunknown")
        assert info.content_type == "application/octet-stream"

    def test_custom_content_type_table(self, workspace, sample_workspace):
        """Test an injected extension table."""
        gate = WorkspaceGate(workspace, content_type=table_lookup({"txt": "text/x-custom"}))

        assert gate.get_file_info("readme.txt").content_type == "text/x-custom"
        assert gate.get_file_info("data.json").content_type == "application/octet-stream"


class TestErrorMapping:
    """Tests for from_os_error."""

    @pytest.mark.parametrize("exc, kind", [
        (FileNotFoundError(2, "No such file or directory"), "not_found"),
        (IsADirectoryError(21, "Is a directory"), "not_a_file"),
        (NotADirectoryError(20, "Not a directory"), "not_a_directory"),
        (PermissionError(13, "Permission denied"), "permission_denied"),
        (OSError(5, "Input/output error"), "permission_denied"),
    ])
    def test_kinds(self, exc, kind):
        """Test each OSError subclass maps to a stable kind."""
        error = from_os_error(exc, "a.txt", "read file")

        assert isinstance(error, WorkspaceError)
        assert error.kind == kind
        assert error.path == "a.txt"
        assert error.message.startswith("Failed to read file: a.txt: ")


class TestEncodingHelpers:
    """Tests for the encode/decode helpers."""

    def test_encoding_names_case_insensitive(self):
        """Test that BASE64 and base64 are the same."""
        assert operations.encode_text("AA==", "BASE64") == b"\x00"
        assert operations.decode_bytes(b"\x00", "HEX") == "00"

    def test_invalid_hex(self):
        """Test malformed hex content."""
        with pytest.raises(DecodeError):
            operations.encode_text("zz", "hex")


class TestScenario:
    """End-to-end flow on a fresh workspace."""

    def test_write_list_search_read_delete(self, temp_dir):
        """Test the basic lifecycle of one file."""
        root = temp_dir / "fresh"
        root.mkdir()
        gate = WorkspaceGate(Workspace(root=str(root), base_url="https://files.example.test"))

        gate.write_file("docs/a.txt", "hello")

        listing = gate.list_files(".", recursive=True)
        assert [(r.path, r.type) for r in listing.items] == [
            ("docs", EntryKind.DIRECTORY),
            ("docs/a.txt", EntryKind.FILE),
        ]
        assert listing.items[1].size == 5

        hits = gate.search_files("a.txt")
        assert [h.path for h in hits.results] == ["docs/a.txt"]

        assert gate.read_file("docs/a.txt").content == "hello"

        gate.delete_file("docs")
        assert gate.list_files(".").items == []
