"""
WorkspaceGate file operations.

Read, write, delete and mkdir on paths inside the workspace. Every
function resolves its path through PathGuard before touching the
filesystem.
"""

import base64
import binascii
import os
import shutil

from enclave.shared.gate import GateLogger

from .errors import AccessDenied, DecodeError, NotAFile, NotADirectory, NotFound, from_os_error
from .models import DeleteResult, DirectoryResult, EntryKind, ReadResult, WriteResult
from .probe import MetadataProbe
from .security import PathGuard

_log = GateLogger.get("WorkspaceGate")

DEFAULT_ENCODING = "utf-8"

# Encodings that carry raw bytes as ASCII text
BINARY_ENCODINGS = ("base64", "hex")


def decode_bytes(data: bytes, encoding: str, path: str = "") -> str:
    """
    Turn file bytes into text under the requested encoding.

    Raises:
        DecodeError: If the bytes are not valid in the encoding or the
            encoding is unknown
    """
    name = encoding.lower()
    if name == "base64":
        return base64.b64encode(data).decode("ascii")
    if name == "hex":
        return data.hex()

    try:
        return data.decode(encoding)
    except LookupError as e:
        raise DecodeError(f"Unknown encoding: {encoding}", path) from e
    except UnicodeDecodeError as e:
        raise DecodeError(
            f"Cannot decode file with {encoding} encoding. Try base64.", path
        ) from e


def encode_text(content: str, encoding: str, path: str = "") -> bytes:
    """
    Turn request content into the bytes to write.

    Raises:
        DecodeError: If base64/hex content is malformed, the text cannot be
            represented in the encoding, or the encoding is unknown
    """
    name = encoding.lower()
    try:
        if name == "base64":
            return base64.b64decode(content, validate=True)
        if name == "hex":
            return bytes.fromhex(content)
        return content.encode(encoding)
    except (binascii.Error, ValueError) as e:
        # UnicodeEncodeError is a ValueError
        raise DecodeError(f"Content is not valid {encoding}: {e}", path) from e
    except LookupError as e:
        raise DecodeError(f"Unknown encoding: {encoding}", path) from e


def read_file(
    guard: PathGuard,
    probe: MetadataProbe,
    relative_path: str,
    encoding: str = DEFAULT_ENCODING,
) -> ReadResult:
    """
    Read a file's contents.

    Args:
        guard: PathGuard for the workspace
        probe: MetadataProbe for the content type
        relative_path: Path relative to the workspace root
        encoding: Text encoding, or base64/hex for raw bytes

    Returns:
        ReadResult with content, size and content type
    """
    resolved = guard.resolve(relative_path)
    rel = guard.relative(resolved)

    if os.path.isdir(resolved):
        raise NotAFile(f"Path is a directory, not a file: {rel}", rel)
    if os.path.exists(resolved) and not os.path.isfile(resolved):
        raise NotAFile(f"Not a regular file: {rel}", rel)

    try:
        with open(resolved, "rb") as f:
            data = f.read()
    except OSError as e:
        raise from_os_error(e, rel, "read file") from e

    content = decode_bytes(data, encoding, rel)

    return ReadResult(
        path=rel,
        content=content,
        size=len(data),
        encoding=encoding,
        content_type=probe.content_type(os.path.basename(resolved)),
    )


def write_file(
    guard: PathGuard,
    relative_path: str,
    content: str,
    encoding: str = DEFAULT_ENCODING,
) -> WriteResult:
    """
    Write content to a file, creating parent directories as needed.

    Args:
        guard: PathGuard for the workspace
        relative_path: Path relative to the workspace root
        content: Text, or base64/hex encoded bytes
        encoding: Encoding of content

    Returns:
        WriteResult with the number of bytes written
    """
    resolved = guard.resolve(relative_path)
    rel = guard.relative(resolved)

    if resolved == guard.root or os.path.isdir(resolved):
        raise NotAFile(f"Path is a directory, not a file: {rel}", rel)
    if os.path.exists(resolved) and not os.path.isfile(resolved):
        raise NotAFile(f"Not a regular file: {rel}", rel)

    data = encode_text(content, encoding, rel)
    file_existed = os.path.exists(resolved)

    try:
        os.makedirs(os.path.dirname(resolved), exist_ok=True)
        with open(resolved, "wb") as f:
            f.write(data)
    except OSError as e:
        raise from_os_error(e, rel, "write file") from e

    _log.info(f"{'Updated' if file_existed else 'Created'} {rel} ({len(data)} bytes)")

    return WriteResult(
        path=rel,
        bytes_written=len(data),
        created=not file_existed,
        message=f"File written successfully: {rel} ({len(data)} bytes)",
    )


def delete_path(guard: PathGuard, relative_path: str) -> DeleteResult:
    """
    Delete a file, a symlink or a whole directory tree.

    A symlink is removed itself; its target is left alone.

    Args:
        guard: PathGuard for the workspace
        relative_path: Path relative to the workspace root

    Returns:
        DeleteResult
    """
    resolved = guard.resolve(relative_path, follow_symlinks=False)
    rel = guard.relative(resolved)

    if resolved == guard.root:
        raise AccessDenied("Cannot delete the workspace root", rel)

    if not os.path.lexists(resolved):
        raise NotFound(f"Path does not exist: {rel}", rel)

    is_dir = os.path.isdir(resolved) and not os.path.islink(resolved)

    try:
        if is_dir:
            shutil.rmtree(resolved)
        else:
            os.remove(resolved)
    except OSError as e:
        raise from_os_error(e, rel, "delete") from e

    _log.info(f"Deleted {'directory' if is_dir else 'file'} {rel}")

    return DeleteResult(
        path=rel,
        type=EntryKind.DIRECTORY if is_dir else EntryKind.FILE,
        message=f"Deleted successfully: {rel}",
    )


def make_directory(guard: PathGuard, relative_path: str) -> DirectoryResult:
    """
    Create a directory and any missing parents.

    Args:
        guard: PathGuard for the workspace
        relative_path: Path relative to the workspace root

    Returns:
        DirectoryResult; created is False if it already existed
    """
    resolved = guard.resolve(relative_path)
    rel = guard.relative(resolved)

    if os.path.exists(resolved):
        if os.path.isdir(resolved):
            return DirectoryResult(path=rel, created=False, message="Directory already exists")
        raise NotADirectory(f"A file with that name already exists: {rel}", rel)

    try:
        os.makedirs(resolved, exist_ok=True)
    except OSError as e:
        raise from_os_error(e, rel, "create directory") from e

    _log.info(f"Created directory {rel}")

    return DirectoryResult(
        path=rel,
        created=True,
        message=f"Directory created successfully: {rel}",
    )
