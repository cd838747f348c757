"""
WorkspaceGate share tokens.

Mints opaque, time-bounded references to single files. Tokens are not
stored here; validating them later is up to whoever serves the URL.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from enclave.shared.gate import GateLogger

from .errors import NotAFile
from .models import ShareToken
from .probe import MetadataProbe
from .security import PathGuard

_log = GateLogger.get("WorkspaceGate.Sharing")

SHARE_PATH = "/files/share/"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_file_id() -> str:
    return str(uuid.uuid4())


class ShareTokenIssuer:
    """
    Issues share tokens for files inside the workspace.

    Args:
        guard: PathGuard for the workspace
        probe: MetadataProbe used to read size and content type
        base_url: Public base address, e.g. https://mcp.platform.dev
        clock: Returns the current UTC time
        id_factory: Returns a fresh opaque identifier
    """

    def __init__(
        self,
        guard: PathGuard,
        probe: MetadataProbe,
        base_url: str,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.guard = guard
        self.probe = probe
        self.base_url = base_url.rstrip("/")
        self.clock = clock or _utcnow
        self.id_factory = id_factory or _new_file_id

    def issue(self, path: str, ttl_hours: float = 24) -> ShareToken:
        """
        Mint a share token for a file.

        Args:
            path: Absolute path returned by PathGuard.resolve
            ttl_hours: Lifetime in hours (fractions allowed)

        Returns:
            ShareToken with URL and expiry

        Raises:
            NotFound: If the file does not exist
            NotAFile: If the path is a directory
            ValueError: If ttl_hours is not positive or too large
        """
        if ttl_hours <= 0:
            raise ValueError("ttl_hours must be positive")

        record = self.probe.describe(path)
        if record.is_directory:
            raise NotAFile(f"Only files can have shareable URLs: {record.path}", record.path)

        file_id = self.id_factory()
        try:
            expires_at = self.clock() + timedelta(hours=ttl_hours)
        except OverflowError as e:
            raise ValueError("ttl_hours out of range") from e

        _log.info(f"Issued share token for {record.path} (expires {expires_at.isoformat()})")

        return ShareToken(
            file_id=file_id,
            path=record.path,
            url=f"{self.base_url}{SHARE_PATH}{file_id}",
            expires_at=expires_at,
            size=record.size,
            content_type=record.content_type,
        )
