"""
WorkspaceGate traversal.

Bounded depth-first walking of the workspace for listings and for
filename/content search.
"""

import os
import re
import stat as stat_module
from contextlib import closing
from typing import Iterator, List, Optional, Tuple

from enclave.shared.gate import GateLogger

from .errors import NotADirectory, NotFound, from_os_error
from .models import DirEntryRecord, EntryKind, MatchType, SearchHit, SearchQuery, SearchResult
from .probe import MetadataProbe
from .security import PathGuard

_log = GateLogger.get("WorkspaceGate.Walker")


class PatternMatcher:
    """
    Substring-or-regex matcher used for names and file bodies.

    A pattern that is not a valid regular expression still matches as a
    literal substring.
    """

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.regex: Optional[re.Pattern] = None
        try:
            self.regex = re.compile(pattern, re.IGNORECASE)
        except re.error as e:
            _log.debug(f"Pattern {pattern!r} is not a valid regex ({e}); using substring match only")

    def matches(self, text: str) -> bool:
        if self.pattern in text:
            return True
        return self.regex is not None and self.regex.search(text) is not None


def listing_order(record: DirEntryRecord) -> Tuple[bool, str, str]:
    """Sort key: directories first, then case-insensitive name."""
    return (record.type != EntryKind.DIRECTORY, record.name.casefold(), record.name)


class Walker:
    """
    Depth-first, pre-order traversal over paths cleared by PathGuard.

    Args:
        guard: PathGuard for the workspace
        probe: MetadataProbe building the entry records
        strict: Raise on unreadable subdirectories instead of skipping them
        max_content_bytes: Largest file read for content search (0 = no limit)
    """

    def __init__(
        self,
        guard: PathGuard,
        probe: MetadataProbe,
        strict: bool = True,
        max_content_bytes: int = 0,
    ):
        self.guard = guard
        self.probe = probe
        self.strict = strict
        self.max_content_bytes = max_content_bytes

    # ==================== Traversal ====================

    def walk(self, directory: str, recursive: bool = True) -> Iterator[Tuple[DirEntryRecord, str]]:
        """
        Yield (record, absolute_path) for every entry below a directory.

        Entries are yielded before their children are visited. The walk is
        lazy: a consumer that stops iterating stops the traversal.

        Raises:
            NotFound: If the directory does not exist
            NotADirectory: If it is not a directory
            PermissionDenied: If it cannot be read
        """
        for record, path, _ in self._walk(directory, recursive, is_start=True):
            yield record, path

    def _walk(
        self, directory: str, recursive: bool, is_start: bool
    ) -> Iterator[Tuple[DirEntryRecord, str, os.stat_result]]:
        for entry in self._scan(directory, is_start):
            path = entry.path
            rel = self.guard.relative(path)

            is_link = entry.is_symlink()
            if is_link and not self.guard.contains(os.path.realpath(path)):
                _log.debug(f"Skipping {rel}: link target outside workspace")
                continue

            try:
                st = os.stat(path)
            except FileNotFoundError:
                # Removed since the directory was read, or a dangling link
                _log.debug(f"Skipping {rel}: no longer exists")
                continue
            except OSError as e:
                if self.strict:
                    raise from_os_error(e, rel, "read entry") from e
                _log.warning(f"Skipping unreadable entry {rel}: {e}")
                continue

            record = self.probe.record(path, st)
            yield record, path, st

            # Symlinked directories are reported but not descended into
            if recursive and record.is_directory and not is_link:
                yield from self._walk(path, recursive, is_start=False)

    def _scan(self, directory: str, is_start: bool) -> List[os.DirEntry]:
        rel = self.guard.relative(directory)
        try:
            with os.scandir(directory) as it:
                return sorted(it, key=lambda e: e.name)
        except FileNotFoundError as e:
            if is_start:
                raise NotFound(f"Directory not found: {rel}", rel) from e
            _log.debug(f"Directory {rel} disappeared during traversal")
            return []
        except NotADirectoryError as e:
            if is_start:
                raise NotADirectory(f"Not a directory: {rel}", rel) from e
            return []
        except OSError as e:
            if is_start or self.strict:
                raise from_os_error(e, rel, "read directory") from e
            _log.warning(f"Skipping unreadable directory {rel}: {e}")
            return []

    # ==================== Listing ====================

    def list(self, directory: str, recursive: bool = False) -> List[DirEntryRecord]:
        """
        List a directory, optionally recursively.

        Returns:
            Records sorted with directories before files, then by name
        """
        records = [record for record, _ in self.walk(directory, recursive)]
        records.sort(key=listing_order)
        return records

    # ==================== Search ====================

    def search(self, query: SearchQuery) -> SearchResult:
        """
        Search the whole workspace by name and optionally by content.

        A filename match takes priority over a content match, and only
        regular files are read for content. Collection stops once
        max_results hits have been found.
        """
        matcher = PatternMatcher(query.pattern)
        hits: List[SearchHit] = []

        with closing(self._walk(self.guard.root, True, is_start=True)) as entries:
            for record, path, st in entries:
                match_type = None
                if matcher.matches(record.name):
                    match_type = MatchType.FILENAME
                elif (
                    query.search_content
                    and stat_module.S_ISREG(st.st_mode)
                    and self._content_matches(path, st.st_size, matcher)
                ):
                    match_type = MatchType.CONTENT

                if match_type is None:
                    continue

                hits.append(SearchHit(**record.model_dump(), match_type=match_type))
                if len(hits) >= query.max_results:
                    break

        return SearchResult(
            pattern=query.pattern,
            results=hits,
            total_found=len(hits),
            search_content=query.search_content,
        )

    def _content_matches(self, path: str, size: int, matcher: PatternMatcher) -> bool:
        if self.max_content_bytes and size > self.max_content_bytes:
            _log.debug(f"Skipping content of {self.guard.relative(path)}: {size} bytes over limit")
            return False
        try:
            with open(path, "r", encoding="utf-8", newline="") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            _log.debug(f"Skipping content of {self.guard.relative(path)}: {e}")
            return False
        return matcher.matches(text)
