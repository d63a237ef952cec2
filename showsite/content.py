"""Content loading for Showsite.

Reads Markdown sources from disk for a single request. Every read failure is reported
as one not-found condition; callers never see the underlying cause.

Key classes:
- ContentNotFoundError: Raised when a content file cannot be read.
- PathEscapeError: Raised when a request resolves outside its section root.
- FileContentLoader: Reads a resolved content path into memory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .resolver import ResolvedPath

logger = logging.getLogger(__name__)


class ContentNotFoundError(Exception):
    """Error raised when a content file cannot be read.

    Attributes:
        path: Path that was requested.
    """

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Content not found: {path}")


class PathEscapeError(ContentNotFoundError):
    """Error raised when a resolved path lies outside its section root.

    Attributes:
        path: Path that was requested.
        root: Section root the path should have stayed inside.
    """

    def __init__(self, path: Path, root: Path):
        super().__init__(path)
        self.root = root


class FileContentLoader:
    """Loads raw Markdown bytes for a resolved path.

    The loader keeps no state between calls, so one instance is shared by
    all request threads of a section.
    """

    def load(self, resolved: ResolvedPath) -> bytes:
        """Read the whole file behind a resolved path.

        Args:
            resolved: Path produced by the resolver.

        Returns:
            Raw file content.

        Raises:
            ContentNotFoundError: The file is missing, unreadable, a directory or
                an invalid path such as one with a NUL byte.
        """
        logger.info("Loading file: %s", resolved.path)
        try:
            return resolved.path.read_bytes()
        except (OSError, ValueError) as exc:
            raise ContentNotFoundError(resolved.path) from exc
