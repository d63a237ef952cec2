"""Request path resolution for Showsite.

Maps an incoming URL path to the Markdown file that backs it inside a section
directory, applying the default-document and trailing-slash redirect rules.

Key objects:
- ResolvedPath: Concrete file path for a request, plus the section root it belongs to.
- Redirect: Permanent redirect to the slash-terminated section prefix.
- resolve: The resolution function itself.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .content import PathEscapeError

DEFAULT_DOCUMENT = "index"
MARKDOWN_SUFFIX = ".md"


@dataclass(frozen=True)
class ResolvedPath:
    """Filesystem location of the Markdown source for one request.

    Attributes:
        path: Path to the ``.md`` file.
        root: Section root directory the path was resolved against.
    """

    path: Path
    root: Path


@dataclass(frozen=True)
class Redirect:
    """Redirect produced for a bare section prefix.

    Attributes:
        location: Target URL path.
        status: HTTP status code to send.
    """

    location: str
    status: int = 301


def resolve(
    request_path: str, section_prefix: str, section_root: Path
) -> ResolvedPath | Redirect:
    """Resolve a request path to a Markdown file inside a section root.

    Args:
        request_path: Decoded URL path, always starting with ``/``.
        section_prefix: Section prefix such as ``/blog``, or ``""`` for pages.
        section_root: Directory holding the section's Markdown files.

    Returns:
        A Redirect for the bare prefix, otherwise the ResolvedPath.

    Raises:
        PathEscapeError: The resolved file would sit outside ``section_root``.
    """
    if section_prefix and request_path == section_prefix:
        return Redirect(location=f"{section_prefix}/")

    base = f"{section_prefix}/"
    name = request_path[len(base) :] if request_path.startswith(base) else ""
    if not name or name.endswith("/"):
        name += DEFAULT_DOCUMENT
    name = name.replace("/", os.sep)
    path = section_root / f"{name}{MARKDOWN_SUFFIX}"
    _ensure_contained(path, section_root)
    return ResolvedPath(path=path, root=section_root)


def _ensure_contained(path: Path, root: Path) -> None:
    """Reject paths that leave the section root once ``..`` and symlinks are resolved."""
    if "\x00" in str(path):
        raise PathEscapeError(path, root)
    try:
        real_root = root.resolve()
        real_path = path.resolve()
    except (OSError, ValueError) as exc:
        # NUL bytes or symlink loops cannot name a file under the root
        raise PathEscapeError(path, root) from exc
    if real_path != real_root and real_root not in real_path.parents:
        raise PathEscapeError(path, root)
