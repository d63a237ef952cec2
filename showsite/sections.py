"""Section request handling for Showsite.

A section is one directory of Markdown files served under a URL prefix. The handler
runs a single request through resolve, load and render, and turns each failure into
the matching HTTP status.

Key classes:
- Section: The content categories a request can belong to.
- Response: Status, headers and body to write back to the client.
- SectionHandler: Resolve, load and render pipeline for one section.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .content import ContentNotFoundError, FileContentLoader
from .renderers import MarkdownRenderer
from .resolver import Redirect, resolve
from .templates import PageTemplate, TemplateRenderError

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


class Section(enum.Enum):
    """Content category a request is routed to."""

    PAGE = "pages"
    BLOG = "blog"
    EPISODE = "episodes"
    ASSET = "assets"


@dataclass
class Response:
    """HTTP response produced by a handler.

    Attributes:
        status: HTTP status code.
        body: Encoded response body.
        content_type: Value for the Content-Type header.
        headers: Extra headers such as Location.
    """

    status: int
    body: bytes
    content_type: str = HTML_CONTENT_TYPE
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def text(cls, status: int, message: str) -> Response:
        """Build a plain-text response, newline terminated."""
        return cls(status, f"{message}\n".encode("utf-8"), TEXT_CONTENT_TYPE)

    @classmethod
    def redirect(cls, redirect: Redirect) -> Response:
        """Build a redirect response for a Redirect from the resolver."""
        response = cls.text(redirect.status, "Moved Permanently")
        response.headers["Location"] = redirect.location
        return response


class SectionHandler:
    """Serves one section of Markdown content.

    Attributes:
        section: Section this handler serves.
        prefix: URL prefix, ``""`` for the catch-all pages section.
        root: Directory holding the section's Markdown files.
        template: Shared page layout.
        loader: Reads Markdown sources.
        renderer: Converts Markdown to HTML.
    """

    def __init__(
        self,
        section: Section,
        prefix: str,
        root: Path,
        template: PageTemplate,
        loader: FileContentLoader | None = None,
        renderer: MarkdownRenderer | None = None,
    ):
        self.section = section
        self.prefix = prefix
        self.root = root
        self.template = template
        self.loader = loader or FileContentLoader()
        self.renderer = renderer or MarkdownRenderer()

    def handle(self, request_path: str) -> Response:
        """Produce the response for a request path in this section.

        Args:
            request_path: Decoded URL path without query string.

        Returns:
            301 for the bare prefix, 404 when the source cannot be read,
            500 when the template fails, otherwise 200 with the page.
        """
        try:
            resolved = resolve(request_path, self.prefix, self.root)
            if isinstance(resolved, Redirect):
                return Response.redirect(resolved)
            raw = self.loader.load(resolved)
        except ContentNotFoundError:
            return Response.text(404, "File not found")

        try:
            body = self.template.render(self.renderer.render(raw))
        except TemplateRenderError:
            logger.exception("Failed to render %s", resolved.path)
            return Response.text(500, "Internal Server Error")
        return Response(200, body)
