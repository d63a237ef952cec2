"""Markdown rendering for Showsite.

Converts Markdown source to HTML using mistune's core grammar only. No plugins are
enabled, so tables, footnotes, strikethrough and bare-URL autolinking are treated as
plain text. Raw HTML in the source is passed through untouched because content is
written by the site's authors.

Key class:
- MarkdownRenderer: Renders Markdown bytes to an HTML string.
"""

from __future__ import annotations

import mistune


class MarkdownRenderer:
    """Renders Markdown content to HTML in base mode.

    A new mistune parser is built for every call, so output depends only on the
    input bytes and concurrent calls share no parser state.
    """

    encoding = "utf-8"

    def render(self, content: bytes) -> str:
        """Render Markdown content to HTML.

        Args:
            content: Markdown source as read from disk.

        Returns:
            Rendered HTML fragment.
        """
        text = content.decode(self.encoding, errors="replace")
        markdown = mistune.create_markdown(escape=False, renderer="html", plugins=[])
        return markdown(text)
