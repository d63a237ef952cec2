"""Page template for Showsite.

This module uses Jinja2 to wrap rendered Markdown in the site's single shared layout.
The layout is compiled once at startup and then only read, so it is safe to share
between request threads.

Key objects:
- PageTemplate: Immutable compiled layout with one ``page_content`` substitution point.
- load_template: Loads and compiles ``template.html``, failing fast on errors.
- TemplateLoadError, TemplateRenderError: Startup and request-time failures.

Rendered Markdown is inserted as ``Markup``; it is trusted author content and is
never escaped or sanitized.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    Template,
    TemplateNotFound,
    TemplateSyntaxError,
    select_autoescape,
)
from markupsafe import Markup

__all__ = ["PageTemplate", "TemplateLoadError", "TemplateRenderError", "load_template"]


class TemplateLoadError(Exception):
    """Error loading the page template at startup.

    Attributes:
        source_path: Path to the template file.
        message: Human-readable error message.
        original_error: The original exception that was caught.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        original_error: Exception | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.original_error = original_error
        super().__init__(f"{source_path}: {message}")


class TemplateRenderError(Exception):
    """Error executing the page template for a request."""


@dataclass(frozen=True)
class PageTemplate:
    """Compiled page layout shared by every section handler.

    Attributes:
        template: Compiled Jinja2 template.
        source_path: Path the template was loaded from.
    """

    template: Template
    source_path: Path

    def render(self, content_html: str) -> bytes:
        """Render the layout around a page body.

        Args:
            content_html: Trusted HTML for the ``page_content`` slot.

        Returns:
            UTF-8 encoded page.

        Raises:
            TemplateRenderError: Template execution failed.
        """
        try:
            rendered = self.template.render(page_content=Markup(content_html))
        except Exception as exc:
            raise TemplateRenderError(str(exc)) from exc
        return rendered.encode("utf-8")


def load_template(path: Path) -> PageTemplate:
    """Load and compile the page template.

    Args:
        path: Path to ``template.html``.

    Returns:
        The compiled, immutable PageTemplate.

    Raises:
        TemplateLoadError: The file is missing or does not compile.
    """
    env = Environment(
        loader=FileSystemLoader(str(path.parent)),
        autoescape=select_autoescape(["html", "xml"]),
        undefined=StrictUndefined,
        enable_async=False,
    )
    try:
        template = env.get_template(path.name)
    except TemplateNotFound as exc:
        raise TemplateLoadError(path, "template file not found", exc) from exc
    except TemplateSyntaxError as exc:
        raise TemplateLoadError(
            path, f"line {exc.lineno}: {exc.message}", exc
        ) from exc
    return PageTemplate(template, path)
