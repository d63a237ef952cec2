"""Showsite Markdown web server.

This package serves a small site straight from Markdown files on disk. Every request
is mapped to a file in one of three content sections (pages, blog, episodes), converted
to HTML and wrapped in a single shared Jinja2 template. A static asset directory is
served unchanged.

The main entry point is the CLI module, which provides commands for scaffolding new
projects, adding Markdown files and running the server.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
