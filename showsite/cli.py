"""Command-line interface for Showsite.

``serve`` runs the server from the current directory. ``new`` lays out a fresh project
and ``md`` adds a Markdown file to a section, placing it where the resolver will look
for it so the printed URL serves the new file.
"""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path

import click
import questionary

from . import __version__
from .content import PathEscapeError
from .resolver import resolve
from .sections import Section
from .server import BLOG_PREFIX, EPISODES_PREFIX, PAGES_PREFIX

# Files copied into new projects
_SCAFFOLD_DIR = Path(__file__).parent / "scaffold"

# Section -> (config key of its directory, URL prefix)
_CONTENT_SECTIONS = {
    Section.PAGE: ("pages_dir", PAGES_PREFIX),
    Section.BLOG: ("blog_dir", BLOG_PREFIX),
    Section.EPISODE: ("episodes_dir", EPISODES_PREFIX),
}


@click.group()
@click.version_option(version=__version__, prog_name="showsite")
def cli():
    """Showsite Markdown web server."""


@cli.command()
@click.argument("name")
def new(name: str):
    """Lay out template.html, assets and one index page per section."""
    target = Path(name).resolve()
    if target.exists() and any(target.iterdir()):
        raise click.ClickException(
            f"Refusing to initialize into non-empty directory: {target}"
        )
    _scaffold(target)
    click.echo(f"New Showsite project created at {target}")
    for section, (_, prefix) in _CONTENT_SECTIONS.items():
        click.echo(f"  {prefix}/  <-  {section.value}/index.md")
    click.echo("Run `showsite serve` inside it to start the server.")


@cli.command()
@click.option(
    "--port",
    type=int,
    required=False,
    help="Port to listen on (overrides showsite.yaml)",
)
@click.option(
    "--host",
    required=False,
    help="Interface to bind (overrides showsite.yaml)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def serve(port: int | None, host: str | None, verbose: bool):
    """Serve the site until interrupted."""
    project_root = Path.cwd()
    from .config import load_config
    from .server import ServerError, SiteServer
    from .templates import TemplateLoadError

    config = load_config(project_root)
    if port is not None:
        config["port"] = port
    if host is not None:
        config["host"] = host
    _configure_logging("DEBUG" if verbose else config.get("log_level", "INFO"))

    try:
        server = SiteServer(project_root, config)
        server.run()
    except TemplateLoadError as exc:
        click.echo(click.style("Template error:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {exc.source_path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    except ServerError as exc:
        click.echo(click.style("Server error:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  {exc}", fg="white"), err=True)
        raise SystemExit(1) from None


@cli.command()
def md():
    """Add a Markdown file to a section and print the URL it is served at."""
    project_root = Path.cwd()
    from .config import load_config

    config = load_config(project_root)
    if not (project_root / config["template"]).exists():
        raise click.ClickException(
            f"No {config['template']} found. Run this command from a Showsite project root."
        )

    choice = questionary.select(
        "Section:",
        choices=[
            questionary.Choice(f"{section.value} ({prefix}/...)", value=section.value)
            for section, (_, prefix) in _CONTENT_SECTIONS.items()
        ],
        style=_prompt_style(),
    ).ask()
    if choice is None:
        raise click.Abort()
    section = Section(choice)
    config_key, prefix = _CONTENT_SECTIONS[section]
    root = project_root / config[config_key]

    name = questionary.text(
        "Name (nested names like season-1/pilot are allowed):",
        validate=lambda value: _check_name(value, prefix, root),
        style=_prompt_style(),
    ).ask()
    if name is None:
        raise click.Abort()
    name = name.strip().strip("/")

    # Posts and episodes are dated, pages are evergreen
    dated = questionary.confirm(
        "Prefix the file name with today's date? (YYYY-MM-DD-)",
        default=section is not Section.PAGE,
        style=_prompt_style(),
    ).ask()
    if dated is None:
        raise click.Abort()
    if dated:
        folder, _, leaf = name.rpartition("/")
        leaf = datetime.now().strftime("%Y-%m-%d-") + leaf
        name = f"{folder}/{leaf}" if folder else leaf

    url = f"{prefix}/{name}"
    try:
        resolved = resolve(url, prefix, root)
    except PathEscapeError:
        raise click.ClickException(f"{url} would be served from outside {root}") from None

    if resolved.path.exists():
        raise click.ClickException(
            f"{url} is already served by {resolved.path.relative_to(project_root)}"
        )

    resolved.path.parent.mkdir(parents=True, exist_ok=True)
    resolved.path.write_text(f"# {_heading_for(name)}\n\n", encoding="utf-8")
    click.echo(f"Created {resolved.path.relative_to(project_root)}, served at {url}")


def _check_name(value: str, prefix: str, root: Path) -> bool | str:
    """Validate a content name the way requests for it would be resolved."""
    name = value.strip().strip("/")
    if not name:
        return "Name cannot be empty"
    try:
        resolve(f"{prefix}/{name}", prefix, root)
    except PathEscapeError:
        return f"Name must stay inside {root.name}/"
    return True


def _heading_for(name: str) -> str:
    """Turn the last segment of a content name into a heading, dropping a date prefix."""
    leaf = name.rpartition("/")[2]
    parts = leaf.split("-")
    if len(parts) > 3 and all(p.isdigit() for p in parts[:3]):
        leaf = "-".join(parts[3:])
    words = leaf.replace("-", " ").replace("_", " ").split()
    return " ".join(word.capitalize() for word in words)


def _prompt_style():
    return questionary.Style(
        [
            ("qmark", "fg:green bold"),
            ("question", "bold"),
            ("answer", "fg:green"),
            ("pointer", "fg:green bold"),
            ("highlighted", "fg:green bold"),
        ]
    )


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    """Entry point for the CLI application."""
    cli()


def _scaffold(root: Path) -> None:
    """Copy the packaged starter site into an empty or missing directory."""
    shutil.copytree(_SCAFFOLD_DIR, root, dirs_exist_ok=True)
