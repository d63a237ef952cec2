from pathlib import Path

import pytest

TEMPLATE = "<html><body><main>{{ page_content }}</main></body></html>"


@pytest.fixture
def site_root(tmp_path) -> Path:
    """A project directory with a template and one file per section."""
    (tmp_path / "template.html").write_text(TEMPLATE, encoding="utf-8")
    for folder in ("pages", "blog", "episodes", "assets"):
        (tmp_path / folder).mkdir()
    (tmp_path / "pages" / "index.md").write_text("# Hi\n", encoding="utf-8")
    (tmp_path / "pages" / "about.md").write_text("About *us*\n", encoding="utf-8")
    (tmp_path / "blog" / "index.md").write_text("# Blog\n", encoding="utf-8")
    (tmp_path / "blog" / "first.md").write_text("# First post\n", encoding="utf-8")
    (tmp_path / "episodes" / "index.md").write_text("# Episodes\n", encoding="utf-8")
    (tmp_path / "episodes" / "ep1.md").write_text("# Episode 1\n", encoding="utf-8")
    (tmp_path / "assets" / "style.css").write_bytes(b"body { color: red; }\n")
    return tmp_path
