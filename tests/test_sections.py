import logging

import pytest

from showsite.sections import Response, Section, SectionHandler
from showsite.templates import TemplateRenderError, load_template


def _handler(root, section=Section.BLOG, prefix="/blog"):
    template = load_template(root / "template.html")
    folder = root / section.value
    return SectionHandler(section, prefix, folder, template)


def test_bare_prefix_redirects(site_root):
    response = _handler(site_root).handle("/blog")
    assert response.status == 301
    assert response.headers["Location"] == "/blog/"


def test_existing_post_renders_inside_template(site_root):
    response = _handler(site_root).handle("/blog/first")
    assert response.status == 200
    assert response.content_type == "text/html; charset=utf-8"
    assert response.body.startswith(b"<html><body><main>")
    assert b"<h1>First post</h1>" in response.body


def test_trailing_slash_serves_index(site_root):
    response = _handler(site_root, Section.EPISODE, "/episodes").handle("/episodes/")
    assert response.status == 200
    assert b"<h1>Episodes</h1>" in response.body


def test_root_serves_pages_index_without_redirect(site_root):
    response = _handler(site_root, Section.PAGE, "").handle("/")
    assert response.status == 200
    assert b"<main><h1>Hi</h1>" in response.body


def test_missing_file_is_plain_text_404(site_root):
    response = _handler(site_root).handle("/blog/missing")
    assert response.status == 404
    assert response.content_type.startswith("text/plain")
    assert response.body.strip()


def test_traversal_is_404(site_root):
    (site_root / "template.md").write_text("# leaked", encoding="utf-8")
    response = _handler(site_root).handle("/blog/../template")
    assert response.status == 404
    assert b"leaked" not in response.body


def test_template_failure_is_plain_text_500(site_root, caplog):
    (site_root / "template.html").write_text(
        "{{ page_content }}{{ not_defined }}", encoding="utf-8"
    )
    with caplog.at_level(logging.ERROR, logger="showsite.sections"):
        response = _handler(site_root).handle("/blog/first")
    assert response.status == 500
    assert response.body == b"Internal Server Error\n"
    assert "Failed to render" in caplog.text


def test_injected_collaborators_are_used(site_root):
    calls = []

    class FakeLoader:
        def load(self, resolved):
            calls.append(resolved.path)
            return b"raw"

    class FakeRenderer:
        def render(self, content):
            return f"<p>{content.decode()}</p>"

    template = load_template(site_root / "template.html")
    handler = SectionHandler(
        Section.BLOG,
        "/blog",
        site_root / "blog",
        template,
        loader=FakeLoader(),
        renderer=FakeRenderer(),
    )
    response = handler.handle("/blog/anything")
    assert response.status == 200
    assert b"<p>raw</p>" in response.body
    assert calls == [site_root / "blog" / "anything.md"]


def test_render_error_from_template_object(site_root):
    class BrokenTemplate:
        def render(self, content_html):
            raise TemplateRenderError("boom")

    handler = SectionHandler(Section.PAGE, "", site_root / "pages", BrokenTemplate())
    assert handler.handle("/").status == 500


@pytest.mark.parametrize("status,message", [(404, "File not found"), (500, "oops")])
def test_text_response(status, message):
    response = Response.text(status, message)
    assert response.status == status
    assert response.body == f"{message}\n".encode()
    assert response.content_type == "text/plain; charset=utf-8"


def test_template_runtime_error_is_500(site_root):
    (site_root / "template.html").write_text(
        "{{ page_content }}{{ 1 // 0 }}", encoding="utf-8"
    )
    response = _handler(site_root, Section.PAGE, "").handle("/")
    assert response.status == 500
    assert response.body == b"Internal Server Error\n"


def test_nul_byte_in_name_is_404(site_root):
    response = _handler(site_root).handle("/blog/a\x00b")
    assert response.status == 404
