from datetime import datetime, timezone
from pathlib import Path, PurePath

import pytest
from markupsafe import Markup

from bramble.errors import RenderError, TemplateCompileError
from bramble.templates import (
    TemplateEngine,
    _format_error_message,
    date_to_long_string,
    date_to_rfc822,
    date_to_string,
    date_to_xmlschema,
    number_of_words,
    xml_escape,
)


def create_templates(tmp_path: Path) -> Path:
    src = tmp_path / "src"
    (src / "_layouts").mkdir(parents=True)
    (src / "_includes").mkdir()
    (src / "_layouts" / "default.html").write_text(
        "<title>{{ site.title }}</title>{{ content }}{% include 'footer.html' %}",
        encoding="utf-8",
    )
    (src / "_layouts" / "post.html").write_text(
        "{% extends 'default.html' %}", encoding="utf-8"
    )
    (src / "_includes" / "footer.html").write_text(
        "<footer>{{ page.title }}</footer>", encoding="utf-8"
    )
    return src


def test_template_engine_renders_layout_with_include(tmp_path):
    src = create_templates(tmp_path)
    engine = TemplateEngine(src)
    engine.compile(["default.html", "post.html", "footer.html"])
    assert set(engine.compiled) == {"default.html", "post.html", "footer.html"}

    context = {
        "site": {"title": "My <Site>"},
        "page": {"title": "Hello"},
        "content": Markup("<p>Hi</p>"),
    }
    rendered = engine.render("post.html", context, url="hello.html")
    assert rendered == "<title>My &lt;Site&gt;</title><p>Hi</p><footer>Hello</footer>"


def test_template_name():
    assert TemplateEngine.template_name(PurePath("_layouts/post.html")) == "post.html"
    assert TemplateEngine.template_name(PurePath("_includes/nav/top.html")) == "nav/top.html"


def test_compile_reports_syntax_errors(tmp_path):
    src = create_templates(tmp_path)
    (src / "_layouts" / "broken.html").write_text(
        "{% for x in items %}\nNo end!", encoding="utf-8"
    )
    engine = TemplateEngine(src)
    with pytest.raises(TemplateCompileError) as exc_info:
        engine.compile(["default.html", "broken.html"])
    assert "broken.html" in str(exc_info.value.context)
    assert "syntax error" in exc_info.value.message.lower()


def test_render_errors_name_the_page(tmp_path):
    src = create_templates(tmp_path)
    engine = TemplateEngine(src)

    with pytest.raises(RenderError) as exc_info:
        engine.render("missing.html", {}, url="about.html")
    assert exc_info.value.context == "about.html"
    assert "missing.html" in exc_info.value.message

    (src / "_layouts" / "strict.html").write_text(
        "{{ page.author.name }}", encoding="utf-8"
    )
    with pytest.raises(RenderError) as exc_info:
        engine.render("strict.html", {"page": {}}, url="post.html")
    assert exc_info.value.context == "post.html"
    assert "Undefined variable" in exc_info.value.message


def test_filters(tmp_path):
    when = datetime(2024, 1, 5, 9, 30)
    assert date_to_string(when) == "05 Jan 2024"
    assert date_to_long_string(when) == "05 January 2024"
    assert date_to_xmlschema(when) == "2024-01-05T09:30:00"
    assert date_to_rfc822(when) == "Fri, 05 Jan 2024 09:30:00 +0000"
    assert date_to_rfc822(when.replace(tzinfo=timezone.utc)).endswith("+0000")
    assert xml_escape("a & <b>") == "a &amp; &lt;b&gt;"
    assert number_of_words("<p>three little words</p>") == 3

    src = create_templates(tmp_path)
    (src / "_layouts" / "filters.html").write_text(
        "{{ when | date_to_string }}|{{ 'Hello World' | slugify }}", encoding="utf-8"
    )
    engine = TemplateEngine(src)
    assert engine.render("filters.html", {"when": when}) == "05 Jan 2024|hello-world"


def test_format_error_message():
    assert "Type error" in _format_error_message(TypeError("bad"))
    assert "Attribute error" in _format_error_message(AttributeError("bad"))
    result = _format_error_message(RuntimeError("something else"))
    assert "RuntimeError" in result
    assert "something else" in result
