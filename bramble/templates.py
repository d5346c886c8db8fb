"""Template rendering engine for Bramble.

This module uses Jinja2 to compile the layouts found under ``_layouts/`` and
the partials under ``_includes/``, and to render a document's HTML into its
layout. Every template is compiled up front so a syntax error fails the
build before anything is written.

Key class:
- TemplateEngine: Compiles templates and renders layouts against a context.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path, PurePath
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    Template,
    TemplateNotFound,
    TemplateSyntaxError,
    select_autoescape,
)
from markupsafe import Markup, escape

from .classifier import TEMPLATE_DIRS
from .errors import RenderError, TemplateCompileError
from .utils import slugify

__all__ = ["TemplateEngine"]


def date_to_string(value: datetime) -> str:
    """Format a date like ``15 Jan 2024``."""
    return value.strftime("%d %b %Y")


def date_to_long_string(value: datetime) -> str:
    """Format a date like ``15 January 2024``."""
    return value.strftime("%d %B %Y")


def date_to_xmlschema(value: datetime) -> str:
    return value.isoformat()


def date_to_rfc822(value: datetime) -> str:
    if value.tzinfo is None:
        return value.strftime("%a, %d %b %Y %H:%M:%S +0000")
    return value.strftime("%a, %d %b %Y %H:%M:%S %z")


def xml_escape(value: Any) -> Markup:
    return escape(str(value))


def number_of_words(value: str) -> int:
    return len(re.sub(r"<[^>]+>", " ", str(value)).split())


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        src: Source root; templates live in its ``_layouts`` and ``_includes``.
        env: Jinja2 environment.
        compiled: Templates compiled so far, by name.
    """

    def __init__(self, src: Path):
        """Initialize the template engine.

        Args:
            src: Source root directory.
        """
        self.src = src
        self.env = Environment(
            loader=FileSystemLoader([src / name for name in TEMPLATE_DIRS]),
            autoescape=select_autoescape(["html", "xml"]),
            enable_async=False,
        )
        self.compiled: dict[str, Template] = {}
        self._install_filters()

    def _install_filters(self) -> None:
        """Install Jekyll-style filters in the Jinja environment."""
        self.env.filters["date_to_string"] = date_to_string
        self.env.filters["date_to_long_string"] = date_to_long_string
        self.env.filters["date_to_xmlschema"] = date_to_xmlschema
        self.env.filters["date_to_rfc822"] = date_to_rfc822
        self.env.filters["xml_escape"] = xml_escape
        self.env.filters["number_of_words"] = number_of_words
        self.env.filters["slugify"] = slugify

    @staticmethod
    def template_name(rel: PurePath) -> str:
        """Name a template file by its path inside its template directory.

        Examples:
            ``_layouts/post.html`` is ``post.html``;
            ``_includes/nav/top.html`` is ``nav/top.html``.
        """
        return PurePath(*rel.parts[1:]).as_posix()

    def compile(self, names: Iterable[str]) -> None:
        """Compile every named template.

        Args:
            names: Template names relative to the template directories.

        Raises:
            TemplateCompileError: On the first template with invalid syntax.
        """
        for name in names:
            try:
                self.compiled[name] = self.env.get_template(name)
            except TemplateSyntaxError as exc:
                location = exc.filename or name
                raise TemplateCompileError(
                    location,
                    f"Template syntax error on line {exc.lineno}: {exc.message}",
                    exc,
                ) from exc

    def render(self, layout: str, context: Mapping[str, Any], url: str = "") -> str:
        """Render a layout with the given context.

        Args:
            layout: Layout template name, e.g. ``post.html``.
            context: Variables passed to the template.
            url: URL of the page being rendered, for error messages.

        Returns:
            Rendered text.

        Raises:
            RenderError: If the layout is missing or fails while rendering.
        """
        try:
            template = self.compiled.get(layout) or self.env.get_template(layout)
            return template.render(**context)
        except TemplateNotFound as exc:
            raise RenderError(url, f"Layout not found: {exc.name}", exc) from exc
        except TemplateSyntaxError as exc:
            raise RenderError(
                url, f"Template syntax error on line {exc.lineno}: {exc.message}", exc
            ) from exc
        except Exception as exc:
            raise RenderError(url, _format_error_message(exc), exc) from exc


def _format_error_message(exc: Exception) -> str:
    """Format an exception raised by a template into a user-friendly message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    error_msg = str(exc)

    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"
    if error_type == "TypeError":
        return f"Type error: {error_msg}"
    if error_type == "AttributeError":
        return f"Attribute error: {error_msg}"

    return f"{error_type}: {error_msg}"
