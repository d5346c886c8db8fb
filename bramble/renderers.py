"""Content renderers for Bramble.

Each renderer turns one kind of document body into HTML:

- MarkdownRenderer: Markdown to HTML through mistune, with Pygments
  highlighting for fenced code blocks that name a language.
- PassthroughRenderer: HTML and other text bodies, returned unchanged.

RendererRegistry picks the renderer for a source path.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import PurePath

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .protocols import ContentRenderer
from .utils import DEFAULT_MARKDOWN_EXT, is_markdown


class _HighlightRenderer(mistune.HTMLRenderer):
    """HTML renderer that keeps raw HTML and highlights fenced code."""

    def __init__(self):
        super().__init__(escape=False)

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'go').

        Returns:
            HTML string with highlighted code.
        """
        lang = info.split()[0] if info and info.strip() else None
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        escaped = code.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        lang_class = f' class="language-{lang}"' if lang else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


class MarkdownRenderer:
    """Renders Markdown bodies to HTML."""

    def __init__(self, extensions: Iterable[str] = DEFAULT_MARKDOWN_EXT):
        self.extensions = tuple(extensions)

    def can_render(self, path: PurePath) -> bool:
        return is_markdown(path, self.extensions)

    def render(self, content: str) -> str:
        """Render Markdown content to HTML.

        Args:
            content: Markdown source.

        Returns:
            Rendered HTML.
        """
        markdown = mistune.create_markdown(
            renderer=_HighlightRenderer(),
            plugins=["strikethrough", "footnotes", "table", "url"],
        )
        return markdown(content)


class PassthroughRenderer:
    """Returns HTML and other text bodies unchanged."""

    def can_render(self, path: PurePath) -> bool:
        return True

    def render(self, content: str) -> str:
        return content


class RendererRegistry:
    """Picks the renderer for a source file by its extension."""

    def __init__(self, markdown_ext: Iterable[str] = DEFAULT_MARKDOWN_EXT):
        self._renderers: list[ContentRenderer] = [MarkdownRenderer(markdown_ext)]
        self._fallback: ContentRenderer = PassthroughRenderer()

    def get_renderer(self, path: PurePath) -> ContentRenderer:
        """Get the renderer for a source file.

        Args:
            path: Path to the source file.

        Returns:
            The markdown renderer for markdown files, otherwise the
            pass-through renderer.
        """
        for renderer in self._renderers:
            if renderer.can_render(path):
                return renderer
        return self._fallback
