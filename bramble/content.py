"""Content model and parsing for Bramble.

This module turns classified source files into the two document variants the
site renders:

- Page: a non-chronological document (about.md, index.html with front matter).
- Post: a dated document under ``_posts/`` named ``YYYY-MM-DD-slug.ext``,
  carrying tags and categories.

Both are immutable once parsed and satisfy the Renderable protocol. Malformed
front matter or a post name that breaks the naming convention raises
ParseError with the offending path; nothing is recovered.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date as date_type
from datetime import datetime
from pathlib import Path, PurePath
from typing import Any, Union

import yaml

from .classifier import POSTS_DIR
from .errors import ParseError
from .utils import (
    DEFAULT_MARKDOWN_EXT,
    is_markdown,
    normalize_labels,
    split_post_name,
    titleize,
)

FRONT_MATTER_OPEN_RE = re.compile(r"\A---[ \t]*\r?\n")
FRONT_MATTER_CLOSE_RE = re.compile(r"^(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)", re.MULTILINE)


def split_front_matter(text: str, path: PurePath) -> tuple[dict[str, Any], str]:
    """Split a YAML front-matter block from the body.

    A file that begins with a ``---`` line must close the block with a
    ``---`` or ``...`` line. Files without an opening delimiter have no
    metadata and the whole text is the body.

    Args:
        text: Raw file content.
        path: Source path, used in error messages.

    Returns:
        Tuple of (metadata dict, body).

    Raises:
        ParseError: If the block is unterminated, is not valid YAML or does
            not contain a mapping.
    """
    opening = FRONT_MATTER_OPEN_RE.match(text)
    if not opening:
        return {}, text
    closing = FRONT_MATTER_CLOSE_RE.search(text, opening.end())
    if not closing:
        raise ParseError(path, "front matter is missing its closing '---' delimiter")
    raw = text[opening.end() : closing.start()]
    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        raise ParseError(path, f"invalid front matter: {exc}", exc) from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ParseError(path, "front matter must be a mapping")
    return {str(key): value for key, value in data.items()}, text[closing.end() :]


@dataclass(frozen=True, eq=False)
class Page:
    """A non-chronological document.

    Attributes:
        path: Source path relative to the source root.
        url: Output path relative to the destination root.
        content: Raw body following the front matter.
        layout: Layout name to render into.
        title: Human-readable title.
        frontmatter: Full front-matter mapping.
    """

    path: PurePath
    url: str
    content: str
    layout: str
    title: str
    frontmatter: Mapping[str, Any] = field(default_factory=dict)

    @property
    def tags(self) -> tuple[str, ...]:
        return ()

    @property
    def categories(self) -> tuple[str, ...]:
        return ()

    def __getitem__(self, key: str) -> Any:
        # Templates reach arbitrary front-matter keys as page.<key>.
        return self.frontmatter[key]


@dataclass(frozen=True, eq=False)
class Post:
    """A dated document with tags and categories.

    Attributes:
        path: Source path relative to the source root.
        url: Output path relative to the destination root.
        content: Raw body following the front matter.
        layout: Layout name to render into.
        title: Human-readable title.
        date: Publish date.
        slug: URL slug taken from the file name.
        tags: Tags in declaration order, without duplicates.
        categories: Directory categories followed by declared ones.
        frontmatter: Full front-matter mapping.
    """

    path: PurePath
    url: str
    content: str
    layout: str
    title: str
    date: datetime
    slug: str
    tags: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    frontmatter: Mapping[str, Any] = field(default_factory=dict)

    @property
    def id(self) -> str:
        return f"/{self.date:%Y/%m/%d}/{self.slug}"

    def __getitem__(self, key: str) -> Any:
        return self.frontmatter[key]


Document = Union[Page, Post]


def _read_source(src: Path, rel: PurePath) -> str:
    try:
        return (src / rel).read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ParseError(rel, "source is not valid UTF-8", exc) from exc
    except OSError as exc:
        raise ParseError(rel, f"cannot read source: {exc}", exc) from exc


def _resolve_layout(frontmatter: Mapping[str, Any], default_layout: str) -> str:
    layout = frontmatter.get("layout")
    if layout is None or str(layout).strip() == "":
        return default_layout
    return str(layout).strip()


def _normalize_url(url: str) -> str:
    """Make a permalink destination-relative and point directories at index.html."""
    cleaned = url.strip().lstrip("/")
    if not cleaned or cleaned.endswith("/"):
        cleaned = f"{cleaned}index.html"
    return cleaned


def _contained_url(url: str, rel: PurePath) -> str:
    """Reject output paths that would climb out of the destination root."""
    if ".." in url.replace("\\", "/").split("/"):
        raise ParseError(rel, f"output path {url!r} escapes the destination")
    return url


def _coerce_date(value: Any, rel: PurePath) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, date_type):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ParseError(rel, f"invalid date {value!r}", exc) from exc


def page_url(rel: PurePath, markdown_ext: Iterable[str] = DEFAULT_MARKDOWN_EXT) -> str:
    """Derive a page's output path from its source path.

    Markdown extensions become ``.html``; any other extension is kept.

    Examples:
        >>> page_url(PurePath("docs/about.md"))
        'docs/about.html'

        >>> page_url(PurePath("feed.xml"))
        'feed.xml'
    """
    if is_markdown(rel, markdown_ext):
        rel = rel.with_suffix(".html")
    return rel.as_posix()


def parse_page(
    src: Path,
    rel: PurePath,
    default_layout: str = "default",
    markdown_ext: Iterable[str] = DEFAULT_MARKDOWN_EXT,
) -> Page:
    """Parse a page source file.

    Args:
        src: Source root directory.
        rel: Path of the page relative to ``src``.
        default_layout: Layout used when the front matter names none.
        markdown_ext: Extensions treated as markdown.

    Returns:
        Page instance.

    Raises:
        ParseError: If the file cannot be read or its front matter is malformed.
    """
    frontmatter, body = split_front_matter(_read_source(src, rel), rel)
    permalink = frontmatter.get("permalink")
    url = _normalize_url(str(permalink)) if permalink else page_url(rel, markdown_ext)
    return Page(
        path=rel,
        url=_contained_url(url, rel),
        content=body,
        layout=_resolve_layout(frontmatter, default_layout),
        title=str(frontmatter.get("title") or titleize(rel.stem)),
        frontmatter=frontmatter,
    )


def post_categories(rel: PurePath) -> tuple[str, ...]:
    """Categories implied by the directories preceding ``_posts/``.

    Examples:
        >>> post_categories(PurePath("news/releases/_posts/2024-01-01-a.md"))
        ('news', 'releases')
    """
    parts = rel.parts[:-1]
    index = parts.index(POSTS_DIR) if POSTS_DIR in parts else len(parts)
    return tuple(part for part in parts[:index] if part)


def parse_post(
    src: Path,
    rel: PurePath,
    default_layout: str = "default",
) -> Post:
    """Parse a post source file named ``YYYY-MM-DD-slug.ext``.

    The URL is ``<categories>/YYYY/MM/DD/<slug>.html`` unless the front
    matter sets ``permalink``.

    Args:
        src: Source root directory.
        rel: Path of the post relative to ``src``.
        default_layout: Layout used when the front matter names none.

    Returns:
        Post instance.

    Raises:
        ParseError: If the file name breaks the naming convention, the file
            cannot be read or its front matter is malformed.
    """
    parsed_name = split_post_name(rel.stem)
    if parsed_name is None:
        raise ParseError(rel, "post file name must look like YYYY-MM-DD-title.ext")
    date, slug = parsed_name
    frontmatter, body = split_front_matter(_read_source(src, rel), rel)

    if frontmatter.get("date") is not None:
        date = _coerce_date(frontmatter["date"], rel)

    declared_categories = normalize_labels(frontmatter.get("categories")) + normalize_labels(
        frontmatter.get("category")
    )
    categories = normalize_labels(list(post_categories(rel) + declared_categories))
    tags = normalize_labels(
        list(normalize_labels(frontmatter.get("tags")) + normalize_labels(frontmatter.get("tag")))
    )

    permalink = frontmatter.get("permalink")
    if permalink:
        url = _normalize_url(str(permalink))
    else:
        segments = [*categories, f"{date:%Y}", f"{date:%m}", f"{date:%d}", f"{slug}.html"]
        url = "/".join(segments)

    return Post(
        path=rel,
        url=_contained_url(url, rel),
        content=body,
        layout=_resolve_layout(frontmatter, default_layout),
        title=str(frontmatter.get("title") or titleize(slug)),
        date=date,
        slug=slug,
        tags=tags,
        categories=categories,
        frontmatter=frontmatter,
    )
