"""Utility functions for Bramble.

This module contains small helpers shared by the classifier, the content
parser and the site builder: name handling, date extraction and file copying.

Key functions:
    slugify: Convert text to a URL slug.
    titleize: Convert a slug or filename to a human-readable title.
    split_post_name: Split a YYYY-MM-DD-slug post filename.
    append_ext: Add a default extension to a layout name.
    is_markdown: Check if a path has a markdown extension.
    remove_tree: Delete a directory tree if it exists.
    copy_file: Copy a file, creating parent directories.
"""

from __future__ import annotations

import re
import shutil
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path, PurePath

POST_NAME_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})-(.+)$")

DEFAULT_MARKDOWN_EXT = ("md", "markdown", "mkd", "mkdn")


def slugify(name: str) -> str:
    """Convert text to a lowercase, hyphen-separated slug.

    Args:
        name: Text or filename stem.

    Returns:
        URL-friendly slug, or "index" when nothing usable remains.
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", name)
    cleaned = cleaned.strip("-").lower()
    return cleaned or "index"


def titleize(name: str) -> str:
    """Convert a slug or filename stem to a human-readable title.

    Examples:
        >>> titleize("hello-world")
        'Hello World'

        >>> titleize("getting_started")
        'Getting Started'
    """
    words = re.split(r"[\s\-_]+", name)
    return " ".join(word.capitalize() for word in words if word) or "Untitled"


def split_post_name(stem: str) -> tuple[datetime, str] | None:
    """Split a post filename stem into its publish date and slug.

    Args:
        stem: Filename without extension, e.g. "2024-01-15-hello-world".

    Returns:
        (date, slug) tuple, or None when the name does not follow the
        YYYY-MM-DD-slug convention or the date is not a real calendar date.

    Examples:
        >>> split_post_name("2024-01-15-hello-world")
        (datetime.datetime(2024, 1, 15, 0, 0), 'hello-world')

        >>> split_post_name("2024-13-40-bad") is None
        True
    """
    match = POST_NAME_RE.match(stem)
    if not match:
        return None
    year, month, day, slug = match.groups()
    try:
        date = datetime(int(year), int(month), int(day))
    except ValueError:
        return None
    return date, slug


def append_ext(name: str, ext: str) -> str:
    """Append ``ext`` to ``name`` unless it already has an extension.

    Examples:
        >>> append_ext("post", ".html")
        'post.html'

        >>> append_ext("feed.xml", ".html")
        'feed.xml'
    """
    if PurePath(name).suffix:
        return name
    return f"{name}{ext}"


def is_markdown(path: PurePath, extensions: Iterable[str] = DEFAULT_MARKDOWN_EXT) -> bool:
    """Check if a path has one of the given markdown extensions.

    Args:
        path: Path to check.
        extensions: Extensions without the leading dot.

    Returns:
        True if the suffix matches (case-insensitive).
    """
    suffix = path.suffix.lower().lstrip(".")
    return bool(suffix) and suffix in {ext.lower().lstrip(".") for ext in extensions}


def normalize_labels(value: object) -> tuple[str, ...]:
    """Normalize a front-matter tag or category value to unique labels.

    Accepts a list, a single string (split on whitespace) or None. Order of
    first appearance is kept and duplicates are dropped.
    """
    if value is None:
        return ()
    if isinstance(value, str):
        items: Iterable[object] = value.split()
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        items = [value]
    labels: list[str] = []
    for item in items:
        label = str(item).strip()
        if label and label not in labels:
            labels.append(label)
    return tuple(labels)


def remove_tree(path: Path) -> None:
    """Remove a directory tree. Missing paths are not an error."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    elif path.exists() or path.is_symlink():
        path.unlink()


def copy_file(source: Path, target: Path) -> None:
    """Copy a file byte-for-byte, creating parent directories first.

    Args:
        source: File to copy.
        target: Destination file path.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
