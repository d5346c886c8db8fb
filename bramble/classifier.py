"""Source tree classification for Bramble.

Every file under the source root is assigned exactly one kind: ignored,
template, post, page or static. Classification is a pure function of the
relative path (plus whether the file opens with a front-matter block), so it
can be tested without touching the filesystem. ``scan`` walks a real tree and
pairs each file with its kind.

Rules, in priority order:

1. Hidden or temporary files are ignored.
2. Files under ``_layouts/`` or ``_includes/`` are templates.
3. Files inside a ``_posts/`` directory are posts.
4. Any other underscore-prefixed path is reserved and ignored.
5. Markdown files, and other files that begin with front matter, are pages.
6. Everything else is copied as a static file.
"""

from __future__ import annotations

import enum
import os
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePath

from .errors import FilesystemError
from .utils import DEFAULT_MARKDOWN_EXT, is_markdown

TEMPLATE_DIRS = ("_layouts", "_includes")
POSTS_DIR = "_posts"
FRONT_MATTER_DELIMITER = "---"


class SourceKind(enum.Enum):
    IGNORED = "ignored"
    TEMPLATE = "template"
    POST = "post"
    PAGE = "page"
    STATIC = "static"


def is_hidden_or_temp(rel: PurePath) -> bool:
    """Check for dotfiles, files in dot-directories and editor backups.

    Args:
        rel: Path relative to the source root.

    Returns:
        True if any component starts with ".", or the file name ends
        with "~" or starts with "#".
    """
    if any(part.startswith(".") for part in rel.parts):
        return True
    return rel.name.endswith("~") or rel.name.startswith("#")


def is_template(rel: PurePath) -> bool:
    return len(rel.parts) > 1 and rel.parts[0] in TEMPLATE_DIRS


def is_post(rel: PurePath) -> bool:
    return POSTS_DIR in rel.parts[:-1]


def is_reserved(rel: PurePath) -> bool:
    return any(part.startswith("_") for part in rel.parts)


def classify(
    rel: PurePath,
    has_front_matter: bool = False,
    markdown_ext: Iterable[str] = DEFAULT_MARKDOWN_EXT,
) -> SourceKind:
    """Assign a source file to exactly one kind.

    Args:
        rel: Path relative to the source root.
        has_front_matter: Whether the file begins with a front-matter block.
        markdown_ext: Extensions treated as markdown pages.

    Returns:
        The SourceKind for the file.
    """
    if is_hidden_or_temp(rel):
        return SourceKind.IGNORED
    if is_template(rel):
        return SourceKind.TEMPLATE
    if is_post(rel):
        return SourceKind.POST
    if is_reserved(rel):
        return SourceKind.IGNORED
    if is_markdown(rel, markdown_ext) or has_front_matter:
        return SourceKind.PAGE
    return SourceKind.STATIC


def has_front_matter(path: Path) -> bool:
    """Check whether a file's first line is the front-matter delimiter.

    Binary files and unreadable encodings count as having no front matter.
    """
    with open(path, "rb") as f:
        first = f.readline(64)
    try:
        line = first.decode("utf-8-sig")
    except UnicodeDecodeError:
        return False
    return line.rstrip() == FRONT_MATTER_DELIMITER


def walk_files(root: Path, exclude: Iterable[Path] = ()) -> Iterator[Path]:
    """Yield every file under ``root`` in sorted, depth-first order.

    Args:
        root: Directory to walk.
        exclude: Directories to prune, e.g. a destination inside the source.
    """
    excluded = {p.resolve() for p in exclude}
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        dirnames[:] = sorted(
            d for d in dirnames if (current / d).resolve() not in excluded
        )
        for name in sorted(filenames):
            yield current / name


def scan(
    root: Path,
    exclude: Iterable[Path] = (),
    markdown_ext: Iterable[str] = DEFAULT_MARKDOWN_EXT,
) -> Iterator[tuple[PurePath, SourceKind]]:
    """Walk the source tree and classify each file.

    Args:
        root: Source root directory.
        exclude: Directories to skip entirely.
        markdown_ext: Extensions treated as markdown pages.

    Yields:
        (relative path, kind) pairs in discovery order.

    Raises:
        FilesystemError: If a candidate page cannot be opened.
    """
    markdown_ext = tuple(markdown_ext)
    for path in walk_files(root, exclude):
        rel = PurePath(path.relative_to(root).as_posix())
        front_matter = False
        # Only candidate pages need the first line read.
        if not (is_hidden_or_temp(rel) or is_reserved(rel) or is_markdown(rel, markdown_ext)):
            try:
                front_matter = has_front_matter(path)
            except OSError as exc:
                raise FilesystemError(rel, f"cannot read file: {exc}", exc) from exc
        yield rel, classify(rel, front_matter, markdown_ext)
