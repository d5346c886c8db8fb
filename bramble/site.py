"""Site building for Bramble.

This module holds the orchestration that turns a source tree into a rendered
site:

- Site.load: read ``_config.yml``, classify and parse every source file,
  compile the templates and build the render-time configuration.
- Site.generate: clear the destination, render every post and page through
  its layout and copy static files.
- Site.deploy: upload the destination tree to a bucket.

Every step is fail-fast. A failed generate or deploy may leave a partial
destination tree or a partial set of uploaded objects; re-run the operation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path, PurePath
from typing import Any

from markupsafe import Markup

from .classifier import SourceKind, scan
from .collections import PostCollection, build_label_index
from .config import CONFIG_FILENAME, Config, markdown_extensions
from .content import Document, Page, Post, parse_page, parse_post
from .deploy import DEFAULT_REGION, S3Uploader, guess_content_type
from .errors import FilesystemError
from .protocols import Uploader
from .renderers import RendererRegistry
from .templates import TemplateEngine
from .utils import append_ext, copy_file, remove_tree

logger = logging.getLogger(__name__)

LAYOUT_EXT = ".html"


@dataclass
class SourceListing:
    """Source files sorted into the four kinds the site handles."""

    templates: list[PurePath] = field(default_factory=list)
    posts: list[PurePath] = field(default_factory=list)
    pages: list[PurePath] = field(default_factory=list)
    static: list[PurePath] = field(default_factory=list)

    def add(self, rel: PurePath, kind: SourceKind) -> None:
        if kind is SourceKind.TEMPLATE:
            self.templates.append(rel)
        elif kind is SourceKind.POST:
            self.posts.append(rel)
        elif kind is SourceKind.PAGE:
            self.pages.append(rel)
        elif kind is SourceKind.STATIC:
            self.static.append(rel)


@dataclass
class GenerateResult:
    """Result of a generate run.

    Attributes:
        dest: Directory the site was written to.
        rendered: Output paths of rendered posts and pages, in write order.
        copied: Output paths of copied static files, in write order.
    """

    dest: Path
    rendered: list[str] = field(default_factory=list)
    copied: list[str] = field(default_factory=list)


class Site:
    """A loaded source tree, ready to be generated.

    Build with ``Site.load``; the constructor does no I/O.

    Attributes:
        src: Source root directory.
        dest: Destination root directory.
        config: Render-time configuration, including posts, time, tags
            and categories.
        posts: Parsed posts in discovery order.
        pages: Parsed pages in discovery order.
        static_files: Static file paths relative to ``src``.
        templates: Template paths relative to ``src``.
        engine: Template engine holding the compiled templates.
    """

    def __init__(
        self,
        src: Path,
        dest: Path,
        config: Config,
        posts: list[Post],
        pages: list[Page],
        static_files: list[PurePath],
        templates: list[PurePath],
        engine: TemplateEngine,
    ):
        self.src = src
        self.dest = dest
        self.config = config
        self.posts = posts
        self.pages = pages
        self.static_files = static_files
        self.templates = templates
        self.engine = engine
        self.renderers = RendererRegistry(markdown_extensions(config))

    @classmethod
    def load(
        cls,
        src: Path,
        dest: Path | None = None,
        now: datetime | None = None,
    ) -> Site:
        """Read, classify and parse a source tree.

        Args:
            src: Source root containing ``_config.yml``.
            dest: Destination root. Defaults to the config's ``destination``
                under ``src``.
            now: Build timestamp exposed as ``site.time``.

        Returns:
            A fully loaded Site.

        Raises:
            ConfigError: If the configuration is missing or malformed.
            ParseError: On the first post or page that fails to parse.
            TemplateCompileError: On the first template with invalid syntax.
            FilesystemError: If the destination would wipe out the source
                tree, or a source file cannot be read.
        """
        src = Path(src)
        config_path = src / CONFIG_FILENAME
        logger.info("Loading config: %s", config_path)
        config = Config.load(config_path)
        dest = Path(dest) if dest is not None else src / str(config["destination"])
        if dest.resolve() == src.resolve() or dest.resolve() in src.resolve().parents:
            raise FilesystemError(
                dest, "destination must not be the source directory or contain it"
            )

        markdown_ext = markdown_extensions(config)
        default_layout = str(config.get("default_layout") or "default")

        listing = SourceListing()
        for rel, kind in scan(src, exclude=[dest], markdown_ext=markdown_ext):
            listing.add(rel, kind)

        posts = [parse_post(src, rel, default_layout) for rel in listing.posts]
        pages = [parse_page(src, rel, default_layout, markdown_ext) for rel in listing.pages]

        engine = TemplateEngine(src)
        engine.compile(TemplateEngine.template_name(rel) for rel in listing.templates)

        render_config = config.merged(
            posts=PostCollection(posts),
            time=now or datetime.now(),
            tags=build_label_index(posts, "tags"),
            categories=build_label_index(posts, "categories"),
        )
        return cls(
            src=src,
            dest=dest,
            config=render_config,
            posts=posts,
            pages=pages,
            static_files=listing.static,
            templates=listing.templates,
            engine=engine,
        )

    def clear(self) -> None:
        """Remove the previously generated site, if any."""
        try:
            remove_tree(self.dest)
        except OSError as exc:
            raise FilesystemError(self.dest, f"cannot remove destination: {exc}", exc) from exc

    def prep(self) -> None:
        """Create the destination directory."""
        try:
            self.dest.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError(self.dest, f"cannot create destination: {exc}", exc) from exc

    def generate(self) -> GenerateResult:
        """Regenerate the whole site into the destination directory.

        Returns:
            GenerateResult listing what was written.

        Raises:
            RenderError: On the first layout that fails to render.
            FilesystemError: On the first file that cannot be written or copied.
        """
        self.clear()
        self.prep()
        result = GenerateResult(dest=self.dest)
        for document in [*self.posts, *self.pages]:
            self._write_document(document)
            result.rendered.append(document.url)
        for rel in self.static_files:
            self._copy_static(rel)
            result.copied.append(rel.as_posix())
        return result

    def render(self, document: Document) -> str:
        """Render a post or page through its layout.

        Args:
            document: Post or Page to render.

        Returns:
            The rendered output text.
        """
        layout = append_ext(document.layout, LAYOUT_EXT)
        renderer = self.renderers.get_renderer(document.path)
        context: dict[str, Any] = {
            "site": self.config,
            "page": document,
            "content": Markup(renderer.render(document.content)),
        }
        return self.engine.render(layout, context, url=document.url)

    def _write_document(self, document: Document) -> None:
        rendered = self.render(document)
        target = self.dest / document.url
        logger.info("Generating page: %s", document.url)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(rendered, encoding="utf-8")
        except OSError as exc:
            raise FilesystemError(document.url, f"cannot write page: {exc}", exc) from exc

    def _copy_static(self, rel: PurePath) -> None:
        logger.info("Copying file: %s", rel)
        try:
            copy_file(self.src / rel, self.dest / rel)
        except OSError as exc:
            raise FilesystemError(rel, f"cannot copy file: {exc}", exc) from exc

    def deploy(
        self,
        access_key: str,
        secret_key: str,
        bucket: str,
        region: str = DEFAULT_REGION,
        uploader: Uploader | None = None,
    ) -> list[str]:
        """Upload every file under the destination directory.

        Args:
            access_key: AWS access key id.
            secret_key: AWS secret access key.
            bucket: Target bucket name.
            region: Bucket region.
            uploader: Optional uploader to use instead of S3Uploader.

        Returns:
            Uploaded object keys, in upload order.

        Raises:
            UploadError: On the first object that fails to upload.
            FilesystemError: If the destination has not been generated or
                a file cannot be read.
        """
        if not self.dest.is_dir():
            raise FilesystemError(self.dest, "destination does not exist; build the site first")
        uploader = uploader or S3Uploader(access_key, secret_key, bucket, region=region)
        uploaded: list[str] = []
        for path in sorted(p for p in self.dest.rglob("*") if p.is_file()):
            key = path.relative_to(self.dest).as_posix()
            logger.info("Uploading: %s", key)
            try:
                body = path.read_bytes()
            except OSError as exc:
                raise FilesystemError(key, f"cannot read file: {exc}", exc) from exc
            uploader.put(key, body, guess_content_type(key))
            uploaded.append(key)
        return uploaded
