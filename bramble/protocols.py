"""Protocol definitions for Bramble.

These protocols describe the seams between the site builder and the parts it
drives: the documents it renders, the content renderers it picks per file and
the uploader it publishes through. Tests substitute their own
implementations at each seam.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Sequence
from pathlib import PurePath
from typing import Protocol, runtime_checkable


@runtime_checkable
class Renderable(Protocol):
    """Capability set shared by pages and posts.

    Pages expose empty ``tags`` and ``categories``.
    """

    @property
    @abstractmethod
    def url(self) -> str:
        """Destination-relative output path."""
        ...

    @property
    @abstractmethod
    def content(self) -> str:
        """Raw body text following the front matter."""
        ...

    @property
    @abstractmethod
    def layout(self) -> str:
        """Name of the layout to render into."""
        ...

    @property
    @abstractmethod
    def tags(self) -> Sequence[str]:
        ...

    @property
    @abstractmethod
    def categories(self) -> Sequence[str]:
        ...


@runtime_checkable
class ContentRenderer(Protocol):
    """Protocol for turning a document body into HTML."""

    @abstractmethod
    def can_render(self, path: PurePath) -> bool:
        """Check if this renderer handles the given source file."""
        ...

    @abstractmethod
    def render(self, content: str) -> str:
        """Render body text to HTML."""
        ...


@runtime_checkable
class Uploader(Protocol):
    """Protocol for writing one object to a remote store."""

    @abstractmethod
    def put(self, key: str, body: bytes, content_type: str) -> None:
        """Store ``body`` under ``key`` with public-read visibility.

        Raises:
            UploadError: If the write fails.
        """
        ...
