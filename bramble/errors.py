"""Error types raised by Bramble.

Every error carries the piece of context needed to diagnose it: the source
path for parse and template errors, the page URL for render errors and the
object key for upload errors. All of them are fatal to the operation that
raised them; callers re-run the whole build rather than resume.
"""

from __future__ import annotations


class BrambleError(Exception):
    """Base error with context.

    Attributes:
        context: Source path, page URL or object key the error refers to.
        message: Human-readable error message.
        original_error: The original exception that was caught, if any.
    """

    def __init__(
        self,
        context: object,
        message: str,
        original_error: Exception | None = None,
    ):
        self.context = context
        self.message = message
        self.original_error = original_error
        super().__init__(f"{context}: {message}")


class ConfigError(BrambleError):
    """The configuration file is missing or cannot be parsed."""


class ParseError(BrambleError):
    """A post or page has malformed front matter or a bad file name."""


class TemplateCompileError(BrambleError):
    """A layout or include has invalid template syntax."""


class RenderError(BrambleError):
    """A layout failed while rendering a specific page."""


class FilesystemError(BrambleError):
    """Creating, reading, writing or copying a file failed."""


class UploadError(BrambleError):
    """Writing an object to the bucket failed."""
