"""Bramble static site generator.

Bramble renders a Jekyll-style source tree (``_config.yml``, ``_layouts/``,
``_includes/``, ``_posts/``, pages and static files) into a static site with
Markdown and Jinja2 templates, and can publish the result to an S3 bucket.

The main entry point is the CLI module; ``bramble.site.Site`` is the
programmatic one.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
