"""Command-line interface for Bramble.

This module defines the CLI commands using the Click framework.

Commands:
- build: Generate the site from a source directory.
- deploy: Generate the site and upload it to an S3 bucket.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import click

from . import __version__
from .errors import BrambleError


@click.group()
@click.version_option(version=__version__, prog_name="bramble")
@click.option("-v", "--verbose", is_flag=True, help="Show debug output")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors")
def cli(verbose: bool, quiet: bool):
    """Bramble static site generator."""
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(level=level, format="%(message)s", force=True)


def _source_arguments(command):
    command = click.argument(
        "destination",
        required=False,
        type=click.Path(file_okay=False, path_type=Path),
    )(command)
    command = click.argument(
        "source",
        required=False,
        default=".",
        type=click.Path(exists=True, file_okay=False, path_type=Path),
    )(command)
    return command


@cli.command()
@_source_arguments
def build(source: Path, destination: Path | None):
    """Generate the site from SOURCE into DESTINATION."""
    from .site import Site

    try:
        site = Site.load(source, destination)
        result = site.generate()
    except BrambleError as exc:
        _fail("Build failed:", exc)
    click.echo(
        f"Generated {len(result.rendered)} pages and copied "
        f"{len(result.copied)} files into {result.dest}"
    )


@cli.command()
@_source_arguments
@click.option("--bucket", envvar="BRAMBLE_BUCKET", required=True, help="Target S3 bucket")
@click.option("--access-key", envvar="AWS_ACCESS_KEY_ID", required=True, help="AWS access key id")
@click.option(
    "--secret-key", envvar="AWS_SECRET_ACCESS_KEY", required=True, help="AWS secret access key"
)
@click.option("--region", default="us-east-1", show_default=True, help="Bucket region")
@click.option("--no-build", is_flag=True, help="Upload the existing destination as-is")
def deploy(
    source: Path,
    destination: Path | None,
    bucket: str,
    access_key: str,
    secret_key: str,
    region: str,
    no_build: bool,
):
    """Generate the site and upload DESTINATION to an S3 bucket."""
    from .site import Site

    try:
        site = Site.load(source, destination)
        if not no_build:
            site.generate()
        uploaded = site.deploy(access_key, secret_key, bucket, region=region)
    except BrambleError as exc:
        _fail("Deploy failed:", exc)
    click.echo(f"Uploaded {len(uploaded)} files to {bucket}")


def _fail(headline: str, exc: BrambleError) -> NoReturn:
    """Report an error on stderr and exit with status 1."""
    click.echo(click.style(headline, fg="red", bold=True), err=True)
    click.echo(click.style(f"  Where: {exc.context}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
    raise SystemExit(1) from None


def main():
    """Entry point for the CLI application."""
    cli()
